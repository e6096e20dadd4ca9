"""Extraction of structured fields from Foundry Local console output.

The foundry CLI prints colored, column-aligned text meant for humans and
offers no machine-readable format. Every rule here is a best-effort
heuristic with an explicit fallback: a field is recovered whenever the
tool prints it in a recognizable position, and ParseNotFoundError is
raised otherwise. Callers only see field-level functions, so format drift
is absorbed in this module alone.
"""

import re
from urllib.parse import urlsplit

from foundryctl.core.errors import ParseNotFoundError
from foundryctl.core.types import API_VERSION_SEGMENT, ModelDescriptor, ModelStatus

ANSI_ESCAPE = re.compile(r"\x1b\[[0-9;]*[mK]")

URL_PATTERN = re.compile(r"https?://[^\s/]+(?:/\S*)?")
TRAILING_PUNCTUATION = ".,;:!?)]}>'\""

# name:revision, not preceded by a scheme/host character and not followed by a path
MODEL_ID_PATTERN = re.compile(r"(?<![\w./:@-])([A-Za-z][\w.\-]*:\d+)(?![\w/])")

STATUS_GLYPHS: dict[str, ModelStatus] = {
    "🟢": ModelStatus.READY,
    "🟡": ModelStatus.LOADING,
    "🔴": ModelStatus.STOPPED,
    "⚪": ModelStatus.UNKNOWN,
}

NO_MODELS_LOADED = "no models are currently loaded"
NOT_RUNNING_PHRASES = ("not running", "not responding")
RUNNING_ON_PHRASE = "running on"
IN_PROGRESS_PHRASE = "in progress"
SERVICE_WORD = "service"

# Indented rows starting with one of these continue the previous model's row
DEVICE_COLUMN_VALUES = frozenset({"CPU", "GPU", "NPU"})

HEADER_KEYWORDS = (
    "NAME",
    "Alias",
    "Model ID",
    "Device",
    "Task",
    "File Size",
    "License",
    "Cache directory",
    "Models cached",
)
DIVIDER_CHARS = frozenset("-=─━_+|* \t")


def strip_ansi(text: str) -> str:
    """Remove terminal color/erase sequences (ESC [ params m|K)."""
    return ANSI_ESCAPE.sub("", text)


def _strip_leading_symbols(text: str) -> str:
    """Drop everything before the first alphanumeric character."""
    for index, char in enumerate(text):
        if char.isalnum():
            return text[index:]
    return ""


def _contains(text: str, phrase: str) -> bool:
    return phrase in strip_ansi(text).lower()


def reports_not_running(text: str) -> bool:
    """True if the text says the service is not running or not responding."""
    return any(_contains(text, phrase) for phrase in NOT_RUNNING_PHRASES)


def reports_running_on(text: str) -> bool:
    """True if the text says the service is running on some address."""
    return _contains(text, RUNNING_ON_PHRASE)


def reports_in_progress(text: str) -> bool:
    """True if the service reports startup work still in progress."""
    return _contains(text, IN_PROGRESS_PHRASE)


def has_no_models_loaded(text: str) -> bool:
    """True if the listing says no models are loaded.

    Checked before extract_model_id() so "nothing loaded" is told apart
    from "a model is loaded but its id could not be read".
    """
    return _contains(text, NO_MODELS_LOADED)


def extract_endpoint_url(text: str) -> str:
    """Find the service URL and normalize it to the inference API base.

    The status command prints an operational sub-path such as
    http://127.0.0.1:49798/openai/status. Only scheme and host:port are
    kept and the API version segment is appended.

    Raises:
        ParseNotFoundError: If no URL-shaped substring exists
    """
    for line in strip_ansi(text).splitlines():
        match = URL_PATTERN.search(line)
        if match is None:
            continue

        raw = match.group(0).rstrip(TRAILING_PUNCTUATION)
        try:
            parts = urlsplit(raw)
        except ValueError:
            # unbalanced IPv6 bracket
            continue
        if not parts.netloc:
            continue

        return f"{parts.scheme}://{parts.netloc}{API_VERSION_SEGMENT}"

    raise ParseNotFoundError("endpoint URL")


def _is_status_banner(line: str) -> bool:
    if URL_PATTERN.search(line) or reports_not_running(line) or reports_running_on(line):
        return True
    return _contains(line, SERVICE_WORD)


def _parse_glyph_line(line: str) -> ModelDescriptor | None:
    stripped = line.strip()
    # Service banners share the glyphs with model rows
    if _is_status_banner(stripped):
        return None

    for glyph, status in STATUS_GLYPHS.items():
        if not stripped.startswith(glyph):
            continue

        tokens = _strip_leading_symbols(stripped[len(glyph) :]).split()
        if not tokens:
            return None
        return ModelDescriptor(alias=tokens[0], resolved_id=tokens[-1], status_indicator=status)
    return None


def parse_loaded_models(text: str) -> list[ModelDescriptor]:
    """Parse every status-glyph row of the loaded-models listing.

    Rows look like "🟢  phi-4-mini   Phi-4-mini-instruct-openvino-gpu:1":
    glyph, alias, then the resolved model id as the last column.
    """
    descriptors: list[ModelDescriptor] = []
    for line in strip_ansi(text).splitlines():
        descriptor = _parse_glyph_line(line)
        if descriptor is not None:
            descriptors.append(descriptor)
    return descriptors


def extract_model_id(text: str) -> str:
    """Recover the resolved id of the loaded model.

    Primary rule: last column of the first glyph-prefixed row.
    Fallback: first name:revision token anywhere in the text.

    Raises:
        ParseNotFoundError: If neither rule matches
    """
    sanitized = strip_ansi(text)

    descriptors = parse_loaded_models(sanitized)
    if descriptors:
        return descriptors[0].resolved_id

    match = MODEL_ID_PATTERN.search(sanitized)
    if match is not None:
        return match.group(1)

    raise ParseNotFoundError("model id")


def _is_header_or_divider(line: str) -> bool:
    stripped = line.strip()
    if set(stripped) <= DIVIDER_CHARS:
        return True
    return any(keyword in stripped for keyword in HEADER_KEYWORDS)


def parse_model_list(text: str) -> list[str]:
    """Extract model names from a catalog or cache listing.

    Blank, header and divider lines are dropped and the first token of each
    remaining row is taken, ignoring any leading glyph. An indented row whose
    first token is a device (CPU, GPU, NPU) continues the alias above it
    and is skipped. Names are de-duplicated in order.
    """
    names: list[str] = []
    for line in strip_ansi(text).splitlines():
        if not line.strip() or _is_header_or_divider(line):
            continue

        tokens = _strip_leading_symbols(line.strip()).split()
        if not tokens:
            continue

        if line[:1].isspace() and tokens[0].upper() in DEVICE_COLUMN_VALUES:
            continue

        if tokens[0] not in names:
            names.append(tokens[0])
    return names


def parse_version(text: str) -> str:
    """Return the first non-blank line of version output.

    Raises:
        ParseNotFoundError: If the output is blank
    """
    for line in strip_ansi(text).splitlines():
        stripped = line.strip()
        if stripped:
            return stripped
    raise ParseNotFoundError("version")
