"""Resolve the Foundry Local executable.

The program is looked up at platform-specific install locations first and
then on PATH. When neither resolves, the bare program name is returned and
spawning it fails with ProcessSpawnError downstream.
"""

import os
import shutil
from collections.abc import Callable, Mapping
from pathlib import Path

PROGRAM_NAME = "foundry"


def well_known_install_paths(
    platform: str,
    environ: Mapping[str, str],
    executable: Path | None = None,
) -> list[Path]:
    """Return candidate install locations for the current platform.

    Args:
        platform: Value of sys.platform ("win32", "darwin", "linux", ...)
        environ: Environment mapping used to expand per-user locations
        executable: Explicit override from configuration, always tried first

    Returns:
        Candidate paths in lookup order (not filtered for existence)
    """
    candidates: list[Path] = []
    if executable is not None:
        candidates.append(executable)

    if platform == "win32":
        candidates.append(Path("C:\\Program Files\\FoundryLocal\\foundry.exe"))
        candidates.append(Path("C:\\Program Files (x86)\\FoundryLocal\\foundry.exe"))
        local_app_data = environ.get("LOCALAPPDATA")
        if local_app_data:
            candidates.append(Path(local_app_data) / "Microsoft" / "WindowsApps" / "foundry.exe")
    elif platform == "darwin":
        candidates.append(Path("/opt/homebrew/bin/foundry"))
        candidates.append(Path("/usr/local/bin/foundry"))

    return candidates


def find_installed_path(candidates: list[Path]) -> Path | None:
    """Return the first candidate that exists on disk."""
    for candidate in candidates:
        if candidate.exists():
            return candidate
    return None


def locate_program(
    name: str,
    candidates: list[Path],
    which: Callable[[str], str | None] = shutil.which,
) -> str:
    """Resolve the program to invoke.

    Args:
        name: Program name to resolve on PATH
        candidates: Well-known install locations, checked first
        which: PATH lookup function

    Returns:
        Path string of the program, or the bare name when nothing resolves
    """
    installed = find_installed_path(candidates)
    if installed is not None:
        return str(installed)

    on_path = which(name)
    if on_path is not None:
        return on_path

    return name


def default_program(platform: str, executable: Path | None = None) -> tuple[str, list[Path]]:
    """Resolve the foundry program and its fallback paths for this machine."""
    candidates = well_known_install_paths(platform, os.environ, executable)
    return locate_program(PROGRAM_NAME, candidates), candidates
