"""Rich rendering of the service snapshot."""

from rich.panel import Panel
from rich.text import Text

from foundryctl.core.types import ServiceSnapshot


def _flag(label: str, value: bool) -> Text:
    mark = Text("yes", style="green") if value else Text("no", style="red")
    return Text(f"{label}: ").append(mark)


def render_status(snapshot: ServiceSnapshot, model: str) -> Panel:
    """Format a snapshot as a panel.

    Example:
        >>> console.print(render_status(snapshot, "phi-4-mini"))
    """
    lines: list[Text] = [
        _flag("Installed", snapshot.installed),
        _flag("Running", snapshot.running),
    ]

    if snapshot.running:
        lines.append(Text(f"Endpoint: {snapshot.endpoint_url or 'unknown'}"))
        lines.append(Text(f"Loaded model: {snapshot.model_id or 'none'}"))

    lines.append(_flag(f"Model '{model}' cached", snapshot.model_cached))

    healthy = snapshot.running and snapshot.model_id is not None
    return Panel(
        Text("\n").join(lines),
        title="Foundry Local",
        border_style="green" if healthy else "yellow",
        padding=(0, 1),
    )
