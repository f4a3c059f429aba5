from typing import Optional
from rich.panel import Panel
from rich.table import Table
from rich.live import Live

from rotorsim.state_queue import SnapshotQueue
from rotorsim.state_snapshot import MachineSnapshot


COLORS = {
    "stepped": "bold yellow on black",
    "notch": "bright_red",
    "idle": "dim",
    "reflector": "cyan",
    "symbol": "spring_green2",
}


def window_to_string(window: str, stepped: bool, at_notch: bool) -> str:
    """Color a rotor window by what happened to it on the last keypress."""
    style = COLORS["stepped"] if stepped else COLORS["idle"]
    text = f"[{style}]{window}[/{style}]"
    if at_notch:
        text += f" [{COLORS['notch']}]notch[/{COLORS['notch']}]"
    return text


def render(state: Optional[MachineSnapshot]):
    """Render one machine snapshot as a table, one row per slot."""
    if state is None:
        return Panel("Waiting for first keypress…", title="Rotor Machine", border_style="dim")

    if not (len(state.rotor_names) == len(state.windows) == len(state.stepped) == len(state.at_notch)):
        raise ValueError("Rotor names, windows, stepped and notch flags must have one entry per slot")

    symbol = COLORS["symbol"]
    ui_table = Table(
        title=(
            f"Line {state.line_number}  |  "
            f"[{symbol}]{state.input_symbol}[/{symbol}] → [{symbol}]{state.output_symbol}[/{symbol}]  |  "
            f"v{state.state_version}"
        ),
        caption=state.output_line,
    )
    ui_table.add_column("Slot", justify="right")
    ui_table.add_column("Rotor")
    ui_table.add_column("Kind")
    ui_table.add_column("Window")

    for slot, name in enumerate(state.rotor_names):
        kind = state.rotor_kinds[slot] if slot < len(state.rotor_kinds) else ""
        if slot == 0:
            name = f"[{COLORS['reflector']}]{name}[/{COLORS['reflector']}]"
        window = window_to_string(state.windows[slot], state.stepped[slot], state.at_notch[slot])
        ui_table.add_row(str(slot), name, kind, window)

    return ui_table


def ui_loop(state_queue: SnapshotQueue[MachineSnapshot], refresh_per_second: int = 30) -> None:
    """Redraw the latest snapshot until the producer closes the queue."""
    with Live(render(None), refresh_per_second=refresh_per_second, screen=False) as live:
        for state in state_queue:
            live.update(render(state))
