from typing import Callable, Iterable, Iterator, Optional

import structlog

from rotorsim.config import apply_settings
from rotorsim.errors import AlphabetError, ConfigurationError
from rotorsim.machine import Machine
from rotorsim.state_snapshot import MachineSnapshot

log = structlog.get_logger()

SETTINGS_MARKER = "*"
GROUP_SIZE = 5

SnapshotFn = Callable[[MachineSnapshot], None]


def format_groups(msg: str, size: int = GROUP_SIZE) -> str:
    """Split MSG into blocks of SIZE symbols separated by single spaces."""
    if size < 1:
        raise ValueError(f"Group size must be positive, got {size}")
    return " ".join(msg[i:i + size] for i in range(0, len(msg), size))


def process_messages(
    machine: Machine,
    lines: Iterable[str],
    *,
    group_size: int = GROUP_SIZE,
    on_convert: Optional[SnapshotFn] = None,
) -> Iterator[str]:
    """Run a message stream through MACHINE, yielding one output line per message line.

    Lines containing '*' reconfigure the machine and produce no output, blank
    lines produce a blank line, anything else is converted symbol by symbol.
    """
    configured = False
    state_version = 0

    for line_number, raw in enumerate(lines, start=1):
        line = raw.rstrip("\r\n")

        if SETTINGS_MARKER in line:
            machine.clear_rotors()
            apply_settings(machine, line)
            configured = True
            log.info("machine configured", line=line_number, setting=machine.rotor_setting())
            continue

        if not line.strip():
            yield ""
            continue

        if not configured:
            raise ConfigurationError(f"no settings line before message on line {line_number}")

        if on_convert is None:
            yield format_groups(machine.convert_text(line), group_size)
            continue

        symbols = "".join(line.split())
        bad = [ch for ch in symbols if ch not in machine.alphabet]
        if bad:
            raise AlphabetError(f"Character {bad[0]!r} not in the alphabet")

        converted = []
        for ch in symbols:
            out = machine.convert_text(ch)
            converted.append(out)
            state_version += 1
            on_convert(MachineSnapshot.capture(
                machine,
                state_version=state_version,
                line_number=line_number,
                input_symbol=ch,
                output_symbol=out,
                output_line="".join(converted),
            ))
        yield format_groups("".join(converted), group_size)
