from dataclasses import dataclass, field
from typing import Tuple

from rotorsim.machine import Machine


@dataclass(frozen=True, slots=True)
class MachineSnapshot:
    """Immutable view of the machine after one keypress."""

    state_version: int
    line_number: int
    input_symbol: str
    output_symbol: str

    rotor_names: Tuple[str, ...] = field(default_factory=tuple)
    rotor_kinds: Tuple[str, ...] = field(default_factory=tuple)
    windows: Tuple[str, ...] = field(default_factory=tuple)
    stepped: Tuple[bool, ...] = field(default_factory=tuple)
    at_notch: Tuple[bool, ...] = field(default_factory=tuple)
    output_line: str = ""

    @classmethod
    def capture(
        cls,
        machine: Machine,
        *,
        state_version: int,
        line_number: int,
        input_symbol: str = "",
        output_symbol: str = "",
        output_line: str = "",
    ) -> "MachineSnapshot":
        rotors = machine.rotors
        return cls(
            state_version=state_version,
            line_number=line_number,
            input_symbol=input_symbol,
            output_symbol=output_symbol,
            rotor_names=tuple(rotor.name for rotor in rotors),
            rotor_kinds=tuple(str(rotor.kind) for rotor in rotors),
            windows=tuple(rotor.setting for rotor in rotors),
            stepped=machine.last_stepped,
            at_notch=tuple(rotor.at_notch() for rotor in rotors),
            output_line=output_line,
        )
