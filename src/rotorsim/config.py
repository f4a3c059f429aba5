"""Reading the machine description and settings lines.

A configuration file looks like::

    ABCDEFGHIJKLMNOPQRSTUVWXYZ
    5 3
    I     MQ   (AELTPHQXRU) (BKNW) (CMOY) (DFG) (IV) (JZ) (S)
    Beta  N    (ALBEVFCYODJWUGNMQTZSKPR) (HIX)
    B     R    (AE) (BN) (CK) (DQ) (FU) (GY) (HW) (IJ) (LO) (MP)
               (RX) (SZ) (TV)

and a settings line looks like ``* B Beta III IV I AXLE (HQ) (EX)``.
"""
from __future__ import annotations

from collections import deque
from typing import List

import structlog
from pydantic import BaseModel, ConfigDict, ValidationError, field_validator, model_validator

from rotorsim.errors import ConfigurationError
from rotorsim.machine import Machine
from rotorsim.models.alphabet import Alphabet
from rotorsim.models.permutation import Permutation, parse_cycles
from rotorsim.models.rotor import FixedRotor, MovingRotor, Reflector, Rotor, RotorKind

log = structlog.get_logger()

RESERVED_SYMBOLS = "()*"


class RotorSpec(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    kind: RotorKind
    notches: str = ""
    cycles: List[str]

    @model_validator(mode="after")
    def check_notches(self) -> "RotorSpec":
        if self.kind is RotorKind.MOVING and not self.notches:
            raise ValueError(f"moving rotor {self.name} has no notches")
        if self.kind is not RotorKind.MOVING and self.notches:
            raise ValueError(f"only moving rotors have notches ({self.name})")
        return self


class MachineConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    alphabet: str
    num_rotors: int
    pawls: int
    rotors: List[RotorSpec]

    @field_validator("alphabet")
    @classmethod
    def check_alphabet(cls, value: str) -> str:
        if not value:
            raise ValueError("alphabet is empty")
        bad = [ch for ch in value if ch in RESERVED_SYMBOLS or ch.isspace()]
        if bad:
            raise ValueError(f"alphabet may not contain {bad[0]!r}")
        return value

    @model_validator(mode="after")
    def check_rotors(self) -> "MachineConfig":
        if self.num_rotors <= 1:
            raise ValueError(f"need more than one rotor slot, got {self.num_rotors}")
        if not 0 <= self.pawls < self.num_rotors:
            raise ValueError(f"pawl count must be in 0-{self.num_rotors - 1}, got {self.pawls}")
        names = [spec.name for spec in self.rotors]
        dupes = sorted({name for name in names if names.count(name) > 1})
        if dupes:
            raise ValueError(f"rotor defined more than once: {', '.join(dupes)}")
        return self


class SettingsLine(BaseModel):
    model_config = ConfigDict(frozen=True)

    rotors: List[str]
    setting: str
    plugboard: List[str] = []


def _validation_message(exc: ValidationError) -> str:
    first = exc.errors()[0]
    return first["msg"].removeprefix("Value error, ")


def _parse_count(token: str, what: str) -> int:
    try:
        return int(token)
    except ValueError:
        raise ConfigurationError(f"Expected an integer {what}, got {token!r}") from None


def _parse_rotor(tokens: deque[str]) -> dict:
    name = tokens.popleft()
    if not tokens:
        raise ConfigurationError("configuration file truncated")
    type_token = tokens.popleft()

    try:
        kind = RotorKind(type_token[0])
    except ValueError:
        raise ConfigurationError(f"Unknown type {type_token!r} for rotor {name}") from None

    cycle_tokens = []
    while tokens and tokens[0].startswith("("):
        cycle_tokens.append(tokens.popleft())
    if not cycle_tokens:
        raise ConfigurationError(f"bad rotor description for {name}")

    return {
        "name": name,
        "kind": kind,
        "notches": type_token[1:],
        "cycles": parse_cycles(" ".join(cycle_tokens)),
    }


def parse_config(text: str) -> MachineConfig:
    """Parse the text of a configuration file."""
    lines = text.splitlines()
    if not lines or not lines[0].strip():
        raise ConfigurationError("configuration file truncated")

    alphabet_tokens = lines[0].split()
    if len(alphabet_tokens) != 1:
        raise ConfigurationError("Alphabet must be a single token on the first line")

    tokens = deque(" ".join(lines[1:]).split())
    if len(tokens) < 2:
        raise ConfigurationError("configuration file truncated")
    num_rotors = _parse_count(tokens.popleft(), "rotor count")
    pawls = _parse_count(tokens.popleft(), "pawl count")

    rotors = []
    while tokens:
        rotors.append(_parse_rotor(tokens))

    try:
        config = MachineConfig(
            alphabet=alphabet_tokens[0],
            num_rotors=num_rotors,
            pawls=pawls,
            rotors=rotors,
        )
    except ValidationError as e:
        raise ConfigurationError(_validation_message(e)) from e

    log.debug("config parsed", alphabet=config.alphabet, rotors=[spec.name for spec in config.rotors])
    return config


def build_rotor(spec: RotorSpec, alphabet: Alphabet) -> Rotor:
    permutation = Permutation(spec.cycles, alphabet)
    match spec.kind:
        case RotorKind.MOVING:
            return MovingRotor(spec.name, permutation, spec.notches)
        case RotorKind.FIXED:
            return FixedRotor(spec.name, permutation)
        case RotorKind.REFLECTOR:
            return Reflector(spec.name, permutation)


def build_catalog(config: MachineConfig, alphabet: Alphabet | None = None) -> list[Rotor]:
    alphabet = alphabet or Alphabet(config.alphabet)
    return [build_rotor(spec, alphabet) for spec in config.rotors]


def build_machine(config: MachineConfig) -> Machine:
    alphabet = Alphabet(config.alphabet)
    return Machine(alphabet, config.num_rotors, config.pawls, build_catalog(config, alphabet))


def parse_settings(line: str, num_rotors: int) -> SettingsLine:
    """Parse ``* <rotor names...> <setting> [<plugboard cycles>]``."""
    tokens = line.split()
    if not tokens or tokens[0] != "*":
        raise ConfigurationError(f"Settings line must start with '*': {line!r}")
    if len(tokens) < num_rotors + 2:
        raise ConfigurationError(f"Settings line needs {num_rotors} rotors and a setting: {line!r}")

    return SettingsLine(
        rotors=tokens[1:num_rotors + 1],
        setting=tokens[num_rotors + 1],
        plugboard=parse_cycles(" ".join(tokens[num_rotors + 2:])),
    )


def apply_settings(machine: Machine, line: str) -> SettingsLine:
    """Re-populate MACHINE from a settings line."""
    settings = parse_settings(line, machine.num_rotors)
    machine.insert_rotors(settings.rotors)
    machine.set_rotors(settings.setting)
    machine.set_plugboard(Permutation(settings.plugboard, machine.alphabet))
    log.debug("settings applied", rotors=settings.rotors, setting=settings.setting, plugboard=settings.plugboard)
    return settings
