from __future__ import annotations

from enum import Enum

import structlog

from rotorsim.errors import ConfigurationError, RotorCapabilityError
from rotorsim.models.alphabet import Alphabet
from rotorsim.models.permutation import Permutation

log = structlog.get_logger()


class RotorKind(str, Enum):
    MOVING = "M"
    FIXED = "N"
    REFLECTOR = "R"

    def __str__(self):
        return self.name.lower()


class Rotor:
    """A rotatable substitution wheel wrapping a Permutation.

    Subclasses only change the capability queries (rotates, reflecting,
    supports_backward, notches). The machine never inspects the concrete type.
    """

    kind: RotorKind

    def __init__(self, name: str, permutation: Permutation):
        self.__name = name
        self.__permutation = permutation
        self._position = 0

    @property
    def name(self) -> str:
        return self.__name

    @property
    def permutation(self) -> Permutation:
        return self.__permutation

    @property
    def alphabet(self) -> Alphabet:
        return self.__permutation.alphabet

    @property
    def size(self) -> int:
        return self.__permutation.size()

    @property
    def position(self) -> int:
        return self._position

    @property
    def setting(self) -> str:
        """The symbol currently showing in the rotor window."""
        return self.alphabet.to_char(self._position)

    # ---- capabilities ----
    @property
    def rotates(self) -> bool:
        return False

    @property
    def reflecting(self) -> bool:
        return False

    @property
    def supports_backward(self) -> bool:
        return True

    @property
    def notches(self) -> frozenset[str]:
        return frozenset()

    # ---- state ----
    def set(self, posn: int | str) -> None:
        """Set the position from an index or an alphabet symbol."""
        if isinstance(posn, str):
            posn = self.alphabet.to_int(posn)
        self._position = self.__permutation.wrap(posn)

    def at_notch(self) -> bool:
        return self.setting in self.notches

    def advance(self) -> None:
        raise RotorCapabilityError(f"Rotor {self.name} does not rotate")

    # ---- signal path ----
    def convert_forward(self, p: int) -> int:
        size = self.size
        mapped = self.__permutation.permute((p + self._position) % size)
        return (mapped - self._position) % size

    def convert_backward(self, e: int) -> int:
        size = self.size
        mapped = self.__permutation.invert((e + self._position) % size)
        return (mapped - self._position) % size

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.name} pos={self._position}>"


class MovingRotor(Rotor):
    """A rotor that advances under a pawl and carries one or more notches."""

    kind = RotorKind.MOVING

    def __init__(self, name: str, permutation: Permutation, notches: str):
        super().__init__(name, permutation)
        if not notches:
            raise ConfigurationError(f"Moving rotor {name} needs at least one notch")
        bad = [ch for ch in notches if ch not in permutation.alphabet]
        if bad:
            raise ConfigurationError(f"Notch {bad[0]!r} of rotor {name} is not in the alphabet")
        self.__notches = frozenset(notches)

    @property
    def rotates(self) -> bool:
        return True

    @property
    def notches(self) -> frozenset[str]:
        return self.__notches

    def advance(self) -> None:
        self._position = (self._position + 1) % self.size


class FixedRotor(Rotor):
    """A rotor whose position can be set but that never advances."""

    kind = RotorKind.FIXED


class Reflector(FixedRotor):
    """The turn-around wheel in slot 0. Always at position 0, forward pass only."""

    kind = RotorKind.REFLECTOR

    def __init__(self, name: str, permutation: Permutation):
        super().__init__(name, permutation)
        if not permutation.derangement():
            log.warning("reflector is not a derangement", rotor=name, cycles=permutation.cycles)

    @property
    def reflecting(self) -> bool:
        return True

    @property
    def supports_backward(self) -> bool:
        return False

    def set(self, posn: int | str) -> None:
        index = self.alphabet.to_int(posn) if isinstance(posn, str) else posn
        if index != 0:
            raise ConfigurationError(f"Reflector {self.name} has only one position")
        self._position = 0

    def convert_backward(self, e: int) -> int:
        raise RotorCapabilityError(f"Reflector {self.name} is only traversed forward")
