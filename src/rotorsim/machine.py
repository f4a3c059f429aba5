from __future__ import annotations

from typing import Iterable, Sequence, overload

import structlog

from rotorsim.errors import AlphabetError, ConfigurationError
from rotorsim.models.alphabet import Alphabet
from rotorsim.models.permutation import Permutation
from rotorsim.models.rotor import Rotor

log = structlog.get_logger()


class Machine:
    """A rotor machine: a reflector, a stack of rotors and a plugboard.

    Slot 0 holds the reflector, the rightmost `pawls` slots hold the rotors that
    can step. Rotors are references into the catalog passed in, not copies, so
    a rotor's position is shared by every machine using the same catalog.
    """

    def __init__(self, alphabet: Alphabet, num_rotors: int, pawls: int, all_rotors: Iterable[Rotor]):
        if num_rotors <= 1:
            raise ConfigurationError(f"A machine needs more than one rotor slot, got {num_rotors}")
        if not 0 <= pawls < num_rotors:
            raise ConfigurationError(f"Pawl count must be in 0-{num_rotors - 1}, got {pawls}")

        self.__alphabet = alphabet
        self.__num_rotors = num_rotors
        self.__pawls = pawls

        self.__catalog: dict[str, Rotor] = {}
        for rotor in all_rotors:
            if rotor.name in self.__catalog:
                raise ConfigurationError(f"Rotor {rotor.name} is defined more than once")
            if rotor.alphabet != alphabet:
                raise ConfigurationError(f"Rotor {rotor.name} uses a different alphabet")
            self.__catalog[rotor.name] = rotor

        self.__slots: list[Rotor] = []
        self.__plugboard = Permutation([], alphabet)
        self.__last_stepped: tuple[bool, ...] = ()

    @property
    def alphabet(self) -> Alphabet:
        return self.__alphabet

    @property
    def num_rotors(self) -> int:
        return self.__num_rotors

    @property
    def num_pawls(self) -> int:
        return self.__pawls

    @property
    def catalog(self) -> dict[str, Rotor]:
        return dict(self.__catalog)

    @property
    def rotors(self) -> tuple[Rotor, ...]:
        return tuple(self.__slots)

    @property
    def plugboard(self) -> Permutation:
        return self.__plugboard

    @property
    def last_stepped(self) -> tuple[bool, ...]:
        """Which slots advanced on the most recent keypress."""
        return self.__last_stepped

    # ---- configuration ----
    def clear_rotors(self) -> None:
        self.__slots = []
        self.__last_stepped = ()

    def insert_rotors(self, names: Sequence[str]) -> None:
        """Fill the slots, left to right, with the catalog rotors named NAMES."""
        self.clear_rotors()
        if len(names) != self.__num_rotors:
            raise ConfigurationError(f"Expected {self.__num_rotors} rotor names, got {len(names)}")

        slots: list[Rotor] = []
        for name in names:
            if any(rotor.name == name for rotor in slots):
                raise ConfigurationError(f"Duplicate rotor name {name}")
            try:
                slots.append(self.__catalog[name])
            except KeyError:
                raise ConfigurationError(f"Bad rotor name {name}") from None

        if not slots[0].reflecting:
            raise ConfigurationError(f"Rotor {slots[0].name} in slot 0 is not a reflector")
        for rotor in slots[1:]:
            if rotor.reflecting:
                raise ConfigurationError(f"Reflector {rotor.name} may only occupy slot 0")

        self.__slots = slots
        self.__last_stepped = (False,) * len(slots)
        log.debug("rotors inserted", rotors=names)

    def set_rotors(self, setting: str) -> None:
        """Set slots 1..n-1 to the window symbols in SETTING, left to right."""
        self._require_rotors()
        if len(setting) != self.__num_rotors - 1:
            raise ConfigurationError(
                f"Rotor setting {setting!r} must have {self.__num_rotors - 1} characters"
            )
        for ch in setting:
            if ch not in self.__alphabet:
                raise ConfigurationError(f"Setting character {ch!r} not in the alphabet")
        for rotor, ch in zip(self.__slots[1:], setting):
            rotor.set(ch)
        log.debug("rotors set", setting=setting)

    def set_plugboard(self, plugboard: Permutation) -> None:
        if plugboard.size() != self.__alphabet.size:
            raise ConfigurationError(
                f"Plugboard size {plugboard.size()} does not match alphabet size {self.__alphabet.size}"
            )
        self.__plugboard = plugboard

    def rotor_setting(self) -> str:
        """The symbols currently showing in the windows of slots 1..n-1."""
        return "".join(rotor.setting for rotor in self.__slots[1:])

    # ---- stepping & conversion ----
    def _require_rotors(self) -> None:
        if not self.__slots:
            raise ConfigurationError("No rotors inserted")

    def _step(self) -> None:
        """Advance the rotors for one keypress.

        Every decision is taken from the positions as they stand before any
        rotor moves. A rotor at its notch advances together with its left
        neighbour, which gives the double step of the middle rotor.
        """
        slots = self.__slots
        n = len(slots)
        moves = [False] * n

        if self.__pawls > 0 and slots[-1].rotates:
            moves[-1] = True

        first_pawl = max(n - self.__pawls, 1)
        for i in range(first_pawl, n - 1):
            if slots[i + 1].at_notch() and slots[i].rotates:
                moves[i] = True
                moves[i + 1] = True

        for rotor, move in zip(slots, moves):
            if move:
                rotor.advance()

        self.__last_stepped = tuple(moves)
        log.debug("stepped", slots=[i for i, move in enumerate(moves) if move], setting=self.rotor_setting())

    @overload
    def convert(self, c: int) -> int: ...
    @overload
    def convert(self, c: str) -> str: ...

    def convert(self, c):
        """Advance the machine, then send index C through plugboard, rotors and back.

        A string argument is handed to convert_text.
        """
        if isinstance(c, str):
            return self.convert_text(c)
        self._require_rotors()
        self._step()

        signal = self.__plugboard.permute(c)
        for rotor in reversed(self.__slots):
            signal = rotor.convert_forward(signal)
        for rotor in self.__slots:
            if rotor.supports_backward:
                signal = rotor.convert_backward(signal)
        result = self.__plugboard.invert(signal)

        log.debug("converted", input=c, output=result)
        return result

    def convert_text(self, msg: str) -> str:
        """Convert every non-whitespace symbol of MSG, advancing per symbol.

        The whole message is checked against the alphabet first, so a bad
        symbol leaves the rotors where they were.
        """
        symbols = "".join(msg.split())
        for ch in symbols:
            if ch not in self.__alphabet:
                raise AlphabetError(f"Character {ch!r} not in the alphabet")

        alphabet = self.__alphabet
        return "".join(alphabet.to_char(self.convert(alphabet.to_int(ch))) for ch in symbols)

    def __repr__(self) -> str:
        names = " ".join(rotor.name for rotor in self.__slots) or "-"
        return f"<Machine slots={self.__num_rotors} pawls={self.__pawls} rotors={names}>"
