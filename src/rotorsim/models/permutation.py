from __future__ import annotations

from typing import Sequence, overload

from rotorsim.errors import AlphabetError, ConfigurationError
from rotorsim.models.alphabet import Alphabet


def parse_cycles(notation: str) -> list[str]:
    """Split cycle notation such as "(ABC) (DE)(F)" into ["ABC", "DE", "F"].

    Whitespace between cycles is optional. Nested or unbalanced parentheses,
    empty cycles, whitespace inside a cycle and symbols outside any cycle are
    rejected.
    """
    cycles: list[str] = []
    current: list[str] | None = None

    for ch in notation:
        if ch == "(":
            if current is not None:
                raise ConfigurationError(f"Nested '(' in cycle notation {notation!r}")
            current = []
        elif ch == ")":
            if current is None:
                raise ConfigurationError(f"Unbalanced ')' in cycle notation {notation!r}")
            if not current:
                raise ConfigurationError(f"Empty cycle in {notation!r}")
            cycles.append("".join(current))
            current = None
        elif ch.isspace():
            if current is not None:
                raise ConfigurationError(f"Whitespace inside a cycle in {notation!r}")
        elif current is None:
            raise ConfigurationError(f"Symbol {ch!r} outside of a cycle in {notation!r}")
        else:
            current.append(ch)

    if current is not None:
        raise ConfigurationError(f"Unterminated cycle in {notation!r}")
    return cycles


class Permutation:
    """A bijection over the indices of an alphabet, given as disjoint cycles.

    Symbols that appear in no cycle map to themselves. Forward and inverse
    tables are built once here, so permute/invert are plain list lookups.
    """

    def __init__(self, cycles: Sequence[str], alphabet: Alphabet):
        self.__alphabet = alphabet
        self.__cycles = tuple(cycles)

        size = alphabet.size
        self.__forward = list(range(size))
        self.__inverse = list(range(size))

        seen: set[str] = set()
        for cycle in self.__cycles:
            for symbol in cycle:
                if symbol not in alphabet:
                    raise AlphabetError(f"Cycle ({cycle}) uses {symbol!r}, which is not in the alphabet")
                if symbol in seen:
                    raise AlphabetError(f"Symbol {symbol!r} appears in more than one cycle")
                seen.add(symbol)

            indices = [alphabet.to_int(symbol) for symbol in cycle]
            for i, src in enumerate(indices):
                dst = indices[(i + 1) % len(indices)]
                self.__forward[src] = dst
                self.__inverse[dst] = src

    @classmethod
    def from_notation(cls, notation: str, alphabet: Alphabet) -> "Permutation":
        return cls(parse_cycles(notation), alphabet)

    @property
    def alphabet(self) -> Alphabet:
        return self.__alphabet

    @property
    def cycles(self) -> tuple[str, ...]:
        return self.__cycles

    def size(self) -> int:
        return self.__alphabet.size

    def wrap(self, p: int) -> int:
        return p % self.size()

    @overload
    def permute(self, p: int) -> int: ...
    @overload
    def permute(self, p: str) -> str: ...

    def permute(self, p):
        if isinstance(p, str):
            return self.__alphabet.to_char(self.__forward[self.__alphabet.to_int(p)])
        return self.__forward[self.wrap(p)]

    @overload
    def invert(self, c: int) -> int: ...
    @overload
    def invert(self, c: str) -> str: ...

    def invert(self, c):
        if isinstance(c, str):
            return self.__alphabet.to_char(self.__inverse[self.__alphabet.to_int(c)])
        return self.__inverse[self.wrap(c)]

    def derangement(self) -> bool:
        # Only cycle lengths are checked; symbols left out of every cycle are
        # fixed points but do not make this return False.
        return all(len(cycle) >= 2 for cycle in self.__cycles)

    def __repr__(self) -> str:
        notation = " ".join(f"({cycle})" for cycle in self.__cycles)
        return f"<Permutation {notation or '()'} size={self.size()}>"
