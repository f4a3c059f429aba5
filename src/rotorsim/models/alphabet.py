from __future__ import annotations

from typing import Iterator

from rotorsim.errors import AlphabetError, ConfigurationError

UPPER = "ABCDEFGHIJKLMNOPQRSTUVWXYZ"


class Alphabet:
    """An ordered set of symbols. The k-th symbol has index k."""

    def __init__(self, chars: str = UPPER):
        if not chars:
            raise ConfigurationError("Alphabet must contain at least one symbol")
        if any(ch.isspace() for ch in chars):
            raise ConfigurationError("Alphabet may not contain whitespace")

        self.__chars = chars
        self.__index: dict[str, int] = {}
        for i, ch in enumerate(chars):
            if ch in self.__index:
                raise ConfigurationError(f"Duplicate symbol {ch!r} in alphabet")
            self.__index[ch] = i

    @property
    def chars(self) -> str:
        return self.__chars

    @property
    def size(self) -> int:
        return len(self.__chars)

    def contains(self, symbol: str) -> bool:
        return symbol in self.__index

    def to_char(self, index: int) -> str:
        if not 0 <= index < self.size:
            raise AlphabetError(f"Index {index} out of range 0-{self.size - 1}")
        return self.__chars[index]

    def to_int(self, symbol: str) -> int:
        try:
            return self.__index[symbol]
        except KeyError:
            raise AlphabetError(f"Character {symbol!r} not in the alphabet") from None

    def __contains__(self, symbol: object) -> bool:
        return symbol in self.__index

    def __len__(self) -> int:
        return self.size

    def __iter__(self) -> Iterator[str]:
        return iter(self.__chars)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Alphabet):
            return NotImplemented
        return self.__chars == other.chars

    def __hash__(self) -> int:
        return hash(self.__chars)

    def __str__(self) -> str:
        return self.__chars

    def __repr__(self) -> str:
        return f"Alphabet({self.__chars!r})"
