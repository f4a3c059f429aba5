import pytest

from rotorsim.errors import AlphabetError, ConfigurationError
from rotorsim.models.alphabet import Alphabet, UPPER


class TestAlphabet:
    """Test suite for Alphabet"""

    def test_default_is_upper_case(self):
        """Default alphabet is A-Z"""
        alpha = Alphabet()
        assert alpha.size == 26
        assert len(alpha) == 26
        assert alpha.chars == UPPER

    def test_index_round_trip(self):
        """to_char and to_int are inverses"""
        alpha = Alphabet("ABCHZ")
        for i, ch in enumerate("ABCHZ"):
            assert alpha.to_int(ch) == i
            assert alpha.to_char(i) == ch

    def test_contains(self):
        """Membership checks"""
        alpha = Alphabet("AB1#")
        assert alpha.contains("#")
        assert "1" in alpha
        assert not alpha.contains("C")
        assert "a" not in alpha

    def test_unknown_symbol(self):
        """Symbols outside the alphabet raise AlphabetError"""
        with pytest.raises(AlphabetError, match="not in the alphabet"):
            Alphabet("ABC").to_int("D")

    def test_index_out_of_range(self):
        """Indices outside 0..size-1 raise AlphabetError"""
        alpha = Alphabet("ABC")
        with pytest.raises(AlphabetError, match="out of range"):
            alpha.to_char(3)
        with pytest.raises(AlphabetError):
            alpha.to_char(-1)

    def test_duplicate_symbol(self):
        """Duplicate symbols are a configuration error"""
        with pytest.raises(ConfigurationError, match="Duplicate"):
            Alphabet("ABCA")

    def test_empty_or_whitespace(self):
        """Empty alphabets and whitespace symbols are rejected"""
        with pytest.raises(ConfigurationError):
            Alphabet("")
        with pytest.raises(ConfigurationError, match="whitespace"):
            Alphabet("AB C")

    def test_equality(self):
        """Alphabets compare by their symbols"""
        assert Alphabet("ABC") == Alphabet("ABC")
        assert Alphabet("ABC") != Alphabet("ACB")
        assert list(Alphabet("XYZ")) == ["X", "Y", "Z"]
