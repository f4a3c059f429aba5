import pytest

from rotorsim.errors import AlphabetError, ConfigurationError
from rotorsim.models.alphabet import Alphabet, UPPER
from rotorsim.models.permutation import Permutation, parse_cycles


def check_perm(from_alpha: str, to_alpha: str, perm: Permutation, alpha: Alphabet):
    """PERM maps each symbol of FROM_ALPHA to the matching symbol of TO_ALPHA, and back."""
    assert perm.size() == len(from_alpha)
    for c, e in zip(from_alpha, to_alpha):
        assert perm.permute(c) == e, f"wrong translation of {c!r}"
        assert perm.invert(e) == c, f"wrong inverse of {e!r}"
        ci, ei = alpha.to_int(c), alpha.to_int(e)
        assert perm.permute(ci) == ei
        assert perm.invert(ei) == ci


class TestParseCycles:
    """Test suite for cycle notation parsing"""

    def test_spaced_and_adjacent(self):
        """Cycles may be separated by spaces or written back to back"""
        assert parse_cycles("(ABC) (DE)(F)") == ["ABC", "DE", "F"]
        assert parse_cycles("  ") == []

    @pytest.mark.parametrize("notation", ["(AB", "AB)", "((AB))", "()", "(A B)", "X (AB)"])
    def test_malformed(self, notation):
        """Malformed notation is a configuration error"""
        with pytest.raises(ConfigurationError):
            parse_cycles(notation)


class TestPermutation:
    """Test suite for Permutation"""

    @pytest.fixture
    def perm(self):
        return Permutation.from_notation("(ZACH) (B)", Alphabet("ABCHZ"))

    def test_identity(self):
        """No cycles means identity"""
        alpha = Alphabet()
        check_perm(UPPER, UPPER, Permutation([], alpha), alpha)
        check_perm(UPPER, UPPER, Permutation.from_notation("", alpha), alpha)

    def test_rotor_wiring(self):
        """Rotor I in cycle notation matches its wiring table"""
        alpha = Alphabet()
        perm = Permutation.from_notation("(AELTPHQXRU) (BKNW) (CMOY) (DFG) (IV) (JZ) (S)", alpha)
        check_perm(UPPER, "EKMFLGDQVZNTOWYHXUSPAIBRCJ", perm, alpha)

    def test_permute_char(self, perm):
        """Test permuting a symbol"""
        assert perm.permute("Z") == "A"
        assert perm.permute("B") == "B"
        assert perm.permute("H") == "Z"

    def test_invert_char(self, perm):
        """Test inverting a symbol"""
        assert perm.invert("C") == "A"
        assert perm.invert("B") == "B"
        assert perm.invert("Z") == "H"

    def test_permute_int(self, perm):
        """Test permuting an index"""
        assert perm.permute(3) == 4
        assert perm.permute(4) == 0
        assert perm.permute(1) == 1

    def test_invert_int(self, perm):
        """Test inverting an index"""
        assert perm.invert(4) == 3
        assert perm.invert(0) == 4
        assert perm.invert(1) == 1

    def test_wrap(self, perm):
        """Integer arguments are taken modulo the size"""
        assert perm.wrap(-1) == 4
        assert perm.permute(-2) == perm.permute(3)
        assert perm.invert(5) == perm.invert(0)

    def test_round_trip(self):
        """invert(permute(p)) == p and permute(invert(p)) == p for every index"""
        alpha = Alphabet()
        perm = Permutation.from_notation("(AEPLIYWCOXMRFZBSTGJQNH) (DV) (KU)", alpha)
        for p in range(perm.size()):
            assert perm.invert(perm.permute(p)) == p
            assert perm.permute(perm.invert(p)) == p

    def test_fixed_points(self):
        """Symbols in no cycle map to themselves"""
        perm = Permutation.from_notation("(AB)", Alphabet("ABCD"))
        assert perm.permute("C") == "C"
        assert perm.invert("D") == "D"

    def test_size(self, perm):
        """Test size"""
        assert perm.size() == 5

    def test_alphabet(self):
        """Test alphabet of a permutation"""
        alpha = Alphabet("ABCHZ")
        perm = Permutation.from_notation("(ZACH) (B)", alpha)
        assert perm.alphabet is alpha
        assert perm.cycles == ("ZACH", "B")

    def test_derangement(self, perm):
        """Any cycle of length one means not a derangement"""
        assert not perm.derangement()
        assert Permutation.from_notation("(ZACH)", Alphabet("ACHZ")).derangement()

    def test_derangement_ignores_uncovered_symbols(self):
        """Symbols left out of every cycle do not make it fail"""
        perm = Permutation.from_notation("(AB)", Alphabet("ABC"))
        assert perm.permute("C") == "C"
        assert perm.derangement()

    def test_symbol_outside_alphabet(self):
        """Test rejection of a symbol outside the alphabet"""
        with pytest.raises(AlphabetError, match="not in the alphabet"):
            Permutation.from_notation("(ABX)", Alphabet("ABC"))

    def test_symbol_in_two_cycles(self):
        """Test rejection of a symbol in two cycles"""
        with pytest.raises(AlphabetError, match="more than one cycle"):
            Permutation.from_notation("(AB) (BC)", Alphabet("ABC"))

    def test_symbol_repeated_in_cycle(self):
        """Test rejection of a symbol repeated in one cycle"""
        with pytest.raises(AlphabetError):
            Permutation(["ABA"], Alphabet("ABC"))
