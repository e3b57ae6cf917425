"""Unit tests for fixed-modification placement."""

import pytest

from alphadigest.database import (
    BioPolymer,
    CleavageSpecificity,
    DigestionProduct,
    enumerate_fixed_assignment,
)
from alphadigest.modifications import ConfigurationError, Modification


class AlwaysFits:
    """Oracle accepting every site, recording the queries."""

    def __init__(self):
        self.calls = []

    def fits(self, modification, parent_sequence, product_position, product_length, parent_position):
        self.calls.append((modification.id, product_position, product_length, parent_position))
        return True


def make_product(parent, start, end):
    return DigestionProduct(parent, start, end, 0, CleavageSpecificity.FULL)


class TestAnywhere:
    """Test residue modifications."""

    def test_residue_maps_to_slot(self, internal_product, carbamidomethyl):
        """Test C at product residue 3 lands on structural position 4."""
        assignment = enumerate_fixed_assignment(internal_product, [carbamidomethyl])
        assert assignment == [(4, carbamidomethyl)]

    def test_every_matching_residue(self, carbamidomethyl):
        """Test all matching residues are modified."""
        protein = BioPolymer.protein("MCACKCR")
        product = make_product(protein, 2, 6)  # CACKC
        positions = [slot for slot, _ in enumerate_fixed_assignment(product, [carbamidomethyl])]
        assert positions == [2, 4, 6]

    def test_parent_positions_queried(self, internal_product, carbamidomethyl):
        """Test each residue is checked at its parent position."""
        oracle = AlwaysFits()
        assignment = enumerate_fixed_assignment(internal_product, [carbamidomethyl], oracle=oracle)
        assert [slot for slot, _ in assignment] == [2, 3, 4, 5, 6, 7]
        assert oracle.calls == [
            ("Carbamidomethyl", i, 6, i + 1) for i in range(1, 7)
        ]

    def test_last_modification_wins(self, internal_product, carbamidomethyl):
        """Test a later modification replaces an earlier one on the same position."""
        propionamide = Modification("Propionamide", "Common Fixed", "Anywhere.", "C")
        assignment = enumerate_fixed_assignment(
            internal_product, [carbamidomethyl, propionamide]
        )
        assert assignment == [(4, propionamide)]

        assignment = enumerate_fixed_assignment(
            internal_product, [propionamide, carbamidomethyl]
        )
        assert assignment == [(4, carbamidomethyl)]


class TestTermini:
    """Test N- and C-terminal placement."""

    def test_protein_n_terminal(self, parent_protein, acetyl_n_term):
        """Test ordinary N-terminal mods take position 1."""
        product = make_product(parent_protein, 1, 4)
        assert enumerate_fixed_assignment(product, [acetyl_n_term]) == [(1, acetyl_n_term)]

    def test_protein_n_terminal_not_internal(self, parent_protein, acetyl_n_term):
        product = make_product(parent_protein, 4, 8)
        assert enumerate_fixed_assignment(product, [acetyl_n_term]) == []

    def test_peptide_n_terminal_every_product(self, parent_protein, peptide_n_term_label):
        for start in (1, 3, 5):
            product = make_product(parent_protein, start, 8)
            assert enumerate_fixed_assignment(product, [peptide_n_term_label]) == [
                (1, peptide_n_term_label)
            ]

    def test_c_terminal(self, parent_protein, amidation_c_term):
        """Test ordinary C-terminal mods take position L + 2."""
        product = make_product(parent_protein, 5, 8)
        assert enumerate_fixed_assignment(product, [amidation_c_term]) == [(6, amidation_c_term)]
        internal = make_product(parent_protein, 5, 7)
        assert enumerate_fixed_assignment(internal, [amidation_c_term]) == []

    def test_nucleic_acid_termini(self):
        """Test 5' and 3' restrictions behave like N and C."""
        rna = BioPolymer.nucleic_acid("GUACUG")
        product = make_product(rna, 1, 6)
        five_prime = Modification("Phosphate", "Common", "5'-terminal.", "X")
        three_prime = Modification("Cyclic", "Common", "Oligo 3'-terminal.", "X")
        assignment = enumerate_fixed_assignment(product, [five_prime, three_prime])
        assert assignment == [(1, five_prime), (8, three_prime)]


class TestProteaseModifications:
    """Test modifications introduced at cleavage-created termini."""

    def test_internal_start_gets_residue_slot(self, internal_product, protease_n_term):
        """Test the protease N-terminal mod sits on residue 1 (position 2)."""
        assert enumerate_fixed_assignment(internal_product, [protease_n_term]) == [
            (2, protease_n_term)
        ]

    def test_internal_end_gets_residue_slot(self, internal_product, protease_c_term):
        """Test the protease C-terminal mod sits on residue L (position L + 1)."""
        assert enumerate_fixed_assignment(internal_product, [protease_c_term]) == [
            (7, protease_c_term)
        ]

    def test_never_on_polymer_termini(self, parent_protein, protease_n_term, protease_c_term):
        """Test natural termini of the parent never receive protease mods."""
        for start in range(1, 9):
            for end in range(start, 9):
                product = make_product(parent_protein, start, end)
                slots = dict(enumerate_fixed_assignment(product, [protease_n_term, protease_c_term]))
                if start == 1:
                    assert protease_n_term not in slots.values()
                if end == parent_protein.length:
                    assert protease_c_term not in slots.values()

    def test_protease_n_term_needs_fit(self, parent_protein):
        """Test the motif still has to match."""
        tag = Modification("TagD", "Protease", "Peptide N-terminal.", "D")
        assert enumerate_fixed_assignment(make_product(parent_protein, 5, 8), [tag]) == [(2, tag)]
        assert enumerate_fixed_assignment(make_product(parent_protein, 4, 8), [tag]) == []


class TestErrorsAndAbsence:
    """Test configuration errors and absent inputs."""

    def test_unsupported_restriction(self, internal_product, dict_pool):
        """Test an unknown restriction raises and still releases the pooled dict."""
        odd = Modification("Odd", "Common", "Somewhere.", "X")
        with pytest.raises(ConfigurationError, match="Somewhere"):
            enumerate_fixed_assignment(internal_product, [odd], pool=dict_pool)
        assert dict_pool.retained == 1
        assert dict_pool.acquire() == {}

    def test_unsupported_after_valid(self, internal_product, carbamidomethyl, dict_pool):
        """Test the error aborts the whole assignment."""
        odd = Modification("Odd", "Common", "Unassigned.", "X")
        with pytest.raises(ConfigurationError):
            enumerate_fixed_assignment(internal_product, [carbamidomethyl, odd], pool=dict_pool)
        assert dict_pool.acquire() == {}

    def test_empty_fixed_list(self, internal_product):
        assert enumerate_fixed_assignment(internal_product, []) == []

    def test_missing_parent(self, carbamidomethyl):
        """Test a product without parent receives no fixed modifications."""
        product = DigestionProduct(None, 2, 4, 0, CleavageSpecificity.FULL, base_sequence="ACD")
        assert enumerate_fixed_assignment(product, [carbamidomethyl]) == []

    def test_pool_reused(self, internal_product, carbamidomethyl, dict_pool):
        """Test repeated placements reuse one pooled dict."""
        for _ in range(5):
            enumerate_fixed_assignment(internal_product, [carbamidomethyl], pool=dict_pool)
        assert dict_pool.created == 1
        assert dict_pool.retained == 1

    def test_product_method(self, internal_product, carbamidomethyl):
        assert internal_product.fixed_modifications([carbamidomethyl]) == [(4, carbamidomethyl)]
