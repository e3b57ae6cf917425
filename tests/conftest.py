"""Pytest configuration for AlphaDigest tests.

This module provides common fixtures for all tests: parent biopolymers,
a set of typical modifications and fresh pools per test.
"""

import pytest

from alphadigest.modifications import Modification
from alphadigest.pools import DictionaryPool, ListPool


@pytest.fixture
def parent_protein():
    """Protein from the placement scenarios: product 2-7 is 'ABCDEF'."""
    from alphadigest.database import BioPolymer
    return BioPolymer.protein("MABCDEFK", "P00001")


@pytest.fixture
def internal_product(parent_protein):
    """Product spanning residues 2-7, internal on both sides."""
    from alphadigest.database import CleavageSpecificity, DigestionProduct
    return DigestionProduct(parent_protein, 2, 7, 0, CleavageSpecificity.FULL)


@pytest.fixture
def carbamidomethyl():
    return Modification("Carbamidomethyl", "Common Fixed", "Anywhere.", "C", 57.021464)


@pytest.fixture
def oxidation():
    return Modification("Oxidation", "Common Variable", "Anywhere.", "M", 15.994915)


@pytest.fixture
def phospho_s():
    return Modification("Phosphorylation", "Common Biological", "Anywhere.", "S", 79.966331)


@pytest.fixture
def acetyl_n_term():
    """Protein N-terminal acetylation (any residue)."""
    return Modification("Acetylation", "Common Biological", "N-terminal.", "X", 42.010565)


@pytest.fixture
def peptide_n_term_label():
    """Label applied to the N-terminus of every peptide."""
    return Modification("TMT6plex", "Multiplex Label", "Peptide N-terminal.", "X", 229.162932)


@pytest.fixture
def amidation_c_term():
    return Modification("Amidation", "Common Biological", "C-terminal.", "X", -0.984016)


@pytest.fixture
def protease_n_term():
    """Protease-introduced modification on the new N-terminal residue."""
    return Modification("ProteaseTagN", "Protease", "Peptide N-terminal.", "X")


@pytest.fixture
def protease_c_term():
    """Protease-introduced modification on the new C-terminal residue."""
    return Modification("ProteaseTagC", "Protease", "Peptide C-terminal.", "X")


@pytest.fixture
def mod_x():
    return Modification("ModX", "Common Variable", "Anywhere.", "X")


@pytest.fixture
def mod_y():
    return Modification("ModY", "Common Variable", "Anywhere.", "X")


@pytest.fixture
def mod_z():
    return Modification("ModZ", "Common Variable", "Anywhere.", "X")


@pytest.fixture
def dict_pool():
    """Fresh dictionary pool per test."""
    return DictionaryPool()


@pytest.fixture
def list_pool():
    """Fresh list pool per test."""
    return ListPool()
