"""Constants shared by the digestion and modification engine.

This module provides the residue alphabets, motif ambiguity codes, the
structural position convention and default sizing used throughout
AlphaDigest.

Structural Position Convention
------------------------------
Modification sites on a digestion product of ``L`` residues are addressed by
1-based *structural positions* rather than residue indices:

- position ``1`` is the N-terminal (5') modification slot
- positions ``2..L+1`` are residues ``1..L`` (residue ``r`` -> slot ``r+1``)
- position ``L+2`` is the C-terminal (3') modification slot

N-terminal, residue and C-terminal modifications therefore share one
mapping without colliding.
"""

import os

# =============================================================================
# Structural Positions
# =============================================================================

# Residue returned for a neighbour outside the parent polymer
TERMINUS_SENTINEL = "-"

N_TERMINAL_SLOT = 1


def residue_to_slot(one_based_residue: int) -> int:
    """Structural position of a 1-based product residue."""
    return one_based_residue + 1


def c_terminal_slot(length: int) -> int:
    """Structural position of the C-terminal slot for a product of ``length``."""
    return length + 2


# =============================================================================
# Modification Semantics
# =============================================================================

# Modifications of this type are introduced by the protease itself and only
# apply to termini created by cleavage.
PROTEASE_MODIFICATION_TYPE = "Protease"

# Motif ambiguity codes (upper-case motif letter -> matching residues)
MOTIF_AMBIGUITY_CODES = {
    "B": frozenset("DN"),
    "J": frozenset("IL"),
    "Z": frozenset("EQ"),
}
MOTIF_WILDCARD = "X"

# =============================================================================
# Residue Alphabets
# =============================================================================

PROTEIN_ALPHABET = frozenset("ACDEFGHIKLMNPQRSTVWYUOXBZJ")
NUCLEIC_ACID_ALPHABET = frozenset("ACGTUN")

# =============================================================================
# Pooling Defaults
# =============================================================================

# Idle containers retained per pool
DEFAULT_MAX_RETAINED = 2 * (os.cpu_count() or 1)

# =============================================================================
# Digestion Defaults
# =============================================================================

DEFAULT_MAX_MISSED_CLEAVAGES = 2
DEFAULT_MIN_LENGTH = 7
DEFAULT_MAX_LENGTH = 50
DEFAULT_MAX_MODIFICATION_ISOFORMS = 1024
DEFAULT_MAX_MODS_FOR_PEPTIDE = 2
