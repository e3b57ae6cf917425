"""Modification definitions and the motif fit check.

This module describes modifications the way modification databases (Unimod,
UniProt ptmlist) spell them, and answers whether a modification may sit at a
given residue of a digestion product.

Key Features
------------
- Closed set of terminus restrictions (``LocationRestriction``)
- Immutable, hashable ``Modification`` records
- Motif matching with ambiguity codes (B, J, Z, X)
- Pluggable fit check through the ``FitOracle`` protocol

Examples
--------
>>> carbamidomethyl = Modification("Carbamidomethyl", "Common Fixed", "Anywhere.", "C")
>>> carbamidomethyl.id_with_motif
'Carbamidomethyl on C'
>>> mod_fits(carbamidomethyl, "PEPCK", 4, 5, 4)
True
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Protocol

from .constants import MOTIF_AMBIGUITY_CODES, MOTIF_WILDCARD


class ConfigurationError(ValueError):
    """A modification is configured in a way the engine cannot place."""


# =============================================================================
# Location Restrictions
# =============================================================================

class LocationRestriction(Enum):
    """Where on a biopolymer a modification may be localized.

    ``PEPTIDE_*`` and ``OLIGO_*`` restrictions apply to the termini of every
    digestion product; the plain terminal restrictions only apply to the
    termini of the intact biopolymer.
    """
    ANYWHERE = "Anywhere."
    UNASSIGNED = "Unassigned."

    PEPTIDE_N_TERMINAL = "Peptide N-terminal."
    OLIGO_FIVE_PRIME_TERMINAL = "Oligo 5'-terminal."
    PEPTIDE_C_TERMINAL = "Peptide C-terminal."
    OLIGO_THREE_PRIME_TERMINAL = "Oligo 3'-terminal."

    N_TERMINAL = "N-terminal."
    FIVE_PRIME_TERMINAL = "5'-terminal."
    C_TERMINAL = "C-terminal."
    THREE_PRIME_TERMINAL = "3'-terminal."

    @classmethod
    def from_text(cls, text: Optional[str]) -> "LocationRestriction":
        """Parse database text; anything unknown maps to ``UNASSIGNED``."""
        try:
            return cls(text)
        except ValueError:
            return cls.UNASSIGNED

    @property
    def text(self) -> str:
        return self.value

    @property
    def is_start_terminus(self) -> bool:
        return self in _START_TERMINI

    @property
    def is_end_terminus(self) -> bool:
        return self in _END_TERMINI


_START_TERMINI = frozenset({
    LocationRestriction.N_TERMINAL,
    LocationRestriction.FIVE_PRIME_TERMINAL,
    LocationRestriction.PEPTIDE_N_TERMINAL,
    LocationRestriction.OLIGO_FIVE_PRIME_TERMINAL,
})
_END_TERMINI = frozenset({
    LocationRestriction.C_TERMINAL,
    LocationRestriction.THREE_PRIME_TERMINAL,
    LocationRestriction.PEPTIDE_C_TERMINAL,
    LocationRestriction.OLIGO_THREE_PRIME_TERMINAL,
})

# Restrictions that only hold on the intact biopolymer terminus
_POLYMER_START_TERMINI = frozenset({
    LocationRestriction.N_TERMINAL,
    LocationRestriction.FIVE_PRIME_TERMINAL,
})
_POLYMER_END_TERMINI = frozenset({
    LocationRestriction.C_TERMINAL,
    LocationRestriction.THREE_PRIME_TERMINAL,
})


# =============================================================================
# Modification Record
# =============================================================================

@dataclass(frozen=True)
class Modification:
    """A chemical modification as listed in a modification database.

    Attributes
    ----------
    id : str
        Modification identifier, e.g. ``"Oxidation"``
    modification_type : str
        Category tag, e.g. ``"Common Variable"``. The value ``"Protease"``
        marks modifications introduced by the digesting enzyme.
    location_restriction : str
        Database text of the terminus restriction, e.g. ``"Anywhere."``
    motif : str
        Residue motif with exactly one upper-case target letter; lower-case
        letters are sequence context and ``x`` matches any residue.
    monoisotopic_mass : float, optional
        Mass shift in Da (informational only)
    """

    id: str
    modification_type: str
    location_restriction: str
    motif: str = "X"
    monoisotopic_mass: Optional[float] = None

    @property
    def restriction(self) -> LocationRestriction:
        return LocationRestriction.from_text(self.location_restriction)

    @property
    def target_index(self) -> int:
        """Index of the upper-case target letter within the motif."""
        for i, char in enumerate(self.motif):
            if char.isupper():
                return i
        raise ConfigurationError(
            f"Motif {self.motif!r} of modification {self.id!r} has no target residue"
        )

    @property
    def target(self) -> str:
        return self.motif[self.target_index]

    @property
    def id_with_motif(self) -> str:
        return f"{self.id} on {self.target}"

    def __str__(self) -> str:
        return f"{self.modification_type}:{self.id_with_motif}"


def classify_restriction(modification: Modification) -> LocationRestriction:
    """Return the supported restriction of a modification.

    Raises
    ------
    ConfigurationError
        If the restriction text is not one of the supported categories
    """
    restriction = modification.restriction
    if restriction is LocationRestriction.UNASSIGNED:
        raise ConfigurationError(
            f"Location restriction {modification.location_restriction!r} of "
            f"modification {modification.id!r} is not supported"
        )
    return restriction


# =============================================================================
# Fit Oracle
# =============================================================================

class FitOracle(Protocol):
    """Decides whether a modification may be localized at a residue.

    All positions are 1-based: ``product_position`` within the digestion
    product of ``product_length`` residues, ``parent_position`` within
    ``parent_sequence``.
    """

    def fits(
        self,
        modification: Modification,
        parent_sequence: str,
        product_position: int,
        product_length: int,
        parent_position: int,
    ) -> bool:
        ...


def motif_char_matches(motif_char: str, residue: str) -> bool:
    """Check a single motif letter against a residue (case-insensitive)."""
    motif_char = motif_char.upper()
    if motif_char == MOTIF_WILDCARD or motif_char == residue:
        return True
    return residue in MOTIF_AMBIGUITY_CODES.get(motif_char, ())


def mod_fits(
    modification: Modification,
    parent_sequence: str,
    product_position: int,
    product_length: int,
    parent_position: int,
) -> bool:
    """Check motif and terminus restriction of a modification at one residue.

    The motif is anchored so that its target letter sits on
    ``parent_position``; context letters falling outside the parent fail the
    match.

    Parameters
    ----------
    modification : Modification
        Modification to localize
    parent_sequence : str
        Full sequence of the parent biopolymer
    product_position : int
        1-based residue index within the digestion product
    product_length : int
        Number of residues of the digestion product
    parent_position : int
        1-based residue index within the parent

    Returns
    -------
    bool
        True if the modification may be placed at this residue

    Examples
    --------
    >>> acetyl = Modification("Acetyl", "Common", "N-terminal.", "X")
    >>> mod_fits(acetyl, "MPEPTIDE", 1, 8, 1)
    True
    >>> mod_fits(acetyl, "MPEPTIDE", 1, 5, 4)
    False
    """
    motif = modification.motif
    offset = parent_position - modification.target_index - 1
    for i, motif_char in enumerate(motif):
        index = offset + i
        if index < 0 or index >= len(parent_sequence):
            return False
        if not motif_char_matches(motif_char, parent_sequence[index]):
            return False

    restriction = modification.restriction
    if restriction in _POLYMER_START_TERMINI:
        # position 2 is allowed for initiator residue removal
        return parent_position <= 2
    if restriction in _POLYMER_END_TERMINI:
        return parent_position >= len(parent_sequence)
    if restriction in (
        LocationRestriction.PEPTIDE_N_TERMINAL,
        LocationRestriction.OLIGO_FIVE_PRIME_TERMINAL,
    ):
        return product_position <= 1
    if restriction in (
        LocationRestriction.PEPTIDE_C_TERMINAL,
        LocationRestriction.OLIGO_THREE_PRIME_TERMINAL,
    ):
        return product_position >= product_length
    return True


class MotifFitOracle:
    """Default ``FitOracle`` backed by :func:`mod_fits`."""

    def fits(
        self,
        modification: Modification,
        parent_sequence: str,
        product_position: int,
        product_length: int,
        parent_position: int,
    ) -> bool:
        return mod_fits(
            modification,
            parent_sequence,
            product_position,
            product_length,
            parent_position,
        )


DEFAULT_FIT_ORACLE = MotifFitOracle()
