"""Digestion products: contiguous windows of a parent biopolymer.

A ``DigestionProduct`` records where a peptide (or oligonucleotide) sits in
its parent and derives its sequence from the parent on first use. The parent
is held through a weak reference: dropping a product never affects the
parent, and a product whose parent is gone still answers boundary-residue
queries with the terminus sentinel.

Examples
--------
>>> protein = BioPolymer.protein("MABCDEFK")
>>> product = DigestionProduct(protein, 2, 7, 0, CleavageSpecificity.FULL)
>>> product.base_sequence, product.previous_residue, product.next_residue
('ABCDEF', 'M', 'K')
"""

import weakref
from enum import Enum
from typing import Iterable, List, Mapping, Optional, Sequence, Tuple

from ..constants import TERMINUS_SENTINEL
from ..modifications import FitOracle, Modification
from ..pools import DictionaryPool
from .biopolymer import BioPolymer, PolymerKind
from .fixed_modifications import enumerate_fixed_assignment
from .variable_modifications import VariableModificationPatterns, enumerate_variable_patterns


class CleavageSpecificity(Enum):
    """How well both termini of a product agree with the protease rule."""
    NONE = "none"
    SEMI = "semi"
    FULL = "full"
    SINGLE_N = "single_n"
    SINGLE_C = "single_c"
    UNKNOWN = "unknown"


class DigestionProduct:
    """One contiguous ``[start, end]`` window (1-based, inclusive) of a parent.

    Parameters
    ----------
    parent : BioPolymer or None
        Parent biopolymer; only a weak reference is kept
    one_based_start_residue : int
        First residue of the window in the parent (the parent's first residue is 1)
    one_based_end_residue : int
        Last residue of the window in the parent
    missed_cleavages : int
        Number of uncleaved sites inside the window
    cleavage_specificity_for_fdr_category : CleavageSpecificity
        Category used for FDR grouping
    description : str, optional
        Unstructured explanation of the product's origin
    base_sequence : str, optional
        Precomputed sequence; when given the parent is never consulted for it
    kind : PolymerKind, optional
        Peptide vs. oligo tag; defaults to the parent's kind

    Raises
    ------
    ValueError
        If the coordinates are inconsistent
    """

    def __init__(
        self,
        parent: Optional[BioPolymer],
        one_based_start_residue: int,
        one_based_end_residue: int,
        missed_cleavages: int,
        cleavage_specificity_for_fdr_category: CleavageSpecificity,
        description: Optional[str] = None,
        base_sequence: Optional[str] = None,
        kind: Optional[PolymerKind] = None,
    ):
        if one_based_start_residue < 1:
            raise ValueError(f"Start residue must be >= 1, got {one_based_start_residue}")
        if one_based_end_residue < one_based_start_residue:
            raise ValueError(
                f"End residue {one_based_end_residue} precedes start residue "
                f"{one_based_start_residue}"
            )
        if missed_cleavages < 0:
            raise ValueError(f"Missed cleavages must be >= 0, got {missed_cleavages}")
        if parent is not None and one_based_end_residue > parent.length:
            raise ValueError(
                f"End residue {one_based_end_residue} exceeds parent length {parent.length}"
            )
        window_length = one_based_end_residue - one_based_start_residue + 1
        if base_sequence is not None and len(base_sequence) != window_length:
            raise ValueError(
                f"Precomputed sequence has {len(base_sequence)} residues, "
                f"window spans {window_length}"
            )

        self._parent = weakref.ref(parent) if parent is not None else None
        self.one_based_start_residue = one_based_start_residue
        self.one_based_end_residue = one_based_end_residue
        self.missed_cleavages = missed_cleavages
        self.cleavage_specificity_for_fdr_category = cleavage_specificity_for_fdr_category
        self.description = description
        self._base_sequence = base_sequence

        if kind is None:
            kind = parent.kind if parent is not None else PolymerKind.PROTEIN
        self.kind = kind

    # -------------------------------------------------------------------------
    # Parent and sequence
    # -------------------------------------------------------------------------

    @property
    def parent(self) -> Optional[BioPolymer]:
        """The parent biopolymer, or None if absent or already collected."""
        if self._parent is None:
            return None
        return self._parent()

    @property
    def base_sequence(self) -> str:
        if self._base_sequence is None:
            parent = self.parent
            if parent is None:
                raise ValueError(
                    "Sequence of a digestion product without parent or precomputed sequence"
                )
            self._base_sequence = parent.base_sequence[
                self.one_based_start_residue - 1:self.one_based_end_residue
            ]
        return self._base_sequence

    @property
    def length(self) -> int:
        return len(self.base_sequence)

    def __len__(self) -> int:
        return self.length

    def __getitem__(self, zero_based_index: int) -> str:
        return self.base_sequence[zero_based_index]

    @property
    def previous_residue(self) -> str:
        """Residue preceding the product in the parent, or ``'-'``."""
        parent = self.parent
        if parent is None or self.one_based_start_residue <= 1:
            return TERMINUS_SENTINEL
        return parent.residue(self.one_based_start_residue - 2)

    @property
    def next_residue(self) -> str:
        """Residue following the product in the parent, or ``'-'``."""
        parent = self.parent
        if parent is None or self.one_based_end_residue >= parent.length:
            return TERMINUS_SENTINEL
        return parent.residue(self.one_based_end_residue)

    @property
    def is_peptide(self) -> bool:
        return self.kind is PolymerKind.PROTEIN

    @property
    def is_oligo(self) -> bool:
        return self.kind is PolymerKind.NUCLEIC_ACID

    # -------------------------------------------------------------------------
    # Modification placement
    # -------------------------------------------------------------------------

    def fixed_modifications(
        self,
        fixed_modifications: Iterable[Modification],
        oracle: Optional[FitOracle] = None,
        pool: Optional[DictionaryPool] = None,
    ) -> List[Tuple[int, Modification]]:
        """Place fixed modifications; see :func:`enumerate_fixed_assignment`."""
        return enumerate_fixed_assignment(self, fixed_modifications, oracle=oracle, pool=pool)

    def variable_modification_patterns(
        self,
        candidate_map: Mapping[int, Sequence[Modification]],
        max_mods: int,
        pool: Optional[DictionaryPool] = None,
    ) -> VariableModificationPatterns:
        """Enumerate variable patterns; see :func:`enumerate_variable_patterns`."""
        return enumerate_variable_patterns(candidate_map, max_mods, self.length, pool=pool)

    def __repr__(self) -> str:
        parent = self.parent
        accession = parent.accession if parent is not None else None
        return (
            f"DigestionProduct({accession!r}, {self.one_based_start_residue}-"
            f"{self.one_based_end_residue}, missed_cleavages={self.missed_cleavages})"
        )

