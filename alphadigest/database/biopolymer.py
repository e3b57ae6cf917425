"""Parent biopolymers (proteins and nucleic acids) consumed by digestion."""

from enum import Enum
from typing import Optional


class PolymerKind(Enum):
    """Kind of biopolymer; selects peptide vs. oligo behaviour of products."""
    PROTEIN = "protein"
    NUCLEIC_ACID = "nucleic_acid"


class BioPolymer:
    """A linear sequence of residues.

    Digestion products keep only a weak reference to their parent, so a
    ``BioPolymer`` must outlive the products that need its sequence.

    Parameters
    ----------
    base_sequence : str
        One-letter residue codes
    accession : str
        Identifier, e.g. UniProt accession
    kind : PolymerKind
        Protein or nucleic acid
    name : str, optional
        Free-text name

    Examples
    --------
    >>> protein = BioPolymer.protein("MPEPTIDEK", "P12345")
    >>> protein.length, protein.residue(0)
    (9, 'M')
    """

    def __init__(
        self,
        base_sequence: str,
        accession: str = "",
        kind: PolymerKind = PolymerKind.PROTEIN,
        name: Optional[str] = None,
    ):
        self.base_sequence = base_sequence
        self.accession = accession
        self.kind = kind
        self.name = name

    @classmethod
    def protein(cls, base_sequence: str, accession: str = "", name: Optional[str] = None) -> "BioPolymer":
        return cls(base_sequence, accession, PolymerKind.PROTEIN, name)

    @classmethod
    def nucleic_acid(cls, base_sequence: str, accession: str = "", name: Optional[str] = None) -> "BioPolymer":
        return cls(base_sequence, accession, PolymerKind.NUCLEIC_ACID, name)

    @property
    def length(self) -> int:
        return len(self.base_sequence)

    def residue(self, zero_based_index: int) -> str:
        return self.base_sequence[zero_based_index]

    def __len__(self) -> int:
        return len(self.base_sequence)

    def __getitem__(self, zero_based_index: int) -> str:
        return self.base_sequence[zero_based_index]

    def __repr__(self) -> str:
        return f"BioPolymer({self.accession!r}, kind={self.kind.value}, length={self.length})"
