"""In silico digestion with fixed and variable modifications.

Turns biopolymers into modified digestion products:

1. Cleavage: split the parent after rule residues (trypsin: K/R not before P;
   RNase T1: G) into windows with 0 to N missed cleavages
2. Fixed modifications: one deterministic assignment per product
3. Variable modifications: candidate positions per product, enumerated
   lazily and truncated at ``max_modification_isoforms``
4. Variable assignments take precedence over fixed ones on the same position

A ``Digester`` owns its container pools, so run one per worker thread.

Examples
--------
>>> params = DigestionParams(min_length=5, max_mods_for_peptide=1)
>>> digester = Digester(params, fixed_modifications=[cam], variable_modifications=[ox])
>>> protein = BioPolymer.protein("MPEPTCMEKAAAAAK", "P12345")
>>> [p.full_sequence for p in digester.digest(protein)]
['MPEPTC[Common Fixed:Carbamidomethyl on C]MEK', ...]
"""

import logging
from dataclasses import dataclass, field
from itertools import islice
from typing import Dict, Iterable, Iterator, List, Mapping, Optional, Sequence, Tuple

from ..constants import (
    DEFAULT_MAX_LENGTH,
    DEFAULT_MAX_MISSED_CLEAVAGES,
    DEFAULT_MAX_MODIFICATION_ISOFORMS,
    DEFAULT_MAX_MODS_FOR_PEPTIDE,
    DEFAULT_MIN_LENGTH,
    NUCLEIC_ACID_ALPHABET,
    PROTEIN_ALPHABET,
    c_terminal_slot,
)
from ..modifications import (
    DEFAULT_FIT_ORACLE,
    FitOracle,
    LocationRestriction,
    Modification,
    classify_restriction,
)
from ..pools import DictionaryPool, ListPool
from .biopolymer import BioPolymer, PolymerKind
from .digestion_product import CleavageSpecificity, DigestionProduct
from .fixed_modifications import (
    end_terminus_slot,
    enumerate_fixed_assignment,
    start_terminus_slot,
)
from .variable_modifications import enumerate_variable_patterns

logger = logging.getLogger(__name__)


# =============================================================================
# Cleavage Rules
# =============================================================================

@dataclass(frozen=True)
class CleavageRule:
    """Cleave after ``cleave_after`` residues unless followed by ``blocked_by``."""
    name: str
    cleave_after: str
    blocked_by: str
    kind: PolymerKind


CLEAVAGE_RULES = {
    "trypsin": CleavageRule("trypsin", "KR", "P", PolymerKind.PROTEIN),
    "rnase t1": CleavageRule("rnase t1", "G", "", PolymerKind.NUCLEIC_ACID),
}

_ALPHABETS = {
    PolymerKind.PROTEIN: PROTEIN_ALPHABET,
    PolymerKind.NUCLEIC_ACID: NUCLEIC_ACID_ALPHABET,
}


@dataclass
class DigestionParams:
    """Parameters for digestion and modification enumeration.

    ``max_modification_isoforms`` caps the number of modified forms emitted
    per digestion product; ``max_mods_for_peptide`` caps the number of
    variable modifications in a single form.
    """

    protease: str = "trypsin"
    max_missed_cleavages: int = DEFAULT_MAX_MISSED_CLEAVAGES
    min_length: int = DEFAULT_MIN_LENGTH
    max_length: int = DEFAULT_MAX_LENGTH
    max_modification_isoforms: int = DEFAULT_MAX_MODIFICATION_ISOFORMS
    max_mods_for_peptide: int = DEFAULT_MAX_MODS_FOR_PEPTIDE

    def __post_init__(self):
        if self.protease not in CLEAVAGE_RULES:
            raise ValueError(
                f"Unknown protease: {self.protease}. "
                f"Must be one of {sorted(CLEAVAGE_RULES)}"
            )
        if self.max_missed_cleavages < 0:
            raise ValueError(f"max_missed_cleavages must be >= 0, got {self.max_missed_cleavages}")
        if self.min_length < 1:
            raise ValueError(f"min_length must be >= 1, got {self.min_length}")
        if self.max_length < self.min_length:
            raise ValueError(
                f"max_length ({self.max_length}) must be >= min_length ({self.min_length})"
            )
        if self.max_modification_isoforms < 0:
            raise ValueError(
                f"max_modification_isoforms must be >= 0, got {self.max_modification_isoforms}"
            )
        if self.max_mods_for_peptide < 0:
            raise ValueError(f"max_mods_for_peptide must be >= 0, got {self.max_mods_for_peptide}")

    @property
    def cleavage_rule(self) -> CleavageRule:
        return CLEAVAGE_RULES[self.protease]

    @classmethod
    def for_nucleic_acids(cls) -> "DigestionParams":
        """Defaults for RNase T1 digestion of RNA."""
        return cls(
            protease="rnase t1",
            max_missed_cleavages=1,
            min_length=3,
            max_length=30,
            max_mods_for_peptide=3,
        )


def cleave(biopolymer: BioPolymer, params: DigestionParams) -> Iterator[DigestionProduct]:
    """Yield the unmodified digestion products of a biopolymer.

    Parameters
    ----------
    biopolymer : BioPolymer
        Parent to digest; must match the kind the protease acts on
    params : DigestionParams
        Cleavage rule, missed cleavages and length window

    Yields
    ------
    DigestionProduct
        Windows ordered by missed cleavages, then start position

    Raises
    ------
    ValueError
        If the protease does not act on this kind of biopolymer

    Examples
    --------
    >>> protein = BioPolymer.protein("PEPTIDEKRPPOTEINK")
    >>> [p.base_sequence for p in cleave(protein, DigestionParams(min_length=1))]
    ['PEPTIDEK', 'RPPOTEINK', 'PEPTIDEKRPPOTEINK']
    """
    rule = params.cleavage_rule
    if biopolymer.kind is not rule.kind:
        raise ValueError(
            f"{rule.name} cannot digest {biopolymer.kind.value} {biopolymer.accession!r}"
        )

    sequence = biopolymer.base_sequence
    alphabet = _ALPHABETS[biopolymer.kind]

    # 0-based index of the last residue before each cut
    cleavage_sites = [-1]
    for i, residue in enumerate(sequence[:-1]):
        if residue in rule.cleave_after and sequence[i + 1] not in rule.blocked_by:
            cleavage_sites.append(i)
    cleavage_sites.append(len(sequence) - 1)

    for mc in range(params.max_missed_cleavages + 1):
        for i in range(len(cleavage_sites) - mc - 1):
            start = cleavage_sites[i] + 1
            end = cleavage_sites[i + mc + 1] + 1
            if not params.min_length <= end - start <= params.max_length:
                continue
            window = sequence[start:end]
            if not all(residue in alphabet for residue in window):
                continue
            yield DigestionProduct(
                biopolymer,
                start + 1,
                end,
                mc,
                CleavageSpecificity.FULL,
                description="full",
                base_sequence=window,
            )


# =============================================================================
# Variable Modification Candidates
# =============================================================================

def find_variable_modification_candidates(
    product: DigestionProduct,
    variable_modifications: Iterable[Modification],
    oracle: Optional[FitOracle] = None,
    list_pool: Optional[ListPool] = None,
) -> Dict[int, List[Modification]]:
    """Map structural positions of a product to the variable modifications that fit.

    Terminus handling is the same as for fixed modifications, including the
    protease rule for cleavage-created termini.

    Returns
    -------
    Dict[int, List[Modification]]
        Position -> candidates in the order given, positions ascending.
        Empty if nothing fits or the product has no parent.

    Raises
    ------
    ConfigurationError
        If a modification carries an unsupported location restriction
    """
    parent = product.parent
    if parent is None:
        return {}
    if oracle is None:
        oracle = DEFAULT_FIT_ORACLE
    if list_pool is None:
        list_pool = ListPool()

    length = product.length
    start = product.one_based_start_residue
    end = product.one_based_end_residue
    parent_sequence = parent.base_sequence

    candidates: Dict[int, List[Modification]] = {}
    with list_pool.borrow() as slots:
        for mod in variable_modifications:
            restriction = classify_restriction(mod)

            if restriction.is_start_terminus:
                if oracle.fits(mod, parent_sequence, 1, length, start):
                    slots.append(start_terminus_slot(mod, start))
            elif restriction is LocationRestriction.ANYWHERE:
                for slot in range(2, length + 2):
                    if oracle.fits(mod, parent_sequence, slot - 1, length, start + slot - 2):
                        slots.append(slot)
            elif restriction.is_end_terminus:
                if oracle.fits(mod, parent_sequence, length, length, start + length - 1):
                    slots.append(end_terminus_slot(mod, length, end, parent.length))

            for slot in slots:
                if slot is not None:
                    candidates.setdefault(slot, []).append(mod)
            slots.clear()

    return {slot: candidates[slot] for slot in sorted(candidates)}


# =============================================================================
# Modified Products
# =============================================================================

@dataclass
class ModifiedProduct:
    """A digestion product with one concrete set of modifications.

    ``all_mods_one_is_nterminus`` uses structural positions: 1 is the
    N-terminus, residue r is r + 1 and L + 2 is the C-terminus.

    ``parent`` is a strong reference to the product's parent: collected
    modified products keep their parent alive (the product itself only holds
    a weak reference).
    """

    product: DigestionProduct
    all_mods_one_is_nterminus: Dict[int, Modification]
    num_fixed_mods: int = 0
    parent: Optional[BioPolymer] = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        self.parent = self.product.parent

    @property
    def base_sequence(self) -> str:
        return self.product.base_sequence

    @property
    def num_mods(self) -> int:
        return len(self.all_mods_one_is_nterminus)

    @property
    def num_variable_mods(self) -> int:
        return self.num_mods - self.num_fixed_mods

    @property
    def full_sequence(self) -> str:
        """Sequence with ``[Type:Id on X]`` annotations after modified sites."""
        mods = self.all_mods_one_is_nterminus
        parts = []
        if 1 in mods:
            parts.append(f"[{mods[1]}]")
        for r, residue in enumerate(self.base_sequence):
            parts.append(residue)
            if r + 2 in mods:
                parts.append(f"[{mods[r + 2]}]")
        c_terminus = c_terminal_slot(len(self.base_sequence))
        if c_terminus in mods:
            parts.append(f"-[{mods[c_terminus]}]")
        return "".join(parts)


def combine_with_fixed(
    pattern: Optional[Mapping[int, Modification]],
    fixed_assignment: Sequence[Tuple[int, Modification]],
) -> Tuple[Dict[int, Modification], int]:
    """Merge a variable pattern with the fixed assignment.

    Variable modifications keep their positions; fixed modifications fill
    the positions left free.

    Returns
    -------
    mods : Dict[int, Modification]
        Combined assignment
    num_fixed_mods : int
        Number of fixed modifications that were added
    """
    mods = dict(pattern) if pattern else {}
    num_fixed_mods = 0
    for slot, mod in fixed_assignment:
        if slot not in mods:
            mods[slot] = mod
            num_fixed_mods += 1
    return mods, num_fixed_mods


class Digester:
    """Digests biopolymers into modified products.

    Each ``Digester`` owns its pools; do not share one between threads.

    Parameters
    ----------
    params : DigestionParams, optional
        Digestion settings (default: trypsin defaults)
    fixed_modifications : sequence of Modification
        Applied wherever they fit
    variable_modifications : sequence of Modification
        Enumerated combinatorially up to ``params.max_mods_for_peptide``
    oracle : FitOracle, optional
        Motif/terminus check (default: :class:`MotifFitOracle`)
    """

    def __init__(
        self,
        params: Optional[DigestionParams] = None,
        fixed_modifications: Sequence[Modification] = (),
        variable_modifications: Sequence[Modification] = (),
        oracle: Optional[FitOracle] = None,
    ):
        self.params = params if params is not None else DigestionParams()
        self.fixed_modifications = list(fixed_modifications)
        self.variable_modifications = list(variable_modifications)
        self.oracle = oracle if oracle is not None else DEFAULT_FIT_ORACLE
        self.dict_pool = DictionaryPool()
        self.list_pool = ListPool()

    def modify(self, product: DigestionProduct) -> Iterator[ModifiedProduct]:
        """Yield the modified forms of one product, at most ``max_modification_isoforms``."""
        fixed_assignment = enumerate_fixed_assignment(
            product, self.fixed_modifications, oracle=self.oracle, pool=self.dict_pool
        )
        candidates = find_variable_modification_candidates(
            product, self.variable_modifications, oracle=self.oracle, list_pool=self.list_pool
        )
        patterns = enumerate_variable_patterns(
            candidates, self.params.max_mods_for_peptide, product.length, pool=self.dict_pool
        )
        for pattern in islice(patterns, self.params.max_modification_isoforms):
            mods, num_fixed_mods = combine_with_fixed(pattern, fixed_assignment)
            yield ModifiedProduct(product, mods, num_fixed_mods)

    def digest(self, biopolymer: BioPolymer) -> Iterator[ModifiedProduct]:
        """Yield every modified product of a biopolymer."""
        for product in cleave(biopolymer, self.params):
            yield from self.modify(product)


def digest_biopolymers(
    biopolymers: Iterable[BioPolymer],
    params: Optional[DigestionParams] = None,
    fixed_modifications: Sequence[Modification] = (),
    variable_modifications: Sequence[Modification] = (),
    oracle: Optional[FitOracle] = None,
) -> List[ModifiedProduct]:
    """Digest several biopolymers and collect all modified products.

    Convenience wrapper around :class:`Digester` with progress logging.
    """
    digester = Digester(params, fixed_modifications, variable_modifications, oracle)
    results: List[ModifiedProduct] = []
    n_polymers = 0
    for idx, biopolymer in enumerate(biopolymers):
        results.extend(digester.digest(biopolymer))
        n_polymers += 1
        if (idx + 1) % 5000 == 0:
            logger.info(f"  Processed {idx + 1:,} biopolymers: {len(results):,} modified products")

    logger.info(
        f"Digestion complete: {n_polymers:,} biopolymers -> {len(results):,} modified products "
        f"(protease: {digester.params.protease})"
    )
    return results
