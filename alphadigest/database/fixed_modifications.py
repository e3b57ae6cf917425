"""Fixed-modification placement for digestion products.

Fixed modifications are applied wherever their restriction and motif fit.
Each is classified by its terminus restriction and assigned to structural
positions of the product (N-term = 1, residue r = r + 1, C-term = L + 2).

Protease-associated modifications (``modification_type == "Protease"``)
belong to the residue next to a terminus created by cleavage. They are
placed on the first (last) residue instead of the terminal slot, and never
on the natural termini of the parent biopolymer.

When several modifications target the same position, the one applied last
in iteration order wins.
"""

import logging
from typing import TYPE_CHECKING, Iterable, List, Optional, Tuple

from ..constants import (
    N_TERMINAL_SLOT,
    PROTEASE_MODIFICATION_TYPE,
    c_terminal_slot,
    residue_to_slot,
)
from ..modifications import (
    DEFAULT_FIT_ORACLE,
    FitOracle,
    LocationRestriction,
    Modification,
    classify_restriction,
)
from ..pools import DictionaryPool

if TYPE_CHECKING:
    from .digestion_product import DigestionProduct

logger = logging.getLogger(__name__)


# =============================================================================
# Terminal Slot Rules
# =============================================================================

def start_terminus_slot(modification: Modification, one_based_start_residue: int) -> Optional[int]:
    """Structural position of a fitting start-terminus modification.

    Returns None for a protease modification on the parent's own N-terminus.
    """
    if modification.modification_type == PROTEASE_MODIFICATION_TYPE:
        if one_based_start_residue == 1:
            return None
        return residue_to_slot(1)
    return N_TERMINAL_SLOT


def end_terminus_slot(
    modification: Modification,
    length: int,
    one_based_end_residue: int,
    parent_length: int,
) -> Optional[int]:
    """Structural position of a fitting end-terminus modification.

    Returns None for a protease modification on the parent's own C-terminus.
    """
    if modification.modification_type == PROTEASE_MODIFICATION_TYPE:
        if one_based_end_residue == parent_length:
            return None
        return residue_to_slot(length)
    return c_terminal_slot(length)


# =============================================================================
# Fixed Assignment
# =============================================================================

def enumerate_fixed_assignment(
    product: "DigestionProduct",
    fixed_modifications: Iterable[Modification],
    oracle: Optional[FitOracle] = None,
    pool: Optional[DictionaryPool] = None,
) -> List[Tuple[int, Modification]]:
    """Assign fixed modifications to the structural positions of a product.

    Parameters
    ----------
    product : DigestionProduct
        Product to modify; its parent supplies the sequence context
    fixed_modifications : iterable of Modification
        Globally fixed modifications, applied in order
    oracle : FitOracle, optional
        Motif/terminus check (default: :class:`MotifFitOracle`)
    pool : DictionaryPool, optional
        Pool for the scratch mapping; pass one to reuse it across products

    Returns
    -------
    List[Tuple[int, Modification]]
        ``(structural_position, modification)`` pairs, at most one per position,
        in the order positions were first assigned

    Raises
    ------
    ConfigurationError
        If a modification carries an unsupported location restriction

    Examples
    --------
    >>> protein = BioPolymer.protein("MABCDEFK")
    >>> product = DigestionProduct(protein, 2, 7, 0, CleavageSpecificity.FULL)
    >>> cam = Modification("Carbamidomethyl", "Common Fixed", "Anywhere.", "C")
    >>> enumerate_fixed_assignment(product, [cam])
    [(4, Modification(id='Carbamidomethyl', ...))]
    """
    fixed_modifications = list(fixed_modifications)
    if not fixed_modifications:
        return []

    parent = product.parent
    if parent is None:
        logger.warning(f"No parent for {product!r}; fixed modifications not applied")
        return []

    if oracle is None:
        oracle = DEFAULT_FIT_ORACLE
    if pool is None:
        pool = DictionaryPool()

    length = product.length
    start = product.one_based_start_residue
    end = product.one_based_end_residue
    parent_sequence = parent.base_sequence

    with pool.borrow() as assignment:
        for mod in fixed_modifications:
            restriction = classify_restriction(mod)

            if restriction.is_start_terminus:
                if oracle.fits(mod, parent_sequence, 1, length, start):
                    slot = start_terminus_slot(mod, start)
                    if slot is not None:
                        assignment[slot] = mod

            elif restriction is LocationRestriction.ANYWHERE:
                for slot in range(2, length + 2):
                    if oracle.fits(mod, parent_sequence, slot - 1, length, start + slot - 2):
                        assignment[slot] = mod

            elif restriction.is_end_terminus:
                if oracle.fits(mod, parent_sequence, length, length, start + length - 1):
                    slot = end_terminus_slot(mod, length, end, parent.length)
                    if slot is not None:
                        assignment[slot] = mod

        return list(assignment.items())
