"""Variable-modification pattern enumeration.

Given the candidate modifications at each structural position of a digestion
product, enumerate every assignment that modifies at most ``max_mods``
positions, one candidate per position. Patterns are produced lazily, one per
``next()``, so that the combinatorial space is never materialized.

Enumeration order
-----------------
1. Increasing number ``m`` of modified positions, from 0 up to
   ``min(total_candidates, max_mods)``.
2. For a given ``m``, depth-first over positions in ascending order. At each
   position the candidates are tried in their declared order, then the
   "unmodified" option. Branches that cannot end with exactly ``m`` modified
   positions are pruned.

For ``m`` fixed this is the disjoint union over all ``m``-subsets ``S`` of
positions of the Cartesian product of their candidate lists, so the full
enumeration yields ``sum_m e_m(k_1, ..., k_n)`` patterns, where ``e_m`` is the
elementary symmetric polynomial of the per-position candidate counts.

Examples
--------
>>> patterns = enumerate_variable_patterns({2: [ox_x, ox_y], 5: [ph_z]}, max_mods=1, length=6)
>>> [sorted(p) for p in patterns]
[[], [2], [2], [5]]
>>> patterns.count()
4
"""

import logging
from numbers import Integral
from typing import Dict, Mapping, Optional, Sequence

import numba
import numpy as np

from ..modifications import Modification
from ..pools import DictionaryPool

logger = logging.getLogger(__name__)

INT64_MAX = np.iinfo(np.int64).max


# =============================================================================
# Pattern Counting (Numba-Compiled)
# =============================================================================

@numba.jit(nopython=True, cache=True)
def count_variable_patterns(candidate_counts: np.ndarray, max_mods: int) -> int:
    """Count the patterns a full enumeration yields (Numba-compiled).

    Parameters
    ----------
    candidate_counts : np.ndarray (int64)
        Number of candidates at each position
    max_mods : int
        Maximum number of modified positions

    Returns
    -------
    int
        Number of patterns, including the unmodified one. An empty
        ``candidate_counts`` gives 1 (the single "no modifications" pattern).

    Raises
    ------
    OverflowError
        If the count does not fit in int64

    Examples
    --------
    >>> count_variable_patterns(np.array([2, 1], dtype=np.int64), 1)
    4
    """
    n = len(candidate_counts)
    if n == 0:
        return 1

    total = 0
    for i in range(n):
        total += candidate_counts[i]
    top = min(min(total, max_mods), n)

    # e[m] = number of patterns with exactly m modified positions
    e = np.zeros(top + 1, dtype=np.int64)
    e[0] = 1
    for i in range(n):
        k = candidate_counts[i]
        for m in range(min(i + 1, top), 0, -1):
            if k > 0 and e[m - 1] > (INT64_MAX - e[m]) // k:
                raise OverflowError("variable pattern count exceeds int64")
            e[m] += e[m - 1] * k

    result = 0
    for m in range(top + 1):
        if result > INT64_MAX - e[m]:
            raise OverflowError("variable pattern count exceeds int64")
        result += e[m]
    return result


def _count_variable_patterns_exact(candidate_counts: Sequence[int], max_mods: int) -> int:
    """Same recurrence as :func:`count_variable_patterns` on Python ints."""
    top = min(sum(candidate_counts), max_mods, len(candidate_counts))
    e = [1] + [0] * top
    for i, k in enumerate(candidate_counts):
        for m in range(min(i + 1, top), 0, -1):
            e[m] += e[m - 1] * k
    return sum(e)


# =============================================================================
# Pattern Enumeration
# =============================================================================

class VariableModificationPatterns:
    """Restartable, lazy sequence of variable-modification patterns.

    Every ``iter()`` starts a new, independent enumeration; a single
    iterator is forward-only. Use :func:`enumerate_variable_patterns` to
    build one.

    Yields
    ------
    dict or None
        ``{structural_position: Modification}`` for the chosen positions.
        An empty candidate map yields a single ``None``; otherwise the
        unmodified pattern is an empty dict.
    """

    def __init__(
        self,
        candidate_map: Mapping[int, Sequence[Modification]],
        max_mods: int,
        length: int,
        pool: Optional[DictionaryPool] = None,
    ):
        if max_mods < 0:
            raise ValueError(f"max_mods must be >= 0, got {max_mods}")
        if length < 0:
            raise ValueError(f"length must be >= 0, got {length}")

        last_slot = length + 2
        for position, candidates in candidate_map.items():
            if (
                isinstance(position, bool)
                or not isinstance(position, Integral)
                or not 1 <= position <= last_slot
            ):
                raise ValueError(
                    f"Candidate position {position!r} outside structural positions 1..{last_slot}"
                )
            if len(candidates) == 0:
                raise ValueError(f"No candidate modifications at position {position}")

        self.positions = tuple(sorted(int(p) for p in candidate_map))
        self.candidates = tuple(tuple(candidate_map[p]) for p in self.positions)
        self.max_mods = max_mods
        self.length = length
        self.total_available = sum(len(c) for c in self.candidates)
        self.max_variable_mods = min(self.total_available, max_mods)
        self.pool = pool if pool is not None else DictionaryPool()

    def __iter__(self) -> "_PatternIterator":
        return _PatternIterator(self)

    def count(self) -> int:
        """Number of patterns a full iteration yields, exact for any size."""
        sizes = [len(c) for c in self.candidates]
        try:
            return int(count_variable_patterns(np.array(sizes, dtype=np.int64), self.max_mods))
        except OverflowError:
            return _count_variable_patterns_exact(sizes, self.max_mods)


class _PatternIterator:
    """Explicit-state backtracking over positions.

    ``_options[d]`` holds the option currently chosen at depth ``d``: values
    ``0..k-1`` select a candidate, ``k`` means unmodified and ``-1`` means
    not yet visited. ``_modified_before[d]`` counts modified positions above
    depth ``d``. Only one root-to-leaf path is ever held.
    """

    def __init__(self, patterns: VariableModificationPatterns):
        self._positions = patterns.positions
        self._candidates = patterns.candidates
        self._pool = patterns.pool
        self._max_variable_mods = patterns.max_variable_mods

        n = len(self._positions)
        self._n = n
        self._sizes = [len(c) for c in self._candidates]
        self._options = [-1] * n
        self._modified_before = [0] * (n + 1)
        self._target = 0
        self._depth = 0
        self._done = False

    def __iter__(self) -> "_PatternIterator":
        return self

    def __next__(self) -> Optional[Dict[int, Modification]]:
        if self._done:
            raise StopIteration
        if self._n == 0:
            self._done = True
            return None

        while not self._advance():
            self._target += 1
            if self._target > self._max_variable_mods:
                self._done = True
                raise StopIteration
            self._depth = 0
            self._modified_before[0] = 0
        return self._emit()

    def _advance(self) -> bool:
        """Move to the next leaf with exactly ``_target`` modified positions."""
        options = self._options
        modified_before = self._modified_before
        target = self._target
        last = self._n - 1
        depth = self._depth

        while depth >= 0:
            modified = modified_before[depth]
            remaining = last - depth
            k = self._sizes[depth]
            option = options[depth] + 1

            if option < k and not (modified < target and target - modified - 1 <= remaining):
                option = k
            if option == k and target - modified > remaining:
                option = k + 1

            if option > k:
                options[depth] = -1
                depth -= 1
                continue

            options[depth] = option
            if depth == last:
                self._depth = depth
                return True
            modified_before[depth + 1] = modified + (1 if option < k else 0)
            depth += 1

        self._depth = 0
        return False

    def _emit(self) -> Dict[int, Modification]:
        """Copy the current leaf into a caller-owned dict.

        The chosen entries are gathered in a pooled scratch mapping, which is
        back in the pool before the copy is returned. Emitted patterns share
        no state with the iterator or the pool and may be kept or mutated.
        """
        with self._pool.borrow() as pattern:
            for i, option in enumerate(self._options):
                if option < self._sizes[i]:
                    pattern[self._positions[i]] = self._candidates[i][option]
            return dict(pattern)


def enumerate_variable_patterns(
    candidate_map: Mapping[int, Sequence[Modification]],
    max_mods: int,
    length: int,
    pool: Optional[DictionaryPool] = None,
) -> VariableModificationPatterns:
    """Lazily enumerate variable-modification patterns of a digestion product.

    Parameters
    ----------
    candidate_map : Mapping[int, Sequence[Modification]]
        Structural position -> candidate modifications (at least one each)
    max_mods : int
        Maximum number of modified positions per pattern
    length : int
        Residue length of the product (positions range over ``1..length+2``)
    pool : DictionaryPool, optional
        Pool for the scratch mapping used to build each pattern

    Returns
    -------
    VariableModificationPatterns
        Restartable iterable of patterns

    Raises
    ------
    ValueError
        If a position lies outside ``1..length+2``, a candidate list is empty,
        or ``max_mods``/``length`` is negative
    """
    patterns = VariableModificationPatterns(candidate_map, max_mods, length, pool=pool)
    logger.debug(
        f"Enumerating variable modifications over {len(patterns.positions)} positions "
        f"({patterns.total_available} candidates, up to {patterns.max_variable_mods} mods)"
    )
    return patterns
