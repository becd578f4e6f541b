# unitsafe.core.solver

"""
Sign-assignment search behind `System.combine`.

Given argument exponent vectors ``in[0..N)`` and a target vector ``out``, a
solution is a tuple of signs ``t`` (each +1 for multiply, -1 for divide) such
that for every slot ``x``::

    out[x] == sum(in[n][x] * t[n] for n in range(N))

All 2**N assignments are checked and every solution is reported, so callers
can tell a unique answer from an ambiguous one. N is capped at
`MAX_COMBINE_ARGS`.
"""

from __future__ import annotations

from itertools import product
from typing import List, Sequence, Tuple

from unitsafe.core.dimensions import Dimension

MAX_COMBINE_ARGS = 16

MULTIPLY = 1
DIVIDE = -1

Signs = Tuple[int, ...]


def solve(vectors: Sequence[Dimension], target: Dimension) -> List[Signs]:
    """Return every sign assignment of `vectors` that reproduces `target`.

    Assignments are enumerated in a fixed order (divide before multiply,
    first argument varying slowest), so the result is deterministic.
    """
    n = len(vectors)
    if n > MAX_COMBINE_ARGS:
        raise ValueError(f"solve: too many vectors ({n} > {MAX_COMBINE_ARGS})")
    width = len(target)
    for v in vectors:
        if len(v) != width:
            raise ValueError(f"solve: vector of length {len(v)} does not match target length {width}")

    # transpose once: one column of per-argument exponents per slot
    columns = [tuple(v[x] for v in vectors) for x in range(width)]
    # slots every argument leaves at zero only need the target to be zero too
    live = []
    for want, col in zip(target, columns):
        if any(col):
            live.append((want, col))
        elif want != 0:
            return []

    solutions: List[Signs] = []
    for signs in product((DIVIDE, MULTIPLY), repeat=n):
        for want, col in live:
            if sum(e * s for e, s in zip(col, signs)) != want:
                break
        else:
            solutions.append(signs)
    return solutions
