from __future__ import annotations
from functools import cmp_to_key
from typing import Iterable, List, Sequence

from errors import InvariantViolation
from expression import Expr, Function, Kind, Number, Power, Symbol

# Three-way comparisons return -1, 0 or 1.


def _sign(v: int) -> int:
    return (v > 0) - (v < 0)


def cmp_kind(a: Kind, b: Kind) -> int:
    return _sign(int(a) - int(b))


def cmp_expression_list(lhs: Sequence[Expr], rhs: Sequence[Expr]) -> int:
    """Suffix-first comparison: walk both sequences from the back.

    The first mismatching pair decides; if one sequence runs out first the
    shorter one is less.
    """
    n = min(len(lhs), len(rhs))
    for k in range(1, n + 1):
        c = cmp_expression(lhs[-k], rhs[-k])
        if c != 0:
            return c
    return _sign(len(lhs) - len(rhs))


def cmp_expression(lhs: Expr, rhs: Expr) -> int:
    """Total order used to sort the operands of sums and products.

    Kinds are ranked Number < Product < Power < Sum < Function < Symbol <
    Undefined. Only the lower-ranked side is dispatched on; the other
    direction is answered by swapping and negating.
    """
    if cmp_kind(lhs.kind, rhs.kind) > 0:
        return -cmp_expression(rhs, lhs)

    if lhs.kind == Kind.NUMBER:
        if isinstance(rhs, Number):
            return lhs.value.cmp(rhs.value)
        return -1
    if lhs.kind in (Kind.PRODUCT, Kind.SUM):
        if rhs.kind == lhs.kind:
            return cmp_expression_list(lhs.children, rhs.children)
        return cmp_expression_list(lhs.children, [rhs])
    if lhs.kind == Kind.POWER:
        if isinstance(rhs, Power):
            c = cmp_expression(lhs.base, rhs.base)
            if c == 0:
                return cmp_expression(lhs.exponent, rhs.exponent)
            return c
        c = cmp_expression(lhs.base, rhs)
        if c == 0:
            return cmp_expression(lhs.exponent, Number(1))
        return c
    if lhs.kind == Kind.FUNCTION:
        if isinstance(rhs, Function):
            c = (lhs.name > rhs.name) - (lhs.name < rhs.name)
            if c == 0:
                return cmp_expression_list(lhs.children, rhs.children)
            return c
        c = cmp_expression_list(lhs.children, [rhs])
        if c == 0:
            # f(x) against x: ties go to the kind rank so distinct
            # expressions never compare equal
            return cmp_kind(lhs.kind, rhs.kind)
        return c
    if lhs.kind == Kind.SYMBOL:
        if isinstance(rhs, Symbol):
            return (lhs.name > rhs.name) - (lhs.name < rhs.name)
        return -1
    if lhs.kind == Kind.UNDEFINED:
        if rhs.kind == Kind.UNDEFINED:
            return 0
        return -1
    raise InvariantViolation(f"Unknown expression kind: {lhs.kind!r}")


def cmp_base(lhs: Expr, rhs: Expr) -> int:
    """Compare with one level of Power stripped from either side."""
    lb = lhs.base if isinstance(lhs, Power) else lhs
    rb = rhs.base if isinstance(rhs, Power) else rhs
    return cmp_expression(lb, rb)


expression_key = cmp_to_key(cmp_expression)


def sort_expressions(exprs: Iterable[Expr]) -> List[Expr]:
    return sorted(exprs, key=expression_key)
