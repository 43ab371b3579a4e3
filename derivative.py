"""
Differentiation as a function rule: ``diff(expr, x)`` simplifies to the
derivative of ``expr`` with respect to the symbol ``x``.

The rule is registered with the simplifier under the name ``DIFF`` and is
called with arguments that are already canonical.
"""
from __future__ import annotations
from typing import TYPE_CHECKING, List
import logging

from errors import InvalidArgument, UnsupportedOperation
from expression import (
    Expr,
    Function,
    Number,
    Power,
    Product,
    Sum,
    Symbol,
    Undefined,
    unpack_power,
)

if TYPE_CHECKING:
    from simplify import Simplifier

logger = logging.getLogger(__name__)

DIFF = "diff"


def _diff(simplifier: Simplifier, expr: Expr, var: Symbol) -> Expr:
    return simplifier.simplify_function(Function(DIFF, [expr, var.copy()]))


def simplify_differentiation(simplifier: Simplifier, fn: Function) -> Expr:
    sc = simplifier.context
    if len(fn.args) != 2:
        raise InvalidArgument(f"Invalid function call: {fn}")
    expr, var = fn.args
    if not isinstance(var, Symbol):
        raise InvalidArgument(f"Invalid differentiation variable: {var}")

    if isinstance(expr, Symbol):
        return Number(1 if expr.name == var.name else 0)
    if isinstance(expr, Number):
        return Number(0)
    if isinstance(expr, Power):
        base, exp = unpack_power(expr)
        if not sc.is_constant(exp, [var.name]):
            raise UnsupportedOperation(
                f"Differentiation of non-constant exponent is not implemented: {exp}"
            )
        # d(b^n) = n * b^(n-1) * db
        reduced = simplifier.simplify_power(
            Power(base.copy(), simplifier.simplify_sum(Sum([exp.copy(), Number(-1)])))
        )
        factors: List[Expr] = [exp.copy(), reduced, _diff(simplifier, base.copy(), var)]
        return simplifier.simplify_product(Product(factors))
    if isinstance(expr, Product):
        # generalised product rule: one summand per differentiated factor
        factors = expr.children
        logger.debug("product rule over %d factors of %r", len(factors), expr)
        summands: List[Expr] = []
        for i in range(len(factors)):
            new_factors = [
                _diff(simplifier, f.copy(), var) if j == i else f.copy()
                for j, f in enumerate(factors)
            ]
            summands.append(simplifier.simplify_product(Product(new_factors)))
        return simplifier.simplify_sum(Sum(summands))
    if isinstance(expr, Sum):
        return simplifier.simplify_sum(
            Sum([_diff(simplifier, s, var) for s in expr.children])
        )
    if isinstance(expr, Function):
        # opaque function: keep the derivative unevaluated
        return Function(DIFF, [expr, var])
    return Undefined()
