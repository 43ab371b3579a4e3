"""
Automatic simplification.

Rewrites an expression tree bottom-up into its canonical form: operands of
sums and products are flattened, sorted by ``compare.cmp_expression`` and
merged with their sort-adjacent neighbours, numbers are folded exactly and
integer powers are distributed. Recursion depth follows the nesting depth of
the input, so pathologically deep trees can hit Python's recursion limit.
"""
from __future__ import annotations
from typing import Callable, Dict, Iterable, List, Optional, Type
import logging

from compare import cmp_base, cmp_expression, sort_expressions
from derivative import DIFF, simplify_differentiation
from errors import InvariantViolation
from expression import (
    Expr,
    Function,
    Number,
    Power,
    Product,
    Sum,
    Symbol,
    Undefined,
    contains_undefined,
    term,
    unpack_power,
    unpack_term,
)

logger = logging.getLogger(__name__)

FunctionRule = Callable[["Simplifier", Function], Expr]


class SimplificationContext:
    """Predicates the rewrite rules are written against."""

    def is_number(self, t: Expr) -> bool:
        return isinstance(t, Number)

    def is_zero(self, t: Expr) -> bool:
        return isinstance(t, Number) and t.value.is_zero()

    def is_one(self, t: Expr) -> bool:
        return isinstance(t, Number) and t.value.is_one()

    def is_integral(self, t: Expr) -> bool:
        return isinstance(t, Number) and t.value.is_int()

    def is_constant(self, t: Expr, variables: Optional[Iterable[str]] = None) -> bool:
        """True when ``t`` does not depend on any of ``variables``.

        With ``variables`` None every symbol counts as non-constant.
        """
        if isinstance(t, Number):
            return True
        if isinstance(t, Symbol):
            if variables is None:
                return False
            return t.name not in set(variables)
        if isinstance(t, Undefined):
            return False
        names = None if variables is None else list(variables)
        return all(self.is_constant(c, names) for c in t.children)


def _flatten(children: List[Expr], kind: Type[Expr]) -> List[Expr]:
    out: List[Expr] = []
    for c in children:
        if isinstance(c, kind):
            out.extend(c.children)
        else:
            out.append(c)
    return out


def combine_subexpressions(
    children: List[Expr], combine: Callable[[Expr, Expr], List[Expr]]
) -> List[Expr]:
    """Single left-to-right pass merging the last kept entry with the next one.

    ``combine`` returns the entries that replace the pair: none, a merged one,
    or both unchanged.
    """
    out: List[Expr] = []
    for rhs in children:
        if not out:
            out.append(rhs)
            continue
        lhs = out.pop()
        out.extend(combine(lhs, rhs))
    return out


def _default_rules() -> Dict[str, FunctionRule]:
    return {DIFF: simplify_differentiation}


class Simplifier:
    def __init__(
        self,
        context: Optional[SimplificationContext] = None,
        rules: Optional[Dict[str, FunctionRule]] = None,
    ) -> None:
        self.context = context or SimplificationContext()
        self.function_rules: Dict[str, FunctionRule] = _default_rules()
        if rules:
            self.function_rules.update(rules)

    def register_function_rule(self, name: str, rule: FunctionRule) -> None:
        self.function_rules[name] = rule

    def automatic_simplify(self, expr: Expr) -> Expr:
        """Return the canonical form of ``expr`` (children first, then the node)."""
        if isinstance(expr, (Number, Symbol, Undefined)):
            return expr
        expr = expr.with_children([self.automatic_simplify(c) for c in expr.children])
        if isinstance(expr, Function):
            return self.simplify_function(expr)
        if isinstance(expr, Power):
            return self.simplify_power(expr)
        if isinstance(expr, Product):
            return self.simplify_product(expr)
        if isinstance(expr, Sum):
            return self.simplify_sum(expr)
        raise InvariantViolation(f"Cannot simplify expression kind {expr.kind!r}")

    # -----------------
    # Sums
    # -----------------
    def simplify_sum(self, expr: Sum) -> Expr:
        children = _flatten(expr.children, Sum)
        if contains_undefined(children):
            return Undefined()
        children = combine_subexpressions(sort_expressions(children), self._combine_terms)
        if any(isinstance(c, Sum) for c in children):
            # a merge such as 2*(x+y) - (x+y) can yield a Sum; flatten and resort
            return self.simplify_sum(Sum(children))
        if len(children) == 0:
            return Number(0)
        if len(children) == 1:
            return children[0]
        return Sum(children)

    def _combine_terms(self, lhs: Expr, rhs: Expr) -> List[Expr]:
        sc = self.context
        if sc.is_number(lhs) and sc.is_number(rhs):
            v = lhs.value + rhs.value
            return [] if v.is_zero() else [Number(v)]
        if sc.is_zero(lhs):
            return [rhs]
        if sc.is_zero(rhs):
            return [lhs]
        if cmp_expression(term(lhs), term(rhs)) == 0:
            # like terms: add the coefficients
            lc, lt = unpack_term(lhs)
            rc, _ = unpack_term(rhs)
            new_constant = self.simplify_sum(Sum([lc, rc]))
            new_term = self.simplify_product(Product([new_constant, lt]))
            return [] if sc.is_zero(new_term) else [new_term]
        return [lhs, rhs]

    # -----------------
    # Products
    # -----------------
    def simplify_product(self, expr: Product) -> Expr:
        sc = self.context
        children = _flatten(expr.children, Product)
        if contains_undefined(children):
            return Undefined()
        if any(sc.is_zero(c) for c in children):
            return Number(0)
        children = combine_subexpressions(
            sort_expressions(children), self._combine_factors
        )
        if any(isinstance(c, Product) for c in children) or any(
            sc.is_number(c) for c in children[1:]
        ):
            # merged factors can come out as a Product, (x*y)^(1/2)*(x*y)^(1/2),
            # or as a Number, 2^(1/2)*2^(1/2)
            return self.simplify_product(Product(children))
        if len(children) == 0:
            return Number(1)
        if len(children) == 1:
            return children[0]
        return Product(children)

    def _combine_factors(self, lhs: Expr, rhs: Expr) -> List[Expr]:
        sc = self.context
        if sc.is_number(lhs) and sc.is_number(rhs):
            v = lhs.value * rhs.value
            return [] if v.is_one() else [Number(v)]
        if sc.is_one(lhs):
            return [rhs]
        if sc.is_one(rhs):
            return [lhs]
        if cmp_base(lhs, rhs) == 0:
            # like factors: add the exponents
            lb, le = unpack_power(lhs)
            _, re = unpack_power(rhs)
            new_exponent = self.simplify_sum(Sum([le, re]))
            new_factor = self.simplify_power(Power(lb, new_exponent))
            return [] if sc.is_one(new_factor) else [new_factor]
        return [lhs, rhs]

    # -----------------
    # Powers
    # -----------------
    def simplify_power(self, expr: Power) -> Expr:
        sc = self.context
        b, e = expr.base, expr.exponent
        if contains_undefined([b, e]):
            return Undefined()
        if sc.is_zero(b):
            if sc.is_number(e):
                s = e.value.sign()
                if s > 0:
                    return Number(0)
                if s == 0:
                    # 0^0 is 1 by convention
                    return Number(1)
                return Undefined()
            # sign of a symbolic exponent is unknown
            return expr
        if sc.is_one(b):
            return Number(1)
        if sc.is_integral(e):
            return self.simplify_integer_power(expr)
        # no root extraction for non-integer exponents
        return expr

    def simplify_integer_power(self, expr: Power) -> Expr:
        sc = self.context
        b, e = expr.base, expr.exponent
        if sc.is_zero(e):
            return Number(1)
        if sc.is_one(e):
            return b
        if isinstance(b, Number):
            return Number(b.value ** e.value.to_int())
        if isinstance(b, Power):
            new_exponent = self.simplify_product(Product([b.exponent, e]))
            return self.simplify_power(Power(b.base, new_exponent))
        if isinstance(b, Product):
            # distributing is safe only because the exponent is an integer
            factors = [self.simplify_power(Power(f, e.copy())) for f in b.children]
            return self.simplify_product(Product(factors))
        return Power(b, e)

    # -----------------
    # Functions
    # -----------------
    def simplify_function(self, expr: Function) -> Expr:
        if contains_undefined(expr.args):
            return Undefined()
        rule = self.function_rules.get(expr.name)
        if rule is None:
            return expr
        logger.debug("applying function rule %r to %r", expr.name, expr)
        return rule(self, expr)


_default_simplifier: Optional[Simplifier] = None


def default_simplifier() -> Simplifier:
    global _default_simplifier
    if _default_simplifier is None:
        _default_simplifier = Simplifier()
    return _default_simplifier


def automatic_simplify(expr: Expr) -> Expr:
    return default_simplifier().automatic_simplify(expr)
