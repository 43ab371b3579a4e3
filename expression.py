from __future__ import annotations
from dataclasses import dataclass, field
from enum import IntEnum
from typing import ClassVar, Dict, List, Set, Tuple
import sys

from rational import Rational


# Integer values double as the ranks of the canonical ordering.
class Kind(IntEnum):
    NUMBER = 0
    PRODUCT = 1
    POWER = 2
    SUM = 3
    FUNCTION = 4
    SYMBOL = 5
    UNDEFINED = 6


_precedence = {Kind.SUM: 1, Kind.PRODUCT: 2, Kind.POWER: 3}


def precedence(kind: Kind) -> int:
    return _precedence.get(kind, sys.maxsize)


# =====================
# Node kinds
# =====================


@dataclass(repr=False)
class Expr:
    """Base of the closed set of expression kinds.

    Every kind exposes ``children`` (its ordered operands), ``with_children``
    (a node of the same kind around new operands) and ``copy`` (a deep copy).
    Dataclass equality is structural equality.
    """

    kind: ClassVar[Kind]

    def copy(self) -> Expr:
        return self.with_children([c.copy() for c in self.children])

    def maybe_brace(self, child: Expr) -> str:
        if precedence(child.kind) < precedence(self.kind):
            return f"({child})"
        return str(child)


@dataclass(repr=False)
class Number(Expr):
    value: Rational
    kind: ClassVar[Kind] = Kind.NUMBER

    def __post_init__(self) -> None:
        if not isinstance(self.value, Rational):
            self.value = Rational(self.value)

    @property
    def children(self) -> List[Expr]:
        return []

    def with_children(self, children: List[Expr]) -> Expr:
        # Rational is immutable, sharing the value is a full copy
        return Number(self.value)

    def __str__(self) -> str:
        return self.value.to_string()

    def __repr__(self) -> str:
        return self.value.to_string()


@dataclass(repr=False)
class Symbol(Expr):
    name: str
    kind: ClassVar[Kind] = Kind.SYMBOL

    @property
    def children(self) -> List[Expr]:
        return []

    def with_children(self, children: List[Expr]) -> Expr:
        return Symbol(self.name)

    def __str__(self) -> str:
        return self.name

    def __repr__(self) -> str:
        return self.name


@dataclass(repr=False)
class Sum(Expr):
    children: List[Expr] = field(default_factory=list)
    kind: ClassVar[Kind] = Kind.SUM

    def with_children(self, children: List[Expr]) -> Expr:
        return Sum(list(children))

    def __str__(self) -> str:
        ret = ""
        for c in self.children:
            s = self.maybe_brace(c)
            if not ret:
                ret = s
            elif s.startswith("-"):
                ret += s
            else:
                ret += "+" + s
        return ret

    def __repr__(self) -> str:
        return f"Sum({', '.join(repr(c) for c in self.children)})"


@dataclass(repr=False)
class Product(Expr):
    children: List[Expr] = field(default_factory=list)
    kind: ClassVar[Kind] = Kind.PRODUCT

    def with_children(self, children: List[Expr]) -> Expr:
        return Product(list(children))

    def __str__(self) -> str:
        ret = ""
        for c in self.children:
            if not ret:
                # -1*x prints as -x
                if isinstance(c, Number) and c.value == -1 and len(self.children) > 1:
                    ret = "-"
                else:
                    ret = self.maybe_brace(c)
            elif ret == "-":
                ret += self.maybe_brace(c)
            else:
                ret += "*" + self.maybe_brace(c)
        return ret

    def __repr__(self) -> str:
        return f"Product({', '.join(repr(c) for c in self.children)})"


@dataclass(repr=False)
class Power(Expr):
    base: Expr
    exponent: Expr
    kind: ClassVar[Kind] = Kind.POWER

    @property
    def children(self) -> List[Expr]:
        return [self.base, self.exponent]

    def with_children(self, children: List[Expr]) -> Expr:
        b, e = children
        return Power(b, e)

    def _operand(self, c: Expr) -> str:
        # (-2)^(1/2), not -2^1/2
        if isinstance(c, Number) and (c.value.sign() < 0 or not c.value.is_int()):
            return f"({c})"
        return self.maybe_brace(c)

    def __str__(self) -> str:
        return f"{self._operand(self.base)}^{self._operand(self.exponent)}"

    def __repr__(self) -> str:
        return f"Power({self.base!r}, {self.exponent!r})"


@dataclass(repr=False)
class Function(Expr):
    name: str
    args: List[Expr] = field(default_factory=list)
    kind: ClassVar[Kind] = Kind.FUNCTION

    @property
    def children(self) -> List[Expr]:
        return self.args

    def with_children(self, children: List[Expr]) -> Expr:
        return Function(self.name, list(children))

    def __str__(self) -> str:
        return f"{self.name}({', '.join(str(a) for a in self.args)})"

    def __repr__(self) -> str:
        return f"Function({self.name})({', '.join(repr(a) for a in self.args)})"


@dataclass(repr=False)
class Undefined(Expr):
    kind: ClassVar[Kind] = Kind.UNDEFINED

    @property
    def children(self) -> List[Expr]:
        return []

    def with_children(self, children: List[Expr]) -> Expr:
        return Undefined()

    def __str__(self) -> str:
        return "<Undefined>"

    def __repr__(self) -> str:
        return "<Undefined>"


# =====================
# Structural projections
# =====================


def _product_of(factors: List[Expr]) -> Expr:
    if len(factors) == 1:
        return factors[0]
    return Product(list(factors))


def _has_coefficient(expr: Expr) -> bool:
    return (
        isinstance(expr, Product)
        and len(expr.children) > 0
        and isinstance(expr.children[0], Number)
    )


def base(expr: Expr) -> Expr:
    if isinstance(expr, Power):
        return expr.base.copy()
    return expr.copy()


def exponent(expr: Expr) -> Expr:
    if isinstance(expr, Power):
        return expr.exponent.copy()
    return Number(1)


def term(expr: Expr) -> Expr:
    """Symbolic part of ``expr`` with any leading numeric coefficient stripped.

    A bare Number has no term; Undefined is returned by convention.
    """
    if isinstance(expr, Number):
        return Undefined()
    if _has_coefficient(expr):
        return _product_of([c.copy() for c in expr.children[1:]])
    return expr.copy()


def constant(expr: Expr) -> Expr:
    if _has_coefficient(expr):
        return expr.children[0].copy()
    return Number(1)


# Unpacks val into (c, t) with c a Number and c*t == val. Takes ownership of val.
def unpack_term(val: Expr) -> Tuple[Expr, Expr]:
    if _has_coefficient(val):
        return val.children[0], _product_of(val.children[1:])
    return Number(1), val


# Unpacks val into (b, e) with b^e == val. Takes ownership of val.
def unpack_power(val: Expr) -> Tuple[Expr, Expr]:
    if isinstance(val, Power):
        return val.base, val.exponent
    return val, Number(1)


# =====================
# Tree utilities
# =====================


def substitute(expr: Expr, mapping: Dict[str, Expr]) -> Expr:
    """Replace symbols by name; the result is a fresh, unsimplified tree."""
    if isinstance(expr, Symbol):
        if expr.name in mapping:
            return mapping[expr.name].copy()
        return Symbol(expr.name)
    return expr.with_children([substitute(c, mapping) for c in expr.children])


def free_symbols(expr: Expr) -> Set[str]:
    if isinstance(expr, Symbol):
        return {expr.name}
    names: Set[str] = set()
    for c in expr.children:
        names |= free_symbols(c)
    return names


def contains_undefined(children: List[Expr]) -> bool:
    return any(isinstance(c, Undefined) for c in children)
