from __future__ import annotations
from fractions import Fraction
from typing import Any, Callable, Dict, Optional, Set, Tuple, Union

from compare import cmp_expression
from derivative import DIFF
from edag import EDAG
from expression import (
    Expr,
    Function,
    Number,
    Power,
    Product,
    Sum,
    Symbol,
    free_symbols,
    substitute,
)
from rational import Rational
from simplify import FunctionRule, Simplifier, default_simplifier

NumberLike = Union[int, Fraction, Rational]


def _as_number(value: Any) -> Optional[Expr]:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, Fraction, Rational)):
        return Number(Rational(value))
    return None


def _var_name(v: Union["Symbolic", str]) -> str:
    if isinstance(v, str):
        return v
    if isinstance(v, Symbolic) and isinstance(v._expr, Symbol):
        return v._expr.name
    raise TypeError(f"Expected a symbol or a name, got {v!r}")


class Symbolic:
    """An expression held in canonical form.

    Every operator builds the raw node and routes it through the simplifier,
    so a Symbolic never exposes a partially simplified tree.
    """

    __slots__ = ("_expr", "_simplifier")

    def __init__(self, expr: Expr, simplifier: Optional[Simplifier] = None) -> None:
        self._simplifier = simplifier or default_simplifier()
        self._expr = self._simplifier.automatic_simplify(expr)

    @classmethod
    def _from_canonical(cls, expr: Expr, simplifier: Simplifier) -> "Symbolic":
        s = cls.__new__(cls)
        s._simplifier = simplifier
        s._expr = expr
        return s

    def _wrap(self, expr: Expr) -> "Symbolic":
        return Symbolic(expr, self._simplifier)

    @staticmethod
    def _operand(other: Any) -> Optional[Expr]:
        if isinstance(other, Symbolic):
            return other._expr.copy()
        return _as_number(other)

    @property
    def expr(self) -> Expr:
        return self._expr.copy()

    def copy(self) -> "Symbolic":
        return Symbolic._from_canonical(self._expr.copy(), self._simplifier)

    # -----------------
    # Arithmetic
    # -----------------
    def __add__(self, other: Any) -> "Symbolic":
        o = self._operand(other)
        if o is None:
            return NotImplemented
        return self._wrap(Sum([self.expr, o]))

    def __radd__(self, other: Any) -> "Symbolic":
        o = self._operand(other)
        if o is None:
            return NotImplemented
        return self._wrap(Sum([o, self.expr]))

    def __neg__(self) -> "Symbolic":
        return self._wrap(Product([Number(-1), self.expr]))

    def __sub__(self, other: Any) -> "Symbolic":
        o = self._operand(other)
        if o is None:
            return NotImplemented
        return self._wrap(Sum([self.expr, Product([Number(-1), o])]))

    def __rsub__(self, other: Any) -> "Symbolic":
        o = self._operand(other)
        if o is None:
            return NotImplemented
        return self._wrap(Sum([o, Product([Number(-1), self.expr])]))

    def __mul__(self, other: Any) -> "Symbolic":
        o = self._operand(other)
        if o is None:
            return NotImplemented
        return self._wrap(Product([self.expr, o]))

    def __rmul__(self, other: Any) -> "Symbolic":
        o = self._operand(other)
        if o is None:
            return NotImplemented
        return self._wrap(Product([o, self.expr]))

    def __truediv__(self, other: Any) -> "Symbolic":
        o = self._operand(other)
        if o is None:
            return NotImplemented
        return self._wrap(Product([self.expr, Power(o, Number(-1))]))

    def __rtruediv__(self, other: Any) -> "Symbolic":
        o = self._operand(other)
        if o is None:
            return NotImplemented
        return self._wrap(Product([o, Power(self.expr, Number(-1))]))

    def __pow__(self, other: Any) -> "Symbolic":
        o = self._operand(other)
        if o is None:
            return NotImplemented
        return self._wrap(Power(self.expr, o))

    def __rpow__(self, other: Any) -> "Symbolic":
        o = self._operand(other)
        if o is None:
            return NotImplemented
        return self._wrap(Power(o, self.expr))

    # -----------------
    # Comparison
    # -----------------
    def cmp(self, other: Any) -> int:
        o = self._operand(other)
        if o is None:
            raise TypeError(f"Cannot compare Symbolic with {type(other).__name__}")
        return cmp_expression(self._expr, o)

    def __eq__(self, other: object) -> bool:
        o = self._operand(other)
        if o is None:
            return NotImplemented
        return self._expr == o

    def __hash__(self) -> int:
        return hash((self._expr.kind, repr(self._expr)))

    def __lt__(self, other: Any) -> bool:
        return self.cmp(other) < 0

    def __le__(self, other: Any) -> bool:
        return self.cmp(other) <= 0

    def __gt__(self, other: Any) -> bool:
        return self.cmp(other) > 0

    def __ge__(self, other: Any) -> bool:
        return self.cmp(other) >= 0

    # -----------------
    # Calculus and evaluation
    # -----------------
    def diff(self, v: Union["Symbolic", str]) -> "Symbolic":
        return self._wrap(Function(DIFF, [self.expr, Symbol(_var_name(v))]))

    def subs(self, mapping: Dict[Union["Symbolic", str], Any]) -> "Symbolic":
        """Exact substitution of symbols, followed by re-simplification."""
        replacements: Dict[str, Expr] = {}
        for k, v in mapping.items():
            o = self._operand(v)
            if o is None:
                raise TypeError(f"Cannot substitute {v!r}")
            replacements[_var_name(k)] = o
        return self._wrap(substitute(self._expr, replacements))

    def evaluate(self, env: Optional[Dict[Union["Symbolic", str], Any]] = None) -> Any:
        """Floating-point evaluation; variables may be bound to numpy arrays."""
        env = env or {}
        return EDAG.from_expression(self._expr).eval(
            {_var_name(k): v for k, v in env.items()}
        )

    def free_symbols(self) -> Set[str]:
        return free_symbols(self._expr)

    def is_number(self) -> bool:
        return isinstance(self._expr, Number)

    def to_rational(self) -> Rational:
        if not isinstance(self._expr, Number):
            raise TypeError(f"{self} is not a number")
        return self._expr.value

    def __str__(self) -> str:
        return str(self._expr)

    def __repr__(self) -> str:
        return repr(self._expr)


def num(value: NumberLike, den: Optional[int] = None) -> Symbolic:
    return Symbolic(Number(Rational(value, den)))


def var(name: str) -> Symbolic:
    return Symbolic(Symbol(name))


def variables(*names: str) -> Tuple[Symbolic, ...]:
    return tuple(var(n) for n in names)


def _function_builder(name: str, simplifier: Simplifier) -> Callable[..., Symbolic]:
    def apply(*args: Any) -> Symbolic:
        exprs = []
        for a in args:
            o = Symbolic._operand(a)
            if o is None:
                raise TypeError(f"Invalid argument to {name}: {a!r}")
            exprs.append(o)
        return Symbolic(Function(name, exprs), simplifier)

    apply.__name__ = name
    return apply


def func(name: str) -> Callable[..., Symbolic]:
    """``func("f")(x, y)`` builds the function application f(x, y)."""
    return _function_builder(name, default_simplifier())


class CAS:
    def __init__(self, simplifier: Simplifier | None = None) -> None:
        self.simplifier = simplifier or Simplifier()

    def register_function_rule(self, name: str, rule: FunctionRule) -> None:
        self.simplifier.register_function_rule(name, rule)

    def num(self, value: NumberLike, den: Optional[int] = None) -> Symbolic:
        return Symbolic(Number(Rational(value, den)), self.simplifier)

    def var(self, name: str) -> Symbolic:
        return Symbolic(Symbol(name), self.simplifier)

    def func(self, name: str) -> Callable[..., Symbolic]:
        return _function_builder(name, self.simplifier)

    def simplify(self, expr: Expr) -> Expr:
        return self.simplifier.automatic_simplify(expr)

    def differentiate(self, expr: Symbolic, v: Union[Symbolic, str]) -> Symbolic:
        return Symbolic(Function(DIFF, [expr.expr, Symbol(_var_name(v))]), self.simplifier)

    def substitute(self, expr: Symbolic, mapping: Dict[Union[Symbolic, str], Any]) -> Symbolic:
        return Symbolic(expr.expr, self.simplifier).subs(mapping)

    def evaluate(self, expr: Symbolic, env: Optional[Dict[Union[Symbolic, str], Any]] = None) -> Any:
        return expr.evaluate(env)
