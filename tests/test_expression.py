"""Tests for expression nodes, projections and rendering."""

import pytest
from expression import (
    Function,
    Kind,
    Number,
    Power,
    Product,
    Sum,
    Symbol,
    Undefined,
    base,
    constant,
    exponent,
    free_symbols,
    precedence,
    substitute,
    term,
    unpack_power,
    unpack_term,
)
from rational import Rational

x, y, z = Symbol("x"), Symbol("y"), Symbol("z")


class TestNodes:
    """Structure of the node kinds."""

    def test_number_coerces_value(self):
        assert Number(3).value == Rational(3)
        assert Number(Rational(6, 4)) == Number(Rational(3, 2))

    def test_kind_ranks(self):
        assert Kind.NUMBER < Kind.PRODUCT < Kind.POWER < Kind.SUM
        assert Kind.SUM < Kind.FUNCTION < Kind.SYMBOL < Kind.UNDEFINED
        assert Power(x, y).kind == Kind.POWER

    def test_children(self):
        assert Power(x, Number(2)).children == [x, Number(2)]
        assert Function("f", [x, y]).children == [x, y]
        assert Number(1).children == []
        assert Undefined().children == []

    def test_structural_equality(self):
        assert Sum([x, y]) == Sum([Symbol("x"), Symbol("y")])
        assert Sum([x, y]) != Sum([y, x])
        assert Sum([x, y]) != Product([x, y])
        assert Undefined() == Undefined()

    def test_copy_is_deep(self):
        original = Sum([Product([Number(2), x]), Function("f", [y])])
        clone = original.copy()
        assert clone == original
        assert clone is not original
        assert clone.children[0] is not original.children[0]
        clone.children[0].children.append(z)
        assert original.children[0] == Product([Number(2), x])

    def test_with_children(self):
        assert Power(x, y).with_children([y, x]) == Power(y, x)
        assert Function("f", [x]).with_children([z]) == Function("f", [z])


class TestProjections:
    """base, exponent, term and constant."""

    def test_base_exponent_of_power(self):
        p = Power(x, Number(3))
        assert base(p) == x
        assert exponent(p) == Number(3)

    def test_base_exponent_default(self):
        assert base(x) == x
        assert exponent(x) == Number(1)
        assert exponent(Sum([x, y])) == Number(1)

    def test_term_constant_of_product(self):
        p = Product([Number(2), x, y])
        assert term(p) == Product([x, y])
        assert constant(p) == Number(2)

    def test_term_single_remaining_factor(self):
        assert term(Product([Number(5), x])) == x

    def test_term_constant_default(self):
        assert term(x) == x
        assert constant(x) == Number(1)
        p = Product([x, y])
        assert term(p) == p
        assert constant(p) == Number(1)

    def test_term_of_number_is_undefined(self):
        assert term(Number(4)) == Undefined()

    def test_projections_copy(self):
        p = Power(x, Number(3))
        assert base(p) is not p.base

    def test_unpack_term(self):
        c, t = unpack_term(Product([Number(-3), x, z]))
        assert c == Number(-3)
        assert t == Product([x, z])
        c, t = unpack_term(y)
        assert c == Number(1)
        assert t == y

    def test_unpack_power(self):
        b, e = unpack_power(Power(x, y))
        assert (b, e) == (x, y)
        b, e = unpack_power(z)
        assert (b, e) == (z, Number(1))


class TestRendering:
    """str() and repr()."""

    def test_precedence_table(self):
        assert precedence(Kind.SUM) < precedence(Kind.PRODUCT) < precedence(Kind.POWER)
        assert precedence(Kind.POWER) < precedence(Kind.SYMBOL)

    def test_leaves(self):
        assert str(Number(Rational(3, 4))) == "3/4"
        assert str(x) == "x"
        assert str(Undefined()) == "<Undefined>"

    def test_sum(self):
        assert str(Sum([x, y])) == "x+y"
        assert str(Sum([x, Product([Number(-1), y])])) == "x-y"

    def test_product_parenthesizes_sum(self):
        assert str(Product([Sum([x, y]), z])) == "(x+y)*z"

    def test_leading_minus_one(self):
        assert str(Product([Number(-1), x])) == "-x"
        assert str(Product([Number(-1), x, y])) == "-x*y"
        assert str(Product([Number(-2), x])) == "-2*x"

    def test_power(self):
        assert str(Power(x, Number(2))) == "x^2"
        assert str(Power(Sum([x, y]), Number(2))) == "(x+y)^2"
        assert str(Power(Product([x, y]), z)) == "(x*y)^z"

    def test_power_parenthesizes_signed_and_fractional_numbers(self):
        half = Number(Rational(1, 2))
        assert str(Power(Number(-2), half)) == "(-2)^(1/2)"
        assert str(Power(x, Number(-1))) == "x^(-1)"
        assert str(Power(Number(2), Number(3))) == "2^3"

    def test_function(self):
        assert str(Function("f", [x, Sum([y, z])])) == "f(x, y+z)"

    def test_repr(self):
        assert repr(Sum([x, y])) == "Sum(x, y)"
        assert repr(Power(x, Number(2))) == "Power(x, 2)"
        assert repr(Product([Number(2), x])) == "Product(2, x)"
        assert repr(Function("f", [x])) == "Function(f)(x)"


class TestTreeUtilities:
    """substitute and free_symbols."""

    def test_substitute(self):
        e = Sum([Power(x, Number(2)), y])
        out = substitute(e, {"x": Number(3)})
        assert out == Sum([Power(Number(3), Number(2)), y])
        assert e == Sum([Power(x, Number(2)), y])

    def test_free_symbols(self):
        e = Function("f", [Product([x, Power(y, z)]), Number(1)])
        assert free_symbols(e) == {"x", "y", "z"}
        assert free_symbols(Number(2)) == set()
