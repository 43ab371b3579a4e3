"""
Error taxonomy for the symbolic kernel.

Division by a zero rational is not listed here: Rational raises the built-in
ZeroDivisionError, which is already an ArithmeticError.
"""


class SymbolicError(Exception):
    """Base class for errors raised while building or simplifying expressions."""


class InvalidArgument(SymbolicError, ValueError):
    """Wrong arity or wrong kind of argument passed to a function rule."""


class UnsupportedOperation(SymbolicError, NotImplementedError):
    """A recognised case that has no algorithm, e.g. d/dx of x^x."""


class InvariantViolation(SymbolicError, RuntimeError):
    """An expression kind combination that should never be reached."""
