from __future__ import annotations
from fractions import Fraction

# Exact rational over Python's arbitrary-precision int. Fraction keeps the value
# in lowest terms with a positive denominator.
class Rational:
	__slots__ = ("_f",)
	def __init__(self, num: int | Fraction | Rational = 0, den: int | None = None) -> None:
		if isinstance(num, Rational):
			num = num._f
		if isinstance(num, Fraction):
			self._f = num if den is None else num / Rational._int_part(den)
		else:
			self._f = Fraction(Rational._int_part(num), 1 if den is None else Rational._int_part(den))
	@staticmethod
	def _int_part(v: object) -> int:
		if isinstance(v, bool) or not isinstance(v, int):
			raise TypeError(f"Rational needs integer parts, got {v!r}")
		return v
	@staticmethod
	def from_string(s: str) -> Rational:
		parts = s.strip().split("/")
		if len(parts) == 1:
			return Rational(int(parts[0]))
		if len(parts) == 2:
			return Rational(int(parts[0]), int(parts[1]))
		raise ValueError(f"Invalid rational literal {s!r}")
	@staticmethod
	def _coerce(other: object) -> Fraction | None:
		if isinstance(other, Rational):
			return other._f
		if isinstance(other, (int, Fraction)) and not isinstance(other, bool):
			return Fraction(other)
		return None
	def __add__(self, other: Rational | int) -> Rational:
		o = Rational._coerce(other)
		if o is None:
			return NotImplemented
		return Rational(self._f + o)
	__radd__ = __add__
	def __sub__(self, other: Rational | int) -> Rational:
		o = Rational._coerce(other)
		if o is None:
			return NotImplemented
		return Rational(self._f - o)
	def __rsub__(self, other: int) -> Rational:
		o = Rational._coerce(other)
		if o is None:
			return NotImplemented
		return Rational(o - self._f)
	def __mul__(self, other: Rational | int) -> Rational:
		o = Rational._coerce(other)
		if o is None:
			return NotImplemented
		return Rational(self._f * o)
	__rmul__ = __mul__
	def __truediv__(self, other: Rational | int) -> Rational:
		o = Rational._coerce(other)
		if o is None:
			return NotImplemented
		if o == 0:
			raise ZeroDivisionError("division by zero")
		return Rational(self._f / o)
	def __rtruediv__(self, other: int) -> Rational:
		o = Rational._coerce(other)
		if o is None:
			return NotImplemented
		return Rational(o) / self
	def __neg__(self) -> Rational:
		return Rational(-self._f)
	def __abs__(self) -> Rational:
		return Rational(abs(self._f))
	def __pow__(self, exp: int | Rational) -> Rational:
		if isinstance(exp, Rational):
			if not exp.is_int():
				raise TypeError(f"Non-integer exponent {exp}")
			exp = exp.to_int()
		elif isinstance(exp, bool) or not isinstance(exp, int):
			raise TypeError(f"Exponent must be an integer, got {exp!r}")
		if exp < 0:
			if self._f == 0:
				raise ZeroDivisionError("zero to a negative power")
			return Rational(1 / self._f) ** -exp
		# binary exponentiation
		ret = Fraction(1)
		base = self._f
		while exp != 0:
			if exp % 2 == 0:
				base = base * base
				exp //= 2
			else:
				ret = ret * base
				exp -= 1
		return Rational(ret)
	def cmp(self, other: Rational | int) -> int:
		o = Rational._coerce(other)
		if o is None:
			raise TypeError(f"Cannot compare Rational with {type(other).__name__}")
		return (self._f > o) - (self._f < o)
	def __eq__(self, other: object) -> bool:
		o = Rational._coerce(other)
		if o is None:
			return False
		return self._f == o
	def __hash__(self) -> int:
		return hash(self._f)
	def __lt__(self, other: Rational | int) -> bool:
		return self.cmp(other) < 0
	def __le__(self, other: Rational | int) -> bool:
		return self.cmp(other) <= 0
	def __gt__(self, other: Rational | int) -> bool:
		return self.cmp(other) > 0
	def __ge__(self, other: Rational | int) -> bool:
		return self.cmp(other) >= 0
	def __float__(self) -> float:
		return float(self._f)
	def is_zero(self) -> bool:
		return self._f == 0
	def is_one(self) -> bool:
		return self._f == 1
	def is_int(self) -> bool:
		return self._f.denominator == 1
	def sign(self) -> int:
		return (self._f > 0) - (self._f < 0)
	def to_int(self) -> int:
		return self._f.numerator // self._f.denominator
	def numerator(self) -> int:
		return self._f.numerator
	def denominator(self) -> int:
		return self._f.denominator
	def to_fraction(self) -> Fraction:
		return self._f
	def to_string(self) -> str:
		if self._f.denominator == 1:
			return str(self._f.numerator)
		return f"{self._f.numerator}/{self._f.denominator}"
	def __str__(self) -> str:
		return self.to_string()
	def __repr__(self) -> str:
		return f"Rational({self._f.numerator}, {self._f.denominator})"
