"""
Immutable complex numbers and their arithmetic.

Every operation returns a new value; instances are never mutated after
construction. Equality is exact on both components.
"""

import math
import numbers
from dataclasses import dataclass
from typing import Union

from .helpers import double_compare


class ComplexDivisionByZeroError(ZeroDivisionError):
    """Raised when dividing by, or taking the reciprocal of, complex zero."""


@dataclass(frozen=True, eq=False, repr=False)
class Complex:
    """A complex number ``real + imaginary * i``."""

    real: float
    imaginary: float

    def __post_init__(self):
        object.__setattr__(self, 'real', float(self.real))
        object.__setattr__(self, 'imaginary', float(self.imaginary))

    # Construction

    @classmethod
    def rotation(cls, radians: float) -> 'Complex':
        """
        Unit complex number at the given angle.

        Args:
            radians: Counterclockwise angle from the positive real axis

        Returns:
            A complex whose multiplication rotates by ``radians``
        """
        return cls(math.cos(radians), math.sin(radians))

    @classmethod
    def from_real(cls, real: float) -> 'Complex':
        """The complex ``real + 0i``."""
        return cls(real, 0.0)

    @classmethod
    def from_complex(cls, value: complex) -> 'Complex':
        """Convert a builtin complex."""
        return cls(value.real, value.imag)

    # Arithmetic

    def add(self, addend: 'Complex') -> 'Complex':
        return Complex(self.real + addend.real, self.imaginary + addend.imaginary)

    def negate(self) -> 'Complex':
        """A complex ``c`` such that ``self + c == 0``."""
        return Complex(-self.real, -self.imaginary)

    def conjugate(self) -> 'Complex':
        """A complex ``c`` such that ``self * c == |self| ** 2``."""
        return Complex(self.real, -self.imaginary)

    def subtract(self, subtrahend: 'Complex') -> 'Complex':
        return Complex(self.real - subtrahend.real,
                       self.imaginary - subtrahend.imaginary)

    def multiply(self, factor: 'Complex') -> 'Complex':
        return Complex(
            self.real * factor.real - self.imaginary * factor.imaginary,
            self.real * factor.imaginary + self.imaginary * factor.real
        )

    def scale(self, factor: float) -> 'Complex':
        """Multiply both components by a real scalar."""
        return Complex(factor * self.real, factor * self.imaginary)

    def squared_modulus(self) -> float:
        return self.real * self.real + self.imaginary * self.imaginary

    def modulus(self) -> float:
        """Distance to zero."""
        return math.sqrt(self.squared_modulus())

    def reciprocal(self) -> 'Complex':
        """
        Multiplicative inverse.

        Raises:
            ComplexDivisionByZeroError: If self is exactly zero
        """
        if self == ZERO:
            raise ComplexDivisionByZeroError("divide by zero")
        squared = self.squared_modulus()
        # squared modulus of a tiny nonzero value may underflow to 0.0
        inverse = math.inf if squared == 0.0 else 1.0 / squared
        return self.conjugate().scale(inverse)

    def divide(self, divisor: 'Complex') -> 'Complex':
        """
        Divide by another complex.

        Raises:
            ComplexDivisionByZeroError: If divisor is exactly zero
        """
        return self.multiply(divisor.reciprocal())

    def pow(self, p: int) -> 'Complex':
        """
        Integral power by repeated squaring.

        Args:
            p: A non-negative integer

        Returns:
            ``self ** p``; ``ONE`` when p is 0, including for ``ZERO``

        Raises:
            TypeError: If p is not an integer
            ValueError: If p is negative
        """
        if isinstance(p, bool) or not isinstance(p, numbers.Integral):
            raise TypeError(f"Exponent must be an integer, got {p!r}")
        if p < 0:
            raise ValueError(f"Exponent must be non-negative, got {p}")
        if p == 0:
            return ONE
        result = self.multiply(self).pow(p // 2)
        if p % 2 == 1:
            result = result.multiply(self)
        return result

    # Operator protocol

    def __add__(self, other):
        if not isinstance(other, Complex):
            return NotImplemented
        return self.add(other)

    def __sub__(self, other):
        if not isinstance(other, Complex):
            return NotImplemented
        return self.subtract(other)

    def __mul__(self, other):
        if isinstance(other, Complex):
            return self.multiply(other)
        if isinstance(other, (int, float)) and not isinstance(other, bool):
            return self.scale(other)
        return NotImplemented

    def __rmul__(self, other):
        if isinstance(other, (int, float)) and not isinstance(other, bool):
            return self.scale(other)
        return NotImplemented

    def __truediv__(self, other):
        if not isinstance(other, Complex):
            return NotImplemented
        return self.divide(other)

    def __neg__(self):
        return self.negate()

    def __pow__(self, p):
        if not isinstance(p, int):
            return NotImplemented
        return self.pow(p)

    def __abs__(self):
        return self.modulus()

    def __complex__(self):
        return complex(self.real, self.imaginary)

    # Value semantics

    def __eq__(self, other):
        if self is other:
            return True
        if other is None or type(other) is not type(self):
            return False
        return (double_compare(other.real, self.real) == 0 and
                double_compare(other.imaginary, self.imaginary) == 0)

    def __ne__(self, other):
        return not self.__eq__(other)

    def __hash__(self):
        return hash((_hash_key(self.real), _hash_key(self.imaginary)))

    def __str__(self):
        return f"Complex{{real={self.real!r}, imaginary={self.imaginary!r}}}"

    def __repr__(self):
        return f"Complex({self.real!r}, {self.imaginary!r})"


def _hash_key(value: float) -> Union[float, str]:
    # NaN hashes by identity, and double_compare treats all NaNs as equal
    if math.isnan(value):
        return 'nan'
    return value


ZERO = Complex(0.0, 0.0)
ONE = Complex(1.0, 0.0)
I = Complex(0.0, 1.0)

Complex.ZERO = ZERO
Complex.ONE = ONE
Complex.I = I
