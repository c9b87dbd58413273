"""
Floating-point comparison helpers shared by the complex arithmetic core.
"""

import math

EPSILON = 1e-9


def double_compare(a: float, b: float) -> int:
    """
    Three-way exact comparison of two floats.

    Signed zeros compare equal. NaN is equal to itself and greater than any
    other value, so ordering stays total.

    Returns:
        -1, 0 or 1
    """
    a_nan = math.isnan(a)
    b_nan = math.isnan(b)
    if a_nan or b_nan:
        return int(a_nan) - int(b_nan)
    if a < b:
        return -1
    if a > b:
        return 1
    return 0


def is_close(a, b, eps: float = EPSILON) -> bool:
    """Check two complex values are within eps of each other on both axes."""
    return (abs(a.real - b.real) <= eps and
            abs(a.imaginary - b.imaginary) <= eps)
