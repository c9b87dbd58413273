"""
Core escape-time iteration built on the Complex value type.

This module maps image pixels onto the complex plane and runs the
escape-time loop used by Mandelbrot-family fractals, one Complex point at a
time, reading back moduli to decide when an orbit escapes.
"""

import numpy as np
from typing import Callable, Iterator, Optional, Tuple
import logging

from .complex_number import Complex, ZERO

logger = logging.getLogger(__name__)


class ComplexPlane:
    """Represents a complex plane region with coordinate mapping utilities."""

    def __init__(self, xmin: float, xmax: float, ymin: float, ymax: float,
                 width: int, height: int):
        """
        Initialize complex plane bounds and resolution.

        Args:
            xmin, xmax: Real axis bounds
            ymin, ymax: Imaginary axis bounds
            width, height: Image resolution in pixels
        """
        if xmin >= xmax or ymin >= ymax:
            raise ValueError("Invalid bounds: min values must be less than max values")
        if width <= 0 or height <= 0:
            raise ValueError("Width and height must be positive")

        self.xmin = xmin
        self.xmax = xmax
        self.ymin = ymin
        self.ymax = ymax
        self.width = width
        self.height = height

        self.x_scale = (xmax - xmin) / width
        self.y_scale = (ymax - ymin) / height

    @property
    def bounds(self) -> Tuple[float, float, float, float]:
        return (self.xmin, self.xmax, self.ymin, self.ymax)

    @property
    def center(self) -> Complex:
        return Complex((self.xmin + self.xmax) / 2, (self.ymin + self.ymax) / 2)

    def pixel_to_complex(self, px: int, py: int) -> Complex:
        """Convert pixel coordinates to a complex number."""
        return Complex(self.xmin + px * self.x_scale,
                       self.ymin + py * self.y_scale)

    def complex_to_pixel(self, c: Complex) -> Tuple[int, int]:
        """Convert a complex number to pixel coordinates."""
        px = int((c.real - self.xmin) / self.x_scale)
        py = int((c.imaginary - self.ymin) / self.y_scale)
        return px, py

    def points(self) -> Iterator[Tuple[int, int, Complex]]:
        """Iterate over every pixel as (px, py, complex coordinate)."""
        for py in range(self.height):
            for px in range(self.width):
                yield px, py, self.pixel_to_complex(px, py)

    def zoomed(self, center: Complex, factor: float) -> 'ComplexPlane':
        """
        Create a plane of the same resolution centered on a point.

        Args:
            center: New center of the view
            factor: Zoom factor, values above 1 zoom in
        """
        if factor <= 0:
            raise ValueError("Zoom factor must be positive")
        half_w = (self.xmax - self.xmin) / (2 * factor)
        half_h = (self.ymax - self.ymin) / (2 * factor)
        return ComplexPlane(center.real - half_w, center.real + half_w,
                            center.imaginary - half_h, center.imaginary + half_h,
                            self.width, self.height)


class IterationResult:
    """Container for fractal iteration results."""

    def __init__(self, iterations: np.ndarray, escaped: np.ndarray,
                 final_moduli: Optional[np.ndarray] = None):
        """
        Initialize iteration result.

        Args:
            iterations: Array of iteration counts
            escaped: Boolean array indicating which points escaped
            final_moduli: Modulus of the last orbit value (for smooth coloring)
        """
        self.iterations = iterations
        self.escaped = escaped
        self.final_moduli = final_moduli
        self.shape = iterations.shape

    def get_normalized_iterations(self, max_iter: int) -> np.ndarray:
        """Get continuous iteration counts for smooth coloring."""
        if self.final_moduli is None:
            return self.iterations.astype(np.float64)

        with np.errstate(divide='ignore', invalid='ignore'):
            log_zn = np.log(np.maximum(self.final_moduli, 1.0 + 1e-10))
            smooth_iter = self.iterations + 1 - np.log2(np.maximum(log_zn, 1e-10))
        smooth_iter = np.where(self.escaped, smooth_iter, max_iter)
        return np.clip(smooth_iter, 0, max_iter)


class FractalIterator:
    """Escape-time iteration over Complex values."""

    def __init__(self, max_iter: int = 1000, escape_radius: float = 2.0):
        """
        Initialize fractal iterator.

        Args:
            max_iter: Maximum number of iterations
            escape_radius: Radius for escape condition
        """
        if max_iter <= 0:
            raise ValueError("max_iter must be positive")
        if escape_radius <= 0:
            raise ValueError("escape_radius must be positive")

        self.max_iter = max_iter
        self.escape_radius = escape_radius
        self.escape_radius_sq = escape_radius ** 2

    def escape_time(self, z0: Complex,
                    step: Callable[[Complex], Complex]) -> Tuple[int, Complex]:
        """
        Iterate ``z = step(z)`` until the orbit leaves the escape radius.

        Args:
            z0: Starting value
            step: One iteration of the fractal formula

        Returns:
            Tuple of (iteration count, last orbit value). The count equals
            max_iter when the orbit never escaped.
        """
        z = z0
        n = 0
        while n < self.max_iter and z.squared_modulus() <= self.escape_radius_sq:
            z = step(z)
            n += 1
        return n, z

    def mandelbrot_escape(self, c: Complex, z0: Complex = ZERO) -> Tuple[int, Complex]:
        """Mandelbrot iteration: z = z^2 + c."""
        return self.escape_time(z0, lambda z: z.multiply(z).add(c))

    def julia_escape(self, z: Complex, c: Complex) -> Tuple[int, Complex]:
        """Julia iteration: z = z^2 + c with fixed c."""
        return self.escape_time(z, lambda w: w.multiply(w).add(c))

    def multibrot_escape(self, c: Complex, power: int) -> Tuple[int, Complex]:
        """Multibrot iteration: z = z^power + c."""
        return self.escape_time(ZERO, lambda z: z.pow(power).add(c))

    def has_escaped(self, z: Complex) -> bool:
        return z.squared_modulus() > self.escape_radius_sq

    def iterate_plane(self, plane: ComplexPlane,
                      escape: Callable[[Complex], Tuple[int, Complex]]) -> IterationResult:
        """
        Run an escape function for every point of a plane.

        Args:
            plane: Complex plane definition
            escape: Maps a point to (iteration count, last orbit value)

        Returns:
            IterationResult with iteration counts and escape information
        """
        iterations = np.zeros((plane.height, plane.width), dtype=np.int32)
        escaped = np.zeros((plane.height, plane.width), dtype=bool)
        final_moduli = np.zeros((plane.height, plane.width), dtype=np.float64)

        for px, py, point in plane.points():
            n, z = escape(point)
            iterations[py, px] = n
            escaped[py, px] = self.has_escaped(z)
            final_moduli[py, px] = z.modulus()

        logger.debug(f"Iterated {plane.width}x{plane.height} plane, "
                     f"{int(escaped.sum())} points escaped")

        return IterationResult(iterations, escaped, final_moduli)
