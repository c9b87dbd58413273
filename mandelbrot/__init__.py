"""
Mandelbrot rendering on an immutable complex-number core.

This library provides a small Complex value type with exact equality and
field arithmetic, and an escape-time renderer built on top of it for the
Mandelbrot set, Julia sets and Multibrot sets.

Example usage:
    >>> from mandelbrot import Complex, FractalRenderer, RenderConfig, MandelbrotSet
    >>> Complex(1, -1).divide(Complex(1, 1))
    Complex(0.0, -1.0)
    >>> renderer = FractalRenderer(RenderConfig(width=320, height=240))
    >>> image = renderer.render(MandelbrotSet())
"""

__version__ = "1.0.0"

from mandelbrot.core.complex_number import Complex, ComplexDivisionByZeroError
from mandelbrot.core.fractal_types import MandelbrotSet, JuliaSet, Multibrot, FractalRegistry
from mandelbrot.core.math_functions import ComplexPlane, FractalIterator
from mandelbrot.rendering.coloring import ColoringEngine, Palette, ColorIndicator
from mandelbrot.rendering.image_output import ImageExporter

from mandelbrot.api import FractalRenderer, RenderConfig

__all__ = [
    "Complex",
    "ComplexDivisionByZeroError",
    "ComplexPlane",
    "FractalIterator",
    "MandelbrotSet",
    "JuliaSet",
    "Multibrot",
    "FractalRegistry",
    "ColoringEngine",
    "Palette",
    "ColorIndicator",
    "ImageExporter",
    "FractalRenderer",
    "RenderConfig",
]
