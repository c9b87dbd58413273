"""
Fractal type definitions and parameter management.

This module defines the escape-time fractals as configurable classes,
providing a registry so fractals can be created by name.
"""

from typing import Dict, Any, Optional, Tuple
from abc import ABC, abstractmethod
from dataclasses import dataclass
import logging

from .complex_number import Complex
from .math_functions import FractalIterator, IterationResult, ComplexPlane

logger = logging.getLogger(__name__)


@dataclass
class FractalParameters:
    """Base class for fractal parameters with validation."""

    def validate(self) -> None:
        """Validate parameter values."""
        pass

    def to_dict(self) -> Dict[str, Any]:
        """Convert parameters to dictionary."""
        return {k: v for k, v in self.__dict__.items() if not k.startswith('_')}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'FractalParameters':
        """Create parameters from dictionary."""
        return cls(**data)


class FractalType(ABC):
    """Abstract base class for fractal types."""

    def __init__(self, name: str, parameters: FractalParameters):
        """
        Initialize fractal type.

        Args:
            name: Human-readable name for the fractal
            parameters: Fractal-specific parameters
        """
        self.name = name
        self.parameters = parameters
        self.parameters.validate()

    @abstractmethod
    def escape(self, point: Complex, iterator: FractalIterator) -> Tuple[int, Complex]:
        """Escape-time iteration for a single plane coordinate."""

    def compute(self, plane: ComplexPlane, iterator: FractalIterator) -> IterationResult:
        """
        Compute fractal iterations for the given complex plane.

        Args:
            plane: Complex plane definition
            iterator: Fractal iterator instance

        Returns:
            IterationResult containing iteration data
        """
        return iterator.iterate_plane(plane, lambda point: self.escape(point, iterator))

    @abstractmethod
    def get_recommended_bounds(self) -> Tuple[float, float, float, float]:
        """Get recommended viewing bounds (xmin, xmax, ymin, ymax)."""

    def get_description(self) -> str:
        """Get a description of this fractal type."""
        return f"{self.name} fractal"


def _check_numeric(value: Any, name: str) -> None:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"{name} must be numeric")


@dataclass
class MandelbrotParameters(FractalParameters):
    """Parameters for Mandelbrot set generation."""

    z0_real: float = 0.0
    z0_imag: float = 0.0

    def validate(self) -> None:
        _check_numeric(self.z0_real, "z0_real")
        _check_numeric(self.z0_imag, "z0_imag")

    @property
    def z0(self) -> Complex:
        return Complex(self.z0_real, self.z0_imag)


class MandelbrotSet(FractalType):
    """Mandelbrot set fractal implementation."""

    def __init__(self, parameters: Optional[MandelbrotParameters] = None):
        if parameters is None:
            parameters = MandelbrotParameters()
        super().__init__("Mandelbrot", parameters)

    def escape(self, point: Complex, iterator: FractalIterator) -> Tuple[int, Complex]:
        return iterator.mandelbrot_escape(point, self.parameters.z0)

    def get_recommended_bounds(self) -> Tuple[float, float, float, float]:
        return (-2.5, 1.0, -1.25, 1.25)

    def get_description(self) -> str:
        return ("Mandelbrot set: z_{n+1} = z_n^2 + c, where c is the complex coordinate "
                f"and z_0 = {self.parameters.z0}")


@dataclass
class JuliaParameters(FractalParameters):
    """Parameters for Julia set generation."""

    c_real: float = -0.75
    c_imag: float = 0.1

    def validate(self) -> None:
        _check_numeric(self.c_real, "c_real")
        _check_numeric(self.c_imag, "c_imag")

    @property
    def c(self) -> Complex:
        """Get the Julia constant as a complex number."""
        return Complex(self.c_real, self.c_imag)


class JuliaSet(FractalType):
    """Julia set fractal implementation."""

    def __init__(self, parameters: Optional[JuliaParameters] = None):
        if parameters is None:
            parameters = JuliaParameters()
        super().__init__("Julia", parameters)

    def escape(self, point: Complex, iterator: FractalIterator) -> Tuple[int, Complex]:
        return iterator.julia_escape(point, self.parameters.c)

    def get_recommended_bounds(self) -> Tuple[float, float, float, float]:
        return (-2.0, 2.0, -2.0, 2.0)

    def get_description(self) -> str:
        return (f"Julia set: z_{{n+1}} = z_n^2 + c, where c = {self.parameters.c} "
                "and z_0 is the complex coordinate")


@dataclass
class MultibrotParameters(FractalParameters):
    """Parameters for Multibrot set generation."""

    power: int = 3

    def validate(self) -> None:
        if isinstance(self.power, bool) or not isinstance(self.power, int):
            raise ValueError("power must be an integer")
        if self.power < 2:
            raise ValueError("power must be at least 2")


class Multibrot(FractalType):
    """Multibrot set: the Mandelbrot iteration with a higher integer power."""

    def __init__(self, parameters: Optional[MultibrotParameters] = None):
        if parameters is None:
            parameters = MultibrotParameters()
        super().__init__("Multibrot", parameters)

    def escape(self, point: Complex, iterator: FractalIterator) -> Tuple[int, Complex]:
        return iterator.multibrot_escape(point, self.parameters.power)

    def get_recommended_bounds(self) -> Tuple[float, float, float, float]:
        return (-1.5, 1.5, -1.5, 1.5)

    def get_description(self) -> str:
        return (f"Multibrot set: z_{{n+1}} = z_n^{self.parameters.power} + c, "
                "where c is the complex coordinate")


class FractalRegistry:
    """Registry of available fractal types."""

    _fractals: Dict[str, type] = {
        'mandelbrot': MandelbrotSet,
        'julia': JuliaSet,
        'multibrot': Multibrot,
    }

    _parameters: Dict[str, type] = {
        'mandelbrot': MandelbrotParameters,
        'julia': JuliaParameters,
        'multibrot': MultibrotParameters,
    }

    @classmethod
    def register(cls, name: str, fractal_class: type,
                 parameter_class: Optional[type] = None) -> None:
        """
        Register a new fractal type.

        Args:
            name: Name to register the fractal under
            fractal_class: Class implementing the fractal
            parameter_class: Parameters dataclass accepted by the fractal
        """
        if not issubclass(fractal_class, FractalType):
            raise ValueError("Fractal class must inherit from FractalType")
        cls._fractals[name.lower()] = fractal_class
        if parameter_class is not None:
            cls._parameters[name.lower()] = parameter_class
        logger.info(f"Registered fractal type: {name}")

    @classmethod
    def get(cls, name: str) -> type:
        """Get a fractal class by name."""
        fractal_class = cls._fractals.get(name.lower())
        if fractal_class is None:
            available = ', '.join(cls._fractals.keys())
            raise ValueError(f"Unknown fractal type '{name}'. Available: {available}")
        return fractal_class

    @classmethod
    def list_fractals(cls) -> Dict[str, str]:
        """Map registered names to descriptions."""
        return {name: fractal_class().get_description()
                for name, fractal_class in cls._fractals.items()}

    @classmethod
    def create_fractal(cls, name: str, **kwargs) -> FractalType:
        """
        Create a fractal instance by name.

        Args:
            name: Registered fractal name
            **kwargs: Fields of the fractal's parameters dataclass
        """
        fractal_class = cls.get(name)
        if not kwargs:
            return fractal_class()

        param_class = cls._parameters.get(name.lower())
        if param_class is None:
            raise ValueError(f"Fractal type '{name}' takes no parameters")
        try:
            parameters = param_class(**kwargs)
        except TypeError as e:
            raise ValueError(f"Invalid parameters for '{name}': {e}") from e
        return fractal_class(parameters)


JULIA_PRESETS: Dict[str, JuliaParameters] = {
    'classic': JuliaParameters(-0.75, 0.1),
    'dendrite': JuliaParameters(0.0, 1.0),
    'rabbit': JuliaParameters(-0.123, 0.745),
    'dragon': JuliaParameters(-0.8, 0.156),
    'siegel': JuliaParameters(-0.391, -0.587),
}
