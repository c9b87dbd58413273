"""
Coloring algorithms and palette management for fractal rendering.

This module provides escape-time, smooth and histogram coloring, palette
interpolation and the color-swatch model used to edit a palette.
"""

import numpy as np
from typing import Dict, List, Tuple, Union, Optional
from dataclasses import dataclass
from abc import ABC, abstractmethod
import logging
from pathlib import Path

import matplotlib

from ..core.math_functions import IterationResult

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ColorRGB:
    """RGB color representation."""
    r: float
    g: float
    b: float

    def __post_init__(self):
        """Validate RGB values."""
        for component in (self.r, self.g, self.b):
            if not 0 <= component <= 1:
                raise ValueError("RGB components must be between 0 and 1")

    def to_tuple(self) -> Tuple[float, float, float]:
        return (self.r, self.g, self.b)

    def to_uint8_tuple(self) -> Tuple[int, int, int]:
        """Convert to 8-bit RGB tuple."""
        return (int(round(self.r * 255)), int(round(self.g * 255)), int(round(self.b * 255)))

    @classmethod
    def from_hex(cls, value: str) -> 'ColorRGB':
        """Parse '#rrggbb'."""
        value = value.lstrip('#')
        if len(value) != 6:
            raise ValueError(f"Invalid hex color: #{value}")
        try:
            r, g, b = (int(value[i:i + 2], 16) for i in (0, 2, 4))
        except ValueError as e:
            raise ValueError(f"Invalid hex color: #{value}") from e
        return cls(r / 255.0, g / 255.0, b / 255.0)


RED = ColorRGB(1.0, 0.0, 0.0)
BLACK = ColorRGB(0.0, 0.0, 0.0)


class Palette:
    """Color palette management and interpolation."""

    def __init__(self, colors: List[Union[ColorRGB, Tuple[float, float, float]]],
                 name: str = "Custom"):
        """
        Initialize color palette.

        Args:
            colors: List of colors in the palette
            name: Human-readable name for the palette
        """
        self.name = name
        self.colors = []

        for color in colors:
            if isinstance(color, ColorRGB):
                self.colors.append(color)
            elif isinstance(color, (tuple, list)) and len(color) == 3:
                self.colors.append(ColorRGB(*color))
            else:
                raise ValueError(f"Invalid color format: {color}")

        if len(self.colors) < 2:
            raise ValueError("Palette must contain at least 2 colors")

    def interpolate(self, t: Union[float, np.ndarray]) -> Union[ColorRGB, np.ndarray]:
        """
        Interpolate color at position t (0-1).

        Args:
            t: Position in palette (0-1) or array of positions

        Returns:
            Interpolated color, or an array with a trailing RGB axis
        """
        if isinstance(t, (int, float)):
            rgb = self._interpolate_array(np.array(float(t)))
            return ColorRGB(*(float(np.clip(v, 0.0, 1.0)) for v in rgb))
        return self._interpolate_array(np.asarray(t, dtype=np.float64))

    def _interpolate_array(self, t: np.ndarray) -> np.ndarray:
        t = np.clip(t, 0.0, 1.0)
        stops = np.linspace(0.0, 1.0, len(self.colors))
        channels = np.array([c.to_tuple() for c in self.colors])
        return np.stack([np.interp(t, stops, channels[:, i]) for i in range(3)], axis=-1)

    @classmethod
    def from_matplotlib(cls, cmap_name: str, n_samples: int = 32) -> 'Palette':
        """Create palette from a matplotlib colormap."""
        cmap = matplotlib.colormaps[cmap_name]
        colors = [ColorRGB(*(float(v) for v in cmap(t)[:3]))
                  for t in np.linspace(0, 1, n_samples)]
        return cls(colors, name=f"From_{cmap_name}")

    def save_to_file(self, filepath: Path) -> None:
        """Save palette to file in GPL format."""
        with open(filepath, 'w') as f:
            f.write("GIMP Palette\n")
            f.write(f"Name: {self.name}\n")
            f.write("#\n")

            for i, color in enumerate(self.colors):
                r, g, b = color.to_uint8_tuple()
                f.write(f"{r:3d} {g:3d} {b:3d} Color_{i}\n")

    @classmethod
    def load_from_file(cls, filepath: Path) -> 'Palette':
        """Load palette from GPL file."""
        colors = []
        name = "Loaded_Palette"

        with open(filepath, 'r') as f:
            for line in f:
                line = line.strip()
                if line.startswith("Name:"):
                    name = line.split(":", 1)[1].strip()
                elif line and not line.startswith("#") and not line.startswith("GIMP"):
                    parts = line.split()
                    if len(parts) >= 3:
                        try:
                            r, g, b = int(parts[0]), int(parts[1]), int(parts[2])
                        except ValueError:
                            continue
                        colors.append(ColorRGB(r / 255.0, g / 255.0, b / 255.0))

        if not colors:
            raise ValueError(f"No valid colors found in {filepath}")

        return cls(colors, name)


class ColorIndicator:
    """
    Swatch model for editing a list of colors.

    Each displayed swatch i is filled with colors[i]; the selected swatch is
    outlined in red, others are outlined with their own color. Custom colors
    overwrite the selected swatch and move the selection forward.
    """

    def __init__(self, colors: List[ColorRGB]):
        if not colors:
            raise ValueError("ColorIndicator needs at least one color")
        self.colors = list(colors)
        self.selected = 0

    def _wrap_selection(self) -> None:
        if not self.colors:
            raise ValueError("ColorIndicator colors list is empty")
        self.selected = self.selected % len(self.colors)

    def swatches(self) -> List[Tuple[ColorRGB, ColorRGB]]:
        """(fill, outline) for each swatch."""
        self._wrap_selection()
        return [(color, RED if i == self.selected else color)
                for i, color in enumerate(self.colors)]

    def add_custom_color(self, color: ColorRGB) -> None:
        self._wrap_selection()
        self.colors[self.selected] = color
        self.selected += 1
        logger.debug(f"Custom color {color.to_uint8_tuple()} set, selection at {self.selected}")

    def to_color_array(self) -> List[ColorRGB]:
        return list(self.colors)

    def to_palette(self, name: str = "Custom") -> Palette:
        return Palette(self.colors, name=name)


class ColoringAlgorithm(ABC):
    """Abstract base class for coloring algorithms."""

    @abstractmethod
    def normalize(self, result: IterationResult, max_iter: int) -> np.ndarray:
        """Map iteration data to palette positions in [0, 1]."""

    def apply(self, result: IterationResult, palette: Palette,
              max_iter: int = 1000, inside_color: Optional[ColorRGB] = None) -> np.ndarray:
        """
        Apply coloring algorithm to iteration result.

        Args:
            result: Fractal iteration result
            palette: Color palette to use
            max_iter: Maximum iterations for normalization
            inside_color: Color for points that didn't escape

        Returns:
            RGB image array (height, width, 3)
        """
        if inside_color is None:
            inside_color = BLACK

        rgb_image = palette.interpolate(self.normalize(result, max_iter))

        mask = ~result.escaped
        if np.any(mask):
            rgb_image[mask] = inside_color.to_tuple()

        return rgb_image


class EscapeTimeColoring(ColoringAlgorithm):
    """Basic escape-time coloring algorithm."""

    def normalize(self, result: IterationResult, max_iter: int) -> np.ndarray:
        return result.iterations.astype(np.float64) / max_iter


class SmoothColoring(ColoringAlgorithm):
    """Smooth/continuous coloring using the final orbit modulus."""

    def normalize(self, result: IterationResult, max_iter: int) -> np.ndarray:
        if result.final_moduli is None:
            logger.warning("No final moduli available, falling back to escape-time coloring")
            return EscapeTimeColoring().normalize(result, max_iter)
        return result.get_normalized_iterations(max_iter) / max_iter


class HistogramColoring(ColoringAlgorithm):
    """Histogram equalization coloring for better contrast."""

    def normalize(self, result: IterationResult, max_iter: int) -> np.ndarray:
        escaped_iterations = result.iterations[result.escaped]
        equalized = np.zeros(result.shape, dtype=np.float64)
        if escaped_iterations.size == 0:
            return equalized

        hist, _ = np.histogram(escaped_iterations, bins=max_iter + 1, range=(0, max_iter + 1))
        cdf = np.cumsum(hist).astype(np.float64)
        cdf /= cdf[-1]

        indices = np.clip(result.iterations, 0, max_iter)
        equalized[result.escaped] = cdf[indices[result.escaped]]
        return equalized


class ColoringEngine:
    """Main engine for applying coloring algorithms."""

    def __init__(self):
        """Initialize coloring engine with built-in algorithms."""
        self.algorithms: Dict[str, ColoringAlgorithm] = {
            'escape_time': EscapeTimeColoring(),
            'smooth': SmoothColoring(),
            'histogram': HistogramColoring(),
        }

        self.palettes = self._create_builtin_palettes()

    def _create_builtin_palettes(self) -> Dict[str, Palette]:
        """Create built-in color palettes."""
        palettes = {}

        palettes['hot'] = Palette([
            ColorRGB(0, 0, 0),      # Black
            ColorRGB(1, 0, 0),      # Red
            ColorRGB(1, 1, 0),      # Yellow
            ColorRGB(1, 1, 1),      # White
        ], name="Hot")

        palettes['cool'] = Palette([
            ColorRGB(0, 0, 0),      # Black
            ColorRGB(0, 0, 1),      # Blue
            ColorRGB(0, 1, 1),      # Cyan
            ColorRGB(1, 1, 1),      # White
        ], name="Cool")

        palettes['gray'] = Palette([
            ColorRGB(0, 0, 0),
            ColorRGB(1, 1, 1),
        ], name="Grayscale")

        palettes['ocean'] = Palette([
            ColorRGB(0, 0, 0.2),        # Deep blue
            ColorRGB(0, 0, 0.8),        # Blue
            ColorRGB(0, 0.5, 1),        # Light blue
            ColorRGB(0, 1, 1),          # Cyan
            ColorRGB(1, 1, 1),          # White
        ], name="Ocean")

        for name in ('viridis', 'inferno', 'magma'):
            try:
                palettes[name] = Palette.from_matplotlib(name, 32)
            except KeyError as e:
                logger.warning(f"Could not load matplotlib palette {name}: {e}")

        return palettes

    def add_algorithm(self, name: str, algorithm: ColoringAlgorithm) -> None:
        """Add a custom coloring algorithm."""
        self.algorithms[name] = algorithm
        logger.info(f"Added coloring algorithm: {name}")

    def add_palette(self, name: str, palette: Palette) -> None:
        """Add a custom color palette."""
        self.palettes[name] = palette
        logger.info(f"Added color palette: {name}")

    def get_algorithm(self, name: str) -> ColoringAlgorithm:
        if name not in self.algorithms:
            available = ', '.join(self.algorithms.keys())
            raise ValueError(f"Unknown coloring algorithm '{name}'. Available: {available}")
        return self.algorithms[name]

    def get_palette(self, name: str) -> Palette:
        if name not in self.palettes:
            available = ', '.join(self.palettes.keys())
            raise ValueError(f"Unknown color palette '{name}'. Available: {available}")
        return self.palettes[name]

    def render_color_image(self, result: IterationResult, algorithm: str = 'smooth',
                           palette: str = 'hot', max_iter: int = 1000,
                           inside_color: Optional[ColorRGB] = None) -> np.ndarray:
        """
        Render colored image from iteration result.

        Returns:
            RGB image array (height, width, 3) with values 0-1
        """
        coloring_alg = self.get_algorithm(algorithm)
        color_palette = self.get_palette(palette)

        return coloring_alg.apply(result, color_palette, max_iter, inside_color)

    def list_algorithms(self) -> List[str]:
        return list(self.algorithms.keys())

    def list_palettes(self) -> List[str]:
        return list(self.palettes.keys())
