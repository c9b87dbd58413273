"""
Main API classes for fractal generation.

This module provides the high-level interface for rendering, combining the
complex plane, the escape-time iterator, coloring and image export.
"""

import numpy as np
from typing import Optional, Dict, Any, Tuple
from dataclasses import dataclass, asdict, fields
from pathlib import Path
import json
import logging
import time

from .core.fractal_types import FractalType
from .core.math_functions import FractalIterator, ComplexPlane
from .rendering.coloring import ColoringEngine, ColorRGB
from .rendering.image_output import ImageExporter, RenderMetadata

logger = logging.getLogger(__name__)


@dataclass
class RenderConfig:
    """Configuration for fractal rendering."""

    # Image parameters
    width: int = 640
    height: int = 480
    bounds: Tuple[float, float, float, float] = (-2.5, 1.0, -1.25, 1.25)  # xmin, xmax, ymin, ymax

    # Fractal parameters
    max_iterations: int = 256
    escape_radius: float = 2.0

    # Coloring
    coloring_algorithm: str = 'smooth'
    color_palette: str = 'hot'
    inside_color: Optional[Tuple[float, float, float]] = None

    # Output
    jpeg_quality: int = 95
    save_metadata: bool = True

    def validate(self):
        """Validate configuration parameters."""
        if self.width <= 0 or self.height <= 0:
            raise ValueError("Width and height must be positive")

        if self.max_iterations <= 0:
            raise ValueError("max_iterations must be positive")

        if self.escape_radius <= 0:
            raise ValueError("escape_radius must be positive")

        if len(self.bounds) != 4:
            raise ValueError("bounds must be (xmin, xmax, ymin, ymax)")

        xmin, xmax, ymin, ymax = self.bounds
        if xmin >= xmax or ymin >= ymax:
            raise ValueError("Invalid bounds: min values must be less than max")

        if not 1 <= self.jpeg_quality <= 100:
            raise ValueError("jpeg_quality must be between 1 and 100")

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'RenderConfig':
        """Create a config from a dictionary, rejecting unknown keys."""
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            raise ValueError(f"Unknown render config keys: {', '.join(sorted(unknown))}")

        data = dict(data)
        if 'bounds' in data:
            data['bounds'] = tuple(data['bounds'])
        if data.get('inside_color') is not None:
            data['inside_color'] = tuple(data['inside_color'])
        return cls(**data)

    @classmethod
    def from_file(cls, filepath: Path) -> Tuple['RenderConfig', Dict[str, Dict[str, Any]]]:
        """
        Load a JSON config file.

        The file holds render settings under "render" and per-fractal
        parameters under "fractals".

        Returns:
            Tuple of (render config, fractal parameter mapping)
        """
        filepath = Path(filepath)
        try:
            data = json.loads(filepath.read_text())
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid config file {filepath}: {e}") from e
        if not isinstance(data, dict):
            raise ValueError(f"Invalid config file {filepath}: top level must be an object")

        config = cls.from_dict(data.get('render', {}))
        logger.info(f"Loaded configuration from {filepath}")
        return config, data.get('fractals', {})


class FractalRenderer:
    """Main fractal rendering engine."""

    def __init__(self, config: Optional[RenderConfig] = None):
        """
        Initialize fractal renderer.

        Args:
            config: Rendering configuration (uses defaults if None)
        """
        self.config = config or RenderConfig()
        self.config.validate()

        self.coloring_engine = ColoringEngine()
        self.image_exporter = ImageExporter()

        logger.info(f"FractalRenderer initialized: {self.config.width}x{self.config.height}")

    def make_plane(self) -> ComplexPlane:
        return ComplexPlane(*self.config.bounds, self.config.width, self.config.height)

    def make_iterator(self) -> FractalIterator:
        return FractalIterator(max_iter=self.config.max_iterations,
                               escape_radius=self.config.escape_radius)

    def render(self, fractal: FractalType, output_path: Optional[Path] = None) -> np.ndarray:
        """
        Render fractal to image.

        Args:
            fractal: Fractal type to render
            output_path: Optional output file path

        Returns:
            RGB image array (0-1 range)
        """
        start_time = time.time()

        logger.info(f"Starting render: {fractal.name} fractal")

        result = fractal.compute(self.make_plane(), self.make_iterator())

        inside_color = None
        if self.config.inside_color:
            inside_color = ColorRGB(*self.config.inside_color)

        rgb_image = self.coloring_engine.render_color_image(
            result,
            algorithm=self.config.coloring_algorithm,
            palette=self.config.color_palette,
            max_iter=self.config.max_iterations,
            inside_color=inside_color
        )

        render_time = time.time() - start_time
        logger.info(f"Render complete in {render_time:.2f}s")

        if output_path:
            self._save_image(rgb_image, Path(output_path), render_time, fractal)

        return rgb_image

    def _save_image(self, rgb_image: np.ndarray, output_path: Path,
                    render_time: float, fractal: FractalType) -> None:
        metadata = None
        if self.config.save_metadata:
            metadata = RenderMetadata(
                fractal_type=fractal.name,
                bounds=self.config.bounds,
                resolution=(self.config.width, self.config.height),
                max_iterations=self.config.max_iterations,
                escape_radius=self.config.escape_radius,
                coloring_algorithm=self.config.coloring_algorithm,
                color_palette=self.config.color_palette,
                render_time_seconds=render_time,
                fractal_parameters=fractal.parameters.to_dict(),
            )

        output_path.parent.mkdir(parents=True, exist_ok=True)
        self.image_exporter.save_image(rgb_image, output_path, metadata,
                                       quality=self.config.jpeg_quality)
