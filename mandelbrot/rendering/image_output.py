"""
Image export for fractal rendering.

This module saves rendered RGB arrays as PNG or JPEG through Pillow, with
render metadata embedded in PNG text chunks or written to a companion JSON
file, and stores raw arrays as NumPy files.
"""

import numpy as np
from typing import Dict, Any, Optional, Tuple
from pathlib import Path
from dataclasses import dataclass, asdict, field
import json
import logging
from datetime import datetime

from PIL import Image, PngImagePlugin

logger = logging.getLogger(__name__)


@dataclass
class RenderMetadata:
    """Metadata for fractal renders."""

    fractal_type: str
    bounds: Tuple[float, float, float, float]  # xmin, xmax, ymin, ymax
    resolution: Tuple[int, int]  # width, height
    max_iterations: int
    escape_radius: float

    coloring_algorithm: str
    color_palette: str

    render_time_seconds: float

    timestamp: str = ""
    software_version: str = ""

    fractal_parameters: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        if not self.timestamp:
            self.timestamp = datetime.now().isoformat()
        if not self.software_version:
            from .. import __version__
            self.software_version = __version__
        self.bounds = tuple(self.bounds)
        self.resolution = tuple(self.resolution)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'RenderMetadata':
        return cls(**data)

    def to_json(self, indent: int = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent)

    @classmethod
    def from_json(cls, json_str: str) -> 'RenderMetadata':
        return cls.from_dict(json.loads(json_str))


class ImageExporter:
    """Image export with metadata support."""

    def __init__(self):
        self.supported_formats = {
            '.png': self._save_png,
            '.jpg': self._save_jpeg,
            '.jpeg': self._save_jpeg,
        }

    def save_image(self, image_array: np.ndarray, filepath: Path,
                   metadata: Optional[RenderMetadata] = None,
                   quality: int = 95) -> None:
        """
        Save RGB image array to file with metadata.

        Args:
            image_array: RGB image array (height, width, 3) with values 0-1
            filepath: Output file path
            metadata: Render metadata to embed
            quality: JPEG quality (1-100)
        """
        filepath = Path(filepath)
        suffix = filepath.suffix.lower()

        if suffix not in self.supported_formats:
            supported = ', '.join(self.supported_formats.keys())
            raise ValueError(f"Unsupported format '{suffix}'. Supported: {supported}")

        pil_image = Image.fromarray(self._prepare_image_array(image_array))

        self.supported_formats[suffix](pil_image, filepath, metadata, quality)

        logger.info(f"Saved image: {filepath} ({pil_image.size[0]}x{pil_image.size[1]})")

    def _prepare_image_array(self, image_array: np.ndarray) -> np.ndarray:
        """Validate the array shape and convert it to 8-bit."""
        if image_array.ndim != 3 or image_array.shape[2] != 3:
            raise ValueError(f"Expected RGB image array (H, W, 3), got {image_array.shape}")

        if image_array.dtype == np.uint8:
            return image_array
        if np.issubdtype(image_array.dtype, np.floating):
            return (np.clip(image_array, 0.0, 1.0) * 255).round().astype(np.uint8)
        return np.clip(image_array, 0, 255).astype(np.uint8)

    def _save_png(self, pil_image: Image.Image, filepath: Path,
                  metadata: Optional[RenderMetadata], quality: int) -> None:
        pnginfo = PngImagePlugin.PngInfo()

        if metadata:
            pnginfo.add_text("Title", f"Fractal: {metadata.fractal_type}")
            pnginfo.add_text("Software", f"mandelbrot v{metadata.software_version}")
            pnginfo.add_text("Creation Time", metadata.timestamp)
            pnginfo.add_text("FractalMetadata", metadata.to_json())

        pil_image.save(filepath, "PNG", pnginfo=pnginfo)

    def _save_jpeg(self, pil_image: Image.Image, filepath: Path,
                   metadata: Optional[RenderMetadata], quality: int) -> None:
        # JPEG has no text chunks, metadata goes to a companion JSON file
        pil_image.save(filepath, "JPEG", quality=quality, optimize=True)

        if metadata:
            json_path = filepath.with_suffix('.json')
            json_path.write_text(metadata.to_json())
            logger.info(f"Saved metadata: {json_path}")

    def read_png_metadata(self, filepath: Path) -> Optional[RenderMetadata]:
        """Read metadata embedded by save_image from a PNG file."""
        with Image.open(filepath) as img:
            raw = img.info.get("FractalMetadata")
        if raw is None:
            return None
        return RenderMetadata.from_json(raw)

    def save_raw_data(self, image_array: np.ndarray, filepath: Path,
                      metadata: Optional[RenderMetadata] = None) -> Path:
        """
        Save raw image data as NumPy array.

        Returns:
            Path of the written .npy file
        """
        filepath = Path(filepath)
        if filepath.suffix.lower() != '.npy':
            filepath = filepath.with_suffix('.npy')

        np.save(filepath, image_array)

        if metadata:
            filepath.with_suffix('.json').write_text(metadata.to_json())

        logger.info(f"Saved raw data: {filepath}")
        return filepath

    def load_raw_data(self, filepath: Path) -> Tuple[np.ndarray, Optional[RenderMetadata]]:
        """Load raw image data and its metadata, if present."""
        filepath = Path(filepath)
        image_array = np.load(filepath)

        metadata = None
        metadata_path = filepath.with_suffix('.json')
        if metadata_path.exists():
            try:
                metadata = RenderMetadata.from_json(metadata_path.read_text())
            except (ValueError, TypeError) as e:
                logger.warning(f"Could not load metadata from {metadata_path}: {e}")

        return image_array, metadata
