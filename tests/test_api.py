"""
Tests for render configuration and the high-level renderer.
"""

import json

import numpy as np
import pytest

from mandelbrot.api import FractalRenderer, RenderConfig
from mandelbrot.core.fractal_types import JuliaSet, MandelbrotSet, Multibrot
from mandelbrot.rendering.image_output import ImageExporter


def small_config(**overrides) -> RenderConfig:
    settings = dict(width=16, height=12, max_iterations=32)
    settings.update(overrides)
    return RenderConfig(**settings)


class TestRenderConfig:
    def test_defaults_are_valid(self) -> None:
        RenderConfig().validate()

    @pytest.mark.parametrize("overrides", [
        {'width': 0},
        {'max_iterations': -1},
        {'escape_radius': 0.0},
        {'bounds': (1.0, -1.0, -1.0, 1.0)},
        {'bounds': (0.0, 1.0)},
        {'jpeg_quality': 101},
    ])
    def test_invalid(self, overrides) -> None:
        with pytest.raises(ValueError):
            small_config(**overrides).validate()

    def test_from_dict(self) -> None:
        config = RenderConfig.from_dict({'width': 32, 'bounds': [-1, 1, -1, 1],
                                         'inside_color': [0, 0, 1]})
        assert config.width == 32
        assert config.bounds == (-1, 1, -1, 1)
        assert config.inside_color == (0, 0, 1)

    def test_from_dict_rejects_unknown_keys(self) -> None:
        with pytest.raises(ValueError, match="Unknown render config keys"):
            RenderConfig.from_dict({'use_gpu': True})

    def test_from_file(self, tmp_path) -> None:
        path = tmp_path / "config.json"
        path.write_text(json.dumps({
            'render': {'width': 20, 'color_palette': 'cool'},
            'fractals': {'julia': {'c_real': 0.0, 'c_imag': 1.0}},
        }))
        config, fractals = RenderConfig.from_file(path)
        assert config.width == 20
        assert config.color_palette == 'cool'
        assert fractals['julia']['c_imag'] == 1.0

    def test_from_file_invalid_json(self, tmp_path) -> None:
        path = tmp_path / "broken.json"
        path.write_text("{not json")
        with pytest.raises(ValueError):
            RenderConfig.from_file(path)

    def test_from_file_top_level_not_object(self, tmp_path) -> None:
        path = tmp_path / "list.json"
        path.write_text(json.dumps([{'render': {}}]))
        with pytest.raises(ValueError, match="top level must be an object"):
            RenderConfig.from_file(path)

    def test_to_dict(self) -> None:
        assert small_config().to_dict()['width'] == 16


class TestFractalRenderer:
    def test_renderer_validates_config(self) -> None:
        with pytest.raises(ValueError):
            FractalRenderer(small_config(height=0))

    @pytest.mark.parametrize("fractal", [MandelbrotSet(), JuliaSet(), Multibrot()])
    @pytest.mark.parametrize("algorithm", ['escape_time', 'smooth', 'histogram'])
    def test_render_shape_and_range(self, fractal, algorithm) -> None:
        renderer = FractalRenderer(small_config(coloring_algorithm=algorithm))
        image = renderer.render(fractal)
        assert image.shape == (12, 16, 3)
        assert np.all((image >= 0) & (image <= 1))

    def test_inside_color(self) -> None:
        config = small_config(bounds=(-0.1, 0.1, -0.1, 0.1), inside_color=(0.0, 0.0, 1.0))
        image = FractalRenderer(config).render(MandelbrotSet())
        np.testing.assert_allclose(image[6, 8], [0, 0, 1])

    def test_render_to_file(self, tmp_path) -> None:
        path = tmp_path / "renders" / "mandelbrot.png"
        FractalRenderer(small_config()).render(MandelbrotSet(), path)

        assert path.exists()
        metadata = ImageExporter().read_png_metadata(path)
        assert metadata.fractal_type == "Mandelbrot"
        assert metadata.resolution == (16, 12)
        assert metadata.max_iterations == 32

    def test_render_without_metadata(self, tmp_path) -> None:
        path = tmp_path / "plain.png"
        FractalRenderer(small_config(save_metadata=False)).render(MandelbrotSet(), path)
        assert ImageExporter().read_png_metadata(path) is None
