"""
Tests for the command-line interface.
"""

import json

import pytest
from click.testing import CliRunner

from mandelbrot import __version__
from mandelbrot.cli.main import main


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


class TestCLI:
    def test_version(self, runner) -> None:
        result = runner.invoke(main, ['--version'])
        assert result.exit_code == 0
        assert f"v{__version__}" in result.output

    def test_list(self, runner) -> None:
        result = runner.invoke(main, ['list'])
        assert result.exit_code == 0
        assert "mandelbrot" in result.output
        assert "hot" in result.output
        assert "rabbit" in result.output

    def test_escape_outside(self, runner) -> None:
        result = runner.invoke(main, ['escape', '1,0', '--max-iter', '50'])
        assert result.exit_code == 0
        assert "Escaped after 3 iterations" in result.output
        assert "Complex{real=1.0, imaginary=0.0}" in result.output

    def test_escape_inside(self, runner) -> None:
        result = runner.invoke(main, ['escape', '--max-iter', '40', '--', '-1,0'])
        assert result.exit_code == 0
        assert "Bounded after 40 iterations" in result.output

    def test_escape_bad_point(self, runner) -> None:
        result = runner.invoke(main, ['escape', '1,2,3'])
        assert result.exit_code == 2

    def test_escape_bad_iterator(self, runner) -> None:
        result = runner.invoke(main, ['escape', '0,0', '--max-iter', '0'])
        assert result.exit_code == 1
        assert "Error:" in result.output

    def test_render(self, runner, tmp_path) -> None:
        output = tmp_path / "julia.png"
        result = runner.invoke(main, ['render', 'julia', str(output),
                                      '-w', '12', '-h', '8', '--max-iter', '20',
                                      '--julia-c', 'rabbit', '--algorithm', 'histogram'])
        assert result.exit_code == 0, result.output
        assert "Using Julia preset: rabbit" in result.output
        assert output.exists()

    def test_render_with_config_file(self, runner, tmp_path) -> None:
        config = tmp_path / "config.json"
        config.write_text(json.dumps({
            'render': {'width': 10, 'height': 10, 'max_iterations': 16},
            'fractals': {'multibrot': {'power': 4}},
        }))
        output = tmp_path / "multibrot.png"
        result = runner.invoke(main, ['--config', str(config), 'render', 'multibrot', str(output)])
        assert result.exit_code == 0, result.output
        assert output.exists()

    def test_render_bad_bounds(self, runner, tmp_path) -> None:
        result = runner.invoke(main, ['render', 'mandelbrot', str(tmp_path / "x.png"),
                                      '--bounds', '1,2'])
        assert result.exit_code == 2

    def test_render_unsupported_format(self, runner, tmp_path) -> None:
        result = runner.invoke(main, ['render', 'mandelbrot', str(tmp_path / "x.bmp"),
                                      '-w', '4', '-h', '4', '--max-iter', '4'])
        assert result.exit_code == 1
        assert "Unsupported format" in result.output

    @pytest.mark.parametrize("fractal_type, option", [
        ('mandelbrot', ['--julia-c', 'rabbit']),
        ('multibrot', ['--julia-c', '0,1']),
        ('julia', ['--power', '4']),
    ])
    def test_render_rejects_mismatched_fractal_options(self, runner, tmp_path,
                                                        fractal_type, option) -> None:
        output = tmp_path / "x.png"
        result = runner.invoke(main, ['render', fractal_type, str(output), *option])
        assert result.exit_code == 2
        assert "only applies to" in result.output
        assert not output.exists()

    def test_render_config_file_not_object(self, runner, tmp_path) -> None:
        config = tmp_path / "config.json"
        config.write_text("[1, 2]")
        result = runner.invoke(main, ['--config', str(config), 'render', 'mandelbrot',
                                      str(tmp_path / "x.png")])
        assert result.exit_code == 1
        assert "top level must be an object" in result.output
