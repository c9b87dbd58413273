"""
Command-line interface for the Mandelbrot renderer.

This module provides commands for rendering fractal images, probing the
escape time of single points and listing the available fractals and palettes.
"""

import click
import sys
from pathlib import Path
from typing import Tuple
import logging
import time

from .. import __version__
from ..api import FractalRenderer, RenderConfig
from ..core.complex_number import Complex
from ..core.fractal_types import FractalRegistry, JULIA_PRESETS
from ..core.math_functions import FractalIterator
from ..rendering.coloring import ColoringEngine

logger = logging.getLogger(__name__)


def _parse_floats(value: str, count: int, label: str) -> Tuple[float, ...]:
    try:
        parts = tuple(float(x.strip()) for x in value.split(','))
    except ValueError:
        raise click.BadParameter(f"{label} must be {count} comma-separated numbers")
    if len(parts) != count:
        raise click.BadParameter(f"{label} must be {count} comma-separated numbers")
    return parts


def _fail(ctx, error: Exception) -> None:
    click.echo(f"Error: {error}", err=True)
    if ctx.obj.get('verbose'):
        logger.exception("Command failed")
    sys.exit(1)


@click.group(invoke_without_command=True)
@click.option('--version', is_flag=True, help='Show version information')
@click.option('--config', type=click.Path(exists=True), help='Configuration file path')
@click.option('--verbose', '-v', is_flag=True, help='Enable verbose logging')
@click.option('--quiet', '-q', is_flag=True, help='Suppress most output')
@click.pass_context
def main(ctx, version, config, verbose, quiet):
    """
    Mandelbrot - escape-time fractal rendering on immutable complex numbers.
    """
    if quiet:
        logging.basicConfig(level=logging.ERROR)
    elif verbose:
        logging.basicConfig(level=logging.DEBUG,
                            format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')
    else:
        logging.basicConfig(level=logging.WARNING,
                            format='%(levelname)s: %(message)s')

    if version:
        click.echo(f"mandelbrot v{__version__}")
        click.echo(f"Python: {sys.version}")
        if ctx.invoked_subcommand is None:
            sys.exit(0)

    ctx.ensure_object(dict)
    ctx.obj['config_file'] = config
    ctx.obj['verbose'] = verbose


@main.command()
@click.argument('fractal_type', type=click.Choice(['mandelbrot', 'julia', 'multibrot']))
@click.argument('output', type=click.Path())
@click.option('--width', '-w', type=int, help='Image width')
@click.option('--height', '-h', type=int, help='Image height')
@click.option('--bounds', type=str, help='Complex plane bounds: "xmin,xmax,ymin,ymax"')
@click.option('--max-iter', 'max_iterations', type=int, help='Maximum iterations')
@click.option('--escape-radius', type=float, help='Escape radius')
@click.option('--palette', 'color_palette', help='Color palette name')
@click.option('--algorithm', 'coloring_algorithm',
              type=click.Choice(['escape_time', 'smooth', 'histogram']),
              help='Coloring algorithm')
@click.option('--julia-c', type=str, help='Julia constant "real,imag" or preset name')
@click.option('--power', type=int, help='Multibrot power')
@click.pass_context
def render(ctx, fractal_type, output, bounds, julia_c, power, **overrides):
    """
    Render a single fractal image.

    FRACTAL_TYPE: Type of fractal (mandelbrot, julia, multibrot)
    OUTPUT: Output image file path (.png, .jpg)
    """
    try:
        if ctx.obj.get('config_file'):
            render_config, fractal_configs = RenderConfig.from_file(ctx.obj['config_file'])
        else:
            render_config, fractal_configs = RenderConfig(), {}

        for key, value in overrides.items():
            if value is not None:
                setattr(render_config, key, value)
        if bounds:
            render_config.bounds = _parse_floats(bounds, 4, "bounds")

        if julia_c and fractal_type != 'julia':
            raise click.BadParameter("--julia-c only applies to julia", param_hint='--julia-c')
        if power is not None and fractal_type != 'multibrot':
            raise click.BadParameter("--power only applies to multibrot", param_hint='--power')

        fractal_params = dict(fractal_configs.get(fractal_type, {}))
        if fractal_type == 'julia' and julia_c:
            if julia_c in JULIA_PRESETS:
                fractal_params.update(JULIA_PRESETS[julia_c].to_dict())
                click.echo(f"Using Julia preset: {julia_c}")
            else:
                fractal_params['c_real'], fractal_params['c_imag'] = \
                    _parse_floats(julia_c, 2, "Julia constant")
        if fractal_type == 'multibrot' and power is not None:
            fractal_params['power'] = power

        fractal = FractalRegistry.create_fractal(fractal_type, **fractal_params)
        renderer = FractalRenderer(render_config)

        click.echo(f"Rendering {fractal_type} fractal...")
        start_time = time.time()
        renderer.render(fractal, Path(output))
        click.echo(f"Render complete: {time.time() - start_time:.2f}s")
        click.echo(f"Saved: {output}")

    except click.BadParameter:
        raise
    except Exception as e:
        _fail(ctx, e)


@main.command()
@click.argument('point', type=str)
@click.option('--max-iter', type=int, default=1000, show_default=True,
              help='Maximum iterations')
@click.option('--escape-radius', type=float, default=2.0, show_default=True,
              help='Escape radius')
@click.pass_context
def escape(ctx, point, max_iter, escape_radius):
    """
    Report the Mandelbrot escape time of a single point.

    POINT: Complex coordinate as "real,imag"
    """
    real, imaginary = _parse_floats(point, 2, "point")
    try:
        iterator = FractalIterator(max_iter=max_iter, escape_radius=escape_radius)
        c = Complex(real, imaginary)
        iterations, z = iterator.mandelbrot_escape(c)
    except ValueError as e:
        _fail(ctx, e)
        return

    click.echo(f"Point: {c}")
    if iterator.has_escaped(z):
        click.echo(f"Escaped after {iterations} iterations (|z| = {z.modulus():.6g})")
    else:
        click.echo(f"Bounded after {iterations} iterations (|z| = {z.modulus():.6g})")


@main.command(name='list')
def list_command():
    """List available fractals, palettes and coloring algorithms."""
    click.echo("Fractals:")
    for name, description in FractalRegistry.list_fractals().items():
        click.echo(f"  {name}: {description}")

    engine = ColoringEngine()
    click.echo("Palettes:")
    for name in engine.list_palettes():
        click.echo(f"  {name}")
    click.echo("Algorithms:")
    for name in engine.list_algorithms():
        click.echo(f"  {name}")

    click.echo("Julia presets:")
    for name, params in JULIA_PRESETS.items():
        click.echo(f"  {name}: {params.c}")


if __name__ == '__main__':
    main()
