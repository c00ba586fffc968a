"""Command line tool for upsampling PIEH/PIEI flow files."""

import sys

import click

from flow_upsample.exceptions import FlowError
from flow_upsample.interface import upsample_flow_file

CONTEXT_SETTINGS = dict(help_option_names=["-H", "--help"])


@click.command(
    context_settings=CONTEXT_SETTINGS,
    epilog=(
        "\b\nExample: flow-upsample -w 512 -h 488 -x 5.0 -y 5.0 "
        "small.flow large.flow\n\n"
        "If -x and -y are not passed they are inferred as "
        "output-{w,h} / input-{w,h}."
    ),
)
@click.option("-w", "width", required=True, type=click.IntRange(min=1), help="Target width")
@click.option("-h", "height", required=True, type=click.IntRange(min=1), help="Target height")
@click.option("-x", "scale_x", type=float, default=None, help="Extrapolation factor in x-direction")
@click.option("-y", "scale_y", type=float, default=None, help="Extrapolation factor in y-direction")
@click.option(
    "--preview",
    type=click.Path(dir_okay=False),
    default=None,
    help="Also write a color-coded PNG of the result",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output")
@click.argument("in_file", type=click.Path(dir_okay=False))
@click.argument("out_file", type=click.Path(dir_okay=False))
def main(width, height, scale_x, scale_y, preview, verbose, in_file, out_file):
    """Extrapolate optical flow from a lower resolution flow file to a higher resolution.

    The output format (PIEH or PIEI) is the same as the input format.
    """
    try:
        upsample_flow_file(
            in_file,
            out_file,
            width,
            height,
            scale_x=scale_x,
            scale_y=scale_y,
            display=verbose,
            preview=preview,
        )
    except (FlowError, OSError, ValueError) as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)
    if verbose:
        click.echo("Upsampling completed successfully!")


if __name__ == "__main__":  # pragma: no cover
    main()
