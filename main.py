import json
import os
from dataclasses import asdict

import click
from dotenv import load_dotenv

from exif_utils import ExifDataError
from geolocate.coverage import EmptyDirectoryError, ScanFailure, scan_directory
from geolocate.maps import MapStyle, generate_map

# Load environment variables from .env file
load_dotenv()

USAGE = "Usage: photo-coverage [images directory]"


@click.command()
@click.argument('directory', required=False)
@click.option('--skip-errors', is_flag=True, help='Report unreadable photos and keep going')
@click.option('--output', type=click.Path(dir_okay=False), help='Where to write the HTML map')
@click.option('--no-open', is_flag=True, help='Write the map without opening a browser')
@click.option('--json-output', is_flag=True, help='Output results as JSON')
@click.pass_context
def cli(ctx, directory, skip_errors, output, no_open, json_output):
    """Plot the GPS locations of every photo in DIRECTORY on a map."""
    if directory is None:
        click.echo(USAGE)
        ctx.exit(1)

    try:
        style = MapStyle.from_env()
    except ValueError as e:
        click.echo(f"Error: Invalid map setting: {e}", err=True)
        raise click.Abort()

    def report(outcome):
        if isinstance(outcome, ScanFailure):
            click.echo(f"Skipping {outcome.path}: {outcome.error}", err=True)
        elif not json_output:
            click.echo(f"{outcome.path} -> {outcome.latitude}, {outcome.longitude}")

    try:
        scan = scan_directory(directory, skip_errors=skip_errors, on_outcome=report)
        center = scan.center()
    except (ExifDataError, EmptyDirectoryError) as e:
        click.echo(f"Error: {e}", err=True)
        raise click.Abort()

    if json_output:
        result = {
            'images': [asdict(record) for record in scan.records],
            'center': {'latitude': center[0], 'longitude': center[1]},
            'failures': [{'path': f.path, 'error': str(f.error)} for f in scan.failures],
        }
        click.echo(json.dumps(result, indent=2))

    output = output or os.getenv('COVERAGE_MAP_OUTPUT', 'coverage_map.html')
    coverage_map = generate_map(scan.records, center, style)

    if no_open:
        path = coverage_map.save(output)
    else:
        path = coverage_map.show(output)

    click.echo(f"Map saved to {path}", err=True)


if __name__ == '__main__':
    cli()
