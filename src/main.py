"""Command line entry point: render one slippy map view to a PNG file."""

import argparse
import asyncio
import logging
import math
import sys
from pathlib import Path

from domain.models import ViewSettings
from domain.profiles import load_profile
from domain.tile_servers import TILE_SERVERS, UnknownTileServerError, load_tile_servers
from render.map_renderer import WorldMap
from shared.constants import EXIT_CONFIG_ERROR, EXIT_OK, LOG_FORMAT

logger = logging.getLogger(__name__)


def setup_logging(log_file: Path | None = None, *, verbose: bool = False) -> None:
    """Configure root logging to stdout and, optionally, a UTF-8 log file."""
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(str(log_file), encoding='utf-8'))
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format=LOG_FORMAT,
        handlers=handlers,
        force=True,
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description='Render a slippy map view from a tile server into a PNG file'
    )
    parser.add_argument('--profile', type=Path, help='TOML view profile')
    parser.add_argument('--servers', type=Path, help='TOML file with extra tile servers')
    parser.add_argument('--host', help='Tile server name')
    parser.add_argument('--lon', type=float, help='Center longitude')
    parser.add_argument('--lat', type=float, help='Center latitude')
    parser.add_argument('--zoom', type=float, help='Zoom level (floored, clamped)')
    parser.add_argument('--width', type=int, help='Image width in pixels')
    parser.add_argument('--height', type=int, help='Image height in pixels')
    parser.add_argument(
        '--pan',
        type=float,
        nargs=2,
        metavar=('DX', 'DY'),
        help='Pan the view by a pixel delta before rendering',
    )
    parser.add_argument('-o', '--output', help='Output PNG path')
    parser.add_argument(
        '--list-hosts', action='store_true', help='List known tile servers and exit'
    )
    parser.add_argument('--log-file', type=Path, help='Also write the log to a file')
    parser.add_argument('-v', '--verbose', action='store_true', help='Debug logging')
    return parser


def resolve_settings(args: argparse.Namespace) -> ViewSettings:
    """Profile values first, then explicit command line overrides."""
    settings = load_profile(args.profile) if args.profile else ViewSettings()
    overrides = {
        'host': args.host,
        'lon': args.lon,
        'lat': args.lat,
        'zoom': math.floor(args.zoom) if args.zoom is not None else None,
        'width': args.width,
        'height': args.height,
        'output_path': args.output,
    }
    data = settings.model_dump()
    data.update({k: v for k, v in overrides.items() if v is not None})
    return ViewSettings.model_validate(data)


async def render_to_file(
    settings: ViewSettings,
    *,
    catalog=TILE_SERVERS,
    pan: tuple[float, float] | None = None,
    loader=None,
) -> Path:
    async with WorldMap(
        settings.host,
        catalog=catalog,
        loader=loader,
        lon=settings.lon,
        lat=settings.lat,
        zoom=settings.zoom,
        extent=(settings.width, settings.height),
    ) as world_map:
        if pan is not None:
            world_map.pan_by(*pan)
        session = world_map.render()
        image = await session.wait()
    out = Path(settings.output_path)
    out.parent.mkdir(parents=True, exist_ok=True)
    image.save(out, format='PNG')
    logger.info(
        'Saved %s (%dx%d, %d/%d tiles)',
        out,
        image.width,
        image.height,
        session.loaded,
        len(session.planned),
    )
    return out


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(args.log_file, verbose=args.verbose)

    try:
        catalog = load_tile_servers(args.servers) if args.servers else TILE_SERVERS
        if args.list_hosts:
            for name, descriptor in catalog.items():
                print(f'{name}\t{descriptor.zoom_min}-{descriptor.zoom_max}')
            return EXIT_OK
        settings = resolve_settings(args)
        pan = tuple(args.pan) if args.pan else None
        asyncio.run(render_to_file(settings, catalog=catalog, pan=pan))
    except (UnknownTileServerError, FileNotFoundError, ValueError) as e:
        logger.error('%s', e)
        return EXIT_CONFIG_ERROR
    return EXIT_OK


if __name__ == '__main__':
    sys.exit(main())
