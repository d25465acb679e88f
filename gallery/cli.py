"""
Command Line Interface for the gallery server.
"""

import argparse
import json
import logging
import sys
from typing import List, Optional

from .errors import ConfigurationError, GalleryError
from .gallery_config import GalleryConfig, load_config
from .server import build_components, run_server


def setup_logging(verbose: bool, level_name: str = 'INFO') -> logging.Logger:
    """Configure logging."""
    level = logging.DEBUG if verbose else logging.getLevelName(level_name)
    if not isinstance(level, int):
        level = logging.INFO

    logging.basicConfig(
        level=level,
        format='%(asctime)s [%(levelname)s] %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    logging.getLogger('boto3').setLevel(logging.WARNING)
    logging.getLogger('botocore').setLevel(logging.WARNING)
    logging.getLogger('urllib3').setLevel(logging.WARNING)

    return logging.getLogger('gallery')


def get_config(args: argparse.Namespace) -> GalleryConfig:
    """Get configuration from environment and CLI overrides."""
    config = GalleryConfig.from_env()

    if getattr(args, 'endpoint', None):
        config.endpoint = args.endpoint
    if getattr(args, 'bucket', None):
        config.bucket = args.bucket
    if getattr(args, 'image_dir', None):
        config.image_dir = args.image_dir.strip('/')
    if getattr(args, 'host', None):
        config.host = args.host
    if getattr(args, 'port', None):
        config.port = args.port

    return load_config(config)


def add_storage_arguments(parser: argparse.ArgumentParser) -> None:
    """Add storage configuration arguments to a parser."""
    group = parser.add_argument_group('Storage')
    group.add_argument('--endpoint', help='Override R2_ENDPOINT')
    group.add_argument('--bucket', help='Override R2_BUCKET_NAME')
    group.add_argument('--image-dir', help='Override R2_IMAGE_DIR')


def _prepare(args: argparse.Namespace):
    config = get_config(args)
    logger = setup_logging(args.verbose, config.log_level)
    return logger, config


def cmd_serve(args: argparse.Namespace) -> int:
    """Run the HTTP server."""
    try:
        logger, config = _prepare(args)
    except ConfigurationError as e:
        logging.getLogger('gallery').error(f"Invalid configuration: {e}")
        return 1

    logger.info(f"Bucket: {config.bucket}/{config.image_dir}")
    logger.info(f"Endpoint: {config.endpoint}")
    try:
        run_server(config, logger)
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return 130
    return 0


def cmd_list(args: argparse.Namespace) -> int:
    """Print the gallery listing, generating missing previews."""
    try:
        logger, config = _prepare(args)
    except ConfigurationError as e:
        logging.getLogger('gallery').error(f"Invalid configuration: {e}")
        return 1

    _, _, lister, _ = build_components(config, logger=logger)
    try:
        items = lister.list_gallery()
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return 130
    except GalleryError as e:
        logger.error(f"Listing failed: {e.code}: {e}")
        return 1

    print(json.dumps([item.to_dict() for item in items], indent=2))
    stats = lister.last_stats
    if stats and not args.quiet:
        logger.info(
            f"{stats.eligible} images, {stats.cache_hits} cached, "
            f"{stats.generated} generated, {stats.errors} errors, "
            f"{stats.hit_rate:.0%} cache hit rate"
        )
    return 0


def cmd_resolve(args: argparse.Namespace) -> int:
    """Resolve one source key to its preview key."""
    try:
        logger, config = _prepare(args)
    except ConfigurationError as e:
        logging.getLogger('gallery').error(f"Invalid configuration: {e}")
        return 1

    _, resolver, _, _ = build_components(config, logger=logger)
    try:
        resolution = resolver.resolve_detailed(args.key)
    except GalleryError as e:
        logger.error(f"Resolve failed: {e.code}: {e}")
        return 1

    print(resolution.thumbnail_key)
    if not args.quiet:
        state = 'generated' if resolution.generated else 'cached'
        logger.info(f"{args.key} -> {resolution.thumbnail_key} ({state})")
    return 0


def cmd_exif(args: argparse.Namespace) -> int:
    """Print EXIF exposure settings for one key."""
    try:
        logger, config = _prepare(args)
    except ConfigurationError as e:
        logging.getLogger('gallery').error(f"Invalid configuration: {e}")
        return 1

    store, _, _, extractor = build_components(config, logger=logger)
    try:
        record = extractor.extract(store.download_object(args.key))
    except GalleryError as e:
        logger.error(f"EXIF lookup failed: {e.code}: {e}")
        return 1

    print(json.dumps(record.to_dict(), indent=2))
    return 0


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog='r2-gallery',
        description='Image gallery with lazily generated previews',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Commands:
  serve     Run the HTTP server
  list      Print the gallery (generates missing previews)
  resolve   Resolve one source key to its preview key
  exif      Print FNumber, ExposureTime and ISO for one key

Storage is configured with R2_* environment variables.
"""
    )

    parser.add_argument('-v', '--verbose', action='store_true', help='Enable verbose logging')

    subparsers = parser.add_subparsers(dest='command', help='Command to run')

    serve_parser = subparsers.add_parser('serve', help='Run the HTTP server')
    serve_parser.add_argument('--host', help='Override HOST')
    serve_parser.add_argument('--port', type=int, help='Override PORT')
    serve_parser.add_argument('-v', '--verbose', action='store_true', help='Enable verbose logging')
    add_storage_arguments(serve_parser)

    list_parser = subparsers.add_parser('list', help='Print the gallery listing')
    list_parser.add_argument('-q', '--quiet', action='store_true', help='Suppress summary output')
    list_parser.add_argument('-v', '--verbose', action='store_true', help='Enable verbose logging')
    add_storage_arguments(list_parser)

    resolve_parser = subparsers.add_parser('resolve', help='Resolve one preview')
    resolve_parser.add_argument('key', help='Source object key')
    resolve_parser.add_argument('-q', '--quiet', action='store_true', help='Suppress summary output')
    resolve_parser.add_argument('-v', '--verbose', action='store_true', help='Enable verbose logging')
    add_storage_arguments(resolve_parser)

    exif_parser = subparsers.add_parser('exif', help='Print EXIF exposure settings')
    exif_parser.add_argument('key', help='Source object key')
    exif_parser.add_argument('-v', '--verbose', action='store_true', help='Enable verbose logging')
    add_storage_arguments(exif_parser)

    return parser


def main(args: Optional[List[str]] = None) -> int:
    """Main entry point."""
    parser = create_parser()
    parsed_args = parser.parse_args(args)

    if not parsed_args.command:
        parser.print_help()
        return 1

    commands = {
        'serve': cmd_serve,
        'list': cmd_list,
        'resolve': cmd_resolve,
        'exif': cmd_exif,
    }
    return commands[parsed_args.command](parsed_args)


if __name__ == '__main__':
    sys.exit(main())
