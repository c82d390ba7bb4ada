"""
staticflow command line.

Usage:
    staticflow [--root=DIR] [--port=N] [--watch] [--quiet] [--minify]

Options:
    --root      Site root (default: current directory)
    --port      Dev server port (default: 3000)
    --watch     Serve the output and rebuild on every change
    --quiet     Only log the build summary and errors
    --minify    Minify HTML, CSS and JS

Exit codes:
    0   Build finished (or the watch session was interrupted)
    1   Build failed, components missing or configuration invalid
"""
import argparse
from pathlib import Path
from typing import List, Optional

from fs.errors import FSError
from pydantic import ValidationError

from staticflow.builder import SiteBuilder
from staticflow.config import load_config
from staticflow.errors import StaticflowError
from staticflow.logging import LogLevel, get_logger

log = get_logger('cli')


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog='staticflow',
        description="Build a static site from components and pages",
    )
    parser.add_argument(
        "--root",
        type=Path,
        default=None,
        help="Site root directory (default: current directory)",
    )
    parser.add_argument(
        "--port",
        type=int,
        default=None,
        help="Development server port (default: 3000)",
    )
    parser.add_argument(
        "--watch",
        action="store_true",
        help="Serve the output directory and rebuild on changes",
    )
    parser.add_argument(
        "--quiet",
        action="store_true",
        help="Do not log every written file",
    )
    parser.add_argument(
        "--minify",
        action="store_true",
        help="Minify HTML, CSS and JS output",
    )
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    overrides = {
        'port': args.port,
        'watch': True if args.watch else None,
        'verbose': False if args.quiet else None,
        'minify': True if args.minify else None,
    }

    try:
        config = load_config(overrides, root=args.root)
        builder = SiteBuilder(config)
        if log.is_enabled_for(LogLevel.DEBUG):
            log.debug("%s", builder.site_fs.describe())
        builder.build()

        if config.watch:
            from staticflow.server import run_dev_server
            run_dev_server(config, builder)
    except ValidationError as e:
        log.error("Invalid configuration: %s", e)
        return 1
    except (StaticflowError, FSError, OSError) as e:
        log.error("%s", e)
        log.log_traceback(e)
        return 1

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
