#!/usr/bin/env python
"""
Command-line interface for the DocBase export viewer
"""

import argparse
import logging
import os
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from docbaseview.version_info import __version__, __description__

logger = logging.getLogger(__name__)

DEFAULT_PORT = 8080
DEFAULT_HOST = '0.0.0.0'


@dataclass
class ViewerConfig:
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    markdown_dir: str = 'md'
    image_dir: str = 'img'
    file_dir: str = 'file'
    basic_user: str = ''
    basic_password: str = ''
    debug: bool = False
    log_dir: Optional[Path] = None


def print_version():
    """Print version information."""
    print(f"docbaseview v{__version__}")
    print(__description__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='docbaseview',
        description=f'docbaseview v{__version__}',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  docbaseview                              Serve ./md, ./img and ./file on port 8080
  docbaseview -p 9000 -m export/md         Serve another markdown directory on port 9000
  docbaseview -bu alice -bp secret         Require Basic authentication

The PORT environment variable, when set to a number, overrides --port.
        """
    )
    parser.add_argument('--version', '-v', action='store_true', help='Show version information')
    parser.add_argument('--host', type=str, default=DEFAULT_HOST,
                        help=f'Host to bind to (default: {DEFAULT_HOST})')
    parser.add_argument('--port', '-p', type=int, default=DEFAULT_PORT,
                        help=f'Port to listen on (default: {DEFAULT_PORT})')
    parser.add_argument('--markdown-dir', '-m', default='md',
                        help='Directory of the exported markdown files (default: md)')
    parser.add_argument('--image-dir', '-i', default='img',
                        help='Directory of the exported images (default: img)')
    parser.add_argument('--file-dir', '-f', default='file',
                        help='Directory of the exported files (default: file)')
    parser.add_argument('--basic-user', '-bu', default='',
                        help='User of the Basic authentication, empty to disable')
    parser.add_argument('--basic-password', '-bp', default='',
                        help='Password of the Basic authentication')
    parser.add_argument('--debug', '-d', action='store_true', help='Verbose logging')
    parser.add_argument('--log-dir', type=Path, default=None,
                        help='Also write a rotating log file to this directory')
    return parser


def config_from_args(args, environ=None) -> ViewerConfig:
    """Turn parsed arguments into a config, applying the PORT override."""
    environ = os.environ if environ is None else environ
    port = args.port
    env_port = environ.get('PORT', '')
    if env_port:
        try:
            port = int(env_port)
        except ValueError:
            logger.warning(f"Ignoring non-numeric PORT environment variable: {env_port!r}")

    return ViewerConfig(
        host=args.host,
        port=port,
        markdown_dir=args.markdown_dir,
        image_dir=args.image_dir,
        file_dir=args.file_dir,
        basic_user=args.basic_user,
        basic_password=args.basic_password,
        debug=args.debug,
        log_dir=args.log_dir,
    )


def parse_config(argv=None, environ=None) -> ViewerConfig:
    return config_from_args(build_parser().parse_args(argv), environ)


def start_server(config: ViewerConfig):
    """Scan the export and run the Flask server until interrupted."""
    from docbaseview.app import create_app
    from docbaseview.core.site import load_site

    site = load_site(config)
    app = create_app(site)
    logger.info(f"server listening on {config.host}:{config.port}")
    app.run(host=config.host, port=config.port, debug=False, threaded=True)


def main(argv=None):
    """Main CLI entry point."""
    from docbaseview.core.logging_config import setup_logging
    from docbaseview.core.site import StartupError

    args = build_parser().parse_args(argv)
    if args.version:
        print_version()
        return 0

    setup_logging(args.debug, args.log_dir)
    config = config_from_args(args)

    try:
        start_server(config)
    except StartupError as e:
        logger.error(str(e))
        print(f"Error starting server: {e}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        print("\nServer stopped.")
    return 0


if __name__ == '__main__':
    sys.exit(main())
