#!/usr/bin/env python3
"""
Run script for the AssetVerse API
"""

import argparse
import os
import sys

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

from app import create_app
from app.build import build_database
from app.logger import get_logger

# Note: SECRET_KEY is required. Run 'python generate_env.py' to create a .env file.

logger = get_logger("assetverse.run")


def _env_flag(name, default='False'):
    return os.environ.get(name, default).lower() in ('true', '1', 'yes', 'on')


def parse_arguments():
    """Parse command line arguments"""
    parser = argparse.ArgumentParser(description='AssetVerse API')
    parser.add_argument('--build-only', action='store_true',
                        help='Build database tables and critical data, then exit without starting the server')
    parser.add_argument('--enable-debug-data', action='store_true', default=False,
                        help='Insert demo HR, employee and asset data')
    parser.add_argument('--no-debug-data', action='store_false', dest='enable_debug_data',
                        help='Disable demo data insertion (default)')
    parser.add_argument('--host', default=os.environ.get('FLASK_HOST', '127.0.0.1'),
                        help='Server host (default: FLASK_HOST or 127.0.0.1)')
    parser.add_argument('--port', type=int, default=int(os.environ.get('FLASK_PORT', '5000')),
                        help='Server port (default: FLASK_PORT or 5000)')
    return parser.parse_args()


if __name__ == '__main__':
    args = parse_arguments()
    app = create_app()

    logger.debug("Starting AssetVerse...")

    # Critical data is ALWAYS checked and inserted regardless of flags
    build_database(
        app=app,
        enable_debug_data=args.enable_debug_data and not args.build_only,
    )

    if args.build_only:
        logger.debug("Build completed. Exiting without starting web server.")
        sys.exit(0)

    debug_mode = _env_flag('FLASK_DEBUG')
    use_reloader = _env_flag('USE_RELOADER')

    if debug_mode:
        logger.warning("DEBUG MODE ENABLED - Do not use in production!")

    logger.info(f"Starting server on {args.host}:{args.port} (debug={debug_mode}, reloader={use_reloader})")
    app.run(debug=debug_mode, host=args.host, port=args.port, use_reloader=use_reloader)
