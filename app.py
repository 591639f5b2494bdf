#!/usr/bin/env python3
#USE VENV: source venv/bin/activate
"""
Build script for the order ledger database
"""

import argparse
import sys
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

from app import create_app
from app.build import build_database
from app.logger import get_logger

logger = get_logger("ledger.run")


def parse_arguments():
    """Parse command line arguments"""
    parser = argparse.ArgumentParser(description='Packaging materials order ledger')
    parser.add_argument('--enable-debug-data', action='store_true', default=True,
                        help='Insert demo parties, factories and sources (default)')
    parser.add_argument('--no-debug-data', action='store_false', dest='enable_debug_data',
                        help='Disable debug data insertion')
    return parser.parse_args()


if __name__ == '__main__':
    args = parse_arguments()

    logger.debug("Building order ledger database...")
    app = create_app()
    summary = build_database(enable_debug_data=args.enable_debug_data, app=app)
    logger.info(f"Build finished: {summary}")
    sys.exit(0)
