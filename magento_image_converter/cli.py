"""
cli.py — Command-line entrypoint.
Usage examples (run from repo root):
  python -m magento_image_converter.cli --path /var/www/magento --db magento
  python -m magento_image_converter.cli -p /var/www/magento -d magento -f webp --execute
Database credentials are read from the environment (or a .env file in the working directory).
"""

import argparse
import sys

from dotenv import load_dotenv
from sqlalchemy.exc import SQLAlchemyError

from .main import cmd_convert
from .magento_utils.utils import log
from .media_processing.image_tools import TranscodeError


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="magento-image-converter",
        description="Convert Magento product images and log the matching SQL updates.",
    )
    parser.add_argument("-p", "--path", required=True, help="Path to the magento project")
    parser.add_argument(
        "-d", "--db", required=True,
        help="Database name for the project (credentials will be taken from .env file)",
    )
    parser.add_argument("-f", "--format", default="jpg", help="Image format to convert images to")
    parser.add_argument(
        "-e", "--execute", action="store_true",
        help="If present the database will be updated on the fly",
    )
    parser.add_argument("-o", "--output", default="output.sql", help="Where to write the SQL log")
    return parser


def main(argv=None) -> int:
    load_dotenv()
    args = build_parser().parse_args(argv)

    try:
        cmd_convert(args.path, args.db, args.format, args.execute, args.output)
    except (FileNotFoundError, TranscodeError, SQLAlchemyError, EnvironmentError) as e:
        log(f"Error: {e}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
