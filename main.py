#!/usr/bin/env python3
"""
Invoice Text Reconstruction System - Main Entry Point.

This is the command-line entry point. It loads captured billing text
and GraphQL payloads, reconstructs invoice records and writes the
requested outputs.

Usage:
    Command Line:
        python main.py --input capture.txt --output ./outputs/
        python main.py --input ./captures/ --format json excel links
        python main.py --input capture.txt --render "12345_Jan 1 - Jan 31"

    Python:
        from main import run_reconstruction
        session = run_reconstruction("captures/")

Author: Billing Data Team
Version: 1.0.0
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

# Add project root to path for imports
PROJECT_ROOT = Path(__file__).parent
sys.path.insert(0, str(PROJECT_ROOT))

# Import project modules
from config import ConfigurationManager
from invoice_reconstruction.utils.logger import LOGGER_NAMESPACE, setup_logger_from_config, get_logger
from invoice_reconstruction.utils.exceptions import InvoiceReconstructionError
from invoice_reconstruction.input_handler import InputHandler, CaptureInput
from invoice_reconstruction.output_handler import OutputHandler
from invoice_reconstruction.session import CaptureSession


def parse_arguments(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """
    Parse command-line arguments.

    Returns:
        Parsed argument namespace.
    """
    parser = argparse.ArgumentParser(
        description="Invoice Text Reconstruction System",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    Reconstruct one capture:
        python main.py --input capture.txt --output ./outputs/

    Process a directory of text and payload captures:
        python main.py --input ./captures/ --format json html excel links

    Print one record as a document:
        python main.py --input capture.txt --render "12345_Jan 1 - Jan 31"
        """
    )

    # Input/Output arguments
    parser.add_argument(
        "--input", "-i",
        type=str,
        required=True,
        help="Capture file or directory (.txt page text, .json GraphQL payloads)"
    )

    parser.add_argument(
        "--output", "-o",
        type=str,
        default=None,
        help="Output directory (default: paths.output_dir from configuration)"
    )

    parser.add_argument(
        "--format",
        nargs="+",
        choices=OutputHandler.FORMATS,
        default=["json"],
        help="Output formats to write (default: json)"
    )

    parser.add_argument(
        "--render",
        metavar="KEY",
        default=None,
        help="Print the document of the record stored under KEY and exit"
    )

    # Processing options
    parser.add_argument(
        "--config", "-c",
        type=str,
        default=None,
        help="Path to custom configuration file"
    )

    # Logging options
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging"
    )

    parser.add_argument(
        "--quiet", "-q",
        action="store_true",
        help="Only log errors"
    )

    return parser.parse_args(argv)


def initialize_system(args: argparse.Namespace) -> ConfigurationManager:
    """
    Initialize configuration and logging.

    Args:
        args: Parsed command-line arguments.

    Returns:
        Initialized configuration manager.
    """
    config = ConfigurationManager(args.config)

    logger = setup_logger_from_config()

    if args.debug:
        level = logging.DEBUG
    elif args.quiet:
        level = logging.ERROR
    else:
        level = None

    if level is not None:
        logger.setLevel(level)
        for handler in logger.handlers:
            handler.setLevel(level)

    logger.info("=" * 60)
    logger.info("INVOICE TEXT RECONSTRUCTION SYSTEM")
    logger.info("=" * 60)
    logger.info(f"Version: {config.get('project.version', '1.0.0')}")
    logger.info(f"Input: {args.input}")

    return config


def load_captures(input_path: str, input_handler: InputHandler) -> List[CaptureInput]:
    """
    Load a capture file or every capture file of a directory.

    Raises:
        InputFileNotFoundError: If the path doesn't exist.
        InputError: If a single file cannot be loaded.
    """
    path = Path(input_path)

    if path.is_dir():
        return input_handler.load_batch(path)

    capture = input_handler.load(path)
    if not capture.success:
        raise InvoiceReconstructionError(capture.error or f"Could not load {path}")
    return [capture]


def run_reconstruction(
    input_path: str,
    config_path: Optional[str] = None
) -> CaptureSession:
    """
    Run the reconstruction pipeline over captured input.

    Args:
        input_path: Capture file or directory.
        config_path: Optional custom configuration file path.

    Returns:
        CaptureSession holding every reconstructed record and link.

    Example:
        >>> session = run_reconstruction("captures/")
        >>> session.record_count
        12
    """
    logger = get_logger(__name__)

    ConfigurationManager(config_path)

    input_handler = InputHandler()
    session = CaptureSession()

    captures = load_captures(input_path, input_handler)
    logger.info(f"Processing {len(captures)} capture(s)...")

    for capture in captures:
        added = session.ingest(capture)
        logger.info(f"  {capture.filename}: {added} item(s) added")

    logger.info(
        f"Session holds {session.record_count} record(s) and {len(session.links)} link(s)"
    )
    return session


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main function - entry point for command-line execution.

    Returns:
        Exit code (0 for success, non-zero for errors).
    """
    args = None
    try:
        args = parse_arguments(argv)

        initialize_system(args)
        logger = get_logger(__name__)

        session = run_reconstruction(args.input, args.config)
        output_handler = OutputHandler(args.output)

        if args.render is not None:
            sys.stdout.write(output_handler.render_key(session.store, args.render))
            return 0

        output_info = output_handler.save(session, args.format)

        for fmt, written in output_info.items():
            if written is None:
                logger.warning(f"No {fmt} output written")
            elif isinstance(written, list):
                logger.info(f"{fmt} output: {len(written)} file(s)")
            else:
                logger.info(f"{fmt} output: {written}")

        logger.info("=" * 60)
        logger.info(f"Reconstruction complete. {session.record_count} record(s).")
        logger.info("=" * 60)

        return 0

    except InvoiceReconstructionError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    except FileNotFoundError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    except KeyboardInterrupt:
        print("\nOperation cancelled by user", file=sys.stderr)
        return 130

    except Exception as e:
        print(f"Unexpected error: {e}", file=sys.stderr)
        if args is not None and args.debug:
            import traceback
            traceback.print_exc()
        return 1


if __name__ == "__main__":
    sys.exit(main())
