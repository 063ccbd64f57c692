"""
Command-line interface for the VEO Harvester.

Harvests the fields listed in a control file from one or more VEOs (or
directories of VEOs) and writes them as XML, JSON, CSV or TSV, either to one
output file / standard output, or to one output file per VEO.

Example:
    veo-harvester -cf fields.txt --csv -o summary.csv -od out/ veos/
"""

import argparse
import logging
import sys

from pathlib import Path
from typing import List, Optional

from .config.config_manager import get_config_manager
from .config.processing_defaults import ProcessingDefaults
from .exceptions import ConfigurationError, OutputError
from .processing.harvest_processor import HarvestProcessor


LOG_LEVELS = ["CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"]


def existing_directory(value: str) -> Path:
    """argparse type for the output directory, which must already exist."""
    path = Path(value)
    if not path.is_dir():
        raise argparse.ArgumentTypeError(f"Output directory '{value}' does not exist or is not a directory")
    return path


def build_argument_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="veo-harvester",
        description="Harvest metadata from VERS V2 VEOs into XML, JSON, CSV or TSV",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Control file lines: <path>[<TAB><default>[<TAB><tag>]]\n"
            "Lines starting with '!' are comments. Path aliases such as 'fileVEO' and\n"
            "'recordVEO' expand to the full VEO element paths."
        )
    )

    # Required arguments
    parser.add_argument("-cf", "--control-file", required=True,
                        help="Control file listing the fields to harvest")
    parser.add_argument("inputs", nargs="+", metavar="FILE_OR_DIRECTORY",
                        help="VEOs, or directories searched recursively for VEOs")

    # Output format
    formats = parser.add_mutually_exclusive_group()
    formats.add_argument("--xml", dest="output_format", action="store_const", const="xml", help="XML output")
    formats.add_argument("--json", dest="output_format", action="store_const", const="json", help="JSON output")
    formats.add_argument("--csv", dest="output_format", action="store_const", const="csv", help="Comma separated output")
    formats.add_argument("--tsv", dest="output_format", action="store_const", const="tsv", help="Tab separated output")

    # Output destination
    destination = parser.add_mutually_exclusive_group()
    destination.add_argument("-o", "--output", dest="output_file",
                             help="Write every record to this file (relative to the output directory)")
    destination.add_argument("--stdout", action="store_true",
                             help="Write every record to standard output")
    parser.add_argument("-od", "--output-dir", type=existing_directory,
                        help="Directory for output files (default: current directory)")

    # Behaviour
    parser.add_argument("--nested", action="store_true",
                        help="Output the complete element subtree under each configured path")
    parser.add_argument("-c", "--chatty", action="store_true",
                        help="Report each VEO as it is processed")

    # Logging
    parser.add_argument("-v", "--verbose", action="store_true", help="Log at INFO level")
    parser.add_argument("-d", "--debug", action="store_true", help="Log at DEBUG level")
    parser.add_argument("--log-level", choices=LOG_LEVELS,
                        help=f"Logging level (default: {ProcessingDefaults.LOG_LEVEL})")
    return parser


def configure_logging(log_level: str) -> None:
    """Set up logging without reconfiguring root if already configured."""
    root_logger = logging.getLogger()
    if not root_logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s'))
        root_logger.addHandler(handler)
        root_logger.setLevel(getattr(logging, log_level))
    logging.getLogger("veo_harvester").setLevel(getattr(logging, log_level))


def resolve_log_level(args: argparse.Namespace, default_level: str) -> str:
    if args.debug:
        return "DEBUG"
    if args.verbose:
        return "INFO"
    if args.log_level:
        return args.log_level
    return default_level if default_level in LOG_LEVELS else ProcessingDefaults.LOG_LEVEL


def main(args: Optional[List[str]] = None) -> int:
    """
    Main entry point for the CLI application.

    Args:
        args: Optional command line arguments (defaults to sys.argv)

    Returns:
        Exit code (0 for success, 1 for a fatal error; usage errors exit with 2)
    """
    if args is None:
        args = sys.argv[1:]
    parsed = build_argument_parser().parse_args(args)

    config_manager = get_config_manager()
    configure_logging(resolve_log_level(parsed, config_manager.settings.log_level))
    logger = logging.getLogger(__name__)
    logger.debug(f"Configuration summary: {config_manager.get_configuration_summary()}")
    if parsed.debug:
        ProcessingDefaults.log_summary(logger)

    try:
        field_specs = config_manager.load_field_specs(parsed.control_file)
        config = config_manager.get_harvest_config(
            output_format=parsed.output_format,
            output_dir=parsed.output_dir,
            output_file=parsed.output_file,
            to_stdout=parsed.stdout,
            nested=parsed.nested,
            chatty=parsed.chatty
        )

        processor = HarvestProcessor(field_specs, config)
        result = processor.process(parsed.inputs)

    except ConfigurationError as e:
        logger.error(f"Configuration error: {e}")
        return 1
    except OutputError as e:
        logger.error(f"Output failed: {e}")
        return 1

    if result.documents_failed:
        logger.warning(f"{result.documents_failed} of {result.documents_processed} VEOs could not be harvested")
    logger.info(f"Harvested {result.documents_successful} VEOs in {result.processing_time_seconds:.2f}s "
                f"({result.success_rate:.1f}% success)")
    return 0


if __name__ == "__main__":
    sys.exit(main())
