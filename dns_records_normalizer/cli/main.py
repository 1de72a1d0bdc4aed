#!/usr/bin/env python3
"""
DNS Records Normalizer - Command Line Interface

Main entry point for the DNS Records Normalizer CLI.
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import Dict

import yaml

from ..core.export_manager import EXPORTERS, ExportManager

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        description="DNS Records Normalizer - Export DNS zones as uniform records"
    )

    parser.add_argument(
        "--config",
        "-c",
        default="configs/config.yaml",
        help="Configuration file path (default: configs/config.yaml)",
    )

    parser.add_argument("--zone", "-z", required=True, help="DNS zone to export")

    parser.add_argument(
        "--zone-file", "-f", help="BIND zone file to read instead of a zone transfer"
    )

    parser.add_argument(
        "--server-name",
        "-s",
        help="DNS server name stamped on every record (default: local host name)",
    )

    parser.add_argument(
        "--format",
        choices=sorted(EXPORTERS),
        help="Export format (default: from config, else csv)",
    )

    parser.add_argument(
        "--output", "-o", help="File to write the export to (default: stdout)"
    )

    parser.add_argument(
        "--type",
        "-t",
        action="append",
        dest="record_types",
        metavar="TYPE",
        help="Only export records of this type (repeatable)",
    )

    parser.add_argument(
        "--compare-zone-file",
        help="Compare the zone against this second zone file instead of exporting",
    )

    parser.add_argument(
        "--verbose", "-v", action="store_true", help="Enable verbose logging"
    )

    return parser


def main(argv=None):
    """Main CLI entry point."""
    args = build_parser().parse_args(argv)

    if args.zone_file and not Path(args.zone_file).exists():
        print(f"Error: Zone file '{args.zone_file}' not found")
        sys.exit(1)

    if args.compare_zone_file and not Path(args.compare_zone_file).exists():
        print(f"Error: Zone file '{args.compare_zone_file}' not found")
        sys.exit(1)

    config = load_config(args.config)
    config_logger(config, verbose=args.verbose)

    try:
        export_manager = ExportManager(config)

        if args.compare_zone_file:
            comparison = export_manager.compare(
                args.zone,
                args.zone_file,
                args.compare_zone_file,
                record_types=args.record_types,
            )
            sys.exit(0 if comparison["total_differences"] == 0 else 2)

        export_manager.export(
            args.zone,
            output=args.output,
            fmt=args.format,
            record_types=args.record_types,
            server_name=args.server_name,
            zone_file=args.zone_file,
        )
        sys.exit(0)

    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        if args.verbose:
            import traceback

            traceback.print_exc()
        sys.exit(1)


def load_config(config_path: str) -> Dict:
    """Load configuration from YAML file."""
    try:
        with open(config_path, "r") as f:
            config = yaml.safe_load(f) or {}
        logger.info(f"Configuration loaded from {config_path}")
        return config
    except FileNotFoundError:
        logger.warning(f"Config file {config_path} not found, using defaults")
        return get_default_config()
    except yaml.YAMLError as e:
        print(f"Error: Cannot parse config file {config_path}: {e}", file=sys.stderr)
        sys.exit(1)


def get_default_config() -> Dict:
    """Return default configuration."""
    return {
        "dns_providers": {"bind": {"nameserver": "127.0.0.1", "port": 53}},
        "default_provider": "bind",
        "server_name": "",
        "export": {"format": "csv"},
    }


def config_logger(config: Dict, verbose: bool = False):
    """Configure logging."""
    logging_config = config.get("logging", None)
    if logging_config:
        log_level = "DEBUG" if verbose else logging_config.get("level", "INFO")
        log_file = logging_config.get("file", "dns_records_normalizer.log")

        logging.basicConfig(
            level=log_level,
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            handlers=[
                logging.FileHandler(log_file),
                logging.StreamHandler(sys.stderr),
            ],
        )
        return

    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stderr)],
    )


if __name__ == "__main__":
    main()
