"""CLI Interface Logic (argparse etc)"""

import argparse
import logging
from dataclasses import fields
from pathlib import Path
from typing import Optional, Sequence

from drivekit.internals.config.define_config import (
    Backend,
    PipelineKind,
    UserConfig,
    _enum_from_value,
)
from drivekit.orchestrator import run_pipeline

log = logging.getLogger("drivekit")

# Fields copied straight from args to cfg when given on the command line.
_PLAIN_FIELDS = (
    "drive_root",
    "spreadsheet",
    "input_sheet",
    "folder_url",
    "presentation_url",
    "ini_url",
    "folder_cell",
    "presentation_cell",
    "ini_cell",
    "image_mime_type",
    "report_sheet",
    "credentials_path",
    "token_path",
    "service_account_path",
)


def run(argv: Optional[Sequence[str]] = None) -> int:
    """
    Run CLI interface. Assumes startup.initialize_application() was already called.

    Returns the process exit code: 0 when the pipeline succeeded or found
    nothing to do, 1 on invalid input or failure.
    """
    args = parse_args(argv)

    # Build config from args (CLI args > config file > defaults)
    cfg = build_config_from_args(args)

    outcome = run_pipeline(cfg)
    return outcome.exit_code


def build_parser() -> argparse.ArgumentParser:
    """Create the argument parser. One flag per UserConfig field, plus --config."""
    parser = argparse.ArgumentParser(
        prog="drivekit",
        description="Put Drive folder images into a slide deck, or tabulate an ini file into a spreadsheet.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Use config file
  drivekit --config path/to/my_settings.toml

  # Images from a Drive folder into a presentation, links read from the sheet's A1/A2
  drivekit --backend google --spreadsheet https://docs.google.com/spreadsheets/d/<id>/edit \\
      --credentials-path client_secret.json

  # Same, with the links given directly and no spreadsheet
  drivekit --backend google --folder-url <folder link> --presentation-url <slides link> \\
      --credentials-path client_secret.json

  # Report on an ini file against a local drive mirror and CSV workbook
  drivekit --pipeline config-report --drive-root ./drive --spreadsheet ./workbook
        """,
    )

    # Config file (special - loads other values)
    parser.add_argument(
        "--config",
        type=str,
        metavar="PATH",
        help="Path to TOML configuration file for a pipeline run. See example in ~/Documents/drivekit/configs/sample_config.toml after at least 1 run",
    )

    parser.add_argument(
        "--pipeline",
        type=str,
        choices=[p.value for p in PipelineKind],
        help="Which pipeline to run (default: images-to-deck)",
    )
    parser.add_argument(
        "--backend",
        type=str,
        choices=[b.value for b in Backend],
        help="Where folders, files and spreadsheets live (default: local)",
    )

    # Locations
    parser.add_argument(
        "--drive-root",
        type=str,
        dest="drive_root",
        metavar="PATH",
        help="Local backend: folder holding resources named by their IDs",
    )
    parser.add_argument(
        "--spreadsheet",
        type=str,
        metavar="URL_OR_PATH",
        help="Google Sheets URL or ID, or a local folder of CSV sheets",
    )
    parser.add_argument(
        "--input-sheet",
        type=str,
        dest="input_sheet",
        metavar="NAME",
        help="Sheet to read input links from (default: the first sheet)",
    )

    # Direct inputs
    parser.add_argument(
        "--folder-url",
        type=str,
        dest="folder_url",
        metavar="URL",
        help="Drive folder link; skips reading the folder cell",
    )
    parser.add_argument(
        "--presentation-url",
        type=str,
        dest="presentation_url",
        metavar="URL",
        help="Slides link; skips reading the presentation cell",
    )
    parser.add_argument(
        "--ini-url",
        type=str,
        dest="ini_url",
        metavar="URL",
        help="Drive link to the ini file; skips reading the ini cell",
    )

    # Cells
    parser.add_argument(
        "--folder-cell",
        type=str,
        dest="folder_cell",
        metavar="CELL",
        help="Cell holding the folder link (default: A1)",
    )
    parser.add_argument(
        "--presentation-cell",
        type=str,
        dest="presentation_cell",
        metavar="CELL",
        help="Cell holding the presentation link (default: A2)",
    )
    parser.add_argument(
        "--ini-cell",
        type=str,
        dest="ini_cell",
        metavar="CELL",
        help="Cell holding the ini file link (default: A1)",
    )

    parser.add_argument(
        "--image-mime-type",
        type=str,
        dest="image_mime_type",
        metavar="TYPE",
        help="MIME type of the images to insert (default: image/png)",
    )

    # Report
    parser.add_argument(
        "--report-sheet",
        type=str,
        dest="report_sheet",
        metavar="NAME",
        help="Sheet the config report is written to (default: DC2DC Level)",
    )
    parser.add_argument(
        "--report-key",
        action="append",
        dest="report_keys",
        metavar="KEY",
        help="Key to report from every section. Repeat for more keys; replaces the default key list",
    )
    parser.add_argument(
        "--report-header",
        nargs=3,
        dest="report_header",
        metavar=("SECTION", "KEY", "VALUE"),
        help="Header row of the report",
    )

    # Google credentials
    parser.add_argument(
        "--credentials-path",
        type=str,
        dest="credentials_path",
        metavar="PATH",
        help="OAuth client secrets JSON",
    )
    parser.add_argument(
        "--token-path",
        type=str,
        dest="token_path",
        metavar="PATH",
        help="Where the OAuth token is cached (default: ~/Documents/drivekit/token.json)",
    )
    parser.add_argument(
        "--service-account-path",
        type=str,
        dest="service_account_path",
        metavar="PATH",
        help="Service account key JSON; used instead of OAuth when set",
    )

    return parser


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    """
    Parse command line arguments.

    Returns argparse.Namespace with all the UserConfig fields as attributes.
    Validates that all config fields have corresponding CLI arguments.
    """
    parser = build_parser()

    _validate_args_match_config(parser)

    return parser.parse_args(argv)


def build_config_from_args(args: argparse.Namespace) -> UserConfig:
    """
    Build UserConfig from parsed arguments with proper priority.

    Priority order (highest to lowest):
    1. CLI arguments (if explicitly provided)
    2. Config file values (if --config provided)
    3. UserConfig defaults
    """
    if args.config:
        config_path = Path(args.config)
        log.info(f"Loading config from {config_path}")
        cfg = UserConfig.from_toml(config_path)
    else:
        cfg = UserConfig()

    # argparse leaves every option None unless it was given
    if args.pipeline is not None:
        cfg.pipeline = _enum_from_value(PipelineKind, "pipeline", args.pipeline)
    if args.backend is not None:
        cfg.backend = _enum_from_value(Backend, "backend", args.backend)

    for name in _PLAIN_FIELDS:
        value = getattr(args, name)
        if value is not None:
            setattr(cfg, name, value)

    if args.report_keys is not None:
        cfg.report_keys = list(args.report_keys)
    if args.report_header is not None:
        cfg.report_header = list(args.report_header)

    cfg.validate()

    return cfg


def _validate_args_match_config(parser: argparse.ArgumentParser) -> None:
    """
    Ensure all UserConfig fields have corresponding CLI arguments.

    This validation catches cases where someone adds a field to UserConfig
    but forgets to add the corresponding CLI argument (or vice versa).

    Raises:
        RuntimeError: If there's a mismatch between config fields and CLI args
    """
    config_fields = {f.name for f in fields(UserConfig)}

    arg_names = set()
    excluded_args = ["help", "config"]
    for action in parser._actions:
        if action.dest not in excluded_args:
            arg_names.add(action.dest)

    missing_in_args = config_fields - arg_names
    extra_in_args = arg_names - config_fields

    if missing_in_args:
        log.error(
            "UserConfig fields must have corresponding arg added to cli.build_parser() to ensure parity between config files and the CLI."
        )
        raise RuntimeError(
            f"CLI arguments missing for UserConfig fields: {missing_in_args}\n"
            "These config fields need corresponding arguments added to build_parser()"
        )

    if extra_in_args:
        log.error(
            "We detected unexpected CLI args that do not match UserConfig fields. New argparse fields must either "
            "have a corresponding field in UserConfig, or be CLI-specific (like --config) "
            "and be added to the excluded_args list in _validate_args_match_config()"
        )
        raise RuntimeError(
            f"CLI arguments don't match UserConfig fields: {extra_in_args}\n"
            "Either remove these CLI args or add corresponding fields to UserConfig"
        )


def main() -> None:
    """Development entry point - run CLI directly with `python -m drivekit.cli`"""
    from drivekit import startup

    log = startup.initialize_application()
    try:
        exit_code = run()
    except Exception:
        log.exception("Fatal error in CLI")
        raise
    raise SystemExit(exit_code)


if __name__ == "__main__":
    main()
