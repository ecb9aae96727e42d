"""Command line entry point for spandex.

Migrates snippets from one text expander to another:

    spandex --source TextExpander --dest AutoKey

Any failure aborts the whole run with exit status 1; there is no
continue-on-error mode.
"""

import argparse
import logging
import sys

from dotenv import load_dotenv

from . import __version__
from .config import Config, load_config
from .config_loader import load_hierarchical_config
from .config_schema import build_config, to_yaml_fallbacks
from .expander.errors import ExpanderError
from .expander.registry import build_registry
from .logger import setup_logging
from .migrate import run_migration

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="spandex",
        description="Migrate text expansion snippets between expanders",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Import TextExpander snippets into AutoKey
  spandex --source TextExpander --dest AutoKey

  # Custom import group and settings locations
  spandex --source TextExpander --dest AutoKey --import-name Work \\
      --textexpander-file ~/Settings.textexpander --autokey-dir ~/.config/autokey

  # Preview without writing anything
  spandex --source TextExpander --dest AutoKey --dry-run

Settings can also come from SPANDEX_* environment variables, a .env file,
or .spandex/config.yml.
        """,
    )
    parser.add_argument("--source", help="Source expander")
    parser.add_argument("--dest", help="Destination expander")
    parser.add_argument(
        "--import-name",
        help='Group name for imported snippets (default: "Imported from <source>")',
    )
    parser.add_argument(
        "--autokey-dir", help="AutoKey settings directory"
    )
    parser.add_argument(
        "--textexpander-file", help="TextExpander settings file"
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Load and merge but do not write the destination",
    )
    parser.add_argument(
        "--debug", action="store_true", help="Enable debug logging"
    )
    parser.add_argument("--log-file", help="Also append logs to this file")
    parser.add_argument(
        "--list-backends",
        action="store_true",
        help="List available expanders and exit",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"spandex version {__version__}",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    """Run one migration; return the process exit status."""
    args = build_parser().parse_args(argv)

    load_dotenv()
    unified = build_config(load_hierarchical_config())
    setup_logging(
        debug=args.debug,
        log_file=args.log_file or unified.logging.file,
        debug_format=unified.logging.format,
        level=unified.logging.level,
    )

    fallbacks = to_yaml_fallbacks(unified)
    if args.list_backends:
        # Backend names do not depend on source/dest.
        registry = build_registry(
            Config(
                source="",
                dest="",
                autokey_dir=args.autokey_dir or fallbacks["autokey_dir"],
                textexpander_file=args.textexpander_file
                or fallbacks["textexpander_file"],
            )
        )
        for name in registry.names():
            print(name)
        return 0

    try:
        config = load_config(
            source=args.source,
            dest=args.dest,
            import_name=args.import_name,
            autokey_dir=args.autokey_dir,
            textexpander_file=args.textexpander_file,
            debug=args.debug,
            yaml_fallbacks=fallbacks,
        )
    except ValueError as exc:
        logger.error("%s", exc)
        return 1

    if config.debug:
        logging.getLogger().setLevel(logging.DEBUG)

    try:
        run_migration(
            build_registry(config),
            config.source,
            config.dest,
            import_name=config.effective_import_name,
            dry_run=args.dry_run,
        )
    except (ExpanderError, OSError, ValueError) as exc:
        logger.error("%s", exc)
        logger.debug("Migration failed", exc_info=True)
        return 1
    return 0


def run() -> None:
    """Console script entry point."""
    try:
        sys.exit(main())
    except KeyboardInterrupt:
        print("\nInterrupted.", file=sys.stderr)
        sys.exit(130)


if __name__ == "__main__":
    run()
