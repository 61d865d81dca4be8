#!/usr/bin/env python3
"""activity-watcher - deadline tracking for assigned GitHub issues.

Usage:
  activity-watcher watch                 # Register assigned issues of the owner
  activity-watcher run                   # Remind / unassign / extend deadlines
  activity-watcher list                  # Show watched items and their state
  activity-watcher forget <issue-url>    # Stop watching an issue
  activity-watcher config                # Show configuration
"""

import argparse
import logging
import sys

from . import __version__
from .config import ConfigurationError


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="activity-watcher",
        description="Track activity on assigned issues, remind idle assignees and unassign them",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
EXAMPLES:
  activity-watcher watch
  activity-watcher run -v
  activity-watcher list --json
  activity-watcher forget https://github.com/org/repo/issues/12
  activity-watcher config --init

Run 'activity-watcher <command> --help' for detailed command help.
"""
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")

    subparsers = parser.add_subparsers(dest="command", required=True)

    # run
    subparsers.add_parser(
        "run", help="Evaluate every watched item once",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Activity by an assignee moves the deadline forward. Without activity, a
reminder is posted once the warning delay has passed, and assignees are
removed once the disqualification delay has passed.
"""
    )

    # watch
    subparsers.add_parser(
        "watch", help="Register assigned open issues of the configured owner",
    )

    # list
    list_parser = subparsers.add_parser("list", help="List watched items")
    list_parser.add_argument("--json", action="store_true", help="Output JSON")

    # forget
    forget_parser = subparsers.add_parser("forget", help="Stop watching an issue")
    forget_parser.add_argument("url", help="Issue URL")

    # config
    config_parser = subparsers.add_parser(
        "config", help="Show or initialize configuration",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
EXAMPLES:
  activity-watcher config              # Show current config
  activity-watcher config --init       # Create example config file
  activity-watcher config --path       # Show config file path
"""
    )
    config_parser.add_argument("--init", action="store_true", help="Create config file with example settings")
    config_parser.add_argument("--path", action="store_true", help="Show config file path")
    config_parser.add_argument("--force", action="store_true", help="Overwrite existing config (with --init)")

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    # Import and run the appropriate command
    if args.command == "run":
        from .watcher import run
    elif args.command == "watch":
        from .repos import run
    elif args.command == "list":
        from .items import run_list as run
    elif args.command == "forget":
        from .items import run_forget as run
    elif args.command == "config":
        from .config import find_config_file, init_config, show_config
        if args.path:
            config_file = find_config_file()
            if config_file:
                print(config_file)
            else:
                print("(no config file - using defaults)")
            return 0
        elif args.init:
            try:
                path = init_config(force=args.force)
                print(f"✓ Created config file: {path}")
                print(f"  Edit it to customize settings.")
                return 0
            except FileExistsError as e:
                print(f"✗ {e}")
                print("  Use --force to overwrite.")
                return 1
        else:
            try:
                show_config()
            except ConfigurationError as e:
                print(f"✗ {e}")
                return 2
            return 0
    else:
        parser.print_help()
        return 2

    try:
        return run(args)
    except ConfigurationError as e:
        print(f"✗ Configuration error: {e}")
        return 2


if __name__ == "__main__":
    sys.exit(main())
