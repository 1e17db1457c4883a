from argparse import ArgumentParser
from pathlib import Path
import logging
import sys

from pbxdecode import Config
from pbxdecode.details.tools.dump import dump_main
from pbxdecode.details.tools.summary import summary_main
from pbxdecode.errors import DecodeError, format_path


def main(argv=None):
    COMMANDS = {
        "summary": summary_main,
        "dump": dump_main,
    }
    parser = ArgumentParser(prog="pbxdecode")
    parser.add_argument("command", choices=COMMANDS.keys())
    parser.add_argument("project", type=Path, help=".xcodeproj directory or project.pbxproj file")
    parser.add_argument("--unknown-limit", type=int, default=10)
    parser.add_argument("--indent", type=int, default=2)
    parser.add_argument("--verbose", "-v", action="store_true")
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    config = Config(unknown_limit=args.unknown_limit, indent=args.indent)
    try:
        exit_code = COMMANDS[args.command](config=config, project_path=args.project)
    except DecodeError as e:
        print(f"error: {e.describe()}", file=sys.stderr)
        print(f"  path: {format_path(e.path)}", file=sys.stderr)
        sys.exit(1)
    except FileNotFoundError as e:
        print(f"error: {e}", file=sys.stderr)
        sys.exit(1)
    if exit_code is not None:
        sys.exit(exit_code)


if __name__ == "__main__":
    main()
