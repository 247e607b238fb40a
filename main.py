import argparse
import difflib
import logging
import sys
from collections.abc import Iterator
from pathlib import Path

from layoutfmt.constants import LAYOUT_FILE_SUFFIXES
from layoutfmt.errors import ParseError
from layoutfmt.formatter import format_if_layout, is_layout

logger = logging.getLogger(__name__)


def find_files(paths: list[str]) -> Iterator[Path]:
    for name in paths:
        path = Path(name)
        if path.is_dir():
            for child in sorted(path.rglob("*")):
                if child.is_file() and child.suffix in LAYOUT_FILE_SUFFIXES:
                    yield child
        elif path.is_file():
            yield path
        else:
            logger.warning("%s: no such file or directory", path)


def read_files(paths: list[str]) -> Iterator[tuple[Path, str | None]]:
    """Yields each file with its text, or None when it cannot be read."""
    for path in find_files(paths):
        try:
            yield path, path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as error:
            logger.error("%s: cannot read: %s", path, error)
            yield path, None


def find_layouts(paths: list[str]) -> Iterator[tuple[Path, str]]:
    for path, text in read_files(paths):
        if text is None:
            continue
        if is_layout(text):
            yield path, text
        else:
            logger.debug("%s: not a layout, skipped", path)


def format_command(args: argparse.Namespace) -> int:
    status = 0
    changed = 0
    for path, text in read_files(args.paths):
        if text is None:
            status = 1
            continue
        try:
            output = format_if_layout(text)
        except ParseError as error:
            logger.error("%s: %s", path, error)
            status = 1
            continue

        if output is None:
            logger.debug("%s: not a layout, skipped", path)
            continue
        if output == text:
            continue
        changed += 1

        if args.diff:
            sys.stdout.writelines(difflib.unified_diff(
                text.splitlines(keepends=True),
                output.splitlines(keepends=True),
                fromfile=str(path),
                tofile=str(path),
            ))
        if args.check:
            logger.info("%s: would be reformatted", path)
            status = 1
        else:
            path.write_text(output, encoding="utf-8")
            logger.info("%s: reformatted", path)

    verb = "would be reformatted" if args.check else "reformatted"
    logger.info("%d file(s) %s", changed, verb)
    return status


def list_command(args: argparse.Namespace) -> int:
    for path, _ in find_layouts(args.paths):
        print(path)
    return 0


argparser = argparse.ArgumentParser(
    description="Formats layout XML files into one canonical form."
)
argparser.add_argument("--verbose", action="store_true")
subparsers = argparser.add_subparsers(dest="command", required=True)

format_parser = subparsers.add_parser("format", help="format layout files in place")
format_parser.add_argument("paths", nargs="+")
format_parser.add_argument(
    "--check", action="store_true",
    help="write nothing, exit 1 if any file would change",
)
format_parser.add_argument("--diff", action="store_true", help="print a diff of each change")
format_parser.set_defaults(handler=format_command)

list_parser = subparsers.add_parser("list", help="list layout files")
list_parser.add_argument("paths", nargs="+")
list_parser.set_defaults(handler=list_command)


def main(argv: list[str] | None = None) -> int:
    args = argparser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s: %(message)s",
    )
    return args.handler(args)


if __name__ == "__main__":
    sys.exit(main())
