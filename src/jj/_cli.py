"""Command-line driver: ``jj [-v value] [-purnOlD] [-i infile] [-o outfile] keypath``.

Reads a document, runs a query, set or delete, renders the result and writes
it out. Nothing is written when the operation fails.
"""

import argparse
import logging
import os
import sys
from dataclasses import dataclass
from importlib.metadata import version
from typing import TYPE_CHECKING

from ._exceptions import JJError
from ._mutate import delete, set_value
from ._query import resolve
from ._render import render
from ._value import display_bytes

if TYPE_CHECKING:
    from collections.abc import Sequence

    from ._types import Buffer
    from ._value import ValueType

__all__ = ["Options", "build_parser", "execute", "main"]

logger = logging.getLogger("jj")

_EPILOG = """\
examples: jj keypath                      read value from stdin
      or: jj -i infile keypath            read value from infile
      or: jj -v value keypath             edit value
      or: jj -v value -o outfile keypath  edit value and write to outfile
"""

_FLAGS: "tuple[tuple[str, str, str], ...]" = (
    ("-p", "pretty", "Make json pretty, keypath is optional"),
    ("-u", "ugly", "Make json ugly, keypath is optional"),
    ("-r", "raw", "Use raw values, otherwise types are auto-detected"),
    ("-n", "no_color", "Do not output color or extra formatting"),
    ("-O", "optimistic", "Performance boost for value updates"),
    ("-D", "delete", "Delete the value at the specified key path"),
    ("-l", "lines", "Output array values on multiple lines"),
)

_LOG_LEVELS: "dict[str, int]" = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}


@dataclass(frozen=True, slots=True)
class Options:
    """What to do with a document and how to render the result."""

    keypath: str | None = None
    value: str | None = None
    raw: bool = False
    delete: bool = False
    optimistic: bool = False
    pretty: bool = False
    ugly: bool = False
    lines: bool = False
    color: bool = False

    @classmethod
    def from_args(cls, args: argparse.Namespace, *, color: bool) -> "Options":
        """Build options from parsed command-line arguments."""
        return cls(
            keypath=args.keypath,
            value=args.value,
            raw=args.raw,
            delete=args.delete,
            optimistic=args.optimistic,
            pretty=args.pretty,
            ugly=args.ugly,
            lines=args.lines,
            color=color and not args.no_color,
        )


def execute(document: "Buffer", options: Options) -> bytes:
    """Run one query or mutation and render its result.

    Args:
        document: The input JSON.
        options: The operation and output flags.

    Returns:
        The bytes to write out. Empty when a query does not match.

    Raises:
        JJError: If the operation fails.
    """
    value_type: ValueType | None = None
    keypath = options.keypath or ""
    if options.delete:
        result: Buffer = delete(document, keypath, optimistic=options.optimistic)
    elif options.value is not None:
        result = set_value(
            document,
            keypath,
            options.value,
            raw=options.raw,
            optimistic=options.optimistic,
        )
    elif options.keypath is None:
        result = document
    else:
        found = resolve(document, options.keypath)
        if found is None:
            result = b""
        elif options.raw:
            result = found.raw
        else:
            value_type = found.type
            result = display_bytes(found.string())
    return render(
        result,
        value_type=value_type,
        pretty=options.pretty,
        ugly=options.ugly,
        lines=options.lines,
        color=options.color,
    )


def build_parser() -> argparse.ArgumentParser:
    """Create the argument parser for the jj command."""
    parser = argparse.ArgumentParser(
        prog="jj",
        description="JSON Stream Editor",
        epilog=_EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    _ = parser.add_argument(
        "keypath", nargs="?", help='JSON key path (like "name.last")'
    )
    _ = parser.add_argument(
        "-v", dest="value", metavar="value", help="Edit JSON key path value"
    )
    for flag, dest, text in _FLAGS:
        _ = parser.add_argument(flag, dest=dest, action="store_true", help=text)
    _ = parser.add_argument(
        "--force-notty", dest="no_color", action="store_true", help=argparse.SUPPRESS
    )
    _ = parser.add_argument(
        "-i", dest="infile", metavar="infile", help="Use input file instead of stdin"
    )
    _ = parser.add_argument(
        "-o",
        dest="outfile",
        metavar="outfile",
        help="Use output file instead of stdout",
    )
    _ = parser.add_argument(
        "--debug", action="store_true", help="Log engine decisions to stderr"
    )
    _ = parser.add_argument(
        "--version",
        action="version",
        version=f"jj - JSON Stream Editor {version('jj')}",
    )
    return parser


def _setup_logging(*, debug: bool) -> logging.Handler:
    # Only the "jj" logger gets a handler; engine module loggers propagate to it.
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter("jj: %(message)s"))
    logger.addHandler(handler)
    default = "DEBUG" if debug else "WARNING"
    level = os.environ.get("LOG_LEVEL", default).upper()
    logger.setLevel(_LOG_LEVELS.get(level, logging.WARNING))
    return handler


def _read_input(infile: str | None, *, mutable: bool) -> "Buffer":
    if infile is None:
        data = sys.stdin.buffer.read()
    else:
        with open(infile, "rb") as f:
            data = f.read()
    return bytearray(data) if mutable else data


def _write_output(outfile: str | None, data: bytes) -> None:
    if outfile is None:
        _ = sys.stdout.buffer.write(data)
        sys.stdout.buffer.flush()
        return
    with open(outfile, "wb") as f:
        _ = f.write(data)


def _is_terminal(outfile: str | None) -> bool:
    return outfile is None and sys.stdout.isatty()


def main(argv: "Sequence[str] | None" = None) -> int:
    """Entry point for the jj command.

    Returns:
        0 on success, 1 if the operation or I/O failed. Usage errors exit
        with status 2 through argparse.
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.keypath is None and not (args.pretty or args.ugly):
        parser.error('missing required option: "keypath"')

    handler = _setup_logging(debug=args.debug)
    options = Options.from_args(args, color=_is_terminal(args.outfile))
    try:
        document = _read_input(args.infile, mutable=options.optimistic)
        output = execute(document, options)
        _write_output(args.outfile, output)
    except (JJError, OSError) as e:
        logger.error("%s", e)  # noqa: TRY400
        return 1
    finally:
        logger.removeHandler(handler)
    return 0
