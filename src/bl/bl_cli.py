"""
BL CLI Entrypoint.

This module provides the command-line interface for the BL parser.

Features:
    - Read source from `.bl` files or inline strings.
    - Tokenize and parse as a whole program, a single statement, or a block.
    - Render the result as pretty-printed BL or as JSON.
    - Output to console or file.
    - Report the first parse error on stderr and exit non-zero.

Example usage:
    bl examples/turnaround.bl
    bl -s "IF next-is-empty THEN move END IF" -m statement
    bl program.bl -t json -o program.json
    bl program.bl --pretty --verbose

Functions:
    run_bl(source: str, is_string: bool = False, mode: str = "program", target: str = "bl",
           out: str | None = None, pretty: bool = False) -> str:
        Executes the full BL pipeline (tokenize -> parse -> render -> output).

    main(argv: list[str] | None = None) -> int:
        Parses CLI arguments, runs the pipeline and returns the process exit code.
"""

import argparse
import logging
import sys

from bl.bl_ast import Program, Statement
from bl.bl_errors import BLSyntaxError
from bl.bl_parser import parse_block_source, parse_statement_source
from bl.bl_program_parser import parse_program_source
from bl.bl_render import EMITTERS, Renderer

logger = logging.getLogger(__name__)

MODES = ("program", "statement", "block")

BANNERS = {
    "program": "*** Pretty print of parsed program ***",
    "statement": "*** Pretty print of parsed statement(s) ***",
    "block": "*** Pretty print of parsed statement(s) ***",
}


def parse_source(source: str, mode: str = "program") -> Program | Statement:
    """Parse BL text as a program, a single statement, or a block.

    Raises:
        ValueError: If ``mode`` is unknown.
        BLSyntaxError: On the first grammar violation.
    """
    if mode == "program":
        return parse_program_source(source)
    if mode == "statement":
        return parse_statement_source(source)
    if mode == "block":
        return parse_block_source(source)
    raise ValueError(f"Unknown parse mode: {mode!r}")


def run_bl(
    source: str,
    is_string: bool = False,
    mode: str = "program",
    target: str = "bl",
    out: str | None = None,
    pretty: bool = False,
) -> str:
    """
    Run the BL toolchain: tokenize, parse, render, and print or write the output.

    Args:
        source (str): BL source code or path to a `.bl` file.
        is_string (bool): If True, treats `source` as raw code instead of a file path. Defaults to False.
        mode (str): What to parse: 'program', 'statement' or 'block'. Defaults to 'program'.
        target (str): Output format, 'bl' or 'json'. Defaults to 'bl'.
        out (str | None): Optional path to write the output. If None, prints to stdout.
        pretty (bool): If True, prints progress banners around the output. Defaults to False.

    Returns:
        str: The rendered output.

    Raises:
        ValueError: If `is_string` is False and the source does not end with '.bl'.
        BLSyntaxError: If the source does not parse.
    """
    if not is_string and not source.endswith(".bl"):
        raise ValueError("Only .bl files are supported.")
    # 1. Read source
    if not is_string:
        logger.debug("Reading %s", source)
        with open(source, encoding="utf-8") as f:
            source = f.read()

    # 2. Parsing
    if pretty:
        print("*** Parsing input ***")
    tree = parse_source(source, mode)

    # 3. Rendering
    text = Renderer(target).render(tree)

    # 4. Output result
    if not out:
        if pretty:
            print(BANNERS[mode])
        print(text)
    else:
        with open(out, "w", encoding="utf-8") as f:
            f.write(text + "\n")
        if pretty:
            print(f"(wrote to {out})")
    return text


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="bl", description="Parse BL programs and statements."
    )
    parser.add_argument("source", help="Filename or raw source (with -s)")
    parser.add_argument(
        "-s", "--string", action="store_true", help="Interpret source as literal string"
    )
    parser.add_argument(
        "-m",
        "--mode",
        choices=MODES,
        default="program",
        help="Parse the input as a program, one statement, or a block (default: program)",
    )
    parser.add_argument(
        "-t",
        "--target",
        choices=tuple(EMITTERS),
        default="bl",
        help="Output format (default: bl)",
    )
    parser.add_argument("-o", "--out", metavar="OUTFILE", help="Output to file")
    parser.add_argument(
        "-p", "--pretty", action="store_true", help="Show output with banners"
    )
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    return parser


def main(argv: list[str] | None = None) -> int:
    """
    Entry point for the BL CLI.

    Exit codes:
        0: success
        1: the input does not parse
        2: the input (or output) file could not be read or written, or it is not a `.bl` file
    """
    args = build_arg_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        run_bl(
            source=args.source,
            is_string=args.string,
            mode=args.mode,
            target=args.target,
            out=args.out,
            pretty=args.pretty,
        )
    except BLSyntaxError as e:
        logger.debug(
            "Parse failed at token #%s, line %s (%s)",
            e.position,
            e.lineno,
            type(e).__name__,
        )
        print(f"error: {e}", file=sys.stderr)
        return 1
    except (OSError, ValueError) as e:
        print(f"error: {e}", file=sys.stderr)
        return 2
    return 0


if __name__ == "__main__":
    sys.exit(main())
