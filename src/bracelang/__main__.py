#!/usr/bin/env python3
"""
CLI for the bracelang interpreter.

Usage:
    bracelang [options] [PROGRAM]
    python -m bracelang [options] [PROGRAM]

Without PROGRAM (and without --file) the CLI prompts for one line on
standard input.

Examples:
    # Run a program and print the final variables
    bracelang "{ x = 5; y = x - 2; }"

    # Evaluate a single expression
    bracelang --expr "2 + 3 * 4"

    # Show the tokens or the AST instead of running
    bracelang --tokens "{ if (1) x = 1; }"
    bracelang --ast "{ if (1) x = 1; else x = 2; }"

    # Checked 32-bit arithmetic, JSON output
    bracelang --bits 32 --checked --json "{ x = 2147483647 + 1; }"
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from . import __version__
from .ast import format_ast
from .errors import LangError
from .lexer import Lexer
from .parser import Parser, ParserConfig
from .runtime import (
    Interpreter, IntegerSemantics, OverflowMode, create_context,
)

logger = logging.getLogger("bracelang")

PROMPT = "Enter program:"


def _bit_width(text: str) -> int:
    """argparse type for --bits."""
    try:
        bits = int(text)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid bit width: {text!r}")
    if not IntegerSemantics.MIN_BITS <= bits <= IntegerSemantics.MAX_BITS:
        raise argparse.ArgumentTypeError(
            f"bit width must be between {IntegerSemantics.MIN_BITS} and {IntegerSemantics.MAX_BITS}"
        )
    return bits


def _max_depth(text: str) -> int:
    """argparse type for --max-depth."""
    try:
        value = int(text)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid integer: {text!r}")
    if not 1 <= value <= ParserConfig.DEPTH_CEILING:
        raise argparse.ArgumentTypeError(
            f"must be between 1 and {ParserConfig.DEPTH_CEILING}"
        )
    return value


def create_arg_parser() -> argparse.ArgumentParser:
    """Create command line argument parser."""
    parser = argparse.ArgumentParser(
        prog='bracelang',
        description='Tokenize, parse and run a bracelang program',
    )
    parser.add_argument('program', nargs='?',
                        help='program source (prompted for on stdin when omitted)')
    parser.add_argument('-f', '--file', metavar='PATH',
                        help='read the program from a file')
    parser.add_argument('-e', '--expr', action='store_true',
                        help='treat the input as a single expression and print its value')
    parser.add_argument('--tokens', action='store_true',
                        help='print the token stream and exit')
    parser.add_argument('--ast', action='store_true',
                        help='print the parsed AST and exit')
    parser.add_argument('--json', action='store_true',
                        help='print results and errors as JSON')
    parser.add_argument('--bits', type=_bit_width, default=64, metavar='N',
                        help='integer width in bits (default: 64)')
    parser.add_argument('--checked', action='store_true',
                        help='fail on integer overflow instead of wrapping')
    parser.add_argument('--max-depth', type=_max_depth, default=ParserConfig.max_depth,
                        metavar='N', help='maximum nesting depth (default: %(default)s)')
    parser.add_argument('-v', '--verbose', action='count', default=0,
                        help='show full diagnostics; repeat for debug logging')
    parser.add_argument('--version', action='version', version=f'%(prog)s {__version__}')
    return parser


def configure_logging(verbosity: int) -> None:
    """Route log records to stderr at a level chosen by -v."""
    if verbosity >= 2:
        level = logging.DEBUG
    elif verbosity == 1:
        level = logging.INFO
    else:
        level = logging.WARNING
    logging.basicConfig(
        level=level,
        stream=sys.stderr,
        format="%(levelname)s %(name)s: %(message)s",
    )


def read_source(args) -> str:
    """Get the program text from the argument, a file, or one line of stdin."""
    if args.program is not None:
        return args.program
    if args.file is not None:
        return Path(args.file).read_text(encoding="utf-8")
    print(PROMPT)
    try:
        return input()
    except EOFError:
        return ""


def print_tokens(lexer: Lexer) -> None:
    for token in lexer:
        print(f"{token.span.start}\t{token}")


def print_result(args, variables=None, value=None) -> None:
    if args.expr:
        if args.json:
            print(json.dumps({"value": value}))
        else:
            print(value)
        return

    if args.json:
        print(json.dumps({"variables": variables}))
        return
    print("Final variables:")
    for name, bound in variables.items():
        print(f"{name} = {bound}")


def report_error(args, error: LangError) -> None:
    if args.json:
        print(json.dumps({"error": error.diagnostic.to_json()}), file=sys.stderr)
        return
    print(f"Error: {error.span.start}: {error.message}", file=sys.stderr)
    if args.verbose:
        print(error.diagnostic.format(), file=sys.stderr)


def run(args) -> int:
    """Run the pipeline for parsed arguments. Returns the exit status."""
    try:
        source = read_source(args)
    except OSError as e:
        print(f"Error: cannot read {args.file}: {e.strerror or e}", file=sys.stderr)
        return 1
    except UnicodeDecodeError as e:
        print(f"Error: cannot read {args.file or 'standard input'}: not valid UTF-8 ({e.reason})",
              file=sys.stderr)
        return 1

    filename = args.file
    semantics = IntegerSemantics(
        bits=args.bits,
        overflow=OverflowMode.CHECK if args.checked else OverflowMode.WRAP,
    )
    parser_config = ParserConfig(max_depth=args.max_depth)

    try:
        lexer = Lexer(source, filename)
        if args.tokens:
            print_tokens(lexer)
            return 0

        parser = Parser(lexer, parser_config)
        tree = parser.parse_expression() if args.expr else parser.parse_program()
        if args.ast:
            print(format_ast(tree))
            return 0

        ctx = create_context(source, semantics, filename=filename)
        interpreter = Interpreter()
        if args.expr:
            value = interpreter.evaluate(tree, ctx)
            print_result(args, value=value)
        else:
            result = interpreter.run(tree, ctx)
            print_result(args, variables=result.variables)
        return 0

    except LangError as e:
        logger.info("run failed with %s (%s)", type(e).__name__, e.code)
        report_error(args, e)
        return 1


def main(argv: Optional[List[str]] = None) -> int:
    args = create_arg_parser().parse_args(argv)
    if args.program is not None and args.file is not None:
        print("Error: give either PROGRAM or --file, not both", file=sys.stderr)
        return 2
    configure_logging(args.verbose)
    return run(args)


if __name__ == '__main__':
    sys.exit(main())
