"""
Lox CLI Entrypoint.

This module provides the command-line interface for the Lox expression front end.

Features:
    - Read source from `.lox` files or inline strings.
    - Lex, parse and evaluate each `;`-separated expression.
    - Print values, prefix renderings or JSON trees.
    - Launch an interactive REPL.

Example usage:
    lox calc.lox
    lox -s "1 + 2 * 3"
    lox -s "(1 + 2) * 3" -m ast
    lox --repl --verbose

Exit status:
    0 on success, 65 on a syntax error, 70 on a runtime type error,
    2 on a usage or configuration error.
"""

import argparse
import sys

from lox.lox_config import MODES, ConfigError, LoxConfig
from lox.lox_errors import LoxRuntimeError, ParseError
from lox.lox_repl import run_source

EXIT_OK = 0
EXIT_USAGE = 2
EXIT_PARSE_ERROR = 65
EXIT_RUNTIME_ERROR = 70


def run_lox(
    source: str,
    is_string: bool = False,
    mode: str = "eval",
    verbose: bool = False,
) -> int:
    """
    Run the Lox pipeline (lex → parse → evaluate/render) and print the results.

    Args:
        source (str): Lox source text, or a path to a `.lox` file.
        is_string (bool): If True, treats `source` as raw code instead of a file path.
        mode (str): "eval", "ast" or "json".
        verbose (bool): Echo tokens and trees while running.

    Returns:
        int: The process exit status.

    Raises:
        ValueError: If `is_string` is False and the source does not end with '.lox'.
    """
    if not is_string and not source.endswith(".lox"):
        raise ValueError("Only .lox files are supported.")
    if not is_string:
        with open(source, encoding="utf-8") as f:
            source = f.read()

    try:
        results = run_source(source, mode, verbose)
    except ParseError as e:
        print(f"[parse error] >>> {e}", file=sys.stderr)
        return EXIT_PARSE_ERROR
    except LoxRuntimeError as e:
        print(f"[runtime error] >>> {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    for line in results:
        print(line)
    return EXIT_OK


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="lox")
    parser.add_argument("source", nargs="?", help="Filename or raw source (with -s)")
    parser.add_argument(
        "-s", "--string", action="store_true", help="Interpret source as literal string"
    )
    parser.add_argument(
        "-m",
        "--mode",
        choices=MODES,
        default=None,
        help="Output mode (default: eval, or the configured mode)",
    )
    parser.add_argument(
        "-c",
        "--config",
        metavar="CONFIG",
        help="JSON settings file (default: $LOX_CONFIG)",
    )
    parser.add_argument(
        "--repl",
        action="store_true",
        help="Launch interactive REPL",
    )
    parser.add_argument(
        "--verbose", action="store_true", help="Echo tokens and trees"
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    """
    Entry point for the Lox CLI.

    Launches the REPL if no source is given or `--repl` is passed; otherwise
    runs the source and returns the exit status.
    """
    args = build_arg_parser().parse_args(argv)

    try:
        config = LoxConfig.from_json(args.config) if args.config else LoxConfig.from_env()
    except ConfigError as e:
        print(f"[config error] >>> {e}", file=sys.stderr)
        for problem in e.problems:
            print(f" - {problem}", file=sys.stderr)
        return EXIT_USAGE

    if args.mode:
        config.mode = args.mode
    if args.verbose:
        config.verbose = True

    if args.repl or args.source is None:
        from lox.lox_repl import start_repl

        start_repl(config)
        return EXIT_OK

    try:
        return run_lox(
            source=args.source,
            is_string=args.string,
            mode=config.mode,
            verbose=config.verbose,
        )
    except (ValueError, OSError) as e:
        print(f"[error] >>> {e}", file=sys.stderr)
        return EXIT_USAGE


if __name__ == "__main__" and not any("pytest" in arg for arg in sys.argv):
    sys.exit(main())
