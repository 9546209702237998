"""
RiesTeX — Entry point.

Convert RIES postfix expressions or saved RIES output to LaTeX, or start
the HTTP API.
"""

import argparse
import sys

from riestex.config import configure_logging, settings
from riestex.engine import tokens_to_latex
from riestex.highlight import highlight_difference, solved_value_markup
from riestex.output import equations_for_zero_target, is_zero_target, parse_solver_output


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="riestex")
    parser.add_argument("--log-level", type=str, help="Logging level (default from RIESTEX_LOG_LEVEL)")
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("convert", help="Convert one postfix expression to LaTeX")
    p.add_argument("tokens", help='Postfix tokens, e.g. "x 1 + 2 ^"')

    p = sub.add_parser("parse", help="Extract equations from RIES output")
    p.add_argument("file", nargs="?", type=argparse.FileType("r", encoding="utf-8"),
                   default=None, help="File with RIES output (stdin when omitted)")
    p.add_argument("--target", type=str, help="Typed target value; adds the x column")
    p.add_argument("--decimals", type=int, default=None, help="Decimals for the x column")

    p = sub.add_parser("highlight", help="Highlight where COMPUTED diverges from TARGET")
    p.add_argument("target")
    p.add_argument("computed")

    p = sub.add_parser("serve", help="Run the HTTP API with uvicorn")
    p.add_argument("--host", type=str, default=settings.HOST)
    p.add_argument("--port", type=int, default=settings.PORT)
    return parser


def _run_parse(args) -> int:
    target = (args.target or "").strip()
    if target and is_zero_target(target):
        records = equations_for_zero_target()
    elif args.file is not None:
        with args.file as f:
            records = parse_solver_output(f.read())
    else:
        records = parse_solver_output(sys.stdin.read())
    for rec in records:
        line = f"{rec.lhs} = {rec.rhs}"
        if target:
            line += f"\tx = {solved_value_markup(target, rec.offset, args.decimals)}"
        else:
            line += f"\t{rec.offset}"
        print(line)
    return 0


def main(argv: list[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)
    configure_logging(args.log_level)

    if args.command == "convert":
        try:
            print(tokens_to_latex(args.tokens))
        except ValueError as e:
            print(f"error: {e}", file=sys.stderr)
            return 1
        return 0
    if args.command == "parse":
        return _run_parse(args)
    if args.command == "highlight":
        print(highlight_difference(args.target, args.computed))
        return 0

    import uvicorn
    uvicorn.run("backend.app.main:app", host=args.host, port=args.port)
    return 0


if __name__ == "__main__":
    sys.exit(main())
