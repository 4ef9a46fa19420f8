"""
Command line front end.

    symcalc --eval "x * y + x" x=2 y=3
    symcalc --diff "x * sin(x)" --by x
"""

import argparse
import sys
from typing import List, Optional, Tuple

from .errors import CalculusError
from .expression_tree import Expression
from .expression_tree.core.operators import is_identifier
from .logging_system import LogLevel, configure_logging, log_milestone

USAGE = ('%(prog)s --eval EXPRESSION [name=value ...]\n'
         '       %(prog)s --diff EXPRESSION --by NAME')

# Options whose value is an expression or name that may itself start with '-'
_VALUE_OPTIONS = ('--eval', '--diff', '--by')


class UsageError(Exception):
    pass


class _ArgumentParser(argparse.ArgumentParser):
    def error(self, message):
        raise UsageError(message)


def parse_binding(text: str) -> Tuple[str, float]:
    name, sep, value = text.partition('=')
    if not sep or not is_identifier(name):
        raise argparse.ArgumentTypeError(f"expected name=value, got {text!r}")
    try:
        return name, float(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid number for {name}: {value!r}") from None


def build_parser() -> argparse.ArgumentParser:
    parser = _ArgumentParser(
        prog='symcalc',
        usage=USAGE,
        description="Evaluate or symbolically differentiate an expression",
        add_help=False,
    )
    mode = parser.add_mutually_exclusive_group(required=True)
    mode.add_argument("--eval", dest="eval_expr", metavar="EXPRESSION",
                      help="Evaluate EXPRESSION with the given name=value bindings")
    mode.add_argument("--diff", dest="diff_expr", metavar="EXPRESSION",
                      help="Differentiate EXPRESSION")
    parser.add_argument("--by", metavar="NAME",
                        help="Variable to differentiate by (required with --diff)")
    parser.add_argument("--log-level", default="silent",
                        choices=[level.name.lower() for level in LogLevel],
                        help="Diagnostic output on stderr (default: silent)")
    parser.add_argument("bindings", nargs="*", type=parse_binding, metavar="name=value")
    return parser


def _attach_values(argv: List[str]) -> List[str]:
    """Fold 'OPTION VALUE' into 'OPTION=VALUE' so values like '-x' are not read as flags"""
    attached = []
    i = 0
    while i < len(argv):
        arg = argv[i]
        if arg in _VALUE_OPTIONS and i + 1 < len(argv):
            attached.append(f"{arg}={argv[i + 1]}")
            i += 2
        else:
            attached.append(arg)
            i += 1
    return attached


def _check_shape(args: argparse.Namespace):
    if args.eval_expr is not None and args.by is not None:
        raise UsageError("--by is only valid with --diff")
    if args.diff_expr is not None:
        if args.by is None:
            raise UsageError("--diff requires --by NAME")
        if args.bindings:
            raise UsageError("--diff does not take name=value bindings")


def run(args: argparse.Namespace) -> str:
    if args.eval_expr is not None:
        expression = Expression.from_string(args.eval_expr)
        log_milestone(f"evaluating {expression.to_string()}")
        return str(expression.evaluate(dict(args.bindings)))

    expression = Expression.from_string(args.diff_expr)
    log_milestone(f"differentiating {expression.to_string()} by {args.by}")
    return expression.differentiate(args.by).to_string()


def main(argv: Optional[List[str]] = None) -> int:
    if argv is None:
        argv = sys.argv[1:]
    parser = build_parser()

    try:
        args = parser.parse_args(_attach_values(list(argv)))
        _check_shape(args)
    except UsageError as e:
        parser.print_usage(sys.stderr)
        print(f"{parser.prog}: error: {e}", file=sys.stderr)
        return 1

    configure_logging(LogLevel[args.log_level.upper()])

    try:
        output = run(args)
    except CalculusError as e:
        print(f"error: {e}", file=sys.stderr)
        return 1

    print(output)
    return 0


if __name__ == "__main__":
    sys.exit(main())
