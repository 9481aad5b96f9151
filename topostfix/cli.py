"""
명령줄 진입점.

  $ topostfix "a+(b+c*d)*e+f/g+h"
  abcd*+e*+fg/+h+

  $ topostfix --echo "(a+b)*c"
  INPUT:  (a+b)*c
  OUTPUT: ab+c*

종료 코드: 0 성공, 1 변환 오류, 2 사용법/설정 오류
"""

from __future__ import annotations

import argparse
import logging
import sys
from collections.abc import Mapping
from typing import Any, Optional

from topostfix.config import ConfigError, load_config
from topostfix.core import (
    ALLOWED_CHARS_HINT,
    ConversionError,
    Converter,
    Emitter,
    InvalidCharacterError,
    StackOverflowError,
    UnbalancedBracketsError,
)
from topostfix.logging_config import setup_logging

logger = logging.getLogger(__name__)

_HINTS = {
    InvalidCharacterError: ALLOWED_CHARS_HINT,
    StackOverflowError: "--max-depth 로 스택 깊이를 늘려 보세요.",
    UnbalancedBracketsError: "여는 괄호와 닫는 괄호의 개수를 확인하세요.",
}


def build_error(
    error: str,
    *,
    details: Optional[str] = None,
    hint: Optional[str] = None,
) -> dict[str, Any]:
    payload: dict[str, Any] = {"error": error}
    if details:
        payload["details"] = details
    if hint:
        payload["hint"] = hint
    return payload


def error_lines(payload: Mapping[str, Any]) -> list[str]:
    lines = [f"Error: {payload.get('error') or 'Unknown error.'}"]
    details = payload.get("details")
    if details:
        lines.append(f"Details: {details}")
    hint = payload.get("hint")
    if hint:
        lines.append(f"Hint: {hint}")
    return lines


def _conversion_payload(exc: ConversionError) -> dict[str, Any]:
    return build_error(
        "Error in the expression",
        details=f"{exc} in {exc.expression!r}",
        hint=_HINTS.get(type(exc)),
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="topostfix",
        description="Convert infix expressions (a-z, + - * /, brackets) to postfix notation.",
    )
    parser.add_argument("expressions", nargs="+", metavar="EXPRESSION",
                        help="Infix expression, e.g. 'a+b*c'")
    parser.add_argument("--max-depth", type=int, default=None,
                        help="Operator stack capacity (default 64)")
    parser.add_argument("--config", type=str, default=None,
                        help='JSON config file, e.g. {"max_depth": 128}')
    parser.add_argument("--echo", action="store_true",
                        help="Print INPUT:/OUTPUT: lines around each result")
    parser.add_argument("--verbose", "-v", action="store_true",
                        help="Log every conversion step to stderr")
    return parser


def main(argv: Optional[list[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging("DEBUG" if args.verbose else "ERROR")

    try:
        config = load_config(args.config, max_depth=args.max_depth)
    except ConfigError as exc:
        for line in error_lines(build_error("Invalid configuration.", details=str(exc))):
            print(line, file=sys.stderr)
        return 2

    converter = Converter(config.max_depth)
    status = 0
    for expression in args.expressions:
        if args.echo:
            print(f"INPUT:  {expression}")
            sys.stdout.write("OUTPUT: ")
        try:
            converter.run(expression, Emitter(sys.stdout))
        except ConversionError as exc:
            sys.stdout.write("\n")
            sys.stdout.flush()
            for line in error_lines(_conversion_payload(exc)):
                print(line, file=sys.stderr)
            status = 1
    logger.debug("converted %d expression(s), status=%d", len(args.expressions), status)
    return status


if __name__ == "__main__":
    sys.exit(main())
