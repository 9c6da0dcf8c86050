"""Deserialization of formatter expressions.

Formatters arrive as a JSON document in which functions, regular expressions
and dates are carried as tagged strings::

    {"upper": "_function_upper|function upper(d) { return d.toUpperCase(); }"}

Tagged strings are revived into typed values so the shape survives the round
trip. Function bodies are kept as source and never executed.
"""
import json
import re
from dataclasses import dataclass
from datetime import datetime
from typing import Any

FUNCTION_PREFIX = "_function_"
REGEXP_PREFIX = "_regexp_"
DATE_PREFIX = "_date_"
UNDEFINED = "_undefined_"


class FormatterParseError(ValueError):
    pass


@dataclass(frozen=True)
class FormatterExpression:
    name: str
    source: str


@dataclass(frozen=True)
class RegExpLiteral:
    flags: str
    pattern: str


def _revive(value: Any) -> Any:
    if isinstance(value, dict):
        return {key: _revive(item) for key, item in value.items()}
    if isinstance(value, list):
        return [_revive(item) for item in value]
    if not isinstance(value, str):
        return value

    if value == UNDEFINED:
        return None
    if value.startswith(FUNCTION_PREFIX):
        name, sep, source = value[len(FUNCTION_PREFIX):].partition("|")
        if not sep:
            raise FormatterParseError(f"Malformed function expression: {value[:40]}")
        return FormatterExpression(name=name, source=source)
    if value.startswith(REGEXP_PREFIX):
        flags, sep, pattern = value[len(REGEXP_PREFIX):].partition("|")
        if not sep:
            raise FormatterParseError(f"Malformed regular expression: {value[:40]}")
        try:
            re.compile(pattern)
        except re.error as exc:
            raise FormatterParseError(f"Invalid regular expression: {exc}") from exc
        return RegExpLiteral(flags=flags, pattern=pattern)
    if value.startswith(DATE_PREFIX):
        raw = value[len(DATE_PREFIX):].replace("Z", "+00:00")
        try:
            return datetime.fromisoformat(raw)
        except ValueError as exc:
            raise FormatterParseError(f"Invalid date: {exc}") from exc
    return value


def parse_formatters(raw: str) -> Any:
    """Parse a serialized formatter document.

    Raises FormatterParseError when ``raw`` is not valid JSON or contains a
    malformed tagged value.
    """
    try:
        document = json.loads(raw)
    except (TypeError, json.JSONDecodeError) as exc:
        raise FormatterParseError(str(exc)) from exc
    return _revive(document)
