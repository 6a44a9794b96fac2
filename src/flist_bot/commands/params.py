"""
Argument tokenizing and parameter binding.

Raw arguments are split shell-style so quoted names survive as one token.
Each command declares an ordered tuple of :class:`ParamSpec`; binding walks
that tuple and produces the ``params`` dict handed to the handler:

- plain params take one token
- a variadic param takes the remaining tokens, joined with spaces or, with
  ``csv=True``, split on commas into a list
- optional params after a variadic one are taken from the end, and only when
  the token is one of their ``choices``
- keyword params (``keyword="for"``) bind a trailing ``for <value>`` pair
"""

from __future__ import annotations

import re
import shlex
from dataclasses import dataclass
from typing import Any, Dict, List, Sequence, Tuple

from ..errors import UsageError

_CSV_RE = re.compile(r",\s*")


@dataclass(frozen=True, slots=True)
class ParamSpec:
    name: str
    required: bool = True
    variadic: bool = False
    csv: bool = False
    choices: Tuple[str, ...] = ()
    keyword: str | None = None

    def usage(self) -> str:
        if self.keyword:
            return f"[{self.keyword} <{self.name}>]"
        label = self.name
        if self.choices:
            label = "|".join(self.choices)
        if self.csv:
            label = f"{label}, ..."
        elif self.variadic:
            label = f"{label}..."
        return f"<{label}>" if self.required else f"[{label}]"

    def accepts(self, token: str) -> bool:
        return not self.choices or token.lower() in self.choices


def tokenize(text: str) -> List[str]:
    """Split ``text`` into tokens, honouring double quotes when they balance."""
    lexer = shlex.shlex(text, posix=True)
    lexer.whitespace_split = True
    lexer.quotes = '"'
    lexer.escape = ""
    lexer.commenters = ""
    try:
        return list(lexer)
    except ValueError:
        return text.split()


def split_csv(values: Sequence[str] | str) -> List[str]:
    """Join ``values`` with spaces and split on commas, dropping blanks."""
    if not isinstance(values, str):
        values = " ".join(values)
    return [v.strip() for v in _CSV_RE.split(values) if v.strip()]


def _missing(spec: ParamSpec) -> UsageError:
    return UsageError(f"Missing parameter: {spec.name}")


def bind(specs: Sequence[ParamSpec], tokens: Sequence[str]) -> Dict[str, Any]:
    """Bind ``tokens`` to ``specs``; raise ``UsageError`` on a mismatch."""
    rest = list(tokens)
    values: Dict[str, Any] = {}

    for spec in specs:
        if not spec.keyword:
            continue
        if len(rest) >= 2 and rest[-2].lower() == spec.keyword:
            values[spec.name] = rest[-1]
            del rest[-2:]
        elif spec.required:
            raise _missing(spec)
        else:
            values[spec.name] = None

    positional = [s for s in specs if not s.keyword]
    for idx, spec in enumerate(positional):
        if spec.variadic:
            trailing = positional[idx + 1:]
            for tail in reversed(trailing):
                if rest and len(rest) > 1 and tail.choices and tail.accepts(rest[-1]):
                    values[tail.name] = rest.pop().lower()
                else:
                    values[tail.name] = None
            taken, rest = rest, []
            if spec.csv:
                value: Any = split_csv(taken)
            else:
                value = " ".join(taken).strip() or None
            if spec.required and not value:
                raise _missing(spec)
            values[spec.name] = value
            break

        if not rest:
            if spec.required:
                raise _missing(spec)
            values[spec.name] = None
            continue

        token = rest.pop(0)
        if not spec.accepts(token):
            raise UsageError(
                f'Invalid {spec.name}: "{token}" (expected one of {", ".join(spec.choices)})'
            )
        values[spec.name] = token.lower() if spec.choices else token

    if rest:
        raise UsageError(f"Unexpected argument(s): {' '.join(rest)}")
    return values


__all__ = ["ParamSpec", "tokenize", "split_csv", "bind"]
