"""Job options resolution: macro expansion + properties parsing.

Options are written by users as a small properties document, one
``key=value`` (or ``key:value``) pair per line, and may reference build
environment variables as ``${VAR}`` or ``$VAR``::

    artifact=${JOB_NAME}-${BUILD_NUMBER}.war
    env: production
    # comments start with '#' or '!'
    message=multi \\
        line value

Expansion happens first; unknown variables are left as written.
Parsing is stricter than java.util.Properties: every pair needs an
explicit separator and a key without whitespace, so a typo such as
``not a valid line ===`` is reported instead of silently producing
a nonsense option.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping
from typing import TYPE_CHECKING

from rundeck_notifier.exceptions import OptionsParseError

if TYPE_CHECKING:
    from rundeck_notifier.protocols import BuildListener

logger = logging.getLogger(__name__)

_MACRO = re.compile(r"\$([A-Za-z0-9_]+|\{[A-Za-z0-9_.]+\}|\$)")
_WHITESPACE = " \t\f"
_SEPARATORS = "=:"
_ESCAPES = {"t": "\t", "n": "\n", "r": "\r", "f": "\f"}
# Only CR, LF and CRLF end a line, as in java.util.Properties.
_LINE_END = re.compile(r"\r\n|\r|\n")


def expand_macros(text: str, variables: Mapping[str, str]) -> str:
    """Replace ``$VAR`` / ``${VAR}`` with values from *variables*.

    Unknown variables are left verbatim. ``$$`` collapses to ``$``.

    Example::

        >>> expand_macros("key=${FOO} $BAR $$HOME", {"FOO": "bar"})
        'key=bar $BAR $HOME'
    """
    parts: list[str] = []
    idx = 0
    for match in _MACRO.finditer(text):
        token = match.group(1)
        if token == "$":
            value: str | None = "$"
        else:
            name = token[1:-1] if token.startswith("{") else token
            value = variables.get(name)
        parts.append(text[idx:match.start()])
        parts.append(match.group(0) if value is None else value)
        idx = match.end()
    parts.append(text[idx:])
    return "".join(parts)


def _ends_with_odd_backslashes(line: str) -> bool:
    count = len(line) - len(line.rstrip("\\"))
    return count % 2 == 1


def _logical_lines(text: str) -> list[tuple[int, str]]:
    """Join continuation lines and drop blanks/comments.

    Returns (line_number, logical_line) pairs; line_number is the
    1-based number of the first natural line.
    """
    natural = _LINE_END.split(text)
    if natural[-1] == "":
        natural.pop()
    logical: list[tuple[int, str]] = []
    i = 0
    while i < len(natural):
        line_number = i + 1
        line = natural[i].lstrip(_WHITESPACE)
        i += 1
        if not line or line[0] in "#!":
            continue
        while _ends_with_odd_backslashes(line):
            if i >= len(natural):
                raise OptionsParseError(
                    "line continuation at end of input", line_number
                )
            line = line[:-1] + natural[i].lstrip(_WHITESPACE)
            i += 1
        logical.append((line_number, line))
    return logical


def _find_separator(line: str) -> int:
    j = 0
    while j < len(line):
        ch = line[j]
        if ch == "\\":
            j += 2
            continue
        if ch in _SEPARATORS:
            return j
        j += 1
    return -1


def _rstrip_unescaped(raw: str) -> str:
    end = len(raw)
    while end > 0 and raw[end - 1] in _WHITESPACE:
        backslashes = len(raw[: end - 1]) - len(raw[: end - 1].rstrip("\\"))
        if backslashes % 2 == 1:
            break
        end -= 1
    return raw[:end]


def _unescape(raw: str, line_number: int, *, is_key: bool) -> str:
    out: list[str] = []
    j = 0
    while j < len(raw):
        ch = raw[j]
        if ch != "\\":
            if is_key and ch in _WHITESPACE:
                raise OptionsParseError(
                    f"whitespace in key {raw!r}", line_number
                )
            out.append(ch)
            j += 1
            continue
        if j + 1 >= len(raw):
            # lone trailing backslash is dropped
            break
        nxt = raw[j + 1]
        if nxt == "u":
            digits = raw[j + 2 : j + 6]
            if len(digits) != 4 or not all(c in "0123456789abcdefABCDEF" for c in digits):
                raise OptionsParseError(
                    f"malformed \\uXXXX escape in {raw!r}", line_number
                )
            out.append(chr(int(digits, 16)))
            j += 6
            continue
        out.append(_ESCAPES.get(nxt, nxt))
        j += 2
    return "".join(out)


def parse_properties(text: str) -> dict[str, str]:
    """Parse a properties document into an ordered dict.

    Raises:
        OptionsParseError: On a line without separator, an empty key,
            a key containing whitespace, a malformed ``\\u`` escape, or a
            dangling line continuation.
    """
    result: dict[str, str] = {}
    for line_number, line in _logical_lines(text):
        sep = _find_separator(line)
        if sep < 0:
            raise OptionsParseError(
                f"missing '=' or ':' separator in {line!r}", line_number
            )
        key_raw = _rstrip_unescaped(line[:sep])
        if not key_raw:
            raise OptionsParseError(f"empty key in {line!r}", line_number)
        key = _unescape(key_raw, line_number, is_key=True)
        value = _unescape(line[sep + 1 :].lstrip(_WHITESPACE), line_number, is_key=False)
        result[key] = value
    return result


def _escape(text: str, *, is_key: bool) -> str:
    out: list[str] = []
    for idx, ch in enumerate(text):
        if ch == "\\":
            out.append("\\\\")
        elif ch in "\t\n\r\f":
            out.append("\\" + {"\t": "t", "\n": "n", "\r": "r", "\f": "f"}[ch])
        elif ch in "=:#!":
            out.append("\\" + ch)
        elif ch == " " and (is_key or idx == 0):
            out.append("\\ ")
        else:
            out.append(ch)
    return "".join(out)


def dump_properties(options: Mapping[str, str]) -> str:
    """Serialize options back into a document parse_properties accepts."""
    return "\n".join(
        f"{_escape(key, is_key=True)}={_escape(value, is_key=False)}"
        for key, value in options.items()
    )


def resolve_options(
    raw: str | None,
    variables: Mapping[str, str],
    listener: BuildListener | None = None,
) -> dict[str, str]:
    """Expand build variables in *raw* and parse it into job options.

    A blank *raw* yields an empty dict. Expansion trouble is logged and
    the unexpanded text is parsed instead.

    Raises:
        OptionsParseError: If the (expanded) text is not a valid
            properties document. Callers must not notify in that case.
    """
    if raw is None or not raw.strip():
        return {}

    text = raw
    try:
        text = expand_macros(raw, variables)
    except Exception as exc:  # variable lookup is host-provided
        logger.warning("Failed to expand environment variables: %s", exc)
        if listener is not None:
            listener.log(f"Failed to expand environment variables : {exc}")

    try:
        return parse_properties(text)
    except OptionsParseError as exc:
        logger.debug("Options parse failed: %s", exc)
        if listener is not None:
            listener.log(f"Failed to parse options : {text}")
            listener.log(f"Error : {exc}")
        raise
