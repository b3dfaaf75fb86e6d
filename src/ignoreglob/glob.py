"""Translation of ignore-file glob rules into anchored regular expressions.

Supported dialect:

* `*` matches anything but `/`
* `**` at the start of the rule or of a path segment matches across segments, `**/` matches
  zero or more complete segments
* `?` matches a single character
* `[...]` is copied into the regex as a character class
* `\\` escapes the following character
* a leading `/` anchors the rule at the search root, otherwise the rule matches at any depth
"""

import re
from enum import Enum
from typing import List, Optional, Union

from typing_extensions import Protocol

from .cache import get_regex_cache
from .utils.logging import LoggingDescriptor

__all__ = [
    "MATCH_ALL",
    "CompiledPattern",
    "NEVER_MATCHES",
    "Matcher",
    "ScanState",
    "build_matcher",
    "compile_regex_text",
    "translate",
]

_logger = LoggingDescriptor(name=__name__)

SEPARATOR = "/"

ANY_DEPTH_PREFIX = "([^/]*?/)*"
ROOT_ANCHOR = "^"
STAR = "[^/]*?"
DOUBLE_STAR_SEGMENTS = "([^/]*/)*?"
TRAILING_WILDCARD = "[^/]+"
OPTIONAL_SEPARATOR = "?"
SUFFIX = "/?$"

_REGEX_SPECIALS = frozenset(".()+|^$@%{}")
_ESCAPABLE = _REGEX_SPECIALS | frozenset("*?[]\\")


class ScanState(Enum):
    LITERAL = "literal"
    ESCAPE = "escape"
    STAR = "star"
    DOUBLE_STAR = "double_star"
    BRACKET = "bracket"


class _Scanner:
    def __init__(self) -> None:
        self.out: List[str] = []
        self.state = ScanState.LITERAL
        self.pos = 0
        self.bracket_start: Optional[int] = None
        self.bracket_out = 0

    def last_emitted(self) -> str:
        for part in reversed(self.out):
            if part:
                return part[-1]
        return ""

    def emit(self, text: str) -> None:
        self.out.append(text)

    def literal(self, ch: str) -> None:
        if ch == "*":
            self.state = ScanState.STAR
        elif ch == "\\":
            self.state = ScanState.ESCAPE
        elif ch == "?":
            self.emit(".")
        elif ch == "[":
            self.state = ScanState.BRACKET
            self.bracket_start = self.pos
            self.bracket_out = len(self.out)
            self.emit(ch)
        elif ch == "]":
            self.emit("\\]")
        elif ch in _REGEX_SPECIALS:
            self.emit("\\" + ch)
        else:
            self.emit(ch)

    def escape(self, ch: str) -> None:
        self.state = ScanState.LITERAL
        self.emit("\\" + ch if ch in _ESCAPABLE else ch)

    def star(self, ch: str) -> None:
        if ch == "*":
            if self.last_emitted() in ("", ROOT_ANCHOR, SEPARATOR):
                self.state = ScanState.DOUBLE_STAR
            else:
                self.emit(STAR)
                self.state = ScanState.LITERAL
            return

        self.emit(STAR)
        self.state = ScanState.LITERAL
        self.literal(ch)

    def double_star(self, ch: str) -> None:
        self.state = ScanState.LITERAL
        if ch == SEPARATOR:
            self.emit(DOUBLE_STAR_SEGMENTS)
            return

        self.emit(STAR)
        self.literal(ch)

    def bracket(self, ch: str) -> None:
        self.emit(ch)
        if ch == "]":
            self.state = ScanState.LITERAL

    def scan(self, chars: str) -> None:
        i = 0
        while True:
            while i < len(chars):
                ch = chars[i]
                self.pos = i

                if self.state is ScanState.BRACKET:
                    self.bracket(ch)
                elif self.state is ScanState.ESCAPE:
                    self.escape(ch)
                elif self.state is ScanState.STAR:
                    self.star(ch)
                elif self.state is ScanState.DOUBLE_STAR:
                    self.double_star(ch)
                else:
                    self.literal(ch)

                i += 1

            if self.state is not ScanState.BRACKET or self.bracket_start is None:
                return

            # unterminated bracket, rescan everything after it as plain text
            del self.out[self.bracket_out :]
            self.emit("\\[")
            self.state = ScanState.LITERAL
            i = self.bracket_start + 1
            self.bracket_start = None

    def finish(self) -> str:
        if self.state in (ScanState.STAR, ScanState.DOUBLE_STAR):
            self.emit(TRAILING_WILDCARD)
        elif self.last_emitted() == SEPARATOR:
            self.emit(OPTIONAL_SEPARATOR)

        self.emit(SUFFIX)

        return "".join(self.out)


def translate(glob: str) -> str:
    """Translates `glob` into regex text without consulting the cache.

    Never raises. The result may still be an invalid regular expression, for instance if a
    bracket expression contains an invalid range.
    """
    scanner = _Scanner()

    if glob.startswith(SEPARATOR):
        scanner.emit(ROOT_ANCHOR)
        chars = glob[1:]
    else:
        if not glob.startswith("**"):
            scanner.emit(ANY_DEPTH_PREFIX)
        chars = glob

    scanner.scan(chars)

    return scanner.finish()


def compile_regex_text(glob: str) -> str:
    return get_regex_cache().get_or_compute(glob, translate)


class Matcher(Protocol):
    def matches(self, path: str) -> bool: ...


class _MatchAll:
    def matches(self, path: str) -> bool:
        return True

    def __repr__(self) -> str:
        return "MATCH_ALL"


class _NeverMatches:
    def matches(self, path: str) -> bool:
        return False

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "NEVER_MATCHES"


MATCH_ALL = _MatchAll()
NEVER_MATCHES = _NeverMatches()


class CompiledPattern:
    __slots__ = ("glob", "regex")

    def __init__(self, glob: str, regex: "re.Pattern[str]") -> None:
        self.glob = glob
        self.regex = regex

    def matches(self, path: str) -> bool:
        return self.regex.fullmatch(path) is not None

    def __str__(self) -> str:
        return self.glob

    def __repr__(self) -> str:
        return f"{type(self).__qualname__}(glob={self.glob!r}, regex={self.regex.pattern!r})"


def build_matcher(glob: str) -> Union[CompiledPattern, _NeverMatches]:
    regex_text = compile_regex_text(glob)
    try:
        return CompiledPattern(glob, re.compile(regex_text))
    except re.error as e:
        _logger.debug(lambda: f"glob {glob!r} translated to invalid regex {regex_text!r}: {e}")
        return NEVER_MATCHES
