"""Glob pattern matcher — pattern stored as string, compiled to a regex once.

Supported syntax:

* ``*`` any run of characters inside one path segment
* ``**`` as a whole segment: zero or more segments
* ``?`` one character other than ``/``
* ``[abc]``, ``[a-z]``, ``[!abc]`` / ``[^abc]`` character classes
* ``{a,b}`` brace alternation
* ``@(a|b)``, ``(a|b)``, ``?(a|b)``, ``*(a|b)``, ``+(a|b)``, ``!(a|b)`` extglobs
* a leading ``!`` negating the whole pattern
* a leading ``./`` is dropped, so ``./src/*`` equals ``src/*``

Dot-files are never hidden: ``*`` and ``**`` match segments starting with
``.``. Matching is done against the string only, the filesystem is never
consulted.

Unbalanced ``[``, ``(`` or ``{`` are matched as literal characters. A closed
but invalid construct (``[z-a]``) fails to compile with ``re.error``.

``!(a|b)`` is tried once, where the group starts: it rejects the rest of the
path when any alternative followed by the remainder of the pattern would
match it there. So ``!(a)*`` matches ``b`` but not ``ab``, whereas bash would
accept ``ab`` by letting the group consume nothing.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import List, Optional

_SEGMENT_CHAR = "[^/]"
_EXTGLOB_PREFIXES = "!@?*+"


@dataclass(frozen=True)
class MatchOptions:
    """Options applied to every compiled pattern."""

    nocase: bool = False


DEFAULT_OPTIONS = MatchOptions()


def _find_closing(pat: str, start: int, open_ch: str, close_ch: str) -> int:
    """Return the index of the bracket closing the one at *start*, or -1."""
    depth = 0
    i = start
    while i < len(pat):
        c = pat[i]
        if c == "\\":
            i += 2
            continue
        if c == open_ch:
            depth += 1
        elif c == close_ch:
            depth -= 1
            if depth == 0:
                return i
        i += 1
    return -1


def _split_top_level(body: str, sep: str) -> List[str]:
    """Split *body* on *sep* where it is not nested in a group."""
    parts: List[str] = []
    depth = 0
    current: List[str] = []
    i = 0
    while i < len(body):
        c = body[i]
        if c == "\\" and i + 1 < len(body):
            current.append(body[i : i + 2])
            i += 2
            continue
        if c in "({[":
            depth += 1
        elif c in ")}]":
            depth -= 1
        if c == sep and depth == 0:
            parts.append("".join(current))
            current = []
        else:
            current.append(c)
        i += 1
    parts.append("".join(current))
    return parts


def _translate_class(pat: str, i: int) -> tuple[Optional[str], int]:
    """Translate ``[...]`` starting at *i*. Returns (regex, next index).

    Returns ``(None, i)`` if the class is never closed.
    """
    j = i + 1
    negate = False
    if j < len(pat) and pat[j] in "!^":
        negate = True
        j += 1
    body_start = j
    if j < len(pat) and pat[j] == "]":
        j += 1  # a leading ']' is a literal member
    while j < len(pat) and pat[j] != "]":
        j += 1
    if j >= len(pat):
        return None, i

    members = []
    for ch in pat[body_start:j]:
        members.append(ch if ch == "-" else re.escape(ch))
    body = "".join(members)
    if negate:
        return f"[^/{body}]", j + 1
    return f"(?!/)[{body}]", j + 1


def _translate(pat: str, seg_start: bool = True) -> str:
    """Translate glob *pat* into a regex fragment (no anchors)."""
    out: List[str] = []
    i = 0
    n = len(pat)

    while i < n:
        c = pat[i]
        at_seg_start = (i == 0 and seg_start) or (i > 0 and pat[i - 1] == "/")

        # --- extglob groups: @(..) ?(..) *(..) +(..) !(..) and bare (..) ---
        if (c in _EXTGLOB_PREFIXES and i + 1 < n and pat[i + 1] == "(") or c == "(":
            open_idx = i if c == "(" else i + 1
            close_idx = _find_closing(pat, open_idx, "(", ")")
            if close_idx != -1:
                kind = "@" if c == "(" else c
                alts = [
                    _translate(alt, seg_start=at_seg_start)
                    for alt in _split_top_level(pat[open_idx + 1 : close_idx], "|")
                ]
                group = "(?:" + "|".join(alts) + ")"
                if kind == "!":
                    crosses = "/" in pat[open_idx:close_idx]
                    rest = _translate(pat[close_idx + 1 :], seg_start=False)
                    body = ".*?" if crosses else f"{_SEGMENT_CHAR}*?"
                    out.append(f"(?:(?!{group}{rest}\\Z){body}){rest}")
                    return "".join(out)
                suffix = {"@": "", "?": "?", "*": "*", "+": "+"}[kind]
                out.append(group + suffix)
                i = close_idx + 1
                continue

        # --- stars ---
        if c == "*":
            j = i
            while j < n and pat[j] == "*":
                j += 1
            seg_end = j == n or pat[j] == "/"
            if j - i >= 2 and at_seg_start and seg_end:
                if j == n:
                    if out and out[-1] == "/":
                        out.pop()
                        out.append("(?:/.*)?")
                    else:
                        out.append(".*")
                    i = j
                else:
                    out.append(f"(?:{_SEGMENT_CHAR}+/)*")
                    i = j + 1  # the '/' is consumed by the globstar
                continue
            if at_seg_start and seg_end:
                out.append(f"{_SEGMENT_CHAR}+")
            else:
                out.append(f"{_SEGMENT_CHAR}*")
            i = j
            continue

        if c == "?":
            out.append(_SEGMENT_CHAR)
            i += 1
            continue

        if c == "[":
            cls, nxt = _translate_class(pat, i)
            if cls is not None:
                out.append(cls)
                i = nxt
                continue

        if c == "{":
            close_idx = _find_closing(pat, i, "{", "}")
            if close_idx != -1:
                alts = _split_top_level(pat[i + 1 : close_idx], ",")
                if len(alts) > 1:
                    out.append(
                        "(?:"
                        + "|".join(_translate(a, seg_start=at_seg_start) for a in alts)
                        + ")"
                    )
                    i = close_idx + 1
                    continue

        if c == "\\" and i + 1 < n:
            out.append(re.escape(pat[i + 1]))
            i += 2
            continue

        out.append("/" if c == "/" else re.escape(c))
        i += 1

    return "".join(out)


@dataclass
class GlobPattern:
    """A compiled glob expression usable as a ``str -> bool`` predicate.

    Compilation happens in ``__post_init__`` so that a broken pattern is
    reported when the rule is loaded, never at match time.
    """

    pattern: str
    options: MatchOptions = DEFAULT_OPTIONS
    negated: bool = field(default=False, init=False)
    _regex: re.Pattern[str] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        source = self.pattern
        while source.startswith("!") and not source.startswith("!("):
            self.negated = not self.negated
            source = source[1:]
        if source.startswith("./"):
            source = source[2:]
        flags = re.DOTALL | (re.IGNORECASE if self.options.nocase else 0)
        self._regex = re.compile(_translate(source), flags)

    @property
    def regex(self) -> re.Pattern[str]:
        return self._regex

    def matches(self, filename: str) -> bool:
        if not self.pattern or not filename:
            return False
        return (self._regex.fullmatch(filename) is not None) != self.negated

    __call__ = matches


def compile_glob(pattern: str, options: MatchOptions = DEFAULT_OPTIONS) -> GlobPattern:
    """Compile *pattern*. Raises ``re.error`` on an invalid expression."""
    return GlobPattern(pattern, options)
