#!/usr/bin/env python3
"""
YAMLANALYZER HINTS - Failure-Mode Diagnosis
-------------------------------------------
Turns a ParseFailure into plain-text hints about its probable cause.

Hints come from three places, emitted in this order:
1. The message rule table (case-insensitive match on the parser message).
2. Scans of the text that failed to parse.
3. A generic checklist, only when nothing else fired.

The parser message itself is never altered here.

Author: YAML Analyzer Team
Date: 2026-10-19
"""

import re
import logging
from dataclasses import dataclass
from typing import Callable, List, Optional, Union

from yamlanalyzer.core.models import ParseFailure

logger = logging.getLogger("yamlanalyzer.rules.hints")


@dataclass(frozen=True)
class HintRule:
    name: str
    matches: Callable[[str], bool]  # Receives the lower-cased text
    hint: str


def _contains_any(*needles: str) -> Callable[[str], bool]:
    return lambda text: any(needle in text for needle in needles)


def _contains_all(*needles: str) -> Callable[[str], bool]:
    return lambda text: all(needle in text for needle in needles)


def _stray_character(message: str) -> bool:
    if "cannot read a block mapping entry" in message:
        return True
    # ruamel.yaml quotes the offending character: "found character '\t' that cannot start any token"
    return re.search(r"found character (?:'.*?' )?that cannot start any token", message) is not None


MESSAGE_RULES = (
    HintRule(
        "indentation",
        _contains_any("indent"),
        "Check the indentation: use a consistent 2 spaces per level and never mix tabs with spaces.",
    ),
    HintRule(
        "truncated",
        _contains_any("expected <block", "unexpected end of the document", "end of the stream"),
        "The document looks truncated: check for an unfinished mapping or a key whose value is missing.",
    ),
    HintRule(
        "dependency",
        _contains_any("no module named", "can't find variable"),
        "The YAML parser does not seem to be available: verify that ruamel.yaml is installed.",
    ),
    HintRule(
        "directive",
        _contains_all("unknown", "directive"),
        "An unknown directive was found: look for invisible or control characters, often pasted from a web page.",
    ),
    HintRule(
        "stray_character",
        _stray_character,
        "Look for stray characters and make sure every entry uses `key: value` with a space after the colon.",
    ),
    HintRule(
        "missing_colon",
        _contains_any("could not find expected ':'"),
        "A key seems to be missing its colon: every mapping entry needs `key: value`.",
    ),
    HintRule(
        "mapping_values",
        _contains_any("mapping values are not allowed"),
        "A colon appeared where a value was expected: add a space after `key:` on the previous line, "
        "or quote values that contain ': '.",
    ),
    HintRule(
        "duplicate_key",
        _contains_any("duplicate key"),
        "A key appears twice in the same mapping: remove or rename one of them.",
    ),
)

TAB_HINT = "The text contains tab characters. YAML indentation must use spaces only."
KIND_COLON_HINT = "`kind` is followed by a bare word without a colon: write `kind: <Type>`."
INLINE_COMMENT_HINT = ("A value is followed by an inline `#` comment. Make sure there is a space "
                       "before `#`, or quote the value if the `#` is part of it.")
FALLBACK_HINT = ("General checklist: indent with 2 spaces, never use tabs, write every entry as "
                 "`key: value`, and start list items with `- `.")

KIND_WITHOUT_COLON = re.compile(r'^\s*kind\s+[A-Za-z]\w*\s*$', re.MULTILINE)
VALUE_WITH_INLINE_COMMENT = re.compile(r'^[^#\n]*:[ \t]*[^\s#][^#\n]*#', re.MULTILINE)


class FailureAdvisor:
    """
    Produces ordered hint strings for a parse failure. Stateless apart from
    its rule table; it never raises.
    """

    def __init__(self, rules=MESSAGE_RULES):
        self.rules = tuple(rules)

    def hints(self, failure: Union[ParseFailure, BaseException, str, None], text: Optional[str] = "") -> List[str]:
        message = self._message_of(failure).lower()
        text = text or ""

        hints = [rule.hint for rule in self.rules if rule.matches(message)]
        hints.extend(self._scan_text(text))

        if not hints:
            hints.append(FALLBACK_HINT)

        logger.debug(f"{len(hints)} hint(s) for failure: {message[:80]!r}")
        return hints

    def _scan_text(self, text: str) -> List[str]:
        found = []
        if '\t' in text:
            found.append(TAB_HINT)
        if KIND_WITHOUT_COLON.search(text):
            found.append(KIND_COLON_HINT)
        if VALUE_WITH_INLINE_COMMENT.search(text):
            found.append(INLINE_COMMENT_HINT)
        return found

    @staticmethod
    def _message_of(failure: Union[ParseFailure, BaseException, str, None]) -> str:
        if failure is None:
            return ""
        if isinstance(failure, str):
            return failure
        message = getattr(failure, 'message', None)
        if isinstance(message, str):
            return message
        return str(failure)
