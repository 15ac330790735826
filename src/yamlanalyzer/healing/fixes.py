#!/usr/bin/env python3
"""
YAMLANALYZER FIX STAGES - The Triage Kit
----------------------------------------
Each stage is a conservative, saturating text rewrite. Stages never look at
parsed data; they work line by line on the text produced by the previous
stage and leave already-valid YAML alone wherever they can tell it is valid.

Block-scalar bodies (the lines under `key: |` or `key: >`) are content, not
structure, so the structural stages skip them.

Author: YAML Analyzer Team
Date: 2026-10-19
"""

import re
import logging
from abc import ABC, abstractmethod
from typing import List, Optional

from yamlanalyzer.core.config import AnalyzerSettings

logger = logging.getLogger("yamlanalyzer.healing.fixes")

# `key: |`, `key: >-`, `- |` ... optionally followed by a comment
BLOCK_HEADER = re.compile(r'(?:^\s*|[:\-]\s+)[|>][-+0-9]{0,2}\s*(?:#.*)?$')


def _indent_of(line: str) -> int:
    return len(line) - len(line.lstrip(' '))


def find_comment_split(text: str) -> int:
    """Index of the first '#' that starts a comment, honouring quotes. -1 if none."""
    in_double_quote = in_single_quote = escaped = False
    for i, char in enumerate(text):
        if escaped:
            escaped = False
            continue
        if char == '\\':
            escaped = True
            continue
        if char == '"' and not in_single_quote:
            in_double_quote = not in_double_quote
        elif char == "'" and not in_double_quote:
            in_single_quote = not in_single_quote
        if char == '#' and not in_double_quote and not in_single_quote:
            if i == 0 or text[i - 1].isspace():
                return i
    return -1


def block_scalar_mask(lines: List[str]) -> List[bool]:
    """Flags the lines that belong to a literal or folded block scalar body."""
    mask = []
    block_indent: Optional[int] = None
    for line in lines:
        indent = _indent_of(line)
        if block_indent is not None:
            if not line.strip() or indent > block_indent:
                mask.append(True)
                continue
            block_indent = None
        mask.append(False)
        if BLOCK_HEADER.search(line):
            block_indent = indent
    return mask


class FixStage(ABC):
    """
    Abstract strategy for one normalization step.
    """

    # When True the normalizer skips the stage on text that already parses
    only_on_parse_failure = False

    def __init__(self, settings: AnalyzerSettings):
        self.settings = settings

    @property
    @abstractmethod
    def name(self) -> str:
        """Identifier used by the settings toggles."""

    @property
    @abstractmethod
    def description(self) -> str:
        """Human-readable summary, reported when the stage changes the text."""

    @abstractmethod
    def apply(self, text: str) -> str:
        """Returns the rewritten text. Must never raise."""


class ByteCleanupFix(FixStage):
    @property
    def name(self) -> str:
        return "byte_cleanup"

    @property
    def description(self) -> str:
        return "Removed byte-order mark, non-breaking spaces and CRLF line endings"

    def apply(self, text: str) -> str:
        text = text.lstrip('\ufeff')
        text = text.replace('\u00a0', ' ')
        return re.sub(r'\r+\n', '\n', text)


class TabExpansionFix(FixStage):
    @property
    def name(self) -> str:
        return "tab_expansion"

    @property
    def description(self) -> str:
        return f"Replaced tab characters with {self.settings.tab_width} spaces"

    def apply(self, text: str) -> str:
        return text.replace('\t', ' ' * self.settings.tab_width)


class TrailingWhitespaceFix(FixStage):
    @property
    def name(self) -> str:
        return "trailing_whitespace"

    @property
    def description(self) -> str:
        return "Trimmed trailing whitespace"

    def apply(self, text: str) -> str:
        return '\n'.join(line.rstrip(' \t') for line in text.split('\n'))


class MissingColonFix(FixStage):
    """
    Injects the colon in `key value` lines.
    Lines that already hold a colon, list items, structural-looking values and
    prose-length values are left untouched.
    """

    KEY_VALUE = re.compile(r'^(\s*)([A-Za-z0-9_@.\-]+) +(\S.*)$')

    @property
    def name(self) -> str:
        return "missing_colon"

    @property
    def description(self) -> str:
        return "Inserted missing colons after keys (key value -> key: value)"

    def repair_line(self, line: str) -> str:
        split_idx = find_comment_split(line)
        code = line[:split_idx] if split_idx != -1 else line
        comment = line[split_idx:] if split_idx != -1 else ""

        if ':' in code or not code.strip():
            return line

        match = self.KEY_VALUE.match(code)
        if not match:
            return line

        indent, key, value = match.groups()
        if key.startswith('-'):
            return line
        if ':' in value:
            return line
        if len(value.rstrip()) > self.settings.max_value_length:
            return line

        logger.debug(f"MissingColon: '{code.strip()}' -> '{key}: {value.strip()}'")
        return f"{indent}{key}: {value}{comment}"

    def apply(self, text: str) -> str:
        lines = text.split('\n')
        mask = block_scalar_mask(lines)
        return '\n'.join(
            line if protected else self.repair_line(line)
            for line, protected in zip(lines, mask)
        )


class MissingDashFix(FixStage):
    """
    Turns a bare mapping under a list-valued key into a list item:

        containers:            containers:
          name: nginx    ->      - name: nginx
          image: nginx             image: nginx

    Lines continuing the repaired item move right with it. A list-valued
    Kubernetes key can be a plain mapping elsewhere (`env:` in a workflow,
    `volumes:` in a compose file), so the stage only runs on text that
    does not parse.
    """

    only_on_parse_failure = True

    BARE_KEY = re.compile(r'^ {2,}[^\s\-#][^:]*:(?:\s|$)')

    @property
    def name(self) -> str:
        return "missing_dash"

    @property
    def description(self) -> str:
        return "Added missing list dashes under list-valued keys"

    def _parent_key(self, line: str) -> Optional[str]:
        stripped = line.strip()
        if not stripped.endswith(':'):
            return None
        key = stripped[:-1].strip()
        if key.startswith('- '):
            key = key[2:].strip()
        return key.strip('"\'')

    def apply(self, text: str) -> str:
        lines = text.split('\n')
        mask = block_scalar_mask(lines)
        output: List[str] = []
        open_items: List[int] = []  # original indents of repaired items still in scope

        for i, (line, protected) in enumerate(zip(lines, mask)):
            stripped = line.lstrip(' ')
            if not stripped.strip():
                output.append(line)
                continue

            indent = _indent_of(line)
            while open_items and (indent < open_items[-1] or
                                  (indent == open_items[-1] and stripped.startswith('-'))):
                open_items.pop()

            candidate = ' ' * (indent + 2 * len(open_items)) + stripped
            if i > 0 and not protected and self._is_missing_dash(output[-1], candidate):
                logger.debug(f"MissingDash: line {i + 1} '{stripped}'")
                candidate = ' ' * _indent_of(candidate) + '- ' + stripped
                open_items.append(indent)
            output.append(candidate)

        return '\n'.join(output)

    def _is_missing_dash(self, previous: str, current: str) -> bool:
        if self._parent_key(previous) not in self.settings.list_keys:
            return False
        if not self.BARE_KEY.match(current):
            return False
        return _indent_of(current) > _indent_of(previous)


class IndentSmoothingFix(FixStage):
    @property
    def name(self) -> str:
        return "indent_smoothing"

    @property
    def description(self) -> str:
        return "Nudged odd indentation runs one space to the left"

    def apply(self, text: str) -> str:
        lines = text.split('\n')
        mask = block_scalar_mask(lines)
        smoothed = []
        for line, protected in zip(lines, mask):
            indent = _indent_of(line)
            if not protected and line.strip() and indent >= 3 and indent % 2:
                line = line[1:]
            smoothed.append(line)
        return '\n'.join(smoothed)


# Pipeline order matters: whitespace is canonical before any structural regex runs
STAGE_ORDER = (
    ByteCleanupFix,
    TabExpansionFix,
    TrailingWhitespaceFix,
    MissingColonFix,
    MissingDashFix,
    IndentSmoothingFix,
)
