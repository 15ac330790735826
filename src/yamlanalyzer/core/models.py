#!/usr/bin/env python3
"""
YAMLANALYZER CORE MODELS
------------------------
Defines the value objects exchanged between the Normalizer, the Loader
and the Diagnostic Suggester. None of these carry behaviour beyond simple
derived properties; every stage produces fresh instances.

Author: YAML Analyzer Team
Date: 2026-10-19
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, List, Optional


class Severity(str, Enum):
    """How a suggestion came to be."""
    ADVISORY = "advisory"
    AUTO_FIX = "auto-fix"


@dataclass(frozen=True)
class Suggestion:
    """
    A single actionable advisory record.

    The id is unique within one batch so presentation layers can key on it.
    anchor_line is a best-effort, 1-based position and never exact.
    """
    id: str
    severity: Severity
    title: str
    description: str
    anchor_line: Optional[int] = None
    suggestion_text: str = ""

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "severity": self.severity.value,
            "title": self.title,
            "description": self.description,
            "anchor_line": self.anchor_line,
            "suggestion_text": self.suggestion_text,
        }


@dataclass(frozen=True)
class FixResult:
    """Output of the Normalizer pipeline."""
    fixed_text: str
    changed: bool
    applied_fixes: List[str] = field(default_factory=list)
    applied_stages: List[str] = field(default_factory=list)  # Stage names, same order


class ParseFailure(Exception):
    """
    Raised when the YAML loader rejects a document stream.

    message is the parser's own text and is never rewritten. line and column
    are 1-based when the parser reported a position. documents holds whatever
    was parsed before the failure (best effort, possibly empty).
    """

    def __init__(self, message: Optional[str], line: Optional[int] = None,
                 column: Optional[int] = None, documents: Optional[List[Any]] = None):
        super().__init__(message or "")
        self.message = message or ""
        self.line = line
        self.column = column
        self.documents = list(documents or [])

    @classmethod
    def from_yaml_error(cls, error: Exception, documents: Optional[List[Any]] = None) -> "ParseFailure":
        """Builds a failure from a ruamel.yaml error, keeping its position marks."""
        mark = getattr(error, 'problem_mark', None) or getattr(error, 'context_mark', None)
        line = column = None
        if mark is not None:
            line = mark.line + 1
            column = mark.column + 1
        return cls(str(error), line=line, column=column, documents=documents)

    def to_dict(self) -> dict:
        return {"message": self.message, "line": self.line, "column": self.column}


class AnalysisStatus(str, Enum):
    OK = "OK"
    ERROR = "ERROR"
    EMPTY = "EMPTY"


@dataclass
class AnalysisReport:
    """
    The complete record of one analysis call, consumed by the CLI.
    """
    status: AnalysisStatus
    text: str                                   # The text that was actually parsed
    documents: List[Any] = field(default_factory=list)
    rendered: str = ""                          # Pretty JSON of the parsed value
    message: str = ""                           # Human-facing status line
    error: Optional[ParseFailure] = None
    hints: List[str] = field(default_factory=list)
    suggestions: List[Suggestion] = field(default_factory=list)
    fix_result: Optional[FixResult] = None      # Set when auto-fix ran before parsing
    retry_candidate: Optional[FixResult] = None # Offered when parsing failed
    retry_parses: bool = False

    @property
    def ok(self) -> bool:
        return self.status == AnalysisStatus.OK

    def to_dict(self) -> dict:
        return {
            "status": self.status.value,
            "message": self.message,
            "document_count": len(self.documents),
            "rendered": self.rendered,
            "error": self.error.to_dict() if self.error else None,
            "hints": list(self.hints),
            "suggestions": [s.to_dict() for s in self.suggestions],
            "applied_fixes": list(self.fix_result.applied_fixes) if self.fix_result else [],
            "retry_candidate": self.retry_candidate.fixed_text if self.retry_candidate else None,
            "retry_parses": self.retry_parses,
        }
