#!/usr/bin/env python3
"""
YAMLANALYZER ENGINE - The Attending
-----------------------------------
Runs one analysis of a YAML text buffer:

    raw text -> [Normalizer] -> Loader -> Advisor (success) | FailureAdvisor (failure)

and packs everything a presentation layer needs into an AnalysisReport.
The engine holds configuration only, so one instance can serve any number
of calls.

Author: YAML Analyzer Team
Date: 2026-10-19
"""

import json
import logging
from typing import Any, List, Optional

from yamlanalyzer.core.config import AnalyzerSettings
from yamlanalyzer.core.loader import YamlLoader
from yamlanalyzer.core.models import (
    AnalysisReport, AnalysisStatus, FixResult, ParseFailure, Severity, Suggestion,
)
from yamlanalyzer.healing.normalizer import YamlNormalizer
from yamlanalyzer.rules.advisor import ManifestAdvisor
from yamlanalyzer.rules.hints import FailureAdvisor

logger = logging.getLogger("yamlanalyzer.engine")

EMPTY_INPUT_MESSAGE = "Please paste YAML to analyze."


class YamlAnalyzer:
    """
    Principal orchestrator: wires the Normalizer, Loader and both
    Suggester modes together.
    """

    def __init__(self, settings: Optional[AnalyzerSettings] = None):
        self.settings = settings or AnalyzerSettings()
        self.normalizer = YamlNormalizer(self.settings)
        self.loader = YamlLoader()
        self.advisor = ManifestAdvisor(self.settings)
        self.failure_advisor = FailureAdvisor()

    def normalize(self, text: str) -> FixResult:
        return self.normalizer.normalize(text)

    def analyze(self, text: Optional[str], auto_fix: bool = False) -> AnalysisReport:
        """
        Args:
            text: The document text as the user supplied it.
            auto_fix: Run the Normalizer before parsing.
        """
        text = text or ""
        if not text.strip():
            return AnalysisReport(status=AnalysisStatus.EMPTY, text=text, message=EMPTY_INPUT_MESSAGE)

        fix_result = None
        if auto_fix:
            fix_result = self.normalizer.normalize(text)
            text = fix_result.fixed_text

        try:
            documents = self.loader.parse_all(text)
        except ParseFailure as failure:
            return self._failure_report(text, failure, fix_result)

        suggestions = self._fix_suggestions(fix_result) + self.advisor.suggest(documents, text)
        logger.info(f"Parsed {len(documents)} document(s), {len(suggestions)} suggestion(s)")

        return AnalysisReport(
            status=AnalysisStatus.OK,
            text=text,
            documents=documents,
            rendered=self.render(documents),
            message=self._success_message(documents),
            suggestions=suggestions,
            fix_result=fix_result,
        )

    def _failure_report(self, text: str, failure: ParseFailure,
                        fix_result: Optional[FixResult]) -> AnalysisReport:
        logger.info(f"Parse failed at line {failure.line}")
        report = AnalysisReport(
            status=AnalysisStatus.ERROR,
            text=text,
            documents=list(failure.documents),
            message=f"YAML Error: {failure.message}",
            error=failure,
            hints=self.failure_advisor.hints(failure, text),
            suggestions=self._fix_suggestions(fix_result),
            fix_result=fix_result,
        )

        # Offer the normalized text as a retry input when it differs
        if fix_result is None:
            candidate = self.normalizer.normalize(text)
            if candidate.changed:
                report.retry_candidate = candidate
                report.retry_parses = self.loader.parses(candidate.fixed_text)
        return report

    def _fix_suggestions(self, fix_result: Optional[FixResult]) -> List[Suggestion]:
        if fix_result is None:
            return []
        return [
            Suggestion(
                id=f"autofix:{name}",
                severity=Severity.AUTO_FIX,
                title="Auto-fix applied",
                description=description,
            )
            for name, description in zip(fix_result.applied_stages, fix_result.applied_fixes)
        ]

    @staticmethod
    def _success_message(documents: List[Any]) -> str:
        if len(documents) == 1:
            return "Valid YAML: 1 document parsed."
        return f"Valid YAML: {len(documents)} documents parsed."

    @staticmethod
    def render(documents: List[Any]) -> str:
        """Pretty JSON: the document itself when there is one, else the list."""
        to_show = documents[0] if len(documents) == 1 else documents
        try:
            return json.dumps(to_show, indent=2, ensure_ascii=False, default=str)
        except (TypeError, ValueError):
            return str(to_show)
