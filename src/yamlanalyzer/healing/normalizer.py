#!/usr/bin/env python3
"""
YAMLANALYZER NORMALIZER - The Triage Nurse
------------------------------------------
Runs the fix stages in their fixed order over raw text so that
malformed-but-close-to-valid YAML has a better chance of parsing.

The pipeline is idempotent: running it on its own output changes nothing.
It never raises; on text it cannot improve it returns the input unchanged.
Structural stages that could change the meaning of valid YAML only run
when the text does not parse.

Author: YAML Analyzer Team
Date: 2026-10-19
"""

import logging
from typing import Dict, List, Optional

from yamlanalyzer.core.config import AnalyzerSettings
from yamlanalyzer.core.loader import YamlLoader
from yamlanalyzer.core.models import FixResult
from yamlanalyzer.healing.fixes import STAGE_ORDER, FixStage

logger = logging.getLogger("yamlanalyzer.healing.normalizer")


class YamlNormalizer:
    """
    The Orchestrator: applies each enabled FixStage to the output of the
    previous one and records which stages changed the text.
    """

    def __init__(self, settings: Optional[AnalyzerSettings] = None):
        self.settings = settings or AnalyzerSettings()
        self.stages: List[FixStage] = [stage_cls(self.settings) for stage_cls in STAGE_ORDER]
        self.loader = YamlLoader()

    def normalize(self, text: Optional[str], enabled: Optional[Dict[str, bool]] = None) -> FixResult:
        """
        Args:
            text: The raw document text. None is treated as empty.
            enabled: Per-call overrides of the settings' stage toggles.
        """
        original = text or ""
        current = original
        applied: List[FixStage] = []

        toggles = dict(self.settings.fixes)
        if enabled:
            toggles.update(enabled)

        for stage in self.stages:
            if not toggles.get(stage.name, False):
                continue
            if stage.only_on_parse_failure and self.loader.parses(current):
                logger.debug(f"Stage '{stage.name}' skipped: the text already parses")
                continue
            rewritten = stage.apply(current)
            if rewritten != current:
                logger.debug(f"Stage '{stage.name}' changed the text")
                applied.append(stage)
                current = rewritten

        return FixResult(
            fixed_text=current,
            changed=current != original,
            applied_fixes=[stage.description for stage in applied],
            applied_stages=[stage.name for stage in applied],
        )
