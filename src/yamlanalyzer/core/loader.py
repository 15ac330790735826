#!/usr/bin/env python3
"""
YAMLANALYZER LOADER - The Reader
--------------------------------
Thin wrapper around the ruamel.yaml round-trip loader. The round-trip
loader is used because its nodes keep line/column metadata, which the
Suggester prefers over substring searches when anchoring suggestions.

Every ruamel.yaml error is surfaced as a ParseFailure whose message is the
parser's own text.

Author: YAML Analyzer Team
Date: 2026-10-19
"""

import logging
from typing import Any, List

from ruamel.yaml import YAML, YAMLError

from yamlanalyzer.core.models import ParseFailure

logger = logging.getLogger("yamlanalyzer.loader")


class YamlLoader:

    def __init__(self):
        self.yaml = YAML(typ='rt')
        self.yaml.preserve_quotes = True

    def parse_one(self, text: str) -> Any:
        """Parses a single-document stream."""
        try:
            return self.yaml.load(text)
        except YAMLError as e:
            logger.debug(f"parse_one failed: {e}")
            raise ParseFailure.from_yaml_error(e)

    def parse_all(self, text: str) -> List[Any]:
        """
        Parses every document of a stream, in order.

        Stops at the first failure; the documents parsed before it are
        attached to the raised ParseFailure.
        """
        documents: List[Any] = []
        try:
            for doc in self.yaml.load_all(text):
                documents.append(doc)
        except YAMLError as e:
            logger.debug(f"parse_all failed after {len(documents)} document(s): {e}")
            raise ParseFailure.from_yaml_error(e, documents=documents)
        return documents

    def parses(self, text: str) -> bool:
        try:
            self.parse_all(text)
        except ParseFailure:
            return False
        return True
