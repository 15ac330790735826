#!/usr/bin/env python3
"""
YAMLANALYZER ADVISOR - Success-Mode Suggestions
-----------------------------------------------
Reviews successfully parsed documents that look like Kubernetes resources
(mappings carrying a `kind`) and proposes small, literal YAML blocks the
user may paste in. It never modifies the documents it is given.

Author: YAML Analyzer Team
Date: 2026-10-19
"""

import logging
from typing import Any, List, Optional, Sequence

from yamlanalyzer.core.config import AnalyzerSettings
from yamlanalyzer.core.models import Severity, Suggestion
from yamlanalyzer.rules import probes

logger = logging.getLogger("yamlanalyzer.rules.advisor")


class ManifestAdvisor:
    """
    The Consultant: runs every active rule against each resource document.
    Suggestion ids are namespaced by document (and container) index so they
    stay unique within one batch.
    """

    def __init__(self, settings: Optional[AnalyzerSettings] = None):
        self.settings = settings or AnalyzerSettings()

        # Registry of rules executed against every resource document, in order
        self.active_rules = [
            self._rule_missing_name,
            self._rule_container_checks,
            self._rule_pod_security_context,
        ]

    def suggest(self, documents: Sequence[Any], text: str = "") -> List[Suggestion]:
        """Suggestions for every document of a stream, in document order."""
        suggestions = []
        for doc_index, doc in enumerate(documents):
            suggestions.extend(self.suggest_document(doc, text, doc_index))
        return suggestions

    def suggest_document(self, doc: Any, text: str = "", doc_index: int = 0) -> List[Suggestion]:
        kind = probes.resource_kind(doc)
        if kind is None:
            return []

        suggestions = []
        for rule in self.active_rules:
            found = rule(doc, kind, text or "", f"doc{doc_index}")
            if found:
                logger.debug(f"{rule.__name__} produced {len(found)} suggestion(s) for {kind}")
                suggestions.extend(found)
        return suggestions

    def _rule_missing_name(self, doc: Any, kind: str, text: str, prefix: str) -> List[Suggestion]:
        """Every resource needs metadata.name."""
        metadata = doc.get("metadata")
        if probes.is_mapping(metadata) and metadata.get("name") not in (None, ""):
            return []

        return [Suggestion(
            id=f"{prefix}:missing-name",
            severity=Severity.ADVISORY,
            title=f"{kind} has no metadata.name",
            description=f"Every {kind} needs a name under metadata so it can be created and referenced.",
            anchor_line=probes.key_line(text, "metadata", node=doc),
            suggestion_text=f"metadata:\n  name: my-{kind.lower()}",
        )]

    def _rule_container_checks(self, doc: Any, kind: str, text: str, prefix: str) -> List[Suggestion]:
        suggestions = []
        for index, container in enumerate(probes.find_containers(doc)):
            if not probes.is_mapping(container):
                continue
            label = container.get("name") or f"#{index}"
            container_prefix = f"{prefix}:container{index}"

            image = container.get("image")
            if isinstance(image, str) and ':' not in image:
                suggestions.append(Suggestion(
                    id=f"{container_prefix}:unpinned-image",
                    severity=Severity.ADVISORY,
                    title=f"Image for container '{label}' has no tag",
                    description=(f"'{image}' resolves to whatever ':latest' points at. "
                                 "Pin an explicit version for reproducible rollouts."),
                    anchor_line=probes.value_line(text, image, node=container, key="image"),
                    suggestion_text=f"image: {image}:{self.settings.default_image_tag}",
                ))

            if "resources" not in container:
                suggestions.append(Suggestion(
                    id=f"{container_prefix}:missing-resources",
                    severity=Severity.ADVISORY,
                    title=f"Container '{label}' has no resource requests or limits",
                    description="Without requests and limits the scheduler cannot place the pod "
                                "reliably and the container may starve its neighbours.",
                    anchor_line=self._container_anchor(container, text),
                    suggestion_text=self._resources_block(),
                ))
        return suggestions

    def _rule_pod_security_context(self, doc: Any, kind: str, text: str, prefix: str) -> List[Suggestion]:
        pod_spec = probes.probe_mapping(doc, probes.POD_SPEC_PATH)
        if pod_spec is None or "securityContext" in pod_spec:
            return []

        return [Suggestion(
            id=f"{prefix}:pod-security-context",
            severity=Severity.ADVISORY,
            title=f"{kind} pod template has no securityContext",
            description="Run the pod as a non-root user unless it really needs root.",
            anchor_line=probes.key_line(text, "spec", node=doc),
            suggestion_text="securityContext:\n  runAsNonRoot: true",
        )]

    def _container_anchor(self, container: Any, text: str) -> int:
        name = container.get("name")
        if name not in (None, ""):
            return probes.value_line(text, name, node=container, key="name")
        image = container.get("image")
        if image not in (None, ""):
            return probes.value_line(text, image, node=container, key="image")
        return 1

    def _resources_block(self) -> str:
        s = self.settings
        return (
            "resources:\n"
            "  requests:\n"
            f"    cpu: {s.cpu_request}\n"
            f"    memory: {s.memory_request}\n"
            "  limits:\n"
            f"    cpu: {s.cpu_limit}\n"
            f"    memory: {s.memory_limit}"
        )
