#!/usr/bin/env python3
"""
YAMLANALYZER SETTINGS
---------------------
Tunable defaults shared by the Normalizer and the Suggester, optionally
loaded from a `.yamlanalyzer.yaml` file:

    fixes:
      indent_smoothing: true
    max_value_length: 120
    resources:
      cpu_limit: 1
      memory_limit: 1Gi

Author: YAML Analyzer Team
Date: 2026-10-19
"""

import logging
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, FrozenSet, Optional, Union

from ruamel.yaml import YAML, YAMLError

logger = logging.getLogger("yamlanalyzer.config")

DEFAULT_CONFIG_NAME = ".yamlanalyzer.yaml"

# Kubernetes fields whose value is always a sequence
DEFAULT_LIST_KEYS = frozenset({
    "containers", "initContainers", "ephemeralContainers", "env", "envFrom",
    "ports", "volumes", "volumeMounts", "volumeDevices", "args", "command",
    "imagePullSecrets", "tolerations", "hostAliases", "topologySpreadConstraints",
    "rules", "subjects", "verbs", "apiGroups", "resourceNames", "nonResourceURLs",
    "items", "secrets", "finalizers", "matchExpressions", "values",
    "ingress", "egress", "tls", "hosts", "paths", "subsets", "addresses",
    "webhooks", "versions", "conditions", "accessModes",
})

DEFAULT_FIXES = {
    "byte_cleanup": True,
    "tab_expansion": True,
    "trailing_whitespace": True,
    "missing_colon": True,
    "missing_dash": True,
    "indent_smoothing": False,
}


class ConfigError(ValueError):
    """Raised when a settings file cannot be read or holds unknown keys or bad values."""


@dataclass
class AnalyzerSettings:
    tab_width: int = 2
    max_value_length: int = 120
    default_image_tag: str = "1.0.0"
    cpu_request: str = "100m"
    memory_request: str = "128Mi"
    cpu_limit: str = "500m"
    memory_limit: str = "512Mi"
    list_keys: FrozenSet[str] = DEFAULT_LIST_KEYS
    fixes: Dict[str, bool] = field(default_factory=lambda: dict(DEFAULT_FIXES))

    def fix_enabled(self, name: str) -> bool:
        return self.fixes.get(name, False)

    @classmethod
    def from_mapping(cls, data: Optional[Dict[str, Any]]) -> "AnalyzerSettings":
        """Merges a user mapping over the defaults. Unknown keys are rejected."""
        settings = cls()
        if not data:
            return settings
        if not isinstance(data, dict):
            raise ConfigError("Settings file must contain a mapping at the top level.")

        known = {f.name for f in fields(cls)} | {"resources"}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ConfigError(f"Unknown settings key(s): {', '.join(map(str, unknown))}")

        for key, value in data.items():
            if key == "fixes":
                settings.fixes.update(cls._parse_fixes(value))
            elif key == "resources":
                cls._apply_resources(settings, value)
            elif key == "list_keys":
                settings.list_keys = cls._parse_list_keys(value)
            elif key in ("tab_width", "max_value_length"):
                setattr(settings, key, cls._parse_positive_int(key, value))
            else:
                setattr(settings, key, str(value))
        return settings

    @staticmethod
    def _parse_fixes(value: Any) -> Dict[str, bool]:
        if not isinstance(value, dict):
            raise ConfigError("'fixes' must be a mapping of fix name to true/false.")
        unknown = sorted(set(value) - set(DEFAULT_FIXES))
        if unknown:
            raise ConfigError(f"Unknown fix name(s): {', '.join(map(str, unknown))}")
        for name, enabled in value.items():
            if not isinstance(enabled, bool):
                raise ConfigError(f"Fix '{name}' must be true or false, got {enabled!r}")
        return dict(value)

    @staticmethod
    def _parse_list_keys(value: Any) -> FrozenSet[str]:
        if not isinstance(value, list) or not all(isinstance(k, str) for k in value):
            raise ConfigError(f"'list_keys' must be a list of key names, got {value!r}")
        return frozenset(value)

    @staticmethod
    def _parse_positive_int(key: str, value: Any) -> int:
        # bool is an int subclass
        if isinstance(value, bool):
            raise ConfigError(f"'{key}' must be an integer, got {value!r}")
        try:
            number = int(value)
        except (TypeError, ValueError):
            raise ConfigError(f"'{key}' must be an integer, got {value!r}")
        if number < 1:
            raise ConfigError(f"'{key}' must be at least 1, got {number}")
        return number

    @staticmethod
    def _apply_resources(settings: "AnalyzerSettings", value: Any):
        if not isinstance(value, dict):
            raise ConfigError("'resources' must be a mapping.")
        allowed = ("cpu_request", "memory_request", "cpu_limit", "memory_limit")
        for key, amount in value.items():
            if key not in allowed:
                raise ConfigError(f"Unknown resources key '{key}'. Expected one of: {', '.join(allowed)}")
            setattr(settings, key, str(amount))

    @classmethod
    def load(cls, path: Union[str, Path]) -> "AnalyzerSettings":
        """Reads settings from a YAML file."""
        path = Path(path)
        yaml = YAML(typ='safe')
        try:
            data = yaml.load(path.read_text(encoding='utf-8-sig'))
        except (OSError, YAMLError) as e:
            raise ConfigError(f"Unable to load settings from {path}: {e}")
        logger.info(f"Loaded settings from {path.name}")
        return cls.from_mapping(data)

    @classmethod
    def discover(cls, workspace: Union[str, Path] = ".") -> "AnalyzerSettings":
        """Loads `.yamlanalyzer.yaml` from the workspace if present, else defaults."""
        candidate = Path(workspace) / DEFAULT_CONFIG_NAME
        if candidate.is_file():
            return cls.load(candidate)
        return cls()
