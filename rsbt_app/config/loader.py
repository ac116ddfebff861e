"""Configuration loader with 3-tier parameter precedence."""

from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Optional

import yaml

from ..errors import ConfigurationError
from .defaults import (
    AnalysisParams,
    DefaultConfig,
    InsightParams,
    PlaybookParams,
    StrategyParams,
    get_default_config,
)
from .validation import ConfigValidator

CONFIG_FILE_NAME = "strategy.yaml"

_SECTIONS = {
    "strategy": StrategyParams,
    "analysis": AnalysisParams,
    "playbook": PlaybookParams,
    "insights": InsightParams,
}


@dataclass(frozen=True)
class ConfigLoader:
    """Manages configuration loading with 3-tier precedence."""

    config_dir: Path
    defaults: DefaultConfig

    @classmethod
    def create(cls, config_dir: Optional[Path] = None) -> "ConfigLoader":
        """Create a ConfigLoader instance."""
        if config_dir is None:
            config_dir = Path(__file__).parent.parent.parent / "config"

        return cls(
            config_dir=Path(config_dir),
            defaults=get_default_config(),
        )

    def load_file_config(self) -> dict[str, Any]:
        """Load overrides from the YAML config file, if present."""
        config_file = self.config_dir / CONFIG_FILE_NAME

        if not config_file.exists():
            return {}

        with open(config_file) as f:
            file_config = yaml.safe_load(f)

        if file_config is None:
            return {}
        if not isinstance(file_config, dict):
            raise ConfigurationError(
                f"{config_file} must contain a mapping at the top level",
                config_path=str(config_file)
            )
        return file_config

    def merge_config(self, run_overrides: Optional[dict[str, Any]] = None) -> dict[str, Any]:
        """
        Merge configuration with 3-tier precedence.

        Priority order:
        1. Per-run overrides (highest priority)
        2. YAML config file overrides
        3. Global defaults (lowest priority)
        """
        config = self._dataclass_to_dict(self.defaults)
        config = self._deep_merge(config, self.load_file_config())

        if run_overrides:
            config = self._deep_merge(config, run_overrides)

        return config

    def build_config(self, run_overrides: Optional[dict[str, Any]] = None) -> DefaultConfig:
        """
        Build a fully populated, validated configuration.

        Raises:
            ConfigurationError: If validation fails or unknown keys are present
        """
        merged = self.merge_config(run_overrides)

        errors = ConfigValidator.validate_config(merged)
        if errors:
            raise ConfigurationError(
                "Invalid configuration: " + "; ".join(
                    f"{err.field}: {err.message} (got: {err.value})" for err in errors
                ),
                validation_errors=errors
            )

        sections = {}
        for section_name, section_cls in _SECTIONS.items():
            values = merged.get(section_name, {})
            known = {f.name for f in fields(section_cls)}
            unknown = sorted(set(values) - known)
            if unknown:
                raise ConfigurationError(
                    f"Unknown keys in '{section_name}' section: {', '.join(unknown)}"
                )
            sections[section_name] = section_cls(**values)

        return DefaultConfig(**sections)

    def _dataclass_to_dict(self, obj: Any) -> dict[str, Any]:
        """Convert nested dataclasses to dictionary."""
        if hasattr(obj, '__dataclass_fields__'):
            result = {}
            for field_name in obj.__dataclass_fields__:
                value = getattr(obj, field_name)
                if hasattr(value, '__dataclass_fields__'):
                    result[field_name] = self._dataclass_to_dict(value)
                else:
                    result[field_name] = value
            return result
        return obj  # type: ignore[no-any-return]

    def _deep_merge(self, base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
        """Deep merge two dictionaries."""
        result = base.copy()

        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._deep_merge(result[key], value)
            else:
                result[key] = value

        return result


def load_config(
    config_dir: Optional[Path] = None,
    run_overrides: Optional[dict[str, Any]] = None
) -> DefaultConfig:
    """Shortcut for ConfigLoader.create(config_dir).build_config(run_overrides)."""
    return ConfigLoader.create(config_dir).build_config(run_overrides)
