"""Configuration validation utilities."""

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class ValidationError:
    """Represents a configuration validation error."""
    field: str
    message: str
    value: Any


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _is_positive_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value > 0


class ConfigValidator:
    """Validates configuration parameters."""

    @staticmethod
    def validate_strategy_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate signal engine / simulator parameters."""
        errors = []

        for name in ("ma_short", "ma_long", "stop_lookback"):
            if name in params and not _is_positive_int(params[name]):
                errors.append(ValidationError(
                    field=name,
                    message="Must be a positive integer",
                    value=params[name]
                ))

        # Short window must be shorter than the long window
        ma_short = params.get("ma_short")
        ma_long = params.get("ma_long")
        if _is_positive_int(ma_short) and _is_positive_int(ma_long) and ma_short >= ma_long:
            errors.append(ValidationError(
                field="ma_short",
                message="Must be smaller than ma_long",
                value=ma_short
            ))

        if "min_signals" in params:
            value = params["min_signals"]
            if not isinstance(value, int) or isinstance(value, bool) or not 0 <= value <= 3:
                errors.append(ValidationError(
                    field="min_signals",
                    message="Must be an integer between 0 and 3",
                    value=value
                ))

        if "short_alts" in params and not isinstance(params["short_alts"], bool):
            errors.append(ValidationError(
                field="short_alts",
                message="Must be a boolean",
                value=params["short_alts"]
            ))

        if "btc_hedge" in params:
            value = params["btc_hedge"]
            if not _is_number(value) or value < 0 or value > 1:
                errors.append(ValidationError(
                    field="btc_hedge",
                    message="Must be a number between 0 and 1",
                    value=value
                ))

        for name in ("atr_mult", "vol_mult"):
            if name in params:
                value = params[name]
                if not _is_number(value) or value <= 0:
                    errors.append(ValidationError(
                        field=name,
                        message="Must be a positive number",
                        value=value
                    ))

        if "baseline" in params:
            value = params["baseline"]
            if not isinstance(value, str) or not value.strip():
                errors.append(ValidationError(
                    field="baseline",
                    message="Must be a non-empty string",
                    value=value
                ))

        return errors

    @staticmethod
    def validate_playbook_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate position sizing parameters."""
        errors = []

        for name in ("portfolio_value", "base_risk", "stop_atr_mult", "target_r_multiple"):
            if name in params:
                value = params[name]
                if not _is_number(value) or value <= 0:
                    errors.append(ValidationError(
                        field=name,
                        message="Must be a positive number",
                        value=value
                    ))

        if "scale_out_fraction" in params:
            value = params["scale_out_fraction"]
            if not _is_number(value) or value < 0 or value > 1:
                errors.append(ValidationError(
                    field="scale_out_fraction",
                    message="Must be a number between 0 and 1",
                    value=value
                ))

        floor = params.get("risk_cap_floor")
        ceiling = params.get("risk_cap_ceiling")
        if _is_number(floor) and _is_number(ceiling) and floor > ceiling:
            errors.append(ValidationError(
                field="risk_cap_floor",
                message="Must not exceed risk_cap_ceiling",
                value=floor
            ))

        for name in ("atr_period", "volatility_period", "top_n"):
            if name in params and not _is_positive_int(params[name]):
                errors.append(ValidationError(
                    field=name,
                    message="Must be a positive integer",
                    value=params[name]
                ))

        return errors

    @staticmethod
    def validate_insight_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate narrative provider parameters."""
        errors = []

        if "provider" in params and params["provider"] not in ("offline", "openai"):
            errors.append(ValidationError(
                field="provider",
                message="Must be one of: offline, openai",
                value=params["provider"]
            ))

        if "timeout_seconds" in params and not _is_positive_int(params["timeout_seconds"]):
            errors.append(ValidationError(
                field="timeout_seconds",
                message="Must be a positive integer",
                value=params["timeout_seconds"]
            ))

        return errors

    @staticmethod
    def validate_config(config: dict[str, Any]) -> list[ValidationError]:
        """Validate complete configuration."""
        errors = []

        if "strategy" in config:
            errors.extend(ConfigValidator.validate_strategy_params(config["strategy"]))

        if "playbook" in config:
            errors.extend(ConfigValidator.validate_playbook_params(config["playbook"]))

        if "insights" in config:
            errors.extend(ConfigValidator.validate_insight_params(config["insights"]))

        return errors
