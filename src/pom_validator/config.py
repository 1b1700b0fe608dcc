"""Validator configuration.

Configuration is read from environment variables and may be overridden by CLI
options. The resulting object is passed explicitly to the services that need it.
"""
from __future__ import annotations

import os
from dataclasses import dataclass, field, replace

from pom_validator.exceptions import ConfigError
from pom_validator.profiles import Profile, SeverityLevel


PARENT_ORDERS = ("depth", "topological")


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class ValidatorConfig:
    """Validator configuration container.

    Attributes:
        severity: Minimum severity of surfaced issues.
        profile: Which rule set to run.
        custom_rules: Rule names for the custom profile.
        parent_order: "depth" (path depth heuristic) or "topological" (parent graph).
        backup: Whether remediation copies the POM to `<name>.backup` before writing.
        fail_fast: Stop validating further POMs after the first one with errors.
        log_level: Logging level name for the CLI.
    """

    severity: SeverityLevel = SeverityLevel.ALL
    profile: Profile = Profile.STANDARD
    custom_rules: tuple[str, ...] = field(default_factory=tuple)
    parent_order: str = "depth"
    backup: bool = True
    fail_fast: bool = False
    log_level: str = "WARNING"

    @classmethod
    def from_env(cls) -> "ValidatorConfig":
        """Create configuration from environment variables.

        Environment variables:
            POMV_SEVERITY: error|warning|info|all (default: "all")
            POMV_PROFILE: strict|standard|minimal|custom (default: "standard")
            POMV_RULES: Comma-separated rule names for the custom profile
            POMV_PARENT_ORDER: depth|topological (default: "depth")
            POMV_BACKUP: Create backups before fixing (default: true)
            POMV_FAIL_FAST: Stop at the first POM with errors (default: false)
            POMV_LOG_LEVEL: Logging level (default: "WARNING")
        """
        rules = os.getenv("POMV_RULES", "")
        return cls(
            severity=SeverityLevel.parse(os.getenv("POMV_SEVERITY", "all")),
            profile=Profile.parse(os.getenv("POMV_PROFILE", "standard")),
            custom_rules=tuple(r.strip() for r in rules.split(",") if r.strip()),
            parent_order=os.getenv("POMV_PARENT_ORDER", "depth").strip().lower(),
            backup=_env_bool("POMV_BACKUP", True),
            fail_fast=_env_bool("POMV_FAIL_FAST", False),
            log_level=os.getenv("POMV_LOG_LEVEL", "WARNING").upper(),
        )

    def with_overrides(self, **overrides) -> "ValidatorConfig":
        """Return a copy with the non-None overrides applied."""
        return replace(self, **{k: v for k, v in overrides.items() if v is not None})

    def validate(self) -> None:
        """Validate the configuration.

        Raises:
            ConfigError: If a value is not supported.
        """
        if self.parent_order not in PARENT_ORDERS:
            raise ConfigError(
                f"Unsupported parent order: {self.parent_order} (expected one of: {', '.join(PARENT_ORDERS)})"
            )
        if self.custom_rules and self.profile is not Profile.CUSTOM:
            raise ConfigError("Rule names can only be given with the custom profile")
