"""Validation profiles and severity filtering.

Two independent projections are applied in sequence: a profile selects which
rules run, then a severity level selects which of the produced issues are
surfaced. Errors are never filtered out.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from enum import Enum
from pathlib import Path

from pom_validator.exceptions import ConfigError
from pom_validator.models import Severity, ValidationResult
from pom_validator.rules import RULES, Rule


class SeverityLevel(str, Enum):
    """Minimum severity to surface: ERROR < WARNING < INFO < ALL."""

    ERROR = "error"
    WARNING = "warning"
    INFO = "info"
    ALL = "all"

    @property
    def rank(self) -> int:
        return _LEVEL_RANK[self]

    def includes(self, other: "SeverityLevel | Severity") -> bool:
        """True if issues of `other` are surfaced at this level."""
        other_level = SeverityLevel(other.value)
        return other_level.rank <= self.rank

    @classmethod
    def parse(cls, value: str) -> "SeverityLevel":
        try:
            return cls(value.strip().lower())
        except ValueError:
            allowed = ", ".join(level.value for level in cls)
            raise ConfigError(f"Unknown severity level '{value}' (expected one of: {allowed})") from None


_LEVEL_RANK = {
    SeverityLevel.ERROR: 1,
    SeverityLevel.WARNING: 2,
    SeverityLevel.INFO: 3,
    SeverityLevel.ALL: 4,
}


class Profile(str, Enum):
    STRICT = "strict"
    STANDARD = "standard"
    MINIMAL = "minimal"
    CUSTOM = "custom"

    @classmethod
    def parse(cls, value: str) -> "Profile":
        try:
            return cls(value.strip().lower())
        except ValueError:
            allowed = ", ".join(p.value for p in cls)
            raise ConfigError(f"Unknown profile '{value}' (expected one of: {allowed})") from None


PROFILE_RULES: dict[Profile, tuple[str, ...]] = {
    Profile.MINIMAL: ("structure", "dependency"),
    Profile.STANDARD: ("structure", "dependency", "property", "plugin", "multi-module"),
    Profile.STRICT: ("structure", "dependency", "property", "plugin", "multi-module", "version"),
}


def rules_for_profile(profile: Profile, custom: Iterable[str] = ()) -> list[Rule]:
    """Return the rules a profile runs, in presentation order.

    A custom profile runs the named rules in the strict order; with no names it
    behaves like the standard profile.
    """
    if profile is Profile.CUSTOM:
        wanted = {name.strip() for name in custom if name.strip()}
        unknown = sorted(wanted - RULES.keys())
        if unknown:
            raise ConfigError(f"Unknown rule(s): {', '.join(unknown)} (available: {', '.join(RULES)})")
        if not wanted:
            return rules_for_profile(Profile.STANDARD)
        return [RULES[name] for name in PROFILE_RULES[Profile.STRICT] if name in wanted]
    return [RULES[name] for name in PROFILE_RULES[profile]]


def filter_result(result: ValidationResult, level: SeverityLevel) -> ValidationResult:
    """Project a result down to the issues surfaced at `level`."""
    if level is SeverityLevel.ALL:
        return result
    return ValidationResult(
        errors=list(result.errors),
        warnings=list(result.warnings) if level.includes(Severity.WARNING) else [],
        infos=list(result.infos) if level.includes(Severity.INFO) else [],
    )


def filter_results(
    results: Mapping[Path, ValidationResult], level: SeverityLevel
) -> dict[Path, ValidationResult]:
    return {path: filter_result(result, level) for path, result in results.items()}
