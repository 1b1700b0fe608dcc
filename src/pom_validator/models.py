"""Pydantic models for parsed POMs and validation findings."""

from __future__ import annotations

from enum import Enum
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, model_validator


MODEL_VERSION = "4.0.0"
DEFAULT_PACKAGING = "jar"
DEFAULT_PLUGIN_GROUP_ID = "org.apache.maven.plugins"
# Stands in for an absent coordinate part in keys and messages.
MISSING = "?"


class Coordinate(BaseModel):
    """Maven coordinates (GroupId, ArtifactId, Version).

    Unlike a resolved artifact, any part may be missing: a child POM can inherit
    its groupId/version and a managed dependency can omit its version.
    """

    model_config = ConfigDict(frozen=True)

    group_id: str | None = None
    artifact_id: str | None = None
    version: str | None = None

    def key(self) -> str:
        """Return the grouping key `groupId:artifactId` (version is not part of identity)."""
        return f"{self.group_id or MISSING}:{self.artifact_id or MISSING}"

    def compact(self) -> str:
        """Return a compact string representation.

        Returns:
            A string like `groupId:artifactId:version`.
        """
        return f"{self.group_id or MISSING}:{self.artifact_id or MISSING}:{self.version or MISSING}"


class DependencyEntry(BaseModel):
    """A `<dependency>` declaration, direct or inside `<dependencyManagement>`.

    `index` is the position of the element among its siblings in the source
    document; the writer uses it to find the node again when persisting fixes.
    """

    model_config = ConfigDict(frozen=True)

    gav: Coordinate
    scope: str | None = None
    managed: bool = False
    index: int = 0

    @property
    def version(self) -> str | None:
        return self.gav.version

    def key(self) -> str:
        return self.gav.key()


class PluginEntry(BaseModel):
    """A `<plugin>` declaration, direct or inside `<pluginManagement>`."""

    model_config = ConfigDict(frozen=True)

    gav: Coordinate
    managed: bool = False
    index: int = 0

    @property
    def version(self) -> str | None:
        return self.gav.version

    def key(self) -> str:
        # Maven falls back to the core plugin group when <groupId> is omitted.
        group_id = self.gav.group_id or DEFAULT_PLUGIN_GROUP_ID
        return f"{group_id}:{self.gav.artifact_id or MISSING}"


class ParentRef(BaseModel):
    """The `<parent>` section of a POM.

    `relative_path` is None when the element is absent (Maven then looks in
    `../pom.xml`) and an empty string when it is declared empty.
    """

    model_config = ConfigDict(frozen=True)

    gav: Coordinate
    relative_path: str | None = None


class ProjectDescriptor(BaseModel):
    """A parsed Maven project model, identified by its file path.

    Descriptors are never patched in place: remediation produces a new
    descriptor with `model_copy(update=...)`.
    """

    model_config = ConfigDict(frozen=True)

    path: Path
    model_version: str | None = None
    gav: Coordinate = Field(default_factory=Coordinate)
    packaging: str | None = None
    parent: ParentRef | None = None
    modules: list[str] = Field(default_factory=list)
    dependencies: list[DependencyEntry] = Field(default_factory=list)
    dependency_management: list[DependencyEntry] = Field(default_factory=list)
    plugins: list[PluginEntry] = Field(default_factory=list)
    plugin_management: list[PluginEntry] = Field(default_factory=list)
    properties: dict[str, str] = Field(default_factory=dict)

    has_build: bool = False
    has_dependency_management: bool = False
    has_plugin_management: bool = False

    @property
    def effective_packaging(self) -> str:
        return self.packaging or DEFAULT_PACKAGING

    @property
    def effective_gav(self) -> Coordinate:
        """Own coordinates with groupId/version inherited from the parent section."""
        parent_gav = self.parent.gav if self.parent else Coordinate()
        return Coordinate(
            group_id=self.gav.group_id or parent_gav.group_id,
            artifact_id=self.gav.artifact_id,
            version=self.gav.version or parent_gav.version,
        )


class Severity(str, Enum):
    """Severity of a single finding."""

    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


class ValidationIssue(BaseModel):
    """A single finding produced by a rule.

    `rule_id` identifies the check that produced the issue and is what the
    remediation engine dispatches on. `subject` names the thing the issue is
    about (a `groupId:artifactId` key, a property name, a module name).
    """

    model_config = ConfigDict(frozen=True)

    severity: Severity
    message: str
    suggestion: str | None = None
    fixable: bool = False
    rule_id: str
    subject: str | None = None

    def has_suggestion(self) -> bool:
        return bool(self.suggestion and self.suggestion.strip())


class ValidationResult(BaseModel):
    """Findings for one POM, partitioned by severity.

    Warnings and info messages do not affect validity.
    """

    errors: list[ValidationIssue] = Field(default_factory=list)
    warnings: list[ValidationIssue] = Field(default_factory=list)
    infos: list[ValidationIssue] = Field(default_factory=list)

    @model_validator(mode="after")
    def _check_partition(self) -> "ValidationResult":
        for bucket, severity in (
            (self.errors, Severity.ERROR),
            (self.warnings, Severity.WARNING),
            (self.infos, Severity.INFO),
        ):
            for issue in bucket:
                if issue.severity is not severity:
                    raise ValueError(
                        f"{issue.severity.value} issue placed in {severity.value} list: {issue.message}"
                    )
        return self

    @property
    def is_valid(self) -> bool:
        return not self.errors

    @property
    def total_issues(self) -> int:
        """Errors plus warnings; infos are not counted as issues."""
        return len(self.errors) + len(self.warnings)

    def add(self, issue: ValidationIssue) -> None:
        if issue.severity is Severity.ERROR:
            self.errors.append(issue)
        elif issue.severity is Severity.WARNING:
            self.warnings.append(issue)
        else:
            self.infos.append(issue)

    def error(self, rule_id: str, message: str, suggestion: str | None = None, **kwargs) -> None:
        self.add(ValidationIssue(severity=Severity.ERROR, rule_id=rule_id, message=message, suggestion=suggestion, **kwargs))

    def warning(self, rule_id: str, message: str, suggestion: str | None = None, **kwargs) -> None:
        self.add(ValidationIssue(severity=Severity.WARNING, rule_id=rule_id, message=message, suggestion=suggestion, **kwargs))

    def info(self, rule_id: str, message: str, suggestion: str | None = None, **kwargs) -> None:
        self.add(ValidationIssue(severity=Severity.INFO, rule_id=rule_id, message=message, suggestion=suggestion, **kwargs))

    def extend(self, other: "ValidationResult") -> None:
        self.errors.extend(other.errors)
        self.warnings.extend(other.warnings)
        self.infos.extend(other.infos)

    def all_issues(self) -> list[ValidationIssue]:
        """Return errors, then warnings, then infos."""
        return [*self.errors, *self.warnings, *self.infos]

    @classmethod
    def failure(cls, message: str, suggestion: str | None = None, *, rule_id: str) -> "ValidationResult":
        """Build a result holding a single ERROR (used for parse failures)."""
        issue = ValidationIssue(
            severity=Severity.ERROR, message=message, suggestion=suggestion, rule_id=rule_id
        )
        return cls(errors=[issue])
