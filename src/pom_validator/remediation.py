"""Remediation engine: fix catalogue, auto-fix and interactive drivers.

Both drivers walk the fixable issues of one POM through the same states:

    PRESENTED -> APPLYING -> FIXED | FAILED_FIX
    PRESENTED -> SKIPPED
    PRESENTED -> VIEWING -> PRESENTED
    PRESENTED -> MANUAL_EDIT -> RESTARTED   (re-parse, rebuild the issue list)

Every fix is persisted immediately and the POM is re-parsed, so later fixes
always see the file as it is on disk.
"""

from __future__ import annotations

import logging
import os
import shlex
import subprocess
from collections.abc import Callable
from enum import Enum
from pathlib import Path

from pydantic import BaseModel, Field

from pom_validator.conflicts import first_occurrences
from pom_validator.exceptions import PomValidatorError
from pom_validator.graph import build_project_graph
from pom_validator.models import ProjectDescriptor, ValidationIssue, ValidationResult
from pom_validator.parser import parse_pom
from pom_validator.pipeline import ValidationService
from pom_validator.rules import (
    CORE_PLUGIN_VERSIONS,
    DEPENDENCY_DUPLICATE,
    DEPENDENCY_TEST_SCOPE,
    MANAGED_DEPENDENCY_DUPLICATE,
    MANAGED_PLUGIN_DUPLICATE,
    PLUGIN_CORE_WITHOUT_VERSION,
    PLUGIN_DUPLICATE,
    PROPERTY_MISSING,
    STRUCTURE_MISSING_GROUP_ID,
)
from pom_validator.writer import create_backup, write_pom


logger = logging.getLogger(__name__)

PLACEHOLDER_GROUP_ID = "com.example"
DEFAULT_JAVA_VERSION = "21"
DEFAULT_ENCODING = "UTF-8"
DEFAULT_EDITOR = "vi"

Fixer = Callable[[ProjectDescriptor, ValidationIssue], ProjectDescriptor]


# ---------------------------------------------------------------------------
# Fix catalogue
# ---------------------------------------------------------------------------


def _fix_group_id(descriptor: ProjectDescriptor, issue: ValidationIssue) -> ProjectDescriptor:
    if descriptor.gav.group_id:
        return descriptor
    gav = descriptor.gav.model_copy(update={"group_id": PLACEHOLDER_GROUP_ID})
    return descriptor.model_copy(update={"gav": gav})


def _fix_property(descriptor: ProjectDescriptor, issue: ValidationIssue) -> ProjectDescriptor:
    name = issue.subject
    if not name or name in descriptor.properties:
        return descriptor
    if name.endswith("Encoding"):
        value = DEFAULT_ENCODING
    elif name.startswith("maven.compiler."):
        # Same view of java.version as the property rule, parents included.
        inherited = build_project_graph([descriptor]).effective_properties(descriptor)
        value = inherited.get("java.version", DEFAULT_JAVA_VERSION)
    else:
        return descriptor
    return descriptor.model_copy(update={"properties": {**descriptor.properties, name: value}})


def _dedupe(field: str) -> Fixer:
    def fix(descriptor: ProjectDescriptor, issue: ValidationIssue) -> ProjectDescriptor:
        entries = getattr(descriptor, field)
        return descriptor.model_copy(update={field: first_occurrences(entries, issue.subject)})

    return fix


def _fix_test_scope(descriptor: ProjectDescriptor, issue: ValidationIssue) -> ProjectDescriptor:
    dependencies = [
        dep.model_copy(update={"scope": "test"}) if dep.key() == issue.subject else dep
        for dep in descriptor.dependencies
    ]
    return descriptor.model_copy(update={"dependencies": dependencies})


def _fix_core_plugin_version(descriptor: ProjectDescriptor, issue: ValidationIssue) -> ProjectDescriptor:
    plugins = []
    for plugin in descriptor.plugins:
        pinned = CORE_PLUGIN_VERSIONS.get(plugin.gav.artifact_id or "")
        if plugin.key() == issue.subject and plugin.version is None and pinned:
            plugin = plugin.model_copy(update={"gav": plugin.gav.model_copy(update={"version": pinned})})
        plugins.append(plugin)
    return descriptor.model_copy(update={"plugins": plugins})


FIXES: dict[str, Fixer] = {
    STRUCTURE_MISSING_GROUP_ID: _fix_group_id,
    PROPERTY_MISSING: _fix_property,
    DEPENDENCY_DUPLICATE: _dedupe("dependencies"),
    MANAGED_DEPENDENCY_DUPLICATE: _dedupe("dependency_management"),
    PLUGIN_DUPLICATE: _dedupe("plugins"),
    MANAGED_PLUGIN_DUPLICATE: _dedupe("plugin_management"),
    DEPENDENCY_TEST_SCOPE: _fix_test_scope,
    PLUGIN_CORE_WITHOUT_VERSION: _fix_core_plugin_version,
}


def can_fix(issue: ValidationIssue) -> bool:
    return issue.fixable and issue.rule_id in FIXES


def fixable_issues(result: ValidationResult) -> list[ValidationIssue]:
    """Return the issues the catalogue can fix, errors first, one per (rule, subject)."""
    seen: set[tuple[str, str | None]] = set()
    issues: list[ValidationIssue] = []
    for issue in result.all_issues():
        if not can_fix(issue) or (issue.rule_id, issue.subject) in seen:
            continue
        seen.add((issue.rule_id, issue.subject))
        issues.append(issue)
    return issues


def apply_fix(descriptor: ProjectDescriptor, issue: ValidationIssue) -> ProjectDescriptor:
    """Return a remediated copy of descriptor.

    Never raises: when the issue has no fix, or the fix changes nothing, the
    very same descriptor object is returned.
    """
    fixer = FIXES.get(issue.rule_id) if issue.fixable else None
    if fixer is None:
        return descriptor
    try:
        updated = fixer(descriptor, issue)
    except Exception:  # noqa: BLE001 - a broken fix leaves the descriptor unchanged
        logger.exception("Fix for %s failed on %s", issue.rule_id, descriptor.path)
        return descriptor
    return descriptor if updated == descriptor else updated


# ---------------------------------------------------------------------------
# Session
# ---------------------------------------------------------------------------


class IssueState(str, Enum):
    PRESENTED = "presented"
    APPLYING = "applying"
    FIXED = "fixed"
    FAILED_FIX = "failed-fix"
    SKIPPED = "skipped"
    VIEWING = "viewing"
    MANUAL_EDIT = "manual-edit"
    RESTARTED = "restarted"


class FixReport(BaseModel):
    """Outcome of remediating one POM."""

    path: Path
    before: ValidationResult
    after: ValidationResult | None = None
    fixed: list[ValidationIssue] = Field(default_factory=list)
    not_fixed: list[ValidationIssue] = Field(default_factory=list)
    skipped: list[ValidationIssue] = Field(default_factory=list)
    backup: Path | None = None

    @property
    def residual_issues(self) -> int:
        return (self.after or self.before).total_issues

    @property
    def residual_errors(self) -> int:
        return len((self.after or self.before).errors)

    @property
    def verified(self) -> bool:
        """True when re-validation no longer reports any issue that was fixed."""
        if self.after is None:
            return not self.fixed
        remaining = {(i.rule_id, i.subject) for i in self.after.all_issues()}
        return all((i.rule_id, i.subject) not in remaining for i in self.fixed)


class RemediationSession:
    """Step through the fixable issues of a single POM.

    The session owns the current descriptor and the issue cursor; drivers
    call `apply`, `skip`, `view` and `manual_edit` for the current issue and
    `finish` to re-validate.
    """

    def __init__(
        self,
        path: Path,
        service: ValidationService | None = None,
        *,
        backup: bool | None = None,
    ) -> None:
        self.path = path
        self.service = service or ValidationService()
        self.backup = self.service.config.backup if backup is None else backup
        self.descriptor: ProjectDescriptor | None = None
        self.issues: list[ValidationIssue] = []
        self.position = 0
        self.state = IssueState.PRESENTED
        self.transitions: list[IssueState] = []
        self.report = FixReport(path=path, before=self._load())

    def _load(self) -> ValidationResult:
        loaded = self.service.load(self.path)
        if isinstance(loaded, ValidationResult):
            self.descriptor = None
            result = loaded
        else:
            self.descriptor = loaded
            result = self.service.validate_descriptor(loaded)
        self.issues = fixable_issues(result)
        self.position = 0
        return result

    def _enter(self, state: IssueState) -> None:
        self.state = state
        self.transitions.append(state)

    def _advance(self, state: IssueState, bucket: list[ValidationIssue]) -> IssueState:
        bucket.append(self.issues[self.position])
        self._enter(state)
        self.position += 1
        self.state = IssueState.PRESENTED
        return state

    @property
    def done(self) -> bool:
        return self.position >= len(self.issues)

    @property
    def current(self) -> ValidationIssue | None:
        return None if self.done else self.issues[self.position]

    def ensure_backup(self) -> None:
        if self.backup and self.report.backup is None:
            self.report.backup = create_backup(self.path)

    def apply(self) -> IssueState:
        issue = self.current
        if issue is None or self.descriptor is None:
            raise RuntimeError("No issue to fix")
        self._enter(IssueState.APPLYING)

        updated = apply_fix(self.descriptor, issue)
        if updated is self.descriptor:
            logger.warning("No change for %s (%s)", issue.message, issue.rule_id)
            return self._advance(IssueState.FAILED_FIX, self.report.not_fixed)
        try:
            self.ensure_backup()
            if not write_pom(updated):
                return self._advance(IssueState.FAILED_FIX, self.report.not_fixed)
            self.descriptor = parse_pom(self.path)
        except PomValidatorError as exc:
            logger.warning("Could not fix %s: %s", issue.message, exc)
            return self._advance(IssueState.FAILED_FIX, self.report.not_fixed)
        logger.info("Fixed: %s", issue.message)
        return self._advance(IssueState.FIXED, self.report.fixed)

    def skip(self) -> IssueState:
        if self.current is None:
            raise RuntimeError("No issue to skip")
        return self._advance(IssueState.SKIPPED, self.report.skipped)

    def view(self) -> str:
        """Return the current file contents; the issue stays presented."""
        self._enter(IssueState.VIEWING)
        text = self.path.read_text(encoding="utf-8", errors="replace")
        self._enter(IssueState.PRESENTED)
        return text

    def manual_edit(self, editor: Callable[[Path], None]) -> IssueState:
        """Hand the file to an editor, then re-parse and rebuild the issue list."""
        self._enter(IssueState.MANUAL_EDIT)
        self.ensure_backup()
        editor(self.path)
        self._load()
        self._enter(IssueState.RESTARTED)
        self.state = IssueState.PRESENTED
        return IssueState.RESTARTED

    def finish(self) -> FixReport:
        """Re-validate the file; the report is only as good as this second run."""
        self.report.after = self.service.validate_pom(self.path)
        return self.report


def auto_fix(path: Path, service: ValidationService | None = None, *, backup: bool | None = None) -> FixReport:
    """Apply every catalogued fix to one POM and re-validate it."""
    session = RemediationSession(path, service, backup=backup)
    while not session.done:
        session.apply()
    return session.finish()


def open_in_editor(path: Path) -> None:
    command = shlex.split(os.environ.get("EDITOR") or DEFAULT_EDITOR)
    subprocess.run([*command, str(path)], check=False)


Chooser = Callable[[ValidationIssue, int, int], str]


def run_interactive(
    session: RemediationSession,
    choose: Chooser,
    show: Callable[[str], None],
    editor: Callable[[Path], None] = open_in_editor,
) -> FixReport:
    """Drive a session from user choices: [f]ix, [s]kip, [v]iew, [e]dit, [q]uit.

    `choose` receives the current issue with its 1-based position and the total
    and returns the user's answer; unknown answers re-present the issue.
    """
    while not session.done:
        answer = choose(session.current, session.position + 1, len(session.issues)).strip().lower()[:1]
        if answer == "f":
            session.apply()
        elif answer == "s":
            session.skip()
        elif answer == "v":
            show(session.view())
        elif answer == "e":
            session.manual_edit(editor)
        elif answer == "q":
            break
    return session.finish()
