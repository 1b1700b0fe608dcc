from __future__ import annotations

from pathlib import Path

from poms import CLEAN_BODY, pom_xml

from pom_validator import remediation
from pom_validator import rules as r
from pom_validator.config import ValidatorConfig
from pom_validator.models import Severity, ValidationIssue, ValidationResult
from pom_validator.parser import parse_pom
from pom_validator.pipeline import ValidationService
from pom_validator.remediation import (
    IssueState,
    RemediationSession,
    apply_fix,
    auto_fix,
    can_fix,
    fixable_issues,
    run_interactive,
)

MESSY_BODY = """
  <dependencies>
    <dependency>
      <groupId>junit</groupId>
      <artifactId>junit</artifactId>
      <version>4.13.2</version>
    </dependency>
    <dependency>
      <groupId>org.slf4j</groupId>
      <artifactId>slf4j-api</artifactId>
      <version>2.0.12</version>
    </dependency>
    <dependency>
      <groupId>junit</groupId>
      <artifactId>junit</artifactId>
      <version>4.13.1</version>
    </dependency>
  </dependencies>

  <build>
    <plugins>
      <plugin>
        <artifactId>maven-compiler-plugin</artifactId>
      </plugin>
      <plugin>
        <artifactId>maven-compiler-plugin</artifactId>
      </plugin>
      <plugin>
        <artifactId>maven-surefire-plugin</artifactId>
        <version>3.2.2</version>
      </plugin>
    </plugins>
  </build>
"""


def _issue(rule_id: str, subject: str | None = None, fixable: bool = True) -> ValidationIssue:
    return ValidationIssue(severity=Severity.WARNING, message=rule_id, rule_id=rule_id, subject=subject, fixable=fixable)


def test_can_fix_dispatches_on_rule_id() -> None:
    assert can_fix(_issue(r.PROPERTY_MISSING, "project.build.sourceEncoding"))
    assert not can_fix(_issue(r.PROPERTY_MISSING, "project.build.sourceEncoding", fixable=False))
    assert not can_fix(_issue(r.DEPENDENCY_SNAPSHOT, "a:b"))


def test_fixable_issues_are_distinct_and_errors_first() -> None:
    result = ValidationResult()
    result.warning(r.PLUGIN_CORE_WITHOUT_VERSION, "w", fixable=True, subject="p")
    result.warning(r.PLUGIN_CORE_WITHOUT_VERSION, "w", fixable=True, subject="p")
    result.warning(r.DEPENDENCY_SNAPSHOT, "not fixable", subject="d")
    result.error(r.DEPENDENCY_DUPLICATE, "e", fixable=True, subject="d")

    assert [i.rule_id for i in fixable_issues(result)] == [r.DEPENDENCY_DUPLICATE, r.PLUGIN_CORE_WITHOUT_VERSION]


def test_apply_fix_returns_same_object_when_nothing_changes(write_pom) -> None:
    descriptor = parse_pom(write_pom("pom.xml", pom_xml(CLEAN_BODY)))

    assert apply_fix(descriptor, _issue(r.PROPERTY_MISSING, "project.build.sourceEncoding")) is descriptor
    assert apply_fix(descriptor, _issue(r.PROPERTY_MISSING, "custom.property")) is descriptor
    assert apply_fix(descriptor, _issue(r.DEPENDENCY_SNAPSHOT, "a:b")) is descriptor
    assert apply_fix(descriptor, _issue(r.STRUCTURE_MISSING_GROUP_ID, "groupId")) is descriptor


def test_apply_fix_never_raises(write_pom, monkeypatch) -> None:
    def boom(descriptor, issue):
        raise ValueError("broken fix")

    monkeypatch.setitem(remediation.FIXES, "test.boom", boom)
    descriptor = parse_pom(write_pom("pom.xml", pom_xml()))
    assert apply_fix(descriptor, _issue("test.boom")) is descriptor


def test_catalogue_fixes_in_memory(write_pom) -> None:
    descriptor = parse_pom(write_pom("pom.xml", pom_xml(MESSY_BODY, group_id=None)))

    fixed = apply_fix(descriptor, _issue(r.STRUCTURE_MISSING_GROUP_ID, "groupId"))
    assert fixed.gav.group_id == "com.example"
    assert descriptor.gav.group_id is None

    fixed = apply_fix(descriptor, _issue(r.PROPERTY_MISSING, "maven.compiler.source"))
    assert fixed.properties == {"maven.compiler.source": "21"}

    fixed = apply_fix(descriptor, _issue(r.DEPENDENCY_DUPLICATE, "junit:junit"))
    assert [(d.key(), d.index) for d in fixed.dependencies] == [("junit:junit", 0), ("org.slf4j:slf4j-api", 1)]

    fixed = apply_fix(descriptor, _issue(r.DEPENDENCY_TEST_SCOPE, "junit:junit"))
    assert [d.scope for d in fixed.dependencies] == ["test", None, "test"]

    fixed = apply_fix(descriptor, _issue(r.PLUGIN_CORE_WITHOUT_VERSION, "org.apache.maven.plugins:maven-compiler-plugin"))
    assert [p.version for p in fixed.plugins] == ["3.11.0", "3.11.0", "3.2.2"]


def test_compiler_properties_follow_java_version(write_pom) -> None:
    body = "  <properties>\n    <java.version>17</java.version>\n  </properties>"
    descriptor = parse_pom(write_pom("pom.xml", pom_xml(body)))
    fixed = apply_fix(descriptor, _issue(r.PROPERTY_MISSING, "maven.compiler.target"))
    assert fixed.properties["maven.compiler.target"] == "17"


def test_compiler_properties_follow_parent_java_version(write_pom) -> None:
    parent_body = """
  <modules>
    <module>child</module>
  </modules>
  <properties>
    <java.version>17</java.version>
  </properties>
  <dependencyManagement><dependencies/></dependencyManagement>"""
    write_pom("pom.xml", pom_xml(parent_body, artifact_id="parent", packaging="pom"))
    head = """  <parent>
    <groupId>com.acme</groupId>
    <artifactId>parent</artifactId>
    <version>1.0.0</version>
  </parent>"""
    body = """
  <properties>
    <project.build.sourceEncoding>UTF-8</project.build.sourceEncoding>
    <project.reporting.outputEncoding>UTF-8</project.reporting.outputEncoding>
  </properties>"""
    child = write_pom("child/pom.xml", pom_xml(body, head=head, group_id=None, version=None, artifact_id="child"))

    report = auto_fix(child)

    assert sorted(i.subject for i in report.fixed) == ["maven.compiler.source", "maven.compiler.target"]
    properties = parse_pom(child).properties
    assert properties["maven.compiler.source"] == "17"
    assert properties["maven.compiler.target"] == "17"
    # Fixing must not introduce new findings.
    before = {(i.rule_id, i.subject) for i in report.before.warnings}
    assert {(i.rule_id, i.subject) for i in report.after.warnings} <= before
    assert r.PROPERTY_JAVA_VERSION_MISMATCH not in {i.rule_id for i in report.after.warnings}


def test_missing_encoding_fixed_and_confirmed_by_revalidation(write_pom) -> None:
    body = CLEAN_BODY.replace("<project.build.sourceEncoding>UTF-8</project.build.sourceEncoding>", "")
    path = write_pom("pom.xml", pom_xml(body))
    original = path.read_bytes()

    report = auto_fix(path)

    assert [i.subject for i in report.fixed] == ["project.build.sourceEncoding"]
    assert report.not_fixed == []
    assert report.verified
    assert report.after.warnings == []
    assert parse_pom(path).properties["project.build.sourceEncoding"] == "UTF-8"
    assert report.backup == path.with_name("pom.xml.backup")
    assert report.backup.read_bytes() == original


def test_second_pass_changes_nothing(write_pom) -> None:
    path = write_pom("pom.xml", pom_xml(MESSY_BODY, group_id=None))

    first = auto_fix(path)
    assert {i.rule_id for i in first.fixed} == {
        r.STRUCTURE_MISSING_GROUP_ID,
        r.PROPERTY_MISSING,
        r.DEPENDENCY_DUPLICATE,
        r.DEPENDENCY_TEST_SCOPE,
        r.PLUGIN_DUPLICATE,
        r.PLUGIN_CORE_WITHOUT_VERSION,
    }
    assert first.not_fixed == []
    assert first.after.is_valid
    assert fixable_issues(first.after) == []

    after_first = path.read_bytes()
    second = auto_fix(path)
    assert second.fixed == [] and second.not_fixed == []
    assert path.read_bytes() == after_first


def test_fix_without_backup(write_pom) -> None:
    path = write_pom("pom.xml", pom_xml(group_id=None))
    service = ValidationService(ValidatorConfig(backup=False))
    report = auto_fix(path, service)
    assert report.backup is None
    assert not path.with_name("pom.xml.backup").exists()
    assert parse_pom(path).gav.group_id == "com.example"


def test_unparseable_pom_has_nothing_to_fix(write_pom) -> None:
    path = write_pom("pom.xml", "<project>")
    report = auto_fix(path)
    assert report.fixed == []
    assert not report.after.is_valid
    assert path.read_text(encoding="utf-8") == "<project>"


def test_session_skip_view_and_fix(write_pom) -> None:
    body = CLEAN_BODY.replace("<project.reporting.outputEncoding>UTF-8</project.reporting.outputEncoding>", "")
    path = write_pom("pom.xml", pom_xml(body, group_id=None))
    session = RemediationSession(path)
    assert [i.rule_id for i in session.issues] == [r.STRUCTURE_MISSING_GROUP_ID, r.PROPERTY_MISSING]

    shown: list[str] = []
    answers = iter(["v", "s", "?", "f"])
    report = run_interactive(session, lambda issue, pos, total: next(answers), shown.append)

    assert "<artifactId>demo</artifactId>" in shown[0]
    assert session.transitions == [
        IssueState.VIEWING,
        IssueState.PRESENTED,
        IssueState.SKIPPED,
        IssueState.APPLYING,
        IssueState.FIXED,
    ]
    assert [i.rule_id for i in report.skipped] == [r.STRUCTURE_MISSING_GROUP_ID]
    assert [i.subject for i in report.fixed] == ["project.reporting.outputEncoding"]
    assert len(report.after.errors) == 1


def test_session_quit_leaves_file_alone(write_pom) -> None:
    path = write_pom("pom.xml", pom_xml(group_id=None))
    before = path.read_bytes()
    report = run_interactive(RemediationSession(path), lambda *_: "q", print)
    assert report.fixed == []
    assert path.read_bytes() == before
    assert report.backup is None


def test_manual_edit_restarts_with_fresh_issues(write_pom) -> None:
    path = write_pom("pom.xml", pom_xml(CLEAN_BODY, group_id=None))
    session = RemediationSession(path)
    assert len(session.issues) == 1

    def editor(target: Path) -> None:
        target.write_text(pom_xml(CLEAN_BODY, group_id="org.edited"), encoding="utf-8")

    state = session.manual_edit(editor)

    assert state is IssueState.RESTARTED
    assert session.transitions == [IssueState.MANUAL_EDIT, IssueState.RESTARTED]
    assert session.state is IssueState.PRESENTED
    assert session.done
    assert session.report.backup is not None
    assert session.finish().after.is_valid


def test_fix_that_changes_nothing_is_reported_not_fixed(write_pom) -> None:
    path = write_pom("pom.xml", pom_xml(CLEAN_BODY))
    session = RemediationSession(path)
    session.issues = [_issue(r.PROPERTY_MISSING, "custom.property")]

    assert session.apply() is IssueState.FAILED_FIX
    assert session.report.not_fixed == session.issues
    assert session.report.backup is None
