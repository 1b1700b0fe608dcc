"""Validation rules.

Each rule is a plain function `(descriptor, graph) -> ValidationResult` wrapped
in a `Rule` record and registered in `RULES`. Rules never mutate the descriptor
and report problems as issues rather than exceptions. Every issue carries a
`rule_id` from the constants below; remediation dispatches on those ids.
"""

from __future__ import annotations

import re
from collections.abc import Callable
from dataclasses import dataclass

from pom_validator.conflicts import find_conflicts
from pom_validator.graph import ProjectGraph
from pom_validator.models import (
    MODEL_VERSION,
    DependencyEntry,
    PluginEntry,
    ProjectDescriptor,
    ValidationResult,
)
from pom_validator.parser import has_placeholder


# Structure
STRUCTURE_MODEL_VERSION = "structure.model-version"
STRUCTURE_MISSING_GROUP_ID = "structure.missing-group-id"
STRUCTURE_MISSING_ARTIFACT_ID = "structure.missing-artifact-id"
STRUCTURE_MISSING_VERSION = "structure.missing-version"
STRUCTURE_PACKAGING = "structure.unknown-packaging"
STRUCTURE_POM_WITHOUT_MODULES = "structure.pom-without-modules"
STRUCTURE_SUMMARY = "structure.summary"

# Dependencies
DEPENDENCY_DUPLICATE = "dependency.duplicate"
MANAGED_DEPENDENCY_DUPLICATE = "dependency.managed-duplicate"
DEPENDENCY_VERSION_CONFLICT = "dependency.version-conflict"
DEPENDENCY_MISSING_COORDINATE = "dependency.missing-coordinate"
DEPENDENCY_SNAPSHOT = "dependency.snapshot"
DEPENDENCY_VERSION_RANGE = "dependency.version-range"
DEPENDENCY_DEPRECATED_KEYWORD = "dependency.deprecated-keyword"
DEPENDENCY_INVALID_SCOPE = "dependency.invalid-scope"
DEPENDENCY_UNMANAGED_VERSION = "dependency.unmanaged-version"
DEPENDENCY_REDUNDANT_VERSION = "dependency.redundant-version"
DEPENDENCY_EXTERNAL_MANAGEMENT = "dependency.external-management"
DEPENDENCY_PROBLEMATIC = "dependency.problematic"
DEPENDENCY_TEST_SCOPE = "dependency.test-scope"
DEPENDENCY_SUMMARY = "dependency.summary"

# Properties
PROPERTY_MISSING = "property.missing"
PROPERTY_NONE_DEFINED = "property.none-defined"
PROPERTY_ENCODING = "property.encoding"
PROPERTY_COMPILER_MISMATCH = "property.compiler-mismatch"
PROPERTY_JAVA_VERSION_MISMATCH = "property.java-version-mismatch"
PROPERTY_JAVA_VERSION = "property.java-version"
PROPERTY_UNUSED = "property.unused"
PROPERTY_SUMMARY = "property.summary"

# Plugins
PLUGIN_DUPLICATE = "plugin.duplicate"
MANAGED_PLUGIN_DUPLICATE = "plugin.managed-duplicate"
PLUGIN_VERSION_CONFLICT = "plugin.version-conflict"
PLUGIN_MISSING_ARTIFACT_ID = "plugin.missing-artifact-id"
PLUGIN_SNAPSHOT = "plugin.snapshot"
PLUGIN_VERSION_RANGE = "plugin.version-range"
PLUGIN_DEPRECATED_KEYWORD = "plugin.deprecated-keyword"
PLUGIN_CORE_WITHOUT_VERSION = "plugin.core-without-version"
PLUGIN_UNMANAGED_VERSION = "plugin.unmanaged-version"
PLUGIN_REDUNDANT_VERSION = "plugin.redundant-version"
PLUGIN_DEPRECATED = "plugin.deprecated"
PLUGIN_RECOMMENDED = "plugin.recommended"
PLUGIN_SUMMARY = "plugin.summary"

# Multi-module
MULTIMODULE_NO_MANAGEMENT = "multimodule.no-management"

# Versions
VERSION_FORMAT = "version.format"
VERSION_DEPRECATED_KEYWORD = "version.deprecated-keyword"
VERSION_RANGE = "version.range"
VERSION_PRACTICE = "version.practice"
VERSION_SNAPSHOT_MISMATCH = "version.snapshot-mismatch"
VERSION_SUMMARY = "version.summary"


VALID_PACKAGING = frozenset({"pom", "jar", "war", "ear", "maven-plugin", "rar", "bundle"})
VALID_SCOPES = frozenset({"compile", "provided", "runtime", "test", "system", "import"})
DEPRECATED_VERSION_KEYWORDS = frozenset({"LATEST", "RELEASE"})

RECOMMENDED_PROPERTIES: dict[str, str] = {
    "project.build.sourceEncoding": "Add <project.build.sourceEncoding>UTF-8</project.build.sourceEncoding>",
    "project.reporting.outputEncoding": "Add <project.reporting.outputEncoding>UTF-8</project.reporting.outputEncoding>",
    "maven.compiler.source": "Add <maven.compiler.source>21</maven.compiler.source> (or your target Java version)",
    "maven.compiler.target": "Add <maven.compiler.target>21</maven.compiler.target> (or your target Java version)",
}

TEST_FRAMEWORK_MARKERS = ("junit", "testng", "mockito", "assertj")

# artifactId -> version pinned by auto-fix when the plugin has no version.
CORE_PLUGIN_VERSIONS: dict[str, str] = {
    "maven-clean-plugin": "3.3.2",
    "maven-compiler-plugin": "3.11.0",
    "maven-deploy-plugin": "3.1.1",
    "maven-install-plugin": "3.1.1",
    "maven-resources-plugin": "3.3.1",
    "maven-site-plugin": "3.12.1",
    "maven-surefire-plugin": "3.2.2",
}

# artifactId -> (replacement, note)
DEPRECATED_PLUGINS: dict[str, tuple[str, str]] = {
    "cobertura-maven-plugin": ("jacoco-maven-plugin", "Cobertura plugin is deprecated, consider JaCoCo instead"),
    "findbugs-maven-plugin": ("spotbugs-maven-plugin", "FindBugs plugin is deprecated, consider SpotBugs instead"),
    "maven-eclipse-plugin": ("m2e (IDE Maven import)", "maven-eclipse-plugin is retired, use your IDE's Maven import"),
}

MAVEN_VERSION_RE = re.compile(r"^\d+(\.\d+)*(-[a-zA-Z0-9.-]+)?(-SNAPSHOT)?$")
SEMANTIC_VERSION_RE = re.compile(r"^\d+\.\d+\.\d+(-[a-zA-Z0-9.-]+)?$")


RuleFn = Callable[[ProjectDescriptor, ProjectGraph], ValidationResult]


@dataclass(frozen=True)
class Rule:
    """A registered validation rule."""

    name: str
    evaluate: RuleFn
    description: str = ""


def _blank(value: str | None) -> bool:
    return value is None or not value.strip()


def _is_range(version: str) -> bool:
    return any(ch in version for ch in "[(,")


def is_test_framework(key: str) -> bool:
    """Recognize test libraries by their `groupId:artifactId` key."""
    return any(marker in key for marker in TEST_FRAMEWORK_MARKERS) or key.startswith(
        "org.springframework:spring-test"
    )


# ---------------------------------------------------------------------------
# Structure
# ---------------------------------------------------------------------------


def check_structure(descriptor: ProjectDescriptor, graph: ProjectGraph) -> ValidationResult:
    result = ValidationResult()

    if descriptor.model_version != MODEL_VERSION:
        result.error(
            STRUCTURE_MODEL_VERSION,
            f"Model version must be {MODEL_VERSION}, found: {descriptor.model_version}",
            f"Update <modelVersion>{MODEL_VERSION}</modelVersion> in your POM",
        )

    gav = graph.effective_gav(descriptor)
    if _blank(gav.group_id):
        result.error(
            STRUCTURE_MISSING_GROUP_ID,
            "GroupId is missing",
            "Add <groupId>com.example</groupId> element to identify your organization/project",
            fixable=True,
            subject="groupId",
        )
    if _blank(gav.artifact_id):
        result.error(
            STRUCTURE_MISSING_ARTIFACT_ID,
            "ArtifactId is missing",
            "Add <artifactId>your-project-name</artifactId> element to identify your project",
            subject="artifactId",
        )
    if _blank(gav.version):
        result.error(
            STRUCTURE_MISSING_VERSION,
            "Version is missing",
            "Add <version>1.0.0-SNAPSHOT</version> or inherit from parent POM",
            subject="version",
        )

    packaging = descriptor.packaging
    if packaging is not None and packaging not in VALID_PACKAGING:
        result.warning(
            STRUCTURE_PACKAGING,
            f"Unknown packaging type: {packaging}",
            "Use standard packaging types: pom, jar, war, ear, maven-plugin, rar, or bundle",
        )

    if packaging == "pom" and not descriptor.modules:
        if not descriptor.has_dependency_management and not descriptor.has_plugin_management:
            result.warning(
                STRUCTURE_POM_WITHOUT_MODULES,
                "POM packaging without modules should typically have dependency or plugin management",
                "Add <dependencyManagement> or <pluginManagement> sections, or define <modules>",
            )

    result.info(STRUCTURE_SUMMARY, f"GAV: {gav.compact()}")
    result.info(STRUCTURE_SUMMARY, f"Packaging: {packaging or 'jar (default)'}")
    return result


# ---------------------------------------------------------------------------
# Dependencies
# ---------------------------------------------------------------------------


def _check_dependency_list(entries: list[DependencyEntry], kind: str, result: ValidationResult) -> None:
    duplicate_rule = MANAGED_DEPENDENCY_DUPLICATE if kind == "managed" else DEPENDENCY_DUPLICATE
    for conflict in find_conflicts(entries):
        result.error(
            duplicate_rule,
            f"Duplicate {kind} dependency: {conflict.key}",
            "Keep a single declaration of this dependency",
            fixable=True,
            subject=conflict.key,
        )
        if conflict.has_version_conflict:
            result.error(
                DEPENDENCY_VERSION_CONFLICT,
                f"Version conflict for {kind} dependency {conflict.key}: {conflict.version_set()}",
                "Pick one version and remove the other declarations",
                subject=conflict.key,
            )

    for dep in entries:
        _check_single_dependency(dep, kind, result)


def _check_single_dependency(dep: DependencyEntry, kind: str, result: ValidationResult) -> None:
    key = dep.key()

    if _blank(dep.gav.group_id):
        result.error(DEPENDENCY_MISSING_COORDINATE, f"Missing groupId in {kind} dependency: {key}", subject=key)
    if _blank(dep.gav.artifact_id):
        result.error(DEPENDENCY_MISSING_COORDINATE, f"Missing artifactId in {kind} dependency: {key}", subject=key)

    version = dep.version
    if not _blank(version):
        if version.endswith("-SNAPSHOT"):
            result.warning(DEPENDENCY_SNAPSHOT, f"SNAPSHOT dependency in {kind}: {key}:{version}", subject=key)
        if _is_range(version):
            result.warning(
                DEPENDENCY_VERSION_RANGE,
                f"Version range in {kind} dependency: {key}:{version}",
                "Pin an exact version for reproducible builds",
                subject=key,
            )
        if version in DEPRECATED_VERSION_KEYWORDS:
            result.error(
                DEPENDENCY_DEPRECATED_KEYWORD,
                f"Deprecated version keyword in {kind} dependency: {key}:{version}",
                "Replace LATEST/RELEASE with an explicit version",
                subject=key,
            )

    if dep.scope is not None and dep.scope not in VALID_SCOPES:
        result.warning(
            DEPENDENCY_INVALID_SCOPE,
            f"Invalid scope in {kind} dependency {key}: {dep.scope}",
            "Use one of: compile, provided, runtime, test, system, import",
            subject=key,
        )

    if key == "commons-logging:commons-logging":
        result.warning(DEPENDENCY_PROBLEMATIC, f"Consider using SLF4J instead of commons-logging: {key}", subject=key)
    if key == "log4j:log4j" and (version is None or version.startswith("1.")):
        result.warning(DEPENDENCY_PROBLEMATIC, f"Log4j 1.x is end-of-life, consider upgrading: {key}", subject=key)

    if kind == "direct" and is_test_framework(key) and dep.scope != "test":
        result.warning(
            DEPENDENCY_TEST_SCOPE,
            f"Test framework should have test scope: {key}",
            "Add <scope>test</scope>",
            fixable=True,
            subject=key,
        )


def _check_dependency_versions(
    descriptor: ProjectDescriptor, graph: ProjectGraph, result: ValidationResult
) -> None:
    managed_entries = [
        *descriptor.dependency_management,
        *(e for a in graph.ancestors(descriptor) for e in a.dependency_management),
    ]
    managed = {e.key() for e in managed_entries}
    # Versions may also come from a parent or BOM that is not available locally.
    unknown_management = graph.has_external_parent(descriptor) or any(
        e.scope == "import" for e in managed_entries
    )

    unresolved = 0
    for dep in descriptor.dependencies:
        key = dep.key()
        if _blank(dep.version):
            if key in managed:
                continue
            if unknown_management:
                unresolved += 1
            result.error(
                DEPENDENCY_UNMANAGED_VERSION,
                f"Direct dependency without version and not in dependency management: {key}",
                "Add a <version> or manage it in <dependencyManagement>",
                subject=key,
            )
        elif key in managed:
            result.warning(
                DEPENDENCY_REDUNDANT_VERSION,
                f"Direct dependency specifies version but is managed: {key}",
                "Remove the <version> and rely on dependency management",
                subject=key,
            )

    if unresolved:
        result.info(
            DEPENDENCY_EXTERNAL_MANAGEMENT,
            f"{unresolved} unmanaged dependencies may get their version from an external parent or imported BOM",
            "Declare the version locally if the external parent or BOM does not manage it",
        )


def check_dependencies(descriptor: ProjectDescriptor, graph: ProjectGraph) -> ValidationResult:
    result = ValidationResult()
    if descriptor.dependencies:
        _check_dependency_list(descriptor.dependencies, "direct", result)
    if descriptor.dependency_management:
        _check_dependency_list(descriptor.dependency_management, "managed", result)
    _check_dependency_versions(descriptor, graph, result)
    result.info(
        DEPENDENCY_SUMMARY,
        f"Dependencies: {len(descriptor.dependencies)} direct, {len(descriptor.dependency_management)} managed",
    )
    return result


# ---------------------------------------------------------------------------
# Properties
# ---------------------------------------------------------------------------


def _is_standard_property(name: str) -> bool:
    return (
        name.startswith("project.")
        or name.startswith("maven.")
        or name == "java.version"
        or name.endswith(".version")
    )


def _check_java_version(java_version: str, result: ValidationResult) -> None:
    if has_placeholder(java_version):
        return
    if java_version.startswith("1."):
        result.warning(
            PROPERTY_JAVA_VERSION,
            f"Java version {java_version} uses old versioning scheme and is likely outdated",
            "Update to modern Java versioning: <java.version>21</java.version>",
        )
        return
    try:
        major = int(java_version)
    except ValueError:
        return
    if major < 11:
        result.warning(
            PROPERTY_JAVA_VERSION,
            f"Java version {java_version} is no longer supported. Consider upgrading to Java 11+",
            "Update <java.version>21</java.version> for latest LTS support",
        )
    else:
        result.info(PROPERTY_JAVA_VERSION, f"Using supported Java version: {java_version}")


def check_properties(descriptor: ProjectDescriptor, graph: ProjectGraph) -> ValidationResult:
    result = ValidationResult()
    own = descriptor.properties
    properties = graph.effective_properties(descriptor)

    if not properties:
        result.info(
            PROPERTY_NONE_DEFINED,
            "No properties defined - consider adding standard Maven properties",
            "Add <properties> section with project.build.sourceEncoding=UTF-8, maven.compiler.source=21, etc.",
        )

    for name, suggestion in RECOMMENDED_PROPERTIES.items():
        if name not in properties:
            result.warning(
                PROPERTY_MISSING,
                f"Missing recommended property: {name}",
                suggestion,
                fixable=True,
                subject=name,
            )

    for name, label in (
        ("project.build.sourceEncoding", "Consider using UTF-8 encoding"),
        ("project.reporting.outputEncoding", "Consider using UTF-8 for reporting encoding"),
    ):
        value = own.get(name)
        if value is not None and value != "UTF-8" and not has_placeholder(value):
            result.warning(PROPERTY_ENCODING, f"{label}: {value}", f"Set <{name}>UTF-8</{name}>", subject=name)

    source = properties.get("maven.compiler.source")
    target = properties.get("maven.compiler.target")
    java_version = properties.get("java.version")

    if source is not None and target is not None and source != target:
        result.warning(
            PROPERTY_COMPILER_MISMATCH,
            f"Compiler source and target versions differ: {source} vs {target}",
            "Set both maven.compiler.source and maven.compiler.target to the same Java version",
        )

    if java_version is not None:
        if (
            source is not None
            and source != java_version
            and not has_placeholder(source)
            and not has_placeholder(java_version)
        ):
            result.warning(
                PROPERTY_JAVA_VERSION_MISMATCH,
                f"Java version and compiler source mismatch: {java_version} vs {source}",
                "Set <maven.compiler.source>${java.version}</maven.compiler.source> to use the java.version property",
            )
        _check_java_version(java_version, result)

    unused = sum(
        1 for name, value in own.items() if not _is_standard_property(name) and not has_placeholder(value)
    )
    if unused:
        result.info(
            PROPERTY_UNUSED,
            f"Found {unused} potentially unused custom properties",
            "Review custom properties and remove any that are not referenced in the POM",
        )

    result.info(PROPERTY_SUMMARY, f"Properties defined: {len(own)}")
    return result


# ---------------------------------------------------------------------------
# Plugins
# ---------------------------------------------------------------------------


def _check_plugin_list(entries: list[PluginEntry], kind: str, result: ValidationResult) -> None:
    duplicate_rule = MANAGED_PLUGIN_DUPLICATE if kind == "managed" else PLUGIN_DUPLICATE
    for conflict in find_conflicts(entries):
        result.error(
            duplicate_rule,
            f"Duplicate {kind} plugin: {conflict.key}",
            "Merge the configurations into a single <plugin> declaration",
            fixable=True,
            subject=conflict.key,
        )
        if conflict.has_version_conflict:
            result.error(
                PLUGIN_VERSION_CONFLICT,
                f"Version conflict for {kind} plugin {conflict.key}: {conflict.version_set()}",
                "Pick one version and remove the other declarations",
                subject=conflict.key,
            )

    for plugin in entries:
        key = plugin.key()
        artifact_id = plugin.gav.artifact_id
        if _blank(artifact_id):
            result.error(PLUGIN_MISSING_ARTIFACT_ID, f"Missing artifactId in {kind} plugin: {key}", subject=key)

        version = plugin.version
        if not _blank(version):
            if version.endswith("-SNAPSHOT"):
                result.warning(PLUGIN_SNAPSHOT, f"SNAPSHOT plugin version in {kind}: {key}:{version}", subject=key)
            if _is_range(version):
                result.warning(PLUGIN_VERSION_RANGE, f"Version range in {kind} plugin: {key}:{version}", subject=key)
            if version in DEPRECATED_VERSION_KEYWORDS:
                result.error(
                    PLUGIN_DEPRECATED_KEYWORD,
                    f"Deprecated version keyword in {kind} plugin: {key}:{version}",
                    "Replace LATEST/RELEASE with an explicit plugin version",
                    subject=key,
                )

        if artifact_id in DEPRECATED_PLUGINS:
            replacement, note = DEPRECATED_PLUGINS[artifact_id]
            result.warning(PLUGIN_DEPRECATED, f"{note}: {key}", f"Replace with {replacement}", subject=key)
        if artifact_id == "maven-compiler-plugin" and kind == "direct":
            result.info(PLUGIN_SUMMARY, "Maven compiler plugin configured")


def _check_plugin_versions(descriptor: ProjectDescriptor, graph: ProjectGraph, result: ValidationResult) -> None:
    managed = {
        p.key()
        for d in (descriptor, *graph.ancestors(descriptor))
        for p in d.plugin_management
    }
    for plugin in descriptor.plugins:
        key = plugin.key()
        artifact_id = plugin.gav.artifact_id
        if _blank(plugin.version):
            if key in managed:
                continue
            if artifact_id in CORE_PLUGIN_VERSIONS:
                result.warning(
                    PLUGIN_CORE_WITHOUT_VERSION,
                    f"Core Maven plugin without version: {key}",
                    f"Pin <version>{CORE_PLUGIN_VERSIONS[artifact_id]}</version>",
                    fixable=True,
                    subject=key,
                )
            elif managed:
                result.warning(
                    PLUGIN_UNMANAGED_VERSION,
                    f"Direct plugin without version and not in plugin management: {key}",
                    "Add a <version> or manage it in <pluginManagement>",
                    subject=key,
                )
        elif key in managed:
            result.warning(
                PLUGIN_REDUNDANT_VERSION,
                f"Direct plugin specifies version but is managed: {key}",
                "Remove the <version> and rely on plugin management",
                subject=key,
            )


def check_plugins(descriptor: ProjectDescriptor, graph: ProjectGraph) -> ValidationResult:
    result = ValidationResult()
    if not descriptor.has_build:
        result.info(PLUGIN_SUMMARY, "No build section defined")
        return result

    if descriptor.plugins:
        _check_plugin_list(descriptor.plugins, "direct", result)
    if descriptor.plugin_management:
        _check_plugin_list(descriptor.plugin_management, "managed", result)
    _check_plugin_versions(descriptor, graph, result)

    if descriptor.effective_packaging != "pom":
        artifacts = {p.gav.artifact_id for p in descriptor.plugins}
        if "maven-compiler-plugin" not in artifacts:
            result.warning(PLUGIN_RECOMMENDED, "Consider explicitly configuring maven-compiler-plugin")
        if "maven-surefire-plugin" not in artifacts:
            result.info(PLUGIN_RECOMMENDED, "Consider configuring maven-surefire-plugin for test execution")

    result.info(
        PLUGIN_SUMMARY,
        f"Plugins: {len(descriptor.plugins)} direct, {len(descriptor.plugin_management)} managed",
    )
    return result


# ---------------------------------------------------------------------------
# Multi-module
# ---------------------------------------------------------------------------


def check_multi_module(descriptor: ProjectDescriptor, graph: ProjectGraph) -> ValidationResult:
    result = graph.findings_for(descriptor)
    if descriptor.modules and not (descriptor.has_dependency_management or descriptor.has_plugin_management):
        result.warning(
            MULTIMODULE_NO_MANAGEMENT,
            "Aggregator POM has neither dependencyManagement nor pluginManagement",
            "Parent POMs typically manage versions centrally for child modules",
        )
    return result


# ---------------------------------------------------------------------------
# Versions
# ---------------------------------------------------------------------------


def _check_version_value(version: str, kind: str, result: ValidationResult) -> None:
    if not MAVEN_VERSION_RE.match(version) and not has_placeholder(version):
        result.warning(VERSION_FORMAT, f"Non-standard {kind} version format: {version}")
    if version in DEPRECATED_VERSION_KEYWORDS:
        result.error(VERSION_DEPRECATED_KEYWORD, f"Deprecated version keyword in {kind}: {version}")
    if _is_range(version):
        result.warning(VERSION_RANGE, f"Version range in {kind}: {version}")
    if version.endswith("-SNAPSHOT"):
        result.info(VERSION_SUMMARY, f"SNAPSHOT {kind} version: {version}")
    if SEMANTIC_VERSION_RE.match(version.replace("-SNAPSHOT", "")):
        result.info(VERSION_SUMMARY, f"Semantic versioning compliant {kind} version: {version}")

    if len(version) > 50:
        result.warning(VERSION_PRACTICE, f"Very long {kind} version string: {version}")
    if version.lower().startswith("v"):
        result.warning(VERSION_PRACTICE, f"Version starts with 'v' - consider removing: {version}")
    if version.count("-") > 2:
        result.warning(VERSION_PRACTICE, f"Version contains many hyphens, verify format: {version}")
    if "final" in version.lower():
        result.warning(VERSION_PRACTICE, f"Version contains 'FINAL' - this is usually implicit: {version}")


def check_versions(descriptor: ProjectDescriptor, graph: ProjectGraph) -> ValidationResult:
    result = ValidationResult()
    version = descriptor.gav.version
    parent_version = descriptor.parent.gav.version if descriptor.parent else None

    if version:
        _check_version_value(version, "project", result)
    if parent_version:
        _check_version_value(parent_version, "parent", result)

    if version and parent_version:
        parent_snapshot = parent_version.endswith("-SNAPSHOT")
        project_snapshot = version.endswith("-SNAPSHOT")
        if parent_snapshot != project_snapshot:
            result.warning(
                VERSION_SNAPSHOT_MISMATCH,
                f"Parent and project SNAPSHOT status mismatch: parent={parent_version}, project={version}",
            )

    if version:
        artifact_id = (descriptor.gav.artifact_id or "").lower()
        if version.endswith("-SNAPSHOT") and "release" in artifact_id:
            result.warning(VERSION_PRACTICE, f"Artifact name suggests release but version is SNAPSHOT: {version}")
        if not version.endswith("-SNAPSHOT") and "snapshot" in artifact_id:
            result.warning(VERSION_PRACTICE, f"Artifact name suggests SNAPSHOT but version is not: {version}")
        if any(marker in version for marker in ("dev", "alpha", "beta")):
            result.info(VERSION_SUMMARY, f"Development/pre-release version detected: {version}")
        if version.isdigit():
            result.warning(VERSION_PRACTICE, f"Single number version - consider using semantic versioning: {version}")
    return result


RULES: dict[str, Rule] = {
    rule.name: rule
    for rule in (
        Rule("structure", check_structure, "modelVersion, coordinates and packaging"),
        Rule("dependency", check_dependencies, "duplicates, conflicts, versions and scopes of dependencies"),
        Rule("property", check_properties, "encoding and compiler properties"),
        Rule("plugin", check_plugins, "duplicates, versions and deprecated build plugins"),
        Rule("multi-module", check_multi_module, "module references and parent links"),
        Rule("version", check_versions, "project and parent version conventions"),
    )
}
