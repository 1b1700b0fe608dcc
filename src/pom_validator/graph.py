from __future__ import annotations

import logging
from collections.abc import Iterable
from enum import Enum
from pathlib import Path

import networkx as nx

from pom_validator.exceptions import PomValidatorError
from pom_validator.models import Coordinate, ProjectDescriptor, ValidationResult
from pom_validator.parser import has_placeholder, parse_pom


logger = logging.getLogger(__name__)

POM_FILE_NAME = "pom.xml"

DUPLICATE_MODULE = "graph.duplicate-module"
MISSING_MODULE_DIR = "graph.missing-module-dir"
MISSING_MODULE_POM = "graph.missing-module-pom"
AGGREGATOR_PACKAGING = "graph.aggregator-packaging"
MODULE_SUMMARY = "graph.modules"
PARENT_COORDINATES = "graph.parent-coordinates"
PARENT_RELATIVE_PATH = "graph.parent-relative-path"
PARENT_DEFAULT_PATH = "graph.parent-default-path"
INHERITED_GROUP_ID = "graph.inherited-group-id"
INHERITED_VERSION = "graph.inherited-version"
PARENT_VERSION_MISMATCH = "graph.parent-version-mismatch"
PARENT_NOT_AGGREGATOR = "graph.parent-not-aggregator"
PARENT_CYCLE = "graph.parent-cycle"


def _key(path: Path) -> Path:
    return path.resolve()


def expected_parent_path(descriptor: ProjectDescriptor) -> Path | None:
    """Where Maven would look for the parent POM on disk.

    An explicit `relativePath` is resolved against the POM's directory, with
    `pom.xml` appended when it names a directory. An absent element means
    `../pom.xml`; an empty element disables local lookup.
    """
    if descriptor.parent is None:
        return None
    base = descriptor.path.parent
    rel = descriptor.parent.relative_path
    if rel is None:
        return base.parent / POM_FILE_NAME
    if not rel:
        return None
    candidate = base / rel
    if not rel.endswith(".xml"):
        candidate = candidate / POM_FILE_NAME
    return candidate


def module_pom_path(descriptor: ProjectDescriptor, module: str) -> Path:
    return descriptor.path.parent / module / POM_FILE_NAME


class ProjectType(str, Enum):
    """Role a POM plays in its project layout."""

    SINGLE_MODULE = "single-module"
    MULTI_MODULE_PARENT = "multi-module-parent"
    MULTI_MODULE_CHILD = "multi-module-child"
    AGGREGATOR = "aggregator"
    BOM = "bom"
    STANDALONE_PARENT = "standalone-parent"
    UNKNOWN = "unknown"

    @property
    def description(self) -> str:
        return _PROJECT_TYPE_DESCRIPTIONS[self]


_PROJECT_TYPE_DESCRIPTIONS = {
    ProjectType.SINGLE_MODULE: "Single module project",
    ProjectType.MULTI_MODULE_PARENT: "Multi-module parent project",
    ProjectType.MULTI_MODULE_CHILD: "Multi-module child module",
    ProjectType.AGGREGATOR: "Aggregator project (POM only)",
    ProjectType.BOM: "Bill of materials (BOM)",
    ProjectType.STANDALONE_PARENT: "Standalone parent POM",
    ProjectType.UNKNOWN: "Unknown project type",
}


def project_type(descriptor: ProjectDescriptor) -> ProjectType:
    """Classify a POM by packaging, modules, parent and management sections.

    The first matching shape wins:
    BOM, then module parent, then child (any declared parent, local or not),
    then pom-packaged parent or aggregator, and otherwise a single module.
    """
    is_pom = descriptor.effective_packaging == "pom"
    has_dependencies = bool(descriptor.dependencies)
    has_dependency_management = bool(descriptor.dependency_management)

    if is_pom and not descriptor.modules and has_dependency_management and not has_dependencies:
        return ProjectType.BOM
    if descriptor.modules:
        return ProjectType.MULTI_MODULE_PARENT
    if descriptor.parent is not None:
        return ProjectType.MULTI_MODULE_CHILD
    if is_pom and not has_dependencies:
        if descriptor.plugin_management:
            return ProjectType.STANDALONE_PARENT
        return ProjectType.AGGREGATOR
    return ProjectType.SINGLE_MODULE


def detect_project_types(paths: Iterable[Path]) -> dict[Path, ProjectType]:
    """Classify every POM; files that cannot be parsed are UNKNOWN."""
    types: dict[Path, ProjectType] = {}
    for path in paths:
        try:
            types[path] = project_type(parse_pom(path))
        except PomValidatorError as exc:
            logger.debug("No project type for %s: %s", path, exc)
            types[path] = ProjectType.UNKNOWN
    return types


class ProjectGraph:
    """Parent/module relationships across a set of local POMs.

    Nodes are resolved POM paths. Edges point from parent to child and carry
    `kind="parent"` (child declares the parent and it was found locally) or
    `kind="module"` (aggregator lists the child as a module).
    """

    def __init__(self) -> None:
        self.graph = nx.DiGraph()
        self.descriptors: dict[Path, ProjectDescriptor] = {}
        self.inputs: list[Path] = []
        self.module_paths: dict[Path, list[Path]] = {}
        self._parents: dict[Path, Path] = {}
        self._findings: dict[Path, ValidationResult] = {}

    def add(self, descriptor: ProjectDescriptor) -> None:
        key = _key(descriptor.path)
        self.descriptors[key] = descriptor
        self.graph.add_node(key)

    def parent_of(self, descriptor: ProjectDescriptor) -> ProjectDescriptor | None:
        """Return the locally resolved parent descriptor, if any."""
        parent_key = self._parents.get(_key(descriptor.path))
        return self.descriptors.get(parent_key) if parent_key else None

    def effective_gav(self, descriptor: ProjectDescriptor) -> Coordinate:
        """Coordinates with groupId/version inherited along the parent chain."""
        gav = descriptor.effective_gav
        for ancestor in self.ancestors(descriptor):
            if gav.group_id is not None and gav.version is not None:
                break
            inherited = ancestor.effective_gav
            gav = Coordinate(
                group_id=gav.group_id or inherited.group_id,
                artifact_id=gav.artifact_id,
                version=gav.version or inherited.version,
            )
        return gav

    def ancestors(self, descriptor: ProjectDescriptor) -> list[ProjectDescriptor]:
        """Locally resolved parents, nearest first."""
        chain: list[ProjectDescriptor] = []
        seen = {_key(descriptor.path)}
        current = self.parent_of(descriptor)
        while current is not None and _key(current.path) not in seen:
            seen.add(_key(current.path))
            chain.append(current)
            current = self.parent_of(current)
        return chain

    def has_external_parent(self, descriptor: ProjectDescriptor) -> bool:
        """True if some POM in the chain declares a parent that is not available locally."""
        for item in [descriptor, *self.ancestors(descriptor)]:
            if item.parent is not None and self.parent_of(item) is None:
                return True
        return False

    def effective_properties(self, descriptor: ProjectDescriptor) -> dict[str, str]:
        """Properties merged along the parent chain; the child's own values win."""
        merged: dict[str, str] = {}
        for item in reversed([descriptor, *self.ancestors(descriptor)]):
            merged.update(item.properties)
        return merged

    def findings_for(self, descriptor: ProjectDescriptor) -> ValidationResult:
        """Graph issues recorded for a descriptor (a fresh copy)."""
        found = self._findings.get(_key(descriptor.path))
        return found.model_copy(deep=True) if found else ValidationResult()

    def _findings_of(self, key: Path) -> ValidationResult:
        return self._findings.setdefault(key, ValidationResult())

    def parent_first_order(self) -> list[Path]:
        """Input descriptor paths ordered so parents and aggregators come first.

        Falls back to path depth when the relationships contain a cycle.
        """
        try:
            keys = list(nx.lexicographical_topological_sort(self.graph, key=str))
        except nx.NetworkXUnfeasible:
            keys = sorted(self.graph.nodes, key=lambda p: (len(p.parts), str(p)))
        requested = set(self.inputs)
        return [self.descriptors[k].path for k in keys if k in requested]


def _load_parent(graph: ProjectGraph, descriptor: ProjectDescriptor) -> Path | None:
    candidate = expected_parent_path(descriptor)
    if candidate is None or not candidate.is_file():
        return None
    key = _key(candidate)
    if key == _key(descriptor.path):
        return None
    parent = graph.descriptors.get(key)
    if parent is None:
        try:
            parent = parse_pom(candidate)
        except PomValidatorError as exc:
            logger.debug("Could not load parent POM %s: %s", candidate, exc)
            return None
        graph.add(parent)
    # A POM found at the relative path is only the parent if the coordinates agree.
    declared = descriptor.parent.gav
    if declared.artifact_id and parent.gav.artifact_id != declared.artifact_id:
        logger.debug("POM at %s is not %s", candidate, declared.compact())
        return None
    return key


def _check_modules(graph: ProjectGraph, descriptor: ProjectDescriptor) -> None:
    key = _key(descriptor.path)
    result = graph._findings_of(key)
    modules = descriptor.modules

    if descriptor.effective_packaging != "pom":
        result.warning(
            AGGREGATOR_PACKAGING,
            f"Parent POM with modules should have packaging type 'pom', found: {descriptor.effective_packaging}",
            f"Change <packaging>{descriptor.effective_packaging}</packaging> to <packaging>pom</packaging>",
        )

    seen: set[str] = set()
    reported: set[str] = set()
    paths: list[Path] = []
    for module in modules:
        if module in seen:
            if module in reported:
                continue
            reported.add(module)
            result.error(
                DUPLICATE_MODULE,
                f"Duplicate module reference: {module}",
                f"Remove duplicate <module>{module}</module> entry",
                subject=module,
            )
            continue
        seen.add(module)

        module_dir = descriptor.path.parent / module
        if not module_dir.is_dir():
            result.error(
                MISSING_MODULE_DIR,
                f"Module directory does not exist: {module}",
                "Create the module directory or remove the module reference",
                subject=module,
            )
            continue

        module_pom = module_pom_path(descriptor, module)
        if not module_pom.is_file():
            result.error(
                MISSING_MODULE_POM,
                f"Module '{module}' does not contain a pom.xml",
                "Add pom.xml to the module or remove the module reference",
                subject=module,
            )
            continue
        paths.append(module_pom)

    graph.module_paths[key] = paths
    result.info(MODULE_SUMMARY, f"Multi-module project with {len(modules)} modules")


def _check_parent(graph: ProjectGraph, descriptor: ProjectDescriptor) -> None:
    key = _key(descriptor.path)
    result = graph._findings_of(key)
    parent = descriptor.parent
    if parent is None:
        return

    for field, label in (("group_id", "groupId"), ("artifact_id", "artifactId"), ("version", "version")):
        if not getattr(parent.gav, field):
            result.error(
                PARENT_COORDINATES,
                f"Parent {label} is missing",
                f"Add <{label}> to the <parent> section",
                subject=label,
            )

    rel = parent.relative_path
    if rel:
        if not expected_parent_path(descriptor).exists():
            result.warning(
                PARENT_RELATIVE_PATH,
                f"Parent POM not found at relative path: {rel}",
                "Verify the relativePath or remove it to use repository resolution",
            )
    elif rel is None and expected_parent_path(descriptor).is_file():
        result.info(
            PARENT_DEFAULT_PATH,
            "Using default parent relative path ../pom.xml",
            "Consider explicitly setting <relativePath>../pom.xml</relativePath>",
        )

    if descriptor.gav.group_id is None and parent.gav.group_id:
        result.info(INHERITED_GROUP_ID, f"GroupId inherited from parent: {parent.gav.group_id}")
    if descriptor.gav.version is None and parent.gav.version:
        result.info(INHERITED_VERSION, f"Version inherited from parent: {parent.gav.version}")

    own, inherited = descriptor.gav.version, parent.gav.version
    if own and inherited and own != inherited and not has_placeholder(own):
        result.warning(
            PARENT_VERSION_MISMATCH,
            f"Module version ({own}) differs from parent version ({inherited})",
            "Consider aligning versions or using ${project.parent.version}",
        )


def _check_back_references(graph: ProjectGraph) -> None:
    for child_key, parent_key in graph._parents.items():
        parent = graph.descriptors[parent_key]
        listed = {_key(module_pom_path(parent, m)) for m in parent.modules}
        if parent.modules and child_key not in listed:
            graph._findings_of(child_key).warning(
                PARENT_NOT_AGGREGATOR,
                f"Parent POM {parent.path} does not list this project as a module",
                "Add the module to the parent's <modules> section or point <relativePath> at the aggregator",
            )


def _check_cycles(graph: ProjectGraph) -> None:
    parent_edges = nx.DiGraph([(parent, child) for child, parent in graph._parents.items()])
    for cycle in nx.simple_cycles(parent_edges):
        members = " -> ".join(str(graph.descriptors[k].path) for k in cycle)
        logger.warning("Parent cycle detected: %s", members)
        for key in cycle:
            graph._findings_of(key).error(
                PARENT_CYCLE,
                f"Parent references form a cycle: {members}",
                "Break the cycle by fixing the <parent> section of one of these POMs",
            )
            # Drop the link so inheritance lookups stay finite.
            graph._parents.pop(key, None)


def build_project_graph(descriptors: Iterable[ProjectDescriptor]) -> ProjectGraph:
    """Link the given descriptors by parent and module references.

    Module and parent checks run against the filesystem, so a single POM can be
    checked on its own. Parent POMs found on disk outside the set are loaded
    for GAV inheritance; parents that are not available locally are not errors.
    """
    graph = ProjectGraph()
    inputs = list(descriptors)
    for descriptor in inputs:
        graph.add(descriptor)
        graph.inputs.append(_key(descriptor.path))

    for descriptor in inputs:
        key = _key(descriptor.path)
        graph._findings_of(key)
        if descriptor.modules:
            _check_modules(graph, descriptor)
            for module_pom in graph.module_paths[key]:
                module_key = _key(module_pom)
                if module_key in graph.descriptors:
                    graph.graph.add_edge(key, module_key, kind="module")
        if descriptor.parent is not None:
            _check_parent(graph, descriptor)
            parent_key = _load_parent(graph, descriptor)
            if parent_key is not None:
                graph._parents[key] = parent_key
                graph.graph.add_edge(parent_key, key, kind="parent")

    _check_cycles(graph)
    _check_back_references(graph)
    logger.debug(
        "Project graph: %d POMs, %d links", graph.graph.number_of_nodes(), graph.graph.number_of_edges()
    )
    return graph
