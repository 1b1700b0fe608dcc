"""Parse Maven pom.xml files using lxml."""

from __future__ import annotations

import re
from pathlib import Path

from lxml import etree

from pom_validator.exceptions import PomModelError, PomNotFoundError, PomParseError
from pom_validator.models import (
    Coordinate,
    DependencyEntry,
    ParentRef,
    PluginEntry,
    ProjectDescriptor,
)


PLACEHOLDER_RE = re.compile(r"\$\{([^}]+)\}")


def has_placeholder(value: str | None) -> bool:
    """Return True if value contains a `${...}` property reference."""
    return bool(value and PLACEHOLDER_RE.search(value))


def child(node: etree._Element, name: str) -> etree._Element | None:
    """Return the first direct child with the given local name, namespace-agnostic."""
    found = node.xpath(f"./*[local-name()='{name}']")
    return found[0] if found else None


def children(node: etree._Element, *names: str) -> list[etree._Element]:
    """Return elements along a path of local names below node.

    `children(root, "build", "plugins", "plugin")` returns every plugin element.
    """
    expr = "/".join(f"*[local-name()='{n}']" for n in names)
    return [n for n in node.xpath(f"./{expr}") if isinstance(n, etree._Element)]


def _text_first(node: etree._Element, xpath_expr: str) -> str | None:
    """Get text of the first matching element using namespace-agnostic XPath.

    Args:
        node: Root element to query under.
        xpath_expr: XPath expression (should use local-name()).

    Returns:
        Text content if found and non-empty, otherwise None.
    """
    found = node.xpath(xpath_expr)
    if not found:
        return None
    first = found[0]
    if isinstance(first, etree._Element):
        text = (first.text or "").strip()
        return text or None
    if isinstance(first, str):
        text = first.strip()
        return text or None
    return None


def _child_text(node: etree._Element, name: str) -> str | None:
    return _text_first(node, f"./*[local-name()='{name}']")


def parse_document(path: Path) -> etree._ElementTree:
    """Parse an XML file and return the document tree.

    Args:
        path: Path to the pom.xml file.

    Raises:
        PomNotFoundError: If the file does not exist.
        PomParseError: If XML cannot be parsed.

    Returns:
        The parsed XML document.
    """
    if not path.exists():
        raise PomNotFoundError(f"pom.xml not found: {path}")
    if not path.is_file():
        raise PomNotFoundError(f"Path is not a regular file: {path}")
    try:
        parser = etree.XMLParser(resolve_entities=False, no_network=True, recover=False)
        tree = etree.parse(str(path), parser=parser)
    except (OSError, etree.XMLSyntaxError) as exc:
        raise PomParseError(f"Failed to parse pom.xml: {path}") from exc
    root = tree.getroot()
    if etree.QName(root).localname != "project":
        raise PomModelError(f"Root element is not <project>: {path}")
    return tree


def _parse_properties(root: etree._Element) -> dict[str, str]:
    props: dict[str, str] = {}
    for n in children(root, "properties"):
        for prop in n:
            if not isinstance(prop, etree._Element) or not isinstance(prop.tag, str):
                continue
            key = etree.QName(prop).localname
            val = (prop.text or "").strip()
            if key and val:
                props[key] = val
    return props


def _coordinate(node: etree._Element) -> Coordinate:
    return Coordinate(
        group_id=_child_text(node, "groupId"),
        artifact_id=_child_text(node, "artifactId"),
        version=_child_text(node, "version"),
    )


def _parse_dependencies(nodes: list[etree._Element], *, managed: bool) -> list[DependencyEntry]:
    return [
        DependencyEntry(
            gav=_coordinate(dep),
            scope=_child_text(dep, "scope"),
            managed=managed,
            index=i,
        )
        for i, dep in enumerate(nodes)
    ]


def _parse_plugins(nodes: list[etree._Element], *, managed: bool) -> list[PluginEntry]:
    return [PluginEntry(gav=_coordinate(p), managed=managed, index=i) for i, p in enumerate(nodes)]


def _parse_parent(root: etree._Element) -> ParentRef | None:
    parent = child(root, "parent")
    if parent is None:
        return None
    relative = child(parent, "relativePath")
    relative_path = None if relative is None else (relative.text or "").strip()
    return ParentRef(gav=_coordinate(parent), relative_path=relative_path)


def descriptor_from_tree(path: Path, tree: etree._ElementTree) -> ProjectDescriptor:
    """Build a ProjectDescriptor from an already parsed document."""
    root = tree.getroot()
    build = child(root, "build")
    dep_mgmt = child(root, "dependencyManagement")
    plugin_mgmt = child(build, "pluginManagement") if build is not None else None

    return ProjectDescriptor(
        path=path,
        model_version=_child_text(root, "modelVersion"),
        gav=_coordinate(root),
        packaging=_child_text(root, "packaging"),
        parent=_parse_parent(root),
        modules=[(m.text or "").strip() for m in children(root, "modules", "module")],
        dependencies=_parse_dependencies(children(root, "dependencies", "dependency"), managed=False),
        dependency_management=_parse_dependencies(
            children(root, "dependencyManagement", "dependencies", "dependency"), managed=True
        ),
        plugins=_parse_plugins(children(root, "build", "plugins", "plugin"), managed=False),
        plugin_management=_parse_plugins(
            children(root, "build", "pluginManagement", "plugins", "plugin"), managed=True
        ),
        properties=_parse_properties(root),
        has_build=build is not None,
        has_dependency_management=dep_mgmt is not None,
        has_plugin_management=plugin_mgmt is not None,
    )


def parse_pom(path: str | Path) -> ProjectDescriptor:
    """Parse a Maven pom.xml into a ProjectDescriptor.

    Notes:
        - Namespace handling: uses `local-name()` XPath so it works with or without XML namespaces.
        - Values are kept exactly as declared. Property placeholders are not resolved
          and incomplete declarations are kept, since reporting them is the validator's job.

    Args:
        path: Path to a pom.xml.

    Raises:
        PomNotFoundError: If the file does not exist.
        PomParseError: If the XML is malformed.
        PomModelError: If the root element is not <project>.

    Returns:
        A `ProjectDescriptor` for the file.
    """
    pom_path = Path(path)
    return descriptor_from_tree(pom_path, parse_document(pom_path))
