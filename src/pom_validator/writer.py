"""Persist remediated descriptors back to pom.xml.

The original document is re-parsed and only the nodes that differ between the
on-disk descriptor and the remediated one are touched, so comments and
formatting elsewhere in the file survive. Entries are matched by their
declaration index within each section.
"""

from __future__ import annotations

import filecmp
import logging
import os
import shutil
import tempfile
from collections.abc import Sequence
from pathlib import Path

from lxml import etree

from pom_validator.exceptions import RemediationError
from pom_validator.models import DependencyEntry, PluginEntry, ProjectDescriptor
from pom_validator.parser import child, children, descriptor_from_tree, parse_document


logger = logging.getLogger(__name__)

BACKUP_SUFFIX = ".backup"

DEPENDENCY_SECTIONS = {
    "dependencies": ("dependencies", "dependency"),
    "dependency_management": ("dependencyManagement", "dependencies", "dependency"),
}
PLUGIN_SECTIONS = {
    "plugins": ("build", "plugins", "plugin"),
    "plugin_management": ("build", "pluginManagement", "plugins", "plugin"),
}

# Where a new top-level element goes: before the first of these that exists.
_GROUP_ID_ANCHORS = ("artifactId", "version", "packaging")
_PROPERTIES_ANCHORS = ("dependencyManagement", "dependencies", "build", "profiles")


def backup_path(path: Path) -> Path:
    return path.with_name(path.name + BACKUP_SUFFIX)


def create_backup(path: Path) -> Path:
    """Copy path to `<name>.backup` and verify the copy is byte-identical."""
    target = backup_path(path)
    try:
        shutil.copyfile(path, target)
    except OSError as exc:
        raise RemediationError(f"Could not create backup {target}: {exc}") from exc
    if not filecmp.cmp(path, target, shallow=False):
        raise RemediationError(f"Backup {target} differs from {path}")
    logger.info("Backup created: %s", target)
    return target


def _leading_ws(el: etree._Element) -> str:
    prev = el.getprevious()
    ws = prev.tail if prev is not None else el.getparent().text
    return ws if ws and not ws.strip() else "\n"


def _new_child(parent: etree._Element, name: str, text: str | None = None) -> etree._Element:
    # SubElement reuses the parent's namespace declarations.
    ns = etree.QName(parent).namespace
    el = etree.SubElement(parent, f"{{{ns}}}{name}" if ns else name)
    el.text = text
    parent.remove(el)
    return el


def _append(parent: etree._Element, el: etree._Element) -> None:
    if len(parent):
        last = parent[-1]
        el.tail = last.tail
        last.tail = _leading_ws(last)
    else:
        ws = _leading_ws(parent) if parent.getparent() is not None else "\n"
        outer = "\n" + ws.rsplit("\n", 1)[-1]
        parent.text = outer + "  "
        el.tail = outer
    parent.append(el)


def _insert(parent: etree._Element, el: etree._Element, anchors: Sequence[str]) -> None:
    for name in anchors:
        ref = child(parent, name)
        if ref is not None:
            el.tail = _leading_ws(ref)
            ref.addprevious(el)
            return
    _append(parent, el)


def _remove(el: etree._Element) -> None:
    parent = el.getparent()
    prev = el.getprevious()
    if prev is not None:
        prev.tail = el.tail
    else:
        parent.text = el.tail
    parent.remove(el)


def _set_child_text(node: etree._Element, name: str, value: str | None) -> None:
    existing = child(node, name)
    if value is None:
        if existing is not None:
            _remove(existing)
        return
    if existing is None:
        _append(node, _new_child(node, name, value))
    else:
        existing.text = value


def _sync_group_id(root: etree._Element, before: ProjectDescriptor, after: ProjectDescriptor) -> bool:
    if before.gav.group_id == after.gav.group_id:
        return False
    node = child(root, "groupId")
    if node is None:
        _insert(root, _new_child(root, "groupId", after.gav.group_id), _GROUP_ID_ANCHORS)
    else:
        node.text = after.gav.group_id
    return True


def _sync_properties(root: etree._Element, before: ProjectDescriptor, after: ProjectDescriptor) -> bool:
    changed = {k: v for k, v in after.properties.items() if before.properties.get(k) != v}
    if not changed:
        return False
    section = child(root, "properties")
    if section is None:
        section = _new_child(root, "properties")
        _insert(root, section, _PROPERTIES_ANCHORS)
    for name, value in changed.items():
        _set_child_text(section, name, value)
    return True


def _sync_entries(
    nodes: list[etree._Element],
    before: Sequence[DependencyEntry | PluginEntry],
    after: Sequence[DependencyEntry | PluginEntry],
) -> bool:
    original = {e.index: e for e in before}
    kept = {e.index: e for e in after}
    for index, entry in kept.items():
        if index not in original or original[index].key() != entry.key():
            raise RemediationError(f"POM changed on disk since it was parsed: {entry.key()}")
    changed = False
    for index, node in enumerate(nodes):
        entry = kept.get(index)
        if entry is None:
            _remove(node)
            changed = True
            continue
        old = original[index]
        if old.gav.version != entry.gav.version:
            _set_child_text(node, "version", entry.gav.version)
            changed = True
        if isinstance(entry, DependencyEntry) and old.scope != entry.scope:
            _set_child_text(node, "scope", entry.scope)
            changed = True
    return changed


def apply_to_tree(tree: etree._ElementTree, before: ProjectDescriptor, after: ProjectDescriptor) -> bool:
    """Edit tree so it reflects `after`; return True if anything changed."""
    root = tree.getroot()
    changed = _sync_group_id(root, before, after)
    changed = _sync_properties(root, before, after) or changed
    for field, path in {**DEPENDENCY_SECTIONS, **PLUGIN_SECTIONS}.items():
        changed = _sync_entries(children(root, *path), getattr(before, field), getattr(after, field)) or changed
    return changed


def write_pom(descriptor: ProjectDescriptor) -> bool:
    """Persist a remediated descriptor to its path.

    The file is replaced as a whole (written to a temporary sibling, then
    renamed over the original). Callers are responsible for the backup.

    Returns:
        True if the file was rewritten, False if there was nothing to change.
    """
    path = descriptor.path
    tree = parse_document(path)
    before = descriptor_from_tree(path, tree)
    if not apply_to_tree(tree, before, descriptor):
        return False

    has_declaration = path.read_bytes().lstrip().startswith(b"<?xml")
    data = etree.tostring(
        tree,
        xml_declaration=has_declaration,
        encoding=tree.docinfo.encoding or "UTF-8",
    )
    if not data.endswith(b"\n"):
        data += b"\n"

    fd, tmp = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "wb") as fh:
            fh.write(data)
        os.replace(tmp, path)
    except OSError as exc:
        Path(tmp).unlink(missing_ok=True)
        raise RemediationError(f"Could not write {path}: {exc}") from exc
    logger.info("Wrote %s", path)
    return True
