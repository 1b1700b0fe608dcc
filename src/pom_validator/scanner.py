from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path

from pom_validator.exceptions import PomNotFoundError


POM_FILE_NAME = "pom.xml"
SKIPPED_DIRS = frozenset({"target", "node_modules"})


def _skipped(path: Path, root: Path) -> bool:
    for part in path.relative_to(root).parts[:-1]:
        if part.startswith(".") or part in SKIPPED_DIRS:
            return True
    return False


def _matches(path: Path, exclude: Sequence[str], include: Sequence[str]) -> bool:
    text = path.as_posix()
    if any(pattern in text for pattern in exclude):
        return False
    if include and not any(pattern in text for pattern in include):
        return False
    return True


def find_pom_files(
    root: Path,
    *,
    recursive: bool = True,
    exclude: Sequence[str] = (),
    include: Sequence[str] = (),
) -> list[Path]:
    """Find Maven POM files under root.

    Hidden directories, `target` and `node_modules` are skipped. Include and
    exclude patterns are plain substrings matched against the POSIX path
    relative to root.

    Args:
        root: A directory to scan, or a single pom file.
        recursive: Scan subdirectories; otherwise only `root/pom.xml`.
        exclude: Drop POMs whose path contains any of these.
        include: Keep only POMs whose path contains one of these.

    Raises:
        PomNotFoundError: If root does not exist or holds no POM.

    Returns:
        Sorted unique list of POM files.
    """
    if root.is_file():
        return [root]
    if not root.is_dir():
        raise PomNotFoundError(f"Path does not exist: {root}")

    if not recursive:
        direct = root / POM_FILE_NAME
        if not direct.is_file():
            raise PomNotFoundError(f"No pom.xml found in directory: {root}")
        return [direct]

    poms: list[Path] = []
    for p in root.rglob(POM_FILE_NAME):
        if not p.is_file() or _skipped(p, root):
            continue
        if _matches(p.relative_to(root), exclude, include):
            poms.append(p)
    if not poms:
        raise PomNotFoundError(f"No pom.xml files found in: {root}")
    return sorted(set(poms))


def sort_parent_first(poms: Sequence[Path]) -> list[Path]:
    """Order POMs by directory depth so parents are usually listed before modules.

    This is a heuristic: irregular layouts (a parent living beside its
    children) can come out in the wrong order. `ProjectGraph.parent_first_order`
    gives the graph-based ordering.
    """
    return sorted(poms, key=lambda p: (len(p.parts), str(p)))


def resolve_pom_path(target: Path) -> Path:
    """Map a directory to its pom.xml; files are returned unchanged."""
    if target.is_dir():
        target = target / POM_FILE_NAME
    if not target.is_file():
        raise PomNotFoundError(f"POM file not found: {target}")
    return target
