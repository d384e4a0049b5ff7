"""Derive the base package for generated modules from sources already in the project."""
import logging
import os
import re
from typing import Optional, Sequence, Tuple

from .errors import PathResolutionError

logger = logging.getLogger(__name__)

PACKAGE_PATTERN = re.compile(r"^\s*package\s+([^\s;]+)", re.MULTILINE)

# Searched in order; the first file with a package declaration wins.
DEFAULT_SOURCE_ROOTS = (
    "src/main/kotlin",
    "src/main/java",
    "app/src/main/kotlin",
    "app/src/main/java",
    "src/commonMain/kotlin",
    "composeApp/src/commonMain/kotlin",
    "shared/src/commonMain/kotlin",
)
DEFAULT_EXTENSIONS = (".kt", ".java")


def read_package_declaration(path: str) -> Optional[str]:
    with open(path, "r", encoding="utf-8", errors="ignore") as f:
        text = f.read()
    m = PACKAGE_PATTERN.search(text)
    return m.group(1) if m else None


def find_package_declaration(
    source_dir: str, extensions: Sequence[str] = DEFAULT_EXTENSIONS
) -> Optional[Tuple[str, str]]:
    """Return (file, package) for the first declaring source file under source_dir.

    Walks top-down with directories and files in sorted order so repeated scans of the
    same tree always pick the same file.
    """
    for root, dirs, files in os.walk(source_dir):
        dirs.sort()
        for name in sorted(files):
            if not name.endswith(tuple(extensions)):
                continue
            path = os.path.join(root, name)
            try:
                package = read_package_declaration(path)
            except OSError as e:
                logger.debug("Skipping unreadable source file %s: %s", path, e)
                continue
            if package:
                return path, package
    return None


def fallback_package(project_name: str) -> str:
    """com.<project-name>, reduced to characters valid in a package segment."""
    segment = re.sub(r"[^a-z0-9_]", "", project_name.lower())
    if not segment:
        return "com.example"
    if segment[0].isdigit():
        segment = "_" + segment
    return f"com.{segment}"


def resolve_base_package(
    project_root: str,
    project_name: Optional[str] = None,
    source_roots: Sequence[str] = DEFAULT_SOURCE_ROOTS,
    extensions: Sequence[str] = DEFAULT_EXTENSIONS,
) -> str:
    """
    Find the shared namespace of the project's existing sources.

    The package of the first declaring file is taken and its last segment (the file's own
    leaf package) dropped, so "com.acme.app" gives "com.acme". A single-segment declaration
    would leave nothing behind; that case, like a project without any declaring sources,
    falls back to com.<project-name>. project_name defaults to the root directory's name.
    """
    if not project_root or not os.path.isdir(project_root):
        raise PathResolutionError(f"Project root does not exist or is not a directory: {project_root}")

    if project_name is None:
        project_name = os.path.basename(os.path.normpath(os.path.abspath(project_root)))

    for rel in source_roots:
        source_dir = os.path.join(project_root, rel)
        if not os.path.isdir(source_dir):
            continue
        found = find_package_declaration(source_dir, extensions)
        if found is None:
            continue
        path, package = found
        base = package.rsplit(".", 1)[0] if "." in package else ""
        if not base:
            logger.warning(
                "Package %r in %s has a single segment; using the project name instead", package, path
            )
            break
        logger.info("Base package %s derived from %s", base, path)
        return base

    base = fallback_package(project_name)
    logger.info("No usable package declaration found; falling back to %s", base)
    return base
