"""Apply a ModulePlan to the filesystem, all-or-nothing by best-effort cleanup."""
import logging
import os
from dataclasses import dataclass, field
from typing import List, Optional, Set

from .errors import AlreadyExistsError, ScaffoldError, WriteFailureError
from .planner import ModulePlan

logger = logging.getLogger(__name__)


@dataclass
class ScaffoldResult:
    plan: Optional[ModulePlan] = None
    created_paths: List[str] = field(default_factory=list)
    include_lines: List[str] = field(default_factory=list)
    error: Optional[ScaffoldError] = None
    rolled_back: bool = False
    dry_run: bool = False

    @property
    def ok(self) -> bool:
        return self.error is None

    def raise_for_error(self) -> None:
        if self.error is not None:
            raise self.error


def _missing_ancestors(path: str, known: Set[str]) -> List[str]:
    """path and its ancestors that are neither directories on disk nor in known, outermost first."""
    missing: List[str] = []
    p = path
    while p not in known and not os.path.isdir(p):
        missing.append(p)
        parent = os.path.dirname(p)
        if parent == p:
            break
        p = parent
    return list(reversed(missing))


def _ensure_dir(path: str, created: List[str]) -> None:
    # Create missing ancestors one at a time so each can be undone
    for d in _missing_ancestors(path, set()):
        os.mkdir(d)
        created.append(d)


def _write_file(path: str, data: str, created: List[str]) -> None:
    # "x" refuses to replace anything already on disk
    with open(path, "x", encoding="utf-8") as f:
        created.append(path)
        f.write(data)


def rollback(created_paths: List[str]) -> List[str]:
    """Remove created_paths in reverse creation order. Returns the paths left behind."""
    leftovers = []
    for path in reversed(created_paths):
        try:
            if os.path.isdir(path) and not os.path.islink(path):
                os.rmdir(path)
            elif os.path.lexists(path):
                os.remove(path)
        except OSError as e:
            logger.warning("Rollback could not remove %s: %s", path, e)
            leftovers.append(path)
    return leftovers


def _planned_paths(plan: ModulePlan) -> List[str]:
    """Paths a real run would create, in creation order, given the current filesystem."""
    seen: Set[str] = set()
    would_create: List[str] = []
    for d in [plan.group_dir] + list(plan.directories) + [os.path.dirname(f.path) for f in plan.files]:
        for m in _missing_ancestors(d, seen):
            seen.add(m)
            would_create.append(m)
    would_create.extend(f.path for f in plan.files)
    return would_create


def write_plan(plan: ModulePlan, dry_run: bool = False) -> ScaffoldResult:
    """
    Create every directory and file of plan.

    Fails with AlreadyExists, touching nothing, when the module directory is present.
    Any later OSError removes what this call created and fails with WriteFailure carrying
    the original error as __cause__. With dry_run the existence check still runs and the
    result lists the paths that would be created.
    """
    result = ScaffoldResult(plan=plan, dry_run=dry_run)

    if os.path.lexists(plan.module_dir):
        result.error = AlreadyExistsError(
            f"Module directory '{plan.module_directory_name}' already exists: {plan.module_dir}"
        )
        return result

    if dry_run:
        result.created_paths = _planned_paths(plan)
        return result

    created = result.created_paths
    try:
        if not os.path.isdir(plan.group_dir):
            logger.info("Creating %s", plan.group_dir)
        _ensure_dir(plan.group_dir, created)
        for d in plan.directories:
            _ensure_dir(d, created)
        for f in plan.files:
            _ensure_dir(os.path.dirname(f.path), created)
            _write_file(f.path, f.render(), created)
            logger.debug("Wrote %s from template %s", f.path, f.template)
    except OSError as e:
        error = WriteFailureError(f"Error creating module '{plan.request.module_name}': {e}")
        error.__cause__ = e
        result.error = error
        logger.error("%s; rolling back %d created path(s)", error, len(created))
        rollback(created)
        result.rolled_back = True
        return result

    logger.info("Created %d path(s) for module %s", len(created), plan.request.module_name)
    return result
