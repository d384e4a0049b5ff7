import logging
import os
from typing import Optional

from .config import ScaffoldConfig
from .errors import InvalidInputError, PathResolutionError, ScaffoldError
from .planner import ModuleRequest, plan_module
from .resolver import resolve_base_package
from .settings import update_settings
from .writer import ScaffoldResult, rollback, write_plan

logger = logging.getLogger(__name__)


def scaffold(
    module_name: Optional[str],
    project_root: str,
    config: Optional[ScaffoldConfig] = None,
    base_package: Optional[str] = None,
    dry_run: bool = False,
) -> ScaffoldResult:
    """
    Create a feature module and register it in the settings file.

    Steps: validate the name, resolve the base package (unless given explicitly or in
    config), plan, write, append include lines. A settings failure removes what the write
    step created. Failures come back in ScaffoldResult.error; nothing is raised for them.
    """
    config = config or ScaffoldConfig()
    result = ScaffoldResult(dry_run=dry_run)
    try:
        if not (module_name or "").strip():
            raise InvalidInputError("Module name cannot be empty.")
        if not project_root or not os.path.isdir(project_root):
            raise PathResolutionError(f"Project root does not exist or is not a directory: {project_root}")

        if base_package is not None and not base_package.strip():
            raise InvalidInputError("Base package cannot be empty.")
        package = base_package if base_package is not None else config.base_package
        if not package:
            package = resolve_base_package(
                project_root,
                project_name=config.project_name,
                source_roots=config.source_roots,
                extensions=config.source_extensions,
            )
        request = ModuleRequest.create(module_name, package)
        plan = plan_module(
            request,
            project_root,
            layout=config.layout,
            with_impl=config.with_impl,
            compile_sdk=config.compile_sdk,
            min_sdk=config.min_sdk,
        )
    except ScaffoldError as e:
        result.error = e
        return result

    logger.info(
        "Scaffolding %s into %s (layout %s, package %s)",
        request.module_name, plan.module_dir, plan.layout, request.base_package,
    )
    result = write_plan(plan, dry_run=dry_run)
    if not result.ok:
        return result

    try:
        result.include_lines = update_settings(
            project_root,
            plan.include_lines,
            settings_file=config.settings_file,
            dedupe=config.dedupe_includes,
            dry_run=dry_run,
        )
    except ScaffoldError as e:
        result.error = e
        if not dry_run:
            logger.error("%s; rolling back module %s", e, request.module_name)
            rollback(result.created_paths)
            result.rolled_back = True
    return result
