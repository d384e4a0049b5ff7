"""
kmpscaffold_lib: scaffold Kotlin Multiplatform feature modules (an -api and an -impl leaf)
into an existing Gradle project and register them in settings.gradle.kts.

Public API:
- resolve_base_package(project_root, project_name=None, ...) -> str
- ModuleRequest.create(module_name, base_package) -> ModuleRequest
- plan_module(request, project_root, layout="kmp", with_impl=None, ...) -> ModulePlan
- write_plan(plan, dry_run=False) -> ScaffoldResult
- update_settings(project_root, include_lines, settings_file="settings.gradle.kts", ...) -> list[str]
- scaffold(module_name, project_root, config=None, base_package=None, dry_run=False) -> ScaffoldResult
- load_config(project_root, path=None) -> ScaffoldConfig

Layouts are YAML trees shipped under layouts/ (kmp, kmp-feature, flat). Blocks have a type
(file|directory), a name with ${...} placeholders, optional content, and optional cond
expressions such as "${with_impl} == 'true'". File blocks name a skeleton from templates.yaml.
"""
from .config import ScaffoldConfig, load_config
from .errors import (
    AlreadyExistsError,
    InvalidInputError,
    PathResolutionError,
    ScaffoldError,
    SettingsUpdateError,
    WriteFailureError,
)
from .planner import ModulePlan, ModuleRequest, PlannedFile, plan_module
from .resolver import resolve_base_package
from .scaffold import scaffold
from .settings import include_lines_for, update_settings
from .template import list_layouts, load_layout
from .writer import ScaffoldResult, rollback, write_plan

__all__ = [
    "AlreadyExistsError",
    "InvalidInputError",
    "ModulePlan",
    "ModuleRequest",
    "PathResolutionError",
    "PlannedFile",
    "ScaffoldConfig",
    "ScaffoldError",
    "ScaffoldResult",
    "SettingsUpdateError",
    "WriteFailureError",
    "include_lines_for",
    "list_layouts",
    "load_config",
    "load_layout",
    "plan_module",
    "resolve_base_package",
    "rollback",
    "scaffold",
    "update_settings",
    "write_plan",
]
