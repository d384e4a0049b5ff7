"""Compute the full set of directories and files for one feature module. No filesystem access."""
import os
import re
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional, Tuple

from .errors import InvalidInputError
from .template import load_layout, load_templates, render_names, render_string, walk_tree

PACKAGE_SEGMENT = r"[A-Za-z_][A-Za-z0-9_]*"
PACKAGE_PATTERN = re.compile(rf"^{PACKAGE_SEGMENT}(\.{PACKAGE_SEGMENT})*$")
SEGMENT_PATTERN = re.compile(rf"^{PACKAGE_SEGMENT}$")

DEFAULT_LAYOUT = "kmp"
DEFAULT_COMPILE_SDK = 34
DEFAULT_MIN_SDK = 24


def capitalize(name: str) -> str:
    return name[:1].upper() + name[1:]


def gradle_coordinate(project_root: str, directory: str) -> str:
    """Gradle project path of a directory, e.g. ':features:payments:payments-api'."""
    rel = os.path.relpath(directory, project_root)
    return ":" + ":".join(rel.replace(os.sep, "/").split("/"))


@dataclass(frozen=True)
class ModuleRequest:
    module_name: str
    base_package: str

    @classmethod
    def create(cls, module_name: Optional[str], base_package: Optional[str]) -> "ModuleRequest":
        name = (module_name or "").strip()
        if not name:
            raise InvalidInputError("Module name cannot be empty.")
        if name in (".", "..") or "/" in name or "\\" in name:
            raise InvalidInputError(f"Module name must not contain path separators: {name!r}")
        if not SEGMENT_PATTERN.match(name):
            # The lowercased name becomes a package segment and a Gradle path element
            raise InvalidInputError(
                f"Module name must be letters, digits and underscores, not starting with a digit: {name!r}"
            )
        package = (base_package or "").strip()
        if not PACKAGE_PATTERN.match(package):
            raise InvalidInputError(f"Base package must be a dotted identifier, got {package!r}")
        return cls(module_name=name, base_package=package)

    @property
    def lower_name(self) -> str:
        return self.module_name.lower()

    @property
    def capitalized_name(self) -> str:
        return capitalize(self.module_name)


@dataclass(frozen=True)
class PlannedFile:
    path: str
    template: str
    substitutions: Mapping[str, str]
    skeleton: str = field(repr=False, default="")

    def render(self) -> str:
        return render_string(self.skeleton, self.substitutions)


@dataclass(frozen=True)
class ModulePlan:
    request: ModuleRequest
    layout: str
    project_root: str
    group_dir: str
    module_dir: str
    directories: Tuple[str, ...]
    files: Tuple[PlannedFile, ...]
    leaf_dirs: Mapping[str, str]
    substitutions: Mapping[str, str]

    @property
    def module_directory_name(self) -> str:
        return os.path.basename(self.module_dir)

    @property
    def api_type(self) -> str:
        return self.substitutions["api_type"]

    @property
    def include_lines(self) -> List[str]:
        return [
            f'include("{gradle_coordinate(self.project_root, self.leaf_dirs[role])}")'
            for role in ("api", "impl")
        ]


def module_context(request: ModuleRequest) -> Dict[str, str]:
    return {
        "name": request.module_name,
        "module": request.lower_name,
        "capitalized": request.capitalized_name,
        "package": request.base_package,
        "package_path": request.base_package.replace(".", "/"),
    }


def plan_module(
    request: ModuleRequest,
    project_root: str,
    layout: str = DEFAULT_LAYOUT,
    with_impl: Optional[bool] = None,
    compile_sdk: int = DEFAULT_COMPILE_SDK,
    min_sdk: int = DEFAULT_MIN_SDK,
) -> ModulePlan:
    """
    Build the ModulePlan for request under project_root using a named layout.

    with_impl=None keeps the layout's own default for writing a default implementation.
    Directories are listed module root first, then in layout order; every path is joined
    onto project_root.
    """
    doc = load_layout(layout)
    skeletons = load_templates()

    context: Dict[str, Any] = module_context(request)
    if with_impl is None:
        with_impl = bool(doc.get("with_impl", True))
    context["with_impl"] = "true" if with_impl else "false"
    context["compile_sdk"] = str(compile_sdk)
    context["min_sdk"] = str(min_sdk)
    context.update(render_names(doc.get("names"), context))

    group_dir = os.path.join(project_root, str(doc.get("group", "features")))
    module_dir = os.path.join(group_dir, request.lower_name)

    entries = walk_tree(doc["root"], context, base=module_dir)
    missing = {"api", "impl"} - set(entries.leaves)
    if missing:
        raise ValueError(f"Layout {layout!r} does not mark leaf directories: {', '.join(sorted(missing))}")
    context["api_coordinate"] = gradle_coordinate(project_root, entries.leaves["api"])
    substitutions = MappingProxyType(dict(context))

    files = []
    for path, template_id in entries.files:
        if template_id not in skeletons:
            raise ValueError(f"Layout {layout!r} references unknown template {template_id!r}")
        files.append(
            PlannedFile(path=path, template=template_id, substitutions=substitutions, skeleton=skeletons[template_id])
        )

    return ModulePlan(
        request=request,
        layout=layout,
        project_root=project_root,
        group_dir=group_dir,
        module_dir=module_dir,
        directories=tuple([module_dir] + entries.directories),
        files=tuple(files),
        leaf_dirs=MappingProxyType(dict(entries.leaves)),
        substitutions=substitutions,
    )
