import os
import re
from typing import Any, Dict, List, Mapping, Optional, Tuple

try:
    import yaml  # type: ignore
except Exception as e:  # pragma: no cover
    raise RuntimeError(
        "PyYAML is required to run kmpscaffold. Please install it: pip install pyyaml"
    ) from e

from .errors import InvalidInputError

PLACEHOLDER_PATTERN = re.compile(r"\$\{([a-zA-Z0-9_\-\.]+)\}")
COND_PATTERN = re.compile(r"^\s*(\$\{[^}]+\})\s*(==|!=)\s*([\'\"])\s*(.*?)\s*\3\s*$")

LAYOUTS_DIR = os.path.join(os.path.dirname(os.path.abspath(__file__)), "layouts")
TEMPLATES_FILE = "templates.yaml"


def load_yaml(path: str) -> Any:
    with open(path, "r", encoding="utf-8") as f:
        return yaml.safe_load(f)


def render_string(template: str, context: Mapping[str, Any]) -> str:
    """
    Substitute ${key} placeholders in template with values from context.

    The case of the placeholder selects the style of the inserted value:
    - ${name}  -> value as-is
    - ${Name}  -> first character uppercased, the rest unchanged
    - ${NAME}  -> value uppercased
    Placeholders with no value in the context are left untouched.
    """
    def classify_key(k: str) -> Tuple[str, str]:
        # Returns (canonical_key, style): style in {"lower", "title", "upper"}
        canonical = k.lower()
        if k.upper() == k and any(ch.isalpha() for ch in k):
            return canonical, "upper"
        first_alpha_idx = next((i for i, ch in enumerate(k) if ch.isalpha()), None)
        if first_alpha_idx is not None:
            first_alpha = k[first_alpha_idx]
            rest = ''.join(ch for ch in k[first_alpha_idx + 1:] if ch.isalpha())
            if first_alpha.isupper() and (not rest or rest.lower() == rest):
                return canonical, "title"
        return canonical, "lower"

    def apply_style(val: str, style: str) -> str:
        if style == "upper":
            return val.upper()
        if style == "title":
            return (val[:1].upper() + val[1:]) if val else val
        return val

    def repl(match: re.Match[str]) -> str:
        raw_key = match.group(1)
        canonical_key, style = classify_key(raw_key)
        val = context.get(raw_key)
        if val is None:
            val = context.get(canonical_key)
        if val is None:
            return match.group(0)
        return apply_style(str(val), style)

    return PLACEHOLDER_PATTERN.sub(repl, template)


def is_condition_met(block: Mapping[str, Any], context: Mapping[str, Any]) -> bool:
    cond = block.get("cond")
    if cond is None:
        return True
    if isinstance(cond, bool):
        return cond
    if not isinstance(cond, str):
        return True
    m = COND_PATTERN.match(cond)
    if not m:
        # Unrecognized expressions never match
        return False
    left_token, op, _, right_literal = m.groups()
    left_value = render_string(left_token, context)
    if op == "==":
        return left_value == right_literal
    return left_value != right_literal


# ---- Layout documents ----

def list_layouts() -> List[str]:
    names = []
    for entry in os.listdir(LAYOUTS_DIR):
        base, ext = os.path.splitext(entry)
        if ext == ".yaml" and entry != TEMPLATES_FILE:
            names.append(base)
    return sorted(names)


def load_layout(name: str) -> Dict[str, Any]:
    """Load a named layout document shipped under layouts/.

    A layout has a 'group' directory name, optional 'names' (derived values rendered
    against the module context), a 'with_impl' default and a 'root' list of blocks
    relative to <group>/<module>.
    """
    if name not in list_layouts():
        raise InvalidInputError(
            f"Unknown layout {name!r}. Available layouts: {', '.join(list_layouts())}"
        )
    doc = load_yaml(os.path.join(LAYOUTS_DIR, f"{name}.yaml"))
    if not isinstance(doc, dict) or not isinstance(doc.get("root"), list):
        raise ValueError(f"Layout {name!r} must contain a top-level 'root' list")
    return doc


def load_templates() -> Dict[str, str]:
    doc = load_yaml(os.path.join(LAYOUTS_DIR, TEMPLATES_FILE))
    if not isinstance(doc, dict):
        raise ValueError(f"{TEMPLATES_FILE} must map template ids to file skeletons")
    return {str(k): str(v) for k, v in doc.items()}


# ---- Walking a layout tree ----

class TreeEntries:
    """Everything a layout tree asks for, in walk order, as paths relative to its base."""

    def __init__(self) -> None:
        self.directories: List[str] = []
        self.files: List[Tuple[str, str]] = []  # (path, template id)
        self.leaves: Dict[str, str] = {}  # leaf role -> directory


def walk_tree(blocks: List[Any], context: Mapping[str, Any], base: str = "") -> TreeEntries:
    entries = TreeEntries()
    _walk_blocks(blocks, context, base, entries)
    return entries


def _walk_blocks(blocks: List[Any], context: Mapping[str, Any], base: str, entries: TreeEntries) -> None:
    for block in blocks:
        if not isinstance(block, dict):
            continue
        if not is_condition_met(block, context):
            continue
        t = block.get("type")
        if t == "directory":
            _walk_directory(block, context, base, entries)
        elif t == "file":
            _walk_file(block, context, base, entries)


def _walk_directory(block: Mapping[str, Any], context: Mapping[str, Any], base: str, entries: TreeEntries) -> None:
    # name may be path-like ("src/commonMain/kotlin/${package_path}")
    name = render_string(str(block.get("name", "")), context)
    dir_path = os.path.join(base, name) if base else name
    entries.directories.append(dir_path)
    leaf = block.get("leaf")
    if leaf:
        entries.leaves[str(leaf)] = dir_path
    content = block.get("content")
    if isinstance(content, list):
        _walk_blocks(content, context, dir_path, entries)


def _walk_file(block: Mapping[str, Any], context: Mapping[str, Any], base: str, entries: TreeEntries) -> None:
    name = render_string(str(block.get("name", "")), context)
    template_id = block.get("template")
    if not template_id:
        raise ValueError(f"File block {name!r} has no 'template'")
    entries.files.append((os.path.join(base, name) if base else name, str(template_id)))


def render_names(names: Optional[Mapping[str, Any]], context: Mapping[str, Any]) -> Dict[str, str]:
    """Render a layout's derived names in declaration order; later names may use earlier ones."""
    ctx: Dict[str, Any] = dict(context)
    rendered: Dict[str, str] = {}
    for key, value in (names or {}).items():
        rendered[key] = render_string(str(value), ctx)
        ctx[key] = rendered[key]
    return rendered
