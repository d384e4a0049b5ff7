"""Append module include lines to the project's Gradle settings file."""
import logging
import os
from typing import List, Sequence

from .errors import SettingsUpdateError
from .planner import DEFAULT_LAYOUT, ModuleRequest, plan_module

logger = logging.getLogger(__name__)

DEFAULT_SETTINGS_FILE = "settings.gradle.kts"


def include_lines_for(module_name: str, layout: str = DEFAULT_LAYOUT, project_root: str = ".") -> List[str]:
    """Include lines for module_name under a layout, without touching the filesystem."""
    plan = plan_module(ModuleRequest.create(module_name, "com.example"), project_root, layout=layout)
    return plan.include_lines


def update_settings(
    project_root: str,
    include_lines: Sequence[str],
    settings_file: str = DEFAULT_SETTINGS_FILE,
    dedupe: bool = True,
    dry_run: bool = False,
) -> List[str]:
    """
    Append include_lines to the settings file and return the lines actually appended.

    The file is read whole and rewritten whole; concurrent edits between the two are lost.
    With dedupe, lines already present verbatim are skipped.
    """
    path = os.path.join(project_root, settings_file)
    try:
        with open(path, "r", encoding="utf-8") as f:
            original = f.read()
    except OSError as e:
        raise SettingsUpdateError(f"Could not read settings file {path}: {e}") from e

    existing = {line.strip() for line in original.splitlines()}
    to_add: List[str] = []
    for line in include_lines:
        if dedupe and (line in existing or line in to_add):
            logger.info("Settings already include %s", line)
            continue
        to_add.append(line)

    if not to_add or dry_run:
        return to_add

    prefix = original if (not original or original.endswith("\n")) else original + "\n"
    updated = prefix + "\n".join(to_add) + "\n"
    try:
        with open(path, "w", encoding="utf-8") as f:
            f.write(updated)
    except OSError as e:
        _restore(path, original)
        raise SettingsUpdateError(f"Could not write settings file {path}: {e}") from e

    logger.info("Appended %d include line(s) to %s", len(to_add), path)
    return to_add


def _restore(path: str, text: str) -> None:
    try:
        with open(path, "w", encoding="utf-8") as f:
            f.write(text)
    except OSError as e:
        logger.warning("Could not restore %s: %s", path, e)
