"""Warn when the consuming JS project lacks packages generated code imports."""

from __future__ import annotations

import json
import logging
from pathlib import Path

from .config import GeneratorConfig

logger = logging.getLogger(__name__)

_DEPENDENCY_SECTIONS = ("dependencies", "devDependencies", "peerDependencies")


def _declared_packages(project_dir: Path) -> set[str] | None:
    package_json = project_dir / "package.json"
    if not package_json.is_file():
        return None
    try:
        data = json.loads(package_json.read_text(encoding="utf-8"))
    except json.JSONDecodeError:
        logger.warning("Could not parse %s, skipping dependency check", package_json)
        return None

    packages: set[str] = set()
    for section in _DEPENDENCY_SECTIONS:
        entries = data.get(section)
        if isinstance(entries, dict):
            packages.update(entries)
    return packages


def missing_peer_dependencies(config: GeneratorConfig, project_dir: str | Path | None = None) -> list[str]:
    """Packages the generated code needs that package.json does not declare.

    Empty when there is no package.json to check against.
    """
    declared = _declared_packages(Path(project_dir) if project_dir else Path.cwd())
    if declared is None:
        return []

    required: list[str] = []
    if config.hooks.generate_hooks:
        required.append("react")
        if not config.hooks.use_fetch:
            required.append("axios")
    if config.axios_config.generate_axios_config and "axios" not in required:
        required.append("axios")
    return [name for name in required if name not in declared]


def check_peer_dependencies(config: GeneratorConfig, project_dir: str | Path | None = None) -> list[str]:
    missing = missing_peer_dependencies(config, project_dir)
    for name in missing:
        logger.warning("%s is not installed. Generated code that imports it will not work.", name)
    if missing:
        logger.warning("Install with: npm install %s", " ".join(missing))
    return missing
