"""Write generated files, merging model files instead of clobbering them.

Model files are written in append mode: declarations whose name already
appears in the file are dropped, type imports the file lacks are added to
its leading import block, and a batch that adds nothing leaves the file
byte-for-byte untouched. Names are compared, bodies are not, so a
declaration whose shape changed under the same name is not updated.
"""

from __future__ import annotations

import enum
import logging
import re
from pathlib import Path

logger = logging.getLogger(__name__)

_DECLARATION_RE = re.compile(r"^export\s+(?:interface|type)\s+([A-Za-z_$][\w$]*)", re.MULTILINE)
_TYPE_IMPORT_RE = re.compile(r"^import\s+type\s*\{([^}]*)\}\s*from\s*'([^']+)';?[ \t]*$", re.MULTILINE)
_BLOCK_SEPARATOR_RE = re.compile(r"\n[ \t]*\n")


class WriteOutcome(enum.Enum):
    CREATED = "created"
    UPDATED = "updated"
    SKIPPED = "skipped"


def declared_names(text: str) -> set[str]:
    """Names of every exported interface / type alias in the text."""
    return set(_DECLARATION_RE.findall(text))


def imported_names(text: str) -> set[str]:
    """Names brought in by `import type { ... }` lines."""
    return {
        name.strip()
        for names, _ in _TYPE_IMPORT_RE.findall(text)
        for name in names.split(",")
        if name.strip()
    }


def _is_import_block(block: str) -> bool:
    lines = [line for line in block.splitlines() if line.strip()]
    return bool(lines) and all(_TYPE_IMPORT_RE.match(line) for line in lines)


def _missing_imports(existing: str, block: str) -> list[str]:
    """Import lines for the names in `block` that `existing` neither imports nor declares."""
    known = imported_names(existing) | declared_names(existing)
    lines: list[str] = []
    for names, source in _TYPE_IMPORT_RE.findall(block):
        missing = [n.strip() for n in names.split(",") if n.strip() and n.strip() not in known]
        if missing:
            lines.append(f"import type {{ {', '.join(missing)} }} from '{source}';")
            known.update(missing)
    return lines


def _add_imports(text: str, lines: list[str]) -> str:
    parts = _BLOCK_SEPARATOR_RE.split(text, maxsplit=1)
    if _is_import_block(parts[0]):
        head = parts[0].rstrip("\n") + "\n" + "\n".join(lines)
        return head + ("\n\n" + parts[1] if len(parts) > 1 else "\n")
    return "\n".join(lines) + "\n\n" + text


def merge_declarations(existing: str, new: str) -> str:
    """Append the blocks of `new` that declare names `existing` lacks.

    Returns `existing` unchanged when nothing new survives.
    """
    known = declared_names(existing)
    survivors: list[str] = []
    imports: list[str] = []
    for block in _BLOCK_SEPARATOR_RE.split(new.strip("\n")):
        if _is_import_block(block):
            imports.extend(_missing_imports(existing, block))
            continue
        names = declared_names(block)
        if names and not names & known:
            survivors.append(block)
            known |= names

    merged = existing
    if survivors:
        merged = merged.rstrip("\n") + "\n\n" + "\n\n".join(survivors) + "\n"
    if imports:
        merged = _add_imports(merged, imports)
    return merged


class FileWriter:
    """Writes files below one base directory."""

    def __init__(self, base_dir: str | Path) -> None:
        self.base_dir = Path(base_dir)

    def write(self, relative_path: str, content: str, append: bool = False) -> WriteOutcome:
        path = self.base_dir / relative_path
        path.parent.mkdir(parents=True, exist_ok=True)

        if not path.exists():
            path.write_text(content, encoding="utf-8")
            logger.info("created %s", path)
            return WriteOutcome.CREATED

        existing = path.read_text(encoding="utf-8")
        merged = merge_declarations(existing, content) if append else content
        if merged == existing:
            logger.info("skipped %s (no changes)", path)
            return WriteOutcome.SKIPPED

        path.write_text(merged, encoding="utf-8")
        logger.info("updated %s", path)
        return WriteOutcome.UPDATED
