import logging
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

if sys.version_info < (3, 11):
    import tomli as tomllib
else:
    import tomllib

from .codec import DEFAULT_ESCAPE, DEFAULT_SEPARATOR, validate_tokens
from .core import EMPTY_MARKER, QualifiedName

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class NameFormat:
    separator: str = DEFAULT_SEPARATOR
    escape: str = DEFAULT_ESCAPE
    empty_marker: str = EMPTY_MARKER

    def __post_init__(self):
        validate_tokens(self.separator, self.escape)

    def join(self, name: QualifiedName) -> str:
        return name.join(self.separator, self.escape)

    def parse(self, text: str) -> QualifiedName:
        return QualifiedName.parse(text, self.separator, self.escape)

    def format(self, name: QualifiedName) -> str:
        return self.empty_marker if name.is_empty else self.join(name)


DEFAULT_FORMAT = NameFormat()


def _find_pyproject_toml(search_path: Path) -> Optional[Path]:
    current_dir = search_path.resolve()
    while True:
        pyproject_path = current_dir / "pyproject.toml"
        if pyproject_path.is_file():
            return pyproject_path
        if current_dir.parent == current_dir:
            return None
        current_dir = current_dir.parent


def load_format_from_path(search_path: Path) -> NameFormat:
    config_path = _find_pyproject_toml(search_path)
    if config_path is None:
        return DEFAULT_FORMAT

    try:
        with open(config_path, "rb") as f:
            data = tomllib.load(f)
    except (tomllib.TOMLDecodeError, OSError) as e:
        log.warning(f"Could not read {config_path}, using default name format: {e}")
        return DEFAULT_FORMAT

    qname_data: Dict[str, Any] = data.get("tool", {}).get("qname", {})
    # Create format with data from file, falling back to defaults.
    return NameFormat(
        separator=qname_data.get("separator", DEFAULT_SEPARATOR),
        escape=qname_data.get("escape", DEFAULT_ESCAPE),
        empty_marker=qname_data.get("empty_marker", EMPTY_MARKER),
    )
