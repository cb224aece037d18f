"""Byte-faithful text file helpers (UTF-8, no newline translation)"""

from pathlib import Path

from mdsite.core.errors import TemplateResourceError


def read_source(path: Path) -> str:
    """Read a whole UTF-8 file, keeping \\r\\n line endings intact."""
    try:
        return Path(path).read_bytes().decode("utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise TemplateResourceError(path, e) from e


def write_output(path: Path, text: str) -> None:
    """Write text as UTF-8 bytes, creating parent directories as needed."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(text.encode("utf-8"))
