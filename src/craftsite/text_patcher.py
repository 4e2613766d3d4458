"""Literal text edits on generated project files."""

from typing import Mapping

from craftsite.errors import FileOperationError


def patch_file(path: str, replacements: Mapping[str, str]) -> None:
    """Replace the first occurrence of each literal pattern in *path*.

    Replacements are applied in iteration order, each to the output of the
    previous one. A pattern that does not occur is ignored. Line endings are
    left as they are.

    Raises:
        FileOperationError: If the file cannot be read, decoded or written.
    """
    try:
        with open(path, encoding="utf-8", newline="") as f:
            content = f.read()
        for pattern, replacement in replacements.items():
            content = content.replace(pattern, replacement, 1)
        with open(path, "w", encoding="utf-8", newline="") as f:
            f.write(content)
    except (OSError, UnicodeDecodeError) as exc:
        raise FileOperationError(f"Could not patch {path}: {exc}", path=path) from exc


def append_to_file(path: str, text: str) -> None:
    """Append *text* to *path*, creating the file if needed.

    Existing content is kept verbatim; a newline separates it from *text*
    when it does not already end with one.
    """
    try:
        with open(path, "a+", encoding="utf-8", newline="") as f:
            f.seek(0)
            existing = f.read()
            if existing and not existing.endswith("\n"):
                f.write("\n")
            f.write(text)
    except (OSError, UnicodeDecodeError) as exc:
        raise FileOperationError(f"Could not append to {path}: {exc}", path=path) from exc
