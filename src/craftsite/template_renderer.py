"""Bundled templates: static files copied into projects and Jinja2 messages."""

from pathlib import Path

import jinja2

from craftsite.errors import FileOperationError

TEMPLATES_DIR = Path(__file__).parent / "templates"


def template_path(template_name: str) -> Path:
    """Return the path of a bundled template.

    Raises:
        FileNotFoundError: If the template file does not exist
    """
    path = TEMPLATES_DIR / template_name
    if not path.is_file():
        raise FileNotFoundError(f"Template not found: {path}")
    return path


def read_template(template_name: str) -> str:
    """Return the text of a bundled template.

    Raises:
        FileOperationError: If the template is missing or unreadable
    """
    try:
        return template_path(template_name).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        path = str(TEMPLATES_DIR / template_name)
        raise FileOperationError(f"Could not read template {path}: {exc}", path=path) from exc


def render_template(template_name: str, **kwargs) -> str:
    """Load a Jinja2 template by name and render it with the given arguments.

    Args:
        template_name: Filename within src/craftsite/templates/
        **kwargs: Template variables.

    Returns:
        The rendered template string.
    """
    source = read_template(template_name)
    return jinja2.Template(source, keep_trailing_newline=True).render(**kwargs)
