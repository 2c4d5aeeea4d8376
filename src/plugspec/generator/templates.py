"""Render the Jinja2 templates that make up a generated plugin.

The templates live in ``generator/templates/`` next to this module, one per
kind of output file, laid out like the tree they produce
(``actions/action.go.j2`` renders ``actions/<name>.go``).

Templates are rendered with :class:`~jinja2.StrictUndefined`: a template
that refers to a missing attribute fails with a :class:`TemplateError`
instead of quietly emitting broken Go.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Iterable, Optional

from jinja2 import Environment, FileSystemLoader, StrictUndefined
from jinja2 import TemplateError as JinjaTemplateError

from plugspec.exceptions import TemplateError
from plugspec.models import Parameter
from plugspec.typemap import TYPES_PACKAGE


TEMPLATE_DIR = Path(__file__).parent / "templates"
"""Path to the bundled Jinja2 template directory (``generator/templates/``)."""


def go_quote(value: Any) -> str:
    """Quote *value* as a Go interpreted string literal.

    Non-ASCII text is written as is: Go source is UTF-8, and Go rejects the
    surrogate-pair escapes JSON uses for characters outside the BMP.
    """
    return json.dumps("" if value is None else str(value), ensure_ascii=False)


def go_literal(literal: str) -> str:
    """Turn an enum's JSON text into something Go accepts as a constant.

    Strings, numbers, and booleans are already valid Go; lists, objects,
    and ``null`` are kept as raw strings, or quoted when they contain a
    backtick.
    """
    if literal == "null" or literal.startswith(("[", "{")):
        if "`" in literal:
            return go_quote(literal)
        return "`" + literal + "`"
    return literal


def comment(value: Optional[str]) -> str:
    """Flatten a free-text description onto a single Go comment line."""
    return " ".join((value or "").split())


def type_imports(
    params: Iterable[Parameter], package_root: str, internal: bool = False
) -> list[str]:
    """Return the import paths the types of *params* need.

    Args:
        params: Parameters whose Go types will be referenced.
        package_root: Go package root of the plugin.
        internal: Use the types as seen from inside the ``types`` package.
    """
    imports: set[str] = set()
    for param in params:
        expression = param.internal_type if internal else param.type
        if "time.Time" in expression:
            imports.add("time")
        if not internal and f"{TYPES_PACKAGE}." in expression:
            imports.add(f"{package_root}/{TYPES_PACKAGE}")
    return sorted(imports)


class TemplateRenderer:
    """Render named templates against a data object.

    Args:
        template_dir: Directory to load templates from. Defaults to the
            templates bundled with plugspec.
    """

    def __init__(self, template_dir: Optional[Path] = None) -> None:
        self.template_dir = Path(template_dir or TEMPLATE_DIR)
        self._env = _create_jinja_env(self.template_dir)

    def render(self, name: str, context: dict[str, Any], path: Optional[str] = None) -> str:
        """Render template *name* with *context*.

        Args:
            name: Logical template path relative to the template directory.
            context: Template variables.
            path: Output path being produced, for error messages.

        Raises:
            TemplateError: If the template is missing, has a syntax error,
                or fails while rendering.
        """
        try:
            template = self._env.get_template(name)
            return template.render(**context)
        except JinjaTemplateError as exc:
            raise TemplateError(name, str(exc) or type(exc).__name__, path) from exc


def _create_jinja_env(template_dir: Path) -> Environment:
    """Create the Jinja2 environment used for Go source templates.

    Autoescaping is off since nothing rendered here is HTML. Block trimming
    and lstrip are enabled so control tags do not leave blank lines in the
    generated code.
    """
    env = Environment(
        loader=FileSystemLoader(str(template_dir)),
        autoescape=False,
        undefined=StrictUndefined,
        trim_blocks=True,
        lstrip_blocks=True,
        keep_trailing_newline=True,
    )
    env.filters["go_quote"] = go_quote
    env.filters["go_literal"] = go_literal
    env.filters["comment"] = comment
    env.globals["type_imports"] = type_imports
    return env
