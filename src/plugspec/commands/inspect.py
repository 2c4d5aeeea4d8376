"""Inspect commands -- examine an enriched plugin spec.

Provides the ``plugspec inspect`` sub-command group with read-only
commands for viewing what the compiler derives from a spec: the Go
identifiers and type expressions of custom types, actions, triggers, and
connection parameters, plus a general summary. Each sub-command loads and
enriches the spec, so resolution errors surface here exactly as they
would during ``generate``.
"""

from __future__ import annotations

from pathlib import Path

import typer

from plugspec.exceptions import PlugspecError
from plugspec.models import Handler, Parameter, Specification
from plugspec.output import error, get_output, info


inspect_app = typer.Typer(no_args_is_help=True)

_SPEC_OPTION = typer.Option(..., "--spec", "-s", help="Path to the plugin spec (YAML).")


def _load_enriched(spec_path: Path) -> Specification:
    """Load and enrich the spec at *spec_path*.

    Raises:
        typer.Exit: With the error's exit code when the spec cannot be
            parsed or resolved.
    """
    from plugspec.enrichment import enrich_spec
    from plugspec.parser import load_spec

    try:
        spec, _ = load_spec(spec_path)
        return enrich_spec(spec)
    except PlugspecError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None


def _parameter_rows(section: str, params: dict[str, Parameter]) -> list[list[str]]:
    return [
        [
            section,
            p.raw_name,
            p.name,
            p.type,
            "yes" if p.required else "",
            ", ".join(lit.literal_value for lit in p.enum_literals),
        ]
        for p in params.values()
    ]


def _handler_table(handlers: dict[str, Handler], kind: str, spec: Specification) -> None:
    if not handlers:
        info(f"No {kind}s defined in this spec.")
        return

    headers = [kind.capitalize(), "Section", "Parameter", "Identifier", "Go type", "Required", "Enum"]
    rows: list[list[str]] = []
    for handler in handlers.values():
        for section, params in (("input", handler.input), ("output", handler.output)):
            for row in _parameter_rows(section, params):
                rows.append([handler.name, *row])
        if not handler.input and not handler.output:
            rows.append([handler.name, "-", "-", "-", "-", "", ""])

    get_output().print_table(
        headers, rows, title=f"{spec.name} -- {kind.capitalize()}s ({len(handlers)})"
    )


@inspect_app.command("summary")
def inspect_summary(spec: Path = _SPEC_OPTION) -> None:
    """Show general plugin information.

    Example::

        plugspec inspect summary --spec plugin.spec.yaml
    """
    enriched = _load_enriched(spec)

    rows = [
        ["Name", enriched.name or "-"],
        ["Title", enriched.title or "-"],
        ["Version", enriched.version or "-"],
        ["Vendor", enriched.vendor or "-"],
        ["Spec version", enriched.plugin_spec_version or "-"],
        ["Tags", ", ".join(enriched.tags) or "-"],
        ["Types", str(len(enriched.custom_types))],
        ["Connection parameters", str(len(enriched.connection))],
        ["Actions", str(len(enriched.actions))],
        ["Triggers", str(len(enriched.triggers))],
        ["HTTP port", str(enriched.http.port)],
        ["HTTP timeouts (read/write)", f"{enriched.http.read_timeout}s / {enriched.http.write_timeout}s"],
    ]
    if enriched.description:
        rows.append(["Description", enriched.description])

    get_output().print_table(["Field", "Value"], rows, title="Plugin Summary")


@inspect_app.command("types")
def inspect_types(spec: Path = _SPEC_OPTION) -> None:
    """List custom types with their fields in emission order.

    Embedded fields are listed first, as they appear in the generated
    struct.

    Example::

        plugspec inspect types --spec plugin.spec.yaml
    """
    enriched = _load_enriched(spec)

    if not enriched.custom_types:
        info("No custom types defined in this spec.")
        return

    headers = ["Type", "Field", "Identifier", "Go type", "Embedded", "Nullable"]
    rows: list[list[str]] = []
    for custom_type in enriched.custom_types.values():
        for field in custom_type.sorted_fields:
            rows.append([
                custom_type.name,
                field.raw_name,
                field.name,
                field.internal_type,
                "yes" if field.embed else "",
                "yes" if field.nullable else "",
            ])
        if not custom_type.sorted_fields:
            rows.append([custom_type.name, "-", "-", "-", "", ""])

    get_output().print_table(
        headers, rows, title=f"{enriched.name} -- Types ({len(enriched.custom_types)})"
    )


@inspect_app.command("actions")
def inspect_actions(spec: Path = _SPEC_OPTION) -> None:
    """List actions with their input and output parameters.

    Example::

        plugspec inspect actions --spec plugin.spec.yaml
    """
    enriched = _load_enriched(spec)
    _handler_table(enriched.actions, "action", enriched)


@inspect_app.command("triggers")
def inspect_triggers(spec: Path = _SPEC_OPTION) -> None:
    """List triggers with their input and output parameters."""
    enriched = _load_enriched(spec)
    _handler_table(enriched.triggers, "trigger", enriched)


@inspect_app.command("connection")
def inspect_connection(spec: Path = _SPEC_OPTION) -> None:
    """List connection parameters and the derived cache key.

    Example::

        plugspec inspect connection --spec plugin.spec.yaml
    """
    enriched = _load_enriched(spec)

    if not enriched.connection:
        info("No connection parameters defined in this spec.")
    else:
        headers = ["Section", "Parameter", "Identifier", "Go type", "Required", "Enum"]
        get_output().print_table(
            headers,
            _parameter_rows("connection", enriched.connection),
            title=f"{enriched.name} -- Connection",
        )
    info(f"Cache key: {enriched.connection_data_key}")
