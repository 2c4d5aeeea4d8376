"""Plan command -- preview the files a generate run would produce.

Implements ``plugspec plan``: the spec is loaded and enriched exactly as
``generate`` would, then every planned output is listed with its write
policy and whether it would be written. Nothing is rendered or written.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer

from plugspec.exceptions import PlugspecError
from plugspec.output import error, get_output


def plan_command(
    spec: Path = typer.Option(..., "--spec", "-s", help="Path to the plugin spec (YAML)."),
    package: str = typer.Option(
        ..., "--package", "-p", help="Go package root of the plugin."
    ),
    workspace: Optional[str] = typer.Option(
        None, "--workspace", "-w", help="Directory the package root is resolved against."
    ),
) -> None:
    """List every file ``generate`` would emit.

    Example::

        plugspec plan --spec plugin.spec.yaml --package github.com/acme/plugins/slack
    """
    from plugspec.config import resolve_config, resolve_workspace_root
    from plugspec.enrichment import enrich_spec
    from plugspec.generator import PluginGenerator
    from plugspec.parser import load_spec

    try:
        config = resolve_config(cli_workspace=workspace)
        generator = PluginGenerator(resolve_workspace_root(config))
        raw_spec, content = load_spec(spec, package)
        enriched = enrich_spec(raw_spec)
        root = generator.output_root(enriched)
        outputs = generator.plan(enriched, content)
    except PlugspecError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None

    get_output().print_plan(root, outputs)
