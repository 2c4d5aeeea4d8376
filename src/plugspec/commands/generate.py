"""Generate command -- compile a plugin spec into a Go plugin tree.

Implements the ``plugspec generate`` top-level command, the main entry
point of the compiler: it resolves the effective configuration, loads and
enriches the spec, writes the plugin tree under
``<workspace>/<package>``, and finally runs the Go formatter and
vendoring tool over the result.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer

from plugspec.exceptions import PlugspecError, ToolchainError
from plugspec.output import debug, error, get_output, info, success, suggest


def generate_command(
    spec: Path = typer.Option(
        ...,
        "--spec",
        "-s",
        help="Path to the plugin spec (YAML).",
    ),
    package: str = typer.Option(
        ...,
        "--package",
        "-p",
        help="Go package root of the plugin, e.g. github.com/acme/plugins/slack.",
    ),
    workspace: Optional[str] = typer.Option(
        None,
        "--workspace",
        "-w",
        help="Directory the package root is resolved against (default: $GOPATH/src).",
    ),
    skip_toolchain: bool = typer.Option(
        False,
        "--skip-toolchain",
        help="Do not run goimports and dep after generating.",
    ),
) -> None:
    """Generate a plugin from a spec.

    Regenerates every declaration file from the spec and creates the
    implementation stubs (``*_run.go``, ``connection/connect.go``,
    ``connection/cache.go``) only when they do not exist yet, so hand-written
    code survives re-runs.

    Raises:
        typer.Exit: With the failing error's exit code. A toolchain failure
            still leaves a complete generated tree behind.

    Example::

        plugspec generate --spec plugin.spec.yaml --package github.com/acme/plugins/slack
        plugspec generate -s plugin.spec.yaml -p github.com/acme/plugins/slack --skip-toolchain
    """
    from plugspec.config import resolve_config, resolve_workspace_root
    from plugspec.enrichment import enrich_spec
    from plugspec.generator import PluginGenerator
    from plugspec.parser import load_spec
    from plugspec.toolchain import Toolchain

    try:
        config = resolve_config(cli_workspace=workspace, cli_skip_toolchain=skip_toolchain)
        workspace_root = resolve_workspace_root(config)
        debug(f"Workspace root: {workspace_root}")

        info(f"Loading spec from: {spec}")
        raw_spec, content = load_spec(spec, package)
        enriched = enrich_spec(raw_spec)

        result = PluginGenerator(workspace_root).generate(enriched, content)
    except PlugspecError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None

    get_output().report_generation(result, enriched.name)

    if not config.run_toolchain:
        info("Skipping goimports and dep.")
        suggest(f"Format and vendor later: cd {result.output_root} && dep ensure")
        return

    try:
        Toolchain(config, enriched.package_root).run(result.output_root)
    except ToolchainError as exc:
        error(str(exc))
        info(f"The plugin tree was generated in {result.output_root}; only the toolchain step failed.")
        suggest("Re-run with --skip-toolchain to generate without goimports and dep.")
        raise typer.Exit(code=exc.exit_code) from None

    success("Formatted sources and vendored dependencies.")
