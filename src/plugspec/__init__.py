"""plugspec -- Compile declarative plugin specs into Go plugin source trees.

A plugin spec is a YAML document describing a plugin's connection
parameters, custom types, actions, triggers, and HTTP settings. plugspec
parses it, resolves every declared name and type into Go identifiers and
type expressions, and renders a complete plugin tree from templates.
Files the developer is expected to edit are generated only once, so the
compiler can be re-run whenever the spec changes.

Typical workflow::

    plugspec inspect summary --spec plugin.spec.yaml
    plugspec generate --spec plugin.spec.yaml --package github.com/acme/plugins/slack

Modules:
    app: Typer application and CLI entry point.
    models: Pydantic models for the spec and the generator configuration.
    config: XDG-aware configuration and precedence resolution.
    exceptions: Exception hierarchy with exit-code mapping.
    exit_codes: Numeric exit codes following clig.dev conventions.
    output: stdout/stderr formatting system with Rich support.
"""

__version__ = "0.1.0"
