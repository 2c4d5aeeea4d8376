"""Canonical Pydantic models shared across all plugspec modules.

This is the single source of truth for data shapes in the project. The
models fall into two groups:

**Configuration models** -- serialised as JSON in the user's config
directory or the project's ``plugspec.json``:
    :class:`GeneratorConfig`.

**Specification models** -- produced by the spec loader and enriched by
the post-processing pass before the generator renders them:
    :class:`EnumLiteral`, :class:`Parameter`, :class:`CustomType`,
    :class:`Handler`, :class:`HTTPSettings`, and :class:`Specification`.

Fields marked *derived* are empty after parsing and filled exactly once by
:func:`~plugspec.enrichment.postprocess.enrich_spec`, which returns a new
:class:`Specification` rather than touching the parsed one.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


# --- Generator Config ---


class GeneratorConfig(BaseModel):
    """Settings that control where and how a plugin tree is generated.

    Loaded by :func:`~plugspec.config.resolve_config` from the global config
    file, the project-local ``plugspec.json``, environment variables, and
    CLI flags (in increasing precedence).
    """

    workspace_root: Optional[Path] = Field(
        default=None,
        description="Directory under which <package_root> is created "
        "(defaults to $GOPATH/src, then the current directory)",
    )
    run_toolchain: bool = Field(
        default=True, description="Run formatter and vendoring after generation"
    )
    formatter: list[str] = Field(
        default_factory=lambda: ["goimports", "-w"],
        description="Formatter command; -srcdir and the file path are appended",
    )
    vendor_init: list[str] = Field(
        default_factory=lambda: ["dep", "init"],
        description="Vendoring command used when no dependency manifest exists",
    )
    vendor_update: list[str] = Field(
        default_factory=lambda: ["dep", "ensure"],
        description="Vendoring command used when a dependency manifest exists",
    )
    vendor_manifests: list[str] = Field(
        default_factory=lambda: ["Gopkg.toml", "manifest.json"],
        description="File names that mark an already-initialised vendor setup",
    )
    toolchain_timeout: int = Field(
        default=300, description="Timeout in seconds for each toolchain command"
    )


# --- Specification Models ---


class EnumLiteral(BaseModel):
    """One enumerated value rendered as a Go constant.

    ``literal_value`` is the compact JSON text of the value and ``name`` the
    constant name, e.g. ``PriorityHigh`` / ``"high"``.
    """

    name: str
    literal_value: str


class Parameter(BaseModel):
    """A single input, output, connection, or custom-type field.

    Raw fields come straight from the spec. ``raw_name``, ``name``,
    ``internal_type`` and ``enum_literals`` are derived; ``type`` holds the
    spec token after parsing and the Go type expression after enrichment.
    """

    model_config = ConfigDict(populate_by_name=True)

    raw_name: str = ""
    name: str = ""
    type: str = ""
    internal_type: str = ""
    title: Optional[str] = None
    required: bool = False
    description: Optional[str] = None
    enum: list[Any] = Field(default_factory=list)
    default: Any = None
    embed: bool = False
    nullable: bool = False
    enum_literals: list[EnumLiteral] = Field(default_factory=list)

    @field_validator("enum", mode="before")
    @classmethod
    def _none_enum_is_empty(cls, value: Any) -> Any:
        return [] if value is None else value

    @field_validator("type", mode="before")
    @classmethod
    def _type_to_text(cls, value: Any) -> Any:
        return "" if value is None else value


class CustomType(BaseModel):
    """A named record built from the spec's ``types`` section.

    ``sorted_fields`` is the emission order: embedded fields first (Go
    requires embedded structs at the top), then the rest, each group in
    declaration order.
    """

    raw_name: str
    name: str
    fields: dict[str, Parameter] = Field(default_factory=dict)
    sorted_fields: list[Parameter] = Field(default_factory=list)


class Handler(BaseModel):
    """An action or trigger declaration.

    Actions and triggers share this shape; they differ only in which
    generated entry points reference them.
    """

    raw_name: str = ""
    name: str = ""
    title: Optional[str] = None
    description: Optional[str] = None
    input: dict[str, Parameter] = Field(default_factory=dict)
    output: dict[str, Parameter] = Field(default_factory=dict)
    package_root: str = ""

    @field_validator("input", "output", mode="before")
    @classmethod
    def _none_section_is_empty(cls, value: Any) -> Any:
        return {} if value is None else value


class HTTPSettings(BaseModel):
    """Settings for the generated plugin's HTTP server.

    Zero means unset; the post-processing pass fills in the defaults.
    """

    port: int = 0
    read_timeout: int = 0
    write_timeout: int = 0


class Specification(BaseModel):
    """Complete representation of a plugin spec.

    Produced by :func:`~plugspec.parser.loader.parse_spec` with only raw
    fields populated, then replaced by the enriched copy returned from
    :func:`~plugspec.enrichment.postprocess.enrich_spec`. Holds every piece
    of information the generator templates need.

    See Also:
        :class:`Parameter`: Individual fields of every section.
        :class:`Handler`: Actions and triggers.
    """

    model_config = ConfigDict(populate_by_name=True)

    plugin_spec_version: Optional[str] = None
    name: str = ""
    title: Optional[str] = None
    description: Optional[str] = None
    version: Optional[str] = None
    vendor: Optional[str] = None
    tags: list[str] = Field(default_factory=list)
    icon: Optional[str] = None
    help: Optional[str] = None

    connection: dict[str, Parameter] = Field(default_factory=dict)
    raw_types: dict[str, dict[str, Parameter]] = Field(
        default_factory=dict, alias="types"
    )
    actions: dict[str, Handler] = Field(default_factory=dict)
    triggers: dict[str, Handler] = Field(default_factory=dict)
    http: HTTPSettings = Field(default_factory=HTTPSettings)

    # Generator-only context, never read from the spec's sections
    package_root: str = ""
    spec_location: str = ""

    # Derived by the post-processing pass
    custom_types: dict[str, CustomType] = Field(default_factory=dict)
    connection_data_key: str = ""

    @field_validator("connection", "raw_types", "actions", "triggers", mode="before")
    @classmethod
    def _none_section_is_empty(cls, value: Any) -> Any:
        return {} if value is None else value

    @field_validator("raw_types", mode="before")
    @classmethod
    def _none_type_body_is_empty(cls, value: Any) -> Any:
        if isinstance(value, dict):
            return {k: ({} if v is None else v) for k, v in value.items()}
        return value

    @field_validator("plugin_spec_version", "name", "title", "version", "vendor", mode="before")
    @classmethod
    def _scalar_to_text(cls, value: Any) -> Any:
        # YAML reads ``version: 1.0`` as a float
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        return value

    @field_validator("tags", mode="before")
    @classmethod
    def _none_tags_is_empty(cls, value: Any) -> Any:
        return [] if value is None else value

    @field_validator("http", mode="before")
    @classmethod
    def _none_http_is_unset(cls, value: Any) -> Any:
        return {} if value is None else value
