"""Fill in the derived fields of a parsed specification.

The loader only knows what the spec says. Before the templates can use it,
every declaration needs a Go identifier and a Go type, enums need constant
names, the connection needs a cache key expression, and the HTTP settings
need defaults. :func:`enrich_spec` computes all of that and returns a new
:class:`~plugspec.models.Specification`; the parsed one is left as it was.

Every name-keyed section of the result is rebuilt in sorted key order so
that generated output does not depend on the order of keys in the YAML.
Custom type fields are the exception: they keep declaration order, which
breaks ties when embedded fields are moved to the front.
"""

from __future__ import annotations

import json

from plugspec.exceptions import EnumSerializationError
from plugspec.models import (
    CustomType,
    EnumLiteral,
    Handler,
    HTTPSettings,
    Parameter,
    Specification,
)
from plugspec.naming import enum_constant_suffix, upper_camel_case
from plugspec.typemap import STRING_TYPE, TypeResolver

DEFAULT_HTTP_PORT = 10001
DEFAULT_READ_TIMEOUT = 2
DEFAULT_WRITE_TIMEOUT = 2

CONNECTION_KEY_SEPARATOR = " + "
NULLABLE_KEY_HELPER = "stringValue"
EMPTY_CONNECTION_KEY = '""'


def enrich_spec(spec: Specification) -> Specification:
    """Return an enriched copy of *spec*.

    Args:
        spec: A specification fresh from
            :func:`~plugspec.parser.loader.parse_spec`.

    Returns:
        A new specification with every derived field populated.

    Raises:
        UnresolvedTypeError: If any field's type token cannot be resolved.
        EnumSerializationError: If any enum value has no literal form.
    """
    resolver = TypeResolver(spec.raw_types)

    custom_types: dict[str, CustomType] = {}
    raw_types: dict[str, dict[str, Parameter]] = {}
    for type_name in sorted(spec.raw_types):
        fields = enrich_parameters(spec.raw_types[type_name], resolver, f"type {type_name}")
        raw_types[type_name] = fields
        custom_types[type_name] = CustomType(
            raw_name=type_name,
            name=upper_camel_case(type_name),
            fields=fields,
            sorted_fields=sort_fields(fields),
        )

    connection = {
        name: enrich_parameter(name, spec.connection[name], resolver, "connection")
        for name in sorted(spec.connection)
    }

    actions = {
        name: enrich_handler(name, spec.actions[name], resolver, "action", spec.package_root)
        for name in sorted(spec.actions)
    }
    triggers = {
        name: enrich_handler(name, spec.triggers[name], resolver, "trigger", spec.package_root)
        for name in sorted(spec.triggers)
    }

    return spec.model_copy(
        update={
            "raw_types": raw_types,
            "custom_types": custom_types,
            "connection": connection,
            "connection_data_key": connection_data_key(connection),
            "actions": actions,
            "triggers": triggers,
            "http": apply_http_defaults(spec.http),
        }
    )


def enrich_parameter(
    raw_name: str,
    param: Parameter,
    resolver: TypeResolver,
    owner: str,
) -> Parameter:
    """Return a copy of *param* with its identifier, types, and enum literals.

    ``type`` receives the expression used everywhere in the plugin and
    ``internal_type`` the one used inside the generated ``types`` package.

    Args:
        raw_name: The parameter's key in its section.
        param: The parsed parameter.
        resolver: Type resolver for the current spec.
        owner: Description of the declaring entity for error messages,
            e.g. ``"action post_message input"``.
    """
    entity = f"{owner}.{raw_name}"
    name = upper_camel_case(raw_name)
    return param.model_copy(
        update={
            "raw_name": raw_name,
            "name": name,
            "type": resolver.resolve(param.type, entity),
            "internal_type": resolver.resolve(param.type, entity, internal=True),
            "enum_literals": enum_literals(name, param.enum, entity),
        }
    )


def enrich_parameters(
    params: dict[str, Parameter],
    resolver: TypeResolver,
    owner: str,
) -> dict[str, Parameter]:
    """Enrich every parameter of a section, keeping the section's key order."""
    return {
        raw_name: enrich_parameter(raw_name, param, resolver, owner)
        for raw_name, param in params.items()
    }


def enum_literals(param_name: str, values: list, entity: str) -> list[EnumLiteral]:
    """Express every enum value of a parameter, rejecting clashing constants.

    Distinct values can normalise to the same constant name (``"a b"`` and
    ``"a_b"``, or ``1`` and ``"1"``), which would declare one Go constant
    twice.

    Raises:
        EnumSerializationError: If a value cannot be serialised or its
            constant name is already taken by an earlier value.
    """
    literals: list[EnumLiteral] = []
    taken: dict[str, EnumLiteral] = {}
    for value in values:
        literal = enum_literal(param_name, value, entity)
        previous = taken.get(literal.name)
        if previous is not None:
            raise EnumSerializationError(
                entity,
                value,
                f"constant {literal.name} is already used by {previous.literal_value}",
            )
        taken[literal.name] = literal
        literals.append(literal)
    return literals


def enum_literal(param_name: str, value: object, entity: str) -> EnumLiteral:
    """Express one enum value as a Go constant.

    The literal is the value's compact JSON text (``"high"``, ``3``,
    ``["a","b"]``); the constant name joins the parameter identifier with
    a normalised form of that text (``PriorityHigh``).

    Raises:
        EnumSerializationError: If the value has no JSON form (dates,
            NaN, arbitrary objects).
    """
    try:
        literal = json.dumps(
            value, separators=(",", ":"), allow_nan=False, ensure_ascii=False
        )
    except (TypeError, ValueError) as exc:
        raise EnumSerializationError(entity, value, str(exc)) from exc
    return EnumLiteral(
        name=param_name + enum_constant_suffix(literal),
        literal_value=literal,
    )


def enrich_handler(
    raw_name: str,
    handler: Handler,
    resolver: TypeResolver,
    kind: str,
    package_root: str,
) -> Handler:
    """Return a copy of an action or trigger with every derived field set."""
    owner = f"{kind} {raw_name}"
    return handler.model_copy(
        update={
            "raw_name": raw_name,
            "name": upper_camel_case(raw_name),
            "package_root": package_root,
            "input": _sorted_section(handler.input, resolver, f"{owner} input"),
            "output": _sorted_section(handler.output, resolver, f"{owner} output"),
        }
    )


def _sorted_section(
    params: dict[str, Parameter], resolver: TypeResolver, owner: str
) -> dict[str, Parameter]:
    return {
        name: enrich_parameter(name, params[name], resolver, owner)
        for name in sorted(params)
    }


def sort_fields(fields: dict[str, Parameter]) -> list[Parameter]:
    """Order custom type fields for emission: embedded first, stable otherwise."""
    # sorted() is stable, so declaration order survives inside each group
    return sorted(fields.values(), key=lambda p: not p.embed)


def connection_data_key(connection: dict[str, Parameter]) -> str:
    """Build the Go expression that keys cached connections.

    Every string-typed connection parameter contributes ``c.<Name>``, in
    section order, joined with ``" + "``. A nullable one is a ``*string``
    field and contributes ``stringValue(c.<Name>)`` instead, a helper the
    connection template defines that maps nil to ``""``. A connection
    without string parameters (or without parameters at all) is keyed by
    ``""``.
    """
    parts = [
        f"{NULLABLE_KEY_HELPER}(c.{p.name})" if p.nullable else f"c.{p.name}"
        for p in connection.values()
        if p.type == STRING_TYPE
    ]
    if not parts:
        return EMPTY_CONNECTION_KEY
    return CONNECTION_KEY_SEPARATOR.join(parts)


def apply_http_defaults(http: HTTPSettings) -> HTTPSettings:
    """Return *http* with zero-valued settings replaced by their defaults."""
    return HTTPSettings(
        port=http.port or DEFAULT_HTTP_PORT,
        read_timeout=http.read_timeout or DEFAULT_READ_TIMEOUT,
        write_timeout=http.write_timeout or DEFAULT_WRITE_TIMEOUT,
    )
