"""Map spec type tokens to Go type expressions.

The spec declares every field with a type token:

* a primitive (``string``, ``int``, ``date`` ...) looked up in a static table,
* an array ``[]<inner>`` of any other token,
* the name of a custom type declared in the spec's ``types`` section.

Custom types are generated into the plugin's ``types`` package, so outside
that package they are referenced as ``types.<Name>``. Inside it the
qualifier must be dropped, which callers request with ``internal=True``.

The resolver only needs to know which custom type names exist. It is built
from a frozen snapshot of those names rather than from the specification
itself, so the specification can be enriched with the resolver's help
without the two referring to each other.
"""

from __future__ import annotations

from typing import Iterable, Optional

from plugspec.exceptions import UnresolvedTypeError
from plugspec.naming import upper_camel_case

ARRAY_PREFIX = "[]"
TYPES_PACKAGE = "types"
STRING_TYPE = "string"

# ---------------------------------------------------------------------------
# Static primitive table
# ---------------------------------------------------------------------------

PRIMITIVE_TYPES: dict[str, str] = {
    "string": "string",
    "boolean": "bool",
    "bool": "bool",
    "integer": "int",
    "int": "int",
    "float": "float64",
    "number": "float64",
    "date": "time.Time",
    "bytes": "[]byte",
    "object": "map[string]interface{}",
    "password": "string",
    "file": "[]byte",
}

# Canonical spec token for each Go primitive. Aliases in PRIMITIVE_TYPES
# resolve to the same Go type but only this token is given back.
_CANONICAL_TOKENS: dict[str, str] = {
    "string": "string",
    "bool": "boolean",
    "int": "integer",
    "float64": "float",
    "time.Time": "date",
    "[]byte": "bytes",
    "map[string]interface{}": "object",
}


class TypeResolver:
    """Resolve spec type tokens against a fixed set of custom type names.

    Args:
        known_types: Names of the custom types declared in the spec, exactly
            as written in its ``types`` section.

    Example::

        resolver = TypeResolver(["thing", "ctx_channel"])
        resolver.resolve("[]thing", "type ctx_channel.things_n_such")
        # '[]types.Thing'
        resolver.resolve("[]thing", "type ctx_channel.things_n_such", internal=True)
        # '[]Thing'
    """

    def __init__(self, known_types: Iterable[str]) -> None:
        self._known = frozenset(known_types)
        self._by_identifier = {upper_camel_case(n): n for n in self._known}

    @property
    def known_types(self) -> frozenset[str]:
        """The custom type names this resolver accepts."""
        return self._known

    def resolve(self, token: str, entity: str, internal: bool = False) -> str:
        """Return the Go type expression for *token*.

        Args:
            token: The type token from the spec (``"[]thing"``, ``"date"``).
            entity: Name of the declaring entity, used in error messages.
            internal: Resolve as seen from inside the generated ``types``
                package, without the ``types.`` qualifier on custom types.

        Raises:
            UnresolvedTypeError: If *token* is empty, or names neither a
                primitive nor a declared custom type.
        """
        token = token.strip()
        if token.startswith(ARRAY_PREFIX):
            inner = token[len(ARRAY_PREFIX):]
            if not inner:
                raise UnresolvedTypeError(token, entity)
            return ARRAY_PREFIX + self.resolve(inner, entity, internal)

        primitive = PRIMITIVE_TYPES.get(token)
        if primitive is not None:
            return primitive

        if token in self._known:
            identifier = upper_camel_case(token)
            if internal:
                return identifier
            return f"{TYPES_PACKAGE}.{identifier}"

        raise UnresolvedTypeError(token, entity)

    def to_spec_token(self, expression: str) -> Optional[str]:
        """Map a Go type expression back to a spec token.

        Primitives map to their canonical token (``int`` gives
        ``integer``). Qualified or unqualified custom type identifiers map
        to the declared type name.

        Returns:
            The spec token, or ``None`` if *expression* was not produced by
            this resolver.
        """
        canonical = _CANONICAL_TOKENS.get(expression)
        if canonical is not None:
            return canonical

        if expression.startswith(ARRAY_PREFIX):
            inner = self.to_spec_token(expression[len(ARRAY_PREFIX):])
            return None if inner is None else ARRAY_PREFIX + inner

        identifier = expression
        qualifier = f"{TYPES_PACKAGE}."
        if identifier.startswith(qualifier):
            identifier = identifier[len(qualifier):]
        return self._by_identifier.get(identifier)
