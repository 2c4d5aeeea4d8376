"""Load plugin specifications from a local file.

This module handles all I/O for reading a raw plugin spec and turning it
into a :class:`~plugspec.models.Specification` with only its raw fields
populated. Specs are YAML documents (JSON, being valid YAML, also works).

The public functions are:

* :func:`read_spec_bytes` -- Read the raw bytes of a spec file.
* :func:`parse_spec` -- Parse spec bytes into a :class:`Specification`.
* :func:`load_spec` -- Both of the above in one call.

Duplicate keys anywhere in the document are rejected: every name-keyed
section of a spec must have unique names, and a plain YAML load would
silently keep only the last duplicate.

After loading, the specification should be passed to
:func:`~plugspec.enrichment.postprocess.enrich_spec`.
"""

from __future__ import annotations

from collections.abc import Hashable
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from plugspec.exceptions import SpecParseError
from plugspec.models import Specification


class _UniqueKeyLoader(yaml.SafeLoader):
    """Safe YAML loader that fails on duplicate mapping keys."""

    def construct_mapping(self, node: yaml.MappingNode, deep: bool = False) -> dict:
        seen: set[Any] = set()
        for key_node, _ in node.value:
            key = self.construct_object(key_node, deep=deep)
            if not isinstance(key, Hashable):
                # the base constructor reports unhashable keys itself
                continue
            if key in seen:
                raise yaml.constructor.ConstructorError(
                    "while constructing a mapping",
                    node.start_mark,
                    f"found duplicate key {key!r}",
                    key_node.start_mark,
                )
            seen.add(key)
        return super().construct_mapping(node, deep=deep)


def read_spec_bytes(path: str | Path) -> bytes:
    """Read a spec file from disk.

    Raises:
        SpecParseError: If the file does not exist or cannot be read.
    """
    file_path = Path(path)
    if not file_path.is_file():
        raise SpecParseError(f"Spec file not found: {path}")
    try:
        return file_path.read_bytes()
    except OSError as exc:
        raise SpecParseError(f"Failed to read spec file {path}: {exc}") from exc


def parse_spec(
    content: bytes | str,
    package_root: str = "",
    spec_location: str = "",
) -> Specification:
    """Parse spec content into a raw :class:`Specification`.

    Args:
        content: The raw YAML (or JSON) document.
        package_root: Go package root of the generated plugin, e.g.
            ``github.com/acme/plugins/slack``. A trailing ``/`` is stripped.
            Takes precedence over a ``package_root`` key in the document.
        spec_location: Where *content* was read from, kept for reference.

    Returns:
        The parsed specification, not yet enriched.

    Raises:
        SpecParseError: If the content is empty, is not valid YAML, has
            duplicate keys, or does not match the spec's structure.
    """
    if isinstance(content, bytes):
        try:
            content = content.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise SpecParseError(f"Spec is not valid UTF-8: {exc}") from exc

    if not content.strip():
        raise SpecParseError("Spec is empty")

    try:
        data = yaml.load(content, Loader=_UniqueKeyLoader)
    except yaml.YAMLError as exc:
        raise SpecParseError(f"Invalid YAML: {exc}") from exc

    if not isinstance(data, dict):
        raise SpecParseError(
            "Spec must be a YAML mapping (got "
            f"{type(data).__name__ if data is not None else 'empty document'})"
        )

    root = package_root.rstrip("/") if package_root else str(data.get("package_root") or "")
    data["package_root"] = root
    data["spec_location"] = spec_location

    try:
        return Specification.model_validate(data)
    except ValidationError as exc:
        raise SpecParseError(f"Malformed spec: {exc}") from exc


def load_spec(path: str | Path, package_root: str = "") -> tuple[Specification, bytes]:
    """Read and parse the spec at *path*.

    Returns:
        A ``(specification, raw_bytes)`` tuple. The raw bytes are copied
        verbatim into the generated tree.

    Raises:
        SpecParseError: If the file cannot be read or parsed.
    """
    content = read_spec_bytes(path)
    return parse_spec(content, package_root, str(path)), content
