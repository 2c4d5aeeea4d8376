"""Plugin spec parser -- read a spec file and build the raw model.

This sub-package is the first stage of the plugspec pipeline: turning a
YAML plugin spec into a :class:`~plugspec.models.Specification` that the
post-processing pass can enrich.

Typical usage::

    from plugspec.parser import load_spec

    spec, raw = load_spec("plugin.spec.yaml", "github.com/acme/plugins/slack")
"""

from plugspec.parser.loader import load_spec, parse_spec, read_spec_bytes

__all__ = ["load_spec", "parse_spec", "read_spec_bytes"]
