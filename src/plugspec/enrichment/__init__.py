"""Post-processing of parsed plugin specs.

Turns the raw :class:`~plugspec.models.Specification` produced by the
parser into the enriched form the generator renders: Go identifiers, Go
type expressions, enum constants, the connection cache key, and HTTP
defaults.

Exports:
    enrich_spec: Build the enriched specification.
"""

from plugspec.enrichment.postprocess import enrich_spec

__all__ = ["enrich_spec"]
