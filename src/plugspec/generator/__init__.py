"""Plugin tree generator -- render an enriched spec into Go source files.

This sub-package is the last stage of the plugspec pipeline. Given a
:class:`~plugspec.models.Specification` enriched by
:func:`~plugspec.enrichment.enrich_spec`, it renders the bundled Jinja2
templates and writes the plugin tree, preserving developer-owned stub
files across runs.

Sub-modules:

* :mod:`~plugspec.generator.templates` -- Jinja2 environment and the
  :class:`TemplateRenderer`.
* :mod:`~plugspec.generator.orchestrator` -- Output planning, write
  policies, and :class:`PluginGenerator`.
"""

from plugspec.generator.orchestrator import (
    GenerationResult,
    OutputFile,
    PluginGenerator,
    WritePolicy,
)
from plugspec.generator.templates import TemplateRenderer

__all__ = [
    "GenerationResult",
    "OutputFile",
    "PluginGenerator",
    "TemplateRenderer",
    "WritePolicy",
]
