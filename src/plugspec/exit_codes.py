"""Numeric process exit codes following `clig.dev <https://clig.dev/>`_ conventions.

Each constant maps to a specific error category and is referenced by the
corresponding :class:`~plugspec.exceptions.PlugspecError` subclass.
Build scripts can inspect the exit code to tell a broken spec from a
broken toolchain without parsing stderr.

Example::

    $ plugspec generate --spec plugin.spec.yaml --package github.com/acme/plugins/slack
    $ echo $?
    8   # EXIT_RESOLUTION_ERROR -- a type token could not be resolved
"""

EXIT_SUCCESS = 0
"""The command completed successfully."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred."""

EXIT_INVALID_USAGE = 2
"""The command was invoked with invalid arguments or missing required parameters."""

EXIT_SPEC_PARSE_ERROR = 7
"""The plugin specification could not be read or parsed."""

EXIT_RESOLUTION_ERROR = 8
"""A type token or enum value in the specification could not be resolved."""

EXIT_TEMPLATE_ERROR = 9
"""A generator template failed to load, parse, or render."""

EXIT_FILESYSTEM_ERROR = 10
"""A generated file or directory could not be written."""

EXIT_TOOLCHAIN_ERROR = 11
"""An external formatting or vendoring step failed after generation."""

EXIT_OUTPUT_COLLISION = 12
"""Two declarations in the specification would generate the same file."""
