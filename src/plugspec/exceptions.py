"""Exception hierarchy for plugspec.

All exceptions inherit from :class:`PlugspecError`, which carries an
``exit_code`` attribute mapped to a constant from :mod:`plugspec.exit_codes`.
The top-level error handler in :func:`plugspec.app.main` catches
``PlugspecError`` and exits with the appropriate code, while unexpected
exceptions produce a crash log and exit with :data:`EXIT_GENERIC_FAILURE`.

Subclass hierarchy::

    PlugspecError (exit 1)
    +-- InvalidUsageError       (exit 2)
    +-- ConfigError             (exit 1)
    +-- SpecParseError          (exit 7)
    +-- UnresolvedTypeError     (exit 8)
    +-- EnumSerializationError  (exit 8)
    +-- TemplateError           (exit 9)
    +-- FilesystemError         (exit 10)
    +-- ToolchainError          (exit 11)
    +-- OutputCollisionError    (exit 12)
"""

from __future__ import annotations

from typing import Any, Optional

from plugspec.exit_codes import (
    EXIT_FILESYSTEM_ERROR,
    EXIT_GENERIC_FAILURE,
    EXIT_INVALID_USAGE,
    EXIT_OUTPUT_COLLISION,
    EXIT_RESOLUTION_ERROR,
    EXIT_SPEC_PARSE_ERROR,
    EXIT_TEMPLATE_ERROR,
    EXIT_TOOLCHAIN_ERROR,
)


class PlugspecError(Exception):
    """Base exception for all plugspec errors.

    Every subclass sets a class-level ``exit_code`` corresponding to one of
    the constants in :mod:`plugspec.exit_codes`. The entry point catches
    this exception type and calls ``sys.exit(exc.exit_code)``.

    Args:
        message: Human-readable error description printed to stderr.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class InvalidUsageError(PlugspecError):
    """Raised for invalid CLI arguments or missing required parameters."""

    exit_code = EXIT_INVALID_USAGE


class ConfigError(PlugspecError):
    """Raised for configuration problems (invalid JSON, bad values, unusable workspace)."""

    exit_code = EXIT_GENERIC_FAILURE


class SpecParseError(PlugspecError):
    """Raised when the plugin spec is missing, unreadable, or structurally malformed."""

    exit_code = EXIT_SPEC_PARSE_ERROR


class UnresolvedTypeError(PlugspecError):
    """Raised when a type token names neither a primitive nor a declared custom type.

    Args:
        token: The offending type token as written in the spec.
        entity: Human-readable name of the declaring entity, e.g.
            ``"action post_message input.channel"``.
    """

    exit_code = EXIT_RESOLUTION_ERROR

    def __init__(self, token: str, entity: str):
        self.token = token
        self.entity = entity
        super().__init__(f"Unknown type '{token}' declared by {entity}")


class EnumSerializationError(PlugspecError):
    """Raised when an enum value cannot be expressed as a literal.

    Args:
        parameter: Name of the parameter declaring the enum.
        value: The value that failed to serialise.
        reason: The underlying serialiser message.
    """

    exit_code = EXIT_RESOLUTION_ERROR

    def __init__(self, parameter: str, value: Any, reason: str = ""):
        self.parameter = parameter
        self.value = value
        message = f"Cannot serialise enum value {value!r} of parameter '{parameter}'"
        if reason:
            message += f": {reason}"
        super().__init__(message)


class TemplateError(PlugspecError):
    """Raised when a generator template fails to load, parse, or render.

    Args:
        template: Logical template name (e.g. ``"actions/action.go.j2"``).
        reason: The template engine's error message.
        path: The output file being rendered, when known.
    """

    exit_code = EXIT_TEMPLATE_ERROR

    def __init__(self, template: str, reason: str, path: Optional[str] = None):
        self.template = template
        self.path = path
        message = f"Template '{template}' failed"
        if path:
            message += f" while rendering {path}"
        super().__init__(f"{message}: {reason}")


class FilesystemError(PlugspecError):
    """Raised when a generated directory or file cannot be created or written."""

    exit_code = EXIT_FILESYSTEM_ERROR

    def __init__(self, path: str, reason: str):
        self.path = path
        super().__init__(f"Cannot write {path}: {reason}")


class ToolchainError(PlugspecError):
    """Raised when an external formatter or vendoring command fails.

    The generated tree is complete when this is raised; only the
    post-processing of it failed.

    Args:
        command: The command line that failed.
        output: Combined stdout/stderr of the failed process, if any.
    """

    exit_code = EXIT_TOOLCHAIN_ERROR

    def __init__(self, command: list[str], output: str = ""):
        self.command = command
        self.output = output
        message = f"Command failed: {' '.join(command)}"
        if output.strip():
            message += f"\n{output.strip()}"
        super().__init__(message)


class OutputCollisionError(PlugspecError):
    """Raised when two declarations map to the same generated file.

    Names like ``post`` and ``post_run`` both claim ``actions/post_run.go``;
    generating anyway would let one overwrite the other, possibly replacing
    a hand-written stub.

    Args:
        path: The generated path both declarations claim.
        first: Description of the declaration planned first.
        second: Description of the declaration that collides with it.
    """

    exit_code = EXIT_OUTPUT_COLLISION

    def __init__(self, path: str, first: str, second: str):
        self.path = path
        self.first = first
        self.second = second
        super().__init__(f"{first} and {second} would both generate {path}")
