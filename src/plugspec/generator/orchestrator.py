"""Emit the file tree of a generated plugin.

:class:`PluginGenerator` walks an enriched
:class:`~plugspec.models.Specification`, plans one :class:`OutputFile` per
generated file, and writes them under ``<workspace_root>/<package_root>``.

Every output file has a :class:`WritePolicy`:

* ``ALWAYS`` -- declarations derived entirely from the spec (action and
  trigger types, connection struct, HTTP handlers, custom types, the
  command entry point, build files). Overwritten on every run so the tree
  always matches the current spec.
* ``ONCE`` -- implementation stubs the developer fills in (action and
  trigger ``Run`` bodies, connection ``Connect`` and cache logic). Written
  only when missing, so re-running the generator never replaces
  hand-written code.

The run stops at the first template or filesystem error. Files written
before the failure stay on disk; nothing is rolled back.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

from plugspec.exceptions import FilesystemError, InvalidUsageError, OutputCollisionError
from plugspec.generator.templates import TemplateRenderer
from plugspec.models import Specification

logger = logging.getLogger(__name__)

SPEC_COPY_NAME = "plugin.spec.yaml"
VENDOR_DIR = "vendor"


class WritePolicy(str, enum.Enum):
    """Whether an output file is rewritten on every run or only created once."""

    ALWAYS = "always"
    ONCE = "once"


@dataclass(frozen=True)
class OutputFile:
    """One file of the generated tree.

    Exactly one of ``template`` and ``content`` is set: templated files are
    rendered against ``context``, the others are written verbatim.
    ``owner`` names the declaration the file comes from, for error messages.
    """

    path: Path
    policy: WritePolicy
    template: Optional[str] = None
    context: dict[str, Any] = field(default_factory=dict, compare=False, repr=False)
    content: Optional[bytes] = field(default=None, repr=False)
    owner: str = field(default="the plugin", compare=False)

    def will_write(self, root: Path) -> bool:
        """Whether emitting this file under *root* would write it."""
        return self.policy is WritePolicy.ALWAYS or not (root / self.path).exists()


@dataclass
class GenerationResult:
    """Outcome of a successful :meth:`PluginGenerator.generate` run."""

    output_root: Path
    written: list[Path] = field(default_factory=list)
    kept: list[Path] = field(default_factory=list)


class PluginGenerator:
    """Render an enriched specification into a plugin source tree.

    Args:
        workspace_root: Directory the package root is resolved against. The
            plugin is generated in ``workspace_root / spec.package_root``.
        renderer: Template renderer to use. Defaults to one loading the
            bundled templates.

    Example::

        generator = PluginGenerator(Path("~/go/src").expanduser())
        result = generator.generate(enriched_spec, raw_bytes)
        print(f"{len(result.written)} files written to {result.output_root}")
    """

    def __init__(
        self,
        workspace_root: Path,
        renderer: Optional[TemplateRenderer] = None,
    ) -> None:
        self.workspace_root = Path(workspace_root)
        self.renderer = renderer or TemplateRenderer()

    def output_root(self, spec: Specification) -> Path:
        """Return the directory the plugin for *spec* is generated in.

        Raises:
            InvalidUsageError: If the spec has no package root.
        """
        package_root = spec.package_root.strip("/")
        if not package_root:
            raise InvalidUsageError("A package root is required to generate a plugin")
        return self.workspace_root / package_root

    def plan(self, spec: Specification, spec_bytes: bytes = b"") -> list[OutputFile]:
        """List every file generated for *spec*, in emission order.

        Raises:
            OutputCollisionError: If two declarations would generate the
                same file, e.g. actions ``post`` and ``post_run``.
        """
        files: list[OutputFile] = []
        files.extend(_handler_files(spec.actions, "actions", "action"))
        files.extend(_connection_files(spec))
        files.extend(_handler_files(spec.triggers, "triggers", "trigger"))
        files.append(
            OutputFile(
                Path("cmd", "main.go"),
                WritePolicy.ALWAYS,
                "cmd/main.go.j2",
                {"spec": spec},
                owner="the command entry point",
            )
        )
        files.append(
            OutputFile(
                Path("server", "http", "server.go"),
                WritePolicy.ALWAYS,
                "server/http/server.go.j2",
                {"spec": spec},
                owner="the HTTP server",
            )
        )
        for name, action in spec.actions.items():
            files.append(
                OutputFile(
                    Path("server", "http", f"{name}.go"),
                    WritePolicy.ALWAYS,
                    "server/http/handler.go.j2",
                    {"handler": action, "spec": spec},
                    owner=f"the HTTP handler of action '{name}'",
                )
            )
        for name, custom_type in spec.custom_types.items():
            files.append(
                OutputFile(
                    Path("types", f"{name}.go"),
                    WritePolicy.ALWAYS,
                    "types/type.go.j2",
                    {"type": custom_type, "spec": spec},
                    owner=f"type '{name}'",
                )
            )
        files.append(OutputFile(Path("Dockerfile"), WritePolicy.ALWAYS, "Dockerfile.j2", {"spec": spec}))
        files.append(OutputFile(Path("Makefile"), WritePolicy.ALWAYS, "Makefile.j2", {"spec": spec}))
        files.append(OutputFile(Path(VENDOR_DIR, ".gitkeep"), WritePolicy.ALWAYS, content=b""))
        files.append(OutputFile(Path(SPEC_COPY_NAME), WritePolicy.ALWAYS, content=spec_bytes))
        _check_collisions(files)
        return files

    def generate(self, spec: Specification, spec_bytes: bytes) -> GenerationResult:
        """Write the plugin tree for an enriched *spec*.

        Args:
            spec: Specification returned by
                :func:`~plugspec.enrichment.postprocess.enrich_spec`.
            spec_bytes: The original spec file content, copied verbatim to
                ``plugin.spec.yaml`` at the root of the tree.

        Returns:
            The output root and the files written or kept.

        Raises:
            InvalidUsageError: If the spec has no package root.
            OutputCollisionError: If two declarations map to the same file.
                Raised before anything is written.
            TemplateError: If a template fails to render.
            FilesystemError: If a directory or file cannot be written.
        """
        root = self.output_root(spec)
        outputs = self.plan(spec, spec_bytes)
        _make_dirs(root)
        result = GenerationResult(output_root=root)
        for output in outputs:
            if self._emit(root, output):
                result.written.append(output.path)
            else:
                result.kept.append(output.path)
        logger.info(
            "Generated %s: %d written, %d kept", root, len(result.written), len(result.kept)
        )
        return result

    def _emit(self, root: Path, output: OutputFile) -> bool:
        """Write one planned file. Returns ``False`` if an existing file was kept."""
        target = root / output.path
        if not output.will_write(root):
            logger.debug("Keeping existing %s", target)
            return False

        if output.template is not None:
            data = self.renderer.render(output.template, output.context, str(target)).encode("utf-8")
        else:
            data = output.content or b""

        _make_dirs(target.parent)
        try:
            target.write_bytes(data)
        except OSError as exc:
            raise FilesystemError(str(target), exc.strerror or str(exc)) from exc
        logger.debug("Wrote %s", target)
        return True


def _handler_files(handlers: dict, directory: str, kind: str) -> list[OutputFile]:
    """Declaration and run stub for each action or trigger."""
    files = []
    for name, handler in handlers.items():
        context = {"handler": handler}
        owner = f"{kind} '{name}'"
        files.append(
            OutputFile(
                Path(directory, f"{name}.go"),
                WritePolicy.ALWAYS,
                f"{directory}/{kind}.go.j2",
                context,
                owner=owner,
            )
        )
        files.append(
            OutputFile(
                Path(directory, f"{name}_run.go"),
                WritePolicy.ONCE,
                f"{directory}/{kind}_run.go.j2",
                context,
                owner=f"the run stub of {owner}",
            )
        )
    return files


def _connection_files(spec: Specification) -> list[OutputFile]:
    context = {"spec": spec}
    return [
        OutputFile(
            Path("connection", "connection.go"),
            WritePolicy.ALWAYS,
            "connection/connection.go.j2",
            context,
            owner="the connection",
        ),
        OutputFile(
            Path("connection", "connect.go"),
            WritePolicy.ONCE,
            "connection/connect.go.j2",
            context,
            owner="the connect stub",
        ),
        OutputFile(
            Path("connection", "cache.go"),
            WritePolicy.ONCE,
            "connection/cache.go.j2",
            context,
            owner="the connection cache stub",
        ),
    ]


def _check_collisions(files: list[OutputFile]) -> None:
    """Raise :class:`OutputCollisionError` if two planned files share a path.

    Paths are compared case-insensitively: the tree may land on a
    case-insensitive filesystem, and Go identifiers derived from names that
    differ only in case collide anyway.
    """
    seen: dict[str, OutputFile] = {}
    for output in files:
        key = output.path.as_posix().lower()
        previous = seen.get(key)
        if previous is not None:
            raise OutputCollisionError(output.path.as_posix(), previous.owner, output.owner)
        seen[key] = output


def _make_dirs(path: Path) -> None:
    """``mkdir -p`` that reports failures as :class:`FilesystemError`."""
    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise FilesystemError(str(path), exc.strerror or str(exc)) from exc
