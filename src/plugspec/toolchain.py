"""Run the Go toolchain over a freshly generated plugin tree.

Two external steps follow generation:

1. **Formatting** -- the formatter (``goimports -w`` by default) is run on
   every ``.go`` file of the tree except vendored dependencies, fixing
   layout and any missing or unused imports.
2. **Vendoring** -- the vendoring tool is run once at the root of the
   tree: ``dep init`` for a new plugin, ``dep ensure`` once a dependency
   manifest exists.

Both commands come from :class:`~plugspec.models.GeneratorConfig`. Any
failure raises :class:`~plugspec.exceptions.ToolchainError`; the generated
tree itself is complete by the time these steps run.
"""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path
from typing import Optional

from plugspec.exceptions import ToolchainError
from plugspec.generator.orchestrator import VENDOR_DIR
from plugspec.models import GeneratorConfig

logger = logging.getLogger(__name__)


class Toolchain:
    """Formatter and vendoring commands for a generated plugin.

    Args:
        config: Commands and timeout to use.
        package_root: Go package root of the plugin, passed to the
            formatter as ``-srcdir`` so local imports resolve to the plugin.
    """

    def __init__(self, config: GeneratorConfig, package_root: str) -> None:
        self.config = config
        self.package_root = package_root

    def run(self, root: Path) -> None:
        """Format every source file under *root*, then vendor dependencies."""
        self.format_sources(root)
        self.vendor(root)

    def source_files(self, root: Path) -> list[Path]:
        """Return the ``.go`` files under *root*, skipping ``vendor/``."""
        return sorted(
            p
            for p in root.rglob("*.go")
            if VENDOR_DIR not in p.relative_to(root).parts
        )

    def format_sources(self, root: Path) -> int:
        """Run the formatter on each source file. Returns the number formatted."""
        files = self.source_files(root)
        for path in files:
            self._run([*self.config.formatter, "-srcdir", self.package_root, str(path)])
        return len(files)

    def vendor(self, root: Path) -> None:
        """Initialise or update the vendored dependencies of the plugin."""
        if any((root / name).exists() for name in self.config.vendor_manifests):
            command = self.config.vendor_update
        else:
            command = self.config.vendor_init
        self._run(list(command), cwd=root)

    def _run(self, command: list[str], cwd: Optional[Path] = None) -> None:
        logger.info("Running %s", " ".join(command))
        try:
            result = subprocess.run(
                command,
                cwd=cwd,
                capture_output=True,
                text=True,
                timeout=self.config.toolchain_timeout,
            )
        except FileNotFoundError as exc:
            raise ToolchainError(command, f"{command[0]} not found on PATH") from exc
        except subprocess.TimeoutExpired as exc:
            raise ToolchainError(
                command, f"timed out after {self.config.toolchain_timeout}s"
            ) from exc
        except OSError as exc:
            raise ToolchainError(command, str(exc)) from exc

        if result.returncode != 0:
            raise ToolchainError(command, (result.stdout or "") + (result.stderr or ""))
