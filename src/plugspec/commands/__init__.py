"""Built-in CLI sub-commands for plugspec.

This package groups the Typer command modules that form the CLI's
top-level command tree:

* :mod:`~plugspec.commands.generate` -- compile a spec into a plugin tree
  and run the Go toolchain over it.
* :mod:`~plugspec.commands.plan` -- list the files a run would write
  without touching the disk.
* :mod:`~plugspec.commands.inspect` -- examine the enriched types,
  actions, triggers, and connection of a spec.

Each module either exports a :class:`typer.Typer` sub-application (for
multi-command groups like ``inspect``) or a plain callback function
registered directly on the root app (for single commands like
``generate``).
"""
