"""Tests for plugspec.generator.orchestrator -- planning and emitting the tree."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import patch

import pytest

from plugspec.enrichment import enrich_spec
from plugspec.exceptions import (
    FilesystemError,
    InvalidUsageError,
    OutputCollisionError,
    TemplateError,
)
from plugspec.generator import PluginGenerator, TemplateRenderer, WritePolicy
from plugspec.generator.orchestrator import OutputFile
from plugspec.models import Specification
from plugspec.parser import parse_spec


PACKAGE_DIR = Path("github.com", "acme", "plugins", "slack")

ONCE_FILES = {
    Path("actions", "post_message_run.go"),
    Path("actions", "list_channels_run.go"),
    Path("triggers", "new_message_run.go"),
    Path("connection", "connect.go"),
    Path("connection", "cache.go"),
}


@pytest.fixture
def generator(tmp_path: Path) -> PluginGenerator:
    return PluginGenerator(tmp_path / "workspace")


class TestPlan:
    """PluginGenerator.plan() output set and ordering."""

    def test_paths_in_order(self, generator: PluginGenerator, enriched_slack: Specification) -> None:
        paths = [str(o.path.as_posix()) for o in generator.plan(enriched_slack)]
        assert paths == [
            "actions/list_channels.go",
            "actions/list_channels_run.go",
            "actions/post_message.go",
            "actions/post_message_run.go",
            "connection/connection.go",
            "connection/connect.go",
            "connection/cache.go",
            "triggers/new_message.go",
            "triggers/new_message_run.go",
            "cmd/main.go",
            "server/http/server.go",
            "server/http/list_channels.go",
            "server/http/post_message.go",
            "types/audit_info.go",
            "types/ctx_channel.go",
            "types/message.go",
            "Dockerfile",
            "Makefile",
            "vendor/.gitkeep",
            "plugin.spec.yaml",
        ]

    def test_policies(self, generator: PluginGenerator, enriched_slack: Specification) -> None:
        once = {o.path for o in generator.plan(enriched_slack) if o.policy is WritePolicy.ONCE}
        assert once == ONCE_FILES

    def test_spec_copy_content(self, generator: PluginGenerator, enriched_slack: Specification) -> None:
        outputs = generator.plan(enriched_slack, b"name: slack\n")
        assert outputs[-1].content == b"name: slack\n"
        assert outputs[-1].template is None

    def test_minimal_spec(self, generator: PluginGenerator) -> None:
        spec = Specification(name="bare", package_root="example.com/bare")
        paths = {o.path.as_posix() for o in generator.plan(spec)}
        assert "cmd/main.go" in paths
        assert "connection/connection.go" in paths
        assert not any(p.startswith(("actions/", "triggers/", "types/")) for p in paths)


class TestOutputRoot:
    """Where the plugin tree is placed."""

    def test_joined_to_workspace(self, tmp_path: Path, enriched_slack: Specification) -> None:
        generator = PluginGenerator(tmp_path)
        assert generator.output_root(enriched_slack) == tmp_path / PACKAGE_DIR

    def test_missing_package_root(self, generator: PluginGenerator) -> None:
        with pytest.raises(InvalidUsageError):
            generator.output_root(Specification(name="x"))


class TestGenerate:
    """PluginGenerator.generate() writes and idempotence."""

    def test_writes_every_file(
        self,
        generator: PluginGenerator,
        enriched_slack: Specification,
        slack_spec_bytes: bytes,
    ) -> None:
        result = generator.generate(enriched_slack, slack_spec_bytes)
        root = generator.workspace_root / PACKAGE_DIR
        assert result.output_root == root
        assert result.kept == []
        assert len(result.written) == 20
        for path in result.written:
            assert (root / path).is_file(), path
        assert (root / "plugin.spec.yaml").read_bytes() == slack_spec_bytes
        assert (root / "vendor" / ".gitkeep").read_bytes() == b""

    def test_second_run_keeps_once_files(
        self,
        generator: PluginGenerator,
        enriched_slack: Specification,
        slack_spec_bytes: bytes,
    ) -> None:
        generator.generate(enriched_slack, slack_spec_bytes)
        root = generator.workspace_root / PACKAGE_DIR
        stub = root / "actions" / "post_message_run.go"
        stub.write_text("package actions\n\n// hand written\n")

        result = generator.generate(enriched_slack, slack_spec_bytes)

        assert set(result.kept) == ONCE_FILES
        assert stub.read_text() == "package actions\n\n// hand written\n"

    def test_always_files_are_regenerated(
        self,
        generator: PluginGenerator,
        enriched_slack: Specification,
        slack_spec_bytes: bytes,
    ) -> None:
        generator.generate(enriched_slack, slack_spec_bytes)
        root = generator.workspace_root / PACKAGE_DIR
        decl = root / "actions" / "post_message.go"
        original = decl.read_text()
        decl.write_text("// edited\n")

        generator.generate(enriched_slack, slack_spec_bytes)

        assert decl.read_text() == original

    def test_output_independent_of_previous_runs(
        self,
        tmp_path: Path,
        enriched_slack: Specification,
        slack_spec_bytes: bytes,
    ) -> None:
        first = PluginGenerator(tmp_path / "a")
        second = PluginGenerator(tmp_path / "b")
        first.generate(enriched_slack, slack_spec_bytes)
        first.generate(enriched_slack, slack_spec_bytes)
        second.generate(enriched_slack, slack_spec_bytes)
        for path in ["cmd/main.go", "types/message.go", "connection/connection.go"]:
            assert (tmp_path / "a" / PACKAGE_DIR / path).read_bytes() == (
                tmp_path / "b" / PACKAGE_DIR / path
            ).read_bytes()

    def test_template_error_aborts(
        self,
        tmp_path: Path,
        enriched_slack: Specification,
    ) -> None:
        template_dir = tmp_path / "templates"
        (template_dir / "actions").mkdir(parents=True)
        (template_dir / "actions" / "action.go.j2").write_text("{{ handler.nope }}")
        generator = PluginGenerator(tmp_path / "ws", TemplateRenderer(template_dir))

        with pytest.raises(TemplateError) as exc_info:
            generator.generate(enriched_slack, b"")

        assert exc_info.value.template == "actions/action.go.j2"
        root = tmp_path / "ws" / PACKAGE_DIR
        assert root.is_dir()
        assert not (root / "actions").exists()

    def test_filesystem_error(
        self,
        generator: PluginGenerator,
        enriched_slack: Specification,
    ) -> None:
        with patch.object(Path, "write_bytes", side_effect=PermissionError(13, "Permission denied")):
            with pytest.raises(FilesystemError) as exc_info:
                generator.generate(enriched_slack, b"")
        assert "Permission denied" in str(exc_info.value)
        assert exc_info.value.path.endswith("list_channels.go")

    def test_output_root_is_a_file(
        self,
        tmp_path: Path,
        enriched_slack: Specification,
    ) -> None:
        (tmp_path / "github.com").write_text("not a directory")
        with pytest.raises(FilesystemError):
            PluginGenerator(tmp_path).generate(enriched_slack, b"")


class TestOutputFile:
    """OutputFile.will_write() policy checks."""

    def test_always(self, tmp_path: Path) -> None:
        (tmp_path / "x.go").write_text("")
        assert OutputFile(Path("x.go"), WritePolicy.ALWAYS, "t").will_write(tmp_path)

    def test_once(self, tmp_path: Path) -> None:
        output = OutputFile(Path("x.go"), WritePolicy.ONCE, "t")
        assert output.will_write(tmp_path)
        (tmp_path / "x.go").write_text("")
        assert not output.will_write(tmp_path)


def _spec_with_actions(*names: str) -> Specification:
    actions = "".join(f"  {name}:\n    title: {name}\n" for name in names)
    return enrich_spec(parse_spec(f"name: clash\nactions:\n{actions}".encode(), "example.com/clash"))


class TestPlanCollisions:
    """Declarations that would overwrite each other's files."""

    def test_action_named_like_run_stub(self, generator: PluginGenerator) -> None:
        with pytest.raises(OutputCollisionError) as exc_info:
            generator.plan(_spec_with_actions("post", "post_run"))
        err = exc_info.value
        assert err.path == "actions/post_run.go"
        assert err.first == "the run stub of action 'post'"
        assert err.second == "action 'post_run'"
        assert "action 'post'" in str(err)
        assert "action 'post_run'" in str(err)

    def test_action_named_server(self, generator: PluginGenerator) -> None:
        with pytest.raises(OutputCollisionError) as exc_info:
            generator.plan(_spec_with_actions("server"))
        assert exc_info.value.path == "server/http/server.go"
        assert exc_info.value.first == "the HTTP server"
        assert exc_info.value.second == "the HTTP handler of action 'server'"

    def test_names_differing_only_in_case(self, generator: PluginGenerator) -> None:
        with pytest.raises(OutputCollisionError) as exc_info:
            generator.plan(_spec_with_actions("Post", "post"))
        assert exc_info.value.path.lower() == "actions/post.go"

    def test_exit_code(self, generator: PluginGenerator) -> None:
        with pytest.raises(OutputCollisionError) as exc_info:
            generator.plan(_spec_with_actions("server"))
        assert exc_info.value.exit_code == 12

    def test_nothing_written(self, generator: PluginGenerator) -> None:
        with pytest.raises(OutputCollisionError):
            generator.generate(_spec_with_actions("post", "post_run"), b"")
        assert not generator.workspace_root.exists()

    def test_distinct_names_pass(self, generator: PluginGenerator) -> None:
        paths = [o.path.as_posix() for o in generator.plan(_spec_with_actions("post", "run"))]
        assert len(paths) == len(set(paths))
