"""
End-to-end tests for the commit pipeline, run against FakeCommandRunner.

Run with:
    pytest tests/test_pipeline.py -v
"""

import errno
import signal

import pytest

from conftest import EDITOR, SAMPLE_DIFF, rewrite_with
from git_qwen.cli.main import main
from git_qwen.config import Config
from git_qwen.errors import (
    EditorAborted,
    EditorUnavailable,
    EmptyMessage,
    GeneratorFailed,
    GeneratorUnavailable,
    Interrupted,
    NoStagedChanges,
    TempFileIOFailure,
    UnderlyingToolUnavailable,
)
from git_qwen.msgfile import message_file
from git_qwen.process import CommandResult, FakeCommandRunner, RecordedCall


def generator_calls(runner):
    return runner.calls_to("qwen")


def editor_calls(runner):
    return runner.calls_to(EDITOR)


def commit_calls(runner):
    return runner.calls_to("git", "commit")


def raising(exc):
    """Response that fails to start the child with exc."""
    def _start(argv, _input):
        raise exc
    return _start


# ---------------------------------------------------------------------------
# Scenario A: generated message, accepted unchanged
# ---------------------------------------------------------------------------

class TestGeneratedCommit:

    def test_scenario_a(self, make_runner, env, config, committed, leftovers):
        runner = make_runner(message="Fix typo in parser")

        assert main([], env=env, runner=runner, config=config) == 0

        [commit] = commit_calls(runner)
        assert commit.argv == ("git", "commit", "-F", str(committed["path"]))
        assert commit.interactive is True
        assert committed["content"].strip() == "Fix typo in parser"
        assert leftovers() == []

    def test_stages_run_in_order(self, make_runner, env, config):
        runner = make_runner()
        main([], env=env, runner=runner, config=config)

        stages = [c.argv[:2] if c.argv[0] == "git" else c.argv[:1] for c in runner.calls]
        assert stages == [
            ("git", "diff"),      # staged-change check
            ("git", "diff"),      # diff text
            ("qwen",),
            ("git", "branch"),
            ("git", "status"),
            (EDITOR,),
            ("git", "commit"),
        ]

    def test_generator_gets_prompt_and_diff(self, make_runner, env, config):
        runner = make_runner()
        main([], env=env, runner=runner, config=config)

        [call] = generator_calls(runner)
        assert call.argv == ("qwen", "-y")
        assert call.input.startswith("Generate a git commit message")
        assert call.input.endswith(SAMPLE_DIFF)

    def test_editor_sees_template(self, make_runner, env, config):
        seen = {}

        def _editor(argv, _input):
            with open(argv[-1], encoding="utf-8") as f:
                seen["content"] = f.read()
            return 0

        runner = make_runner()
        runner.on(EDITOR, result=_editor)
        main([], env=env, runner=runner, config=config)

        assert seen["content"].startswith("Fix typo in parser\n\n# Please enter")
        assert "# On branch main" in seen["content"]
        assert "M  src/parser.py" in seen["content"]

    def test_template_can_be_disabled(self, make_runner, env, committed):
        runner = make_runner()
        main([], env=env, runner=runner, config=Config(include_template=False))

        assert runner.calls_to("git", "status") == []
        assert runner.calls_to("git", "branch") == []
        assert committed["content"] == "Fix typo in parser\n"

    def test_user_edits_are_committed(self, make_runner, env, config, committed):
        runner = make_runner()
        runner.on(EDITOR, result=rewrite_with("Fix parser typo\n\nRename prase to parse.\n# comment\n"))

        assert main([], env=env, runner=runner, config=config) == 0
        assert committed["content"] == "Fix parser typo\n\nRename prase to parse.\n"

    def test_user_flags_forwarded(self, make_runner, env, config, committed):
        runner = make_runner()
        main(["--no-verify", "-v", "--", "src/parser.py"], env=env, runner=runner, config=config)

        [commit] = commit_calls(runner)
        assert commit.argv == (
            "git", "commit", "-F", str(committed["path"]),
            "--no-verify", "-v", "--", "src/parser.py",
        )

    def test_code_fence_stripped(self, make_runner, env, config, committed):
        runner = make_runner(message="```\nFix typo in parser\n```")
        main([], env=env, runner=runner, config=config)
        assert committed["content"] == "Fix typo in parser\n"

    def test_signoff_trailer_previewed(self, make_runner, env, config, committed):
        runner = make_runner()
        runner.on("git", "config", "user.name", result=CommandResult(0, "Ada Lovelace\n"))
        runner.on("git", "config", "user.email", result=CommandResult(0, "ada@example.com\n"))

        main(["-s"], env=env, runner=runner, config=config)

        assert committed["content"] == (
            "Fix typo in parser\n\nSigned-off-by: Ada Lovelace <ada@example.com>\n"
        )
        assert commit_calls(runner)[0].argv[-1] == "-s"

    def test_signoff_without_identity(self, make_runner, env, config, committed):
        runner = make_runner()
        runner.on("git", "config", result=1)
        assert main(["--signoff"], env=env, runner=runner, config=config) == 0
        assert "Signed-off-by" not in committed["content"]

    def test_include_all_uses_unstaged_diff(self, make_runner, env, config):
        runner = make_runner()
        runner.on("git", "diff", "--quiet", "--cached", result=0)
        runner.on("git", "diff", "--quiet", result=1)
        runner.on("git", "diff", "--cached", result=CommandResult(0, ""))
        runner.on("git", "diff", "--no-color", result=CommandResult(0, SAMPLE_DIFF))

        assert main(["-a"], env=env, runner=runner, config=config) == 0
        assert generator_calls(runner)[0].input.endswith(SAMPLE_DIFF)

    def test_generator_env_override(self, make_runner, env, config):
        runner = make_runner()
        runner.on("llm", result=CommandResult(0, "Use llm\n"))
        env = {**env, "GIT_QWEN_GENERATOR": "llm --no-stream"}

        assert main([], env=env, runner=runner, config=config) == 0
        assert generator_calls(runner) == []
        assert runner.calls_to("llm")[0].argv == ("llm", "--no-stream")

    def test_noop_editor(self, make_runner, config, committed):
        runner = make_runner()
        assert main([], env={"GIT_EDITOR": ":"}, runner=runner, config=config) == 0
        assert committed["content"] == "Fix typo in parser\n"


# ---------------------------------------------------------------------------
# Scenario B and help: straight to git commit
# ---------------------------------------------------------------------------

class TestPassThrough:

    def test_scenario_b(self, make_runner, env, config):
        runner = make_runner()
        assert main(["-m", "wip"], env=env, runner=runner, config=config) == 0
        assert runner.calls == [RecordedCall(("git", "commit", "-m", "wip"), None, interactive=True)]

    @pytest.mark.parametrize("tokens", [
        ["--message=wip"],
        ["-F", "msg.txt"],
        ["--amend"],
        ["--fixup", "HEAD"],
        ["--squash=HEAD"],
        ["-am", "wip"],
    ])
    def test_bypass_never_generates(self, make_runner, env, config, tokens):
        runner = make_runner()
        main(tokens, env=env, runner=runner, config=config)
        assert [c.argv for c in runner.calls] == [("git", "commit", *tokens)]

    @pytest.mark.parametrize("tokens", [["--help"], ["-h"], ["--version"]])
    def test_help_forwarded_without_staging_check(self, env, config, tokens):
        runner = FakeCommandRunner().on("git", "diff", result=0)
        main(tokens, env=env, runner=runner, config=config)
        assert [c.argv for c in runner.calls] == [("git", "commit", *tokens)]

    def test_commit_status_propagated(self, env, config):
        runner = FakeCommandRunner().on("git", "commit", result=128)
        assert main(["--amend"], env=env, runner=runner, config=config) == 128

    def test_missing_git(self, env, config, capsys):
        runner = FakeCommandRunner(missing=["git"])
        assert main(["-m", "x"], env=env, runner=runner, config=config) == UnderlyingToolUnavailable.exit_code
        assert "git" in capsys.readouterr().err

    def test_git_not_executable(self, env, config, capsys):
        runner = FakeCommandRunner().on("git", result=raising(PermissionError(errno.EACCES, "Permission denied", "git")))
        assert main(["-m", "x"], env=env, runner=runner, config=config) == UnderlyingToolUnavailable.exit_code
        assert "Permission denied" in capsys.readouterr().err

    def test_git_exec_failure_during_generation(self, env, config):
        runner = FakeCommandRunner().on("git", result=raising(OSError(errno.ENOEXEC, "Exec format error", "git")))
        assert main([], env=env, runner=runner, config=config) == UnderlyingToolUnavailable.exit_code
        assert generator_calls(runner) == []


# ---------------------------------------------------------------------------
# Scenario C: nothing staged
# ---------------------------------------------------------------------------

class TestNothingStaged:

    def test_scenario_c(self, env, config, capsys):
        runner = FakeCommandRunner().on("git", "diff", "--quiet", "--cached", result=0)

        assert main([], env=env, runner=runner, config=config) == NoStagedChanges.exit_code
        assert [c.argv for c in runner.calls] == [("git", "diff", "--quiet", "--cached")]
        assert "No changes staged" in capsys.readouterr().err

    def test_include_all_with_clean_tree(self, env, config):
        runner = FakeCommandRunner()
        assert main(["-a"], env=env, runner=runner, config=config) == NoStagedChanges.exit_code
        assert generator_calls(runner) == []

    def test_empty_diff_text(self, make_runner, env, config):
        runner = make_runner(diff="")
        assert main([], env=env, runner=runner, config=config) == NoStagedChanges.exit_code
        assert generator_calls(runner) == []

    def test_git_query_failure(self, env, config, capsys):
        runner = FakeCommandRunner().on(
            "git", "diff", result=CommandResult(128, "", "fatal: not a git repository\n"),
        )
        assert main([], env=env, runner=runner, config=config) == UnderlyingToolUnavailable.exit_code
        assert "not a git repository" in capsys.readouterr().err
        assert generator_calls(runner) == []


# ---------------------------------------------------------------------------
# Scenario D and other generator failures
# ---------------------------------------------------------------------------

class TestGeneratorFailures:

    def test_scenario_d(self, make_runner, env, config, leftovers, capsys):
        runner = make_runner()
        runner.on("qwen", result=CommandResult(1, "", "quota exceeded"))

        assert main([], env=env, runner=runner, config=config) == GeneratorFailed.exit_code
        assert editor_calls(runner) == []
        assert commit_calls(runner) == []
        assert leftovers() == []
        err = capsys.readouterr().err
        assert "generator:" in err
        assert "quota exceeded" in err

    def test_generator_missing(self, make_runner, env, config, capsys):
        runner = make_runner()
        runner.missing.add("qwen")
        assert main([], env=env, runner=runner, config=config) == GeneratorUnavailable.exit_code
        assert "installed" in capsys.readouterr().err

    @pytest.mark.parametrize("exc", [
        PermissionError(errno.EACCES, "Permission denied", "qwen"),
        OSError(errno.ENOEXEC, "Exec format error", "qwen"),
    ])
    def test_generator_cannot_start(self, make_runner, env, config, leftovers, capsys, exc):
        runner = make_runner()
        runner.on("qwen", result=raising(exc))

        assert main([], env=env, runner=runner, config=config) == GeneratorUnavailable.exit_code
        assert editor_calls(runner) == []
        assert leftovers() == []
        assert "qwen" in capsys.readouterr().err

    @pytest.mark.parametrize("output", ["", "   \n", "```\n```"])
    def test_empty_generator_output(self, make_runner, env, config, output):
        runner = make_runner()
        runner.on("qwen", result=CommandResult(0, output))
        assert main([], env=env, runner=runner, config=config) == GeneratorFailed.exit_code
        assert editor_calls(runner) == []

    def test_generator_called_once(self, make_runner, env, config):
        runner = make_runner()
        runner.on("qwen", result=CommandResult(2, "", "flaky"))
        main([], env=env, runner=runner, config=config)
        assert len(generator_calls(runner)) == 1

    def test_bad_editor_fails_before_generation(self, make_runner, config):
        runner = make_runner()
        assert main([], env={"EDITOR": "vim '"}, runner=runner, config=config) == EditorUnavailable.exit_code
        assert generator_calls(runner) == []


# ---------------------------------------------------------------------------
# Editor outcomes and temp file lifecycle
# ---------------------------------------------------------------------------

class TestEditorOutcomes:

    def test_editor_abort(self, make_runner, env, config, leftovers):
        runner = make_runner()
        runner.on(EDITOR, result=1)

        assert main([], env=env, runner=runner, config=config) == EditorAborted.exit_code
        assert commit_calls(runner) == []
        assert leftovers() == []

    def test_editor_missing(self, make_runner, env, config, leftovers):
        runner = make_runner()
        runner.missing.add(EDITOR)

        assert main([], env=env, runner=runner, config=config) == EditorUnavailable.exit_code
        assert commit_calls(runner) == []
        assert leftovers() == []

    @pytest.mark.parametrize("exc", [
        PermissionError(errno.EACCES, "Permission denied", EDITOR),
        OSError(errno.ENOEXEC, "Exec format error", EDITOR),
    ])
    def test_editor_cannot_start(self, make_runner, env, config, leftovers, capsys, exc):
        runner = make_runner()
        runner.on(EDITOR, result=raising(exc))

        assert main([], env=env, runner=runner, config=config) == EditorUnavailable.exit_code
        assert commit_calls(runner) == []
        assert leftovers() == []
        assert EDITOR in capsys.readouterr().err

    @pytest.mark.parametrize("content", ["", "  \n\n\t\n", "# Please enter\n#\n"])
    def test_empty_message(self, make_runner, env, config, leftovers, content, capsys):
        runner = make_runner()
        runner.on(EDITOR, result=rewrite_with(content))

        assert main([], env=env, runner=runner, config=config) == EmptyMessage.exit_code
        assert commit_calls(runner) == []
        assert leftovers() == []
        assert "empty commit message" in capsys.readouterr().err

    def test_commit_failure(self, make_runner, env, config, committed, leftovers, capsys):
        runner = make_runner(commit_status=1)

        assert main([], env=env, runner=runner, config=config) == 1
        assert not committed["path"].exists()
        assert leftovers() == []
        # git printed its own diagnostics
        assert capsys.readouterr().err == ""

    def test_success_removes_file(self, make_runner, env, config, committed, leftovers):
        runner = make_runner()
        main([], env=env, runner=runner, config=config)
        assert not committed["path"].exists()
        assert leftovers() == []


# ---------------------------------------------------------------------------
# Interruption
# ---------------------------------------------------------------------------

class TestInterruption:

    def test_signal_during_editor(self, make_runner, env, config, leftovers):
        def _killed(argv, _input):
            raise Interrupted(signal.SIGTERM)

        runner = make_runner()
        runner.on(EDITOR, result=_killed)

        assert main([], env=env, runner=runner, config=config) == 128 + signal.SIGTERM
        assert commit_calls(runner) == []
        assert leftovers() == []

    def test_keyboard_interrupt_during_generation(self, make_runner, env, config, leftovers):
        def _interrupted(argv, _input):
            raise KeyboardInterrupt

        runner = make_runner()
        runner.on("qwen", result=_interrupted)

        assert main([], env=env, runner=runner, config=config) == 130
        assert editor_calls(runner) == []
        assert leftovers() == []


# ---------------------------------------------------------------------------
# message_file
# ---------------------------------------------------------------------------

class TestMessageFile:

    def test_created_with_content_and_removed(self, msg_dir):
        with message_file("draft\n") as path:
            assert path.parent == msg_dir
            assert path.name.startswith("COMMIT_EDITMSG-")
            assert path.read_text(encoding="utf-8") == "draft\n"
        assert not path.exists()

    def test_unique_names(self, msg_dir):
        with message_file("a") as first, message_file("b") as second:
            assert first != second

    def test_removed_on_error(self, msg_dir):
        with pytest.raises(RuntimeError):
            with message_file("draft") as path:
                raise RuntimeError("boom")
        assert not path.exists()

    def test_already_deleted_is_fine(self, msg_dir):
        with message_file("draft") as path:
            path.unlink()
        assert not path.exists()

    def test_unwritable_directory(self, tmp_path):
        with pytest.raises(TempFileIOFailure):
            with message_file("draft", directory=tmp_path / "missing"):
                pass
