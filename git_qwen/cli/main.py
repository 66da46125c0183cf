"""CLI Main Entry Point"""

import os
import signal
import sys
from typing import Mapping, Sequence

from git_qwen.cli.args import Action, ArgumentSet, classify_args, enable_completion
from git_qwen.cli.utils import build_template, cleanup_message, clean_commit_message, format_commit_message
from git_qwen.config import Config, load_config
from git_qwen.editor import EditorLauncher, resolve_editor
from git_qwen.errors import CommitFailed, EmptyMessage, GeneratorFailed, NoStagedChanges, PipelineError
from git_qwen.git import GitRepository
from git_qwen.llm import get_generator
from git_qwen.msgfile import message_file, read_message, write_message
from git_qwen.output import Spinner, dim, print_error, print_hint
from git_qwen.process import CommandRunner, SubprocessRunner
from git_qwen.prompts import PromptBuilder, PromptConfig


def _generate_message(args: ArgumentSet, config: Config, env: Mapping[str, str],
                      runner: CommandRunner, repo: GitRepository) -> str:
    """Staged diff -> generator -> cleaned, formatted draft."""
    repo.ensure_staged_changes(args.include_all)
    diff = repo.get_diff(args.include_all)
    if not diff.strip():
        raise NoStagedChanges("The staged diff is empty; nothing to describe.")

    prompt_config = PromptConfig(
        max_subject_length=config.max_subject_length,
        body_width=config.body_width,
        instructions=config.prompt,
    )
    prompt = PromptBuilder().build(diff, prompt_config)

    generator = get_generator(config, env, runner)
    with Spinner(f"Generating commit message with {generator.name}..."):
        raw = generator.generate(prompt)

    message = format_commit_message(
        clean_commit_message(raw),
        max_subject_length=config.max_subject_length,
        body_width=config.body_width,
    )
    if not message:
        raise GeneratorFailed(f"{generator.name} returned an empty message")
    return message


def _build_initial_content(args: ArgumentSet, config: Config, repo: GitRepository, message: str) -> str:
    signoff = repo.signoff_line() if args.signoff else None
    if not config.include_template:
        return build_template(message, branch='', status=[], signoff=signoff, include_comments=False)
    return build_template(
        message,
        branch=repo.current_branch(),
        status=repo.short_status(),
        signoff=signoff,
    )


def _generate_commit_flow(args: ArgumentSet, config: Config, env: Mapping[str, str],
                          runner: CommandRunner, repo: GitRepository) -> int:
    """Main generated-message flow.

    Returns:
        int: git commit's exit status
    """
    launcher = EditorLauncher(resolve_editor(env), runner)
    message = _generate_message(args, config, env, runner, repo)
    content = _build_initial_content(args, config, repo, message)

    with message_file(content) as path:
        launcher.edit(path)
        final = cleanup_message(read_message(path))
        if not final:
            raise EmptyMessage("Aborting commit due to empty commit message.")
        write_message(path, final + '\n')
        return repo.commit_with_file(path, args.tokens)


def _report(e: PipelineError) -> None:
    """One diagnostic line naming the failed stage, plus any detail."""
    print_error(f"{e.stage}: {e}")
    if isinstance(e, GeneratorFailed) and e.details:
        print_hint(e.details)
    if e.hint:
        print_hint(e.hint)


def main(argv: Sequence[str] | None = None, env: Mapping[str, str] | None = None,
         runner: CommandRunner | None = None, config: Config | None = None) -> int:
    """Run one invocation and return the process exit status.

    Args:
        argv: `git commit` arguments, program name excluded (default: sys.argv[1:])
        env: Environment snapshot used for editor/generator resolution
        runner: How child processes are spawned
        config: Configuration; loaded from .gitqwenrc when omitted
    """
    args = classify_args(sys.argv[1:] if argv is None else argv)
    env = os.environ if env is None else env
    runner = runner or SubprocessRunner()
    repo = GitRepository(runner)

    try:
        if args.action is not Action.GENERATE:
            return repo.commit(args.tokens)
        config = config or load_config()
        return _generate_commit_flow(args, config, env, runner, repo)
    except CommitFailed as e:
        return e.exit_code
    except PipelineError as e:
        _report(e)
        return e.exit_code
    except KeyboardInterrupt:
        print(dim("Interrupted."), file=sys.stderr)
        return 128 + signal.SIGINT


def run() -> None:
    """Console script entry point."""
    enable_completion()
    sys.exit(main())
