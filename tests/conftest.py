"""Shared fixtures: a scripted git/generator/editor world with no real processes."""

import tempfile
from pathlib import Path

import pytest

from git_qwen.config import Config
from git_qwen.process import CommandResult, FakeCommandRunner

SAMPLE_DIFF = (
    "diff --git a/src/parser.py b/src/parser.py\n"
    "--- a/src/parser.py\n"
    "+++ b/src/parser.py\n"
    "@@ -1,3 +1,3 @@\n"
    "-def prase(text):\n"
    "+def parse(text):\n"
)

EDITOR = 'fake-editor'


@pytest.fixture
def msg_dir(tmp_path, monkeypatch):
    """Redirect temporary files into tmp_path so leftovers can be counted."""
    directory = tmp_path / "tmp"
    directory.mkdir()
    monkeypatch.setattr(tempfile, 'tempdir', str(directory))
    return directory


@pytest.fixture
def leftovers(msg_dir):
    """Return a function listing message files still on disk."""
    def _list():
        return sorted(msg_dir.glob('COMMIT_EDITMSG-*'))
    return _list


@pytest.fixture
def env():
    return {'GIT_EDITOR': EDITOR}


@pytest.fixture
def config():
    return Config()


@pytest.fixture
def committed():
    """Records the message file git commit was pointed at, read at commit time."""
    return {}


@pytest.fixture
def make_runner(committed, msg_dir):
    """Factory for a runner with staged changes and a working generator."""
    def _make(message="Fix typo in parser", diff=SAMPLE_DIFF, commit_status=0):
        def _commit(argv, _input):
            if '-F' in argv:
                path = Path(argv[argv.index('-F') + 1])
                # Only our own message files; bypass runs pass the user's -F untouched
                if path.name.startswith('COMMIT_EDITMSG-'):
                    committed['path'] = path
                    committed['content'] = path.read_text(encoding='utf-8')
            return commit_status

        runner = FakeCommandRunner()
        runner.on('git', 'diff', '--quiet', '--cached', result=1)
        runner.on('git', 'diff', '--cached', result=CommandResult(0, diff))
        runner.on('git', 'branch', '--show-current', result=CommandResult(0, "main\n"))
        runner.on('git', 'status', '--porcelain', result=CommandResult(0, "M  src/parser.py\n"))
        runner.on('qwen', result=CommandResult(0, message + "\n"))
        runner.on('git', 'commit', result=_commit)
        return runner
    return _make


def rewrite_with(text):
    """Editor response that replaces the file content with text."""
    def _edit(argv, _input):
        Path(argv[-1]).write_text(text, encoding='utf-8')
        return 0
    return _edit
