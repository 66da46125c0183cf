"""Subprocess-backed runner connected to the real OS streams."""

import signal
import subprocess
import threading
from contextlib import contextmanager
from typing import Sequence

from git_qwen.errors import Interrupted
from git_qwen.process.base import CommandRunner, CommandResult

# SIGHUP does not exist on Windows
_TERMINATION_SIGNALS = [
    getattr(signal, name) for name in ('SIGTERM', 'SIGHUP') if hasattr(signal, name)
]


class SubprocessRunner(CommandRunner):
    """Runs children with subprocess and forwards termination signals to them.

    While a child runs, SIGTERM/SIGHUP (and SIGINT for captured children) are
    relayed to it; once it has exited, Interrupted is raised so the caller
    unwinds through its cleanup. Interactive children own the keyboard, so
    SIGINT is ignored here and left to them, as git does for its editor.
    A SIGINT sent to this process alone (`kill -INT`) is therefore dropped
    while an interactive child runs; it is not forwarded.
    """

    def capture(self, argv: Sequence[str], input: str | None = None) -> CommandResult:
        child = subprocess.Popen(
            list(argv),
            stdin=subprocess.PIPE if input is not None else subprocess.DEVNULL,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            text=True,
            encoding='utf-8',
            errors='replace',
        )
        with self._forward_signals(child, [signal.SIGINT, *_TERMINATION_SIGNALS]) as received:
            stdout, stderr = child.communicate(input)
        if received:
            raise Interrupted(received[0])
        return CommandResult(returncode=child.returncode, stdout=stdout, stderr=stderr)

    def interactive(self, argv: Sequence[str]) -> int:
        child = subprocess.Popen(list(argv))
        with self._forward_signals(child, _TERMINATION_SIGNALS, ignore=[signal.SIGINT]) as received:
            child.wait()
        if received:
            raise Interrupted(received[0])
        return child.returncode

    @contextmanager
    def _forward_signals(self, child: subprocess.Popen, forward, ignore=()):
        """Relay `forward` signals to child and record them; ignore `ignore`."""
        received: list[int] = []
        # Handlers can only be installed from the main thread
        if threading.current_thread() is not threading.main_thread():
            yield received
            return

        def _relay(signum, frame):
            received.append(signum)
            if child.poll() is None:
                child.send_signal(signum)

        previous = {}
        for sig in forward:
            previous[sig] = signal.signal(sig, _relay)
        for sig in ignore:
            previous[sig] = signal.signal(sig, signal.SIG_IGN)
        try:
            yield received
        finally:
            for sig, handler in previous.items():
                signal.signal(sig, handler)
