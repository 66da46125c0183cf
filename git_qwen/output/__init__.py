"""Terminal Output Formatting Package"""

import sys
import os
import threading


class Colors:
    """ANSI escape codes for terminal colors."""
    RESET = '\033[0m'
    DIM = '\033[2m'
    RED = '\033[31m'
    YELLOW = '\033[33m'


def _supports_color() -> bool:
    if os.environ.get('NO_COLOR'):
        return False
    if os.environ.get('FORCE_COLOR'):
        return True
    if not hasattr(sys.stderr, 'isatty') or not sys.stderr.isatty():
        return False
    if sys.platform == 'win32':
        try:
            import ctypes
            kernel32 = ctypes.windll.kernel32
            kernel32.SetConsoleMode(kernel32.GetStdHandle(-12), 7)
            return True
        except Exception:
            return False
    return True


def _supports_unicode() -> bool:
    if sys.platform == 'win32':
        try:
            '✓'.encode(sys.stderr.encoding or 'utf-8')
            return True
        except (UnicodeEncodeError, LookupError):
            return False
    return True


COLORS_ENABLED = _supports_color()
UNICODE_ENABLED = _supports_unicode()

CROSS = '✗' if UNICODE_ENABLED else '[X]'


def _colorize(text: str, *codes: str) -> str:
    if not COLORS_ENABLED:
        return text
    return f"{''.join(codes)}{text}{Colors.RESET}"


def error(text: str) -> str:
    return _colorize(text, Colors.RED)


def warning(text: str) -> str:
    return _colorize(text, Colors.YELLOW)


def dim(text: str) -> str:
    return _colorize(text, Colors.DIM)


# Everything goes to stderr: stdout belongs to git and the editor.

def print_error(message: str) -> None:
    print(f"{error(CROSS)} {error(message)}", file=sys.stderr)


def print_warning(message: str) -> None:
    text = f"{warning('⚠')} {warning(message)}" if UNICODE_ENABLED else f"[!] {message}"
    print(text, file=sys.stderr)


def print_hint(message: str) -> None:
    for line in message.splitlines():
        print(dim(f"  {line}"), file=sys.stderr)


class Spinner:
    """Animated spinner for long operations. Use as context manager."""
    FRAMES_UNICODE = ['⠋', '⠙', '⠹', '⠸', '⠼', '⠴', '⠦', '⠧', '⠇', '⠏']
    FRAMES_ASCII = ['-', '\\', '|', '/']

    def __init__(self, label: str = ""):
        self._label = label
        self._thread = None
        self._stop_event = threading.Event()
        self._frames = self.FRAMES_UNICODE if UNICODE_ENABLED else self.FRAMES_ASCII

    @staticmethod
    def _enabled() -> bool:
        return hasattr(sys.stderr, 'isatty') and sys.stderr.isatty()

    def _spin(self):
        idx = 0
        while not self._stop_event.is_set():
            frame = self._frames[idx % len(self._frames)]
            print(f'\r\033[K{frame} {self._label}', end='', flush=True, file=sys.stderr)
            idx += 1
            self._stop_event.wait(0.08)

    def __enter__(self):
        if self._enabled():
            self._stop_event.clear()
            self._thread = threading.Thread(target=self._spin, daemon=True)
            self._thread.start()
        return self

    def __exit__(self, *args):
        self._stop_event.set()
        if self._thread:
            self._thread.join()
            self._thread = None
        if self._enabled():
            print('\r\033[K', end='', flush=True, file=sys.stderr)


__all__ = [
    "Colors", "COLORS_ENABLED", "UNICODE_ENABLED",
    "CROSS",
    "error", "warning", "dim",
    "print_error", "print_warning", "print_hint",
    "Spinner",
]
