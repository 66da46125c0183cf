"""CLI Argument Classification

git-qwen accepts `git commit`'s own argument grammar and forwards every
token untouched. The only thing it needs to know is whether the invocation
already supplies a message (or asks for help), in which case no message is
generated.
"""

import argparse
from dataclasses import dataclass, field
from enum import Enum
from typing import Sequence

import argcomplete
from argcomplete.completers import FilesCompleter

from git_qwen import __version__


class Action(Enum):
    PASS_THROUGH_HELP = "help"
    BYPASS_MESSAGE = "bypass"
    GENERATE = "generate"


class BypassReason(Enum):
    NONE = "none"
    HELP = "help/version flag"
    MESSAGE = "message flag"
    FILE = "file flag"
    REWRITE = "amend/fixup/squash flag"


HELP_FLAGS = {'--help', '-h', '--version'}

LONG_BYPASS = {
    '--message': BypassReason.MESSAGE,
    '--reuse-message': BypassReason.MESSAGE,
    '--reedit-message': BypassReason.MESSAGE,
    '--file': BypassReason.FILE,
    '--amend': BypassReason.REWRITE,
    '--fixup': BypassReason.REWRITE,
    '--squash': BypassReason.REWRITE,
}

SHORT_BYPASS = {
    'm': BypassReason.MESSAGE,
    'C': BypassReason.MESSAGE,
    'c': BypassReason.MESSAGE,
    'F': BypassReason.FILE,
}

# Options that take the next token as their value unless given as --opt=value
LONG_WITH_VALUE = {
    '--message', '--reuse-message', '--reedit-message', '--file', '--fixup',
    '--squash', '--author', '--date', '--template', '--cleanup', '--trailer',
    '--pathspec-from-file',
}
SHORT_WITH_VALUE = {'m', 'C', 'c', 'F', 't'}
# Optional values that can only be attached (-uno, -S<keyid>)
SHORT_OPTIONAL_VALUE = {'u', 'S'}


@dataclass(frozen=True)
class ArgumentSet:
    """Raw tokens plus what they mean for the pipeline."""
    tokens: tuple[str, ...]
    reason: BypassReason = BypassReason.NONE
    include_all: bool = False
    signoff: bool = False

    @property
    def action(self) -> Action:
        if self.reason is BypassReason.HELP:
            return Action.PASS_THROUGH_HELP
        if self.reason is BypassReason.NONE:
            return Action.GENERATE
        return Action.BYPASS_MESSAGE


@dataclass
class _Scan:
    help: bool = False
    reasons: list[BypassReason] = field(default_factory=list)
    include_all: bool = False
    signoff: bool = False


def classify_args(tokens: Sequence[str]) -> ArgumentSet:
    """Classify a `git commit` argument list (program name excluded).

    Only flag names are inspected; values are skipped, never parsed.
    """
    tokens = tuple(tokens)
    scan = _Scan()

    i = 0
    while i < len(tokens):
        token = tokens[i]
        i += 1
        if token == '--':
            break
        if token.startswith('--'):
            if _scan_long(token, scan):
                i += 1
        elif token.startswith('-') and len(token) > 1:
            if _scan_short_cluster(token[1:], scan):
                i += 1

    if scan.help:
        reason = BypassReason.HELP
    elif scan.reasons:
        reason = scan.reasons[0]
    else:
        reason = BypassReason.NONE
    return ArgumentSet(
        tokens=tokens,
        reason=reason,
        include_all=scan.include_all,
        signoff=scan.signoff,
    )


def _scan_long(token: str, scan: _Scan) -> bool:
    """Record a long option. Returns True if its value is the next token."""
    name, equals, _ = token.partition('=')
    if name in HELP_FLAGS:
        scan.help = True
    elif name in LONG_BYPASS:
        scan.reasons.append(LONG_BYPASS[name])
    elif name == '--all':
        scan.include_all = True
    elif name == '--signoff':
        scan.signoff = True
    return name in LONG_WITH_VALUE and not equals


def _scan_short_cluster(cluster: str, scan: _Scan) -> bool:
    """Record `-xyz`. Returns True if the last option's value is the next token."""
    for pos, flag in enumerate(cluster):
        if flag == 'h':
            scan.help = True
        elif flag in SHORT_BYPASS:
            scan.reasons.append(SHORT_BYPASS[flag])
        elif flag == 'a':
            scan.include_all = True
        elif flag == 's':
            scan.signoff = True

        if flag in SHORT_WITH_VALUE:
            # The rest of the token, if any, is the value
            return pos == len(cluster) - 1
        if flag in SHORT_OPTIONAL_VALUE:
            return False
    return False


def build_completion_parser() -> argparse.ArgumentParser:
    """Parser describing the commit flags git-qwen knows, for tab completion only.

    Real invocations are never parsed with it; they are forwarded to git.
    """
    parser = argparse.ArgumentParser(
        prog='git-qwen',
        description='git commit with an AI-generated starting message',
        add_help=False,
    )
    parser.add_argument('-h', '--help', action='store_true', help='Show git commit help')
    parser.add_argument('--version', action='version', version=f'%(prog)s {__version__}')

    # Flags that bring their own message: no generation
    parser.add_argument('-m', '--message', metavar='MSG', help='Use the given message')
    parser.add_argument('-F', '--file', metavar='FILE', help='Read the message from a file').completer = FilesCompleter()
    parser.add_argument('-C', '--reuse-message', metavar='COMMIT', help='Reuse a commit message')
    parser.add_argument('-c', '--reedit-message', metavar='COMMIT', help='Reuse and edit a commit message')
    parser.add_argument('--amend', action='store_true', help='Amend the previous commit')
    parser.add_argument('--fixup', metavar='COMMIT', help='Create a fixup! commit')
    parser.add_argument('--squash', metavar='COMMIT', help='Create a squash! commit')

    # Forwarded as-is, alongside the generated message
    parser.add_argument('-a', '--all', action='store_true', help='Commit all modified tracked files')
    parser.add_argument('-s', '--signoff', action='store_true', help='Add a Signed-off-by trailer')
    parser.add_argument('-n', '--no-verify', action='store_true', help='Bypass pre-commit and commit-msg hooks')
    parser.add_argument('-v', '--verbose', action='store_true', help='Show the diff in git\'s output')
    parser.add_argument('-q', '--quiet', action='store_true', help='Suppress the commit summary')
    parser.add_argument('-S', '--gpg-sign', nargs='?', const=True, metavar='KEYID', help='GPG-sign the commit')
    parser.add_argument('-t', '--template', metavar='FILE', help='Message template file').completer = FilesCompleter()
    parser.add_argument('--author', metavar='AUTHOR', help='Override the commit author')
    parser.add_argument('--date', metavar='DATE', help='Override the author date')
    parser.add_argument('--cleanup', choices=['strip', 'whitespace', 'verbatim', 'scissors', 'default'])
    parser.add_argument('--trailer', metavar='TOKEN', action='append', help='Add a trailer')
    parser.add_argument('--allow-empty', action='store_true', help='Allow a commit with no changes')
    parser.add_argument('--pathspec-from-file', metavar='FILE').completer = FilesCompleter()
    parser.add_argument('pathspec', nargs='*').completer = FilesCompleter()
    return parser


def enable_completion() -> None:
    """Answer a shell completion request and exit; no-op otherwise."""
    argcomplete.autocomplete(build_completion_parser())
