"""CLI Utility Functions - commit message text handling."""

import re
import textwrap

COMMENT_CHAR = '#'

BULLET_RE = re.compile(r'^\s*(?:[-*•]|\d+[.)])\s+')

TEMPLATE_HELP = [
    "Please enter the commit message for your changes. Lines starting",
    f"with '{COMMENT_CHAR}' will be ignored, and an empty message aborts the commit.",
]


def clean_commit_message(text: str) -> str:
    """Strip surrounding whitespace and a Markdown code fence around the message."""
    text = text.strip()
    if text.startswith('```'):
        newline = text.find('\n')
        if newline == -1:
            text = text[3:]
        else:
            tag = text[3:newline].strip()
            # ```text / ```gitcommit: a language identifier, not message content
            if not tag or (' ' not in tag and len(tag) < 20):
                text = text[newline + 1:]
            else:
                text = text[3:]
    if text.endswith('```'):
        text = text[:-3]
    return text.strip()


def wrap_body(body: str, width: int = 72) -> str:
    """Re-wrap body paragraphs at width. Bullet items are wrapped one by one."""
    paragraphs = re.split(r'\n[ \t]*\n', body.strip())
    wrapped = []
    for paragraph in paragraphs:
        lines = [line.strip() for line in paragraph.splitlines() if line.strip()]
        if not lines:
            continue
        if any(BULLET_RE.match(line) for line in lines):
            items: list[str] = []
            for line in lines:
                if BULLET_RE.match(line) or not items:
                    items.append(line)
                else:
                    items[-1] += ' ' + line
            wrapped.append('\n'.join(_fill(item, width, indent='  ') for item in items))
        else:
            wrapped.append(_fill(' '.join(lines), width))
    return '\n\n'.join(wrapped)


def _fill(text: str, width: int, indent: str = '') -> str:
    return textwrap.fill(
        text,
        width=width,
        subsequent_indent=indent,
        break_long_words=False,
        break_on_hyphens=False,
    )


def format_commit_message(message: str, max_subject_length: int = 50, body_width: int = 72) -> str:
    """Subject cut to max_subject_length, one blank line, body wrapped at body_width."""
    lines = message.splitlines()
    if not lines:
        return ''

    subject = lines[0].strip()[:max_subject_length].rstrip()
    body_lines = lines[1:]
    while body_lines and not body_lines[0].strip():
        body_lines.pop(0)

    if not body_lines:
        return subject
    body = wrap_body('\n'.join(body_lines), body_width)
    return f"{subject}\n\n{body}" if body else subject


def build_template(message: str, branch: str, status: list[str],
                   signoff: str | None = None, include_comments: bool = True) -> str:
    """Initial editor content: draft, optional trailer, then git-style comments."""
    text = message
    if signoff and signoff not in message:
        text += f"\n\n{signoff}"
    text += '\n'

    if include_comments:
        comments = [*TEMPLATE_HELP, "", f"On branch {branch}"]
        if status:
            comments.append("Changes to be committed:")
            comments.extend(f"\t{line}" for line in status)
        text += '\n' + ''.join(
            f"{COMMENT_CHAR} {line}\n" if line else f"{COMMENT_CHAR}\n" for line in comments
        )
    return text


def cleanup_message(text: str, comment_char: str = COMMENT_CHAR) -> str:
    """Apply git's default `strip` cleanup to an edited message.

    Lines starting with the comment character are dropped, trailing
    whitespace is removed, runs of blank lines collapse to one, and
    leading/trailing blank lines go away. An empty result means the
    message is effectively empty.
    """
    result: list[str] = []
    for line in text.splitlines():
        if line.startswith(comment_char):
            continue
        line = line.rstrip()
        if not line:
            if result and result[-1]:
                result.append('')
            continue
        result.append(line)
    while result and not result[-1]:
        result.pop()
    return '\n'.join(result)
