"""Comment command matching for the ``/ok-to-test`` override.

A command only counts when its author is independently trusted, so this
module just finds candidate authors; trust is decided by the engine.
"""

from __future__ import annotations

import typing as typ

from .config import OK_TO_TEST_COMMAND

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from triggergate.providers.protocol import CommentRecord


def is_command(body: str, command: str = OK_TO_TEST_COMMAND) -> bool:
    """Return whether ``body`` is exactly ``command`` once whitespace is trimmed.

    Examples
    --------
    >>> is_command("  /ok-to-test\\n")
    True
    >>> is_command("/ok-to-test please")
    False
    >>> is_command("/OK-TO-TEST")
    False

    """
    return body.strip() == command


def iter_command_authors(
    comments: cabc.Iterable[CommentRecord],
    command: str = OK_TO_TEST_COMMAND,
) -> cabc.Iterator[str]:
    """Yield the author of each matching comment in thread order.

    Comments without an author login (deleted accounts) are skipped. An
    author is yielded once per matching comment; callers deduplicate.
    """
    for comment in comments:
        if comment.author_login and is_command(comment.body, command):
            yield comment.author_login
