"""Split raw duration text into runs of same-kind characters."""

from __future__ import annotations

import logging
import string
from dataclasses import dataclass
from enum import Enum

from .errors import InvalidCharacter

logger = logging.getLogger(__name__)


class GroupKind(Enum):
    NUMBER = "number"
    TEXT = "text"
    SEPARATOR = "separator"


_LETTERS = frozenset(string.ascii_lowercase)
_NUMBER_CHARS = frozenset(string.digits + ".")


def _kind_of(ch: str) -> GroupKind:
    if ch in _LETTERS:
        return GroupKind.TEXT
    if ch in _NUMBER_CHARS:
        return GroupKind.NUMBER
    if ch == ":":
        return GroupKind.SEPARATOR
    raise InvalidCharacter(ch)


@dataclass(frozen=True)
class Group:
    """A run of characters that all share one :class:`GroupKind`."""

    kind: GroupKind
    text: str


def lex(text: str) -> list[Group]:
    """Group the characters of *text* by kind.

    The input is lower-cased and spaces are removed first.  Letters
    and digit/dot runs merge into one group each; every ``:`` is a
    group of its own so that ``"1::2"`` keeps an empty middle field.

    Raises :class:`InvalidCharacter` for anything outside
    ``[a-z0-9.:]``.
    """
    cleaned = text.lower().replace(" ", "")
    groups: list[Group] = []

    for ch in cleaned:
        kind = _kind_of(ch)
        if groups and kind is not GroupKind.SEPARATOR and groups[-1].kind is kind:
            groups[-1] = Group(kind, groups[-1].text + ch)
        else:
            groups.append(Group(kind, ch))

    logger.debug("lexed %r into %d groups", text, len(groups))
    return groups
