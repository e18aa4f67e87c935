"""Topic name rules."""

import re

from clusteradmin.errors import InvalidTopicError


LEGAL_CHARS = "[a-zA-Z0-9._-]"
MAX_NAME_LENGTH = 249

_LEGAL_NAME = re.compile(f"{LEGAL_CHARS}+")


def validate(topic: str) -> None:
    """
    Check that a topic name is legal.

    Raises:
        InvalidTopicError: If the name is empty, ``.``/``..``, too long,
            or contains characters outside ``[a-zA-Z0-9._-]``
    """
    if not topic:
        raise InvalidTopicError("Topic name is illegal, can't be empty")
    if topic in (".", ".."):
        raise InvalidTopicError("Topic name cannot be \".\" or \"..\"")
    if len(topic) > MAX_NAME_LENGTH:
        raise InvalidTopicError(
            f"Topic name is illegal, can't be longer than {MAX_NAME_LENGTH} characters"
        )
    if not _LEGAL_NAME.fullmatch(topic):
        raise InvalidTopicError(
            f"Topic name \"{topic}\" is illegal, contains a character other than "
            "ASCII alphanumerics, '.', '_' and '-'"
        )


def has_collision_chars(topic: str) -> bool:
    """Whether the name contains a character that normalizes to another."""
    return "." in topic or "_" in topic


def normalize(topic: str) -> str:
    # '.' and '_' map to the same metric and storage names
    return topic.replace(".", "_")


def has_collision(topic_a: str, topic_b: str) -> bool:
    """Whether two names map to the same name after normalization."""
    return normalize(topic_a) == normalize(topic_b)
