"""
Error taxonomy for topic administration.

Every failure raised by the admin core is an AdminError carrying an
ErrorKind, so callers can branch on ``err.kind`` instead of on the
concrete class. Metadata reads do not raise these for partition-level
problems; they report an ErrorCode in the result instead.
"""

from enum import Enum, IntEnum
from typing import Optional


class ErrorKind(str, Enum):
    """Kinds of failure surfaced to admin callers."""

    INVALID_ARGUMENT = "invalid_argument"
    VALIDATION = "validation"
    ALREADY_EXISTS = "already_exists"
    NAMING_COLLISION = "naming_collision"
    NOT_FOUND = "not_found"
    PROTOCOL = "protocol"
    OPERATION_FAILED = "operation_failed"


class ErrorCode(IntEnum):
    """Per-topic and per-partition error codes reported in metadata results."""

    NONE = 0
    UNKNOWN_TOPIC_OR_PARTITION = 3
    LEADER_NOT_AVAILABLE = 5
    REPLICA_NOT_AVAILABLE = 9


class AdminError(Exception):
    """Base class for admin failures."""

    kind: ErrorKind = ErrorKind.OPERATION_FAILED


class InvalidArgumentError(AdminError):
    """Malformed partition counts, replication factors or config values."""

    kind = ErrorKind.INVALID_ARGUMENT


class InvalidConfigError(InvalidArgumentError):
    """Topic configuration rejected by the config schema."""


class ValidationError(AdminError):
    """Replica assignment or topic name failed validation."""

    kind = ErrorKind.VALIDATION


class InvalidTopicError(ValidationError):
    """Topic name is not legal."""


class TopicExistsError(AdminError):
    """Topic already exists, or was created concurrently."""

    kind = ErrorKind.ALREADY_EXISTS


class TopicAlreadyMarkedForDeletionError(AdminError):
    """Topic already carries a deletion marker."""

    kind = ErrorKind.ALREADY_EXISTS


class NamingCollisionError(AdminError):
    """Topic name collides with an existing topic after normalization."""

    kind = ErrorKind.NAMING_COLLISION


class NotFoundError(AdminError):
    """Operation targets a topic that does not exist."""

    kind = ErrorKind.NOT_FOUND


class ProtocolError(AdminError):
    """A stored record is malformed or carries an unsupported version."""

    kind = ErrorKind.PROTOCOL


class BrokerEndPointNotAvailableError(AdminError):
    """Broker has no endpoint for the requested security protocol."""

    kind = ErrorKind.NOT_FOUND


class OperationFailedError(AdminError):
    """
    Opaque coordination-store failure.

    The underlying exception is kept in ``cause`` and chained as
    ``__cause__`` by the raising site.
    """

    kind = ErrorKind.OPERATION_FAILED

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.cause = cause
