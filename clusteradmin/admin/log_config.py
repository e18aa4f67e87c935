"""
Topic-level configuration schema.

Dynamic topic overrides are stored as plain strings; this module checks
that each key is a known topic setting and that its value parses to the
declared type and range before it is written.
"""

from dataclasses import dataclass
from typing import Callable, Dict, FrozenSet, Mapping, Optional

from clusteradmin.errors import InvalidConfigError


@dataclass(frozen=True)
class ConfigDef:
    """
    Definition of one topic setting.

    Attributes:
        name: Setting key
        parse: Converts the string value, raising ValueError on bad input
        minimum: Inclusive lower bound for numeric settings
        choices: Allowed values for enumerated settings
    """
    name: str
    parse: Callable[[str], object]
    minimum: Optional[float] = None
    choices: Optional[FrozenSet[str]] = None

    def check(self, value: str) -> None:
        try:
            parsed = self.parse(value)
        except (TypeError, ValueError) as e:
            raise InvalidConfigError(
                f"Invalid value {value!r} for configuration {self.name}"
            ) from e

        if self.minimum is not None and parsed < self.minimum:
            raise InvalidConfigError(
                f"Invalid value {value!r} for configuration {self.name}: "
                f"value must be at least {self.minimum:g}"
            )
        if self.choices is not None and parsed not in self.choices:
            raise InvalidConfigError(
                f"Invalid value {value!r} for configuration {self.name}: "
                f"must be one of {sorted(self.choices)}"
            )


def _parse_bool(value: str) -> bool:
    lowered = value.strip().lower()
    if lowered not in ("true", "false"):
        raise ValueError(value)
    return lowered == "true"


def _parse_str(value: str) -> str:
    if not isinstance(value, str):
        raise TypeError(value)
    return value.strip().lower()


class LogConfig:
    """Schema of topic-level configuration overrides."""

    SEGMENT_BYTES = "segment.bytes"
    SEGMENT_MS = "segment.ms"
    SEGMENT_JITTER_MS = "segment.jitter.ms"
    SEGMENT_INDEX_BYTES = "segment.index.bytes"
    FLUSH_MESSAGES = "flush.messages"
    FLUSH_MS = "flush.ms"
    RETENTION_BYTES = "retention.bytes"
    RETENTION_MS = "retention.ms"
    MAX_MESSAGE_BYTES = "max.message.bytes"
    INDEX_INTERVAL_BYTES = "index.interval.bytes"
    DELETE_RETENTION_MS = "delete.retention.ms"
    FILE_DELETE_DELAY_MS = "file.delete.delay.ms"
    MIN_CLEANABLE_DIRTY_RATIO = "min.cleanable.dirty.ratio"
    CLEANUP_POLICY = "cleanup.policy"
    UNCLEAN_LEADER_ELECTION_ENABLE = "unclean.leader.election.enable"
    MIN_IN_SYNC_REPLICAS = "min.insync.replicas"
    COMPRESSION_TYPE = "compression.type"
    PREALLOCATE = "preallocate"

    DEFINITIONS: Dict[str, ConfigDef] = {
        d.name: d for d in (
            ConfigDef(SEGMENT_BYTES, int, minimum=14),
            ConfigDef(SEGMENT_MS, int, minimum=0),
            ConfigDef(SEGMENT_JITTER_MS, int, minimum=0),
            ConfigDef(SEGMENT_INDEX_BYTES, int, minimum=0),
            ConfigDef(FLUSH_MESSAGES, int, minimum=0),
            ConfigDef(FLUSH_MS, int, minimum=0),
            ConfigDef(RETENTION_BYTES, int, minimum=-1),
            ConfigDef(RETENTION_MS, int, minimum=-1),
            ConfigDef(MAX_MESSAGE_BYTES, int, minimum=0),
            ConfigDef(INDEX_INTERVAL_BYTES, int, minimum=0),
            ConfigDef(DELETE_RETENTION_MS, int, minimum=0),
            ConfigDef(FILE_DELETE_DELAY_MS, int, minimum=0),
            ConfigDef(MIN_CLEANABLE_DIRTY_RATIO, float, minimum=0),
            ConfigDef(CLEANUP_POLICY, _parse_str, choices=frozenset({"delete", "compact"})),
            ConfigDef(UNCLEAN_LEADER_ELECTION_ENABLE, _parse_bool),
            ConfigDef(MIN_IN_SYNC_REPLICAS, int, minimum=1),
            ConfigDef(
                COMPRESSION_TYPE,
                _parse_str,
                choices=frozenset({"uncompressed", "gzip", "snappy", "lz4", "producer"}),
            ),
            ConfigDef(PREALLOCATE, _parse_bool),
        )
    }

    @classmethod
    def validate(cls, config: Mapping[str, str]) -> None:
        """
        Check topic configuration overrides.

        Args:
            config: Setting name to string value

        Raises:
            InvalidConfigError: On an unknown name or an invalid value
        """
        for name, value in config.items():
            if not isinstance(value, str):
                raise InvalidConfigError(
                    f"Invalid value {value!r} for configuration {name}: values must be strings"
                )
            definition = cls.DEFINITIONS.get(name)
            if definition is None:
                raise InvalidConfigError(f"Unknown configuration \"{name}\".")
            definition.check(value)
