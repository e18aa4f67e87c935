"""
Entity configuration writes and change notifications.

Changing a topic's or client's configuration is two store operations:
the full config record is overwritten, then a sequential change event is
appended under ``/config/changes``. Other cluster members watch that
sequence and re-read the named entity's config, so the record write must
complete before the event is appended.
"""

from typing import Dict, Mapping

from clusteradmin.admin.log_config import LogConfig
from clusteradmin.coordination import paths, records
from clusteradmin.coordination.paths import ConfigType
from clusteradmin.coordination.store import CoordinationError, CoordinationStore
from clusteradmin.errors import InvalidArgumentError, NotFoundError, OperationFailedError
from clusteradmin.utils.logging import get_logger

logger = get_logger(__name__)


class ConfigChangeNotifier:
    """Writes entity configs and appends change notifications."""

    def __init__(self, store: CoordinationStore):
        self.store = store

    def change_topic_config(self, topic: str, configs: Mapping[str, str]) -> str:
        """
        Replace an existing topic's config and notify the cluster.

        Args:
            topic: Topic name
            configs: The complete config to apply; callers merge additions
                and removals beforehand

        Returns:
            Path of the appended change event

        Raises:
            NotFoundError: If the topic does not exist
            InvalidConfigError: If the config fails schema validation
        """
        if not self.store.exists(paths.topic_path(topic)):
            raise NotFoundError(f"Topic \"{topic}\" does not exist.")
        LogConfig.validate(configs)
        return self.change_config(ConfigType.TOPIC, topic, configs)

    def change_client_id_config(self, client_id: str, configs: Mapping[str, str]) -> str:
        """Replace a client id's config and notify the cluster."""
        return self.change_config(ConfigType.CLIENT, client_id, configs)

    def change_config(
        self,
        entity_type: ConfigType,
        entity_name: str,
        configs: Mapping[str, str],
    ) -> str:
        """
        Overwrite an entity's config, then append a change event.

        Returns:
            Path of the appended change event

        Raises:
            OperationFailedError: If either store write fails
        """
        entity_type = ConfigType(entity_type)
        self.write_entity_config(entity_type, entity_name, configs)

        try:
            event_path = self.store.create_persistent_sequential(
                paths.config_change_sequence_prefix(),
                records.encode_config_change(entity_type.value, entity_name),
            )
        except CoordinationError as e:
            raise OperationFailedError(str(e), cause=e) from e

        logger.info(
            "Config change notification created",
            entity_type=entity_type.value,
            entity_name=entity_name,
            path=event_path,
        )
        return event_path

    def write_entity_config(
        self,
        entity_type: ConfigType,
        entity_name: str,
        configs: Mapping[str, str],
    ) -> None:
        """
        Overwrite an entity's config record.

        Raises:
            InvalidArgumentError: If a key or value is not a string
            OperationFailedError: If the store write fails
        """
        for key, value in configs.items():
            if not isinstance(key, str) or not isinstance(value, str):
                raise InvalidArgumentError(
                    f"Config entries must be strings, got {key!r}: {value!r}"
                )

        # the record may not exist yet if there were no overrides before
        try:
            self.store.update_persistent(
                paths.entity_config_path(entity_type, entity_name),
                records.encode_entity_config(configs),
            )
        except CoordinationError as e:
            raise OperationFailedError(str(e), cause=e) from e

    def fetch_entity_config(self, entity_type: ConfigType, entity_name: str) -> Dict[str, str]:
        """
        Read an entity's config.

        Returns:
            Config map; empty when no record exists

        Raises:
            ProtocolError: If the record is malformed or not version 1
        """
        raw = self.store.read_data(paths.entity_config_path(entity_type, entity_name))
        if raw is None:
            return {}
        return records.decode_entity_config(raw, ConfigType(entity_type).value)

    def fetch_all_topic_configs(self) -> Dict[str, Dict[str, str]]:
        return {
            topic: self.fetch_entity_config(ConfigType.TOPIC, topic)
            for topic in self.store.get_children(paths.BROKER_TOPICS_PATH)
        }
