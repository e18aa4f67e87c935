"""Path layout inside the coordination store."""

from enum import Enum


BROKER_IDS_PATH = "/brokers/ids"
BROKER_TOPICS_PATH = "/brokers/topics"
CONFIG_PATH = "/config"
ENTITY_CONFIG_CHANGES_PATH = "/config/changes"
ENTITY_CONFIG_CHANGE_PREFIX = "config_change_"
DELETE_TOPICS_PATH = "/admin/delete_topics"
CONSUMERS_PATH = "/consumers"


class ConfigType(str, Enum):
    """Entity types that carry a dynamic configuration record."""
    
    TOPIC = "topics"
    CLIENT = "clients"


def broker_path(broker_id: int) -> str:
    return f"{BROKER_IDS_PATH}/{broker_id}"


def topic_path(topic: str) -> str:
    return f"{BROKER_TOPICS_PATH}/{topic}"


def topic_partitions_path(topic: str) -> str:
    return f"{topic_path(topic)}/partitions"


def partition_state_path(topic: str, partition: int) -> str:
    """Leader and ISR record of one partition."""
    return f"{topic_partitions_path(topic)}/{partition}/state"


def entity_config_path(entity_type: ConfigType, entity_name: str) -> str:
    return f"{CONFIG_PATH}/{ConfigType(entity_type).value}/{entity_name}"


def config_change_sequence_prefix() -> str:
    return f"{ENTITY_CONFIG_CHANGES_PATH}/{ENTITY_CONFIG_CHANGE_PREFIX}"


def delete_topic_path(topic: str) -> str:
    return f"{DELETE_TOPICS_PATH}/{topic}"


class ConsumerGroupDirs:
    """Paths owned by one consumer group, optionally scoped to a topic."""
    
    def __init__(self, group: str, topic: str = ""):
        self.group = group
        self.topic = topic
    
    @property
    def consumer_group_dir(self) -> str:
        return f"{CONSUMERS_PATH}/{self.group}"
    
    @property
    def consumer_registry_dir(self) -> str:
        return f"{self.consumer_group_dir}/ids"
    
    @property
    def consumer_offset_dir(self) -> str:
        return f"{self.consumer_group_dir}/offsets/{self.topic}"
    
    @property
    def consumer_owner_dir(self) -> str:
        return f"{self.consumer_group_dir}/owners/{self.topic}"
