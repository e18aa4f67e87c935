"""
Admin service.

Provides one entry point for the admin-facing API: topic creation,
partition expansion, config changes, deletion and metadata reads, all
over a single coordination store.
"""

import random
from typing import Iterable, List, Mapping, Optional

from clusteradmin.admin.config_change import ConfigChangeNotifier
from clusteradmin.admin.consumer_groups import ConsumerGroupCleaner
from clusteradmin.admin.metadata_assembler import TopicMetadataAssembler, TopicMetadataResult
from clusteradmin.admin.topic_store import TopicMetadataStore
from clusteradmin.broker.directory import BrokerDirectory
from clusteradmin.broker.metadata import SecurityProtocol
from clusteradmin.coordination.store import CoordinationStore
from clusteradmin.utils.config import Config, get_config
from clusteradmin.utils.logging import get_logger

logger = get_logger(__name__)


class AdminService:
    """
    Service for administering topics and entity configs.

    Coordinates between TopicMetadataStore, ConfigChangeNotifier and
    TopicMetadataAssembler.
    """

    def __init__(
        self,
        store: CoordinationStore,
        config: Optional[Config] = None,
        rng: Optional[random.Random] = None,
    ):
        """
        Initialize admin service.

        Args:
            store: Coordination store client
            config: Configuration; defaults to the global instance
            rng: Random source for replica placement; when omitted, one is
                seeded from ``admin.random_seed`` if that is set
        """
        self.store = store
        self.config = config or get_config()

        if rng is None:
            seed = self.config.get("admin.random_seed")
            rng = random.Random(seed) if seed is not None else None

        self.check_broker_available = bool(self.config.get("admin.check_broker_available", True))
        protocol = SecurityProtocol(self.config.get("admin.security_protocol", "PLAINTEXT"))

        self.directory = BrokerDirectory(store)
        self.topics = TopicMetadataStore(store, self.directory, rng=rng)
        self.configs = ConfigChangeNotifier(store)
        self.assembler = TopicMetadataAssembler(store, self.directory, protocol=protocol)
        self.consumer_groups = ConsumerGroupCleaner(store)

        logger.info(
            "Initialized admin service",
            security_protocol=protocol.value,
            check_broker_available=self.check_broker_available,
        )

    def create_topic(
        self,
        topic: str,
        partitions: int,
        replication_factor: int,
        topic_config: Optional[Mapping[str, str]] = None,
    ):
        assignment = self.topics.create_topic(topic, partitions, replication_factor, topic_config)
        logger.info(
            "Created topic",
            topic=topic,
            partitions=partitions,
            replication_factor=replication_factor,
        )
        return assignment

    def add_partitions(self, topic: str, num_partitions: int, replica_assignment_str: str = ""):
        return self.topics.add_partitions(
            topic,
            num_partitions,
            replica_assignment_str,
            check_broker_available=self.check_broker_available,
        )

    def change_topic_config(self, topic: str, configs: Mapping[str, str]) -> str:
        return self.configs.change_topic_config(topic, configs)

    def change_client_id_config(self, client_id: str, configs: Mapping[str, str]) -> str:
        return self.configs.change_client_id_config(client_id, configs)

    def delete_topic(self, topic: str) -> None:
        self.topics.delete_topic(topic)

    def fetch_topic_metadata(self, topic: str) -> TopicMetadataResult:
        return self.assembler.fetch_topic_metadata(topic)

    def fetch_topics_metadata(self, topics: Iterable[str]) -> List[TopicMetadataResult]:
        return self.assembler.fetch_topics_metadata(topics)
