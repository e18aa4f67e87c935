"""
Topic metadata store.

Creates topics, extends them with partitions and reads their assignment
records through the coordination store. Concurrent writers are kept
apart by the store's create-if-absent semantics; nothing here locks.
"""

import random
from typing import Dict, List, Mapping, Optional, Sequence

from clusteradmin.admin import topic as topic_rules
from clusteradmin.admin.config_change import ConfigChangeNotifier
from clusteradmin.admin.log_config import LogConfig
from clusteradmin.admin.manual import parse_replica_assignment
from clusteradmin.admin.placement import assign_replicas_to_brokers
from clusteradmin.broker.directory import BrokerDirectory
from clusteradmin.coordination import paths, records
from clusteradmin.coordination.paths import ConfigType
from clusteradmin.coordination.store import CoordinationError, CoordinationStore, NodeExistsError
from clusteradmin.errors import (
    InvalidArgumentError,
    NamingCollisionError,
    NotFoundError,
    OperationFailedError,
    TopicAlreadyMarkedForDeletionError,
    TopicExistsError,
    ValidationError,
)
from clusteradmin.utils.logging import get_logger

logger = get_logger(__name__)


class TopicMetadataStore:
    """
    Transactional facade over topic records in the coordination store.

    A topic is two records: its configuration under
    ``/config/topics/<topic>`` and its partition assignment under
    ``/brokers/topics/<topic>``. They are written in that order and not
    atomically; a crash between the two writes leaves a config record
    without a topic, which a later create overwrites.
    """

    def __init__(
        self,
        store: CoordinationStore,
        directory: Optional[BrokerDirectory] = None,
        rng: Optional[random.Random] = None,
    ):
        """
        Initialize topic metadata store.

        Args:
            store: Coordination store client
            directory: Broker directory; defaults to one over ``store``
            rng: Random source for replica placement
        """
        self.store = store
        self.directory = directory or BrokerDirectory(store)
        self.configs = ConfigChangeNotifier(store)
        self.rng = rng

    def topic_exists(self, topic: str) -> bool:
        return self.store.exists(paths.topic_path(topic))

    def get_all_topics(self) -> List[str]:
        return self.store.get_children(paths.BROKER_TOPICS_PATH)

    def get_replica_assignment(self, topic: str) -> Dict[int, List[int]]:
        """
        Read a topic's partition assignment.

        Returns:
            Partition id to replica list; empty if the topic does not exist

        Raises:
            ProtocolError: If the stored record is malformed
        """
        raw = self.store.read_data(paths.topic_path(topic))
        if raw is None:
            return {}
        return records.decode_replica_assignment(raw)

    def create_topic(
        self,
        topic: str,
        partitions: int,
        replication_factor: int,
        topic_config: Optional[Mapping[str, str]] = None,
    ) -> Dict[int, List[int]]:
        """
        Create a topic with automatic replica placement.

        Args:
            topic: Topic name
            partitions: Number of partitions
            replication_factor: Replicas per partition
            topic_config: Topic configuration overrides

        Returns:
            The written partition assignment
        """
        broker_list = self.directory.get_sorted_broker_list()
        assignment = assign_replicas_to_brokers(
            broker_list,
            partitions,
            replication_factor,
            rng=self.rng,
        )
        self.create_or_update_topic_partition_assignment_path(
            topic,
            assignment,
            config=topic_config,
        )
        return assignment

    def add_partitions(
        self,
        topic: str,
        num_partitions: int = 1,
        replica_assignment_str: str = "",
        check_broker_available: bool = True,
    ) -> Dict[int, List[int]]:
        """
        Add partitions to an existing topic.

        Automatic placement continues the existing rotation: the preferred
        leader of partition 0 is used as the fixed start index, and ids
        continue after the existing partitions.

        Args:
            topic: Topic name
            num_partitions: New total number of partitions
            replica_assignment_str: Manual assignment for the new partitions
            check_broker_available: Reject unregistered brokers in a manual
                assignment; only disabled by tests

        Returns:
            The merged partition assignment

        Raises:
            NotFoundError: If the topic does not exist
            InvalidArgumentError: If the partition count would not grow
            ValidationError: If new partitions have a different replication factor
        """
        existing = self.get_replica_assignment(topic)
        if not existing:
            raise NotFoundError(f"The topic {topic} does not exist")

        partitions_to_add = num_partitions - len(existing)
        if partitions_to_add <= 0:
            raise InvalidArgumentError("The number of partitions for a topic can only be increased")

        existing_replicas = existing[min(existing)]
        replication_factor = len(existing_replicas)

        broker_list = self.directory.get_sorted_broker_list()
        if not replica_assignment_str:
            new_assignment = assign_replicas_to_brokers(
                broker_list,
                partitions_to_add,
                replication_factor,
                fixed_start_index=existing_replicas[0],
                start_partition_id=len(existing),
                rng=self.rng,
            )
        else:
            new_assignment = parse_replica_assignment(
                replica_assignment_str,
                set(broker_list),
                start_partition_id=len(existing),
                check_broker_available=check_broker_available,
            )
            if len(new_assignment) != partitions_to_add:
                raise ValidationError(
                    f"Manual replica assignment covers {len(new_assignment)} new "
                    f"partitions, expected {partitions_to_add}"
                )

        unmatched = [p for p, replicas in new_assignment.items() if len(replicas) != replication_factor]
        if unmatched:
            raise ValidationError(
                f"The replication factor of partitions {sorted(unmatched)} is not equal "
                f"to the existing replication factor for the topic {replication_factor}"
            )

        logger.info("Add partition list", topic=topic, assignment=new_assignment)

        merged = dict(existing)
        merged.update(new_assignment)
        self.create_or_update_topic_partition_assignment_path(topic, merged, update=True)
        return merged

    def create_or_update_topic_partition_assignment_path(
        self,
        topic: str,
        partition_replica_assignment: Mapping[int, Sequence[int]],
        config: Optional[Mapping[str, str]] = None,
        update: bool = False,
    ) -> None:
        """
        Validate and write a topic's assignment, and its config on create.

        Args:
            topic: Topic name
            partition_replica_assignment: Partition id to replica list
            config: Topic configuration; only written when creating
            update: Overwrite an existing topic instead of creating one

        Raises:
            InvalidTopicError: If the name is illegal
            ValidationError: If replica counts differ or a list has duplicates
            TopicExistsError: If creating a topic that already exists
            NamingCollisionError: If the name collides with an existing topic
            InvalidConfigError: If the config fails schema validation
            OperationFailedError: On any other store failure
        """
        topic_rules.validate(topic)

        replica_counts = {len(r) for r in partition_replica_assignment.values()}
        if len(replica_counts) != 1:
            raise ValidationError("All partitions should have the same number of replicas.")

        if not update:
            if self.topic_exists(topic):
                raise TopicExistsError(f"Topic \"{topic}\" already exists.")
            if topic_rules.has_collision_chars(topic):
                colliding = [
                    t for t in self.get_all_topics()
                    if t != topic and topic_rules.has_collision(topic, t)
                ]
                if colliding:
                    raise NamingCollisionError(
                        f"Topic \"{topic}\" collides with existing topics: {', '.join(colliding)}"
                    )

        for replicas in partition_replica_assignment.values():
            if len(replicas) != len(set(replicas)):
                raise ValidationError(
                    f"Duplicate replica assignment found: {dict(partition_replica_assignment)}"
                )

        # Configs are only written on create; alter goes through change_topic_config
        if not update:
            config = dict(config or {})
            LogConfig.validate(config)
            self.configs.write_entity_config(ConfigType.TOPIC, topic, config)

        self._write_topic_partition_assignment(topic, partition_replica_assignment, update)

    def _write_topic_partition_assignment(
        self,
        topic: str,
        assignment: Mapping[int, Sequence[int]],
        update: bool,
    ) -> None:
        path = paths.topic_path(topic)
        data = records.encode_replica_assignment(assignment)
        try:
            if not update:
                logger.info("Topic creation", topic=topic, assignment=data)
                self.store.create_persistent(path, data)
            else:
                logger.info("Topic update", topic=topic, assignment=data)
                self.store.update_persistent(path, data)
        except NodeExistsError as e:
            raise TopicExistsError(f"topic {topic} already exists") from e
        except CoordinationError as e:
            raise OperationFailedError(str(e), cause=e) from e

        logger.debug("Updated path for replica assignment", path=path, data=data)

    def delete_topic(self, topic: str) -> None:
        """
        Mark a topic for deletion.

        Raises:
            TopicAlreadyMarkedForDeletionError: If a marker already exists
            OperationFailedError: On any other store failure
        """
        try:
            self.store.create_persistent(paths.delete_topic_path(topic))
        except NodeExistsError as e:
            raise TopicAlreadyMarkedForDeletionError(
                f"topic {topic} is already marked for deletion"
            ) from e
        except CoordinationError as e:
            raise OperationFailedError(str(e), cause=e) from e

        logger.info("Topic marked for deletion", topic=topic)
