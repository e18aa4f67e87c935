"""Tests for the topic metadata store."""

import json
import random

import pytest

from clusteradmin.admin.topic_store import TopicMetadataStore
from clusteradmin.broker.directory import BrokerDirectory
from clusteradmin.broker.metadata import BrokerDescriptor, EndPoint, SecurityProtocol
from clusteradmin.coordination import paths
from clusteradmin.coordination.store import (
    CoordinationError,
    InMemoryCoordinationStore,
    NodeExistsError,
)
from clusteradmin.errors import (
    ErrorKind,
    InvalidArgumentError,
    InvalidConfigError,
    InvalidTopicError,
    NamingCollisionError,
    NotFoundError,
    OperationFailedError,
    ProtocolError,
    TopicAlreadyMarkedForDeletionError,
    TopicExistsError,
    ValidationError,
)


def register_brokers(store, broker_ids):
    directory = BrokerDirectory(store)
    for broker_id in broker_ids:
        directory.register_broker(BrokerDescriptor(
            broker_id=broker_id,
            endpoints={
                SecurityProtocol.PLAINTEXT: EndPoint(
                    f"broker{broker_id}", 9092, SecurityProtocol.PLAINTEXT,
                ),
            },
        ))


class FailingStore(InMemoryCoordinationStore):
    """Store whose writes to one path fail."""
    
    def __init__(self, failing_path, error):
        super().__init__()
        self.failing_path = failing_path
        self.error = error
    
    def create_persistent(self, path, data=None):
        if path == self.failing_path:
            raise self.error
        super().create_persistent(path, data)


class TestCreateTopic:
    """Test topic creation."""
    
    @pytest.fixture
    def store(self):
        """Create store with five brokers."""
        store = InMemoryCoordinationStore()
        register_brokers(store, [0, 1, 2, 3, 4])
        return store
    
    @pytest.fixture
    def topics(self, store):
        """Create topic metadata store."""
        return TopicMetadataStore(store, rng=random.Random(1))
    
    def test_create_topic(self, topics, store):
        """Test creating a topic writes assignment and config."""
        assignment = topics.create_topic("orders", 4, 2, {"retention.ms": "1000"})
        
        assert sorted(assignment) == [0, 1, 2, 3]
        assert all(len(r) == 2 for r in assignment.values())
        assert topics.topic_exists("orders")
        assert topics.get_replica_assignment("orders") == assignment
        assert topics.configs.fetch_entity_config(paths.ConfigType.TOPIC, "orders") == {
            "retention.ms": "1000",
        }
    
    def test_create_topic_writes_empty_config(self, topics, store):
        """Test creating a topic without overrides writes an empty config."""
        topics.create_topic("orders", 1, 1)
        
        raw = store.read_data(paths.entity_config_path(paths.ConfigType.TOPIC, "orders"))
        
        assert json.loads(raw) == {"version": 1, "config": {}}
    
    def test_create_existing_topic(self, topics):
        """Test second create of the same topic fails."""
        topics.create_topic("orders", 4, 2)
        
        with pytest.raises(TopicExistsError) as exc_info:
            topics.create_topic("orders", 4, 2)
        
        assert exc_info.value.kind == ErrorKind.ALREADY_EXISTS
    
    def test_naming_collision(self, topics):
        """Test names colliding after normalization are rejected."""
        topics.create_topic("orders.v1", 1, 1)
        
        with pytest.raises(NamingCollisionError, match="orders.v1") as exc_info:
            topics.create_topic("orders_v1", 1, 1)
        
        assert exc_info.value.kind == ErrorKind.NAMING_COLLISION
        assert not topics.topic_exists("orders_v1")
    
    @pytest.mark.parametrize("name", ["bad/name", "orders\n"])
    def test_invalid_topic_name(self, topics, name):
        """Test illegal names are rejected."""
        with pytest.raises(InvalidTopicError):
            topics.create_topic(name, 1, 1)
        
        assert topics.get_all_topics() == []
    
    def test_invalid_config(self, topics):
        """Test invalid config stops creation before anything is written."""
        with pytest.raises(InvalidConfigError):
            topics.create_topic("orders", 1, 1, {"retention.ms": "never"})
        
        assert not topics.topic_exists("orders")
    
    def test_replication_factor_too_large(self, topics):
        """Test replication factor above broker count is rejected."""
        with pytest.raises(InvalidArgumentError):
            topics.create_topic("orders", 1, 6)
    
    def test_get_all_topics(self, topics):
        """Test listing topics."""
        topics.create_topic("a", 1, 1)
        topics.create_topic("b", 1, 1)
        
        assert sorted(topics.get_all_topics()) == ["a", "b"]


class TestWritePath:
    """Test create_or_update_topic_partition_assignment_path."""
    
    @pytest.fixture
    def store(self):
        return InMemoryCoordinationStore()
    
    @pytest.fixture
    def topics(self, store):
        return TopicMetadataStore(store)
    
    def test_unequal_replica_counts(self, topics):
        """Test partitions must share one replica count."""
        with pytest.raises(ValidationError, match="same number of replicas"):
            topics.create_or_update_topic_partition_assignment_path("t", {0: [1, 2], 1: [1]})
    
    def test_duplicate_replicas(self, topics):
        """Test duplicate replicas are rejected."""
        with pytest.raises(ValidationError, match="Duplicate replica"):
            topics.create_or_update_topic_partition_assignment_path("t", {0: [1, 1]})
    
    def test_update_does_not_touch_config(self, topics, store):
        """Test updates leave the config record alone."""
        topics.create_or_update_topic_partition_assignment_path("t", {0: [1]}, config={"retention.ms": "5"})
        topics.create_or_update_topic_partition_assignment_path(
            "t", {0: [1], 1: [2]}, config={"retention.ms": "9"}, update=True,
        )
        
        assert topics.get_replica_assignment("t") == {0: [1], 1: [2]}
        assert topics.configs.fetch_entity_config(paths.ConfigType.TOPIC, "t") == {"retention.ms": "5"}
    
    def test_concurrent_create_translated(self):
        """Test a concurrent create surfacing as node-exists maps to TopicExistsError."""
        store = FailingStore(paths.topic_path("t"), NodeExistsError(paths.topic_path("t")))
        topics = TopicMetadataStore(store)
        
        with pytest.raises(TopicExistsError):
            topics.create_or_update_topic_partition_assignment_path("t", {0: [1]})
    
    def test_store_failure_wrapped(self):
        """Test other store failures are wrapped with their cause."""
        error = CoordinationError("connection lost")
        store = FailingStore(paths.topic_path("t"), error)
        topics = TopicMetadataStore(store)
        
        with pytest.raises(OperationFailedError) as exc_info:
            topics.create_or_update_topic_partition_assignment_path("t", {0: [1]})
        
        assert exc_info.value.cause is error
        assert exc_info.value.__cause__ is error
        assert exc_info.value.kind == ErrorKind.OPERATION_FAILED
    
    def test_config_written_before_assignment(self):
        """Test a failed assignment write leaves the config record behind."""
        store = FailingStore(paths.topic_path("t"), CoordinationError("crash"))
        topics = TopicMetadataStore(store)
        
        with pytest.raises(OperationFailedError):
            topics.create_or_update_topic_partition_assignment_path("t", {0: [1]}, config={"retention.ms": "5"})
        
        assert store.exists(paths.entity_config_path(paths.ConfigType.TOPIC, "t"))
        assert not store.exists(paths.topic_path("t"))
    
    def test_bad_record_version(self, topics, store):
        """Test assignment records with another version are rejected."""
        store.create_persistent(paths.topic_path("t"), json.dumps({"version": 2, "partitions": {}}))
        
        with pytest.raises(ProtocolError):
            topics.get_replica_assignment("t")


class TestAddPartitions:
    """Test partition expansion."""
    
    @pytest.fixture
    def store(self):
        store = InMemoryCoordinationStore()
        register_brokers(store, [0, 1, 2, 3, 4])
        return store
    
    @pytest.fixture
    def topics(self, store):
        return TopicMetadataStore(store, rng=random.Random(5))
    
    def test_add_partitions(self, topics):
        """Test growing a three partition topic to five."""
        original = topics.create_topic("orders", 3, 2)
        
        merged = topics.add_partitions("orders", 5)
        
        assert sorted(merged) == [0, 1, 2, 3, 4]
        for partition in (3, 4):
            assert len(merged[partition]) == 2
            assert len(set(merged[partition])) == 2
        for partition, replicas in original.items():
            assert merged[partition] == replicas
        assert topics.get_replica_assignment("orders") == merged
    
    def test_continues_rotation(self, topics):
        """Test new partitions use partition 0's leader as fixed start."""
        topics.create_or_update_topic_partition_assignment_path(
            "orders", {0: [2, 3], 1: [3, 4], 2: [4, 0]},
        )
        
        merged = topics.add_partitions("orders", 5)
        
        # start index 2 continues at partition 3 -> broker (3 + 2) % 5
        assert merged[3][0] == 0
        assert merged[4][0] == 1
    
    def test_add_partitions_manual(self, topics):
        """Test manual assignment for new partitions."""
        topics.create_or_update_topic_partition_assignment_path("orders", {0: [0, 1], 1: [1, 2]})
        
        merged = topics.add_partitions("orders", 3, "0:0:1,1:1:2,2:3:4")
        
        assert merged == {0: [0, 1], 1: [1, 2], 2: [3, 4]}
    
    def test_manual_replication_factor_mismatch(self, topics):
        """Test manual assignment must match existing replication factor."""
        topics.create_or_update_topic_partition_assignment_path("orders", {0: [0, 1]})
        
        with pytest.raises(ValidationError, match="replication factor"):
            topics.add_partitions("orders", 2, "1:0:1:2")
    
    def test_manual_wrong_partition_count(self, topics):
        """Test manual assignment must cover every new partition."""
        topics.create_or_update_topic_partition_assignment_path("orders", {0: [0, 1]})
        
        with pytest.raises(ValidationError, match="expected 2"):
            topics.add_partitions("orders", 3, "1:0:1")
    
    def test_missing_topic(self, topics):
        """Test expanding a missing topic fails."""
        with pytest.raises(NotFoundError) as exc_info:
            topics.add_partitions("missing", 3)
        
        assert exc_info.value.kind == ErrorKind.NOT_FOUND
    
    @pytest.mark.parametrize("requested", [2, 3])
    def test_partition_count_must_grow(self, topics, requested):
        """Test partition count can only increase."""
        topics.create_topic("orders", 3, 1)
        
        with pytest.raises(InvalidArgumentError, match="only be increased"):
            topics.add_partitions("orders", requested)


class TestDeleteTopic:
    """Test topic deletion markers."""
    
    def test_delete_topic(self):
        """Test deletion creates a marker."""
        store = InMemoryCoordinationStore()
        topics = TopicMetadataStore(store)
        
        topics.delete_topic("orders")
        
        assert store.exists(paths.delete_topic_path("orders"))
    
    def test_delete_twice(self):
        """Test second deletion reports the existing marker."""
        topics = TopicMetadataStore(InMemoryCoordinationStore())
        topics.delete_topic("orders")
        
        with pytest.raises(TopicAlreadyMarkedForDeletionError):
            topics.delete_topic("orders")
    
    def test_delete_store_failure(self):
        """Test store failures during deletion are wrapped."""
        store = FailingStore(paths.delete_topic_path("orders"), CoordinationError("down"))
        topics = TopicMetadataStore(store)
        
        with pytest.raises(OperationFailedError):
            topics.delete_topic("orders")
