"""
Topic metadata assembly.

Builds the client-visible view of one or more topics: per partition the
leader endpoint, replica endpoints, in-sync replica endpoints and an
error code. Lookup problems never abort the request; they are reported
as error codes on the affected topic or partition.
"""

from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Sequence

from clusteradmin.broker.cache import BrokerInfoCache
from clusteradmin.broker.directory import BrokerDirectory
from clusteradmin.broker.metadata import BrokerEndPoint, SecurityProtocol
from clusteradmin.coordination import paths, records
from clusteradmin.coordination.store import CoordinationStore
from clusteradmin.errors import AdminError, ErrorCode
from clusteradmin.utils.logging import get_logger

logger = get_logger(__name__)


@dataclass
class PartitionMetadata:
    """
    Metadata of one partition as reported to clients.

    Attributes:
        partition_id: Partition number
        leader: Leader endpoint, None when unavailable
        replicas: Endpoints of replicas that resolved
        isr: Endpoints of in-sync replicas that resolved
        error_code: NONE, LEADER_NOT_AVAILABLE or REPLICA_NOT_AVAILABLE
    """
    partition_id: int
    leader: Optional[BrokerEndPoint] = None
    replicas: List[BrokerEndPoint] = field(default_factory=list)
    isr: List[BrokerEndPoint] = field(default_factory=list)
    error_code: ErrorCode = ErrorCode.NONE


@dataclass
class TopicMetadataResult:
    """
    Metadata of one topic.

    Attributes:
        topic: Topic name
        partitions: Partition metadata in ascending partition order
        error_code: NONE or UNKNOWN_TOPIC_OR_PARTITION
    """
    topic: str
    partitions: List[PartitionMetadata] = field(default_factory=list)
    error_code: ErrorCode = ErrorCode.NONE


class _PartitionUnavailable(Exception):
    def __init__(self, error_code: ErrorCode, message: str):
        super().__init__(message)
        self.error_code = error_code


class TopicMetadataAssembler:
    """Reads topic metadata from the coordination store."""

    def __init__(
        self,
        store: CoordinationStore,
        directory: Optional[BrokerDirectory] = None,
        protocol: SecurityProtocol = SecurityProtocol.PLAINTEXT,
    ):
        """
        Initialize metadata assembler.

        Args:
            store: Coordination store client
            directory: Broker directory; defaults to one over ``store``
            protocol: Security protocol whose endpoints are reported
        """
        self.store = store
        self.directory = directory or BrokerDirectory(store)
        self.protocol = SecurityProtocol(protocol)

    def fetch_topic_metadata(self, topic: str) -> TopicMetadataResult:
        return self._fetch(topic, BrokerInfoCache(self.directory))

    def fetch_topics_metadata(self, topics: Iterable[str]) -> List[TopicMetadataResult]:
        """
        Fetch metadata for several topics sharing one broker cache.

        Returns:
            One result per distinct topic, in the order given
        """
        cache = BrokerInfoCache(self.directory)
        return [self._fetch(topic, cache) for topic in dict.fromkeys(topics)]

    def _fetch(self, topic: str, cache: BrokerInfoCache) -> TopicMetadataResult:
        raw = self.store.read_data(paths.topic_path(topic))
        if raw is None:
            return TopicMetadataResult(
                topic=topic,
                error_code=ErrorCode.UNKNOWN_TOPIC_OR_PARTITION,
            )

        assignment = records.decode_replica_assignment(raw)
        partitions = [
            self._fetch_partition(topic, partition, assignment[partition], cache)
            for partition in sorted(assignment)
        ]
        return TopicMetadataResult(topic=topic, partitions=partitions)

    def _read_partition_state(self, topic: str, partition: int):
        raw = self.store.read_data(paths.partition_state_path(topic, partition))
        if raw is None:
            return None, []
        return records.decode_partition_state(raw)

    def _endpoints(self, cache: BrokerInfoCache, broker_ids: Sequence[int]) -> List[BrokerEndPoint]:
        return [b.get_broker_endpoint(self.protocol) for b in cache.get_many(broker_ids)]

    def _fetch_partition(
        self,
        topic: str,
        partition: int,
        replicas: Sequence[int],
        cache: BrokerInfoCache,
    ) -> PartitionMetadata:
        metadata = PartitionMetadata(partition_id=partition)
        try:
            leader, isr = self._read_partition_state(topic, partition)
            logger.debug(
                "Partition state",
                topic=topic,
                partition=partition,
                replicas=list(replicas),
                isr=isr,
                leader=leader,
            )

            try:
                metadata.replicas = self._endpoints(cache, replicas)
                metadata.isr = self._endpoints(cache, isr)
            except AdminError as e:
                raise _PartitionUnavailable(ErrorCode.REPLICA_NOT_AVAILABLE, str(e)) from e

            if leader is None:
                raise _PartitionUnavailable(
                    ErrorCode.LEADER_NOT_AVAILABLE,
                    f"No leader exists for partition {partition}",
                )
            leader_broker = cache.get(leader)
            if leader_broker is None:
                raise _PartitionUnavailable(
                    ErrorCode.LEADER_NOT_AVAILABLE,
                    f"Leader {leader} not available for partition [{topic},{partition}]",
                )
            try:
                metadata.leader = leader_broker.get_broker_endpoint(self.protocol)
            except AdminError as e:
                raise _PartitionUnavailable(ErrorCode.LEADER_NOT_AVAILABLE, str(e)) from e

            resolved = {ep.broker_id for ep in metadata.replicas}
            if len(metadata.replicas) < len(replicas):
                raise _PartitionUnavailable(
                    ErrorCode.REPLICA_NOT_AVAILABLE,
                    "Replica information not available for following brokers: "
                    + ",".join(str(b) for b in replicas if b not in resolved),
                )
            resolved = {ep.broker_id for ep in metadata.isr}
            if len(metadata.isr) < len(isr):
                raise _PartitionUnavailable(
                    ErrorCode.REPLICA_NOT_AVAILABLE,
                    "In Sync Replica information not available for following brokers: "
                    + ",".join(str(b) for b in isr if b not in resolved),
                )
        except _PartitionUnavailable as e:
            logger.debug(
                "Error while fetching metadata for partition",
                topic=topic,
                partition=partition,
                error=str(e),
            )
            metadata.error_code = e.error_code
        except AdminError as e:
            # malformed state record or registration
            logger.debug(
                "Error while fetching metadata for partition",
                topic=topic,
                partition=partition,
                error=str(e),
            )
            metadata.error_code = ErrorCode.LEADER_NOT_AVAILABLE

        return metadata
