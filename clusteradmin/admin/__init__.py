"""Topic administration: placement, topic records, config changes and metadata reads."""

from clusteradmin.admin.config_change import ConfigChangeNotifier
from clusteradmin.admin.consumer_groups import ConsumerGroupCleaner
from clusteradmin.admin.log_config import LogConfig
from clusteradmin.admin.manual import parse_replica_assignment
from clusteradmin.admin.metadata_assembler import (
    PartitionMetadata,
    TopicMetadataAssembler,
    TopicMetadataResult,
)
from clusteradmin.admin.placement import assign_replicas_to_brokers
from clusteradmin.admin.service import AdminService
from clusteradmin.admin.topic_store import TopicMetadataStore

__all__ = [
    "AdminService",
    "ConfigChangeNotifier",
    "ConsumerGroupCleaner",
    "LogConfig",
    "PartitionMetadata",
    "TopicMetadataAssembler",
    "TopicMetadataResult",
    "TopicMetadataStore",
    "assign_replicas_to_brokers",
    "parse_replica_assignment",
]
