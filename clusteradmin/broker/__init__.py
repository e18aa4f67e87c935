"""Broker registrations and lookups."""

from clusteradmin.broker.cache import BrokerInfoCache
from clusteradmin.broker.directory import BrokerDirectory
from clusteradmin.broker.metadata import (
    BrokerDescriptor,
    BrokerEndPoint,
    EndPoint,
    SecurityProtocol,
)

__all__ = [
    "BrokerDescriptor",
    "BrokerDirectory",
    "BrokerEndPoint",
    "BrokerInfoCache",
    "EndPoint",
    "SecurityProtocol",
]
