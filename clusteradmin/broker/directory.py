"""
Broker directory backed by the coordination store.

Read-only view of broker registrations used by the admin core:
look up a broker by id and list the registered broker ids.
"""

from typing import List, Optional

from clusteradmin.broker.metadata import BrokerDescriptor
from clusteradmin.coordination import paths
from clusteradmin.coordination.store import CoordinationStore
from clusteradmin.utils.logging import get_logger

logger = get_logger(__name__)


class BrokerDirectory:
    """Lookup of registered brokers."""

    def __init__(self, store: CoordinationStore):
        self.store = store

    def get_broker_info(self, broker_id: int) -> Optional[BrokerDescriptor]:
        """
        Get broker descriptor.

        Args:
            broker_id: Broker ID

        Returns:
            Broker descriptor or None if the broker is not registered
        """
        raw = self.store.read_data(paths.broker_path(broker_id))
        if raw is None:
            return None
        return BrokerDescriptor.from_json(broker_id, raw)

    def get_sorted_broker_list(self) -> List[int]:
        """
        List registered broker ids in ascending order.

        Returns:
            Sorted broker ids
        """
        return sorted(int(b) for b in self.store.get_children(paths.BROKER_IDS_PATH))

    def register_broker(self, descriptor: BrokerDescriptor) -> None:
        """
        Write a broker registration.

        Brokers do this themselves at startup; exposed for tooling and tests.
        """
        self.store.create_persistent(
            paths.broker_path(descriptor.broker_id),
            descriptor.to_json(),
        )

        logger.info(
            "Broker registered",
            broker_id=descriptor.broker_id,
            endpoints=[ep.connection_string() for ep in descriptor.endpoints.values()],
        )
