"""Call-scoped broker descriptor cache used while assembling metadata."""

from typing import Dict, List, Optional, Sequence

from clusteradmin.broker.directory import BrokerDirectory
from clusteradmin.broker.metadata import BrokerDescriptor


class BrokerInfoCache:
    """
    Memoizes broker lookups for the duration of one metadata request.

    Owned by a single call and discarded when it returns; never shared
    between concurrent calls.
    """

    def __init__(self, directory: BrokerDirectory):
        self.directory = directory
        self._brokers: Dict[int, BrokerDescriptor] = {}
        self.lookups = 0

    def get(self, broker_id: int) -> Optional[BrokerDescriptor]:
        """
        Resolve one broker, reading the directory on first use.

        Unregistered brokers are not cached, so a later lookup in the same
        call tries the directory again.
        """
        broker = self._brokers.get(broker_id)
        if broker is not None:
            return broker

        self.lookups += 1
        broker = self.directory.get_broker_info(broker_id)
        if broker is not None:
            self._brokers[broker_id] = broker
        return broker

    def get_many(self, broker_ids: Sequence[int]) -> List[BrokerDescriptor]:
        """
        Resolve several brokers, preserving order.

        Returns:
            Descriptors of the brokers that resolved; unresolved ids are dropped
        """
        resolved = []
        for broker_id in broker_ids:
            broker = self.get(broker_id)
            if broker is not None:
                resolved.append(broker)
        return resolved

    def __contains__(self, broker_id: int) -> bool:
        return broker_id in self._brokers

    def __len__(self) -> int:
        return len(self._brokers)
