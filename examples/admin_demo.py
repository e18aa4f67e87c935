#!/usr/bin/env python3
"""
Demo of topic administration against an in-memory coordination store.

Registers a few brokers, creates a topic, grows it, changes its config
and prints the resulting metadata.
"""

from clusteradmin.admin.service import AdminService
from clusteradmin.broker.metadata import BrokerDescriptor, EndPoint, SecurityProtocol
from clusteradmin.coordination import paths, records
from clusteradmin.coordination.store import InMemoryCoordinationStore
from clusteradmin.errors import AdminError
from clusteradmin.utils.config import get_config
from clusteradmin.utils.logging import configure_logging


def main():
    config = get_config()
    configure_logging(
        log_level=config.get("logging.level", "INFO"),
        log_format="console",
    )
    
    print("=" * 60)
    print("clusteradmin - Topic Administration Demo")
    print("=" * 60)
    
    store = InMemoryCoordinationStore()
    service = AdminService(store, config=config)
    
    print("\n[1] Registering brokers 0-4...")
    for broker_id in range(5):
        service.directory.register_broker(BrokerDescriptor(
            broker_id,
            {SecurityProtocol.PLAINTEXT: EndPoint(f"broker{broker_id}", 9092, SecurityProtocol.PLAINTEXT)},
        ))
    
    print("\n[2] Creating topic 'orders' (3 partitions, replication factor 2)...")
    assignment = service.create_topic("orders", 3, 2, {"retention.ms": "86400000"})
    for partition, replicas in sorted(assignment.items()):
        print(f"  partition {partition}: {replicas}")
    
    print("\n[3] Creating 'orders' again...")
    try:
        service.create_topic("orders", 3, 2)
    except AdminError as e:
        print(f"  rejected ({e.kind.value}): {e}")
    
    print("\n[4] Growing 'orders' to 5 partitions...")
    assignment = service.add_partitions("orders", 5)
    for partition, replicas in sorted(assignment.items()):
        print(f"  partition {partition}: {replicas}")
    
    # brokers elect leaders themselves; fake it for all but the last partition
    for partition, replicas in sorted(assignment.items())[:-1]:
        store.create_persistent(
            paths.partition_state_path("orders", partition),
            records.encode_partition_state(replicas[0], replicas),
        )
    
    print("\n[5] Changing config...")
    event = service.change_topic_config("orders", {"cleanup.policy": "compact"})
    print(f"  notification: {event}")
    
    print("\n[6] Metadata:")
    for result in service.fetch_topics_metadata(["orders", "missing"]):
        print(f"  {result.topic}: {result.error_code.name}")
        for p in result.partitions:
            leader = p.leader.connection_string() if p.leader else "-"
            print(f"    partition {p.partition_id}: leader={leader} "
                  f"replicas={[r.broker_id for r in p.replicas]} error={p.error_code.name}")


if __name__ == "__main__":
    main()
