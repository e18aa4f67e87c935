"""
Replica placement across brokers.

There are two goals of replica assignment:
1. Spread the replicas evenly among brokers.
2. For partitions assigned to a particular broker, spread their other
   replicas over the other brokers.

To achieve this:
1. Assign the first replica of each partition by round-robin, starting
   from a random position in the broker list.
2. Assign the remaining replicas of each partition with an increasing shift.

Example with 5 brokers, 10 partitions, replication factor 3:

    broker-0  broker-1  broker-2  broker-3  broker-4
    p0        p1        p2        p3        p4       (1st replica)
    p5        p6        p7        p8        p9       (1st replica)
    p4        p0        p1        p2        p3       (2nd replica)
    p8        p9        p5        p6        p7       (2nd replica)
    p3        p4        p0        p1        p2       (3rd replica)
    p7        p8        p9        p5        p6       (3rd replica)
"""

import random
from typing import Dict, List, Optional, Sequence

from clusteradmin.errors import InvalidArgumentError

_default_rng = random.Random()


def replica_index(
    first_replica_index: int,
    replica_shift: int,
    replica_number: int,
    n_brokers: int,
) -> int:
    """Index of the ``replica_number``-th follower (0-based) of a partition."""
    shift = 1 + (replica_shift + replica_number) % (n_brokers - 1)
    return (first_replica_index + shift) % n_brokers


def assign_replicas_to_brokers(
    broker_list: Sequence[int],
    n_partitions: int,
    replication_factor: int,
    fixed_start_index: int = -1,
    start_partition_id: int = -1,
    rng: Optional[random.Random] = None,
) -> Dict[int, List[int]]:
    """
    Compute partition to replica list assignment.

    Args:
        broker_list: Available broker ids; order defines the rotation
        n_partitions: Number of partitions to place
        replication_factor: Replicas per partition
        fixed_start_index: Start position in the broker list; negative
            draws one from ``rng``
        start_partition_id: First partition id; negative means 0
        rng: Random source used when no fixed start index is given

    Returns:
        Map of partition id to ordered replica list (index 0 is the
        preferred leader)

    Raises:
        InvalidArgumentError: If n_partitions or replication_factor is not
            positive, or replication_factor exceeds the number of brokers
    """
    if n_partitions <= 0:
        raise InvalidArgumentError("number of partitions must be larger than 0")
    if replication_factor <= 0:
        raise InvalidArgumentError("replication factor must be larger than 0")
    if replication_factor > len(broker_list):
        raise InvalidArgumentError(
            f"replication factor: {replication_factor} larger than available "
            f"brokers: {len(broker_list)}"
        )

    rng = rng or _default_rng
    n_brokers = len(broker_list)

    if fixed_start_index >= 0:
        start_index = fixed_start_index
        next_replica_shift = fixed_start_index
    else:
        start_index = rng.randrange(n_brokers)
        next_replica_shift = rng.randrange(n_brokers)

    current_partition_id = max(start_partition_id, 0)
    assignment: Dict[int, List[int]] = {}

    for _ in range(n_partitions):
        if current_partition_id > 0 and current_partition_id % n_brokers == 0:
            next_replica_shift += 1

        first_replica_index = (current_partition_id + start_index) % n_brokers
        replicas = [broker_list[first_replica_index]]
        for j in range(replication_factor - 1):
            replicas.append(
                broker_list[replica_index(first_replica_index, next_replica_shift, j, n_brokers)]
            )

        assignment[current_partition_id] = replicas
        current_partition_id += 1

    return assignment
