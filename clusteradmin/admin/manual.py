"""
Parsing of user-supplied replica assignments.

Format: comma-separated groups, one per partition, each a colon-separated
list whose first token is the partition id and whose remaining tokens are
the replica broker ids, preferred leader first::

    0:1:2,1:3:4   ->   {0: [1, 2], 1: [3, 4]}
"""

from typing import AbstractSet, Dict, List

from clusteradmin.errors import ValidationError


def _parse_int(token: str, what: str) -> int:
    try:
        return int(token.strip())
    except ValueError as e:
        raise ValidationError(f"Invalid {what} {token!r} in replica assignment") from e


def parse_replica_assignment(
    replica_assignment: str,
    available_brokers: AbstractSet[int],
    start_partition_id: int = 0,
    check_broker_available: bool = True,
) -> Dict[int, List[int]]:
    """
    Parse a manual replica assignment.

    Groups for partitions below ``start_partition_id`` describe existing
    partitions and are skipped; the rest must cover a contiguous range of
    ids starting at ``start_partition_id``.

    Args:
        replica_assignment: Assignment string
        available_brokers: Currently registered broker ids
        start_partition_id: First partition id to produce
        check_broker_available: Reject brokers outside ``available_brokers``;
            only disabled by tests

    Returns:
        Map of partition id to replica list

    Raises:
        ValidationError: On malformed input, an empty or duplicate replica
            list, an unavailable broker, a gap in partition ids, or a
            replication factor differing from the first parsed partition
    """
    assignment: Dict[int, List[int]] = {}
    expected_partition = start_partition_id
    replication_factor = None

    for group in replica_assignment.split(","):
        if not group.strip():
            raise ValidationError("Empty partition entry in replica assignment")

        tokens = group.split(":")
        partition = _parse_int(tokens[0], "partition id")
        if partition < start_partition_id:
            continue

        if partition != expected_partition:
            raise ValidationError(
                f"partition {partition} is out of order in replica assignment, "
                f"expected partition {expected_partition}"
            )

        if len(tokens) > 1 and not all(t.strip() for t in tokens[1:]):
            raise ValidationError(f"partition {partition}: empty broker id in replica assignment")
        brokers = [_parse_int(t, "broker id") for t in tokens[1:]]
        if not brokers:
            raise ValidationError(
                f"partition {partition}: replication factor must be larger than 0"
            )
        if len(brokers) != len(set(brokers)):
            raise ValidationError(
                f"partition {partition}: duplicate brokers in replica assignment: {brokers}"
            )
        if check_broker_available and not set(brokers) <= set(available_brokers):
            raise ValidationError(
                f"partition {partition}: some specified brokers not available. "
                f"specified brokers: {brokers}, available brokers: {sorted(available_brokers)}"
            )

        if replication_factor is None:
            replication_factor = len(brokers)
        elif len(brokers) != replication_factor:
            raise ValidationError(
                f"partition {partition} has different replication factor: {brokers}"
            )

        assignment[partition] = brokers
        expected_partition += 1

    return assignment
