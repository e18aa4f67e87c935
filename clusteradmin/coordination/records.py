"""
Encoding of records kept in the coordination store.

Records are versioned JSON documents written as the node payload:

- partition assignment: {"version": 1, "partitions": {"0": [1, 2], ...}}
- entity config:        {"version": 1, "config": {"retention.ms": "1000"}}
- config change event:  {"version": 1, "entity_type": "topics", "entity_name": "orders"}
- partition state:      {"version": 1, "leader": 1, "leader_epoch": 0,
                         "controller_epoch": 1, "isr": [1, 2]}

Keys are serialized sorted so identical content yields identical bytes.
"""

import json
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

from clusteradmin.errors import ProtocolError


RECORD_VERSION = 1


def _encode(data: Dict[str, Any]) -> str:
    return json.dumps(data, sort_keys=True, separators=(",", ":"))


def _decode(raw: str, what: str) -> Dict[str, Any]:
    try:
        data = json.loads(raw)
    except ValueError as e:
        raise ProtocolError(f"Malformed {what} record: {raw!r}") from e

    if not isinstance(data, dict):
        raise ProtocolError(f"Unexpected {what} record: {raw!r}")

    version = data.get("version")
    # bool is an int subclass, and 1.0 == 1
    if type(version) is not int or version != RECORD_VERSION:
        raise ProtocolError(
            f"Unsupported {what} record version {version!r}, "
            f"expected {RECORD_VERSION}"
        )
    return data


def encode_replica_assignment(assignment: Mapping[int, Sequence[int]]) -> str:
    return _encode({
        "version": RECORD_VERSION,
        "partitions": {str(p): list(replicas) for p, replicas in assignment.items()},
    })


def decode_replica_assignment(raw: str) -> Dict[int, List[int]]:
    """
    Decode a topic's partition assignment record.

    Raises:
        ProtocolError: If the record is malformed or not version 1
    """
    data = _decode(raw, "partition assignment")
    partitions = data.get("partitions")
    if not isinstance(partitions, dict):
        raise ProtocolError(f"Partition assignment record has no partitions: {raw!r}")

    try:
        return {
            int(partition): [int(b) for b in replicas]
            for partition, replicas in partitions.items()
        }
    except (TypeError, ValueError) as e:
        raise ProtocolError(f"Invalid partition assignment record: {raw!r}") from e


def encode_entity_config(config: Mapping[str, str]) -> str:
    return _encode({"version": RECORD_VERSION, "config": dict(config)})


def decode_entity_config(raw: str, entity_type: str) -> Dict[str, str]:
    data = _decode(raw, f"{entity_type} config")
    config = data.get("config")
    if not isinstance(config, dict):
        raise ProtocolError(f"Invalid {entity_type} config: {raw!r}")

    for key, value in config.items():
        if not isinstance(value, str):
            raise ProtocolError(
                f"Invalid {entity_type} config value for {key!r}: {raw!r}"
            )
    return dict(config)


def encode_config_change(entity_type: str, entity_name: str) -> str:
    return _encode({
        "version": RECORD_VERSION,
        "entity_type": entity_type,
        "entity_name": entity_name,
    })


def decode_config_change(raw: str) -> Tuple[str, str]:
    data = _decode(raw, "config change")
    try:
        return data["entity_type"], data["entity_name"]
    except KeyError as e:
        raise ProtocolError(f"Incomplete config change record: {raw!r}") from e


def encode_partition_state(
    leader: int,
    isr: Sequence[int],
    leader_epoch: int = 0,
    controller_epoch: int = 0,
) -> str:
    return _encode({
        "version": RECORD_VERSION,
        "leader": leader,
        "leader_epoch": leader_epoch,
        "controller_epoch": controller_epoch,
        "isr": list(isr),
    })


def decode_partition_state(raw: str) -> Tuple[Optional[int], List[int]]:
    """
    Decode a partition state record.

    Returns:
        (leader, isr); leader is None when the record names no leader (-1)
    """
    data = _decode(raw, "partition state")
    leader = data.get("leader", -1)
    isr = data.get("isr", [])
    if type(leader) is not int or not isinstance(isr, list):
        raise ProtocolError(f"Invalid partition state record: {raw!r}")

    try:
        in_sync = [int(b) for b in isr]
    except (TypeError, ValueError) as e:
        raise ProtocolError(f"Invalid partition state record: {raw!r}") from e
    return (leader if leader >= 0 else None), in_sync
