"""Tests for stored record encoding."""

import json

import pytest

from clusteradmin.coordination import records
from clusteradmin.errors import ErrorKind, ProtocolError


class TestReplicaAssignmentRecord:
    """Test partition assignment records."""
    
    def test_string_keys(self):
        """Test partition ids are stored as string keys."""
        raw = records.encode_replica_assignment({0: [1, 2], 1: [2, 3]})
        
        assert json.loads(raw) == {"version": 1, "partitions": {"0": [1, 2], "1": [2, 3]}}
        assert records.decode_replica_assignment(raw) == {0: [1, 2], 1: [2, 3]}
    
    @pytest.mark.parametrize("raw", [
        json.dumps({"version": 2, "partitions": {}}),
        json.dumps({"version": 1}),
        json.dumps({"version": 1, "partitions": {"x": [1]}}),
        json.dumps([1]),
    ])
    def test_invalid(self, raw):
        """Test malformed assignment records."""
        with pytest.raises(ProtocolError) as exc_info:
            records.decode_replica_assignment(raw)
        
        assert exc_info.value.kind == ErrorKind.PROTOCOL


class TestEntityConfigRecord:
    """Test entity config records."""
    
    def test_stable_bytes(self):
        """Test key order does not change the encoding."""
        first = records.encode_entity_config({"a": "1", "b": "2"})
        second = records.encode_entity_config({"b": "2", "a": "1"})
        
        assert first == second
        assert records.decode_entity_config(first, "topics") == {"a": "1", "b": "2"}


class TestConfigChangeRecord:
    """Test config change events."""
    
    def test_encode(self):
        """Test event fields."""
        raw = records.encode_config_change("clients", "c1")
        
        assert json.loads(raw) == {"version": 1, "entity_type": "clients", "entity_name": "c1"}
        assert records.decode_config_change(raw) == ("clients", "c1")
    
    def test_incomplete(self):
        """Test events missing a field."""
        with pytest.raises(ProtocolError):
            records.decode_config_change(json.dumps({"version": 1, "entity_type": "topics"}))


class TestPartitionStateRecord:
    """Test partition state records."""
    
    def test_leader_and_isr(self):
        """Test leader and ISR decoding."""
        raw = records.encode_partition_state(2, [2, 3], leader_epoch=4, controller_epoch=1)
        
        assert records.decode_partition_state(raw) == (2, [2, 3])
    
    def test_no_leader(self):
        """Test leader -1 decodes as None."""
        raw = records.encode_partition_state(-1, [])
        
        assert records.decode_partition_state(raw) == (None, [])
    
    @pytest.mark.parametrize("state", [
        {"version": 1, "leader": 1, "isr": ["x"]},
        {"version": 1, "leader": 1, "isr": [None]},
        {"version": 1, "leader": True, "isr": [1]},
    ])
    def test_invalid_state(self, state):
        """Test malformed leader or ISR entries."""
        with pytest.raises(ProtocolError):
            records.decode_partition_state(json.dumps(state))


class TestRecordVersion:
    """Test the version field check shared by all records."""
    
    @pytest.mark.parametrize("version", [True, 1.0, "1", None])
    def test_version_must_be_integer_one(self, version):
        """Test values equal to 1 but not the integer 1 are rejected."""
        raw = json.dumps({"version": version, "config": {}})
        
        with pytest.raises(ProtocolError, match="Unsupported"):
            records.decode_entity_config(raw, "topics")
