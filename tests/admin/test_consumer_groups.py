"""Tests for consumer group cleanup."""

import pytest

from clusteradmin.admin.consumer_groups import ConsumerGroupCleaner
from clusteradmin.coordination.store import InMemoryCoordinationStore


class TestConsumerGroupCleaner:
    """Test ConsumerGroupCleaner."""
    
    @pytest.fixture
    def store(self):
        store = InMemoryCoordinationStore()
        # group-a consumes orders and payments, group-b only orders
        for group, topics in (("group-a", ["orders", "payments"]), ("group-b", ["orders"])):
            for topic in topics:
                store.create_persistent(f"/consumers/{group}/owners/{topic}/0", "c1")
                store.create_persistent(f"/consumers/{group}/offsets/{topic}/0", "42")
        return store
    
    @pytest.fixture
    def cleaner(self, store):
        return ConsumerGroupCleaner(store)
    
    def test_inactive_group(self, cleaner):
        """Test group without members is inactive."""
        assert not cleaner.is_consumer_group_active("group-a")
    
    def test_active_group(self, cleaner, store):
        """Test group with members is active."""
        store.create_persistent("/consumers/group-a/ids/c1", "{}")
        
        assert cleaner.is_consumer_group_active("group-a")
        assert not cleaner.delete_consumer_group("group-a")
        assert store.exists("/consumers/group-a")
    
    def test_delete_group(self, cleaner, store):
        """Test deleting an inactive group."""
        assert cleaner.delete_consumer_group("group-b")
        assert not store.exists("/consumers/group-b")
    
    def test_delete_info_for_topic(self, cleaner, store):
        """Test deleting one topic's state from a multi-topic group."""
        assert cleaner.delete_consumer_group_info_for_topic("group-a", "orders")
        
        assert not store.exists("/consumers/group-a/owners/orders")
        assert not store.exists("/consumers/group-a/offsets/orders")
        assert store.exists("/consumers/group-a/offsets/payments")
    
    def test_delete_info_for_only_topic(self, cleaner, store):
        """Test deleting a single-topic group's state removes the group."""
        assert cleaner.delete_consumer_group_info_for_topic("group-b", "orders")
        
        assert not store.exists("/consumers/group-b")
    
    def test_delete_all_for_topic(self, cleaner, store):
        """Test only inactive groups lose their state."""
        store.create_persistent("/consumers/group-a/ids/c1", "{}")
        
        deleted = cleaner.delete_all_consumer_group_info_for_topic("orders")
        
        assert deleted == ["group-b"]
        assert store.exists("/consumers/group-a/offsets/orders")
    
    def test_groups_for_topic(self, cleaner):
        """Test groups are found by committed offsets."""
        assert cleaner.get_all_consumer_groups_for_topic("orders") == ["group-a", "group-b"]
        assert cleaner.get_all_consumer_groups_for_topic("payments") == ["group-a"]
