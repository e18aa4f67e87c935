"""Tests for topic name rules."""

import pytest

from clusteradmin.admin import topic
from clusteradmin.errors import InvalidTopicError, ValidationError


class TestValidate:
    """Test topic name validation."""
    
    @pytest.mark.parametrize("name", ["orders", "orders.v1", "orders_v1", "a-b", "A" * 249])
    def test_legal_names(self, name):
        """Test legal names pass."""
        topic.validate(name)
    
    @pytest.mark.parametrize("name", ["", ".", "..", "a" * 250, "orders/v1", "orders v1", "café", "orders\n", "\norders"])
    def test_illegal_names(self, name):
        """Test illegal names are rejected."""
        with pytest.raises(InvalidTopicError):
            topic.validate(name)
    
    def test_invalid_topic_is_validation_error(self):
        """Test invalid names share the validation kind."""
        with pytest.raises(ValidationError):
            topic.validate("..")


class TestCollision:
    """Test name collision rules."""
    
    def test_has_collision_chars(self):
        """Test detection of collision characters."""
        assert topic.has_collision_chars("a.b")
        assert topic.has_collision_chars("a_b")
        assert not topic.has_collision_chars("a-b")
    
    def test_has_collision(self):
        """Test '.' and '_' collide."""
        assert topic.has_collision("orders.v1", "orders_v1")
        assert topic.has_collision("orders_v1", "orders.v1")
        assert not topic.has_collision("orders.v1", "orders-v1")
