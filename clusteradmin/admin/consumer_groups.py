"""
Cleanup of consumer group state kept in the coordination store.

Group state is only removed while the group has no registered members.
"""

from typing import List

from clusteradmin.coordination import paths
from clusteradmin.coordination.paths import ConsumerGroupDirs
from clusteradmin.coordination.store import CoordinationStore
from clusteradmin.utils.logging import get_logger

logger = get_logger(__name__)


class ConsumerGroupCleaner:
    """Deletes stored state of inactive consumer groups."""

    def __init__(self, store: CoordinationStore):
        self.store = store

    def is_consumer_group_active(self, group: str) -> bool:
        return bool(self.store.get_children(ConsumerGroupDirs(group).consumer_registry_dir))

    def get_topics_by_consumer_group(self, group: str) -> List[str]:
        return self.store.get_children(f"{ConsumerGroupDirs(group).consumer_group_dir}/owners")

    def get_all_consumer_groups_for_topic(self, topic: str) -> List[str]:
        """Groups that have committed offsets for the topic."""
        return [
            group for group in self.store.get_children(paths.CONSUMERS_PATH)
            if topic in self.store.get_children(f"{ConsumerGroupDirs(group).consumer_group_dir}/offsets")
        ]

    def delete_consumer_group(self, group: str) -> bool:
        """
        Delete a group's whole directory if the group is inactive.

        Returns:
            Whether the group was deleted
        """
        if self.is_consumer_group_active(group):
            return False

        self.store.delete_path_recursive(ConsumerGroupDirs(group).consumer_group_dir)
        logger.info("Deleted consumer group", group=group)
        return True

    def delete_consumer_group_info_for_topic(self, group: str, topic: str) -> bool:
        """
        Delete an inactive group's state for one topic.

        If the group consumes only this topic, the whole group is deleted.

        Returns:
            Whether anything was deleted
        """
        if self.get_topics_by_consumer_group(group) == [topic]:
            return self.delete_consumer_group(group)

        if self.is_consumer_group_active(group):
            return False

        dirs = ConsumerGroupDirs(group, topic)
        self.store.delete_path_recursive(dirs.consumer_owner_dir)
        self.store.delete_path_recursive(dirs.consumer_offset_dir)
        logger.info("Deleted consumer group info for topic", group=group, topic=topic)
        return True

    def delete_all_consumer_group_info_for_topic(self, topic: str) -> List[str]:
        """
        Delete every inactive group's state for a topic.

        Returns:
            Groups whose state was deleted
        """
        return [
            group for group in self.get_all_consumer_groups_for_topic(topic)
            if self.delete_consumer_group_info_for_topic(group, topic)
        ]
