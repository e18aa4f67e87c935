"""
clusteradmin - topic administration for a distributed commit log.

This package implements the metadata side of cluster administration:
- Replica placement across brokers
- Topic creation and partition expansion in the coordination store
- Entity config changes with ordered change notifications
- Partition-level topic metadata assembly
"""

__version__ = "0.1.0"
__author__ = "Horace Njoroge"
