"""Category store adapters.

Implementations of CategoryStorePort:
- memory: in-process dict guarded by a lock
"""
