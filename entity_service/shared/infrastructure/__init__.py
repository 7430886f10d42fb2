"""
Infrastructure: database engine and commits.
"""

from entity_service.shared.infrastructure.db import build_engine, safe_commit

__all__ = [
    "build_engine",
    "safe_commit",
]
