from __future__ import annotations

"""
Database layer:
- Mongo connection
- Schemas
- Repositories
"""

from support_chat.db import mongo, repositories, schemas

__all__ = [
    "mongo", 
    "repositories",
    "schemas"
]
