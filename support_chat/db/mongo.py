from __future__ import annotations
from pymongo import ASCENDING, DESCENDING, MongoClient
from pymongo.database import Database
from pymongo.collection import Collection
from pymongo.errors import PyMongoError
from typing import TypedDict

from support_chat.app.errors import DatabaseError

class MongoHandles(TypedDict):
    client: MongoClient
    db: Database
    sessions: Collection

def connect_mongo(mongo_uri: str, db_name: str, *, tls: bool = True) -> MongoHandles:
    # tz_aware so timestamps come back as UTC datetimes
    client: MongoClient = MongoClient(
        mongo_uri,
        tls=tls,
        tz_aware=True,
        serverSelectionTimeoutMS=30000,
        connectTimeoutMS=20000,
        socketTimeoutMS=20000,
    )
    db = client[db_name]
    return {
        "client": client,
        "db": db,
        "sessions": db["chat_sessions"],
    }

def ensure_indexes(handles: MongoHandles) -> None:
    sessions = handles["sessions"]
    try:
        sessions.create_index([("owner_id", ASCENDING), ("state", ASCENDING), ("updated_at", DESCENDING)])
        sessions.create_index([("owner_id", ASCENDING), ("created_at", DESCENDING)])
    except PyMongoError as e:
        raise DatabaseError(f"Failed to create indexes: {e}") from e
