"""MongoDB storage backend for clearhead."""

from clearhead.infra.mongo.client import MongoClient
from clearhead.infra.mongo.repositories import MongoStorageRepository

__all__ = [
    "MongoClient",
    "MongoStorageRepository",
]
