"""Thin Couchbase adapter wrapping cluster and collection operations."""

from datetime import timedelta
from typing import Any, Protocol

from couchbase.auth import PasswordAuthenticator
from couchbase.cluster import Cluster
from couchbase.options import (
    ClusterOptions,
    GetOptions,
    InsertOptions,
    QueryOptions,
    RemoveOptions,
)

from sim.core.models.config import CouchbaseConfig
from sim.core.utils.constants import DB_TIMEOUT_SECONDS

DB_TIMEOUT = timedelta(seconds=DB_TIMEOUT_SECONDS)


class CouchbaseAdapterProtocol(Protocol):
    """Minimal Couchbase adapter protocol (repository-facing)."""

    @property
    def keyspace(self) -> str: ...

    def insert(self, *, key: str, document: dict[str, Any]) -> None: ...

    def get(self, *, key: str) -> dict[str, Any]: ...

    def remove(self, *, key: str) -> None: ...

    def query(self, statement: str) -> list[dict[str, Any]]: ...


class CouchbaseAdapter:
    """Low-level Couchbase operations (mechanical, no error handling).

    This adapter:
    - Wraps a couchbase Cluster and the collection holding image records
    - Does NOT handle errors (lets them bubble up)
    - Domain implementations catch and translate errors
    """

    def __init__(self, config: CouchbaseConfig, cluster: Cluster | None = None) -> None:
        """Connect to the cluster and open the records collection."""
        self._cluster = cluster or self._connect(config)
        self._keyspace = f"`{config.bucket}`.`{config.scope}`.`{config.collection}`"
        self._collection = (
            self._cluster.bucket(config.bucket)
            .scope(config.scope)
            .collection(config.collection)
        )

    @staticmethod
    def _connect(config: CouchbaseConfig) -> Cluster:
        authenticator = PasswordAuthenticator(config.username, config.password)
        cluster = Cluster(config.endpoint, ClusterOptions(authenticator))
        cluster.wait_until_ready(DB_TIMEOUT)
        return cluster

    @property
    def keyspace(self) -> str:
        """Fully qualified, escaped ``bucket.scope.collection`` path for queries."""
        return self._keyspace

    def insert(self, *, key: str, document: dict[str, Any]) -> None:
        """Insert a new document; fails if the key exists.

        Raises couchbase exceptions - caught by domain implementation.
        """
        self._collection.insert(key, document, InsertOptions(timeout=DB_TIMEOUT))

    def get(self, *, key: str) -> dict[str, Any]:
        """Fetch a document body by key.

        Raises couchbase exceptions - caught by domain implementation.
        """
        result = self._collection.get(key, GetOptions(timeout=DB_TIMEOUT))
        content: dict[str, Any] = result.content_as[dict]
        return content

    def remove(self, *, key: str) -> None:
        """Remove a document by key.

        Raises couchbase exceptions - caught by domain implementation.
        """
        self._collection.remove(key, RemoveOptions(timeout=DB_TIMEOUT))

    def query(self, statement: str) -> list[dict[str, Any]]:
        """Run a SQL++ statement and collect every row.

        Raises couchbase exceptions - caught by domain implementation.
        """
        result = self._cluster.query(statement, QueryOptions(timeout=DB_TIMEOUT))
        return list(result.rows())
