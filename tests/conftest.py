"""Common utilities for tests."""

import unittest.mock
from typing import Any, Optional

from mockfirestore import CollectionReference, MockFirestore, Query
from mockfirestore.document import DocumentReference


def patch_mockfirestore() -> None:
    """Apply monkeypatches to mockfirestore for FieldFilter, counts and hashing."""

    def collection_where(
        self: Any,
        field_path: Optional[str] = None,
        op_string: Optional[str] = None,
        value: Any = None,
        filter: Any = None,
    ) -> Any:  # noqa: E501
        if filter:
            return self._where(filter.field_path, filter.op_string, filter.value)
        return self._where(field_path, op_string, value)

    if not hasattr(CollectionReference, "_where"):
        CollectionReference._where = CollectionReference.where
        CollectionReference.where = collection_where

    def query_where(
        self: Any,
        field_path: Optional[str] = None,
        op_string: Optional[str] = None,
        value: Any = None,
        filter: Any = None,
    ) -> Any:
        if filter:
            return self._where(filter.field_path, filter.op_string, filter.value)
        return self._where(field_path, op_string, value)

    if not hasattr(Query, "_where"):
        Query._where = Query.where
        Query.where = query_where

    # Accept the call options a real query's stream() takes
    def accepting_call_options(stream: Any) -> Any:
        def patched_stream(
            self: Any, transaction: Any = None, retry: Any = None, timeout: Any = None
        ) -> Any:
            return stream(self, transaction)

        patched_stream._patched = True
        return patched_stream

    for cls in (CollectionReference, Query):
        if not getattr(cls.stream, "_patched", False):
            cls.stream = accepting_call_options(cls.stream)

    def count(self: Any) -> Any:
        aggregation = unittest.mock.MagicMock()
        aggregation.get.side_effect = lambda: [
            [unittest.mock.MagicMock(value=sum(1 for d in self.stream() if d.exists))]
        ]
        return aggregation

    CollectionReference.count = count
    Query.count = count

    # get_all() collects references into a set
    if getattr(DocumentReference, "__hash__", None) is None:
        DocumentReference.__hash__ = lambda self: hash(tuple(self._path))


class MockBatch:
    def __init__(self, db: Any) -> None:
        self.db = db
        self.updates: list[tuple[Any, Any]] = []
        self.commit = unittest.mock.MagicMock(side_effect=self._real_commit)

    def update(self, ref: Any, data: Any) -> None:
        self.updates.append((ref, data))

    def delete(self, ref: Any) -> None:
        self.updates.append((ref, "DELETE"))

    def _real_commit(self) -> None:
        for ref, data in self.updates:
            if data == "DELETE":
                ref.delete()
            else:
                ref.update(data)


def make_mock_db() -> MockFirestore:
    """Return a patched in-memory Firestore with batch support."""
    patch_mockfirestore()
    db = MockFirestore()
    db.batch = lambda: MockBatch(db)
    return db
