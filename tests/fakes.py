"""In-memory stand-ins for the MongoDB collection API and the storage broker."""

import copy
from dataclasses import dataclass
from typing import Any

from pymongo.errors import DuplicateKeyError

MISSING = object()


@dataclass
class InsertResult:
    inserted_id: Any
    acknowledged: bool = True


@dataclass
class UpdateResult:
    matched_count: int
    modified_count: int
    acknowledged: bool = True


@dataclass
class DeleteResult:
    deleted_count: int
    acknowledged: bool = True


def _compare(op: str, value: Any, arg: Any) -> bool:
    if op == "$in":
        return value is not MISSING and value in arg
    if op == "$ne":
        return value is MISSING or value != arg
    if value is MISSING or value is None:
        return False
    if op == "$gt":
        return bool(value > arg)
    if op == "$gte":
        return bool(value >= arg)
    if op == "$lt":
        return bool(value < arg)
    if op == "$lte":
        return bool(value <= arg)
    raise NotImplementedError(op)


def matches(doc: dict[str, Any], query: dict[str, Any]) -> bool:
    for key, condition in query.items():
        value = doc.get(key, MISSING)
        if isinstance(condition, dict) and condition and all(k.startswith("$") for k in condition):
            if not all(_compare(op, value, arg) for op, arg in condition.items()):
                return False
        elif value is MISSING or value != condition:
            return False
    return True


def apply_update(doc: dict[str, Any], update: dict[str, Any], inserting: bool) -> bool:
    before = copy.deepcopy(doc)
    for op, fields in update.items():
        if op == "$set":
            doc.update(copy.deepcopy(fields))
        elif op == "$setOnInsert":
            if inserting:
                doc.update(copy.deepcopy(fields))
        elif op == "$inc":
            for key, amount in fields.items():
                doc[key] = doc.get(key, 0) + amount
        else:
            raise NotImplementedError(op)
    return doc != before


class FakeCursor:
    def __init__(self, docs: list[dict[str, Any]]) -> None:
        self._docs = docs

    def sort(self, key: str, direction: int = 1) -> "FakeCursor":
        self._docs.sort(key=lambda d: d[key], reverse=direction < 0)
        return self

    def __aiter__(self) -> "FakeCursor":
        self._iter = iter(self._docs)
        return self

    async def __anext__(self) -> dict[str, Any]:
        try:
            return next(self._iter)
        except StopIteration:
            raise StopAsyncIteration from None


class FakeCollection:
    def __init__(self, name: str) -> None:
        self.name = name
        self.docs: list[dict[str, Any]] = []
        self.unique_fields: set[str] = set()

    async def create_index(self, keys: list[tuple[str, int]], unique: bool = False, **_: Any) -> str:
        if unique and len(keys) == 1:
            self.unique_fields.add(keys[0][0])
        return "_".join(f"{k}_{d}" for k, d in keys)

    def _check_unique(self, doc: dict[str, Any]) -> None:
        for field in {"_id", *self.unique_fields}:
            if field in doc and any(other.get(field) == doc[field] for other in self.docs if other is not doc):
                raise DuplicateKeyError(f"duplicate key on {field}")

    async def insert_one(self, doc: dict[str, Any]) -> InsertResult:
        stored = copy.deepcopy(doc)
        self._check_unique(stored)
        self.docs.append(stored)
        return InsertResult(inserted_id=stored["_id"])

    async def find_one(self, query: dict[str, Any]) -> dict[str, Any] | None:
        for doc in self.docs:
            if matches(doc, query):
                return copy.deepcopy(doc)
        return None

    def find(self, query: dict[str, Any] | None = None) -> FakeCursor:
        return FakeCursor([copy.deepcopy(d) for d in self.docs if matches(d, query or {})])

    async def count_documents(self, query: dict[str, Any]) -> int:
        return sum(1 for d in self.docs if matches(d, query))

    async def find_one_and_update(
        self, query: dict[str, Any], update: dict[str, Any], upsert: bool = False, return_document: bool = False
    ) -> dict[str, Any] | None:
        for doc in self.docs:
            if matches(doc, query):
                before = copy.deepcopy(doc)
                apply_update(doc, update, inserting=False)
                return copy.deepcopy(doc) if return_document else before
        if not upsert:
            return None
        new_doc = {k: v for k, v in query.items() if not isinstance(v, dict)}
        apply_update(new_doc, update, inserting=True)
        await self.insert_one(new_doc)
        return copy.deepcopy(new_doc) if return_document else None

    async def update_one(self, query: dict[str, Any], update: dict[str, Any]) -> UpdateResult:
        for doc in self.docs:
            if matches(doc, query):
                return UpdateResult(matched_count=1, modified_count=int(apply_update(doc, update, inserting=False)))
        return UpdateResult(matched_count=0, modified_count=0)

    async def update_many(self, query: dict[str, Any], update: dict[str, Any]) -> UpdateResult:
        matched = [doc for doc in self.docs if matches(doc, query)]
        modified = sum(int(apply_update(doc, update, inserting=False)) for doc in matched)
        return UpdateResult(matched_count=len(matched), modified_count=modified)

    async def delete_one(self, query: dict[str, Any]) -> DeleteResult:
        for i, doc in enumerate(self.docs):
            if matches(doc, query):
                del self.docs[i]
                return DeleteResult(deleted_count=1)
        return DeleteResult(deleted_count=0)


class FakeDatabase:
    def __init__(self) -> None:
        self.collections: dict[str, FakeCollection] = {}

    def get_collection(self, name: str) -> FakeCollection:
        if name not in self.collections:
            self.collections[name] = FakeCollection(name)
        return self.collections[name]


class FakeBroker:
    """Records storage calls and signs predictable URLs."""

    def __init__(self, default_ttl_seconds: int = 900) -> None:
        self.default_ttl_seconds = default_ttl_seconds
        self.objects: set[tuple[str, str]] = set()
        self.deleted: list[tuple[str, str]] = []
        self.exists_calls = 0

    def sign(self, bucket: str, object_path: str, operation: Any, ttl_seconds: int | None = None) -> str:
        ttl = ttl_seconds if ttl_seconds is not None else self.default_ttl_seconds
        return f"https://storage.test/{bucket}/{object_path}?op={operation}&ttl={ttl}"

    async def exists(self, bucket: str, object_path: str) -> bool:
        self.exists_calls += 1
        return (bucket, object_path) in self.objects

    async def delete(self, bucket: str, object_path: str) -> None:
        self.objects.discard((bucket, object_path))
        self.deleted.append((bucket, object_path))
