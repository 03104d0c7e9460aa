"""
Opportunity Store - one interface, two backends.

BACKENDS:
1. MongoOpportunityStore  - durable, used when MONGODB_URI is set and reachable
2. MemoryOpportunityStore - process-local lists, used otherwise

Callers never pick a backend themselves. They go through StoreProvider,
which starts on whichever backend init_store() chose and switches to the
memory store for the rest of the process if MongoDB drops out
(StoreUnavailableError).

Records leave the store as plain dicts:
- "_id" is replaced by a string "id"
- skills stay an ordered list of strings
- created_at / updated_at are datetimes (ISO-8601 once serialized by the API)

Every list call is a single read of the backend, so filtering, ordering
and paging see one snapshot.
"""

import copy
import functools
import logging
import threading
import uuid
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Callable, Dict, List, Optional

from bson import ObjectId
from pymongo import DESCENDING, ReturnDocument
from pymongo.database import Database
from pymongo.errors import ConnectionFailure, DuplicateKeyError, OperationFailure, PyMongoError

from app.core.config import Settings, get_settings
from app.core.errors import StoreUnavailableError
from app.db.memory import DEMO_INTERNSHIPS, DEMO_PROJECTS
from app.db.mongodb import COLLECTIONS, get_mongo_client, init_mongo_indexes, test_mongo_connection
from app.models.opportunity import OpportunityFilter, OpportunityKind
from app.services.filtering import (
    MAX_MONGO_OFFSET, build_mongo_query, filter_records, page_bounds, paginate
)

logger = logging.getLogger("internhub.store")


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def new_id() -> str:
    """Collision-resistant identifier for memory-store records."""
    return uuid.uuid4().hex


# ============================================================
# HELPER: Convert ObjectId to string for JSON serialization
# ============================================================

def serialize_doc(doc: dict) -> Optional[dict]:
    """Convert MongoDB document to a JSON-ready dict with a string "id"."""
    if doc is None:
        return None
    if "_id" in doc:
        doc["id"] = str(doc.pop("_id"))
    return doc


def serialize_docs(docs) -> list:
    """Convert list of MongoDB documents to JSON-serializable list."""
    return [serialize_doc(doc) for doc in docs]


# ============================================================
# STORE INTERFACE
# ============================================================

class OpportunityStore(ABC):
    """Storage capability shared by both backends."""

    name: str = "abstract"
    durable: bool = False

    @abstractmethod
    def list_opportunities(
        self,
        kind: OpportunityKind,
        spec: Optional[OpportunityFilter] = None,
        page: Optional[int] = None,
        limit: Optional[int] = None
    ) -> List[dict]:
        """
        Records of one kind, newest first, filtered by spec.
        Paged only when page or limit is given.
        """

    @abstractmethod
    def get_opportunity(self, kind: OpportunityKind, record_id: str) -> Optional[dict]:
        """Fetch one record, or None."""

    @abstractmethod
    def insert_opportunity(self, kind: OpportunityKind, fields: dict) -> dict:
        """Insert a validated record; assigns id and created_at."""

    @abstractmethod
    def sync_candidate(self, kind: OpportunityKind, fields: dict) -> bool:
        """Merge one externally sourced record. True if it was written."""

    @abstractmethod
    def count(self, kind: OpportunityKind) -> int:
        """Number of records of one kind."""

    @abstractmethod
    def insert_application(self, fields: dict) -> dict:
        """Store a validated application; assigns id and created_at."""

    @abstractmethod
    def list_applications(self, kind: OpportunityKind, target_id: str) -> List[dict]:
        """Applications for one record, newest first."""

    @abstractmethod
    def upsert_profile(self, profile_id: str, fields: dict) -> dict:
        """Create or update a profile keyed by its id."""

    @abstractmethod
    def get_profile(self, profile_id: str) -> Optional[dict]:
        """Fetch one profile, or None."""

    @abstractmethod
    def ping(self) -> bool:
        """True when the backend is reachable."""


# ============================================================
# MONGODB BACKEND
# ============================================================

def _translate_connection_errors(method):
    """Turn pymongo connection failures into StoreUnavailableError."""
    @functools.wraps(method)
    def wrapper(self, *args, **kwargs):
        try:
            return method(self, *args, **kwargs)
        except ConnectionFailure as e:
            raise StoreUnavailableError(f"MongoDB unavailable: {e}") from e
    return wrapper


class MongoOpportunityStore(OpportunityStore):
    """
    Durable backend.

    Sync uses find_one_and_update(upsert=True) on (source, source_id): one
    conditional write per candidate, backed by a sparse unique index, so
    concurrent syncs cannot both insert the same listing.
    """

    name = "mongodb"
    durable = True

    def __init__(self, db: Database):
        self.db = db
        init_mongo_indexes(db)

    @classmethod
    def from_settings(cls, settings: Settings) -> "MongoOpportunityStore":
        """Connect using MONGODB_URI; raises StoreUnavailableError if unreachable."""
        try:
            client = get_mongo_client(settings)
        except PyMongoError as e:
            raise StoreUnavailableError(f"MongoDB client error: {e}") from e
        if not test_mongo_connection(client):
            raise StoreUnavailableError("MongoDB ping failed")
        try:
            return cls(client[settings.mongodb_db])
        except ConnectionFailure as e:
            raise StoreUnavailableError(f"MongoDB unavailable: {e}") from e

    def _collection(self, kind: OpportunityKind):
        return self.db[COLLECTIONS[kind.collection]]

    @_translate_connection_errors
    def list_opportunities(self, kind, spec=None, page=None, limit=None):
        try:
            return self._find(kind, build_mongo_query(spec, kind), page, limit)
        except OperationFailure as e:
            if spec is None or not spec.location:
                raise
            # Pattern valid for Python but not for the server: match it literally
            logger.warning("Location pattern %r rejected by MongoDB (%s); matching it literally",
                           spec.location, e)
            query = build_mongo_query(spec, kind, literal_location=True)
            return self._find(kind, query, page, limit)

    def _find(self, kind, query, page, limit):
        cursor = self._collection(kind).find(query).sort(
            [("created_at", DESCENDING), ("_id", DESCENDING)]
        )
        if page is not None or limit is not None:
            offset, limit = page_bounds(page, limit)
            if offset > MAX_MONGO_OFFSET:
                # Past any reachable record; skip() would not fit in BSON
                return []
            cursor = cursor.skip(offset).limit(limit)
        return serialize_docs(cursor)

    @_translate_connection_errors
    def get_opportunity(self, kind, record_id):
        if not ObjectId.is_valid(record_id):
            return None
        doc = self._collection(kind).find_one({"_id": ObjectId(record_id)})
        return serialize_doc(doc)

    @_translate_connection_errors
    def insert_opportunity(self, kind, fields):
        now = utcnow()
        doc = dict(fields)
        doc.pop("id", None)
        doc["created_at"] = now
        doc["updated_at"] = now
        self._collection(kind).insert_one(doc)
        return serialize_doc(doc)

    @_translate_connection_errors
    def sync_candidate(self, kind, fields):
        now = utcnow()
        update = {k: v for k, v in fields.items() if k not in ("id", "_id", "created_at")}
        update["updated_at"] = now
        key = {"source": fields["source"], "source_id": fields["source_id"]}
        changes = {"$set": update, "$setOnInsert": {"created_at": now}}
        collection = self._collection(kind)
        try:
            collection.find_one_and_update(key, changes, upsert=True)
        except DuplicateKeyError:
            # A concurrent sync inserted the same key first; the retry
            # matches that document and applies $set to it
            logger.info("Upsert race on %s/%s; retrying as an update",
                        fields["source"], fields["source_id"])
            collection.find_one_and_update(key, changes, upsert=True)
        return True

    @_translate_connection_errors
    def count(self, kind):
        return self._collection(kind).count_documents({})

    @_translate_connection_errors
    def insert_application(self, fields):
        doc = dict(fields)
        doc["created_at"] = utcnow()
        self.db[COLLECTIONS["applications"]].insert_one(doc)
        return serialize_doc(doc)

    @_translate_connection_errors
    def list_applications(self, kind, target_id):
        cursor = self.db[COLLECTIONS["applications"]].find(
            {"target_kind": kind.value, "target_id": target_id}
        ).sort([("created_at", DESCENDING), ("_id", DESCENDING)])
        return serialize_docs(cursor)

    @_translate_connection_errors
    def upsert_profile(self, profile_id, fields):
        now = utcnow()
        doc = self.db[COLLECTIONS["profiles"]].find_one_and_update(
            {"id": profile_id},
            {"$set": {**fields, "updated_at": now}, "$setOnInsert": {"created_at": now}},
            upsert=True,
            return_document=ReturnDocument.AFTER
        )
        doc.pop("_id", None)
        return doc

    @_translate_connection_errors
    def get_profile(self, profile_id):
        doc = self.db[COLLECTIONS["profiles"]].find_one({"id": profile_id})
        if doc is not None:
            doc.pop("_id", None)
        return doc

    def ping(self):
        try:
            self.db.command("ping")
            return True
        except Exception as e:
            logger.warning("MongoDB ping failed: %s", e)
            return False


# ============================================================
# IN-MEMORY BACKEND
# ============================================================

def _same_listing(existing: dict, incoming: dict, name_field: str) -> bool:
    """Best-effort duplicate check used in place of the natural key."""
    apply_url = incoming.get("apply_url")
    if apply_url and existing.get("apply_url") == apply_url:
        return True
    return (
        existing.get("title") == incoming.get("title")
        and existing.get(name_field) == incoming.get(name_field)
    )


class MemoryOpportunityStore(OpportunityStore):
    """
    Non-durable fallback. Lists are kept newest first.

    Sync dedup differs from MongoDB on purpose: a candidate matching an
    existing record (same apply_url, or same title and name field) is
    skipped, never overwritten.
    """

    name = "memory"
    durable = False

    def __init__(self, seed: bool = False):
        self._lock = threading.Lock()
        self._records: Dict[OpportunityKind, List[dict]] = {
            OpportunityKind.project: [],
            OpportunityKind.internship: [],
        }
        self._applications: List[dict] = []
        self._profiles: Dict[str, dict] = {}
        if seed:
            self._seed()

    def _seed(self):
        now = utcnow()
        for kind, demo in ((OpportunityKind.project, DEMO_PROJECTS),
                           (OpportunityKind.internship, DEMO_INTERNSHIPS)):
            for record in demo:
                self._records[kind].append({**copy.deepcopy(record), "created_at": now})

    def _snapshot(self, kind: OpportunityKind) -> List[dict]:
        with self._lock:
            return [copy.deepcopy(r) for r in self._records[kind]]

    def list_opportunities(self, kind, spec=None, page=None, limit=None):
        records = filter_records(self._snapshot(kind), spec, kind)
        if page is not None or limit is not None:
            records = paginate(records, page, limit)
        return records

    def get_opportunity(self, kind, record_id):
        with self._lock:
            for record in self._records[kind]:
                if str(record["id"]) == str(record_id):
                    return copy.deepcopy(record)
        return None

    def insert_opportunity(self, kind, fields):
        record = dict(fields)
        record["id"] = new_id()
        record["created_at"] = utcnow()
        with self._lock:
            self._records[kind].insert(0, record)
        return copy.deepcopy(record)

    def sync_candidate(self, kind, fields):
        with self._lock:
            records = self._records[kind]
            if any(_same_listing(r, fields, kind.name_field) for r in records):
                return False
            record = dict(fields)
            record["id"] = new_id()
            record["created_at"] = utcnow()
            records.insert(0, record)
        return True

    def count(self, kind):
        with self._lock:
            return len(self._records[kind])

    def insert_application(self, fields):
        record = dict(fields)
        record["id"] = new_id()
        record["created_at"] = utcnow()
        with self._lock:
            self._applications.insert(0, record)
        return copy.deepcopy(record)

    def list_applications(self, kind, target_id):
        with self._lock:
            return [
                copy.deepcopy(a) for a in self._applications
                if a["target_kind"] == kind.value and a["target_id"] == target_id
            ]

    def upsert_profile(self, profile_id, fields):
        now = utcnow()
        with self._lock:
            profile = self._profiles.get(profile_id)
            if profile is None:
                profile = {"id": profile_id, "metadata": {}, "created_at": now}
                self._profiles[profile_id] = profile
            profile.update(fields)
            profile["updated_at"] = now
            return copy.deepcopy(profile)

    def get_profile(self, profile_id):
        with self._lock:
            profile = self._profiles.get(profile_id)
            return copy.deepcopy(profile) if profile is not None else None

    def ping(self):
        return True


# ============================================================
# ACTIVE STORE SELECTION
# ============================================================

class StoreProvider:
    """
    Holds the active backend and degrades to the memory store.

    run() executes an operation against the active store. If the durable
    store raises StoreUnavailableError the provider logs it, switches to
    the fallback for the rest of the process and runs the operation there.
    """

    def __init__(self, primary: OpportunityStore, fallback: MemoryOpportunityStore):
        self.primary = primary
        self.fallback = fallback
        self.active = primary

    @property
    def degraded(self) -> bool:
        return self.active is not self.primary

    def run(self, operation: Callable[[OpportunityStore], object]):
        store = self.active
        try:
            return operation(store)
        except StoreUnavailableError as e:
            if store is self.fallback:
                raise
            logger.warning("%s; falling back to in-memory data", e.message)
            self.active = self.fallback
            return operation(self.fallback)


_provider: Optional[StoreProvider] = None


def init_store(settings: Settings = None) -> StoreProvider:
    """Pick the backend once at startup."""
    global _provider
    settings = settings or get_settings()
    fallback = MemoryOpportunityStore(seed=settings.seed_demo_data)

    if not settings.use_mongo:
        logger.warning("No MONGODB_URI provided. Running with in-memory data.")
        primary = fallback
    else:
        try:
            primary = MongoOpportunityStore.from_settings(settings)
            logger.info("Connected to MongoDB database %s", settings.mongodb_db)
        except StoreUnavailableError as e:
            logger.error("MongoDB connection error: %s", e.message)
            logger.warning("Falling back to in-memory data.")
            primary = fallback

    _provider = StoreProvider(primary, fallback)
    return _provider


def use_store(primary: OpportunityStore, fallback: MemoryOpportunityStore = None) -> StoreProvider:
    """Install a specific backend (tests, scripts)."""
    global _provider
    if fallback is None:
        fallback = primary if isinstance(primary, MemoryOpportunityStore) else MemoryOpportunityStore()
    _provider = StoreProvider(primary, fallback)
    return _provider


def get_store_provider() -> StoreProvider:
    """Get the active provider, initializing it on first use."""
    if _provider is None:
        return init_store()
    return _provider
