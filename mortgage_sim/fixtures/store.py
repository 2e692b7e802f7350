"""In-memory fixture store shared by all virtual services of one orchestrator.

Collections are append/update-only for the lifetime of a store generation.
Records never leave the store by reference: every read returns a deep copy.
"""

from __future__ import annotations

import copy
import itertools
from datetime import datetime, timezone
from typing import Any, Callable, Final, Iterator

from . import seeds

Record = dict[str, Any]


class FixtureStore:
    """Mutable domain fixture collections with seed reset support."""

    COLLECTION_NAMES: Final[tuple[str, ...]] = (
        "users",
        "clients",
        "documents",
        "messages",
        "ai_insights",
        "market_insights",
        "quotes",
        "applications",
        "notifications",
    )
    REFERENCE_NAMES: Final[tuple[str, ...]] = ("broker_stats", "loan_options", "recommended_broker")

    def __init__(self, clock: Callable[[], datetime] | None = None, id_start: int = 1000):
        """Initialize store collections from seed literals.

        Args:
            clock: Optional UTC clock used for relative seed timestamps.
            id_start: First value of the generated id sequence.

        Returns:
            None: Initializer does not return a value.

        Raises:
            ValueError: Raised when id_start is negative.
        """

        if id_start < 0:
            raise ValueError("id_start must be >= 0")

        self._clock = clock or (lambda: datetime.now(timezone.utc))
        self._id_sequence: Iterator[int] = itertools.count(id_start)
        self._collections: dict[str, list[Record]] = {}
        self._references: dict[str, Any] = {}
        self._preferences: dict[str, Record] = {}
        self.fixture_reset()

    def fixture_reset(self) -> None:
        """Restore every collection to its seed contents.

        The generated id sequence is not rewound, so ids issued before a reset
        are never issued again by the same store.
        """

        now = self._clock()
        self._collections = {
            "users": seeds.seed_users(),
            "clients": seeds.seed_clients(),
            "documents": seeds.seed_documents(),
            "messages": seeds.seed_messages(),
            "ai_insights": seeds.seed_ai_insights(),
            "market_insights": seeds.seed_market_insights(),
            "quotes": seeds.seed_quotes(),
            "applications": seeds.seed_applications(),
            "notifications": seeds.seed_notifications(now),
        }
        self._references = {
            "broker_stats": seeds.seed_broker_stats(),
            "loan_options": seeds.seed_loan_options(),
            "recommended_broker": seeds.seed_recommended_broker(),
        }
        self._preferences = {}

    def fixture_next_sequence(self) -> int:
        """Return the next value of the store-wide monotonic sequence."""

        return next(self._id_sequence)

    def fixture_next_id(self, prefix: str) -> str:
        """Return a collision-free record id such as `client-1004`.

        Args:
            prefix: Record kind prefix.

        Returns:
            str: New record id.

        Raises:
            ValueError: Raised when prefix is blank.
        """

        normalized_prefix = prefix.strip()
        if not normalized_prefix:
            raise ValueError("prefix must not be blank")
        return f"{normalized_prefix}-{self.fixture_next_sequence()}"

    def fixture_list(self, collection_name: str) -> list[Record]:
        """Return copies of all records of one collection in insertion order."""

        return copy.deepcopy(self._fixture_collection(collection_name))

    def fixture_size(self, collection_name: str) -> int:
        """Return the record count of one collection."""

        return len(self._fixture_collection(collection_name))

    def fixture_get(self, collection_name: str, record_id: str) -> Record | None:
        """Return a copy of one record by id, or None when absent."""

        record = self._fixture_find(collection_name, record_id)
        return None if record is None else copy.deepcopy(record)

    def fixture_find_first(self, collection_name: str, predicate: Callable[[Record], bool]) -> Record | None:
        """Return a copy of the first record accepted by predicate, or None."""

        for record in self._fixture_collection(collection_name):
            if predicate(record):
                return copy.deepcopy(record)
        return None

    def fixture_append(self, collection_name: str, record: Record) -> Record:
        """Append one record and return a copy of the stored value.

        Args:
            collection_name: Target collection.
            record: New record with a unique `id`.

        Returns:
            Record: Copy of the stored record.

        Raises:
            KeyError: Raised when the collection is unknown.
            ValueError: Raised when the id is missing or already present.
        """

        record_id = str(record.get("id", "")).strip()
        if not record_id:
            raise ValueError("record id must not be blank")
        if self._fixture_find(collection_name, record_id) is not None:
            raise ValueError(f"duplicate record id={record_id} in collection={collection_name}")

        stored_record = copy.deepcopy(record)
        self._fixture_collection(collection_name).append(stored_record)
        return copy.deepcopy(stored_record)

    def fixture_update(self, collection_name: str, record_id: str, updates: Record) -> Record | None:
        """Merge updates into one record in place; the `id` field is never changed.

        Args:
            collection_name: Target collection.
            record_id: Id of the record to update.
            updates: Field values to merge.

        Returns:
            Record | None: Copy of the updated record, or None when absent.

        Raises:
            KeyError: Raised when the collection is unknown.
        """

        record = self._fixture_find(collection_name, record_id)
        if record is None:
            return None
        record.update({key: copy.deepcopy(value) for key, value in updates.items() if key != "id"})
        return copy.deepcopy(record)

    def fixture_reference(self, reference_name: str) -> Any:
        """Return a copy of one read-only reference fixture (stats, loan options)."""

        if reference_name not in self._references:
            raise KeyError(f"unknown reference fixture={reference_name}")
        return copy.deepcopy(self._references[reference_name])

    def fixture_get_preferences(self, user_id: str) -> Record | None:
        """Return stored notification preferences for one user, or None."""

        preferences = self._preferences.get(user_id)
        return None if preferences is None else copy.deepcopy(preferences)

    def fixture_set_preferences(self, user_id: str, preferences: Record) -> Record:
        """Store notification preferences for one user and return a copy."""

        self._preferences[user_id] = copy.deepcopy(preferences)
        return copy.deepcopy(preferences)

    def _fixture_collection(self, collection_name: str) -> list[Record]:
        if collection_name not in self._collections:
            raise KeyError(f"unknown fixture collection={collection_name}")
        return self._collections[collection_name]

    def _fixture_find(self, collection_name: str, record_id: str) -> Record | None:
        for record in self._fixture_collection(collection_name):
            if record.get("id") == record_id:
                return record
        return None
