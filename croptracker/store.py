"""
Record store: the sole owner of the persisted crop collection.

The whole collection lives in one slot of a key-value backend as a JSON
array of records. Every operation is a full read-modify-write of that slot.
There is no cross-process coordination: if two processes write the same
slot, the last write wins for the whole collection.

Usage:
    from croptracker.infrastructure import build_kv_store
    from croptracker.store import RecordStore

    store = RecordStore(build_kv_store(settings), key=settings.storage_key)
    record = store.add({"name": "Maize", "date_planted": "2024-03-01",
                        "acreage": 2.0, "expenses": 50000})
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Set, Union

from pydantic import TypeAdapter, ValidationError
from pydantic.alias_generators import to_snake

from croptracker.aggregate import compute_stats
from croptracker.config import DEFAULT_STORAGE_KEY
from croptracker.domain.models import CropFields, CropRecord, CropUpdate, StoreStats
from croptracker.exceptions import RecordValidationError, StorageError, StorageWriteError
from croptracker.infrastructure.kv_store import KeyValueStore
from croptracker.utils.logging import get_logger

log = get_logger(__name__)

Clock = Callable[[], datetime]

_collection_adapter = TypeAdapter(List[CropRecord])


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _validation_details(exc: ValidationError) -> Dict[str, str]:
    details: Dict[str, str] = {}
    for error in exc.errors():
        field = ".".join(to_snake(str(part)) for part in error["loc"]) or "__root__"
        details.setdefault(field, error["msg"])
    return details


def _validate_fields(fields: Union[CropFields, Mapping[str, Any]]) -> CropFields:
    if isinstance(fields, CropFields):
        fields = fields.model_dump()
    try:
        return CropFields.model_validate(fields)
    except ValidationError as exc:
        details = _validation_details(exc)
        raise RecordValidationError(
            "Invalid crop fields: " + ", ".join(sorted(details)), details=details
        ) from exc


def _validate_changes(changes: Union[CropUpdate, Mapping[str, Any]]) -> Dict[str, Any]:
    if isinstance(changes, CropUpdate):
        return changes.model_dump(exclude_unset=True)
    try:
        return CropUpdate.model_validate(changes).model_dump(exclude_unset=True)
    except ValidationError as exc:
        details = _validation_details(exc)
        raise RecordValidationError(
            "Invalid crop update: " + ", ".join(sorted(details)), details=details
        ) from exc


class RecordStore:
    """
    CRUD over the crop collection held in a single key-value slot.

    Reads never raise: an absent, unreadable or malformed slot reads as an
    empty collection. A write whose preliminary read hits a backend fault
    aborts without touching the slot. Writes that cannot be persisted raise
    ``StorageWriteError``; invalid input raises ``RecordValidationError``.
    Not-found targets are reported as ``None`` / ``False``.
    """

    def __init__(
        self,
        backend: KeyValueStore,
        key: str = DEFAULT_STORAGE_KEY,
        clock: Optional[Clock] = None,
    ) -> None:
        self._backend = backend
        self._key = key
        self._clock = clock or utc_now

    @property
    def key(self) -> str:
        return self._key

    # ------------------------------------------------------------------ reads

    def list(self) -> List[CropRecord]:
        """Return every record in stored insertion order."""
        return self._load(strict=False)

    def _load(self, strict: bool) -> List[CropRecord]:
        # strict: a backend read fault raises StorageWriteError instead of reading as empty.
        try:
            payload = self._backend.get(self._key)
        except StorageError as exc:
            if strict:
                log.exception("Record slot unreadable; write aborted", extra={"key": self._key})
                raise StorageWriteError(
                    "Failed to read records before writing",
                    details={"key": self._key, **exc.details},
                ) from exc
            log.warning("Record slot unreadable; treating as empty", exc_info=True, extra={"key": self._key})
            return []
        if not payload:
            return []
        try:
            return _collection_adapter.validate_json(payload)
        except ValidationError as exc:
            log.warning(
                "Record slot is corrupt; treating as empty",
                extra={"key": self._key, "errors": exc.error_count()},
            )
            return []

    def get(self, record_id: str) -> Optional[CropRecord]:
        for record in self.list():
            if record.id == record_id:
                return record
        return None

    def stats(self) -> StoreStats:
        """Aggregate totals computed from one snapshot of the collection."""
        return compute_stats(self.list())

    # ----------------------------------------------------------------- writes

    def add(self, fields: Union[CropFields, Mapping[str, Any]]) -> CropRecord:
        """
        Validate ``fields``, assign a fresh id and timestamps, append and persist.
        """
        validated = _validate_fields(fields)
        records = self._load(strict=True)
        now = self._clock()
        record = CropRecord(
            id=self._new_id({r.id for r in records}),
            created_at=now,
            updated_at=now,
            **validated.model_dump(),
        )
        records.append(record)
        self._persist(records, action="add")
        log.info("Record added", extra={"record_id": record.id, "crop": record.name})
        return record

    def update(
        self, record_id: str, changes: Union[CropUpdate, Mapping[str, Any]]
    ) -> Optional[CropRecord]:
        """
        Merge ``changes`` over the record with ``record_id``.

        Fields not supplied are kept. ``id``, ``createdAt`` and ``updatedAt``
        in ``changes`` are ignored. Returns None when no such record exists.
        """
        records = self._load(strict=True)
        for index, existing in enumerate(records):
            if existing.id == record_id:
                break
        else:
            log.info("Update target not found", extra={"record_id": record_id})
            return None

        supplied = _validate_changes(changes)
        merged = existing.model_dump(include=set(CropFields.model_fields))
        merged.update(supplied)
        validated = _validate_fields(merged)

        updated = existing.model_copy(
            update={
                **validated.model_dump(),
                "updated_at": max(self._clock(), existing.updated_at),
            }
        )
        records[index] = updated
        self._persist(records, action="update")
        log.info(
            "Record updated",
            extra={"record_id": record_id, "fields": sorted(supplied)},
        )
        return updated

    def delete(self, record_id: str) -> bool:
        """Remove the record with ``record_id``; False if there was none."""
        records = self._load(strict=True)
        remaining = [r for r in records if r.id != record_id]
        if len(remaining) == len(records):
            return False
        self._persist(remaining, action="delete")
        log.info("Record deleted", extra={"record_id": record_id})
        return True

    def clear_all(self) -> None:
        """Remove every record. Irreversible."""
        try:
            self._backend.delete(self._key)
        except StorageError as exc:
            log.exception("Failed to clear records", extra={"key": self._key})
            raise StorageWriteError("Failed to clear records", details={"action": "clear"}) from exc
        log.info("All records cleared", extra={"key": self._key})

    def replace_all(
        self, entries: Iterable[Union[CropFields, Mapping[str, Any]]]
    ) -> List[CropRecord]:
        """Clear the collection, then add each entry in order."""
        validated = [_validate_fields(entry) for entry in entries]
        self.clear_all()
        return [self.add(fields) for fields in validated]

    # --------------------------------------------------------------- internals

    @staticmethod
    def _new_id(taken: Set[str]) -> str:
        while True:
            candidate = str(uuid.uuid4())
            if candidate not in taken:
                return candidate

    def _persist(self, records: List[CropRecord], action: str) -> None:
        payload = _collection_adapter.dump_json(records, by_alias=True).decode("utf-8")
        try:
            self._backend.set(self._key, payload)
        except StorageError as exc:
            log.exception("Failed to persist records", extra={"action": action, "key": self._key})
            raise StorageWriteError(
                f"Failed to save records ({action})",
                details={"action": action, **exc.details},
            ) from exc


__all__ = ["RecordStore", "utc_now"]
