from __future__ import annotations

import json
import logging
import os
import tempfile
import threading
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Callable, Generic, Iterable, List, Optional, Type, TypeVar

from pydantic import TypeAdapter

from utils.records import OrderRecord, SaleSummaryRecord

logger = logging.getLogger(__name__)

R = TypeVar("R")


@dataclass(frozen=True)
class MergeResult:
    added: int
    duplicates: int
    persisted: bool = True
    error: Optional[str] = None


class OrderStore(Generic[R]):
    """Durable, deduplicated collection of order records.

    The whole collection lives in one JSON file and is replaced as a unit on
    every write. A merge holds the store lock for its full
    read-modify-write cycle, so two merges from the same process cannot
    lose each other's records. The in-memory snapshot always reflects the
    last merge or clear, even when writing the file failed: until a later
    write succeeds, the file on disk is stale and is not read back.
    """

    def __init__(self, path: str | Path, record_type: Type[R], key: Callable[[R], str]):
        self.path = Path(path)
        self.record_type = record_type
        self.key = key
        self._adapter = TypeAdapter(List[record_type])
        self._lock = threading.Lock()
        self._records: List[R] = []
        self._loaded = False
        self._dirty = False

    def snapshot(self) -> List[R]:
        """Current records, reloaded from disk unless unsaved changes are pending."""
        with self._lock:
            return list(self._read())

    def __len__(self) -> int:
        return len(self.snapshot())

    def merge(self, incoming: Iterable[R]) -> MergeResult:
        if incoming is None:
            raise TypeError("incoming must be an iterable of records, not None")
        incoming = list(incoming)
        with self._lock:
            existing = self._read()
            seen = {self.key(r) for r in existing}
            new_records: List[R] = []
            for record in incoming:
                k = self.key(record)
                if k in seen:
                    continue
                seen.add(k)
                new_records.append(record)

            merged = existing + new_records
            self._records = merged
            error = self._write(merged)

        result = MergeResult(
            added=len(new_records),
            duplicates=len(incoming) - len(new_records),
            persisted=error is None,
            error=error,
        )
        logger.info(
            "Merged into %s: %d added, %d duplicates (total %d)",
            self.path.name, result.added, result.duplicates, len(merged),
        )
        return result

    def clear(self) -> MergeResult:
        """Drop every record. Irreversible; confirmation belongs to the caller."""
        with self._lock:
            self._records = []
            error = None
            try:
                self.path.unlink()
            except FileNotFoundError:
                pass
            except OSError as e:
                logger.exception("Could not remove order store %s", self.path)
                error = str(e)
            self._loaded = True
            self._dirty = error is not None
        logger.info("Cleared order store %s", self.path.name)
        return MergeResult(added=0, duplicates=0, persisted=error is None, error=error)

    def _read(self) -> List[R]:
        # Unsaved changes (a failed write or clear) make the file stale, so
        # memory wins. A file that is present but unreadable reads as an
        # empty store only if nothing has been loaded yet; otherwise the last
        # good in-memory snapshot wins.
        if self._dirty or not self.path.exists():
            if not self._loaded:
                self._loaded = True
                self._records = []
            return list(self._records)
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                raw = json.load(f)
            records = self._decode(raw)
        # pydantic's ValidationError is a ValueError
        except (OSError, ValueError, TypeError) as e:
            logger.warning("Order store %s is unreadable, using in-memory snapshot: %s", self.path, e)
            self._loaded = True
            return list(self._records)
        self._records = records
        self._loaded = True
        return list(records)

    def _decode(self, raw) -> List[R]:
        if not isinstance(raw, list):
            raise ValueError(f"expected a JSON list, got {type(raw).__name__}")
        # Field types are checked too: a string where a number belongs
        # makes the whole file unreadable.
        return self._adapter.validate_python(raw)

    def _write(self, records: List[R]) -> Optional[str]:
        """Replace the file atomically; return an error message instead of raising."""
        payload = [asdict(r) for r in records]
        tmp_name = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(prefix=f".{self.path.name}.", dir=self.path.parent)
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(payload, f)
            os.replace(tmp_name, self.path)
            tmp_name = None
        except (OSError, TypeError, ValueError) as e:
            logger.exception("Failed to persist order store %s", self.path)
            self._dirty = True
            return str(e)
        finally:
            if tmp_name is not None:
                try:
                    os.unlink(tmp_name)
                except OSError:
                    pass
        self._dirty = False
        return None


def order_item_store(path: str | Path) -> OrderStore[OrderRecord]:
    """Line-item store deduplicated by transaction id."""
    return OrderStore(path, OrderRecord, key=lambda r: r.transaction_id)


def sale_summary_store(path: str | Path) -> OrderStore[SaleSummaryRecord]:
    """Order-level store deduplicated by order id."""
    return OrderStore(path, SaleSummaryRecord, key=lambda r: r.order_id)


def merge_orders(store: OrderStore[R], incoming: Iterable[R]) -> MergeResult:
    return store.merge(incoming)


def clear_orders(store: OrderStore[R]) -> None:
    store.clear()
