"""
Calculation History Store - bounded, most-recent-first, persisted.

Holds at most `capacity` calculations. Every mutating call writes a JSON
snapshot {"calculations": [...]} under the storage key before returning;
construction rehydrates from that key and falls back to an empty history
when the snapshot is missing or unreadable.
"""
import functools
import json
from datetime import datetime, timezone
from typing import Callable, Optional

from ..config.settings import DEFAULT_STORAGE_KEY
from ..engine.models import Calculation, PricingResult
from ..logging_utils import get_logger
from .ids import TimestampIdFactory
from .storage import Storage

logger = get_logger(__name__)

DEFAULT_CAPACITY = 10


def utc_now_iso() -> str:
    """Current UTC time as an ISO-8601 string with millisecond precision."""
    return datetime.now(timezone.utc).isoformat(timespec='milliseconds').replace('+00:00', 'Z')


def persisted(method):
    """Write a snapshot to storage after the wrapped mutation returns."""
    @functools.wraps(method)
    def wrapper(self, *args, **kwargs):
        result = method(self, *args, **kwargs)
        self._save()
        return result
    return wrapper


class CalculationHistory:
    """
    Ordered history of calculations, newest first.

    Construct one instance per session and hand it to whatever needs it
    (UI, API); there is no module-level store.
    """

    def __init__(
        self,
        storage: Storage,
        key: str = DEFAULT_STORAGE_KEY,
        capacity: int = DEFAULT_CAPACITY,
        id_factory: Optional[Callable[[], str]] = None,
        clock: Callable[[], str] = utc_now_iso,
    ):
        if capacity < 1:
            raise ValueError(f"History capacity must be at least 1, got {capacity}")

        self.storage = storage
        self.key = key
        self.capacity = capacity
        self._id_factory = id_factory or TimestampIdFactory()
        self._clock = clock
        self._calculations: list[Calculation] = self._load()

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def _load(self) -> list[Calculation]:
        """Rehydrate from storage; any problem yields an empty history."""
        try:
            raw = self.storage.read(self.key)
        except (OSError, ValueError) as e:
            logger.warning("History storage unreadable, starting empty",
                           extra={"context": {"key": self.key, "error": str(e)}})
            return []

        if raw is None:
            return []

        try:
            data = json.loads(raw)
            records = data['calculations']
            if not isinstance(records, list):
                raise ValueError("'calculations' is not a list")
            calculations = [Calculation.from_dict(record) for record in records]
        except (ValueError, TypeError, KeyError) as e:
            logger.warning("Discarding corrupt history snapshot",
                           extra={"context": {"key": self.key, "error": str(e)}})
            return []

        return calculations[:self.capacity]

    def _save(self):
        """Write the current state under the storage key."""
        snapshot = {"calculations": [calc.to_dict() for calc in self._calculations]}
        self.storage.write(self.key, json.dumps(snapshot))
        logger.debug("History saved", extra={"context": {"key": self.key, "count": len(self._calculations)}})

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    @persisted
    def add(self, result: PricingResult) -> Calculation:
        """
        Record a result as the newest calculation.

        The oldest entries beyond capacity are dropped silently.
        """
        calculation = Calculation.from_result(result, calculation_id=self._id_factory(), date=self._clock())
        self._calculations = [calculation, *self._calculations][:self.capacity]
        return calculation

    @persisted
    def remove(self, calculation_id: str) -> None:
        """Delete the calculation with this id; unknown ids are ignored."""
        self._calculations = [calc for calc in self._calculations if calc.id != calculation_id]

    @persisted
    def clear(self) -> None:
        """Delete every calculation."""
        self._calculations = []

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def list(self) -> list[Calculation]:
        """All calculations, most recent first."""
        return list(self._calculations)

    def latest(self) -> Optional[Calculation]:
        """The most recent calculation, or None when the history is empty."""
        return self._calculations[0] if self._calculations else None

    def get(self, calculation_id: str) -> Optional[Calculation]:
        for calc in self._calculations:
            if calc.id == calculation_id:
                return calc
        return None

    def __len__(self) -> int:
        return len(self._calculations)
