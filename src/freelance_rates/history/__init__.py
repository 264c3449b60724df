"""History subpackage - bounded, persisted calculation history."""
from .store import CalculationHistory, DEFAULT_CAPACITY
from .storage import JsonFileStorage, MemoryStorage
from .ids import TimestampIdFactory, CounterIdFactory, uuid_id_factory

__all__ = [
    'CalculationHistory', 'DEFAULT_CAPACITY',
    'JsonFileStorage', 'MemoryStorage',
    'TimestampIdFactory', 'CounterIdFactory', 'uuid_id_factory',
]
