from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class TimerState:
    is_running: bool = False
    exit_time_millis: int = 0


class PreferenceStore(ABC):
    """Read-only view of the host app's key-value store."""

    @abstractmethod
    def contains(self, key: str) -> bool:
        pass

    @abstractmethod
    def get_bool(self, key: str, default: bool = False) -> bool:
        pass

    @abstractmethod
    def get_int(self, key: str, default: int = 0) -> int:
        pass


def _as_bool(value, default: bool) -> bool:
    return value if isinstance(value, bool) else default


def _as_int(value, default: int) -> int:
    # bool is an int subclass; a flag stored under an int key is a wrong type
    if isinstance(value, bool) or not isinstance(value, int):
        return default
    return value


class MemoryPreferenceStore(PreferenceStore):
    def __init__(self, values: dict = None):
        self._values = dict(values or {})

    def contains(self, key: str) -> bool:
        return key in self._values

    def get_bool(self, key: str, default: bool = False) -> bool:
        return _as_bool(self._values.get(key, default), default)

    def get_int(self, key: str, default: int = 0) -> int:
        return _as_int(self._values.get(key, default), default)
