"""Named mutexes."""

from .mutex_kv import MutexKV, mutex_kv

__all__: list[str] = ["MutexKV", "mutex_kv"]
