"""Cache providers.

MemoryCacheProvider is a dict-based cache — fast but not shared across
processes.  RedisCacheProvider is the multi-worker option; both implement
ICacheProvider so the resolver never knows which one it is talking to.
"""

from src.providers.cache.memory_cache import MemoryCacheProvider
from src.providers.cache.redis_cache import RedisCacheProvider

__all__ = ["MemoryCacheProvider", "RedisCacheProvider"]
