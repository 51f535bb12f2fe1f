"""Single-line text caches kept across invocations."""

from .text_cache import load_cached_value, save_cached_value

__all__ = [
    "load_cached_value",
    "save_cached_value",
]
