"""Adaptateurs du store de donnees de session."""

from orderflow.adapters.session.diskcache_store import DiskCacheSessionStore

__all__ = ["DiskCacheSessionStore"]
