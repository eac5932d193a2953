"""Relational store backends."""

from .base import RemoteStore, Subscription
from .sqlite_store import SqliteStore

__all__ = ['RemoteStore', 'SqliteStore', 'Subscription']
