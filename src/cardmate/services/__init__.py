"""Service layer for cardmate."""

from cardmate.services.auth_service import Session
from cardmate.services.catalog_service import CatalogService
from cardmate.services.preferences_service import Preferences
from cardmate.services.preferences_service import PreferencesService
from cardmate.services.round_service import RoundState
from cardmate.services.scorecard_service import ScorecardService
from cardmate.services.sync_service import SyncService

__all__ = [
    'CatalogService',
    'Preferences',
    'PreferencesService',
    'RoundState',
    'ScorecardService',
    'Session',
    'SyncService',
]
