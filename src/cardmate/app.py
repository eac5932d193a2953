"""Application initialization."""

import logging
from dataclasses import dataclass

from cardmate.api.dgcr import DGCRClient
from cardmate.api.rest_store import RestStore
from cardmate.config.types import AppConfig
from cardmate.services.auth_service import Session
from cardmate.services.catalog_service import CatalogService
from cardmate.services.preferences_service import PreferencesService
from cardmate.services.scorecard_service import ScorecardService
from cardmate.services.sync_service import SyncService
from cardmate.store.base import RemoteStore
from cardmate.store.sqlite_store import SqliteStore

logger = logging.getLogger(__name__)


@dataclass
class Cardmate:
    """Wired services for one session."""
    config: AppConfig
    store: RemoteStore
    session: Session
    sync: SyncService
    catalog: CatalogService
    scorecards: ScorecardService
    preferences: PreferencesService
    lookup: DGCRClient

    def close(self) -> None:
        self.sync.close()
        self.lookup.session.close()
        self.store.close()

def create_store(config: AppConfig) -> RemoteStore:
    """Store for the configured backend."""
    if config.store.backend == 'rest':
        return RestStore(config.store.url or '', config.store.api_key or '', config.store.access_token)
    return SqliteStore(config.store_path)

def create_app(config: AppConfig, user_id: str | None = None) -> Cardmate:
    """Build the services, signing in as ``user_id`` or the configured user."""
    store = create_store(config)
    session = Session(store, user_id or config.user_id)
    logger.debug(f"Services created for backend {config.store.backend}")
    return Cardmate(
        config=config,
        store=store,
        session=session,
        sync=SyncService(store, session),
        catalog=CatalogService(store, session),
        scorecards=ScorecardService(store, session),
        preferences=PreferencesService(config.preferences_path),
        lookup=DGCRClient(config.course_lookup.api_key, config.course_lookup.base_url),
    )
