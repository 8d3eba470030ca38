"""Application wiring: settings -> store -> identity and record services"""

from typing import Optional

from .auth.binder import IdentityBinder
from .auth.models import User
from .auth.verifier import IdentityVerifier
from .core.config import Settings, load_settings
from .core.ids import IdGenerator
from .services.access import AccessProjector
from .services.orders import OrderLedger
from .services.tickets import TicketThread
from .stores.document_store import DocumentStore, JsonFileStore
from .utils.logger import get_logger, setup_logger

logger = get_logger(__name__)


class AuroraApp:
    """Holds one store and the services operating on it"""

    def __init__(self, settings: Optional[Settings] = None, store: Optional[DocumentStore] = None):
        self.settings = settings
        self.store = store
        self.ids: Optional[IdGenerator] = None
        self.binder: Optional[IdentityBinder] = None
        self.projector: Optional[AccessProjector] = None
        self.orders: Optional[OrderLedger] = None
        self.tickets: Optional[TicketThread] = None
        self._verifier: Optional[IdentityVerifier] = None

    def initialize(self) -> "AuroraApp":
        if self.settings is None:
            self.settings = load_settings()

        log_cfg = self.settings.logging
        setup_logger(
            log_level=log_cfg.level,
            log_format=log_cfg.format,
            file_path=log_cfg.file_path,
            max_bytes=log_cfg.max_bytes,
            backup_count=log_cfg.backup_count,
        )

        if self.store is None:
            self.store = JsonFileStore(self.settings.store.db_path)

        self.ids = IdGenerator()
        self.binder = IdentityBinder(self.store, self.settings.auth.super_admin_handle)
        self.projector = AccessProjector(self.store)
        self.orders = OrderLedger(self.store, self.ids)
        self.tickets = TicketThread(
            self.store,
            self.ids,
            announcement_marker=self.settings.tickets.announcement_marker,
        )
        logger.info(
            "Aurora initialized",
            store=type(self.store).__name__,
            environment=self.settings.web.environment,
        )
        return self

    @property
    def verifier(self) -> IdentityVerifier:
        """Built on first use so a missing BOT_TOKEN only breaks login."""
        if self._verifier is None:
            self._verifier = IdentityVerifier(self.settings.auth.bot_token)
        return self._verifier

    def login(self, assertion) -> User:
        """Verify the assertion, then upsert the user. Nothing is written on failure."""
        identity = self.verifier.verify(assertion)
        return self.binder.bind(identity)
