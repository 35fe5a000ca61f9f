"""Application wiring: settings, logging, storage and services"""

from typing import Optional

from .auth.service import AuthGateway
from .auth.sessions import SessionStore
from .services.cart_ledger import CartLedger
from .services.catalog import ProductCatalog
from .services.identity_directory import IdentityDirectory
from .services.notifier import OrderNotifier, WhatsAppNotifier
from .services.order_composer import OrderComposer
from .storage import Repository, create_repository
from .utils.config import Settings, load_settings
from .utils.logger import get_logger, setup_logger

logger = get_logger(__name__)


class ShopApp:
    """Holds the storefront services for one process"""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        repository: Optional[Repository] = None,
        notifier: Optional[OrderNotifier] = None,
    ):
        self.settings = settings or load_settings()
        self.repository = repository or create_repository(self.settings.storage)
        self.notifier = notifier or WhatsAppNotifier()

        auth = self.settings.auth
        pricing = self.settings.pricing
        self.directory = IdentityDirectory(self.repository, bcrypt_rounds=auth.bcrypt_rounds)
        self.sessions = SessionStore(self.repository, expiry_days=auth.session_days)
        self.auth = AuthGateway(self.directory, self.sessions, issuer=auth.totp_issuer)
        self.catalog = ProductCatalog(self.repository)
        self.cart = CartLedger(
            self.repository,
            self.catalog,
            shipping_flat=pricing.shipping_flat,
            tax_rate=pricing.tax_rate,
        )
        self.orders = OrderComposer(
            self.repository,
            self.cart,
            notifier=self.notifier,
            order_prefix=pricing.order_prefix,
        )

    def initialize(self, seed_products: bool = True) -> "ShopApp":
        """Set up logging, bootstrap the admin account and sample catalog"""
        log = self.settings.logging
        setup_logger(
            log_level=log.level,
            log_format=log.format,
            file_path=log.file_path,
            max_bytes=log.max_bytes,
            backup_count=log.backup_count,
        )
        logger.info(
            "Initializing storefront",
            app_name=self.settings.app.name,
            version=self.settings.app.version,
            environment=self.settings.app.environment,
            storage=type(self.repository).__name__,
        )
        self.directory.ensure_bootstrap_admin(
            self.settings.auth.admin_username, self.settings.auth.admin_password
        )
        self.sessions.purge_expired()
        if seed_products:
            self.catalog.seed_samples()
        return self
