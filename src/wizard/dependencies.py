"""
Wiring for the quote wizard: storage backend, form store and flow.

Selects the storage backend from configuration (REDIS_URL switches to Redis),
the same way the API entrypoint chooses between real and in-memory stores.
"""

import logging
from typing import Optional

from src.integrations.clients.mocks.document_scanner import DocumentScanner
from src.utils.config_loader import WizardConfig, load_wizard_config
from src.wizard.flows.quote_wizard import QuoteWizardFlow
from src.wizard.state_manager import FormStore

logger = logging.getLogger(__name__)


def create_storage(config: WizardConfig):
    storage_cfg = config.storage
    if storage_cfg.backend == "redis" and storage_cfg.redis_url:
        from src.database.redis_real import RedisStorage

        logger.info("Using Redis storage for form data")
        return RedisStorage(url=storage_cfg.redis_url, key_prefix=storage_cfg.redis_key_prefix)

    if storage_cfg.backend == "memory":
        from src.database.redis import InMemoryStorage

        logger.info("Using in-memory storage for form data (not durable)")
        return InMemoryStorage()

    from src.database.local_storage import LocalStorage

    logger.info("Using local file storage for form data: %s", storage_cfg.directory)
    return LocalStorage(storage_cfg.directory)


def create_form_store(config: Optional[WizardConfig] = None) -> FormStore:
    config = config or load_wizard_config()
    return FormStore(create_storage(config), storage_key=config.storage.key)


def create_wizard(config: Optional[WizardConfig] = None) -> QuoteWizardFlow:
    config = config or load_wizard_config()
    store = create_form_store(config)
    scanner = DocumentScanner(delay=config.scanner.delay_seconds)
    return QuoteWizardFlow(store, scanner=scanner)
