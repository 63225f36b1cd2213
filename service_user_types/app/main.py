"""
Wiring for the user-type resolution service.
"""

from typing import Optional

from prometheus_client import CollectorRegistry

from shared.config import UserTypesConfig, get_config
from shared.logging import configure_logging, get_logger
from shared.metrics import UserTypeMetrics
from shared.retry import RetryConfig
from .cache import UserTypeCache
from .resolvers import UserTypeResolver
from .service import UserTypeService
from .store import PostgrestStore, RemoteStore


def build_user_type_service(
    config: Optional[UserTypesConfig] = None,
    store: Optional[RemoteStore] = None,
    configure_logs: bool = False,
    registry: Optional[CollectorRegistry] = None,
) -> UserTypeService:
    """Create a service with its own cache, store client and metrics.

    Each call builds an independent cache, so a server may build one per
    request scope or share one per process. Pass ``registry`` to expose the
    counters through a registry the host process already exports; close the
    returned service to release the store client the factory opened.
    """
    if config is None:
        config = get_config()

    if configure_logs:
        configure_logging(config.service_name, config.log_level, config.json_logs)

    if store is None:
        store = PostgrestStore(
            config.store_url,
            api_key=config.store_api_key,
            timeout=config.store_timeout_seconds,
        )

    resolver = UserTypeResolver(
        store,
        cache=UserTypeCache(ttl_seconds=config.cache_ttl_seconds),
        retry_config=RetryConfig(
            max_attempts=config.retry_max_attempts,
            base_delay=config.retry_base_delay_seconds,
        ),
        metrics=UserTypeMetrics(registry) if config.enable_metrics else None,
    )

    get_logger("user_types.main").info(
        "User type service configured",
        env=config.env,
        store_url=config.store_url,
        cache_ttl_seconds=config.cache_ttl_seconds,
        retry_max_attempts=config.retry_max_attempts,
    )
    return UserTypeService(resolver)
