"""
Shared plumbing for the Qwilt CDN Pulumi dynamic providers.

Providers are pickled into the Pulumi state, so they hold only settings and
build a fresh client for every operation.
"""

import logging
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from typing import Any

import pulumi
from pulumi.dynamic import CheckFailure, ResourceProvider

from apps.cdn.client import SiteClientFacade, create_client
from apps.cdn.config import QCDNSettings
from apps.cdn.services import SiteActivationService

logger = logging.getLogger(__name__)

FacadeFactory = Callable[[], SiteClientFacade]


def load_settings() -> QCDNSettings:
    """
    Settings for a Pulumi program.

    Values from the ``qcdn`` config namespace (``envType``, ``username``,
    ``password``, ``xapiToken``) win over the QCDN_* environment variables.
    """
    config = pulumi.Config("qcdn")
    return QCDNSettings.from_env(
        env_type=config.get("envType"),
        username=config.get("username"),
        password=config.get("password"),
        xapi_token=config.get("xapiToken"),
    )


class QCDNResourceProvider(ResourceProvider):
    """
    Base dynamic provider with client lifecycle helpers.

    Args:
        settings: Client settings. Resolved from the environment when None.
        facade_factory: Optional facade builder for dependency injection
            (testing). The caller owns the clients it returns.
    """

    serialize_as_secret_always = True

    def __init__(
        self,
        settings: QCDNSettings | None = None,
        facade_factory: FacadeFactory | None = None,
    ) -> None:
        super().__init__()
        self.settings = settings
        self._facade_factory = facade_factory

    def resolved_settings(self) -> QCDNSettings:
        return self.settings or QCDNSettings.from_env()

    @contextmanager
    def facade(self) -> Iterator[SiteClientFacade]:
        if self._facade_factory is not None:
            yield self._facade_factory()
            return

        client = create_client(self.resolved_settings())
        try:
            yield SiteClientFacade.from_client(client)
        finally:
            client.close()

    @contextmanager
    def activation_service(self) -> Iterator[SiteActivationService]:
        with self.facade() as facade:
            timeout = self.resolved_settings().acceptance_timeout
            yield SiteActivationService(facade, acceptance_timeout=timeout)


# =============================================================================
# Property Helpers
# =============================================================================


def as_int(value: Any) -> int | None:
    """Pulumi hands numbers to dynamic providers as floats."""
    if value is None or value == "":
        return None
    return int(value)


def changed_keys(
    olds: dict[str, Any], news: dict[str, Any], keys: tuple[str, ...]
) -> list[str]:
    return [key for key in keys if olds.get(key) != news.get(key)]


def require_inputs(news: dict[str, Any], keys: tuple[str, ...]) -> list[CheckFailure]:
    return [
        CheckFailure(key, f"{key} is required")
        for key in keys
        if news.get(key) in (None, "")
    ]


def split_import_id(resource_id: str, secondary: str) -> tuple[str, str]:
    """
    Parse ``primary`` or ``primary:secondary`` import identifiers.

    Returns:
        The primary ID and the secondary ID, "" when implicit.

    Raises:
        ValueError: For any other shape.
    """
    parts = resource_id.split(":")
    if len(parts) == 2 and parts[0] and parts[1]:
        return parts[0], parts[1]
    if len(parts) == 1 and parts[0]:
        return parts[0], ""
    raise ValueError(
        f"Expected import identifier with format: site_id:{secondary} OR "
        f"site_id. Got: {resource_id!r}"
    )
