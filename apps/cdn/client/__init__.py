"""Qwilt CDN API client - transport, resource sub-clients and the site facade."""

import logging

import httpx

from apps.cdn.client.base import QCDNClient, ServiceClient
from apps.cdn.client.certificates import (
    CertificateSigningRequestClient,
    CertificatesClient,
    CertificateTemplatesClient,
)
from apps.cdn.client.device_ips import DeviceIpsClient
from apps.cdn.client.endpoints import EndpointBuilder
from apps.cdn.client.facade import SiteClientFacade
from apps.cdn.client.publish_ops import PublishOpsClient
from apps.cdn.client.site_certificates import SiteCertificatesClient
from apps.cdn.client.site_configs import SiteConfigurationClient
from apps.cdn.client.sites import SiteClient
from apps.cdn.config import QCDNSettings

logger = logging.getLogger(__name__)


def create_client(
    settings: QCDNSettings, http_client: httpx.Client | None = None
) -> QCDNClient:
    """
    Get a ready-to-use transport for the given settings.

    This is the main entry point for talking to the Qwilt CDN API. Settings
    are validated, and without an API key the client signs in right away.

    Args:
        settings: Credentials and environment.
        http_client: Optional HTTP client for dependency injection (testing).

    Returns:
        An authenticated client.

    Raises:
        QCDNConfigError: If the settings cannot authenticate.
        QCDNAuthError: If signing in fails.

    Example:
        client = create_client(QCDNSettings.from_env())
        facade = SiteClientFacade.from_client(client)
        sites = facade.sites.get_sites()
    """
    settings.validate_credentials()
    client = QCDNClient(settings, http_client=http_client)
    if not settings.uses_api_key:
        client.sign_in()
    logger.info("Qwilt CDN client ready for %s", settings.env_type)
    return client


__all__ = [
    "CertificateSigningRequestClient",
    "CertificateTemplatesClient",
    "CertificatesClient",
    "DeviceIpsClient",
    "EndpointBuilder",
    "PublishOpsClient",
    "QCDNClient",
    "ServiceClient",
    "SiteCertificatesClient",
    "SiteClient",
    "SiteClientFacade",
    "SiteConfigurationClient",
    "create_client",
]
