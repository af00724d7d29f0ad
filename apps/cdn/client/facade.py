"""Site facade - one handle exposing every sub-client."""

import time
from collections.abc import Callable
from dataclasses import dataclass

from apps.cdn.client.base import QCDNClient
from apps.cdn.client.certificates import (
    CertificateSigningRequestClient,
    CertificatesClient,
    CertificateTemplatesClient,
)
from apps.cdn.client.device_ips import DeviceIpsClient
from apps.cdn.client.publish_ops import PublishOpsClient
from apps.cdn.client.site_certificates import SiteCertificatesClient
from apps.cdn.client.site_configs import SiteConfigurationClient
from apps.cdn.client.sites import SiteClient


@dataclass
class SiteClientFacade:
    """Named sub-clients sharing one transport."""

    sites: SiteClient
    configs: SiteConfigurationClient
    site_certificates: SiteCertificatesClient
    publish_ops: PublishOpsClient
    certificates: CertificatesClient
    certificate_templates: CertificateTemplatesClient
    csrs: CertificateSigningRequestClient
    device_ips: DeviceIpsClient

    @classmethod
    def from_client(
        cls,
        client: QCDNClient,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ) -> "SiteClientFacade":
        return cls(
            sites=SiteClient(client),
            configs=SiteConfigurationClient(client),
            site_certificates=SiteCertificatesClient(client),
            publish_ops=PublishOpsClient(
                client,
                poll_interval=client.settings.poll_interval,
                clock=clock,
                sleep=sleep,
            ),
            certificates=CertificatesClient(client),
            certificate_templates=CertificateTemplatesClient(client),
            csrs=CertificateSigningRequestClient(client),
            device_ips=DeviceIpsClient(client),
        )
