"""Site certificates sub-client - linking certificates to sites."""

import logging

from qcdn_schemas import SiteCertificate, SiteCertificateLinkRequest

from apps.cdn.client.base import ServiceClient
from apps.cdn.client.endpoints import MEDIA_SITES_SERVICE
from apps.cdn.validators import require_id

logger = logging.getLogger(__name__)


class SiteCertificatesClient(ServiceClient):
    """Certificate links (``/api/v2/sites/{site_id}/certificates``)."""

    SERVICE = MEDIA_SITES_SERVICE

    def _certs_url(self, site_id: str) -> str:
        return self._url(f"/api/v2/sites/{site_id}/certificates")

    def get_site_certificates(
        self, site_id: str, revision_id: str | None = None
    ) -> list[SiteCertificate]:
        require_id(site_id, "site_id")
        params = {"siteRevisionId": revision_id} if revision_id else None
        data = self._client.request("GET", self._certs_url(site_id), params=params)
        return [SiteCertificate.model_validate(item) for item in data or []]

    def link_site_certificate(
        self, site_id: str, cert_id: str | int
    ) -> list[SiteCertificate]:
        """
        Make ``cert_id`` the certificate of the site.

        A site holds a single certificate for now, so every existing link is
        removed first. Linking the same certificate twice leaves exactly one
        link.

        Returns:
            The links reported by the API after linking.
        """
        require_id(site_id, "site_id")
        require_id(cert_id, "cert_id")

        for existing in self.get_site_certificates(site_id):
            self.unlink_site_certificate(site_id, existing.certificate_id)

        logger.info("Linking certificate %s to site %s", cert_id, site_id)
        data = self._client.request(
            "POST",
            self._certs_url(site_id),
            json=SiteCertificateLinkRequest(certificate_id=str(cert_id)).to_api(),
        )
        return [SiteCertificate.model_validate(item) for item in data or []]

    def unlink_site_certificate(self, site_id: str, cert_id: str | int) -> None:
        require_id(site_id, "site_id")
        require_id(cert_id, "cert_id")
        logger.info("Unlinking certificate %s from site %s", cert_id, site_id)
        self._client.request("DELETE", f"{self._certs_url(site_id)}/{cert_id}")
