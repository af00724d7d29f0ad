"""Certificate manager sub-clients - certificates, templates and CSRs."""

import logging

from qcdn_schemas import (
    Certificate,
    CertificateCreateRequest,
    CertificateSigningRequest,
    CertificateTemplate,
    CertificateTemplateCreateRequest,
    CertificateUpdateRequest,
    ChallengeDelegation,
)

from apps.cdn.client.base import ServiceClient
from apps.cdn.client.endpoints import CERT_MANAGER_SERVICE
from apps.cdn.validators import require_id

logger = logging.getLogger(__name__)

CERTIFICATES_ROOT = "/api/v2/certificates"
CERTIFICATE_TEMPLATES_ROOT = "/api/v2/certificate-templates"
CERTIFICATE_SIGNING_REQUESTS_ROOT = "/api/v2/certificate-signing-requests"


def _detailed(detailed: bool) -> dict[str, str] | None:
    return {"detailed": "true"} if detailed else None


# =============================================================================
# Certificates
# =============================================================================


class CertificatesClient(ServiceClient):
    """Uploaded certificates."""

    SERVICE = CERT_MANAGER_SERVICE

    def get_certificates(self, detailed: bool = False) -> list[Certificate]:
        data = self._client.request(
            "GET", self._url(CERTIFICATES_ROOT), params=_detailed(detailed)
        )
        return [Certificate.model_validate(item) for item in data or []]

    def get_certificate(self, cert_id: int, detailed: bool = False) -> Certificate:
        require_id(cert_id, "cert_id")
        data = self._client.request(
            "GET",
            self._url(f"{CERTIFICATES_ROOT}/{cert_id}"),
            params=_detailed(detailed),
        )
        return Certificate.model_validate(data)

    def create_certificate(self, request: CertificateCreateRequest) -> Certificate:
        logger.info("Uploading certificate")
        data = self._client.request(
            "POST", self._url(CERTIFICATES_ROOT), json=request.to_api()
        )
        return Certificate.model_validate(data)

    def update_certificate(
        self, cert_id: int, request: CertificateUpdateRequest
    ) -> Certificate:
        require_id(cert_id, "cert_id")
        logger.info("Updating certificate %s", cert_id)
        data = self._client.request(
            "PUT", self._url(f"{CERTIFICATES_ROOT}/{cert_id}"), json=request.to_api()
        )
        return Certificate.model_validate(data)

    def delete_certificate(self, cert_id: int) -> None:
        require_id(cert_id, "cert_id")
        logger.info("Deleting certificate %s", cert_id)
        self._client.request("DELETE", self._url(f"{CERTIFICATES_ROOT}/{cert_id}"))


# =============================================================================
# Certificate Templates
# =============================================================================


class CertificateTemplatesClient(ServiceClient):
    """Certificate templates. Templates cannot be updated, only replaced."""

    SERVICE = CERT_MANAGER_SERVICE

    def get_certificate_templates(self) -> list[CertificateTemplate]:
        data = self._client.request("GET", self._url(CERTIFICATE_TEMPLATES_ROOT))
        return [CertificateTemplate.model_validate(item) for item in data or []]

    def get_certificate_template(self, template_id: int) -> CertificateTemplate:
        require_id(template_id, "template_id")
        data = self._client.request(
            "GET", self._url(f"{CERTIFICATE_TEMPLATES_ROOT}/{template_id}")
        )
        return CertificateTemplate.model_validate(data)

    def create_certificate_template(
        self, request: CertificateTemplateCreateRequest
    ) -> CertificateTemplate:
        logger.info("Creating certificate template for %s", request.common_name)
        data = self._client.request(
            "POST", self._url(CERTIFICATE_TEMPLATES_ROOT), json=request.to_api()
        )
        return CertificateTemplate.model_validate(data)

    def delete_certificate_template(self, template_id: int) -> None:
        require_id(template_id, "template_id")
        logger.info("Deleting certificate template %s", template_id)
        self._client.request(
            "DELETE", self._url(f"{CERTIFICATE_TEMPLATES_ROOT}/{template_id}")
        )


# =============================================================================
# Certificate Signing Requests
# =============================================================================


class CertificateSigningRequestClient(ServiceClient):
    """Read-only access to CSRs spawned by certificate templates."""

    SERVICE = CERT_MANAGER_SERVICE

    def get_csr(self, csr_id: int | str) -> CertificateSigningRequest:
        require_id(csr_id, "csr_id")
        data = self._client.request(
            "GET", self._url(f"{CERTIFICATE_SIGNING_REQUESTS_ROOT}/{csr_id}")
        )
        return CertificateSigningRequest.model_validate(data)

    def get_challenge_delegations(self, csr_id: int | str) -> list[ChallengeDelegation]:
        """DNS records that prove ownership of the domains in a CSR."""
        return self.get_csr(csr_id).challenge_delegation_of_domains_list

    def get_challenge_delegations_for_template(
        self, template: CertificateTemplate
    ) -> list[ChallengeDelegation]:
        """Challenge records of the template's most recent CSR."""
        csr_id = template.latest_csr_id
        if csr_id is None:
            return []
        return self.get_challenge_delegations(csr_id)
