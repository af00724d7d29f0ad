"""Certificate schemas - uploaded certificates, templates and CSRs."""

from enum import Enum

from pydantic import Field

from qcdn_schemas.base import QCDNModel

# =============================================================================
# Enums
# =============================================================================


class CertificateStatus(str, Enum):
    """Lifecycle status of a certificate."""

    ISSUED = "ISSUED"
    ACTIVE = "ACTIVE"
    EXPIRED = "EXPIRED"
    REVOKED = "REVOKED"


# =============================================================================
# Certificates
# =============================================================================


class Certificate(QCDNModel):
    """
    A certificate stored in the certificate manager.

    The private key is never returned by the API; ``pk_hash`` is a
    non-reversible fingerprint of it.
    """

    cert_id: int
    certificate: str | None = None
    certificate_chain: str | None = None
    description: str | None = None
    pk_hash: str | None = None
    tenant: str | None = None
    domain: str | None = None
    status: str | None = None
    type: str | None = None
    csr_id: str | None = None  # Set when issued from a Qwilt-managed CSR


class CertificateCreateRequest(QCDNModel):
    """Request body for uploading a certificate."""

    certificate: str
    certificate_chain: str = ""
    private_key: str
    description: str = ""


class CertificateUpdateRequest(CertificateCreateRequest):
    """Request body for updating a certificate."""


# =============================================================================
# Certificate Templates
# =============================================================================


class CertificateTemplate(QCDNModel):
    """
    Specification for issuing certificates, optionally Qwilt-managed.

    ``last_certificate_id`` is None until the first certificate has been
    issued (for auto-managed templates: until domain verification passes).
    """

    certificate_template_id: int
    country: str | None = None
    tenant: str | None = None
    state: str | None = None
    locality: str | None = None
    organization_name: str | None = None
    common_name: str = ""
    sans: list[str] | None = None
    auto_managed_certificate_template: bool = False
    last_certificate_id: int | None = None
    csr_ids: list[int] | None = None

    @property
    def latest_csr_id(self) -> int | None:
        """The most recently spawned CSR, if any."""
        return self.csr_ids[-1] if self.csr_ids else None


class CertificateTemplateCreateRequest(QCDNModel):
    """Request body for creating a certificate template."""

    country: str | None = None
    state: str | None = None
    locality: str | None = None
    organization_name: str | None = None
    common_name: str
    sans: list[str] | None = None
    auto_managed_certificate_template: bool = False


# =============================================================================
# Certificate Signing Requests
# =============================================================================


class ChallengeDelegation(QCDNModel):
    """A DNS record the customer must create to prove domain ownership."""

    from_domain: str
    to_domain: str


class CertificateSigningRequest(QCDNModel):
    """A CSR, linked 1:1 to a template when auto-managed."""

    csr_id: int
    certificate_template_id_ref: str | None = None
    auto_managed_csr: bool = False
    challenge_delegation_of_domains_list: list[ChallengeDelegation] = Field(
        default_factory=list
    )

    @property
    def certificate_template_id(self) -> int | None:
        if not self.certificate_template_id_ref:
            return None
        return int(self.certificate_template_id_ref)
