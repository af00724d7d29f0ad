"""QCDN Schemas - Pydantic models for the Qwilt CDN API data contracts."""

from qcdn_schemas.base import QCDNModel
from qcdn_schemas.certificates import (
    Certificate,
    CertificateCreateRequest,
    CertificateSigningRequest,
    CertificateStatus,
    CertificateTemplate,
    CertificateTemplateCreateRequest,
    CertificateUpdateRequest,
    ChallengeDelegation,
)
from qcdn_schemas.network import DeviceIps, NetworkDeviceIps
from qcdn_schemas.publishing import (
    REJECTED_ACCEPTANCE_STATUSES,
    AcceptanceStatus,
    ActiveAndLastPublishingOperation,
    OperationType,
    PublishStatus,
    PubOp,
    PubRequest,
    RepubRequest,
    Target,
    UnpubRequest,
)
from qcdn_schemas.sites import (
    Site,
    SiteCertificate,
    SiteCertificateLinkRequest,
    SiteConfigAddRequest,
    SiteConfigVersion,
    SiteCreateRequest,
    SiteUpdateRequest,
)

__all__ = [
    "QCDNModel",
    # Certificates
    "Certificate",
    "CertificateCreateRequest",
    "CertificateSigningRequest",
    "CertificateStatus",
    "CertificateTemplate",
    "CertificateTemplateCreateRequest",
    "CertificateUpdateRequest",
    "ChallengeDelegation",
    # Network
    "DeviceIps",
    "NetworkDeviceIps",
    # Publishing
    "REJECTED_ACCEPTANCE_STATUSES",
    "AcceptanceStatus",
    "ActiveAndLastPublishingOperation",
    "OperationType",
    "PublishStatus",
    "PubOp",
    "PubRequest",
    "RepubRequest",
    "Target",
    "UnpubRequest",
    # Sites
    "Site",
    "SiteCertificate",
    "SiteCertificateLinkRequest",
    "SiteConfigAddRequest",
    "SiteConfigVersion",
    "SiteCreateRequest",
    "SiteUpdateRequest",
]
