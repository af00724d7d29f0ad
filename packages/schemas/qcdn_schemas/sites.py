"""Site schemas - sites, configuration revisions and certificate links."""

from typing import Any

from pydantic import AliasChoices, Field

from qcdn_schemas.base import QCDNModel
from qcdn_schemas.publishing import ActiveAndLastPublishingOperation

# =============================================================================
# Sites
# =============================================================================


class Site(QCDNModel):
    """A CDN delivery service."""

    site_id: str
    owner_org_id: str | None = None
    creation_time_milli: int | None = None
    last_update_time_milli: int | None = None
    created_user: str | None = None
    last_updated_user: str | None = None
    site_dns_cname_delegation_target: str | None = None
    site_name: str = ""
    api_version: str | None = None
    active_and_last_publishing_operation: ActiveAndLastPublishingOperation | None = (
        None
    )
    service_type: str | None = None
    routing_method: str | None = None
    should_provision_to_third_party_cdn: bool = False
    service_id: str | None = None
    is_self_service_blocked: bool = False
    # The API has served both spellings of this key
    is_deleted: bool = Field(
        default=False,
        validation_alias=AliasChoices("isDeleted", "IsDeleted", "is_deleted"),
    )


class SiteCreateRequest(QCDNModel):
    """Request body for creating a site."""

    site_name: str
    routing_method: str | None = None


class SiteUpdateRequest(QCDNModel):
    """Request body for renaming a site."""

    site_name: str


# =============================================================================
# Configuration Revisions
# =============================================================================


class SiteConfigVersion(QCDNModel):
    """An immutable configuration revision of a site."""

    site_id: str = ""
    revision_id: str
    revision_num: int = 0
    owner_org_id: str | None = None
    creation_time_milli: int | None = None
    last_update_time_milli: int | None = None
    created_user: str | None = None
    host_index: Any = None  # Opaque delivery metadata (raw JSON)
    change_description: str | None = None


class SiteConfigAddRequest(QCDNModel):
    """Request body for creating a new configuration revision."""

    host_index: Any
    change_description: str = ""


# =============================================================================
# Certificate Links
# =============================================================================


class SiteCertificate(QCDNModel):
    """A certificate linked to a site."""

    certificate_id: str
    certificate_type: str | None = None
    target: str | None = None
    state: str | None = None


class SiteCertificateLinkRequest(QCDNModel):
    """Request body for linking a certificate to a site."""

    certificate_id: str
