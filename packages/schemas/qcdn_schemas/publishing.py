"""Publishing operation schemas - publish/unpublish requests and their status."""

from enum import Enum
from typing import Any

from qcdn_schemas.base import QCDNModel

# =============================================================================
# Enums
# =============================================================================


class Target(str, Enum):
    """CDN deployment environment a revision is published to."""

    GA = "ga"
    STAGING = "staging"


class PublishStatus(str, Enum):
    """Execution progress of an accepted publishing operation."""

    IN_PROGRESS = "InProgress"
    SUCCESS = "Success"
    FAILED = "Failed"
    ABORTED = "Aborted"


class AcceptanceStatus(str, Enum):
    """Whether the CDN validated and queued the operation for execution."""

    PENDING = "Pending"
    ACCEPTED = "Accepted"
    INVALID = "Invalid"
    DISMISSED = "Dismissed"
    ABORTED = "Aborted"


class OperationType(str, Enum):
    """Kind of publishing operation."""

    PUBLISH = "Publish"
    UNPUBLISH = "Unpublish"


# Acceptance statuses that mean the CDN refused to run the operation
REJECTED_ACCEPTANCE_STATUSES = frozenset(
    {AcceptanceStatus.INVALID.value, AcceptanceStatus.DISMISSED.value}
)


# =============================================================================
# Publishing Operations
# =============================================================================


class PubOp(QCDNModel):
    """
    A single publish or unpublish attempt for a site.

    Status fields are kept as plain strings so that values introduced by the
    API later do not break parsing; compare them against the enums above.
    """

    publish_id: str = ""
    creation_time_milli: int | None = None
    owner_org_id: str | None = None
    last_update_time_milli: int | None = None
    revision_id: str = ""
    target: str | None = None
    username: str | None = None
    publish_state: str | None = None
    publish_status: str | None = None
    publish_acceptance_status: str | None = None
    publish_hidden: bool = False
    publish_mode: str | None = None
    operation_type: str | None = None
    status_line: list[str] | None = None
    config_last_modified_time_milli: int | None = None
    is_active: bool = False
    validators_err_details: Any = None

    @property
    def is_empty(self) -> bool:
        """True for the sentinel returned when no operation matched."""
        return not self.publish_id

    @property
    def is_pending_acceptance(self) -> bool:
        return self.publish_acceptance_status == AcceptanceStatus.PENDING.value

    @property
    def is_rejected(self) -> bool:
        return self.publish_acceptance_status in REJECTED_ACCEPTANCE_STATUSES

    @property
    def is_in_progress(self) -> bool:
        return self.publish_status == PublishStatus.IN_PROGRESS.value

    @property
    def is_unpublish(self) -> bool:
        return self.operation_type == OperationType.UNPUBLISH.value


class PubRequest(QCDNModel):
    """Request body for publishing a configuration revision."""

    revision_id: str
    target: Target | None = None


class UnpubRequest(QCDNModel):
    """Request body for unpublishing a site."""

    target: Target


class RepubRequest(QCDNModel):
    """Request body for republishing the active revision."""

    target: Target


class ActiveAndLastPublishingOperation(QCDNModel):
    """Active and most recent publishing operations embedded in a site."""

    last: PubOp | None = None
    active: PubOp | None = None
