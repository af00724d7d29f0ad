"""
Publishing operations sub-client.

Publishing is asynchronous on the CDN side: a publish request returns an
operation whose acceptance status starts as Pending. wait_for_acceptance()
polls at a fixed interval until the CDN accepts or refuses the operation.
"""

import logging
import time
from collections.abc import Callable
from typing import Any

from qcdn_schemas import (
    PubOp,
    PubRequest,
    RepubRequest,
    Target,
    UnpubRequest,
)

from apps.cdn.client.base import QCDNClient, ServiceClient
from apps.cdn.client.endpoints import MEDIA_SITES_SERVICE
from apps.cdn.config import DEFAULT_ACCEPTANCE_TIMEOUT, DEFAULT_POLL_INTERVAL
from apps.cdn.exceptions import AcceptanceTimeoutError
from apps.cdn.validators import require_id

logger = logging.getLogger(__name__)

UNPUBLISHED = "Unpublished"


class PublishOpsClient(ServiceClient):
    """
    Publish, unpublish and track operations for a site.

    ``clock`` and ``sleep`` drive the acceptance poll and can be replaced
    to simulate elapsed time.
    """

    SERVICE = MEDIA_SITES_SERVICE

    def __init__(
        self,
        client: QCDNClient,
        poll_interval: float = DEFAULT_POLL_INTERVAL,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        super().__init__(client)
        self.poll_interval = poll_interval
        self._clock = clock
        self._sleep = sleep

    def _pub_ops_url(self, site_id: str) -> str:
        return self._url(f"/api/v2/sites/{site_id}/publishing-operations")

    # =========================================================================
    # Queries
    # =========================================================================

    def get_pub_ops(
        self, site_id: str, is_active: bool = False, publish_state: str = ""
    ) -> list[PubOp]:
        """List the publishing operations of a site, oldest first."""
        require_id(site_id, "site_id")
        params: dict[str, Any] = {}
        if is_active:
            params["isActive"] = "isActive"
        if publish_state:
            params["publishState"] = publish_state

        data = self._client.request(
            "GET", self._pub_ops_url(site_id), params=params or None
        )
        return [PubOp.model_validate(item) for item in data or []]

    def get_pub_op(self, site_id: str, publish_id: str) -> PubOp:
        require_id(site_id, "site_id")
        require_id(publish_id, "publish_id")
        data = self._client.request(
            "GET", f"{self._pub_ops_url(site_id)}/{publish_id}"
        )
        return PubOp.model_validate(data)

    def find_latest_pub_op(self, site_id: str, revision_id: str) -> PubOp:
        """
        Find the operation that best represents ``revision_id`` being live.

        An InProgress operation wins outright. Otherwise the last active one
        is returned.

        Returns:
            The matching operation, or an empty PubOp when nothing matches.
        """
        require_id(site_id, "site_id")
        require_id(revision_id, "revision_id")

        latest = PubOp()
        for candidate in self.get_pub_ops(site_id):
            if candidate.revision_id != revision_id:
                continue
            if candidate.is_in_progress:
                return candidate
            if candidate.is_active:
                latest = candidate
        return latest

    def get_site_publish_status(self, site_id: str) -> tuple[str, str]:
        """
        Summarize where a site stands.

        Returns:
            ``(current, transition)``, e.g. ``("Published", "Unpublishing")``.
            Transition equals current when nothing is in progress.
        """
        current = UNPUBLISHED
        transition = ""
        for pub_op in self.get_pub_ops(site_id):
            if pub_op.is_active:
                current = f"{pub_op.operation_type}ed"
            if pub_op.is_in_progress:
                transition = f"{pub_op.operation_type}ing"
        return current, transition or current

    # =========================================================================
    # Actions
    # =========================================================================

    def publish(self, site_id: str, revision_id: str, target: Target | str) -> PubOp:
        require_id(site_id, "site_id")
        require_id(revision_id, "revision_id")
        require_id(target, "target")

        logger.info(
            "Publishing revision %s of site %s to %s",
            revision_id,
            site_id,
            Target(target).value,
        )
        request = PubRequest(revision_id=revision_id, target=Target(target))
        data = self._client.request(
            "POST", self._pub_ops_url(site_id), json=request.to_api()
        )
        return PubOp.model_validate(data)

    def unpublish(self, site_id: str, target: Target | str) -> PubOp:
        require_id(site_id, "site_id")
        require_id(target, "target")

        logger.info("Unpublishing site %s from %s", site_id, Target(target).value)
        request = UnpubRequest(target=Target(target))
        data = self._client.request(
            "POST",
            f"{self._pub_ops_url(site_id)}/actions/un-publish",
            json=request.to_api(),
        )
        return PubOp.model_validate(data)

    def republish(self, site_id: str, target: Target | str) -> PubOp:
        """Publish the currently active revision again."""
        require_id(site_id, "site_id")
        require_id(target, "target")

        logger.info("Republishing site %s to %s", site_id, Target(target).value)
        request = RepubRequest(target=Target(target))
        data = self._client.request(
            "POST",
            f"{self._pub_ops_url(site_id)}/actions/republish",
            json=request.to_api(),
        )
        return PubOp.model_validate(data)

    def cancel(self, site_id: str, publish_id: str) -> None:
        require_id(site_id, "site_id")
        require_id(publish_id, "publish_id")

        logger.info("Cancelling operation %s of site %s", publish_id, site_id)
        self._client.request(
            "POST", f"{self._pub_ops_url(site_id)}/{publish_id}/actions/cancel"
        )

    # =========================================================================
    # Acceptance
    # =========================================================================

    def wait_for_acceptance(
        self,
        site_id: str,
        publish_id: str,
        timeout: float = DEFAULT_ACCEPTANCE_TIMEOUT,
    ) -> PubOp:
        """
        Poll an operation until its acceptance status leaves Pending.

        Only acceptance is awaited. The publish status of the returned
        operation may still be InProgress.

        Args:
            site_id: Site the operation belongs to.
            publish_id: Operation to watch.
            timeout: Seconds to keep polling.

        Returns:
            The operation with a non-Pending acceptance status.

        Raises:
            AcceptanceTimeoutError: If the operation is still Pending when
                the timeout elapses.
        """
        require_id(site_id, "site_id")
        require_id(publish_id, "publish_id")

        start = self._clock()
        pub_op: PubOp | None = None
        polls = 0

        while self._clock() - start < timeout:
            pub_op = self.get_pub_op(site_id, publish_id)
            polls += 1
            if not pub_op.is_pending_acceptance:
                logger.info(
                    "Publishing operation %s of site %s is %s after %d polls",
                    publish_id,
                    site_id,
                    pub_op.publish_acceptance_status,
                    polls,
                )
                return pub_op
            self._sleep(self.poll_interval)

        logger.warning(
            "Publishing operation %s of site %s still pending after %.0fs",
            publish_id,
            site_id,
            timeout,
        )
        raise AcceptanceTimeoutError(site_id, publish_id, timeout, last_pub_op=pub_op)

