"""Sites sub-client - CRUD for CDN sites."""

import logging
import time
from typing import Any

from qcdn_schemas import Site, SiteCreateRequest, SiteUpdateRequest

from apps.cdn.client.base import ServiceClient
from apps.cdn.client.endpoints import MEDIA_SITES_SERVICE
from apps.cdn.exceptions import SiteDeletedError
from apps.cdn.validators import require_id

logger = logging.getLogger(__name__)


class SiteClient(ServiceClient):
    """Sites on the media-sites service (``/api/v2/sites``)."""

    SERVICE = MEDIA_SITES_SERVICE

    def get_sites(
        self, include_publish_details: bool = False, include_deleted: bool = False
    ) -> list[Site]:
        """
        List the sites of the caller's organization.

        Args:
            include_publish_details: Embed active and last publishing operations.
            include_deleted: Keep sites that are marked for deletion.

        Returns:
            Sites, without deleted ones unless asked for.
        """
        params = {"includePublishDetails": "true"} if include_publish_details else None
        data = self._client.request("GET", self._url("/api/v2/sites"), params=params)
        sites = [Site.model_validate(item) for item in data or []]
        if include_deleted:
            return sites
        return [site for site in sites if not site.is_deleted]

    def get_site(
        self,
        site_id: str,
        target: str | None = None,
        include_publish_details: bool = False,
        include_deleted: bool = False,
    ) -> Site:
        """
        Fetch a single site.

        When publish details are requested without a target, the GA target
        is used.

        Raises:
            SiteDeletedError: If the site is marked for deletion and
                include_deleted is False.
        """
        require_id(site_id, "site_id")

        params: dict[str, Any] = {}
        if include_publish_details:
            params["includePublishDetails"] = "true"
            params["publishTarget"] = target or "ga"
        elif target:
            params["publishTarget"] = target

        data = self._client.request(
            "GET", self._url(f"/api/v2/sites/{site_id}"), params=params or None
        )
        site = Site.model_validate(data)
        if site.is_deleted and not include_deleted:
            raise SiteDeletedError(site_id)
        return site

    def create_site(self, request: SiteCreateRequest) -> Site:
        logger.info("Creating site %s", request.site_name)
        data = self._client.request(
            "POST", self._url("/api/v2/sites"), json=request.to_api()
        )
        return Site.model_validate(data)

    def update_site(self, site_id: str, request: SiteUpdateRequest) -> Site:
        require_id(site_id, "site_id")
        logger.info("Updating site %s", site_id)
        data = self._client.request(
            "PUT", self._url(f"/api/v2/sites/{site_id}"), json=request.to_api()
        )
        return Site.model_validate(data)

    def delete_site(self, site_id: str) -> None:
        require_id(site_id, "site_id")
        logger.info("Deleting site %s", site_id)
        self._client.request("DELETE", self._url(f"/api/v2/sites/{site_id}"))

    def delete_and_rename_site(self, site_id: str, site_name: str) -> Site:
        """
        Delete a site and rename it so that its name can be reused.

        Sites are only soft-deleted by the API, so the old name would stay
        taken without the rename.
        """
        self.delete_site(site_id)
        deleted_name = f"{site_name} DELETED {time.time_ns()}"
        return self.update_site(site_id, SiteUpdateRequest(site_name=deleted_name))
