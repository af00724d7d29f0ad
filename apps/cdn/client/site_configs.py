"""Site configuration sub-client - append-only configuration revisions."""

import logging

from qcdn_schemas import SiteConfigAddRequest, SiteConfigVersion

from apps.cdn.client.base import ServiceClient
from apps.cdn.client.endpoints import MEDIA_SITES_SERVICE
from apps.cdn.validators import require_id

logger = logging.getLogger(__name__)


class SiteConfigurationClient(ServiceClient):
    """Configuration revisions (``/api/1/sites/{site_id}/configurations``)."""

    SERVICE = MEDIA_SITES_SERVICE

    def _configs_url(self, site_id: str) -> str:
        return self._url(f"/api/1/sites/{site_id}/configurations")

    @staticmethod
    def _params(truncate_host_index: bool) -> dict[str, str] | None:
        return {"truncateHostIndex": "true"} if truncate_host_index else None

    def get_site_configs(
        self, site_id: str, truncate_host_index: bool = False
    ) -> list[SiteConfigVersion]:
        require_id(site_id, "site_id")
        data = self._client.request(
            "GET",
            self._configs_url(site_id),
            params=self._params(truncate_host_index),
        )
        return [SiteConfigVersion.model_validate(item) for item in data or []]

    def get_site_config(
        self, site_id: str, revision_id: str, truncate_host_index: bool = False
    ) -> SiteConfigVersion:
        require_id(site_id, "site_id")
        require_id(revision_id, "revision_id")
        data = self._client.request(
            "GET",
            f"{self._configs_url(site_id)}/{revision_id}",
            params=self._params(truncate_host_index),
        )
        return SiteConfigVersion.model_validate(data)

    def create_site_config(
        self, site_id: str, request: SiteConfigAddRequest
    ) -> SiteConfigVersion:
        """Add a new revision. Revisions are never modified in place."""
        require_id(site_id, "site_id")
        logger.info("Creating configuration revision for site %s", site_id)
        data = self._client.request(
            "POST", self._configs_url(site_id), json=request.to_api()
        )
        return SiteConfigVersion.model_validate(data)

    def find_latest_revision(self, site_id: str) -> SiteConfigVersion | None:
        """The revision with the highest revision number, if any."""
        configs = self.get_site_configs(site_id, truncate_host_index=True)
        if not configs:
            return None
        return max(configs, key=lambda config: config.revision_num)
