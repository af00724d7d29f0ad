"""Tests for the sites, site configuration and site certificate sub-clients."""

import json

import httpx
import pytest
import respx

from qcdn_schemas import SiteConfigAddRequest, SiteCreateRequest

from apps.cdn.exceptions import SiteDeletedError
from apps.cdn.tests.factories import (
    MEDIA_SITES_HOST,
    MEDIA_SITES_URL,
    SiteConfigPayloadFactory,
    SitePayloadFactory,
)

SITES_URL = f"{MEDIA_SITES_URL}/api/v2/sites"

# =============================================================================
# Sites
# =============================================================================


class TestSiteClient:
    """Tests for SiteClient."""

    @respx.mock
    def test_get_sites_hides_deleted(self, facade):
        respx.get(SITES_URL).mock(
            return_value=httpx.Response(
                200,
                json=[
                    SitePayloadFactory(siteId="live"),
                    SitePayloadFactory(siteId="gone", isDeleted=True),
                ],
            )
        )

        sites = facade.sites.get_sites()

        assert [site.site_id for site in sites] == ["live"]

    @respx.mock
    def test_get_sites_include_deleted_and_details(self, facade):
        route = respx.get(host=MEDIA_SITES_HOST, path="/api/v2/sites").mock(
            return_value=httpx.Response(
                200, json=[SitePayloadFactory(siteId="gone", isDeleted=True)]
            )
        )

        sites = facade.sites.get_sites(
            include_publish_details=True, include_deleted=True
        )

        assert sites[0].is_deleted
        params = route.calls.last.request.url.params
        assert params["includePublishDetails"] == "true"

    @pytest.mark.parametrize(
        ("kwargs", "expected"),
        [
            ({}, {}),
            ({"target": "staging"}, {"publishTarget": "staging"}),
            (
                {"include_publish_details": True},
                {"includePublishDetails": "true", "publishTarget": "ga"},
            ),
            (
                {"include_publish_details": True, "target": "staging"},
                {"includePublishDetails": "true", "publishTarget": "staging"},
            ),
        ],
    )
    @respx.mock
    def test_get_site_query(self, facade, kwargs, expected):
        route = respx.get(host=MEDIA_SITES_HOST, path="/api/v2/sites/s1").mock(
            return_value=httpx.Response(200, json=SitePayloadFactory(siteId="s1"))
        )

        facade.sites.get_site("s1", **kwargs)

        assert dict(route.calls.last.request.url.params) == expected

    @respx.mock
    def test_get_site_marked_deleted(self, facade):
        respx.get(f"{SITES_URL}/s1").mock(
            return_value=httpx.Response(
                200, json=SitePayloadFactory(siteId="s1", isDeleted=True)
            )
        )

        with pytest.raises(SiteDeletedError) as exc_info:
            facade.sites.get_site("s1")

        assert exc_info.value.site_id == "s1"

    def test_get_site_requires_id(self, facade):
        with pytest.raises(ValueError):
            facade.sites.get_site("")

    @respx.mock
    def test_create_site_body(self, facade):
        route = respx.post(SITES_URL).mock(
            return_value=httpx.Response(201, json=SitePayloadFactory(siteId="s9"))
        )

        site = facade.sites.create_site(SiteCreateRequest(site_name="Shop"))

        assert site.site_id == "s9"
        assert json.loads(route.calls.last.request.content) == {"siteName": "Shop"}

    @respx.mock
    def test_delete_and_rename(self, facade):
        delete = respx.delete(f"{SITES_URL}/s1").mock(return_value=httpx.Response(200))
        rename = respx.put(f"{SITES_URL}/s1").mock(
            return_value=httpx.Response(200, json=SitePayloadFactory(siteId="s1"))
        )

        facade.sites.delete_and_rename_site("s1", "Shop")

        assert delete.called
        body = json.loads(rename.calls.last.request.content)
        assert body["siteName"].startswith("Shop DELETED ")


# =============================================================================
# Configuration Revisions
# =============================================================================


class TestSiteConfigurationClient:
    """Tests for SiteConfigurationClient."""

    @respx.mock
    def test_create_revision(self, facade):
        route = respx.post(f"{MEDIA_SITES_URL}/api/1/sites/s1/configurations").mock(
            return_value=httpx.Response(
                201, json=SiteConfigPayloadFactory(revisionId="rev-new")
            )
        )

        config = facade.configs.create_site_config(
            "s1",
            SiteConfigAddRequest(host_index={"hosts": []}, change_description="x"),
        )

        assert config.revision_id == "rev-new"
        assert json.loads(route.calls.last.request.content) == {
            "hostIndex": {"hosts": []},
            "changeDescription": "x",
        }

    @respx.mock
    def test_get_config_truncates_host_index(self, facade):
        route = respx.get(
            host=MEDIA_SITES_HOST, path="/api/1/sites/s1/configurations/rev-1"
        ).mock(
            return_value=httpx.Response(
                200, json=SiteConfigPayloadFactory(revisionId="rev-1")
            )
        )

        facade.configs.get_site_config("s1", "rev-1", truncate_host_index=True)

        assert route.calls.last.request.url.params["truncateHostIndex"] == "true"

    @respx.mock
    def test_find_latest_revision(self, facade):
        respx.get(host=MEDIA_SITES_HOST, path="/api/1/sites/s1/configurations").mock(
            return_value=httpx.Response(
                200,
                json=[
                    SiteConfigPayloadFactory(revisionId="a", revisionNum=2),
                    SiteConfigPayloadFactory(revisionId="b", revisionNum=7),
                    SiteConfigPayloadFactory(revisionId="c", revisionNum=5),
                ],
            )
        )

        latest = facade.configs.find_latest_revision("s1")

        assert latest is not None
        assert latest.revision_id == "b"

    @respx.mock
    def test_find_latest_revision_none(self, facade):
        respx.get(host=MEDIA_SITES_HOST, path="/api/1/sites/s1/configurations").mock(
            return_value=httpx.Response(200, json=[])
        )

        assert facade.configs.find_latest_revision("s1") is None


# =============================================================================
# Certificate Links
# =============================================================================


class FakeSiteCertificates:
    """Stateful stand-in for the site certificates endpoints."""

    def __init__(self, linked: list[str] | None = None) -> None:
        self.linked = list(linked or [])
        self.unlinked: list[str] = []

    def list(self, request: httpx.Request) -> httpx.Response:
        return httpx.Response(
            200, json=[{"certificateId": cert_id} for cert_id in self.linked]
        )

    def link(self, request: httpx.Request) -> httpx.Response:
        cert_id = json.loads(request.content)["certificateId"]
        self.linked.append(cert_id)
        return self.list(request)

    def unlink(self, request: httpx.Request, cert_id: str) -> httpx.Response:
        self.linked.remove(cert_id)
        self.unlinked.append(cert_id)
        return httpx.Response(200)

    def install(self) -> None:
        base = f"{SITES_URL}/s1/certificates"
        respx.get(base).mock(side_effect=self.list)
        respx.post(base).mock(side_effect=self.link)
        respx.delete(url__regex=rf"{base}/(?P<cert_id>\w+)$").mock(
            side_effect=self.unlink
        )


class TestSiteCertificatesClient:
    """Tests for SiteCertificatesClient."""

    @respx.mock
    def test_link_replaces_existing(self, facade):
        server = FakeSiteCertificates(linked=["5"])
        server.install()

        links = facade.site_certificates.link_site_certificate("s1", 7)

        assert server.unlinked == ["5"]
        assert [link.certificate_id for link in links] == ["7"]

    @respx.mock
    def test_link_twice_keeps_one_link(self, facade):
        server = FakeSiteCertificates()
        server.install()

        facade.site_certificates.link_site_certificate("s1", 42)
        facade.site_certificates.link_site_certificate("s1", 42)

        assert server.linked == ["42"]

    @respx.mock
    def test_get_certificates_for_revision(self, facade):
        route = respx.get(
            host=MEDIA_SITES_HOST, path="/api/v2/sites/s1/certificates"
        ).mock(return_value=httpx.Response(200, json=[]))

        facade.site_certificates.get_site_certificates("s1", revision_id="rev-3")

        assert route.calls.last.request.url.params["siteRevisionId"] == "rev-3"
