"""Tests for PublishOpsClient queries, actions and the acceptance poll."""

import json

import httpx
import pytest
import respx

from apps.cdn.exceptions import AcceptanceTimeoutError, QCDNAPIError
from apps.cdn.tests.factories import (
    MEDIA_SITES_HOST,
    MEDIA_SITES_URL,
    PubOpPayloadFactory,
)

PUB_OPS_PATH = "/api/v2/sites/s1/publishing-operations"
PUB_OPS_URL = f"{MEDIA_SITES_URL}{PUB_OPS_PATH}"


def mock_pub_ops(*pub_ops: dict) -> respx.Route:
    return respx.get(host=MEDIA_SITES_HOST, path=PUB_OPS_PATH).mock(
        return_value=httpx.Response(200, json=list(pub_ops))
    )


# =============================================================================
# Queries
# =============================================================================


class TestGetPubOps:
    """Tests for listing publishing operations."""

    @respx.mock
    def test_filters_are_sent_as_query(self, facade):
        route = mock_pub_ops()

        facade.publish_ops.get_pub_ops("s1", is_active=True, publish_state="Done")

        params = route.calls.last.request.url.params
        assert params["isActive"] == "isActive"
        assert params["publishState"] == "Done"

    @respx.mock
    def test_no_filters(self, facade):
        route = mock_pub_ops(PubOpPayloadFactory())

        pub_ops = facade.publish_ops.get_pub_ops("s1")

        assert len(pub_ops) == 1
        assert not route.calls.last.request.url.params


class TestFindLatestPubOp:
    """Tests for picking the operation that represents a revision."""

    @pytest.mark.parametrize("in_progress_first", [True, False])
    @respx.mock
    def test_in_progress_wins_regardless_of_order(self, facade, in_progress_first):
        in_progress = PubOpPayloadFactory(
            publishId="p-running", revisionId="r1", publishStatus="InProgress"
        )
        active = PubOpPayloadFactory(
            publishId="p-active",
            revisionId="r1",
            publishStatus="Success",
            isActive=True,
        )
        ordered = [in_progress, active] if in_progress_first else [active, in_progress]
        mock_pub_ops(*ordered)

        pub_op = facade.publish_ops.find_latest_pub_op("s1", "r1")

        assert pub_op.publish_id == "p-running"

    @respx.mock
    def test_last_active_match(self, facade):
        mock_pub_ops(
            PubOpPayloadFactory(
                publishId="p1", revisionId="r1", publishStatus="Success", isActive=True
            ),
            PubOpPayloadFactory(
                publishId="p2", revisionId="r2", publishStatus="Success", isActive=True
            ),
            PubOpPayloadFactory(
                publishId="p3", revisionId="r1", publishStatus="Success", isActive=True
            ),
        )

        pub_op = facade.publish_ops.find_latest_pub_op("s1", "r1")

        assert pub_op.publish_id == "p3"

    @respx.mock
    def test_no_match_returns_empty_operation(self, facade):
        mock_pub_ops(
            PubOpPayloadFactory(revisionId="r2", publishStatus="Success"),
            PubOpPayloadFactory(revisionId="r1", publishStatus="Failed"),
        )

        pub_op = facade.publish_ops.find_latest_pub_op("s1", "r1")

        assert pub_op.is_empty

    @respx.mock
    def test_list_errors_propagate(self, facade):
        respx.get(host=MEDIA_SITES_HOST, path=PUB_OPS_PATH).mock(
            return_value=httpx.Response(500, text="boom")
        )

        with pytest.raises(QCDNAPIError, match="status: 500"):
            facade.publish_ops.find_latest_pub_op("s1", "r1")


class TestGetSitePublishStatus:
    """Tests for the current/transition summary."""

    @respx.mock
    def test_never_published(self, facade):
        mock_pub_ops()

        assert facade.publish_ops.get_site_publish_status("s1") == (
            "Unpublished",
            "Unpublished",
        )

    @respx.mock
    def test_unpublish_in_progress(self, facade):
        mock_pub_ops(
            PubOpPayloadFactory(
                operationType="Publish", publishStatus="Success", isActive=True
            ),
            PubOpPayloadFactory(operationType="Unpublish", publishStatus="InProgress"),
        )

        assert facade.publish_ops.get_site_publish_status("s1") == (
            "Published",
            "Unpublishing",
        )


# =============================================================================
# Actions
# =============================================================================


class TestActions:
    """Tests for publish, unpublish, republish and cancel."""

    @respx.mock
    def test_publish_body(self, facade):
        route = respx.post(PUB_OPS_URL).mock(
            return_value=httpx.Response(201, json=PubOpPayloadFactory(publishId="p1"))
        )

        pub_op = facade.publish_ops.publish("s1", "r1", "staging")

        assert pub_op.publish_id == "p1"
        assert pub_op.is_pending_acceptance
        assert json.loads(route.calls.last.request.content) == {
            "revisionId": "r1",
            "target": "staging",
        }

    def test_publish_rejects_unknown_target(self, facade):
        with pytest.raises(ValueError):
            facade.publish_ops.publish("s1", "r1", "canary")

    @respx.mock
    def test_unpublish(self, facade):
        route = respx.post(f"{PUB_OPS_URL}/actions/un-publish").mock(
            return_value=httpx.Response(
                201, json=PubOpPayloadFactory(operationType="Unpublish")
            )
        )

        pub_op = facade.publish_ops.unpublish("s1", "ga")

        assert pub_op.is_unpublish
        assert json.loads(route.calls.last.request.content) == {"target": "ga"}

    @respx.mock
    def test_republish(self, facade):
        route = respx.post(f"{PUB_OPS_URL}/actions/republish").mock(
            return_value=httpx.Response(201, json=PubOpPayloadFactory())
        )

        facade.publish_ops.republish("s1", "ga")

        assert route.called

    @respx.mock
    def test_cancel(self, facade):
        route = respx.post(f"{PUB_OPS_URL}/p1/actions/cancel").mock(
            return_value=httpx.Response(200)
        )

        facade.publish_ops.cancel("s1", "p1")

        assert route.called


# =============================================================================
# Acceptance Poll
# =============================================================================


class TestWaitForAcceptance:
    """Tests for polling until the CDN accepts or refuses an operation."""

    @respx.mock
    def test_returns_once_not_pending(self, facade, clock):
        route = respx.get(f"{PUB_OPS_URL}/p1").mock(
            side_effect=[
                httpx.Response(200, json=PubOpPayloadFactory(publishId="p1")),
                httpx.Response(200, json=PubOpPayloadFactory(publishId="p1")),
                httpx.Response(
                    200,
                    json=PubOpPayloadFactory(
                        publishId="p1", publishAcceptanceStatus="Accepted"
                    ),
                ),
            ]
        )

        pub_op = facade.publish_ops.wait_for_acceptance("s1", "p1")

        assert pub_op.publish_acceptance_status == "Accepted"
        assert pub_op.is_in_progress
        assert route.call_count == 3
        assert clock.sleeps == [3, 3]

    @respx.mock
    def test_rejection_ends_the_poll(self, facade):
        respx.get(f"{PUB_OPS_URL}/p1").mock(
            return_value=httpx.Response(
                200,
                json=PubOpPayloadFactory(
                    publishId="p1", publishAcceptanceStatus="Invalid"
                ),
            )
        )

        pub_op = facade.publish_ops.wait_for_acceptance("s1", "p1")

        assert pub_op.is_rejected

    @respx.mock
    def test_times_out_while_pending(self, facade, clock):
        route = respx.get(f"{PUB_OPS_URL}/p1").mock(
            return_value=httpx.Response(200, json=PubOpPayloadFactory(publishId="p1"))
        )

        with pytest.raises(AcceptanceTimeoutError) as exc_info:
            facade.publish_ops.wait_for_acceptance("s1", "p1")

        assert 180 <= clock.now < 183
        assert route.call_count <= 61
        error = exc_info.value
        assert error.site_id == "s1"
        assert error.publish_id == "p1"
        assert error.last_pub_op is not None
        assert error.last_pub_op.is_pending_acceptance
        assert "timed out after 180s" in str(error)

    @respx.mock
    def test_custom_timeout(self, facade, clock):
        route = respx.get(f"{PUB_OPS_URL}/p1").mock(
            return_value=httpx.Response(200, json=PubOpPayloadFactory(publishId="p1"))
        )

        with pytest.raises(AcceptanceTimeoutError):
            facade.publish_ops.wait_for_acceptance("s1", "p1", timeout=6)

        assert route.call_count == 2
        assert clock.now == 6
