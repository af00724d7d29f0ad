"""
Pytest configuration for Qwilt CDN tests.
"""

from collections.abc import Iterator

import httpx
import pytest

from apps.cdn.client import QCDNClient, SiteClientFacade
from apps.cdn.config import QCDNSettings
from apps.cdn.tests.factories import FakeClock


@pytest.fixture
def settings() -> QCDNSettings:
    """Settings authenticating with an API key against prod."""
    return QCDNSettings(xapi_token="test-api-key")


@pytest.fixture
def http_client() -> Iterator[httpx.Client]:
    with httpx.Client() as client:
        yield client


@pytest.fixture
def qcdn_client(settings: QCDNSettings, http_client: httpx.Client) -> QCDNClient:
    return QCDNClient(settings, http_client=http_client)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def facade(qcdn_client: QCDNClient, clock: FakeClock) -> SiteClientFacade:
    """Facade whose acceptance poll runs on the fake clock."""
    return SiteClientFacade.from_client(qcdn_client, clock=clock, sleep=clock.sleep)
