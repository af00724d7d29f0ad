"""
Factories and fakes for Qwilt CDN tests.
"""

import factory

from qcdn_schemas import PubOp

MEDIA_SITES_URL = "https://media-sites.cqloud.com"
CERT_MANAGER_URL = "https://cert-manager.cqloud.com"
DEVICE_IP_URL = "https://device-ip.cqloud.com"
LOGIN_URL = "https://login.cqloud.com/login"

# Routes for requests that carry query parameters match on host and path
MEDIA_SITES_HOST = "media-sites.cqloud.com"
CERT_MANAGER_HOST = "cert-manager.cqloud.com"


class FakeClock:
    """Monotonic clock that only advances when sleep() is called."""

    def __init__(self) -> None:
        self.now = 0.0
        self.sleeps: list[float] = []

    def __call__(self) -> float:
        return self.now

    def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


class PubOpPayloadFactory(factory.DictFactory):
    """Publishing operation as returned by the API (camelCase JSON)."""

    publishId = factory.Sequence(lambda n: f"pub-{n}")
    revisionId = "r1"
    target = "ga"
    publishAcceptanceStatus = "Pending"
    publishStatus = "InProgress"
    operationType = "Publish"
    isActive = False


class PubOpFactory(factory.Factory):
    class Meta:
        model = PubOp

    publish_id = factory.Sequence(lambda n: f"pub-{n}")
    revision_id = "r1"
    target = "ga"
    publish_acceptance_status = "Accepted"
    publish_status = "InProgress"
    operation_type = "Publish"
    is_active = False


class SitePayloadFactory(factory.DictFactory):
    siteId = factory.Sequence(lambda n: f"site-{n}")
    siteName = factory.Sequence(lambda n: f"Site {n}")
    ownerOrgId = "org-1"
    siteDnsCnameDelegationTarget = factory.LazyAttribute(
        lambda o: f"{o.siteId}.cdn.cqloud.com"
    )
    routingMethod = "DNS"
    isDeleted = False


class SiteConfigPayloadFactory(factory.DictFactory):
    siteId = "s1"
    revisionId = factory.Sequence(lambda n: f"rev-{n}")
    revisionNum = factory.Sequence(lambda n: n + 1)
    hostIndex = factory.LazyFunction(lambda: {"hosts": [{"host": "www.example.com"}]})
    changeDescription = "initial"


class CertificateTemplatePayloadFactory(factory.DictFactory):
    certificateTemplateId = factory.Sequence(lambda n: n + 1)
    commonName = "www.example.com"
    autoManagedCertificateTemplate = True
    lastCertificateId = None
    csrIds = factory.LazyFunction(lambda: [11, 12])
