"""Qwilt CDN Pulumi resources and lookups."""

from apps.cdn.provider.base import QCDNResourceProvider, load_settings
from apps.cdn.provider.certificate import (
    Certificate,
    CertificateProvider,
    CertificateTemplate,
    CertificateTemplateProvider,
)
from apps.cdn.provider.data_sources import (
    GetSitesResult,
    IpAllowListResult,
    NetworkIps,
    OriginAllowListResult,
    get_certificate_templates,
    get_certificates,
    get_ip_allow_list,
    get_origin_allow_list,
    get_sites,
)
from apps.cdn.provider.site import Site, SiteProvider
from apps.cdn.provider.site_activation import (
    SiteActivation,
    SiteActivationProvider,
    SiteActivationStaging,
)
from apps.cdn.provider.site_config import SiteConfiguration, SiteConfigurationProvider

__all__ = [
    "Certificate",
    "CertificateProvider",
    "CertificateTemplate",
    "CertificateTemplateProvider",
    "GetSitesResult",
    "IpAllowListResult",
    "NetworkIps",
    "OriginAllowListResult",
    "QCDNResourceProvider",
    "Site",
    "SiteActivation",
    "SiteActivationProvider",
    "SiteActivationStaging",
    "SiteConfiguration",
    "SiteConfigurationProvider",
    "SiteProvider",
    "get_certificate_templates",
    "get_certificates",
    "get_ip_allow_list",
    "get_origin_allow_list",
    "get_sites",
    "load_settings",
]
