"""CDN services - the site publish/activation workflow."""

from apps.cdn.services.activation import ActivationState, SiteActivationService

__all__ = [
    "ActivationState",
    "SiteActivationService",
]
