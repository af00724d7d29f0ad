"""Device IPs sub-client - the CDN's origin allow-list."""

from qcdn_schemas import DeviceIps

from apps.cdn.client.base import ServiceClient
from apps.cdn.client.endpoints import DEVICE_IP_SERVICE


class DeviceIpsClient(ServiceClient):
    SERVICE = DEVICE_IP_SERVICE

    def get_origin_allow_list(self) -> DeviceIps:
        """IP addresses of CDN devices that may reach a customer origin."""
        data = self._client.request("GET", self._url("/api/1.0/network/device-ip"))
        return DeviceIps.model_validate(data or {})
