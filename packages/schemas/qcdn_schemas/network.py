"""Network schemas - CDN device IP allow-lists."""

from pydantic import Field

from qcdn_schemas.base import QCDNModel


class NetworkDeviceIps(QCDNModel):
    """Device addresses for a single CDN network."""

    ipv4: list[str] = Field(default_factory=list)
    ipv6: list[str] = Field(default_factory=list)


class DeviceIps(QCDNModel):
    """
    IP addresses of all CDN devices that may contact a customer origin.

    Customers use this to allow-list CDN traffic at their origin firewall.
    ``md5`` changes whenever the list changes.
    """

    md5: str = ""
    create_time_millis: int | None = None
    ip_data: dict[str, NetworkDeviceIps] = Field(default_factory=dict)
