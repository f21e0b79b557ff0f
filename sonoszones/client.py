import logging

from .const import AV_TRANSPORT
from .control import SonosDevice
from .exceptions import CapabilityNotFoundError, NoUsableDeviceError, UnknownZoneError
from .soap import resolve_service

logger = logging.getLogger(__name__)


class Client:
    """Sonos devices found by one discovery pass, grouped by zone.

    ``devices`` is every Sonos device that answered, in response order.
    ``zones`` maps a zone name to the devices in it, also in response order;
    devices whose zone could not be read are in ``devices`` only.
    """

    def __init__(self, devices=(), zones=None):
        self.devices = tuple(devices)
        self.zones = {zone: tuple(devs) for zone, devs in (zones or {}).items()}

    def __repr__(self):
        return f"Client(devices={len(self.devices)}, zones={self.zone_names})"

    @property
    def zone_names(self):
        return sorted(self.zones)

    def zone_device(self, zone):
        """Return a handle on the first device in ``zone`` with AVTransport."""
        devices = self.zones.get(zone)
        if not devices:
            raise UnknownZoneError(zone)

        for device in devices:
            try:
                resolve_service(device, AV_TRANSPORT)
            except CapabilityNotFoundError:
                continue
            return SonosDevice(device, zone)

        raise NoUsableDeviceError(zone, AV_TRANSPORT)
