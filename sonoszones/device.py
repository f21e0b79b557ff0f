"""UPnP device descriptions for discovered Sonos players.

A Sonos ZonePlayer describes itself as a root device with embedded
MediaRenderer and MediaServer devices; AVTransport and RenderingControl live
on the renderer, ContentDirectory on the server. The services of the whole
tree are flattened onto one ``Device`` so a capability lookup can find them
regardless of which embedded device owns them.
"""

import logging
import xml.etree.ElementTree as ET
from dataclasses import dataclass
from typing import Tuple
from urllib.parse import urljoin

import aiohttp

from .const import DEFAULT_ACTION_TIMEOUT

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Service:
    service_type: str
    service_id: str
    control_url: str


@dataclass(frozen=True)
class Device:
    location: str
    manufacturer: str
    friendly_name: str
    model_name: str
    udn: str
    services: Tuple[Service, ...] = ()

    def find_services(self, service_type):
        """Return every service of the given type, in document order."""
        return [s for s in self.services if s.service_type == service_type]


def _text(element, path):
    found = element.find(path)
    if found is None or found.text is None:
        return ""
    return found.text.strip()


def parse_device_description(xml_text, location):
    """Parse a device description document fetched from ``location``.

    Raises:
        xml.etree.ElementTree.ParseError: the document is not XML
        ValueError: the document has no root device
    """
    root = ET.fromstring(xml_text)
    device = root.find('{*}device')
    if device is None:
        raise ValueError(f"no device element in description at {location}")

    base_url = _text(root, '{*}URLBase') or location

    services = []
    for service in root.findall('.//{*}service'):
        control = _text(service, '{*}controlURL')
        if not control:
            continue
        services.append(Service(
            service_type=_text(service, '{*}serviceType'),
            service_id=_text(service, '{*}serviceId'),
            control_url=urljoin(base_url, control),
        ))

    return Device(
        location=location,
        manufacturer=_text(device, '{*}manufacturer'),
        friendly_name=_text(device, '{*}friendlyName') or 'Unknown',
        model_name=_text(device, '{*}modelName'),
        udn=_text(device, '{*}UDN'),
        services=tuple(services),
    )


async def fetch_device(session, location, timeout=DEFAULT_ACTION_TIMEOUT):
    """Fetch and parse the description of the device at ``location``."""
    async with session.get(location, timeout=aiohttp.ClientTimeout(total=timeout)) as response:
        response.raise_for_status()
        text = await response.text()
    device = parse_device_description(text, location)
    logger.debug(f"Fetched {device.friendly_name} ({device.model_name}) from {location}")
    return device
