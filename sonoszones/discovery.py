import logging

from async_upnp_client.search import async_search

from .client import Client
from .const import DEFAULT_DISCOVERY_TIMEOUT, DEVICE_PROPERTIES, SONOS_MANUFACTURER
from .device import fetch_device
from .exceptions import DiscoveryError, SonosError
from .soap import invoke

logger = logging.getLogger(__name__)


async def probe(search_target=DEVICE_PROPERTIES, timeout=DEFAULT_DISCOVERY_TIMEOUT):
    """Send an SSDP search and return the unique locations that answered.

    Locations are returned in the order the responses arrived.
    """
    locations = []

    async def on_response(headers):
        location = headers.get('location')
        if location and location not in locations:
            locations.append(location)

    try:
        await async_search(on_response, timeout=timeout, search_target=search_target)
    except OSError as e:
        raise DiscoveryError(f"discovering {search_target}: {e}", cause=e) from e

    logger.info(f"SSDP search for {search_target} got {len(locations)} responses")
    return locations


async def get_zone_name(session, device):
    """Read the zone (room) name a device belongs to."""
    response = await invoke(session, device, DEVICE_PROPERTIES, "GetZoneAttributes")
    return response.get('CurrentZoneName', '')


async def discover(session, timeout=DEFAULT_DISCOVERY_TIMEOUT):
    """Discover Sonos devices and group them by zone.

    Only a failure to send the search is fatal. Devices that cannot be
    probed are skipped, and devices whose zone cannot be read are kept
    but not put in any zone.
    """
    locations = await probe(DEVICE_PROPERTIES, timeout)

    devices = []
    zones = {}
    for location in locations:
        try:
            device = await fetch_device(session, location)
        except Exception as e:
            logger.error(f"Probing device at {location}: {e}")
            continue

        if SONOS_MANUFACTURER not in device.manufacturer:
            continue
        devices.append(device)

        try:
            zone = await get_zone_name(session, device)
        except SonosError as e:
            logger.warning(f"Getting zone attributes for {device.friendly_name} at {location}: {e}")
            continue
        zones.setdefault(zone, []).append(device)

    logger.info(f"Discovered {len(devices)} Sonos devices in {len(zones)} zones")
    return Client(devices, zones)
