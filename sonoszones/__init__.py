"""
Sonos Zone Control Library

This library discovers Sonos speakers on a local network, groups them by zone (room)
and sends playback, volume, queue and sleep timer commands to a zone.
It uses UPnP/SOAP to communicate with Sonos devices and provides an async interface for all operations.
"""

import logging

from .client import Client
from .control import PlayMode, SonosDevice, format_sleep_duration
from .device import Device, Service, fetch_device
from .didl import ContentEntry, parse_containers
from .discovery import discover, probe
from .exceptions import (
    CapabilityNotFoundError,
    ContentParseError,
    ControlError,
    DiscoveryError,
    ErrorKind,
    NoUsableDeviceError,
    PlaylistNotFoundError,
    RemoteActionError,
    SonosError,
    UnknownZoneError,
)
from .soap import invoke, resolve_service

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    'discover',
    'probe',
    'Client',
    'SonosDevice',
    'PlayMode',
    'format_sleep_duration',
    'Device',
    'Service',
    'fetch_device',
    'ContentEntry',
    'parse_containers',
    'invoke',
    'resolve_service',
    'ErrorKind',
    'SonosError',
    'DiscoveryError',
    'CapabilityNotFoundError',
    'UnknownZoneError',
    'NoUsableDeviceError',
    'RemoteActionError',
    'ContentParseError',
    'PlaylistNotFoundError',
    'ControlError',
]
