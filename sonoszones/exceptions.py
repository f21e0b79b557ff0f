"""Errors raised by the Sonos zone client.

Every error carries a ``kind`` tag so callers can branch on what went wrong
without parsing messages, and an optional ``cause`` with the underlying error.
"""

from enum import Enum


class ErrorKind(Enum):
    DISCOVERY = "discovery"
    CAPABILITY_NOT_FOUND = "capability_not_found"
    UNKNOWN_ZONE = "unknown_zone"
    NO_USABLE_DEVICE = "no_usable_device"
    REMOTE_ACTION_FAILED = "remote_action_failed"
    CONTENT_PARSE = "content_parse"
    PLAYLIST_NOT_FOUND = "playlist_not_found"


class SonosError(Exception):
    """Base class for all client errors."""

    kind = None

    def __init__(self, message, cause=None):
        super().__init__(message)
        self.cause = cause


class DiscoveryError(SonosError):
    """The discovery probe could not be issued at all."""

    kind = ErrorKind.DISCOVERY


class CapabilityNotFoundError(SonosError):
    """The device offers no service of the requested type."""

    kind = ErrorKind.CAPABILITY_NOT_FOUND

    def __init__(self, service_type, location=None):
        where = f" at {location}" if location else ""
        super().__init__(f"unknown service {service_type!r} for device{where}")
        self.service_type = service_type


class UnknownZoneError(SonosError):
    """No devices were recorded for the zone name."""

    kind = ErrorKind.UNKNOWN_ZONE

    def __init__(self, zone):
        super().__init__(f"unknown zone {zone!r}, or it has no devices")
        self.zone = zone


class NoUsableDeviceError(SonosError):
    """The zone exists but none of its devices can take transport commands."""

    kind = ErrorKind.NO_USABLE_DEVICE

    def __init__(self, zone, service_type):
        super().__init__(f"did not find a {service_type} service in zone {zone!r}")
        self.zone = zone
        self.service_type = service_type


class RemoteActionError(SonosError):
    """A SOAP action failed on the device or on the way there.

    ``error_code`` and ``error_description`` are filled from the UPnP fault
    detail when the device sent one.
    """

    kind = ErrorKind.REMOTE_ACTION_FAILED

    def __init__(self, action, message, cause=None, status=None, error_code=None, error_description=None):
        super().__init__(f"{action}: {message}", cause)
        self.action = action
        self.status = status
        self.error_code = error_code
        self.error_description = error_description


class ContentParseError(SonosError):
    """A content listing is not a valid DIDL-Lite document."""

    kind = ErrorKind.CONTENT_PARSE


class PlaylistNotFoundError(SonosError):
    """No Sonos playlist carries the requested title."""

    kind = ErrorKind.PLAYLIST_NOT_FOUND

    def __init__(self, name, checked):
        super().__init__(f"did not find Sonos playlist named {name!r} (checked {checked})")
        self.name = name
        self.checked = checked


class ControlError(SonosError):
    """A control operation failed; ``kind`` is taken from the cause."""

    def __init__(self, operation, cause):
        super().__init__(f"{operation}: {cause}", cause)
        self.operation = operation
        self.kind = getattr(cause, "kind", ErrorKind.REMOTE_ACTION_FAILED)
