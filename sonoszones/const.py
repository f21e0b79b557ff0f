"""Fixed protocol identifiers used when talking to Sonos devices."""

# Service types (capability identifiers)
DEVICE_PROPERTIES = "urn:schemas-upnp-org:service:DeviceProperties:1"
AV_TRANSPORT = "urn:schemas-upnp-org:service:AVTransport:1"
RENDERING_CONTROL = "urn:schemas-upnp-org:service:RenderingControl:1"
CONTENT_DIRECTORY = "urn:schemas-upnp-org:service:ContentDirectory:1"
ZONE_GROUP_TOPOLOGY = "urn:schemas-upnp-org:service:ZoneGroupTopology:1"

# Only devices whose manufacturer contains this are kept (covers SYMFONISK too)
SONOS_MANUFACTURER = "Sonos, Inc."

INSTANCE_ID = "0"
MASTER_CHANNEL = "Master"

# Sonos playlists live under this ContentDirectory object
SONOS_PLAYLISTS_ROOT = "SQ:"
BROWSE_PAGE_SIZE = 100
BROWSE_SORT = "+upnp:artist,+dc:title"

SOAP_ENV_NS = "http://schemas.xmlsoap.org/soap/envelope/"
SOAP_ENCODING = "http://schemas.xmlsoap.org/soap/encoding/"
UPNP_CONTROL_NS = "urn:schemas-upnp-org:control-1-0"

# Seconds
DEFAULT_DISCOVERY_TIMEOUT = 3
DEFAULT_ACTION_TIMEOUT = 5
