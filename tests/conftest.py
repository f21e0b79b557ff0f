"""Fake Sonos players served by aiohttp for the tests."""

import asyncio
import xml.etree.ElementTree as ET
from xml.sax.saxutils import escape

import aiohttp
import pytest
import pytest_asyncio
from aiohttp import web
from aiohttp.test_utils import TestServer

from sonoszones.const import (
    AV_TRANSPORT,
    CONTENT_DIRECTORY,
    DEVICE_PROPERTIES,
    RENDERING_CONTROL,
    ZONE_GROUP_TOPOLOGY,
)

ALL_SERVICES = (DEVICE_PROPERTIES, ZONE_GROUP_TOPOLOGY, CONTENT_DIRECTORY, RENDERING_CONTROL, AV_TRANSPORT)

CONTROL_PATHS = {
    DEVICE_PROPERTIES: "/DeviceProperties/Control",
    ZONE_GROUP_TOPOLOGY: "/ZoneGroupTopology/Control",
    CONTENT_DIRECTORY: "/MediaServer/ContentDirectory/Control",
    RENDERING_CONTROL: "/MediaRenderer/RenderingControl/Control",
    AV_TRANSPORT: "/MediaRenderer/AVTransport/Control",
}

ROOT_SERVICES = (DEVICE_PROPERTIES, ZONE_GROUP_TOPOLOGY)
SERVER_SERVICES = (CONTENT_DIRECTORY,)
RENDERER_SERVICES = (RENDERING_CONTROL, AV_TRANSPORT)


def make_didl(entries):
    """Build a DIDL-Lite document with one container per (id, title, uri)."""
    containers = "".join(
        f'<container id="{escape(id_)}" parentID="SQ:" restricted="true">'
        f'<dc:title>{escape(title)}</dc:title>'
        f'<upnp:class>object.container.playlistContainer</upnp:class>'
        f'<res protocolInfo="file:*:audio/mpegurl:*">{escape(uri)}</res>'
        f'</container>'
        for id_, title, uri in entries
    )
    return (
        '<DIDL-Lite xmlns:dc="http://purl.org/dc/elements/1.1/" '
        'xmlns:upnp="urn:schemas-upnp-org:metadata-1-0/upnp/" '
        'xmlns:r="urn:schemas-rinconnetworks-com:metadata-1-0/" '
        'xmlns="urn:schemas-upnp-org:metadata-1-0/DIDL-Lite/">'
        f'{containers}</DIDL-Lite>'
    )


def _service_list(services):
    items = "".join(
        '<service>'
        f'<serviceType>{service}</serviceType>'
        f'<serviceId>urn:upnp-org:serviceId:{service.split(":")[-2]}</serviceId>'
        f'<controlURL>{CONTROL_PATHS[service]}</controlURL>'
        f'<eventSubURL>{CONTROL_PATHS[service].replace("Control", "Event")}</eventSubURL>'
        '</service>'
        for service in services
    )
    return f'<serviceList>{items}</serviceList>'


def make_description(friendly_name, manufacturer, services):
    """Describe a ZonePlayer the way a Sonos speaker does, embedded devices included."""
    return (
        '<?xml version="1.0" encoding="utf-8" ?>'
        '<root xmlns="urn:schemas-upnp-org:device-1-0">'
        '<specVersion><major>1</major><minor>0</minor></specVersion>'
        '<device>'
        '<deviceType>urn:schemas-upnp-org:device:ZonePlayer:1</deviceType>'
        f'<friendlyName>{escape(friendly_name)}</friendlyName>'
        f'<manufacturer>{escape(manufacturer)}</manufacturer>'
        '<modelName>Sonos One</modelName>'
        f'<UDN>uuid:RINCON_{abs(hash(friendly_name)):012d}01400</UDN>'
        f'{_service_list([s for s in ROOT_SERVICES if s in services])}'
        '<deviceList>'
        '<device>'
        '<deviceType>urn:schemas-upnp-org:device:MediaServer:1</deviceType>'
        f'{_service_list([s for s in SERVER_SERVICES if s in services])}'
        '</device>'
        '<device>'
        '<deviceType>urn:schemas-upnp-org:device:MediaRenderer:1</deviceType>'
        f'{_service_list([s for s in RENDERER_SERVICES if s in services])}'
        '</device>'
        '</deviceList>'
        '</device>'
        '</root>'
    )


def soap_reply(service_type, action, arguments):
    args = "".join(f"<{k}>{escape(v)}</{k}>" for k, v in arguments.items())
    return (
        '<?xml version="1.0"?>'
        '<s:Envelope xmlns:s="http://schemas.xmlsoap.org/soap/envelope/" '
        's:encodingStyle="http://schemas.xmlsoap.org/soap/encoding/">'
        f'<s:Body><u:{action}Response xmlns:u="{service_type}">{args}</u:{action}Response></s:Body>'
        '</s:Envelope>'
    )


def soap_fault(code, description):
    return (
        '<?xml version="1.0"?>'
        '<s:Envelope xmlns:s="http://schemas.xmlsoap.org/soap/envelope/" '
        's:encodingStyle="http://schemas.xmlsoap.org/soap/encoding/">'
        '<s:Body><s:Fault><faultcode>s:Client</faultcode><faultstring>UPnPError</faultstring>'
        '<detail><UPnPError xmlns="urn:schemas-upnp-org:control-1-0">'
        f'<errorCode>{code}</errorCode><errorDescription>{escape(description)}</errorDescription>'
        '</UPnPError></detail></s:Fault></s:Body></s:Envelope>'
    )


class FakeSonos:
    """A single fake speaker.

    Every SOAP call is recorded in ``calls`` as ``(service_type, action, args)``
    with ``args`` in the order they were sent. ``raw_replies`` maps an action to
    bytes sent back verbatim as a utf-8 text/xml reply.
    """

    def __init__(self, zone="Living Room", friendly_name=None, manufacturer="Sonos, Inc.",
                 services=ALL_SERVICES, playlists=(), volume=25, delay=0):
        self.zone = zone
        self.friendly_name = friendly_name or f"{zone} - Sonos One"
        self.manufacturer = manufacturer
        self.services = services
        self.playlists = list(playlists)
        self.volume = volume
        self.delay = delay
        self.faults = {}
        self.raw_replies = {}
        self.calls = []
        self.location = None

    def actions(self, action):
        return [args for _, name, args in self.calls if name == action]

    def reply_for(self, action):
        if action == "GetZoneAttributes":
            return {"CurrentZoneName": self.zone, "CurrentIcon": "x-rincon-roomicon:living"}
        if action == "GetTransportInfo":
            return {"CurrentTransportState": "PLAYING", "CurrentTransportStatus": "OK", "CurrentSpeed": "1"}
        if action == "GetVolume":
            return {"CurrentVolume": str(self.volume)}
        if action == "GetMute":
            return {"CurrentMute": "1"}
        if action == "Browse":
            return {
                "Result": make_didl(self.playlists),
                "NumberReturned": str(len(self.playlists)),
                "TotalMatches": str(len(self.playlists)),
                "UpdateID": "1",
            }
        if action == "AddURIToQueue":
            return {"FirstTrackNumberEnqueued": "1", "NumTracksAdded": "12", "NewQueueLength": "12"}
        return {}

    async def description(self, request):
        body = make_description(self.friendly_name, self.manufacturer, self.services)
        return web.Response(text=body, content_type="text/xml")

    async def control(self, request):
        service_type = next(s for s, path in CONTROL_PATHS.items() if path == request.path)
        soap_action = request.headers["SOAPACTION"].strip('"')
        assert soap_action.startswith(service_type + "#")

        root = ET.fromstring(await request.text())
        body = root.find("{http://schemas.xmlsoap.org/soap/envelope/}Body")
        call = body[0]
        action = call.tag.rsplit("}", 1)[-1]
        assert soap_action == f"{service_type}#{action}"
        self.calls.append((service_type, action, {child.tag: child.text or "" for child in call}))

        if self.delay:
            await asyncio.sleep(self.delay)
        if action in self.raw_replies:
            return web.Response(body=self.raw_replies[action], content_type="text/xml", charset="utf-8")
        if action in self.faults:
            code, description = self.faults[action]
            return web.Response(status=500, text=soap_fault(code, description), content_type="text/xml")
        return web.Response(text=soap_reply(service_type, action, self.reply_for(action)), content_type="text/xml")

    def make_app(self):
        app = web.Application()
        app.router.add_get("/xml/device_description.xml", self.description)
        for service in self.services:
            app.router.add_post(CONTROL_PATHS[service], self.control)
        return app


@pytest_asyncio.fixture
async def session():
    async with aiohttp.ClientSession() as session:
        yield session


@pytest_asyncio.fixture
async def fake_sonos():
    """Factory starting a ``FakeSonos`` on localhost; servers stop after the test."""
    servers = []

    async def factory(**kwargs):
        fake = FakeSonos(**kwargs)
        server = TestServer(fake.make_app())
        await server.start_server()
        servers.append(server)
        fake.location = str(server.make_url("/xml/device_description.xml"))
        return fake

    yield factory

    for server in servers:
        await server.close()


@pytest.fixture
def playlists():
    return [
        ("SQ:1", "Morning", "file:///jffs/settings/savedqueues.rsq#1"),
        ("SQ:2", "Dinner & Jazz", "file:///jffs/settings/savedqueues.rsq#2"),
        ("SQ:3", "Workout", "file:///jffs/settings/savedqueues.rsq#3"),
    ]
