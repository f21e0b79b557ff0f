from flask import Flask, jsonify
from sonoszones import (
    discover,
    PlayMode,
    SonosError,
    UnknownZoneError,
)
import aiohttp
import logging
import os

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

DISCOVERY_TIMEOUT = int(os.environ.get("SONOS_DISCOVERY_TIMEOUT", "3"))
BIND = os.environ.get("SONOS_BIND", "0.0.0.0:5000")

app = Flask(__name__)

_client = None


async def get_client(session):
    """Discover the Sonos zones once and reuse the result."""
    global _client
    if _client is None:
        _client = await discover(session, timeout=DISCOVERY_TIMEOUT)
    return _client


def error_response(e):
    status = 404 if isinstance(e, UnknownZoneError) else 502
    return jsonify({"success": False, "error": str(e), "kind": e.kind.value if e.kind else None}), status


@app.route("/api/zones")
async def list_zones():
    try:
        async with aiohttp.ClientSession() as session:
            client = await get_client(session)
    except SonosError as e:
        logger.error(str(e))
        return error_response(e)
    zones = {zone: [d.friendly_name for d in client.zones[zone]] for zone in client.zone_names}
    return jsonify({"success": True, "zones": zones})


@app.route("/api/zone/<zone>/<action>", methods=["POST"])
async def control_zone(zone, action):
    """Handle transport and queue commands for a zone."""
    commands = {
        "play": "play",
        "pause": "pause",
        "stop": "stop",
        "next": "next",
        "previous": "previous",
        "ungroup": "ungroup",
        "clear": "clear_queue",
    }
    if action not in commands:
        return jsonify({"success": False, "error": f"Unknown action {action!r}"}), 400
    try:
        async with aiohttp.ClientSession() as session:
            device = (await get_client(session)).zone_device(zone)
            await getattr(device, commands[action])(session)
            try:
                state = await device.get_transport_info(session)
            except SonosError as e:
                logger.warning(f"{action} on zone {zone!r} succeeded but {e}")
                state = None
    except SonosError as e:
        logger.error(str(e))
        return error_response(e)
    return jsonify({"success": True, "state": state})


@app.route("/api/zone/<zone>/volume", methods=["GET"])
async def get_zone_volume(zone):
    try:
        async with aiohttp.ClientSession() as session:
            device = (await get_client(session)).zone_device(zone)
            volume = await device.get_volume(session)
    except SonosError as e:
        logger.error(str(e))
        return error_response(e)
    return jsonify({"success": True, "volume": volume})


@app.route("/api/zone/<zone>/volume/<int:volume>", methods=["POST"])
async def set_zone_volume(zone, volume):
    try:
        async with aiohttp.ClientSession() as session:
            device = (await get_client(session)).zone_device(zone)
            await device.set_volume(session, volume)
    except SonosError as e:
        logger.error(str(e))
        return error_response(e)
    return jsonify({"success": True, "volume": volume})


@app.route("/api/zone/<zone>/playmode/<mode>", methods=["POST"])
async def set_zone_play_mode(zone, mode):
    try:
        play_mode = PlayMode[mode.upper()]
    except KeyError:
        return jsonify({"success": False, "error": f"Invalid play mode {mode!r}"}), 400
    try:
        async with aiohttp.ClientSession() as session:
            device = (await get_client(session)).zone_device(zone)
            await device.set_play_mode(session, play_mode)
    except SonosError as e:
        logger.error(str(e))
        return error_response(e)
    return jsonify({"success": True, "mode": play_mode.name})


@app.route("/api/zone/<zone>/sleep/<int:seconds>", methods=["POST"])
async def set_zone_sleep_timer(zone, seconds):
    try:
        async with aiohttp.ClientSession() as session:
            device = (await get_client(session)).zone_device(zone)
            await device.set_sleep_timer(session, seconds)
    except SonosError as e:
        logger.error(str(e))
        return error_response(e)
    return jsonify({"success": True, "seconds": seconds})


@app.route("/api/zone/<zone>/playlists")
async def list_zone_playlists(zone):
    try:
        async with aiohttp.ClientSession() as session:
            device = (await get_client(session)).zone_device(zone)
            entries = await device.list_sonos_playlists(session)
    except SonosError as e:
        logger.error(str(e))
        return error_response(e)
    return jsonify({"success": True, "playlists": [entry.title for entry in entries]})


@app.route("/api/zone/<zone>/playlist/<name>", methods=["POST"])
async def load_zone_playlist(zone, name):
    try:
        async with aiohttp.ClientSession() as session:
            device = (await get_client(session)).zone_device(zone)
            await device.load_sonos_playlist(session, name)
    except SonosError as e:
        logger.error(str(e))
        return error_response(e)
    return jsonify({"success": True, "playlist": name})


if __name__ == "__main__":
    import hypercorn.asyncio
    import asyncio

    config = hypercorn.Config()
    config.bind = [BIND]
    asyncio.run(hypercorn.asyncio.serve(app, config))
