"""Playback, volume, queue and timer control for a single Sonos device."""

import logging
from datetime import timedelta
from enum import Enum, unique

from .const import (
    AV_TRANSPORT,
    BROWSE_PAGE_SIZE,
    BROWSE_SORT,
    CONTENT_DIRECTORY,
    INSTANCE_ID,
    MASTER_CHANNEL,
    RENDERING_CONTROL,
    SONOS_PLAYLISTS_ROOT,
)
from .didl import find_entry, parse_containers
from .exceptions import ControlError, PlaylistNotFoundError, RemoteActionError, SonosError
from .soap import invoke

logger = logging.getLogger(__name__)


@unique
class PlayMode(Enum):
    """Queue play modes; each value is the token the device expects."""

    NORMAL = "NORMAL"
    REPEAT_ALL = "REPEAT_ALL"
    REPEAT_ONE = "REPEAT_ONE"
    SHUFFLE = "SHUFFLE_NOREPEAT"
    SHUFFLE_REPEAT = "SHUFFLE"
    SHUFFLE_REPEAT_ONE = "SHUFFLE_REPEAT_ONE"


def format_sleep_duration(duration):
    """Encode a sleep timer duration as ``HH:MM:SS``.

    ``duration`` is a timedelta or a number of seconds. Anything not positive
    encodes to the empty string, which cancels the timer. Sub-second
    precision is dropped.
    """
    if isinstance(duration, timedelta):
        duration = duration.total_seconds()
    if duration <= 0:
        return ""
    total = int(duration)
    hh, rest = divmod(total, 3600)
    mm, ss = divmod(rest, 60)
    return f"{hh:02d}:{mm:02d}:{ss:02d}"


class SonosDevice:
    """A zone-resolved device through which control actions are sent.

    Holds nothing but the wrapped ``Device``; the aiohttp session is passed
    to every call.
    """

    def __init__(self, device, zone=None):
        self.device = device
        self.zone = zone

    def __repr__(self):
        return f"SonosDevice(zone={self.zone!r}, location={self.device.location!r})"

    async def _call(self, session, operation, service_type, action, request):
        try:
            return await invoke(session, self.device, service_type, action, request)
        except SonosError as e:
            raise ControlError(operation, e) from e

    async def _transport(self, session, operation, action, **arguments):
        request = {'InstanceID': INSTANCE_ID}
        request.update(arguments)
        return await self._call(session, operation, AV_TRANSPORT, action, request)

    async def ungroup(self, session):
        """Take this device out of any group it is in."""
        await self._transport(session, "ungrouping", "BecomeCoordinatorOfStandaloneGroup")

    async def clear_queue(self, session):
        await self._transport(session, "clearing queue", "RemoveAllTracksFromQueue")

    async def set_play_mode(self, session, mode):
        await self._transport(session, "setting play mode", "SetPlayMode", NewPlayMode=mode.value)

    async def set_sleep_timer(self, session, duration):
        await self._transport(
            session,
            "setting sleep timer",
            "ConfigureSleepTimer",
            NewSleepTimerDuration=format_sleep_duration(duration),
        )

    async def play(self, session):
        await self._transport(session, "playing", "Play", Speed="1")

    async def pause(self, session):
        await self._transport(session, "pausing", "Pause")

    async def stop(self, session):
        await self._transport(session, "stopping", "Stop")

    async def next(self, session):
        await self._transport(session, "skipping to next track", "Next")

    async def previous(self, session):
        await self._transport(session, "going to previous track", "Previous")

    async def get_transport_info(self, session):
        """Return the current transport state, e.g. ``PLAYING``."""
        response = await self._transport(session, "getting transport info", "GetTransportInfo")
        return response.get('CurrentTransportState')

    async def set_volume(self, session, volume):
        """Set the volume; the device range is [0, 100] and is not checked here."""
        await self._call(session, "setting volume", RENDERING_CONTROL, "SetVolume", {
            'InstanceID': INSTANCE_ID,
            'Channel': MASTER_CHANNEL,
            'DesiredVolume': str(int(volume)),
        })

    async def get_volume(self, session):
        response = await self._call(session, "getting volume", RENDERING_CONTROL, "GetVolume", {
            'InstanceID': INSTANCE_ID,
            'Channel': MASTER_CHANNEL,
        })
        try:
            return int(response['CurrentVolume'])
        except (KeyError, ValueError) as e:
            cause = RemoteActionError("GetVolume", f"bad CurrentVolume in reply: {response}", cause=e)
            raise ControlError("getting volume", cause) from e

    async def set_mute(self, session, mute):
        await self._call(session, "setting mute", RENDERING_CONTROL, "SetMute", {
            'InstanceID': INSTANCE_ID,
            'Channel': MASTER_CHANNEL,
            'DesiredMute': "1" if mute else "0",
        })

    async def get_mute(self, session):
        response = await self._call(session, "getting mute", RENDERING_CONTROL, "GetMute", {
            'InstanceID': INSTANCE_ID,
            'Channel': MASTER_CHANNEL,
        })
        return response.get('CurrentMute') == "1"

    async def list_sonos_playlists(self, session):
        """Return the saved Sonos playlists as ``ContentEntry`` objects."""
        response = await self._call(session, "browsing", CONTENT_DIRECTORY, "Browse", {
            'ObjectID': SONOS_PLAYLISTS_ROOT,
            'BrowseFlag': "BrowseDirectChildren",
            'Filter': "*",
            'StartingIndex': "0",
            'RequestedCount': str(BROWSE_PAGE_SIZE),
            'SortCriteria': BROWSE_SORT,
        })
        try:
            return parse_containers(response.get('Result', ''))
        except SonosError as e:
            raise ControlError("browsing", e) from e

    async def load_sonos_playlist(self, session, name):
        """Append the Sonos playlist titled ``name`` to the queue.

        The title must match exactly. The enqueued item is flagged to play
        next.
        """
        entries = await self.list_sonos_playlists(session)
        try:
            entry = find_entry(entries, name)
            if not entry.uri:
                raise PlaylistNotFoundError(name, len(entries))
        except PlaylistNotFoundError as e:
            raise ControlError("loading playlist", e) from e

        response = await self._transport(
            session,
            "adding to queue",
            "AddURIToQueue",
            EnqueuedURI=entry.uri,
            EnqueuedURIMetaData="",
            DesiredFirstTrackNumberEnqueued="1",
            EnqueueAsNext="1",
        )
        logger.debug(
            f"Queued playlist {name!r} on {self.device.friendly_name}: "
            f"{response.get('NumTracksAdded')} tracks added, queue length {response.get('NewQueueLength')}"
        )
