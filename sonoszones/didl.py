"""DIDL-Lite content listings returned by ContentDirectory Browse."""

import xml.etree.ElementTree as ET
from dataclasses import dataclass

from .exceptions import ContentParseError, PlaylistNotFoundError


@dataclass(frozen=True)
class ContentEntry:
    id: str
    title: str
    uri: str


def parse_containers(result):
    """Parse the ``Result`` of a Browse reply into its container entries.

    Entries keep document order. A blank result is an empty listing.
    """
    if not result or not result.strip():
        return []
    try:
        root = ET.fromstring(result)
    except ET.ParseError as e:
        raise ContentParseError(f"unmarshaling DIDL-Lite XML: {e}", cause=e) from e

    entries = []
    for container in root.findall('{*}container'):
        title = container.find('{*}title')
        res = container.find('{*}res')
        entries.append(ContentEntry(
            id=container.get('id', ''),
            title=(title.text or '') if title is not None else '',
            uri=(res.text or '').strip() if res is not None else '',
        ))
    return entries


def find_entry(entries, title):
    """Return the first entry whose title is exactly ``title``."""
    for entry in entries:
        if entry.title == title:
            return entry
    raise PlaylistNotFoundError(title, len(entries))
