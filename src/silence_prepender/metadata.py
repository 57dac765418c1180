"""Source tag reading for plan display."""

from __future__ import annotations

import mutagen
from mutagen import MutagenError

DISPLAY_TAGS = ("title", "artist", "album")


def read_tags(filepath: str) -> dict:
    """Read common tags from an MP3 or MP4-family file using mutagen.

    Returns an empty dict when the file has no tags or mutagen cannot
    parse it.
    """
    tags = {}
    try:
        audio = mutagen.File(filepath, easy=True)
    except (MutagenError, OSError):
        return tags
    if audio is None or audio.tags is None:
        return tags

    for key in DISPLAY_TAGS:
        values = audio.tags.get(key)
        if values:
            tags[key] = str(values[0])
    return tags


def describe_bitrate(bitrate_kbps: int | None) -> str:
    """Format a probed bitrate the way progress messages show it."""
    if bitrate_kbps:
        return str(bitrate_kbps)
    return "unknown"
