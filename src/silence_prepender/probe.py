"""ffprobe wrapper for reading the stream attributes of an input file."""

from __future__ import annotations

import math
import shutil
import subprocess

from silence_prepender.models import StreamInfo

DEFAULT_SAMPLE_RATE = 44100
DEFAULT_CHANNEL_LAYOUT = "stereo"


def find_tool(name: str) -> str:
    """Return the path to an external tool, or its bare name if not on PATH.

    A missing binary is left to fail when it is actually started.
    """
    return shutil.which(name) or name


def run_query(filepath: str, select: str, entries: str, fmt: str = "default=nk=1:nw=1") -> str | None:
    """Run a single ffprobe query and return its trimmed output.

    Returns None when ffprobe exits non-zero, prints nothing, or cannot
    be started.
    """
    cmd = [
        find_tool("ffprobe"),
        "-v", "error",
        "-select_streams", select,
        "-show_entries", entries,
        "-of", fmt,
        filepath,
    ]
    try:
        result = subprocess.run(cmd, capture_output=True, text=True)
    except OSError:
        return None
    if result.returncode != 0:
        return None
    return result.stdout.strip() or None


def probe_sample_rate(filepath: str) -> int:
    raw = run_query(filepath, "a:0", "stream=sample_rate")
    try:
        return int(raw)
    except (TypeError, ValueError):
        return DEFAULT_SAMPLE_RATE


def probe_channel_layout(filepath: str) -> str:
    layout = run_query(filepath, "a:0", "stream=channel_layout")
    if not layout or layout == "unknown":
        return DEFAULT_CHANNEL_LAYOUT
    return layout


def probe_has_video(filepath: str) -> bool:
    """Whether the file carries a video stream, usually embedded cover art."""
    return bool(run_query(filepath, "v:0", "stream=index", fmt="csv=p=0"))


def parse_bitrate(raw: str | None) -> int | None:
    """Convert a raw ffprobe bit_rate token (bits per second) to whole kbps.

    Examples:
        "128000" -> 128
        "191999" -> 191
        "N/A" -> None
    """
    if raw is None:
        return None
    try:
        value = float(raw)
    except ValueError:
        return None
    if not math.isfinite(value):
        return None
    return int(value / 1000)


def probe_bitrate(filepath: str) -> int | None:
    return parse_bitrate(run_query(filepath, "a:0", "stream=bit_rate"))


def probe_stream(filepath: str) -> StreamInfo:
    """Probe a single file and return its StreamInfo."""
    return StreamInfo(
        sample_rate=probe_sample_rate(filepath),
        channel_layout=probe_channel_layout(filepath),
        has_video=probe_has_video(filepath),
        bitrate_kbps=probe_bitrate(filepath),
    )
