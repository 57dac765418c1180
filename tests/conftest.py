"""Shared test fixtures."""

from __future__ import annotations

import os
import shutil
import subprocess
import tempfile

import pytest

requires_ffmpeg = pytest.mark.skipif(
    shutil.which("ffmpeg") is None or shutil.which("ffprobe") is None,
    reason="ffmpeg and ffprobe are required",
)


@pytest.fixture
def tmp_dir():
    """Create a temporary directory that's cleaned up after the test."""
    with tempfile.TemporaryDirectory() as d:
        yield d


@pytest.fixture
def touch(tmp_dir):
    """Factory fixture that creates empty placeholder files."""

    def _touch(filename: str) -> str:
        path = os.path.join(tmp_dir, filename)
        open(path, "wb").close()
        return path

    return _touch


class FakeTools:
    """Stands in for subprocess.run, answering ffprobe queries from a table.

    streams maps a filename to ffprobe entry values, e.g.
    {"a.mp3": {"sample_rate": "48000", "bit_rate": "128000"}}. Entries that
    are missing make the query exit non-zero, except the video index query
    which exits cleanly with no output, as ffprobe does.
    """

    def __init__(self):
        self.streams = {}
        self.ffmpeg_calls = []
        self.probe_calls = []
        self.failing = set()
        self.ffmpeg_missing = False

    def __call__(self, cmd, **kwargs):
        tool = os.path.basename(cmd[0])
        if tool.startswith("ffprobe"):
            return self._probe(cmd)
        if tool.startswith("ffmpeg"):
            if self.ffmpeg_missing:
                raise FileNotFoundError(2, "No such file or directory", cmd[0])
            if "-version" in cmd:
                return subprocess.CompletedProcess(cmd, 0, stdout="ffmpeg version n7.0\n", stderr="")
            self.ffmpeg_calls.append(cmd)
            input_path = cmd[cmd.index("-i", cmd.index("-i") + 1) + 1]
            rc = 1 if os.path.basename(input_path) in self.failing else 0
            return subprocess.CompletedProcess(cmd, rc)
        raise AssertionError("unexpected command: {}".format(cmd))

    def _probe(self, cmd):
        self.probe_calls.append(cmd)
        filename = os.path.basename(cmd[-1])
        entry = cmd[cmd.index("-show_entries") + 1].split("=", 1)[1]
        value = self.streams.get(filename, {}).get(entry)
        if value is None:
            rc = 0 if entry == "index" else 1
            return subprocess.CompletedProcess(cmd, rc, stdout="", stderr="")
        return subprocess.CompletedProcess(cmd, 0, stdout=value + "\n", stderr="")


@pytest.fixture
def fake_tools(monkeypatch):
    """Replace subprocess.run with a FakeTools instance."""
    tools = FakeTools()
    monkeypatch.setattr(subprocess, "run", tools)
    return tools


@pytest.fixture
def make_audio(tmp_dir):
    """Factory fixture that creates short silent audio files with real ffmpeg."""

    def _make(
        filename: str,
        duration_s: float = 1.0,
        bitrate: str = "128k",
        title: str | None = None,
        cover: bool = False,
    ) -> str:
        path = os.path.join(tmp_dir, filename)
        cmd = ["ffmpeg", "-y", "-f", "lavfi", "-i", "anullsrc=r=44100:cl=mono"]
        if cover:
            cmd.extend(["-f", "lavfi", "-i", "color=c=red:s=16x16"])
            cmd.extend(["-map", "0:a", "-map", "1:v", "-frames:v", "1"])
            cmd.extend(["-c:v", "mjpeg", "-disposition:v", "attached_pic"])
        cmd.extend(["-t", str(duration_s), "-b:a", bitrate, "-map_metadata", "-1"])
        if filename.endswith(".mp3"):
            cmd.extend(["-c:a", "libmp3lame", "-id3v2_version", "3"])
        else:
            cmd.extend(["-c:a", "aac"])
        if title:
            cmd.extend(["-metadata", "title={}".format(title)])
        cmd.append(path)
        subprocess.run(cmd, capture_output=True, check=True)
        return path

    return _make
