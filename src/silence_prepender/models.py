from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class InputFile:
    """An audio file picked up from the target directory."""

    path: str
    filename: str
    base: str
    ext: str  # as found on disk, including the dot

    @property
    def lower_ext(self) -> str:
        return self.ext.lower()


@dataclass
class StreamInfo:
    """Stream attributes probed from an input file, with defaults applied."""

    sample_rate: int = 44100
    channel_layout: str = "stereo"
    has_video: bool = False  # embedded cover art shows up as a video stream
    bitrate_kbps: int | None = None


@dataclass
class EncodingPlan:
    """Codec and arguments chosen for the output file."""

    codec: str
    bitrate_args: list[str] = field(default_factory=list)
    tag_args: list[str] = field(default_factory=list)


@dataclass
class BatchResult:
    """Filenames that ffmpeg finished with and without errors."""

    succeeded: list[str] = field(default_factory=list)
    failed: list[str] = field(default_factory=list)
