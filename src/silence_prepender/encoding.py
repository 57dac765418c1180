"""Per-extension codec, bitrate and tagging selection."""

from __future__ import annotations

from silence_prepender.models import EncodingPlan

MP3_EXTENSIONS = (".mp3",)
AAC_EXTENSIONS = (".m4a", ".aac", ".mp4", ".m4b")

MP3_FALLBACK_QUALITY = "2"
FALLBACK_BITRATE = "192k"

# ID3v2.3 plus an ID3v1 trailer
ID3_OPTIONS = ["-id3v2_version", "3", "-write_id3v1", "1"]


def _known_bitrate(bitrate_kbps: int | None) -> list[str] | None:
    if bitrate_kbps and bitrate_kbps > 0:
        return ["-b:a", "{}k".format(bitrate_kbps)]
    return None


def select_encoding(ext: str, bitrate_kbps: int | None) -> EncodingPlan:
    """Pick the output codec and arguments for a file extension.

    The source bitrate is reused when known. Otherwise MP3 falls back to
    VBR quality 2 and everything else to 192 kbps.
    """
    ext = ext.lower()
    bitrate_args = _known_bitrate(bitrate_kbps)

    if ext in MP3_EXTENSIONS:
        return EncodingPlan(
            codec="libmp3lame",
            bitrate_args=bitrate_args or ["-q:a", MP3_FALLBACK_QUALITY],
            tag_args=list(ID3_OPTIONS),
        )

    if ext in AAC_EXTENSIONS:
        return EncodingPlan(
            codec="aac",
            bitrate_args=bitrate_args or ["-b:a", FALLBACK_BITRATE],
        )

    return EncodingPlan(
        codec="aac",
        bitrate_args=bitrate_args or ["-b:a", FALLBACK_BITRATE],
    )
