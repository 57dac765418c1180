"""Batch orchestrator: prepend one second of silence to every audio file in a directory."""

from __future__ import annotations

import os
import shlex
import subprocess

import click
from natsort import natsorted

from silence_prepender.encoding import select_encoding
from silence_prepender.metadata import describe_bitrate, read_tags
from silence_prepender.models import BatchResult, EncodingPlan, InputFile, StreamInfo
from silence_prepender.probe import find_tool, probe_stream

DEFAULT_OUTPUT_DIR = "with_silence"
DEFAULT_EXTENSIONS = (".mp3", ".m4a")
SILENCE_SECONDS = 1

# Silence is input 0, the source file is input 1
CONCAT_FILTER = "[0:a][1:a]concat=n=2:v=0:a=1[a]"


def normalize_extensions(extensions) -> tuple[str, ...]:
    """Lower-case extensions and make sure each starts with a dot."""
    normalized = []
    for ext in extensions:
        ext = ext.strip().lower()
        if not ext:
            continue
        if not ext.startswith("."):
            ext = "." + ext
        if ext not in normalized:
            normalized.append(ext)
    return tuple(normalized)


def discover_audio_files(
    directory: str,
    extensions: tuple[str, ...] = DEFAULT_EXTENSIONS,
) -> list[InputFile]:
    """Find files in a directory (non-recursive) with an allowed extension.

    Extensions are compared case-insensitively. Results are natural-sorted
    by filename.
    """
    found = []
    for f in os.listdir(directory):
        path = os.path.join(directory, f)
        if not os.path.isfile(path):
            continue
        base, ext = os.path.splitext(f)
        if ext.lower() in extensions:
            found.append(InputFile(path=path, filename=f, base=base, ext=ext))

    return natsorted(found, key=lambda af: af.filename)


def ensure_output_dir(path: str) -> None:
    """Create the output directory if it does not exist yet."""
    try:
        os.makedirs(path, exist_ok=True)
    except OSError as e:
        raise click.ClickException(
            "Failed to create output directory: {} ({})".format(path, e)
        )


def output_path_for(input_file: InputFile, output_dir: str) -> str:
    return os.path.join(output_dir, "{}{}".format(input_file.base, input_file.ext))


def build_ffmpeg_command(
    input_file: InputFile,
    stream: StreamInfo,
    plan: EncodingPlan,
    output_path: str,
) -> list[str]:
    """Assemble the ffmpeg argument list for one file."""
    cmd = [
        find_tool("ffmpeg"),
        "-hide_banner", "-y",
        "-f", "lavfi",
        "-t", str(SILENCE_SECONDS),
        "-i", "anullsrc=r={}:cl={}".format(stream.sample_rate, stream.channel_layout),
        "-i", input_file.path,
        "-filter_complex", CONCAT_FILTER,
        "-map", "[a]",
        "-map_metadata", "1",
        "-c:a", plan.codec,
    ]
    cmd.extend(plan.bitrate_args)

    if stream.has_video:
        cmd.extend(["-map", "1:v?", "-c:v", "copy"])

    if plan.tag_args:
        cmd.extend(plan.tag_args)

    cmd.append(output_path)
    return cmd


def run_ffmpeg(cmd: list[str]) -> bool:
    """Run ffmpeg with inherited stdout/stderr and report whether it succeeded.

    Raises OSError if the process cannot be started.
    """
    result = subprocess.run(cmd)
    return result.returncode == 0


def hint_missing_tools() -> None:
    """Print an install hint if ffmpeg cannot even report its version."""
    try:
        subprocess.run(
            [find_tool("ffmpeg"), "-version"],
            capture_output=True, text=True,
        )
    except OSError:
        click.echo(
            "\nHint: This tool requires 'ffmpeg' and 'ffprobe' to be installed "
            "and available in your system's PATH.",
            err=True,
        )


def prepend_silence(
    directory: str = ".",
    output_dir: str = DEFAULT_OUTPUT_DIR,
    extensions: tuple[str, ...] = DEFAULT_EXTENSIONS,
    dry_run: bool = False,
) -> BatchResult:
    """Run the full pipeline over every matching file in directory."""
    result = BatchResult()
    output_dir = os.path.join(directory, output_dir)
    if os.path.abspath(output_dir) == os.path.abspath(directory):
        raise click.ClickException(
            "Output directory must differ from the input directory: {}".format(
                os.path.abspath(directory)
            )
        )

    if not dry_run:
        ensure_output_dir(output_dir)

    audio_files = discover_audio_files(directory, extensions)
    if not audio_files:
        click.echo(
            "No {} files found in {}.".format(
                " or ".join(extensions), os.path.abspath(directory)
            )
        )
        return result

    for af in audio_files:
        stream = probe_stream(af.path)
        plan = select_encoding(af.lower_ext, stream.bitrate_kbps)
        out = output_path_for(af, output_dir)
        cmd = build_ffmpeg_command(af, stream, plan, out)

        if dry_run:
            _print_dry_run(af, stream, plan, out, cmd)
            continue

        click.echo(
            "Processing: {} -> {} (target bitrate: {} kbps)".format(
                af.filename, os.path.normpath(out), describe_bitrate(stream.bitrate_kbps)
            )
        )

        try:
            ok = run_ffmpeg(cmd)
        except OSError as e:
            click.echo("Failed to start ffmpeg for {}: {}".format(af.filename, e), err=True)
            hint_missing_tools()
            raise click.ClickException(
                "Aborted after {} of {} files".format(
                    len(result.succeeded) + len(result.failed), len(audio_files)
                )
            )

        if ok:
            result.succeeded.append(af.filename)
        else:
            click.echo("\nffmpeg failed for {}.".format(af.filename), err=True)
            result.failed.append(af.filename)

    if dry_run:
        click.echo("Dry run: {} files planned, nothing written.".format(len(audio_files)))
        return result

    click.echo("Done. Outputs are in: {}".format(os.path.normpath(output_dir)))
    click.echo("{} succeeded, {} failed".format(len(result.succeeded), len(result.failed)))
    for name in result.failed:
        click.echo("  failed: {}".format(name), err=True)
    return result


def _print_dry_run(
    input_file: InputFile,
    stream: StreamInfo,
    plan: EncodingPlan,
    output_path: str,
    cmd: list[str],
) -> None:
    """Print the plan for one file without executing it."""
    click.echo("{} -> {}".format(input_file.filename, os.path.normpath(output_path)))

    tags = read_tags(input_file.path)
    if tags.get("title"):
        click.echo("  Title:    {}".format(tags["title"]))
    if tags.get("artist"):
        click.echo("  Artist:   {}".format(tags["artist"]))
    if tags.get("album"):
        click.echo("  Album:    {}".format(tags["album"]))

    click.echo("  Stream:   {} Hz, {}, {} kbps".format(
        stream.sample_rate, stream.channel_layout, describe_bitrate(stream.bitrate_kbps)
    ))
    click.echo("  Cover:    {}".format("copy" if stream.has_video else "(none)"))
    click.echo("  Encoder:  {} {}".format(plan.codec, " ".join(plan.bitrate_args)))
    if plan.tag_args:
        click.echo("  Tagging:  {}".format(" ".join(plan.tag_args)))
    click.echo("  Command:  {}".format(shlex.join(cmd)))
    click.echo("")
