"""Click CLI entry point for the silence prepender."""

from __future__ import annotations

import click

from silence_prepender.converter import (
    DEFAULT_EXTENSIONS,
    DEFAULT_OUTPUT_DIR,
    normalize_extensions,
    prepend_silence,
)


@click.command()
@click.version_option()
@click.argument(
    "directory",
    default=".",
    type=click.Path(exists=True, file_okay=False),
)
@click.option(
    "-o", "--output-dir",
    default=DEFAULT_OUTPUT_DIR,
    show_default=True,
    help="Output directory, relative to DIRECTORY",
)
@click.option(
    "-e", "--extension",
    "extensions",
    multiple=True,
    help="Extension to process, repeatable (default: .mp3 and .m4a)",
)
@click.option("--dry-run", is_flag=True, help="Show plan without converting")
def cli(directory: str, output_dir: str, extensions: tuple, dry_run: bool):
    """Prepend one second of silence to every audio file in DIRECTORY.

    Metadata and embedded cover art are kept and the original bitrate is
    matched when ffprobe reports one. DIRECTORY defaults to the current
    working directory.
    """
    prepend_silence(
        directory=directory,
        output_dir=output_dir,
        extensions=normalize_extensions(extensions) or DEFAULT_EXTENSIONS,
        dry_run=dry_run,
    )
