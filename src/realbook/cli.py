import json
import logging
import sys
from pathlib import Path

import click

from .decoder import decode_chart, decode_playlist
from .defaults import BASELINE_LOOPS, normalize_repository
from .exceptions import FetchError, MalformedChartUrl, NoChartUrlError, RepositoryIoError
from .formatter import StandardFormatter
from .merge import merge_into_repository
from .models import Song
from .reconcile import sync_structures
from .repository import StandardsRepository
from .sources import read_chart_urls

_standards_option = click.option(
    "--standards",
    "standards_path",
    envvar="REALBOOK_STANDARDS",
    required=True,
    type=click.Path(dir_okay=False, path_type=Path),
    metavar="PATH",
    help="Standards collection JSON file (env: REALBOOK_STANDARDS).",
)
_dry_run_option = click.option(
    "--dry-run", is_flag=True, default=False, help="Report changes without writing."
)


def _fail(message: str) -> None:
    click.echo(f"Error: {message}", err=True)
    sys.exit(1)


def _summary(song: Song) -> str:
    parts = [song.title]
    if song.composer:
        parts.append(song.composer)
    if song.key:
        parts.append(f"key {song.key}")
    if song.style:
        parts.append(song.style)
    if song.tempo:
        parts.append(f"{song.tempo} BPM")
    parts.append(f"{len(song.sections)} section(s), {song.measure_count()} measure(s)")
    if song.unknown_tokens:
        parts.append(f"{song.unknown_tokens} unrecognized symbol(s)")
    return " | ".join(parts)


def _read_urls(source: str) -> list[str]:
    try:
        return read_chart_urls(source)
    except FetchError as exc:
        msg = f"Could not fetch {exc.url}"
        if exc.status_code:
            msg += f" (HTTP {exc.status_code})"
        _fail(msg)
    except NoChartUrlError as exc:
        _fail(str(exc))
    return []


def _decode_all(urls: list[str]) -> tuple[list[Song], int]:
    songs: list[Song] = []
    failures = 0
    for url in urls:
        try:
            playlist = decode_playlist(url)
        except MalformedChartUrl as exc:
            click.echo(f"Skipped: {exc}", err=True)
            failures += 1
            continue
        songs.extend(playlist.songs)
        failures += len(playlist.failures)
        for failure in playlist.failures:
            click.echo(f"Skipped: {failure}", err=True)
    return songs, failures


@click.group()
@click.option("-v", "--verbose", is_flag=True, default=False, help="Log debug diagnostics.")
def main(verbose: bool) -> None:
    """Decode iReal chart URLs and maintain a jazz standards collection."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


@main.command()
@click.argument("source")
@click.option("--json", "as_json", is_flag=True, default=False,
              help="Print the songs as standards-collection entries.")
@click.option("--all", "all_songs", is_flag=True, default=False,
              help="Decode every song of every playlist, not just the first.")
def decode(source: str, as_json: bool, all_songs: bool) -> None:
    """Decode the chart(s) in SOURCE.

    \b
    SOURCE may be:
      - an irealb:// or irealbook:// URL
      - a file containing chart URLs or an HTML playlist page
      - an http(s):// playlist page
    """
    urls = _read_urls(source)

    if all_songs:
        songs, failures = _decode_all(urls)
    else:
        try:
            songs, failures = [decode_chart(urls[0])], 0
        except MalformedChartUrl as exc:
            _fail(str(exc))

    if as_json:
        formatter = StandardFormatter()
        click.echo(json.dumps([formatter.render(s) for s in songs], indent=2, ensure_ascii=False))
    else:
        for song in songs:
            click.echo(_summary(song))

    if all_songs:
        click.echo(f"Decoded {len(songs)} song(s), {failures} failure(s).", err=True)
    if not songs:
        sys.exit(1)


@main.command("sync-structures")
@click.argument("canonical", type=click.Path(dir_okay=False, path_type=Path))
@_standards_option
@_dry_run_option
def sync_structures_command(canonical: Path, standards_path: Path, dry_run: bool) -> None:
    """Replace section structure from the CANONICAL collection where it differs."""
    try:
        report = sync_structures(
            StandardsRepository(standards_path), StandardsRepository(canonical), dry_run=dry_run
        )
    except RepositoryIoError as exc:
        _fail(str(exc))

    if report.updated:
        click.echo(f"Updated repeats/sections for {report.updated} song(s).")
        for title in report.titles:
            click.echo(f"  {title}")
    else:
        click.echo("No structural updates found.")
    if dry_run:
        click.echo("[DRY RUN] No file written.")


@main.command("normalize-defaults")
@_standards_option
@_dry_run_option
def normalize_defaults_command(standards_path: Path, dry_run: bool) -> None:
    """Set DefaultLoops on every standard that has none."""
    try:
        updated = normalize_repository(StandardsRepository(standards_path), dry_run=dry_run)
    except RepositoryIoError as exc:
        _fail(str(exc))
    click.echo(f"Set DefaultLoops={BASELINE_LOOPS} on {updated} standard(s).")
    if dry_run:
        click.echo("[DRY RUN] No file written.")


@main.command()
@click.argument("source")
@_standards_option
@_dry_run_option
@click.option("--update-only", is_flag=True, default=False,
              help="Only refresh existing standards; do not add new ones.")
def merge(source: str, standards_path: Path, dry_run: bool, update_only: bool) -> None:
    """Merge the playlist(s) in SOURCE into the standards collection."""
    songs, failures = _decode_all(_read_urls(source))
    click.echo(f"Songs in playlist: {len(songs)}")

    try:
        report = merge_into_repository(
            StandardsRepository(standards_path),
            songs,
            add_missing=not update_only,
            dry_run=dry_run,
        )
    except RepositoryIoError as exc:
        _fail(str(exc))

    click.echo(f"Tempo updated for existing: {len(report.tempo_updated)}")
    click.echo(f"Repeats updated for existing: {report.repeats_updated}")
    click.echo(f"New standards added: {len(report.added)}")
    for line in report.tempo_updated[:20]:
        click.echo(f"   {line}")
    if len(report.tempo_updated) > 20:
        click.echo(f"   ... and {len(report.tempo_updated) - 20} more")
    if failures or report.skipped:
        click.echo(f"Skipped: {failures + len(report.skipped)}", err=True)
    if dry_run:
        click.echo("[DRY RUN] No file written.")
