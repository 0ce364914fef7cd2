"""
Playlist publish command.
"""

from __future__ import annotations

from playlistctl.cli.ux import console, error, header, info, print_body, success, warning
from playlistctl.config import Settings, get_settings
from playlistctl.models import ExitStatus
from playlistctl.provisioning import PlaylistPublisher, StepOutcome


def report_step(outcome: StepOutcome) -> None:
    """Print one line of progress for a step outcome."""
    if outcome.success:
        success(outcome.message)
    elif outcome.name == "reconcile_playlist":
        warning(outcome.message)
    else:
        error(outcome.message)


def publish_command(
    media_path: str = "sample.jpg",
    playlist_name: str | None = None,
    poll_delay: float | None = None,
    insecure: bool = False,
    settings: Settings | None = None,
) -> int:
    """
    Provision and publish the demo playlist for a media file.

    Args:
        media_path: Local media file to reuse or upload
        playlist_name: Playlist name override (default: DEMO_PLAYLIST_NAME)
        poll_delay: Seconds to wait before polling POP (default: DEMO_POLL_DELAY_SECONDS)
        insecure: Skip TLS certificate verification (local dev backends)
        settings: Settings to use instead of the environment

    Returns:
        Exit code (ExitStatus value, 0 = success)
    """
    settings = settings or get_settings()
    overrides = {}
    if playlist_name:
        overrides["playlist_name"] = playlist_name
    if poll_delay is not None:
        overrides["poll_delay_seconds"] = poll_delay
    if insecure:
        overrides["verify_tls"] = False
    if overrides:
        settings = settings.model_copy(update=overrides)

    header("Public Playlist Publish Demo")
    console.print(f"[muted]Tenant:[/muted] {settings.tenant}")
    console.print(f"[muted]Playlist:[/muted] {settings.playlist_name}")
    console.print(f"[muted]Media:[/muted] {media_path}")
    console.print()

    if settings.poll_delay_seconds > 0:
        info(f"POP overview is polled {settings.poll_delay_seconds:g}s after publishing")

    publisher = PlaylistPublisher(settings, media_path, reporter=report_step)
    status = publisher.run()
    console.print()

    report = publisher.report
    if report.pipeline and report.pipeline.pop_overview is not None:
        console.print("[bold]POP Overview:[/bold]")
        print_body(report.pipeline.pop_overview)
        console.print()

    if status is not ExitStatus.SUCCESS:
        error(f"Run aborted ({status.name}): {report.message}")
        return int(status)

    failures = report.pipeline.failures if report.pipeline else []
    if failures:
        warning(f"Completed with {len(failures)} failed step(s): {', '.join(f.name for f in failures)}")
    else:
        success("Playlist published")
    return int(status)
