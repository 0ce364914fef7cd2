"""
End-to-end playlist publish run.

authenticate -> acquire asset -> reconcile playlist -> step pipeline.
Any ``FatalPreconditionError`` ends the run with its status; everything
else is reported and the run continues.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Callable

import structlog

from playlistctl.clients import BackendClient, TokenClient
from playlistctl.config import Settings
from playlistctl.errors import AuthError, FatalPreconditionError
from playlistctl.logging import bind_run_context
from playlistctl.models import ExitStatus, PlaylistSpec
from playlistctl.provisioning.assets import AssetAcquirer
from playlistctl.provisioning.locator import ResourceLocator
from playlistctl.provisioning.pipeline import (
    PipelineResult,
    Reporter,
    StepOutcome,
    StepPipeline,
)
from playlistctl.provisioning.reconciler import PlaylistReconciler, ReconcileResult

logger = structlog.get_logger()


@dataclass
class RunReport:
    """Everything a run produced, kept for the caller after ``run`` returns."""

    status: ExitStatus = ExitStatus.SUCCESS
    message: str | None = None
    asset_id: str | None = None
    reconcile: ReconcileResult | None = None
    pipeline: PipelineResult | None = None
    events: list[StepOutcome] = field(default_factory=list)

    @property
    def playlist_id(self) -> str | None:
        return self.pipeline.playlist_id if self.pipeline else None

    @property
    def screen_id(self) -> str | None:
        return self.pipeline.screen_id if self.pipeline else None


class PlaylistPublisher:
    """Provisions and publishes one named playlist for one media file."""

    def __init__(
        self,
        settings: Settings,
        media_path: str | Path,
        *,
        playlist: PlaylistSpec | None = None,
        reporter: Reporter | None = None,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self.settings = settings
        self.media_path = Path(media_path)
        self.playlist = playlist or PlaylistSpec(name=settings.playlist_name)
        self._reporter = reporter
        self._sleep = sleep
        self._clock = clock
        self.report = RunReport()

    def run(self) -> ExitStatus:
        self.report = RunReport()
        bind_run_context(tenant=self.settings.tenant, playlist=self.playlist.name)
        logger.info("run_started", media_path=str(self.media_path))

        try:
            self._run()
        except FatalPreconditionError as exc:
            self.report.status = exc.status
            self.report.message = str(exc)
            logger.error("run_aborted", status=exc.status.name, reason=str(exc))
            return exc.status

        logger.info(
            "run_completed",
            playlist_id=self.report.playlist_id,
            failed_steps=[step.name for step in self.report.pipeline.failures],
        )
        return self.report.status

    def _run(self) -> None:
        if not self.media_path.is_file():
            self._fail(
                "check_input",
                ExitStatus.FATAL_INPUT_MISSING,
                f"Image file not found: {self.media_path}. "
                "Provide a path or place sample.jpg in working dir.",
            )

        http_options = {"timeout": self.settings.http_timeout, "verify": self.settings.verify_tls}

        with TokenClient(self.settings.auth_base, **http_options) as auth_client:
            try:
                token = auth_client.authenticate(self.settings.credential())
            except AuthError as exc:
                self._fail("authenticate", ExitStatus.FATAL_AUTH, f"{exc} {exc.body}".strip())
        self._emit(StepOutcome("authenticate", True, "Token acquired."))

        with BackendClient(self.settings.api_base, token, **http_options) as api, BackendClient(
            self.settings.pop_base, token, **http_options
        ) as pop:
            locator = ResourceLocator(api)

            acquirer = AssetAcquirer(api, locator)
            asset = acquirer.acquire(self.media_path)
            if asset is None:
                detail = f" {acquirer.last_error}" if acquirer.last_error else ""
                self._fail(
                    "acquire_asset",
                    ExitStatus.FATAL_ASSET_ACQUISITION,
                    f"File acquisition failed.{detail}",
                )
            self.report.asset_id = asset.id
            self._emit(StepOutcome("acquire_asset", True, f"Using file: {asset.id}"))

            existing_id = locator.find_playlist(self.playlist.name)
            if existing_id:
                self._emit(
                    StepOutcome(
                        "reconcile_playlist",
                        True,
                        f"Playlist '{self.playlist.name}' exists. Cleaning up...",
                    )
                )
                self.report.reconcile = PlaylistReconciler(api).reconcile(existing_id)
                for problem in self.report.reconcile.errors:
                    self._emit(StepOutcome("reconcile_playlist", False, f"Cleanup problem: {problem}"))

            pipeline = StepPipeline(
                api,
                pop,
                playlist=self.playlist,
                poll_delay=self.settings.poll_delay_seconds,
                sleep=self._sleep,
                clock=self._clock,
                reporter=self._reporter,
            )
            try:
                pipeline.run(asset.id)
            finally:
                self.report.pipeline = pipeline.result

    def _fail(self, step: str, status: ExitStatus, message: str) -> None:
        self._emit(StepOutcome(step, False, message))
        raise FatalPreconditionError(status, message)

    def _emit(self, outcome: StepOutcome) -> None:
        self.report.events.append(outcome)
        if self._reporter:
            self._reporter(outcome)
