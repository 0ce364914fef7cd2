"""
Ordered provisioning steps run against a freshly created playlist.

Creating the playlist and discovering a screen are fatal: every later step
needs their ids. All other steps are best-effort; a failure is recorded
with the backend's response body and the next step still runs.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable

import structlog

from playlistctl.clients.base import BaseHTTPClient
from playlistctl.errors import FatalPreconditionError, TransportError
from playlistctl.models import (
    ExitStatus,
    PlaylistSpec,
    ScheduleWindow,
    UrlItem,
    extract_id,
    extract_items,
)

logger = structlog.get_logger()

PLAYLIST_PATH = "api/playlist-management/playlist"
SCREEN_PATH = "api/inventory-management/screen"
PLAYLIST_URL_PATH = "api/playlist-management/playlist-url"
POP_OVERVIEW_PATH = "api/PopManagement/pop/get-overview-by-screen-id"


@dataclass
class StepOutcome:
    """Classified outcome of one pipeline step."""

    name: str
    success: bool
    message: str
    body: Any = None


@dataclass
class PipelineResult:
    playlist_id: str | None = None
    screen_id: str | None = None
    pop_overview: Any = None
    steps: list[StepOutcome] = field(default_factory=list)

    @property
    def failures(self) -> list[StepOutcome]:
        return [step for step in self.steps if not step.success]

    def step(self, name: str) -> StepOutcome | None:
        for outcome in self.steps:
            if outcome.name == name:
                return outcome
        return None


Reporter = Callable[[StepOutcome], None]


class StepPipeline:
    """Creates, populates, schedules and publishes one playlist."""

    def __init__(
        self,
        client: BaseHTTPClient,
        pop_client: BaseHTTPClient,
        *,
        playlist: PlaylistSpec | None = None,
        url_item: UrlItem | None = None,
        schedule_days: int = 7,
        poll_delay: float = 5.0,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], datetime] | None = None,
        reporter: Reporter | None = None,
    ) -> None:
        self._client = client
        self._pop_client = pop_client
        self._playlist = playlist or PlaylistSpec()
        self._url_item = url_item or UrlItem()
        self._schedule_days = schedule_days
        self._poll_delay = poll_delay
        self._sleep = sleep
        self._clock = clock or (lambda: datetime.now(tz=timezone.utc))
        self._reporter = reporter
        self.result = PipelineResult()

    def run(self, asset_id: str) -> PipelineResult:
        """
        Run every step in order for ``asset_id``.

        Raises:
            FatalPreconditionError: playlist creation or screen discovery failed.
                ``self.result`` holds the steps recorded so far.
        """
        self.result = result = PipelineResult()

        result.playlist_id = self.create_playlist()
        result.screen_id = self.discover_screen()
        playlist_id, screen_id = result.playlist_id, result.screen_id

        self._attempt(
            "attach_file",
            "File attached",
            "File attach failed",
            lambda: self._client.put(
                f"api/playlist-management/playlist-file/create-or-update-batch/{playlist_id}",
                json={"fileIds": [asset_id]},
            ),
        )
        self._attempt(
            "attach_screen",
            "Screen attached",
            "Screen attach failed",
            lambda: self._client.put(
                f"api/playlist-management/playlist-screen/create-or-update-batch/{playlist_id}",
                json={"screenIds": [screen_id]},
            ),
        )

        window = ScheduleWindow.starting_now(self._schedule_days, now=self._clock())
        self._attempt(
            "set_calendar",
            "Calendar updated",
            "Calendar update failed",
            lambda: self._client.put(
                f"{PLAYLIST_PATH}/{playlist_id}/update-calendar",
                json=[window.to_payload()],
            ),
        )
        self._attempt(
            "add_url",
            "URL added",
            "URL add failed",
            lambda: self._client.post(
                PLAYLIST_URL_PATH,
                params={"playlistId": playlist_id},
                json=self._url_item.to_payload(),
            ),
        )
        self._attempt(
            "publish",
            "Publish triggered",
            "Publish failed",
            lambda: self._client.post(f"{PLAYLIST_PATH}/{playlist_id}/publish"),
        )

        if self._poll_delay > 0:
            logger.info("waiting_before_pop_poll", seconds=self._poll_delay)
            self._sleep(self._poll_delay)

        # The backend gives no guarantee it has processed the publish by now
        now = self._clock()
        overview = self._attempt(
            "pop_overview",
            "POP overview received",
            "POP overview failed",
            lambda: self._pop_client.get(
                POP_OVERVIEW_PATH,
                params={"ScreenId": screen_id, "Year": now.year, "Month": now.month},
            ),
        )
        if overview.success:
            result.pop_overview = overview.body

        return result

    def create_playlist(self) -> str:
        try:
            body = self._client.post(PLAYLIST_PATH, json=self._playlist.to_payload())
        except TransportError as exc:
            self._record(StepOutcome("create_playlist", False, f"Create playlist failed: {exc.body}", exc.body))
            raise FatalPreconditionError(
                ExitStatus.FATAL_RESOURCE_CREATION,
                f"Create playlist failed: {exc.body or exc}",
            ) from exc

        playlist_id = extract_id(body)
        if playlist_id is None:
            self._record(StepOutcome("create_playlist", False, "Create playlist returned no id", body))
            raise FatalPreconditionError(
                ExitStatus.FATAL_RESOURCE_CREATION,
                "Create playlist returned no id",
            )

        self._record(StepOutcome("create_playlist", True, f"Playlist created: {playlist_id}", body))
        return playlist_id

    def discover_screen(self) -> str:
        try:
            body = self._client.get(SCREEN_PATH, params={"skipCount": 0, "maxResultCount": 1})
        except TransportError as exc:
            message = f"Screen list failed: {exc.status_code or exc}"
            self._record(StepOutcome("discover_screen", False, message, exc.body))
            raise FatalPreconditionError(ExitStatus.FATAL_SCREEN_DISCOVERY, message) from exc

        for item in extract_items(body):
            screen_id = extract_id(item)
            if screen_id is not None:
                self._record(StepOutcome("discover_screen", True, f"Using ScreenId: {screen_id}", body))
                return screen_id

        self._record(StepOutcome("discover_screen", False, "No screens returned.", body))
        raise FatalPreconditionError(ExitStatus.FATAL_SCREEN_DISCOVERY, "No screens returned.")

    def _attempt(
        self,
        name: str,
        success_message: str,
        failure_message: str,
        call: Callable[[], Any],
    ) -> StepOutcome:
        try:
            body = call()
        except TransportError as exc:
            outcome = StepOutcome(name, False, f"{failure_message}: {exc.body or exc}", exc.body)
        else:
            outcome = StepOutcome(name, True, success_message, body)
        self._record(outcome)
        return outcome

    def _record(self, outcome: StepOutcome) -> None:
        self.result.steps.append(outcome)
        if outcome.success:
            logger.info("step_succeeded", step=outcome.name)
        else:
            logger.warning("step_failed", step=outcome.name, detail=outcome.message)
        if self._reporter:
            self._reporter(outcome)
