"""Background timer thread that polls the ISS position and extends the ground track."""

import logging
import threading
from typing import Callable, List, Optional

import config
from iss_tracking import IssPosition, get_iss_position
from track import TrackHistory

logger = logging.getLogger(__name__)

UpdateCallback = Callable[[List[IssPosition], IssPosition], None]


class PositionUpdater:
    """
    Every `interval` seconds:

    1. Get the current ISS position
    2. Append it to the track history (evicting the oldest past capacity)
    3. Hand the track snapshot and the latest position to `on_update`

    Ticks run on one daemon thread, so they never overlap. `on_update` is
    called from that thread; GUI callers must marshal to their own thread.
    """

    def __init__(
        self,
        history: TrackHistory,
        on_update: UpdateCallback,
        fetch: Callable[[], IssPosition] = get_iss_position,
        interval: float = config.UPDATE_INTERVAL_S,
        failure_alert_threshold: int = config.FAILURE_ALERT_THRESHOLD,
    ):
        if interval <= 0:
            raise ValueError(f"interval must be positive, got {interval}")
        self.history = history
        self.on_update = on_update
        self.fetch = fetch
        self.interval = interval
        self.failure_alert_threshold = failure_alert_threshold
        self.consecutive_failures = 0
        self._stopped = threading.Event()
        self._thread: Optional[threading.Thread] = None

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def tick(self) -> IssPosition:
        try:
            position = self.fetch()
        except Exception:
            logger.exception("ISS position fetch raised; recording the zero position")
            position = IssPosition.zero()

        if position.is_zero():
            self.consecutive_failures += 1
            if self.consecutive_failures == self.failure_alert_threshold:
                logger.error(
                    "%d consecutive ISS position fetches failed; ground track is recording 0°, 0°",
                    self.consecutive_failures,
                )
        else:
            if self.consecutive_failures >= self.failure_alert_threshold:
                logger.info("ISS position updates recovered")
            self.consecutive_failures = 0

        self.history.append(position)
        logger.debug(
            "ISS at %.4f, %.4f (%.1f km), %d positions",
            position.latitude, position.longitude, position.altitude_km, len(self.history),
        )

        try:
            self.on_update(self.history.positions(), position)
        except Exception:
            logger.exception("Position update handler failed")

        return position

    def _run(self) -> None:
        while not self._stopped.is_set():
            try:
                self.tick()
            except Exception:
                logger.exception("ISS position update failed")
            self._stopped.wait(self.interval)

    def start(self) -> None:
        if self.running:
            return
        self._stopped.clear()
        self._thread = threading.Thread(target=self._run, name="iss-position-updater", daemon=True)
        self._thread.start()
        logger.info("Polling ISS position every %ss", self.interval)

    def stop(self, timeout: Optional[float] = None) -> None:
        self._stopped.set()
        if self._thread is None:
            return
        if self._thread is not threading.current_thread():
            self._thread.join(timeout)
        self._thread = None


def handoff_to_loop(loop, handler: UpdateCallback) -> UpdateCallback:
    """Wrap `handler` so updates from the updater thread run on `loop`'s thread."""

    def on_update(positions: List[IssPosition], latest: IssPosition) -> None:
        loop.call_soon_threadsafe(handler, positions, latest)

    return on_update
