"""
TASKFLOW - Pomodoro Timer
=========================
Work/break countdown with a per-day count of finished work sessions.

State machine:
    WORKING  --(time_left hits 0)-->  ON BREAK   (daily count + 1, persisted)
    ON BREAK --(time_left hits 0)-->  WORKING

Only the daily count is persisted (key ``pomodoroData``); everything else
resets with the process. A ``Ticker`` drives ``tick()`` once a second while
the timer runs.
"""

import logging
import threading
from datetime import date
from typing import Any, Callable, Optional

from pydantic import ValidationError

from .schema import PomodoroRecord
from .storage import StorageError, load_json, save_json

logger = logging.getLogger(__name__)

POMODORO_KEY = "pomodoroData"
WORK_DURATION = 25 * 60
BREAK_DURATION = 5 * 60
TICK_SECONDS = 1.0


def format_time(seconds: int) -> str:
    """MM:SS, both fields zero-padded"""
    minutes, secs = divmod(max(0, int(seconds)), 60)
    return f"{minutes:02d}:{secs:02d}"


def day_key(day: date) -> str:
    return day.isoformat()


def _read_record(storage: Any) -> Optional[PomodoroRecord]:
    data = load_json(storage, POMODORO_KEY)
    if data is None:
        return None
    try:
        return PomodoroRecord.model_validate(data)
    except ValidationError as e:
        logger.warning(f"Ignoring invalid pomodoro record: {e.error_count()} errors")
        return None


def load_daily_count(storage: Any, day: date) -> int:
    """Sessions finished on day; 0 for a record from any other day. Never writes."""
    record = _read_record(storage)
    if record is None or record.date != day_key(day):
        return 0
    return record.count


def record_session(storage: Any, day: date) -> int:
    """Count one more finished work session for day and persist it"""
    count = load_daily_count(storage, day) + 1
    record = PomodoroRecord(date=day_key(day), count=count)
    save_json(storage, POMODORO_KEY, record.model_dump(mode="json"))
    return count


class Ticker:
    """
    Calls callback every interval seconds on a daemon thread until stopped.

    After stop() returns no new callback starts. If the callback raises,
    the error is logged and the ticker stops.
    """

    def __init__(self, callback: Callable[[], Any], interval: float = TICK_SECONDS):
        self.callback = callback
        self.interval = interval
        self._stopped = threading.Event()
        self._thread: Optional[threading.Thread] = None

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive() and not self._stopped.is_set()

    def start(self) -> None:
        if self.running:
            return
        self._stopped.clear()
        self._thread = threading.Thread(target=self._run, name="taskflow-ticker", daemon=True)
        self._thread.start()

    def stop(self) -> None:
        self._stopped.set()
        thread = self._thread
        if thread is not None and thread is not threading.current_thread():
            thread.join()
        self._thread = None

    def _run(self) -> None:
        while not self._stopped.wait(self.interval):
            try:
                self.callback()
            except Exception:
                logger.exception("Ticker callback failed; stopping")
                self._stopped.set()
                return


class PomodoroTimer:
    """
    Pomodoro state machine

    tick() is the only transition trigger; start()/pause() just decide
    whether a Ticker is calling it.
    """

    def __init__(
        self,
        storage: Any,
        today: Callable[[], date] = date.today,
        work_duration: int = WORK_DURATION,
        break_duration: int = BREAK_DURATION,
        tick_seconds: float = TICK_SECONDS,
        on_phase_change: Optional[Callable[["PomodoroTimer"], Any]] = None
    ):
        self.storage = storage
        self.today = today
        self.work_duration = work_duration
        self.break_duration = break_duration
        self.tick_seconds = tick_seconds
        self.on_phase_change = on_phase_change

        self.is_break = False
        self.time_left = work_duration
        self.total_time = work_duration

        self._lock = threading.RLock()
        self._ticker: Optional[Ticker] = None

    # ========================================
    # STATE
    # ========================================

    @property
    def running(self) -> bool:
        return self._ticker is not None and self._ticker.running

    @property
    def phase(self) -> str:
        return "break" if self.is_break else "work"

    @property
    def progress_percent(self) -> float:
        with self._lock:
            if self.total_time <= 0:
                return 0.0
            return self.time_left / self.total_time * 100

    @property
    def display(self) -> str:
        return format_time(self.time_left)

    @property
    def daily_count(self) -> int:
        return load_daily_count(self.storage, self.today())

    # ========================================
    # TRANSITIONS
    # ========================================

    def tick(self) -> None:
        """Advance one second; switch phase when the countdown runs out"""
        with self._lock:
            if self.time_left > 0:
                self.time_left -= 1
            if self.time_left > 0:
                return

            if self.is_break:
                self._begin_work()
            else:
                self._begin_break()

        if self.on_phase_change:
            self.on_phase_change(self)

    def _begin_break(self) -> None:
        self.is_break = True
        self.total_time = self.time_left = self.break_duration

        try:
            count = record_session(self.storage, self.today())
        except StorageError as e:
            logger.error(f"Could not persist pomodoro count: {e}")
            return
        logger.info(f"🍅 Work session done ({count} today), break for {format_time(self.break_duration)}")

    def _begin_work(self) -> None:
        self.is_break = False
        self.total_time = self.time_left = self.work_duration
        logger.info(f"▶️ Break over, work for {format_time(self.work_duration)}")

    # ========================================
    # CONTROL
    # ========================================

    def start(self) -> None:
        if self.running:
            return
        self._ticker = Ticker(self.tick, self.tick_seconds)
        self._ticker.start()
        logger.debug(f"Pomodoro started ({self.phase}, {self.display} left)")

    def pause(self) -> None:
        if self._ticker is None:
            return
        self._ticker.stop()
        self._ticker = None
        logger.debug(f"Pomodoro paused ({self.phase}, {self.display} left)")

    def reset(self) -> None:
        self.pause()
        with self._lock:
            self.is_break = False
            self.total_time = self.time_left = self.work_duration
