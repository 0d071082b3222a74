"""
BreakScheduler - work/rest rhythm engine for BreakBell.

Runs a single control loop on a background thread. The loop alternates
between a work period and a rest period, and sends randomized check-in
reminders while the user is working.

Each iteration reads the clock and evaluates the state machine:
- a phase boundary (work -> rest, rest -> work) is checked first,
- then, while working, the next check-in.
Any event that fires ends the iteration and the loop runs again straight
away. When nothing is due, the loop waits on a condition variable until
the next deadline or until stop() wakes it.

All state lives in SchedulerState and is guarded by one lock. stop() is
the only entry point that touches state from outside the loop thread.

Notification and sound failures are logged and never stop the loop.
Startup failures (icon, notifier) raise StartupError from start().
"""

import time
import random
import logging
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Dict, Optional

import config
from core.errors import NotifyError, PlayError, StartupError
from core.interfaces import Clock, Notifier, SoundKind, SoundPlayer, SystemClock, Urgency

logger = logging.getLogger(__name__)


@dataclass
class SchedulerState:
    """Mutable scheduler state. Only touched while holding the scheduler lock."""
    running: bool = True
    resting: bool = False
    checkin_count: int = 0
    last_boundary_time: int = 0  # ms since epoch, start of the current phase
    next_checkin_time: int = 0  # ms since epoch, meaningful only while working


def format_duration(ms: int) -> str:
    """Format a millisecond duration as '<m> min <s> sec'."""
    ms = max(0, ms)
    minutes = ms // (60 * 1000)
    seconds = (ms % (60 * 1000)) // 1000
    return f"{minutes} min {seconds} sec"


class BreakScheduler:
    """
    Work/rest scheduler.

    Usage:
        scheduler = BreakScheduler(notifier, sound_player, icon_provider=provision_icon)
        scheduler.start()   # raises StartupError
        scheduler.wait()    # returns after stop()
    """

    def __init__(
        self,
        notifier: Notifier,
        sound_player: SoundPlayer,
        icon_provider: Optional[Callable[[], Path]] = None,
        clock: Optional[Clock] = None,
        rng: Optional[random.Random] = None,
    ) -> None:
        """
        Args:
            notifier: Desktop notification backend (init/show/uninit).
            sound_player: Alert sound backend.
            icon_provider: Called once at start() to materialise the icon file.
            clock: Millisecond wall clock (defaults to SystemClock).
            rng: Random source for check-in jitter (seeded from the clock if omitted).
        """
        self.notifier = notifier
        self.sound_player = sound_player
        self.icon_provider = icon_provider
        self.clock: Clock = clock or SystemClock()
        self.rng: random.Random = rng or random.Random(time.time_ns())
        self.icon_path: Optional[Path] = None

        self._lock = threading.Lock()
        self._wakeup = threading.Condition(self._lock)
        self._thread: Optional[threading.Thread] = None
        self._notifier_ready = False

        now = self.clock.now()
        self.state = SchedulerState(
            last_boundary_time=now,
            next_checkin_time=now + self.random_interval(),
        )

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def random_interval(self) -> int:
        """Uniform check-in spacing in [MIN_INTERVAL_MS, MAX_INTERVAL_MS], inclusive."""
        return self.rng.randint(config.MIN_INTERVAL_MS, config.MAX_INTERVAL_MS)

    def start(self) -> None:
        """
        Prepare collaborators and spawn the control loop thread.

        Raises:
            StartupError: If the icon cannot be provisioned or the
                notifier cannot be initialised. No thread is started.
        """
        if self._thread and self._thread.is_alive():
            logger.warning("Scheduler already running, ignoring start()")
            return

        if self.icon_provider is not None:
            self.icon_path = self._startup_step("provision notification icon", self.icon_provider)
            logger.info(f"Notification icon ready: {self.icon_path}")

        self._startup_step("initialise notifier", self.notifier.init)
        self._notifier_ready = True

        self._thread = threading.Thread(target=self._loop_thread, name="break-scheduler", daemon=True)
        self._thread.start()
        logger.info("Scheduler started")

    def wait(self) -> None:
        """
        Block until the loop thread exits.

        Joins in short slices so the main thread keeps servicing signals.
        """
        thread = self._thread
        if thread is None:
            return
        while thread.is_alive():
            thread.join(timeout=config.JOIN_POLL_SECONDS)
        self._thread = None

    def run(self) -> None:
        """start() then wait(). Ctrl+C without a signal handler still stops cleanly."""
        self.start()
        try:
            self.wait()
        except KeyboardInterrupt:
            self.stop()
            self.wait()

    def stop(self) -> None:
        """
        Request shutdown and wake the loop if it is sleeping.

        Idempotent. Safe from any thread and from a signal handler on the
        main thread (the loop never runs on the main thread via start()).
        """
        with self._lock:
            if not self.state.running:
                return
            self.state.running = False
            self._wakeup.notify_all()
        logger.info("Scheduler stop requested")

    @property
    def is_running(self) -> bool:
        return self.state.running

    def get_status(self) -> Dict:
        """
        Snapshot of the scheduler state.

        Returns:
            dict with keys: running, phase ("working" | "resting"),
            checkin_count, phase_started_at, next_checkin_at, next_event_at.
        """
        with self._lock:
            state = self.state
            if state.resting:
                next_checkin = None
                next_event = state.last_boundary_time + config.REST_PERIOD_MS
            else:
                next_checkin = state.next_checkin_time
                next_event = min(next_checkin, state.last_boundary_time + config.WORK_PERIOD_MS)
            return {
                "running": state.running,
                "phase": "resting" if state.resting else "working",
                "checkin_count": state.checkin_count,
                "phase_started_at": state.last_boundary_time,
                "next_checkin_at": next_checkin,
                "next_event_at": next_event,
            }

    # ------------------------------------------------------------------
    # Control loop
    # ------------------------------------------------------------------

    def run_loop(self) -> None:
        """
        Run the control loop on the calling thread until stop().

        Does not touch the notifier lifecycle; start() handles that.
        """
        with self._lock:
            if not self.state.running:
                return

            self._alert(
                "start",
                "Work Session Started",
                "Starting work session. Stay focused!",
                Urgency.NORMAL,
                SoundKind.MESSAGE,
            )
            self._begin_work_period(self.clock.now())

            while self.state.running:
                next_event_time = self._evaluate(self.clock.now())
                if next_event_time is None:
                    continue
                self._sleep_until(next_event_time)

        logger.info("Scheduler loop exited")

    def _loop_thread(self) -> None:
        """Thread target: run the loop, then tear down the notifier exactly once."""
        try:
            self.run_loop()
        except Exception as e:
            logger.error(f"Scheduler loop error: {e}", exc_info=True)
        finally:
            self._shutdown_notifier()

    def _evaluate(self, now: int) -> Optional[int]:
        """
        Evaluate the state machine at `now`. Caller holds the lock.

        Returns:
            None if an event fired (evaluate again immediately), otherwise
            the time of the next event to sleep until.
        """
        state = self.state

        if state.resting:
            rest_end = state.last_boundary_time + config.REST_PERIOD_MS
            if now >= rest_end:
                self._end_rest(now)
                return None
            return rest_end

        work_end = state.last_boundary_time + config.WORK_PERIOD_MS
        if now >= work_end:
            self._start_rest(now)
            return None

        if now >= state.next_checkin_time:
            self._check_in(now, work_end)
            return None

        return min(state.next_checkin_time, work_end)

    def _sleep_until(self, deadline: int) -> None:
        """
        Wait until `deadline` or until stop(). Caller holds the lock.

        Re-checks the clock after every wake-up, so spurious or early
        wake-ups simply wait again.
        """
        logger.debug(f"Sleeping for {format_duration(deadline - self.clock.now())} until next event...")

        while self.state.running:
            now = self.clock.now()
            if now >= deadline:
                late_by = now - deadline
                if late_by > config.OVERSLEEP_WARNING_MS:
                    logger.warning(
                        f"Woke {format_duration(late_by)} after the scheduled event "
                        f"(system suspend or clock change?)"
                    )
                return
            self._wakeup.wait(timeout=(deadline - now) / 1000.0)

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    def _begin_work_period(self, now: int) -> None:
        """Reset state to the start of a fresh work period."""
        self.state.resting = False
        self.state.checkin_count = 0
        self.state.last_boundary_time = now
        self._schedule_next_checkin(now)

    def _schedule_next_checkin(self, now: int) -> None:
        interval = self.random_interval()
        self.state.next_checkin_time = now + interval
        logger.debug(f"Next check-in in: {format_duration(interval)}")

    def _start_rest(self, now: int) -> None:
        """Working -> Resting."""
        self.state.resting = True
        self.state.last_boundary_time = now

        work_minutes = config.WORK_PERIOD_MS // 60000
        rest_minutes = config.REST_PERIOD_MS // 60000
        self._alert(
            "break",
            f"🎉 Break Time! ({work_minutes} minutes reached)",
            f"Take a {rest_minutes}-minute break. You've been working for {work_minutes} minutes. "
            f"Stretch, rest your eyes, and relax!",
            Urgency.CRITICAL,
            SoundKind.BOUNDARY_COMPLETE,
        )
        logger.info(f"Break started ({rest_minutes} min rest)")

    def _end_rest(self, now: int) -> None:
        """Resting -> Working."""
        self._begin_work_period(now)

        rest_minutes = config.REST_PERIOD_MS // 60000
        self._alert(
            "back-to-work",
            "Break Over - Back to Work!",
            f"Your {rest_minutes}-minute break is over. Starting new work session.",
            Urgency.NORMAL,
            SoundKind.MESSAGE,
        )
        logger.info("Break over, new work period started")

    def _check_in(self, now: int, work_end: int) -> None:
        """Recurring in-work reminder."""
        self.state.checkin_count += 1
        count = self.state.checkin_count

        self._alert(
            "check-in",
            "⏰ Regular Check-in",
            f"Reminder #{count}, rest for {config.MICRO_BREAK_SECONDS}s\n"
            f"Next break in: {format_duration(work_end - now)}",
            Urgency.NORMAL,
            SoundKind.CHECKIN,
        )
        logger.info(f"Check-in #{count} sent")
        self._schedule_next_checkin(now)

    # ------------------------------------------------------------------
    # Side effects
    # ------------------------------------------------------------------

    def _alert(self, event: str, title: str, body: str, urgency: Urgency, sound: SoundKind) -> None:
        """Show a notification then play a sound. Failures are logged only."""
        try:
            self.notifier.show(title, body, urgency, self.icon_path)
        except NotifyError as e:
            logger.warning(f"Failed to send {event} notification: {e}")
        except Exception as e:
            logger.error(f"Unexpected error sending {event} notification: {e}", exc_info=True)

        try:
            self.sound_player.play(sound)
        except PlayError as e:
            logger.warning(f"Failed to play {event} sound: {e}")
        except Exception as e:
            logger.error(f"Unexpected error playing {event} sound: {e}", exc_info=True)

    # ------------------------------------------------------------------
    # Lifecycle helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _startup_step(description: str, step: Callable):
        """Run a startup step, turning any failure into StartupError."""
        try:
            return step()
        except StartupError:
            raise
        except Exception as e:
            raise StartupError(f"Failed to {description}: {e}") from e

    def _shutdown_notifier(self) -> None:
        if not self._notifier_ready:
            return
        self._notifier_ready = False
        try:
            self.notifier.uninit()
        except Exception as e:
            logger.warning(f"Notifier shutdown error: {e}")
