# io/engine_logging.py
import json
import logging
import sys

from trip_sim.domain.records import CancellationOutcome
from trip_sim.sim.hooks import NoopHooks


def _default_json_logger(name="trip_sim", level="INFO"):
    logger = logging.getLogger(name)
    if not logger.handlers:
        h = logging.StreamHandler(sys.stdout)

        class _JsonFormatter(logging.Formatter):
            def format(self, record: logging.LogRecord) -> str:
                payload = {
                    "level": record.levelname,
                    "msg": record.getMessage(),
                    "logger": record.name,
                }
                extra = getattr(record, "extra", None)
                if isinstance(extra, dict):
                    payload.update(extra)
                return json.dumps(payload, default=str)

        h.setFormatter(_JsonFormatter())
        logger.addHandler(h)
    logger.setLevel(level)
    return logger


class EngineLogging(NoopHooks):
    """
    Structured JSON logs for one synthesis run.
    Per-family timings are DEBUG-only unless ``debug`` is set.
    """

    def __init__(
        self,
        run_id: str = "local",
        clock=None,
        level: str = "INFO",
        debug: bool = False,
        logger: logging.Logger | None = None,
    ):
        self.run_id, self.clock, self.debug = run_id, clock, debug
        self.log = logger or _default_json_logger(level=level)

    def _emit(self, level: str, msg: str, **extra):
        payload = {"run_id": self.run_id}
        t = extra.get("t")
        if self.clock is not None and t is not None:
            payload["wall"] = self.clock.to_wall(t).isoformat()
        self.log.log(getattr(logging, level), msg, extra={"extra": {**payload, **extra}})

    def run_start(self, *, coordinates: int, seed: int):
        self._emit("INFO", "run_start", coordinates=coordinates, seed=seed)

    def cancellation(self, outcome: CancellationOutcome, *, coordinates: int):
        if not outcome.triggered:
            self._emit("DEBUG", "cancellation", triggered=False)
            return
        self._emit(
            "INFO",
            "cancellation",
            triggered=True,
            index=outcome.index,
            coordinates=coordinates,
            pct_of_route=round(100.0 * outcome.index / coordinates, 1),
            reason=outcome.event.payload.get("cancellation_reason"),
            t=outcome.event.t,
        )

    def generator_done(self, family: str, *, events: int, ms: float):
        self._emit(
            "INFO" if self.debug else "DEBUG",
            "generator_done",
            family=family,
            events=events,
            ms=round(ms, 3),
        )

    def truncated(self, *, cutoff_t: float, dropped: int):
        self._emit("INFO", "truncated", t=cutoff_t, dropped=dropped)

    def run_end(self, *, events: int, **extra):
        self._emit("INFO", "run_end", events=events, **extra)

    def error(self, *, reason: str, **extra):
        self._emit("ERROR", "engine_error", reason=reason, **extra)
