"""Colored pipeline logger for the ingestion and query paths.

Each stage has its own color and icon so one source can be followed through
fetch → chunk → tag → embed → index, and one question through
retrieve → generate, in a busy console.
"""

import logging
import time
from contextlib import contextmanager
from typing import Any, NamedTuple

_RESET = "\033[0m"
_BOLD = "\033[1m"
_DIM = "\033[2m"
_RED = "\033[91m"
_GREEN = "\033[92m"
_YELLOW = "\033[93m"
_BLUE = "\033[94m"
_MAGENTA = "\033[95m"
_CYAN = "\033[96m"
_WHITE = "\033[97m"
_GRAY = "\033[90m"


class Stage(NamedTuple):
    label: str
    color: str
    icon: str


# ── Stages ───────────────────────────────────────────────────────────

class PipelineStage:
    """The stages a source or a question passes through."""

    # write path
    FETCH = Stage("FETCH", _GREEN, "🌐")
    CHUNK = Stage("CHUNK", _YELLOW, "✂️")
    TAG = Stage("TAG", _YELLOW, "🏷️")
    EMBED = Stage("EMBED", _MAGENTA, "🧮")
    INDEX = Stage("INDEX", _GREEN, "💾")
    # read path
    RETRIEVE = Stage("RETRIEVE", _BLUE, "🔎")
    GENERATE = Stage("GENERATE", _CYAN, "🤖")
    # tenant data
    DELETE = Stage("DELETE", _RED, "🗑️")
    # whole run
    PIPELINE = Stage("PIPELINE", _WHITE, "⚙️")
    COMPLETE = Stage("COMPLETE", _GREEN, "✅")


# ── Logger ───────────────────────────────────────────────────────────

class PipelineLogger:
    """Stage-aware wrapper around a named ``logging.Logger``.

    The logger name is the component name (``IngestionService``,
    ``QueryService``, ...) so per-category levels in ``log_config`` apply.
    """

    def __init__(self, component_name: str):
        self._logger = logging.getLogger(component_name)

    def step_start(self, stage: Stage, message: str, **context: Any) -> None:
        self._emit(
            logging.INFO,
            f"{stage.color}{_BOLD}{stage.icon} [{stage.label}]{_RESET} {stage.color}{message}{_RESET}",
            context,
        )

    def step_complete(self, stage: Stage, message: str, **context: Any) -> None:
        self._emit(
            logging.INFO,
            f"{stage.color}{stage.icon} [{stage.label}]{_RESET} {_GREEN}✓ {message}{_RESET}",
            context,
        )

    def step_error(self, stage: Stage, message: str, error: BaseException | None = None) -> None:
        line = f"{_RED}{_BOLD}❌ [{stage.label}]{_RESET} {_RED}{message}{_RESET}"
        if error is not None:
            line += f" {_DIM}→ {type(error).__name__}: {error}{_RESET}"
        self._logger.error(line)

    def detail(self, message: str, **context: Any) -> None:
        self._emit(logging.INFO, f"   {_GRAY}├─ {message}{_RESET}", context)

    def separator(self, title: str = "") -> None:
        rule = "─" * 60 if not title else f"{'─' * 10} {title} {'─' * max(0, 50 - len(title))}"
        self._logger.info(f"{_GRAY}{rule}{_RESET}")

    def stats(self, **values: Any) -> None:
        joined = " | ".join(f"{key}: {value}" for key, value in values.items())
        self._logger.info(f"   {_GRAY}📈 {joined}{_RESET}")

    @contextmanager
    def timed_step(self, stage: Stage, message: str, **context: Any):
        """Log start, then completion or failure with the elapsed time.

        Exceptions are logged and re-raised unchanged.
        """
        self.step_start(stage, message, **context)
        started = time.perf_counter()
        try:
            yield
        except Exception as e:
            self.step_error(stage, f"{message} failed after {_elapsed(started)}", error=e)
            raise
        self.step_complete(stage, f"{message} ({_elapsed(started)})", **context)

    def _emit(self, level: int, line: str, context: dict[str, Any]) -> None:
        if context:
            line += f" {_GRAY}({' | '.join(f'{k}={v}' for k, v in context.items())}){_RESET}"
        self._logger.log(level, line)


def _elapsed(started: float) -> str:
    return f"{time.perf_counter() - started:.2f}s"
