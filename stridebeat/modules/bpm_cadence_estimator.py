#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
    STRIDEBEAT
    Cadence Estimator Module (bpm_cadence_estimator.py)
"""
__author__ = "mail@michael.welte.de"
__copyright__ = "Copyright © 2025-2026 by Michael Welte. All rights reserved."

# Common imports
from collections import deque
from typing import Deque, Optional, Tuple

# App imports
from stridebeat import cfg, custom_logger as clog
from stridebeat.modules.bpm_step_detector import StepEvent
from stridebeat.utils.bpm_errors import ConfigurationError


class CadenceEstimator:
    """
        Turns step timestamps into a smoothed steps-per-minute tempo.

        The history holds the most recent `window` step timestamps (oldest evicted on
        overflow). Each accepted step with at least two timestamps in history yields an
        instant tempo from the mean interval, which is blended into the current tempo:
        tempo = tempo * alpha + instant * (1 - alpha).
    """
    SOURCE_HOLD = "HOLD"
    SOURCE_STEPS = "STEPS"
    SOURCE_MANUAL = "MANUAL"

    def __init__(self, window: int = cfg.CADENCE_WINDOW, alpha: float = cfg.CADENCE_ALPHA,
                 initial_tempo: float = cfg.CADENCE_INITIAL_SPM):
        if window is None or window < 2:
            raise ConfigurationError(f"Cadence window must hold at least 2 steps, got {window!r}.")
        if alpha is None or not 0.0 <= alpha < 1.0:
            raise ConfigurationError(f"Smoothing factor must be in [0, 1), got {alpha!r}.")
        if initial_tempo is None or not initial_tempo > 0:
            raise ConfigurationError(f"Initial tempo must be > 0, got {initial_tempo!r}.")
        self.window = int(window)
        self.alpha = float(alpha)
        self.initial_tempo = float(initial_tempo)
        self._history: Deque[int] = deque(maxlen=self.window)
        self._tempo = self.initial_tempo
        self.source = self.SOURCE_HOLD
        clog.debug(f"Cadence estimator ready (window={self.window}, alpha={self.alpha}, initial={self.initial_tempo}).")

    def on_step(self, event: StepEvent) -> None:
        if self._history and event.timestamp <= self._history[-1]:
            clog.warning(f"Step at {event.timestamp} ms is not newer than {self._history[-1]} ms, dropped.")
            return
        self._history.append(event.timestamp)

        instant = self.instant_tempo()
        if instant is None:
            return
        self._tempo = self._tempo * self.alpha + instant * (1.0 - self.alpha)
        self.source = self.SOURCE_STEPS
        clog.debug(f"Step at {event.timestamp} ms: instant={instant:.2f} spm, tempo={self._tempo:.2f} spm.")

    def instant_tempo(self) -> Optional[float]:
        """ Unsmoothed tempo from the current history, None while it cannot be computed. """
        if len(self._history) < 2:
            return None
        avg_interval = (self._history[-1] - self._history[0]) / (len(self._history) - 1)
        if avg_interval <= 0:
            return None
        return 60000.0 / avg_interval

    def current_tempo(self) -> float:
        return self._tempo

    def set_tempo(self, spm: float) -> None:
        """ Manual override of the smoothed tempo, history is kept. """
        if spm is None or not spm > 0:
            clog.warning(f"Ignoring manual tempo {spm!r}, must be > 0.")
            return
        self._tempo = float(spm)
        self.source = self.SOURCE_MANUAL

    def history(self) -> Tuple[int, ...]:
        return tuple(self._history)

    def reset(self) -> None:
        self._history.clear()
        self._tempo = self.initial_tempo
        self.source = self.SOURCE_HOLD
