#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
    STRIDEBEAT
    Step Detector Module (bpm_step_detector.py)
"""
__author__ = "mail@michael.welte.de"
__copyright__ = "Copyright © 2025-2026 by Michael Welte. All rights reserved."

# Common imports
import math
from dataclasses import dataclass
from typing import Optional

# App imports
from stridebeat import cfg, custom_logger as clog
from stridebeat.utils.bpm_errors import ConfigurationError


@dataclass(frozen=True)
class Sample:
    magnitude: float
    timestamp: int  # ms


@dataclass(frozen=True)
class StepEvent:
    timestamp: int  # ms


class StepDetector:
    """
        Rising-edge step detector on acceleration magnitude. A step fires when the
        magnitude crosses the threshold from at-or-below to above, unless the previous
        step is younger than the refractory period.
    """

    def __init__(self, threshold: float = cfg.STEP_THRESHOLD, refractory_ms: int = cfg.STEP_REFRACTORY_MS):
        if threshold is None or not math.isfinite(threshold):
            raise ConfigurationError(f"Step threshold must be a finite number, got {threshold!r}.")
        if refractory_ms is None or refractory_ms < 0:
            raise ConfigurationError(f"Refractory period must be >= 0 ms, got {refractory_ms!r}.")
        self.threshold = float(threshold)
        self.refractory_ms = int(refractory_ms)
        self.last_magnitude = 0.0
        self.last_step_time: Optional[int] = None
        clog.debug(f"Step detector ready (threshold={self.threshold}, refractory={self.refractory_ms} ms).")

    def observe(self, sample: Sample) -> Optional[StepEvent]:
        crossed = sample.magnitude > self.threshold and self.last_magnitude <= self.threshold
        self.last_magnitude = sample.magnitude

        if not crossed:
            return None
        if self.last_step_time is not None and sample.timestamp - self.last_step_time < self.refractory_ms:
            clog.debug(f"Crossing at {sample.timestamp} ms inside refractory window, discarded.")
            return None

        self.last_step_time = sample.timestamp
        return StepEvent(timestamp=sample.timestamp)

    def reset(self) -> None:
        self.last_magnitude = 0.0
        self.last_step_time = None
