#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
    STRIDEBEAT
    Configuration Module (config.py)
"""
__author__ = "mail@michael.welte.de"
__copyright__ = "Copyright © 2025-2026 by Michael Welte. All rights reserved."


import os
import logging
from dataclasses import dataclass, fields

import pytz
from dotenv import load_dotenv

BASE_DIR = os.path.abspath(os.path.dirname(__file__))
ENV_FILE = ".env-stridebeat.dev"
RUN_ENV = os.getenv("RUN_ENV", "localhost")

# Use environment variables as defined in container compose declarations.
env = os.environ.get
if RUN_ENV == "localhost":
    if load_dotenv(os.path.join(BASE_DIR, ENV_FILE)):
        env = os.environ.get
    else:
        print(f"INFO: Dotenv file '{ENV_FILE}' not found, using process environment and defaults.")


def env_float(key: str, default: float) -> float:
    value = env(key)
    return float(value) if value not in (None, "") else default


def env_int(key: str, default: int) -> int:
    value = env(key)
    return int(value) if value not in (None, "") else default


class Config:

    # Project settings
    APP_ENV = env("ENVIRONMENT") or None
    APP_ENV_IS_DEV = APP_ENV == "development"
    APP_ENV_IS_PROD = APP_ENV == "production"
    RUN_ENV_INFO = str(RUN_ENV)
    LOG_LEVEL = logging.DEBUG if APP_ENV_IS_DEV else logging.INFO

    # Default date and time formats (do not change)
    DATE_TIME_FORMAT = "%Y-%m-%d %H:%M:%S"
    TIME_ZONE = pytz.timezone(env("TIME_ZONE") or "Europe/Berlin")

    # Application settings
    APP_MODULE = "stridebeat"
    APP_NAME = "StrideBeat: cadence and heart-rate driven music control"
    APP_VERSION = "1.0.0"

    # Application Logging
    APP_LOG_DIR = env("LOG_DIR") or os.path.join(BASE_DIR, "logs")
    APP_LOG_FILE_NAME = os.path.join(APP_LOG_DIR, f"{APP_MODULE}_log.json")
    APP_LOG_FILE_ENCODING = "utf-8"
    APP_LOG_FILE_ROTATING_BAKUPS = 9
    APP_LOG_FILE_SIZE_MAXIMUM = (1024 * 1024)

    # Step detection (acceleration magnitude, m/s^2 incl. gravity)
    STEP_THRESHOLD = env_float("STEP_THRESHOLD", 12.0)
    STEP_REFRACTORY_MS = env_int("STEP_REFRACTORY_MS", 300)

    # Cadence estimation
    CADENCE_WINDOW = env_int("CADENCE_WINDOW", 5)
    CADENCE_ALPHA = env_float("CADENCE_ALPHA", 0.7)
    CADENCE_INITIAL_SPM = env_float("CADENCE_INITIAL_SPM", 80.0)

    # Heart rate mapping
    HR_LOW = env_int("HR_LOW", 60)
    HR_HIGH = env_int("HR_HIGH", 160)
    HR_INITIAL = env_int("HR_INITIAL", 70)
    HR_PLAUSIBLE_MIN = env_int("HR_PLAUSIBLE_MIN", 20)
    HR_PLAUSIBLE_MAX = env_int("HR_PLAUSIBLE_MAX", 300)
    TIMBRE_BOUNDS = (90, 130)
    TIMBRE_HYSTERESIS_BPM = env_int("TIMBRE_HYSTERESIS_BPM", 0)
    BRIGHT_LOW = env_float("BRIGHT_LOW", 200.0)
    BRIGHT_HIGH = env_float("BRIGHT_HIGH", 5000.0)

    # Control output
    TEMPO_RAMP_S = env_float("TEMPO_RAMP_S", 0.5)
    TICK_INTERVAL_MS = env_int("TICK_INTERVAL_MS", 250)


@dataclass
class SignalSettings:
    """Construction-time constants for one session, defaults from Config."""
    step_threshold: float = Config.STEP_THRESHOLD
    refractory_ms: int = Config.STEP_REFRACTORY_MS
    window: int = Config.CADENCE_WINDOW
    alpha: float = Config.CADENCE_ALPHA
    initial_tempo: float = Config.CADENCE_INITIAL_SPM
    hr_low: int = Config.HR_LOW
    hr_high: int = Config.HR_HIGH
    initial_hr: int = Config.HR_INITIAL
    hr_plausible_min: int = Config.HR_PLAUSIBLE_MIN
    hr_plausible_max: int = Config.HR_PLAUSIBLE_MAX
    timbre_bounds: tuple = Config.TIMBRE_BOUNDS
    timbre_hysteresis: int = Config.TIMBRE_HYSTERESIS_BPM
    bright_low: float = Config.BRIGHT_LOW
    bright_high: float = Config.BRIGHT_HIGH
    ramp_seconds: float = Config.TEMPO_RAMP_S
    tick_interval_ms: int = Config.TICK_INTERVAL_MS

    def as_dict(self) -> dict:
        return {f.name: getattr(self, f.name) for f in fields(self)}
