#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
    STRIDEBEAT
    Clock Generator Module (bpm_clock_generator.py)
"""
__author__ = "mail@michael.welte.de"
__copyright__ = "Copyright © 2025-2026 by Michael Welte. All rights reserved."


import threading
import time
from typing import Callable

from sleep_until import sleep_until

from stridebeat import cfg, custom_logger as clog
from stridebeat.modules.bpm_control_signal import ControlSignal
from stridebeat.modules.bpm_state import SignalState
from stridebeat.utils.bpm_errors import ConfigurationError


def clock_thread(tick: Callable[[], ControlSignal], state: SignalState, stop: threading.Event,
                 interval_ms: int = cfg.TICK_INTERVAL_MS):
    """ Call `tick` every `interval_ms` on a fixed grid and publish each snapshot until `stop` is set. """
    if interval_ms is None or interval_ms <= 0:
        raise ConfigurationError(f"Tick interval must be > 0 ms, got {interval_ms!r}.")
    interval = interval_ms / 1000.0
    next_tick = time.time()

    while not stop.is_set():
        try:
            state.publish(tick())
        except Exception as e:
            clog.error(f"Tick failed, keeping last published snapshot: {e}")

        next_tick += interval
        now = time.time()
        if next_tick < now:
            # Fell behind, resynchronise instead of bursting.
            next_tick = now + interval
        sleep_until(next_tick)


def start_clock(tick: Callable[[], ControlSignal], state: SignalState,
                interval_ms: int = cfg.TICK_INTERVAL_MS) -> Callable[[], None]:
    """ Run clock_thread on a daemon thread, returns a function that stops and joins it. """
    if interval_ms is None or interval_ms <= 0:
        raise ConfigurationError(f"Tick interval must be > 0 ms, got {interval_ms!r}.")
    stop = threading.Event()
    thread = threading.Thread(target=clock_thread, args=(tick, state, stop, interval_ms),
                              name="stridebeat-clock", daemon=True)
    thread.start()
    clog.info(f"Clock started with a {interval_ms} ms tick.")

    def stop_clock():
        stop.set()
        thread.join(timeout=max(1.0, 2 * interval_ms / 1000.0))
        clog.info(f"Clock stopped after {state.get()[1]} ticks.")

    return stop_clock
