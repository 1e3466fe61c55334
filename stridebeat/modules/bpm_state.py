#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
    STRIDEBEAT
    Global State Module (bpm_state.py)
"""
__author__ = "mail@michael.welte.de"
__copyright__ = "Copyright © 2025-2026 by Michael Welte. All rights reserved."


import threading
import time
from typing import Optional, Tuple

from stridebeat.modules.bpm_control_signal import ControlSignal


class SignalState:
    """ Latest published ControlSignal, single writer and many readers. """

    def __init__(self):
        self.lock = threading.Lock()
        self.signal: Optional[ControlSignal] = None
        self.ticks = 0
        self.last_update: Optional[float] = None

    def publish(self, signal: ControlSignal):
        with self.lock:
            self.signal = signal
            self.ticks += 1
            self.last_update = time.monotonic()

    def get(self) -> Tuple[Optional[ControlSignal], int]:
        with self.lock:
            return self.signal, self.ticks

    def age(self) -> Optional[float]:
        """ Seconds since the last publish, None before the first one. """
        with self.lock:
            return None if self.last_update is None else time.monotonic() - self.last_update

    def clear(self):
        with self.lock:
            self.signal = None
            self.ticks = 0
            self.last_update = None
