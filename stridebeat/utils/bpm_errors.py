#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
    STRIDEBEAT
    Error Module (bpm_errors.py)
"""
__author__ = "mail@michael.welte.de"
__copyright__ = "Copyright © 2025-2026 by Michael Welte. All rights reserved."


class StrideBeatError(Exception):
    """ Base class for all errors raised by this package. """


class ConfigurationError(StrideBeatError, ValueError):
    """ Invalid construction-time setting, raised before any signal is processed. """


class FrameDecodeError(StrideBeatError, ValueError):
    """ Heart-rate-measurement frame that is empty or shorter than its flags announce. """
