#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
    STRIDEBEAT
    Custom Logger Module (bpm_custom_logger.py)
"""
__author__ = "mail@michael.welte.de"
__copyright__ = "Copyright © 2025-2026 by Michael Welte. All rights reserved."


# Imports
import inspect
import logging
import os
from enum import Enum
from types import FrameType

from rich.console import Console
rc = Console(style="grey50", stderr=True)


# Setup logging with custom logger class instance
class CustomLogger(logging.Logger):
    """
        Custom logger class which prefixes every message with the calling class and
        function (plus file and line on debug level), hands it to the regular handlers
        (json file handler) and mirrors it to the rich console while debugging.
        Every log method returns the composed message text.
    """
    class LogLevelEnum(str, Enum):
        CRITICAL = logging.getLevelName(logging.CRITICAL)
        ERROR    = logging.getLevelName(logging.ERROR)
        WARNING  = logging.getLevelName(logging.WARNING)
        INFO     = logging.getLevelName(logging.INFO)
        DEBUG    = logging.getLevelName(logging.DEBUG)

    CONSOLE_STYLES = {
        logging.DEBUG:    ("cyan", "DEBUG"),
        logging.INFO:     ("green", "INFO"),
        logging.WARNING:  ("yellow", "WARN"),
        logging.ERROR:    ("red", "ERROR"),
        logging.CRITICAL: ("magenta", "CRITICAL"),
    }

    def __init__(self, name, level=logging.NOTSET):
        super().__init__(name, level)

    @staticmethod
    def _caller_(frame: FrameType) -> str:
        if frame is None:
            return "None.NONE"
        owner = frame.f_locals.get("self", None)
        calling_class = owner.__class__.__name__ if owner is not None else frame.f_globals.get("__name__", "").rsplit(".", 1)[-1]
        return f"{calling_class}.{frame.f_code.co_name.upper()}"

    def _logmsg_(self, frame, level: int, message, *args, **kwargs) -> str:
        """
            Build extended logging message.
        """
        msg = f"{self._caller_(frame)} >> {message}"

        # Extend logging information on debug level
        if level == logging.DEBUG and frame is not None:
            calling_file = os.path.basename(frame.f_code.co_filename)
            msg = f"{self._caller_(frame)} [{calling_file}|{frame.f_lineno}]>> {message}"

        # Call the original logging method
        self.log(level, msg, *args, **kwargs)
        return msg

    def _emit_(self, level: int, message: str, frame: FrameType, *args, **kwargs) -> str:
        color, label = self.CONSOLE_STYLES[level]
        if not self.isEnabledFor(level):
            return f"{label}: {message}"
        msg = self._logmsg_(frame, level, message, *args, **kwargs)
        if self.getEffectiveLevel() == logging.DEBUG:
            rc.log(f"[{color}]{label}:[/] {msg}", markup=True, highlight=False)
        return f"{label}: {msg}"

    def getLevel(self) -> str:
        return str(logging.getLevelName(self.getEffectiveLevel())).lower()

    def getLevelEnum(self) -> LogLevelEnum:
        return self.LogLevelEnum(self.getLevel().upper())

    def setLevelByEnum(self, level_enum: LogLevelEnum):
        self.setLevel(logging.getLevelName(level_enum.value))

    def debug(self, message: str, frame: FrameType = None, *args, **kwargs) -> str:
        return self._emit_(logging.DEBUG, message, frame or inspect.currentframe().f_back, *args, **kwargs)

    def info(self, message: str, frame: FrameType = None, *args, **kwargs) -> str:
        return self._emit_(logging.INFO, message, frame or inspect.currentframe().f_back, *args, **kwargs)

    def warning(self, message: str, frame: FrameType = None, *args, **kwargs) -> str:
        return self._emit_(logging.WARNING, message, frame or inspect.currentframe().f_back, *args, **kwargs)

    def error(self, message: str, frame: FrameType = None, *args, **kwargs) -> str:
        return self._emit_(logging.ERROR, message, frame or inspect.currentframe().f_back, *args, **kwargs)

    def critical(self, message: str, frame: FrameType = None, *args, **kwargs) -> str:
        return self._emit_(logging.CRITICAL, message, frame or inspect.currentframe().f_back, *args, **kwargs)
