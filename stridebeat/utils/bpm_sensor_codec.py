#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
    STRIDEBEAT
    Sensor Codec Module (bpm_sensor_codec.py)

    Input adapters between the raw sensor collaborators and the signal core:
    acceleration triples become magnitudes, heart-rate-measurement characteristic
    frames (BLE GATT 0x2A37) become plain integer bpm values.
"""
__author__ = "mail@michael.welte.de"
__copyright__ = "Copyright © 2025-2026 by Michael Welte. All rights reserved."


import math
import struct
from typing import Optional

import numpy as np

from .bpm_errors import FrameDecodeError

HR_FLAG_UINT16 = 0x01


def magnitude(x: Optional[float], y: Optional[float], z: Optional[float]) -> Optional[float]:
    """ Euclidean norm of one acceleration-including-gravity triple, None when an axis is missing. """
    if x is None or y is None or z is None:
        return None
    m = math.sqrt(x * x + y * y + z * z)
    return m if math.isfinite(m) else None


def magnitudes(xyz: np.ndarray) -> np.ndarray:
    """ Row-wise norm of an (n, 3) array of acceleration samples. """
    xyz = np.asarray(xyz, dtype=np.float64)
    if xyz.ndim != 2 or xyz.shape[1] != 3:
        raise ValueError(f"Expected an (n, 3) array, got shape {xyz.shape}.")
    return np.sqrt(np.sum(xyz * xyz, axis=1))


def decode_heart_rate_measurement(frame: bytes) -> int:
    """
        Decode the heart rate value of a heart-rate-measurement frame.
        Byte 0 holds the flags, bit 0 set means the value is uint16 little-endian
        in bytes 1-2, otherwise uint8 in byte 1. Trailing fields are ignored.
    """
    data = bytes(frame)
    if not data:
        raise FrameDecodeError("Empty heart rate frame.")
    flags = data[0]
    if flags & HR_FLAG_UINT16:
        if len(data) < 3:
            raise FrameDecodeError(f"Frame flags announce uint16 value but frame has {len(data)} bytes.")
        return struct.unpack_from("<H", data, 1)[0]
    if len(data) < 2:
        raise FrameDecodeError(f"Frame flags announce uint8 value but frame has {len(data)} bytes.")
    return data[1]


def encode_heart_rate_measurement(bpm: int, uint16: bool = False) -> bytes:
    """ Build a minimal heart-rate-measurement frame, used by simulators and tests. """
    if uint16:
        return struct.pack("<BH", HR_FLAG_UINT16, bpm)
    if not 0 <= bpm <= 0xFF:
        raise ValueError(f"Heart rate {bpm} does not fit an uint8 frame.")
    return struct.pack("<BB", 0x00, bpm)
