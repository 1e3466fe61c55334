#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
    STRIDEBEAT
    Main entry point: simulated walking session with a live control signal panel
"""
__author__ = "mail@michael.welte.de"
__copyright__ = "Copyright © 2025-2026 by Michael Welte. All rights reserved."


import argparse
import threading
import time
from datetime import datetime
from typing import List, Optional, Tuple

from rich.console import Console
from rich.live import Live
from rich.panel import Panel
from rich.table import Table

from stridebeat import cfg, custom_logger as clog
from stridebeat.config import SignalSettings
from stridebeat.modules.bpm_clock_generator import start_clock
from stridebeat.modules.bpm_control_signal import ControlSignal
from stridebeat.modules.bpm_session import Session
from stridebeat.modules.bpm_state import SignalState
from stridebeat.modules.bpm_step_detector import Sample
from stridebeat.utils.bpm_simulator import WalkProfile, heart_rate_ramp, walking_samples

METER_WIDTH = 40


def motion_thread(session: Session, profile: WalkProfile, duration_s: float, speed: float, stop: threading.Event):
    period = 1.0 / (profile.sample_rate_hz * speed)
    for m, ts in walking_samples(profile, duration_s):
        if stop.is_set():
            return
        session.on_sample(Sample(magnitude=m, timestamp=ts))
        time.sleep(period)


def heart_rate_thread(session: Session, frames: List[Tuple[int, bytes]], speed: float, stop: threading.Event):
    last_ts = 0
    for ts, frame in frames:
        if stop.wait((ts - last_ts) / 1000.0 / speed):
            return
        last_ts = ts
        session.on_heart_rate_frame(frame, received_at=ts)


def make_meter(value: float, width: int) -> str:
    v = max(0.0, min(1.0, value))
    filled = int(round(v * width))
    return "█" * filled + "░" * (width - filled)


def build_panel(signal: Optional[ControlSignal], ticks: int, session: Session) -> Panel:
    tbl = Table.grid(padding=(0, 1))
    tbl.add_column(justify="right", width=12)
    tbl.add_column()

    if signal is None:
        tbl.add_row("STATUS", "waiting for first tick")
    else:
        hr_txt = f"{signal.heart_rate} bpm" if signal.has_heart_rate else "[yellow]no heart rate input yet[/yellow]"
        tbl.add_row("TEMPO", f"[bold]{signal.tempo_bpm:6.1f}[/bold] BPM  ({signal.tempo_source}, ramp {signal.ramp_seconds:.1f}s)")
        tbl.add_row("HEART", hr_txt)
        tbl.add_row("INTENSITY", make_meter(signal.intensity, METER_WIDTH) + f"  {signal.intensity:0.2f}")
        tbl.add_row("TIMBRE", f"{signal.timbre_class.value} ({signal.waveform})")
        tbl.add_row("BRIGHTNESS", f"{signal.brightness_hz:7.0f} Hz")
    tbl.add_row("STEPS", f"{session.steps}   skipped samples: {session.skipped_samples}   skipped frames: {session.skipped_frames}")
    tbl.add_row("TICKS", str(ticks))

    return Panel(tbl, title="StrideBeat (cadence + heart rate control)", border_style="cyan")


def parse_args(argv=None) -> argparse.Namespace:
    defaults = SignalSettings()
    parser = argparse.ArgumentParser(description="Simulated StrideBeat session (no sensors or audio needed)")
    parser.add_argument("--duration", type=float, default=30.0, help="Simulated session length in seconds (default: 30)")
    parser.add_argument("--speed", type=float, default=1.0, help="Playback speed factor (default: 1.0)")
    parser.add_argument("--spm", type=float, default=110.0, help="Simulated walking cadence (default: 110)")
    parser.add_argument("--hr-start", type=int, default=72, help="Heart rate at session start (default: 72)")
    parser.add_argument("--hr-end", type=int, default=145, help="Heart rate at session end (default: 145)")
    parser.add_argument("--tick-ms", type=int, default=defaults.tick_interval_ms,
                        help=f"Control signal tick interval in ms (default: {defaults.tick_interval_ms})")
    parser.add_argument("--threshold", type=float, default=defaults.step_threshold,
                        help=f"Step threshold in m/s^2 (default: {defaults.step_threshold})")
    parser.add_argument("--seed", type=int, default=None, help="Random seed for sensor noise")
    return parser.parse_args(argv)


# Main
def main(argv=None):
    args = parse_args(argv)
    clog.setLevel(cfg.LOG_LEVEL)
    started = datetime.now(cfg.TIME_ZONE).strftime(cfg.DATE_TIME_FORMAT)
    clog.info(f"Starting '{cfg.APP_NAME}' on '{cfg.RUN_ENV_INFO}' in '{cfg.APP_ENV}' mode at {started} with log-level set to '{clog.getLevel()}'.")

    session = Session(SignalSettings(step_threshold=args.threshold, tick_interval_ms=args.tick_ms))
    state = SignalState()
    stop = threading.Event()

    profile = WalkProfile(spm=args.spm, seed=args.seed)
    frames = heart_rate_ramp(args.hr_start, args.hr_end, args.duration)
    feeders = [
        threading.Thread(target=motion_thread, args=(session, profile, args.duration, args.speed, stop), daemon=True),
        threading.Thread(target=heart_rate_thread, args=(session, frames, args.speed, stop), daemon=True),
    ]
    stop_clock = start_clock(session.tick, state, interval_ms=session.settings.tick_interval_ms)
    for t in feeders:
        t.start()

    console = Console()
    try:
        with Live(console=console, refresh_per_second=8) as live:
            while any(t.is_alive() for t in feeders):
                signal, ticks = state.get()
                live.update(build_panel(signal, ticks, session))
                time.sleep(0.1)
    except KeyboardInterrupt:
        clog.info("Interrupted by user.")
    finally:
        stop.set()
        stop_clock()

    signal, ticks = state.get()
    if signal is not None:
        console.print(signal.label)
    clog.info(f"Session finished: {session.steps} steps, {ticks} ticks.")
    session.reset()


if __name__ == "__main__":
    main()
