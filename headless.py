#!/usr/bin/env python3
"""
Headless Track Replay CLI

Replay a recorded track through the Kalman filter without any location
source attached.

Usage:
    python headless.py tracks/sample_walk.yaml                        # Default tuning
    python headless.py tracks/sample_walk.yaml --sensor-noise 50      # Smoother output
    python headless.py tracks/sample_walk.yaml --config configs/default.yaml

Examples:
    # Machine-readable output: timestamp,lat,lon,alt per line
    python headless.py tracks/sample_walk.yaml --quiet
"""

import argparse
import logging
import os
import sys

import yaml

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from geokalman.exceptions import GeoKalmanError
from geokalman.io import ConfigLoader, load_track
from geokalman.tracking import LocationSmoother


def main(argv=None):
    parser = argparse.ArgumentParser(description="Replay a recorded track through the filter")

    parser.add_argument("track", type=str, help="YAML track file")
    parser.add_argument("--config", type=str, default=None, help="YAML configuration file")
    parser.add_argument(
        "--sensor-noise",
        type=float,
        default=None,
        help="Sensor noise covariance (overrides config, default: 29)",
    )

    # Options
    parser.add_argument("--quiet", action="store_true", help="Machine-readable output only")
    parser.add_argument("--verbose", action="store_true", help="Log every filter cycle")

    args = parser.parse_args(argv)

    loader = ConfigLoader()
    try:
        if args.config:
            loader.load(args.config)
        log_level = "DEBUG" if args.verbose else loader.get_log_level()
        track = load_track(args.track)
        smoother = LocationSmoother(loader.get_config(), sensor_noise=args.sensor_noise)
    except (FileNotFoundError, yaml.YAMLError, GeoKalmanError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    logging.basicConfig(
        level=getattr(logging, log_level),
        format="%(levelname)s %(name)s: %(message)s",
        force=True,
    )

    if not args.quiet:
        print("=" * 60)
        print("geokalman Headless Replay")
        print("=" * 60)
        print(f"Track: {track.name}")
        print(f"Readings: {len(track)}")
        print(f"Duration: {track.duration_s:.1f} s")
        print(f"Sensor noise: {smoother.config.sensor_noise:g}")
        print(f"Acceleration sigma: {smoother.config.acceleration_noise_sigma:g}")
        print("=" * 60)

    try:
        corrected = smoother.handle_batch(track.readings)
    except GeoKalmanError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if args.quiet:
        for loc in corrected:
            print(f"{loc.timestamp:.3f},{loc.latitude:.7f},{loc.longitude:.7f},{loc.altitude:.2f}")
        return 0

    print(f"{'t [s]':>10}  {'raw lat':>11} {'raw lon':>11} {'raw alt':>8}  "
          f"{'lat':>11} {'lon':>11} {'alt':>8}")
    for raw, loc in zip(track.readings, corrected):
        print(
            f"{raw.timestamp:10.3f}  "
            f"{raw.latitude:11.6f} {raw.longitude:11.6f} {raw.altitude:8.2f}  "
            f"{loc.latitude:11.6f} {loc.longitude:11.6f} {loc.altitude:8.2f}"
        )
    print("=" * 60)

    return 0


if __name__ == "__main__":
    sys.exit(main())
