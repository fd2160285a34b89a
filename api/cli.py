#!/usr/bin/env python3
"""
ROB Planner CLI Tool.

Command-line interface for offline planning and data checks:
- Route fuel balance from a JSON route file
- Historical workbook inspection
- Model curve table
- Health check of a running API

Usage:
    python -m api.cli compute route.json
    python -m api.cli historical data/user_data.xlsx --sheet data
    python -m api.cli model-curve
    python -m api.cli check-health
"""
import argparse
import json
import sys
from pathlib import Path
from typing import List, Optional

from src.config import settings as core_settings
from src.fuel.consumption_model import model_curve
from src.fuel.route_fuel import RouteSegment, compute_route, parse_or_zero


def compute(route_file: str) -> None:
    """Print the per-segment fuel table for a route file."""
    path = Path(route_file)
    try:
        data = json.loads(path.read_text())
    except FileNotFoundError:
        print(f"\nError: Route file not found: {path}")
        sys.exit(1)
    except json.JSONDecodeError as e:
        print(f"\nError: Invalid JSON in {path}: {e}")
        sys.exit(1)

    if not isinstance(data, dict):
        print(f"\nError: {path} must contain a JSON object with 'segments'.")
        sys.exit(1)

    raw_segments = data.get("segments") or []
    if not isinstance(raw_segments, list) or not raw_segments:
        print("\nError: Route file has no segments.")
        sys.exit(1)
    for i, s in enumerate(raw_segments):
        if not isinstance(s, dict):
            print(f"\nError: Segment {i + 1} must be a JSON object.")
            sys.exit(1)

    segments = [
        RouteSegment.from_raw(
            distance_nm=s.get("distance_nm"),
            rpm=s.get("rpm"),
            weather_factor=s.get("weather_factor"),
            time_h=s.get("time_h"),
            speed_kn=s.get("speed_kn"),
        )
        for s in raw_segments
    ]
    result = compute_route(segments, parse_or_zero(data.get("fuel_start_mt")))

    print("\n" + "=" * 60)
    print("ROUTE FUEL BALANCE")
    print("=" * 60)
    print(f"HFO Start: {result.start_mt:.3f} mt")
    print(f"{'Segment':<10} {'Time (h)':<12} {'Rate (mt/h)':<14} {'HFO Cons.':<12} {'ROB':<12}")
    print("-" * 60)
    for row, segment in zip(result.to_table(), result.segments):
        print(
            f"{row['segment']:<10} "
            f"{segment.time_h:<12.2f} "
            f"{segment.consumption_rate:<14.4f} "
            f"{row['consumption_mt']:<12.3f} "
            f"{row['rob_mt']:<12.3f}"
        )
    print("=" * 60)
    print(f"Total: {result.total_consumption_mt:.3f} mt, final ROB {result.final_rob_mt:.3f} mt")
    if result.warning:
        print(f"\nWARNING: {result.warning_message}")
    if result.fuel_exhausted:
        print("\nWARNING: Fuel runs out before the end of the route.")
    print()


def historical(excel_file: str, sheet_name: Optional[str] = None) -> None:
    """Parse a historical workbook and print its summary."""
    from src.database.historical_parser import HistoricalDataError, HistoricalDataParser
    from src.fuel.historical import compare_with_model

    try:
        parser = HistoricalDataParser(
            Path(excel_file),
            rpm_column=core_settings.historical_rpm_column,
            consumption_column=core_settings.historical_consumption_column,
        )
        points = parser.parse(sheet_name=sheet_name or core_settings.historical_sheet)
    except (FileNotFoundError, HistoricalDataError) as e:
        print(f"\nError: {e}")
        sys.exit(1)

    stats = parser.get_statistics()
    print(f"\nImported: {stats['total_points']} point(s), skipped {stats['skipped_rows']} row(s)")
    if not points:
        return

    print(f"RPM range: {stats['rpm_range']['min']:.1f} - {stats['rpm_range']['max']:.1f}")
    print(
        f"Consumption range: {stats['consumption_range']['min']:.3f} - "
        f"{stats['consumption_range']['max']:.3f} mt/h"
    )
    try:
        comparison = compare_with_model(points)
    except ValueError as e:
        print(f"Model comparison unavailable: {e}")
        return
    print(f"Mean residual vs model: {comparison.mean_residual:+.4f} mt/h")
    print(f"Implied weather factor: {comparison.implied_weather_factor:.3f}\n")


def print_model_curve() -> None:
    """Print the reference consumption curve."""
    print(f"\n{'RPM':<8} {'Consumption (mt/h)':<20}")
    print("-" * 28)
    for point in model_curve(core_settings.model_curve_min_rpm, core_settings.model_curve_max_rpm):
        print(f"{point.rpm:<8.0f} {point.consumption_rate:<20.4f}")
    print()


def check_health(url: str = "http://localhost:8000/api/health") -> None:
    """Check API health."""
    import requests

    try:
        response = requests.get(url, timeout=5)
        if response.status_code == 200:
            data = response.json()
            print(f"\nAPI Status: {data.get('status', 'unknown')}")
            print(f"Version: {data.get('version', 'unknown')}")
            print(f"Timestamp: {data.get('timestamp', 'unknown')}")
        else:
            print(f"\nAPI returned status code: {response.status_code}")
            sys.exit(1)
    except requests.exceptions.ConnectionError:
        print("\nError: Could not connect to API. Is the server running?")
        sys.exit(1)


def main(argv: Optional[List[str]] = None):
    parser = argparse.ArgumentParser(
        description="ROB Planner CLI Tool",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  Compute a route fuel balance:
    python -m api.cli compute route.json

  Route file format:
    {"fuel_start_mt": 50,
     "segments": [{"distance_nm": 100, "rpm": 80, "weather_factor": 1.0, "speed_kn": 10}]}

  Inspect a historical workbook:
    python -m api.cli historical data/user_data.xlsx --sheet data

  Print the model curve:
    python -m api.cli model-curve

  Check API health:
    python -m api.cli check-health
        """
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # compute
    compute_parser = subparsers.add_parser("compute", help="Compute route fuel balance")
    compute_parser.add_argument("route_file", help="JSON file with segments and fuel_start_mt")

    # historical
    historical_parser = subparsers.add_parser("historical", help="Inspect a historical workbook")
    historical_parser.add_argument("excel_file", help="Excel workbook path")
    historical_parser.add_argument("--sheet", help="Sheet name (default: data)")

    # model-curve
    subparsers.add_parser("model-curve", help="Print the reference consumption curve")

    # check-health
    health_parser = subparsers.add_parser("check-health", help="Check API health")
    health_parser.add_argument(
        "--url",
        default="http://localhost:8000/api/health",
        help="Health endpoint URL",
    )

    args = parser.parse_args(argv)
    core_settings.configure_logging()

    if args.command == "compute":
        compute(args.route_file)
    elif args.command == "historical":
        historical(args.excel_file, args.sheet)
    elif args.command == "model-curve":
        print_model_curve()
    elif args.command == "check-health":
        check_health(args.url)
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
