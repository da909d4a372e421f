#!/usr/bin/env python
"""
Command-line interface for the Roof Estimator

Usage:
    python cli.py generate --lat 39.7392 --lng -104.9903 --size 2200 --output roof.json
    python cli.py estimate --input polygon.json --fallback-size 2200
    python cli.py batch --input locations.csv --output ./roofs/
    python cli.py debug --input polygon.json --expected-size 4180
"""

import os
import sys
import json
import csv
import argparse
from datetime import datetime

from loguru import logger

from roof_estimator import generate_polygon, estimate_area
from roof_estimator.config import get_config, validate_config
from roof_estimator.diagnostics import describe_polygon, to_geojson
from roof_estimator.estimation import roof_area_from_pitch
from roof_estimator.models import PropertyData


def setup_logging(verbose: bool = False):
    """Configure logging"""
    logger.remove()
    level = "DEBUG" if verbose else "INFO"
    logger.add(
        sys.stderr,
        format="<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{message}</cyan>",
        level=level
    )


def property_data_from_args(args):
    """Build PropertyData from CLI flags, or None if no flag was given"""
    fields = {
        "property_type": getattr(args, "property_type", None),
        "building_size": getattr(args, "building_size", None),
        "stories": getattr(args, "stories", None),
        "roof_type": getattr(args, "roof_type", None),
        "roof_pitch": getattr(args, "roof_pitch", None),
    }
    if all(value is None for value in fields.values()):
        return None
    return PropertyData(**fields)


def build_measurement(lat, lng, size, property_data=None):
    """Polygon + area payload written by generate and batch"""
    points = generate_polygon(lat, lng, size, property_data)
    area = estimate_area(points, property_data, size)

    return {
        "location": {"lat": lat, "lng": lng},
        "size_sqft": size,
        "property_data": property_data.model_dump(exclude_none=True) if property_data else None,
        "polygon": [p.model_dump() for p in points],
        "geojson": to_geojson(points).model_dump(),
        "area_sqft": area,
        "generated_at": datetime.now().isoformat(),
    }


def save_json(payload, output_path):
    os.makedirs(os.path.dirname(output_path) or ".", exist_ok=True)
    with open(output_path, "w", encoding="utf-8") as f:
        json.dump(payload, f, indent=2, ensure_ascii=False)
    logger.info(f"Saved to {output_path}")


def load_polygon(path):
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)
    # Accept either a bare point list or a payload written by `generate`
    if isinstance(data, dict):
        data = data.get("polygon")
    return data


def cmd_generate(args):
    """Generate a roof polygon and area for a single location"""
    setup_logging(args.verbose)

    logger.info(f"Generating roof polygon for ({args.lat}, {args.lng}), {args.size} sqft")
    output_path = args.output or f"roof_{datetime.now().strftime('%Y%m%d_%H%M%S')}.json"

    try:
        property_data = property_data_from_args(args)
        payload = build_measurement(args.lat, args.lng, args.size, property_data)
        save_json(payload, output_path)

        logger.info(f"✓ Generated: {output_path}")
        logger.info(f"  Vertices: {len(payload['polygon'])}")
        logger.info(f"  Roof area: {payload['area_sqft']} sqft")

        if args.summary:
            summary = {
                "vertices": len(payload["polygon"]),
                "area_sqft": payload["area_sqft"],
            }
            print(json.dumps(summary, indent=2))

        return 0

    except Exception as e:
        logger.error(f"Failed to generate polygon: {e}")
        if args.verbose:
            import traceback
            traceback.print_exc()
        return 1


def cmd_estimate(args):
    """Estimate roof area for a polygon stored in a JSON file"""
    setup_logging(args.verbose)

    if not os.path.exists(args.input):
        logger.error(f"Input file not found: {args.input}")
        return 1

    try:
        polygon = load_polygon(args.input)
    except (OSError, json.JSONDecodeError) as e:
        logger.error(f"Could not read polygon: {e}")
        return 1

    property_data = property_data_from_args(args)
    area = estimate_area(polygon, property_data, args.fallback_size)

    result = {"area_sqft": area}
    pitch_area = roof_area_from_pitch(property_data)
    if pitch_area is not None:
        result["pitch_based_area_sqft"] = pitch_area

    print(json.dumps(result, indent=2))
    return 0


def cmd_batch(args):
    """Generate roof polygons for multiple locations from CSV"""
    setup_logging(args.verbose)

    if not os.path.exists(args.input):
        logger.error(f"Input file not found: {args.input}")
        return 1

    # Read locations from CSV
    locations = []
    with open(args.input, "r", newline="", encoding="utf-8") as f:
        reader = csv.DictReader(f)
        for row in reader:
            try:
                locations.append({
                    "name": row.get("name", ""),
                    "lat": float(row["lat"]),
                    "lng": float(row["lng"]),
                    "size": float(row["size"]),
                    "property_data": _row_property_data(row),
                })
            except (KeyError, ValueError, TypeError) as e:
                logger.warning(f"Skipping invalid row: {e}")

    if not locations:
        logger.error("No valid locations found in CSV")
        return 1

    logger.info(f"Processing {len(locations)} locations...")
    os.makedirs(args.output, exist_ok=True)

    success = 0
    failed = 0

    for i, loc in enumerate(locations, 1):
        name = loc.get("name") or f"roof_{i:03d}"
        logger.info(f"[{i}/{len(locations)}] {name}: ({loc['lat']}, {loc['lng']})")

        try:
            payload = build_measurement(loc["lat"], loc["lng"], loc["size"], loc["property_data"])

            filename = f"{name.replace(' ', '_').lower()}.json"
            save_json(payload, os.path.join(args.output, filename))

            logger.info(f"  ✓ {filename} ({payload['area_sqft']} sqft)")
            success += 1

        except Exception as e:
            logger.error(f"  ✗ Failed: {e}")
            failed += 1

    logger.info(f"Complete: {success} succeeded, {failed} failed")
    return 0 if failed == 0 else 1


def _row_property_data(row):
    fields = {
        "property_type": row.get("property_type") or None,
        "building_size": row.get("building_size") or None,
        "stories": row.get("stories") or None,
        "roof_type": row.get("roof_type") or None,
        "roof_pitch": row.get("roof_pitch") or None,
    }
    if all(value is None for value in fields.values()):
        return None
    # pydantic coerces the numeric strings; a ValidationError is a ValueError
    return PropertyData(**fields)


def cmd_debug(args):
    """Print a measurement report for a polygon JSON file"""
    setup_logging(args.verbose)

    if not os.path.exists(args.input):
        logger.error(f"Input file not found: {args.input}")
        return 1

    try:
        polygon = load_polygon(args.input)
        report = describe_polygon(polygon, args.expected_size)
    except Exception as e:
        logger.error(f"Could not describe polygon: {e}")
        return 1

    print(json.dumps(report.model_dump(), indent=2))
    if not report.is_simple:
        logger.warning("Polygon is degenerate or self-intersecting")
    return 0


def add_property_arguments(parser):
    parser.add_argument("--property-type", help="Property type, e.g. 'single-family', 'commercial'")
    parser.add_argument("--building-size", type=float, help="Building size from property records (sqft)")
    parser.add_argument("--stories", type=int, help="Number of stories")
    parser.add_argument("--roof-type", help="Roof type: flat, gable, hip, mansard, gambrel, shed")
    parser.add_argument("--roof-pitch", help="Pitch category: flat, low, moderate, steep")


def main(argv=None):
    validate_config(get_config())

    parser = argparse.ArgumentParser(
        description="Roof Estimator CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  Generate a roof polygon:
    python cli.py generate --lat 39.7392 --lng -104.9903 --size 2200 --output roof.json

  Estimate area of a drawn polygon:
    python cli.py estimate --input polygon.json --fallback-size 2200

  Batch generate from CSV:
    python cli.py batch --input locations.csv --output ./roofs/

  Debug a polygon:
    python cli.py debug --input polygon.json --expected-size 4180
        """
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Verbose output")

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # Generate command
    gen_parser = subparsers.add_parser("generate", help="Generate a roof polygon for a location")
    gen_parser.add_argument("--lat", type=float, required=True, help="Latitude")
    gen_parser.add_argument("--lng", type=float, required=True, help="Longitude")
    gen_parser.add_argument("--size", type=float, required=True, help="Roof size in sqft")
    gen_parser.add_argument("--output", "-o", help="Output JSON file")
    gen_parser.add_argument("--summary", "-s", action="store_true", help="Print summary to stdout")
    add_property_arguments(gen_parser)
    gen_parser.set_defaults(func=cmd_generate)

    # Estimate command
    est_parser = subparsers.add_parser("estimate", help="Estimate roof area of a polygon")
    est_parser.add_argument("--input", "-i", required=True, help="Polygon JSON file ([{lat, lng}, ...])")
    est_parser.add_argument("--fallback-size", type=float, help="Area to report if the polygon is unusable")
    add_property_arguments(est_parser)
    est_parser.set_defaults(func=cmd_estimate)

    # Batch command
    batch_parser = subparsers.add_parser("batch", help="Batch generate from CSV file")
    batch_parser.add_argument(
        "--input", "-i", required=True,
        help="Input CSV file (columns: name,lat,lng,size[,property_type,building_size,stories,roof_type,roof_pitch])"
    )
    batch_parser.add_argument("--output", "-o", default=get_config().output_dir, help="Output directory")
    batch_parser.set_defaults(func=cmd_batch)

    # Debug command
    debug_parser = subparsers.add_parser("debug", help="Print a measurement report for a polygon")
    debug_parser.add_argument("--input", "-i", required=True, help="Polygon JSON file")
    debug_parser.add_argument("--expected-size", type=float, help="Expected size in sqft")
    debug_parser.set_defaults(func=cmd_debug)

    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
