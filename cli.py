#!/usr/bin/env python
"""
Command-line interface for the Site Layout Planner

Usage:
    python cli.py generate --input site.geojson --output layout.json
    python cli.py summary --input layout.json
"""

import os
import sys
import json
import argparse
from dataclasses import replace
from datetime import datetime

from loguru import logger

from siteplan.config import HOUSE_TYPES, PlannerConfig
from siteplan.errors import SitePlanError
from siteplan.pipeline import SitePlanPipeline, load_geojson_inputs


def setup_logging(verbose: bool = False):
    """Configure logging"""
    logger.remove()
    level = "DEBUG" if verbose else "INFO"
    logger.add(
        sys.stderr,
        format="<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{message}</cyan>",
        level=level
    )


def build_config(args, input_crs=None) -> PlannerConfig:
    """Planner configuration from command-line overrides"""
    config = PlannerConfig()
    config = replace(
        config,
        road_strategy=args.road_strategy,
        placement_strategy=args.placement,
        alignment_mode="manual" if args.bearing is not None else args.alignment,
        manual_bearing=args.bearing,
        input_crs=args.crs or input_crs or config.input_crs,
    )
    config.road = replace(config.road, access_width_m=args.access_width, spine_width_m=args.spine_width)
    config.housing = replace(config.housing, house_type=args.house_type)
    return config


def cmd_generate(args):
    """Generate a site layout from a GeoJSON input file"""
    setup_logging(args.verbose)

    if not os.path.exists(args.input):
        logger.error(f"Input file not found: {args.input}")
        return 1

    try:
        inputs = load_geojson_inputs(args.input)
        config = build_config(args, inputs["crs"])
        output_path = args.output or os.path.join(
            config.output_dir, f"layout_{datetime.now().strftime('%Y%m%d_%H%M%S')}.json"
        )
        pipeline = SitePlanPipeline(config)

        result = pipeline.run(
            inputs["boundary"],
            access_path=inputs["access_path"],
            exclusions=inputs["exclusions"]
        )
        report = pipeline.to_report(result, plan_id=args.plan_id)
        pipeline.save(report, output_path)

        stats = report.statistics
        logger.info(f"✓ Generated: {output_path}")
        logger.info(f"  Plan ID: {report.plan_id}")
        logger.info(f"  Site Area: {stats.site_area_sqm} sqm ({stats.site_area_ha} ha)")
        logger.info(f"  Buildable Area: {stats.buildable_area_sqm} sqm")
        logger.info(f"  Homes: {stats.home_count} ({stats.density_per_ha} per ha)")

        if args.summary:
            print(json.dumps(_summary(report.model_dump()), indent=2))

        return 0

    except (SitePlanError, ValueError, OSError) as e:
        logger.error(f"Failed to generate layout: {e}")
        return 1


def cmd_summary(args):
    """Print statistics of a saved layout.json"""
    setup_logging(args.verbose)

    if not os.path.exists(args.input):
        logger.error(f"Input file not found: {args.input}")
        return 1

    try:
        with open(args.input, "r", encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        logger.error(f"Could not read {args.input}: {e}")
        return 1

    if "statistics" not in data:
        logger.error(f"{args.input} is not a site layout file")
        return 1

    print(json.dumps(_summary(data), indent=2))
    return 0


def _summary(data):
    stats = data["statistics"]
    return {
        "plan_id": data.get("plan_id"),
        "road_strategy": data.get("road_strategy"),
        "placement_strategy": data.get("placement_strategy"),
        "roads": len(data.get("roads", [])),
        "homes": stats["home_count"],
        "homes_by_type": stats.get("homes_by_type", {}),
        "site_area_ha": stats["site_area_ha"],
        "buildable_area_sqm": stats["buildable_area_sqm"],
        "density_per_ha": stats["density_per_ha"],
        "net_density_per_ha": stats.get("net_density_per_ha"),
        "road_coverage_percent": stats.get("road_coverage_percent"),
    }


def main(argv=None):
    parser = argparse.ArgumentParser(
        description="Site Layout Planner CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  Generate a layout from a drawn site:
    python cli.py generate --input site.geojson --output layout.json

  Dual spine roads with a grid of medium houses:
    python cli.py generate -i site.geojson --road-strategy dual --placement grid --house-type medium

  Summarise a saved layout:
    python cli.py summary --input layout.json
        """
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Verbose output")

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # Generate command
    defaults = PlannerConfig()
    gen_parser = subparsers.add_parser("generate", help="Generate a layout from a GeoJSON site file")
    gen_parser.add_argument("--input", "-i", required=True, help="GeoJSON FeatureCollection (boundary, access, exclusions)")
    gen_parser.add_argument("--output", "-o", help="Output JSON file (default: output/layout_<timestamp>.json)")
    gen_parser.add_argument("--crs", help="Input CRS, e.g. EPSG:4326 (default: local metres)")
    gen_parser.add_argument("--road-strategy", choices=["junction", "dual"], default=defaults.road_strategy,
                            help="Road planner")
    gen_parser.add_argument("--placement", choices=["spine", "grid"], default=defaults.placement_strategy,
                            help="Housing placement strategy")
    gen_parser.add_argument("--alignment", choices=["nearest", "longest"], default=defaults.alignment_mode,
                            help="Grid alignment edge")
    gen_parser.add_argument("--bearing", type=float, help="Manual grid bearing in degrees")
    gen_parser.add_argument("--house-type", choices=sorted(HOUSE_TYPES), default=defaults.housing.house_type,
                            help="House footprint preset")
    gen_parser.add_argument("--access-width", type=float, default=defaults.road.access_width_m,
                            help="Access road width in meters")
    gen_parser.add_argument("--spine-width", type=float, default=defaults.road.spine_width_m,
                            help="Spine road width in meters")
    gen_parser.add_argument("--plan-id", help="Custom plan ID")
    gen_parser.add_argument("--summary", "-s", action="store_true", help="Print summary to stdout")
    gen_parser.set_defaults(func=cmd_generate)

    # Summary command
    sum_parser = subparsers.add_parser("summary", help="Summarise a layout.json file")
    sum_parser.add_argument("--input", "-i", required=True, help="Layout JSON file")
    sum_parser.set_defaults(func=cmd_summary)

    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
