"""
Rainwater Harvesting Advisor - command line report.

Example:
    python main.py --location "Guntur" --roof-area 150 --dwellers 4 --space 25
"""

import sys
import json
import argparse
from dataclasses import replace

from core.config import EngineSettings, configure_logging
from core.models import Coordinates, InvalidInputError
from core.sensitivity import WhatIfSimulator, to_dataframe
from loaders.site import PropertyDetails, SiteDataFetcher


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Rooftop rainwater harvesting feasibility report")
    parser.add_argument("--location", required=True, help="Address, town or district")
    parser.add_argument("--roof-area", type=float, required=True, help="Roof area in m²")
    parser.add_argument("--dwellers", type=int, required=True, help="Number of people in the household")
    parser.add_argument("--space", type=float, required=True, help="Open space available for a structure, m²")
    parser.add_argument("--roof-type", default="concrete",
                        help="concrete, tiles, metal, asbestos or green")
    parser.add_argument("--soil", default=None, help="Soil type, e.g. 'sandy loam' (default: loam)")
    parser.add_argument("--lat", type=float, help="Latitude (skips geocoding together with --lng)")
    parser.add_argument("--lng", type=float, help="Longitude")
    parser.add_argument("--budget", type=float, help="Spending limit, flags what-if scenarios")
    parser.add_argument("--seed", type=int, help="Seed the estimators' random source")
    parser.add_argument("--no-jitter", action="store_true", help="Disable random variation in estimates")
    parser.add_argument("--json", action="store_true", help="Print the report as JSON")
    parser.add_argument("--what-if", action="store_true", help="Also run the what-if scenarios")
    return parser


def print_report(report):
    rec = report.recommendation
    specs = report.structure
    benefit = report.cost_benefit

    print(f"\n=== RAINWATER HARVESTING REPORT: {report.site.location} ===\n")
    print(f"Feasibility: {rec.feasibility_score}/100 ({rec.feasibility_label}) "
          f"- {rec.feasibility_description}")
    print(f"Confidence:  {rec.confidence}%")

    print("\nScores:")
    for name, value in rec.score_breakdown.to_dict().items():
        print(f"  {name.replace('_', ' '):<24} {value:6.2f}")

    print(f"\nRecommended system: {specs.type}")
    print(f"  Alternatives: {', '.join(a.value for a in rec.alternative_options)}")
    print("  Why:")
    for line in rec.reasoning:
        print(f"   - {line}")

    dims = specs.dimensions
    print(f"\nCapacity:     {specs.capacity:,} L")
    print(f"Dimensions:   {dims.length} x {dims.width} x {dims.height} m"
          + (f" (diameter {dims.diameter} m)" if dims.diameter is not None else ""))
    print(f"Materials:    {', '.join(specs.materials)}")
    print(f"Cost:         ₹{specs.estimated_cost:,} (maintenance ₹{specs.maintenance_cost:,}/yr)")
    print(f"Installation: {specs.installation_time} days")

    payback = f"{benefit.payback_years} years" if benefit.pays_back else "never"
    print(f"\nNet savings:  ₹{benefit.net_annual_savings:,}/yr, payback {payback}, ROI {benefit.roi_percent}%")
    print(f"CO₂ avoided:  {benefit.co2_saved_kg:,.0f} kg/yr")

    if report.rainfall is not None:
        print(f"\nRainfall:     {report.rainfall.annual_rainfall_mm:g} mm/yr "
              f"({report.rainfall.source}, reliability {report.rainfall.reliability:.0%})")
    if report.groundwater is not None:
        gw = report.groundwater
        print(f"Groundwater:  {gw.depth_m} m, {gw.aquifer_type}, {gw.quality}")


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    settings = EngineSettings.from_env()
    if args.seed is not None:
        settings = replace(settings, random_seed=args.seed)
    if args.no_jitter:
        settings = replace(settings, jitter_enabled=False)
    configure_logging(settings.log_level)

    coords = None
    if args.lat is not None and args.lng is not None:
        coords = Coordinates(args.lat, args.lng)

    details = PropertyDetails(
        location=args.location,
        roof_area_m2=args.roof_area,
        num_dwellers=args.dwellers,
        available_space_m2=args.space,
        roof_type=args.roof_type,
        soil_type=args.soil,
        coordinates=coords,
        budget=args.budget,
    )

    try:
        report = SiteDataFetcher(settings=settings).assess(details)
    except InvalidInputError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 2

    scenarios = None
    if args.what_if:
        simulator = WhatIfSimulator(tariff=settings.water_tariff_per_liter)
        scenarios = simulator.run(report.site, budget=args.budget)

    if args.json:
        payload = report.to_dict()
        if scenarios is not None:
            payload["what_if"] = [s.to_dict() for s in scenarios]
        print(json.dumps(payload, indent=2, default=str))
        return 0

    print_report(report)
    if scenarios is not None:
        print("\n=== WHAT-IF SCENARIOS ===\n")
        print(to_dataframe(scenarios).to_string(index=False))
    return 0


if __name__ == "__main__":
    sys.exit(main())
