#!/usr/bin/env python3
"""
Run a GeoCalc calculation from a shell

Builds the same event the Lambda receives and prints the response body.

Usage:
    python -m geocalc.cli --type person --person-id 1
    python -m geocalc.cli --type person_venue --person-id 1 --venue-id1 2
    python -m geocalc.cli --body '{"type": "venue_venue", "venueId1": 2, "venueId2": 3}'
"""

import argparse
import json
import sys

from geocalc.handler import lambda_handler, shutdown


def build_event(args: argparse.Namespace) -> dict:
    if args.body:
        return {"body": args.body}
    payload = {"type": args.type}
    if args.person_id is not None:
        payload["personId"] = args.person_id
    if args.venue_id1 is not None:
        payload["venueId1"] = args.venue_id1
    if args.venue_id2 is not None:
        payload["venueId2"] = args.venue_id2
    return {"body": json.dumps(payload)}


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Geocode persons/venues and compute driving distances")
    parser.add_argument("--type", choices=["person", "venue", "person_venue", "venue_venue"])
    parser.add_argument("--person-id", type=int)
    parser.add_argument("--venue-id1", type=int)
    parser.add_argument("--venue-id2", type=int)
    parser.add_argument("--body", help="Raw JSON payload (overrides the other options)")
    args = parser.parse_args(argv)

    if not args.body and not args.type:
        parser.error("either --type or --body is required")

    try:
        response = lambda_handler(build_event(args), None)
    finally:
        shutdown()

    print(json.dumps(json.loads(response["body"]), indent=2))
    return 0 if response["statusCode"] == 200 else 1


if __name__ == "__main__":
    sys.exit(main())
