import argparse
import csv
import logging
import os
import time
from typing import Dict, List

from dispatch.dispatcher import Dispatcher
from dispatch.route_plan import RoutePlanError
from routing.config import RoutingConfig
from routing.optimizer import RouteOptimizer
from triage.scorer import get_triage_category

def load_requests(filepath="mock_requests_generated.csv") -> List[Dict[str, str]]:
    # Resolve the correct path depending on where the user runs the script from.
    base_dir = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
    absolute_path = filepath if os.path.isabs(filepath) else os.path.join(base_dir, filepath)

    with open(absolute_path, 'r') as file:
        reader = csv.DictReader(file)
        # empty CSV cells mean "not set"
        return [{key: (value or None) for key, value in row.items()} for row in reader]

def run_simulation(filepath, start_lat, start_lng, method, max_stops, volunteer_id="volunteer-1"):
    print("=== STARTING END-TO-END ROUTE SIMULATION ===")

    # 1. Load Data
    records = load_requests(filepath)
    print(f"Loaded {len(records)} requests.\n")

    # 2. Configure System (.env keys are optional, missing ones fall back to nearest neighbor)
    optimizer = RouteOptimizer(config=RoutingConfig.from_env())
    dispatcher = Dispatcher(optimizer=optimizer)

    # 3. Triage: pick the top requests for this run
    from dispatch.candidate_filter import build_candidate_requests

    candidates = build_candidate_requests(records, volunteer_id)
    selected = candidates[:max_stops]

    print("--- Top Triage Candidates ---")
    for candidate in selected:
        print(f"  {candidate.id} | {candidate.request.priority or '-':<6} | {candidate.request.aid_type or '-':<14} "
              f"| score {candidate.triage_score:>5.2f} ({get_triage_category(candidate.triage_score).value})")

    # 4. Route the selection
    start_time = time.time()
    try:
        result = dispatcher.plan_route(
            records,
            volunteer_id,
            {"lat": start_lat, "lng": start_lng},
            method,
            request_ids=[candidate.id for candidate in selected],
        )
    except RoutePlanError as error:
        print(f"[FAILED] {error}")
        return

    print(f"\nRoute built via '{result.route.method}' in {time.time() - start_time:.2f}s.")
    for update, stop in zip(result.assignments, result.route.requests):
        leg = f"{stop.distance_from_previous:.2f} km" if stop.distance_from_previous is not None else "n/a"
        print(f"  #{update.route_order:<3} {stop.id} ({stop.request.location}) leg {leg}")

    print("\n=== SIMULATION COMPLETE ===")
    print(f"Total distance: {result.route.distance:.1f} km")
    print(f"Estimated duration: {result.route.duration / 60:.0f} min")

if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Triage + route a batch of mock relief requests.")
    parser.add_argument("--file", default="mock_requests_generated.csv")
    parser.add_argument("--lat", type=float, default=37.7749)
    parser.add_argument("--lng", type=float, default=-122.4194)
    parser.add_argument("--method", default="nearest", choices=["nearest", "openrouteservice", "googlemaps"])
    parser.add_argument("--max-stops", type=int, default=10)
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    run_simulation(args.file, args.lat, args.lng, args.method, args.max_stops)
