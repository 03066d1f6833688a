#!/usr/bin/env python3
"""
FaultLens Demo — run the dashboard's three operations against a live API.

Posts the dashboard's seed events and a synthetic 60-record batch to:
1. anomaly_explanation
2. anomaly_realtime_stream
3. anomaly_rootcause

Requires: API running (uvicorn faultlens.main:app)
Usage:
    python scripts/demo_run.py
    python scripts/demo_run.py --api-url http://localhost:8000 --seed 7
"""

import argparse
import sys
from pathlib import Path

import httpx

sys.path.insert(0, str(Path(__file__).parent.parent))

from faultlens.engine.sample_data import demo_events, synthetic_batch  # noqa: E402


def main():
    parser = argparse.ArgumentParser(description="Run the FaultLens demo against a running API")
    parser.add_argument("--api-url", default="http://localhost:8000", help="API base URL")
    parser.add_argument("--batch-size", type=int, default=60, help="Synthetic batch size")
    parser.add_argument("--seed", type=int, default=None, help="Seed for the synthetic batch")
    args = parser.parse_args()

    events = demo_events()
    batch = synthetic_batch(args.batch_size, seed=args.seed)
    base = f"{args.api_url.rstrip('/')}/api/v1"

    print("\n" + "=" * 60)
    print("FaultLens Demo")
    print("=" * 60)

    with httpx.Client(timeout=30) as client:
        try:
            client.get(f"{args.api_url.rstrip('/')}/health").raise_for_status()
        except httpx.HTTPError as e:
            print(f"\nAPI not reachable at {args.api_url}: {e}")
            print("Start it with: uvicorn faultlens.main:app")
            sys.exit(1)

        print("\n[1/3] Explanations")
        r = client.post(f"{base}/anomaly_explanation", json={"events": events})
        r.raise_for_status()
        for x in r.json()["explanations"]:
            top = x["shap_like_contributions"][0]
            print(f"  {x['id']:<8} {x['severity']:<9} top={top['feature']} ({top['contribution']:.3f})")

        print("\n[2/3] Aggregate window")
        r = client.post(f"{base}/anomaly_realtime_stream", json={"batch": batch})
        r.raise_for_status()
        for level, count in r.json()["counts"].items():
            print(f"  {level:<9} {count}")

        print("\n[3/3] Root causes")
        r = client.post(f"{base}/anomaly_rootcause", json={"events": events})
        r.raise_for_status()
        for rc in r.json()["root_causes"]:
            print(f"  {rc['id']:<8} {rc['cause']}")

    print("\n" + "=" * 60)
    print("Done. API docs:", f"{args.api_url.rstrip('/')}/docs")
    print("=" * 60 + "\n")


if __name__ == "__main__":
    main()
