#!/usr/bin/env python3
"""
DEMO DATA SUMMARY
=================

Builds an in-memory store with the demo dataset and prints what it holds:
entity counts, request status/priority mix and today's on-call coverage.

Usage:
    cd backend
    python scripts/seed_demo.py
    python scripts/seed_demo.py --seed 42
"""

import argparse
import os
import sys
from collections import Counter
from datetime import datetime, time

# Ensure backend is in path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from oncall.services import seed_demo_data
from oncall.store import MemoryStore


def print_distribution(title, counter, total):
    print(f"\n{title}:")
    for key, count in counter.most_common():
        print(f"   {key:<12} {count:>5}  ({count / total:.0%})")


def print_summary(store, now):
    requests = store.get_requests()
    schedules = store.get_schedules()

    print("\nEntities:")
    print(f"   organizations  {len(store.get_organizations())}")
    print(f"   physicians     {len(store.get_physicians())}")
    print(f"   assignments    {len(store.get_assignments())}")
    print(f"   schedules      {len(schedules)} ({sum(s.is_active for s in schedules)} active)")
    print(f"   requests       {len(requests)}")
    print(f"   users          {len(store.get_users())}")

    print_distribution("Requests by status", Counter(r.status for r in requests), len(requests))
    print_distribution("Requests by priority", Counter(r.priority for r in requests), len(requests))

    today = now.date()
    day_start = datetime.combine(today, time.min)
    day_end = datetime.combine(today, time.max)
    for organization in store.get_organizations():
        on_call = store.get_active_schedules(organization.id, day_start, day_end)
        print(f"\nOn call today at {organization.name}: {len(on_call)} schedule(s)")
        for schedule in sorted(on_call, key=lambda s: s.start_time):
            physician = store.get_physician(schedule.physician_id)
            name = physician.display_name if physician else f"physician #{schedule.physician_id}"
            print(
                f"   {schedule.start_time:%m/%d %H:%M} - {schedule.end_time:%m/%d %H:%M}  "
                f"{schedule.title:<32} {name}"
            )


def main():
    parser = argparse.ArgumentParser(description="Build and summarize the demo dataset")
    parser.add_argument("--seed", type=int, default=None,
                        help="Random seed for a reproducible dataset")
    args = parser.parse_args()

    print("=" * 60)
    print("ON-CALL MANAGER - DEMO DATA")
    print("=" * 60)

    store = MemoryStore()
    now = store.now()
    seed_demo_data(store, seed=args.seed, now=now)
    print_summary(store, now)

    print("\nDemo logins: admin / password, sarah.miller / password")


if __name__ == "__main__":
    main()
