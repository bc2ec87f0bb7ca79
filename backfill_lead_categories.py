#!/usr/bin/env python3
"""
Recompute the stored category and score for every active lead.

Usage:
    python backfill_lead_categories.py [--dry-run]

This will:
1. Load all leads and riders from Supabase
2. Classify active leads against riders and each other
3. Write back category and score for leads whose values changed
"""

import sys
from collections import Counter
from pathlib import Path

# Add project to path
sys.path.insert(0, str(Path(__file__).parent))

from src.models.users import SYSTEM_VIEWER
from src.services.activity_log import ActivityLogger
from src.services.lead_classifier import active_leads
from src.services.lead_scoring import rescore_leads
from src.services.notification_service import NotificationService
from src.services.supabase_store import BackendError, FleetStore
from src.utils.settings import configure_logging, load_settings


def main():
    """Main backfill function."""
    dry_run = "--dry-run" in sys.argv[1:]

    settings = load_settings()
    configure_logging(settings.log_level)

    print("=" * 60)
    print("FleetDesk - Backfill Lead Categories")
    print("=" * 60)

    try:
        store = FleetStore.connect(settings.supabase_url, settings.supabase_key)
        leads = store.fetch_leads()
        riders = store.fetch_riders()
    except BackendError as e:
        print(f"\nError connecting to Supabase: {e}")
        print("Make sure SUPABASE_URL and SUPABASE_KEY are set in .env")
        sys.exit(1)

    population = active_leads(leads)
    print(f"\nLoaded {len(population)} active leads and {len(riders)} riders")

    updates = rescore_leads(population, riders)
    by_category = Counter(update.category for update in updates)

    print(f"\n{len(updates)} lead(s) need updating:")
    for category, count in sorted(by_category.items()):
        print(f"  - {category}: {count}")

    if dry_run:
        print("\nDry run: nothing written.")
        return

    if not updates:
        print("\n✅ Everything is already up to date.")
        return

    try:
        written = store.apply_lead_updates(updates)
    except BackendError as e:
        print(f"\n⚠️  Backfill stopped: {e}")
        sys.exit(1)

    ActivityLogger(store, NotificationService(store)).log(
        SYSTEM_VIEWER,
        "leadsRescored",
        "lead",
        "multiple",
        f"Backfilled category and score for {written} lead(s)",
    )

    print(f"\n✅ Updated {written} lead(s)")
    print("\n" + "=" * 60)


if __name__ == "__main__":
    main()
