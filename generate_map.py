#!/usr/bin/env python3
"""
FloodDataSync - Generate Interactive Flood Map
Fetches reports and sensor readings from the store and writes the dashboard map.
"""
import os
import sys
from datetime import datetime

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from dotenv import load_dotenv

# Load environment variables before settings are read
load_dotenv()

from src.core.config import get_settings
from src.core.exceptions import StoreUnavailable
from src.crowdsource.dashboard import status_counts
from src.ingestion.store_client import ReportStoreClient, SensorStoreClient
from src.visualization.map_generator import create_flood_map


def main():
    settings = get_settings()

    print("=" * 60)
    print("FloodDataSync - Generating Flood Map")
    print("=" * 60)
    print(f"\nStore: {settings.store_base_url}")

    try:
        with ReportStoreClient(settings.store_base_url, settings.store_timeout_seconds) as reports_client:
            reports = reports_client.list()
        with SensorStoreClient(settings.store_base_url, settings.store_timeout_seconds) as sensors_client:
            sensors = sensors_client.list()
    except StoreUnavailable as e:
        print(f"ERROR: {e}")
        sys.exit(1)

    counts = status_counts(reports)

    print(f"\nTotal reports: {len(reports)}")
    print(f"  - Validated: {counts['validated']}")
    print(f"  - Pending:   {counts['pending']}")
    print(f"  - Rejected:  {counts['rejected']}")
    print(f"Sensors:       {len(sensors)}")

    flood_map = create_flood_map(
        reports=reports,
        sensors=sensors,
        center=(settings.map_center_lat, settings.map_center_lon),
        zoom=settings.map_zoom,
        title=f"FloodDataSync - Lagos Flood Incidents ({datetime.now().strftime('%Y-%m-%d %H:%M')})",
    )

    output_path = os.path.join(os.path.dirname(os.path.abspath(__file__)), "flood_map.html")
    flood_map.save(output_path)

    print(f"\nMap saved to: {output_path}")
    print("=" * 60)


if __name__ == "__main__":
    main()
