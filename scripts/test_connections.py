#!/usr/bin/env python3
"""
Connection Test Script

Run this to verify MongoDB and the Adzuna job search are reachable.
Usage: python scripts/test_connections.py
"""
import asyncio
import sys
sys.path.insert(0, '.')

from placement_api.core.config import get_settings
from placement_api.db.mongodb import create_mongo_client, test_mongo_connection
from placement_api.services.external_jobs_service import ExternalJobService


def main():
    settings = get_settings()
    print("=" * 50)
    print("PLACEMENTPRO - CONNECTION TEST")
    print("=" * 50)

    # Test MongoDB
    print("\n[1] Testing MongoDB...")
    print(f"    URI: {settings.mongodb_uri}")
    print(f"    Database: {settings.mongodb_db}")
    client = create_mongo_client(settings)
    if test_mongo_connection(client):
        print("    ✅ MongoDB: CONNECTED")
    else:
        print("    ❌ MongoDB: FAILED")
    client.close()

    # Test Adzuna (only if credentials are set)
    print("\n[2] Testing Adzuna API...")
    external = ExternalJobService(settings)
    if external.has_credentials:
        print(f"    Base URL: {settings.adzuna_base_url}/{settings.adzuna_country}")
        if asyncio.run(external.test_connection()):
            print("    ✅ Adzuna: CONNECTED")
        else:
            print("    ❌ Adzuna: FAILED")
    else:
        print("    ⚠️  Adzuna: credentials not configured (demo jobs will be served)")

    print("\n" + "=" * 50)
    print("Connection test complete!")
    print("=" * 50)


if __name__ == "__main__":
    main()
