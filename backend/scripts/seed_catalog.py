#!/usr/bin/env python
"""Seed script to create a demo catalog service and customer profile.

Useful on a fresh development database so orders can be placed right away.
Run after the migrations have been applied.

Usage:
    python backend/scripts/seed_catalog.py

Environment Variables:
    DATABASE_URL: PostgreSQL connection string
    SEED_AUTH_ID: Auth principal id for the demo profile (default: demo-customer)
    SEED_EMAIL: Email for the demo profile (default: customer@example.com)
"""

import os
import sys
from decimal import Decimal

from servicedesk.catalog.schemas import CatalogServiceCreate
from servicedesk.catalog.service import CatalogRepository
from servicedesk.dependencies import bootstrap
from servicedesk.observability import request_context
from servicedesk.users.service import UserProfileRepository


DEMO_SERVICE = CatalogServiceCreate(
    title="Passport Renewal",
    category="Documentation",
    description="Renewal of an expired or expiring passport with document pickup",
    price=Decimal("499.00"),
    required_documents=[
        {"name": "Old Passport", "requires_ocr": True},
        {"name": "Address Proof", "compression_settings": {"allowed_formats": ["pdf", "jpg"]}},
    ],
    custom_dropdowns=[
        {"label": "Scheme", "options": [{"label": "Normal"}, {"label": "Tatkal", "documents": ["Annexure F"]}]},
    ],
    application_details={"processing_time": "7-10 working days"},
    additional_fields={
        "father_name": {"label": "Father's Name", "type": "text", "required": True},
    },
)


def main():
    """Create the demo service and profile."""
    auth_id = os.getenv("SEED_AUTH_ID", "demo-customer")
    email = os.getenv("SEED_EMAIL", "customer@example.com")

    session = bootstrap()()

    with request_context("seed-catalog"):
        seed(session, auth_id, email)


def seed(session, auth_id, email):
    """Create the profile and service if missing, then commit."""
    try:
        users = UserProfileRepository(session)
        profile = users.find_by_owner_ref(auth_id)
        if profile is None:
            profile = users.create_profile(auth_id, display_email=email, first_name="Demo")

        catalog = CatalogRepository(session)
        existing, _ = catalog.list_services(search=DEMO_SERVICE.title)
        service = existing[0] if existing else catalog.create_service(DEMO_SERVICE)

        session.commit()

        print("SUCCESS: Demo data ready")
        print(f"  Profile: {profile.id} (auth_id={profile.auth_id})")
        print(f"  Service: {service.id} ({service.title}, {service.formatted_price})")

    except Exception as e:
        session.rollback()
        print(f"ERROR: Failed to seed demo data: {e}")
        sys.exit(1)

    finally:
        session.close()


if __name__ == "__main__":
    main()
