"""Seed the local database with a demo supervisor, accommodations, and tasks.

Requires ``DATA_BACKEND=local``. Run from the repository root:
    python -m scripts.seed_data
"""

import asyncio
import logging
import sys
from datetime import date, timedelta
from decimal import Decimal

from maintenance_tracker.config import get_settings
from maintenance_tracker.context import AppContext, build_remote
from maintenance_tracker.remote.base import RemoteServiceError
from maintenance_tracker.remote.local import LocalDataService
from maintenance_tracker.schemas.accommodation import AccommodationCreate
from maintenance_tracker.schemas.task import TaskCreate

logger = logging.getLogger("seed_data")

# ---------------------------------------------------------------------------
# Seed data definitions
# ---------------------------------------------------------------------------

DEMO_USER = {
    "email": "supervisor@example.com",
    "password": "demo1234",
    "full_name": "Demo Supervisor",
}

ACCOMMODATIONS = [
    {"code": "vs1", "name": "Villa Sur", "address": "Calle del Mar 12", "notes": "Sea-facing, two floors."},
    {"code": "cn2", "name": "Casa Norte", "address": "Avenida del Bosque 4"},
    {"code": "lp3", "name": "Loft del Puerto", "address": "Muelle 7, 3B", "status": "inactive",
     "notes": "Closed for refurbishment."},
]

# (accommodation code, area, element, description, priority, status, due in days, estimated cost)
TASKS = [
    ("VS1", "bathroom", "shower", "Shower drain is slow, check for blockage", "high", "pending", 2, "45.00"),
    ("VS1", "kitchen", "oven", "Oven door hinge loose", "medium", "in_progress", 5, "30.00"),
    ("VS1", "bedroom", None, "Repaint wall scuffs in main bedroom", "low", "pending", 14, None),
    ("CN2", "living_room", "ac_unit", "Air conditioning leaks water", "high", "pending", 1, "120.00"),
    ("CN2", "exterior", "gate", "Replace gate intercom battery", "low", "completed", None, "8.50"),
]


async def seed() -> None:
    settings = get_settings()
    if settings.data_backend != "local":
        logger.error("Seeding only works against the local backend (set DATA_BACKEND=local)")
        sys.exit(1)

    remote = await build_remote(settings)
    assert isinstance(remote, LocalDataService)
    context = AppContext.from_remote(remote)
    try:
        try:
            await remote.register_user(**DEMO_USER)
            logger.info("Created demo user %s", DEMO_USER["email"])
        except RemoteServiceError:
            logger.info("Demo user %s already exists", DEMO_USER["email"])

        await context.sessions.login(DEMO_USER["email"], DEMO_USER["password"])
        await context.accommodations.fetch_all()
        existing = {a.code for a in context.accommodations.accommodations}

        for data in ACCOMMODATIONS:
            if data["code"].upper() in existing:
                continue
            accommodation = await context.accommodations.create(AccommodationCreate(**data))
            logger.info("Created accommodation %s (%s)", accommodation.code, accommodation.name)

        by_code = {a.code: a.id for a in context.accommodations.accommodations}
        await context.tasks.fetch_all()
        if context.tasks.total_count:
            logger.info("Tasks already seeded (%d), skipping", context.tasks.total_count)
            return

        today = date.today()
        for code, area, element, description, priority, status, due_in, cost in TASKS:
            task = await context.tasks.create(
                TaskCreate(
                    accommodation_id=by_code[code],
                    area_catalog_id=area,
                    element_catalog_id=element,
                    description=description,
                    priority=priority,
                    status=status,
                    due_date=today + timedelta(days=due_in) if due_in is not None else None,
                    estimated_cost=Decimal(cost) if cost else None,
                )
            )
            logger.info("Created task %s for %s", task.id, code)
    finally:
        await context.aclose()


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    asyncio.run(seed())
