#!/usr/bin/env python3
"""Setup script for the Indus Tours API: creates the schema and seeds a starter catalog."""

import argparse
import asyncio
import logging
import sys
from pathlib import Path

# Add the server directory to the Python path
server_dir = Path(__file__).parent.parent / "server"
sys.path.insert(0, str(server_dir))

from sqlalchemy import func, select  # noqa: E402

from app.core.database import async_session_factory, close_db, init_db  # noqa: E402
from app.models import *  # noqa: E402,F403 - Import all models to ensure they're registered
from app.models.account import AppRole, User, UserRole  # noqa: E402
from app.models.deal import Deal  # noqa: E402
from app.models.destination import Destination  # noqa: E402
from app.models.hotel import Hotel  # noqa: E402
from app.models.site_content import SiteContent  # noqa: E402
from app.models.tour import Tour  # noqa: E402
from app.models.vehicle import Vehicle  # noqa: E402

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


async def setup_database():
    """Create every table that does not exist yet."""
    logger.info("Setting up database...")
    await init_db()
    logger.info("Database schema is up to date")


async def create_sample_data():
    """Seed destinations, hotels, tours, vehicles, a deal and homepage copy."""
    async with async_session_factory() as db:
        existing_tours = await db.scalar(select(func.count()).select_from(Tour))
        if existing_tours:
            logger.info("Sample data already exists, skipping...")
            return

        try:
            hunza = Destination(
                name="Hunza Valley",
                location="Gilgit-Baltistan",
                best_time="April to October",
                highlights=["Altit Fort", "Attabad Lake", "Passu Cones"],
                is_featured=True,
            )
            skardu = Destination(
                name="Skardu",
                location="Gilgit-Baltistan",
                best_time="May to September",
                highlights=["Shangrila Resort", "Deosai Plains"],
                is_featured=True,
            )
            swat = Destination(name="Swat Valley", location="Khyber Pakhtunkhwa", best_time="March to October")
            serena = Hotel(name="Hunza Serena Inn", location="Karimabad", star_rating=4,
                           amenities=["Wi-Fi", "Restaurant", "Valley view"])
            db.add_all([hunza, skardu, swat, serena])
            await db.flush()

            hunza_tour = Tour(
                title="Hunza Valley Explorer",
                description="Five days among the forts, lakes and glaciers of the Karakoram",
                duration="5 Days",
                difficulty="Easy",
                price=45000,
                discount_price=39000,
                max_group_size=15,
                includes=["Transport", "Hotel stay", "Breakfast", "Guide"],
                is_featured=True,
                destination_id=hunza.id,
                hotel_id=serena.id,
            )
            db.add_all([
                hunza_tour,
                Tour(
                    title="Skardu & Deosai Adventure",
                    duration="7 Days",
                    difficulty="Moderate",
                    price=65000,
                    max_group_size=12,
                    includes=["Jeep safari", "Camping", "Meals"],
                    is_featured=True,
                    destination_id=skardu.id,
                ),
                Tour(
                    title="Swat Weekend Getaway",
                    duration="3 Days",
                    price=22000,
                    destination_id=swat.id,
                ),
                Vehicle(name="Toyota Prado", type="SUV", capacity=7, price_per_day=18000,
                        features=["4x4", "Air conditioning"]),
                Vehicle(name="Toyota Coaster", type="Bus", capacity=25, price_per_day=30000),
                SiteContent(key="hero", value={
                    "title": "Discover the North",
                    "subtitle": "Guided tours across Pakistan's mountain valleys",
                }),
            ])
            await db.flush()

            db.add(Deal(
                title="Early Bird Hunza",
                description="Book two months ahead and save",
                discount_percent=15,
                code="EARLY15",
                is_popup=True,
                tour_id=hunza_tour.id,
            ))

            await db.commit()
            logger.info("Sample data created successfully!")

        except Exception as e:
            await db.rollback()
            logger.error(f"Failed to create sample data: {e}")
            raise


async def create_admin(email: str):
    """Create the account if needed and grant it the admin role."""
    async with async_session_factory() as db:
        user = await db.scalar(select(User).where(User.email == email))
        if user is None:
            user = User(email=email)
            db.add(user)
            await db.flush()

        existing = await db.scalar(
            select(UserRole).where(UserRole.user_id == user.id, UserRole.role == AppRole.ADMIN.value)
        )
        if existing is None:
            db.add(UserRole(user_id=user.id, role=AppRole.ADMIN.value))

        await db.commit()
        logger.info(f"Admin account ready: {email} (id {user.id})")


async def main(admin_email: str | None, seed: bool):
    """Main setup function."""
    logger.info("Starting Indus Tours API setup...")

    try:
        await setup_database()

        if seed:
            await create_sample_data()

        if admin_email:
            await create_admin(admin_email)
    finally:
        await close_db()

    logger.info("Setup completed successfully!")
    logger.info("You can now start the API server with: cd server && uvicorn app.main:app --reload")


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--admin-email", help="Create this account and grant it admin")
    parser.add_argument("--no-seed", action="store_true", help="Skip the sample catalog")
    args = parser.parse_args()

    asyncio.run(main(args.admin_email, seed=not args.no_seed))
