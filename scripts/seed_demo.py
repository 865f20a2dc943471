from __future__ import annotations

import logging

from sqlalchemy import select

from spotbnb.core.config import settings
from spotbnb.core.logging_config import configure_logging
from spotbnb.core.security import get_password_hash
from spotbnb.db.base import Base
from spotbnb.db.session import SessionLocal, engine
from spotbnb.models import Review, Spot, SpotImage, User

logger = logging.getLogger(__name__)

DEMO_PASSWORD = "password123"

USERS = [
    {"email": "demo@spotbnb.io", "username": "Demo-lition", "first_name": "Demo", "last_name": "User"},
    {"email": "host@spotbnb.io", "username": "FakeHost", "first_name": "Fake", "last_name": "Host"},
    {"email": "guest@spotbnb.io", "username": "FakeGuest", "first_name": "Fake", "last_name": "Guest"},
]

SPOTS = [
    {
        "address": "123 Disney Lane",
        "city": "San Francisco",
        "state": "California",
        "country": "United States of America",
        "lat": 37.7645358,
        "lng": -122.4730327,
        "name": "App Academy",
        "description": "Place where web developers are created",
        "price": 123,
        "image": "https://images.example.com/spots/app-academy.jpg",
    },
    {
        "address": "42 Harbor Road",
        "city": "Seattle",
        "state": "Washington",
        "country": "United States of America",
        "lat": 47.6062095,
        "lng": -122.3320708,
        "name": "Harbor Loft",
        "description": "Bright loft a short walk from the water",
        "price": 210,
        "image": "https://images.example.com/spots/harbor-loft.jpg",
    },
]


def seed() -> dict:
    Base.metadata.create_all(bind=engine)

    db = SessionLocal()
    try:
        if db.scalar(select(User).where(User.email == USERS[0]["email"])):
            logger.info("Demo data already present, nothing to do")
            return {"users": 0, "spots": 0, "reviews": 0}

        users = [User(password_hash=get_password_hash(DEMO_PASSWORD), **u) for u in USERS]
        db.add_all(users)
        db.flush()

        host, guest = users[1], users[2]
        spots = []
        for data in SPOTS:
            fields = dict(data)
            image = fields.pop("image")
            spot = Spot(owner_id=host.id, **fields)
            spot.images.append(SpotImage(url=image, preview=True))
            spots.append(spot)
        db.add_all(spots)
        db.flush()

        reviews = [
            Review(user_id=guest.id, spot_id=spots[0].id, review="Great spot, would stay again.", stars=5),
            Review(user_id=users[0].id, spot_id=spots[0].id, review="Decent, a bit noisy at night.", stars=3),
        ]
        db.add_all(reviews)
        db.commit()

        counts = {"users": len(users), "spots": len(spots), "reviews": len(reviews)}
        logger.info("Seed finished: %s", counts)
        return counts
    finally:
        db.close()


if __name__ == "__main__":
    configure_logging(log_dir=settings.log_dir, level=settings.log_level)
    seed()
