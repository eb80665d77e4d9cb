"""
Seed the database with an admin account, the service menu, two stylists and
sample guest bookings. Safe to run repeatedly: each group is only inserted
when its table is empty.

Usage: python seed_db.py
"""
import logging
import sys
from datetime import datetime
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent))

from sqlalchemy.orm import Session

from app.config import ADMIN_EMAIL, ADMIN_PASSWORD
from app.database import Base, SessionLocal, engine
from app.models import Booking, Service, Stylist, StylistService, User
from app.security_utils import hash_password_bcrypt

logging.basicConfig(level=logging.INFO, format='%(message)s')
logger = logging.getLogger(__name__)

SERVICES = [
    {"name": "Haircut & Trim", "description": "Professional haircut and trimming service",
     "price": 200, "duration": 45, "category": "Hair"},
    {"name": "Shaving Service", "description": "Professional shaving service",
     "price": 150, "duration": 30, "category": "Beard"},
    {"name": "Hair Styling", "description": "Creative hair styling service",
     "price": 250, "duration": 60, "category": "Hair"},
    {"name": "Beard & Mustache Service", "description": "Beard and mustache trimming and styling",
     "price": 180, "duration": 40, "category": "Beard"},
    {"name": "Grooming Package",
     "description": "Complete grooming package including haircut, beard trim, and facial",
     "price": 350, "duration": 90, "category": "Event"},
]

STYLISTS = [
    {"name": "Claude Njeam", "title": "Master Barber",
     "bio": "Claude is a master barber with over 10 years of experience",
     "email": "claude@afrogents.com", "phone_number": "+1234567890", "rating": 4.8},
    {"name": "James Peterson", "title": "Afro Specialist",
     "bio": "James specializes in all types of afro hairstyles",
     "email": "james@afrogents.com", "phone_number": "+0987654321", "rating": 4.7},
]

# stylist name -> service names
STYLIST_SERVICES = {
    "Claude Njeam": ["Haircut & Trim", "Shaving Service", "Beard & Mustache Service"],
    "James Peterson": ["Haircut & Trim", "Hair Styling", "Grooming Package"],
}

# (client, contact, stylist, service, date, start, end, status)
BOOKINGS = [
    ("Michael Johnson", "+971 50 123 4567", "Claude Njeam", "Haircut & Trim",
     "2025-04-08", "10:00 AM", "10:45 AM", "confirmed"),
    ("David Williams", "+971 50 765 4321", "James Peterson", "Hair Styling",
     "2025-04-08", "01:30 PM", "02:30 PM", "pending"),
    ("Robert Brown", "+971 55 987 6543", "Claude Njeam", "Grooming Package",
     "2025-04-09", "11:15 AM", "12:45 PM", "confirmed"),
    ("James Davis", "+971 56 222 3333", "James Peterson", "Grooming Package",
     "2025-04-10", "04:00 PM", "05:30 PM", "pending"),
    ("Thomas Miller", "+971 54 111 2222", "Claude Njeam", "Haircut & Trim",
     "2025-04-12", "02:45 PM", "03:30 PM", "confirmed"),
]


def seed_database(db: Session) -> None:
    """Insert seed rows into every empty table"""
    if not db.query(User).filter(User.email == ADMIN_EMAIL).first():
        db.add(User(
            name="Admin",
            email=ADMIN_EMAIL,
            password=hash_password_bcrypt(ADMIN_PASSWORD),
            role="admin",
            phone_number="+1234567890",
        ))
        db.commit()
        logger.info(f"👤 Admin user created ({ADMIN_EMAIL})")
    else:
        logger.info("Admin user already exists")

    if not db.query(Service).count():
        db.add_all([Service(**data) for data in SERVICES])
        db.commit()
        logger.info(f"✅ {len(SERVICES)} services created")
    else:
        logger.info("Services already exist")

    if not db.query(Stylist).count():
        db.add_all([Stylist(**data) for data in STYLISTS])
        db.commit()
        logger.info(f"✅ {len(STYLISTS)} stylists created")
    else:
        logger.info("Stylists already exist")

    services = {s.name: s for s in db.query(Service).all()}
    stylists = {s.name: s for s in db.query(Stylist).all()}
    if not all(name in stylists for name in STYLIST_SERVICES):
        logger.info("Seed stylists missing - skipping associations and bookings")
        return

    if not db.query(StylistService).count():
        links = [
            StylistService(stylist_id=stylists[stylist].id, service_id=services[service].id)
            for stylist, offered in STYLIST_SERVICES.items()
            for service in offered
            if service in services
        ]
        db.add_all(links)
        db.commit()
        logger.info(f"✅ {len(links)} stylist-service associations created")
    else:
        logger.info("Stylist-service associations already exist")

    if not db.query(Booking).count():
        bookings = [
            Booking(
                client_name=client,
                client_contact=contact,
                client_location="Dubai, UAE",
                client_id=None,
                stylist_id=stylists[stylist].id,
                service_id=services[service].id,
                date=datetime.fromisoformat(day),
                time_start=start,
                time_end=end,
                status=status,
                payment_method="cash",
                payment_status="pending",
                notes="",
            )
            for client, contact, stylist, service, day, start, end, status in BOOKINGS
            if service in services
        ]
        db.add_all(bookings)
        db.commit()
        logger.info(f"✅ {len(bookings)} bookings created")
    else:
        logger.info("Bookings already exist")


if __name__ == "__main__":
    logger.info("Seeding database...")
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        seed_database(db)
        logger.info("✅ Database seeding completed successfully!")
    except Exception as e:
        db.rollback()
        logger.error(f"❌ Error seeding database: {e}")
        sys.exit(1)
    finally:
        db.close()
