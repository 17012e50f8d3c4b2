import logging
from decimal import Decimal
from sqlalchemy.orm import Session
from ..models import Room

logger = logging.getLogger(__name__)

SAMPLE_ROOMS = [
    {
        "name": "Garden View Standard",
        "type": "Standard",
        "price": Decimal("120.00"),
        "description": "A quiet room overlooking the courtyard garden, with a queen bed and a work desk.",
        "amenities": ["Free Wi-Fi", "Air conditioning", "Flat-screen TV", "Coffee maker"],
        "capacity": 2,
        "image_url": "https://images.pexels.com/photos/271618/pexels-photo-271618.jpeg",
    },
    {
        "name": "Harbour Deluxe",
        "type": "Deluxe",
        "price": Decimal("189.00"),
        "description": "Floor-to-ceiling windows onto the harbour, a king bed and a rain shower.",
        "amenities": ["Free Wi-Fi", "Harbour view", "Minibar", "Rain shower", "Room service"],
        "capacity": 3,
        "image_url": "https://images.pexels.com/photos/164595/pexels-photo-164595.jpeg",
    },
    {
        "name": "Family Suite",
        "type": "Suite",
        "price": Decimal("260.00"),
        "description": "Two connected bedrooms and a lounge, sized for families travelling together.",
        "amenities": ["Free Wi-Fi", "Kitchenette", "Two bathrooms", "Sofa bed", "Board games"],
        "capacity": 5,
        "image_url": "https://images.pexels.com/photos/1743231/pexels-photo-1743231.jpeg",
    },
    {
        "name": "Majestic Penthouse",
        "type": "Penthouse",
        "price": Decimal("540.00"),
        "description": "The top floor: private terrace, soaking tub and panoramic views of the bay.",
        "amenities": ["Private terrace", "Soaking tub", "Butler service", "Espresso machine", "Smart TV"],
        "capacity": 4,
        "image_url": "https://images.pexels.com/photos/1457842/pexels-photo-1457842.jpeg",
    },
]


def seed_sample_rooms(db: Session) -> int:
    """Insert the sample catalogue when the rooms table is empty. Returns rooms added."""
    if db.query(Room).first():
        return 0
    for data in SAMPLE_ROOMS:
        db.add(Room(**data))
    db.commit()
    logger.info("Seeded %d sample rooms", len(SAMPLE_ROOMS))
    return len(SAMPLE_ROOMS)
