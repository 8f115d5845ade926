"""Static catalogue of bookable rooms."""
from typing import Optional, Tuple

from .schemas import Room

ROOMS: Tuple[Room, ...] = (
    Room(id=1, name="Labrador", has_tv=True),
    Room(id=2, name="Border Collie", has_tv=True),
    Room(id=3, name="Rottweiler", has_tv=True),
    Room(id=4, name="Shiba", has_tv=False),
    Room(id=5, name="Poodle", has_tv=False),
)


def get_room(room_id: Optional[int], rooms: Tuple[Room, ...] = ROOMS) -> Optional[Room]:
    for room in rooms:
        if room.id == room_id:
            return room
    return None
