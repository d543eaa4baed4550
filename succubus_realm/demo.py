"""Create demo characters and fresh like counters for development/testing."""

import asyncio

from succubus_realm.app import Realm

DEMO_CHARACTERS = [
    {
        "id": 1,
        "name": "Lilith",
        "type": "Night Queen",
        "origin": "The Obsidian Court",
        "power": 95,
        "abilities": {"charm": 98, "illusion": 90, "flight": 70},
        "description": "First of her line. Rules the dream roads between "
        "sleep and waking, and remembers every name she has ever been told.",
        "image": "images/lilith.png",
    },
    {
        "id": 2,
        "name": "Mira",
        "type": "Dream Weaver",
        "origin": "Moonlit Marshes",
        "power": 72,
        "abilities": {"charm": 80, "illusion": 88, "flight": 55},
        "description": "Spins lucid dreams out of mist. Shy in daylight, "
        "dangerously playful after dusk.",
        "image": "images/mira.png",
    },
    {
        "id": 3,
        "name": "Seraphine",
        "type": "Fallen Choir",
        "origin": "Ashen Cathedral",
        "power": 84,
        "abilities": {"charm": 85, "illusion": 60, "flight": 92},
        "description": "Once sang in the high choir; now her hymns are sung "
        "backwards. Still cannot resist a good harmony.",
        "image": "images/seraphine.png",
    },
]


async def create_demo_data(realm: Realm) -> bool:
    """Overwrite the roster with demo characters and reset all like counters."""
    settings = realm.settings
    if not await realm.store.safe_write(settings.characters_path, {"succubi": DEMO_CHARACTERS}):
        return False
    for path in (settings.likes_path, realm.store.backup_path(settings.likes_path)):
        await asyncio.to_thread(path.unlink, missing_ok=True)
    return await realm.startup()
