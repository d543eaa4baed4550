"""End-to-end scenarios over a Realm: startup, likes, joins, demo data.

Variants:
  test_fresh_start_then_likes: no likes file; startup + three likes on one character
  test_startup_prunes_old_ids: a character left the roster since the last run
  test_startup_without_roster: roster missing; likes file created, nothing pruned
  test_demo_data: demo seeding resets counters for the demo roster
"""

import asyncio
import json

from succubus_realm.app import Realm, create_realm
from succubus_realm.demo import DEMO_CHARACTERS, create_demo_data


async def test_fresh_start_then_likes(realm: Realm, write_characters):
    write_characters([{"id": 1, "name": "Lilith"}, {"id": 2, "name": "Mira"}, {"id": 3, "name": "Seraphine"}])

    assert await realm.likes.initialize_if_missing() is True
    assert await realm.reconciler.reconcile() is True
    for _ in range(3):
        await realm.likes.increment(1)

    assert await realm.likes.get_all() == {1: 3, 2: 0, 3: 0}
    detail = await realm.characters.get_with_like_count(1)
    assert detail["name"] == "Lilith"
    assert detail["likeCount"] == 3


async def test_startup_prunes_old_ids(realm: Realm, write_characters, write_likes):
    write_characters([{"id": 1, "name": "Lilith"}])
    write_likes({"likes": {"1": 4, "2": 8}})
    assert await realm.startup() is True
    assert await realm.likes.get_all() == {1: 4}


async def test_startup_without_roster(realm: Realm):
    """The likes file is still created when the roster is missing."""
    assert await realm.startup() is False
    assert json.loads(realm.likes.path.read_text()) == {"likes": {}}


async def test_concurrent_likes_after_startup(realm: Realm, write_characters):
    """Concurrent likes after startup land in the ranking."""
    write_characters([{"id": 1, "name": "Lilith"}, {"id": 2, "name": "Mira"}])
    await realm.startup()
    await asyncio.gather(
        *(realm.likes.increment(1) for _ in range(10)),
        *(realm.likes.increment(2) for _ in range(4)),
    )
    ranking = await realm.characters.get_ranking()
    assert [(c["id"], c["likeCount"]) for c in ranking] == [(1, 10), (2, 4)]


async def test_file_status(realm: Realm, write_characters):
    """Status is keyed by file name."""
    write_characters([])
    status = await realm.file_status()
    assert status == {"likes-data.json": False, "succubi-data.json": True}


async def test_demo_data(realm: Realm, write_likes):
    write_likes({"likes": {"1": 50, "99": 3}})
    assert await create_demo_data(realm) is True
    assert await realm.characters.get_all_ids() == [c["id"] for c in DEMO_CHARACTERS]
    assert await realm.likes.get_all() == {c["id"]: 0 for c in DEMO_CHARACTERS}


def test_create_realm_overrides_data_dir(tmp_path, settings):
    """An explicit data dir wins and the given settings are not mutated."""
    realm = create_realm(tmp_path, settings=settings)
    assert realm.settings.likes_path == tmp_path / "likes-data.json"
    assert realm.likes.path == tmp_path / "likes-data.json"
    assert realm.characters.path == tmp_path / "succubi-data.json"
    assert settings.data_dir != tmp_path


def test_repositories_share_one_store(realm: Realm):
    assert realm.likes._store is realm.store
    assert realm.characters._store is realm.store
