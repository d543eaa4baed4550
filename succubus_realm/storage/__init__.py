"""File-based JSON storage for the character roster and like counters.

Data layout:
  data/
    succubi-data.json          Character roster {"succubi": [{id, name, ...}]}
                               Owned by the content pipeline; read-only here.
    likes-data.json            Like counters {"likes": {"<id>": count}}
    likes-data.json.backup     Previous generation, refreshed before every write

One JsonStore instance holds the per-file locks and is shared by the
repositories. Reads never raise: missing or corrupt files degrade to empty
documents. Writes report failure as False.

Integrity: IntegrityReconciler seeds a zero counter for every character and
drops counters for ids that left the roster.
"""

# Re-export the public names so `from succubus_realm import storage` is enough.

from .json_store import (  # noqa: F401
    JsonStore,
    StoreError,
    describe_error,
)

from .likes import (  # noqa: F401
    LikesRepository,
    like_statistics,
)

from .characters import (  # noqa: F401
    CharacterDataError,
    CharactersRepository,
)

from .integrity import (  # noqa: F401
    IntegrityReconciler,
)
