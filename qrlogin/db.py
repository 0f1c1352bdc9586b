# In-memory document store standing in for the hosted database.
# One DocumentStore is created at start-up and handed to every component.

import copy
import logging
import threading
from typing import Callable, Dict, List, Optional, Tuple

from qrlogin.core.errors import DocumentExistsError, DocumentNotFoundError, PreconditionFailedError

logger = logging.getLogger(__name__)

PARTNERS = "partners"
LOGINS = "login"

UpdateListener = Callable[[str, dict], object]


class Collection:
    def __init__(self, name: str):
        self.name = name
        # key -> document (field name -> value)
        self._docs: Dict[str, dict] = {}
        self._listeners: List[UpdateListener] = []
        self._lock = threading.RLock()

    def create(self, key: str, data: dict) -> None:
        """Create-if-absent. Never overwrites an existing document."""
        with self._lock:
            if key in self._docs:
                raise DocumentExistsError(self.name, key)
            self._docs[key] = copy.deepcopy(data)

    def add(self, data: dict) -> str:
        """Stores a document under a generated key and returns the key."""
        with self._lock:
            key = f"{self.name}-{len(self._docs) + 1}"
            while key in self._docs:
                key += "_"
            self._docs[key] = copy.deepcopy(data)
            return key

    def get(self, key: str) -> Optional[dict]:
        with self._lock:
            doc = self._docs.get(key)
            return copy.deepcopy(doc) if doc is not None else None

    def find_one(self, field: str, value) -> Optional[Tuple[str, dict]]:
        """First document (in insertion order) whose field equals value exactly."""
        with self._lock:
            for key, doc in self._docs.items():
                if field in doc and doc[field] == value:
                    return key, copy.deepcopy(doc)
        return None

    def items(self) -> List[Tuple[str, dict]]:
        with self._lock:
            return [(key, copy.deepcopy(doc)) for key, doc in self._docs.items()]

    def update(self, key: str, changes: dict, only_if: Callable[[dict], bool] | None = None) -> dict:
        """
        Merges changes into an existing document and notifies update listeners
        with the post-update snapshot.
        """
        with self._lock:
            doc = self._docs.get(key)
            if doc is None:
                raise DocumentNotFoundError(f"Document {self.name}/{key[:12]}... not found")
            if only_if is not None and not only_if(copy.deepcopy(doc)):
                raise PreconditionFailedError(f"Document {self.name}/{key[:12]}... failed write precondition")
            doc.update(copy.deepcopy(changes))
            snapshot = copy.deepcopy(doc)
            listeners = list(self._listeners)

        # Listeners run outside the lock so they may read the store again
        for listener in listeners:
            try:
                listener(key, copy.deepcopy(snapshot))
            except Exception:
                logger.exception(f"Update listener failed for {self.name}/{key[:12]}...")
        return snapshot

    def delete(self, key: str, only_if: Callable[[dict], bool] | None = None) -> bool:
        with self._lock:
            doc = self._docs.get(key)
            if doc is None:
                return False
            if only_if is not None and not only_if(copy.deepcopy(doc)):
                return False
            del self._docs[key]
            return True

    def on_update(self, listener: UpdateListener) -> None:
        with self._lock:
            self._listeners.append(listener)

    def clear(self) -> None:
        with self._lock:
            self._docs.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._docs)

    def __contains__(self, key: str) -> bool:
        with self._lock:
            return key in self._docs


class DocumentStore:
    def __init__(self):
        self._collections: Dict[str, Collection] = {}
        self._lock = threading.Lock()

    def collection(self, name: str) -> Collection:
        with self._lock:
            if name not in self._collections:
                self._collections[name] = Collection(name)
            return self._collections[name]


def seed_partners(store: DocumentStore, api_keys: List[str]) -> int:
    """Adds a partner record for every api key not already present."""
    partners = store.collection(PARTNERS)
    added = 0
    for api_key in api_keys:
        if partners.find_one("apiKey", api_key) is None:
            partners.add({"apiKey": api_key})
            added += 1
    if added:
        logger.info(f"Seeded {added} partner record(s)")
    return added
