import logging
from typing import List, Optional

import pycouchdb

logger = logging.getLogger(__name__)


class CouchKVStore:
    """
    Key-value store on top of a CouchDB database.
    Each key is a document id and the stored value lives under "value".
    """

    def __init__(self, couch_db):
        self.db = couch_db

    def get(self, key: str) -> Optional[dict]:
        doc = self._get_doc(key)
        return doc.get("value") if doc else None

    def set(self, key: str, value: dict) -> None:
        doc = {"_id": key, "value": value}
        existing = self._get_doc(key)
        if existing and existing.get("_rev"):
            doc["_rev"] = existing["_rev"]
        self.db.save(doc)

    def delete(self, key: str) -> bool:
        doc = self._get_doc(key)
        if not doc:
            return False
        self.db.delete(doc)
        return True

    def get_by_prefix(self, prefix: str) -> List[dict]:
        rows = self.db.all(
            include_docs=True, startkey=prefix, endkey=prefix + "\ufff0"
        )
        docs = [row.get("doc", row) for row in rows]
        return [
            doc["value"]
            for doc in docs
            if doc.get("_id", "").startswith(prefix) and "value" in doc
        ]

    def _get_doc(self, key: str) -> Optional[dict]:
        try:
            return self.db.get(key)
        except pycouchdb.exceptions.NotFound:
            logger.debug(f"Key not found: {key}")
            return None
