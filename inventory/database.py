"""
Product document stores.

A store keeps product documents keyed by a generated hex id. Two backends
are available and picked by connection string (see ``open_store``):

    memory://                      process-local dict, lost on restart
    file:///var/lib/inv/db.json    JSON document file, rewritten on each write

Stores do no business validation; they persist whatever fields they are
handed. Every record returned is a copy.
"""
import asyncio
import copy
import json
import logging
import os
import tempfile
import uuid
from typing import Optional, Dict, Any, List
from urllib.parse import urlparse

from .core import MUTABLE_FIELDS, _make_product_dict
from .errors import StorageUnavailable

logger = logging.getLogger(__name__)

_LOCKS: Dict[str, asyncio.Lock] = {}


def _get_lock(key: str) -> asyncio.Lock:
    if key not in _LOCKS:
        _LOCKS[key] = asyncio.Lock()
    return _LOCKS[key]


class MemoryProductStore:
    """In-memory store, insertion ordered."""

    def __init__(self):
        self._products: Dict[str, Dict[str, Any]] = {}

    def _new_id(self) -> str:
        # ids are never reused, even after deletion
        pid = uuid.uuid4().hex
        while pid in self._products:
            pid = uuid.uuid4().hex
        return pid

    def list_all(self) -> List[Dict[str, Any]]:
        return [copy.deepcopy(p) for p in self._products.values()]

    def create(self, fields: Dict[str, Any]) -> Dict[str, Any]:
        pid = self._new_id()
        self._products[pid] = _make_product_dict(pid, fields)
        self._flush()
        return copy.deepcopy(self._products[pid])

    def update(self, product_id: str, fields: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        p = self._products.get(product_id)
        if p is None:
            return None
        for key in MUTABLE_FIELDS:
            p[key] = fields.get(key)
        self._flush()
        return copy.deepcopy(p)

    def delete(self, product_id: str) -> bool:
        if product_id not in self._products:
            return False
        del self._products[product_id]
        self._flush()
        return True

    def _flush(self) -> None:
        pass


class JsonFileProductStore(MemoryProductStore):
    """Products cached in memory and persisted to a JSON document file."""

    def __init__(self, path: str):
        super().__init__()
        self.path = path
        self._load()

    def _load(self) -> None:
        if not os.path.exists(self.path):
            return
        try:
            with open(self.path, encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            raise StorageUnavailable(f"cannot read product store {self.path}: {e}") from e
        products = data.get("products", []) if isinstance(data, dict) else None
        if not isinstance(products, list):
            raise StorageUnavailable(f"product store {self.path} is not a product document")
        self._products = {p["id"]: p for p in products if isinstance(p, dict) and "id" in p}
        logger.info("Loaded %d products from %s", len(self._products), self.path)

    def _flush(self) -> None:
        directory = os.path.dirname(os.path.abspath(self.path))
        try:
            os.makedirs(directory, exist_ok=True)
            fd, tmp = tempfile.mkstemp(dir=directory, prefix=".products-", suffix=".json")
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    json.dump({"products": list(self._products.values())}, f, indent=2)
                os.replace(tmp, self.path)
            except BaseException:
                if os.path.exists(tmp):
                    os.unlink(tmp)
                raise
        except OSError as e:
            # Reload so the cache matches what is actually on disk
            self._products = {}
            self._load()
            raise StorageUnavailable(f"cannot write product store {self.path}: {e}") from e


def open_store(url: str) -> MemoryProductStore:
    """Build a store from a connection string."""
    parsed = urlparse(url)
    if parsed.scheme == "memory":
        return MemoryProductStore()
    if parsed.scheme == "file":
        # file:///abs/path.json -> /abs/path.json, file://data/db.json -> data/db.json
        path = (parsed.netloc + parsed.path) if parsed.netloc else parsed.path
        if not path:
            raise ValueError(f"STORE_URL has no file path: {url!r}")
        return JsonFileProductStore(path)
    raise ValueError(f"unsupported STORE_URL scheme: {url!r}")
