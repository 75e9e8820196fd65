"""
Snapshot stores the game controller reads from and writes to
"""
import json
import os
from typing import Any, Dict, Optional

from go_state import SnapshotError

STORAGE_KEY = 'goGameState'


class JsonFileStore:
    """Keeps one JSON snapshot at <directory>/<key>.json"""

    def __init__(self, directory: str, key: str = STORAGE_KEY):
        self.directory = directory
        self.key = key

    @property
    def path(self) -> str:
        return os.path.join(self.directory, f"{self.key}.json")

    def load(self) -> Optional[Dict[str, Any]]:
        if not os.path.exists(self.path):
            return None
        try:
            with open(self.path, 'r', encoding='utf-8') as f:
                return json.load(f)
        except json.JSONDecodeError as e:
            raise SnapshotError(f"Unreadable snapshot {self.path}: {e}") from e

    def save(self, snapshot: Dict[str, Any]):
        os.makedirs(self.directory, exist_ok=True)
        tmp_path = self.path + '.tmp'
        with open(tmp_path, 'w', encoding='utf-8') as f:
            json.dump(snapshot, f)
        os.replace(tmp_path, self.path)

    def clear(self):
        if os.path.exists(self.path):
            os.remove(self.path)


class MemoryStore:
    """Holds the last snapshot in memory, encoded as JSON like the file store"""

    def __init__(self, snapshot: Optional[Dict[str, Any]] = None):
        self._data = json.dumps(snapshot) if snapshot is not None else None
        self.saves = 0

    def load(self) -> Optional[Dict[str, Any]]:
        if self._data is None:
            return None
        return json.loads(self._data)

    def save(self, snapshot: Dict[str, Any]):
        self._data = json.dumps(snapshot)
        self.saves += 1

    def clear(self):
        self._data = None
