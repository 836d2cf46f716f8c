"""
Result Storage

Append-only JSONL dataset for output records and a JSON key-value
store for the run summary.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

logger = logging.getLogger(__name__)

DATASET_FILE = Path('datasets') / 'default' / 'records.jsonl'
KEY_VALUE_STORE_DIR = Path('key_value_stores') / 'default'


class JsonlDataset:
    """Append-only record collection, one JSON object per line."""

    def __init__(self, path):
        self.path = Path(path)

    def push_record(self, record: Dict):
        """Append one record immediately."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, 'a', encoding='utf-8') as f:
            f.write(json.dumps(record, ensure_ascii=False) + '\n')

    def read_records(self) -> List[Dict]:
        if not self.path.exists():
            return []
        with open(self.path, encoding='utf-8') as f:
            return [json.loads(line) for line in f if line.strip()]


class JsonKeyValueStore:
    """Named JSON values stored as <directory>/<key>.json."""

    def __init__(self, directory):
        self.directory = Path(directory)

    def _path(self, key: str) -> Path:
        return self.directory / f"{key}.json"

    def set_value(self, key: str, value: Any):
        """Write value under key, replacing any previous value."""
        self.directory.mkdir(parents=True, exist_ok=True)
        path = self._path(key)
        tmp_path = path.with_suffix('.json.tmp')
        with open(tmp_path, 'w', encoding='utf-8') as f:
            json.dump(value, f, ensure_ascii=False, indent=2)
        tmp_path.replace(path)
        logger.info(f"Saved {key} to {path}")

    def get_value(self, key: str) -> Optional[Any]:
        path = self._path(key)
        if not path.exists():
            return None
        with open(path, encoding='utf-8') as f:
            return json.load(f)


def open_storage(storage_dir):
    """Default dataset and key-value store under a storage root directory."""
    root = Path(storage_dir)
    return JsonlDataset(root / DATASET_FILE), JsonKeyValueStore(root / KEY_VALUE_STORE_DIR)
