from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any, List

from ..errors import StorageError

logger = logging.getLogger(__name__)


class LocalStorage:
    """
    On-device key-value store, one JSON file per key:

    - get / set / remove by key
    - every key lives under a namespace: <root>/<namespace>_<key>.json
    - set() replaces the whole value atomically (temp file + os.replace),
      so a failed write leaves the previous value on disk
    """

    def __init__(self, root: str, namespace: str = "edubot"):
        self.root = Path(root)
        self.namespace = namespace
        self.root.mkdir(parents=True, exist_ok=True)

    def _path(self, key: str) -> Path:
        return self.root / f"{self.namespace}_{key}.json"

    # --------- 基础读写 --------- #

    def get(self, key: str, default: Any = None) -> Any:
        """
        Load the value stored under key.
        Missing key → default.
        """
        path = self._path(key)
        if not path.exists():
            return default

        try:
            with path.open("r", encoding="utf-8") as f:
                return json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.error(f"❌ Failed to read {path}: {e}")
            raise StorageError(f"Cannot read '{key}' from {path}") from e

    def set(self, key: str, value: Any) -> None:
        """Replace the value stored under key."""
        path = self._path(key)
        tmp_name = None
        try:
            with tempfile.NamedTemporaryFile(
                "w",
                encoding="utf-8",
                dir=self.root,
                prefix=f".{path.name}.",
                suffix=".tmp",
                delete=False,
            ) as f:
                tmp_name = f.name
                json.dump(value, f, ensure_ascii=False, indent=2)
            os.replace(tmp_name, path)
        except (OSError, TypeError, ValueError) as e:
            logger.error(f"❌ Failed to write {path}: {e}")
            if tmp_name and os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise StorageError(f"Cannot write '{key}' to {path}") from e

    def remove(self, key: str) -> bool:
        path = self._path(key)
        try:
            path.unlink()
        except FileNotFoundError:
            return False
        except OSError as e:
            raise StorageError(f"Cannot remove '{key}' from {path}") from e
        return True

    def keys(self) -> List[str]:
        prefix = f"{self.namespace}_"
        return sorted(
            p.stem[len(prefix):]
            for p in self.root.glob(f"{prefix}*.json")
        )
