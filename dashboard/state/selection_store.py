from __future__ import annotations

import json
import logging
import os
from pathlib import Path

logger = logging.getLogger(__name__)

DEFAULT_SELECTION_PATH = os.path.join("~", ".gantt_planner", "selection.json")
KEY_PREFIX = "gantt_sel_"


def selection_key(project_id: str) -> str:
    return f"{KEY_PREFIX}{project_id}"


class SelectionStore:
    def __init__(self, path: str | os.PathLike | None = None):
        raw = path or os.getenv("GANTT_SELECTION_PATH") or DEFAULT_SELECTION_PATH
        self.path = Path(raw).expanduser()

    def _read(self) -> dict:
        if not self.path.exists():
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as handle:
                payload = json.load(handle)
        except (OSError, ValueError) as exc:
            logger.warning("Ignoring unreadable selection file %s: %s", self.path, exc)
            return {}
        return payload if isinstance(payload, dict) else {}

    def load(self, project_id: str) -> list[str] | None:
        saved = self._read().get(selection_key(project_id))
        if not isinstance(saved, list):
            return None
        return [str(item) for item in saved]

    def save(self, project_id: str, topic_ids) -> None:
        payload = self._read()
        payload[selection_key(project_id)] = sorted(str(item) for item in topic_ids)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        with open(tmp_path, "w", encoding="utf-8") as handle:
            json.dump(payload, handle, ensure_ascii=False)
        os.replace(tmp_path, self.path)

    def forget(self, project_id: str) -> None:
        payload = self._read()
        if payload.pop(selection_key(project_id), None) is not None:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.path, "w", encoding="utf-8") as handle:
                json.dump(payload, handle, ensure_ascii=False)
