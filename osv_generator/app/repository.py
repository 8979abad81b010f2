"""OSV 엔트리 저장소(OSV entry repository)."""
from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Union

from common_lib.logger import get_logger

from .models import Entry

logger = get_logger(__name__)


class OSVRepository:
    """OSV JSON 파일 저장 레이어(Storage layer for OSV JSON files, one per id)."""

    def __init__(self, osv_dir: Union[str, Path]) -> None:
        self._dir = Path(osv_dir)

    def path_for(self, go_id: str) -> Path:
        """엔트리 파일 경로(Deterministic path <osv_dir>/<id>.json)."""

        return self._dir / f"{go_id}.json"

    def write(self, entry: Entry) -> Path:
        """엔트리 저장(Write an entry, replacing any previous file)."""

        path = self.path_for(entry.id)
        path.parent.mkdir(parents=True, exist_ok=True)
        tmp = path.with_suffix(".json.tmp")
        with tmp.open("w", encoding="utf-8") as f:
            json.dump(entry.to_json_dict(), f, indent=2, ensure_ascii=False)
            f.write("\n")
        os.replace(tmp, path)
        logger.info("Wrote OSV entry %s", path)
        return path

    def read(self, go_id: str) -> Entry:
        """엔트리 읽기(Read a previously written entry)."""

        with self.path_for(go_id).open("r", encoding="utf-8") as f:
            return Entry.model_validate(json.load(f))
