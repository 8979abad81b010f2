"""리포트 YAML 저장소(YAML report repository)."""
from __future__ import annotations

import os
from pathlib import Path
from typing import List, Union

import yaml
from pydantic import ValidationError

from common_lib.logger import get_logger
from src.core.data.report import Report
from src.core.errors import PipelineError

logger = get_logger(__name__)


class ReportNotFound(PipelineError):
    """리포트 파일 없음(Report file does not exist)."""

    def __init__(self, report_id: str, path: Path):
        self.report_id = report_id
        self.path = path
        super().__init__(f"report {report_id} not found at {path}")


class ReportRepository:
    """리포트 저장 레이어(Storage layer for reports, one YAML file per id)."""

    def __init__(self, reports_dir: Union[str, Path]) -> None:
        self._dir = Path(reports_dir)

    def path_for(self, report_id: str) -> Path:
        return self._dir / f"{report_id}.yaml"

    def exists(self, report_id: str) -> bool:
        return self.path_for(report_id).exists()

    def read(self, report_id: str) -> Report:
        """리포트 읽기(Load a report by id)."""

        path = self.path_for(report_id)
        if not path.exists():
            raise ReportNotFound(report_id, path)
        with path.open("r", encoding="utf-8") as f:
            try:
                data = yaml.safe_load(f) or {}
            except yaml.YAMLError as exc:
                raise PipelineError(f"{path}: invalid YAML: {exc}") from exc
        try:
            return Report.model_validate(data)
        except ValidationError as exc:
            raise PipelineError(f"{path}: invalid report: {exc}") from exc

    def write(self, report: Report) -> Path:
        """리포트 저장(Write a report, replacing any previous file)."""

        path = self.path_for(report.id)
        path.parent.mkdir(parents=True, exist_ok=True)
        tmp = path.with_suffix(".yaml.tmp")
        with tmp.open("w", encoding="utf-8") as f:
            yaml.safe_dump(
                report.to_document(),
                f,
                sort_keys=False,
                allow_unicode=True,
                default_flow_style=False,
                width=80,
            )
        os.replace(tmp, path)
        logger.info("Wrote report %s", path)
        return path

    def list_ids(self) -> List[str]:
        """저장된 리포트 ID 목록(Ids of all stored reports, sorted)."""

        if not self._dir.exists():
            return []
        return sorted(p.stem for p in self._dir.glob("*.yaml"))
