"""취약점 리포트 도구 진입점(Vulnerability report tool entrypoint)."""
from __future__ import annotations

import argparse
import asyncio
import json
import sys
from typing import Any, Dict, Iterable, Optional

from dotenv import load_dotenv

from common_lib.ai_clients import ClaudeClient
from common_lib.config import get_settings, load_environment
from common_lib.logger import get_logger
from report_orchestrator import STATUS_FIXED, ProgressCallback, ReportOrchestrator
from src.core.context import FixOptions
from src.core.errors import PipelineError
from suggester.app.service import Suggester

# Load .env file at startup
load_dotenv()

logger = get_logger(__name__)


def _default_progress(step: str, message: str) -> None:
    """기본 진행 상황 콜백(Default progress callback)."""

    logger.info("[%s] %s", step, message)


def parse_args(argv: Optional[Iterable[str]] = None) -> argparse.Namespace:
    """커맨드라인 인자 파싱(Parse CLI arguments)."""

    parser = argparse.ArgumentParser(description="Go 취약점 리포트 변환/보정 도구(Go vulnerability report tool)")
    sub = parser.add_subparsers(dest="command", required=True)

    cve = sub.add_parser("cve", help="CVE JSON에서 리포트 생성(Create a report from a CVE JSON record)")
    cve.add_argument("file", help="CVE 4.0 또는 5.x JSON 파일(CVE 4.0 or 5.x JSON file)")
    cve.add_argument("--id", required=True, dest="report_id", help="리포트 ID(Report id, e.g. GO-2024-0001)")
    cve.add_argument("--module", default="", help="모듈 경로(Module path of the affected code)")

    fix = sub.add_parser("fix", help="리포트 자동 보정(Reconcile existing reports)")
    fix.add_argument("ids", nargs="+", help="리포트 ID 목록(Report ids)")
    fix.add_argument("-f", "--force", action="store_true", help="린트가 없어도 자동 수정(Autofix even without lint errors)")
    fix.add_argument("--skip-alias", action="store_true", help="별칭 검색 생략(Skip alias lookups)")
    fix.add_argument("--skip-symbols", action="store_true", help="심볼 갱신 생략(Skip symbol refresh)")
    fix.add_argument("--batch", action="store_true", help="문제를 노트로 기록(Record problems as notes)")

    osv = sub.add_parser("osv", help="OSV 엔트리 재생성(Regenerate OSV entries)")
    osv.add_argument("ids", nargs="+", help="리포트 ID 목록(Report ids)")

    suggest = sub.add_parser("suggest", help="AI 요약/설명 제안(Suggest summary and description)")
    suggest.add_argument("report_id", help="리포트 ID(Report id)")
    suggest.add_argument("-n", type=int, default=1, dest="max_tries", help="최대 시도 횟수(Maximum attempts)")
    suggest.add_argument("--apply", action="store_true", help="첫 제안을 저장(Apply the first suggestion)")

    return parser.parse_args(list(argv) if argv is not None else None)


def options_from_args(args: argparse.Namespace) -> FixOptions:
    return FixOptions(
        force=getattr(args, "force", False),
        skip_alias=getattr(args, "skip_alias", False),
        skip_symbols=getattr(args, "skip_symbols", False),
        add_notes=getattr(args, "batch", False),
    )


async def run_suggest(orchestrator: ReportOrchestrator, report_id: str, max_tries: int, apply: bool) -> Dict[str, Any]:
    report = orchestrator.reports.read(report_id)
    suggester = Suggester(ClaudeClient())
    suggestions = await suggester.suggest(report, max_tries=max_tries)
    if apply and suggestions:
        Suggester.apply(report, suggestions[0])
        orchestrator.reports.write(report)
    return {
        "id": report_id,
        "applied": bool(apply and suggestions),
        "suggestions": [s.model_dump() for s in suggestions],
    }


async def main_async(args: argparse.Namespace, progress_cb: ProgressCallback = _default_progress) -> int:
    """비동기 메인 루틴(Async main routine); returns the process exit code."""

    orchestrator = ReportOrchestrator(settings=get_settings(), options=options_from_args(args))
    try:
        if args.command == "cve":
            results = await orchestrator.create_from_cve(args.file, args.report_id, args.module, progress_cb)
        elif args.command == "fix":
            results = await orchestrator.fix_reports(args.ids, progress_cb)
        elif args.command == "osv":
            results = orchestrator.generate_osv(args.ids, progress_cb)
        else:
            output = await run_suggest(orchestrator, args.report_id, args.max_tries, args.apply)
            print(json.dumps(output, indent=2, ensure_ascii=False))
            return 0 if output["suggestions"] else 1
    except PipelineError as exc:
        logger.error("%s", exc)
        return 1

    print(json.dumps(results, indent=2, ensure_ascii=False))
    if args.command == "osv":
        failed = [rid for rid, out in results.items() if out != str(orchestrator.osv.path_for(rid))]
    else:
        failed = [rid for rid, status in results.items() if status != STATUS_FIXED]
    return 1 if failed else 0


def main() -> None:
    """동기 진입점(Synchronous entrypoint)."""

    load_environment()
    args = parse_args()
    sys.exit(asyncio.run(main_async(args)))


if __name__ == "__main__":
    main()
