"""
Command-line client for the Ad Media Analyzer API.

Submits local videos and images for analysis and manages the local cache of
past results.

Usage:
    python analyze_media.py submit <file> [<file> ...] [--blob]
    python analyze_media.py list
    python analyze_media.py show <id>
    python analyze_media.py delete <id>
    python analyze_media.py clear

Configuration (environment or .env):
    API_BASE_URL, ALLOWED_API_KEYS (first key is sent), CACHE_PATH
"""
import argparse
import asyncio
import json
import logging
import sys

from app.client import AnalysisSubmitter, LocalStorage, ResultCache
from app.config import get_settings
from app.constants import AnalysisStatus
from app.models.analysis import AnalysisItem


def _open_cache() -> ResultCache:
    return ResultCache(LocalStorage(get_settings().cache_path))


def _summary(item: AnalysisItem) -> str:
    created = item.created_at.strftime("%Y-%m-%d %H:%M:%S")
    line = f"{item.id}  {created}  {item.type.value:<5}  {item.status.value:<10}  {item.file_name}"
    if item.status == AnalysisStatus.ERROR:
        line += f"  ({item.error})"
    elif item.result is not None and item.result.generated_ad_copy is not None:
        line += f"  \"{item.result.generated_ad_copy.headline}\""
    return line


def cmd_submit(args: argparse.Namespace) -> int:
    settings = get_settings()
    api_keys = sorted(settings.api_keys_set)
    submitter = AnalysisSubmitter(
        base_url=args.base_url or settings.api_base_url,
        cache=_open_cache(),
        api_key=api_keys[0] if api_keys else None,
        timeout=settings.request_timeout_seconds,
        use_blob_upload=args.blob,
    )

    def on_update(item: AnalysisItem) -> None:
        print(f"[{item.status.value.upper()}] {item.file_name}")

    items = asyncio.run(submitter.submit(args.files, on_update=on_update))
    if not items:
        print("[ERROR] No video or image files to analyze")
        return 1

    print()
    for item in items:
        print(_summary(item))
    return 0 if all(item.status == AnalysisStatus.COMPLETED for item in items) else 1


def cmd_list(args: argparse.Namespace) -> int:
    items = _open_cache().list_all()
    if not items:
        print("No saved analyses")
    for item in items:
        print(_summary(item))
    return 0


def cmd_show(args: argparse.Namespace) -> int:
    item = _open_cache().get(args.id)
    if item is None:
        print(f"[ERROR] No analysis with id {args.id}")
        return 1
    print(json.dumps(item.to_storage(), indent=2, ensure_ascii=False))
    return 0


def cmd_delete(args: argparse.Namespace) -> int:
    if not _open_cache().delete(args.id):
        print(f"[ERROR] No analysis with id {args.id}")
        return 1
    print(f"[INFO] Deleted {args.id}")
    return 0


def cmd_clear(args: argparse.Namespace) -> int:
    _open_cache().clear()
    print("[INFO] All saved analyses removed")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Analyze ad videos and images")
    parser.add_argument("--base-url", help="API base URL (default: API_BASE_URL)")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log client activity")
    subparsers = parser.add_subparsers(dest="command", required=True)

    submit = subparsers.add_parser("submit", help="Analyze one or more files")
    submit.add_argument("files", nargs="+")
    submit.add_argument("--blob", action="store_true", help="Upload through object storage first")
    submit.set_defaults(func=cmd_submit)

    subparsers.add_parser("list", help="List saved analyses").set_defaults(func=cmd_list)

    show = subparsers.add_parser("show", help="Print one saved analysis as JSON")
    show.add_argument("id")
    show.set_defaults(func=cmd_show)

    delete = subparsers.add_parser("delete", help="Delete one saved analysis")
    delete.add_argument("id")
    delete.set_defaults(func=cmd_delete)

    subparsers.add_parser("clear", help="Delete all saved analyses").set_defaults(func=cmd_clear)
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
