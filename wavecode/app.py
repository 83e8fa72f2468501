"""Command-line bootstrap."""

from __future__ import annotations

import argparse
from dataclasses import replace
import json
import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path
import sys

from wavecode import __version__
from wavecode.config.settings import AppSettings
from wavecode.core.batch import BatchRenderResult
from wavecode.core.codes import generate_unique_code_set, is_valid_format
from wavecode.core.issuer import (
    IssueResult,
    issue_book_pages,
    parse_audio_links,
    regenerate_book_images,
    regenerate_page,
    resolve_book_theme,
)
from wavecode.core.page_store import PageStore
from wavecode.errors import ErrorCode, WaveCodeError, format_error_for_user
from wavecode.render.renderer import render_wave_code
from wavecode.runtime_paths import builtin_themes_root, is_frozen, package_root
from wavecode.themes.constants import DEFAULT_THEME, MAX_PREVIEW_SAMPLES, PREVIEW_DPI
from wavecode.themes.loader import load_theme_config
from wavecode.themes.merge import merge_with_default
from wavecode.themes.models import ThemeConfig, ThemeValidationError
from wavecode.themes.registry import ThemeRegistry
from wavecode.themes.validation import validate_theme
from wavecode.workers.render_worker import RenderWorker

logger = logging.getLogger("wavecode")


def _configure_logger(settings: AppSettings) -> logging.Logger:
    if logger.handlers:
        return logger

    logger.setLevel(logging.INFO)
    handler = RotatingFileHandler(
        settings.log_dir / "wavecode.log",
        maxBytes=512_000,
        backupCount=3,
        encoding="utf-8",
    )
    handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(message)s"))
    logger.addHandler(handler)
    logger.propagate = False
    return logger


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="wavecode", description="Issue and render wave codes.")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    sub = parser.add_subparsers(dest="command", required=True)

    generate = sub.add_parser("generate", help="print fresh random codes")
    generate.add_argument("--count", type=int, default=1)

    render = sub.add_parser("render", help="render codes to PNG")
    render.add_argument("codes", nargs="+", metavar="CODE")
    _add_theme_options(render)
    render.add_argument("--preview", action="store_true", help="render at 72 DPI")
    render.add_argument("--out", type=Path, help="output file for a single code (default: <CODE>.png)")
    render.add_argument("--out-dir", type=Path, help="output directory for several codes")

    validate = sub.add_parser("validate-theme", help="check a theme file and list warnings")
    validate.add_argument("path", type=Path)

    sub.add_parser("presets", help="list available theme presets")

    issue = sub.add_parser("issue", help="issue codes for a book from a list of audio links")
    issue.add_argument("book_id")
    issue.add_argument("links_file", type=Path, help="one audio URL per line")
    _add_theme_options(issue)
    issue.add_argument("--out-dir", type=Path)

    theme = sub.add_parser("theme", help="show or change a book's stored theme")
    theme.add_argument("book_id")
    theme_group = _add_theme_options(theme)
    theme_group.add_argument("--reset", action="store_true", help="go back to the default theme")

    regenerate = sub.add_parser("regenerate", help="render a book's pages again under its theme")
    regenerate.add_argument("book_id")
    regenerate.add_argument("--codes", nargs="+", metavar="CODE", help="only these pages")
    regenerate.add_argument("--out-dir", type=Path)

    reissue = sub.add_parser("reissue", help="give one page a new code")
    reissue.add_argument("code")
    reissue.add_argument("--out-dir", type=Path)

    lookup = sub.add_parser("lookup", help="resolve a code to its page")
    lookup.add_argument("code")
    return parser


def _add_theme_options(parser: argparse.ArgumentParser) -> argparse._MutuallyExclusiveGroup:
    group = parser.add_mutually_exclusive_group()
    group.add_argument("--theme", type=Path, help="theme file (JSON or YAML)")
    group.add_argument("--preset", help="theme preset id")
    return group


def _load_registry(settings: AppSettings) -> ThemeRegistry:
    registry = ThemeRegistry(builtin_root=builtin_themes_root(), user_root=settings.user_themes_dir)
    registry.reload()
    errors = registry.load_errors()
    if errors:
        logger.warning("theme load warnings: %s", " | ".join(errors[:6]))
    return registry


def _resolve_theme(args: argparse.Namespace, settings: AppSettings) -> ThemeConfig:
    if args.theme is not None:
        return merge_with_default(load_theme_config(args.theme))
    registry = _load_registry(settings)
    preset_id = args.preset or settings.default_preset_id
    try:
        return registry.resolve(preset_id)
    except KeyError:
        if args.preset:
            raise WaveCodeError(ErrorCode.THEME_NOT_FOUND, details={"preset": preset_id}) from None
        logger.warning("default preset %r missing; using built-in default theme", preset_id)
        return DEFAULT_THEME


def _print_warnings(theme: ThemeConfig) -> None:
    for warning in validate_theme(theme):
        print(f"{warning.severity}: [{warning.type}] {warning.message}", file=sys.stderr)


def _book_dir(args: argparse.Namespace, settings: AppSettings, book_id: str) -> Path:
    out_dir = (args.out_dir or Path(settings.output_dir)) / book_id
    out_dir.mkdir(parents=True, exist_ok=True)
    return out_dir


def _result_rows(results: list[IssueResult], out_dir: Path) -> list[dict[str, object]]:
    rows = []
    for result in results:
        row: dict[str, object] = {
            "page_number": result.page_number,
            "code": result.code if result.success else "",
            "success": result.success,
        }
        if result.success and result.image is not None:
            image_path = out_dir / f"page-{result.page_number:04d}-{result.code}.png"
            image_path.write_bytes(result.image)
            row["image"] = str(image_path)
        else:
            row["error"] = result.error
        rows.append(row)
    return rows


def _render_with_worker(codes: list[str], theme: ThemeConfig, settings: AppSettings) -> BatchRenderResult:
    worker = RenderWorker(codes, theme, chunk_size=settings.render_batch_size)
    outcome: dict[str, object] = {}
    worker.progress.connect(
        lambda current, total, message: print(f"[{current}/{total}] {message}", file=sys.stderr)
    )
    worker.finished.connect(lambda result: outcome.setdefault("result", result))
    worker.error.connect(lambda message: outcome.setdefault("error", message))
    worker.run()
    if "error" in outcome:
        raise WaveCodeError(ErrorCode.RENDER_FAILED, message=str(outcome["error"]))
    return outcome["result"]


def _cmd_generate(args: argparse.Namespace, settings: AppSettings) -> int:
    if args.count < 1:
        print("--count must be at least 1", file=sys.stderr)
        return 2
    for code in sorted(generate_unique_code_set(args.count)):
        print(code)
    return 0


def _cmd_render(args: argparse.Namespace, settings: AppSettings) -> int:
    if len(args.codes) > 1 and args.out is not None:
        print("--out takes a single code; use --out-dir for several", file=sys.stderr)
        return 2
    theme = _resolve_theme(args, settings)
    if args.preview:
        theme = replace(theme, dimensions=replace(theme.dimensions, dpi=PREVIEW_DPI))
    _print_warnings(theme)

    if len(args.codes) == 1:
        code = args.codes[0]
        data = render_wave_code(code, theme)
        out = args.out or Path(f"{code.upper()}.png")
        out.parent.mkdir(parents=True, exist_ok=True)
        out.write_bytes(data)
        logger.info("rendered %s to %s", code.upper(), out)
        print(out)
        return 0

    out_dir = args.out_dir or Path(settings.output_dir)
    out_dir.mkdir(parents=True, exist_ok=True)
    result = _render_with_worker(args.codes, theme, settings)
    for outcome in result.outcomes:
        if outcome.image is None:
            print(f"{outcome.code}: {outcome.error}", file=sys.stderr)
            continue
        out = out_dir / f"{outcome.code.upper()}.png"
        out.write_bytes(outcome.image)
        print(out)
    logger.info("rendered %d of %d codes to %s", len(result.rendered), result.total, out_dir)
    return 0 if not result.failed else 1


def _cmd_validate_theme(args: argparse.Namespace, settings: AppSettings) -> int:
    theme = merge_with_default(load_theme_config(args.path))
    warnings = validate_theme(theme)
    print(
        json.dumps(
            {"themeConfig": theme.to_dict(), "warnings": [w.to_dict() for w in warnings]},
            indent=2,
        )
    )
    return 1 if any(w.severity == "error" for w in warnings) else 0


def _cmd_presets(args: argparse.Namespace, settings: AppSettings) -> int:
    registry = _load_registry(settings)
    for preset in registry.list_presets():
        origin = "builtin" if preset.is_builtin else "user"
        print(f"{preset.theme_id}\t{preset.name}\t{origin}")
    return 0


def _cmd_issue(args: argparse.Namespace, settings: AppSettings) -> int:
    pages, issues = parse_audio_links(args.links_file.read_text(encoding="utf-8"))
    if issues:
        for issue in issues:
            print(issue, file=sys.stderr)
        return 1
    if not pages:
        print("Audio links are required", file=sys.stderr)
        return 1

    out_dir = _book_dir(args, settings, args.book_id)
    with PageStore(settings.page_store_db_path) as store:
        explicit = args.theme is not None or args.preset is not None
        if not explicit and store.book_theme(args.book_id) is not None:
            theme = None
            _print_warnings(resolve_book_theme(store, args.book_id))
        else:
            theme = _resolve_theme(args, settings)
            _print_warnings(theme)
        results = issue_book_pages(
            store,
            args.book_id,
            pages,
            theme,
            max_attempts=settings.issue_max_attempts,
            chunk_size=settings.render_batch_size,
        )

    rows = _result_rows(results, out_dir)
    failed = sum(1 for row in rows if not row["success"])
    print(
        json.dumps(
            {
                "success": failed == 0,
                "total_pages": len(rows),
                "successful_pages": len(rows) - failed,
                "failed_pages": failed,
                "results": rows,
            },
            indent=2,
        )
    )
    return 0 if failed == 0 else 1


def _cmd_theme(args: argparse.Namespace, settings: AppSettings) -> int:
    registry = _load_registry(settings)
    with PageStore(settings.page_store_db_path) as store:
        if not store.book_exists(args.book_id):
            raise WaveCodeError(ErrorCode.BOOK_NOT_FOUND, details={"book_id": args.book_id})
        if args.reset:
            store.set_book_theme(args.book_id, None)
        elif args.theme is not None:
            store.set_book_theme(args.book_id, load_theme_config(args.theme))
        elif args.preset:
            preset = registry.get_preset(args.preset)
            if preset is None:
                raise WaveCodeError(ErrorCode.THEME_NOT_FOUND, details={"preset": args.preset})
            store.set_book_theme(args.book_id, preset.config)
        theme = resolve_book_theme(store, args.book_id)
        sample_codes = [page.code for page in store.book_pages(args.book_id)[:MAX_PREVIEW_SAMPLES]]

    print(
        json.dumps(
            {
                "book_id": args.book_id,
                "themeConfig": theme.to_dict(),
                "warnings": [w.to_dict() for w in validate_theme(theme)],
                "sample_codes": sample_codes,
                "presets": registry.preset_ids(),
            },
            indent=2,
        )
    )
    return 0


def _cmd_regenerate(args: argparse.Namespace, settings: AppSettings) -> int:
    with PageStore(settings.page_store_db_path) as store:
        results = regenerate_book_images(
            store,
            args.book_id,
            args.codes,
            chunk_size=settings.render_batch_size,
        )

    rows = _result_rows(results, _book_dir(args, settings, args.book_id))
    regenerated = sum(1 for row in rows if row["success"])
    print(
        json.dumps(
            {
                "success": regenerated == len(rows),
                "message": (
                    f"Regenerated {regenerated} of {len(rows)} pages"
                    if rows
                    else "No pages to regenerate"
                ),
                "regenerated": regenerated,
                "failed": len(rows) - regenerated,
                "results": rows,
            },
            indent=2,
        )
    )
    return 0 if regenerated == len(rows) else 1


def _cmd_reissue(args: argparse.Namespace, settings: AppSettings) -> int:
    with PageStore(settings.page_store_db_path) as store:
        result = regenerate_page(store, args.code, max_attempts=settings.issue_max_attempts)
        page = store.get(result.code) if result.success else None
    if page is None:
        print(result.error, file=sys.stderr)
        return 1

    rows = _result_rows([result], _book_dir(args, settings, page.book_id))
    print(
        json.dumps(
            {
                "book_id": page.book_id,
                "page_number": page.page_number,
                "old_code": args.code.upper(),
                "new_code": page.code,
                "image": rows[0]["image"],
            },
            indent=2,
        )
    )
    return 0


def _cmd_lookup(args: argparse.Namespace, settings: AppSettings) -> int:
    if not is_valid_format(args.code):
        print(json.dumps({"valid": False, "message": "Invalid code format"}))
        return 1
    with PageStore(settings.page_store_db_path) as store:
        found = store.lookup(args.code)
    if found is None:
        print(json.dumps({"valid": False, "message": "Code not found"}))
        return 1
    print(json.dumps(found.to_dict(), indent=2))
    return 0


_COMMANDS = {
    "generate": _cmd_generate,
    "render": _cmd_render,
    "validate-theme": _cmd_validate_theme,
    "presets": _cmd_presets,
    "issue": _cmd_issue,
    "theme": _cmd_theme,
    "regenerate": _cmd_regenerate,
    "reissue": _cmd_reissue,
    "lookup": _cmd_lookup,
}


def run_app(argv: list[str] | None = None, settings: AppSettings | None = None) -> int:
    """Parse arguments and run one command."""
    args = build_parser().parse_args(argv)
    settings = settings or AppSettings()
    _configure_logger(settings)
    logger.info("command=%s frozen=%s package_root=%s", args.command, is_frozen(), package_root())

    try:
        return _COMMANDS[args.command](args, settings)
    except (WaveCodeError, ThemeValidationError, OSError) as exc:
        logger.error("command %s failed: %s", args.command, exc)
        print(format_error_for_user(exc), file=sys.stderr)
        return 1
