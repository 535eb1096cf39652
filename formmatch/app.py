import argparse
import json
from contextlib import contextmanager
from pathlib import Path

from pipelines.matching.classifier import category_of, semantic_type
from pipelines.matching.clustering import cluster_fields
from pipelines.matching.config import CLUSTER_THRESHOLD
from storage.repositories.forms import FormRepository

from . import __version__
from .autofill import autofill, learn_form
from .database import get_session, init_database
from .env import get_settings, load_env, reset_settings
from .extraction import extract_forms
from .normalize import origin_of
from .fetch import fetch_page
from .logger import get_logger
from .retry import RetryError
from .schema import validate_store
from .storage import (
    build_export,
    load_store,
    save_store,
    statistics_from_export,
    stored_forms_from_export,
)

logger = get_logger()


def _is_url(source: str) -> bool:
    return source.startswith(("http://", "https://"))


def read_page(source: str, url: str = "") -> tuple:
    """Return ``(html, base_url)`` for a page given as a URL or an HTML file."""
    if _is_url(source):
        return fetch_page(source, timeout=get_settings().request_timeout), source
    path = Path(source)
    if not path.exists():
        raise SystemExit(f"Input file not found: {path}")
    return path.read_text(encoding="utf-8"), url or ""


def _page_forms(args: argparse.Namespace):
    html, base_url = read_page(args.source, getattr(args, "url", "") or "")
    origin = getattr(args, "origin", None) or origin_of(base_url) or "local"
    forms = extract_forms(html, base_url)
    if not forms:
        print("No forms found.")
    return origin, forms


@contextmanager
def open_repository(args: argparse.Namespace):
    db_path = Path(args.db) if getattr(args, "db", None) else get_settings().db_path
    init_database(db_path)
    session = get_session(db_path)
    try:
        yield FormRepository(session)
    finally:
        session.close()


def cmd_learn(args: argparse.Namespace) -> None:
    origin, forms = _page_forms(args)
    with open_repository(args) as repo:
        total = 0
        for form in forms:
            learned = learn_form(repo, origin, form)
            if learned:
                print(f"[learned] {origin}/{form.id} ({learned} fields)")
            else:
                print(f"[skip] {origin}/{form.id} has no filled fields")
            total += learned
    print(f"Done. forms={len(forms)} fields_learned={total}")


def cmd_fill(args: argparse.Namespace) -> None:
    origin, forms = _page_forms(args)
    plans = []
    with open_repository(args) as repo:
        for form in forms:
            plans.append(autofill(repo, form, origin).to_dict())
    print(json.dumps(plans, indent=2, ensure_ascii=False))
    if args.summary:
        logger.log_metrics_summary()


def cmd_classify(args: argparse.Namespace) -> None:
    _, forms = _page_forms(args)
    rules = get_settings().rules()
    for form in forms:
        print(f"Form: {form.id}")
        for field in form.fields:
            print(f"  {field.display_name()}: {category_of(field, rules).value} ({semantic_type(field)})")


def cmd_cluster(args: argparse.Namespace) -> None:
    _, forms = _page_forms(args)
    fields = [f for form in forms for f in form.fields]
    groups = cluster_fields(fields, rules=get_settings().rules(), threshold=args.threshold)
    for i, group in enumerate(groups, 1):
        print(f"Group {i}: " + ", ".join(f.display_name() for f in group))


def cmd_list(args: argparse.Namespace) -> None:
    with open_repository(args) as repo:
        forms = repo.load_forms()
    if not forms:
        print("No forms in store.")
        return
    for origin, by_id in forms.items():
        print(origin)
        for form_id, fields in by_id.items():
            print(f"  {form_id}: {len(fields)} fields")
            for field in fields:
                print(f"    - {field.display_name()} ({field.type or 'text'})")


def cmd_delete(args: argparse.Namespace) -> None:
    with open_repository(args) as repo:
        deleted = repo.delete_forms(args.origin, args.form_id)
    target = f"{args.origin}/{args.form_id}" if args.form_id else args.origin
    print(f"Deleted {deleted} fields from {target}")


def cmd_stats(args: argparse.Namespace) -> None:
    with open_repository(args) as repo:
        if args.reset:
            repo.reset_statistics()
            print("Statistics reset.")
            return
        stats = repo.get_statistics()
        stored = repo.count_fields()
    print(f"Forms detected: {stats['forms_detected']}")
    print(f"Forms filled:   {stats['forms_filled']}")
    print(f"Fields learned: {stats['fields_learned']}")
    print(f"Fields stored:  {stored}")
    print(f"Last used:      {stats['last_used'] or 'never'}")


def cmd_export(args: argparse.Namespace) -> None:
    with open_repository(args) as repo:
        document = build_export(repo.load_forms(), repo.get_statistics())
    save_store(Path(args.output), document)
    print(f"Exported {sum(len(v) for v in document['formData'].values())} forms to {args.output}")


def import_document(repo: FormRepository, document: dict) -> dict:
    """Load an export document into the repository, skipping invalid records."""
    forms, skipped = stored_forms_from_export(document)
    imported = 0
    for origin, by_id in forms.items():
        for form_id, fields in by_id.items():
            repo.save_form(origin, form_id, fields)
            imported += 1
    for key, count in statistics_from_export(document).items():
        repo.increment_statistic(key, count)
    return {"forms": imported, "skipped_records": skipped}


def cmd_import(args: argparse.Namespace) -> None:
    input_path = Path(args.input)
    if not input_path.exists():
        raise SystemExit(f"Input file not found: {input_path}")
    document = load_store(input_path, strict=True)
    if not isinstance(document, dict) or not isinstance(document.get("formData"), dict):
        raise SystemExit(f"Not a form export: {input_path}")
    for e in validate_store(document):
        print(f"[invalid] {e}")
    with open_repository(args) as repo:
        outcome = import_document(repo, document)
    print(f"Imported {outcome['forms']} forms (skipped {outcome['skipped_records']} invalid records)")


def _add_page_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("source", help="URL or path to a saved HTML page")
    parser.add_argument("--url", help="Page URL for a saved HTML file (resolves form actions and origin)")
    parser.add_argument("--origin", help="Override the origin the forms are stored under")


def _add_db_arg(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--db", help="Path to SQLite database (default: FORMMATCH_DB or data/formmatch.db)")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="formmatch", description="Learn filled forms and plan fills for new ones")
    parser.add_argument("--version", action="store_true", help="Show version")

    subparsers = parser.add_subparsers(dest="command")

    lrn = subparsers.add_parser("learn", help="Store the filled-in fields of every form on a page")
    _add_page_args(lrn)
    _add_db_arg(lrn)
    lrn.set_defaults(func=cmd_learn)

    fil = subparsers.add_parser("fill", help="Print a JSON fill plan for every form on a page")
    _add_page_args(fil)
    fil.add_argument("--summary", action="store_true", help="Log session metrics after the plan")
    _add_db_arg(fil)
    fil.set_defaults(func=cmd_fill)

    cls = subparsers.add_parser("classify", help="Show the category of every field on a page")
    _add_page_args(cls)
    cls.set_defaults(func=cmd_classify)

    clu = subparsers.add_parser("cluster", help="Group similar fields of a page")
    _add_page_args(clu)
    clu.add_argument("--threshold", type=float, default=CLUSTER_THRESHOLD,
                     help="Similarity a field must exceed to join a group (default: %(default)s)")
    clu.set_defaults(func=cmd_cluster)

    lst = subparsers.add_parser("list", help="List stored forms")
    _add_db_arg(lst)
    lst.set_defaults(func=cmd_list)

    dele = subparsers.add_parser("delete", help="Delete stored forms of an origin")
    dele.add_argument("origin", help="Origin (host name) whose forms to delete")
    dele.add_argument("--form-id", help="Delete only this form")
    _add_db_arg(dele)
    dele.set_defaults(func=cmd_delete)

    sts = subparsers.add_parser("stats", help="Show usage statistics")
    sts.add_argument("--reset", action="store_true", help="Reset all counters")
    _add_db_arg(sts)
    sts.set_defaults(func=cmd_stats)

    exp = subparsers.add_parser("export", help="Export stored forms and statistics to JSON")
    exp.add_argument("--output", required=True, help="Path of the JSON file to write")
    _add_db_arg(exp)
    exp.set_defaults(func=cmd_export)

    imp = subparsers.add_parser("import", help="Import a JSON export into the database")
    imp.add_argument("--input", required=True, help="Path to a JSON export")
    _add_db_arg(imp)
    imp.set_defaults(func=cmd_import)

    return parser


def main(argv=None):
    # Load .env if present (FORMMATCH_DB, FORMMATCH_LOG_LEVEL, etc.)
    load_env()
    reset_settings()
    logger.configure()
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.version:
        print(__version__)
        return

    if hasattr(args, "func"):
        try:
            args.func(args)
        except (ValueError, RetryError) as e:
            raise SystemExit(str(e))
        return

    parser.print_help()


if __name__ == "__main__":
    main()
