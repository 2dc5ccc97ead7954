"""
tql command line.

    tql create --in data.csv --query "How much was transferred yesterday?"
    tql insert --file data.tql --facet context --data '{"key": "user_timezone", "value": "MST"}'
    tql update --file data.tql --facet meaning --index 2 --data '{"definition": "ISO 8601 UTC"}'
    tql delete --file data.tql --facet context --indices 1,2
    tql diff   --file data.tql [--from 0 --to 1] [--json]
    tql show   --file data.tql [--revision 1] [--json]
"""

from __future__ import annotations
import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Sequence

from .diff import diff_documents, render_diff_json, render_diff_markdown
from .document import Conversation, FacetName
from .errors import EmptyConversationError, InvalidPatchError, TqlError
from .format import generate_conversation, generate_document, read_conversation, write_text_atomic
from .operations import delete_row_in_file, delete_rows_in_file, insert_row_in_file, update_row_in_file
from .sources import create_conversation, create_document, parse_csv_text, read_csv
from .utils.config import Settings


logger = logging.getLogger(__name__)


FACET_CHOICES = ["data", *[f.value for f in FacetName]]


def _parse_data(raw: str) -> dict[str, str]:
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        raise InvalidPatchError(f"Invalid JSON in --data: {e}") from e
    if not isinstance(data, dict) or not all(isinstance(v, str) for v in data.values()):
        raise InvalidPatchError("--data must be a JSON object of string values")
    return data


def _parse_indices(raw: str) -> list[int]:
    try:
        return [int(part) for part in raw.split(",") if part.strip()]
    except ValueError:
        raise InvalidPatchError('Invalid indices format. Use comma-separated numbers (e.g. "1,2,3")') from None


def _emit(text: str) -> None:
    sys.stdout.write(text)
    if not text.endswith("\n"):
        sys.stdout.write("\n")


# =============================================================================
# Commands
# =============================================================================

def cmd_create(args: argparse.Namespace, settings: Settings) -> int:
    if args.input == "-":
        table = parse_csv_text(sys.stdin.read())
    else:
        table = read_csv(args.input, encoding=settings.encoding)

    conversation = create_conversation(create_document(table, query=args.query))

    if args.format == "json":
        content = conversation.model_dump_json(indent=2)
    else:
        content = generate_conversation(conversation)

    out = args.out
    if out is None and args.input != "-":
        out = str(Path(args.input).with_suffix(".json" if args.format == "json" else ".tql"))

    if out is None or out == "-":
        _emit(content)
        return 0

    write_text_atomic(out, content, encoding=settings.encoding)
    print(f"✓ Created {out}")
    print(f"  Format: {args.format.upper()}")
    print(f"  Documents: {conversation.document_count}")
    print(f"  Data rows: {len(table.rows)}")
    print(f"  Columns: {len(table.headers)}")
    if args.query:
        print(f'  Query: "{args.query}"')
    return 0


def cmd_insert(args: argparse.Namespace, settings: Settings) -> int:
    conversation = insert_row_in_file(args.file, args.facet, _parse_data(args.data), encoding=settings.encoding)
    facet = FacetName.parse(args.facet)
    index = len(conversation.latest.document.facet(facet))
    print(f"✓ Inserted row {index} into @{facet} in {args.file}")
    return 0


def cmd_update(args: argparse.Namespace, settings: Settings) -> int:
    update_row_in_file(args.file, args.facet, args.index, _parse_data(args.data), encoding=settings.encoding)
    print(f"✓ Updated row {args.index} in @{FacetName.parse(args.facet)} in {args.file}")
    return 0


def cmd_delete(args: argparse.Namespace, settings: Settings) -> int:
    facet = FacetName.parse(args.facet)
    if args.index is not None:
        delete_row_in_file(args.file, facet, args.index, encoding=settings.encoding)
        print(f"✓ Deleted 1 row from @{facet} in {args.file}")
    else:
        indices = _parse_indices(args.indices)
        delete_rows_in_file(args.file, facet, indices, encoding=settings.encoding)
        print(f"✓ Deleted {len(set(indices))} rows from @{facet} in {args.file}")
    return 0


def _resolve_revisions(conversation: Conversation, start: int | None, end: int | None) -> tuple[int, int]:
    revisions = [e.revision for e in conversation.documents]
    if not revisions:
        raise EmptyConversationError("Conversation has no documents to compare")
    if end is None:
        end = revisions[-1]
    if start is None:
        earlier = [r for r in revisions if r < end]
        start = earlier[-1] if earlier else end
    return start, end


def cmd_diff(args: argparse.Namespace, settings: Settings) -> int:
    conversation = read_conversation(args.file, encoding=settings.encoding)
    start, end = _resolve_revisions(conversation, args.start, args.end)
    try:
        before = conversation.get_revision(start).document
        after = conversation.get_revision(end).document
    except KeyError as e:
        raise TqlError(str(e.args[0])) from e

    diff = diff_documents(before, after)
    if args.json:
        _emit(json.dumps({"from": start, "to": end, **render_diff_json(diff)}, indent=2, ensure_ascii=False))
    else:
        color = False if args.no_color else settings.color_enabled()
        print(f"$diff[+{start}→+{end}]:")
        _emit(render_diff_markdown(diff, color_enabled=color))
    return 0


def cmd_show(args: argparse.Namespace, settings: Settings) -> int:
    conversation = read_conversation(args.file, encoding=settings.encoding)
    if args.revision is None:
        if args.json:
            _emit(conversation.model_dump_json(indent=2))
        else:
            _emit(generate_conversation(conversation))
        return 0

    try:
        entry = conversation.get_revision(args.revision)
    except KeyError as e:
        raise TqlError(str(e.args[0])) from e
    if args.json:
        _emit(entry.document.model_dump_json(indent=2))
    else:
        _emit(generate_document(entry.document))
    return 0


# =============================================================================
# Entry point
# =============================================================================

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="tql", description="Create and evolve TQL conversations.")
    sub = parser.add_subparsers(dest="command", required=True)

    create = sub.add_parser("create", help="Create a TQL conversation from a data source")
    create.add_argument("--source", choices=["csv"], default="csv", help="Source data format")
    create.add_argument("--in", dest="input", required=True, help='Input file path (use "-" to read from stdin)')
    create.add_argument("--out", help='Output file path (use "-" for stdout)')
    create.add_argument("--query", help="User query message to add to @query")
    create.add_argument("--format", choices=["tql", "json"], default="tql", help="Output format")
    create.set_defaults(handler=cmd_create)

    insert = sub.add_parser("insert", help="Append a row to a facet")
    insert.add_argument("--file", required=True, help="Path to the TQL file")
    insert.add_argument("-f", "--facet", required=True, choices=FACET_CHOICES)
    insert.add_argument("-d", "--data", required=True, help="Row data as a JSON object")
    insert.set_defaults(handler=cmd_insert)

    update = sub.add_parser("update", help="Update a row in a facet")
    update.add_argument("--file", required=True, help="Path to the TQL file")
    update.add_argument("-f", "--facet", required=True, choices=FACET_CHOICES)
    update.add_argument("-i", "--index", required=True, type=int, help="Index of the row to update (1-based)")
    update.add_argument("-d", "--data", required=True, help="Fields to update as a JSON object")
    update.set_defaults(handler=cmd_update)

    delete = sub.add_parser("delete", help="Delete row(s) from a facet")
    delete.add_argument("--file", required=True, help="Path to the TQL file")
    delete.add_argument("-f", "--facet", required=True, choices=FACET_CHOICES)
    target = delete.add_mutually_exclusive_group(required=True)
    target.add_argument("-i", "--index", type=int, help="Index of the row to delete (1-based)")
    target.add_argument("--indices", help='Comma-separated indices to delete (e.g. "1,2,3")')
    delete.set_defaults(handler=cmd_delete)

    diff = sub.add_parser("diff", help="Compare two revisions of a conversation")
    diff.add_argument("--file", required=True, help="Path to the TQL file")
    diff.add_argument("--from", dest="start", type=int, help="Earlier revision (default: the one before --to)")
    diff.add_argument("--to", dest="end", type=int, help="Later revision (default: the latest)")
    diff.add_argument("--json", action="store_true", help="Print the diff as JSON")
    diff.add_argument("--no-color", action="store_true", help="Disable terminal colours")
    diff.set_defaults(handler=cmd_diff)

    show = sub.add_parser("show", help="Print a conversation or one of its revisions")
    show.add_argument("--file", required=True, help="Path to the TQL file")
    show.add_argument("--revision", type=int, help="Revision to print (default: the whole conversation)")
    show.add_argument("--json", action="store_true", help="Print as JSON")
    show.set_defaults(handler=cmd_show)

    return parser


def main(argv: Sequence[str] | None = None) -> int:
    settings = Settings.from_env()
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.WARNING),
        format="%(levelname)s:%(name)s: %(message)s",
    )

    args = build_parser().parse_args(argv)
    try:
        return args.handler(args, settings)
    except (TqlError, OSError) as e:
        logger.debug("Command %s failed", args.command, exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
