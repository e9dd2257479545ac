#!/usr/bin/env python3
"""
List attachments from a running API through the dashboard aggregator.

Usage:
    python scripts/list_attachments.py --search contrato --type project
    python scripts/list_attachments.py --client 3 --project 7 --category documents
    python scripts/list_attachments.py --delete project:7:42

API_BASE_URL (or --base-url) selects the server.
"""

import argparse
import asyncio
import sys
from pathlib import Path

project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from src.core.attachments.schemas import OwnerType
from src.core.config import settings
from src.core.logging_config import configure_logging
from src.dashboard.attachments import AttachmentAggregator, FilterCriteria, OwnerTab
from src.dashboard.client import ApiClient
from src.dashboard.file_types import FileCategory


def attachment_ref(value: str) -> tuple[OwnerType, int, int]:
    """Parse TYPE:OWNER_ID:ID, e.g. ``project:7:42``."""
    parts = value.split(":")
    if len(parts) != 3:
        raise argparse.ArgumentTypeError(f"expected TYPE:OWNER_ID:ID, got {value!r}")
    owner, owner_id, attachment_id = parts
    try:
        owner_type = OwnerType(owner.strip().lower())
    except ValueError:
        choices = ", ".join(t.value for t in OwnerType)
        raise argparse.ArgumentTypeError(f"unknown attachment type {owner!r} (choose from {choices})")
    try:
        return owner_type, int(owner_id), int(attachment_id)
    except ValueError:
        raise argparse.ArgumentTypeError(f"owner and attachment ids must be integers, got {value!r}")


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="List or delete attachments of clients, projects and tasks")
    parser.add_argument("--base-url", default=settings.api_base_url)
    parser.add_argument("--search", default="")
    parser.add_argument("--type", choices=[t.value for t in OwnerTab], default="all")
    parser.add_argument("--category", choices=[c.value for c in FileCategory], default="all")
    parser.add_argument("--client", type=int)
    parser.add_argument("--project", type=int)
    parser.add_argument("--page", type=int, default=1)
    parser.add_argument("--limit", type=int, default=20)
    parser.add_argument(
        "--delete", type=attachment_ref, metavar="TYPE:OWNER_ID:ID", help="Delete one attachment (asks to confirm)"
    )
    parser.add_argument("--yes", action="store_true", help="Do not ask for confirmation")
    parser.add_argument("--verbose", action="store_true")
    args = parser.parse_args(argv)
    if args.project is not None and args.client is None:
        parser.error("--project requires --client")
    return args


def confirm_on_terminal(record) -> bool:
    answer = input(f'Delete "{record.file_name}" from {record.owner_name}? [y/N] ')
    return answer.strip().lower() in ("y", "yes")


async def main() -> int:
    args = parse_args()
    configure_logging("DEBUG" if args.verbose else None)
    status = 0

    async with ApiClient(base_url=args.base_url) as api:
        aggregator = AttachmentAggregator(api)
        await aggregator.load()

        if args.delete:
            record = aggregator.find(*args.delete)
            if record is None:
                print("Attachment not found")
                return 1
            confirm = (lambda _record: True) if args.yes else confirm_on_terminal
            if not await aggregator.delete(record, confirm):
                status = 1
        else:
            criteria = FilterCriteria(
                search=args.search,
                owner_type=OwnerTab(args.type),
                category=FileCategory(args.category),
            ).select_client(args.client)
            if args.project is not None:
                criteria = criteria.select_project(args.project)

            result = aggregator.page(criteria, page=args.page, limit=args.limit)
            for item in result.items:
                print(
                    f"{item.uploaded_at:%Y-%m-%d %H:%M}  {item.type_label:<10} "
                    f"{item.owner_type.value:<8} {item.owner_name:<28} {item.file_name}"
                )
            print(f"\nPage {result.page}/{max(result.pages, 1)}, {result.total} file(s)")

        for notification in aggregator.notifier.items:
            print(f"[{notification.level.value}] {notification.title}: {notification.message}")
    return status


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
