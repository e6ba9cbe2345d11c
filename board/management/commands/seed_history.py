"""Management command to load demo work-history tasks into the configured backend.

    python manage.py seed_history --staff demo
"""

import logging

from django.core.management.base import BaseCommand, CommandError

from board.backends import IdentityError, get_backend
from board.lifecycle import DayBoard

logger = logging.getLogger("board.management.seed_history")

DEMO_TASKS = [
    {"date": "2025-08-31", "task_name": "システム設計書作成", "start_hour": 9, "end_hour": 12, "wbs_code": "SYS-001"},
    {"date": "2025-08-31", "task_name": "データベース設計", "start_hour": 13, "end_hour": 17, "wbs_code": "DB-001"},
    {"date": "2025-08-25", "task_name": "API開発", "start_hour": 10, "end_hour": 15, "wbs_code": "API-001"},
    {"date": "2025-08-25", "task_name": "テスト実装", "start_hour": 15, "end_hour": 18, "wbs_code": "TEST-001"},
    {"date": "2025-07-30", "task_name": "要件定義書レビュー", "start_hour": 9, "end_hour": 11, "wbs_code": "REQ-001"},
    {"date": "2025-07-30", "task_name": "プロトタイプ開発", "start_hour": 13, "end_hour": 18, "wbs_code": "PROTO-001"},
]


class Command(BaseCommand):
    help = "Create completed demo tasks on past dates so the work-history view has data."

    def add_arguments(self, parser):
        parser.add_argument("--staff", help="Staff name to file the tasks under (default: the caller).")
        parser.add_argument("--token", help="Supabase access token to act as (live mode only).")

    def handle(self, *args, **options):
        backend = get_backend()
        try:
            identity = backend.resolve_identity(options.get("token"))
        except IdentityError as e:
            raise CommandError(str(e))

        staff_name = options.get("staff") or identity.display_name
        repo = backend.tasks(identity)
        boards: dict[str, DayBoard] = {}
        created = skipped = 0

        for demo in DEMO_TASKS:
            board = boards.get(demo["date"])
            if board is None:
                board = DayBoard(demo["date"], repo, owner_id=identity.user_id)
                loaded = board.load()
                if not loaded.ok:
                    raise CommandError(loaded.message)
                boards[demo["date"]] = board

            data = {k: v for k, v in demo.items() if k != "date"}
            result = board.create({**data, "staff_name": staff_name, "status": "completed"})
            if result.ok:
                created += 1
            else:
                skipped += 1
                self.stdout.write(f"Skipped {demo['date']} {demo['task_name']}: {result.message}")

        logger.info("Seeded history for %s: created %d, skipped %d", staff_name, created, skipped)
        self.stdout.write(f"Done — created {created} task(s), skipped {skipped}.")
