from pathlib import Path

from django.core.management.base import BaseCommand, CommandError
from django.db import transaction

from apps.common.csv_import import parse_import_text
from apps.common.date_keys import DateKey
from apps.common.series import PERIOD_CHOICES, PERIOD_DAILY
from apps.stats import store
from apps.stats.exceptions import StatNotFound
from apps.stats.services import get_stat


class Command(BaseCommand):
    help = "Import date,value rows from a CSV or text file into one stat."

    def add_arguments(self, parser):
        parser.add_argument("stat_id", type=int)
        parser.add_argument("csv_path")
        parser.add_argument(
            "--period",
            choices=[value for value, _ in PERIOD_CHOICES],
            default=PERIOD_DAILY,
            help="Period type of the imported entries.",
        )

    @transaction.atomic
    def handle(self, *args, **options):
        try:
            stat = get_stat(options["stat_id"])
        except StatNotFound as exc:
            raise CommandError(exc.message) from exc
        if stat.is_composite:
            raise CommandError(f"{stat.name} is a composite stat and holds no entries.")

        path = Path(options["csv_path"])
        try:
            text = path.read_text(encoding="utf-8-sig")
        except OSError as exc:
            raise CommandError(f"Cannot read {path}: {exc}") from exc

        parsed = parse_import_text(text)
        result = store.bulk_import(
            stat,
            options["period"],
            [(DateKey(row.date), row.value) for row in parsed.rows],
        )
        skipped = result.skipped + parsed.skipped

        self.stdout.write(
            self.style.SUCCESS(
                f"Imported {result.imported} {options['period']} entries into {stat.name}."
            )
        )
        if skipped:
            self.stdout.write(self.style.WARNING(f"Skipped {skipped} rows."))
