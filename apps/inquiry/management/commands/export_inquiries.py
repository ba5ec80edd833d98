# apps/inquiry/management/commands/export_inquiries.py
from pathlib import Path

from django.core.management.base import BaseCommand, CommandError

from apps.inquiry.exceptions import InquiryError
from apps.inquiry.export import InquiryExporter, build_filename
from apps.inquiry.options import InquirySettings
from apps.inquiry.services import export_all_ids


class Command(BaseCommand):
    help = "Write inquiries to a CSV file (UTF-8 with BOM). Use --ids or --all."

    def add_arguments(self, parser):
        group = parser.add_mutually_exclusive_group(required=True)
        group.add_argument("--ids", type=int, nargs="+", help="Inquiry ids, exported in the order given")
        group.add_argument("--all", action="store_true", help="Every inquiry, newest first")
        parser.add_argument("--output", help="Target file (default: generated name in the current directory)")

    def handle(self, *args, **opts):
        settings = InquirySettings.resolve()
        exporter = InquiryExporter(settings)

        try:
            ids = export_all_ids(settings=settings) if opts["all"] else opts["ids"]
            # fail on size before touching the filesystem
            ids = exporter.check_limit(ids)
        except InquiryError as exc:
            raise CommandError(exc.message)

        path = Path(opts["output"] or build_filename(settings.site_name, len(ids)))
        with path.open("w", encoding="utf-8", newline="") as sink:
            rows = exporter.export_to_csv(ids, sink)

        skipped = len(ids) - rows
        if skipped:
            self.stdout.write(self.style.WARNING(f"{skipped} id(s) not found; skipped"))
        self.stdout.write(self.style.SUCCESS(f"Exported {rows} inquiries to {path}"))
