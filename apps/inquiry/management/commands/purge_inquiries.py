# apps/inquiry/management/commands/purge_inquiries.py
from django.core.management.base import BaseCommand, CommandError

from apps.inquiry.models import InquiryOptions
from apps.inquiry.store import InquiryStore


class Command(BaseCommand):
    help = "Delete every inquiry and its replies (uninstall clean-up). Requires --yes."

    def add_arguments(self, parser):
        parser.add_argument("--yes", action="store_true", help="Confirm the purge")
        parser.add_argument("--with-options", action="store_true", help="Also delete the stored inquiry options")

    def handle(self, *args, **opts):
        if not opts["yes"]:
            raise CommandError("This deletes all inquiries. Re-run with --yes to confirm.")

        deleted = InquiryStore().delete_all()
        self.stdout.write(self.style.SUCCESS(f"Deleted {deleted} inquiries"))

        if opts["with_options"]:
            removed, _ = InquiryOptions.objects.all().delete()
            self.stdout.write(self.style.SUCCESS(f"Deleted {removed} options row(s)"))
