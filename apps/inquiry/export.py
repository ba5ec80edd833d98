# apps/inquiry/export.py
from __future__ import annotations

import csv
import logging
import re
from typing import Callable, Iterable, Iterator, List, Optional, Sequence, Tuple

from django.http import StreamingHttpResponse
from django.utils import timezone
from django.utils.text import slugify

from .email import DELETED_PRODUCT
from .exceptions import ExportTooLarge
from .models import Inquiry
from .options import InquirySettings, product_lookup
from .status import status_label
from .store import InquiryStore

logger = logging.getLogger(__name__)

BOM = "\ufeff"

HEADER = [
    "Inquiry ID",
    "Date",
    "Status",
    "Product ID",
    "Product Title",
    "Sender Name",
    "Sender Email",
    "Sender Phone",
    "Message",
]

_LINE_BREAKS = re.compile(r"[\r\n]+")


class _Echo:
    """File-like that hands back whatever csv.writer writes to it."""

    def write(self, value):
        return value


def clean_message(value: str) -> str:
    return _LINE_BREAKS.sub("\n", value or "").strip()


def build_filename(site_name: str, count: int, now=None) -> str:
    stamp = (now or timezone.now()).strftime("%Y-%m-%d-%H%M%S")
    suffix = "bulk" if count > 1 else "single"
    return f"product-inquiries-{slugify(site_name)}-{suffix}-{stamp}.csv"


def csv_response(chunks: Iterable[str], filename: str) -> StreamingHttpResponse:
    resp = StreamingHttpResponse(chunks, content_type="text/csv; charset=utf-8")
    resp["Content-Disposition"] = f'attachment; filename="{filename}"'
    resp["Cache-Control"] = "no-cache"
    return resp


def _chunked(ids: Sequence, size: int) -> Iterator[Sequence]:
    for start in range(0, len(ids), size):
        yield ids[start:start + size]


class InquiryExporter:
    """
    Streams inquiries to CSV in fixed-size chunks.

    The size limit is checked before anything is produced, so an oversized
    request never yields a partial file. Each chunk is fetched, rendered and
    handed to the consumer before the next one is read.
    """

    def __init__(
        self,
        settings: InquirySettings,
        *,
        store: Optional[InquiryStore] = None,
        lookup: Optional[Callable] = None,
    ):
        self.settings = settings
        self.store = store or InquiryStore()
        self.lookup = lookup or product_lookup()

    @property
    def limit(self) -> int:
        return self.settings.export_limit

    @property
    def batch_size(self) -> int:
        return max(1, self.settings.export_batch_size)

    def check_limit(self, ids: Sequence) -> List:
        ids = list(ids)
        if len(ids) > self.limit:
            raise ExportTooLarge(requested=len(ids), limit=self.limit)
        return ids

    def stream(self, ids: Iterable) -> Iterator[str]:
        """Text chunks: BOM + header first, then one chunk per batch."""
        ids = self.check_limit(ids)
        return (text for text, _ in self._chunks(ids))

    def export_to_csv(self, ids: Iterable, sink) -> int:
        """Write to any object with `write(str)`; returns the number of data rows."""
        ids = self.check_limit(ids)
        written = 0
        for text, count in self._chunks(ids):
            sink.write(text)
            if hasattr(sink, "flush"):
                sink.flush()
            written += count
        return written

    def _chunks(self, ids: List) -> Iterator[Tuple[str, int]]:
        writer = csv.writer(_Echo(), lineterminator="\n")
        titles: dict = {}
        total = 0
        logger.info("inquiry export started: %s ids, batch size %s", len(ids), self.batch_size)
        try:
            yield BOM + writer.writerow(HEADER), 0
            for chunk in _chunked(ids, self.batch_size):
                found = self.store.fetch_many(chunk)
                lines = []
                for raw_id in chunk:
                    inquiry = found.get(_pk(raw_id))
                    if inquiry is None:
                        continue
                    lines.append(writer.writerow(self.row_for(inquiry, titles)))
                total += len(lines)
                yield "".join(lines), len(lines)
        except GeneratorExit:
            logger.info("inquiry export aborted by consumer after %s rows", total)
            raise
        logger.info("inquiry export finished: %s rows", total)

    def row_for(self, inquiry: Inquiry, titles: Optional[dict] = None) -> list:
        created = timezone.localtime(inquiry.created_at) if timezone.is_aware(inquiry.created_at) else inquiry.created_at
        return [
            inquiry.pk,
            created.strftime("%Y-%m-%d %H:%M:%S"),
            status_label(inquiry.status),
            inquiry.product_ref,
            self._title(inquiry.product_ref, titles if titles is not None else {}),
            inquiry.sender_name,
            inquiry.sender_email,
            inquiry.sender_phone,
            clean_message(inquiry.message),
        ]

    def _title(self, product_ref: str, cache: dict) -> str:
        if not product_ref:
            return ""
        if product_ref not in cache:
            info = self.lookup(product_ref)
            cache[product_ref] = info.title if info is not None else DELETED_PRODUCT
        return cache[product_ref]


def export_stats(settings: InquirySettings, store: Optional[InquiryStore] = None) -> dict:
    total = (store or InquiryStore()).count()
    return {
        "total": total,
        "limit": settings.export_limit,
        "batch_size": settings.export_batch_size,
        "can_export_all": total <= settings.export_limit,
    }


def _pk(value) -> Optional[int]:
    try:
        return int(value)
    except (TypeError, ValueError):
        return None
