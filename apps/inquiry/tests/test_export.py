import csv
import io
from dataclasses import replace
from datetime import datetime, timezone as dt_timezone

import pytest

from apps.inquiry.exceptions import ExportTooLarge
from apps.inquiry.export import BOM, HEADER, InquiryExporter, build_filename, clean_message, export_stats
from apps.inquiry.models import Inquiry


def _rows(text):
    assert text.startswith(BOM)
    return list(csv.reader(io.StringIO(text[len(BOM):])))


class CountingSink(io.StringIO):
    def __init__(self):
        super().__init__()
        self.flushes = 0

    def flush(self):
        self.flushes += 1
        super().flush()


def _make(n, **fields):
    values = dict(product_ref="42", sender_name="Jo", sender_email="jo@x.com", message="Is this in stock?")
    values.update(fields)
    return [Inquiry.objects.create(**values) for _ in range(n)]


@pytest.mark.django_db
def test_missing_id_is_skipped_and_input_order_kept(product, inquiry_settings):
    first, second = _make(2)
    sink = io.StringIO()

    count = InquiryExporter(inquiry_settings).export_to_csv([second.pk, 99999, first.pk], sink)

    rows = _rows(sink.getvalue())
    assert count == 2
    assert rows[0] == HEADER
    assert [r[0] for r in rows[1:]] == [str(second.pk), str(first.pk)]


@pytest.mark.django_db
def test_row_columns(product, inquiry_settings):
    (obj,) = _make(1, sender_phone="555-0100", message="  Line one\r\n\r\nLine two\n\n\nLine three  ")
    Inquiry.objects.filter(pk=obj.pk).update(
        created_at=datetime(2025, 3, 1, 9, 30, 5, tzinfo=dt_timezone.utc), status="processed"
    )
    sink = io.StringIO()
    InquiryExporter(inquiry_settings).export_to_csv([obj.pk], sink)

    row = _rows(sink.getvalue())[1]
    assert row == [
        str(obj.pk),
        "2025-03-01 09:30:05",
        "Processed",
        "42",
        "Blue Mug",
        "Jo",
        "jo@x.com",
        "555-0100",
        "Line one\nLine two\nLine three",
    ]


@pytest.mark.django_db
def test_deleted_product_marker(product, inquiry_settings):
    (obj,) = _make(1, product_ref="31337")
    sink = io.StringIO()
    InquiryExporter(inquiry_settings).export_to_csv([obj.pk], sink)
    assert _rows(sink.getvalue())[1][4] == "(Product Deleted)"


@pytest.mark.django_db
def test_over_limit_writes_nothing(inquiry_settings):
    sink = io.StringIO()
    exporter = InquiryExporter(inquiry_settings)

    with pytest.raises(ExportTooLarge) as exc:
        exporter.export_to_csv(list(range(1, 5002)), sink)

    assert exc.value.requested == 5001
    assert exc.value.limit == 5000
    assert exc.value.as_dict()["requested"] == 5001
    assert sink.getvalue() == ""


@pytest.mark.django_db
def test_stream_checks_limit_before_yielding(inquiry_settings):
    exporter = InquiryExporter(replace(inquiry_settings, export_limit=2))
    # raised on the call itself, not on first iteration
    with pytest.raises(ExportTooLarge):
        exporter.stream([1, 2, 3])


@pytest.mark.django_db
def test_chunks_flush_once_per_batch(product, inquiry_settings, django_assert_max_num_queries):
    objs = _make(5)
    exporter = InquiryExporter(replace(inquiry_settings, export_batch_size=2))
    sink = CountingSink()

    # one fetch per batch plus a single product lookup thanks to the title cache
    with django_assert_max_num_queries(4):
        count = exporter.export_to_csv([o.pk for o in objs], sink)

    assert count == 5
    # header + 3 batches
    assert sink.flushes == 4


@pytest.mark.django_db
def test_stream_can_be_abandoned_midway(product, inquiry_settings):
    objs = _make(3)
    exporter = InquiryExporter(replace(inquiry_settings, export_batch_size=1))

    chunks = exporter.stream([o.pk for o in objs])
    header = next(chunks)
    first = next(chunks)
    chunks.close()

    assert header.startswith(BOM + "Inquiry ID,")
    assert first.startswith(str(objs[0].pk) + ",")
    with pytest.raises(StopIteration):
        next(chunks)


def test_clean_message():
    assert clean_message("\r\n a\r\rb \n") == "a\nb"
    assert clean_message("") == ""


def test_filename():
    when = datetime(2025, 3, 1, 9, 30, 5, tzinfo=dt_timezone.utc)
    assert build_filename("Blue Shop", 1, now=when) == "product-inquiries-blue-shop-single-2025-03-01-093005.csv"
    assert build_filename("Blue Shop", 3, now=when) == "product-inquiries-blue-shop-bulk-2025-03-01-093005.csv"


@pytest.mark.django_db
def test_export_stats(product, inquiry_settings):
    _make(3)
    stats = export_stats(replace(inquiry_settings, export_limit=2))
    assert stats == {"total": 3, "limit": 2, "batch_size": 100, "can_export_all": False}
