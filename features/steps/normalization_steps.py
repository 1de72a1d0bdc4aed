"""
Step definitions for DNS Records Normalizer scenarios.
"""

import csv
import io
from datetime import timedelta

from behave import given, when, then

from dns_records_normalizer.core.export_manager import ExportManager
from dns_records_normalizer.core.normalizer import normalize
from dns_records_normalizer.core.records import BASE_FIELDS, RawRecord
from dns_records_normalizer.exceptions import RecordExtractionError


@given('a raw "{record_type}" record for host "{host_name}" with payload')
def step_impl(context, record_type, host_name):
    """Create a raw record whose payload comes from the step table."""
    payload = {row["field"]: row["value"] for row in context.table}
    context.raw_records.append(
        RawRecord(
            distinguished_name=None,
            host_name=host_name,
            record_class="IN",
            record_type=record_type,
            type=None,
            record_data=payload,
        )
    )


@given("the record has a time to live of {seconds:d} seconds")
def step_impl(context, seconds):
    """Set the time to live of the last raw record."""
    last = context.raw_records.pop()
    context.raw_records.append(
        RawRecord(
            distinguished_name=last.distinguished_name,
            host_name=last.host_name,
            record_class=last.record_class,
            record_type=last.record_type,
            type=last.type,
            record_data=last.record_data,
            timestamp=last.timestamp,
            time_to_live=timedelta(seconds=seconds),
        )
    )


@given("a raw record without payload")
def step_impl(context):
    """Create a malformed raw record."""
    context.raw_records.append({"host_name": "broken", "record_type": "A"})


@given('a zone file for "{zone}"')
def step_impl(context, zone):
    """Write the zone file from the step text."""
    context.zone = zone
    context.zone_file = context.test_data_dir / f"{zone}.zone"
    lines = [line.strip() for line in context.text.splitlines()]
    context.zone_file.write_text("\n".join(lines) + "\n")


@when('I normalize the records for zone "{zone}" on server "{server}"')
def step_impl(context, zone, server):
    """Normalize the collected raw records, stopping at the first error."""
    try:
        for record in normalize(context.raw_records, zone, server):
            context.normalized.append(record)
    except RecordExtractionError as e:
        context.error = e


@when('I export the zone as "{fmt}" keeping only "{record_types}"')
def step_impl(context, fmt, record_types):
    """Export the zone file through the export manager."""
    manager = ExportManager({"default_provider": "bind", "server_name": context.test_server})
    output = io.StringIO()
    manager.export(
        context.zone,
        output=output,
        fmt=fmt,
        record_types=record_types.split(","),
        zone_file=str(context.zone_file),
    )
    output.seek(0)
    reader = csv.DictReader(output)
    context.export_header = reader.fieldnames
    context.export_rows = list(reader)


@then("{count:d} normalized record is produced")
@then("{count:d} normalized records are produced")
def step_impl(context, count):
    """Verify how many records were produced."""
    assert len(context.normalized) == count, f"Got {len(context.normalized)} records"


@then('record {index:d} has "{field}" set to "{value}"')
def step_impl(context, index, field, value):
    """Verify a field of a normalized record."""
    row = context.normalized[index - 1].to_dict()
    assert row.get(field) == value, f"{field} is {row.get(field)!r}"


@then('record {index:d} has no "{field}"')
def step_impl(context, index, field):
    """Verify a field is empty."""
    row = context.normalized[index - 1].to_dict()
    assert row.get(field) is None, f"{field} is {row.get(field)!r}"


@then('record {index:d} is a placeholder for server "{server}"')
def step_impl(context, index, server):
    """Verify a malformed record placeholder."""
    record = context.normalized[index - 1]
    assert record.malformed
    assert record.dns_server == server
    assert "fqdn" not in record.to_dict()


@then('the batch fails on the "{record_type}" record')
def step_impl(context, record_type):
    """Verify the batch stopped with an extraction error."""
    assert context.error is not None, "Expected the batch to fail"
    assert context.error.record_type == record_type


@then("the export header starts with the base fields")
def step_impl(context):
    """Verify the CSV column order."""
    assert context.export_header[: len(BASE_FIELDS)] == list(BASE_FIELDS)


@then("the export contains {count:d} rows")
def step_impl(context, count):
    """Verify the number of exported rows."""
    assert len(context.export_rows) == count, f"Got {len(context.export_rows)} rows"
