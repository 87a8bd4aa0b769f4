"""Tests for log ingestion (audit_forensics.source)."""

import io

import pytest

import audit_forensics.source as source_module
from audit_forensics import Alert, LogEvent, LogEventSource, SessionRecord, TransferRecord, as_source
from audit_forensics.source import parse_int


@pytest.fixture
def messy_log(write_log):
    return write_log([
        (1, "u1", "s1", "LOGIN", "/a", 3, 100),
        "2,u1,s1,ACCESS,/b,high,200",
        "3,u1,s1",
        "",
        "4,u1,s1,LOGOUT,/c,1,",
    ])


def test_events_skip_malformed_rows(messy_log) -> None:
    source = LogEventSource(messy_log)
    events = list(source.events())

    assert [e.timestamp for e in events] == [1, 4]
    assert all(isinstance(e, LogEvent) for e in events)
    assert events[0] == LogEvent(1, "u1", "s1", "LOGIN", "/a", 3, 100)
    assert events[0].line_number == 2


def test_empty_byte_field_defaults_to_zero(messy_log) -> None:
    events = list(LogEventSource(messy_log).events())
    assert events[-1].bytes_transferred == 0


def test_parse_stats_count_skipped_rows(messy_log) -> None:
    source = LogEventSource(messy_log)
    list(source.events())

    assert source.stats.rows_read == 5
    assert source.stats.rows_yielded == 2
    assert source.stats.rows_skipped == 3
    assert source.stats.skipped == {"bad_number": 1, "short_row": 1, "blank": 1}


def test_session_records_ignore_numeric_fields(messy_log) -> None:
    """The 4-field view keeps rows the 7-field view rejects."""
    records = list(LogEventSource(messy_log).session_records())

    assert [r.action_type for r in records] == ["LOGIN", "ACCESS", "LOGOUT"]
    assert all(isinstance(r, SessionRecord) for r in records)
    assert records[1].timestamp == "2"


def test_session_records_drop_missing_required_fields(write_log) -> None:
    path = write_log([
        "1,,s1,LOGIN",
        "2,u1,,LOGIN",
        "3,u1,s1,",
        "4,u1,s1,LOGIN",
    ])
    source = LogEventSource(path)
    records = list(source.session_records())

    assert len(records) == 1
    assert records[0].line_number == 5
    assert source.stats.skipped["missing_field"] == 3


def test_session_view_accepts_four_columns(write_log) -> None:
    path = write_log(["abc,u1,s1,login"])
    records = list(LogEventSource(path).session_records())

    assert records == [SessionRecord("abc", "u1", "s1", "login")]
    assert records[0].is_login
    assert not records[0].is_logout


def test_fields_are_trimmed(write_log) -> None:
    path = write_log([" 7 , u1 , s1 , ACCESS , /a , 2 , 30 "])
    event = next(LogEventSource(path).events())
    assert event == LogEvent(7, "u1", "s1", "ACCESS", "/a", 2, 30)


def test_extra_columns_are_ignored(write_log) -> None:
    path = write_log(["1,u1,s1,ACCESS,/a,2,30,extra,columns"])
    event = next(LogEventSource(path).events())
    assert event.bytes_transferred == 30


def test_repeated_header_is_skipped(write_log) -> None:
    path = write_log([
        "TIMESTAMP,USER_ID,SESSION_ID,ACTION_TYPE,TARGET_RESOURCE,SEVERITY_LEVEL,BYTES_TRANSFERRED",
        (1, "u1", "s1", "LOGIN", "/a", 1, 0),
    ])
    source = LogEventSource(path)
    assert len(list(source.events())) == 1
    assert source.stats.skipped["header"] == 1


def test_header_only_log_yields_nothing(write_log) -> None:
    path = write_log([])
    assert list(LogEventSource(path).events()) == []
    assert list(LogEventSource(path).session_records()) == []


def test_empty_file_yields_nothing(tmp_path) -> None:
    path = tmp_path / "empty.csv"
    path.write_text("", encoding="utf-8")
    assert list(LogEventSource(path).events()) == []


def test_alerts_view_returns_alert_instances(session_log) -> None:
    alerts = list(LogEventSource(session_log).alerts())
    assert len(alerts) == 4
    assert all(isinstance(a, Alert) for a in alerts)


def test_missing_file_raises_on_first_read(missing_log) -> None:
    source = LogEventSource(missing_log)
    stream = source.events()
    with pytest.raises(FileNotFoundError):
        next(stream)


def test_each_pass_rereads_the_log(session_log) -> None:
    source = LogEventSource(session_log)
    assert len(list(source.events())) == 4
    assert len(list(source.events())) == 4


def test_handle_closed_on_early_termination(session_log, monkeypatch) -> None:
    opened = []

    def tracking_open(*args, **kwargs):
        handle = open(*args, **kwargs)
        opened.append(handle)
        return handle

    monkeypatch.setattr(source_module, "open", tracking_open, raising=False)

    stream = LogEventSource(session_log).events()
    next(stream)
    assert not opened[0].closed

    stream.close()
    assert opened[0].closed


def test_handle_closed_after_full_pass(session_log, monkeypatch) -> None:
    opened = []

    def tracking_open(*args, **kwargs):
        handle = open(*args, **kwargs)
        opened.append(handle)
        return handle

    monkeypatch.setattr(source_module, "open", tracking_open, raising=False)

    list(LogEventSource(session_log).session_records())
    assert len(opened) == 1
    assert opened[0].closed


def test_read_failure_propagates_and_closes_handle(session_log, monkeypatch) -> None:
    opened = []

    class FailingFile(io.StringIO):
        def __iter__(self):
            raise OSError("disk gone")

    def failing_open(*args, **kwargs):
        handle = FailingFile("HEADER\n")
        opened.append(handle)
        return handle

    monkeypatch.setattr(source_module, "open", failing_open, raising=False)

    with pytest.raises(OSError, match="disk gone"):
        list(LogEventSource(session_log).events())
    assert opened[0].closed


def test_interleaved_passes_keep_separate_stats(session_log) -> None:
    source = LogEventSource(session_log)
    events = source.events()
    next(events)

    list(source.session_records())
    assert source.stats.rows_yielded == 4
    assert source.stats.rows_read == 4

    assert len(list(events)) == 3
    assert source.stats.rows_yielded == 4
    assert source.stats.rows_read == 4


def test_unfinished_pass_leaves_stats_alone(session_log) -> None:
    source = LogEventSource(session_log)
    list(source.events())
    finished = source.stats

    stream = source.session_records()
    next(stream)
    stream.close()
    assert source.stats is finished


def test_session_view_keeps_repeated_header_row(write_log) -> None:
    """Only the first line is a header for the 4-field view."""
    path = write_log(["TIMESTAMP,USER_ID,SESSION_ID,ACTION_TYPE", "1,u1,s1,LOGIN"])
    records = list(LogEventSource(path).session_records())
    assert [r.session_id for r in records] == ["SESSION_ID", "s1"]


def test_transfers_view_ignores_other_numeric_columns(write_log) -> None:
    path = write_log([
        "1,u1,s1,COPY,/d,high,10",
        "2,u1,s1,COPY,/d,1,",
        "x,u1,s1,COPY,/d,1,5",
        "3,u1,s1,COPY,/d,1,many",
        "4,u1,s1",
    ])
    source = LogEventSource(path)
    records = list(source.transfers())

    assert records == [TransferRecord(1, 10), TransferRecord(2, 0)]
    assert source.stats.skipped == {"bad_number": 2, "short_row": 1}


def test_as_source_wraps_paths(session_log) -> None:
    source = LogEventSource(session_log)
    assert as_source(source) is source
    assert as_source(str(session_log)).path == session_log


@pytest.mark.parametrize("text", ["1_000", "1.5", "", "abc", "0x10"])
def test_parse_int_rejects_non_decimal(text: str) -> None:
    with pytest.raises(ValueError):
        parse_int(text)


def test_parse_int_range_checks() -> None:
    assert parse_int("+42") == 42
    assert parse_int("-9223372036854775808") == -2 ** 63
    with pytest.raises(ValueError):
        parse_int("9223372036854775808")
    with pytest.raises(ValueError):
        parse_int("2147483648", source_module.INT32_RANGE)


def test_out_of_range_severity_drops_row(write_log) -> None:
    path = write_log([
        (1, "u1", "s1", "ACCESS", "/a", 2147483648, 0),
        (2, "u1", "s1", "ACCESS", "/a", 2147483647, 0),
    ])
    events = list(LogEventSource(path).events())
    assert [e.timestamp for e in events] == [2]
