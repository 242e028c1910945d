import pytest

from mes_monitor.core.monitor.memory_reporter import MemoryReporter, windowed
from mes_monitor.core.monitor.types import ProcessQueryError, ProcessRecord

MB = 1024 * 1024


def _record(title="Main", handle=0x1234, memory=10 * MB, name="app"):
    return ProcessRecord(pid=1, name=name, working_set_bytes=memory, window_title=title, window_handle=handle)


@pytest.mark.parametrize(
    "title, handle, expected",
    [
        ("Main", 0x10, True),
        ("", 0x10, False),
        (None, 0x10, False),
        ("Main", 0, False),
    ],
)
def test_windowed_classification(title, handle, expected):
    assert _record(title=title, handle=handle).is_windowed is expected
    assert (windowed([_record(title=title, handle=handle)]) != []) is expected


@pytest.mark.parametrize(
    "memory, expected",
    [(104_857_600, 100.0), (157_286_400, 150.0), (1_572_864, 1.5), (1_000_000, 0.95)],
)
def test_memory_mb_rounds_to_two_places(memory, expected):
    assert _record(memory=memory).memory_mb() == expected


def test_unknown_working_set_raises():
    with pytest.raises(ProcessQueryError):
        _record(memory=None).memory_mb()


@pytest.mark.parametrize(
    "memory, alerts",
    [
        (104_847_115, 0),  # 99.99 MB
        (104_857_600, 0),  # exactly 100.0 MB
        (104_861_794, 0),  # 100.004 MB rounds to 100.0
        (104_868_086, 1),  # 100.01 MB
    ],
)
def test_alert_only_when_strictly_above_threshold(sink, memory, alerts):
    MemoryReporter(100, sink).report([_record(memory=memory)])
    assert len(sink.of("PROCESS_INFO")) == 1
    assert len(sink.of("MEMORY_ALERT")) == alerts


def test_routine_entry_is_aligned(sink):
    MemoryReporter(1000, sink).report([_record(name="notepad", memory=104_857_600)])
    assert sink.of("PROCESS_INFO") == [f"process: {'notepad':<20} memory: 100.0 MB"]


def test_alert_entry_names_process(sink):
    MemoryReporter(100, sink).report([_record(name="mes", memory=157_286_400)])
    assert sink.of("MEMORY_ALERT") == ["memory over threshold: mes (150.0MB)"]


def test_background_processes_are_not_reported(sink):
    count = MemoryReporter(0, sink).report([_record(title=None, handle=0), _record(handle=0)])
    assert count == 0
    assert sink.entries == []


def test_one_bad_process_does_not_stop_the_rest(sink):
    records = [
        _record(name="first"),
        _record(name="broken", memory=None),
        _record(name="last"),
    ]
    count = MemoryReporter(1000, sink).report(records)
    assert count == 2
    assert len(sink.of("PROCESS_INFO")) == 2
    events = sink.of("APP_EVENT")
    assert len(events) == 1
    assert events[0].startswith("failed to record process info:")
    assert "broken" in events[0]
