import re
import time

import pytest

from mes_monitor.core.event_log import EventLog, log_file_name

LINE = re.compile(r"^\[\d{4}-\d{2}-\d{2} \d{2}:\d{2}:\d{2}\] (.*)$")


@pytest.fixture
def event_log(tmp_path):
    log = EventLog(tmp_path / "logs", logger_prefix="tests.events")
    log.ensure_dir()
    yield log
    log.close()


def _today(category):
    return log_file_name(category, time.time())


def test_file_name_has_date_and_category():
    created = time.mktime((2024, 3, 5, 10, 0, 0, 0, 0, -1))
    assert log_file_name("MEMORY_ALERT", created) == "2024-03-05_memory_alert.txt"


def test_entries_are_partitioned_by_category(event_log, tmp_path):
    event_log.write("PROCESS_INFO", "process: mes memory: 1.0 MB")
    event_log.write("PROCESS_INFO", "process: scanner memory: 2.0 MB")
    event_log.write("MEMORY_ALERT", "memory over threshold: mes (150.0MB)")

    info = (tmp_path / "logs" / _today("PROCESS_INFO")).read_text(encoding="utf-8").splitlines()
    alerts = (tmp_path / "logs" / _today("MEMORY_ALERT")).read_text(encoding="utf-8").splitlines()
    assert [LINE.match(l).group(1) for l in info] == [
        "process: mes memory: 1.0 MB",
        "process: scanner memory: 2.0 MB",
    ]
    assert [LINE.match(l).group(1) for l in alerts] == ["memory over threshold: mes (150.0MB)"]
    assert not (tmp_path / "logs" / _today("APP_EVENT")).exists()


def test_app_events_are_echoed_to_stdout(event_log, capsys):
    event_log.write("APP_EVENT", "started mes")
    event_log.write("PROCESS_INFO", "process: mes memory: 1.0 MB")
    out = capsys.readouterr().out.splitlines()
    assert len(out) == 1
    assert LINE.match(out[0]).group(1) == "started mes"


def test_write_failure_goes_to_console(tmp_path, capsys):
    blocker = tmp_path / "not_a_dir"
    blocker.write_text("x", encoding="utf-8")
    log = EventLog(blocker, logger_prefix="tests.broken")
    try:
        log.write("PROCESS_INFO", "lost line")
    finally:
        log.close()
    assert "log write failed" in capsys.readouterr().out
