import logging
import signal
import threading

from mes_monitor.core.event_log import EventLog
from mes_monitor.core.logging_ import setup_logging
from mes_monitor.core.monitor.process_monitor import ProcessMonitor
from mes_monitor.core.monitor.psutil_capability import PsutilProcessCapability
from mes_monitor.core.monitor.windows import windows_available
from mes_monitor.shared.store import ConfigStore

log = logging.getLogger(__name__)

# Shutdown waits this many poll intervals (at least 5 s) for the running cycle
SHUTDOWN_GRACE_INTERVALS = 3


def shutdown(monitor: ProcessMonitor, grace_s: float) -> bool:
    """Stop scheduling and wait a bounded time for the in-flight cycle."""
    monitor.stop()
    if monitor.join(timeout=grace_s):
        return True
    # the scheduler thread is a daemon, so exiting here abandons a hung cycle
    log.warning("Monitor cycle still running after %.1f s, exiting anyway", grace_s)
    return False


def main() -> None:
    setup_logging()

    store = ConfigStore()
    cfg = store.load()

    sink = EventLog(cfg.log_path)
    sink.ensure_dir()
    monitor = ProcessMonitor(cfg, PsutilProcessCapability(), sink)

    stop_evt = threading.Event()

    def signal_handler(sig, frame):
        print("\nReceived stop signal, shutting down...")
        stop_evt.set()

    signal.signal(signal.SIGINT, signal_handler)
    if hasattr(signal, "SIGTERM"):
        signal.signal(signal.SIGTERM, signal_handler)
    if hasattr(signal, "SIGBREAK"):
        signal.signal(signal.SIGBREAK, signal_handler)

    if not windows_available():
        print("Window information unavailable on this platform; memory reporting is disabled.")

    monitor.start()
    print(f"Monitoring started (config: {store.path()}, logs: {cfg.log_path}). Press Ctrl+C to stop.")

    # Event.wait with a timeout keeps the main thread responsive to signals on Windows
    while not stop_evt.wait(0.5):
        pass

    shutdown(monitor, max(5.0, SHUTDOWN_GRACE_INTERVALS * cfg.check_interval_seconds))
    sink.close()


if __name__ == "__main__":
    main()
