import logging
import queue

from switchyard.ui_log import (
    LogBuffer,
    LogEvent,
    LogTap,
    get_log_tap,
    install_log_tap,
)


def make_record(msg, level=logging.INFO, name="test"):
    return logging.LogRecord(name, level, __file__, 1, msg, None, None)


def test_ring_evicts_oldest():
    b = LogBuffer(2)
    for i in range(3):
        b.push(LogEvent(ts_ms=i, level="info", target="t", message=str(i)))
    snap = b.snapshot()
    assert len(snap) == 2
    assert snap[0].message == "1"
    assert snap[1].message == "2"


def test_tap_broadcasts_to_subscribers():
    tap = LogTap(10, logging.INFO)
    rx = tap.subscribe()
    tap.emit(make_record("hi"))
    ev = rx.get_nowait()
    assert ev.message == "hi"
    assert len(tap.snapshot()) == 1


def test_tap_filters_below_level():
    tap = LogTap(10, logging.INFO)
    rx = tap.subscribe()
    tap.emit(make_record("quiet", level=logging.DEBUG))
    assert tap.snapshot() == []
    assert rx.empty()


def test_unsubscribed_queue_gets_nothing():
    tap = LogTap(10)
    rx = tap.subscribe()
    tap.unsubscribe(rx)
    tap.emit(make_record("hi"))
    assert rx.empty()
    assert [e.message for e in tap.snapshot()] == ["hi"]


def test_tap_as_logging_handler():
    tap = LogTap(10, logging.INFO)
    logger = logging.getLogger("switchyard.test.handler")
    logger.setLevel(logging.INFO)
    logger.propagate = False
    logger.addHandler(tap)
    try:
        logger.info("hello %s", "world")
    finally:
        logger.removeHandler(tap)
    (ev,) = tap.snapshot()
    assert ev.message == "hello world"
    assert ev.target == "switchyard.test.handler"
    assert ev.level == "INFO"
    assert ev.to_dict()["message"] == "hello world"


def test_lagging_subscriber_keeps_newest():
    tap = LogTap(10)
    rx = tap.subscribe()
    for i in range(rx.maxsize + 5):
        tap.emit(make_record(str(i)))
    assert rx.qsize() == rx.maxsize
    last = None
    while True:
        try:
            last = rx.get_nowait()
        except queue.Empty:
            break
    assert last.message == str(rx.maxsize + 4)


def test_install_is_once_only():
    tap = install_log_tap(16, logging.INFO)
    try:
        assert get_log_tap() is tap
        assert install_log_tap(99, logging.DEBUG) is tap
        assert tap in logging.getLogger().handlers
    finally:
        logging.getLogger().removeHandler(tap)