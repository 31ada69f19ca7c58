import threading

import pytest

from rollscan.exceptions import EngineClosedError, OCRInitializationError
from rollscan.ocr import EngineHandle


def test_open_initializes_once(fake_engine):
    engine = fake_engine("x")
    handle = EngineHandle(engine)

    assert not handle.is_open
    assert handle.open() is engine
    assert handle.get() is engine
    assert handle.is_open
    assert engine.init_calls == 1


def test_concurrent_first_use_is_single_flight(fake_engine):
    engine = fake_engine("x", init_delay=0.05)
    handle = EngineHandle(engine)
    barrier = threading.Barrier(8)
    seen = []

    def worker():
        barrier.wait()
        seen.append(handle.open())

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert engine.init_calls == 1
    assert all(e is engine for e in seen)
    assert len(seen) == 8


def test_close_terminates_and_is_idempotent(fake_engine):
    engine = fake_engine("x")
    handle = EngineHandle(engine)
    handle.open()

    handle.close()
    handle.close()

    assert engine.terminate_calls == 1
    assert not handle.is_open
    assert not engine.is_initialized


def test_close_without_open_does_not_terminate(fake_engine):
    engine = fake_engine("x")
    EngineHandle(engine).close()

    assert engine.terminate_calls == 0


def test_reopen_after_close(fake_engine):
    engine = fake_engine("Ada Bola")
    handle = EngineHandle(engine)
    handle.open()
    handle.close()

    document = handle.recognize("a.png")

    assert document.text == "Ada Bola"
    assert engine.init_calls == 2


def test_closed_handle_without_reopen_raises(fake_engine):
    handle = EngineHandle(fake_engine("x"), reopen=False)
    handle.open()
    handle.close()

    with pytest.raises(EngineClosedError):
        handle.recognize("a.png")


def test_initialization_error_propagates_and_can_retry(fake_engine):
    engine = fake_engine("x", init_error=OCRInitializationError("missing language data"))
    handle = EngineHandle(engine)

    with pytest.raises(OCRInitializationError):
        handle.open()
    assert not handle.is_open

    engine.init_error = None
    handle.open()

    assert handle.is_open
    assert engine.init_calls == 2


def test_context_manager(fake_engine):
    engine = fake_engine("x")

    with EngineHandle(engine) as handle:
        assert handle.is_open
        assert handle.engine is engine

    assert engine.terminate_calls == 1
