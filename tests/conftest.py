import time

import pytest

from rollscan.config import reset_config
from rollscan.models import RecognizedDocument
from rollscan.ocr import OCREngine, STATUS_LOADING, STATUS_RECOGNIZING


class FakeEngine(OCREngine):
    """In-memory engine returning canned text."""

    name = "fake"

    def __init__(self, text="", confidence=87.5, fail_with=None, init_error=None, init_delay=0.0):
        super().__init__()
        self.text = text
        self.confidence = confidence
        self.fail_with = fail_with
        self.init_error = init_error
        self.init_delay = init_delay
        self.init_calls = 0
        self.terminate_calls = 0
        self.whitelists = []

    def initialize(self):
        self.init_calls += 1
        if self.init_delay:
            time.sleep(self.init_delay)
        if self.init_error is not None:
            raise self.init_error
        self._initialized = True

    def recognize(self, image, logger=None, whitelist=None):
        self.whitelists.append(whitelist)
        self.report(logger, STATUS_LOADING, 0.0)
        self.report(logger, STATUS_LOADING, 1.0)
        self.report(logger, STATUS_RECOGNIZING, 0.0)
        self.report(logger, STATUS_RECOGNIZING, 0.5)
        if self.fail_with is not None:
            raise self.fail_with
        self.report(logger, STATUS_RECOGNIZING, 1.0)
        return RecognizedDocument.from_text(self.text, confidence=self.confidence, engine=self.name)

    def terminate(self):
        self.terminate_calls += 1
        super().terminate()


@pytest.fixture
def fake_engine():
    return FakeEngine


@pytest.fixture(autouse=True)
def clean_config():
    reset_config()
    yield
    reset_config()
