import logging
import sys
import os
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from biomcyl.logging_conf import LOG_FORMAT, EyeFilter


def test_eye_filter_fills_missing_field():
    record = logging.LogRecord("biomcyl", logging.INFO, __file__, 1, "hello", None, None)
    assert EyeFilter().filter(record)
    assert record.eye == "-"
    assert "[-] hello" in logging.Formatter(LOG_FORMAT).format(record)


def test_eye_filter_keeps_existing_field():
    record = logging.LogRecord("biomcyl", logging.INFO, __file__, 1, "hello", None, None)
    record.eye = "left"
    EyeFilter().filter(record)
    assert record.eye == "left"
