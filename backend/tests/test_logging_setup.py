import io
import logging
import sys

from smarttask.core.logging_setup import setup_logging


def _our_handlers():
    return [h for h in logging.getLogger().handlers if getattr(h, "_smarttask", False)]


def test_repeat_setup_follows_current_stderr(monkeypatch):
    root = logging.getLogger()
    before = list(root.handlers)
    old_level = root.level
    try:
        setup_logging("INFO")
        replacement = io.StringIO()
        monkeypatch.setattr(sys, "stderr", replacement)

        setup_logging("WARNING")

        handlers = _our_handlers()
        assert len(handlers) == 1
        assert handlers[0].stream is replacement
        assert handlers[0].level == logging.WARNING

        logging.getLogger("smarttask.test").warning("still writable")
        assert "still writable" in replacement.getvalue()
    finally:
        for h in _our_handlers():
            if h not in before:
                root.removeHandler(h)
        root.setLevel(old_level)
