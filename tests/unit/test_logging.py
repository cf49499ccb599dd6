"""Structured logging tests."""

import pytest
import structlog

from stylebridge.core import Diagnostic, ErrorKind, LogContext, configure_logging
from stylebridge.core.logging_config import _render_diagnostics


@pytest.mark.unit
class TestLogContext:
    """Context binding."""

    def test_binds_and_unbinds(self):
        """Context exists only inside the scope."""
        with LogContext(document_id="doc_1"):
            assert structlog.contextvars.get_contextvars()["document_id"] == "doc_1"
        assert "document_id" not in structlog.contextvars.get_contextvars()

    def test_nested_scopes_restore(self):
        """Inner scopes restore the outer value on exit."""
        with LogContext(document_id="doc_1", element_type="Section"):
            with LogContext(element_type="Heading"):
                context = structlog.contextvars.get_contextvars()
                assert context == {"document_id": "doc_1", "element_type": "Heading"}
            assert structlog.contextvars.get_contextvars()["element_type"] == "Section"

    def test_none_skipped(self):
        """None values are not bound."""
        with LogContext(document_id=None, element_type="Div"):
            assert "document_id" not in structlog.contextvars.get_contextvars()


@pytest.mark.unit
class TestProcessors:
    """Event rendering."""

    def test_diagnostics_rendered(self):
        """Diagnostics become dicts."""
        diagnostic = Diagnostic(ErrorKind.OUT_OF_RANGE, "out_of_range", "too big", {"max": 1})
        event = _render_diagnostics(None, "warning", {"single": diagnostic, "many": (diagnostic,), "n": 3})
        assert event["single"]["kind"] == "OutOfRange"
        assert event["many"] == [diagnostic.to_dict()]
        assert event["n"] == 3

    def test_configure_json(self, capsys):
        """JSON mode writes to stderr only."""
        configure_logging("INFO", json_logs=True)
        structlog.get_logger("stylebridge.test").info("tree_built", nodes=2)
        out, err = capsys.readouterr()
        assert out == ""
        assert "tree_built" in err
