"""Tests for per-unit error isolation."""

import pytest

from quillpress.engine.isolation import Degraded, Ok, collect_blocks, isolate
from quillpress.exceptions import CorruptArchiveError, FormatError, UnitParseError
from quillpress.models.blocks import ErrorMarker, Paragraph


def failing(message):
    raise UnitParseError(message)


class TestIsolate:
    def test_success_is_ok(self):
        result = isolate("unit", lambda value: value * 2, 21)
        assert result == Ok(42)

    def test_failure_is_degraded(self):
        result = isolate("sheet 3", failing, "bad cell")
        assert isinstance(result, Degraded)
        assert result.unit == "sheet 3"
        assert result.marker == ErrorMarker("bad cell")
        assert isinstance(result.error, UnitParseError)

    def test_plain_exceptions_are_degraded(self):
        result = isolate("slide 1", lambda: {}["missing"])
        assert isinstance(result, Degraded)

    def test_message_falls_back_to_type_name(self):
        def boom():
            raise RuntimeError()

        assert isolate("unit", boom).marker.message == "RuntimeError"

    @pytest.mark.parametrize("error", [CorruptArchiveError("broken"), FormatError("wrong")])
    def test_fatal_errors_propagate(self, error):
        def fatal():
            raise error

        with pytest.raises(type(error)):
            isolate("unit", fatal)

    def test_keyword_arguments_are_passed(self):
        assert isolate("unit", lambda *, name: name, name="x") == Ok("x")


class TestCollectBlocks:
    def test_ok_blocks(self):
        blocks = [Paragraph.from_text("a")]
        assert collect_blocks(Ok(blocks)) == blocks

    def test_degraded_becomes_marker(self):
        result = isolate("unit", failing, "oops")
        assert collect_blocks(result) == [ErrorMarker("oops")]

    def test_unexpected_result(self):
        with pytest.raises(TypeError):
            collect_blocks("not a result")
