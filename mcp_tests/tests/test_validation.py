import pytest

from core.errors import InvalidArgumentError, SizeExceededError
from core.models import ReadOptions
from core.validation import resolve_line_range, validate_read_options, validate_response_size


def test_validate_accepts_none_and_empty_options():
    validate_read_options(None)
    validate_read_options(ReadOptions())


@pytest.mark.parametrize(
    "options",
    [
        ReadOptions(start_line=10, max_lines=50),
        ReadOptions(start_line=1, end_line=300),
        ReadOptions(max_lines=300),
        ReadOptions(end_line=300),
        ReadOptions(start_line=4701, end_line=5000),
        ReadOptions(max_response_size=1024),
    ],
)
def test_validate_accepts_valid_options(options):
    validate_read_options(options)


@pytest.mark.parametrize(
    "options, message",
    [
        (ReadOptions(start_line=0), "start_line"),
        (ReadOptions(end_line=0), "end_line"),
        (ReadOptions(max_lines=0), "max_lines"),
        (ReadOptions(end_line=10, max_lines=5), "both"),
        (ReadOptions(start_line=10, end_line=9), ">= start_line"),
        (ReadOptions(max_lines=301), "300"),
        (ReadOptions(start_line=1, end_line=301), "300"),
        (ReadOptions(end_line=500), "300"),
        (ReadOptions(max_response_size=1023), "1024"),
    ],
)
def test_validate_rejects_invalid_options(options, message):
    with pytest.raises(InvalidArgumentError, match=message):
        validate_read_options(options)


def test_resolve_line_range_defaults_to_first_hundred_lines():
    assert resolve_line_range(None) == (1, 100)
    assert resolve_line_range(ReadOptions(start_line=10)) == (10, 109)


def test_resolve_line_range_with_max_lines_and_end_line():
    assert resolve_line_range(ReadOptions(start_line=10, max_lines=50)) == (10, 59)
    assert resolve_line_range(ReadOptions(start_line=3, end_line=7)) == (3, 7)
    assert resolve_line_range(ReadOptions(end_line=20)) == (1, 20)


def test_validate_response_size():
    validate_response_size("x" * 1024, 1024)
    with pytest.raises(SizeExceededError, match="exceeds MCP transport limit"):
        validate_response_size("x" * 1025, 1024)


def test_validate_response_size_counts_utf8_bytes():
    # 400 three-byte characters are 1200 bytes
    with pytest.raises(SizeExceededError):
        validate_response_size("€" * 400, 1024)
