"""Tests for upload range math."""
import pytest

from onedrivepy.core.upload.ranges import (
    MAX_RANGE_SIZE,
    MIN_RANGE_SIZE,
    RANGE_SIZE_MULTIPLE,
    ByteRange,
    RangeChunkingStrategy,
    normalize_range_size,
)


class TestNormalizeRangeSize:
    """Test suite for normalize_range_size."""

    def test_constants(self):
        """Test OneDrive range constants."""
        assert RANGE_SIZE_MULTIPLE == 327680
        assert MIN_RANGE_SIZE == 327680
        assert MAX_RANGE_SIZE == 62914560

    def test_default(self):
        """Test None gives the minimum range size."""
        assert normalize_range_size() == 327680
        assert normalize_range_size(None) == 327680

    def test_exact_multiple_is_kept(self):
        """Test multiples of 320 KiB are used as is."""
        assert normalize_range_size(327680 * 10) == 3276800

    def test_rounds_down(self):
        """Test values are rounded down to a multiple."""
        assert normalize_range_size(655361) == 655360
        assert normalize_range_size(983039) == 655360

    @pytest.mark.parametrize("preference", [-5, 0, 1, 327679])
    def test_small_values_clamped_to_minimum(self, preference):
        """Test small and non-positive values use the minimum."""
        assert normalize_range_size(preference) == MIN_RANGE_SIZE

    def test_large_values_clamped_to_maximum(self):
        """Test values over 60 MiB use the maximum."""
        assert normalize_range_size(MAX_RANGE_SIZE + RANGE_SIZE_MULTIPLE) == MAX_RANGE_SIZE
        assert normalize_range_size(10 ** 12) == MAX_RANGE_SIZE

    def test_result_always_valid(self):
        """Test every result is an in-bounds multiple."""
        for preference in range(0, 70 * 1024 * 1024, 1234567):
            size = normalize_range_size(preference)
            assert size % RANGE_SIZE_MULTIPLE == 0
            assert MIN_RANGE_SIZE <= size <= MAX_RANGE_SIZE


class TestByteRange:
    """Test suite for ByteRange."""

    def test_content_range(self):
        """Test Content-Range header value."""
        byte_range = ByteRange.at(327680, 1, 327681)

        assert byte_range.content_range == 'bytes 327680-327680/327681'
        assert str(byte_range) == 'bytes 327680-327680/327681'
        assert byte_range.length == 1

    def test_first_range(self):
        """Test range starting at offset zero."""
        byte_range = ByteRange.at(0, 327680, 327681)

        assert byte_range.first == 0
        assert byte_range.last == 327679

    def test_empty_range_rejected(self):
        """Test zero length ranges are rejected."""
        with pytest.raises(ValueError):
            ByteRange.at(0, 0, 10)


class TestRangeChunkingStrategy:
    """Test suite for RangeChunkingStrategy."""

    @pytest.fixture
    def strategy(self):
        """Create strategy with the default range size."""
        return RangeChunkingStrategy()

    def test_empty_content(self, strategy):
        """Test empty content has no ranges."""
        assert strategy.calculate_ranges(0) == []
        assert strategy.count(0) == 0

    def test_negative_size(self, strategy):
        """Test negative size is rejected."""
        with pytest.raises(ValueError):
            strategy.calculate_ranges(-1)

    def test_one_byte_over(self, strategy):
        """Test a content one byte over the range size."""
        ranges = strategy.calculate_ranges(327681)

        assert [r.content_range for r in ranges] == [
            'bytes 0-327679/327681',
            'bytes 327680-327680/327681',
        ]

    def test_range_size_is_normalized(self):
        """Test the strategy normalizes its range size."""
        assert RangeChunkingStrategy(700000).range_size == 655360

    def test_ranges_cover_content(self):
        """Test ranges are contiguous and cover the content exactly."""
        strategy = RangeChunkingStrategy(655360)
        size = 5 * 1024 * 1024 + 17
        ranges = strategy.calculate_ranges(size)

        assert ranges[0].first == 0
        assert ranges[-1].last == size - 1
        for current, following in zip(ranges, ranges[1:]):
            assert following.first == current.last + 1
        assert all(r.length == 655360 for r in ranges[:-1])
        assert 0 < ranges[-1].length <= 655360
        assert sum(r.length for r in ranges) == size
        assert strategy.count(size) == len(ranges)
