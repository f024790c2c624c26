"""
Unit tests for the retention buffer
"""
import pytest

from HLP.log_analysis.retention_buffer import RetentionBuffer, DEFAULT_CAPACITY

from conftest import make_entry


class TestRetentionBuffer:
    """Test RetentionBuffer"""

    def test_default_capacity(self):
        """Test the default capacity"""
        buffer = RetentionBuffer()
        assert buffer.capacity == DEFAULT_CAPACITY == 10_000
        assert buffer.is_empty()
        assert len(buffer) == 0

    @pytest.mark.parametrize("capacity", [0, -1, 2.5, "10"])
    def test_rejects_invalid_capacity(self, capacity):
        """Test capacity must be a positive integer"""
        with pytest.raises(ValueError):
            RetentionBuffer(capacity)

    def test_evicts_oldest_when_full(self):
        """Test a buffer of 5 keeps the last 5 of 10 pushes in order"""
        buffer = RetentionBuffer(5)
        for i in range(10):
            buffer.push(make_entry(f"Message {i}"))

        assert len(buffer) == 5
        assert "Message 5" in buffer.get(0).message
        assert "Message 9" in buffer.get(4).message
        assert [e.message for e in buffer.all()] == [f"Message {i}" for i in range(5, 10)]

    def test_get_out_of_range(self):
        """Test out of range positions give None"""
        buffer = RetentionBuffer(3)
        buffer.push(make_entry("only"))

        assert buffer.get(1) is None
        assert buffer.get(-1) is None

    def test_last_n(self):
        """Test last_n returns the newest entries oldest first"""
        buffer = RetentionBuffer(10)
        for i in range(4):
            buffer.push(make_entry(f"m{i}"))

        assert [e.message for e in buffer.last_n(2)] == ["m2", "m3"]
        assert len(buffer.last_n(100)) == 4
        assert buffer.last_n(0) == []

    def test_get_range_is_clamped(self):
        """Test ranges past the end are clamped"""
        buffer = RetentionBuffer(4)
        for i in range(6):
            buffer.push(make_entry(f"m{i}"))

        assert [e.message for e in buffer.get_range(1, 100)] == ["m3", "m4", "m5"]
        assert buffer.get_range(3, 1) == []

    def test_clear(self):
        """Test clear empties the buffer and it can be reused"""
        buffer = RetentionBuffer(2)
        buffer.push(make_entry("a"))
        buffer.push(make_entry("b"))
        buffer.push(make_entry("c"))
        buffer.clear()

        assert buffer.is_empty()
        buffer.push(make_entry("d"))
        assert [e.message for e in buffer] == ["d"]

    def test_length_never_exceeds_capacity(self):
        """Test the size bound over many wraps"""
        buffer = RetentionBuffer(3)
        for i in range(50):
            buffer.push(make_entry(f"m{i}"))
            assert len(buffer) <= 3
        assert [e.message for e in buffer] == ["m47", "m48", "m49"]
