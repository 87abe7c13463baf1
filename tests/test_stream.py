import pytest

from bunster.stream import (
    STREAM_FLAG_APPEND,
    STREAM_FLAG_READ,
    STREAM_FLAG_WRITE,
    Buffer,
    StreamError,
    StreamManager,
    new_buffered_stream,
    new_pipe,
)


def test_buffer_write_then_read():
    buf = Buffer()
    assert buf.write(b"hello") == len(b"hello")
    assert buf.read() == b"hello"
    assert buf.read() == b""


def test_buffer_partial_read_consumes():
    buf = Buffer("abcdef")
    assert buf.read(2) == b"ab"
    assert buf.string() == "cdef"


def test_buffer_string_trims_trailing_newlines():
    buf = Buffer("line\n\n\n")
    assert buf.string(True) == "line"
    assert buf.string(False) == "line\n\n\n"


def test_readonly_buffer_rejects_writes():
    buf = Buffer("data", readonly=True)
    with pytest.raises(StreamError, match="cannot write to read-only stream"):
        buf.write(b"x")
    assert buf.read() == b"data"


def test_closed_buffer_errors():
    buf = Buffer("data")
    buf.close()
    with pytest.raises(StreamError, match="cannot close closed stream"):
        buf.close()
    with pytest.raises(StreamError, match="cannot read from closed stream"):
        buf.read()
    with pytest.raises(StreamError, match="cannot write to closed stream"):
        buf.write(b"x")


def test_get_unknown_descriptor():
    sm = StreamManager()
    with pytest.raises(StreamError, match='file descriptor "3" is not open'):
        sm.get("3")


def test_add_and_get_returns_same_stream():
    sm = StreamManager()
    buf = Buffer()
    sm.add("1", buf)
    assert sm.get("1") is buf


def test_duplicate_points_to_same_stream():
    sm = StreamManager()
    buf = Buffer()
    sm.add("1", buf)
    sm.duplicate("2", "1")
    assert sm.get("2") is buf
    sm.close("1")
    assert sm.get("2") is buf


def test_duplicate_and_close_bad_descriptor():
    sm = StreamManager()
    with pytest.raises(StreamError, match="trying to duplicate bad file descriptor: 9"):
        sm.duplicate("1", "9")
    with pytest.raises(StreamError, match="trying to close bad file descriptor: 9"):
        sm.close("9")


def test_closed_descriptor_fails_but_stream_survives():
    sm = StreamManager()
    buf = Buffer()
    sm.add("1", buf)
    sm.close("1")
    with pytest.raises(StreamError):
        sm.get("1").write(b"x")
    assert buf.write(b"ok") == len(b"ok")


def test_closing_clone_leaves_parent_intact():
    sm = StreamManager()
    buf = Buffer()
    sm.add("1", buf)
    copy = sm.clone()
    assert copy.get("1") is buf
    copy.close("1")
    assert sm.get("1") is buf


def test_open_standard_device_requires_descriptor():
    sm = StreamManager()
    with pytest.raises(StreamError, match='file descriptor "1" is not open'):
        sm.open_stream("/dev/stdout", STREAM_FLAG_WRITE)
    buf = Buffer()
    sm.add("1", buf)
    sm.add("5", sm.open_stream("/dev/stdout", STREAM_FLAG_WRITE))
    assert sm.get("5") is buf


def test_open_file_write_append_read(tmp_path):
    path = str(tmp_path / "out.txt")
    sm = StreamManager()
    with sm.open_stream(path, STREAM_FLAG_WRITE) as f:
        f.write(b"first\n")
    with sm.open_stream(path, STREAM_FLAG_APPEND) as f:
        f.write(b"second\n")
    with sm.open_stream(path, STREAM_FLAG_READ) as f:
        assert f.read() == b"first\nsecond\n"


def test_open_missing_file_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        StreamManager().open_stream(str(tmp_path / "missing"), STREAM_FLAG_READ)


def test_destroy_closes_added_streams():
    buf = Buffer()
    with StreamManager() as sm:
        sm.add("1", buf)
    with pytest.raises(StreamError):
        buf.close()


def test_pipe_round_trip():
    reader, writer = new_pipe()
    writer.write(b"through the pipe")
    writer.close()
    assert reader.read() == b"through the pipe"
    reader.close()


def test_buffered_stream_yields_text():
    reader = new_buffered_stream("payload")
    assert reader.read() == b"payload"
    reader.close()