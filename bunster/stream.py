"""File-descriptor style streams: in-memory buffers, pipes and a descriptor table."""

from __future__ import annotations

import os
import threading
from typing import Protocol, runtime_checkable

STREAM_FLAG_READ = os.O_RDONLY
STREAM_FLAG_WRITE = os.O_WRONLY | os.O_CREAT | os.O_TRUNC
STREAM_FLAG_RW = os.O_RDWR | os.O_CREAT
STREAM_FLAG_APPEND = os.O_WRONLY | os.O_APPEND | os.O_CREAT

_STANDARD_DEVICES = {"/dev/stdin": "0", "/dev/stdout": "1", "/dev/stderr": "2"}


class StreamError(OSError):
    """Raised on an invalid operation on a stream or a file descriptor."""


@runtime_checkable
class Stream(Protocol):
    """Anything that can be read from, written to and closed."""

    def read(self, size: int = -1) -> bytes: ...

    def write(self, data: bytes) -> int: ...

    def close(self) -> None: ...


class Buffer:
    """An in-memory stream; reading consumes what was written."""

    def __init__(self, text: str | bytes = "", readonly: bool = False) -> None:
        data = text.encode() if isinstance(text, str) else bytes(text)
        self._data: bytearray | None = bytearray(data)
        self.readonly = readonly

    def _require_open(self, action: str) -> bytearray:
        if self._data is None:
            raise StreamError(f"bad file descriptor, cannot {action} closed stream")
        return self._data

    def read(self, size: int = -1) -> bytes:
        """Read and consume up to ``size`` bytes (everything when negative)."""
        data = self._require_open("read from")
        if size < 0 or size > len(data):
            size = len(data)
        chunk = bytes(data[:size])
        del data[:size]
        return chunk

    def write(self, data: bytes) -> int:
        """Append ``data`` and return the number of bytes written."""
        buffer = self._require_open("write to")
        if self.readonly:
            raise StreamError("bad file descriptor, cannot write to read-only stream")
        buffer.extend(data)
        return len(data)

    def close(self) -> None:
        """Close the buffer; closing twice is an error."""
        if self._data is None:
            raise StreamError("cannot close closed stream")
        self._data = None

    def string(self, trim_trailing_newlines: bool = False) -> str:
        """Return the unread content as text, optionally without trailing newlines."""
        text = self._require_open("read from").decode(errors="replace")
        return text.rstrip("\n") if trim_trailing_newlines else text


def _closed_stream() -> Buffer:
    """Return a stream standing in for a closed descriptor; every operation fails."""
    stream = Buffer()
    stream.close()
    return stream


class _ProxyStream:
    """A descriptor-table slot pointing at a stream or at another slot."""

    def __init__(self, original: Stream) -> None:
        self.original: Stream = original

    def resolve(self) -> Stream:
        if isinstance(self.original, _ProxyStream):
            return self.original.resolve()
        return self.original

    def read(self, size: int = -1) -> bytes:
        return self.resolve().read(size)

    def write(self, data: bytes) -> int:
        return self.resolve().write(data)

    def close(self) -> None:
        self.original = _closed_stream()


def _open_mode(flag: int) -> str:
    if flag & os.O_RDWR:
        return "r+b"
    if flag & os.O_WRONLY:
        return "ab" if flag & os.O_APPEND else "wb"
    return "rb"


class StreamManager:
    """A table mapping file-descriptor names to streams."""

    def __init__(self) -> None:
        self._open_streams: list[Stream] = []
        self._mappings: dict[str, _ProxyStream] = {}

    def __enter__(self) -> StreamManager:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.destroy()

    def open_stream(self, name: str, flag: int = STREAM_FLAG_READ) -> Stream:
        """Open a file, or refer to a standard descriptor for /dev/std* names."""
        fd = _STANDARD_DEVICES.get(name)
        if fd is not None:
            proxy = self._mappings.get(fd)
            if proxy is None:
                raise StreamError(f'file descriptor "{fd}" is not open')
            return _ProxyStream(proxy.original)
        descriptor = os.open(name, flag, 0o644)
        return os.fdopen(descriptor, _open_mode(flag), buffering=0)

    def add(self, fd: str, stream: Stream) -> None:
        """Bind ``stream`` to descriptor ``fd``."""
        if isinstance(stream, _ProxyStream):
            self._mappings[fd] = stream
            return
        self._open_streams.append(stream)
        self._mappings[fd] = _ProxyStream(stream)

    def get(self, fd: str) -> Stream:
        """Return the stream bound to ``fd``."""
        proxy = self._mappings.get(fd)
        if proxy is None:
            raise StreamError(f'file descriptor "{fd}" is not open')
        return proxy.resolve()

    def duplicate(self, newfd: str, oldfd: str) -> None:
        """Make ``newfd`` refer to what ``oldfd`` refers to."""
        proxy = self._mappings.get(oldfd)
        if proxy is None:
            raise StreamError(f"trying to duplicate bad file descriptor: {oldfd}")
        self._mappings[newfd] = _ProxyStream(proxy.original)

    def close(self, fd: str) -> None:
        """Close descriptor ``fd`` without closing the underlying stream."""
        proxy = self._mappings.get(fd)
        if proxy is None:
            raise StreamError(f"trying to close bad file descriptor: {fd}")
        proxy.close()

    def destroy(self) -> None:
        """Close every stream that was added and every descriptor."""
        for stream in self._open_streams:
            try:
                stream.close()
            except OSError:
                pass
        for proxy in self._mappings.values():
            proxy.close()

    def clone(self) -> StreamManager:
        """Return a table whose descriptors refer to this table's descriptors."""
        copy = StreamManager()
        for fd, proxy in self._mappings.items():
            copy._mappings[fd] = _ProxyStream(proxy)
        return copy


def new_pipe():
    """Return a connected (reader, writer) pair of binary file objects."""
    read_fd, write_fd = os.pipe()
    return os.fdopen(read_fd, "rb", buffering=0), os.fdopen(write_fd, "wb", buffering=0)


def new_buffered_stream(text: str | bytes):
    """Return a readable pipe end that yields ``text`` and then end of file."""
    data = text.encode() if isinstance(text, str) else bytes(text)
    read_fd, write_fd = os.pipe()

    def feed() -> None:
        try:
            with os.fdopen(write_fd, "wb") as writer:
                writer.write(data)
        except OSError:
            pass

    threading.Thread(target=feed, daemon=True).start()
    return os.fdopen(read_fd, "rb", buffering=0)