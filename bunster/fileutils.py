"""File tests used by conditional expressions (`-f`, `-d`, `-nt`, ...)."""

from __future__ import annotations

import errno
import os
import re
import stat

from .arithmetic import compare_int
from .stream import StreamError, StreamManager

_INTEGER = re.compile(r"[+-]?[0-9]+")
_NANOSECONDS = 1_000_000_000


def _stat(file: str) -> os.stat_result | None:
    try:
        return os.stat(file)
    except (OSError, ValueError):
        return None


def number_compare(x: str, op: str, y: str) -> bool:
    """Compare two decimal integers; anything that is not an integer gives False."""
    if not _INTEGER.fullmatch(x) or not _INTEGER.fullmatch(y):
        return False
    return compare_int(int(x), op, int(y)) == 1


def files_have_same_dev_and_ino(file1: str, file2: str) -> bool:
    """Report whether both paths refer to the same device and inode."""
    info1, info2 = _stat(file1), _stat(file2)
    if info1 is None or info2 is None:
        return False
    return info1.st_dev == info2.st_dev and info1.st_ino == info2.st_ino


def file_is_older_than(file1: str, file2: str) -> bool:
    """True when ``file1`` is older than ``file2``, or ``file1`` does not exist."""
    info2 = _stat(file2)
    if info2 is None:
        return False
    try:
        info1 = os.stat(file1)
    except FileNotFoundError:
        return True
    except (OSError, ValueError):
        return False
    return info1.st_mtime_ns < info2.st_mtime_ns


def file_exists(file: str) -> bool:
    """True unless the file is missing or cannot be looked at for lack of permission."""
    try:
        os.stat(file)
    except OSError as error:
        return error.errno not in (errno.ENOENT, errno.EACCES, errno.EPERM)
    except ValueError:
        return False
    return True


def _mode_check(file: str, check) -> bool:
    info = _stat(file)
    return info is not None and bool(check(info.st_mode))


def directory_exists(file: str) -> bool:
    """True if the path is a directory."""
    return _mode_check(file, stat.S_ISDIR)


def block_special_file_exists(file: str) -> bool:
    """True if the path is a block device."""
    return _mode_check(file, stat.S_ISBLK)


def character_special_file_exists(file: str) -> bool:
    """True if the path is a character device."""
    return _mode_check(file, stat.S_ISCHR)


def regular_file_exists(file: str) -> bool:
    """True if the path is a regular file."""
    return _mode_check(file, stat.S_ISREG)


def file_sgid_is_set(file: str) -> bool:
    """True if the set-group-id bit is set."""
    return _mode_check(file, lambda mode: mode & stat.S_ISGID)


def file_suid_is_set(file: str) -> bool:
    """True if the set-user-id bit is set."""
    return _mode_check(file, lambda mode: mode & stat.S_ISUID)


def file_is_owned_by_effective_group(file: str) -> bool:
    """True if the file's group is the group of this process."""
    info = _stat(file)
    return info is not None and info.st_gid == os.getgid()


def file_is_owned_by_effective_user(file: str) -> bool:
    """True if the file's owner is the user of this process."""
    info = _stat(file)
    return info is not None and info.st_uid == os.getuid()


def file_is_symbolic(file: str) -> bool:
    """True if the path itself is a symbolic link."""
    try:
        info = os.lstat(file)
    except (OSError, ValueError):
        return False
    return stat.S_ISLNK(info.st_mode)


def file_is_sticky(file: str) -> bool:
    """True if the sticky bit is set."""
    return _mode_check(file, lambda mode: mode & stat.S_ISVTX)


def file_is_fifo(file: str) -> bool:
    """True if the path is a named pipe."""
    return _mode_check(file, stat.S_ISFIFO)


def file_is_readable(file: str) -> bool:
    """True if the owner read bit is set."""
    return _mode_check(file, lambda mode: mode & 0o400)


def file_is_writable(file: str) -> bool:
    """True if the owner write bit is set."""
    return _mode_check(file, lambda mode: mode & 0o200)


def file_is_executable(file: str) -> bool:
    """True if the owner execute bit is set."""
    return _mode_check(file, lambda mode: mode & 0o100)


def file_has_a_positive_size(file: str) -> bool:
    """True if the file is not empty."""
    info = _stat(file)
    return info is not None and info.st_size > 0


def file_is_socket(file: str) -> bool:
    """True if the path is a socket."""
    return _mode_check(file, stat.S_ISSOCK)


def file_descriptor_is_terminal(streams: StreamManager, fd: str) -> bool:
    """True if descriptor ``fd`` of the table is open on a terminal."""
    try:
        stream = streams.get(fd)
    except StreamError:
        return False
    try:
        return os.isatty(stream.fileno())
    except (AttributeError, OSError, ValueError):
        return False


def file_has_been_modified_since_last_read(file: str) -> bool:
    """Compare the sub-second parts of the modification and access times."""
    info = _stat(file)
    if info is None:
        return False
    return info.st_mtime_ns % _NANOSECONDS > info.st_atime_ns % _NANOSECONDS