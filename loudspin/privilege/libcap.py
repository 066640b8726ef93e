"""Capability adapter over libcap and prctl(2) using ctypes."""

from __future__ import annotations

import ctypes
import ctypes.util
import errno
import os
from collections.abc import Sequence
from typing import Any

from loudspin.core.model import Capability, CapFlag

PR_CAP_AMBIENT = 47
PR_CAP_AMBIENT_RAISE = 2
CAP_SET = 1


def _last_os_error() -> OSError:
    err = ctypes.get_errno()
    return OSError(err, os.strerror(err))


def _load_libcap() -> Any:
    path = ctypes.util.find_library("cap")
    if path is None:
        raise OSError(errno.ENOENT, "libcap shared library not found")
    lib = ctypes.CDLL(path, use_errno=True)
    lib.cap_get_proc.argtypes = []
    lib.cap_get_proc.restype = ctypes.c_void_p
    lib.cap_set_flag.argtypes = [
        ctypes.c_void_p,
        ctypes.c_int,
        ctypes.c_int,
        ctypes.POINTER(ctypes.c_int),
        ctypes.c_int,
    ]
    lib.cap_set_flag.restype = ctypes.c_int
    lib.cap_set_proc.argtypes = [ctypes.c_void_p]
    lib.cap_set_proc.restype = ctypes.c_int
    lib.cap_free.argtypes = [ctypes.c_void_p]
    lib.cap_free.restype = ctypes.c_int
    return lib


def _load_libc() -> Any:
    lib = ctypes.CDLL(ctypes.util.find_library("c"), use_errno=True)
    lib.prctl.argtypes = [ctypes.c_int, ctypes.c_ulong, ctypes.c_ulong, ctypes.c_ulong, ctypes.c_ulong]
    lib.prctl.restype = ctypes.c_int
    return lib


class LibcapBackend:
    def __init__(self, *, libcap: Any | None = None, libc: Any | None = None) -> None:
        self._libcap = libcap
        self._libc = libc
        self._caps: int | None = None

    def init(self) -> None:
        if self._libcap is None:
            self._libcap = _load_libcap()
        caps = self._libcap.cap_get_proc()
        if not caps:
            raise _last_os_error()
        self._caps = caps

    def update(self, caps: Sequence[Capability], flag: CapFlag) -> None:
        if self._caps is None:
            raise OSError(errno.EINVAL, "capability state has not been initialized")
        values = (ctypes.c_int * len(caps))(*(int(cap) for cap in caps))
        if self._libcap.cap_set_flag(self._caps, int(flag), len(caps), values, CAP_SET) != 0:
            raise _last_os_error()

    def apply(self) -> None:
        if self._caps is None:
            raise OSError(errno.EINVAL, "capability state has not been initialized")
        if self._libcap.cap_set_proc(self._caps) != 0:
            raise _last_os_error()

    def raise_ambient(self, cap: Capability) -> None:
        if self._libc is None:
            self._libc = _load_libc()
        if self._libc.prctl(PR_CAP_AMBIENT, PR_CAP_AMBIENT_RAISE, int(cap), 0, 0) == -1:
            raise _last_os_error()

    def close(self) -> None:
        if self._caps is not None:
            self._libcap.cap_free(self._caps)
            self._caps = None
