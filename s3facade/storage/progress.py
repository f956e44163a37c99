"""Progress reporting for multipart uploads."""
import io
import os
import threading
from typing import Any, BinaryIO, Callable, Optional

ProgressCallback = Callable[[Optional[int]], Any]


def as_fileobj(body: Any) -> BinaryIO:
    """Wrap ``str``/``bytes`` payloads so the transfer manager can read them."""
    if isinstance(body, str):
        return io.BytesIO(body.encode("utf-8"))
    if isinstance(body, (bytes, bytearray, memoryview)):
        return io.BytesIO(bytes(body))
    return body


def payload_size(fileobj: Any) -> Optional[int]:
    """Bytes left to read from ``fileobj``, or ``None`` when it can't be known."""
    try:
        fileno = fileobj.fileno()
    except (AttributeError, OSError, io.UnsupportedOperation):
        fileno = None
    if fileno is not None:
        try:
            size = os.fstat(fileno).st_size
            return max(size - fileobj.tell(), 0)
        except (OSError, io.UnsupportedOperation):
            pass

    seekable = getattr(fileobj, "seekable", None)
    if not callable(seekable) or not seekable():
        return None
    try:
        position = fileobj.tell()
        end = fileobj.seek(0, io.SEEK_END)
        fileobj.seek(position, io.SEEK_SET)
    except (OSError, io.UnsupportedOperation):
        return None
    return max(end - position, 0)


class ProgressTracker:
    """Accumulates byte counts reported by the transfer manager.

    boto3 invokes the callback from its worker threads, one call per chunk
    with the number of bytes just sent; totals are kept under a lock. A
    retried part is rewound with a negative count, so ``loaded`` can drop,
    but the percentage handed to the caller never goes backwards.
    """

    def __init__(self, total: Optional[int], callback: Optional[ProgressCallback] = None):
        self.total = total
        self.loaded = 0
        self._reported: Optional[int] = None
        self._callback = callback if callable(callback) else None
        self._lock = threading.Lock()

    def percent(self) -> Optional[int]:
        if not self.total:
            # an empty payload is complete as soon as anything is reported
            return 100 if self.total == 0 else None
        return min(max(round(self.loaded * 100 / self.total), 0), 100)

    def __call__(self, bytes_transferred: int) -> None:
        with self._lock:
            self.loaded += bytes_transferred
            percent = self.percent()
            if percent is not None and self._reported is not None:
                percent = max(percent, self._reported)
            self._reported = percent
            if self._callback is not None:
                self._callback(percent)
