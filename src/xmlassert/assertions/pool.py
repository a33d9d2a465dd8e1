"""Per-worker validator handles.

One SAX reader is kept per worker thread. It is created the first time an
assertion runs on that worker and dropped when the harness reports the worker
as finished.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass
from typing import Callable
from xml.sax.xmlreader import XMLReader

from xmlassert.assertions.structure import create_reader


@dataclass
class ValidatorHandle:
    worker_id: int
    reader: XMLReader
    uses: int = 0


class ValidatorPool:
    """Table of validator handles keyed by worker identity."""

    def __init__(self, factory: Callable[[], XMLReader] = create_reader):
        self._factory = factory
        self._handles: dict[int, ValidatorHandle] = {}
        self._lock = threading.Lock()

    def acquire(self, worker_id: int | None = None) -> ValidatorHandle:
        """Return the worker's handle, creating it on first use."""
        if worker_id is None:
            worker_id = threading.get_ident()
        with self._lock:
            handle = self._handles.get(worker_id)
        if handle is not None:
            return handle

        # only the owning worker ever creates its entry
        handle = ValidatorHandle(worker_id=worker_id, reader=self._factory())
        with self._lock:
            self._handles[worker_id] = handle
        return handle

    def release(self, worker_id: int | None = None) -> bool:
        """Drop the worker's handle. Returns whether one existed."""
        if worker_id is None:
            worker_id = threading.get_ident()
        with self._lock:
            return self._handles.pop(worker_id, None) is not None

    def __contains__(self, worker_id: object) -> bool:
        with self._lock:
            return worker_id in self._handles

    def __len__(self) -> int:
        with self._lock:
            return len(self._handles)


default_pool = ValidatorPool()
