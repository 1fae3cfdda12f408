"""Barcode capture sources.

Every source implements :meth:`BarcodeScanner.start_scan`, which takes a
success and an error callback and returns a ``cancel`` function. Camera
decoding happens wherever frames are available (usually the browser); the
server side only needs a decoder callable, so no decoding library is tied in
here. Manual entry is a scanner like any other.
"""

from __future__ import annotations

import logging
import random
import threading
from abc import ABC, abstractmethod
from typing import Any, Callable, Iterable, List, Optional

logger = logging.getLogger(__name__)

OnDetected = Callable[[str], None]
OnError = Callable[[Exception], None]
Cancel = Callable[[], None]
Decoder = Callable[[Any], Optional[str]]


class BarcodeScanner(ABC):
    @abstractmethod
    def start_scan(self, on_detected: OnDetected, on_error: OnError) -> Cancel:
        raise NotImplementedError


class ManualEntryScanner(BarcodeScanner):
    """Typed barcodes. ``submit`` forwards non-blank text to active listeners."""

    def __init__(self) -> None:
        self._listeners: List[OnDetected] = []
        self._lock = threading.Lock()

    def start_scan(self, on_detected: OnDetected, on_error: OnError) -> Cancel:
        with self._lock:
            self._listeners.append(on_detected)

        def cancel() -> None:
            with self._lock:
                if on_detected in self._listeners:
                    self._listeners.remove(on_detected)

        return cancel

    def submit(self, text: str | None) -> Optional[str]:
        code = (text or "").strip()
        if not code:
            return None
        with self._lock:
            listeners = list(self._listeners)
        for listener in listeners:
            listener(code)
        return code


class FrameDecoderScanner(BarcodeScanner):
    """Runs ``decoder`` over ``frames`` on a worker thread until one decodes."""

    def __init__(self, frames: Iterable[Any], decoder: Decoder) -> None:
        self.frames = frames
        self.decoder = decoder
        self._thread: Optional[threading.Thread] = None

    def start_scan(self, on_detected: OnDetected, on_error: OnError) -> Cancel:
        stop = threading.Event()

        def run() -> None:
            try:
                for frame in self.frames:
                    if stop.is_set():
                        return
                    code = (self.decoder(frame) or "").strip()
                    if code and not stop.is_set():
                        on_detected(code)
                        return
            except Exception as exc:
                logger.warning("Barcode decoder failed: %s", exc)
                if not stop.is_set():
                    on_error(exc)

        self._thread = threading.Thread(target=run, name="barcode-scan", daemon=True)
        self._thread.start()
        return stop.set

    def join(self, timeout: Optional[float] = None) -> None:
        if self._thread is not None:
            self._thread.join(timeout)


def ean13_check_digit(digits: str) -> int:
    total = sum(int(d) * (3 if i % 2 else 1) for i, d in enumerate(digits[:12]))
    return (10 - total % 10) % 10


class SimulatedScanner(BarcodeScanner):
    """Demo camera: reports one random EAN-13 code immediately."""

    def __init__(self, rng: Optional[random.Random] = None) -> None:
        self.rng = rng or random.Random()

    def generate(self) -> str:
        body = "".join(str(self.rng.randint(0, 9)) for _ in range(12))
        return body + str(ean13_check_digit(body))

    def start_scan(self, on_detected: OnDetected, on_error: OnError) -> Cancel:
        on_detected(self.generate())
        return lambda: None
