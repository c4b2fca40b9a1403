"""외부 호출(생성 모델, 다운로드) 소요 시간 측정."""

import time
from contextlib import contextmanager
from dataclasses import dataclass

from loguru import logger


@dataclass
class Elapsed:
    ms: float = 0.0


@contextmanager
def timed(label: str, slow_ms: float | None = None):
    """블록 실행 시간을 ms 단위로 기록한다.

    slow_ms를 넘기면 WARNING, 아니면 INFO로 남긴다.

        with timed("sora create") as t:
            ...
        t.ms
    """
    result = Elapsed()
    start = time.perf_counter()
    try:
        yield result
    finally:
        result.ms = (time.perf_counter() - start) * 1000
        if slow_ms is not None and result.ms > slow_ms:
            logger.warning(f"[{label}] {result.ms:.0f}ms (slow)")
        else:
            logger.info(f"[{label}] {result.ms:.0f}ms")
