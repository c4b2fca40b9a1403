"""작업 상태값과 단조 전이 규칙.

영상 상태 문자열은 Sora가 정의한다(queued, in_progress, completed, failed ...).
모르는 값은 진행 중으로 취급한다.
"""

from enum import StrEnum


class JobStatus(StrEnum):
    QUEUED = "queued"
    PROCESSING = "processing"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    FAILED = "failed"


TERMINAL_STATUSES = frozenset({JobStatus.COMPLETED, JobStatus.FAILED})


def is_terminal(status: str | None) -> bool:
    return status in TERMINAL_STATUSES


def advance_status(current: str | None, observed: str | None) -> str | None:
    """현재 상태에서 관측된 상태로 전이한 결과를 반환한다.

    - 종료 상태(completed/failed)는 되돌리지 않는다.
    - 관측값이 없으면 현재 상태를 유지한다.
    """
    if not observed:
        return current
    if is_terminal(current):
        return current
    return observed
