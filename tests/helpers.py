import itertools

from progression.domains.session.schemas import SessionRecord

_ids = itertools.count(1)


def make_session(day, **kwargs):
    values = {
        "id": f"s{next(_ids)}",
        "date": day,
        "timestamp": 1_700_000_000_000,
        "completed": True,
        "duration_seconds": 600,
    }
    values.update(kwargs)
    return SessionRecord(**values)


class FailingGateway:
    """모든 호출이 예외를 던지는 Gateway."""

    def get(self, key):
        raise OSError("disk unavailable")

    def set(self, key, value):
        raise OSError("disk full")

    def delete(self, key):
        raise OSError("disk unavailable")
