import uuid

from app.rate_limiter import check_rate_limit


def test_memory_only_limit_blocks_after_limit_reached():
    key = f"test:{uuid.uuid4()}"

    results = [check_rate_limit(key, limit=2, window_seconds=60, client=None) for _ in range(3)]

    assert [allowed for allowed, _, _ in results] == [True, True, False]
    assert results[-1][1] == 2
    assert 0 < results[-1][2] <= 60


def test_limits_are_per_key():
    first, second = f"test:{uuid.uuid4()}", f"test:{uuid.uuid4()}"

    check_rate_limit(first, limit=1, window_seconds=60, client=None)

    assert check_rate_limit(first, limit=1, window_seconds=60, client=None)[0] is False
    assert check_rate_limit(second, limit=1, window_seconds=60, client=None)[0] is True
