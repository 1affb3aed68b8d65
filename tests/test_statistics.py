import pytest

from signvote.services.statistics import StatisticsAggregator, compute_progress


@pytest.mark.parametrize(
    "total,expected",
    [
        (0, 0.0),
        (1, 0.1),
        (333, 49.9),
        (334, 50.1),
        (667, 100.0),
        (1000, 100.0),
    ],
)
def test_compute_progress(total, expected):
    assert compute_progress(total, 667) == expected


def test_progress_monotonic_and_capped():
    values = [compute_progress(total, 667) for total in range(0, 1500)]

    assert all(a <= b for a, b in zip(values, values[1:]))
    assert max(values) == 100


def test_rejects_non_positive_target():
    with pytest.raises(ValueError):
        compute_progress(1, 0)


def test_stats_counts_stored_records(repository, create_signature):
    aggregator = StatisticsAggregator(repository, target=4)
    assert aggregator.stats().total == 0

    create_signature()
    create_signature()
    stats = aggregator.stats()

    assert stats.total == 2
    assert stats.target == 4
    assert stats.progress == 50.0
