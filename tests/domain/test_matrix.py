import pytest

from sm15.domain.matrix import bucket_of, clamp_factor, default_optimal_factor


class TestBucketOf:
    @pytest.mark.parametrize(
        "difficulty_factor, expected",
        [
            (1.10, 0),
            (1.19, 0),
            (1.20, 1),
            (1.54, 4),
            (2.15, 10),
            (2.50, 14),
        ],
    )
    def test_buckets_are_tenth_wide(self, difficulty_factor, expected):
        assert bucket_of(difficulty_factor) == expected

    def test_clamped_to_range(self):
        assert bucket_of(0.5) == 0
        assert bucket_of(9.0) == 24


class TestDefaultOptimalFactor:
    def test_first_row_easiest_bucket(self):
        assert default_optimal_factor(1, 0) == pytest.approx(1.30)

    def test_curve_rows(self):
        assert [default_optimal_factor(r, 0) for r in range(1, 6)] == pytest.approx(
            [1.30, 1.85, 2.00, 2.18, 2.35]
        )

    def test_rows_past_curve_use_tail(self):
        assert default_optimal_factor(6, 0) == pytest.approx(2.50)
        assert default_optimal_factor(40, 0) == pytest.approx(2.50)

    def test_bucket_bonus(self):
        # 1.30 * (1 + 14 * 0.05)
        assert default_optimal_factor(1, 14) == pytest.approx(2.21)

    def test_clamped_to_max(self):
        assert default_optimal_factor(6, 24) == 3.0

    @pytest.mark.parametrize("repetition", [1, 2, 5, 6, 100])
    @pytest.mark.parametrize("bucket", [0, 12, 24])
    def test_always_defined_and_in_range(self, repetition, bucket):
        factor = default_optimal_factor(repetition, bucket)
        assert factor is not None
        assert 1.0 <= factor <= 3.0

    def test_invalid_keys(self):
        with pytest.raises(ValueError):
            default_optimal_factor(0, 0)
        with pytest.raises(ValueError):
            default_optimal_factor(1, 25)


def test_clamp_factor():
    assert clamp_factor(0.25) == 1.0
    assert clamp_factor(4.0) == 3.0
    assert clamp_factor(1.7) == 1.7
