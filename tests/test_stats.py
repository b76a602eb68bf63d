import math

import pytest

from aggregation import average, pearson_correlation


def test_average_empty_is_zero():
    assert average([]) == 0


@pytest.mark.parametrize(
    "values, expected",
    [
        ([1, 2, 3], 2.0),
        ([1, 2], 1.5),
        ([1, 2, 2], 1.67),
        ([231.95, 124.95, 459.09, 998.27], 453.57),
        ([1.005], 1.01),  # half away from zero on the decimal value
        ([-1.005], -1.01),
        ([-1, -2], -1.5),
    ],
)
def test_average_rounds_to_two_places(values, expected):
    assert average(values) == expected


def test_average_accepts_generator():
    assert average(p for p in (10.0, 20.0)) == 15.0


def test_correlation_perfect_positive_and_negative():
    assert pearson_correlation([1, 2, 3], [2, 4, 6]) == 1.0
    assert pearson_correlation([1, 2, 3], [6, 4, 2]) == -1.0


def test_correlation_truncates_to_shorter_series():
    # only the first three pairs are used
    assert pearson_correlation([1, 2, 3, 100], [1, 2, 3]) == 1.0


def test_correlation_flat_series_is_zero():
    assert pearson_correlation([5, 5, 5], [1, 2, 3]) == 0
    assert pearson_correlation([1], [2]) == 0
    assert pearson_correlation([], [1, 2]) == 0


def test_correlation_rounds_to_three_places():
    nvda = [231.95, 124.95, 459.09]
    pypl = [680.59, 368.12, 457.09]
    r = pearson_correlation(nvda, pypl)
    assert r == round(r, 3)
    assert 0 < r < 1


def test_average_of_huge_values_does_not_raise():
    assert average([1e30]) == 1e30
    assert average([1e30, 1e30]) == 1e30
    assert average([10 ** 40, 10 ** 40]) == 1e40
    assert average([1e30, 1, 2]) == pytest.approx(1e30 / 3)


def test_average_of_non_finite_values():
    assert average([float("inf"), 1]) == float("inf")
    assert average([float("-inf")]) == float("-inf")
    assert math.isnan(average([float("inf"), float("-inf")]))
    assert math.isnan(average([float("nan"), 2]))


def test_correlation_exact_value():
    # NVDA vs AMD, first three pairs only:
    # r = 8284.667 / sqrt(58230.373 * 1866.667) = 0.7946...
    nvda = [231.95, 124.95, 459.09, 998.27]
    amd = [100.0, 120.0, 160.0]
    assert pearson_correlation(nvda, amd) == 0.795
    assert pearson_correlation(amd, nvda) == 0.795
