"""Tests for match-count estimation (oracle counting).

反復回数を決める前に、コレクション中の解の個数 M を古典的に見積もります。

推定方法:
- FULL_SCAN: 全要素を評価 (O(N))
- SAMPLING: 非復元抽出したサンプルで数え、N/サンプル数 倍に拡大
- ASSUME_ONE: 解はちょうど 1 個と仮定 (評価なし)
- USER_PROVIDED: 呼び出し側が与えた個数
- AUTO: N ≤ full_scan_threshold なら FULL_SCAN、それ以外は SAMPLING
"""

import statistics

import pytest

from conftest import FakeBackend
from easyq.errors import InvalidConfigurationError, InvalidInputError
from easyq.search import SamplingStrategy, SearchOptions, count_matches, estimate_match_count, validate_inputs
from easyq.search.estimation import scale_sample


def is_multiple_of_ten(x: int) -> bool:
    return x % 10 == 0


class TestKnownMatchCount:
    """known_match_count による推定のバイパス."""

    def test_bypasses_strategy(self):
        """正の known_match_count はサンプリング戦略より優先され、数え上げは行われない."""
        backend = FakeBackend()
        opts = SearchOptions(sampling_strategy=SamplingStrategy.FULL_SCAN, known_match_count=7)
        assert estimate_match_count(list(range(100)), is_multiple_of_ten, opts, backend) == 7
        assert backend.count_calls == []

    def test_user_provided_without_count(self):
        """USER_PROVIDED で個数が無い場合は設定エラー."""
        opts = SearchOptions(sampling_strategy=SamplingStrategy.USER_PROVIDED)
        with pytest.raises(InvalidConfigurationError):
            estimate_match_count([1, 2, 3], bool, opts)

    def test_user_provided_zero(self):
        """USER_PROVIDED で 0 を与えた場合は 0."""
        opts = SearchOptions(sampling_strategy=SamplingStrategy.USER_PROVIDED, known_match_count=0)
        assert estimate_match_count([1, 2, 3], bool, opts) == 0


class TestStrategies:
    """各推定戦略のテスト."""

    def test_full_scan(self):
        opts = SearchOptions(sampling_strategy=SamplingStrategy.FULL_SCAN)
        assert estimate_match_count(list(range(100)), is_multiple_of_ten, opts) == 10

    def test_assume_one(self):
        """ASSUME_ONE は N や実際の個数に関係なく常に 1."""
        opts = SearchOptions(sampling_strategy=SamplingStrategy.ASSUME_ONE)
        assert estimate_match_count(list(range(100)), is_multiple_of_ten, opts) == 1
        assert estimate_match_count(list(range(5)), lambda x: False, opts) == 1
        assert estimate_match_count([], lambda x: True, opts) == 1

    def test_empty_collection(self):
        """N=0 の場合は 0."""
        for strategy in (SamplingStrategy.AUTO, SamplingStrategy.FULL_SCAN, SamplingStrategy.SAMPLING):
            assert estimate_match_count([], is_multiple_of_ten, SearchOptions(sampling_strategy=strategy)) == 0

    def test_sample_capped_at_n(self):
        """サンプル数が N を超える場合は N に制限され、結果は正確な個数になる."""
        opts = SearchOptions(sampling_strategy=SamplingStrategy.SAMPLING, sample_size=500)
        assert estimate_match_count(list(range(40)), is_multiple_of_ten, opts) == 4

    def test_sampling_requires_positive_size(self):
        opts = SearchOptions(sampling_strategy=SamplingStrategy.SAMPLING, sample_size=0)
        with pytest.raises(InvalidConfigurationError):
            estimate_match_count(list(range(40)), is_multiple_of_ten, opts)

    def test_sampling_converges(self):
        """統計的性質: N=1000、解 100 個、サンプル 100 で推定平均は約 100 に収束.

        1 回の推定の標準偏差は約 28 なので、300 回の平均の誤差は ±10 に十分収まります。
        """
        items = list(range(1000))
        opts = SearchOptions(sampling_strategy=SamplingStrategy.SAMPLING, sample_size=100)
        estimates = [estimate_match_count(items, is_multiple_of_ten, opts) for _ in range(300)]
        assert abs(statistics.mean(estimates) - 100) < 10
        assert all(0 <= e <= 1000 for e in estimates)
        # independent draws per call
        assert len(set(estimates)) > 1

    def test_auto_uses_full_scan_below_threshold(self):
        backend = FakeBackend()
        opts = SearchOptions(sampling_strategy=SamplingStrategy.AUTO, full_scan_threshold=100)
        assert estimate_match_count(list(range(50)), is_multiple_of_ten, opts, backend) == 5
        assert backend.count_calls == [(SamplingStrategy.FULL_SCAN, 0)]

    def test_auto_uses_sampling_above_threshold(self):
        backend = FakeBackend()
        opts = SearchOptions(sampling_strategy=SamplingStrategy.AUTO, full_scan_threshold=100, sample_size=30)
        estimate_match_count(list(range(500)), is_multiple_of_ten, opts, backend)
        assert backend.count_calls == [(SamplingStrategy.SAMPLING, 30)]


class TestScaling:
    """サンプル結果の線形スケーリング."""

    def test_scale(self):
        assert scale_sample(10, 1000, 100) == 100
        assert scale_sample(0, 1000, 100) == 0
        assert scale_sample(1, 1000, 3) == 333

    def test_clamped(self):
        """推定値は [0, N] に収まる."""
        assert scale_sample(200, 1000, 100) == 1000

    def test_count_matches_sampling_bounded(self):
        n = count_matches(list(range(1000)), is_multiple_of_ten, SamplingStrategy.SAMPLING, 50)
        assert 0 <= n <= 50


class TestValidateInputs:
    """コレクションと述語の構造チェック."""

    def test_valid(self):
        validate_inputs([1, 2, 3], lambda x: x > 1)
        validate_inputs(("a", "b"), str.isupper)
        validate_inputs(range(10), bool)

    @pytest.mark.parametrize("items", [None, 5, {1: 2}, {1, 2}])
    def test_bad_items(self, items):
        with pytest.raises(InvalidInputError):
            validate_inputs(items, lambda x: True)

    def test_predicate_not_callable(self):
        with pytest.raises(InvalidInputError):
            validate_inputs([1, 2], "x > 1")

    def test_predicate_wrong_arity(self):
        with pytest.raises(InvalidInputError):
            validate_inputs([1, 2], lambda a, b: True)
        with pytest.raises(InvalidInputError):
            validate_inputs([1, 2], lambda: True)

    def test_estimate_validates_first(self):
        """推定の前に構造チェックが行われる."""
        with pytest.raises(InvalidInputError):
            estimate_match_count(None, lambda x: True)
