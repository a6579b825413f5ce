"""
類似度計算モジュール
レーベンシュタイン距離で語彙から修正候補を検索する
"""

from typing import Iterable, List, Optional, Sequence

from loguru import logger
from rapidfuzz.distance import Levenshtein


DEFAULT_MAX_DISTANCE = 2


def levenshtein_distance(s1: str, s2: str, max_distance: Optional[int] = None) -> int:
    """
    2つの文字列のレーベンシュタイン距離を計算

    挿入・削除・置換の最小回数（rapidfuzz で計算）。
    max_distance を指定した場合、距離がそれを超えると max_distance + 1 を返す。

    Args:
        s1: 文字列1
        s2: 文字列2
        max_distance: 打ち切り距離（省略時は完全計算）

    Returns:
        編集距離
    """
    return Levenshtein.distance(s1, s2, score_cutoff=max_distance)


class SpellChecker:
    """固定語彙に対する修正候補検索クラス"""

    def __init__(self, haystack: Iterable[str], max_distance: int = DEFAULT_MAX_DISTANCE):
        """
        初期化

        Args:
            haystack: 正しい語の一覧（重複は最初の出現のみ残す）
            max_distance: correct() で使う距離の上限
        """
        self.haystack = tuple(dict.fromkeys(haystack))
        self.max_distance = max_distance
        self._words = frozenset(self.haystack)

    def __len__(self) -> int:
        return len(self.haystack)

    def __contains__(self, word: str) -> bool:
        return word in self._words

    def suggest(self, needle: str, max_distance: int = DEFAULT_MAX_DISTANCE) -> List[str]:
        """
        修正候補を距離の近い順に返す

        語彙に完全一致する場合は距離計算をせずに空リストを返す。
        同じ距離の候補は語彙内の順序を保つ。

        Args:
            needle: 検査対象の文字列
            max_distance: 候補とみなす最大距離

        Returns:
            修正候補のリスト（該当なしなら空）
        """
        if max_distance < 0:
            raise ValueError(f"max_distance must be >= 0, got {max_distance}")

        if needle in self._words:
            return []

        candidates = []
        for word in self.haystack:
            # 長さの差が上限を超える語は距離も上限を超える
            if abs(len(word) - len(needle)) > max_distance:
                continue

            distance = levenshtein_distance(needle, word, max_distance)
            if 0 < distance <= max_distance:
                candidates.append((distance, word))

        # sort は安定なので同距離は語彙順のまま
        candidates.sort(key=lambda candidate: candidate[0])

        suggestions = [word for _, word in candidates]
        if suggestions:
            logger.debug(f"Suggestions for '{needle}': {suggestions}")
        return suggestions

    def correct(self, needle: str) -> List[str]:
        """既定の距離上限で修正候補を返す"""
        return self.suggest(needle, self.max_distance)


def suggest(vocabulary: Sequence[str], query: str, max_distance: int = DEFAULT_MAX_DISTANCE) -> List[str]:
    """語彙リストから直接修正候補を求める"""
    return SpellChecker(vocabulary).suggest(query, max_distance)
