"""
参照語彙モジュール
既知の gem 名と gem ソース URL の語彙を構築する
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Union

from loguru import logger

from .errors import VocabularyLoadError
from .gemfile import DEFAULT_SOURCE
from .similarity import DEFAULT_MAX_DISTANCE, SpellChecker


DEFAULT_DEPENDENCY_LIST = Path(__file__).parent / "data" / "gems.txt"
DEFAULT_SOURCES = [DEFAULT_SOURCE]


def load_word_list(path: Union[str, Path]) -> List[str]:
    """
    改行区切りの語彙ファイルを読み込み

    Args:
        path: 語彙ファイルパス

    Returns:
        語のリスト（行分割のみ。前後の空白は保持し、空行だけ除外する）

    Raises:
        VocabularyLoadError: 読み込めない、または語が1つもない場合
    """
    try:
        text = Path(path).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise VocabularyLoadError(f"Failed to read word list {path}: {e}") from e

    # 末尾改行や空行から空文字の語を作らない
    words = [line for line in text.split("\n") if line]
    if not words:
        raise VocabularyLoadError(f"Word list is empty: {path}")

    logger.debug(f"Loaded {len(words)} words from {path}")
    return words


@dataclass(frozen=True)
class Vocabularies:
    """gem 名とソース URL の参照語彙（セッション開始時に一度だけ構築）"""
    dependencies: SpellChecker
    sources: SpellChecker

    @classmethod
    def load(
        cls,
        dependency_list: Optional[Union[str, Path]] = None,
        sources: Optional[Iterable[str]] = None,
        extra_dependencies: Iterable[str] = (),
        max_distance: int = DEFAULT_MAX_DISTANCE,
    ) -> "Vocabularies":
        """
        語彙を構築

        Args:
            dependency_list: gem 名一覧ファイル（省略時は同梱の gems.txt）
            sources: 既知のソース URL（省略時は rubygems.org のみ）
            extra_dependencies: 追加で正しいとみなす gem 名
            max_distance: 修正候補の最大距離

        Returns:
            構築済みの Vocabularies
        """
        words = load_word_list(dependency_list or DEFAULT_DEPENDENCY_LIST)
        words.extend(extra_dependencies)
        source_list = list(sources) if sources is not None else list(DEFAULT_SOURCES)
        if not source_list:
            raise VocabularyLoadError("At least one known source URL is required")

        vocabularies = cls(
            dependencies=SpellChecker(words, max_distance),
            sources=SpellChecker(source_list, max_distance),
        )
        logger.info(
            f"Loaded {len(vocabularies.dependencies)} known gems "
            f"and {len(vocabularies.sources)} known sources"
        )
        return vocabularies

    @classmethod
    def from_config(cls, config: Dict[str, Any]) -> "Vocabularies":
        """設定辞書から語彙を構築"""
        vocabulary_config = config.get("vocabulary", {})
        spellcheck_config = config.get("spellcheck", {})
        return cls.load(
            dependency_list=vocabulary_config.get("dependency_list"),
            sources=vocabulary_config.get("sources"),
            extra_dependencies=vocabulary_config.get("extra_dependencies") or [],
            max_distance=spellcheck_config.get("max_distance", DEFAULT_MAX_DISTANCE),
        )
