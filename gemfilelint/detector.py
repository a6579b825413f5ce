"""
違反検出モジュール
Gemfile の宣言を1件ずつ語彙と照合し、検査結果を順に生成する
"""

from dataclasses import dataclass
from typing import Iterator, Optional, Union

from loguru import logger

from .errors import ManifestEvaluationError
from .gemfile import GemfileDeclarations
from .offenses import InvalidManifest, MisspelledDependency, MisspelledSource, Offense
from .similarity import DEFAULT_MAX_DISTANCE
from .vocabulary import Vocabularies


DEFAULT_MAX_DEPENDENCY_SUGGESTIONS = 5


@dataclass(frozen=True)
class DependencyDeclaration:
    """gem 宣言"""
    name: str


@dataclass(frozen=True)
class SourceDeclaration:
    """ソース宣言"""
    uri: str


Declaration = Union[DependencyDeclaration, SourceDeclaration]
ManifestResult = Union[GemfileDeclarations, ManifestEvaluationError]


@dataclass(frozen=True)
class Check:
    """宣言1件分の検査結果（違反がなければ offense は None）"""
    path: str
    declaration: Optional[Declaration]
    offense: Optional[Offense] = None

    @property
    def passed(self) -> bool:
        return self.offense is None


class OffenseDetector:
    """Gemfile の宣言から違反を検出するクラス"""

    def __init__(
        self,
        vocabularies: Vocabularies,
        max_distance: int = DEFAULT_MAX_DISTANCE,
        max_dependency_suggestions: int = DEFAULT_MAX_DEPENDENCY_SUGGESTIONS,
    ):
        """
        初期化

        Args:
            vocabularies: 参照語彙
            max_distance: 修正候補の最大距離
            max_dependency_suggestions: gem 名の修正候補の表示上限（1以上）
        """
        if max_dependency_suggestions < 1:
            raise ValueError(
                f"max_dependency_suggestions must be >= 1, got {max_dependency_suggestions}"
            )
        self.vocabularies = vocabularies
        self.max_distance = max_distance
        self.max_dependency_suggestions = max_dependency_suggestions

    def checks_for(self, path: str, manifest: ManifestResult) -> Iterator[Check]:
        """
        1つの Gemfile の宣言をすべて検査

        評価に失敗していれば InvalidManifest を1件だけ返す。
        成功していれば gem 宣言を宣言順に、続いてソース宣言を宣言順に検査する。

        Args:
            path: Gemfile パス
            manifest: 評価結果、または評価時の例外

        Yields:
            宣言ごとの検査結果
        """
        if isinstance(manifest, ManifestEvaluationError):
            logger.warning(f"Invalid Gemfile {path}: {manifest.reason}")
            yield Check(path, None, InvalidManifest(path, manifest.reason))
            return

        for name in manifest.dependencies:
            yield Check(path, DependencyDeclaration(name), self._dependency_offense(path, name))

        for uri in manifest.sources:
            yield Check(path, SourceDeclaration(uri), self._source_offense(path, uri))

    def offenses_for(self, path: str, manifest: ManifestResult) -> Iterator[Offense]:
        """違反のみを返す"""
        for check in self.checks_for(path, manifest):
            if check.offense is not None:
                yield check.offense

    def _dependency_offense(self, path: str, name: str) -> Optional[MisspelledDependency]:
        suggestions = self.vocabularies.dependencies.suggest(name, self.max_distance)
        if not suggestions:
            return None
        return MisspelledDependency(path, name, tuple(suggestions[:self.max_dependency_suggestions]))

    def _source_offense(self, path: str, uri: str) -> Optional[MisspelledSource]:
        suggestions = self.vocabularies.sources.suggest(uri, self.max_distance)
        if not suggestions:
            return None
        return MisspelledSource(path, uri, tuple(suggestions))
