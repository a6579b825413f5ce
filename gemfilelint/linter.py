"""
Lint セッションモジュール
複数の Gemfile を順に検査し、違反を集約する
"""

from dataclasses import dataclass, field
from typing import List, Optional, Protocol, Sequence

from loguru import logger

from .detector import DEFAULT_MAX_DEPENDENCY_SUGGESTIONS, Check, ManifestResult, OffenseDetector
from .errors import ManifestEvaluationError
from .gemfile import GemfileEvaluator
from .offenses import Offense
from .similarity import DEFAULT_MAX_DISTANCE
from .vocabulary import Vocabularies


class ProgressSink(Protocol):
    """検査1件ごとの進捗通知先"""

    def start(self, paths: Sequence[str]) -> None: ...

    def record(self, check: Check) -> None: ...

    def finish(self) -> None: ...


class ReportSink(Protocol):
    """最終結果の出力先"""

    def report(self, result: "LintResult") -> None: ...


class NullProgress:
    """進捗を表示しない"""

    def start(self, paths: Sequence[str]) -> None:
        pass

    def record(self, check: Check) -> None:
        pass

    def finish(self) -> None:
        pass


class NullReporter:
    """結果を表示しない"""

    def report(self, result: "LintResult") -> None:
        pass


@dataclass
class LintResult:
    """Lint 結果"""
    paths: List[str] = field(default_factory=list)
    offenses: List[Offense] = field(default_factory=list)
    checked: int = 0

    @property
    def passed(self) -> bool:
        return not self.offenses


class Linter:
    """Gemfile の誤記チェッククラス"""

    def __init__(
        self,
        vocabularies: Vocabularies,
        evaluator: Optional[GemfileEvaluator] = None,
        progress: Optional[ProgressSink] = None,
        reporter: Optional[ReportSink] = None,
        max_distance: int = DEFAULT_MAX_DISTANCE,
        max_dependency_suggestions: int = DEFAULT_MAX_DEPENDENCY_SUGGESTIONS,
    ):
        """
        初期化

        Args:
            vocabularies: 参照語彙
            evaluator: Gemfile 評価器
            progress: 進捗通知先
            reporter: 結果出力先
            max_distance: 修正候補の最大距離
            max_dependency_suggestions: gem 名の修正候補の表示上限
        """
        self.evaluator = evaluator or GemfileEvaluator()
        self.detector = OffenseDetector(vocabularies, max_distance, max_dependency_suggestions)
        self.progress = progress or NullProgress()
        self.reporter = reporter or NullReporter()

    def lint(self, paths: Sequence[str]) -> LintResult:
        """
        Gemfile を順に検査

        違反があっても残りの宣言・ファイルの検査は続ける。

        Args:
            paths: Gemfile パスのリスト

        Returns:
            全ファイル分の Lint 結果
        """
        paths = [str(path) for path in paths]
        logger.info(f"Inspecting gemfiles at {', '.join(paths)}")

        result = LintResult(paths=paths)
        self.progress.start(paths)

        for path in paths:
            file_offenses = 0
            for check in self.detector.checks_for(path, self._evaluate(path)):
                result.checked += 1
                self.progress.record(check)
                if check.offense is not None:
                    result.offenses.append(check.offense)
                    file_offenses += 1
            logger.debug(f"{path}: {file_offenses} offenses")

        self.progress.finish()
        logger.info(f"Checked {result.checked} declarations, found {len(result.offenses)} offenses")

        self.reporter.report(result)
        return result

    def _evaluate(self, path: str) -> ManifestResult:
        """Gemfile を評価（失敗時は例外を結果として返す）"""
        try:
            return self.evaluator.evaluate(path)
        except ManifestEvaluationError as e:
            return e
