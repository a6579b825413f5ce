"""
Gemfile 誤記検出ツール

主要モジュール:
- similarity: レーベンシュタイン距離による修正候補検索
- vocabulary: 既知の gem 名・ソース URL の語彙
- gemfile: Gemfile から gem 宣言・ソース宣言を抽出
- offenses: 違反モデル
- detector: 宣言ごとの違反検出
- linter: 複数 Gemfile の検査と集約
- report: 進捗表示・レポート出力
- config: 設定ファイルの読み込み
- cli: コマンドラインインターフェース（python -m gemfilelint）
"""

from typing import Optional, Sequence

from .errors import ConfigError, GemfilelintError, ManifestEvaluationError, VocabularyLoadError
from .linter import LintResult, Linter
from .offenses import InvalidManifest, MisspelledDependency, MisspelledSource, Offense
from .similarity import SpellChecker, levenshtein_distance, suggest
from .vocabulary import Vocabularies

__version__ = "1.0.0"


def lint(paths: Sequence[str], vocabularies: Optional[Vocabularies] = None, **kwargs) -> LintResult:
    """既定の語彙で Gemfile を検査する簡易関数"""
    return Linter(vocabularies or Vocabularies.load(), **kwargs).lint(paths)
