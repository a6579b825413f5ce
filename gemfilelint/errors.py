"""
例外定義モジュール
"""

from typing import Optional


class GemfilelintError(Exception):
    """gemfilelint の基底例外"""


class ManifestEvaluationError(GemfilelintError):
    """Gemfile を評価できなかった"""

    def __init__(self, path: str, reason: str, line: Optional[int] = None):
        self.path = path
        self.reason = reason
        self.line = line
        location = f"{path}:{line}" if line is not None else path
        super().__init__(f"{location}: {reason}")


class VocabularyLoadError(GemfilelintError):
    """参照語彙を読み込めなかった（致命的）"""


class ConfigError(GemfilelintError):
    """設定ファイルが不正"""
