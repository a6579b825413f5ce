"""
違反モデルモジュール
誤記の可能性がある gem 名・ソース、および不正な Gemfile を表す
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, ClassVar, Dict, Optional, Tuple, Union


class OffenseKind(Enum):
    """違反の種類"""
    DEPENDENCY = "dependency"              # gem 名の誤記
    SOURCE = "source"                      # ソース URL の誤記
    INVALID_MANIFEST = "invalid_manifest"  # Gemfile を評価できない


@dataclass(frozen=True)
class MisspelledDependency:
    """gem 名の誤記"""
    path: str
    name: str
    suggestions: Tuple[str, ...]

    kind: ClassVar[OffenseKind] = OffenseKind.DEPENDENCY

    def __str__(self) -> str:
        return describe(self)


@dataclass(frozen=True)
class MisspelledSource:
    """ソース URL の誤記"""
    path: str
    uri: str
    suggestions: Tuple[str, ...]

    kind: ClassVar[OffenseKind] = OffenseKind.SOURCE

    def __str__(self) -> str:
        return describe(self)


@dataclass(frozen=True)
class InvalidManifest:
    """評価できなかった Gemfile"""
    path: str
    reason: Optional[str] = None

    kind: ClassVar[OffenseKind] = OffenseKind.INVALID_MANIFEST

    def __str__(self) -> str:
        return describe(self)


Offense = Union[MisspelledDependency, MisspelledSource, InvalidManifest]


def _suggestion_lines(suggestions: Tuple[str, ...]) -> str:
    return "\n".join(f"   * {suggestion}" for suggestion in suggestions)


def describe(offense: Offense) -> str:
    """
    違反の説明文を生成

    Args:
        offense: 違反

    Returns:
        人が読むためのメッセージ
    """
    if isinstance(offense, MisspelledDependency):
        return (
            f"Gem \"{offense.name}\" is possibly misspelled, suggestions:\n"
            f"{_suggestion_lines(offense.suggestions)}\n"
        )
    if isinstance(offense, MisspelledSource):
        return (
            f"Source \"{offense.uri}\" is possibly misspelled, suggestions:\n"
            f"{_suggestion_lines(offense.suggestions)}\n"
        )
    if isinstance(offense, InvalidManifest):
        return f"Gemfile at \"{offense.path}\" is invalid.\n"
    raise TypeError(f"Unknown offense type: {type(offense).__name__}")


def offense_to_dict(offense: Offense) -> Dict[str, Any]:
    """違反を辞書形式に変換"""
    if isinstance(offense, MisspelledDependency):
        return {
            'kind': offense.kind.value,
            'path': offense.path,
            'name': offense.name,
            'suggestions': list(offense.suggestions),
        }
    if isinstance(offense, MisspelledSource):
        return {
            'kind': offense.kind.value,
            'path': offense.path,
            'uri': offense.uri,
            'suggestions': list(offense.suggestions),
        }
    if isinstance(offense, InvalidManifest):
        return {
            'kind': offense.kind.value,
            'path': offense.path,
            'reason': offense.reason,
        }
    raise TypeError(f"Unknown offense type: {type(offense).__name__}")
