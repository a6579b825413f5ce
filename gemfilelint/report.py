"""
レポート出力モジュール
進捗表示・違反一覧の表示と JSON レポートの保存を行う
"""

import json
import sys
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional, Sequence, TextIO, Union

from loguru import logger

from .detector import Check
from .linter import LintResult
from .offenses import Offense, describe, offense_to_dict


ANSI_CODES = {
    'ok': 32,     # green
    'error': 31,  # red
    'warn': 35,   # magenta
    'path': 36,   # cyan
}


def colorize(text: str, tag: str, enabled: bool = True) -> str:
    """
    意味タグに応じた色付け

    Args:
        text: 対象文字列
        tag: 'ok' / 'warn' / 'path' / 'error'
        enabled: False の場合はそのまま返す

    Returns:
        ANSI エスケープ付きの文字列
    """
    if tag not in ANSI_CODES:
        raise ValueError(f"Unknown color tag: {tag}")
    if not enabled:
        return text
    return f"\033[{ANSI_CODES[tag]}m{text}\033[0m"


def render_offense(offense: Offense, color: bool = True) -> str:
    """違反1件を '<path>: W: <message>' 形式に整形"""
    return f"{colorize(offense.path, 'path', color)}: {colorize('W', 'warn', color)}: {describe(offense)}"


def render_report(result: LintResult, color: bool = True) -> str:
    """Lint 結果全体を整形"""
    if result.passed:
        return f"{colorize('No offenses found.', 'ok', color)}\n"

    messages = [render_offense(offense, color) for offense in result.offenses]
    return "\nOffenses:\n\n" + "\n".join(messages) + "\n"


def result_to_dict(result: LintResult) -> Dict[str, Any]:
    """Lint 結果を辞書形式に変換"""
    return {
        'timestamp': datetime.now().isoformat(),
        'passed': result.passed,
        'checked': result.checked,
        'paths': list(result.paths),
        'offenses': [offense_to_dict(offense) for offense in result.offenses],
    }


class ConsoleProgress:
    """宣言1件ごとに '.' または 'W' を表示する進捗表示"""

    def __init__(self, stream: Optional[TextIO] = None, color: bool = True):
        self.stream = stream or sys.stdout
        self.color = color

    def start(self, paths: Sequence[str]) -> None:
        self.stream.write(f"Inspecting gemfiles at {', '.join(paths)}\n")
        self.stream.flush()

    def record(self, check: Check) -> None:
        if check.passed:
            self.stream.write(colorize('.', 'ok', self.color))
        else:
            self.stream.write(colorize('W', 'warn', self.color))
        self.stream.flush()

    def finish(self) -> None:
        self.stream.write("\n")
        self.stream.flush()


class ConsoleReporter:
    """違反一覧をコンソールに表示"""

    def __init__(self, stream: Optional[TextIO] = None, color: bool = True):
        self.stream = stream or sys.stdout
        self.color = color

    def report(self, result: LintResult) -> None:
        self.stream.write(render_report(result, self.color))
        self.stream.flush()


class JsonReporter:
    """Lint 結果を JSON で出力（ファイル指定がなければ stream へ）"""

    def __init__(self, output_path: Optional[Union[str, Path]] = None, stream: Optional[TextIO] = None):
        """
        初期化

        Args:
            output_path: 保存先ファイルパス
            stream: output_path がない場合の出力先
        """
        self.output_path = Path(output_path) if output_path else None
        self.stream = stream or sys.stdout

    def report(self, result: LintResult) -> None:
        data = result_to_dict(result)

        if self.output_path is None:
            json.dump(data, self.stream, ensure_ascii=False, indent=2)
            self.stream.write("\n")
            return

        self.output_path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.output_path, 'w', encoding='utf-8') as f:
            json.dump(data, f, ensure_ascii=False, indent=2)

        logger.info(f"Lint report saved to {self.output_path}")
