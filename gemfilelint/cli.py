"""
Gemfile 誤記検出ツール
コマンドラインインターフェース
"""

import sys
import argparse
import os
from pathlib import Path
from typing import Any, Dict, List, Optional

from loguru import logger
from dotenv import load_dotenv

from . import __version__
from .config import load_config
from .errors import GemfilelintError
from .linter import Linter, LintResult
from .report import ConsoleProgress, ConsoleReporter, JsonReporter
from .vocabulary import Vocabularies


EXIT_OK = 0
EXIT_OFFENSES = 1
EXIT_FATAL = 2


class GemfileChecker:
    """Gemfile 誤記検出ツールのメインクラス"""

    def __init__(self, config_path: Optional[str] = None, log_level: Optional[str] = None):
        """
        初期化

        Args:
            config_path: 設定ファイルパス（省略時は config.yml があれば使用）
            log_level: ログレベル（設定ファイルを上書き）
        """
        self.config = load_config(config_path)
        if log_level:
            self.config['logging']['level'] = log_level

        # ログ設定
        self._setup_logging()

        self.vocabularies = None
        self.linter = None

        logger.debug("Gemfile checker initialized")

    def _setup_logging(self):
        """ログ設定"""
        log_config = self.config.get('logging', {})
        log_level = log_config.get('level', 'WARNING')
        log_file = log_config.get('file')

        # ログ設定をクリア
        logger.remove()

        # コンソール出力（lint 結果は stdout なのでログは stderr）
        logger.add(
            sys.stderr,
            level=log_level,
            format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | {message}"
        )

        # ファイル出力
        if log_file:
            Path(log_file).parent.mkdir(parents=True, exist_ok=True)
            logger.add(
                log_file,
                level=log_level,
                format="{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name} | {message}",
                rotation="10 MB",
                retention="30 days",
                encoding="utf-8"
            )

    def initialize_modules(self):
        """語彙と Linter を初期化"""
        logger.debug("Initializing modules...")

        # 1. 参照語彙（読み込み失敗は致命的）
        self.vocabularies = Vocabularies.from_config(self.config)

        # 2. 出力先
        output_config = self.config.get('output', {})
        color = bool(output_config.get('color', True)) and not os.environ.get('NO_COLOR')

        if output_config.get('format') == 'json':
            # JSON を stdout に出す場合に進捗が混ざらないよう stderr へ
            progress = ConsoleProgress(sys.stderr, color=False)
            reporter = JsonReporter(output_config.get('json_path'))
        else:
            progress = ConsoleProgress(sys.stdout, color=color)
            reporter = ConsoleReporter(sys.stdout, color=color)

        # 3. Linter
        spellcheck_config = self.config.get('spellcheck', {})
        self.linter = Linter(
            self.vocabularies,
            progress=progress,
            reporter=reporter,
            max_distance=spellcheck_config.get('max_distance', 2),
            max_dependency_suggestions=spellcheck_config.get('max_dependency_suggestions', 5),
        )

        logger.debug("All modules initialized successfully")

    def run(self, paths: List[str]) -> LintResult:
        """
        Gemfile を検査

        Args:
            paths: Gemfile パスのリスト

        Returns:
            Lint 結果
        """
        if self.linter is None:
            self.initialize_modules()
        return self.linter.lint(paths)


def parse_arguments(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """コマンドライン引数をパース"""
    parser = argparse.ArgumentParser(
        description="Gemfile の gem 名・ソース URL の誤記を検出します",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
使用例:
  gemfilelint                          # カレントディレクトリの Gemfile を検査
  gemfilelint Gemfile gems/Gemfile     # 複数の Gemfile を検査
  gemfilelint --format json -o out.json Gemfile
        """
    )

    parser.add_argument(
        'paths',
        nargs='*',
        default=['Gemfile'],
        help='Gemfile パス（デフォルト: Gemfile）'
    )

    parser.add_argument(
        '--config', '-c',
        default=os.environ.get('GEMFILELINT_CONFIG'),
        help='設定ファイルパス（デフォルト: config.yml があれば使用）'
    )

    parser.add_argument(
        '--format', '-f',
        choices=['text', 'json'],
        help='出力形式（設定ファイルを上書き）'
    )

    parser.add_argument(
        '--output', '-o',
        help='JSON レポートの保存先（--format json 時）'
    )

    parser.add_argument(
        '--no-color',
        action='store_true',
        help='色付けを無効にする'
    )

    parser.add_argument(
        '--log-level',
        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
        help='ログレベル（設定ファイルを上書き）'
    )

    parser.add_argument(
        '--version', '-v',
        action='version',
        version=f'gemfilelint v{__version__}'
    )

    return parser.parse_args(argv)


def _apply_overrides(config: Dict[str, Any], args: argparse.Namespace):
    """コマンドライン引数で設定を上書き"""
    output_config = config['output']
    if args.format:
        output_config['format'] = args.format
    if args.output:
        output_config['json_path'] = args.output
    if args.no_color:
        output_config['color'] = False


def main(argv: Optional[List[str]] = None) -> int:
    """メイン関数"""
    # .env ファイルを読み込み
    load_dotenv()

    args = parse_arguments(argv)

    try:
        checker = GemfileChecker(args.config, log_level=args.log_level)
        _apply_overrides(checker.config, args)
        checker.initialize_modules()
        result = checker.run(args.paths)
    except GemfilelintError as e:
        logger.error(str(e))
        return EXIT_FATAL
    except KeyboardInterrupt:
        logger.info("Processing interrupted by user")
        return EXIT_FATAL

    return EXIT_OK if result.passed else EXIT_OFFENSES

