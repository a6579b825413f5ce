"""
Gemfile 読み込みモジュール
Ruby を実行せずに Gemfile を字句解析し、gem 宣言とソース宣言を抽出する
"""

import re
from collections import namedtuple
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterator, List, Optional, Union

from loguru import logger

from .errors import ManifestEvaluationError


DEFAULT_SOURCE = "https://rubygems.org/"

# Bundler が rubygems.org に読み替える旧式シンボル
LEGACY_SOURCE_SYMBOLS = {":gemcutter", ":rubygems", ":rubyforge"}

BLOCK_KEYWORDS = {"if", "unless", "case", "while", "until", "for", "begin", "def", "class", "module"}
CLAUSE_KEYWORDS = {"else", "elsif", "when", "in", "rescue", "ensure", "then"}
LOOP_KEYWORDS = {"while", "until", "for"}
MODIFIER_KEYWORDS = {"do", "if", "unless", "while", "until", "rescue"}

BRACKET_PAIRS = {"(": ")", "[": "]", "{": "}"}

TOKEN_PATTERN = re.compile(r"""
    (?P<comment>\#[^\n]*)
  | (?P<newline>\n|;)
  | (?P<continuation>\\\r?\n)
  | (?P<space>[ \t\r]+)
  | (?P<string>"(?:[^"\\\n]|\\.)*"|'(?:[^'\\\n]|\\.)*')
  | (?P<label>[A-Za-z_]\w*[?!]?:(?!:))
  | (?P<symbol>:[A-Za-z_]\w*[?!=]?|:"(?:[^"\\\n]|\\.)*")
  | (?P<scope>::?)
  | (?P<ident>[A-Za-z_]\w*[?!]?)
  | (?P<variable>(?:@@?|\$)\w+)
  | (?P<number>\d[\d_]*(?:\.\d+)*)
  | (?P<arrow>=>)
  | (?P<operator>[=!<>~+\-*/%&|^?.]+)
  | (?P<open>[(\[{])
  | (?P<close>[)\]}])
  | (?P<comma>,)
""", re.VERBOSE)

# 演算子・開き括弧・カンマ・キーワードの直後の '/' は正規表現リテラルの開始
REGEX_PATTERN = re.compile(r"(?P<regex>/(?:[^/\\\n]|\\.)*/[imxo]*)")
REGEX_PRECEDING_KINDS = {"newline", "operator", "arrow", "open", "comma"}
REGEX_PRECEDING_KEYWORDS = {"if", "unless", "elsif", "when", "while", "until", "and", "or", "not", "return", "then"}

Token = namedtuple("Token", ["kind", "value", "line"])


@dataclass
class GemfileDeclarations:
    """Gemfile の評価結果"""
    path: str
    dependencies: List[str] = field(default_factory=list)
    sources: List[str] = field(default_factory=list)


def normalize_source(uri: str) -> str:
    """ソース URL を Bundler と同じく末尾スラッシュ付きにそろえる"""
    return uri if uri.endswith("/") else uri + "/"


class GemfileEvaluator:
    """Gemfile を静的に評価するクラス"""

    def __init__(self, default_source: str = DEFAULT_SOURCE):
        """
        初期化

        Args:
            default_source: ソース宣言がない場合に暗黙で使われるソース
        """
        self.default_source = default_source

    def evaluate(self, path: Union[str, Path]) -> GemfileDeclarations:
        """
        Gemfile ファイルを評価

        Args:
            path: Gemfile パス

        Returns:
            抽出された宣言

        Raises:
            ManifestEvaluationError: 読み込めない、または構文が不正な場合
        """
        try:
            text = Path(path).read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise ManifestEvaluationError(str(path), f"cannot read file ({e})") from e

        return self.evaluate_text(text, str(path))

    def evaluate_text(self, text: str, path: str = "Gemfile") -> GemfileDeclarations:
        """
        Gemfile の内容を評価

        Args:
            text: Gemfile の内容
            path: エラー表示用のパス

        Returns:
            抽出された宣言
        """
        declarations = GemfileDeclarations(path=path)
        open_blocks: List[int] = []

        for statement in self._statements(self._tokenize(text, path), path):
            self._track_blocks(statement, open_blocks, path)
            self._evaluate_statement(statement, declarations)

        if open_blocks:
            raise ManifestEvaluationError(
                path, "missing 'end' for block", line=open_blocks[-1]
            )

        # 重複は最初の宣言だけ残す
        declarations.sources = list(dict.fromkeys(declarations.sources))
        if not declarations.sources:
            declarations.sources = [self.default_source]

        logger.debug(
            f"Evaluated {path}: {len(declarations.dependencies)} gems, "
            f"{len(declarations.sources)} sources"
        )
        return declarations

    def _tokenize(self, text: str, path: str) -> Iterator[Token]:
        """字句解析"""
        position = 0
        line = 1
        at_line_start = True
        previous: Optional[Token] = None

        while position < len(text):
            if text[position] == "/" and _regex_allowed(previous):
                match = REGEX_PATTERN.match(text, position)
                if match is None:
                    raise ManifestEvaluationError(path, "unterminated regexp", line=line)
            else:
                match = TOKEN_PATTERN.match(text, position)
            if match is None:
                char = text[position]
                if char in "\"'":
                    raise ManifestEvaluationError(path, "unterminated string", line=line)
                raise ManifestEvaluationError(path, f"unexpected character {char!r}", line=line)

            kind = match.lastgroup
            value = match.group()
            position = match.end()

            if kind == "ident" and value == "__END__" and at_line_start:
                return

            if kind in ("comment", "space"):
                pass
            elif kind == "continuation":
                line += 1
            else:
                previous = Token(kind, value, line)
                yield previous

            if kind == "newline":
                if value == "\n":
                    line += 1
                at_line_start = True
            elif kind != "space":
                at_line_start = False

    def _statements(self, tokens: Iterator[Token], path: str) -> Iterator[List[Token]]:
        """トークン列を文単位に分割"""
        statement: List[Token] = []
        brackets: List[Token] = []

        for token in tokens:
            if token.kind == "open":
                brackets.append(token)
            elif token.kind == "close":
                if not brackets or BRACKET_PAIRS[brackets[-1].value] != token.value:
                    raise ManifestEvaluationError(path, f"unexpected '{token.value}'", line=token.line)
                brackets.pop()

            if token.kind == "newline":
                if brackets or (statement and _continues(statement[-1])):
                    continue
                if statement:
                    yield statement
                    statement = []
                continue

            statement.append(token)

        if brackets:
            raise ManifestEvaluationError(
                path, f"unclosed '{brackets[-1].value}'", line=brackets[-1].line
            )
        if statement:
            yield statement

    def _track_blocks(self, statement: List[Token], open_blocks: List[int], path: str):
        """do/end などのブロックの対応をチェック"""
        first = statement[0]
        depth = 0

        if first.kind == "ident" and first.value in CLAUSE_KEYWORDS and not open_blocks:
            raise ManifestEvaluationError(path, f"unexpected '{first.value}'", line=first.line)

        for index, token in enumerate(statement):
            if token.kind == "open":
                depth += 1
            elif token.kind == "close":
                depth -= 1
            elif token.kind != "ident" or depth:
                continue
            elif index == 0 and token.value in BLOCK_KEYWORDS:
                open_blocks.append(token.line)
            elif token.value == "do" and first.value not in LOOP_KEYWORDS:
                open_blocks.append(token.line)
            elif token.value == "end":
                if not open_blocks:
                    raise ManifestEvaluationError(path, "unexpected 'end'", line=token.line)
                open_blocks.pop()

    def _evaluate_statement(self, statement: List[Token], declarations: GemfileDeclarations):
        """gem / source 宣言を取り出す"""
        method = statement[0]
        if method.kind != "ident" or method.value not in ("gem", "source"):
            return

        args = _split_arguments(_strip_block(statement[1:]))
        if method.value == "gem":
            self._evaluate_gem(method, args, declarations)
        else:
            self._evaluate_source(method, args, declarations)

    def _evaluate_gem(self, method: Token, args: List[List[Token]], declarations: GemfileDeclarations):
        if not args:
            raise ManifestEvaluationError(declarations.path, "gem requires a name", line=method.line)

        name = _literal_string(args[0])
        if name is None:
            logger.debug(f"Skipping gem with non-literal name at {declarations.path}:{method.line}")
        elif not name or re.search(r"\s", name):
            raise ManifestEvaluationError(
                declarations.path, f"'{name}' is not a valid gem name", line=method.line
            )
        else:
            declarations.dependencies.append(name)

        for option in args[1:]:
            uri = _source_option(option)
            if uri is not None:
                declarations.sources.append(normalize_source(uri))

    def _evaluate_source(self, method: Token, args: List[List[Token]], declarations: GemfileDeclarations):
        if not args:
            raise ManifestEvaluationError(declarations.path, "source requires a URL", line=method.line)

        first = args[0]
        if len(first) == 1 and first[0].kind == "symbol":
            if first[0].value not in LEGACY_SOURCE_SYMBOLS:
                raise ManifestEvaluationError(
                    declarations.path, f"unknown source {first[0].value}", line=method.line
                )
            declarations.sources.append(self.default_source)
            return

        uri = _literal_string(first)
        if uri is None:
            logger.debug(f"Skipping non-literal source at {declarations.path}:{method.line}")
            return
        declarations.sources.append(normalize_source(uri))


def _regex_allowed(previous: Optional[Token]) -> bool:
    """直前のトークンから '/' が正規表現の開始かを判定（それ以外は除算）"""
    if previous is None or previous.kind in REGEX_PRECEDING_KINDS:
        return True
    return previous.kind == "ident" and previous.value in REGEX_PRECEDING_KEYWORDS


def _continues(token: Token) -> bool:
    """行末のトークンが次の行へ続くか"""
    if token.kind in ("comma", "arrow"):
        return True
    # ブロック引数の閉じ '|' は継続ではない
    return token.kind == "operator" and token.value != "|"


def _strip_block(tokens: List[Token]) -> List[Token]:
    """末尾の do ブロック開始・後置 if/unless と括弧を取り除く"""
    depth = 0
    for index, token in enumerate(tokens):
        if token.kind == "open":
            depth += 1
        elif token.kind == "close":
            depth -= 1
        elif token.kind == "ident" and depth == 0 and token.value in MODIFIER_KEYWORDS:
            tokens = tokens[:index]
            break
    if len(tokens) >= 2 and tokens[0].value == "(" and tokens[-1].value == ")":
        tokens = tokens[1:-1]
    return tokens


def _split_arguments(tokens: List[Token]) -> List[List[Token]]:
    """トップレベルのカンマで引数を分割"""
    args: List[List[Token]] = []
    current: List[Token] = []
    depth = 0

    for token in tokens:
        if token.kind == "open":
            depth += 1
        elif token.kind == "close":
            depth -= 1
        elif token.kind == "comma" and depth == 0:
            args.append(current)
            current = []
            continue
        current.append(token)

    if current:
        args.append(current)
    return args


def _literal_string(arg: List[Token]) -> Optional[str]:
    """単一の文字列リテラルならその値を返す（式展開を含む場合は None）"""
    if len(arg) != 1 or arg[0].kind != "string":
        return None

    raw = arg[0].value
    quote, body = raw[0], raw[1:-1]
    if quote == '"' and "#{" in body:
        return None
    if quote == "'":
        return re.sub(r"\\([\\'])", r"\1", body)
    return re.sub(r"\\(.)", r"\1", body)


def _source_option(option: List[Token]) -> Optional[str]:
    """gem の source: オプションを取り出す"""
    if len(option) == 2 and option[0].kind == "label" and option[0].value == "source:":
        return _literal_string(option[1:])
    if (
        len(option) == 3
        and option[0].kind == "symbol"
        and option[0].value == ":source"
        and option[1].kind == "arrow"
    ):
        return _literal_string(option[2:])
    return None
