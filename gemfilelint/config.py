"""
設定モジュール
YAML 設定ファイルを読み込み、既定値とマージする
"""

import copy
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml
from loguru import logger

from .errors import ConfigError
from .gemfile import DEFAULT_SOURCE


DEFAULT_CONFIG_FILE = "config.yml"

DEFAULT_CONFIG: Dict[str, Any] = {
    'spellcheck': {
        'max_distance': 2,
        'max_dependency_suggestions': 5,
    },
    'vocabulary': {
        'dependency_list': None,     # None なら同梱の gems.txt
        'extra_dependencies': [],
        'sources': [DEFAULT_SOURCE],
    },
    'logging': {
        'level': 'WARNING',
        'file': None,
    },
    'output': {
        'color': True,
        'format': 'text',            # text | json
        'json_path': None,
    },
}

OUTPUT_FORMATS = ('text', 'json')


def _merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """辞書を再帰的にマージ（override 優先）"""
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(merged.get(key), dict):
            # 空セクション（値なしのキー）は既定値のまま
            if value is None:
                continue
            if not isinstance(value, dict):
                raise ConfigError(f"Section '{key}' must be a mapping")
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def _validate(config: Dict[str, Any], source: str):
    spellcheck = config['spellcheck']
    # 違反には最低1件の修正候補を載せる
    for key, minimum in (('max_distance', 0), ('max_dependency_suggestions', 1)):
        value = spellcheck.get(key)
        if not isinstance(value, int) or isinstance(value, bool) or value < minimum:
            raise ConfigError(f"{source}: spellcheck.{key} must be an integer >= {minimum}, got {value!r}")

    sources = config['vocabulary'].get('sources')
    if not isinstance(sources, list) or not all(isinstance(uri, str) for uri in sources):
        raise ConfigError(f"{source}: vocabulary.sources must be a list of URLs")

    if config['output'].get('format') not in OUTPUT_FORMATS:
        raise ConfigError(f"{source}: output.format must be one of {', '.join(OUTPUT_FORMATS)}")


def load_config(config_path: Optional[Union[str, Path]] = None) -> Dict[str, Any]:
    """
    設定ファイルを読み込み

    パス省略時はカレントディレクトリの config.yml があれば読み込み、
    なければ既定値を使う。

    Args:
        config_path: 設定ファイルパス

    Returns:
        既定値とマージ済みの設定辞書

    Raises:
        ConfigError: 指定ファイルがない、または内容が不正な場合
    """
    if config_path is None:
        if not Path(DEFAULT_CONFIG_FILE).exists():
            logger.debug("No configuration file, using defaults")
            return copy.deepcopy(DEFAULT_CONFIG)
        config_path = DEFAULT_CONFIG_FILE

    try:
        with open(config_path, 'r', encoding='utf-8') as f:
            data = yaml.safe_load(f)
    except OSError as e:
        raise ConfigError(f"Failed to read configuration {config_path}: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {config_path}: {e}") from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError(f"{config_path}: configuration root must be a mapping")

    config = _merge(DEFAULT_CONFIG, data)
    _validate(config, str(config_path))

    logger.info(f"Configuration loaded from {config_path}")
    return config
