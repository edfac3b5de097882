"""Command-line entry point for the ESP adapter."""
from __future__ import annotations

import argparse
import json
import logging
import os
import re
import sys
import time
from pathlib import Path
from typing import Any

import yaml

from esp_adapter import EspError, make_adapter

APP_NAME = "esp-adapter"
APP_VERSION = "0.1.0"
REQUIRED_CONFIG_KEYS = {"adapter", "mailchimp"}
_ENV_PATTERN = re.compile(r"\$\{ENV:([A-Z0-9_]+)\}")


def _expand_env_placeholders(value: Any) -> Any:
    """Replace ``${ENV:VAR}`` placeholders in every string nested in *value*."""

    if isinstance(value, dict):
        return {key: _expand_env_placeholders(item) for key, item in value.items()}
    if isinstance(value, list):
        return [_expand_env_placeholders(item) for item in value]
    if not isinstance(value, str):
        return value

    def replacer(match: re.Match[str]) -> str:
        var_name = match.group(1)
        env_value = os.getenv(var_name)
        if env_value is None:
            raise RuntimeError(f"环境变量未设置：{var_name}")
        return env_value

    return _ENV_PATTERN.sub(replacer, value)


def load_config(path: Path) -> dict[str, Any]:
    """Load YAML configuration from *path* and expand environment placeholders."""

    if not path.exists():
        raise FileNotFoundError(f"配置文件不存在：{path}")

    with path.open("r", encoding="utf-8") as handle:
        data = yaml.safe_load(handle)

    if data is None:
        raise ValueError("配置文件为空，请填写必要配置后再运行。")
    if not isinstance(data, dict):
        raise ValueError("配置文件顶层必须为字典")

    return _expand_env_placeholders(data)


def validate_config(cfg: dict[str, Any]) -> None:
    """Validate that mandatory configuration keys are present and well-formed."""

    missing = REQUIRED_CONFIG_KEYS - cfg.keys()
    if missing:
        joined = ", ".join(sorted(missing))
        raise ValueError(f"配置缺少必填项：{joined}")

    if not isinstance(cfg.get("adapter"), str):
        raise ValueError("adapter 必须为字符串")

    section = cfg.get("mailchimp")
    if not isinstance(section, dict):
        raise ValueError("mailchimp 配置必须为字典")
    if not isinstance(section.get("api_key"), str):
        raise ValueError("mailchimp.api_key 必须为字符串")

    if not isinstance(cfg.get("log_level", "INFO"), str):
        raise ValueError("log_level 必须为字符串")


def setup_logger(log_dir: Path | None = None, level: str = "INFO") -> None:
    """Initialize console logging, plus a dated log file when *log_dir* is set."""

    fmt = "%(asctime)s [%(levelname)s] %(message)s"
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if log_dir is not None:
        log_dir.mkdir(parents=True, exist_ok=True)
        log_file = log_dir / f"run-{time.strftime('%Y%m%d')}.log"
        handlers.append(logging.FileHandler(log_file, encoding="utf-8"))

    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=fmt,
        handlers=handlers,
        force=True,
    )


def parse_params(pairs: list[str] | None) -> dict[str, str]:
    """Turn ``KEY=VALUE`` strings into a query option mapping."""

    options: dict[str, str] = {}
    for pair in pairs or []:
        key, sep, value = pair.partition("=")
        if not sep or not key.strip():
            raise ValueError(f"查询参数格式应为 KEY=VALUE：{pair}")
        options[key.strip()] = value
    return options


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments."""

    parser = argparse.ArgumentParser(description="ESP adapter - Mailchimp client")
    parser.add_argument("--config", default="config.yaml", help="配置文件路径（默认 config.yaml）")
    subparsers = parser.add_subparsers(dest="command", required=True)

    lists_parser = subparsers.add_parser("lists", help="列出所有受众列表")
    lists_parser.add_argument(
        "--param", action="append", metavar="KEY=VALUE", help="查询参数，可重复"
    )

    metrics_parser = subparsers.add_parser("list-metrics", help="查看单个列表的统计数据")
    metrics_parser.add_argument("list_id", help="列表 ID")
    metrics_parser.add_argument(
        "--param", action="append", metavar="KEY=VALUE", help="查询参数，可重复"
    )
    return parser.parse_args(argv)


def run_command(args: argparse.Namespace, adapter: Any) -> Any:
    """Dispatch the parsed sub-command to *adapter*."""

    options = parse_params(args.param)
    if args.command == "lists":
        return adapter.list_collections(options)
    return adapter.get_collection_metrics(args.list_id, options)


def main(argv: list[str] | None = None) -> int:
    """Entry point used by ``esp-adapter`` and ``python main.py``."""

    args = parse_args(argv)
    try:
        config_path = Path(args.config)
        cfg = load_config(config_path)
        validate_config(cfg)

        log_dir = cfg.get("log_dir")
        setup_logger(
            Path(log_dir).expanduser() if log_dir else None,
            level=cfg.get("log_level", "INFO"),
        )
        logging.info("%s v%s 启动 | 配置文件: %s", APP_NAME, APP_VERSION, config_path.resolve())

        adapter_name = cfg["adapter"]
        adapter = make_adapter(adapter_name, cfg)
        logging.info("使用适配器: %s | 命令: %s", adapter_name, args.command)

        result = run_command(args, adapter)
    except EspError as exc:
        status = exc.status if exc.status is not None else "n/a"
        kind = exc.kind.value if exc.kind is not None else "error"
        print(f"请求失败 [{kind}] status={status}: {exc.message or ''}", file=sys.stderr)
        return 1
    except Exception as exc:  # top-level guard for config and argument errors
        print(f"启动失败：{exc}", file=sys.stderr)
        return 1

    print(json.dumps(result, ensure_ascii=False, indent=2))
    return 0


if __name__ == "__main__":  # pragma: no cover - CLI entry
    sys.exit(main())
