from __future__ import annotations

import argparse
import json
import logging
import os
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from .config import TransformerConfig, load_config, load_variables_file
from .errors import LiquidishUserError
from .strategies import default_registry
from .transformer import LiquidishTransformer
from .transformer.components import build_variables_scope
from .version import tool_version

DEBUG_ENV_VAR = "LIQUIDISH_DEBUG"

_LOG = logging.getLogger("liquidish")


def _setup_logging_once(debug: bool = False) -> None:
    if getattr(_setup_logging_once, "_inited", False):
        if debug:
            _LOG.setLevel(logging.DEBUG)
        return
    _setup_logging_once._inited = True  # type: ignore[attr-defined]
    level = logging.DEBUG if debug or os.environ.get(DEBUG_ENV_VAR) else logging.WARNING
    _LOG.setLevel(level)
    if not _LOG.handlers:
        h = logging.StreamHandler()
        h.setFormatter(logging.Formatter("[%(levelname)s] %(message)s"))
        _LOG.addHandler(h)


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="liquidish",
        description="Liquidish template transformer (Liquid-like source -> target template language)",
        add_help=True,
    )
    p.add_argument("-v", "--version", action="version", version=f"%(prog)s {tool_version()}")
    sub = p.add_subparsers(dest="cmd", required=True)

    sp_render = sub.add_parser("render", help="Транслировать один файл и вывести результат")
    sp_render.add_argument("file", help="исходный файл шаблона (.liquid)")
    sp_render.add_argument(
        "--strategy",
        choices=default_registry.names(),
        help="целевой язык (по умолчанию из liquidish.yaml или ispconfig)",
    )
    sp_render.add_argument(
        "--show-comments",
        action="store_true",
        help="выводить содержимое {%% comment %%} как HTML-комментарий",
    )
    sp_render.add_argument(
        "--var",
        action="append",
        metavar="KEY=VALUE",
        help="переменная, известная на этапе компиляции (можно указать несколько)",
    )
    sp_render.add_argument(
        "--vars-file",
        metavar="FILE",
        help="JSON или YAML файл с переменными",
    )
    sp_render.add_argument(
        "--config",
        metavar="FILE",
        help="путь к liquidish.yaml (по умолчанию ищется от каталога файла вверх)",
    )
    sp_render.add_argument(
        "-o", "--output",
        metavar="OUT",
        help="записать результат в файл вместо stdout",
    )
    sp_render.add_argument("--debug", action="store_true", help="подробный лог в stderr")

    sp_list = sub.add_parser("list", help="Списки сущностей (JSON)")
    sp_list.add_argument("what", choices=["strategies"], help="что вывести")

    return p


def _parse_vars(items: Optional[List[str]]) -> Dict[str, str]:
    """Парсит список 'KEY=VALUE' в словарь."""
    result: Dict[str, str] = {}
    if not items:
        return result

    for item in items:
        if "=" not in item:
            raise ValueError(f"Invalid variable format '{item}'. Expected 'KEY=VALUE'")
        key, value = item.split("=", 1)
        key = key.strip()
        if not key:
            raise ValueError(f"Invalid variable format '{item}'. Empty key")
        result[key] = value
    return result


def _resolve_config(ns: argparse.Namespace, source: Path) -> TransformerConfig:
    config_path = Path(ns.config) if ns.config else None
    config = load_config(config_path, start=source.parent)

    variables: Dict[str, Any] = {}
    if ns.vars_file:
        variables.update(load_variables_file(Path(ns.vars_file)))
    variables.update(_parse_vars(ns.var))

    return config.with_overrides(
        strategy=ns.strategy,
        show_comments=True if ns.show_comments else None,
        variables=variables,
    )


def run_render(source: Path, config: TransformerConfig) -> Optional[str]:
    """
    Транслирует файл с заданной конфигурацией.

    Returns:
        Результат или None, если файл разрешено использовать только как компонент
    """
    if not source.is_file():
        raise ValueError(f"Template file not found: {source}")

    transformer = LiquidishTransformer(
        default_registry.get(config.strategy),
        show_comments=config.show_comments,
        component_extension=config.component_extension,
    )
    if config.variables:
        # Вложенные значения доступны по именам user.name и items[0]
        frame: Dict[str, Any] = {}
        for key, value in config.variables.items():
            build_variables_scope(value, key, frame)
        transformer.push_to_scope(frame)

    contents = source.read_text(encoding="utf-8")
    return transformer.transform(contents, str(source.resolve()))


def main(argv: list[str] | None = None) -> int:
    ns = _build_parser().parse_args(argv)
    _setup_logging_once(bool(getattr(ns, "debug", False)))

    try:
        if ns.cmd == "render":
            source = Path(ns.file)
            result = run_render(source, _resolve_config(ns, source))
            if result is None:
                _LOG.info(f"{source} is a child-only component, nothing rendered")
                return 0
            if ns.output:
                Path(ns.output).write_text(result, encoding="utf-8")
            else:
                sys.stdout.write(result)
            return 0

        if ns.cmd == "list":
            if ns.what == "strategies":
                sys.stdout.write(json.dumps(default_registry.names(), ensure_ascii=False))
                return 0
            raise ValueError(f"Unknown list target: {ns.what}")

    except (LiquidishUserError, ValueError) as e:
        sys.stderr.write(str(e).rstrip() + "\n")
        return 2

    return 2


if __name__ == "__main__":
    raise SystemExit(main())
