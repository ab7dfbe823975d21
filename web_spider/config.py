# === FILE: web_spider/config.py ===
"""
Загрузка и валидация конфигурации одного запуска WebSpider.
Схема описана через Pydantic; объект конфигурации неизменяем.
"""
from __future__ import annotations

import errno
import json
import os
from pathlib import Path
from typing import Any, Optional, Union

import yaml
from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    HttpUrl,
    field_validator,
)

CRAWL_DELAY_ENV = "CRAWL_DELAY"
DEFAULT_CRAWL_DELAY_MS = 1000
DEFAULT_USER_AGENT = "Mozilla/5.0 (compatible; WebSpider/1.0)"


def _default_crawl_delay() -> int:
    raw = os.getenv(CRAWL_DELAY_ENV)
    if raw is None or raw.strip() == "":
        return DEFAULT_CRAWL_DELAY_MS
    try:
        return int(raw)
    except ValueError as exc:
        raise ValueError(f"{CRAWL_DELAY_ENV} должен быть целым числом миллисекунд, получено {raw!r}") from exc


class SpiderConfig(BaseModel):
    """Конфигурация одного обхода. Создаётся один раз и не меняется."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    url: HttpUrl = Field(..., description="Стартовый URL обхода.")
    nesting: int = Field(3, ge=0, description="Максимальная глубина переходов по ссылкам.")
    concurrency: int = Field(2, ge=1, description="Максимум одновременных загрузок.")
    target_dir: Path = Field(Path("./downloads"), description="Каталог для сохранения страниц.")
    crawl_delay: int = Field(
        default_factory=_default_crawl_delay,
        validate_default=True,
        ge=0,
        description="Пауза перед каждой сетевой загрузкой (мс).",
    )
    user_agent: str = Field(DEFAULT_USER_AGENT, min_length=1, description="Заголовок User-Agent.")
    timeout: Optional[float] = Field(None, gt=0, description="Таймаут одного запроса (секунд), None — без таймаута.")

    @field_validator("target_dir", mode="before")
    def _expand_target_dir(cls, v: Any) -> Any:
        if isinstance(v, str):
            return Path(v).expanduser()
        return v

    @property
    def crawl_delay_seconds(self) -> float:
        return self.crawl_delay / 1000.0


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as exc:
        raise ValueError(f"Неправильный YAML в {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise TypeError(f"Верхний уровень YAML должен быть mapping, получено {type(data).__name__}")
    return data


def _read_json(path: Path) -> dict[str, Any]:
    try:
        data = json.loads(path.read_text(encoding="utf-8")) or {}
    except json.JSONDecodeError as exc:
        raise ValueError(f"Неправильный JSON в {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise TypeError(f"Верхний уровень JSON должен быть mapping, получено {type(data).__name__}")
    return data


def load_config(path: Union[str, Path, None] = None, **overrides: Any) -> SpiderConfig:
    """
    Читает YAML или JSON (если path задан), накладывает overrides
    (значения None пропускаются) и возвращает проверенный SpiderConfig.
    """
    data: dict[str, Any] = {}
    if path is not None:
        path_obj = Path(path).expanduser().resolve()
        if not path_obj.is_file():
            raise FileNotFoundError(errno.ENOENT, os.strerror(errno.ENOENT), str(path_obj))

        suffix = path_obj.suffix.lower()
        if suffix in (".yaml", ".yml"):
            data = _read_yaml(path_obj)
        elif suffix == ".json":
            data = _read_json(path_obj)
        else:
            raise ValueError(f"Неподдерживаемый формат конфига: {suffix}")

    data.update({k: v for k, v in overrides.items() if v is not None})

    return SpiderConfig(**data)


__all__ = ["SpiderConfig", "load_config", "CRAWL_DELAY_ENV", "DEFAULT_CRAWL_DELAY_MS"]
