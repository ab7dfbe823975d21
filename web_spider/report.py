# web_spider/report.py

"""
Сохранение итогов обхода (CrawlReport) в JSON.
"""
import json
from pathlib import Path

from web_spider.crawler.models import CrawlReport


def render_json(report: CrawlReport, output_path: Path | str, *, pretty: bool = True) -> Path:
    """
    Сохраняет отчёт report в формате JSON по указанному пути.

    :param report: объект CrawlReport с итогами обхода
    :param output_path: путь к JSON-файлу
    :return: Path сохранённого файла
    """
    output = Path(output_path)
    output.parent.mkdir(parents=True, exist_ok=True)

    data = report.as_dict()
    data["succeeded"] = report.succeeded

    with output.open("w", encoding="utf-8") as f:
        json.dump(data, f, ensure_ascii=False, indent=2 if pretty else None)

    return output


__all__ = ["render_json"]
