# === FILE: web_spider/cli.py ===
#!/usr/bin/env python3
"""
Точка входа WebSpider для командной строки.

Слой представления: собирает конфигурацию, подписывается на поток событий
краулера и печатает итог. Логика обхода живёт в web_spider.crawler.

Опции:
  URL                   Стартовый URL
  --nesting, -n INT     Глубина обхода (default: 3)
  --concurrency, -c INT Одновременных загрузок (default: 2)
  --target, -t DIR      Каталог для страниц (default: ./downloads)
  --delay MS            Пауза перед загрузкой, мс (env CRAWL_DELAY, default: 1000)
  --config PATH         YAML/JSON-конфиг; опции командной строки важнее
  --json PATH           Сохранить JSON-отчёт
  --strict              Код выхода 1, если были ошибки загрузки

Пример:
  web-spider https://hl7.org/fhir/R4/index.html -n 2 -c 4 -t ./downloads
"""
import asyncio
import sys
from pathlib import Path

import click

from web_spider import __version__
from web_spider.config import load_config
from web_spider.crawler.events import COMPLETED, SPIDER_ERROR
from web_spider.crawler.spider import crawl
from web_spider.logger import init_logging
from web_spider.report import render_json

CONTEXT_SETTINGS = dict(help_option_names=["--help", "-h"])


def print_error(message: str):
    click.secho(message, fg='red', err=True)
    sys.exit(1)


def _echo_event(event):
    if event.name == COMPLETED:
        click.echo(f'saved {event.payload["url"]} -> {event.payload["filename"]}')
    elif event.name == SPIDER_ERROR:
        url = event.payload.get("url") or event.payload.get("link") or "unknown"
        click.echo(f'error {url}: {event.payload["error"]}', err=True)


@click.command(context_settings=CONTEXT_SETTINGS)
@click.version_option(__version__, '--version', '-v', message='WebSpider, version %(version)s')
@click.argument('url')
@click.option('--nesting', '-n', type=click.IntRange(min=0), default=None,
              help='Глубина обхода ссылок [3]')
@click.option('--concurrency', '-c', type=click.IntRange(min=1), default=None,
              help='Лимит одновременных загрузок [2]')
@click.option('--target', '-t', 'target_dir', default=None,
              type=click.Path(file_okay=False, path_type=Path),
              help='Каталог для сохранения страниц [./downloads]')
@click.option('--delay', 'crawl_delay', type=click.IntRange(min=0), default=None,
              help='Пауза перед каждой загрузкой, мс [$CRAWL_DELAY или 1000]')
@click.option('--config', 'config_path', default=None,
              type=click.Path(exists=True, dir_okay=False, path_type=Path),
              help='Путь к YAML/JSON-конфигу.')
@click.option('--json', 'json_output', default=None,
              type=click.Path(writable=True, dir_okay=False, path_type=Path),
              help='Сохранить JSON-отчёт в файл')
@click.option('--strict', is_flag=True, help='Завершиться с кодом 1 при ошибках загрузки')
@click.option('--quiet', '-q', is_flag=True, help='Не печатать события загрузки')
@click.option(
    '--log-level', 'log_level',
    default='WARNING', show_default=True,
    type=click.Choice(['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']),
    help='Уровень логирования'
)
@click.option(
    '--log-file', 'log_file',
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help='Путь к файлу логов (stdout, если не указан)'
)
def cli(url, nesting, concurrency, target_dir, crawl_delay, config_path, json_output,
        strict, quiet, log_level, log_file):
    """Рекурсивно скачать сайт, начиная с URL."""
    init_logging(level=log_level, log_file=str(log_file) if log_file else None)
    try:
        cfg = load_config(
            config_path,
            url=url,
            nesting=nesting,
            concurrency=concurrency,
            target_dir=target_dir,
            crawl_delay=crawl_delay,
        )
    except Exception as e:
        print_error(f'Ошибка конфигурации: {e}')

    click.echo(f'Spider started: {cfg.url}')
    click.echo(f'  nesting={cfg.nesting} concurrency={cfg.concurrency} target={cfg.target_dir}')

    try:
        report = asyncio.run(crawl(cfg, on_event=None if quiet else _echo_event))
    except Exception as e:
        print_error(f'Ошибка при обходе: {e}')

    summary = f'Spider completed - {len(report.saved) + len(report.cached)} files'
    if report.errors:
        summary += f' ({len(report.errors)} errors)'
    click.echo(summary)

    if json_output:
        try:
            saved_json = render_json(report, json_output)
            click.echo(f'JSON report: {saved_json}')
        except OSError as e:
            print_error(f'Ошибка при сохранении JSON: {e}')

    if strict and report.errors:
        sys.exit(1)


if __name__ == "__main__":
    cli()
