"""web_spider.crawler: crawl-and-download engine."""

from .downloader import Downloader
from .errors import FetchError, SpiderError, StorageError
from .events import EventEmitter
from .link_extractor import extract_links
from .models import CrawlEvent, CrawlReport, DownloadTask
from .paths import url_to_path
from .scheduler import TaskQueue
from .spider import Spider, crawl
from .store import FileSystemStore, MemoryStore, PageStore
from .url_filter import is_eligible
from .visited import VisitedSet

__all__ = [
    "CrawlEvent",
    "CrawlReport",
    "Downloader",
    "DownloadTask",
    "EventEmitter",
    "FetchError",
    "FileSystemStore",
    "MemoryStore",
    "PageStore",
    "Spider",
    "SpiderError",
    "StorageError",
    "TaskQueue",
    "VisitedSet",
    "crawl",
    "extract_links",
    "is_eligible",
    "url_to_path",
]
