"""Multi-threaded HTTP downloader that fetches files in byte ranges and joins the parts."""

__version__ = "1.0.0"
__all__ = ["context", "downloader", "http_helper", "tasks", "threadpool", "util"]