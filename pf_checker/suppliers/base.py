from abc import ABC, abstractmethod


class PageFetcher(ABC):
    @property
    @abstractmethod
    def name(self) -> str:
        """Short unique fetcher name, e.g. 'propertyfinder'."""

    @abstractmethod
    def fetch(self, url: str) -> str:
        """Return the decoded page markup; raise FetchError on failure."""

    def close(self) -> None:
        """Release connections; fetchers without any keep the no-op."""

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()
