class PipelineError(RuntimeError):
    """Base error for a failed analysis run."""


class FetchError(PipelineError):
    """Transport, HTTP status or content-decoding failure for one page."""

    def __init__(self, url: str, message: str):
        super().__init__(f"{url}: {message}")
        self.url = url
