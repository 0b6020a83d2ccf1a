from __future__ import annotations

import fsspec
import structlog

from application.ports.template_loader import TemplateLoader

logger = structlog.get_logger()


class FsspecTemplateLoader(TemplateLoader):
    """Load pipeline templates from a local directory or any fsspec URL.

    ``base_url`` may be a plain path (``/srv/pipelines``), a ``file://`` URL or a
    remote location such as ``s3://bucket/pipelines``.
    """

    def __init__(self, base_url: str, *, storage_options: dict | None = None) -> None:
        self.base_url = base_url.rstrip("/")
        self.storage_options = storage_options or {}

    def _url(self, name: str) -> str:
        return f"{self.base_url}/{name.lstrip('/')}"

    def load(self, name: str) -> bytes | None:
        fs, path = fsspec.core.url_to_fs(self._url(name), **self.storage_options)
        if not fs.isfile(path):
            logger.warning("pipeline_template_missing", name=name, base_url=self.base_url)
            return None

        with fs.open(path, "rb") as f:
            return f.read()
