from __future__ import annotations

from importlib.resources import files

import structlog

from application.ports.template_loader import TemplateLoader

logger = structlog.get_logger()


class PackageTemplateLoader(TemplateLoader):
    """Load pipeline templates shipped as data files inside a Python package.

    Names are relative to the package root, e.g. ``"pipelines/by_owner.json"``.
    """

    def __init__(self, package: str) -> None:
        self.package = package

    def load(self, name: str) -> bytes | None:
        try:
            resource = files(self.package).joinpath(*name.strip("/").split("/"))
        except ModuleNotFoundError:
            logger.warning("pipeline_template_package_missing", package=self.package)
            return None

        if not resource.is_file():
            logger.warning("pipeline_template_missing", name=name, package=self.package)
            return None
        return resource.read_bytes()
