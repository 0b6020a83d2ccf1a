"""Tests for the pipeline template loaders."""

from __future__ import annotations

from pathlib import Path

import pytest

from domain.services.pipeline_compiler import compile_pipeline
from infrastructure.template_loaders.fsspec_template_loader import FsspecTemplateLoader
from infrastructure.template_loaders.package_template_loader import PackageTemplateLoader

TEMPLATE = b'[{"$match": {"owner": "##owner##"}}]'
BUNDLED_PIPELINES = Path(__file__).resolve().parents[2] / "pipelines"


class TestFsspecTemplateLoader:
    """Test loading templates through fsspec URLs."""

    def test_load_from_plain_path(self, tmp_path: Path) -> None:
        (tmp_path / "by_owner.json").write_bytes(TEMPLATE)

        assert FsspecTemplateLoader(str(tmp_path)).load("by_owner.json") == TEMPLATE

    def test_load_from_file_url(self, tmp_path: Path) -> None:
        (tmp_path / "reports").mkdir()
        (tmp_path / "reports" / "daily.json").write_bytes(b"[]")

        loader = FsspecTemplateLoader(f"file://{tmp_path}/")

        assert loader.load("/reports/daily.json") == b"[]"

    def test_missing_file_returns_none(self, tmp_path: Path) -> None:
        assert FsspecTemplateLoader(str(tmp_path)).load("absent.json") is None

    def test_directory_is_not_a_template(self, tmp_path: Path) -> None:
        (tmp_path / "nested").mkdir()

        assert FsspecTemplateLoader(str(tmp_path)).load("nested") is None

    def test_in_memory_filesystem(self) -> None:
        import fsspec  # noqa: PLC0415

        fs = fsspec.filesystem("memory")
        fs.pipe("/templates/count.json", b'[{"$count": "n"}]')

        loader = FsspecTemplateLoader("memory://templates")

        assert loader.load("count.json") == b'[{"$count": "n"}]'
        fs.rm("/templates", recursive=True)

    @pytest.mark.parametrize(
        ("name", "args"),
        [
            ("files_by_content_type.json", {"contentType": "text/csv", "limit": "5"}),
            ("storage_by_content_type.json", None),
        ],
    )
    def test_bundled_templates_compile(self, name: str, args: dict | None) -> None:
        raw = FsspecTemplateLoader(f"file://{BUNDLED_PIPELINES}").load(name)

        assert raw is not None
        assert compile_pipeline(raw.decode("utf-8"), args)


class TestPackageTemplateLoader:
    """Test loading templates bundled in a Python package."""

    @pytest.fixture
    def template_package(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> str:
        package_dir = tmp_path / "bundled_pipelines_pkg"
        (package_dir / "pipelines").mkdir(parents=True)
        (package_dir / "__init__.py").write_text("")
        (package_dir / "pipelines" / "by_owner.json").write_bytes(TEMPLATE)
        monkeypatch.syspath_prepend(str(tmp_path))
        return "bundled_pipelines_pkg"

    def test_load_nested_resource(self, template_package: str) -> None:
        loader = PackageTemplateLoader(template_package)

        assert loader.load("pipelines/by_owner.json") == TEMPLATE

    def test_missing_resource_returns_none(self, template_package: str) -> None:
        assert PackageTemplateLoader(template_package).load("pipelines/absent.json") is None

    def test_unknown_package_returns_none(self) -> None:
        assert PackageTemplateLoader("no_such_pipelines_package").load("x.json") is None
