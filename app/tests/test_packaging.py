from pathlib import Path

import pytest

tomllib = pytest.importorskip("tomllib")

PYPROJECT = Path(__file__).resolve().parents[2] / "pyproject.toml"


def test_flat_modules_are_not_installed_into_site_packages():
    config = tomllib.loads(PYPROJECT.read_text(encoding="utf-8"))
    setuptools = config["tool"]["setuptools"]

    assert setuptools["packages"] == []
    assert "py-modules" not in setuptools
    assert config["tool"]["pytest"]["ini_options"]["pythonpath"] == ["app"]
