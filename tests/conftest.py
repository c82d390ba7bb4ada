"""Pytest fixtures for staticflow tests."""
import os
from pathlib import Path
from typing import Callable, Dict, Union

import pytest

from staticflow.config import SiteConfig
from staticflow.logging import reset_logging
from staticflow.site_fs import SiteFS


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Keep STATICFLOW_* variables from the outer shell out of tests."""
    for key in list(os.environ):
        if key.startswith('STATICFLOW_'):
            monkeypatch.delenv(key)
    reset_logging()
    yield
    reset_logging()


@pytest.fixture
def config(tmp_path):
    """Default configuration rooted at a temporary directory."""
    return SiteConfig(root=tmp_path)


@pytest.fixture
def site(config):
    """Empty in-memory site filesystem."""
    site_fs = SiteFS.in_memory(config)
    yield site_fs
    site_fs.close()


@pytest.fixture
def make_site(tmp_path) -> Callable[[Dict[str, Union[str, bytes]]], Path]:
    """Write a site to disk from a {relative path: content} mapping."""
    def _make(files: Dict[str, Union[str, bytes]]) -> Path:
        for rel_path, content in files.items():
            path = tmp_path / rel_path
            path.parent.mkdir(parents=True, exist_ok=True)
            if isinstance(content, bytes):
                path.write_bytes(content)
            else:
                path.write_text(content, encoding='utf-8')
        return tmp_path
    return _make
