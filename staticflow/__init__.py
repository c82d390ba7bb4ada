"""staticflow: component-based static site builder with a watching dev server."""

from staticflow.builder import BuildReport, SiteBuilder
from staticflow.compiler import PageCompiler
from staticflow.components import load_components
from staticflow.config import SiteConfig, load_config
from staticflow.errors import ComponentsNotFoundError, ConfigError, StaticflowError
from staticflow.minify import minify_css, minify_html, minify_js
from staticflow.paths import base_prefix_for, depth_of
from staticflow.site_fs import SiteFS

__version__ = '0.1.0'

__all__ = [
    'BuildReport',
    'ComponentsNotFoundError',
    'ConfigError',
    'PageCompiler',
    'SiteBuilder',
    'SiteConfig',
    'SiteFS',
    'StaticflowError',
    'base_prefix_for',
    'depth_of',
    'load_components',
    'load_config',
    'minify_css',
    'minify_html',
    'minify_js',
]
