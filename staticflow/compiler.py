"""
Page compilation.

A page goes through three steps:
1. Import directives (<!-- @import NAME -->) are replaced by components
2. Root-absolute href/src values are rewritten relative to the page's depth
3. The result is minified, when enabled

Substitution is a single pass: a component's own content is never scanned
for further directives, so components cannot import other components.
"""
import re
from typing import Mapping

from staticflow.logging import get_logger
from staticflow.minify import minify_html
from staticflow.paths import base_prefix_for, depth_of
from staticflow.site_fs import SiteFS

log = get_logger('compiler')

IMPORT_DIRECTIVE = re.compile(r'<!--\s*@import\s+([A-Za-z0-9_]+)\s*-->')
ROOT_ABSOLUTE_URL = re.compile(r'(href|src)="/([^"]*)"')

# Values (after the leading slash) that point outside the site. A second
# slash means a protocol-relative URL (//cdn.example.com/...), which is external
# too and would break if prefixed.
_EXTERNAL_PREFIXES = ('http', '#', '/')


def missing_component_marker(name: str) -> str:
    return f'<!-- Component "{name}" not found -->'


def substitute_components(content: str, components: Mapping[str, str]) -> str:
    """Replace import directives with component content.

    Unknown names become a visible comment instead of failing the page.
    """
    def replace(match: 're.Match[str]') -> str:
        name = match.group(1)
        if name in components:
            return components[name]
        log.warning('Component "%s" not found', name)
        return missing_component_marker(name)

    return IMPORT_DIRECTIVE.sub(replace, content)


def rewrite_urls(content: str, prefix: str) -> str:
    """Swap the leading '/' of href/src values for `prefix`.

    External links (http...), in-page anchors (#...) and protocol-relative
    URLs (//host/...) are left alone.

    Example:
        >>> rewrite_urls('<a href="/css/site.css">', '../../')
        '<a href="../../css/site.css">'
    """
    def replace(match: 're.Match[str]') -> str:
        attr, value = match.groups()
        if value.startswith(_EXTERNAL_PREFIXES):
            return match.group(0)
        return f'{attr}="{prefix}{value}"'

    return ROOT_ABSOLUTE_URL.sub(replace, content)


class PageCompiler:
    """Turns page sources into output HTML.

    Usage:
        compiler = PageCompiler(site_fs, minify=config.minify)
        html = compiler.compile('/pages/blog/post.html', components)
    """

    def __init__(self, site_fs: SiteFS, minify: bool = False):
        self._site_fs = site_fs
        self._minify = minify

    def compile(self, page_path: str, components: Mapping[str, str]) -> str:
        """Read and transform one page.

        Args:
            page_path: Page path under the pages directory
            components: Component map for the current build cycle

        Returns:
            The compiled HTML
        """
        content = self._site_fs.readtext(page_path)
        content = substitute_components(content, components)

        depth = depth_of(page_path, self._site_fs.pages_dir)
        content = rewrite_urls(content, base_prefix_for(depth))

        if self._minify:
            content = minify_html(content)
        return content
