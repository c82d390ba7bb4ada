"""
Component loading.

Components are HTML fragments stored one per file in the components
directory. The file name without its extension is the component name
used by import directives.
"""
from typing import Dict

from fs import path as fspath

from staticflow.errors import ComponentsNotFoundError
from staticflow.logging import get_logger
from staticflow.minify import minify_html
from staticflow.site_fs import SiteFS

log = get_logger('components')

COMPONENT_EXTENSION = '.html'


def load_components(site_fs: SiteFS, minify: bool = False) -> Dict[str, str]:
    """Read every component into a name -> content mapping.

    Only files directly inside the components directory are loaded;
    subdirectories are skipped. A later file with the same name replaces
    an earlier one.

    Args:
        site_fs: Site filesystem
        minify: Pass each component through minify_html

    Returns:
        Fresh mapping; nothing is cached between calls

    Raises:
        ComponentsNotFoundError: If the components directory is missing
    """
    components_dir = site_fs.components_dir
    if not site_fs.isdir(components_dir):
        raise ComponentsNotFoundError(components_dir)

    components: Dict[str, str] = {}
    for info in site_fs.scandir(components_dir):
        if info.is_dir:
            continue
        name, ext = fspath.splitext(info.name)
        if ext != COMPONENT_EXTENSION:
            continue

        content = site_fs.readtext(fspath.join(components_dir, info.name))
        if minify:
            content = minify_html(content)
        components[name] = content

    log.debug("Loaded %d component(s) from %s", len(components), components_dir)
    return components
