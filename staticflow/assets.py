"""Static asset copy with optional per-type minification."""
from fs import path as fspath

from staticflow.logging import get_logger
from staticflow.minify import MINIFIERS
from staticflow.site_fs import SiteFS

log = get_logger('assets')


def copy_assets(
    site_fs: SiteFS,
    src_dir: str,
    dest_dir: str,
    minify: bool = False,
    verbose: bool = False,
) -> int:
    """Recursively copy src_dir into dest_dir.

    With minify on, .css/.js/.html files are read as text and passed
    through the matching minifier. Everything else is copied byte for byte.

    Returns:
        Number of files written
    """
    site_fs.makedirs(dest_dir)
    count = 0

    for info in site_fs.scandir(src_dir):
        src_path = fspath.join(src_dir, info.name)
        dest_path = fspath.join(dest_dir, info.name)

        if info.is_dir:
            count += copy_assets(site_fs, src_path, dest_path, minify, verbose)
            continue

        minifier = MINIFIERS.get(fspath.splitext(info.name)[1]) if minify else None
        if minifier is not None:
            site_fs.writetext(dest_path, minifier(site_fs.readtext(src_path)))
        else:
            site_fs.writebytes(dest_path, site_fs.readbytes(src_path))
        count += 1

        if verbose:
            action = 'Minified and copied' if minifier is not None else 'Copied'
            log.info("%s: %s", action, fspath.relpath(src_path))

    return count
