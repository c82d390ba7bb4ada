"""Directory depth and relative base prefixes for pages."""
from pathlib import PurePosixPath


def depth_of(page_path: str, pages_root: str) -> int:
    """Number of directories between the pages root and a page.

    Both arguments are forward-slash paths (PyFilesystem style).

    Examples:
        >>> depth_of('/pages/index.html', '/pages')
        0
        >>> depth_of('/pages/blog/2024/post.html', '/pages')
        2

    Raises:
        ValueError: If page_path is not under pages_root
    """
    relative = PurePosixPath(page_path).relative_to(PurePosixPath(pages_root))
    return len(relative.parent.parts)


def base_prefix_for(depth: int) -> str:
    """Prefix that climbs from a page at `depth` back to the output root."""
    if depth > 0:
        return '../' * depth
    return './'
