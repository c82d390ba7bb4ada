"""Site filesystem for the build pipeline using PyFilesystem2.

All build-time file access goes through SiteFS, which wraps a single
PyFilesystem2 FS rooted at the site root:
- Native: OSFS over SiteConfig.root
- Tests: MemoryFS, populated with writetext() before building

Paths handed to SiteFS are PyFilesystem paths ('/pages/blog/post.html'):
forward slashes, absolute from the site root.
"""

from typing import List, Optional

from fs import path as fspath
from fs.base import FS
from fs.info import Info
from fs.memoryfs import MemoryFS
from fs.osfs import OSFS

from staticflow.config import SiteConfig


class SiteFS:
    """Directory-entry access for one site.

    Example usage:
        site_fs = SiteFS(config)

        for info in site_fs.scandir(site_fs.pages_dir):
            if info.is_dir:
                ...

        # In tests
        site_fs = SiteFS.in_memory(config)
        site_fs.writetext('/_components/nav.html', '<nav>N</nav>')
    """

    def __init__(self, config: SiteConfig, fs: Optional[FS] = None):
        """Open the site root.

        Args:
            config: Site configuration (directory names)
            fs: Filesystem to use instead of an OSFS over config.root

        Raises:
            fs.errors.CreateFailed: If config.root does not exist
        """
        self._config = config
        self._fs = fs if fs is not None else OSFS(str(config.root))

    @classmethod
    def in_memory(cls, config: SiteConfig) -> 'SiteFS':
        """Create a SiteFS backed by an empty MemoryFS."""
        return cls(config, MemoryFS())

    @property
    def fs(self) -> FS:
        """Get the underlying FS for direct operations."""
        return self._fs

    @property
    def components_dir(self) -> str:
        return fspath.abspath(self._config.components)

    @property
    def pages_dir(self) -> str:
        return fspath.abspath(self._config.pages)

    @property
    def assets_dir(self) -> str:
        return fspath.abspath(self._config.assets)

    @property
    def output_dir(self) -> str:
        return fspath.abspath(self._config.output)

    def exists(self, path: str) -> bool:
        return self._fs.exists(path)

    def isdir(self, path: str) -> bool:
        return self._fs.isdir(path)

    def isfile(self, path: str) -> bool:
        return self._fs.isfile(path)

    def scandir(self, path: str) -> List[Info]:
        """List directory entries sorted by name.

        Raises:
            fs.errors.ResourceNotFound: If the directory doesn't exist
            fs.errors.DirectoryExpected: If path is a file
        """
        return sorted(self._fs.scandir(path), key=lambda info: info.name)

    def readtext(self, path: str) -> str:
        """Read UTF-8 text; undecodable bytes become U+FFFD."""
        return self._fs.readtext(path, encoding='utf-8', errors='replace')

    def readbytes(self, path: str) -> bytes:
        return self._fs.readbytes(path)

    def _ensure_parent(self, path: str) -> None:
        parent = fspath.dirname(path)
        if parent not in ('', '/'):
            self._fs.makedirs(parent, recreate=True)

    def writetext(self, path: str, contents: str) -> None:
        """Write UTF-8 text, creating parent directories as needed."""
        self._ensure_parent(path)
        self._fs.writetext(path, contents, encoding='utf-8')

    def writebytes(self, path: str, contents: bytes) -> None:
        """Write bytes, creating parent directories as needed."""
        self._ensure_parent(path)
        self._fs.writebytes(path, contents)

    def makedirs(self, path: str) -> None:
        self._fs.makedirs(path, recreate=True)

    def removetree(self, path: str) -> None:
        """Delete a directory and everything under it."""
        self._fs.removetree(path)

    def describe(self) -> str:
        """Human-readable summary of where the site directories live."""
        lines = [f"Site filesystem: {self._fs}"]
        for label, path in (
            ('components', self.components_dir),
            ('pages', self.pages_dir),
            ('assets', self.assets_dir),
            ('output', self.output_dir),
        ):
            state = 'present' if self.isdir(path) else 'missing'
            lines.append(f"  {label:<10} {path} ({state})")
        return '\n'.join(lines)

    def close(self) -> None:
        self._fs.close()

    def __enter__(self) -> 'SiteFS':
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
