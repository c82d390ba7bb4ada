"""
Site build orchestration.

One build cycle:
1. Load components (fails before touching the output if they are missing)
2. Delete and recreate the output directory
3. Copy assets into <output>/<assets>, minifying by type when enabled
4. Walk the pages directory, compiling every .html file into the
   mirrored output path

The output directory is not swapped atomically: while a cycle runs, or
after one fails, the output tree can be empty or partial.
"""
import time
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from fs import path as fspath

from staticflow.assets import copy_assets
from staticflow.compiler import PageCompiler
from staticflow.components import load_components
from staticflow.config import SiteConfig
from staticflow.logging import get_logger
from staticflow.site_fs import SiteFS

log = get_logger('builder')

PAGE_EXTENSION = '.html'


@dataclass
class BuildReport:
    """Summary of one build cycle.

    Attributes:
        output_dir: Output directory path inside the site filesystem
        pages: Written pages, relative to the pages directory
        assets: Number of asset files copied
        duration_ms: Wall-clock time for the whole cycle
    """
    output_dir: str
    pages: List[str] = field(default_factory=list)
    assets: int = 0
    duration_ms: float = 0.0


class SiteBuilder:
    """
    Builds the whole site from components, pages and assets.

    Usage:
        builder = SiteBuilder(config)
        report = builder.build()

        # Against an in-memory site
        builder = SiteBuilder(config, SiteFS.in_memory(config))
    """

    def __init__(self, config: SiteConfig, site_fs: Optional[SiteFS] = None):
        self.config = config
        self.site_fs = site_fs if site_fs is not None else SiteFS(config)
        self._compiler = PageCompiler(self.site_fs, minify=config.minify)

    def build(self) -> BuildReport:
        """Run a full build cycle.

        Raises:
            ComponentsNotFoundError: If the components directory is missing
            fs.errors.FSError: On any other filesystem failure
        """
        start = time.perf_counter()
        site_fs = self.site_fs
        report = BuildReport(output_dir=site_fs.output_dir)

        components = load_components(site_fs, minify=self.config.minify)

        if site_fs.exists(site_fs.output_dir):
            site_fs.removetree(site_fs.output_dir)
        site_fs.makedirs(site_fs.output_dir)

        if site_fs.isdir(site_fs.assets_dir):
            report.assets = copy_assets(
                site_fs,
                site_fs.assets_dir,
                fspath.join(site_fs.output_dir, self.config.assets),
                minify=self.config.minify,
                verbose=self.config.verbose,
            )

        self._compile_tree(site_fs.pages_dir, site_fs.output_dir, components, report)

        report.duration_ms = (time.perf_counter() - start) * 1000
        log.info("Site built in %dms at: %s", round(report.duration_ms), self.config.output_path)
        if self.config.minify:
            log.info("Minification enabled")
        return report

    def _compile_tree(
        self,
        src_dir: str,
        dest_dir: str,
        components: Dict[str, str],
        report: BuildReport,
    ) -> None:
        """Mirror src_dir into dest_dir, compiling pages on the way.

        Files other than .html are not copied.
        """
        for info in self.site_fs.scandir(src_dir):
            src_path = fspath.join(src_dir, info.name)
            dest_path = fspath.join(dest_dir, info.name)

            if info.is_dir:
                self.site_fs.makedirs(dest_path)
                self._compile_tree(src_path, dest_path, components, report)
            elif fspath.splitext(info.name)[1] == PAGE_EXTENSION:
                html = self._compiler.compile(src_path, components)
                self.site_fs.writetext(dest_path, html)

                relative = fspath.frombase(self.site_fs.pages_dir, src_path).lstrip('/')
                report.pages.append(relative)
                if self.config.verbose:
                    action = 'Minified and created' if self.config.minify else 'Created'
                    log.info("%s: %s", action, relative)
