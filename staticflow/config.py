"""
Site configuration.

A SiteConfig is built once at startup and handed to every part of the
pipeline that needs it. Values are layered, lowest precedence first:

1. Model defaults
2. staticflow.yaml in the site root (optional)
3. STATICFLOW_* entries in the site root's .env file (optional)
4. STATICFLOW_* variables in the process environment
5. Command-line overrides
"""
import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from dotenv import dotenv_values
from pydantic import BaseModel, ConfigDict, Field, field_validator

from staticflow.errors import ConfigError

CONFIG_FILENAME = 'staticflow.yaml'
ENV_FILENAME = '.env'
ENV_PREFIX = 'STATICFLOW_'


class SiteConfig(BaseModel):
    """Read-only configuration for one staticflow process.

    Attributes:
        root: Site root; every directory below is resolved against it
        components: Directory holding reusable HTML fragments
        pages: Directory holding the page sources
        assets: Directory copied verbatim (or minified) into the output
        output: Build output directory, wiped on every build
        port: Dev server port (0 lets the OS pick one)
        watch: Serve the output and rebuild on file changes
        verbose: Log one line per written file
        minify: Minify components, pages and assets

    Examples:
        >>> config = SiteConfig(root=Path('/srv/site'), minify=True)
        >>> config.output_path
        PosixPath('/srv/site/public')
    """
    root: Path = Field(default_factory=Path.cwd)
    components: str = '_components'
    pages: str = 'pages'
    assets: str = 'assets'
    output: str = 'public'
    port: int = Field(default=3000, ge=0, le=65535)
    watch: bool = False
    verbose: bool = True
    minify: bool = False

    model_config = ConfigDict(frozen=True, extra='forbid')

    @field_validator('components', 'pages', 'assets', 'output')
    @classmethod
    def validate_directory_name(cls, v: str) -> str:
        """Directory names must be non-empty and relative to the root."""
        v = v.strip().replace('\\', '/')
        if v.startswith('/') or os.path.isabs(v):
            raise ValueError(f'directory name must be relative to the root, got {v}')
        v = v.rstrip('/')
        if not v:
            raise ValueError('directory name must not be empty')
        if '..' in v.split('/'):
            raise ValueError(f'directory name must stay inside the root, got {v}')
        return v

    @field_validator('output')
    @classmethod
    def validate_output_below_root(cls, v: str) -> str:
        """The output directory is wiped on every build, so it cannot be the root."""
        if all(part in ('', '.') for part in v.split('/')):
            raise ValueError(f'output directory must be below the root, got {v}')
        return v

    @property
    def components_path(self) -> Path:
        return self.root / self.components

    @property
    def pages_path(self) -> Path:
        return self.root / self.pages

    @property
    def assets_path(self) -> Path:
        return self.root / self.assets

    @property
    def output_path(self) -> Path:
        return self.root / self.output


def _load_yaml(path: Path) -> Dict[str, Any]:
    """Read staticflow.yaml if present."""
    if not path.is_file():
        return {}
    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"{path} must contain a mapping, got {type(data).__name__}")
    return data


def _load_env(env: Dict[str, Optional[str]]) -> Dict[str, Any]:
    """Pick STATICFLOW_<FIELD> entries out of an environment mapping."""
    values = {}
    for name in SiteConfig.model_fields:
        if name == 'root':
            continue
        value = env.get(ENV_PREFIX + name.upper())
        if value is not None:
            values[name] = value
    return values


def load_config(
    overrides: Optional[Dict[str, Any]] = None,
    root: Optional[Path] = None,
) -> SiteConfig:
    """Build the process configuration.

    Args:
        overrides: Values from the command line; None entries are skipped
        root: Site root (default: STATICFLOW_ROOT or the working directory)

    Raises:
        ConfigError: staticflow.yaml is unreadable or not a mapping
        pydantic.ValidationError: A value has the wrong type or range
    """
    overrides = {k: v for k, v in (overrides or {}).items() if v is not None}
    root = root or overrides.pop('root', None) or os.environ.get(ENV_PREFIX + 'ROOT') or Path.cwd()
    root = Path(root).expanduser().resolve()

    values: Dict[str, Any] = {'root': root}
    values.update(_load_yaml(root / CONFIG_FILENAME))
    values.update(_load_env(dotenv_values(root / ENV_FILENAME)))
    values.update(_load_env(dict(os.environ)))
    values.update(overrides)
    values['root'] = root

    return SiteConfig(**values)
