"""Export configuration with YAML file support and environment variable substitution."""

import os
import re
from dataclasses import dataclass, fields, replace
from typing import Any, Dict, List, Optional
from urllib.parse import urlparse

import yaml

from .errors import ConfigError
from .exporter.content import ContentKind
from .exporter.lexer import LEXERS
from .utils.constants import (
    DEFAULT_API_VERSION,
    DEFAULT_CONCURRENCY,
    DEFAULT_TIMEOUT,
    GHOST_IMAGE_PATH,
)
from .utils.paths import asset_base_url, build_relative, ensure_trailing_slash


ENV_VAR_PATTERN = re.compile(r'\$\{([A-Za-z_][A-Za-z0-9_]*)\}')


@dataclass(frozen=True)
class ExportConfig:
    """
    Immutable settings for one export run.

    Every relative path is resolved against ``base_dir``; nothing depends on
    the process working directory.
    """

    ghost_url: str = ""
    ghost_key: str = ""
    api_version: str = DEFAULT_API_VERSION
    assets_dir: str = "./assets/images/"
    pages_dir: str = "./"
    posts_dir: str = "./_posts/"
    tags_dir: str = "./tag/"
    authors_dir: str = "./author/"
    pages_layout: str = "page"
    posts_layout: str = "post"
    tags_layout: str = "tag"
    authors_layout: str = "author"
    post_date_prefix: bool = True
    tag_pages: bool = False
    author_pages: bool = False
    cache_file: str = "./.ghost-sync.json"
    cache_dir: str = "./.cache/ghost-exporter/"
    base_dir: str = "."
    asset_lexer: str = "quoted"
    concurrency: int = DEFAULT_CONCURRENCY
    timeout: int = DEFAULT_TIMEOUT

    @property
    def remote_base(self) -> str:
        """Canonical remote image base, e.g. ``https://cms.example/content/images/``."""
        return asset_base_url(self.ghost_url, GHOST_IMAGE_PATH)

    @property
    def local_assets_dir(self) -> str:
        """Asset directory relative to ``base_dir``, with a trailing slash."""
        return ensure_trailing_slash(build_relative(self.base_dir, self.assets_dir))

    @property
    def state_file(self) -> str:
        """Sync state file relative to ``base_dir``."""
        return build_relative(self.base_dir, self.cache_file)

    def output_dir(self, kind: ContentKind) -> str:
        """Directory documents of ``kind`` are written to, relative to ``base_dir``."""
        directory = {
            ContentKind.POST: self.posts_dir,
            ContentKind.PAGE: self.pages_dir,
            ContentKind.TAG: self.tags_dir,
            ContentKind.AUTHOR: self.authors_dir,
        }[kind]
        return ensure_trailing_slash(build_relative(self.base_dir, directory))

    def layout(self, kind: ContentKind) -> str:
        return {
            ContentKind.POST: self.posts_layout,
            ContentKind.PAGE: self.pages_layout,
            ContentKind.TAG: self.tags_layout,
            ContentKind.AUTHOR: self.authors_layout,
        }[kind]

    def enabled_kinds(self) -> List[ContentKind]:
        """Content kinds fetched and written in a run."""
        kinds = [ContentKind.POST, ContentKind.PAGE]
        if self.tag_pages:
            kinds.append(ContentKind.TAG)
        if self.author_pages:
            kinds.append(ContentKind.AUTHOR)
        return kinds

    def validate(self) -> "ExportConfig":
        """
        Check required settings and value ranges.

        Returns:
            self, so calls can be chained

        Raises:
            ConfigError: If validation fails
        """
        if not self.ghost_url:
            raise ConfigError("ghost_url is required (use --url or GHOST_URL)")
        if not self.ghost_key:
            raise ConfigError("ghost_key is required (use --key or GHOST_KEY)")

        parsed = urlparse(self.ghost_url)
        if parsed.scheme not in ('http', 'https') or not parsed.netloc:
            raise ConfigError(f"ghost_url must be an http(s) URL: {self.ghost_url}")

        if self.asset_lexer not in LEXERS:
            raise ConfigError(
                f"asset_lexer must be one of: {', '.join(sorted(LEXERS))}"
            )
        if self.concurrency < 1:
            raise ConfigError("concurrency must be at least 1")
        if self.timeout <= 0:
            raise ConfigError("timeout must be positive")

        build_paths = (
            self.assets_dir, self.pages_dir, self.posts_dir,
            self.tags_dir, self.authors_dir, self.cache_file,
        )
        for path in build_paths:
            try:
                build_relative(self.base_dir, path)
            except ValueError as e:
                raise ConfigError(str(e)) from e
        return self

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ExportConfig":
        """
        Build a config from a mapping of option names.

        Raises:
            ConfigError: If the mapping contains unknown options
        """
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ConfigError(f"Unknown configuration options: {', '.join(unknown)}")
        return cls(**data)

    def merged(self, overrides: Dict[str, Any]) -> "ExportConfig":
        """Copy of this config with non-None ``overrides`` applied."""
        values = {key: value for key, value in overrides.items() if value is not None}
        return replace(self, **values)


def load_config_file(config_path: str) -> Dict[str, Any]:
    """
    Load options from a YAML file, substituting ``${ENV_VAR}`` references.

    Args:
        config_path: Path to the YAML configuration file

    Returns:
        Mapping of option names to values

    Raises:
        ConfigError: If the file is missing, unparsable or not a mapping
    """
    if not os.path.exists(config_path):
        raise ConfigError(f"Configuration file not found: {config_path}")

    try:
        with open(config_path, 'r', encoding='utf-8') as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {config_path}: {e}")

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError("Configuration file must contain a mapping")

    return {key: _substitute_env_vars(value) for key, value in data.items()}


def _substitute_env_vars(value: Any) -> Any:
    if not isinstance(value, str):
        return value
    return ENV_VAR_PATTERN.sub(lambda m: os.environ.get(m.group(1), ""), value)


def build_config(
    config_path: Optional[str] = None,
    overrides: Optional[Dict[str, Any]] = None,
    environ: Optional[Dict[str, str]] = None,
) -> ExportConfig:
    """
    Assemble the effective configuration.

    Precedence, lowest first: defaults, config file, ``GHOST_URL`` and
    ``GHOST_KEY`` environment variables, explicit overrides.

    Returns:
        Validated ExportConfig
    """
    environ = os.environ if environ is None else environ
    if config_path:
        config = ExportConfig.from_dict(load_config_file(config_path))
    else:
        config = ExportConfig()

    config = config.merged({
        'ghost_url': environ.get('GHOST_URL') or None,
        'ghost_key': environ.get('GHOST_KEY') or None,
    })

    if overrides:
        config = config.merged(overrides)

    return config.validate()
