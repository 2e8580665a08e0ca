"""
Named spider option profiles.

A profile is a YAML file in ``configs/`` whose ``spider`` section holds
option values, e.g. ``configs/dense.yaml``. The active profile is picked
explicitly, from the SPIDER_PROFILE environment variable, or falls back to
``default``.
"""

import logging
import os
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

import yaml

from .options import SpiderClusterOptions

logger = logging.getLogger(__name__)

PROFILE_ENV_VAR = "SPIDER_PROFILE"
SPIDER_SECTION = "spider"


class ConfigLoader:
    """Resolve and read spider option profiles."""

    CONFIG_DIR = Path(__file__).parent.parent.parent / "configs"
    DEFAULT_PROFILE = "default"

    @classmethod
    def available_profiles(cls) -> List[str]:
        return sorted(path.stem for path in cls.CONFIG_DIR.glob("*.yaml"))

    @classmethod
    def get_profile_from_env(cls) -> Optional[str]:
        """Profile named by SPIDER_PROFILE, if set."""
        return os.getenv(PROFILE_ENV_VAR)

    @classmethod
    def resolve_profile(cls, profile: Optional[str] = None) -> str:
        return profile or cls.get_profile_from_env() or cls.DEFAULT_PROFILE

    @classmethod
    def load_profile(cls, profile_name: str = DEFAULT_PROFILE) -> Dict[str, Any]:
        """
        Read one profile file.

        Raises:
            FileNotFoundError: the profile does not exist; the message lists
                the profiles that do.
        """
        path = cls.CONFIG_DIR / f"{profile_name}.yaml"
        if not path.is_file():
            raise FileNotFoundError(
                f"Profile '{profile_name}' not found. "
                f"Available profiles: {', '.join(cls.available_profiles())}"
            )

        with open(path, "r") as f:
            return yaml.safe_load(f) or {}

    @classmethod
    def load_default_or_env_profile(cls) -> Dict[str, Any]:
        return cls.load_profile(cls.resolve_profile())

    @classmethod
    def spider_section(cls, config: Mapping[str, Any]) -> Mapping[str, Any]:
        """The option values of a loaded profile; a missing section is empty."""
        section = config.get(SPIDER_SECTION) or {}
        if not isinstance(section, Mapping):
            raise ValueError(
                f"Profile '{config.get('name', '?')}' has a '{SPIDER_SECTION}' "
                f"section of type {type(section).__name__}, expected a mapping"
            )
        return section


def load_options(profile: Optional[str] = None) -> SpiderClusterOptions:
    """
    Build spider options from a profile.

    ``profile`` wins over SPIDER_PROFILE, which wins over ``default``. Values
    go through ``SpiderClusterOptions.update``, so invalid entries are
    skipped rather than raising.
    """
    name = ConfigLoader.resolve_profile(profile)
    config = ConfigLoader.load_profile(name)
    options = SpiderClusterOptions.from_mapping(ConfigLoader.spider_section(config))
    logger.debug("Loaded spider options from profile %s", name)
    return options
