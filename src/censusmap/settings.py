"""
CensusMap - Global Settings & Logging.
"""
import os
import logging
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from censusmap.core.types import KeyPolicy, KEY_POLICIES

# Pick up a local .env, if any, before reading the environment
load_dotenv()

# Define a library-specific logger
logger = logging.getLogger("censusmap")
logger.addHandler(logging.NullHandler()) # Default to silence unless configured

# Environment Variable Names
ENV_CACHE_DIR = "CENSUSMAP_CACHE_DIR"
ENV_DEFAULT_CRS = "CENSUSMAP_DEFAULT_CRS"
ENV_KEY_POLICY = "CENSUSMAP_KEY_POLICY"

DEFAULT_CRS = "EPSG:4326"


def _validate_policy(policy: str) -> KeyPolicy:
    value = policy.strip().lower()
    if value not in KEY_POLICIES:
        raise ValueError(
            f"Invalid key policy '{policy}'. Expected one of {KEY_POLICIES}."
        )
    return value  # type: ignore[return-value]


class Settings:
    _instance = None

    def __init__(self):
        env_cache = os.getenv(ENV_CACHE_DIR)
        if env_cache:
            self.cache_dir = Path(env_cache)
        else:
            self.cache_dir = Path.cwd() / ".censusmap_cache"

        self.default_crs: str = os.getenv(ENV_DEFAULT_CRS) or DEFAULT_CRS
        self.key_policy: KeyPolicy = _validate_policy(
            os.getenv(ENV_KEY_POLICY) or "raise"
        )

    @classmethod
    def _get_instance(cls):
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    @classmethod
    def reset(cls):
        """Drops the cached instance so the environment is re-read."""
        cls._instance = None

    @classmethod
    def get_cache_dir(cls) -> Path:
        inst = cls._get_instance()
        # Ensure dir exists when requested
        inst.cache_dir.mkdir(parents=True, exist_ok=True)
        return inst.cache_dir

    @classmethod
    def get_default_crs(cls) -> str:
        return cls._get_instance().default_crs

    @classmethod
    def set_default_crs(cls, crs: str):
        cls._get_instance().default_crs = crs

    @classmethod
    def get_key_policy(cls) -> KeyPolicy:
        return cls._get_instance().key_policy

    @classmethod
    def set_key_policy(cls, policy: str):
        cls._get_instance().key_policy = _validate_policy(policy)

# --- Public Helpers (Exposed in __init__.py) ---

def get_cache_dir() -> Path:
    """Retrieves the current cache directory path."""
    return Settings.get_cache_dir()

def get_default_crs() -> str:
    """CRS assigned to geometries that arrive without one."""
    return Settings.get_default_crs()

def set_default_crs(crs: str):
    Settings.set_default_crs(crs)

def get_key_policy() -> KeyPolicy:
    return Settings.get_key_policy()

def set_key_policy(policy: str):
    """Sets the region-code conversion policy ('raise' or 'skip')."""
    Settings.set_key_policy(policy)

def resolve_key_policy(policy: Optional[str]) -> KeyPolicy:
    """Return an explicit policy or fall back to Settings/env."""
    if policy is None:
        return get_key_policy()
    return _validate_policy(policy)

def configure_logging(level: int = logging.INFO):
    """Enable console logging for the library (idempotent)."""
    # Check if a StreamHandler is already attached to avoid duplicates
    has_stream = any(isinstance(h, logging.StreamHandler) for h in logger.handlers)

    if not has_stream:
        handler = logging.StreamHandler()
        formatter = logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s')
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    logger.setLevel(level)
