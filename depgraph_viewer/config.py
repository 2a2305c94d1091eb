"""
Configuration management for depgraph-viewer.

Settings are resolved from:
1. Values set explicitly (CLI flags)
2. Environment variables (a local .env file is honored)
3. .depgraph-viewer.toml (local config)
4. pyproject.toml (project-level config)
"""

import os
import tomllib
from pathlib import Path

from dotenv import load_dotenv

# Load environment variables
load_dotenv()

# Config files are looked up relative to the directory the viewer runs in
PROJECT_ROOT = Path.cwd()

CONFIG_FILENAME = ".depgraph-viewer.toml"
CONFIG_SECTION = "depgraph-viewer"

DEFAULT_SERVER_URL = "http://localhost:8080"
# Default request timeout (in seconds)
DEFAULT_TIMEOUT = 30.0

# Global configuration for SSL verification
# Can be set to False by CLI --insecure flag, or to a CA bundle path by --ca-cert
VERIFY_SSL: bool | str = True

# Global settings (can be overridden)
_SERVER_URL: str | None = None
_TIMEOUT: float | None = None
_OUTPUT_DIR: Path | None = None
_VERBOSE: bool | None = None


def load_config_file(config_path: Path) -> dict:
    """Load a TOML configuration file."""
    if not config_path.exists():
        return {}
    try:
        with open(config_path, "rb") as f:
            return tomllib.load(f)
    except Exception as e:
        raise ValueError(f"Failed to load config from {config_path}: {e}") from e


def get_file_settings() -> dict:
    """
    Load the [tool.depgraph-viewer] table from configuration files.

    Priority:
    1. .depgraph-viewer.toml (local config, highest priority)
    2. pyproject.toml (project-level config, fallback)

    Returns:
        Settings dictionary (empty if no config file defines the table).
    """
    for filename in (CONFIG_FILENAME, "pyproject.toml"):
        config_path = PROJECT_ROOT / filename
        if config_path.exists():
            settings = (
                load_config_file(config_path).get("tool", {}).get(CONFIG_SECTION, {})
            )
            if settings:
                return settings
    return {}


def get_server_url() -> str:
    """
    Get the base URL of the dependency-analysis backend.

    Priority:
    1. Explicitly set value via set_server_url()
    2. DEPGRAPH_VIEWER_SERVER_URL environment variable
    3. server_url in config files
    4. Default: http://localhost:8080

    Returns:
        Base URL without a trailing slash.
    """
    if _SERVER_URL is not None:
        return _SERVER_URL

    env_url = os.getenv("DEPGRAPH_VIEWER_SERVER_URL")
    if env_url:
        return env_url.rstrip("/")

    settings = get_file_settings()
    if "server_url" in settings:
        return str(settings["server_url"]).rstrip("/")

    return DEFAULT_SERVER_URL


def set_server_url(url: str) -> None:
    """
    Set the backend base URL explicitly.

    Args:
        url: Base URL of the backend service.
    """
    global _SERVER_URL
    _SERVER_URL = url.rstrip("/")


def get_timeout() -> float:
    """
    Get the request timeout in seconds.

    Priority:
    1. Explicitly set value via set_timeout()
    2. DEPGRAPH_VIEWER_TIMEOUT environment variable
    3. timeout in config files
    4. Default: 30 seconds

    Returns:
        Timeout in seconds.
    """
    if _TIMEOUT is not None:
        return _TIMEOUT

    env_timeout = os.getenv("DEPGRAPH_VIEWER_TIMEOUT")
    if env_timeout:
        try:
            return float(env_timeout)
        except ValueError:
            pass

    settings = get_file_settings()
    if "timeout" in settings:
        return float(settings["timeout"])

    return DEFAULT_TIMEOUT


def set_timeout(seconds: float) -> None:
    """
    Set the request timeout explicitly.

    Args:
        seconds: Timeout in seconds.
    """
    global _TIMEOUT
    _TIMEOUT = seconds


def get_output_dir() -> Path:
    """
    Get the directory that receives exported files.

    Priority:
    1. Explicitly set value via set_output_dir()
    2. DEPGRAPH_VIEWER_OUTPUT_DIR environment variable
    3. output_dir in config files
    4. Default: the current working directory

    Returns:
        Path to the output directory.
    """
    if _OUTPUT_DIR is not None:
        return _OUTPUT_DIR

    env_dir = os.getenv("DEPGRAPH_VIEWER_OUTPUT_DIR")
    if env_dir:
        return Path(env_dir).expanduser()

    settings = get_file_settings()
    if "output_dir" in settings:
        return Path(settings["output_dir"]).expanduser()

    return Path.cwd()


def set_output_dir(path: Path | str) -> None:
    """
    Set the output directory explicitly.

    Args:
        path: Directory for exported files.
    """
    global _OUTPUT_DIR
    _OUTPUT_DIR = Path(path).expanduser()


def set_verify_ssl(verify: bool | str) -> None:
    """
    Set the SSL verification setting globally.

    Args:
        verify: Whether to verify SSL certificates, or a CA bundle path.
    """
    global VERIFY_SSL
    VERIFY_SSL = verify


def get_verify_ssl() -> bool | str:
    """
    Get the current SSL verification setting.

    Returns:
        Whether SSL verification is enabled, or the CA bundle path.
    """
    return VERIFY_SSL


def is_verbose_enabled() -> bool:
    """
    Check if verbose output is enabled.

    Priority:
    1. Explicitly set value via set_verbose()
    2. verbose in config files
    3. Default: False
    """
    if _VERBOSE is not None:
        return _VERBOSE
    return bool(get_file_settings().get("verbose", False))


def set_verbose(verbose: bool) -> None:
    """Enable or disable verbose output."""
    global _VERBOSE
    _VERBOSE = verbose


def reset_settings() -> None:
    """Forget every explicitly set value."""
    global _SERVER_URL, _TIMEOUT, _OUTPUT_DIR, _VERBOSE, VERIFY_SSL
    _SERVER_URL = None
    _TIMEOUT = None
    _OUTPUT_DIR = None
    _VERBOSE = None
    VERIFY_SSL = True
