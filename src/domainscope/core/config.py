"""
domainscope.core.config - Configuration Management
====================================================

Configuration for domainscope can be loaded from multiple sources with the
following priority (highest first):

    1. Explicit constructor arguments
    2. Environment variables (prefixed with DOMAINSCOPE_)
    3. YAML configuration file (domainscope.yaml)
    4. Default values defined in the models below

Architecture Context:
    The config is created once per test session (see the pytest plugin) and
    handed to the DomainModelExtension:

        DomainScopeConfig
            ├── RegistryConfig               → ServiceRegistry (opaque handle)
            └── default_concurrency_strategy → SpecificationModelProducer

Environment Variables:
    DOMAINSCOPE_LOG_LEVEL=DEBUG
    DOMAINSCOPE_DEFAULT_CONCURRENCY_STRATEGY=read-write
    DOMAINSCOPE_REGISTRY__NAME=integration
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Literal, Optional

import yaml
from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings

from domainscope.core.exceptions import ConfigurationError


# =============================================================================
# Registry Configuration
# =============================================================================
# The registry is opaque to the scope machinery; these values are only
# stored on the ServiceRegistry handle passed to producers.
# =============================================================================
class RegistryConfig(BaseModel):
    """Settings used to build the ServiceRegistry handed to producers.

    Attributes:
        name: Label for the registry (shows up in logs).
        settings: Arbitrary key-value settings exposed by the registry.
    """

    name: str = Field(
        default="default",
        description="Label for the service registry",
    )
    settings: dict[str, Any] = Field(
        default_factory=dict,
        description="Settings exposed through ServiceRegistry.get_setting()",
    )


# =============================================================================
# Main Configuration
# =============================================================================
class DomainScopeConfig(BaseSettings):
    """Top-level configuration for domainscope.

    Attributes:
        environment: Where the tests run. Informational only.
        log_level: Logging level name.
        default_concurrency_strategy: Strategy applied when a
            ``@domain_model`` leaves ``concurrency_strategy`` unset.
            The empty string disables the cache override.
        registry: Settings for the ServiceRegistry handle.

    Example:
        >>> config = DomainScopeConfig(default_concurrency_strategy="read-write")
    """

    environment: Literal["dev", "ci"] = Field(
        default="dev",
        description="Execution environment (dev or ci)",
    )
    log_level: str = Field(
        default="INFO",
        description="Logging level: DEBUG, INFO, WARNING, ERROR, CRITICAL",
    )
    default_concurrency_strategy: str = Field(
        default="",
        description="Fallback cache concurrency strategy ('' = no override)",
    )
    registry: RegistryConfig = Field(
        default_factory=RegistryConfig,
        description="Service registry settings",
    )

    model_config = {
        "env_prefix": "DOMAINSCOPE_",
        "env_nested_delimiter": "__",
        "case_sensitive": False,
    }


# =============================================================================
# Configuration Loader
# =============================================================================
def load_config(path: Optional[str] = None) -> DomainScopeConfig:
    """Load configuration from a YAML file and/or environment variables.

    Args:
        path: Path to a YAML configuration file. If None, looks for
            'domainscope.yaml' in the current directory and falls back to
            defaults + environment variables when it is absent.

    Returns:
        A fully validated DomainScopeConfig instance.

    Raises:
        FileNotFoundError: If an explicit path is provided but doesn't exist.
        ConfigurationError: If the YAML document is not a mapping.
    """
    if path is None:
        default_path = Path("domainscope.yaml")
        if default_path.exists():
            path = str(default_path)

    yaml_data: dict[str, Any] = {}
    if path is not None:
        config_path = Path(path)
        if not config_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {path}")

        with open(config_path) as f:
            raw_data = yaml.safe_load(f)

        if raw_data is None:
            raw_data = {}
        if not isinstance(raw_data, dict):
            raise ConfigurationError(
                message=f"Configuration file must contain a mapping: {path}",
                details={"path": path, "found": type(raw_data).__name__},
            )
        yaml_data = raw_data

    return DomainScopeConfig(**yaml_data)


def get_default_config() -> DomainScopeConfig:
    """Create a DomainScopeConfig with all defaults (plus any env vars)."""
    return DomainScopeConfig()
