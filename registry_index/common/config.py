# Copyright 2026 Dell Inc. or its subsidiaries. All Rights Reserved.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.


"""Configuration loader for the Registry Index."""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import configparser

DEFAULT_CONFIG_PATH = "/etc/registry_index/registry_index.ini"


@dataclass
class DockerConfig:
    """Values advertised to Docker clients in response headers."""
    version: str
    config: str
    endpoints: str


@dataclass
class AuthConfig:
    """Token issuance settings."""
    signature_bytes: int


@dataclass
class RegistryIndexConfig:
    """Registry Index configuration."""
    docker: DockerConfig
    auth: AuthConfig


def _defaults_from_env() -> RegistryIndexConfig:
    return RegistryIndexConfig(
        docker=DockerConfig(
            version=os.getenv("DOCKER_REGISTRY_VERSION", "0.6.0"),
            config=os.getenv("DOCKER_REGISTRY_CONFIG", "prod"),
            endpoints=os.getenv("DOCKER_ENDPOINTS", "localhost:5000"),
        ),
        auth=AuthConfig(
            signature_bytes=int(os.getenv("TOKEN_SIGNATURE_BYTES", "32")),
        ),
    )


def load_config(config_path: Optional[str] = None) -> RegistryIndexConfig:
    """Load Registry Index configuration from INI file.

    Options missing from the file fall back to the environment defaults.

    Args:
        config_path: Path to configuration file. If None, uses
                    REGISTRY_INDEX_CONFIG_PATH environment variable or default path.

    Returns:
        RegistryIndexConfig instance.

    Raises:
        FileNotFoundError: If config file not found.
        ValueError: If config is invalid.
    """
    if config_path is None:
        config_path = os.getenv("REGISTRY_INDEX_CONFIG_PATH", DEFAULT_CONFIG_PATH)

    config_file = Path(config_path)
    if not config_file.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_file}")

    parser = configparser.ConfigParser()
    parser.read(config_file)

    if not parser.sections():
        raise ValueError(f"Empty configuration file: {config_file}")

    defaults = _defaults_from_env()

    docker = DockerConfig(
        version=parser.get("docker", "version", fallback=defaults.docker.version),
        config=parser.get("docker", "config", fallback=defaults.docker.config),
        endpoints=parser.get("docker", "endpoints", fallback=defaults.docker.endpoints),
    )

    signature_bytes = defaults.auth.signature_bytes
    if parser.has_option("auth", "signature_bytes"):
        signature_bytes = parser.getint("auth", "signature_bytes")
    if signature_bytes < 16:
        raise ValueError(
            f"auth.signature_bytes must be at least 16, got {signature_bytes}"
        )

    return RegistryIndexConfig(docker=docker, auth=AuthConfig(signature_bytes=signature_bytes))


def get_config() -> RegistryIndexConfig:
    """Return the file configuration, or environment defaults when absent."""
    try:
        return load_config()
    except FileNotFoundError:
        return _defaults_from_env()
