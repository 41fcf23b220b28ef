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


"""Secure logging utilities for the Registry Index API.

Provides per-repository file logging with automatic redaction of sensitive
data (index tokens, Basic credentials, IP addresses, passwords, emails) so
that log files never contain exploitable information.
"""

import logging
import os
import re
import traceback
from pathlib import Path
from typing import Dict, Optional

_LOG_FORMATTER = logging.Formatter(
    "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)

_repository_loggers: Dict[str, logging.Logger] = {}

_SEPARATOR = "-" * 80

# ---------------------------------------------------------------------------
# Sensitive-data redaction patterns
# ---------------------------------------------------------------------------
_SENSITIVE_PATTERNS = [
    # Index token signatures  (Token signature=abc123,...)
    (re.compile(r"(?i)(signature=)[A-Za-z0-9]+"), r"\1<REDACTED_TOKEN>"),
    # Basic credentials
    (re.compile(r"(?i)(basic\s+)[A-Za-z0-9+/=]+"), r"\1<REDACTED_CREDENTIALS>"),
    # IPv4 addresses  (e.g. 192.168.1.100)
    (re.compile(r"\b(?:\d{1,3}\.){3}\d{1,3}\b"), "<REDACTED_IP>"),
    # IPv6 addresses  (simplified, colon-hex groups)
    (re.compile(r"\b(?:[0-9a-fA-F]{1,4}:){2,7}[0-9a-fA-F]{1,4}\b"), "<REDACTED_IP>"),
    # password= or passwd= or secret= values
    (re.compile(
        r"(?i)((?:password|passwd|secret|api_key|apikey)"
        r"\s*[=:]\s*)[^\s,;\"']+"
    ), r"\1<REDACTED>"),
    # Email addresses
    (re.compile(r"\b[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}\b"), "<REDACTED_EMAIL>"),
]


def _sanitize_message(message: str) -> str:
    """Redact sensitive data from a log message."""
    for pattern, replacement in _SENSITIVE_PATTERNS:
        message = pattern.sub(replacement, message)
    return message


def _log_base() -> Path:
    return Path(os.getenv("REGISTRY_LOG_DIR", "/var/log/registry_index"))


def _repository_log_file(repository: str) -> Path:
    """Return ``<LOG_BASE>/<namespace>/<repo>.log``."""
    return _log_base() / f"{repository}.log"


def _get_or_create_repository_logger(repository: str) -> Optional[logging.Logger]:
    """Return a cached per-repository logger, creating one if necessary."""
    if repository in _repository_loggers:
        return _repository_loggers[repository]

    log_file = _repository_log_file(repository)
    try:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        repository_logger = logging.getLogger(f"registry_index.repository.{repository}")
        repository_logger.setLevel(logging.DEBUG)
        repository_logger.propagate = False
        handler = logging.FileHandler(str(log_file), mode="a")
        handler.setLevel(logging.DEBUG)
        handler.setFormatter(_LOG_FORMATTER)
        repository_logger.addHandler(handler)
        _repository_loggers[repository] = repository_logger
        return repository_logger
    except OSError:
        logging.getLogger(__name__).warning(
            "Failed to create repository log file for: %s", repository
        )
        return None


def remove_repository_logger(repository: str) -> None:
    """Flush, close, and remove the cached logger for *repository*."""
    repository_logger = _repository_loggers.pop(repository, None)
    if repository_logger is None:
        return
    for handler in list(repository_logger.handlers):
        handler.flush()
        handler.close()
        repository_logger.removeHandler(handler)


# ---------------------------------------------------------------------------
# Auth log file (singleton)
# ---------------------------------------------------------------------------
_auth_logger: Optional[logging.Logger] = None


def _get_or_create_auth_logger() -> Optional[logging.Logger]:
    """Return the cached auth logger writing to ``<LOG_BASE>/auth.log``."""
    global _auth_logger  # pylint: disable=global-statement
    if _auth_logger is not None:
        return _auth_logger

    try:
        log_base = _log_base()
        log_base.mkdir(parents=True, exist_ok=True)
        auth_logger = logging.getLogger("registry_index.auth")
        auth_logger.setLevel(logging.DEBUG)
        auth_logger.propagate = False
        handler = logging.FileHandler(str(log_base / "auth.log"), mode="a")
        handler.setLevel(logging.DEBUG)
        handler.setFormatter(_LOG_FORMATTER)
        auth_logger.addHandler(handler)
        _auth_logger = auth_logger
        return _auth_logger
    except OSError:
        logging.getLogger(__name__).warning("Failed to create auth log file")
        return None


def _format(message: str, identifier: Optional[str], exc_info: bool) -> str:
    log_message = f"{message}: {identifier[:8]}..." if identifier else message
    if exc_info:
        log_message = f"{log_message}\n{traceback.format_exc().rstrip()}"
    return _sanitize_message(log_message)


def log_auth_info(
    level: str,
    message: str,
    exc_info: bool = False,
    end_section: bool = False,
) -> None:
    """Log an authentication event to ``<LOG_BASE>/auth.log``.

    Sensitive data is automatically redacted before writing.

    Args:
        level: ``'info'``, ``'warning'``, ``'error'``, ``'debug'``, or ``'critical'``.
        message: Human-readable log message.
        exc_info: Append the current exception traceback.
        end_section: Append a separator line to visually delimit this request.
    """
    logger = logging.getLogger(__name__)
    log_message = _format(message, None, exc_info)

    getattr(logger, level, logger.info)(log_message)

    auth_logger = _get_or_create_auth_logger()
    if auth_logger:
        getattr(auth_logger, level, auth_logger.info)(log_message)
        if end_section:
            auth_logger.info(_SEPARATOR)


def log_secure_info(
    level: str,
    message: str,
    identifier: Optional[str] = None,
    repository: Optional[str] = None,
    exc_info: bool = False,
    end_section: bool = False,
) -> None:
    """Log a message after redacting sensitive data.

    * *identifier* is truncated to its first 8 characters.
    * Token signatures, Basic credentials, IP addresses, passwords and
      emails are replaced with ``<REDACTED_*>`` placeholders.
    * When *repository* (``namespace/name``) is supplied the entry is also
      written to that repository's log file. The file is closed again once
      *end_section* marks the end of the request.

    Args:
        level: ``'info'``, ``'warning'``, ``'error'``, ``'debug'``, or ``'critical'``.
        message: Human-readable log message.
        identifier: Optional opaque id, only the first 8 chars are kept.
        repository: Route the entry to the repository-specific log file.
        exc_info: Append the current exception traceback.
        end_section: Append a separator line to visually delimit this request.
    """
    logger = logging.getLogger(__name__)
    log_message = _format(message, identifier, exc_info)

    getattr(logger, level, logger.info)(log_message)

    if repository:
        repository_logger = _get_or_create_repository_logger(repository)
        if repository_logger:
            getattr(repository_logger, level, repository_logger.info)(log_message)
            if end_section:
                repository_logger.info(_SEPARATOR)
                remove_repository_logger(repository)
