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


"""Database configuration for the SQL-backed stores.

Read from the environment when the module is imported:

* ``DATABASE_URL``: SQLAlchemy URL, required in prod.
* ``DB_POOL_SIZE``, ``DB_MAX_OVERFLOW``, ``DB_POOL_RECYCLE``: pool sizing,
  ignored for SQLite.
* ``DB_ECHO``: log every statement when ``true``.
"""

import os
from dataclasses import dataclass, field
from typing import Any, Dict


def _env_int(name: str, default: int) -> int:
    return int(os.getenv(name, str(default)))


@dataclass
class DatabaseConfig:
    """Connection settings for the registry database."""

    database_url: str = field(default_factory=lambda: os.getenv("DATABASE_URL", ""))
    pool_size: int = field(default_factory=lambda: _env_int("DB_POOL_SIZE", 20))
    max_overflow: int = field(default_factory=lambda: _env_int("DB_MAX_OVERFLOW", 10))
    pool_recycle: int = field(default_factory=lambda: _env_int("DB_POOL_RECYCLE", 3600))
    echo: bool = field(
        default_factory=lambda: os.getenv("DB_ECHO", "false").lower() == "true"
    )

    @property
    def is_sqlite(self) -> bool:
        """Return True for SQLite URLs."""
        return self.database_url.startswith("sqlite")

    def validate(self) -> None:
        """Raise ValueError when no database URL is configured."""
        if not self.database_url:
            raise ValueError("DATABASE_URL environment variable is required")

    def engine_options(self) -> Dict[str, Any]:
        """Keyword arguments for ``create_engine``.

        SQLite does not accept pool sizing; every other backend gets a
        pre-pinged pool so stale connections are replaced transparently.
        """
        if self.is_sqlite:
            return {"echo": self.echo}
        return {
            "pool_size": self.pool_size,
            "max_overflow": self.max_overflow,
            "pool_recycle": self.pool_recycle,
            "pool_pre_ping": True,
            "echo": self.echo,
        }


db_config = DatabaseConfig()
