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


"""Unit tests for secure logging utilities."""

# pylint: disable=protected-access

import logging

import pytest

from api import logging_utils


@pytest.fixture
def log_dir(tmp_path, monkeypatch):
    """Point log files at a temporary directory."""
    monkeypatch.setenv("REGISTRY_LOG_DIR", str(tmp_path))
    logging_utils.remove_repository_logger("alice/app")
    yield tmp_path
    logging_utils.remove_repository_logger("alice/app")


class TestSanitizeMessage:
    """Tests for redaction of sensitive data."""

    @pytest.mark.parametrize(
        "message,leaked",
        [
            ('Token signature=abc123,repository="alice/app"', "abc123"),
            ("Authorization: Basic YWxpY2U6cGFzcw==", "YWxpY2U6cGFzcw=="),
            ("client 192.168.1.100 connected", "192.168.1.100"),
            ("password=hunter2", "hunter2"),
            ("contact alice@example.com", "alice@example.com"),
        ],
    )
    def test_redacts(self, message, leaked):
        """Secrets and personal data are replaced."""
        sanitized = logging_utils._sanitize_message(message)

        assert leaked not in sanitized
        assert "<REDACTED" in sanitized

    def test_plain_message_untouched(self):
        """Messages without sensitive data pass through."""
        assert logging_utils._sanitize_message("Repository alice/app finalized") == (
            "Repository alice/app finalized"
        )


class TestRepositoryLog:
    """Tests for per-repository log files."""

    def test_writes_redacted_entry(self, log_dir):
        """Entries land in ``<base>/<namespace>/<repo>.log`` without secrets."""
        logging_utils.log_secure_info(
            "info",
            "Registered with signature=deadbeef",
            identifier="0123456789abcdef",
            repository="alice/app",
            end_section=True,
        )

        content = (log_dir / "alice" / "app.log").read_text()
        assert "deadbeef" not in content
        assert "01234567..." in content
        assert "89abcdef" not in content
        assert "-" * 80 in content

    def test_closing_entry_releases_file(self, log_dir):
        """The separator entry closes the repository file and forgets the logger."""
        logging_utils.log_secure_info("info", "Register request", repository="alice/app")
        handler = logging_utils._repository_loggers["alice/app"].handlers[0]

        logging_utils.log_secure_info(
            "info", "Register success", repository="alice/app", end_section=True
        )

        assert "alice/app" not in logging_utils._repository_loggers
        assert handler.stream is None
        assert "Register request" in (log_dir / "alice" / "app.log").read_text()

    def test_many_repositories_hold_no_files(self, log_dir):
        """Each request's file is released, however many repositories are named."""
        for index in range(50):
            logging_utils.log_secure_info(
                "warning",
                "Get repository images failed",
                repository=f"alice/missing{index}",
                end_section=True,
            )

        assert not [name for name in logging_utils._repository_loggers if "missing" in name]
        assert len(list((log_dir / "alice").iterdir())) == 50

    def test_remove_unknown_logger_is_noop(self):
        """Removing a logger that was never created does nothing."""
        logging_utils.remove_repository_logger("nobody/none")

    def test_unknown_level_falls_back_to_info(self, log_dir, caplog):
        """Unrecognised level names log at info."""
        with caplog.at_level(logging.INFO, logger="api.logging_utils"):
            logging_utils.log_secure_info("verbose", "hello")

        assert any(record.levelno == logging.INFO for record in caplog.records)
