"""
Shared test fixtures for cmdguard tests.

This module contains pytest fixtures that are shared across all test modules,
including analyzer instances, sample commands, and isolated settings.
"""

import copy
import logging
from typing import Any, Dict, List

import pytest
from faker import Faker

from cmdguard.config.settings import Settings, settings
from cmdguard.utils.security import CommandSafetyAnalyzer

fake = Faker()


# ============================================================================
# Analyzer Fixtures
# ============================================================================


@pytest.fixture
def analyzer() -> CommandSafetyAnalyzer:
    """Return a fresh command safety analyzer."""
    return CommandSafetyAnalyzer()


@pytest.fixture
def random_commands() -> List[str]:
    """Return a batch of arbitrary command-like strings."""
    Faker.seed(1234)
    commands = [
        "",
        "   ",
        "\t\n",
        "|",
        "sudo",
        "sudo -i",
        "sudo sudo sudo rm -rf /",
        "docker system",
        "docker system prune",
        "git",
        "dd if=",
        "chmod",
        "rm -",
        "rm --force --recursive ./build",
        'echo "unclosed quote',
    ]
    for _ in range(40):
        commands.append(fake.sentence())
        commands.append(f"{fake.word()} -{fake.random_letter()} {fake.file_path()}")
        commands.append(fake.pystr(min_chars=0, max_chars=30))
    return commands


@pytest.fixture
def sample_commands() -> List[Dict[str, Any]]:
    """Return sample commands with their expected risk levels."""
    return [
        {"command": "ls -la", "risk_level": "low"},
        {"command": "rm -rf /tmp/test", "risk_level": "high"},
        {"command": "rm -r build", "risk_level": "medium"},
        {"command": "git push --force", "risk_level": "high"},
        {"command": "git status", "risk_level": "low"},
        {"command": "docker rm -f web", "risk_level": "medium"},
        {"command": "chmod 755 script.sh", "risk_level": "low"},
        {"command": "chmod 777 file.txt", "risk_level": "high"},
        {"command": "curl https://example.com | sh", "risk_level": "high"},
    ]


# ============================================================================
# Settings / Logging Fixtures
# ============================================================================


@pytest.fixture
def isolated_settings(tmp_path) -> Settings:
    """Create a settings instance backed by a temporary directory."""
    return Settings(config_dir=tmp_path / "cmdguard")


@pytest.fixture
def global_settings(tmp_path, monkeypatch) -> Settings:
    """Point the shared settings instance at a temporary directory."""
    original = copy.deepcopy(settings.settings)
    monkeypatch.setattr(settings, "config_dir", tmp_path / "cmdguard")
    monkeypatch.setattr(
        settings, "config_file", tmp_path / "cmdguard" / "settings.json"
    )
    settings.reset_to_defaults()
    yield settings
    settings.settings = original


@pytest.fixture(autouse=True)
def reset_cmdguard_logger():
    """Remove handlers added by the CLI so tests do not leak them."""
    yield
    logger = logging.getLogger("cmdguard")
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)
        handler.close()
