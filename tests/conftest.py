"""Pytest configuration and shared fixtures for Helm Deployer tests.

This module contains fixtures used across multiple test modules.
"""

from pathlib import Path

import pytest

DEPLOY_VARS = [
    "NOTION_API_KEY",
    "GEMINI_API_KEY",
    "SERPER_API_KEY",
    "NOTION_PARENT_PAGE_ID",
    "NOTION_PARENT_PAGE_URL",
]


@pytest.fixture(autouse=True)
def clean_deploy_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Make sure deploy variables from the developer's shell never leak into tests."""
    for name in DEPLOY_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def sample_env_content() -> str:
    """Return a complete .env file."""
    return """\
# Research team secrets
NOTION_API_KEY=notion-secret-123
GEMINI_API_KEY=gemini-secret-456
SERPER_API_KEY=serper-secret-789

NOTION_PARENT_PAGE_ID=page-42
NOTION_PARENT_PAGE_URL=https://www.notion.so/page-42
"""


@pytest.fixture
def chart_dir(tmp_path: Path, sample_env_content: str) -> Path:
    """Create a chart directory containing a complete .env file."""
    directory = tmp_path / "chart"
    directory.mkdir()
    (directory / ".env").write_text(sample_env_content)
    return directory


@pytest.fixture
def sample_profile_yaml() -> str:
    """Return a deploy profile overriding release and values."""
    return """\
release_name: staging-team
namespace: research
default_image_tag: v2.0
required:
  - GEMINI_API_KEY
values:
  env.geminiApiKey: ${GEMINI_API_KEY}
  env.region: ${REGION:-eu-west-1}
"""


@pytest.fixture
def bearer_profile(chart_dir: Path) -> Path:
    """Create a deploy profile embedding a secret inside a longer value."""
    profile_file = chart_dir / "bearer.yaml"
    profile_file.write_text("""\
values:
  env.auth: "Bearer ${GEMINI_API_KEY}"
  env.notionParentPageId: ${NOTION_PARENT_PAGE_ID:-}
""")
    return profile_file
