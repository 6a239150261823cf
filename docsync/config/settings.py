# Process-wide settings for the documentation sync tool.

import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

GITHUB_API_BASE = "https://api.github.com"
GITHUB_WEB_BASE = "https://github.com"
USER_AGENT = "docsync"

# Checked in order; the first non-empty value wins.
TOKEN_ENV_VARS = ("GITHUB_TOKEN", "PAT_TOKEN")

DEFAULT_CONFIG_PATH = Path("config") / "docs-config.json"

SYNC_INFO_FILENAME = "_SyncInfo.md"
SUMMARY_FILENAME = "_SyncSummary.json"

UNAUTHENTICATED_RATE_LIMIT = 60
AUTHENTICATED_RATE_LIMIT = 5000


def get_auth_token() -> str | None:
    for name in TOKEN_ENV_VARS:
        value = (os.getenv(name) or "").strip()
        if value:
            return value
    return None
