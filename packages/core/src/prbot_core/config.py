import os
from pathlib import Path
from typing import Optional

import yaml

DEFAULT_CONFIG: dict = {
    "remote": "origin",
    "workdir": ".",
    "bot_name": "prbot",
    "package_patterns": ["packages/*", "packages/@*/*"],  # globs relative to workdir
    "changelog_name": "CHANGELOG.md",
    "max_workers": 4,
    "git_timeout": 120,
    "dismiss_stale_reviews": False,
}

_LIST_KEYS = ("package_patterns",)


def load_config(config_path: str = ".prbot.yml", cli_overrides: Optional[dict] = None) -> dict:
    """
    Load configuration by merging (in order of precedence):
      1. Built-in defaults
      2. .prbot.yml in the current directory
      3. CLI argument overrides
    """
    config = {**DEFAULT_CONFIG}
    for key in _LIST_KEYS:
        config[key] = list(DEFAULT_CONFIG[key])

    path = Path(config_path)
    if path.exists():
        with open(path) as f:
            file_config = yaml.safe_load(f) or {}
        config.update(file_config)

    if cli_overrides:
        for key, value in cli_overrides.items():
            if value is not None:
                config[key] = value

    config["github_token"] = os.environ.get("GITHUB_TOKEN")

    return config
