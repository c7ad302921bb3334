"""Configuration loading and validation."""

from __future__ import annotations

import os
from pathlib import Path
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import yaml
from dotenv import dotenv_values, load_dotenv

from models import Config, Team
from schedule import parse_schedule

LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}

# (environment variable, secret store key)
GITHUB_TOKEN_SECRET = ("GITHUB_TOKEN", "github-token")
GITHUB_ORG_SECRET = ("GITHUB_ORG", "github-org")
SLACK_TOKEN_SECRET = ("SLACK_TOKEN", "slack-token")


class SecretStore:
    """
    Secrets read from a dotenv-format file keyed by logical names, e.g.:

        github-token=ghp_...
        github-org=my-org
        slack-token=xoxb-...

    A missing file is an empty store.
    """

    def __init__(self, path: str | Path = ".secrets") -> None:
        self.path = Path(path)
        self._values: dict[str, str | None] | None = None

    def get(self, name: str) -> str | None:
        if self._values is None:
            self._values = dotenv_values(self.path) if self.path.exists() else {}
        return self._values.get(name)


def resolve_secret(env_var: str, secret_name: str, store: SecretStore) -> str | None:
    """
    Resolve a credential from the environment, falling back to the secret store.

    Empty or whitespace-only values count as absent.

    Args:
        env_var: Environment variable checked first (e.g., 'GITHUB_TOKEN')
        secret_name: Secret store key checked second (e.g., 'github-token')
        store: Secret store to fall back to

    Returns:
        The resolved value, or None if neither source has one
    """
    for value in (os.getenv(env_var), store.get(secret_name)):
        if value is not None and value.strip():
            return value.strip()
    return None


def _require_secret(env_var: str, secret_name: str, store: SecretStore, hint: str) -> str:
    value = resolve_secret(env_var, secret_name, store)
    if value is None:
        msg = (
            f"{env_var} is required. Set it in the environment or your .env file, "
            f"or add '{secret_name}' to the secret store ({store.path}). {hint}"
        )
        raise ValueError(msg)
    return value


def load_config(store: SecretStore | None = None) -> Config:
    """
    Load and validate configuration from environment variables and the secret store.

    Loads from .env file if present, then reads required credentials and
    optional settings.

    Args:
        store: Secret store for credential fallback. Defaults to the file
            named by SECRETS_FILE (default: .secrets)

    Returns:
        Config object with validated configuration values

    Raises:
        ValueError: If a credential is unresolved or a setting is invalid
    """
    # Load .env file if it exists
    load_dotenv()

    if store is None:
        store = SecretStore(os.getenv("SECRETS_FILE", ".secrets"))

    github_token = _require_secret(
        *GITHUB_TOKEN_SECRET,
        store,
        "Create a GitHub token with read access to the organization's repositories.",
    )
    github_org = _require_secret(
        *GITHUB_ORG_SECRET, store, "Set the name of your GitHub organization."
    )
    slack_token = _require_secret(
        *SLACK_TOKEN_SECRET,
        store,
        "Create a Slack bot token with the chat:write scope. "
        "(Or use --dry-run to skip Slack sending)",
    )

    log_level = os.getenv("LOG_LEVEL", "INFO").upper()
    if log_level not in LOG_LEVELS:
        msg = (
            f"Invalid LOG_LEVEL '{log_level}'. "
            "Must be one of: DEBUG, INFO, WARNING, ERROR, CRITICAL"
        )
        raise ValueError(msg)

    timezone = os.getenv("SCHEDULE_TIMEZONE") or None
    if timezone is not None:
        try:
            ZoneInfo(timezone)
        except (ZoneInfoNotFoundError, ValueError) as e:
            msg = (
                f"Invalid SCHEDULE_TIMEZONE '{timezone}'. "
                "Must be an IANA time zone name such as 'Europe/Berlin' or 'UTC'."
            )
            raise ValueError(msg) from e

    team_override = os.getenv("TEAM_NAME", "").strip() or None

    return Config(
        github_token=github_token,
        github_org=github_org,
        slack_token=slack_token,
        config_path=os.getenv("CONFIG_PATH", "config.yaml"),
        team_override=team_override,
        log_level=log_level,
        timezone=timezone,
    )


def load_teams(file_path: str = "config.yaml") -> list[Team]:
    """
    Load teams from the YAML configuration file.

    Expected format:

        teams:
          - name: Core
            slack_channel: C0123456789
            repositories: [svc-a, svc-b]
            members: [alice, bob]
            schedule: "0 9 * * 1-5"

    Args:
        file_path: Path to the YAML configuration (default: config.yaml)

    Returns:
        List of Team objects in file order

    Raises:
        FileNotFoundError: If the configuration file does not exist
        ValueError: If the file is not valid YAML or a team is malformed
    """
    path = Path(file_path)
    if not path.exists():
        msg = (
            f"Team configuration file not found: {file_path}\n"
            f"Create this file based on config.example.yaml"
        )
        raise FileNotFoundError(msg)

    try:
        with path.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        msg = f"Invalid YAML in {file_path}: {e}"
        raise ValueError(msg) from e

    if not isinstance(data, dict) or "teams" not in data:
        msg = f"Team configuration {file_path} must be a mapping with a 'teams' list"
        raise ValueError(msg)

    raw_teams = data["teams"]
    if not isinstance(raw_teams, list) or not raw_teams:
        msg = "Team configuration must contain at least one team under 'teams'"
        raise ValueError(msg)

    teams = []
    seen_names: set[str] = set()
    for idx, team_data in enumerate(raw_teams):
        team = _parse_team(idx, team_data)
        if team.name in seen_names:
            msg = f"Team at index {idx} has duplicate name '{team.name}'"
            raise ValueError(msg)
        seen_names.add(team.name)
        teams.append(team)

    return teams


def _parse_team(idx: int, team_data: object) -> Team:
    if not isinstance(team_data, dict):
        msg = f"Team at index {idx} must be a mapping, got {type(team_data).__name__}"
        raise ValueError(msg)

    name = _require_string(idx, team_data, "name")
    channel = _require_string(idx, team_data, "slack_channel")
    repositories = _require_string_list(idx, team_data, "repositories")
    members = _require_string_list(idx, team_data, "members")

    schedule = None
    raw_schedule = team_data.get("schedule")
    if raw_schedule is not None:
        if not isinstance(raw_schedule, str) or not raw_schedule.strip():
            msg = f"Team at index {idx} has invalid 'schedule': must be a non-empty string or omitted"
            raise ValueError(msg)
        try:
            schedule = parse_schedule(raw_schedule.strip())
        except ValueError as e:
            msg = f"Team '{name}' has invalid 'schedule': {e}"
            raise ValueError(msg) from e

    return Team(
        name=name,
        channel=channel,
        # dict.fromkeys drops duplicates and keeps first-seen order
        repositories=tuple(dict.fromkeys(repositories)),
        members=frozenset(members),
        schedule=schedule,
    )


def _require_string(idx: int, team_data: dict, field: str) -> str:
    if field not in team_data:
        msg = f"Team at index {idx} is missing required field '{field}'"
        raise ValueError(msg)
    value = team_data[field]
    if not isinstance(value, str) or not value.strip():
        msg = f"Team at index {idx} has invalid '{field}': must be a non-empty string"
        raise ValueError(msg)
    return value.strip()


def _require_string_list(idx: int, team_data: dict, field: str) -> list[str]:
    if field not in team_data:
        msg = f"Team at index {idx} is missing required field '{field}'"
        raise ValueError(msg)
    values = team_data[field]
    # An explicit empty list is allowed; YAML renders "repositories:" with no items as None
    if values is None:
        return []
    if not isinstance(values, list) or not all(
        isinstance(value, str) and value.strip() for value in values
    ):
        msg = f"Team at index {idx} has invalid '{field}': must be a list of non-empty strings"
        raise ValueError(msg)
    return [value.strip() for value in values]
