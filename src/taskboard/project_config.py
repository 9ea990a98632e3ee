"""Project configuration for Taskboard.

Manages the per-project .taskboard/ directory holding config.toml, a
.gitignore and the project-scoped database. find_project_root() discovers a
project from any subdirectory; setup_project_context() points the database
singleton at it.
"""

from __future__ import annotations

import logging
import tomllib
from dataclasses import dataclass, field
from pathlib import Path

from .locking import DEFAULT_LIFECYCLE_TIMEOUT, DEFAULT_STORE_TIMEOUT

logger = logging.getLogger(__name__)

_PROJECT_DIR = ".taskboard"
_CONFIG_FILE = "config.toml"
_DB_FILE = "taskboard.db"

_ENVS = ("prod", "dev")
_MAX_TIMEOUT = 300.0

_GITIGNORE_CONTENT = """\
taskboard.db
*.db-journal
*.db-wal
*.db-shm
"""


@dataclass(frozen=True)
class LockConfig:
    """Bounded waits for the store lock, in seconds."""

    store_timeout_seconds: float = DEFAULT_STORE_TIMEOUT
    lifecycle_timeout_seconds: float = DEFAULT_LIFECYCLE_TIMEOUT


@dataclass(frozen=True)
class LoggingConfig:
    """Diagnostic persistence: "dev" also persists info and debug entries."""

    env: str = "prod"


@dataclass(frozen=True)
class NotificationConfig:
    """Webhooks for the lifecycle notifiers. Unset means log only."""

    calendar_webhook_url: str | None = None
    tracker_webhook_url: str | None = None
    email_webhook_url: str | None = None
    timeout_seconds: float = 10.0


@dataclass(frozen=True)
class ProjectConfig:
    """Per-project Taskboard configuration.

    Loaded from .taskboard/config.toml via load_project_config().
    """

    name: str
    locks: LockConfig = field(default_factory=LockConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    notifications: NotificationConfig = field(default_factory=NotificationConfig)

    def resolve_db_path(self, project_root: Path) -> Path:
        """Resolve absolute path to the project database."""
        return project_root.resolve() / _PROJECT_DIR / _DB_FILE


def load_project_config(project_path: Path) -> ProjectConfig:
    """Load config from .taskboard/config.toml.

    Args:
        project_path: Path to the project root directory.

    Returns:
        Parsed ProjectConfig.

    Raises:
        FileNotFoundError: If .taskboard/config.toml is missing.
        ValueError: On invalid, empty, or corrupt TOML.
    """
    config_file = project_path / _PROJECT_DIR / _CONFIG_FILE
    if not config_file.exists():
        msg = f"Project config not found: {config_file}"
        raise FileNotFoundError(msg)

    content = config_file.read_text(encoding="utf-8")
    if not content.strip():
        msg = f"Config file is empty: {config_file}"
        raise ValueError(msg)

    try:
        data = tomllib.loads(content)
    except tomllib.TOMLDecodeError as exc:
        msg = f"Invalid TOML in {config_file}: {exc}"
        raise ValueError(msg) from exc

    return _parse_config(data)


def _section(data: dict[str, object], name: str) -> dict[str, object]:
    section = data.get(name, {})
    if not isinstance(section, dict):
        msg = f"[{name}] section must be a table"
        raise ValueError(msg)
    return section


def _optional_str(value: object) -> str | None:
    return str(value) if value else None


def _parse_config(data: dict[str, object]) -> ProjectConfig:
    """Parse raw TOML data into a ProjectConfig.

    Unknown fields are silently ignored for forward compatibility.
    """
    project = _section(data, "project")
    locks = _section(data, "locks")
    logging_data = _section(data, "logging")
    notifications = _section(data, "notifications")

    name = project.get("name")
    if not isinstance(name, str) or not name:
        msg = "project.name is required and must be a non-empty string"
        raise ValueError(msg)

    try:
        config = ProjectConfig(
            name=name,
            locks=LockConfig(
                store_timeout_seconds=float(
                    locks.get("store_timeout_seconds", DEFAULT_STORE_TIMEOUT)  # type: ignore[arg-type]
                ),
                lifecycle_timeout_seconds=float(
                    locks.get("lifecycle_timeout_seconds", DEFAULT_LIFECYCLE_TIMEOUT)  # type: ignore[arg-type]
                ),
            ),
            logging=LoggingConfig(env=str(logging_data.get("env", "prod"))),
            notifications=NotificationConfig(
                calendar_webhook_url=_optional_str(notifications.get("calendar_webhook_url")),
                tracker_webhook_url=_optional_str(notifications.get("tracker_webhook_url")),
                email_webhook_url=_optional_str(notifications.get("email_webhook_url")),
                timeout_seconds=float(notifications.get("timeout_seconds", 10.0)),  # type: ignore[arg-type]
            ),
        )
    except (TypeError, ValueError) as exc:
        msg = f"Invalid numeric value in config: {exc}"
        raise ValueError(msg) from exc
    _validate_config(config)
    return config


def create_default_config(
    project_path: Path,
    *,
    name: str | None = None,
    env: str = "prod",
    force: bool = False,
) -> ProjectConfig:
    """Create .taskboard/ directory with config.toml and .gitignore.

    Args:
        project_path: Path to the project root directory.
        name: Project name. Defaults to directory basename.
        env: Diagnostics environment, "prod" or "dev".
        force: Overwrite existing .taskboard/ configuration.

    Returns:
        The created ProjectConfig.

    Raises:
        FileExistsError: If .taskboard/ exists and force=False.
    """
    project_dir = project_path / _PROJECT_DIR
    if project_dir.exists() and not force:
        msg = f"Project already initialized: {project_dir}"
        raise FileExistsError(msg)

    resolved_name = name or project_path.resolve().name
    config = ProjectConfig(name=resolved_name, logging=LoggingConfig(env=env))
    _validate_config(config)

    project_dir.mkdir(parents=True, exist_ok=True)
    (project_dir / _CONFIG_FILE).write_text(_generate_toml(config), encoding="utf-8")
    (project_dir / ".gitignore").write_text(_GITIGNORE_CONTENT, encoding="utf-8")

    logger.info("Initialized project '%s' at %s", resolved_name, project_dir)
    return config


def find_project_root(start: Path | None = None) -> Path | None:
    """Walk up from start to find the nearest .taskboard/ directory.

    Args:
        start: Starting directory. Defaults to cwd.

    Returns:
        The directory containing .taskboard/, or None if not found.
    """
    current = (start or Path.cwd()).resolve()
    while True:
        if (current / _PROJECT_DIR).is_dir():
            return current
        parent = current.parent
        if parent == current:
            return None
        current = parent


async def setup_project_context(project_root: Path) -> ProjectConfig:
    """Load project config and point the DB singleton at the project database."""
    from .database import set_db_path

    config = load_project_config(project_root)
    db_path = config.resolve_db_path(project_root)
    set_db_path(db_path)
    logger.info("Project context set: %s (db: %s)", config.name, db_path)
    return config


def resolve_db_for_cli(db_override: str | None = None) -> tuple[Path, ProjectConfig | None]:
    """Resolve database path for CLI commands with auto-discovery fallback.

    Args:
        db_override: Explicit --db path. If given, skips discovery.

    Returns:
        (db_path, config). config is None when db_override is used.

    Raises:
        FileNotFoundError: If no db_override and no .taskboard/ found.
        ValueError: If .taskboard/config.toml is corrupt or invalid.
    """
    if db_override is not None:
        return Path(db_override), None

    project_root = find_project_root()
    if project_root is None:
        msg = "No .taskboard/ directory found. Run 'taskboard init' first or use --db."
        raise FileNotFoundError(msg)

    config = load_project_config(project_root)
    return config.resolve_db_path(project_root), config


def _generate_toml(config: ProjectConfig) -> str:
    """Generate TOML string from a ProjectConfig. Unset webhooks are omitted."""
    lines = [
        "[project]",
        f'name = "{_escape_toml_string(config.name)}"',
        "",
        "[locks]",
        f"store_timeout_seconds = {config.locks.store_timeout_seconds}",
        f"lifecycle_timeout_seconds = {config.locks.lifecycle_timeout_seconds}",
        "",
        "[logging]",
        f'env = "{_escape_toml_string(config.logging.env)}"',
        "",
        "[notifications]",
        f"timeout_seconds = {config.notifications.timeout_seconds}",
    ]
    for key in ("calendar_webhook_url", "tracker_webhook_url", "email_webhook_url"):
        value = getattr(config.notifications, key)
        if value:
            lines.append(f'{key} = "{_escape_toml_string(value)}"')
    lines.append("")
    return "\n".join(lines)


def _escape_toml_string(value: str) -> str:
    """Escape special characters for TOML string values."""
    return value.replace("\\", "\\\\").replace('"', '\\"')


def _validate_config(config: ProjectConfig) -> None:
    """Validate config values.

    Raises:
        ValueError: On invalid configuration.
    """
    if not config.name or not config.name.strip():
        msg = "project.name must not be empty"
        raise ValueError(msg)
    if " " in config.name or "\t" in config.name:
        msg = f"project.name must not contain whitespace: '{config.name}'"
        raise ValueError(msg)

    for label, value in (
        ("locks.store_timeout_seconds", config.locks.store_timeout_seconds),
        ("locks.lifecycle_timeout_seconds", config.locks.lifecycle_timeout_seconds),
        ("notifications.timeout_seconds", config.notifications.timeout_seconds),
    ):
        if value <= 0 or value > _MAX_TIMEOUT:
            msg = f"{label} must be in (0, {_MAX_TIMEOUT:g}], got {value}"
            raise ValueError(msg)

    if config.logging.env not in _ENVS:
        msg = f"logging.env must be one of {', '.join(_ENVS)}, got '{config.logging.env}'"
        raise ValueError(msg)
