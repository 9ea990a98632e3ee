"""Tests for project configuration module.

Tests config loading, creation, validation, find_project_root,
TOML round-trip fidelity, and error handling.
"""

from __future__ import annotations

import tomllib
from pathlib import Path

import pytest

from taskboard.database.singleton import reset_db
from taskboard.project_config import (
    LockConfig,
    NotificationConfig,
    ProjectConfig,
    _generate_toml,
    _validate_config,
    create_default_config,
    find_project_root,
    load_project_config,
    resolve_db_for_cli,
    setup_project_context,
)


def _write_config(root: Path, content: str) -> None:
    project_dir = root / ".taskboard"
    project_dir.mkdir(exist_ok=True)
    (project_dir / "config.toml").write_text(content, encoding="utf-8")


class TestLoadProjectConfig:
    """Tests for load_project_config()."""

    def test_load_valid_config(self, tmp_path: Path) -> None:
        """Load a config.toml with all sections populated."""
        _write_config(
            tmp_path,
            '[project]\nname = "ops-board"\n'
            "\n[locks]\nstore_timeout_seconds = 5\nlifecycle_timeout_seconds = 30.5\n"
            '\n[logging]\nenv = "dev"\n'
            '\n[notifications]\ncalendar_webhook_url = "https://hooks.example/cal"\n'
            "timeout_seconds = 3\n",
        )

        config = load_project_config(tmp_path)

        assert config.name == "ops-board"
        assert config.locks == LockConfig(store_timeout_seconds=5.0, lifecycle_timeout_seconds=30.5)
        assert config.logging.env == "dev"
        assert config.notifications == NotificationConfig(
            calendar_webhook_url="https://hooks.example/cal", timeout_seconds=3.0
        )

    def test_missing_optional_sections_use_defaults(self, tmp_path: Path) -> None:
        _write_config(tmp_path, '[project]\nname = "minimal"\n')

        config = load_project_config(tmp_path)

        assert config.locks.store_timeout_seconds == 10.0
        assert config.locks.lifecycle_timeout_seconds == 20.0
        assert config.logging.env == "prod"
        assert config.notifications.email_webhook_url is None

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError, match="Project config not found"):
            load_project_config(tmp_path)

    def test_empty_file(self, tmp_path: Path) -> None:
        _write_config(tmp_path, "   \n")
        with pytest.raises(ValueError, match="empty"):
            load_project_config(tmp_path)

    def test_invalid_toml(self, tmp_path: Path) -> None:
        _write_config(tmp_path, "[project\nname=")
        with pytest.raises(ValueError, match="Invalid TOML"):
            load_project_config(tmp_path)

    def test_missing_name(self, tmp_path: Path) -> None:
        _write_config(tmp_path, "[project]\n")
        with pytest.raises(ValueError, match="project.name is required"):
            load_project_config(tmp_path)

    def test_section_not_a_table(self, tmp_path: Path) -> None:
        _write_config(tmp_path, 'locks = 3\n[project]\nname = "x"\n')
        with pytest.raises(ValueError, match=r"\[locks\] section must be a table"):
            load_project_config(tmp_path)

    def test_non_numeric_timeout(self, tmp_path: Path) -> None:
        _write_config(tmp_path, '[project]\nname = "x"\n[locks]\nstore_timeout_seconds = "soon"\n')
        with pytest.raises(ValueError, match="Invalid numeric value"):
            load_project_config(tmp_path)


class TestValidateConfig:
    """Tests for _validate_config()."""

    @pytest.mark.parametrize(
        "config",
        [
            ProjectConfig(name=" "),
            ProjectConfig(name="has space"),
            ProjectConfig(name="x", locks=LockConfig(store_timeout_seconds=0)),
            ProjectConfig(name="x", locks=LockConfig(lifecycle_timeout_seconds=301)),
            ProjectConfig(name="x", notifications=NotificationConfig(timeout_seconds=-1)),
        ],
    )
    def test_invalid(self, config: ProjectConfig) -> None:
        with pytest.raises(ValueError):
            _validate_config(config)

    def test_invalid_env(self) -> None:
        from taskboard.project_config import LoggingConfig

        with pytest.raises(ValueError, match="logging.env"):
            _validate_config(ProjectConfig(name="x", logging=LoggingConfig(env="staging")))


class TestCreateDefaultConfig:
    """Tests for create_default_config()."""

    def test_creates_files(self, tmp_path: Path) -> None:
        config = create_default_config(tmp_path, name="ops")

        assert config.name == "ops"
        assert (tmp_path / ".taskboard" / "config.toml").is_file()
        gitignore = (tmp_path / ".taskboard" / ".gitignore").read_text(encoding="utf-8")
        assert "taskboard.db" in gitignore

    def test_defaults_name_to_directory(self, tmp_path: Path) -> None:
        project = tmp_path / "billing"
        project.mkdir()
        assert create_default_config(project).name == "billing"

    def test_refuses_overwrite_without_force(self, tmp_path: Path) -> None:
        create_default_config(tmp_path, name="ops")
        with pytest.raises(FileExistsError):
            create_default_config(tmp_path, name="ops")
        assert create_default_config(tmp_path, name="ops2", force=True).name == "ops2"

    def test_round_trip(self, tmp_path: Path) -> None:
        created = create_default_config(tmp_path, name="ops", env="dev")
        assert load_project_config(tmp_path) == created


class TestGenerateToml:
    """Tests for _generate_toml()."""

    def test_escapes_and_omits_unset_hooks(self) -> None:
        config = ProjectConfig(
            name='odd"name',
            notifications=NotificationConfig(email_webhook_url="https://hooks.example/m"),
        )

        data = tomllib.loads(_generate_toml(config))

        assert data["project"]["name"] == 'odd"name'
        assert data["notifications"]["email_webhook_url"] == "https://hooks.example/m"
        assert "calendar_webhook_url" not in data["notifications"]


class TestDiscovery:
    """Tests for find_project_root(), resolve_db_for_cli() and setup_project_context()."""

    def test_find_from_subdirectory(self, tmp_path: Path) -> None:
        create_default_config(tmp_path, name="ops")
        nested = tmp_path / "a" / "b"
        nested.mkdir(parents=True)

        assert find_project_root(nested) == tmp_path.resolve()

    def test_find_none(self, tmp_path: Path) -> None:
        assert find_project_root(tmp_path) is None

    def test_resolve_with_override(self) -> None:
        path, config = resolve_db_for_cli("custom.db")
        assert path == Path("custom.db")
        assert config is None

    def test_resolve_discovers_project(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        create_default_config(tmp_path, name="ops")
        monkeypatch.chdir(tmp_path)

        path, config = resolve_db_for_cli()

        assert path == tmp_path.resolve() / ".taskboard" / "taskboard.db"
        assert config is not None
        assert config.name == "ops"

    def test_resolve_without_project(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.chdir(tmp_path)
        with pytest.raises(FileNotFoundError, match="taskboard init"):
            resolve_db_for_cli()

    @pytest.mark.asyncio
    async def test_setup_project_context_sets_db_path(self, tmp_path: Path) -> None:
        from taskboard.database import singleton

        create_default_config(tmp_path, name="ops")
        await reset_db()
        try:
            config = await setup_project_context(tmp_path)
            assert config.name == "ops"
            assert singleton._custom_db_path == tmp_path.resolve() / ".taskboard" / "taskboard.db"
        finally:
            await reset_db()
