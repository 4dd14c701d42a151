from citysim.core.paths import HOME_ENV_VAR, ProjectPaths


def test_env_var_overrides_root(tmp_path, monkeypatch):
    # Arrange
    monkeypatch.setenv(HOME_ENV_VAR, str(tmp_path))
    monkeypatch.setattr(ProjectPaths, "_root", None)

    # Act
    root = ProjectPaths.root()

    # Assert
    assert root == tmp_path.resolve()
    assert ProjectPaths.config_file() == tmp_path.resolve() / "config.toml"


def test_checkout_root_holds_main_module(monkeypatch):
    # Arrange
    monkeypatch.delenv(HOME_ENV_VAR, raising=False)
    monkeypatch.setattr(ProjectPaths, "_root", None)

    # Act
    root = ProjectPaths.root()

    # Assert
    assert (root / "main.py").is_file()
    assert (root / "citysim").is_dir()
