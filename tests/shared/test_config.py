"""Tests for GameConfig."""
import pytest

from citysim.shared.config import (
    DEFAULT_INITIAL_BUDGET,
    DEFAULT_INITIAL_FAMILIES,
    SANDBOX_INITIAL_BUDGET,
    SANDBOX_INITIAL_FAMILIES,
    Difficulty,
    GameConfig,
)


def test_defaults_without_config_file(tmp_path):
    # Act
    config = GameConfig(tmp_path)

    # Assert
    assert config.initial_families == DEFAULT_INITIAL_FAMILIES
    assert config.initial_budget == DEFAULT_INITIAL_BUDGET
    assert config.difficulty is Difficulty.NORMAL
    assert config.sandbox_mode is False
    assert config.max_days == 100
    assert config.seed is None
    assert config.save_dir == tmp_path / "user_data" / "saves"
    assert config.highscores_file == tmp_path / "user_data" / "highscores.tsv"


def test_toml_overrides(tmp_path):
    # Arrange
    (tmp_path / "config.toml").write_text(
        "[game]\n"
        "initial_families = 25\n"
        "initial_budget = 2500\n"
        "initial_tax_rate = 0.2\n"
        "difficulty = \"hard\"\n"
        "max_days = 30\n"
        "seed = 7\n"
    )

    # Act
    config = GameConfig(tmp_path)

    # Assert
    assert config.initial_families == 25
    assert config.initial_budget == 2500
    assert config.initial_tax_rate == pytest.approx(0.2)
    assert config.initial_vat_rate == pytest.approx(0.05)
    assert config.difficulty is Difficulty.HARD
    assert config.max_days == 30
    assert config.seed == 7


def test_explicit_config_path(tmp_path):
    # Arrange
    custom = tmp_path / "custom.toml"
    custom.write_text("initial_budget = 42\n")

    # Act
    config = GameConfig(tmp_path, config_file=custom)

    # Assert
    assert config.initial_budget == 42


def test_malformed_file_falls_back_to_defaults(tmp_path, capsys):
    # Arrange
    (tmp_path / "config.toml").write_text("[game\ninitial_budget = = 5")

    # Act
    config = GameConfig(tmp_path)

    # Assert
    assert config.initial_budget == DEFAULT_INITIAL_BUDGET
    assert "Warning" in capsys.readouterr().out


def test_bad_value_leaves_config_untouched(tmp_path):
    # Arrange
    config = GameConfig(tmp_path)

    # Act
    with pytest.raises(KeyError):
        config.apply({"initial_budget": 5, "difficulty": "nightmare"})

    # Assert
    assert config.initial_budget == DEFAULT_INITIAL_BUDGET


def test_sandbox_overrides_starting_values(tmp_path):
    # Arrange
    config = GameConfig(tmp_path)

    # Act
    config.sandbox_mode = True

    # Assert
    assert config.effective_initial_families == SANDBOX_INITIAL_FAMILIES
    assert config.effective_initial_budget == SANDBOX_INITIAL_BUDGET


def test_difficulty_multipliers():
    # Act & Assert
    assert (Difficulty.EASY.income_multiplier, Difficulty.EASY.expense_multiplier) == (1.2, 0.8)
    assert (Difficulty.HARD.income_multiplier, Difficulty.HARD.expense_multiplier) == (0.8, 1.2)
