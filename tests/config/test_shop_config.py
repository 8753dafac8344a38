"""
Tests for shop configuration: schema validation, YAML loading and the
active-config resolution order.
"""

from decimal import Decimal

import pytest
import yaml

from printshop_config import CONFIG_ENV_VAR, ShopConfig, get_active_config, load_config


class TestShopConfigSchema:

    def test_defaults(self):
        config = ShopConfig.with_defaults()

        assert config.vat_enabled is False
        assert config.effective_vat_percentage is None
        assert config.money_decimal_places == 2
        assert config.outstanding_tolerance == Decimal("0.01")
        assert config.shrink_policy == "reject"
        assert "cash" in config.payment_methods

    def test_vat_only_when_enabled(self):
        config = ShopConfig(vat_enabled=True, vat_percentage="16")

        assert config.effective_vat_percentage == Decimal("16")

    @pytest.mark.parametrize(
        "overrides, message",
        [
            ({"vat_percentage": "-1"}, "vat_percentage cannot be negative"),
            ({"vat_percentage": "101"}, "cannot exceed 100"),
            ({"money_decimal_places": 9}, "money_decimal_places"),
            ({"outstanding_tolerance": "-0.01"}, "outstanding_tolerance"),
            ({"draft_number_prefix": " "}, "draft_number_prefix"),
            ({"shrink_policy": "ignore"}, "shrink_policy"),
            ({"payment_methods": ()}, "payment_methods"),
        ],
    )
    def test_invalid_values(self, overrides, message):
        with pytest.raises(ValueError, match=message):
            ShopConfig(**overrides)

    @pytest.mark.parametrize("number", [None, "", "  ", "PENDING", "DRAFT-1A2B3C4D"])
    def test_placeholder_numbers(self, number):
        assert ShopConfig().is_placeholder_number(number)

    def test_real_number(self):
        assert not ShopConfig().is_placeholder_number("INV-0001")

    def test_from_dict_rejects_unknown_keys(self):
        with pytest.raises(ValueError, match="Unknown configuration keys"):
            ShopConfig.from_dict({"currency": "USD"})

    def test_from_dict(self):
        config = ShopConfig.from_dict({"shrink_policy": "flag", "placeholder_numbers": ["TBD"]})

        assert config.shrink_policy == "flag"
        assert config.placeholder_numbers == ("TBD",)


class TestLoadConfig:

    def test_shop_section(self, tmp_path):
        path = tmp_path / "shop.yaml"
        path.write_text(yaml.safe_dump({"shop": {"vat_enabled": True, "vat_percentage": "7.5"}}))

        config = load_config(path)

        assert config.effective_vat_percentage == Decimal("7.5")

    def test_bare_document(self, tmp_path):
        path = tmp_path / "shop.yaml"
        path.write_text("shrink_policy: flag\n")

        assert load_config(path).shrink_policy == "flag"

    def test_empty_file_gives_defaults(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("")

        assert load_config(path) == ShopConfig()

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / "nope.yaml")

    def test_non_mapping_rejected(self, tmp_path):
        path = tmp_path / "list.yaml"
        path.write_text("- a\n- b\n")

        with pytest.raises(ValueError, match="mapping"):
            load_config(path)

    def test_malformed_yaml(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text("shop: [unclosed\n")

        with pytest.raises(yaml.YAMLError):
            load_config(path)


class TestActiveConfig:

    def test_bundled_defaults(self, monkeypatch):
        monkeypatch.delenv(CONFIG_ENV_VAR, raising=False)

        assert get_active_config() == ShopConfig()

    def test_environment_override(self, tmp_path, monkeypatch):
        path = tmp_path / "override.yaml"
        path.write_text("shop:\n  outstanding_tolerance: '0.50'\n")
        monkeypatch.setenv(CONFIG_ENV_VAR, str(path))

        assert get_active_config().outstanding_tolerance == Decimal("0.50")

    def test_explicit_path_wins(self, tmp_path, monkeypatch):
        env_path = tmp_path / "env.yaml"
        env_path.write_text("shrink_policy: flag\n")
        explicit = tmp_path / "explicit.yaml"
        explicit.write_text("shrink_policy: reject\n")
        monkeypatch.setenv(CONFIG_ENV_VAR, str(env_path))

        assert get_active_config(explicit).shrink_policy == "reject"
