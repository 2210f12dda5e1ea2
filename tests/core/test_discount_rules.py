"""
Tests for core.config - discount rule data and settings.
"""

from decimal import Decimal

import pytest

from core.config import settings
from core.config.rules import (
    BundleRule,
    DiscountRules,
    InMemoryDiscountRuleStore,
    VolumeTier,
    default_discount_rules,
)
from core.primitives.money import Money


class TestRuleValues:
    def test_volume_tier_rejects_rate_above_one(self):
        with pytest.raises(ValueError, match="between 0 and 1"):
            VolumeTier(threshold=Money(100), rate=Decimal("1.5"))

    def test_volume_tier_requires_money_threshold(self):
        with pytest.raises(TypeError, match="Money"):
            VolumeTier(threshold=100, rate=Decimal("0.02"))

    def test_bundle_requires_items(self):
        with pytest.raises(ValueError, match="at least one item"):
            BundleRule(bundle_id="b", item_ids=frozenset(), rate=Decimal("0.1"))

    def test_bundle_normalizes_item_ids(self):
        bundle = BundleRule(bundle_id="b", item_ids={"1", "3"}, rate=0.1)
        assert bundle.item_ids == frozenset({"1", "3"})
        assert bundle.rate == Decimal("0.1")


class TestDiscountRules:
    def test_unknown_customer_has_zero_rate(self):
        rules = default_discount_rules()
        assert rules.customer_rate("9999") == Decimal(0)
        assert rules.customer_rate(None) == Decimal(0)

    def test_default_customer_rates(self):
        rules = default_discount_rules()
        assert rules.customer_rate("1001") == Decimal("0.10")
        assert rules.customer_rate("1002") == Decimal("0.05")
        assert rules.customer_rate("1003") == Decimal("0.15")

    def test_item_rate_absent_is_none(self):
        rules = default_discount_rules()
        assert rules.item_rate("5") == Decimal("0.05")
        assert rules.item_rate("1") is None

    def test_tiers_descending(self):
        rules = DiscountRules(volume_tiers=(
            VolumeTier(Money(500), Decimal("0.02")),
            VolumeTier(Money(1000), Decimal("0.03")),
        ))
        thresholds = [t.threshold for t in rules.tiers_descending()]
        assert thresholds == [Money(1000), Money(500)]


class TestInMemoryDiscountRuleStore:
    def test_empty_store(self):
        rules = InMemoryDiscountRuleStore().get_rules()
        assert rules.customer_rates == {}
        assert rules.bundles == ()

    def test_mutations_show_in_next_snapshot(self):
        store = InMemoryDiscountRuleStore()
        before = store.get_rules()
        store.set_customer_rate("2001", "0.20")
        store.set_item_rate("4", 0.1)
        store.add_volume_tier(Money(200), "0.01")
        store.add_bundle("pair", ["1", "2"], "0.15", name="Pair")

        after = store.get_rules()
        assert before.customer_rates == {}
        assert after.customer_rate("2001") == Decimal("0.20")
        assert after.item_rate("4") == Decimal("0.1")
        assert len(after.volume_tiers) == 1
        assert after.bundles[0].name == "Pair"

    def test_duplicate_bundle_rejected(self):
        store = InMemoryDiscountRuleStore(default_discount_rules())
        with pytest.raises(ValueError, match="already configured"):
            store.add_bundle("breakfast", ["1"], "0.1")

    def test_rate_validated_on_set(self):
        store = InMemoryDiscountRuleStore()
        with pytest.raises(ValueError):
            store.set_customer_rate("1", -0.1)


class TestSettings:
    def test_permissive_defaults(self):
        assert isinstance(settings.RECEIPT_WIDTH, int)
        assert isinstance(settings.REJECT_UNDERPAYMENT, bool)
        assert isinstance(settings.ALLOW_NEGATIVE_TOTAL, bool)

    def test_env_bool(self, monkeypatch):
        monkeypatch.setenv("POS_TEST_FLAG", "yes")
        assert settings._env_bool("POS_TEST_FLAG", False) is True
        monkeypatch.setenv("POS_TEST_FLAG", "0")
        assert settings._env_bool("POS_TEST_FLAG", True) is False
        monkeypatch.delenv("POS_TEST_FLAG")
        assert settings._env_bool("POS_TEST_FLAG", True) is True

    def test_logging_layout_targets_pos_logger(self):
        assert "pos" in settings.LOGGING["loggers"]
        assert settings.LOGGING["loggers"]["pos"]["handlers"] == ["console"]
