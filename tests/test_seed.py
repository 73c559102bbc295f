"""
Seed loader: defaults, reset semantics and history preservation.
"""
from marketsim.seed import DEFAULT_ASSETS, DEFAULT_BEHAVIORS, load_seed, main
from marketsim.services.assets import add_asset, list_assets
from marketsim.services.catalog import list_behaviors, load_catalog
from marketsim.services.history import apply_batch, get_history
from marketsim.services.impacts import resolve_impacts


class TestLoadSeed:
    def test_loads_defaults(self, db):
        assets, behaviors = load_seed(db)
        assert assets == 20
        assert behaviors == len(DEFAULT_BEHAVIORS)
        assert list_assets(db) == DEFAULT_ASSETS
        assert set(list_behaviors(db)) == set(DEFAULT_BEHAVIORS)

    def test_reset_replaces_assets(self, db):
        add_asset(db, "Custom")
        load_seed(db)
        assert "Custom" not in list_assets(db)

    def test_no_reset_appends(self, db):
        add_asset(db, "Custom")
        load_seed(db, reset=False)
        assert list_assets(db)[0] == "Custom"
        assert len(list_assets(db)) == 21

    def test_history_untouched(self, db):
        apply_batch(db, "2024-08-29T14:00", {"Bitcoin (BTC)": "Up"})
        load_seed(db)
        assert get_history(db) == {"2024-08-29T14:00": {"Bitcoin (BTC)": "Up"}}

    def test_seeded_catalog_resolves(self, db):
        load_seed(db)
        impacts = resolve_impacts(load_catalog(db), "Bitcoin", "Bitcoin (BTC)", "Down")
        assert set(impacts) == {"Ethereum (ETH)", "Dogecoin (DOGE)", "Shiba Inu (SHIB)"}


class TestSeedCli:
    def test_main_returns_zero(self, db):
        assert main([]) == 0
        db.expire_all()
        assert list_assets(db) == DEFAULT_ASSETS
