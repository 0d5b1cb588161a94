"""End-to-end tests for the FastAPI app with a scripted rate source."""

import logging

import pytest
from fastapi.testclient import TestClient

from app.config import Settings
from app.main import create_app
from app.rates.interface import RateSource
from app.rates.models import RateSnapshot


class ScriptedRateSource(RateSource):
    """Applies a fixed list of snapshots, one per poll_once()."""

    def __init__(self, snapshots: list[dict]) -> None:
        self.cache = None
        self._snapshots = [RateSnapshot(currency="EUR", rates=rates, timestamp=1700000000.0) for rates in snapshots]
        self.started = False
        self.stopped = False

    async def start(self) -> None:
        self.started = True
        while self._snapshots:
            await self.poll_once()

    async def stop(self) -> None:
        self.stopped = True

    async def poll_once(self) -> bool:
        if not self._snapshots:
            return False
        self.cache.apply(self._snapshots.pop(0))
        return True


@pytest.fixture
def settings(tmp_path):
    return Settings(store_path=tmp_path / "preferences.json", history_window=3)


def _make_app(settings, snapshots):
    source = ScriptedRateSource(snapshots)
    app = create_app(settings, source=source)
    source.cache = app.state.rate_cache
    return app, source


class TestLifecycle:
    def test_source_started_and_stopped(self, settings):
        app, source = _make_app(settings, [{"BTC": "1"}])
        with TestClient(app):
            assert source.started
        assert source.stopped


class TestRatesEndpoints:
    def test_loading_before_first_poll(self, settings):
        """Without a poll the board is empty and says it's loading."""
        app, _ = _make_app(settings, [])
        client = TestClient(app)

        body = client.get("/api/rates").json()
        assert body["status"] == "loading"
        assert body["message"] == "Loading..."
        assert body["rates"] == []
        assert body["top_gainer"] is None

    def test_unavailable_is_localized(self, settings):
        app, _ = _make_app(settings, [])
        app.state.rate_cache.record_failure(RuntimeError("down"))
        client = TestClient(app)

        body = client.get("/api/rates", params={"locale": "ar"}).json()
        assert body["status"] == "unavailable"
        assert body["message"] == "تعذر تحميل أسعار الصرف"

    def test_board_after_two_polls(self, settings):
        app, _ = _make_app(settings, [{"BTC": "100", "ETH": "10"}, {"BTC": "110", "ETH": "9"}])
        with TestClient(app) as client:
            client.put("/api/favorites/eth")
            body = client.get("/api/rates").json()

        assert body["status"] == "ok"
        assert body["message"] is None
        assert body["currency"] == "EUR"
        assert body["rates"] == [
            {
                "ticker": "BTC",
                "price": 110.0,
                "display_price": "€110.00",
                "direction": "up",
                "direction_label": "up",
                "favorite": False,
            },
            {
                "ticker": "ETH",
                "price": 9.0,
                "display_price": "€9.0000",
                "direction": "down",
                "direction_label": "down",
                "favorite": True,
            },
        ]
        assert body["top_gainer"] == {
            "ticker": "BTC",
            "change": 10.0,
            "change_percent": 10.0,
            "price": 110.0,
            "display_price": "€110.00",
            "display_change": "€10.00",
            "label": "Top gainer",
        }

    def test_board_is_localized(self, settings):
        """Labels, direction words and amounts follow the requested locale."""
        app, _ = _make_app(settings, [{"BTC": "100"}, {"BTC": "110"}])
        with TestClient(app) as client:
            english = client.get("/api/rates").json()
            arabic = client.get("/api/rates", params={"locale": "ar"}).json()

        assert english["labels"] == {
            "rate": "Rate",
            "rate_change": "Change",
            "recent_rates": "Recent rates",
            "favorites": "Favorites",
            "close": "Close",
        }
        assert arabic["labels"]["rate_change"] == "التغير"
        assert arabic["rates"][0]["direction_label"] == "ارتفاع"
        assert arabic["rates"][0]["display_price"] == "110.00 €"
        assert arabic["top_gainer"]["display_change"] == "10.00 €"

    def test_first_poll_has_no_direction(self, settings):
        app, _ = _make_app(settings, [{"BTC": "100"}])
        with TestClient(app) as client:
            row = client.get("/api/rates").json()["rates"][0]
        assert row["direction"] is None
        assert row["direction_label"] is None

    def test_favorites_only(self, settings):
        app, _ = _make_app(settings, [{"BTC": "100", "ETH": "10"}])
        with TestClient(app) as client:
            client.put("/api/favorites/BTC")
            body = client.get("/api/rates", params={"favorites_only": True}).json()
        assert [r["ticker"] for r in body["rates"]] == ["BTC"]

    def test_history(self, settings):
        """History is bounded by the configured window."""
        snapshots = [{"BTC": str(p)} for p in (1, 2, 3, 4)]
        app, _ = _make_app(settings, snapshots)
        with TestClient(app) as client:
            response = client.get("/api/rates/btc/history")

        assert response.status_code == 200
        assert response.json() == {
            "ticker": "BTC",
            "window_size": 3,
            "prices": [2.0, 3.0, 4.0],
            "sparkline": [0.0, 0.5, 1.0],
        }

    def test_history_unknown_ticker(self, settings):
        app, _ = _make_app(settings, [{"BTC": "1"}])
        with TestClient(app) as client:
            response = client.get("/api/rates/NOPE/history")
        assert response.status_code == 404

    def test_health(self, settings):
        app, _ = _make_app(settings, [{"BTC": "1"}])
        with TestClient(app) as client:
            body = client.get("/api/health").json()
        assert body == {"status": "ok", "version": 1, "consecutive_failures": 0, "last_error": None}


class TestPortfolioEndpoints:
    def test_favorites_roundtrip(self, settings):
        app, _ = _make_app(settings, [])
        client = TestClient(app)

        assert client.put("/api/favorites/btc").json() == {"favorites": ["BTC"]}
        assert client.put("/api/favorites/ETH").json() == {"favorites": ["BTC", "ETH"]}
        assert client.delete("/api/favorites/BTC").json() == {"favorites": ["ETH"]}
        assert client.get("/api/favorites").json() == {"favorites": ["ETH"]}

    def test_holdings(self, settings):
        app, _ = _make_app(settings, [])
        client = TestClient(app)

        response = client.put("/api/holdings/btc", json={"quantity": 0.25})
        assert response.status_code == 200
        assert response.json() == {"holdings": {"BTC": 0.25}}
        assert client.delete("/api/holdings/BTC").json() == {"holdings": {}}

    def test_holding_log_uses_normalized_ticker(self, settings, caplog):
        app, _ = _make_app(settings, [])
        client = TestClient(app)
        caplog.set_level(logging.INFO, logger="app.portfolio.routes")

        client.put("/api/holdings/%20btc%20", json={"quantity": 1.5})

        messages = [r.getMessage() for r in caplog.records if r.name == "app.portfolio.routes"]
        assert messages == ["Holding for BTC set to 1.5"]

    def test_negative_quantity_rejected(self, settings):
        app, _ = _make_app(settings, [])
        client = TestClient(app)

        response = client.put("/api/holdings/BTC", json={"quantity": -1})
        assert response.status_code == 422
        assert client.get("/api/holdings").json() == {"holdings": {}}

    def test_portfolio_value(self, settings):
        app, _ = _make_app(settings, [{"BTC": "50000", "ETH": "2000"}])
        with TestClient(app) as client:
            client.put("/api/holdings/BTC", json={"quantity": 0.5})
            client.put("/api/holdings/DOT", json={"quantity": 10})
            body = client.get("/api/portfolio").json()

        assert body["currency"] == "EUR"
        assert body["total"] == 25000.0
        assert body["positions"] == [{"ticker": "BTC", "quantity": 0.5, "price": 50000.0, "value": 25000.0}]
        assert body["unpriced"] == ["DOT"]
        assert body["label"] == "Portfolio value"
        assert body["display_total"] == "€25,000.00"

    def test_portfolio_without_rates_has_no_display_total(self, settings):
        app, _ = _make_app(settings, [])
        client = TestClient(app)
        client.put("/api/holdings/BTC", json={"quantity": 1})

        body = client.get("/api/portfolio").json()
        assert body["display_total"] is None

    def test_preferences_survive_restart(self, settings):
        """Favorites and holdings are read back by a new app on the same store."""
        app, _ = _make_app(settings, [])
        client = TestClient(app)
        client.put("/api/favorites/SOL")
        client.put("/api/holdings/SOL", json={"quantity": 3})

        restarted, _ = _make_app(settings, [])
        client = TestClient(restarted)
        assert client.get("/api/favorites").json() == {"favorites": ["SOL"]}
        assert client.get("/api/holdings").json() == {"holdings": {"SOL": 3.0}}
