"""Tests for the Flask dashboard routes."""

from concurrent.futures import ThreadPoolExecutor

import pandas as pd
import pytest

import app as app_module
from ecotimeline.config import END_YEAR, START_YEAR
from ecotimeline.models import ResourceType


@pytest.fixture
def client(tmp_path, monkeypatch):
    """Test client writing its audit log to a temporary directory, starting on Oil."""
    monkeypatch.setenv("ECOTIMELINE_NOISE_SEED", "1")
    app_module.app.config["TESTING"] = True
    app_module.app.config["AUDIT_LOG"] = str(tmp_path / "audit_log.csv")
    app_module.regenerate_snapshot(ResourceType.OIL)
    return app_module.app.test_client()


def _audit_actions():
    return list(pd.read_csv(app_module.app.config["AUDIT_LOG"])["Action"])


class TestDashboard:
    def test_index_redirects(self, client):
        response = client.get("/")
        assert response.status_code == 302
        assert "/dashboard" in response.headers["Location"]

    def test_renders(self, client):
        response = client.get("/dashboard?resource=Oil&year=2030")
        assert response.status_code == 200
        body = response.get_data(as_text=True)
        assert "EcoTimeline" in body
        assert "Global depletion D-Day" in body
        assert "Billion" in body
        assert "page_view" in _audit_actions()

    def test_unknown_resource_redirects(self, client):
        response = client.get("/dashboard?resource=uranium")
        assert response.status_code == 302
        follow = client.get(response.headers["Location"])
        assert "Unknown resource" in follow.get_data(as_text=True)

    @pytest.mark.parametrize("year", ["1989", "2051", "soon"])
    def test_bad_year_redirects(self, client, year):
        response = client.get(f"/dashboard?resource=Oil&year={year}")
        assert response.status_code == 302

    def test_resource_in_url_replaces_snapshot(self, client):
        before = app_module.snapshot
        response = client.get("/dashboard?resource=Gas&year=2024")
        assert response.status_code == 200
        assert app_module.snapshot.resource is ResourceType.GAS
        assert app_module.snapshot is not before
        assert "snapshot_generated" in _audit_actions()

    def test_playing_page_refreshes_to_next_year(self, client):
        body = client.get("/dashboard?resource=Oil&year=2030&playing=1").get_data(as_text=True)
        assert 'http-equiv="refresh"' in body
        assert "year=2031" in body

    def test_playing_at_end_rewinds(self, client):
        body = client.get(f"/dashboard?resource=Oil&year={END_YEAR}&playing=1").get_data(as_text=True)
        assert f"year={START_YEAR}" in body
        assert "playing=1" not in body.split('http-equiv="refresh"')[1].split(">")[0]

    def test_playback_refresh_is_not_logged_as_page_view(self, client):
        client.get("/dashboard?resource=Oil&year=2030")
        client.get("/dashboard?resource=Oil&year=2031&playing=1")
        client.get("/dashboard?resource=Oil&year=2032&playing=1")
        assert _audit_actions().count("page_view") == 1


class TestResourceChange:
    def test_switch_regenerates(self, client):
        before = app_module.snapshot
        response = client.post("/resource", data={"resource": "Coal", "year": "2035"})
        assert response.status_code == 302
        assert "resource=Coal" in response.headers["Location"]
        assert "year=2035" in response.headers["Location"]
        assert app_module.snapshot.resource is ResourceType.COAL
        assert app_module.snapshot is not before
        assert "resource_change" in _audit_actions()

    def test_same_resource_keeps_snapshot(self, client):
        before = app_module.snapshot
        client.post("/resource", data={"resource": "Oil", "year": "2035"})
        assert app_module.snapshot is before

    def test_unknown_resource(self, client):
        response = client.post("/resource", data={"resource": "Wind"})
        assert response.status_code == 302
        assert app_module.snapshot.resource is ResourceType.OIL


class TestPlayback:
    def test_play(self, client):
        response = client.post("/play", data={"year": "2000", "playing": "0"})
        assert "year=2000" in response.headers["Location"]
        assert "playing=1" in response.headers["Location"]

    def test_pause(self, client):
        response = client.post("/play", data={"year": "2000", "playing": "1"})
        assert "playing" not in response.headers["Location"]

    def test_play_at_end_restarts(self, client):
        response = client.post("/play", data={"year": str(END_YEAR), "playing": "0"})
        assert f"year={START_YEAR}" in response.headers["Location"]
        assert "playing=1" in response.headers["Location"]

    def test_play_keeps_the_page_resource(self, client):
        # another visitor switched the shared snapshot back to Oil
        client.post("/resource", data={"resource": "Coal", "year": "2000"})
        client.post("/resource", data={"resource": "Oil", "year": "2000"})
        response = client.post("/play", data={"resource": "Coal", "year": "2000", "playing": "0"})
        assert "resource=Coal" in response.headers["Location"]

    def test_play_with_unknown_resource(self, client):
        response = client.post("/play", data={"resource": "Wind", "year": "2000", "playing": "0"})
        assert response.status_code == 302
        assert "playing" not in response.headers["Location"]


class TestCountryProfile:
    def test_renders(self, client):
        response = client.get("/country/usa?year=2030")
        assert response.status_code == 200
        body = response.get_data(as_text=True)
        assert "United States" in body
        assert "Reserves:" in body

    def test_no_data_year_falls_back(self, client):
        response = client.get("/country/JPN?year=1800")
        assert response.status_code == 200
        assert "Japan" in response.get_data(as_text=True)

    def test_unknown_country(self, client):
        response = client.get("/country/ATL")
        assert response.status_code == 302
        follow = client.get(response.headers["Location"])
        assert "Country not found." in follow.get_data(as_text=True)

    def test_uses_the_linked_resource(self, client):
        response = client.get("/country/USA?resource=Coal&year=2030")
        assert response.status_code == 200
        body = response.get_data(as_text=True)
        assert "Million Tonnes" in body
        assert app_module.snapshot.resource is ResourceType.COAL

    def test_unknown_country_keeps_resource(self, client):
        response = client.get("/country/ATL?resource=Gas")
        assert "resource=Gas" in response.headers["Location"]


class TestExport:
    def test_current_resource(self, client):
        response = client.get("/export/Oil.csv")
        assert response.status_code == 200
        assert response.mimetype == "text/csv"
        assert "attachment" in response.headers["Content-Disposition"]
        assert response.get_data(as_text=True).startswith("resource,id,name,year")
        assert "export" in _audit_actions()

    def test_other_resource_leaves_snapshot(self, client):
        before = app_module.snapshot
        response = client.get("/export/gas.csv")
        assert response.status_code == 200
        assert "\nGas,USA," in response.get_data(as_text=True)
        assert app_module.snapshot is before

    def test_unknown_resource(self, client):
        assert client.get("/export/wind.csv").status_code == 302


class TestCurrentSnapshot:
    def test_matching_snapshot_is_reused(self, client):
        before = app_module.snapshot
        with app_module.app.test_request_context("/dashboard"):
            assert app_module.current_snapshot(ResourceType.OIL) is before

    def test_returns_requested_resource_when_replaced_meanwhile(self, client, monkeypatch):
        # another request swaps the shared snapshot right after this one regenerates
        monkeypatch.setattr(
            app_module, "audit",
            lambda action, details="": app_module.regenerate_snapshot(ResourceType.GAS),
        )
        data = app_module.current_snapshot(ResourceType.COAL)
        assert data.resource is ResourceType.COAL
        assert app_module.snapshot.resource is ResourceType.GAS

    def test_concurrent_requests_get_their_own_resource(self, client, monkeypatch):
        monkeypatch.setattr(app_module, "audit", lambda action, details="": None)
        wanted = list(ResourceType) * 5
        with ThreadPoolExecutor(max_workers=4) as pool:
            results = list(pool.map(app_module.current_snapshot, wanted))
        assert [data.resource for data in results] == wanted
