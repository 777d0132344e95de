import pytest
import httpx
from fastapi.testclient import TestClient
from unittest.mock import Mock

from prometheus_client import REGISTRY

from jurisdiction_map.main import create_app
from jurisdiction_map.sample_data import SAMPLE_COMPOUND
from jurisdiction_map.utils.pubchem_client import PubChemClient
from jurisdiction_map.utils.regional_offices import EPO_MEMBERS


def upstream(status_code=200):
    def handler(request: httpx.Request) -> httpx.Response:
        if status_code != 200:
            return httpx.Response(status_code, json={"error": "unavailable"})
        return httpx.Response(200, json=SAMPLE_COMPOUND)
    return PubChemClient("http://upstream/api/compound", transport=httpx.MockTransport(handler))


def by_country(records):
    return {record["country"]: record for record in records}


@pytest.fixture
def client():
    with TestClient(create_app(client=upstream(), seed_sample_data=False)) as test_client:
        yield test_client


@pytest.fixture
def seeded_client():
    with TestClient(create_app(client=upstream(), seed_sample_data=True)) as test_client:
        yield test_client


class TestCollectionEndpoints:
    """Test GET and POST /collection."""

    def test_empty_collection(self, client):
        response = client.get("/collection")

        assert response.status_code == 200
        assert response.json() == []

    def test_seeded_collection(self, seeded_client):
        """The sample compound is aggregated at startup."""
        records = by_country(seeded_client.get("/collection").json())

        assert records["JP"] == {"country": "JP", "leagueStatus": "Basic", "active": False}
        assert records["ES"]["active"] is False
        for code in ("EP", "AU", "WO", "US"):
            assert records[code]["active"] is True
        for member in EPO_MEMBERS:
            if member != "ES":
                assert records[member] == {"country": member, "leagueStatus": "Basic", "active": True}
        assert len(records) == 6 + len(EPO_MEMBERS) - 1

    def test_post_status_array(self, client):
        payload = [
            {"country": "Japan", "leagueStatus": "Premier", "active": True},
            {"country": "France", "leagueStatus": "Standard", "active": "yes"},
            {},
            {"country": "Brazil", "leagueStatus": "Basic", "active": False},
            {"country": "japan", "leagueStatus": "Basic", "active": False},
        ]

        response = client.post("/collection", json=payload)

        assert response.status_code == 200
        assert response.json() == [
            {"country": "Japan", "leagueStatus": "Premier", "active": True},
            {"country": "Brazil", "leagueStatus": "Basic", "active": False},
        ]
        assert client.get("/collection").json() == response.json()

    def test_post_applications(self, client):
        payload = [
            {"country_code": "EP", "legal_status": "active", "filing_date": "2016-02-01"},
            {"country_code": "DE", "legal_status": "not_active", "filing_date": "2016-02-01"},
        ]

        records = by_country(client.post("/collection", json=payload).json())

        assert records["EP"]["leagueStatus"] == "Premier"
        assert records["DE"]["active"] is False
        assert records["FR"] == {"country": "FR", "leagueStatus": "Premier", "active": True}

    def test_post_envelope(self, client):
        records = by_country(client.post("/collection", json=SAMPLE_COMPOUND).json())

        assert records["JP"]["active"] is False
        assert records["GB"]["active"] is True

    def test_reposting_is_idempotent(self, client):
        first = client.post("/collection", json=SAMPLE_COMPOUND).json()
        second = client.post("/collection", json=SAMPLE_COMPOUND).json()

        assert first == second

    def test_preview_does_not_store(self, client):
        response = client.post("/collection/preview", json=SAMPLE_COMPOUND)
        body = response.json()

        assert response.status_code == 200
        assert body["shape"] == "pubchem_envelope"
        assert body["stored"] is False
        assert body["report"]["valid"] == 6
        assert body["collection"][0] == {"country": "JP", "leagueStatus": "Basic", "active": False}
        assert client.get("/collection").json() == []


class TestErrorResponses:
    """Test structured 4xx and 5xx bodies."""

    def test_malformed_json(self, client):
        response = client.post("/collection", content=b"{not json",
                               headers={"Content-Type": "application/json"})

        assert response.status_code == 400
        assert response.json()["error"] == "MalformedInput"

    def test_scalar_payload(self, client):
        response = client.post("/collection", json="Japan")

        assert response.status_code == 400
        assert response.json()["error"] == "MalformedInput"

    def test_unrecognized_shape(self, client):
        response = client.post("/collection", json=[{"name": "Japan"}])
        body = response.json()

        assert response.status_code == 400
        assert body["error"] == "UnrecognizedShape"
        assert "pubchemResults" in body["message"]

    def test_no_valid_data_keeps_state(self, seeded_client):
        before = seeded_client.get("/collection").json()

        response = seeded_client.post("/collection", json=[
            {"country": "Japan", "leagueStatus": "Premier"},
            {},
        ])
        body = response.json()

        assert response.status_code == 400
        assert body["error"] == "NoValidData"
        assert [detail["path"] for detail in body["details"]] == ["[0].active", "[1]"]
        assert seeded_client.get("/collection").json() == before

    def test_empty_array(self, client):
        response = client.post("/collection", json=[])

        assert response.status_code == 400
        assert response.json()["error"] == "NoValidData"

    def test_unhandled_error(self):
        app = create_app(client=upstream(), seed_sample_data=False)
        app.state.service.store.get_all = Mock(side_effect=RuntimeError("boom"))
        test_client = TestClient(app, raise_server_exceptions=False)

        response = test_client.get("/collection")

        assert response.status_code == 500
        assert response.json() == {
            "error": "InternalError", "message": "Internal server error.", "details": []
        }

    def test_unhandled_error_is_counted(self):
        app = create_app(client=upstream(), seed_sample_data=False)
        app.state.service.store.get_all = Mock(side_effect=RuntimeError("boom"))
        test_client = TestClient(app, raise_server_exceptions=False)
        labels = {"method": "GET", "endpoint": "/collection", "status": "500"}
        before = REGISTRY.get_sample_value("http_requests_total", labels) or 0

        test_client.get("/collection")

        assert REGISTRY.get_sample_value("http_requests_total", labels) == before + 1


class TestFetchEndpoint:
    """Test POST /collection/fetch/{cid}."""

    def test_fetch_success(self, client):
        response = client.post("/collection/fetch/23327")

        assert response.status_code == 200
        assert by_country(response.json())["DE"]["active"] is True
        assert client.get("/compound").json() == SAMPLE_COMPOUND

    def test_upstream_failure(self):
        with TestClient(create_app(client=upstream(503), seed_sample_data=True)) as test_client:
            before = test_client.get("/collection").json()

            response = test_client.post("/collection/fetch/23327")

            assert response.status_code == 502
            assert response.json()["error"] == "UpstreamFetchFailure"
            assert test_client.get("/collection").json() == before

    def test_invalid_cid(self, client):
        assert client.post("/collection/fetch/0").status_code == 422


class TestPresentationEndpoints:

    def test_stats(self, seeded_client):
        stats = seeded_client.get("/collection/stats").json()

        assert stats["total"] == 22
        assert stats["active"] == 20
        assert stats["inactive"] == 2
        assert stats["basic"] == 22

    def test_tooltip_explicit(self, seeded_client):
        tooltip = seeded_client.get("/collection/jp/tooltip").json()

        assert tooltip["code"] == "JP"
        assert tooltip["name"] == "Japan"
        assert tooltip["active"] is False

    def test_tooltip_via_regional_office(self, seeded_client):
        france = seeded_client.get("/collection/FR/tooltip").json()
        spain = seeded_client.get("/collection/ES/tooltip").json()

        assert france["active"] is True
        assert france["via_regional_office"] is True
        assert france["league_status"] == "Basic"
        assert spain["active"] is False
        assert spain["via_regional_office"] is False

    def test_tooltip_unknown(self, client):
        tooltip = client.get("/collection/ZZ/tooltip").json()

        assert tooltip["active"] is False
        assert tooltip["via_regional_office"] is False


class TestCompoundEndpoints:

    def test_no_compound(self, client):
        assert client.get("/compound").status_code == 404
        assert client.get("/compound/applications").status_code == 404

    def test_post_compound(self, client):
        envelope = {"pubchemResults": {"currentCompound": {"cid": 5960, "recordTitle": "L-Aspartic Acid"},
                                       "patents": []}}

        response = client.post("/compound", json=envelope)

        assert response.status_code == 200
        assert client.get("/compound").json() == envelope
        assert client.get("/collection").json() == []

    def test_post_compound_without_current_compound(self, client):
        response = client.post("/compound", json={"pubchemResults": {"patents": []}})

        assert response.status_code == 400
        assert response.json()["error"] == "UnrecognizedShape"

    def test_compound_applications(self, seeded_client):
        body = seeded_client.get("/compound/applications").json()

        assert len(body["applications"]) == 6
        assert body["stats"] == {"total": 6, "active": 4, "inactive": 2}
        assert body["report"]["valid"] == 6
        assert by_country(body["jurisdictions"])["FR"]["active"] is True


class TestServiceEndpoints:

    def test_root(self, client):
        body = client.get("/").json()

        assert body["message"] == "Jurisdiction Map API"
        assert "GET /collection" in body["endpoints"]

    def test_health(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"
        assert set(response.json()["checks"]) == {"aggregate_worker", "fetch_worker"}

    def test_health_before_startup(self):
        test_client = TestClient(create_app(client=upstream(), seed_sample_data=False))

        assert test_client.get("/health").status_code == 503

    def test_metrics(self, client):
        client.post("/collection", json=SAMPLE_COMPOUND)

        response = client.get("/metrics")

        assert response.status_code == 200
        assert b"payloads_processed_total" in response.content
