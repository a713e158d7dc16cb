"""Tests for the HTTP API."""

from datetime import date, timedelta
from decimal import Decimal

from fastapi.testclient import TestClient
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session

from app.models.unit import Unit

CSV_HEADER = "unit_number,reading_date,water_usage,electricity_usage\n"


def _upload(client: TestClient, body: str | bytes, **form: str):
    content = body.encode("utf-8") if isinstance(body, str) else body
    return client.post(
        "/api/upload",
        files={"file": ("readings.csv", content, "text/csv")},
        data=form,
    )


class TestUpload:
    """POST /api/upload"""

    def test_partial_import(self, client: TestClient, make_community) -> None:
        make_community("Maple Grove")
        response = _upload(
            client,
            CSV_HEADER + "A1,2024-01-01,100,10\nA1,2024-01-02,,5\nA2,2024-01-01,90,\n",
        )
        assert response.status_code == 200
        assert response.json() == {
            "importedCount": 2,
            "totalRows": 3,
            "errors": ["Row 3: Missing required fields"],
        }

    def test_byte_order_mark_is_ignored(self, client: TestClient, make_community) -> None:
        make_community("Maple Grove")
        response = _upload(client, "\ufeff" + CSV_HEADER + "A1,2024-01-01,100,10\n")
        assert response.status_code == 200
        assert response.json()["importedCount"] == 1

    def test_explicit_community(self, client: TestClient, db, make_community) -> None:
        make_community("Maple Grove")
        river = make_community("Riverside Commons")

        response = _upload(client, CSV_HEADER + "B1,2024-01-01,100,10\n", community_id=str(river.id))

        assert response.status_code == 200
        benchmark = client.get(f"/api/benchmark/{river.id}").json()
        assert benchmark["unitComparisons"] == []  # reading is older than 30 days
        assert client.get("/api/communities").json()[1]["unitCount"] == 1

    def test_missing_headers(self, client: TestClient, make_community) -> None:
        make_community("Maple Grove")
        response = _upload(client, "unit,date\nA1,2024-01-01\n")
        assert response.status_code == 400
        assert response.json()["detail"] == (
            "Missing required headers: unit_number, reading_date, water_usage"
        )

    def test_header_only(self, client: TestClient, make_community) -> None:
        make_community("Maple Grove")
        response = _upload(client, CSV_HEADER)
        assert response.status_code == 400
        assert response.json()["detail"] == "File must contain header and at least one data row"

    def test_binary_file(self, client: TestClient, make_community) -> None:
        make_community("Maple Grove")
        response = _upload(client, b"\xff\xfe\x00\x81")
        assert response.status_code == 400

    def test_unknown_community(self, client: TestClient) -> None:
        response = _upload(client, CSV_HEADER + "A1,2024-01-01,100,10\n", community_id="7")
        assert response.status_code == 404


class TestBenchmarkAndReport:
    """GET /api/benchmark/{id} and GET /api/units/{id}/report"""

    def _seed(self, client: TestClient, make_community) -> int:
        maple = make_community("Maple Grove")
        yesterday = (date.today() - timedelta(days=1)).isoformat()
        rows = [
            f"A1,{yesterday},80,10",
            f"A2,{yesterday},100,20",
            f"A3,{yesterday},150,60",
        ]
        response = _upload(client, CSV_HEADER + "\n".join(rows), community_id=str(maple.id))
        assert response.json()["importedCount"] == 3
        return maple.id

    def test_benchmark(self, client: TestClient, make_community) -> None:
        community_id = self._seed(client, make_community)

        response = client.get(f"/api/benchmark/{community_id}")

        assert response.status_code == 200
        data = response.json()
        assert Decimal(data["communityAverage"]) == Decimal("110")
        assert [(c["unitNumber"], c["status"]) for c in data["unitComparisons"]] == [
            ("A1", "good"),
            ("A2", "normal"),
            ("A3", "danger"),
        ]
        assert Decimal(data["unitComparisons"][2]["diffPercent"]) == Decimal("36.4")

    def test_benchmark_by_electricity(self, client: TestClient, make_community) -> None:
        community_id = self._seed(client, make_community)

        response = client.get(f"/api/benchmark/{community_id}", params={"metric": "electricity"})

        assert response.status_code == 200
        assert Decimal(response.json()["communityAverage"]) == Decimal("30")

    def test_benchmark_unknown_community(self, client: TestClient) -> None:
        assert client.get("/api/benchmark/999").status_code == 404

    def test_unit_report(self, client: TestClient, make_community, db) -> None:
        self._seed(client, make_community)
        unit_id = db.query(Unit).filter(Unit.unit_number == "A3").one().id

        response = client.get(f"/api/units/{unit_id}/report")

        assert response.status_code == 200
        data = response.json()
        assert data["unit"] == {"id": unit_id, "unitNumber": "A3", "communityName": "Maple Grove"}
        assert Decimal(data["currentUsage"]["water"]) == Decimal("150")
        assert Decimal(data["communityAverage"]["electricity"]) == Decimal("30")
        assert len(data["historicalData"]) == 1
        assert set(data["historicalData"][0]) == {"date", "water", "electricity"}
        assert data["tips"] == [
            "Consider installing low-flow fixtures to reduce water usage",
            "Check for leaks in faucets and toilets",
            "Switch to LED bulbs to reduce electricity consumption",
            "Unplug electronics when not in use",
        ]

    def test_unit_report_unknown_unit(self, client: TestClient) -> None:
        response = client.get("/api/units/12345/report")
        assert response.status_code == 404
        assert response.json()["detail"] == "Unit not found"

    def test_storage_failure_is_a_generic_500(
        self, client: TestClient, make_community, monkeypatch
    ) -> None:
        make_community("Maple Grove")

        def broken_query(session, *entities, **kwargs):
            raise OperationalError("SELECT", {}, Exception("disk I/O error"))

        monkeypatch.setattr(Session, "query", broken_query)
        response = client.get("/api/benchmark/1")

        assert response.status_code == 500
        assert response.json() == {"detail": "Internal storage error"}

    def test_oversized_usage_does_not_break_reads(self, client: TestClient, make_community) -> None:
        make_community("Maple Grove")
        today = date.today().isoformat()

        upload = _upload(client, CSV_HEADER + f"A1,{today},1e30,1\nA2,{today},100,1\n")

        assert upload.json() == {
            "importedCount": 1,
            "totalRows": 2,
            "errors": ["Row 2: Invalid water usage value"],
        }
        assert client.get("/api/benchmark/1").status_code == 200
        assert client.get("/api/communities").status_code == 200


class TestCommunitiesAndExport:
    """Community listing, monthly trend and CSV export."""

    def test_list_communities(self, client: TestClient, make_community) -> None:
        make_community("Riverside Commons")
        make_community("Maple Grove")
        today = date.today().isoformat()
        _upload(client, CSV_HEADER + f"A1,{today},40,1\nA2,{today},60,1\n", community_id="2")

        data = client.get("/api/communities").json()

        assert [c["name"] for c in data] == ["Maple Grove", "Riverside Commons"]
        assert data[0]["unitCount"] == 2
        assert Decimal(data[0]["avgConsumption"]) == Decimal("50")
        assert data[1]["unitCount"] == 0
        assert Decimal(data[1]["avgConsumption"]) == Decimal("0")

    def test_get_community(self, client: TestClient, make_community) -> None:
        community = make_community("Maple Grove")
        assert client.get(f"/api/communities/{community.id}").json() == {
            "id": community.id,
            "name": "Maple Grove",
        }
        assert client.get("/api/communities/999").status_code == 404

    def test_consumption_trend(self, client: TestClient, make_community) -> None:
        community = make_community("Maple Grove")
        today = date.today().isoformat()
        _upload(client, CSV_HEADER + f"A1,{today},40,2\nA2,{today},61,3\n")

        response = client.get(f"/api/communities/{community.id}/consumption")

        assert response.status_code == 200
        [point] = response.json()
        assert Decimal(point["water"]) == Decimal("50.5")
        assert Decimal(point["electricity"]) == Decimal("2.5")

    def test_export_csv(self, client: TestClient, make_community) -> None:
        community = make_community("Maple Grove")
        _upload(client, CSV_HEADER + "A1,2024-01-01,40,2\n")

        response = client.get(f"/api/export/csv/{community.id}")

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/csv")
        assert (
            response.headers["content-disposition"]
            == f'attachment; filename="community_{community.id}_consumption.csv"'
        )
        assert response.text.splitlines()[1].startswith("A1,2024-01-01,")

    def test_export_without_data(self, client: TestClient, make_community) -> None:
        community = make_community("Maple Grove")
        response = client.get(f"/api/export/csv/{community.id}")
        assert response.status_code == 404
        assert response.json()["detail"] == "No data found for this community"
