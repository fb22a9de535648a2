"""API endpoint tests.

Tests the FastAPI endpoints through TestClient against an in-memory database.
"""

from decimal import Decimal
from uuid import uuid4

from fastapi.testclient import TestClient


def create_loan(client: TestClient, **overrides) -> dict:
    payload = {
        "employee_id": "EMP001",
        "amount": "1200",
        "calculation_method": "auto",
        "installments_count": 12,
        "start_date": "2026-01",
    }
    payload.update(overrides)
    response = client.post("/api/v1/loans", json=payload)
    assert response.status_code == 201, response.text
    return response.json()


class TestHealthEndpoints:
    """Test health check endpoints."""

    def test_health_check(self, client: TestClient):
        response = client.get("/health")
        assert response.status_code == 200

        data = response.json()
        assert data["status"] == "healthy"
        assert data["database"] == "healthy"
        assert "timestamp" in data

    def test_readiness_check(self, client: TestClient):
        response = client.get("/ready")
        assert response.status_code == 200
        assert response.json()["status"] == "ready"

    def test_liveness_check(self, client: TestClient):
        response = client.get("/live")
        assert response.status_code == 200
        assert response.json()["status"] == "alive"


class TestLoanEndpoints:
    def test_create_and_get(self, client: TestClient):
        loan = create_loan(client)

        assert loan["monthly_payment"] == "100"
        assert loan["status"] == "active"

        response = client.get(f"/api/v1/loans/{loan['loan_id']}")
        assert response.status_code == 200
        assert response.json()["remaining_amount"] == "1200"

    def test_manual_plan(self, client: TestClient):
        loan = create_loan(
            client, amount="1000", calculation_method="manual", monthly_payment="300"
        )

        assert loan["installments_count"] == 4

        response = client.get(f"/api/v1/loans/{loan['loan_id']}/schedule")
        rows = response.json()["rows"]
        assert [Decimal(r["amount"]) for r in rows] == [
            Decimal("300"),
            Decimal("300"),
            Decimal("300"),
            Decimal("100"),
        ]

    def test_payments_complete_loan(self, client: TestClient):
        loan = create_loan(client, amount="200", installments_count=2)

        client.post(f"/api/v1/loans/{loan['loan_id']}/payments")
        response = client.post(f"/api/v1/loans/{loan['loan_id']}/payments")

        data = response.json()
        assert data["status"] == "completed"
        assert Decimal(data["remaining_amount"]) == 0

    def test_request_approve_flow(self, client: TestClient):
        response = client.post(
            "/api/v1/loans/requests",
            json={
                "employee_id": "EMP002",
                "amount": "600",
                "installments_count": 6,
                "start_date": "2026-02",
            },
        )
        assert response.status_code == 201
        loan_id = response.json()["loan_id"]
        assert response.json()["status"] == "pending"

        response = client.post(f"/api/v1/loans/{loan_id}/approve")
        assert response.json()["status"] == "active"

        response = client.post(f"/api/v1/loans/{loan_id}/approve")
        assert response.status_code == 409
        assert response.json()["code"] == "INVALID_TRANSITION"

    def test_validation_error_shape(self, client: TestClient):
        response = client.post(
            "/api/v1/loans",
            json={
                "employee_id": "EMP001",
                "amount": "0",
                "installments_count": 12,
                "start_date": "2026-01",
            },
        )

        assert response.status_code == 422
        body = response.json()
        assert body["code"] == "VALIDATION_ERROR"
        assert body["field"] == "amount"

    def test_missing_loan_is_404(self, client: TestClient):
        response = client.get(f"/api/v1/loans/{uuid4()}")

        assert response.status_code == 404
        assert response.json()["code"] == "NOT_FOUND"

    def test_edit_and_summary(self, client: TestClient):
        loan = create_loan(client)
        client.post(f"/api/v1/loans/{loan['loan_id']}/payments")

        response = client.put(
            f"/api/v1/loans/{loan['loan_id']}",
            json={"amount": "1500", "calculation_method": "auto", "installments_count": 10},
        )
        assert response.status_code == 200
        assert response.json()["remaining_amount"] == "1400"

        summary = client.get("/api/v1/loans/summary").json()
        assert summary["total_loans"] == 1
        assert summary["active_loans"] == 1
        assert summary["outstanding_amount"] == "1400"

    def test_delete(self, client: TestClient):
        loan = create_loan(client)

        assert client.delete(f"/api/v1/loans/{loan['loan_id']}").status_code == 204
        assert client.get("/api/v1/loans").json() == []


class TestAdvanceEndpoints:
    def test_duplicate_month_is_409(self, client: TestClient):
        payload = {"employee_id": "EMP001", "amount": "500", "deduction_month": "2026-03"}
        assert client.post("/api/v1/advances", json=payload).status_code == 201

        response = client.post("/api/v1/advances", json=payload)

        assert response.status_code == 409
        assert response.json()["code"] == "DUPLICATE_PERIOD"

    def test_lifecycle(self, client: TestClient):
        advance = client.post(
            "/api/v1/advances",
            json={"employee_id": "EMP001", "amount": "500", "deduction_month": "2026-03"},
        ).json()

        assert client.post(f"/api/v1/advances/{advance['advance_id']}/deduct").status_code == 409
        assert client.post(f"/api/v1/advances/{advance['advance_id']}/approve").status_code == 200
        response = client.post(f"/api/v1/advances/{advance['advance_id']}/deduct")

        assert response.json()["status"] == "deducted"
        summary = client.get("/api/v1/advances/summary").json()
        assert summary["deducted_amount"] == "500"


class TestMobileBillEndpoints:
    def test_upload_is_idempotent_per_month(self, client: TestClient):
        first = client.post(
            "/api/v1/mobile-bills/upload",
            json={
                "deduction_month": "2026-03",
                "rows": [
                    {"employee_id": "EMP001", "amount": "350"},
                    {"employee_id": "EMP002", "amount": "bad"},
                ],
            },
        ).json()
        second = client.post(
            "/api/v1/mobile-bills/upload",
            json={
                "deduction_month": "2026-03",
                "rows": [{"employee_id": "EMP001", "amount": 410}],
            },
        ).json()

        assert (first["added"], first["skipped"]) == (1, 1)
        assert (second["added"], second["updated"]) == (0, 1)
        bills = client.get("/api/v1/mobile-bills", params={"month": "2026-03"}).json()
        assert len(bills) == 1
        assert bills[0]["amount"] == "410"

    def test_csv_upload(self, client: TestClient):
        response = client.post(
            "/api/v1/mobile-bills/upload-csv",
            json={"deduction_month": "2026-03", "csv_text": "empId,amount\nEMP001,350\n"},
        )

        assert response.status_code == 200
        assert response.json()["added"] == 1

    def test_missing_month_is_422(self, client: TestClient):
        response = client.post(
            "/api/v1/mobile-bills/upload",
            json={"deduction_month": "", "rows": []},
        )

        assert response.status_code == 422
        assert response.json()["field"] == "deduction_month"


class TestUniformAndTrainingEndpoints:
    def test_depreciation_report(self, client: TestClient):
        response = client.post(
            "/api/v1/uniforms",
            json={
                "employee_id": "EMP001",
                "item_type": "Winter jacket",
                "quantity": 1,
                "unit_price": "1000",
                "delivery_date": "2025-01-01",
            },
        )
        assert response.status_code == 201

        rows = client.get("/api/v1/uniforms/depreciation", params={"as_of": "2025-10-01"}).json()

        assert rows[0]["percent_remaining"] == 25
        assert Decimal(rows[0]["current_value"]) == Decimal("250")

        archived = client.post("/api/v1/uniforms/archive", params={"as_of": "2026-01-01"}).json()
        assert archived["archived"] == 1
        assert client.get("/api/v1/uniforms").json() == []

    def test_training_debt(self, client: TestClient):
        payload = {
            "employee_id": "EMP001",
            "course_name": "Forklift safety",
            "cost": "2500",
            "actual_date": "2025-04-10",
        }
        first = client.post("/api/v1/training/courses", json=payload).json()
        second = client.post("/api/v1/training/courses", json=payload).json()

        assert first["debt_created"] is True
        assert first["debt"]["expiry_date"] == "2028-04-10"
        assert second["debt_created"] is False
        debts = client.get("/api/v1/training/debts", params={"as_of": "2026-01-01"}).json()
        assert len(debts) == 1


class TestPayrollEndpoints:
    def test_run_and_rerun(self, client: TestClient):
        create_loan(client, amount="30000", installments_count=12)
        advance = client.post(
            "/api/v1/advances",
            json={"employee_id": "EMP001", "amount": "500", "deduction_month": "2026-03"},
        ).json()
        client.post(f"/api/v1/advances/{advance['advance_id']}/approve")
        run = {
            "employee_id": "EMP001",
            "month": 3,
            "year": 2026,
            "basic_salary": "8500",
            "transport_allowance": "500",
            "incentives": "1000",
            "station_allowance": "600",
            "mobile_allowance": "400",
            "living_allowance": "800",
            "bonus_amount": "500",
            "employee_insurance": "950",
        }

        first = client.post("/api/v1/payroll/run", json=run).json()
        second = client.post("/api/v1/payroll/run", json=run).json()

        assert first["advance_amount"] == "500.00"
        assert first["net_salary"] == "8350.00"
        assert second["advance_amount"] == "500.00"
        assert second["advance_id"] == advance["advance_id"]
        assert second["net_salary"] == "8350.00"
        assert second["payroll_entry_id"] == first["payroll_entry_id"]

        summary = client.get("/api/v1/payroll/summary", params={"month": 3, "year": 2026}).json()
        assert summary["headcount"] == 1

        entry = client.get("/api/v1/payroll/employees/EMP001/2026/3").json()
        assert entry["total_earnings"] == "12300.00"

    def test_missing_entry_is_404(self, client: TestClient):
        response = client.get("/api/v1/payroll/employees/EMP404/2026/3")

        assert response.status_code == 404
