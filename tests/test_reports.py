from earthwise.models.notification import Notification
from earthwise.models.transaction import Transaction, TransactionType


REPORT = {
    "location": "12 Green Street, Springfield",
    "waste_type": "Plastic",
    "amount": "5 kg",
    "image_url": "https://example.com/waste.jpg",
    "verification_result": {"wasteType": "Plastic", "confidence": 0.92},
}


class TestReportCreation:
    """Tests for submitting waste reports"""

    def test_create_report_success(self, client, auth_headers):
        """User can submit a report; it starts pending"""
        response = client.post("/api/reports/", headers=auth_headers, json=REPORT)

        assert response.status_code == 201
        report = response.json()
        assert report["location"] == REPORT["location"]
        assert report["waste_type"] == "Plastic"
        assert report["status"] == "pending"
        assert report["collector_id"] is None
        assert report["verification_result"]["confidence"] == 0.92

    def test_create_report_awards_points(self, client, db_session, auth_headers):
        """Reporting credits the ledger and notifies the reporter"""
        client.post("/api/reports/", headers=auth_headers, json=REPORT)

        transactions = db_session.query(Transaction).all()
        assert len(transactions) == 1
        assert transactions[0].type == TransactionType.EARNED_REPORT
        assert transactions[0].amount == 10

        notifications = db_session.query(Notification).all()
        assert len(notifications) == 1
        assert notifications[0].is_read is False
        assert "10 points" in notifications[0].message

        balance = client.get("/api/users/me/balance", headers=auth_headers)
        assert balance.json()["balance"] == 10.0

    def test_create_report_minimal(self, client, auth_headers):
        """Image and verification result are optional"""
        data = {"location": "Park", "waste_type": "Glass", "amount": "2 bottles"}

        response = client.post("/api/reports/", headers=auth_headers, json=data)

        assert response.status_code == 201
        assert response.json()["image_url"] is None

    def test_create_report_missing_location(self, client, auth_headers):
        data = {"waste_type": "Glass", "amount": "1"}

        response = client.post("/api/reports/", headers=auth_headers, json=data)

        assert response.status_code == 422

    def test_create_report_requires_auth(self, client):
        response = client.post("/api/reports/", json=REPORT)
        assert response.status_code == 401


class TestReportRetrieval:
    def test_recent_reports_across_users(self, client, user_a_headers, user_b_headers):
        """Recent reports include everyone's, newest first"""
        client.post("/api/reports/", headers=user_a_headers, json={**REPORT, "location": "first"})
        client.post("/api/reports/", headers=user_b_headers, json={**REPORT, "location": "second"})

        response = client.get("/api/reports/", headers=user_a_headers)

        assert response.status_code == 200
        data = response.json()
        assert data["total"] == 2
        assert data["reports"][0]["location"] == "second"

    def test_recent_reports_limit(self, client, auth_headers):
        for i in range(3):
            client.post("/api/reports/", headers=auth_headers, json={**REPORT, "location": f"spot {i}"})

        response = client.get("/api/reports/?limit=2", headers=auth_headers)

        assert response.json()["total"] == 2

    def test_recent_reports_limit_bounds(self, client, auth_headers):
        response = client.get("/api/reports/?limit=101", headers=auth_headers)
        assert response.status_code == 422

    def test_my_reports_only_mine(self, client, user_a_headers, user_b_headers):
        client.post("/api/reports/", headers=user_a_headers, json=REPORT)
        client.post("/api/reports/", headers=user_b_headers, json=REPORT)
        client.post("/api/reports/", headers=user_b_headers, json=REPORT)

        response = client.get("/api/reports/mine", headers=user_a_headers)

        assert response.json()["total"] == 1
