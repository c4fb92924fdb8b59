class TestDashboards:

    def test_admin_dashboard(self, client, admin_token):
        response = client.get(f"/adminDashboard/{admin_token}")
        assert response.status_code == 200
        assert "text/html" in response.headers["content-type"]
        assert "Admin Dashboard" in response.text

    def test_doctor_dashboard(self, client, doctor, doctor_token):
        response = client.get(f"/doctorDashboard/{doctor_token}")
        assert response.status_code == 200
        assert "Doctor Dashboard" in response.text
        assert doctor.email in response.text

    def test_invalid_token_redirects(self, client, test_db):
        response = client.get("/adminDashboard/not-a-token", follow_redirects=False)
        assert response.status_code == 302
        assert response.headers["location"] == "/"

    def test_wrong_role_redirects(self, client, doctor_token, patient_token):
        response = client.get(f"/adminDashboard/{doctor_token}", follow_redirects=False)
        assert response.status_code == 302

        response = client.get(f"/doctorDashboard/{patient_token}", follow_redirects=False)
        assert response.status_code == 302

class TestApplication:

    def test_health(self, client, test_db):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    def test_unknown_route_error_shape(self, client, test_db):
        response = client.get("/no/such/route/here/at/all")
        assert response.status_code == 404
        assert "error" in response.json()
