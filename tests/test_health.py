class TestConnectivityCheck:
    def test_check_reads_states(self, client):
        response = client.get("/api/test")

        assert response.status_code == 200
        body = response.json()
        assert body["message"] == "Database connection successful"
        assert body["states"][0] == {"name": "Abia", "code": "AB"}
        assert len(body["states"]) == 5
        assert body["timestamp"]

    def test_root(self, client):
        assert client.get("/").json() == {"message": "Welcome to AgroConnect Nigeria API"}
