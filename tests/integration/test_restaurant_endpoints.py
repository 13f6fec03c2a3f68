class TestRestaurantCrud:

    def test_create_and_get(self, client, auth_headers):
        response = client.post(
            "/restaurants", json={"name": "Noodle Bar", "location": "Dock 4"}, headers=auth_headers
        )
        assert response.status_code == 201
        created = response.json()
        assert created["name"] == "Noodle Bar"
        assert created["location"] == "Dock 4"

        fetched = client.get(f"/restaurants/{created['id']}")
        assert fetched.status_code == 200
        assert fetched.json() == created

    def test_name_is_required(self, client, auth_headers):
        response = client.post("/restaurants", json={"location": "Nowhere"}, headers=auth_headers)

        assert response.status_code == 400
        assert response.json() == {"detail": "name is required."}

    def test_blank_name_rejected(self, client, auth_headers):
        response = client.post("/restaurants", json={"name": ""}, headers=auth_headers)
        assert response.status_code == 400

    def test_list_newest_first(self, client, auth_headers):
        for name in ("First", "Second", "Third"):
            client.post("/restaurants", json={"name": name}, headers=auth_headers)

        names = [r["name"] for r in client.get("/restaurants").json()]

        assert names == ["Third", "Second", "First"]

    def test_get_missing(self, client):
        response = client.get("/restaurants/12345")

        assert response.status_code == 404
        assert response.json() == {"detail": "Restaurant not found."}

    def test_partial_update_keeps_other_fields(self, client, auth_headers, restaurant):
        response = client.put(
            f"/restaurants/{restaurant['id']}", json={"name": "Renamed"}, headers=auth_headers
        )

        assert response.status_code == 200
        assert response.json()["name"] == "Renamed"
        assert response.json()["location"] == restaurant["location"]

    def test_update_with_blank_name(self, client, auth_headers, restaurant):
        response = client.put(
            f"/restaurants/{restaurant['id']}", json={"name": "  "}, headers=auth_headers
        )
        assert response.status_code == 400
        assert client.get(f"/restaurants/{restaurant['id']}").json()["name"] == restaurant["name"]

    def test_update_missing(self, client, auth_headers):
        response = client.put("/restaurants/999", json={"name": "X"}, headers=auth_headers)
        assert response.status_code == 404

    def test_delete(self, client, auth_headers, restaurant):
        response = client.delete(f"/restaurants/{restaurant['id']}", headers=auth_headers)

        assert response.status_code == 200
        assert response.json() == {"message": "Restaurant deleted successfully."}
        assert client.get(f"/restaurants/{restaurant['id']}").status_code == 404

    def test_delete_missing(self, client, auth_headers):
        response = client.delete("/restaurants/999", headers=auth_headers)
        assert response.status_code == 404

    def test_ids_are_not_reused(self, client, auth_headers, restaurant):
        client.delete(f"/restaurants/{restaurant['id']}", headers=auth_headers)

        response = client.post("/restaurants", json={"name": "Next"}, headers=auth_headers)

        assert response.json()["id"] > restaurant["id"]


class TestOutOfRangeIds:
    """Ids too large for an integer column name no record."""

    HUGE_ID = 2**70

    def test_get(self, client):
        response = client.get(f"/restaurants/{self.HUGE_ID}")

        assert response.status_code == 404
        assert response.json() == {"detail": "Restaurant not found."}

    def test_update_and_delete(self, client, auth_headers):
        assert client.put(
            f"/restaurants/{self.HUGE_ID}", json={"name": "X"}, headers=auth_headers
        ).status_code == 404
        assert client.delete(f"/restaurants/{self.HUGE_ID}", headers=auth_headers).status_code == 404

    def test_other_kinds(self, client):
        assert client.get(f"/food-items/{self.HUGE_ID}").status_code == 404
        assert client.get(f"/reviews/{self.HUGE_ID}").status_code == 404
