"""Tests for the wishlist API."""


class TestWishlist:
    def test_requires_authentication(self, client):
        assert client.get("/api/wishlist").status_code == 401

    def test_add_and_list(self, client, seed, buyer_headers):
        item_id = seed.item(name="Headphones", price="99.00")
        response = client.post("/api/wishlist", json={"catalog_item_id": item_id}, headers=buyer_headers)
        assert response.status_code == 201
        assert response.json()["catalog_item"]["name"] == "Headphones"

        data = client.get("/api/wishlist", headers=buyer_headers).json()
        assert len(data["items"]) == 1
        assert data["items"][0]["catalog_item"]["price"] == 99.0
        assert data["pagination"]["total"] == 1

    def test_duplicate_rejected(self, client, seed, buyer_headers):
        item_id = seed.item()
        client.post("/api/wishlist", json={"catalog_item_id": item_id}, headers=buyer_headers)
        response = client.post("/api/wishlist", json={"catalog_item_id": item_id}, headers=buyer_headers)
        assert response.status_code == 409

    def test_inactive_product_not_found(self, client, seed, buyer_headers):
        item_id = seed.item(is_active=False)
        response = client.post("/api/wishlist", json={"catalog_item_id": item_id}, headers=buyer_headers)
        assert response.status_code == 404

    def test_list_hides_deactivated_products(self, client, seed, buyer_headers, admin_headers):
        item_id = seed.item()
        client.post("/api/wishlist", json={"catalog_item_id": item_id}, headers=buyer_headers)
        client.delete(f"/api/catalog/items/{item_id}", headers=admin_headers)

        data = client.get("/api/wishlist", headers=buyer_headers).json()
        assert data["items"] == []

    def test_check(self, client, seed, buyer_headers):
        item_id = seed.item()
        data = client.get(f"/api/wishlist/check/{item_id}", headers=buyer_headers).json()
        assert data == {"in_wishlist": False, "wishlist_item_id": None}

        entry = client.post("/api/wishlist", json={"catalog_item_id": item_id}, headers=buyer_headers).json()
        data = client.get(f"/api/wishlist/check/{item_id}", headers=buyer_headers).json()
        assert data == {"in_wishlist": True, "wishlist_item_id": entry["id"]}

    def test_remove_only_own_entry(self, client, seed, buyer_headers):
        item_id = seed.item()
        entry = client.post("/api/wishlist", json={"catalog_item_id": item_id}, headers=buyer_headers).json()
        stranger = seed.auth(seed.user(email="stranger@example.com"))

        assert client.delete(f"/api/wishlist/{entry['id']}", headers=stranger).status_code == 404
        assert client.delete(f"/api/wishlist/{entry['id']}", headers=buyer_headers).status_code == 204
        assert client.get("/api/wishlist", headers=buyer_headers).json()["items"] == []

    def test_clear(self, client, seed, buyer_headers):
        for name in ("One", "Two"):
            client.post("/api/wishlist", json={"catalog_item_id": seed.item(name=name)}, headers=buyer_headers)

        assert client.delete("/api/wishlist", headers=buyer_headers).status_code == 204
        assert client.get("/api/wishlist", headers=buyer_headers).json()["pagination"]["total"] == 0
