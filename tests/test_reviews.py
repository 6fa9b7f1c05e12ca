"""Tests for product reviews."""

from storefront.infrastructure.db_schema import catalog_items_tbl


def review_payload(item_id, rating=5, **overrides):
    payload = {
        "catalog_item_id": item_id,
        "rating": rating,
        "title": "Great product",
        "comment": "Works exactly as described.",
    }
    payload.update(overrides)
    return payload


class TestCreateReview:
    def test_create_updates_rating(self, client, seed, buyer_headers):
        item_id = seed.item()
        response = client.post("/api/reviews", json=review_payload(item_id, rating=4), headers=buyer_headers)
        assert response.status_code == 201
        data = response.json()
        assert data["rating"] == 4
        assert data["is_verified_purchase"] is False
        assert data["author_name"] == "Test Buyer"

        item = seed.row(catalog_items_tbl, item_id)
        assert float(item.average_rating) == 4.0
        assert item.review_count == 1

    def test_verified_purchase(self, client, seed, buyer, buyer_headers):
        item_id = seed.item()
        seed.delivered_order(buyer, item_id)
        response = client.post("/api/reviews", json=review_payload(item_id), headers=buyer_headers)
        assert response.json()["is_verified_purchase"] is True

    def test_one_review_per_product(self, client, seed, buyer_headers):
        item_id = seed.item()
        client.post("/api/reviews", json=review_payload(item_id), headers=buyer_headers)
        response = client.post("/api/reviews", json=review_payload(item_id), headers=buyer_headers)
        assert response.status_code == 409

    def test_unknown_product(self, client, buyer_headers):
        response = client.post("/api/reviews", json=review_payload("missing"), headers=buyer_headers)
        assert response.status_code == 404

    def test_validation(self, client, seed, buyer_headers):
        item_id = seed.item()
        response = client.post(
            "/api/reviews", json=review_payload(item_id, rating=6, comment="short"), headers=buyer_headers
        )
        assert response.status_code == 400
        fields = {error["field"] for error in response.json()["errors"]}
        assert fields == {"rating", "comment"}


class TestProductReviews:
    def test_list_with_distribution(self, client, seed):
        item_id = seed.item()
        for index, rating in enumerate([5, 5, 3]):
            user = seed.user(email=f"reviewer{index}@example.com")
            client.post("/api/reviews", json=review_payload(item_id, rating=rating), headers=seed.auth(user))

        response = client.get(f"/api/reviews/products/{item_id}?sort_by=rating&sort_order=asc")
        assert response.status_code == 200
        data = response.json()
        assert [review["rating"] for review in data["reviews"]] == [3, 5, 5]
        assert data["rating_distribution"] == {"5": 2, "4": 0, "3": 1, "2": 0, "1": 0}
        assert data["pagination"]["total"] == 3

        item = seed.row(catalog_items_tbl, item_id)
        assert float(item.average_rating) == 4.33


class TestModifyReview:
    def _create(self, client, seed, headers, rating=5):
        item_id = seed.item()
        review = client.post("/api/reviews", json=review_payload(item_id, rating=rating), headers=headers).json()
        return review, item_id

    def test_author_updates(self, client, seed, buyer_headers):
        review, item_id = self._create(client, seed, buyer_headers)
        response = client.put(f"/api/reviews/{review['id']}", json={"rating": 2}, headers=buyer_headers)
        assert response.status_code == 200
        assert response.json()["rating"] == 2
        assert float(seed.row(catalog_items_tbl, item_id).average_rating) == 2.0

    def test_other_user_cannot_update(self, client, seed, buyer_headers):
        review, _ = self._create(client, seed, buyer_headers)
        stranger = seed.auth(seed.user(email="stranger@example.com"))
        response = client.put(f"/api/reviews/{review['id']}", json={"rating": 1}, headers=stranger)
        assert response.status_code == 403

    def test_delete_resets_aggregates(self, client, seed, buyer_headers):
        review, item_id = self._create(client, seed, buyer_headers)
        response = client.delete(f"/api/reviews/{review['id']}", headers=buyer_headers)
        assert response.status_code == 204

        item = seed.row(catalog_items_tbl, item_id)
        assert float(item.average_rating) == 0.0
        assert item.review_count == 0

    def test_admin_can_delete(self, client, seed, buyer_headers, admin_headers):
        review, _ = self._create(client, seed, buyer_headers)
        assert client.delete(f"/api/reviews/{review['id']}", headers=admin_headers).status_code == 204

    def test_other_user_cannot_delete(self, client, seed, buyer_headers):
        review, _ = self._create(client, seed, buyer_headers)
        stranger = seed.auth(seed.user(email="stranger@example.com"))
        assert client.delete(f"/api/reviews/{review['id']}", headers=stranger).status_code == 403

    def test_mark_helpful(self, client, seed, buyer_headers):
        review, _ = self._create(client, seed, buyer_headers)
        client.post(f"/api/reviews/{review['id']}/helpful")
        response = client.post(f"/api/reviews/{review['id']}/helpful")
        assert response.status_code == 200
        assert response.json()["helpful_count"] == 2

    def test_helpful_unknown_review(self, client):
        assert client.post("/api/reviews/missing/helpful").status_code == 404
