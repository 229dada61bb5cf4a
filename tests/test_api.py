"""
Tests for the HTTP surface: envelopes, status codes, identity gates.
"""
from decimal import Decimal
from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient

from bookstore.services.user_service import UserService


class TestEnvelope:
    def test_success_envelope_is_camel_case(self, client, headers):
        response = client.get("/users/me", headers=headers)

        assert response.status_code == 200
        body = response.json()
        assert body["isSuccess"] is True
        assert body["message"] == "OK"
        assert set(body["payload"]) >= {"id", "email", "createdAt", "deletedAt"}

    def test_not_found_envelope(self, client):
        response = client.get("/books/404")

        assert response.status_code == 404
        body = response.json()
        assert body["code"] == "RESOURCE_NOT_FOUND"
        assert body["status"] == 404
        assert body["path"] == "/books/404"
        assert body["details"] == {"bookId": 404}
        assert "timestamp" in body

    def test_malformed_body_is_validation_failed(self, client, headers):
        response = client.post("/cart/items", json={"bookId": "abc", "quantity": 1}, headers=headers)

        assert response.status_code == 400
        body = response.json()
        assert body["code"] == "VALIDATION_FAILED"
        assert body["details"][0]["field"] == "bookId"

    def test_unexpected_error_is_hidden(self, app, headers):
        client = TestClient(app, raise_server_exceptions=False)
        with patch.object(UserService, "get_me", side_effect=ZeroDivisionError("division by zero")):
            response = client.get("/users/me", headers=headers)

        assert response.status_code == 500
        assert response.json()["code"] == "INTERNAL_SERVER_ERROR"
        assert "division" not in response.json()["message"]


class TestIdentity:
    def test_missing_identity(self, client):
        response = client.get("/cart")
        assert response.status_code == 401
        assert response.json()["code"] == "UNAUTHORIZED"

    @pytest.mark.parametrize(
        "headers",
        [{"X-User-Id": "abc"}, {"X-User-Id": "0"}, {"X-User-Id": "1", "X-User-Role": "ROOT"}],
    )
    def test_bad_identity(self, client, headers):
        assert client.get("/cart", headers=headers).status_code == 401

    def test_admin_route_forbidden_for_customer(self, client, headers):
        response = client.get("/stats/daily", headers=headers)
        assert response.status_code == 403
        assert response.json()["code"] == "FORBIDDEN"

    def test_admin_route(self, client, admin_headers):
        response = client.get("/stats/top-books", params={"metric": "avgRating"}, headers=admin_headers)
        assert response.status_code == 200
        assert response.json()["payload"]["metric"] == "avgRating"

    def test_unknown_metric(self, client, admin_headers):
        response = client.get("/stats/top-books", params={"metric": "revenue"}, headers=admin_headers)
        assert response.status_code == 400
        assert response.json()["code"] == "VALIDATION_FAILED"

    def test_public_catalog(self, client, make_book):
        make_book(title="Open")
        response = client.get("/books")
        assert response.status_code == 200
        assert response.json()["payload"]["totalElements"] == 1


class TestCheckoutFlow:
    def test_cart_to_order(self, client, headers, make_book):
        book = make_book(title="Refactoring", price="10000", stock=10)

        added = client.post("/cart/items", json={"bookId": book.id, "quantity": 3}, headers=headers)
        assert added.status_code == 201
        assert Decimal(added.json()["payload"]["unitPrice"]) == Decimal("10000")

        cart = client.get("/cart", params={"size": 500}, headers=headers).json()["payload"]
        assert cart["size"] == 100
        assert cart["page"] == 0
        assert cart["cart"]["status"] == "ACTIVE"
        assert Decimal(cart["summary"]["cartTotal"]) == Decimal("30000")
        assert cart["content"][0]["book"]["title"] == "Refactoring"

        placed = client.post("/orders", headers=headers)
        assert placed.status_code == 201
        order_id = placed.json()["payload"]["orderId"]

        detail = client.get(f"/orders/{order_id}", headers=headers).json()["payload"]
        assert Decimal(detail["totalAmount"]) == Decimal("30000")
        assert detail["status"] == "PENDING"
        assert detail["paymentStatus"] == "UNPAID"
        assert detail["items"][0]["bookTitle"] == "Refactoring"

        again = client.post("/orders", headers=headers)
        assert again.status_code == 404

        book_after = client.get(f"/books/{book.id}").json()["payload"]
        assert book_after["stock"] == 7

    def test_quantity_over_stock(self, client, headers, make_book):
        book = make_book(stock=1)
        response = client.post("/cart/items", json={"bookId": book.id, "quantity": 2}, headers=headers)

        assert response.status_code == 422
        assert response.json()["code"] == "UNPROCESSABLE_ENTITY"

    def test_remove_twice(self, client, headers, make_book):
        book = make_book()
        client.post("/cart/items", json={"bookId": book.id, "quantity": 1}, headers=headers)

        first = client.delete(f"/cart/items/{book.id}", headers=headers)
        second = client.delete(f"/cart/items/{book.id}", headers=headers)

        assert first.status_code == second.status_code == 200
        assert second.json()["payload"]["bookId"] == book.id


class TestReviewsApi:
    def test_review_lifecycle(self, client, headers, auth, make_user, make_book):
        book = make_book()

        created = client.post(
            f"/reviews/books/{book.id}", json={"rating": 4, "content": "Good"}, headers=headers
        )
        assert created.status_code == 201
        review_id = created.json()["payload"]["reviewId"]

        duplicate = client.post(
            f"/reviews/books/{book.id}", json={"rating": 2, "content": "Again"}, headers=headers
        )
        assert duplicate.status_code == 409

        fan = auth(make_user())
        assert client.post(f"/reviews/{review_id}/like", headers=fan).status_code == 200
        assert client.post(f"/reviews/{review_id}/like", headers=fan).status_code == 200

        listing = client.get(f"/reviews/books/{book.id}").json()["payload"]
        assert listing["book"]["id"] == book.id
        assert listing["content"][0]["likeCount"] == 1
        assert listing["content"][0]["user"]["name"]

        detail = client.get(f"/books/{book.id}").json()["payload"]
        assert detail["reviewCount"] == 1
        assert Decimal(detail["avgRating"]) == Decimal("4.00")

        other = client.delete(f"/reviews/{review_id}", headers=fan)
        assert other.status_code == 403

        deleted = client.delete(f"/reviews/{review_id}", headers=headers)
        assert deleted.status_code == 200
        assert deleted.json()["payload"]["deletedAt"] is not None

    def test_rating_out_of_range(self, client, headers, make_book):
        book = make_book()
        response = client.post(
            f"/reviews/books/{book.id}", json={"rating": 9, "content": "Off scale"}, headers=headers
        )
        assert response.status_code == 400

    def test_comments(self, client, headers, make_book):
        book = make_book()
        review_id = client.post(
            f"/reviews/books/{book.id}", json={"rating": 5, "content": "Top"}, headers=headers
        ).json()["payload"]["reviewId"]

        created = client.post(f"/comments/reviews/{review_id}", json={"content": "+1"}, headers=headers)
        assert created.status_code == 201

        comments = client.get(f"/comments/reviews/{review_id}").json()["payload"]
        assert [c["content"] for c in comments] == ["+1"]
        assert comments[0]["reviewId"] == review_id


class TestAdminApi:
    def test_book_crud(self, client, admin_headers, headers):
        payload = {"title": "New", "price": "5000", "stock": 3, "authors": ["A"], "categories": ["c"]}

        assert client.post("/books", json=payload, headers=headers).status_code == 403

        created = client.post("/books", json=payload, headers=admin_headers)
        assert created.status_code == 201
        book_id = created.json()["payload"]["bookId"]

        updated = client.patch(f"/books/{book_id}", json={"stock": 9}, headers=admin_headers)
        assert updated.status_code == 200

        detail = client.get(f"/books/{book_id}").json()["payload"]
        assert detail["stock"] == 9
        assert detail["authors"] == [{"id": detail["authors"][0]["id"], "name": "A", "bio": None, "order": 1}]

        assert client.delete(f"/books/{book_id}", headers=admin_headers).status_code == 200
        assert client.get(f"/books/{book_id}").status_code == 404

    def test_users_admin(self, client, admin_headers, user):
        listing = client.get("/users", params={"keyword": user.email}, headers=admin_headers)
        assert listing.json()["payload"]["totalElements"] == 1

        response = client.patch(f"/users/{user.id}/deactivate", headers=admin_headers)
        assert response.status_code == 200
        assert response.json()["payload"]["deletedAt"] is not None

    def test_wishlist(self, client, headers, make_book):
        book = make_book(title="Wanted")

        assert client.post(f"/wishlist/{book.id}", headers=headers).status_code == 200
        assert client.post(f"/wishlist/{book.id}", headers=headers).status_code == 200

        page = client.get("/wishlist", headers=headers).json()["payload"]
        assert page["totalElements"] == 1
        assert page["content"][0]["book"]["title"] == "Wanted"
