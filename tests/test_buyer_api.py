from datetime import date, timedelta

from agroconnect.db.session import SessionLocal
from agroconnect.models.product import Product
from conftest import BUYER_ID, FARMER_ID, OTHER_FARMER_ID

SEARCH_URL = "/api/buyer/products/search"
FAVORITES_URL = "/api/buyer/favorites"


class TestSearch:
    def test_only_listed_products_are_returned(self, client, auth_headers, create_product):
        # Given: one good listing, one deactivated, one out of stock
        visible = create_product()
        hidden = create_product(title="Rice we stopped selling")
        client.patch(
            f"/api/farmer/products/{hidden['id']}/status",
            json={"status": "inactive"},
            headers=auth_headers(FARMER_ID),
        )
        sold_out = create_product(title="Rice that has sold out")
        db = SessionLocal()
        db.query(Product).filter(Product.id == sold_out["id"]).update({"quantity_available": 0})
        db.commit()
        db.close()

        # When
        response = client.get(SEARCH_URL, headers=auth_headers(BUYER_ID, "buyer"))

        # Then
        assert response.status_code == 200
        ids = [product["id"] for product in response.json()["products"]]
        assert visible["id"] in ids
        assert hidden["id"] not in ids
        assert sold_out["id"] not in ids

    def test_text_and_crop_filters(self, client, auth_headers, create_product):
        create_product(description="Stone-free parboiled rice")
        create_product(cropType="Maize", variety="TZEE-W", title="Yellow Maize Harvest")
        create_product(cropType="Yam", variety="White Yam", title="White Yam Tubers Lot")

        by_text = client.get(SEARCH_URL, params={"q": "parboiled"}, headers=auth_headers(BUYER_ID, "buyer"))
        by_crop = client.get(SEARCH_URL, params={"crop_types": "Maize,Yam"}, headers=auth_headers(BUYER_ID, "buyer"))

        assert [product["cropType"] for product in by_text.json()["products"]] == ["Rice"]
        assert sorted(product["cropType"] for product in by_crop.json()["products"]) == ["Maize", "Yam"]

    def test_price_sort_and_range(self, client, auth_headers, create_product):
        create_product(pricePerUnit=30000, title="Mid priced rice lot")
        create_product(pricePerUnit=10000, title="Low priced rice lot")
        create_product(pricePerUnit=90000, title="High priced rice lot")

        response = client.get(
            SEARCH_URL,
            params={"sort_by": "price_asc", "max_price": 50000},
            headers=auth_headers(BUYER_ID, "buyer"),
        )

        assert [product["pricePerUnit"] for product in response.json()["products"]] == [10000, 30000]

    def test_inverted_price_range_is_rejected(self, client, auth_headers):
        response = client.get(
            SEARCH_URL,
            params={"min_price": 500, "max_price": 100},
            headers=auth_headers(BUYER_ID, "buyer"),
        )

        assert response.status_code == 400

    def test_availability_filter(self, client, auth_headers, create_product):
        now = create_product()
        later = create_product(
            title="Rice ready next month",
            availableFrom=(date.today() + timedelta(days=20)).isoformat(),
            availableUntil=(date.today() + timedelta(days=60)).isoformat(),
        )

        this_week = client.get(SEARCH_URL, params={"availability": "week"}, headers=auth_headers(BUYER_ID, "buyer"))
        this_month = client.get(SEARCH_URL, params={"availability": "month"}, headers=auth_headers(BUYER_ID, "buyer"))

        assert [product["id"] for product in this_week.json()["products"]] == [now["id"]]
        assert {product["id"] for product in this_month.json()["products"]} == {now["id"], later["id"]}

    def test_requires_authentication(self, client):
        assert client.get(SEARCH_URL).status_code == 401


class TestListingDetail:
    def test_detail_with_related_from_other_farmers(self, client, auth_headers, create_product):
        product = create_product()
        create_product(title="More rice from same farm")
        related = create_product(OTHER_FARMER_ID, title="Rice from another farm")
        create_product(OTHER_FARMER_ID, cropType="Maize", variety="TZEE-W", title="Yellow Maize Harvest")

        response = client.get(f"/api/buyer/products/{product['id']}", headers=auth_headers(BUYER_ID, "buyer"))

        assert response.status_code == 200
        body = response.json()
        assert body["product"]["id"] == product["id"]
        assert [item["id"] for item in body["relatedProducts"]] == [related["id"]]

    def test_inactive_listing_is_not_found(self, client, auth_headers, create_product):
        product = create_product()
        client.patch(
            f"/api/farmer/products/{product['id']}/status",
            json={"status": "inactive"},
            headers=auth_headers(FARMER_ID),
        )

        response = client.get(f"/api/buyer/products/{product['id']}", headers=auth_headers(BUYER_ID, "buyer"))

        assert response.status_code == 404


class TestFavorites:
    def test_add_list_and_remove(self, client, auth_headers, create_product):
        product = create_product()
        headers = auth_headers(BUYER_ID, "buyer")

        added = client.post(FAVORITES_URL, json={"productId": product["id"]}, headers=headers)
        assert added.status_code == 201
        assert added.json()["favorite"]["productId"] == product["id"]

        listing = client.get(FAVORITES_URL, headers=headers).json()
        assert [favorite["product"]["id"] for favorite in listing["favorites"]] == [product["id"]]
        assert listing["pagination"]["total"] == 1

        removed = client.request("DELETE", FAVORITES_URL, json={"productId": product["id"]}, headers=headers)
        assert removed.status_code == 200
        assert client.get(FAVORITES_URL, headers=headers).json()["favorites"] == []

    def test_duplicate_favorite_conflicts(self, client, auth_headers, create_product):
        product = create_product()
        headers = auth_headers(BUYER_ID, "buyer")
        client.post(FAVORITES_URL, json={"productId": product["id"]}, headers=headers)

        response = client.post(FAVORITES_URL, json={"productId": product["id"]}, headers=headers)

        assert response.status_code == 409
        assert response.json()["detail"] == "Product already in favorites"

    def test_unknown_product_is_not_found(self, client, auth_headers):
        response = client.post(FAVORITES_URL, json={"productId": 999}, headers=auth_headers(BUYER_ID, "buyer"))

        assert response.status_code == 404
        assert response.json()["detail"] == "Product not found or inactive"

    def test_removing_missing_favorite_is_not_found(self, client, auth_headers, create_product):
        product = create_product()

        response = client.request(
            "DELETE",
            FAVORITES_URL,
            json={"productId": product["id"]},
            headers=auth_headers(BUYER_ID, "buyer"),
        )

        assert response.status_code == 404
