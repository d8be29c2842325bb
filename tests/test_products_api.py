from datetime import date, timedelta

from conftest import FARMER_ID, OTHER_FARMER_ID

PRODUCTS_URL = "/api/farmer/products"
DRAFTS_URL = "/api/farmer/drafts"


class TestCreateProduct:
    def test_create_product(self, client, auth_headers, product_payload):
        response = client.post(PRODUCTS_URL, json=product_payload(), headers=auth_headers())

        assert response.status_code == 201
        body = response.json()
        assert body["message"] == "Product created successfully"
        product = body["product"]
        assert product["farmerId"] == FARMER_ID
        assert product["status"] == "active"
        assert product["listingStatus"] == "active"
        assert product["pricePerUnit"] == 50000

    def test_snake_case_input_is_accepted(self, client, auth_headers, product_payload):
        payload = product_payload()
        payload["crop_type"] = payload.pop("cropType")
        payload["price_per_unit"] = payload.pop("pricePerUnit")

        response = client.post(PRODUCTS_URL, json=payload, headers=auth_headers())

        assert response.status_code == 201

    def test_incomplete_product_is_rejected(self, client, auth_headers, product_payload):
        payload = product_payload()
        del payload["storageMethod"]

        response = client.post(PRODUCTS_URL, json=payload, headers=auth_headers())

        assert response.status_code == 400
        assert response.json()["errors"]

    def test_availability_window_must_be_ordered(self, client, auth_headers, product_payload):
        today = date.today()
        payload = product_payload(
            availableFrom=(today + timedelta(days=5)).isoformat(),
            availableUntil=today.isoformat(),
        )

        response = client.post(PRODUCTS_URL, json=payload, headers=auth_headers())

        assert response.status_code == 400

    def test_minimum_order_cannot_exceed_quantity(self, client, auth_headers, product_payload):
        response = client.post(
            PRODUCTS_URL,
            json=product_payload(quantityAvailable=10, minimumOrderQuantity=20),
            headers=auth_headers(),
        )

        assert response.status_code == 400

    def test_images_are_required(self, client, auth_headers, product_payload):
        response = client.post(PRODUCTS_URL, json=product_payload(images=[]), headers=auth_headers())

        assert response.status_code == 400

    def test_promoting_a_draft_removes_it(self, client, auth_headers, product_payload):
        # Given: a saved draft
        draft = client.post(DRAFTS_URL, json={"cropType": "Rice"}, headers=auth_headers()).json()["draft"]

        # When: the listing is published from it
        response = client.post(PRODUCTS_URL, json=product_payload(draftId=draft["id"]), headers=auth_headers())

        # Then
        assert response.status_code == 201
        assert client.get(DRAFTS_URL, params={"id": draft["id"]}, headers=auth_headers()).status_code == 404

    def test_cannot_promote_someone_elses_draft(self, client, auth_headers, product_payload):
        draft = client.post(DRAFTS_URL, json={"cropType": "Rice"}, headers=auth_headers()).json()["draft"]

        response = client.post(
            PRODUCTS_URL,
            json=product_payload(draftId=draft["id"]),
            headers=auth_headers(OTHER_FARMER_ID),
        )

        assert response.status_code == 404
        listing = client.get(PRODUCTS_URL, headers=auth_headers(OTHER_FARMER_ID)).json()
        assert listing["pagination"]["total"] == 0


class TestListProducts:
    def test_list_is_scoped_to_farmer(self, client, auth_headers, create_product):
        create_product()
        create_product(title="Second Premium Rice Lot")
        create_product(OTHER_FARMER_ID)

        response = client.get(PRODUCTS_URL, headers=auth_headers())

        assert response.status_code == 200
        body = response.json()
        assert body["pagination"] == {"page": 1, "limit": 20, "total": 2, "totalPages": 1}
        assert {product["farmerId"] for product in body["products"]} == {FARMER_ID}

    def test_filters_and_sorting(self, client, auth_headers, create_product):
        create_product(pricePerUnit=1000, title="Cheap Rice for Sale")
        create_product(pricePerUnit=90000, title="Expensive Rice Lot")
        create_product(cropType="Maize", variety="TZEE-W", title="Yellow Maize Harvest", pricePerUnit=20000)

        response = client.get(
            PRODUCTS_URL,
            params={"crop_type": "Rice", "sort_by": "price_per_unit", "sort_order": "asc"},
            headers=auth_headers(),
        )

        prices = [product["pricePerUnit"] for product in response.json()["products"]]
        assert prices == [1000, 90000]

        response = client.get(PRODUCTS_URL, params={"search": "maize"}, headers=auth_headers())
        assert [product["cropType"] for product in response.json()["products"]] == ["Maize"]

    def test_pagination(self, client, auth_headers, create_product):
        for index in range(3):
            create_product(title=f"Rice lot number {index}")

        response = client.get(PRODUCTS_URL, params={"page": 2, "limit": 2}, headers=auth_headers())

        body = response.json()
        assert len(body["products"]) == 1
        assert body["pagination"]["totalPages"] == 2

    def test_invalid_sort_field(self, client, auth_headers):
        response = client.get(PRODUCTS_URL, params={"sort_by": "farmer_id"}, headers=auth_headers())

        assert response.status_code == 400

    def test_status_filter(self, client, auth_headers, create_product):
        active = create_product()
        inactive = create_product(title="Soon to be hidden rice")
        client.patch(f"{PRODUCTS_URL}/{inactive['id']}/status", json={"status": "inactive"}, headers=auth_headers())

        response = client.get(PRODUCTS_URL, params={"status": "inactive"}, headers=auth_headers())
        assert [product["id"] for product in response.json()["products"]] == [inactive["id"]]

        response = client.get(PRODUCTS_URL, params={"status": "active"}, headers=auth_headers())
        assert [product["id"] for product in response.json()["products"]] == [active["id"]]


class TestSingleProduct:
    def test_owner_reads_product(self, client, auth_headers, create_product):
        product = create_product()

        response = client.get(f"{PRODUCTS_URL}/{product['id']}", headers=auth_headers())

        assert response.status_code == 200
        assert response.json()["product"]["title"] == product["title"]

    def test_other_farmer_cannot_read(self, client, auth_headers, create_product):
        product = create_product()

        response = client.get(f"{PRODUCTS_URL}/{product['id']}", headers=auth_headers(OTHER_FARMER_ID))

        assert response.status_code == 404
        assert response.json()["detail"] == "Product not found or access denied"

    def test_partial_update(self, client, auth_headers, create_product):
        product = create_product()

        response = client.put(
            f"{PRODUCTS_URL}/{product['id']}",
            json={"pricePerUnit": 55000, "description": "Freshly milled"},
            headers=auth_headers(),
        )

        assert response.status_code == 200
        updated = response.json()["product"]
        assert updated["pricePerUnit"] == 55000
        assert updated["description"] == "Freshly milled"
        assert updated["title"] == product["title"]

    def test_update_is_checked_against_stored_values(self, client, auth_headers, create_product):
        product = create_product(quantityAvailable=50)

        response = client.put(
            f"{PRODUCTS_URL}/{product['id']}",
            json={"minimumOrderQuantity": 80},
            headers=auth_headers(),
        )

        assert response.status_code == 400

    def test_update_of_foreign_product(self, client, auth_headers, create_product):
        product = create_product()

        response = client.put(
            f"{PRODUCTS_URL}/{product['id']}",
            json={"pricePerUnit": 100},
            headers=auth_headers(OTHER_FARMER_ID),
        )

        assert response.status_code == 404

    def test_status_toggle(self, client, auth_headers, create_product):
        product = create_product()

        response = client.patch(
            f"{PRODUCTS_URL}/{product['id']}/status",
            json={"status": "inactive"},
            headers=auth_headers(),
        )

        assert response.status_code == 200
        assert response.json()["product"]["status"] == "inactive"

        bad = client.patch(f"{PRODUCTS_URL}/{product['id']}/status", json={"status": "sold"}, headers=auth_headers())
        assert bad.status_code == 400

    def test_delete_removes_product_and_images(self, client, auth_headers, create_product, storage):
        # Given: a listing whose image was uploaded by the same farmer
        upload = client.post(
            f"{PRODUCTS_URL}/images",
            files=[("images", ("rice.jpg", b"\xff\xd8data", "image/jpeg"))],
            headers=auth_headers(),
        ).json()["images"][0]
        product = create_product(images=[upload["url"]])

        # When
        response = client.delete(f"{PRODUCTS_URL}/{product['id']}", headers=auth_headers())

        # Then
        assert response.status_code == 200
        assert not storage.exists(upload["fileName"])
        assert client.get(f"{PRODUCTS_URL}/{product['id']}", headers=auth_headers()).status_code == 404

    def test_delete_of_foreign_product(self, client, auth_headers, create_product):
        product = create_product()

        response = client.delete(f"{PRODUCTS_URL}/{product['id']}", headers=auth_headers(OTHER_FARMER_ID))

        assert response.status_code == 404
        assert client.get(f"{PRODUCTS_URL}/{product['id']}", headers=auth_headers()).status_code == 200
