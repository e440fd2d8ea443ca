def test_empty_cart(client):
    res = client.get("/api/v1/cart")
    assert res.status_code == 200
    assert res.json() == {"items": [], "total": 0, "count": 0}
    assert res.headers["Cache-Control"].startswith("no-store")


def test_cart_persists_across_requests_in_session(client, make_cart_item):
    client.post("/api/v1/cart/items", json=make_cart_item(1, price=5000, count=4))
    client.post("/api/v1/cart/items", json=make_cart_item(1, price=5000))
    res = client.post("/api/v1/cart/items", json=make_cart_item(2, price=2999))
    assert res.json()["count"] == 3

    data = client.get("/api/v1/cart").json()
    assert [(it["product"]["id"], it["count"]) for it in data["items"]] == [(1, 2), (2, 1)]
    assert data["total"] == 12999


def test_remove_and_clear(client, make_cart_item):
    client.post("/api/v1/cart/items", json=make_cart_item(1))
    client.post("/api/v1/cart/items", json=make_cart_item(1))

    assert client.delete("/api/v1/cart/items/1").json()["count"] == 1
    assert client.delete("/api/v1/cart/items/999").json()["count"] == 1
    assert client.delete("/api/v1/cart/items/1").json()["items"] == []

    client.post("/api/v1/cart/items", json=make_cart_item(3))
    assert client.delete("/api/v1/cart").json() == {"items": [], "total": 0, "count": 0}


def test_dispatch_hydrate_merges_duplicates(client, make_cart_item):
    res = client.post(
        "/api/v1/cart/dispatch",
        json={"type": "hydrate", "items": [make_cart_item(1, count=2), make_cart_item(1, count=1)]},
    )
    assert res.status_code == 200
    assert [(it["product"]["id"], it["count"]) for it in res.json()["items"]] == [(1, 3)]

    res = client.post("/api/v1/cart/dispatch", json={"type": "removeItem", "item": make_cart_item(1)})
    assert res.json()["count"] == 2


def test_dispatch_rejects_unknown_action(client):
    res = client.post("/api/v1/cart/dispatch", json={"type": "explode"})
    assert res.status_code == 422


def test_add_rejects_invalid_item(client):
    res = client.post("/api/v1/cart/items", json={"product": {"name": "no id"}})
    assert res.status_code == 422


def test_checkout_empty_cart_is_400(client):
    res = client.post("/api/v1/cart/checkout", json={"payment_method": "stripe"})
    assert res.status_code == 400


def test_checkout_builds_line_items_from_session_cart(client, fake_stripe, make_cart_item):
    client.post("/api/v1/cart/items", json=make_cart_item(1, price=5000, description="<h1>Theme</h1><p>Arabic <b>RTL</b></p>"))
    client.post("/api/v1/cart/items", json=make_cart_item(1, price=5000))

    res = client.post(
        "/api/v1/cart/checkout",
        json={"customer_email": "buyer@example.com", "payment_method": "stripe"},
        headers={"Origin": "https://shop.example"},
    )

    assert res.status_code == 200
    assert res.json()["url"].startswith("https://checkout.stripe.test/")
    line_item = fake_stripe.calls[0]["line_items"][0]
    assert line_item["quantity"] == 2
    assert line_item["price_data"]["unit_amount"] == 5000
    assert line_item["price_data"]["product_data"]["description"] == "Theme Arabic RTL"
    # le panier n'est vidé qu'après confirmation du paiement
    assert client.get("/api/v1/cart").json()["count"] == 2


def test_checkout_cart_with_paypal(client, fake_paypal, make_cart_item):
    client.post("/api/v1/cart/items", json=make_cart_item(1, price=1999))
    res = client.post("/api/v1/cart/checkout", json={"payment_method": "paypal"})
    assert res.status_code == 200
    order = res.json()["order"]
    assert order["purchase_units"][0]["amount"]["value"] == "19.99"
    assert "checkoutnow" in res.json()["url"]
