import json

from storefront.catalog import service
from storefront.catalog.cache import TTLCache, load_precomputed_page
from storefront.catalog.service import HIT, MISS, PRECOMPUTED, CatalogReader


class _Clock:
    def __init__(self):
        self.now = 1000.0

    def __call__(self):
        return self.now


def _reader(tmp_path, clock=None, precomputed=None):
    return CatalogReader(
        page_size=6,
        cache=TTLCache(300, clock=clock or _Clock()),
        precomputed_file=precomputed,
        products_dir=tmp_path,
    )


def _fake_repository(monkeypatch, products):
    calls = {"page": 0}

    def _fetch(page, page_size):
        calls["page"] += 1
        return products[page * page_size:(page + 1) * page_size]

    monkeypatch.setattr(service.repository, "fetch_products_page", _fetch)
    monkeypatch.setattr(service.repository, "count_products", lambda: len(products))
    return calls


def test_ttl_cache_expires_entries():
    clock = _Clock()
    cache = TTLCache(300, clock=clock)
    cache.set("k", {"v": 1})
    clock.now += 299
    assert cache.get("k") == {"v": 1}
    clock.now += 1
    assert cache.get("k") is None
    assert len(cache) == 0


def test_miss_then_hit_then_expiry(monkeypatch, tmp_path):
    products = [{"id": i, "name": f"P{i}", "slug": f"p{i}"} for i in range(1, 9)]
    calls = _fake_repository(monkeypatch, products)
    clock = _Clock()
    reader = _reader(tmp_path, clock)

    payload, source = reader.get_page(1)
    assert source == MISS
    assert [p["id"] for p in payload["products"]] == [7, 8]
    assert (payload["page"], payload["pageSize"], payload["count"]) == (1, 6, 8)

    _, source = reader.get_page(1)
    assert source == HIT
    assert calls["page"] == 1

    clock.now += 300
    _, source = reader.get_page(1)
    assert source == MISS
    assert calls["page"] == 2


def test_images_entries_only_for_products_with_directory(monkeypatch, tmp_path):
    _fake_repository(monkeypatch, [{"id": 1}, {"id": 2}])
    (tmp_path / "2").mkdir()
    (tmp_path / "2" / "a.jpg").write_bytes(b"x")
    payload, _ = _reader(tmp_path).get_page(0)
    assert [entry["id"] for entry in payload["images"]] == [2]


def test_precomputed_page_wins(monkeypatch, tmp_path):
    calls = _fake_repository(monkeypatch, [{"id": 1}])
    cache_file = tmp_path / "products-cache.json"
    cache_file.write_text(json.dumps({"pages": {"0": {"products": [{"id": "pre"}], "images": []}}}))

    payload, source = _reader(tmp_path, precomputed=cache_file).get_page(0)
    assert source == PRECOMPUTED
    assert payload["products"] == [{"id": "pre"}]
    assert calls["page"] == 0

    _, source = _reader(tmp_path, precomputed=cache_file).get_page(1)
    assert source == MISS


def test_unreadable_precomputed_file_is_ignored(tmp_path):
    broken = tmp_path / "products-cache.json"
    broken.write_text("not json")
    assert load_precomputed_page(broken, 0) is None
    assert load_precomputed_page(tmp_path / "absent.json", 0) is None


def test_get_product_sanitizes_description(monkeypatch, tmp_path):
    product = {"id": 3, "slug": "theme", "description": "<p>Ok<script>x()</script></p>"}
    monkeypatch.setattr(service.repository, "get_product_by_slug", lambda slug: product if slug == "theme" else None)
    found = _reader(tmp_path).get_product("theme")
    assert found["product"]["description"] == "<p>Ok</p>"
    assert found["images"] == []
    assert _reader(tmp_path).get_product("nope") is None
