import random

import pytest

from journal.ads.database import Ad
from journal.ads.placement import map_ad, pick_random, get_ads_by_placement

IMAGE_AD = {
    "placement": "article-sidebar",
    "size": "300x250",
    "type": "IMAGE_LINK",
    "imageUrl": "https://cdn.example.com/ad.png",
    "href": "https://sponsor.example.com",
    "alt": "Sponsor",
}


@pytest.mark.parametrize("payload, message", [
    ({"type": "IMAGE_LINK"}, "placement is required"),
    ({"placement": "homepage-lead"}, "type is required"),
    ({"placement": "homepage-lead", "type": "BANNER"}, "type must be one of: IMAGE_LINK, EMBED_SNIPPET"),
    ({"placement": "homepage-lead", "type": "IMAGE_LINK", "href": "https://x.example"}, "imageUrl is required for IMAGE_LINK"),
    ({"placement": "homepage-lead", "type": "IMAGE_LINK", "imageUrl": "300x250"}, "href is required for IMAGE_LINK"),
    ({"placement": "homepage-lead", "type": "EMBED_SNIPPET"}, "html is required for EMBED_SNIPPET"),
])
def test_ad_payload_validation(client, admin_headers, payload, message):
    response = client.post("/api/admin/ads", json=payload, headers=admin_headers)

    assert response.status_code == 400
    assert response.json() == {"success": False, "message": message, "error": "validation"}


def test_ad_crud(client, admin_headers):
    created = client.post("/api/admin/ads", json=IMAGE_AD, headers=admin_headers)
    assert created.status_code == 200
    ad = created.json()
    assert ad["active"] is True
    assert ad["order"] == 0

    listing = client.get("/api/admin/ads", params={"placement": "article-sidebar"}, headers=admin_headers).json()
    assert [a["id"] for a in listing] == [ad["id"]]

    updated = client.put(f"/api/admin/ads/{ad['id']}", json=dict(IMAGE_AD, active=False, order=3), headers=admin_headers)
    assert updated.json()["active"] is False
    assert updated.json()["order"] == 3

    assert client.delete(f"/api/admin/ads/{ad['id']}", headers=admin_headers).json() == {"ok": True}
    assert client.put(f"/api/admin/ads/{ad['id']}", json=IMAGE_AD, headers=admin_headers).status_code == 404


def test_relative_image_urls_become_placeholders():
    ad = Ad(id="a1", placement="p", size="300x250", type="IMAGE_LINK", image_url="300x250", href="h", alt="", html="", label="")
    assert map_ad(ad).image_url == "https://placehold.co/300x250"

    ad.image_url = "https://cdn.example.com/ad.png"
    assert map_ad(ad).image_url == "https://cdn.example.com/ad.png"


def test_pick_random_returns_shuffled_copy():
    items = list(range(20))
    shuffled = pick_random(items, rng=random.Random(7))

    assert sorted(shuffled) == items
    assert items == list(range(20))


def test_placement_lookup_skips_inactive(db):
    db.add_all([
        Ad(placement="homepage-lead", type="EMBED_SNIPPET", html="<div>1</div>", order=2),
        Ad(placement="homepage-lead", type="EMBED_SNIPPET", html="<div>2</div>", order=1),
        Ad(placement="homepage-lead", type="EMBED_SNIPPET", html="<div>3</div>", active=False),
    ])
    db.commit()

    ads = get_ads_by_placement(db, ["homepage-lead", "article-inline"])

    assert [ad.html for ad in ads["homepage-lead"]] == ["<div>2</div>", "<div>1</div>"]
    assert ads["article-inline"] == []
