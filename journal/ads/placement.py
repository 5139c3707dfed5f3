"""Selecting ads for public pages."""

import random
from typing import Dict, List, Iterable

from sqlalchemy.orm import Session

from journal.ads.database import Ad
from journal.ads.schemas import AdSlotResponse

PLACEHOLDER_IMAGE_HOST = "https://placehold.co/"


def get_ads_by_placement(db: Session, placements: Iterable[str]) -> Dict[str, List[Ad]]:
    """Active ads per placement, ordered by ``order`` then most recently updated."""
    results = {}
    for placement in placements:
        results[placement] = db.query(Ad).filter(
            Ad.placement == placement,
            Ad.active.is_(True),
        ).order_by(Ad.order, Ad.updated_at.desc()).all()
    return results


def pick_random(items: List, rng: random.Random = None) -> List:
    """Shuffled copy of ``items``; the input list is left untouched."""
    shuffled = list(items)
    (rng or random).shuffle(shuffled)
    return shuffled


def map_ad(ad: Ad) -> AdSlotResponse:
    image_url = ad.image_url or ""
    # Size shorthands like "300x250" are completed into placeholder URLs
    if image_url and not image_url.startswith("http"):
        image_url = f"{PLACEHOLDER_IMAGE_HOST}{image_url}"
    return AdSlotResponse(
        id=ad.id,
        placement=ad.placement,
        size=ad.size,
        type=ad.type,
        image_url=image_url,
        href=ad.href,
        alt=ad.alt,
        html=ad.html,
        label=ad.label,
    )


def pick_placement(ads_by_placement: Dict[str, List[Ad]], placement: str) -> List[AdSlotResponse]:
    return [map_ad(ad) for ad in pick_random(ads_by_placement.get(placement, []))]
