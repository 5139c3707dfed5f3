"""Subscribe-by-email shared by the newsletter form and popup lead capture."""

import logging
from enum import Enum
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from journal.subscribers.database import Subscriber


class SubscribeOutcome(str, Enum):
    CREATED = "created"
    REACTIVATED = "reactivated"
    ALREADY_ACTIVE = "already_active"


def subscribe(db: Session, email: str, source: str, update_source: bool = False) -> SubscribeOutcome:
    """
    Idempotent subscribe for an already-normalised email.

    An unsubscribed row is flipped back to active instead of inserting a new
    one; an active row is left alone. Commits.

    Args:
        update_source: also overwrite ``source`` when re-activating
    """
    existing: Optional[Subscriber] = db.query(Subscriber).filter(Subscriber.email == email).first()
    if existing is not None:
        if existing.status == "unsubscribed":
            existing.status = "active"
            if update_source:
                existing.source = source
            db.commit()
            logging.info(f"Subscriber {email} re-activated from {source}")
            return SubscribeOutcome.REACTIVATED
        return SubscribeOutcome.ALREADY_ACTIVE

    db.add(Subscriber(email=email, source=source, status="active"))
    try:
        db.commit()
    except IntegrityError:
        # A concurrent request inserted the same email first
        db.rollback()
        return SubscribeOutcome.ALREADY_ACTIVE
    logging.info(f"New subscriber {email} from {source}")
    return SubscribeOutcome.CREATED
