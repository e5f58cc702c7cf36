from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from datetime import datetime, timezone

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.errors import Forbidden, InvalidState, NotFound
from app.models.hotel import Hotel, HotelStatus
from app.models.user import UserRole
from app.services.audit import audit
from app.services.auth import Actor

log = logging.getLogger(__name__)

DEFAULT_REJECT_REASON = "Did not pass review"


class Transition(str, enum.Enum):
    submit = "submit"
    approve = "approve"
    reject = "reject"
    offline = "offline"
    online = "online"


@dataclass(frozen=True)
class TransitionRule:
    sources: frozenset[HotelStatus]
    target: HotelStatus
    role: UserRole
    owner_only: bool = False
    clears_reason: bool = False


TRANSITIONS: dict[Transition, TransitionRule] = {
    Transition.submit: TransitionRule(
        sources=frozenset({HotelStatus.draft, HotelStatus.rejected}),
        target=HotelStatus.pending,
        role=UserRole.merchant,
        owner_only=True,
        clears_reason=True,
    ),
    Transition.approve: TransitionRule(
        sources=frozenset({HotelStatus.pending}),
        target=HotelStatus.approved,
        role=UserRole.admin,
        clears_reason=True,
    ),
    Transition.reject: TransitionRule(
        sources=frozenset({HotelStatus.pending}),
        target=HotelStatus.rejected,
        role=UserRole.admin,
    ),
    Transition.offline: TransitionRule(
        sources=frozenset({HotelStatus.approved}),
        target=HotelStatus.offline,
        role=UserRole.admin,
    ),
    Transition.online: TransitionRule(
        sources=frozenset({HotelStatus.offline}),
        target=HotelStatus.approved,
        role=UserRole.admin,
    ),
}


def next_status(current: HotelStatus, transition: Transition) -> HotelStatus:
    """Target status for `transition` from `current`, or InvalidState."""
    rule = TRANSITIONS[transition]
    if current not in rule.sources:
        raise InvalidState(status=current.value, transition=transition.value)
    return rule.target


def authorize(hotel: Hotel, actor: Actor, transition: Transition) -> None:
    rule = TRANSITIONS[transition]
    if actor.role != rule.role:
        raise Forbidden(f"Role '{rule.role.value}' required to {transition.value} a hotel")
    if rule.owner_only and hotel.merchant_id != actor.user_id:
        raise Forbidden(f"Only the owning merchant can {transition.value} this hotel")


def reject_reason_after(transition: Transition, current_reason: str, reason: str | None) -> str:
    if transition == Transition.reject:
        return reason if reason and reason.strip() else DEFAULT_REJECT_REASON
    if TRANSITIONS[transition].clears_reason:
        return ""
    return current_reason


async def load_hotel(db: AsyncSession, hotel_id: int, *, fresh: bool = False) -> Hotel | None:
    stmt = select(Hotel).where(Hotel.id == hotel_id)
    if fresh:
        stmt = stmt.execution_options(populate_existing=True)
    return (await db.execute(stmt)).scalar_one_or_none()


async def apply_transition(
    db: AsyncSession,
    *,
    hotel_id: int,
    actor: Actor,
    transition: Transition,
    reason: str | None = None,
) -> Hotel:
    """
    Read-check-write one moderation transition and commit it.

    Checks run in order: hotel exists (NotFound), caller role / ownership
    (Forbidden), current status is an allowed source (InvalidState).
    The write only lands if the status is still the one we read; otherwise
    the call fails with InvalidState against the status now stored.
    Returns the updated hotel with room types and nearby places loaded.
    """
    hotel = await load_hotel(db, hotel_id)
    if hotel is None:
        raise NotFound("Hotel not found")

    authorize(hotel, actor, transition)

    current = hotel.status
    target = next_status(current, transition)
    new_reason = reject_reason_after(transition, hotel.reject_reason, reason)

    res = await db.execute(
        update(Hotel)
        .where(Hotel.id == hotel_id, Hotel.status == current)
        .values(status=target, reject_reason=new_reason, updated_at=datetime.now(timezone.utc))
        .execution_options(synchronize_session=False)
    )
    if res.rowcount != 1:
        await db.rollback()
        stored = await load_hotel(db, hotel_id, fresh=True)
        if stored is None:
            raise NotFound("Hotel not found")
        log.warning(
            "hotel %s: %s lost race, status moved %s -> %s",
            hotel_id, transition.value, current.value, stored.status.value,
        )
        raise InvalidState(status=stored.status.value, transition=transition.value)

    await audit(
        db,
        actor_user_id=actor.user_id,
        action=f"hotel.{transition.value}",
        target_type="hotel",
        target_id=str(hotel_id),
        detail={"from": current.value, "to": target.value, "reason": new_reason},
    )
    await db.commit()

    log.info("hotel %s: %s -> %s (%s by user %s)", hotel_id, current.value, target.value, transition.value, actor.user_id)

    updated = await load_hotel(db, hotel_id, fresh=True)
    assert updated is not None
    return updated


async def submit_hotel(db: AsyncSession, *, hotel_id: int, actor: Actor) -> Hotel:
    return await apply_transition(db, hotel_id=hotel_id, actor=actor, transition=Transition.submit)


async def approve_hotel(db: AsyncSession, *, hotel_id: int, actor: Actor) -> Hotel:
    return await apply_transition(db, hotel_id=hotel_id, actor=actor, transition=Transition.approve)


async def reject_hotel(db: AsyncSession, *, hotel_id: int, actor: Actor, reason: str | None = None) -> Hotel:
    return await apply_transition(db, hotel_id=hotel_id, actor=actor, transition=Transition.reject, reason=reason)


async def take_hotel_offline(db: AsyncSession, *, hotel_id: int, actor: Actor) -> Hotel:
    return await apply_transition(db, hotel_id=hotel_id, actor=actor, transition=Transition.offline)


async def bring_hotel_online(db: AsyncSession, *, hotel_id: int, actor: Actor) -> Hotel:
    return await apply_transition(db, hotel_id=hotel_id, actor=actor, transition=Transition.online)
