from datetime import datetime

import pytest
from sqlalchemy import select, update

from app.core.errors import Forbidden, InvalidState, NotFound
from app.models.audit_log import AuditLog
from app.models.hotel import Hotel, HotelStatus
from app.services.hotel_lifecycle import (
    DEFAULT_REJECT_REASON,
    approve_hotel,
    bring_hotel_online,
    reject_hotel,
    submit_hotel,
    take_hotel_offline,
)

from fixtures_seed import actor_for


@pytest.mark.asyncio
async def test_submit_draft_moves_to_pending(db_session, make_hotel, merchant):
    hotel = await make_hotel(HotelStatus.draft)

    result = await submit_hotel(db_session, hotel_id=hotel.id, actor=actor_for(merchant))

    assert result.status == HotelStatus.pending
    assert result.reject_reason == ""
    # full record comes back with its related rows
    assert [r.name for r in result.room_types] == ["Room 0"]
    assert [p.name for p in result.nearby_places] == ["外滩"]


@pytest.mark.asyncio
async def test_reject_records_reason(db_session, make_hotel, admin):
    hotel = await make_hotel(HotelStatus.pending)

    result = await reject_hotel(db_session, hotel_id=hotel.id, actor=actor_for(admin), reason="photos too small")

    assert result.status == HotelStatus.rejected
    assert result.reject_reason == "photos too small"


@pytest.mark.asyncio
async def test_reject_without_reason_uses_default(db_session, make_hotel, admin):
    hotel = await make_hotel(HotelStatus.pending)

    result = await reject_hotel(db_session, hotel_id=hotel.id, actor=actor_for(admin), reason="")

    assert result.status == HotelStatus.rejected
    assert result.reject_reason == DEFAULT_REJECT_REASON


@pytest.mark.asyncio
async def test_resubmit_after_reject_clears_reason(db_session, make_hotel, merchant):
    hotel = await make_hotel(HotelStatus.rejected, reject_reason="photos too small")

    result = await submit_hotel(db_session, hotel_id=hotel.id, actor=actor_for(merchant))

    assert result.status == HotelStatus.pending
    assert result.reject_reason == ""


@pytest.mark.asyncio
async def test_approve_offline_online_round_trip(db_session, make_hotel, admin):
    hotel = await make_hotel(HotelStatus.pending)
    actor = actor_for(admin)

    approved = await approve_hotel(db_session, hotel_id=hotel.id, actor=actor)
    assert approved.status == HotelStatus.approved

    off = await take_hotel_offline(db_session, hotel_id=hotel.id, actor=actor)
    assert off.status == HotelStatus.offline

    back = await bring_hotel_online(db_session, hotel_id=hotel.id, actor=actor)
    assert back.status == HotelStatus.approved
    assert back.reject_reason == ""


@pytest.mark.asyncio
async def test_approve_draft_is_invalid_state(db_session, make_hotel, admin):
    hotel = await make_hotel(HotelStatus.draft)

    with pytest.raises(InvalidState) as exc:
        await approve_hotel(db_session, hotel_id=hotel.id, actor=actor_for(admin))
    assert exc.value.status == "draft"
    assert exc.value.transition == "approve"

    stored = (await db_session.execute(
        select(Hotel).where(Hotel.id == hotel.id).execution_options(populate_existing=True)
    )).scalar_one()
    assert stored.status == HotelStatus.draft


@pytest.mark.asyncio
async def test_submit_by_other_merchant_is_forbidden(db_session, make_hotel, other_merchant):
    hotel = await make_hotel(HotelStatus.pending)

    with pytest.raises(Forbidden):
        await submit_hotel(db_session, hotel_id=hotel.id, actor=actor_for(other_merchant))


@pytest.mark.asyncio
async def test_ownership_is_checked_before_state(db_session, make_hotel, other_merchant):
    # approved is not a submit source, but the stranger must see Forbidden first
    hotel = await make_hotel(HotelStatus.approved)

    with pytest.raises(Forbidden):
        await submit_hotel(db_session, hotel_id=hotel.id, actor=actor_for(other_merchant))


@pytest.mark.asyncio
async def test_merchant_cannot_approve(db_session, make_hotel, merchant):
    hotel = await make_hotel(HotelStatus.pending)

    with pytest.raises(Forbidden):
        await approve_hotel(db_session, hotel_id=hotel.id, actor=actor_for(merchant))


@pytest.mark.asyncio
async def test_missing_hotel_is_not_found_before_role_check(db_session, merchant):
    # a merchant calling an admin transition on a missing id still gets NotFound
    with pytest.raises(NotFound):
        await approve_hotel(db_session, hotel_id=999_999, actor=actor_for(merchant))


@pytest.mark.asyncio
async def test_transition_refreshes_updated_at(db_session, make_hotel, merchant):
    hotel = await make_hotel(HotelStatus.draft)
    await db_session.execute(
        update(Hotel).where(Hotel.id == hotel.id).values(updated_at=datetime(2020, 1, 1))
    )
    await db_session.commit()

    result = await submit_hotel(db_session, hotel_id=hotel.id, actor=actor_for(merchant))

    assert result.updated_at.replace(tzinfo=None) > datetime(2020, 1, 1)


@pytest.mark.asyncio
async def test_transition_writes_audit_row(db_session, make_hotel, admin):
    hotel = await make_hotel(HotelStatus.pending)

    await reject_hotel(db_session, hotel_id=hotel.id, actor=actor_for(admin), reason="blurry")

    row = (await db_session.execute(select(AuditLog).where(AuditLog.target_id == str(hotel.id)))).scalar_one()
    assert row.action == "hotel.reject"
    assert row.actor_user_id == admin.id
    assert row.detail == {"from": "pending", "to": "rejected", "reason": "blurry"}


@pytest.mark.asyncio
async def test_stale_read_loses_to_concurrent_change(db_session, make_hotel, merchant):
    hotel = await make_hotel(HotelStatus.draft)

    # another request approved it behind this session's back
    await db_session.execute(
        update(Hotel)
        .where(Hotel.id == hotel.id)
        .values(status=HotelStatus.approved)
        .execution_options(synchronize_session=False)
    )
    await db_session.commit()
    assert hotel.status == HotelStatus.draft  # identity map still stale

    with pytest.raises(InvalidState) as exc:
        await submit_hotel(db_session, hotel_id=hotel.id, actor=actor_for(merchant))
    assert exc.value.status == "approved"

    audit_rows = (await db_session.execute(select(AuditLog))).scalars().all()
    assert audit_rows == []
