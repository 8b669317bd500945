import logging

from collections.abc import Sequence
from datetime import datetime, timedelta

import pytz

from sqlalchemy import and_, exists, func, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from src.bvilove.db.models import Dating, User
from src.bvilove.profile.cities import county_range, subject_range
from src.bvilove.profile.values import Gender, GenderFilter, LocationFilter
from src.bvilove.utils.decorators import connect_db
from src.bvilove.utils.exceptions import MissingContextError


logger = logging.getLogger(__name__)

# Одну и ту же пару не показываем чаще раза в 4 часа
DATING_COOLDOWN = timedelta(hours=4)


def candidate_conditions(requester: User, now: datetime) -> list:
    """Условия отбора кандидатов для анкеты requester"""
    conditions = [
        User.id != requester.id,
        User.active.is_(True),
        # Пол кандидата подходит под фильтр ищущего
        or_(User.gender_filter == GenderFilter.ANY, User.gender_filter == GenderFilter(requester.gender.value)),
        # Старше на grade_up_filter классов или младше на grade_down_filter
        User.graduation_year.between(
            requester.graduation_year - requester.grade_up_filter,
            requester.graduation_year + requester.grade_down_filter,
        ),
    ]

    if requester.gender_filter != GenderFilter.ANY:
        conditions.append(User.gender == Gender(requester.gender_filter.value))

    if requester.subjects_filter:
        conditions.append(User.subjects.op('&')(requester.subjects_filter) != 0)

    location_filter = requester.location_filter
    if requester.city is None:
        location_filter = LocationFilter.COUNTRY

    if location_filter == LocationFilter.CITY:
        conditions.append(User.city == requester.city)
    elif location_filter == LocationFilter.SUBJECT:
        conditions.append(User.city.between(*subject_range(requester.city)))
    elif location_filter == LocationFilter.COUNTY:
        conditions.append(User.city.between(*county_range(requester.city)))

    same_pair = or_(
        and_(Dating.initiator_id == requester.id, Dating.partner_id == User.id),
        and_(Dating.initiator_id == User.id, Dating.partner_id == requester.id),
    )
    conditions.append(
        ~exists().where(
            same_pair,
            or_(
                Dating.created_at >= now - DATING_COOLDOWN,
                and_(Dating.initiator_reaction.is_(True), Dating.partner_reaction.is_(True)),
            ),
        )
    )

    return conditions


@connect_db
async def get_partner(session: AsyncSession, tg_id: int) -> tuple[Dating, User] | None:
    """Подбирает случайного подходящего кандидата и создаёт для пары знакомство"""
    requester = await session.scalar(select(User).where(User.id == tg_id))
    if requester is None:
        raise MissingContextError(f'user {tg_id} not found')

    now = datetime.now(pytz.utc)
    partner = await session.scalar(
        select(User).where(*candidate_conditions(requester, now)).order_by(func.random()).limit(1)
    )

    if partner is None:
        logger.info(f'No partner found for user {tg_id}')
        return None

    dating = Dating(initiator_id=tg_id, partner_id=partner.id, created_at=now)
    session.add(dating)
    await session.commit()
    logger.info(f'Created dating {dating.id}: {tg_id} -> {partner.id}')

    return dating, partner


@connect_db
async def get_dating(session: AsyncSession, dating_id: int) -> Dating:
    dating = await session.scalar(select(Dating).where(Dating.id == dating_id))
    if dating is None:
        raise MissingContextError(f'dating {dating_id} not found')
    return dating


@connect_db
async def set_initiator_reaction(session: AsyncSession, dating_id: int, reaction: bool) -> bool:
    """Ставит реакцию инициатора, если её ещё нет. False - реакция уже была"""
    result = await session.execute(
        update(Dating)
        .where(Dating.id == dating_id, Dating.initiator_reaction.is_(None))
        .values(initiator_reaction=reaction)
    )
    await session.commit()
    return result.rowcount == 1


@connect_db
async def set_partner_reaction(session: AsyncSession, dating_id: int, reaction: bool) -> bool:
    """Ставит реакцию партнёра, если её ещё нет. False - реакция уже была"""
    result = await session.execute(
        update(Dating)
        .where(
            Dating.id == dating_id,
            Dating.initiator_reaction.is_(True),
            Dating.partner_reaction.is_(None),
        )
        .values(partner_reaction=reaction)
    )
    await session.commit()
    return result.rowcount == 1


@connect_db
async def set_initiator_msg(session: AsyncSession, dating_id: int, msg_id: int | None) -> None:
    await session.execute(update(Dating).where(Dating.id == dating_id).values(initiator_msg_id=msg_id))
    await session.commit()


@connect_db
async def get_unanswered_datings(session: AsyncSession, tg_id: int) -> Sequence[Dating]:
    """Показанные пользователю анкеты, на которые он ещё не ответил"""
    datings = await session.scalars(
        select(Dating).where(
            Dating.initiator_id == tg_id,
            Dating.initiator_reaction.is_(None),
            Dating.initiator_msg_id.is_not(None),
        )
    )
    return datings.all()
