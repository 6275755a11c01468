# barbershop/services/loyalty.py

"""Loyalty point ledger.

point_transactions is append-only and authoritative. The totals cached on
loyalty_customers are a projection updated in the same commit as every
append, and can be rebuilt from the log with rebuild_customer_totals().
"""

import logging
from typing import List, Optional

from fastapi import HTTPException
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from barbershop.core import normalize_phone, points_for_price, shop_now, tier_for_points, tier_rank
from barbershop.data import POINT_TYPES, shop_settings
from barbershop.errors import InsufficientPointsError, NotFoundError, ValidationError
from barbershop.models import (
    Booking,
    LoyaltyCustomer,
    LoyaltyReward,
    PointTransaction,
    RewardRedemption,
    Service,
)

logger = logging.getLogger(__name__)


def apply_to_totals(customer: LoyaltyCustomer, points: int) -> None:
    customer.total_points = (customer.total_points or 0) + points
    if points < 0:
        customer.spent_points = (customer.spent_points or 0) + abs(points)
    customer.tier = tier_for_points(customer.total_points)


def append_transaction(
    session: Session,
    customer_id: int,
    points: int,
    type: str,
    reason: str,
    reference_id: Optional[int] = None,
    reference_type: Optional[str] = None,
) -> PointTransaction:
    if type not in POINT_TYPES:
        raise ValidationError(f"Unknown point transaction type: {type}")

    customer = session.get(LoyaltyCustomer, customer_id)
    if customer is None:
        raise NotFoundError("Customer not found")

    transaction = PointTransaction(
        customer_id=customer_id,
        points=points,
        type=type,
        reason=reason,
        reference_id=reference_id,
        reference_type=reference_type,
    )
    apply_to_totals(customer, points)
    customer.last_visit = shop_now()

    session.add(transaction)
    session.add(customer)
    session.commit()
    session.refresh(transaction)
    return transaction


def rebuild_customer_totals(session: Session, customer_id: int) -> LoyaltyCustomer:
    customer = session.get(LoyaltyCustomer, customer_id)
    if customer is None:
        raise NotFoundError("Customer not found")

    customer.total_points = 0
    customer.spent_points = 0
    for t in get_transactions(session, customer_id, limit=None, newest_first=False):
        apply_to_totals(customer, t.points)

    session.add(customer)
    session.commit()
    session.refresh(customer)
    return customer


# Customers

def get_customer_by_phone(session: Session, phone: str) -> Optional[LoyaltyCustomer]:
    return session.exec(
        select(LoyaltyCustomer).where(LoyaltyCustomer.phone == normalize_phone(phone))
    ).first()


def join_program(session: Session, phone: str, name: str, email: Optional[str] = None) -> LoyaltyCustomer:
    phone = normalize_phone(phone)
    if not phone:
        raise ValidationError("Phone number is required")
    if get_customer_by_phone(session, phone) is not None:
        raise HTTPException(status_code=409, detail="This phone number is already registered")

    customer = LoyaltyCustomer(phone=phone, name=name, email=email or None)
    session.add(customer)
    try:
        session.commit()
    except IntegrityError:
        session.rollback()
        raise HTTPException(status_code=409, detail="This phone number is already registered")
    session.refresh(customer)
    return customer


def ensure_customer(session: Session, phone: str, name: str, email: Optional[str] = None) -> LoyaltyCustomer:
    customer = get_customer_by_phone(session, phone)
    if customer is not None:
        return customer
    logger.info(f"Auto-registering loyalty customer {name} ({phone})")
    return join_program(session, phone, name, email)


def list_customers(session: Session) -> List[LoyaltyCustomer]:
    return session.exec(
        select(LoyaltyCustomer).order_by(LoyaltyCustomer.total_points.desc())
    ).all()


def get_transactions(
    session: Session,
    customer_id: int,
    limit: Optional[int] = shop_settings["transactions_limit"],
    newest_first: bool = True,
) -> List[PointTransaction]:
    stmt = select(PointTransaction).where(PointTransaction.customer_id == customer_id)
    if newest_first:
        stmt = stmt.order_by(PointTransaction.created_at.desc(), PointTransaction.id.desc())
    else:
        stmt = stmt.order_by(PointTransaction.id)
    if limit is not None:
        stmt = stmt.limit(limit)
    return session.exec(stmt).all()


# Booking-driven entries

def earned_for_booking(session: Session, customer_id: int, booking_id: int) -> Optional[PointTransaction]:
    return session.exec(
        select(PointTransaction)
        .where(PointTransaction.customer_id == customer_id)
        .where(PointTransaction.reference_id == booking_id)
        .where(PointTransaction.reference_type == "booking")
        .where(PointTransaction.type == "earned")
    ).first()


def reversal_for_booking(session: Session, customer_id: int, booking_id: int) -> Optional[PointTransaction]:
    return session.exec(
        select(PointTransaction)
        .where(PointTransaction.customer_id == customer_id)
        .where(PointTransaction.reference_id == booking_id)
        .where(PointTransaction.reference_type == "cancellation")
    ).first()


def award_booking_points(session: Session, booking: Booking) -> Optional[PointTransaction]:
    """Credit floor(service price) for a booking, at most once per booking."""
    customer = get_customer_by_phone(session, booking.customer_phone)
    if customer is None:
        logger.warning(f"No loyalty customer for phone {booking.customer_phone}, booking {booking.id}")
        return None

    if earned_for_booking(session, customer.id, booking.id) is not None:
        logger.info(f"Points already awarded for booking {booking.id}")
        return None

    service = session.get(Service, booking.service_id)
    if service is None:
        logger.warning(f"Service {booking.service_id} not found, no points for booking {booking.id}")
        return None

    points = points_for_price(service.price)
    transaction = append_transaction(
        session,
        customer.id,
        points,
        "earned",
        f"Service booking: {service.name}",
        reference_id=booking.id,
        reference_type="booking",
    )
    logger.info(f"Awarded {points} points to {customer.name} for booking {booking.id}")
    return transaction


def reverse_booking_points(session: Session, booking: Booking) -> Optional[PointTransaction]:
    """Offset the points a cancelled booking earned with a matching spent entry."""
    customer = get_customer_by_phone(session, booking.customer_phone)
    if customer is None:
        logger.info(f"No loyalty customer for phone {booking.customer_phone}, nothing to reverse")
        return None

    earned = earned_for_booking(session, customer.id, booking.id)
    if earned is None:
        logger.info(f"No earned points found for booking {booking.id}, nothing to reverse")
        return None

    if reversal_for_booking(session, customer.id, booking.id) is not None:
        logger.info(f"Points for booking {booking.id} were already reversed")
        return None

    transaction = append_transaction(
        session,
        customer.id,
        -abs(earned.points),
        "spent",
        f"Cancelled booking: {earned.reason}",
        reference_id=booking.id,
        reference_type="cancellation",
    )
    logger.info(f"Removed {abs(earned.points)} points from {customer.name} for cancelled booking {booking.id}")
    return transaction


# Rewards

def list_rewards(session: Session) -> List[LoyaltyReward]:
    return session.exec(
        select(LoyaltyReward)
        .where(LoyaltyReward.is_active == True)  # noqa: E712
        .order_by(LoyaltyReward.points_cost)
    ).all()


def redeem_reward(session: Session, customer_id: int, reward_id: int) -> RewardRedemption:
    customer = session.get(LoyaltyCustomer, customer_id)
    if customer is None:
        raise NotFoundError("Customer not found")

    reward = session.get(LoyaltyReward, reward_id)
    if reward is None or not reward.is_active:
        raise NotFoundError("Reward not found")

    if tier_rank(customer.tier) < tier_rank(reward.min_tier):
        raise ValidationError(f"This reward requires {reward.min_tier} tier")
    if customer.total_points < reward.points_cost:
        raise InsufficientPointsError(
            f"Reward costs {reward.points_cost} points, balance is {customer.total_points}"
        )

    redemption = RewardRedemption(
        customer_id=customer_id,
        reward_id=reward_id,
        points_spent=reward.points_cost,
    )
    session.add(redemption)
    session.flush()  # assigns redemption.id; committed with the ledger entry

    append_transaction(
        session,
        customer_id,
        -reward.points_cost,
        "spent",
        f"Redeemed reward: {reward.name}",
        reference_id=redemption.id,
        reference_type="reward_redemption",
    )
    session.refresh(redemption)
    return redemption


def get_redemptions(session: Session, customer_id: int) -> List[RewardRedemption]:
    return session.exec(
        select(RewardRedemption)
        .where(RewardRedemption.customer_id == customer_id)
        .order_by(RewardRedemption.created_at)
    ).all()
