# barbershop/routers/loyalty_routes.py

from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlmodel import Session

from barbershop.data import shop_settings
from barbershop.db import get_session
from barbershop.models import LoyaltyCustomer
from barbershop.schemas import (
    LoyaltyCustomerCreate,
    LoyaltyCustomerPublic,
    PointTransactionPublic,
    RedeemRequest,
    RedemptionPublic,
    RewardPublic,
)
from barbershop.services import loyalty

router = APIRouter(
    prefix="/api/loyalty",
    tags=["loyalty"],
)


@router.get("/customer/{phone}", response_model=LoyaltyCustomerPublic)
def get_customer(phone: str, session: Session = Depends(get_session)):
    customer = loyalty.get_customer_by_phone(session, phone)
    if customer is None:
        raise HTTPException(status_code=404, detail="Customer not found")
    return customer


@router.post("/customer", response_model=LoyaltyCustomerPublic, status_code=201)
def join_program(data: LoyaltyCustomerCreate, session: Session = Depends(get_session)):
    return loyalty.join_program(session, data.phone, data.name, data.email)


@router.get("/transactions/{customer_id}", response_model=List[PointTransactionPublic])
def get_transactions(
    customer_id: int,
    limit: int = Query(default=shop_settings["transactions_limit"], ge=1, le=100),
    session: Session = Depends(get_session),
):
    if session.get(LoyaltyCustomer, customer_id) is None:
        raise HTTPException(status_code=404, detail="Customer not found")
    return loyalty.get_transactions(session, customer_id, limit=limit)


@router.get("/rewards", response_model=List[RewardPublic])
def get_rewards(session: Session = Depends(get_session)):
    return loyalty.list_rewards(session)


@router.post("/redeem", response_model=RedemptionPublic, status_code=201)
def redeem(data: RedeemRequest, session: Session = Depends(get_session)):
    return loyalty.redeem_reward(session, data.customer_id, data.reward_id)


@router.get("/redemptions/{customer_id}", response_model=List[RedemptionPublic])
def get_redemptions(customer_id: int, session: Session = Depends(get_session)):
    return loyalty.get_redemptions(session, customer_id)
