# barbershop/models.py

from typing import Optional
from datetime import datetime
from decimal import Decimal

from sqlalchemy import Index, UniqueConstraint, text
from sqlmodel import SQLModel, Field

from barbershop.core import shop_now


class Barber(SQLModel, table=True):
    __tablename__ = "barbers"

    id: Optional[int] = Field(default=None, primary_key=True)
    name: str
    title: str
    bio: Optional[str] = None
    image_url: Optional[str] = None
    is_active: bool = True


class Service(SQLModel, table=True):
    __tablename__ = "services"

    id: Optional[int] = Field(default=None, primary_key=True)
    name: str
    description: str = ""
    price: Decimal = Field(max_digits=10, decimal_places=2)
    duration: int  # minutes
    image_url: Optional[str] = None
    barber_id: Optional[int] = Field(default=None, foreign_key="barbers.id")  # None = every barber
    is_active: bool = True
    created_at: datetime = Field(default_factory=shop_now)


class Booking(SQLModel, table=True):
    __tablename__ = "bookings"
    __table_args__ = (
        # one live booking per barber per start time; cancelled rows free the slot
        Index(
            "uq_booking_active_slot",
            "barber_id",
            "appointment_date",
            unique=True,
            sqlite_where=text("status != 'cancelled'"),
            postgresql_where=text("status != 'cancelled'"),
        ),
    )

    id: Optional[int] = Field(default=None, primary_key=True)

    customer_name: str
    customer_phone: str = Field(index=True)
    customer_email: str
    service_id: int = Field(foreign_key="services.id")
    barber_id: int = Field(foreign_key="barbers.id", index=True)
    appointment_date: datetime = Field(index=True)
    notes: Optional[str] = None
    status: str = "confirmed"
    reminder_sent: bool = False
    reminder_sent_at: Optional[datetime] = None
    created_at: datetime = Field(default_factory=shop_now)


class NotificationLog(SQLModel, table=True):
    __tablename__ = "notification_logs"

    id: Optional[int] = Field(default=None, primary_key=True)
    booking_id: int = Field(foreign_key="bookings.id", index=True, ondelete="CASCADE")
    channel: str  # sms or email
    recipient: str
    message: str = ""
    status: str = "pending"  # pending, sent, simulated, failed
    provider_id: Optional[str] = None
    notification_type: str  # confirmation, owner_notification, reminder
    error_message: Optional[str] = None
    sent_at: Optional[datetime] = None
    created_at: datetime = Field(default_factory=shop_now)


class LoyaltyCustomer(SQLModel, table=True):
    __tablename__ = "loyalty_customers"

    id: Optional[int] = Field(default=None, primary_key=True)
    phone: str = Field(index=True, unique=True)
    name: str
    email: Optional[str] = None
    total_points: int = 0
    spent_points: int = 0
    tier: str = "Bronze"
    joined_at: datetime = Field(default_factory=shop_now)
    last_visit: Optional[datetime] = None


class PointTransaction(SQLModel, table=True):
    __tablename__ = "point_transactions"

    id: Optional[int] = Field(default=None, primary_key=True)
    customer_id: int = Field(foreign_key="loyalty_customers.id", index=True)
    points: int  # positive for earned, negative for spent
    type: str  # earned, spent, bonus, expired
    reason: str
    reference_id: Optional[int] = None  # booking id or redemption id
    reference_type: Optional[str] = None  # booking, cancellation, reward_redemption, manual
    created_at: datetime = Field(default_factory=shop_now)


class LoyaltyReward(SQLModel, table=True):
    __tablename__ = "loyalty_rewards"

    id: Optional[int] = Field(default=None, primary_key=True)
    name: str
    description: str
    points_cost: int
    reward_type: str  # discount, free_service, product
    reward_value: Optional[Decimal] = Field(default=None, max_digits=10, decimal_places=2)
    min_tier: str = "Bronze"
    is_active: bool = True
    created_at: datetime = Field(default_factory=shop_now)


class RewardRedemption(SQLModel, table=True):
    __tablename__ = "reward_redemptions"

    id: Optional[int] = Field(default=None, primary_key=True)
    customer_id: int = Field(foreign_key="loyalty_customers.id", index=True)
    reward_id: int = Field(foreign_key="loyalty_rewards.id")
    points_spent: int
    status: str = "active"  # active, used, expired
    expires_at: Optional[datetime] = None
    used_at: Optional[datetime] = None
    created_at: datetime = Field(default_factory=shop_now)


class BarberClient(SQLModel, table=True):
    __tablename__ = "barber_clients"
    __table_args__ = (
        UniqueConstraint("barber_id", "phone", name="uq_barber_client_phone"),
    )

    id: Optional[int] = Field(default=None, primary_key=True)
    barber_id: int = Field(foreign_key="barbers.id", index=True)
    name: str
    phone: str
    email: Optional[str] = None
    notes: Optional[str] = None
    last_visit: Optional[datetime] = None
    total_visits: int = 0
    preferred_services: Optional[str] = None  # JSON list of service ids
    created_at: datetime = Field(default_factory=shop_now)
    updated_at: datetime = Field(default_factory=shop_now)
