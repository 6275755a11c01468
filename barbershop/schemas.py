# barbershop/schemas.py

from pydantic import BaseModel, ConfigDict, Field
from datetime import datetime
from decimal import Decimal
from typing import List, Optional


class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"


class AdminLogin(BaseModel):
    password: str


# Catalog

class BarberCreate(BaseModel):
    name: str = Field(min_length=1)
    title: str = Field(min_length=1)
    bio: Optional[str] = None
    image_url: Optional[str] = None


class BarberPublic(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    title: str
    bio: Optional[str] = None
    image_url: Optional[str] = None
    is_active: bool


class ServiceCreate(BaseModel):
    name: str = Field(min_length=1)
    description: str = ""
    price: Decimal = Field(ge=0, max_digits=10, decimal_places=2)
    duration: int = Field(gt=0)
    image_url: Optional[str] = None
    barber_id: Optional[int] = None


class ServicePublic(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    description: str
    price: Decimal
    duration: int
    image_url: Optional[str] = None
    barber_id: Optional[int] = None
    is_active: bool


# Bookings

class BookingCreate(BaseModel):
    customer_name: str
    customer_phone: str
    customer_email: str
    service_id: int
    barber_id: int
    appointment_date: datetime
    notes: Optional[str] = None


class BookingPublic(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    customer_name: str
    customer_phone: str
    customer_email: str
    service_id: int
    barber_id: int
    appointment_date: datetime
    notes: Optional[str] = None
    status: str
    reminder_sent: bool
    reminder_sent_at: Optional[datetime] = None
    created_at: datetime


class BookingDetail(BaseModel):
    id: int
    customer_name: str
    customer_phone: str
    customer_email: str
    appointment_date: datetime
    notes: Optional[str] = None
    status: str
    service_name: str
    service_price: Decimal
    service_duration: int
    barber_id: int
    barber_name: str
    created_at: datetime


class BookingStatusUpdate(BaseModel):
    status: str
    notes: Optional[str] = None


class BulkOperation(BaseModel):
    booking_ids: List[int]
    action: str  # delete or update_status
    status: Optional[str] = None


class BulkResult(BaseModel):
    success: bool
    affected_count: int
    failed_ids: List[int] = []


class DeleteResult(BaseModel):
    message: str
    booking: BookingPublic


class NotificationLogPublic(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    booking_id: int
    channel: str
    recipient: str
    message: str
    status: str
    provider_id: Optional[str] = None
    notification_type: str
    error_message: Optional[str] = None
    sent_at: Optional[datetime] = None
    created_at: datetime


class DashboardStats(BaseModel):
    today: int
    this_week: int
    this_month: int
    month_revenue: Decimal


# Loyalty

class LoyaltyCustomerCreate(BaseModel):
    phone: str = Field(min_length=1)
    name: str = Field(min_length=1)
    email: Optional[str] = None


class LoyaltyCustomerPublic(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    phone: str
    name: str
    email: Optional[str] = None
    total_points: int
    spent_points: int
    tier: str
    joined_at: datetime
    last_visit: Optional[datetime] = None


class PointAdjustment(BaseModel):
    customer_id: int
    points: int
    type: str = "bonus"
    reason: str = Field(min_length=1)


class PointTransactionPublic(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    customer_id: int
    points: int
    type: str
    reason: str
    reference_id: Optional[int] = None
    reference_type: Optional[str] = None
    created_at: datetime


class RewardCreate(BaseModel):
    name: str = Field(min_length=1)
    description: str = ""
    points_cost: int = Field(gt=0)
    reward_type: str = "discount"
    reward_value: Optional[Decimal] = None
    min_tier: str = "Bronze"


class RewardPublic(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    description: str
    points_cost: int
    reward_type: str
    reward_value: Optional[Decimal] = None
    min_tier: str
    is_active: bool


class RedeemRequest(BaseModel):
    customer_id: int
    reward_id: int


class RedemptionPublic(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    customer_id: int
    reward_id: int
    points_spent: int
    status: str
    expires_at: Optional[datetime] = None
    used_at: Optional[datetime] = None
    created_at: datetime


# Barber client book

class BarberClientCreate(BaseModel):
    name: str = Field(min_length=1)
    phone: str = Field(min_length=1)
    email: Optional[str] = None
    notes: Optional[str] = None
    preferred_services: Optional[str] = None


class BarberClientPublic(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    barber_id: int
    name: str
    phone: str
    email: Optional[str] = None
    notes: Optional[str] = None
    last_visit: Optional[datetime] = None
    total_visits: int
    preferred_services: Optional[str] = None
    created_at: datetime


# Reminders

class ReminderRequest(BaseModel):
    booking_id: int


class ReminderRunResult(BaseModel):
    processed: int
    sent: int
