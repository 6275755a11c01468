# barbershop/data.py

# Bookable start times for every barber, in order. 12:00-14:00 is the lunch break.
DAILY_SLOTS = [
    "09:00",
    "10:00",
    "11:00",
    "12:00",
    "14:00",
    "15:00",
    "16:00",
    "17:00",
    "18:00",
]

BOOKING_STATUSES = ("confirmed", "completed", "cancelled")
TERMINAL_STATUSES = ("completed", "cancelled")

POINT_TYPES = ("earned", "spent", "bonus", "expired")

# Minimum total points per tier, highest first
TIER_THRESHOLDS = [
    ("VIP", 1000),
    ("Gold", 500),
    ("Silver", 200),
    ("Bronze", 0),
]
TIER_ORDER = ["Bronze", "Silver", "Gold", "VIP"]

shop_settings = {
    "calendar_days": 30,
    "transactions_limit": 10,
    "reminder_hour": 10,
}
