# barbershop/config.py

import os
import warnings

from dotenv import load_dotenv

load_dotenv()

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./barbershop.db")

# Security
SECRET_KEY = os.getenv("SECRET_KEY")
if not SECRET_KEY:
    warnings.warn(
        "SECRET_KEY not set! Using insecure default - DO NOT USE IN PRODUCTION", RuntimeWarning, stacklevel=2
    )
    SECRET_KEY = "change-me-later"
ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "480"))

# Shared owner credential, exchanged for a signed token at /api/admin/login
ADMIN_PASSWORD = os.getenv("ADMIN_PASSWORD", "")
ADMIN_PASSWORD_HASH = os.getenv("ADMIN_PASSWORD_HASH")

# Shop
SHOP_NAME = os.getenv("SHOP_NAME", "BLACKSEA BARBER")
SHOP_TIMEZONE = os.getenv("SHOP_TIMEZONE", "Europe/Sofia")
SHOP_ADDRESS = os.getenv("SHOP_ADDRESS", "35 Pop Hariton St, 9000 Varna")
SHOP_PHONE = os.getenv("SHOP_PHONE", "052 123 456")
OWNER_PHONE = os.getenv("OWNER_PHONE", "+359888000000")
OWNER_EMAIL = os.getenv("OWNER_EMAIL")

# Resend email
RESEND_API_KEY = os.getenv("RESEND_API_KEY")
EMAIL_FROM_ADDRESS = os.getenv("EMAIL_FROM_ADDRESS", "Blacksea Barber <bookings@blackseabarber.com>")

# Twilio SMS
TWILIO_ACCOUNT_SID = os.getenv("TWILIO_ACCOUNT_SID")
TWILIO_AUTH_TOKEN = os.getenv("TWILIO_AUTH_TOKEN")
TWILIO_PHONE_NUMBER = os.getenv("TWILIO_PHONE_NUMBER")

# "booking" awards points when the booking is made, "completion" when the owner marks it completed
POINTS_AWARD_ON = os.getenv("POINTS_AWARD_ON", "booking").lower()

# Reminder scheduler
ENABLE_SCHEDULER = os.getenv("ENABLE_SCHEDULER", "false").lower() == "true"
REMINDER_SEND_DELAY_SECONDS = float(os.getenv("REMINDER_SEND_DELAY_SECONDS", "1.0"))
