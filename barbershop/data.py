# barbershop/data.py
# Rows written on first start so a fresh shop can take bookings right away.

from datetime import time
from decimal import Decimal

# name: (price, duration_minutes, buffer_minutes)
SERVICES = {
    "Corte": (Decimal("35.00"), 30, 5),
    "Barba": (Decimal("25.00"), 30, 5),
    "Corte + Barba": (Decimal("55.00"), 60, 5),
    "Pezinho": (Decimal("10.00"), 15, 0),
    "Sobrancelha": (Decimal("10.00"), 15, 0),
    "Pigmentação": (Decimal("30.00"), 30, 10),
    "Luzes": (Decimal("80.00"), 90, 15),
}

# weekday (0=Mon): None means closed
WEEKLY_SCHEDULE = {
    0: (time(8, 0), time(21, 0)),
    1: (time(8, 0), time(21, 0)),
    2: (time(8, 0), time(21, 0)),
    3: (time(8, 0), time(21, 0)),
    4: (time(8, 0), time(21, 0)),
    5: (time(8, 0), time(21, 0)),
    6: None,
}

SETTING_BUSINESS_NAME = "business_name"
SETTING_SLOT_INTERVAL = "slot_interval_minutes"

EDITABLE_SETTINGS = (SETTING_BUSINESS_NAME, SETTING_SLOT_INTERVAL)

SLOT_INTERVAL_RANGE = (5, 240)
