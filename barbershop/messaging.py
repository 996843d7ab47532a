# barbershop/messaging.py
# WhatsApp deep links. Nothing is sent from here; the client opens the URL.

import re
from datetime import date, time
from decimal import Decimal
from urllib.parse import quote

PAYMENT_LABELS = {"pix": "Pix", "cash": "Dinheiro"}


def format_brl(value) -> str:
    """Decimal("35.5") -> "R$ 35,50"."""
    amount = Decimal(value).quantize(Decimal("0.01"))
    return "R$ " + f"{amount:,.2f}".replace(",", "X").replace(".", ",").replace("X", ".")


def normalize_phone(phone: str) -> str:
    """Digits-only Brazilian number with the 55 country code.

    An 11-digit number (DDD + 9 + 8 digits) loses the mobile 9, which the
    WhatsApp API does not expect.
    """
    digits = re.sub(r"\D", "", phone or "")
    if not digits:
        raise ValueError("Phone number has no digits")
    if len(digits) == 11 and digits[2] == "9":
        digits = digits[:2] + digits[3:]
    if not digits.startswith("55"):
        digits = "55" + digits
    return digits


def booking_confirmation_url(
    shop_number: str,
    business_name: str,
    client_name: str,
    service_description: str,
    appointment_date: date,
    appointment_time: time,
    payment_method: str,
    price,
) -> str:
    """Link for the client to send the booking summary to the shop."""
    msg = (
        f"Olá! Agendei um horário na {business_name}:\n\n"
        f"Nome: {client_name}\n"
        f"Serviço: {service_description}\n"
        f"Data: {appointment_date:%d/%m/%Y}\n"
        f"Horário: {appointment_time:%H:%M}\n"
        f"Pagamento: {PAYMENT_LABELS.get(payment_method, payment_method)}\n"
        f"Valor: {format_brl(price)}"
    )
    return f"https://wa.me/{shop_number}?text={quote(msg, safe='')}"


def reminder_url(phone: str, client_name: str) -> str:
    """Link for the barber to message a client about their booking."""
    msg = f"Olá, {client_name}! Passando para confirmar seu agendamento."
    return f"https://api.whatsapp.com/send?phone={normalize_phone(phone)}&text={quote(msg, safe='')}"
