# dealership/contact.py
"""Links a shopper can use to reach the seller about a listing."""
from urllib.parse import quote

from .config import ContactConfig


def _encode(text: str) -> str:
    # same escaping as JavaScript's encodeURIComponent
    return quote(text, safe="-_.!~*'()")


def inquiry_message(car_title: str) -> str:
    return f"Hi, I'm interested in the {car_title}. Could you please provide more details?"


def contact_links(car_title: str, config: ContactConfig) -> dict:
    message = _encode(inquiry_message(car_title))
    subject = _encode(f"Inquiry about {car_title}")
    # local numbers drop the trunk prefix for the international WhatsApp form
    local = config.phone[1:] if config.phone.startswith("0") else config.phone
    return {
        "car_title": car_title,
        "phone": config.phone,
        "email": config.email,
        "call": f"tel:{config.phone}",
        "whatsapp": f"https://wa.me/{config.country_code}{local}?text={message}",
        "mailto": f"mailto:{config.email}?subject={subject}&body={message}",
        "sms": f"sms:{config.phone}?body={message}",
    }
