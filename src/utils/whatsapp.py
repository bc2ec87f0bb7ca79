"""WhatsApp payment reminder helpers."""

from typing import Iterable, List
from urllib.parse import quote

from ..models.riders import Rider

TEMPLATES = {
    "english": """🔔 Payment Reminder

Dear {name},

Your wallet balance is currently ₹{balance:.2f}.

⚠️ Outstanding Amount: ₹{amount:.2f}

Please clear this amount at the earliest to continue your services smoothly.

📞 Contact your Team Leader {team_leader} for any queries.

Thank you,
Triev Rider Pro""",

    "hindi": """🔔 भुगतान अनुस्मारक

प्रिय {name},

आपका वॉलेट बैलेंस वर्तमान में ₹{balance:.2f} है।

⚠️ बकाया राशि: ₹{amount:.2f}

कृपया अपनी सेवाओं को सुचारू रूप से जारी रखने के लिए इस राशि का जल्द से जल्द भुगतान करें।

📞 किसी भी प्रश्न के लिए अपने टीम लीडर {team_leader} से संपर्क करें।

धन्यवाद,
Triev Rider Pro""",
}


def format_inr(amount: float) -> str:
    """Format an amount as rupees with two decimals and thousands separators."""
    return f"₹{amount:,.2f}"


def generate_whatsapp_reminder(rider: Rider, language: str = "english") -> str:
    """Fixed-template payment reminder in English or Hindi."""
    template = TEMPLATES.get(language, TEMPLATES["english"])
    return template.format(
        name=rider.rider_name,
        balance=rider.wallet_amount,
        amount=abs(rider.wallet_amount),
        team_leader=rider.team_leader_name,
    )


def build_whatsapp_url(phone_number: str, message: str) -> str:
    """wa.me link with the message pre-filled."""
    clean_number = "".join(ch for ch in phone_number if ch not in "+ -")
    return f"https://wa.me/{clean_number}?text={quote(message)}"


def riders_with_negative_wallets(riders: Iterable[Rider]) -> List[Rider]:
    return [rider for rider in riders if rider.has_dues]
