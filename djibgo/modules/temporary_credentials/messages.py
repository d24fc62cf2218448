"""WhatsApp message templates and deep links."""

from __future__ import annotations

from typing import Optional
from urllib.parse import quote

WHATSAPP_BASE_URL = "https://wa.me"
DEFAULT_DISPLAY_NAME = "Utilisateur"

# Same reserved set as JavaScript's encodeURIComponent.
_URI_COMPONENT_SAFE = "-_.!~*'()"

_TEMPORARY_PASSWORD_TEMPLATE = """🔐 *Mot de passe temporaire - DjibGo*

Bonjour {name},

Votre mot de passe temporaire est :

*{password}*

⚠️ *Important :*
• Ce mot de passe est valide pendant {validity_hours} heures
• Utilisez-le IMMÉDIATEMENT pour vous connecter
• Changez-le après connexion dans votre profil
• Ne partagez jamais ce code

Pour vous connecter :
1. Retournez sur la page de connexion
2. Entrez votre email : {email}
3. Entrez ce mot de passe : {password}
4. Cliquez sur "Se connecter"

🛡️ Si vous n'avez pas demandé ce mot de passe, contactez-nous immédiatement.

_DjibGo Service - Votre plateforme de confiance_"""

_REMINDER_TEMPLATE = """⏰ *Rappel Important - DjibGo*

Bonjour {name},

🔐 Votre mot de passe temporaire expire dans *{remaining}* !

Pour sécuriser votre compte, veuillez :

1. Vous connecter à votre compte
2. Aller dans "Mon Profil"
3. Changer votre mot de passe

⚠️ *Après expiration, vous devrez demander un nouveau mot de passe temporaire.*

🛡️ La sécurité de votre compte est notre priorité.

_DjibGo Service - Votre plateforme de confiance_"""

TEMPORARY_PASSWORD_LOG_SUMMARY = "Mot de passe temporaire envoyé par WhatsApp"
REMINDER_LOG_SUMMARY = "Rappel changement mot de passe par WhatsApp"


def _display_name(name: Optional[str]) -> str:
    return name.strip() if name and name.strip() else DEFAULT_DISPLAY_NAME


def build_temporary_password_message(
    name: Optional[str],
    email: str,
    password: str,
    validity_hours: int = 24,
) -> str:
    return _TEMPORARY_PASSWORD_TEMPLATE.format(
        name=_display_name(name),
        email=email,
        password=password,
        validity_hours=validity_hours,
    )


def format_duration(minutes: int) -> str:
    """French wording for a reminder window, in hours when it divides evenly."""
    if minutes >= 60 and minutes % 60 == 0:
        hours = minutes // 60
        return f"{hours} heure" if hours == 1 else f"{hours} heures"
    return f"{minutes} minute" if minutes == 1 else f"{minutes} minutes"


def build_reminder_message(name: Optional[str], minutes: int = 60) -> str:
    return _REMINDER_TEMPLATE.format(name=_display_name(name), remaining=format_duration(minutes))


def build_whatsapp_url(phone: str, text: str) -> str:
    return f"{WHATSAPP_BASE_URL}/{phone}?text={quote(text, safe=_URI_COMPONENT_SAFE)}"
