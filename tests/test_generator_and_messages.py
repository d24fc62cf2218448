from urllib.parse import unquote

from djibgo.modules.temporary_credentials import generator
from djibgo.modules.temporary_credentials.messages import (
    build_reminder_message,
    build_temporary_password_message,
    build_whatsapp_url,
)


def test_generated_passwords_are_six_ascii_digits_in_range():
    for _ in range(2000):
        password = generator.generate_temporary_password()
        assert len(password) == 6
        assert password.isascii() and password.isdigit()
        assert 100000 <= int(password) <= 999999


def test_generator_bounds(monkeypatch):
    monkeypatch.setattr(generator.secrets, "randbelow", lambda upper: 0)
    assert generator.generate_temporary_password() == "100000"
    monkeypatch.setattr(generator.secrets, "randbelow", lambda upper: upper - 1)
    assert generator.generate_temporary_password() == "999999"


def test_message_carries_password_email_and_call_to_action():
    message = build_temporary_password_message("Amina Hassan", "amina@example.com", "482913")

    assert "Bonjour Amina Hassan" in message
    assert "*482913*" in message
    assert "amina@example.com" in message
    assert "IMMÉDIATEMENT pour vous connecter" in message
    assert "24 heures" in message


def test_message_falls_back_to_generic_name():
    assert "Bonjour Utilisateur" in build_temporary_password_message(None, "a@b.dj", "123456")
    assert "Bonjour Utilisateur" in build_reminder_message("   ")


def test_reminder_states_the_window_in_words():
    message = build_reminder_message("Omar")

    assert "expire dans *1 heure* !" in message
    assert "La sécurité de votre compte est notre priorité." in message
    assert "*45 minutes*" in build_reminder_message("Omar", minutes=45)
    assert "*2 heures*" in build_reminder_message("Omar", minutes=120)


def test_whatsapp_url_encodes_like_encode_uri_component():
    url = build_whatsapp_url("+25377123456", "Bonjour Omar,\n*123456* (24h) !")

    assert url.startswith("https://wa.me/+25377123456?text=")
    query = url.split("?text=", 1)[1]
    assert " " not in query and "\n" not in query
    assert "%20" in query and "%0A" in query and "%2C" in query
    assert "*123456*" in query and "(24h)" in query and "!" in query
    assert unquote(query) == "Bonjour Omar,\n*123456* (24h) !"
