import asyncio
from datetime import datetime, timedelta, timezone

import pytest

from djibgo.modules.temporary_credentials import (
    AccountLookupError,
    IssuanceConflictError,
    IssuanceFailedError,
    IssuancePolicy,
    LookupFailedError,
    MissingFieldError,
    PhoneMismatchError,
    ReadBackPolicy,
    TemporaryCredentialService,
)
from tests.fakes import RecordingSleep, password_from_link

NOW = datetime(2026, 10, 19, 8, 30, tzinfo=timezone.utc)
EMAIL = "user@example.com"


def _service(identity_store, profiles, deliveries, policy=None, sleep=None, clock=None):
    return TemporaryCredentialService(
        identity_store,
        profiles,
        deliveries,
        policy or IssuancePolicy(),
        clock=clock or (lambda: NOW),
        sleep=sleep or RecordingSleep(),
    )


def _seed(identity_store, profiles, phone="+25377123456", full_name="Amina Hassan"):
    account = identity_store.add_account(EMAIL, full_name=full_name)
    profiles.add_profile(account.id, full_name=full_name, phone=phone)
    return account


def test_issue_installs_password_and_builds_whatsapp_link(identity_store, profiles, deliveries):
    account = _seed(identity_store, profiles)
    service = _service(identity_store, profiles, deliveries)

    issue = asyncio.run(service.issue(EMAIL, "77123456"))

    password = password_from_link(issue.whatsapp_url)
    assert identity_store.passwords[account.id] == password
    assert issue.whatsapp_url.startswith("https://wa.me/+25377123456?text=")
    assert issue.phone == "+25377123456"
    assert issue.expires_at == NOW + timedelta(hours=24)
    assert issue.self_test_passed is True

    stored = identity_store.accounts[account.id]
    assert stored.email_confirmed and stored.phone_confirmed
    profile = profiles.profiles[account.id]
    assert profile.temporary_credential_expires_at == NOW + timedelta(hours=24)
    assert profile.temporary_credential_issued_at == NOW
    assert profile.issuance_lease_until is None


def test_issue_clears_ban(identity_store, profiles, deliveries):
    account = identity_store.add_account(EMAIL, banned_until=NOW + timedelta(days=365))
    profiles.add_profile(account.id, phone=None)

    asyncio.run(_service(identity_store, profiles, deliveries).issue(EMAIL, "77123456"))

    assert identity_store.accounts[account.id].banned_until is None


def test_delivery_record_never_contains_the_password(identity_store, profiles, deliveries):
    account = _seed(identity_store, profiles)

    issue = asyncio.run(_service(identity_store, profiles, deliveries).issue(EMAIL, "77123456"))

    password = password_from_link(issue.whatsapp_url)
    assert len(deliveries.records) == 1
    record = deliveries.records[0]
    assert record.account_id == account.id
    assert record.phone_number == "+25377123456"
    assert record.channel == "whatsapp"
    assert record.status == "sent"
    assert password not in record.message


def test_self_test_session_is_closed(identity_store, profiles, deliveries):
    _seed(identity_store, profiles)

    asyncio.run(_service(identity_store, profiles, deliveries).issue(EMAIL, "77123456"))

    assert identity_store.sign_in_calls == 1
    assert identity_store.sessions == {}


def test_phone_mismatch_leaves_account_untouched(identity_store, profiles, deliveries):
    account = _seed(identity_store, profiles)
    service = _service(identity_store, profiles, deliveries)

    with pytest.raises(PhoneMismatchError) as excinfo:
        asyncio.run(service.issue(EMAIL, "99999999"))

    assert "ne correspond pas" in str(excinfo.value)
    assert identity_store.passwords[account.id] == "initial-pass"
    stored = identity_store.accounts[account.id]
    assert not stored.email_confirmed and not stored.phone_confirmed
    assert identity_store.writes == 0
    assert profiles.writes == 0
    assert deliveries.records == []


def test_unknown_email_fails_identically_without_writes(identity_store, profiles, deliveries):
    _seed(identity_store, profiles)
    service = _service(identity_store, profiles, deliveries)

    messages = []
    for _ in range(2):
        with pytest.raises(AccountLookupError) as excinfo:
            asyncio.run(service.issue("nobody@example.com", "77123456"))
        messages.append(str(excinfo.value))

    assert messages == ["Aucun compte trouvé avec cette adresse email"] * 2
    assert identity_store.writes == 0
    assert profiles.writes == 0


def test_email_match_is_case_sensitive(identity_store, profiles, deliveries):
    _seed(identity_store, profiles)

    with pytest.raises(AccountLookupError):
        asyncio.run(_service(identity_store, profiles, deliveries).issue("User@Example.com", "77123456"))


def test_account_without_profile_is_not_eligible(identity_store, profiles, deliveries):
    identity_store.add_account(EMAIL)

    with pytest.raises(AccountLookupError) as excinfo:
        asyncio.run(_service(identity_store, profiles, deliveries).issue(EMAIL, "77123456"))

    assert str(excinfo.value) == "Profil utilisateur non trouvé"
    assert identity_store.writes == 0


def test_profile_without_phone_accepts_any_phone(identity_store, profiles, deliveries):
    _seed(identity_store, profiles, phone=None)

    issue = asyncio.run(_service(identity_store, profiles, deliveries).issue(EMAIL, "61 00 00 00"))

    assert issue.phone == "+25361000000"


@pytest.mark.parametrize(
    ("email", "phone", "message"),
    [
        ("", "77123456", "Email requis"),
        (None, "77123456", "Email requis"),
        (EMAIL, "", "Numéro de téléphone requis"),
        (EMAIL, None, "Numéro de téléphone requis"),
        (EMAIL, " ( ) - ", "Numéro de téléphone requis"),
    ],
)
def test_missing_fields_are_rejected(identity_store, profiles, deliveries, email, phone, message):
    _seed(identity_store, profiles)

    with pytest.raises(MissingFieldError) as excinfo:
        asyncio.run(_service(identity_store, profiles, deliveries).issue(email, phone))

    assert str(excinfo.value) == message
    assert identity_store.writes == 0


def test_identity_lookup_failure_is_reported(identity_store, profiles, deliveries):
    _seed(identity_store, profiles)
    identity_store.fail_lookup = True

    with pytest.raises(LookupFailedError):
        asyncio.run(_service(identity_store, profiles, deliveries).issue(EMAIL, "77123456"))


def test_rejected_update_propagates_store_message_and_releases_lease(identity_store, profiles, deliveries):
    account = _seed(identity_store, profiles)
    identity_store.fail_update = "Database error updating user"

    with pytest.raises(IssuanceFailedError) as excinfo:
        asyncio.run(_service(identity_store, profiles, deliveries).issue(EMAIL, "77123456"))

    assert str(excinfo.value) == "Database error updating user"
    assert profiles.profiles[account.id].issuance_lease_until is None
    assert deliveries.records == []


def test_read_back_retries_with_backoff(identity_store, profiles, deliveries):
    _seed(identity_store, profiles)
    identity_store.stale_reads = 2
    sleep = RecordingSleep()
    policy = IssuancePolicy(read_back=ReadBackPolicy(attempts=3, initial_delay=0.25, multiplier=2.0, max_delay=2.0))

    asyncio.run(_service(identity_store, profiles, deliveries, policy=policy, sleep=sleep).issue(EMAIL, "77123456"))

    assert sleep.calls == [0.25, 0.5]
    assert identity_store.get_by_id_calls == 3


def test_first_read_back_needs_no_sleep(identity_store, profiles, deliveries):
    _seed(identity_store, profiles)
    sleep = RecordingSleep()

    asyncio.run(_service(identity_store, profiles, deliveries, sleep=sleep).issue(EMAIL, "77123456"))

    assert sleep.calls == []


def test_read_back_disagreement_is_not_fatal(identity_store, profiles, deliveries):
    _seed(identity_store, profiles)
    identity_store.stale_reads = 100
    sleep = RecordingSleep()
    policy = IssuancePolicy(read_back=ReadBackPolicy(attempts=4, initial_delay=1.0, multiplier=3.0, max_delay=2.0))

    issue = asyncio.run(
        _service(identity_store, profiles, deliveries, policy=policy, sleep=sleep).issue(EMAIL, "77123456")
    )

    assert sleep.calls == [1.0, 2.0, 2.0]
    assert issue.whatsapp_url


def test_failed_self_test_still_returns_link(identity_store, profiles, deliveries):
    _seed(identity_store, profiles)
    identity_store.fail_sign_in = True

    issue = asyncio.run(_service(identity_store, profiles, deliveries).issue(EMAIL, "77123456"))

    assert issue.self_test_passed is False
    assert len(deliveries.records) == 1


def test_self_test_can_be_disabled(identity_store, profiles, deliveries):
    _seed(identity_store, profiles)
    policy = IssuancePolicy(self_test_enabled=False)

    issue = asyncio.run(_service(identity_store, profiles, deliveries, policy=policy).issue(EMAIL, "77123456"))

    assert identity_store.sign_in_calls == 0
    assert issue.self_test_passed is None


def test_bookkeeping_and_log_failures_do_not_fail_issuance(identity_store, profiles, deliveries):
    account = _seed(identity_store, profiles)
    profiles.fail_bookkeeping = True
    deliveries.fail = True

    issue = asyncio.run(_service(identity_store, profiles, deliveries).issue(EMAIL, "77123456"))

    assert identity_store.passwords[account.id] == password_from_link(issue.whatsapp_url)
    assert profiles.profiles[account.id].temporary_credential_expires_at is None


def test_custom_validity_and_prefix(identity_store, profiles, deliveries):
    _seed(identity_store, profiles, phone=None)
    policy = IssuancePolicy(validity=timedelta(hours=2), default_country_prefix="+33")

    issue = asyncio.run(_service(identity_store, profiles, deliveries, policy=policy).issue(EMAIL, "0612345678"))

    assert issue.phone == "+33612345678"
    assert issue.expires_at == NOW + timedelta(hours=2)


def test_concurrent_issuance_for_one_account_is_serialized(identity_store, profiles, deliveries):
    account = _seed(identity_store, profiles)
    identity_store.yield_on_update = True
    service = _service(identity_store, profiles, deliveries)

    async def run_both():
        return await asyncio.gather(
            service.issue(EMAIL, "77123456"),
            service.issue(EMAIL, "77123456"),
            return_exceptions=True,
        )

    results = asyncio.run(run_both())

    issued = [result for result in results if not isinstance(result, Exception)]
    conflicts = [result for result in results if isinstance(result, IssuanceConflictError)]
    assert len(issued) == 1 and len(conflicts) == 1
    assert conflicts[0].retry_after == 30
    assert identity_store.passwords[account.id] == password_from_link(issued[0].whatsapp_url)
    assert len(deliveries.records) == 1


def test_held_lease_rejects_issuance_until_it_lapses(identity_store, profiles, deliveries):
    account = _seed(identity_store, profiles)
    profiles.profiles[account.id].issuance_lease_until = NOW + timedelta(seconds=10)

    with pytest.raises(IssuanceConflictError):
        asyncio.run(_service(identity_store, profiles, deliveries).issue(EMAIL, "77123456"))
    assert identity_store.writes == 0

    later = NOW + timedelta(seconds=11)
    issue = asyncio.run(_service(identity_store, profiles, deliveries, clock=lambda: later).issue(EMAIL, "77123456"))
    assert issue.expires_at == later + timedelta(hours=24)


def test_status_reports_remaining_hours(identity_store, profiles, deliveries):
    account = _seed(identity_store, profiles)
    profiles.profiles[account.id].temporary_credential_expires_at = NOW + timedelta(hours=5, minutes=30)

    status = asyncio.run(_service(identity_store, profiles, deliveries).status(account.id))

    assert status.active is True
    assert status.hours_remaining == pytest.approx(5.5)


def test_status_inactive_after_expiry_or_without_temporary_password(identity_store, profiles, deliveries):
    account = _seed(identity_store, profiles)
    service = _service(identity_store, profiles, deliveries)

    assert asyncio.run(service.status(account.id)).active is False

    profiles.profiles[account.id].temporary_credential_expires_at = NOW - timedelta(minutes=1)
    status = asyncio.run(service.status(account.id))
    assert status.active is False
    assert status.hours_remaining == 0.0


def test_reminders_target_profiles_expiring_within_window(identity_store, profiles, deliveries):
    soon = identity_store.add_account("soon@example.com")
    profiles.add_profile(soon.id, full_name="Omar", phone="77 00 11 22")
    profiles.profiles[soon.id].temporary_credential_expires_at = NOW + timedelta(minutes=40)

    later = identity_store.add_account("later@example.com")
    profiles.add_profile(later.id, phone="77001123")
    profiles.profiles[later.id].temporary_credential_expires_at = NOW + timedelta(hours=5)

    no_phone = identity_store.add_account("nophone@example.com")
    profiles.add_profile(no_phone.id, phone=None)
    profiles.profiles[no_phone.id].temporary_credential_expires_at = NOW + timedelta(minutes=10)

    service = _service(identity_store, profiles, deliveries)
    results = asyncio.run(service.send_change_reminders())

    assert [result.account_id for result in results] == [soon.id]
    assert results[0].status == "sent"
    assert results[0].phone == "+25377001122"
    assert results[0].whatsapp_url.startswith("https://wa.me/+25377001122?text=")
    assert profiles.profiles[soon.id].temporary_credential_reminded_at == NOW
    assert [record.account_id for record in deliveries.records] == [soon.id]

    assert asyncio.run(service.send_change_reminders()) == []


def test_reminder_failure_is_reported_per_profile(identity_store, profiles, deliveries):
    first = identity_store.add_account("first@example.com")
    profiles.add_profile(first.id, phone="77000001")
    profiles.profiles[first.id].temporary_credential_expires_at = NOW + timedelta(minutes=20)
    second = identity_store.add_account("second@example.com")
    profiles.add_profile(second.id, phone="77000002")
    profiles.profiles[second.id].temporary_credential_expires_at = NOW + timedelta(minutes=30)
    profiles.fail_reminder_for = {first.id}

    results = asyncio.run(_service(identity_store, profiles, deliveries).send_change_reminders())

    by_account = {result.account_id: result for result in results}
    assert by_account[first.id].status == "error"
    assert "cannot mark" in by_account[first.id].error
    assert by_account[second.id].status == "sent"


def test_explicit_now_overrides_the_service_clock(identity_store, profiles, deliveries):
    account = identity_store.add_account("user@example.com")
    profiles.add_profile(account.id, phone="77123456")
    profiles.profiles[account.id].temporary_credential_expires_at = NOW + timedelta(hours=3)
    service = _service(identity_store, profiles, deliveries)

    status = asyncio.run(service.status(account.id, now=NOW + timedelta(hours=2)))
    assert status.active is True
    assert status.hours_remaining == pytest.approx(1.0)

    assert asyncio.run(service.send_change_reminders()) == []
    later = NOW + timedelta(hours=2, minutes=30)
    results = asyncio.run(service.send_change_reminders(now=later))
    assert [result.account_id for result in results] == [account.id]
    assert profiles.profiles[account.id].temporary_credential_reminded_at == later
