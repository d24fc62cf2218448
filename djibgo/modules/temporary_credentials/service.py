"""Temporary password issuance over WhatsApp.

The flow for one request is::

    LOOKUP -> VERIFIED_PHONE -> CREDENTIAL_ISSUED -> SELF_TEST (non-blocking)
           -> DELIVERY_LINK_BUILT -> DONE

Nothing is written before ``CREDENTIAL_ISSUED`` apart from the per-account
issuance lease. Once the identity store has accepted the new password there is
no rollback: later failures are logged and the caller still gets a link.
"""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timedelta, timezone
from typing import Awaitable, Callable, Optional

from djibgo.modules.accounts import (
    Account,
    IdentityStore,
    IdentityStoreError,
    InvalidCredentialsError,
)
from djibgo.modules.deliveries import (
    STATUS_SENT,
    WHATSAPP_CHANNEL,
    DeliveryLogError,
    DeliveryLogRepository,
)
from djibgo.modules.profiles import Profile, ProfileRepository, ProfileStoreError

from . import messages
from .exceptions import (
    AccountLookupError,
    IssuanceConflictError,
    IssuanceFailedError,
    LookupFailedError,
    MissingFieldError,
    PhoneMismatchError,
)
from .generator import generate_temporary_password
from .models import (
    IssuancePolicy,
    ReminderResult,
    TemporaryCredentialIssue,
    TemporaryCredentialStatus,
)
from .phone import format_for_whatsapp, normalize_for_comparison, phones_match

logger = logging.getLogger(__name__)

EMAIL_REQUIRED = "Email requis"
PHONE_REQUIRED = "Numéro de téléphone requis"
ACCOUNT_NOT_FOUND = "Aucun compte trouvé avec cette adresse email"
PROFILE_NOT_FOUND = "Profil utilisateur non trouvé"
PHONE_MISMATCH = "Le numéro de téléphone ne correspond pas à celui enregistré pour ce compte"
LOOKUP_FAILED = "Erreur lors de la recherche de l'utilisateur"
ISSUANCE_FAILED = "Erreur lors de la génération du mot de passe temporaire"
ISSUANCE_IN_PROGRESS = "Une demande de mot de passe temporaire est déjà en cours pour ce compte"
SUCCESS_MESSAGE = (
    "Mot de passe temporaire généré avec succès. Utilisez-le immédiatement pour vous connecter."
)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class TemporaryCredentialService:
    """Issues six digit temporary passwords and reminds users to replace them."""

    def __init__(
        self,
        identity: IdentityStore,
        profiles: ProfileRepository,
        deliveries: DeliveryLogRepository,
        policy: IssuancePolicy | None = None,
        *,
        clock: Callable[[], datetime] = _utcnow,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        password_factory: Callable[[], str] = generate_temporary_password,
    ) -> None:
        self._identity = identity
        self._profiles = profiles
        self._deliveries = deliveries
        self._policy = policy or IssuancePolicy()
        self._clock = clock
        self._sleep = sleep
        self._password_factory = password_factory

    @property
    def policy(self) -> IssuancePolicy:
        return self._policy

    async def issue(self, email: Optional[str], phone: Optional[str]) -> TemporaryCredentialIssue:
        if not email:
            raise MissingFieldError(EMAIL_REQUIRED)
        if not phone or not normalize_for_comparison(phone):
            raise MissingFieldError(PHONE_REQUIRED)

        account, profile = await self._lookup(email, phone)

        now = self._clock()
        lease_until = now + timedelta(seconds=self._policy.lease_seconds)
        try:
            claimed = await self._profiles.claim_issuance(account.id, now=now, lease_until=lease_until)
        except ProfileStoreError as exc:
            logger.error("Could not claim issuance lease for %s: %s", account.id, exc)
            raise LookupFailedError(LOOKUP_FAILED) from exc
        if not claimed:
            logger.warning("Issuance already in flight for account %s", account.id)
            raise IssuanceConflictError(ISSUANCE_IN_PROGRESS, retry_after=self._policy.lease_seconds)

        try:
            return await self._issue_claimed(account, profile, email, phone)
        finally:
            try:
                await self._profiles.release_issuance(account.id)
            except ProfileStoreError as exc:
                logger.warning("Lease release failed for %s, it will lapse: %s", account.id, exc)

    async def _lookup(self, email: str, phone: str) -> tuple[Account, Profile]:
        try:
            account = await self._identity.find_by_email(email)
        except IdentityStoreError as exc:
            logger.error("Identity lookup failed: %s", exc)
            raise LookupFailedError(LOOKUP_FAILED) from exc
        if account is None:
            logger.info("No account for requested email")
            raise AccountLookupError(ACCOUNT_NOT_FOUND)

        try:
            profile = await self._profiles.get_profile(account.id)
        except ProfileStoreError as exc:
            logger.error("Profile lookup failed for %s: %s", account.id, exc)
            raise LookupFailedError(LOOKUP_FAILED) from exc
        if profile is None:
            logger.info("Account %s has no profile", account.id)
            raise AccountLookupError(PROFILE_NOT_FOUND)

        # An empty stored phone skips verification entirely.
        if profile.phone and not phones_match(phone, profile.phone):
            logger.info(
                "Phone mismatch for %s: claimed=%s stored=%s",
                account.id,
                normalize_for_comparison(phone),
                normalize_for_comparison(profile.phone),
            )
            raise PhoneMismatchError(PHONE_MISMATCH)
        return account, profile

    async def _issue_claimed(
        self,
        account: Account,
        profile: Profile,
        email: str,
        phone: str,
    ) -> TemporaryCredentialIssue:
        password = self._password_factory()
        issued_at = self._clock()
        try:
            await self._identity.update_credential(
                account.id,
                password=password,
                at=issued_at,
                confirm_email=True,
                confirm_phone=True,
                clear_ban=True,
            )
        except IdentityStoreError as exc:
            logger.error("Identity store rejected credential update for %s: %s", account.id, exc)
            raise IssuanceFailedError(str(exc) or ISSUANCE_FAILED) from exc
        logger.info("Temporary password installed for account %s", account.id)

        await self._verify_read_back(account.id, issued_at)

        expires_at = issued_at + self._policy.validity
        try:
            await self._profiles.update_temporary_credential(
                account.id, expires_at=expires_at, issued_at=issued_at
            )
        except ProfileStoreError as exc:
            logger.error("Expiry bookkeeping failed for %s (non-blocking): %s", account.id, exc)

        self_test_passed: Optional[bool] = None
        if self._policy.self_test_enabled:
            self_test_passed = await self._self_test(account.id, email, password)

        delivery_phone = format_for_whatsapp(phone, self._policy.default_country_prefix)
        text = messages.build_temporary_password_message(
            profile.full_name or account.full_name,
            email,
            password,
            validity_hours=int(self._policy.validity.total_seconds() // 3600),
        )
        whatsapp_url = messages.build_whatsapp_url(delivery_phone, text)
        await self._record_delivery(account.id, delivery_phone, messages.TEMPORARY_PASSWORD_LOG_SUMMARY)

        logger.info("WhatsApp link built for account %s to %s", account.id, delivery_phone)
        return TemporaryCredentialIssue(
            account_id=account.id,
            whatsapp_url=whatsapp_url,
            phone=delivery_phone,
            expires_at=expires_at,
            self_test_passed=self_test_passed,
        )

    async def _verify_read_back(self, account_id: str, issued_at: datetime) -> bool:
        delays = self._policy.read_back.delays()
        for attempt in range(self._policy.read_back.attempts):
            if attempt:
                await self._sleep(delays[attempt - 1])
            try:
                account = await self._identity.get_by_id(account_id)
            except IdentityStoreError as exc:
                logger.warning("Read-back attempt %d failed for %s: %s", attempt + 1, account_id, exc)
                continue
            if account is not None and self._write_visible(account, issued_at):
                logger.debug("Read-back confirmed for %s on attempt %d", account_id, attempt + 1)
                return True
        logger.warning("Read-back never observed the credential update for %s", account_id)
        return False

    @staticmethod
    def _write_visible(account: Account, issued_at: datetime) -> bool:
        if not (account.email_confirmed and account.phone_confirmed):
            return False
        if account.is_banned(issued_at):
            return False
        return account.updated_at is None or account.updated_at >= issued_at

    async def _self_test(self, account_id: str, email: str, password: str) -> bool:
        try:
            session = await self._identity.sign_in(email, password)
        except (InvalidCredentialsError, IdentityStoreError) as exc:
            logger.warning("Self-test sign-in failed for %s, continuing: %s", account_id, exc)
            return False
        try:
            await self._identity.sign_out(session.id)
        except IdentityStoreError as exc:
            logger.warning("Self-test session %s not closed: %s", session.id, exc)
        logger.info("Self-test sign-in succeeded for %s", account_id)
        return True

    async def _record_delivery(self, account_id: str, phone: str, summary: str) -> None:
        try:
            await self._deliveries.append_delivery_record(
                account_id=account_id,
                phone_number=phone,
                message=summary,
                channel=WHATSAPP_CHANNEL,
                status=STATUS_SENT,
            )
        except DeliveryLogError as exc:
            logger.error("Delivery record not written for %s: %s", account_id, exc)

    async def status(self, account_id: str, now: Optional[datetime] = None) -> TemporaryCredentialStatus:
        profile = await self._profiles.get_profile(account_id)
        if profile is None:
            raise AccountLookupError(PROFILE_NOT_FOUND)
        now = now or self._clock()
        if not profile.has_active_temporary_credential(now):
            return TemporaryCredentialStatus(
                active=False, expires_at=profile.temporary_credential_expires_at
            )
        remaining = profile.temporary_credential_expires_at - now
        return TemporaryCredentialStatus(
            active=True,
            expires_at=profile.temporary_credential_expires_at,
            hours_remaining=remaining.total_seconds() / 3600,
        )

    async def send_change_reminders(self, now: Optional[datetime] = None) -> list[ReminderResult]:
        """Build reminder links for temporary passwords about to expire.

        ``now`` defaults to the service clock.
        """
        now = now or self._clock()
        window_end = now + self._policy.reminder_window
        minutes = int(self._policy.reminder_window.total_seconds() // 60)
        profiles = await self._profiles.list_expiring(now=now, window_end=window_end)

        results: list[ReminderResult] = []
        for profile in profiles:
            if not profile.phone:
                logger.info("No phone for account %s, reminder skipped", profile.id)
                continue
            phone = format_for_whatsapp(profile.phone, self._policy.default_country_prefix)
            text = messages.build_reminder_message(profile.full_name, minutes=minutes)
            whatsapp_url = messages.build_whatsapp_url(phone, text)
            try:
                await self._deliveries.append_delivery_record(
                    account_id=profile.id,
                    phone_number=phone,
                    message=messages.REMINDER_LOG_SUMMARY,
                    channel=WHATSAPP_CHANNEL,
                    status=STATUS_SENT,
                )
                await self._profiles.mark_reminded(profile.id, now)
            except (DeliveryLogError, ProfileStoreError) as exc:
                logger.error("Reminder failed for %s: %s", profile.id, exc)
                results.append(ReminderResult(account_id=profile.id, status="error", error=str(exc)))
                continue
            results.append(
                ReminderResult(
                    account_id=profile.id,
                    status=STATUS_SENT,
                    phone=phone,
                    whatsapp_url=whatsapp_url,
                )
            )
        return results
