"""Service dependency providers."""

from fastapi import Depends

from djibgo.core.config import Settings, get_settings
from djibgo.modules.accounts import AccountService, IdentityStore
from djibgo.modules.deliveries import DeliveryLogRepository
from djibgo.modules.profiles import ProfileRepository
from djibgo.modules.temporary_credentials import (
    IssuancePolicy,
    ReadBackPolicy,
    TemporaryCredentialService,
)

from .stores import get_delivery_log_repository, get_identity_store, get_profile_repository


def build_issuance_policy(settings: Settings) -> IssuancePolicy:
    issuance = settings.issuance
    return IssuancePolicy(
        validity=issuance.validity,
        default_country_prefix=issuance.default_country_prefix,
        self_test_enabled=issuance.self_test_enabled,
        lease_seconds=issuance.lease_seconds,
        read_back=ReadBackPolicy(
            attempts=issuance.read_back_attempts,
            initial_delay=issuance.read_back_initial_delay,
            multiplier=issuance.read_back_multiplier,
            max_delay=issuance.read_back_max_delay,
        ),
        reminder_window=issuance.reminder_window,
    )


def get_account_service(
    identity: IdentityStore = Depends(get_identity_store),
    profiles: ProfileRepository = Depends(get_profile_repository),
) -> AccountService:
    return AccountService(identity, profiles)


def get_temporary_credential_service(
    identity: IdentityStore = Depends(get_identity_store),
    profiles: ProfileRepository = Depends(get_profile_repository),
    deliveries: DeliveryLogRepository = Depends(get_delivery_log_repository),
    settings: Settings = Depends(get_settings),
) -> TemporaryCredentialService:
    return TemporaryCredentialService(identity, profiles, deliveries, build_issuance_policy(settings))


__all__ = [
    "build_issuance_policy",
    "get_account_service",
    "get_temporary_credential_service",
]
