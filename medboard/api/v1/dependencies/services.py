"""Auth service dependencies (composition root).

Managers are built per request from storage ports, security primitives and
process-wide collaborators kept on app.state. Settings are read here and
nowhere below: managers receive an AuthConfig.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Annotated

from fastapi import Depends, Request

from medboard.api.v1.dependencies.db import (
    get_credential_store,
    get_refresh_ledger,
    get_reset_token_store,
    get_transaction_manager,
)
from medboard.application.interfaces.repositories import (
    ICredentialStore,
    IPasswordResetTokenStore,
    IRefreshTokenLedger,
    ITransactionManager,
)
from medboard.application.interfaces.services import (
    IEmailDispatcher,
    IPasswordHasher,
    ISecurityEventSink,
    ITokenCodec,
)
from medboard.application.services import (
    PasswordChangeService,
    PasswordResetManager,
    RegistrationService,
    SessionLifecycleManager,
)
from medboard.core.config import AuthConfig, get_settings
from medboard.infrastructure.security import BcryptPasswordHasher, TokenCodec
from medboard.infrastructure.services import LoggingSecurityEventSink, build_email_dispatcher
from medboard.shared.utils.background import BackgroundTaskRunner
from medboard.shared.utils.datetime import Clock, utc_now


def get_clock() -> Clock:
    return utc_now


def get_auth_config() -> AuthConfig:
    return AuthConfig.from_settings(get_settings())


def get_token_codec(clock: Annotated[Clock, Depends(get_clock)]) -> ITokenCodec:
    return TokenCodec.from_settings(get_settings(), clock=clock)


@lru_cache
def _password_hasher(rounds: int) -> BcryptPasswordHasher:
    return BcryptPasswordHasher(rounds)


def get_password_hasher() -> IPasswordHasher:
    return _password_hasher(get_settings().bcrypt_rounds)


def get_background_runner(request: Request) -> BackgroundTaskRunner:
    """Process-wide runner created in lifespan (or lazily when lifespan did not run)."""
    runner = getattr(request.app.state, "background", None)
    if runner is None:
        runner = BackgroundTaskRunner(get_settings().email_dispatch_timeout_seconds)
        request.app.state.background = runner
    return runner


def get_email_dispatcher(request: Request) -> IEmailDispatcher:
    dispatcher = getattr(request.app.state, "email_dispatcher", None)
    if dispatcher is None:
        dispatcher = build_email_dispatcher(get_settings())
        request.app.state.email_dispatcher = dispatcher
    return dispatcher


def get_security_event_sink(request: Request) -> ISecurityEventSink:
    sink = getattr(request.app.state, "security_event_sink", None)
    if sink is None:
        sink = LoggingSecurityEventSink()
        request.app.state.security_event_sink = sink
    return sink


def get_session_manager(
    credential_store: Annotated[ICredentialStore, Depends(get_credential_store)],
    refresh_ledger: Annotated[IRefreshTokenLedger, Depends(get_refresh_ledger)],
    token_codec: Annotated[ITokenCodec, Depends(get_token_codec)],
    password_hasher: Annotated[IPasswordHasher, Depends(get_password_hasher)],
    transactions: Annotated[ITransactionManager, Depends(get_transaction_manager)],
    config: Annotated[AuthConfig, Depends(get_auth_config)],
    event_sink: Annotated[ISecurityEventSink, Depends(get_security_event_sink)],
    clock: Annotated[Clock, Depends(get_clock)],
) -> SessionLifecycleManager:
    return SessionLifecycleManager(
        credential_store=credential_store,
        refresh_ledger=refresh_ledger,
        token_codec=token_codec,
        password_hasher=password_hasher,
        transactions=transactions,
        config=config,
        event_sink=event_sink,
        clock=clock,
    )


def get_password_reset_manager(
    credential_store: Annotated[ICredentialStore, Depends(get_credential_store)],
    reset_tokens: Annotated[IPasswordResetTokenStore, Depends(get_reset_token_store)],
    refresh_ledger: Annotated[IRefreshTokenLedger, Depends(get_refresh_ledger)],
    token_codec: Annotated[ITokenCodec, Depends(get_token_codec)],
    password_hasher: Annotated[IPasswordHasher, Depends(get_password_hasher)],
    transactions: Annotated[ITransactionManager, Depends(get_transaction_manager)],
    email_dispatcher: Annotated[IEmailDispatcher, Depends(get_email_dispatcher)],
    background: Annotated[BackgroundTaskRunner, Depends(get_background_runner)],
    config: Annotated[AuthConfig, Depends(get_auth_config)],
    event_sink: Annotated[ISecurityEventSink, Depends(get_security_event_sink)],
    clock: Annotated[Clock, Depends(get_clock)],
) -> PasswordResetManager:
    return PasswordResetManager(
        credential_store=credential_store,
        reset_tokens=reset_tokens,
        refresh_ledger=refresh_ledger,
        token_codec=token_codec,
        password_hasher=password_hasher,
        transactions=transactions,
        email_dispatcher=email_dispatcher,
        background=background,
        config=config,
        event_sink=event_sink,
        clock=clock,
    )


def get_registration_service(
    credential_store: Annotated[ICredentialStore, Depends(get_credential_store)],
    password_hasher: Annotated[IPasswordHasher, Depends(get_password_hasher)],
    transactions: Annotated[ITransactionManager, Depends(get_transaction_manager)],
    event_sink: Annotated[ISecurityEventSink, Depends(get_security_event_sink)],
) -> RegistrationService:
    return RegistrationService(credential_store, password_hasher, transactions, event_sink)


def get_password_change_service(
    credential_store: Annotated[ICredentialStore, Depends(get_credential_store)],
    refresh_ledger: Annotated[IRefreshTokenLedger, Depends(get_refresh_ledger)],
    password_hasher: Annotated[IPasswordHasher, Depends(get_password_hasher)],
    transactions: Annotated[ITransactionManager, Depends(get_transaction_manager)],
    event_sink: Annotated[ISecurityEventSink, Depends(get_security_event_sink)],
) -> PasswordChangeService:
    return PasswordChangeService(
        credential_store, refresh_ledger, password_hasher, transactions, event_sink
    )
