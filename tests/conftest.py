"""Pytest configuration and fixtures for medboard.

Environment is set before medboard is imported: settings validation requires
both signing secrets. Managers are built on in-memory fakes (tests/fakes.py);
API tests override the storage dependencies with the same fakes, so no
database is needed.
"""

import os

os.environ.setdefault("SECRET_KEY", "test-access-secret-0123456789abcdef")
os.environ.setdefault("REFRESH_SECRET_KEY", "test-refresh-secret-0123456789abcdef")
os.environ.setdefault("TOKEN_HASH_SECRET", "test-token-hash-secret-0123456789")
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("RATE_LIMIT_ENABLED", "false")
os.environ.setdefault("SMTP_HOST", "")

import pytest  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402

from medboard.api.v1.dependencies import (  # noqa: E402
    get_background_runner,
    get_clock,
    get_credential_store,
    get_email_dispatcher,
    get_password_hasher,
    get_refresh_ledger,
    get_reset_token_store,
    get_security_event_sink,
    get_transaction_manager,
)
from medboard.application.services import (  # noqa: E402
    PasswordChangeService,
    PasswordResetManager,
    RegistrationService,
    SessionLifecycleManager,
)
from medboard.core.config import AuthConfig  # noqa: E402
from medboard.infrastructure.persistence.database import (  # noqa: E402
    DatabaseNotConfiguredError,
    dispose_engine,
    get_session_factory,
)
from medboard.infrastructure.security import BcryptPasswordHasher, TokenCodec  # noqa: E402
from medboard.main import app  # noqa: E402
from medboard.shared.utils.background import BackgroundTaskRunner  # noqa: E402
from tests.fakes import (  # noqa: E402
    FakeClock,
    InMemoryCredentialStore,
    InMemoryDatabase,
    InMemoryPasswordResetTokenStore,
    InMemoryRefreshTokenLedger,
    InMemoryTransactionManager,
    RecordingEmailDispatcher,
    RecordingEventSink,
)

TEST_PASSWORD = "CorrectHorse42"


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def memory_db() -> InMemoryDatabase:
    return InMemoryDatabase()


@pytest.fixture
def credential_store(memory_db: InMemoryDatabase, clock: FakeClock) -> InMemoryCredentialStore:
    return InMemoryCredentialStore(memory_db, clock)


@pytest.fixture
def refresh_ledger(memory_db: InMemoryDatabase) -> InMemoryRefreshTokenLedger:
    return InMemoryRefreshTokenLedger(memory_db)


@pytest.fixture
def reset_store(
    memory_db: InMemoryDatabase, clock: FakeClock
) -> InMemoryPasswordResetTokenStore:
    return InMemoryPasswordResetTokenStore(memory_db, clock)


@pytest.fixture
def transactions(memory_db: InMemoryDatabase) -> InMemoryTransactionManager:
    return InMemoryTransactionManager(memory_db)


@pytest.fixture
def event_sink() -> RecordingEventSink:
    return RecordingEventSink()


@pytest.fixture
def email_dispatcher() -> RecordingEmailDispatcher:
    return RecordingEmailDispatcher()


@pytest.fixture
async def background() -> BackgroundTaskRunner:
    runner = BackgroundTaskRunner(timeout_seconds=1.0)
    yield runner
    await runner.wait_idle()


@pytest.fixture(scope="session")
def hasher() -> BcryptPasswordHasher:
    return BcryptPasswordHasher(rounds=4)


@pytest.fixture
def auth_config() -> AuthConfig:
    return AuthConfig()


@pytest.fixture
def codec(auth_config: AuthConfig, clock: FakeClock) -> TokenCodec:
    return TokenCodec(
        secret_key="unit-access-secret",
        refresh_secret_key="unit-refresh-secret",
        token_hash_key="unit-hash-key",
        config=auth_config,
        clock=clock,
    )


@pytest.fixture
def make_user(credential_store: InMemoryCredentialStore, hasher: BcryptPasswordHasher):
    """Seed a user whose password is TEST_PASSWORD unless given."""

    def _make(
        email: str = "doctor@example.com",
        role: str = "doctor",
        *,
        password: str = TEST_PASSWORD,
        is_active: bool = True,
        is_approved: bool = True,
    ):
        return credential_store.add_user(
            email,
            hasher.hash(password),
            role,
            is_active=is_active,
            is_approved=is_approved,
        )

    return _make


@pytest.fixture
def session_manager(
    credential_store, refresh_ledger, codec, hasher, transactions, auth_config, event_sink, clock
) -> SessionLifecycleManager:
    return SessionLifecycleManager(
        credential_store=credential_store,
        refresh_ledger=refresh_ledger,
        token_codec=codec,
        password_hasher=hasher,
        transactions=transactions,
        config=auth_config,
        event_sink=event_sink,
        clock=clock,
    )


@pytest.fixture
def reset_manager(
    credential_store,
    reset_store,
    refresh_ledger,
    codec,
    hasher,
    transactions,
    email_dispatcher,
    background,
    auth_config,
    event_sink,
    clock,
) -> PasswordResetManager:
    return PasswordResetManager(
        credential_store=credential_store,
        reset_tokens=reset_store,
        refresh_ledger=refresh_ledger,
        token_codec=codec,
        password_hasher=hasher,
        transactions=transactions,
        email_dispatcher=email_dispatcher,
        background=background,
        config=auth_config,
        event_sink=event_sink,
        clock=clock,
    )


@pytest.fixture
def registration(credential_store, hasher, transactions, event_sink) -> RegistrationService:
    return RegistrationService(credential_store, hasher, transactions, event_sink)


@pytest.fixture
def password_changes(
    credential_store, refresh_ledger, hasher, transactions, event_sink
) -> PasswordChangeService:
    return PasswordChangeService(
        credential_store, refresh_ledger, hasher, transactions, event_sink
    )


@pytest.fixture
async def client(
    credential_store,
    refresh_ledger,
    reset_store,
    transactions,
    hasher,
    clock,
    email_dispatcher,
    background,
    event_sink,
) -> AsyncClient:
    """Async HTTP client against the FastAPI app with in-memory storage."""
    app.dependency_overrides.update(
        {
            get_credential_store: lambda: credential_store,
            get_refresh_ledger: lambda: refresh_ledger,
            get_reset_token_store: lambda: reset_store,
            get_transaction_manager: lambda: transactions,
            get_password_hasher: lambda: hasher,
            get_clock: lambda: clock,
            get_email_dispatcher: lambda: email_dispatcher,
            get_background_runner: lambda: background,
            get_security_event_sink: lambda: event_sink,
        }
    )
    transport = ASGITransport(app=app)
    try:
        async with AsyncClient(transport=transport, base_url="http://test") as ac:
            yield ac
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
async def db_session():
    """Database session for repository/integration tests. Rolls back after test.

    Requires DATABASE_URL pointing at a migrated Postgres database. Skips
    when it is not configured; run without DB via: pytest -m 'not requires_db'.
    """
    try:
        session_factory = get_session_factory()
    except DatabaseNotConfiguredError:
        pytest.skip("Postgres not configured: set DATABASE_URL, then run: alembic upgrade head")
    try:
        async with session_factory() as session:
            await session.begin()
            yield session
            await session.rollback()
    finally:
        await dispose_engine()
