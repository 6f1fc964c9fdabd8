"""
Tests for the account repository and the service-level paths that the HTTP
tests cannot reach directly.

The signup race is simulated by calling create_account() for an email that
is already stored, which is exactly what a second concurrent signup does
once it has passed the service's existence check.
"""

import uuid

import pytest
from sqlalchemy.exc import InvalidRequestError

from artisan_auth.exceptions import (
    AccountNotFoundError,
    DuplicateEmailError,
    StorageFailureError,
)
from artisan_auth.repositories import AccountRepository
from artisan_auth.security import hash_password
from artisan_auth.services import auth_service


async def create(repository: AccountRepository, email: str = "maker@example.com"):
    return await repository.create_account(
        email=email,
        hashed_password=hash_password("secret1"),
        first_name="Maker",
        last_name="One",
        business_type="Jewelry",
    )


class TestCreateAccount:

    async def test_create_assigns_id_and_defaults(self, db_session):
        account = await create(AccountRepository(db_session))

        assert isinstance(account.id, uuid.UUID)
        assert account.is_email_verified is False
        assert account.created_at is not None
        assert account.business_type == "Jewelry"

    async def test_unique_index_catches_duplicate(self, session_factory):
        async with session_factory() as first:
            await create(AccountRepository(first))

        async with session_factory() as second:
            with pytest.raises(DuplicateEmailError):
                await create(AccountRepository(second))

    async def test_store_usable_after_duplicate(self, db_session):
        repository = AccountRepository(db_session)
        await create(repository)
        with pytest.raises(DuplicateEmailError):
            await create(repository)

        other = await create(repository, email="other@example.com")
        assert await repository.count() == 2
        assert other.email == "other@example.com"

    async def test_other_integrity_errors_are_storage_failures(self, db_session):
        repository = AccountRepository(db_session)

        with pytest.raises(StorageFailureError) as exc_info:
            await repository.create_account(
                email="maker@example.com",
                hashed_password=hash_password("secret1"),
                first_name=None,
                last_name="One",
            )

        assert exc_info.value.operation == "create_account"
        # Not a duplicate: the same email can still be registered
        account = await create(repository)
        assert account.email == "maker@example.com"

    async def test_ids_are_unique(self, db_session):
        repository = AccountRepository(db_session)
        a = await create(repository, "a@example.com")
        b = await create(repository, "b@example.com")

        assert a.id != b.id


class TestLookups:

    async def test_find_by_email_includes_hash(self, session_factory):
        async with session_factory() as session:
            await create(AccountRepository(session))

        async with session_factory() as session:
            account = await AccountRepository(session).find_by_email("maker@example.com")
            assert account.hashed_password.startswith("$argon2")

    async def test_find_by_id_does_not_load_hash(self, session_factory):
        async with session_factory() as session:
            account_id = (await create(AccountRepository(session))).id

        async with session_factory() as session:
            account = await AccountRepository(session).find_by_id(account_id)
            assert account.email == "maker@example.com"
            with pytest.raises(InvalidRequestError):
                account.hashed_password

    async def test_missing_lookups_return_none(self, db_session):
        repository = AccountRepository(db_session)

        assert await repository.find_by_email("nobody@example.com") is None
        assert await repository.find_by_id(uuid.uuid4()) is None


class TestUpdate:

    async def test_update_ignores_immutable_fields(self, db_session):
        repository = AccountRepository(db_session)
        account = await create(repository)
        original_id = account.id
        original_hash = account.hashed_password

        updated = await repository.update_by_id(
            account.id,
            {
                "email": "new@example.com",
                "id": uuid.uuid4(),
                "hashed_password": "x",
                "location": "Oaxaca",
            },
        )

        assert updated.id == original_id
        assert updated.email == "maker@example.com"
        assert updated.hashed_password == original_hash
        assert updated.location == "Oaxaca"

    async def test_update_cannot_verify_email(self, db_session):
        repository = AccountRepository(db_session)
        account = await create(repository)

        updated = await repository.update_by_id(account.id, {"is_email_verified": True})

        assert updated.is_email_verified is False

    async def test_update_missing_account(self, db_session):
        with pytest.raises(AccountNotFoundError):
            await AccountRepository(db_session).update_by_id(uuid.uuid4(), {"location": "x"})


async def test_get_profile_for_vanished_account(db_session):
    with pytest.raises(AccountNotFoundError):
        await auth_service.get_profile(db_session, uuid.uuid4())
