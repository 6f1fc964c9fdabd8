from artisan_auth.repositories.account_repository import AccountRepository  # noqa: F401
