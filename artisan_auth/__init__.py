"""Artisan Auth API: account signup, login and profile management."""
