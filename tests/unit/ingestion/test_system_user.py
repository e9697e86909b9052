"""
Unit tests for system user provisioning.
"""

from eventmaster.ingestion.system_user import ensure_system_user

EMAIL = "ticketmaster@eventmaster.local"


class TestEnsureSystemUser:
    """Tests for ensure_system_user."""

    def test_creates_when_missing(self, user_repo):
        """Should create the user on first call."""
        user_id = ensure_system_user(user_repo, EMAIL)
        assert user_id
        assert user_repo.find_by_email(EMAIL).id == user_id

    def test_reuses_existing(self, user_repo):
        """Should return the same id on later calls."""
        first = ensure_system_user(user_repo, EMAIL)
        second = ensure_system_user(user_repo, EMAIL)
        assert first == second
        assert len(user_repo.users) == 1
