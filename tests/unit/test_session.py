"""
Unit tests for chat session state.

Tests cover:
- History paging bounds
- Flow resets and logout
- Memory session store
"""

import pytest

from app.models.session import (
    AuthFlowState,
    ChatSession,
    HistoryPagingState,
    TransferType,
    UserRecord,
)
from app.services.session_store import MemorySessionStore


class TestHistoryPaging:
    """Test history page navigation."""

    def test_previous_never_below_one(self):
        """Previous on page 1 stays on page 1."""
        paging = HistoryPagingState()
        paging.previous()
        assert paging.page == 1

    def test_next_without_known_total(self):
        """Next advances freely before the first fetch."""
        paging = HistoryPagingState()
        paging.next()
        assert paging.page == 2

    def test_next_stops_at_last_page(self):
        """Next on the last page stays there."""
        paging = HistoryPagingState(page=3, total_pages=3)
        paging.next()
        assert paging.page == 3

    def test_next_with_zero_pages(self):
        """A zero page count never moves the page below 1."""
        paging = HistoryPagingState(page=1, total_pages=0)
        paging.next()
        assert paging.page == 1

    def test_previous_then_next(self):
        """Navigation is symmetric inside the bounds."""
        paging = HistoryPagingState(page=2, total_pages=4)
        paging.next()
        paging.previous()
        assert paging.page == 2


class TestChatSession:
    """Test session lifecycle."""

    def test_guest_is_not_authenticated(self, guest_session):
        assert guest_session.is_authenticated is False

    def test_user_without_token_is_not_authenticated(self, guest_session):
        """A user record alone is not a login."""
        guest_session.user = UserRecord(user_id="1", email="a@b.co")
        assert guest_session.is_authenticated is False

    def test_logged_in(self, logged_in_session):
        assert logged_in_session.is_authenticated is True

    def test_reset_flows(self, logged_in_session):
        """Reset drops auth, transfer and deposit scratch data."""
        session = logged_in_session
        session.auth = AuthFlowState(email="a@b.co", awaiting_otp=True, sid="sid")
        session.transfer.type = TransferType.EMAIL
        session.transfer.recipient = "bob@example.com"
        session.deposit.chain_id = "137"

        session.reset_flows()

        assert session.auth is None
        assert session.transfer.is_empty
        assert session.deposit.chain_id is None
        assert session.is_authenticated is True

    def test_logout(self, logged_in_session):
        """Logout clears user, token, flows and paging."""
        session = logged_in_session
        session.history.page = 4
        session.wallet_addresses = ["0xabc"]

        session.logout()

        assert session.user is None
        assert session.credentials.has_token is False
        assert session.history.page == 1
        assert session.wallet_addresses == []


class TestMemorySessionStore:
    """Test session store."""

    @pytest.mark.asyncio
    async def test_get_creates_once(self):
        """Sessions are created lazily and reused."""
        store = MemorySessionStore()
        first = await store.get(1)
        second = await store.get(1)
        assert first is second
        assert len(store) == 1

    @pytest.mark.asyncio
    async def test_chats_are_isolated(self):
        """Each chat has its own token store."""
        store = MemorySessionStore()
        a = await store.get(1)
        b = await store.get(2)
        a.credentials.set_token("token-a")
        assert b.credentials.has_token is False

    @pytest.mark.asyncio
    async def test_save_and_all(self):
        store = MemorySessionStore()
        await store.save(ChatSession(chat_id=7))
        sessions = await store.all()
        assert [s.chat_id for s in sessions] == [7]
