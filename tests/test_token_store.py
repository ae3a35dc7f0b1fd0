"""Tests for the Redis-backed token store."""

import pytest

from common.exceptions import StoreUnavailableError


class TestTokenStore:

    def test_alive_by_default(self, token_store):
        assert token_store.is_alive() is True

    @pytest.mark.asyncio
    async def test_set_get_delete(self, token_store, fake_redis):
        await token_store.set('auth_abc', 'user-1', 86400)

        assert await token_store.get('auth_abc') == 'user-1'
        assert fake_redis.ttls['auth_abc'] == 86400

        await token_store.delete('auth_abc')
        assert await token_store.get('auth_abc') is None

    @pytest.mark.asyncio
    async def test_delete_missing_key_is_not_an_error(self, token_store):
        await token_store.delete('auth_missing')

    @pytest.mark.asyncio
    async def test_get_missing_key(self, token_store):
        assert await token_store.get('auth_missing') is None

    @pytest.mark.asyncio
    async def test_connection_failure_raises_and_marks_dead(self, token_store, fake_redis):
        fake_redis.down = True

        with pytest.raises(StoreUnavailableError):
            await token_store.get('auth_abc')
        assert token_store.is_alive() is False

    @pytest.mark.asyncio
    async def test_recovers_after_successful_command(self, token_store, fake_redis):
        fake_redis.down = True
        with pytest.raises(StoreUnavailableError):
            await token_store.set('auth_abc', 'user-1', 10)

        fake_redis.down = False
        await token_store.set('auth_abc', 'user-1', 10)
        assert token_store.is_alive() is True

    @pytest.mark.asyncio
    async def test_connect_reports_ping_result(self, token_store, fake_redis):
        assert await token_store.connect() is True

        fake_redis.down = True
        assert await token_store.connect() is False
        assert token_store.is_alive() is False

    @pytest.mark.asyncio
    async def test_close(self, token_store, fake_redis):
        await token_store.close()
        assert fake_redis.closed is True
