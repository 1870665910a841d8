"""Unit tests for bearer token handling."""

from datetime import timedelta
from unittest.mock import MagicMock
from uuid import uuid4

import pytest
from fastapi import HTTPException
from fastapi.security import HTTPAuthorizationCredentials

from app.core.security import create_access_token, decode_access_token, get_current_user


def _credentials(token):
    return HTTPAuthorizationCredentials(scheme="Bearer", credentials=token)


class TestTokens:

    def test_token_carries_user_id(self):
        user_id = uuid4()
        assert decode_access_token(create_access_token(user_id)) == user_id

    def test_expired_token(self):
        token = create_access_token(uuid4(), expires_delta=timedelta(minutes=-5))
        assert decode_access_token(token) is None

    def test_garbage_token(self):
        assert decode_access_token("not-a-token") is None


class TestCurrentUser:

    @pytest.mark.asyncio
    async def test_loads_user(self, mock_db, teacher):
        result = MagicMock()
        result.scalar_one_or_none.return_value = teacher
        mock_db.execute.return_value = result

        user = await get_current_user(_credentials(create_access_token(teacher.id)), mock_db)

        assert user is teacher

    @pytest.mark.asyncio
    async def test_unknown_user(self, mock_db):
        result = MagicMock()
        result.scalar_one_or_none.return_value = None
        mock_db.execute.return_value = result

        with pytest.raises(HTTPException) as exc:
            await get_current_user(_credentials(create_access_token(uuid4())), mock_db)

        assert exc.value.status_code == 401

    @pytest.mark.asyncio
    async def test_inactive_user(self, mock_db, teacher):
        teacher.is_active = False
        result = MagicMock()
        result.scalar_one_or_none.return_value = teacher
        mock_db.execute.return_value = result

        with pytest.raises(HTTPException):
            await get_current_user(_credentials(create_access_token(teacher.id)), mock_db)
