from datetime import timedelta

from app.core.security import create_access_token
from app.services.auth.session_provider import BearerSessionProvider, SessionIdentity, SessionProvider

OPERATOR = SessionIdentity(user_id=1, email="operator@example.com")


class TestSessionProvider:

    def test_starts_signed_out(self):
        assert SessionProvider().get_current_session() is None

    def test_sign_in_and_out_notify_listeners(self):
        provider = SessionProvider()
        seen = []
        provider.subscribe(seen.append)

        provider.sign_in(OPERATOR)
        provider.sign_out()

        assert seen == [OPERATOR, None]
        assert provider.get_current_session() is None

    def test_unsubscribe_stops_notifications(self):
        provider = SessionProvider()
        seen = []
        subscription = provider.subscribe(seen.append)

        subscription.unsubscribe()
        subscription.unsubscribe()
        provider.sign_in(OPERATOR)

        assert seen == []
        assert not subscription.active

    def test_failing_listener_does_not_block_others(self):
        provider = SessionProvider()
        seen = []

        def broken(identity):
            raise RuntimeError("listener crashed")

        provider.subscribe(broken)
        provider.subscribe(seen.append)
        provider.sign_in(OPERATOR)

        assert seen == [OPERATOR]


class TestBearerSessionProvider:

    async def test_valid_token_resolves_user(self, db_session, user):
        token = create_access_token(user.id)
        provider = await BearerSessionProvider.from_token(db_session, token)

        identity = provider.get_current_session()
        assert identity == SessionIdentity(user_id=user.id, email=user.email)

    async def test_missing_token(self, db_session):
        provider = await BearerSessionProvider.from_token(db_session, None)
        assert provider.get_current_session() is None

    async def test_garbage_token(self, db_session):
        provider = await BearerSessionProvider.from_token(db_session, "not-a-jwt")
        assert provider.get_current_session() is None

    async def test_expired_token(self, db_session, user):
        token = create_access_token(user.id, expires_delta=timedelta(minutes=-5))
        provider = await BearerSessionProvider.from_token(db_session, token)
        assert provider.get_current_session() is None

    async def test_unknown_user(self, db_session):
        token = create_access_token(9999)
        provider = await BearerSessionProvider.from_token(db_session, token)
        assert provider.get_current_session() is None

    async def test_inactive_user(self, db_session, user):
        user.is_active = False
        await db_session.commit()

        token = create_access_token(user.id)
        provider = await BearerSessionProvider.from_token(db_session, token)
        assert provider.get_current_session() is None
