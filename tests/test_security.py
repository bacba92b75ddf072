import unittest
from datetime import timedelta
from unittest.mock import patch

import jwt

from support import ADMIN, STUDENT

from freezer.config import get_settings
from freezer.core.errors import AuthError
from freezer.core.security import (
    authenticate_request,
    create_access_token,
    decode_access_token,
)


class AccessTokenTest(unittest.TestCase):
    def setUp(self):
        patcher = patch.object(get_settings(), "JWT_SECRET", "test-secret")
        patcher.start()
        self.addCleanup(patcher.stop)

    def test_round_trip(self):
        token = create_access_token(ADMIN)
        self.assertEqual(decode_access_token(token), ADMIN)

    def test_expired_token(self):
        token = create_access_token(STUDENT, expires_in=timedelta(seconds=-5))
        with self.assertRaises(AuthError) as ctx:
            decode_access_token(token)
        self.assertEqual(str(ctx.exception), "Token expired")

    def test_wrong_secret(self):
        token = jwt.encode({"sub": "x", "role": "student", "exp": 9999999999}, "other", algorithm="HS256")
        with self.assertRaises(AuthError) as ctx:
            decode_access_token(token)
        self.assertEqual(str(ctx.exception), "Invalid token")

    def test_unknown_role(self):
        token = jwt.encode({"sub": "x", "role": "janitor", "exp": 9999999999}, "test-secret", algorithm="HS256")
        with self.assertRaises(AuthError) as ctx:
            decode_access_token(token)
        self.assertEqual(str(ctx.exception), "Unknown role")

    def test_bearer_header_preferred_over_cookie(self):
        header = "Bearer {}".format(create_access_token(ADMIN))
        cookie = create_access_token(STUDENT)
        self.assertEqual(authenticate_request(header, cookie), ADMIN)
        self.assertEqual(authenticate_request(None, cookie), STUDENT)
        self.assertEqual(authenticate_request("Basic abc", cookie), STUDENT)

    def test_missing_credentials(self):
        with self.assertRaises(AuthError) as ctx:
            authenticate_request(None, None)
        self.assertEqual(str(ctx.exception), "Not authenticated")


class UnconfiguredSecretTest(unittest.TestCase):
    def test_tokens_need_a_secret(self):
        with patch.object(get_settings(), "JWT_SECRET", None):
            with self.assertRaises(AuthError) as ctx:
                create_access_token(STUDENT)
        self.assertEqual(str(ctx.exception), "JWT auth is not configured")


if __name__ == "__main__":
    unittest.main()
