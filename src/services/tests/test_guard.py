"""Unit tests for the authorization guard."""

import unittest

from services.guard import ensure_owner, require_user
from domain.model.errors import NotFoundError, UnauthenticatedError
from domain.model.session import ANONYMOUS, AuthContext
from domain.model.task import Task


class TestRequireUser(unittest.TestCase):

    def test_returns_user_id(self):
        self.assertEqual(require_user(AuthContext(user_id='user-1', session_token='t')), 'user-1')

    def test_anonymous_raises_with_login_message(self):
        for auth in (None, ANONYMOUS, AuthContext(session_token='stale-token')):
            with self.subTest(auth=auth):
                with self.assertRaises(UnauthenticatedError) as ctx:
                    require_user(auth)
                self.assertEqual(str(ctx.exception), 'Authentication required. Please log in.')


class TestEnsureOwner(unittest.TestCase):

    def setUp(self):
        self.task = Task(id='task-1', title='T', user_id='owner')

    def test_owner_passes(self):
        self.assertIs(ensure_owner('owner', self.task), self.task)

    def test_missing_and_foreign_are_the_same_error(self):
        with self.assertRaises(NotFoundError) as missing:
            ensure_owner('owner', None, 'gone')
        with self.assertRaises(NotFoundError) as foreign:
            ensure_owner('intruder', self.task, 'gone')

        self.assertEqual(str(missing.exception), str(foreign.exception))
