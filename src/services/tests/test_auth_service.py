"""Unit tests for auth_service: register, authenticate, get_current_user."""

import unittest
import sys
from pathlib import Path

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from services.auth_service import authenticate, get_current_user, normalize_email, register
from adapter.fake.user_repository import FakeUserRepository
from domain.model.errors import (
    DuplicateEmailError,
    InvalidCredentialsError,
    UnauthenticatedError,
    ValidationError,
)
from domain.model.session import AuthContext


class TestRegister(unittest.TestCase):

    def setUp(self):
        self.repo = FakeUserRepository()

    def test_register_success(self):
        user = register(self.repo, name='John', email='john@x.com', password='pw')

        self.assertIsNotNone(user.id)
        self.assertEqual(user.name, 'John')
        self.assertEqual(user.email, 'john@x.com')
        self.assertIn(user.id, self.repo.store)

    def test_register_hashes_password(self):
        user = register(self.repo, name='John', email='john@x.com', password='pw')

        self.assertNotEqual(user.password_hash, 'pw')
        self.assertTrue(user.password_hash.startswith('$2'))

    def test_register_duplicate_email_raises(self):
        register(self.repo, name='John', email='john@x.com', password='pw')

        with self.assertRaises(DuplicateEmailError) as ctx:
            register(self.repo, name='Johnny', email='john@x.com', password='other')
        self.assertEqual(str(ctx.exception), 'Email already exists')

    def test_register_duplicate_email_is_case_insensitive(self):
        register(self.repo, name='John', email='john@x.com', password='pw')

        with self.assertRaises(DuplicateEmailError):
            register(self.repo, name='John', email='  JOHN@X.com ', password='pw')

    def test_register_stores_canonical_email(self):
        user = register(self.repo, name='John', email='John@X.COM', password='pw')
        self.assertEqual(user.email, 'john@x.com')

    def test_register_rejects_blank_name(self):
        with self.assertRaises(ValidationError):
            register(self.repo, name='  ', email='john@x.com', password='pw')

    def test_register_rejects_malformed_email(self):
        with self.assertRaises(ValidationError):
            register(self.repo, name='John', email='not-an-email', password='pw')

    def test_register_rejects_consecutive_dots_in_local_part(self):
        with self.assertRaises(ValidationError):
            register(self.repo, name='John', email='john..doe@x.com', password='pw')
        self.assertEqual(self.repo.store, {})

    def test_register_rejects_empty_password(self):
        with self.assertRaises(ValidationError):
            register(self.repo, name='John', email='john@x.com', password='')
        self.assertEqual(self.repo.store, {})


class TestAuthenticate(unittest.TestCase):

    def setUp(self):
        self.repo = FakeUserRepository()
        self.user = register(self.repo, name='John', email='john@x.com', password='Password123!')

    def test_authenticate_success(self):
        user = authenticate(self.repo, email='john@x.com', password='Password123!')
        self.assertEqual(user.id, self.user.id)

    def test_authenticate_normalizes_email(self):
        user = authenticate(self.repo, email='JOHN@x.com ', password='Password123!')
        self.assertEqual(user.id, self.user.id)

    def test_wrong_password_and_unknown_email_are_indistinguishable(self):
        with self.assertRaises(InvalidCredentialsError) as wrong_password:
            authenticate(self.repo, email='john@x.com', password='WrongPassword')
        with self.assertRaises(InvalidCredentialsError) as unknown_email:
            authenticate(self.repo, email='nobody@x.com', password='Password123!')

        self.assertEqual(str(wrong_password.exception), str(unknown_email.exception))
        self.assertEqual(str(wrong_password.exception), 'Invalid credentials')


class TestGetCurrentUser(unittest.TestCase):

    def setUp(self):
        self.repo = FakeUserRepository()
        self.user = register(self.repo, name='John', email='john@x.com', password='pw')

    def test_returns_session_user(self):
        user = get_current_user(self.repo, AuthContext(user_id=self.user.id))
        self.assertEqual(user.email, 'john@x.com')

    def test_anonymous_raises(self):
        with self.assertRaises(UnauthenticatedError):
            get_current_user(self.repo, AuthContext())

    def test_session_for_missing_user_raises(self):
        with self.assertRaises(UnauthenticatedError):
            get_current_user(self.repo, AuthContext(user_id='ghost'))


class TestNormalizeEmail(unittest.TestCase):

    def test_normalize_email(self):
        self.assertEqual(normalize_email(' Foo@Bar.COM '), 'foo@bar.com')
        self.assertEqual(normalize_email(None), '')


if __name__ == '__main__':
    unittest.main()
