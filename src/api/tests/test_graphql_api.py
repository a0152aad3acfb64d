"""Tests for the GraphQL endpoint."""

import asyncio
import unittest
from unittest.mock import patch

from fastapi.testclient import TestClient
from strawberry.extensions import MaskErrors, SchemaExtension

from api.main import app
from api.dependencies import get_session_store, get_task_repo, get_user_repo
from api.gql.schema import schema
from api.security import SESSION_COOKIE_NAME
from adapter.fake.session_store import FakeSessionStore
from adapter.fake.task_repository import FakeTaskRepository
from adapter.fake.user_repository import FakeUserRepository
from domain.model.errors import StorageError
from services.auth_service import register

AUTH_REQUIRED = 'Authentication required. Please log in.'


def _event_loop_running():
    try:
        asyncio.get_running_loop()
    except RuntimeError:
        return False
    return True


class GraphQLTestCase(unittest.TestCase):

    def setUp(self):
        self.user_repo = FakeUserRepository()
        self.task_repo = FakeTaskRepository()
        self.session_store = FakeSessionStore()
        app.dependency_overrides[get_user_repo] = lambda: self.user_repo
        app.dependency_overrides[get_task_repo] = lambda: self.task_repo
        app.dependency_overrides[get_session_store] = lambda: self.session_store
        self.client = TestClient(app)

    def tearDown(self):
        app.dependency_overrides.clear()

    def gql(self, query, variables=None, client=None):
        client = client or self.client
        response = client.post('/graphql', json={'query': query, 'variables': variables or {}})
        self.assertEqual(response.status_code, 200)
        return response.json()

    def login(self, email='john@example.com', password='password123', client=None):
        return self.gql(
            'mutation($e: String!, $p: String!) { login(email: $e, password: $p) }',
            {'e': email, 'p': password},
            client=client,
        )

    def create_task(self, title='Test Task', client=None, **extra):
        args = ', '.join([f'title: "{title}"'] + [f'{k}: "{v}"' for k, v in extra.items()])
        return self.gql(f'mutation {{ createTask({args}) {{ id title description status userId }} }}', client=client)


class TestAuthMutations(GraphQLTestCase):

    def test_signup_returns_user(self):
        body = self.gql('mutation { signup(name: "John", email: "john@x.com", password: "pw") { id name email } }')

        self.assertNotIn('errors', body)
        self.assertEqual(body['data']['signup']['email'], 'john@x.com')
        self.assertEqual(len(self.user_repo.store), 1)

    def test_signup_rejects_email_that_rest_rejects(self):
        rest = self.client.post('/auth/signup', json={'name': 'John', 'email': 'john..doe@x.com', 'password': 'pw'})
        body = self.gql('mutation { signup(name: "John", email: "john..doe@x.com", password: "pw") { id } }')

        self.assertEqual(rest.status_code, 400)
        self.assertEqual(body['errors'][0]['message'], 'A valid email is required')
        self.assertIsNone(body['data']['signup'])
        self.assertEqual(self.user_repo.store, {})

    def test_signup_duplicate_email(self):
        query = 'mutation { signup(name: "John", email: "john@x.com", password: "pw") { id } }'
        self.gql(query)

        body = self.gql(query)

        self.assertEqual(body['errors'][0]['message'], 'Email already exists')

    def test_login_sets_session_cookie(self):
        register(self.user_repo, name='John Doe', email='john@example.com', password='password123')

        body = self.login()

        self.assertEqual(body['data']['login'], 'Login successful')
        self.assertIn(SESSION_COOKIE_NAME, self.client.cookies)
        me = self.gql('{ me { name email } }')
        self.assertEqual(me['data']['me']['email'], 'john@example.com')

    def test_login_invalid_credentials(self):
        register(self.user_repo, name='John Doe', email='john@example.com', password='password123')

        body = self.login(password='wrong')

        self.assertIsNone(body['data'])
        self.assertEqual(body['errors'][0]['message'], 'Invalid credentials')
        self.assertNotIn(SESSION_COOKIE_NAME, self.client.cookies)

    def test_logout(self):
        register(self.user_repo, name='John Doe', email='john@example.com', password='password123')
        self.login()

        body = self.gql('mutation { logout }')

        self.assertEqual(body['data']['logout'], 'Logout successful')
        self.assertEqual(self.session_store.store, {})
        me = self.gql('{ me { id } }')
        self.assertEqual(me['errors'][0]['message'], AUTH_REQUIRED)

    def test_logout_requires_session(self):
        body = self.gql('mutation { logout }')
        self.assertEqual(body['errors'][0]['message'], AUTH_REQUIRED)


class TestTaskOperations(GraphQLTestCase):

    def setUp(self):
        super().setUp()
        register(self.user_repo, name='John Doe', email='john@example.com', password='password123')
        self.login()

    def test_unauthenticated_create_task(self):
        anonymous = TestClient(app)

        body = self.create_task(title='Unauthorized Task', client=anonymous, description='No auth')

        self.assertEqual(body['errors'][0]['message'], AUTH_REQUIRED)
        self.assertEqual(self.task_repo.store, {})

    def test_create_get_update_delete(self):
        created = self.create_task(description='This is a test task', status='pending')['data']['createTask']
        task_id = created['id']
        self.assertEqual(created['status'], 'pending')

        fetched = self.gql('query($id: ID!) { getTask(id: $id) { title description status } }', {'id': task_id})
        self.assertEqual(fetched['data']['getTask']['title'], 'Test Task')

        updated = self.gql(
            'mutation($id: ID!) { updateTask(id: $id, title: "Updated Task", status: "completed") '
            '{ title description status } }',
            {'id': task_id},
        )['data']['updateTask']
        self.assertEqual(updated['title'], 'Updated Task')
        self.assertEqual(updated['status'], 'completed')
        self.assertEqual(updated['description'], 'This is a test task')

        deleted = self.gql('mutation($id: ID!) { deleteTask(id: $id) }', {'id': task_id})
        self.assertEqual(deleted['data']['deleteTask'], 'Task deleted successfully')

        again = self.gql('mutation($id: ID!) { deleteTask(id: $id) }', {'id': task_id})
        self.assertIn('does not exist', again['errors'][0]['message'])

    def test_update_with_null_description_clears_it(self):
        task_id = self.create_task(description='temp')['data']['createTask']['id']

        body = self.gql('mutation($id: ID!) { updateTask(id: $id, description: null) { description title } }',
                        {'id': task_id})

        self.assertIsNone(body['data']['updateTask']['description'])
        self.assertEqual(body['data']['updateTask']['title'], 'Test Task')

    def test_create_task_defaults_status(self):
        created = self.create_task()['data']['createTask']
        self.assertEqual(created['status'], 'pending')

    def test_create_task_invalid_status(self):
        body = self.create_task(status='someday')
        self.assertIn('Invalid status', body['errors'][0]['message'])

    def test_get_tasks_lists_only_own(self):
        self.create_task(title='Mine')
        self.task_repo.create('someone-else', 'Theirs')

        body = self.gql('{ getTasks { title } }')

        self.assertEqual([t['title'] for t in body['data']['getTasks']], ['Mine'])

    def test_other_user_cannot_see_or_touch_task(self):
        task_id = self.create_task()['data']['createTask']['id']

        register(self.user_repo, name='Bob', email='bob@example.com', password='bobpass')
        bob = TestClient(app)
        self.login(email='bob@example.com', password='bobpass', client=bob)

        fetched = self.gql('query($id: ID!) { getTask(id: $id) { id } }', {'id': task_id}, client=bob)
        self.assertIsNone(fetched['data']['getTask'])

        updated = self.gql('mutation($id: ID!) { updateTask(id: $id, title: "x") { id } }', {'id': task_id}, client=bob)
        self.assertEqual(
            updated['errors'][0]['message'],
            'Task does not exist or you do not have permission to modify it.',
        )

        deleted = self.gql('mutation($id: ID!) { deleteTask(id: $id) }', {'id': task_id}, client=bob)
        self.assertIn('does not exist', deleted['errors'][0]['message'])
        self.assertIn(task_id, self.task_repo.store)

    def test_missing_task_is_null(self):
        body = self.gql('{ getTask(id: "nonexistent") { id } }')
        self.assertNotIn('errors', body)
        self.assertIsNone(body['data']['getTask'])

    def test_storage_errors_are_masked(self):
        with patch.object(self.task_repo, 'list_by_owner', side_effect=StorageError('disk on fire')):
            body = self.gql('{ getTasks { id } }')

        self.assertEqual(body['errors'][0]['message'], 'Internal server error')

    def test_resolvers_run_outside_event_loop(self):
        seen = []
        original = self.task_repo.list_by_owner

        def list_by_owner(user_id):
            seen.append(_event_loop_running())
            return original(user_id)

        with patch.object(self.task_repo, 'list_by_owner', side_effect=list_by_owner):
            body = self.gql('{ getTasks { id } }')

        self.assertNotIn('errors', body)
        self.assertEqual(seen, [False])


class TestSchemaExtensions(unittest.TestCase):

    def test_extensions_are_factories(self):
        for factory in schema.extensions:
            self.assertNotIsInstance(factory, SchemaExtension)

        self.assertTrue(any(isinstance(factory(), MaskErrors) for factory in schema.extensions))


if __name__ == '__main__':
    unittest.main()
