# tests/test_auth.py

from datetime import datetime, timedelta, timezone

import pytest
from django.conf import settings
from jose import jwt

from apps.core.auth_service import auth_service
from apps.core.exceptions import AuthenticationError, ConflictError
from apps.core.models import User

from .conftest import PASSWORD, ApiClient

pytestmark = pytest.mark.django_db

REGISTER_PAYLOAD = {
    'email': 'Alice@X.com',
    'password': PASSWORD,
    'firstName': 'Alice',
    'lastName': 'Smith',
}


def test_register_returns_token_and_user(anonymous_client):
    response = anonymous_client.post('/api/auth/register', REGISTER_PAYLOAD)

    assert response.status_code == 201
    body = response.json()
    assert body['token']
    assert body['user']['email'] == 'alice@x.com'
    assert body['user']['firstName'] == 'Alice'
    assert 'password' not in body['user']

    user = User.objects.get(email='alice@x.com')
    assert user.password != PASSWORD
    assert user.check_password(PASSWORD)


def test_register_duplicate_email_is_conflict(anonymous_client, alice):
    response = anonymous_client.post('/api/auth/register', REGISTER_PAYLOAD)

    assert response.status_code == 409
    assert response.json()['message'] == 'User already exists'


def test_register_validates_fields(anonymous_client):
    response = anonymous_client.post('/api/auth/register', {'email': 'not-an-email', 'password': 'x'})

    assert response.status_code == 400
    errors = response.json()['errors']
    assert {'email', 'password', 'first_name', 'last_name'} <= set(errors)


def test_register_rejects_malformed_json(anonymous_client):
    response = anonymous_client.client.post(
        '/api/auth/register', data='{not json', content_type='application/json'
    )

    assert response.status_code == 400
    assert response.json()['message'] == 'Malformed JSON body'


def test_login_success(anonymous_client, alice):
    response = anonymous_client.post('/api/auth/login', {'email': 'ALICE@x.com', 'password': PASSWORD})

    assert response.status_code == 200
    body = response.json()
    assert body['user']['id'] == str(alice.pk)
    assert auth_service.authenticate_token(body['token']) == alice


def test_login_wrong_password_and_unknown_email_look_the_same(anonymous_client, alice):
    wrong_password = anonymous_client.post('/api/auth/login', {'email': 'alice@x.com', 'password': 'nope12345'})
    unknown_email = anonymous_client.post('/api/auth/login', {'email': 'ghost@x.com', 'password': PASSWORD})

    assert wrong_password.status_code == unknown_email.status_code == 401
    assert wrong_password.json() == unknown_email.json() == {'message': 'Invalid credentials'}


def test_login_locks_account_after_repeated_failures(anonymous_client, alice):
    for _ in range(settings.AUTH_MAX_LOGIN_ATTEMPTS):
        anonymous_client.post('/api/auth/login', {'email': 'alice@x.com', 'password': 'wrong1234'})

    response = anonymous_client.post('/api/auth/login', {'email': 'alice@x.com', 'password': PASSWORD})

    assert response.status_code == 401
    assert 'locked' in response.json()['message']


def test_successful_login_resets_failed_attempts(alice):
    for _ in range(settings.AUTH_MAX_LOGIN_ATTEMPTS - 1):
        with pytest.raises(AuthenticationError):
            auth_service.login('alice@x.com', 'wrong1234')

    auth_service.login('alice@x.com', PASSWORD)

    with pytest.raises(AuthenticationError, match='Invalid credentials'):
        auth_service.login('alice@x.com', 'wrong1234')


def test_me_requires_token(anonymous_client):
    response = anonymous_client.get('/api/auth/me')

    assert response.status_code == 401
    assert response.json()['message'] == 'Access token required'


def test_me_returns_current_user(client_for, alice):
    response = client_for(alice).get('/api/auth/me')

    assert response.status_code == 200
    assert response.json()['email'] == 'alice@x.com'


def test_invalid_token_is_rejected(alice):
    response = ApiClient('not.a.token').get('/api/auth/me')

    assert response.status_code == 401
    assert response.json()['message'] == 'Invalid token'


def test_expired_token_is_rejected(alice):
    past = datetime.now(timezone.utc) - timedelta(days=8)
    token = jwt.encode(
        {'sub': str(alice.pk), 'iat': past, 'exp': past + timedelta(days=7)},
        settings.JWT_SECRET,
        algorithm=settings.JWT_ALGORITHM,
    )

    response = ApiClient(token).get('/api/auth/me')

    assert response.status_code == 401
    assert response.json()['message'] == 'Token expired'


def test_token_signed_with_other_secret_is_rejected(alice):
    token = jwt.encode({'sub': str(alice.pk)}, 'another-secret', algorithm='HS256')

    with pytest.raises(AuthenticationError, match='Invalid token'):
        auth_service.authenticate_token(token)


def test_token_for_deleted_user_is_rejected(make_user):
    user = make_user(email='gone@x.com')
    token = auth_service.issue_token(user)
    user.delete()

    with pytest.raises(AuthenticationError, match='Invalid token'):
        auth_service.authenticate_token(token)


def test_issued_token_expires_after_configured_days(alice):
    claims = auth_service.decode_token(auth_service.issue_token(alice))

    assert claims['sub'] == str(alice.pk)
    assert claims['exp'] - claims['iat'] == settings.JWT_EXPIRATION_DAYS * 24 * 3600


def test_update_profile(client_for, alice):
    response = client_for(alice).patch('/api/auth/me', {'firstName': 'Alicia'})

    assert response.status_code == 200
    assert response.json()['firstName'] == 'Alicia'
    assert response.json()['lastName'] == 'Smith'
    alice.refresh_from_db()
    assert alice.first_name == 'Alicia'


def test_update_profile_ignores_email(client_for, alice):
    client_for(alice).patch('/api/auth/me', {'email': 'other@x.com', 'lastName': 'Brown'})

    alice.refresh_from_db()
    assert alice.email == 'alice@x.com'
    assert alice.last_name == 'Brown'


def test_change_password(client_for, alice):
    response = client_for(alice).post(
        '/api/auth/password', {'currentPassword': PASSWORD, 'newPassword': 'better12345'}
    )

    assert response.status_code == 204
    alice.refresh_from_db()
    assert alice.check_password('better12345')


def test_change_password_requires_current_password(client_for, alice):
    response = client_for(alice).post(
        '/api/auth/password', {'currentPassword': 'wrong1234', 'newPassword': 'better12345'}
    )

    assert response.status_code == 400
    assert 'current_password' in response.json()['errors']


def test_register_service_rejects_duplicates_case_insensitively(alice):
    with pytest.raises(ConflictError):
        auth_service.register({
            'email': 'ALICE@x.com', 'password': PASSWORD, 'first_name': 'A', 'last_name': 'B',
        })


def test_register_accepts_six_character_password(anonymous_client):
    response = anonymous_client.post('/api/auth/register', {
        'email': 'dave@x.com',
        'password': 'abc123',
        'firstName': 'Dave',
        'lastName': 'Brown',
    })

    assert response.status_code == 201
    assert User.objects.get(email='dave@x.com').check_password('abc123')


def test_register_rejects_password_shorter_than_six(anonymous_client):
    response = anonymous_client.post('/api/auth/register', {
        'email': 'dave@x.com',
        'password': 'abc12',
        'firstName': 'Dave',
        'lastName': 'Brown',
    })

    assert response.status_code == 400
    assert 'password' in response.json()['errors']


def test_profile_image_url_without_scheme_gets_https(client_for, alice):
    response = client_for(alice).patch('/api/auth/me', {'profileImageUrl': 'example.com/alice.png'})

    assert response.status_code == 200
    assert response.json()['profileImageUrl'] == 'https://example.com/alice.png'
