# apps/core/auth_service.py

"""
Authentication service - registration, login and bearer tokens

Tokens are HS256 JSON Web Tokens carrying the user id in `sub`.
There is no refresh: an expired token means logging in again.
"""

import logging
from datetime import datetime, timedelta, timezone as dt_timezone
from typing import Dict, Optional, Tuple

from django.conf import settings
from django.core.cache import cache
from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import IntegrityError, transaction
from django.utils import timezone
from jose import ExpiredSignatureError, JWTError, jwt

from .exceptions import AuthenticationError, ConflictError
from .models import User

logger = logging.getLogger(__name__)


class AuthenticationService:
    """
    Encapsulates account creation, credential checks and token handling

    Failed logins are counted per email in the Django cache; after
    too many failures the account is locked for a while.
    """

    def __init__(self):
        self._max_login_attempts = settings.AUTH_MAX_LOGIN_ATTEMPTS
        self._lockout_duration_minutes = settings.AUTH_LOCKOUT_MINUTES

    def register(self, data: Dict) -> Tuple[User, str]:
        """
        Creates a user and issues its first token

        Args:
            data: cleaned RegisterForm data

        Returns:
            Tuple[user, token]
        """
        email = data['email'].strip().lower()

        if User.objects.get_by_email(email):
            raise ConflictError('User already exists')

        try:
            with transaction.atomic():
                user = User.objects.create_user(
                    email=email,
                    password=data['password'],
                    first_name=data['first_name'],
                    last_name=data['last_name'],
                    profile_image_url=data.get('profile_image_url') or '',
                )
        except IntegrityError:
            # Concurrent registration with the same email
            raise ConflictError('User already exists')

        logger.info(f"👤 User registered: {user.email}")
        return user, self.issue_token(user)

    def login(self, email: str, password: str) -> Tuple[User, str]:
        """
        Checks credentials and issues a token

        Returns:
            Tuple[user, token]
        """
        email = (email or '').strip().lower()

        if self._account_is_locked(email):
            logger.warning(f"🔒 Login blocked for locked account: {email}")
            raise AuthenticationError('Account temporarily locked after too many failed attempts')

        user = self._authenticate_user(email, password)
        if user is None:
            self._register_failed_attempt(email)
            raise AuthenticationError('Invalid credentials')

        self._reset_login_attempts(email)
        self._update_last_login(user)

        logger.info(f"✅ Login: {user.email}")
        return user, self.issue_token(user)

    def issue_token(self, user: User) -> str:
        """Signs a token valid for JWT_EXPIRATION_DAYS"""
        now = datetime.now(dt_timezone.utc)
        payload = {
            'sub': str(user.pk),
            'email': user.email,
            'iat': now,
            'exp': now + timedelta(days=settings.JWT_EXPIRATION_DAYS),
        }
        return jwt.encode(payload, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)

    def decode_token(self, token: str) -> Dict:
        """Verifies signature and expiry, returns the claims"""
        if not token:
            raise AuthenticationError('Access token required')

        try:
            payload = jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.JWT_ALGORITHM])
        except ExpiredSignatureError:
            raise AuthenticationError('Token expired')
        except JWTError:
            raise AuthenticationError('Invalid token')

        if not payload.get('sub'):
            raise AuthenticationError('Invalid token')

        return payload

    def authenticate_token(self, token: str) -> User:
        """Resolves a bearer token to an active user"""
        payload = self.decode_token(token)

        try:
            user = User.objects.filter(pk=payload['sub'], is_active=True).first()
        except DjangoValidationError:
            # `sub` is not a UUID
            user = None

        if user is None:
            raise AuthenticationError('Invalid token')

        return user

    def change_password(self, user: User, new_password: str) -> None:
        """Sets a new password; existing tokens stay valid until they expire"""
        user.set_password(new_password)
        user.save(update_fields=['password', 'updated_at'])
        logger.info(f"🔑 Password changed: {user.email}")

    def update_profile(self, user: User, data: Dict) -> User:
        """Updates only the mutable profile fields"""
        changed = []
        for field in ('first_name', 'last_name', 'profile_image_url'):
            if field in data and data[field] is not None:
                setattr(user, field, data[field])
                changed.append(field)

        if changed:
            user.save(update_fields=changed + ['updated_at'])

        return user

    # =================== PRIVATE METHODS ===================

    def _authenticate_user(self, email: str, password: str) -> Optional[User]:
        user = User.objects.get_by_email(email)
        if user is None or not user.is_active:
            return None
        if not user.check_password(password):
            return None
        return user

    def _attempts_key(self, email: str) -> str:
        return f"auth:login-attempts:{email}"

    def _account_is_locked(self, email: str) -> bool:
        return cache.get(self._attempts_key(email), 0) >= self._max_login_attempts

    def _register_failed_attempt(self, email: str):
        key = self._attempts_key(email)
        attempts = cache.get(key, 0) + 1
        cache.set(key, attempts, self._lockout_duration_minutes * 60)
        logger.warning(f"⚠️ Failed login for {email} ({attempts}/{self._max_login_attempts})")

    def _reset_login_attempts(self, email: str):
        cache.delete(self._attempts_key(email))

    def _update_last_login(self, user: User):
        user.last_login = timezone.now()
        user.save(update_fields=['last_login'])


# Global service instance
auth_service = AuthenticationService()
