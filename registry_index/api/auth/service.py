# Copyright 2026 Dell Inc. or its subsidiaries. All Rights Reserved.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.


"""Authentication service for Docker index clients.

Clients authenticate either with HTTP Basic credentials (``docker login``)
or with the repository scoped index token issued at registration.
"""

import base64
import binascii
import hmac
from dataclasses import dataclass
from typing import Optional

from api.auth.password_handler import verify_password
from api.logging_utils import log_auth_info
from core.exceptions import AuthenticationError, InactiveUserError, TokenScopeError
from core.registry.entities import UserAccount
from core.registry.repositories import AccessTokenRepository, UserAccountRepository
from core.registry.services import hash_signature
from core.registry.value_objects import AccessToken, RepositoryRef


@dataclass(frozen=True)
class Principal:
    """Authenticated caller.

    Attributes:
        user: Active account making the request.
        token: Index token presented, or None for Basic credentials.
    """

    user: UserAccount
    token: Optional[AccessToken] = None

    @property
    def username(self) -> str:
        """Return the account name."""
        return self.user.username


class RegistryAuthService:
    """Resolves the ``Authorization`` header into a principal."""

    BASIC_SCHEME = "basic "

    def __init__(
        self,
        user_repo: UserAccountRepository,
        token_repo: AccessTokenRepository,
    ):
        """Initialize the service with user and token stores."""
        self._user_repo = user_repo
        self._token_repo = token_repo

    def authenticate(self, authorization: Optional[str], ref: RepositoryRef) -> Principal:
        """Authenticate a request against the repository in its path.

        Args:
            authorization: Raw ``Authorization`` header value.
            ref: Repository named by the request path.

        Returns:
            Principal for the active user.

        Raises:
            AuthenticationError: If the header is missing or malformed.
            TokenScopeError: If a token is presented for another repository.
            InactiveUserError: If the credentials match no active user.
        """
        if not authorization:
            raise AuthenticationError("Authorization header is required")

        if authorization.startswith(AccessToken.SCHEME):
            return self._authenticate_token(authorization, ref)
        if authorization[:len(self.BASIC_SCHEME)].lower() == self.BASIC_SCHEME:
            return self._authenticate_basic(authorization)
        raise AuthenticationError("Unsupported authorization scheme")

    def _authenticate_token(self, authorization: str, ref: RepositoryRef) -> Principal:
        try:
            token = AccessToken.parse(authorization)
        except ValueError as exc:
            log_auth_info("warning", f"Malformed index token: {exc}")
            raise AuthenticationError("Malformed index token") from exc

        if token.namespace != str(ref.namespace) or token.repository != str(ref.name):
            log_auth_info(
                "warning",
                f"Token scoped to {token.scope} used for {ref}",
            )
            raise TokenScopeError("Token is not valid for this repository")

        presented = hash_signature(token.signature)
        for record in self._token_repo.find_by_scope(ref):
            if hmac.compare_digest(presented, record.signature_hash):
                if token.access != record.access.value:
                    log_auth_info(
                        "warning",
                        f"Token for {ref} presented with access={token.access}, "
                        f"granted {record.access.value}",
                    )
                    raise InactiveUserError("No user holds this token")
                user = self._active_user(record.username)
                log_auth_info("info", f"Token accepted for {ref}: user={user.username}")
                return Principal(user=user, token=token)

        log_auth_info("warning", f"Unknown token presented for {ref}")
        raise InactiveUserError("No user holds this token")

    def _authenticate_basic(self, authorization: str) -> Principal:
        encoded = authorization[len(self.BASIC_SCHEME):].strip()
        try:
            decoded = base64.b64decode(encoded, validate=True).decode("utf-8")
        except (binascii.Error, UnicodeDecodeError) as exc:
            log_auth_info("warning", "Malformed Basic credentials")
            raise AuthenticationError("Malformed Basic credentials") from exc

        username, separator, password = decoded.partition(":")
        if not separator or not username:
            log_auth_info("warning", "Basic credentials without username")
            raise AuthenticationError("Malformed Basic credentials")

        user = self._user_repo.find_by_username(username)
        if user is None or not verify_password(password, user.password_hash):
            log_auth_info("warning", f"Basic credentials rejected: user={username}")
            raise InactiveUserError("User is not exist or not actived.")
        if not user.active:
            log_auth_info("warning", f"Inactive user attempted access: user={username}")
            raise InactiveUserError("User is not exist or not actived.")

        log_auth_info("info", f"Basic credentials accepted: user={username}")
        return Principal(user=user)

    def _active_user(self, username: str) -> UserAccount:
        user = self._user_repo.find_by_username(username)
        if user is None or not user.active:
            log_auth_info("warning", f"Token owner missing or inactive: user={username}")
            raise InactiveUserError("User is not exist or not actived.")
        return user
