from datetime import datetime, timedelta, timezone
from typing import Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from jose import JWTError, jwt

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/login")

DEFAULT_TOKEN_LIFETIME = timedelta(days=7)


class AuthManager:
    def __init__(self, jwt_secret, jwt_algorithm):
        self.jwt_secret = jwt_secret
        self.jwt_algorithm = jwt_algorithm

    def _credentials_exception(self):
        return HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )

    def _decode(self, token: str) -> dict:
        try:
            return jwt.decode(
                token,
                self.jwt_secret,
                algorithms=[self.jwt_algorithm],
            )
        except JWTError:
            raise self._credentials_exception()

    def create_access_token(
        self, data: dict, expires_delta: Optional[timedelta] = None
    ):
        to_encode = data.copy()
        expire = datetime.now(timezone.utc) + (expires_delta or DEFAULT_TOKEN_LIFETIME)
        to_encode.update({"exp": expire})
        encoded_jwt = jwt.encode(
            to_encode, self.jwt_secret, algorithm=self.jwt_algorithm
        )
        return encoded_jwt

    def get_current_user_id(self, token: str = Depends(oauth2_scheme)) -> int:
        payload = self._decode(token)
        user_id = payload.get("sub")
        if user_id is None:
            raise self._credentials_exception()

        try:
            return int(user_id)
        except ValueError:
            raise self._credentials_exception()

    def require_any_scopes(self, scopes):
        def wrapper(token: str = Depends(oauth2_scheme)):
            payload = self._decode(token)
            current_scopes = payload.get("scopes")
            if current_scopes is None:
                raise self._credentials_exception()

            if set(scopes).isdisjoint(set(current_scopes)):
                raise HTTPException(
                    status_code=status.HTTP_403_FORBIDDEN,
                    detail="Insufficient permissions",
                )

        return wrapper
