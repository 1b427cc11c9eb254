from datetime import datetime, timedelta
from jose import jwt
from app.core.config import Config

SECRET_KEY = Config.JWT_SECRET
ALGORITHM = Config.JWT_ALGORITHM or "HS256"
ACCESS_TOKEN_EXPIRE_MINUTES = Config.ACCESS_TOKEN_EXPIRE_MINUTES


def create_access_token(
    user_id: str,
    username: str,
    is_locked: bool = False,
    expires_minutes: int | None = None,
):
    payload = {
        "sub": str(user_id),
        "_id": str(user_id),
        "username": username,
        "isLocked": is_locked,
        "iat": datetime.utcnow(),
        "exp": datetime.utcnow()
        + timedelta(minutes=expires_minutes or ACCESS_TOKEN_EXPIRE_MINUTES),
    }
    return jwt.encode(payload, SECRET_KEY, algorithm=ALGORITHM)


def decode_token(token: str):
    return jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM])
