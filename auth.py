import os
from datetime import datetime, timedelta, timezone

import jwt  # PyJWT
from argon2 import PasswordHasher as Argon2Hasher
from argon2.exceptions import VerificationError, InvalidHashError
from bson import ObjectId
from fastapi import Depends, HTTPException
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from passlib.hash import bcrypt as bcrypt_hasher

import database

JWT_SECRET = os.getenv("JWT_SECRET", "supersecret-youpower")
JWT_EXPIRE_MIN = int(os.getenv("JWT_EXPIRE_MIN", "1440"))
security = HTTPBearer()
argon2_hasher = Argon2Hasher()


def create_jwt(payload: dict, minutes: int = JWT_EXPIRE_MIN) -> str:
    now = datetime.now(timezone.utc)
    exp = now + timedelta(minutes=minutes)
    to_encode = {**payload, "iat": int(now.timestamp()), "exp": int(exp.timestamp())}
    return jwt.encode(to_encode, JWT_SECRET, algorithm="HS256")


def decode_jwt(token: str) -> dict:
    try:
        return jwt.decode(token, JWT_SECRET, algorithms=["HS256"])
    except jwt.ExpiredSignatureError:
        raise HTTPException(status_code=401, detail="Token expired")
    except jwt.InvalidTokenError:
        raise HTTPException(status_code=401, detail="Invalid token")


def hash_password(password: str, algo: str = "bcrypt") -> str:
    if algo == "argon2":
        return argon2_hasher.hash(password)
    return bcrypt_hasher.hash(password)


def verify_password(password: str, pwd_hash: str, algo: str = "bcrypt") -> bool:
    if algo == "argon2":
        try:
            return argon2_hasher.verify(pwd_hash, password)
        except (VerificationError, InvalidHashError):
            return False
    try:
        return bcrypt_hasher.verify(password, pwd_hash)
    except ValueError:
        return False


def token_for(user: dict) -> str:
    return create_jwt({"sub": str(user["_id"]), "email": user["email"]})


def get_current_user(credentials: HTTPAuthorizationCredentials = Depends(security)) -> dict:
    """Resolve the bearer token to the user document it was issued for."""
    data = decode_jwt(credentials.credentials)
    user_id = data.get("sub")
    if not user_id or not ObjectId.is_valid(user_id):
        raise HTTPException(status_code=401, detail="Invalid token")
    user = database.collection("user").find_one({"_id": ObjectId(user_id)})
    if not user:
        raise HTTPException(status_code=401, detail="Unauthorized")
    return user
