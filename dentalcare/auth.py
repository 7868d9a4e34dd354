import base64
import json
import logging
import time
from typing import Optional

import httpx
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric import padding
from cryptography.x509 import load_pem_x509_certificate
from fastapi import Depends, HTTPException
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from .config import FIREBASE_PROJECT_ID
from .database import get_db
from .models import User, UserProfile

logger = logging.getLogger(__name__)

GOOGLE_CERTS_URL = (
    "https://www.googleapis.com/robot/v1/metadata/x509/securetoken@system.gserviceaccount.com"
)

# auto_error=False: a missing token is a null identity, not an immediate 401
security = HTTPBearer(auto_error=False)

# Cache for Google's public keys
_cached_keys = None


async def get_google_public_keys(refresh: bool = False) -> Optional[dict]:
    """Fetch Google's public keys for Firebase token verification"""
    global _cached_keys
    if _cached_keys and not refresh:
        return _cached_keys

    try:
        async with httpx.AsyncClient() as client:
            response = await client.get(GOOGLE_CERTS_URL, timeout=10)
        if response.status_code == 200:
            _cached_keys = response.json()
            logger.info(f"✅ Fetched {len(_cached_keys)} Google public keys")
            return _cached_keys
        logger.error(f"❌ Failed to fetch Google public keys: HTTP {response.status_code}")
    except httpx.HTTPError as e:
        logger.error(f"❌ Error fetching Google public keys: {str(e)}")
    return None


def _b64decode_segment(segment: str) -> bytes:
    """Decode one base64url JWT segment, restoring stripped padding"""
    return base64.urlsafe_b64decode(segment + "=" * (-len(segment) % 4))


async def verify_firebase_token(token: str) -> dict:
    """
    Verify a Firebase ID token: RS256 signature against Google's certificates,
    then audience, issuer, expiry and issued-at claims.
    """
    if not FIREBASE_PROJECT_ID:
        logger.error("❌ FIREBASE_PROJECT_ID not configured")
        raise HTTPException(status_code=500, detail="Authentication provider not configured")

    parts = token.split(".")
    if len(parts) != 3:
        raise HTTPException(status_code=401, detail="Invalid token format. Expected a valid JWT token.")
    header_b64, payload_b64, signature_b64 = parts

    try:
        header = json.loads(_b64decode_segment(header_b64))
        payload = json.loads(_b64decode_segment(payload_b64))
        signature = _b64decode_segment(signature_b64)
    except (ValueError, TypeError) as e:
        logger.warning(f"⚠️ Undecodable token: {e}")
        raise HTTPException(status_code=401, detail="Invalid token") from e

    if header.get("alg") != "RS256" or not header.get("kid"):
        raise HTTPException(status_code=401, detail="Invalid token header")
    kid = header["kid"]

    public_keys = await get_google_public_keys()
    if not public_keys or kid not in public_keys:
        # Google rotates keys; refetch once before giving up
        public_keys = await get_google_public_keys(refresh=True)
        if not public_keys or kid not in public_keys:
            logger.error(f"❌ Key ID {kid} not found in public keys after retry")
            raise HTTPException(status_code=401, detail="Unable to verify token signature")

    cert = load_pem_x509_certificate(public_keys[kid].encode())
    try:
        cert.public_key().verify(
            signature,
            f"{header_b64}.{payload_b64}".encode(),
            padding.PKCS1v15(),
            hashes.SHA256(),
        )
    except Exception as e:
        logger.warning(f"❌ Token signature verification failed: {str(e)}")
        raise HTTPException(status_code=401, detail="Invalid token signature") from e

    if payload.get("aud") != FIREBASE_PROJECT_ID:
        raise HTTPException(status_code=401, detail="Invalid token audience")
    if payload.get("iss") != f"https://securetoken.google.com/{FIREBASE_PROJECT_ID}":
        raise HTTPException(status_code=401, detail="Invalid token issuer")

    now = time.time()
    if payload.get("exp", 0) < now:
        raise HTTPException(
            status_code=401,
            detail="Token has expired. Please refresh your session.",
            headers={"X-Token-Expired": "true"},
        )
    # Allow 60 seconds clock skew
    if payload.get("iat", 0) > now + 60:
        raise HTTPException(status_code=401, detail="Invalid token")

    return payload


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: Session = Depends(get_db),
) -> Optional[User]:
    """Resolve the caller's User from the bearer token; None when no token was sent"""
    if not credentials:
        return None

    decoded_token = await verify_firebase_token(credentials.credentials)
    firebase_uid = decoded_token.get("sub") or decoded_token.get("user_id")
    if not firebase_uid:
        logger.error(f"❌ Token missing user ID claim. Available claims: {list(decoded_token.keys())}")
        raise HTTPException(status_code=401, detail="Invalid token claims")

    user = db.query(User).filter(User.firebase_uid == firebase_uid).first()
    if not user:
        logger.info(f"🆕 Creating identity for Firebase UID {firebase_uid}")
        user = User(firebase_uid=firebase_uid, email=decoded_token.get("email"))
        db.add(user)
        db.commit()
        db.refresh(user)

    return user


class AuthContext:
    """
    Authorization capability for a single request.

    Built once from the verified identity and the caller's profile, then
    handed to every service call instead of re-reading the profile store.
    """

    def __init__(self, user: Optional[User], profile: Optional[UserProfile]):
        self.user = user
        self.profile = profile

    @property
    def is_authenticated(self) -> bool:
        return self.user is not None

    @property
    def user_id(self) -> Optional[int]:
        return self.user.id if self.user else None

    @property
    def role(self) -> Optional[str]:
        return self.profile.role if self.profile else None

    @property
    def is_doctor(self) -> bool:
        return self.role == "doctor"

    @property
    def is_patient(self) -> bool:
        return self.role == "patient"

    def require_user(self) -> User:
        if self.user is None:
            raise HTTPException(status_code=401, detail="Not authenticated")
        return self.user

    def require_profile(self) -> UserProfile:
        self.require_user()
        if self.profile is None:
            raise HTTPException(status_code=404, detail="Profile not found")
        return self.profile

    def require_doctor(self, detail: str = "Only doctors can perform this action") -> UserProfile:
        profile = self.require_profile()
        if profile.role != "doctor":
            raise HTTPException(status_code=403, detail=detail)
        return profile

    def require_patient(self, detail: str = "Only patients can perform this action") -> UserProfile:
        profile = self.require_profile()
        if profile.role != "patient":
            raise HTTPException(status_code=403, detail=detail)
        return profile

    def require_owner(self, owner_id: int, detail: str = "Unauthorized") -> None:
        """Fail with 403 unless the caller is the referenced user"""
        self.require_user()
        if owner_id != self.user_id:
            raise HTTPException(status_code=403, detail=detail)


def get_auth_context(
    user: Optional[User] = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> AuthContext:
    if user is None:
        return AuthContext(None, None)
    profile = db.query(UserProfile).filter(UserProfile.user_id == user.id).first()
    return AuthContext(user, profile)
