"""
Seal and unseal session data.

A seal is ``<payload>~<major version>`` where payload is the base64url JSON of
the sealed components. Each seal carries its own random seed; the recipient
X25519 key and the Ed25519 signing key are derived from the configured
password and that seed, so only password holders can open or forge seals.
The AES-256-GCM key comes from an X25519 encapsulation against the recipient
key using a fresh ephemeral keypair.
"""

import asyncio
import base64
import binascii
import hmac
import json
import logging
import secrets
import time
from typing import Any, Dict, Optional, Tuple

from cryptography.exceptions import InvalidSignature, InvalidTag
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric.ed25519 import (
    Ed25519PrivateKey,
    Ed25519PublicKey,
)
from cryptography.hazmat.primitives.asymmetric.x25519 import (
    X25519PrivateKey,
    X25519PublicKey,
)
from cryptography.hazmat.primitives.ciphers.aead import AESGCM
from cryptography.hazmat.primitives.kdf.hkdf import HKDF

from cookieseal.core.config import (
    CURRENT_MAJOR_VERSION,
    FOURTEEN_DAYS_IN_SECONDS,
    TIMESTAMP_SKEW_SEC,
    VERSION_DELIMITER,
)
from cookieseal.core.exceptions import (
    BadUsageError,
    DecryptionError,
    ExpiredSealError,
    IncorrectComponentCountError,
    InvalidSignatureError,
    PasswordNotFoundError,
    SealError,
    SealFormatError,
    UnsupportedSealVersionError,
)
from cookieseal.core.logging_config import log_seal_rejected
from cookieseal.core.security import Password, PasswordSet

logger = logging.getLogger(__name__)

SEED_LENGTH = 32
IV_LENGTH = 12
KEY_LENGTH = 32

SEAL_COMPONENTS = frozenset({"id", "s", "k", "iv", "c", "x", "sig", "pk"})

_KEYPAIR_INFO = b"cookieseal/v2/keypairs"
_SHARED_SECRET_INFO = b"cookieseal/v2/shared-secret"


def b64url_encode(data: bytes) -> str:
    return base64.urlsafe_b64encode(data).rstrip(b"=").decode("ascii")


def b64url_decode(data: str) -> bytes:
    """Decode unpadded base64url, raising SealFormatError on garbage"""
    if not isinstance(data, str):
        raise SealFormatError("Invalid seal format: expected a base64url string")
    try:
        return base64.urlsafe_b64decode(data + "=" * (-len(data) % 4))
    except (binascii.Error, ValueError) as e:
        raise SealFormatError(f"Invalid seal format: {e}") from None


def _raw_public_bytes(key) -> bytes:
    return key.public_bytes(
        encoding=serialization.Encoding.Raw,
        format=serialization.PublicFormat.Raw,
    )


def _derive_keypairs(password: str, seed: bytes) -> Tuple[X25519PrivateKey, Ed25519PrivateKey]:
    """Derive the per-seal recipient and signing keys from a password and seed"""
    material = HKDF(
        algorithm=hashes.SHA256(),
        length=2 * KEY_LENGTH,
        salt=seed,
        info=_KEYPAIR_INFO,
    ).derive(password.encode("utf-8"))
    return (
        X25519PrivateKey.from_private_bytes(material[:KEY_LENGTH]),
        Ed25519PrivateKey.from_private_bytes(material[KEY_LENGTH:]),
    )


def _shared_secret(dh_secret: bytes, encapsulated_key: bytes, recipient_key: bytes) -> bytes:
    return HKDF(
        algorithm=hashes.SHA256(),
        length=KEY_LENGTH,
        salt=encapsulated_key + recipient_key,
        info=_SHARED_SECRET_INFO,
    ).derive(dh_secret)


def _encapsulate(recipient_public: X25519PublicKey) -> Tuple[bytes, bytes]:
    """Return (encapsulated key, shared secret) for a recipient public key"""
    ephemeral = X25519PrivateKey.generate()
    encapsulated_key = _raw_public_bytes(ephemeral.public_key())
    dh_secret = ephemeral.exchange(recipient_public)
    return encapsulated_key, _shared_secret(
        dh_secret, encapsulated_key, _raw_public_bytes(recipient_public)
    )


def _decapsulate(recipient: X25519PrivateKey, encapsulated_key: bytes) -> bytes:
    try:
        dh_secret = recipient.exchange(X25519PublicKey.from_public_bytes(encapsulated_key))
    except ValueError as e:
        raise DecryptionError(f"Invalid encapsulated key: {e}") from None
    return _shared_secret(
        dh_secret, encapsulated_key, _raw_public_bytes(recipient.public_key())
    )


def _base_string(components: Dict[str, Any]) -> bytes:
    expiration = components["x"]
    parts = [
        components["id"],
        components["s"],
        components["k"],
        components["iv"],
        components["c"],
        "" if expiration is None else str(expiration),
    ]
    return "*".join(parts).encode("utf-8")


def _serialize_value(value: Any) -> bytes:
    if isinstance(value, (bytes, bytearray)):
        return bytes(value)
    return json.dumps(value, separators=(",", ":")).encode("utf-8")


def _now_ms() -> int:
    return int(time.time() * 1000)


def parse_seal(seal: str) -> Tuple[str, Optional[int]]:
    """Split a seal into its payload and major version.

    Raises:
        BadUsageError: If the seal is not a string
        SealFormatError: If the payload portion is missing
    """
    if not isinstance(seal, str):
        raise BadUsageError("cookieseal: Bad usage. Seal must be a string.")

    seal_without_version, _, version = seal.partition(VERSION_DELIMITER)
    if not seal_without_version:
        raise SealFormatError("Invalid seal format: missing seal data")

    token_version = None
    if version:
        try:
            token_version = int(version)
        except ValueError:
            token_version = None
    return seal_without_version, token_version


def seal_sync(value: Any, password: Password, ttl: int = FOURTEEN_DAYS_IN_SECONDS) -> str:
    """Seal ``value`` with the current password. Blocking; see ``seal_data``."""
    password_set = PasswordSet.from_password(password)
    password_id = password_set.current_id

    seed = secrets.token_bytes(SEED_LENGTH)
    recipient, signer = _derive_keypairs(password_set.current, seed)

    encapsulated_key, shared_secret = _encapsulate(recipient.public_key())

    iv = secrets.token_bytes(IV_LENGTH)
    ciphertext = AESGCM(shared_secret).encrypt(iv, _serialize_value(value), None)

    components: Dict[str, Any] = {
        "id": str(password_id),
        "s": b64url_encode(seed),
        "k": b64url_encode(encapsulated_key),
        "iv": b64url_encode(iv),
        "c": b64url_encode(ciphertext),
        "x": _now_ms() + ttl * 1000 if ttl else None,
    }
    components["sig"] = b64url_encode(signer.sign(_base_string(components)))
    components["pk"] = b64url_encode(_raw_public_bytes(signer.public_key()))

    payload = json.dumps(components, separators=(",", ":")).encode("utf-8")
    return f"{b64url_encode(payload)}{VERSION_DELIMITER}{CURRENT_MAJOR_VERSION}"


def _decode_components(seal_without_version: str) -> Dict[str, Any]:
    try:
        components = json.loads(b64url_decode(seal_without_version).decode("utf-8"))
    except (UnicodeDecodeError, ValueError, RecursionError) as e:
        raise SealFormatError(f"Invalid seal format: {type(e).__name__}") from None

    if not isinstance(components, dict):
        raise SealFormatError("Invalid seal format: payload is not an object")
    if set(components) != SEAL_COMPONENTS:
        raise IncorrectComponentCountError(
            f"Incorrect number of sealed components: {len(components)}"
        )
    if not all(isinstance(components[key], str) for key in SEAL_COMPONENTS - {"x"}):
        raise SealFormatError("Invalid seal format: component is not a string")
    if components["x"] is not None and not isinstance(components["x"], int):
        raise SealFormatError("Invalid seal format: expiration is not an integer")
    return components


def unseal_sync(seal: str, password: Password, ttl: int = FOURTEEN_DAYS_IN_SECONDS) -> Any:
    """Open a seal, raising a SealError subclass if it cannot be trusted.

    Blocking; see ``unseal_data`` for the fail-soft async entry point.
    """
    password_set = PasswordSet.from_password(password)

    seal_without_version, token_version = parse_seal(seal)
    if token_version != CURRENT_MAJOR_VERSION:
        raise UnsupportedSealVersionError(f"Unsupported seal version: {token_version}")

    components = _decode_components(seal_without_version)

    try:
        secret = password_set.get(int(components["id"]))
    except ValueError:
        secret = None
    if secret is None:
        raise PasswordNotFoundError(f"Cannot find password: {components['id']}")

    expiration = components["x"]
    if expiration is not None and expiration <= _now_ms() - TIMESTAMP_SKEW_SEC * 1000:
        raise ExpiredSealError("Expired seal")

    recipient, signer = _derive_keypairs(secret, b64url_decode(components["s"]))

    # Verify signature first
    sign_public_key = b64url_decode(components["pk"])
    if not hmac.compare_digest(sign_public_key, _raw_public_bytes(signer.public_key())):
        raise InvalidSignatureError("Invalid signature: unknown signing key")
    try:
        Ed25519PublicKey.from_public_bytes(sign_public_key).verify(
            b64url_decode(components["sig"]), _base_string(components)
        )
    except InvalidSignature:
        raise InvalidSignatureError("Invalid signature") from None

    shared_secret = _decapsulate(recipient, b64url_decode(components["k"]))
    try:
        plaintext = AESGCM(shared_secret).decrypt(
            b64url_decode(components["iv"]), b64url_decode(components["c"]), None
        )
    except (InvalidTag, ValueError):
        raise DecryptionError("Bad hmac value") from None

    # Try to parse as JSON first, fall back to raw bytes
    try:
        return json.loads(plaintext.decode("utf-8"))
    except (UnicodeDecodeError, ValueError, RecursionError):
        return plaintext


async def seal_data(value: Any, password: Password, ttl: int = FOURTEEN_DAYS_IN_SECONDS) -> str:
    """
    Seal data into an opaque, versioned token.

    Args:
        value: JSON-serializable data, or bytes for an opaque payload
        password: A password string or an id -> password map
        ttl: Seconds the seal stays valid; 0 means no expiration

    Returns:
        Seal string safe for use as a cookie value

    Raises:
        BadUsageError: If the password is missing or too short
    """
    return await asyncio.to_thread(seal_sync, value, password, ttl)


async def unseal_data(
    seal: str,
    password: Password,
    ttl: int = FOURTEEN_DAYS_IN_SECONDS,
    *,
    cookie_name: Optional[str] = None,
) -> Any:
    """
    Unseal a token produced by ``seal_data``.

    Tampered, expired, foreign or outdated seals yield an empty dict. Usage
    errors and unexpected failures propagate.

    Args:
        seal: The sealed token
        password: A password string or an id -> password map
        ttl: Accepted for symmetry with ``seal_data``; expiry is read from
            the seal itself, which binds it under the signature
        cookie_name: Cookie the seal was read from, for the rejection log

    Returns:
        The original value, raw bytes for non-JSON payloads, or ``{}``

    Raises:
        BadUsageError: If the seal is not a string or the password is invalid
    """
    password_set = PasswordSet.from_password(password)
    try:
        return await asyncio.to_thread(unseal_sync, seal, password_set, ttl)
    except SealError as e:
        log_seal_rejected(type(e).__name__, cookie_name=cookie_name)
        logger.debug(f"Seal rejected: {e}")
        return {}
