# Copyright New York University and the TUF contributors
# SPDX-License-Identifier: MIT OR Apache-2.0

"""Verification-only adapters over the digest and signature primitives.

Digests come from ``securesystemslib.hash``, signature verification from
pyca/cryptography. Nothing in here signs or holds private key material.
"""

from cryptography.exceptions import InvalidSignature, UnsupportedAlgorithm
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import padding
from cryptography.hazmat.primitives.asymmetric.ed25519 import Ed25519PublicKey
from cryptography.hazmat.primitives.asymmetric.rsa import RSAPublicKey
from securesystemslib import exceptions as sslib_exceptions
from securesystemslib import hash as sslib_hash

from tufcore.api.exceptions import BadSignatureError


# Accepted RSA modulus sizes in bits.
RSA_MIN_BITS = 2048
RSA_MAX_BITS = 8192

_PSS_HASHES = {
    "sha256": hashes.SHA256,
    "sha512": hashes.SHA512,
}


def digest(algorithm: str, data: bytes) -> bytes:
    """Return the ``algorithm`` digest of ``data``.

    Raises:
        ValueError: The algorithm is not supported.
    """
    try:
        digest_object = sslib_hash.digest(algorithm)
    except (
        sslib_exceptions.UnsupportedAlgorithmError,
        sslib_exceptions.FormatError,
    ) as e:
        raise ValueError(f"Unsupported algorithm '{algorithm}'") from e

    digest_object.update(data)
    return digest_object.digest()


def convert_to_pkcs1(public_der: bytes) -> bytes:
    """Re-encode a DER RSA public key as a PKCS#1 ``RSAPublicKey``.

    ``public_der`` may be a SubjectPublicKeyInfo structure (the contents of a
    "PUBLIC KEY" PEM block) or already PKCS#1. The result holds only the
    modulus and the public exponent.

    Raises:
        ValueError: ``public_der`` is not a DER encoded RSA public key.
    """
    try:
        public_key = serialization.load_der_public_key(public_der)
    except (ValueError, TypeError, UnsupportedAlgorithm) as e:
        raise ValueError("Not a DER encoded public key") from e

    if not isinstance(public_key, RSAPublicKey):
        raise ValueError("Not an RSA public key")

    return public_key.public_bytes(
        serialization.Encoding.DER, serialization.PublicFormat.PKCS1
    )


def verify_ed25519(public: bytes, message: bytes, signature: bytes) -> None:
    """Verify an Ed25519 ``signature`` over ``message``.

    Args:
        public: Raw 32 byte public key.

    Raises:
        BadSignatureError: The key is malformed or the signature is invalid.
    """
    try:
        public_key = Ed25519PublicKey.from_public_bytes(public)
        public_key.verify(signature, message)
    except (InvalidSignature, ValueError, TypeError, UnsupportedAlgorithm) as e:
        raise BadSignatureError("Bad signature") from e


def verify_rsa_pss(
    public_der: bytes, hash_algorithm: str, message: bytes, signature: bytes
) -> None:
    """Verify an RSASSA-PSS ``signature`` over ``message``.

    MGF1 uses the same hash as the message digest and the salt length is the
    digest size.

    Args:
        public_der: DER encoded RSA public key, see ``convert_to_pkcs1``.
        hash_algorithm: "sha256" or "sha512".

    Raises:
        BadSignatureError: The key is malformed or out of the accepted size
            range, or the signature is invalid.
    """
    hash_cls = _PSS_HASHES.get(hash_algorithm)
    if hash_cls is None:
        raise BadSignatureError(f"No PSS digest '{hash_algorithm}'")

    try:
        pkcs1 = convert_to_pkcs1(public_der)
        public_key = serialization.load_der_public_key(pkcs1)
    except (ValueError, TypeError, UnsupportedAlgorithm) as e:
        raise BadSignatureError("Bad RSA public key") from e

    if not RSA_MIN_BITS <= public_key.key_size <= RSA_MAX_BITS:
        raise BadSignatureError(
            f"RSA key size {public_key.key_size} not in "
            f"{RSA_MIN_BITS}..{RSA_MAX_BITS}"
        )

    hash_obj = hash_cls()
    pss = padding.PSS(
        mgf=padding.MGF1(hash_obj), salt_length=hash_obj.digest_size
    )
    try:
        public_key.verify(signature, message, pss, hash_obj)
    except (InvalidSignature, ValueError, TypeError) as e:
        raise BadSignatureError("Bad signature") from e
