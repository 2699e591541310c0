# Copyright New York University and the TUF contributors
# SPDX-License-Identifier: MIT OR Apache-2.0

"""Cryptographic identity model: keys, key ids, signatures and hashes.

Algorithm identifiers (``KeyType``, ``SignatureScheme``, ``HashType``) keep
names they do not recognize instead of failing to parse, so documents that
mention newer algorithms still load. Such identifiers report
``is_supported == False`` and are never used to verify anything.
"""

import base64
import binascii
import re
from dataclasses import dataclass
from typing import Any, ClassVar, Dict, FrozenSet, Tuple, Type, TypeVar

from tufcore.api import _crypto
from tufcore.api.exceptions import (
    InvalidFieldValueError,
    MissingFieldError,
    SignatureSchemeKeyTypeMismatchError,
    UnsupportedKeyTypeError,
    UnsupportedSignatureSchemeError,
)

_HEX_RE = re.compile(r"^(?:[0-9a-f]{2})*$")
_PEM_RE = re.compile(
    r"-----BEGIN ([A-Z0-9 ]+)-----\s*(.*?)\s*-----END \1-----", re.DOTALL
)

A = TypeVar("A", bound="_Algorithm")


def decode_hex(value: Any, field: str) -> bytes:
    """Decode a lowercase hex string.

    Raises:
        InvalidFieldValueError: ``value`` is not a lowercase hex string.
    """
    if not isinstance(value, str):
        raise InvalidFieldValueError(field, "not a string")
    if not _HEX_RE.match(value):
        raise InvalidFieldValueError(field, "not lowercase hex")

    return binascii.unhexlify(value)


def decode_pem(value: str) -> bytes:
    """Return the decoded contents of the first PEM block in ``value``.

    Raises:
        InvalidFieldValueError: No PEM block was found or its contents are
            not valid base64.
    """
    match = _PEM_RE.search(value)
    if match is None:
        raise InvalidFieldValueError("keyval", "key was not PEM encoded")

    body = "".join(match.group(2).split())
    try:
        return base64.b64decode(body, validate=True)
    except binascii.Error as e:
        raise InvalidFieldValueError("keyval", "bad PEM contents") from e


@dataclass(frozen=True)
class _Algorithm:
    """A named algorithm identifier that may not be supported."""

    name: str

    _SUPPORTED: ClassVar[FrozenSet[str]] = frozenset()

    def __str__(self) -> str:
        return self.name

    @property
    def is_supported(self) -> bool:
        return self.name in self._SUPPORTED

    @classmethod
    def from_str(cls: Type[A], value: Any, field: str) -> A:
        """Parse an identifier. Unknown names are preserved, not rejected.

        Raises:
            InvalidFieldValueError: ``value`` is not a string.
        """
        if not isinstance(value, str):
            raise InvalidFieldValueError(field, f"{cls.__name__} not a string")
        return cls(value)


@dataclass(frozen=True)
class KeyType(_Algorithm):
    """Type of public key, e.g. "ed25519" or "rsa"."""

    _SUPPORTED: ClassVar[FrozenSet[str]] = frozenset({"ed25519", "rsa"})

    ED25519: ClassVar["KeyType"]
    RSA: ClassVar["KeyType"]

    def supports(self, scheme: "SignatureScheme") -> bool:
        """Return True if signatures of ``scheme`` can be made with this key
        type. Unsupported types and schemes never match.
        """
        return self in _SCHEME_KEY_TYPES.get(scheme, ())


@dataclass(frozen=True)
class SignatureScheme(_Algorithm):
    """Signature scheme, e.g. "ed25519" or "rsassa-pss-sha256"."""

    _SUPPORTED: ClassVar[FrozenSet[str]] = frozenset(
        {"ed25519", "rsassa-pss-sha256", "rsassa-pss-sha512"}
    )

    ED25519: ClassVar["SignatureScheme"]
    RSASSA_PSS_SHA256: ClassVar["SignatureScheme"]
    RSASSA_PSS_SHA512: ClassVar["SignatureScheme"]

    def verify(
        self, key_value: "KeyValue", msg: bytes, sig: "SignatureValue"
    ) -> None:
        """Verify ``sig`` over ``msg`` with the raw key bytes of ``key_value``.

        Raises:
            UnsupportedSignatureSchemeError: The scheme is not supported.
            BadSignatureError: The signature did not verify.
        """
        if self == SignatureScheme.ED25519:
            _crypto.verify_ed25519(key_value.value, msg, sig.value)
        elif self == SignatureScheme.RSASSA_PSS_SHA256:
            _crypto.verify_rsa_pss(key_value.value, "sha256", msg, sig.value)
        elif self == SignatureScheme.RSASSA_PSS_SHA512:
            _crypto.verify_rsa_pss(key_value.value, "sha512", msg, sig.value)
        else:
            raise UnsupportedSignatureSchemeError(self.name)


@dataclass(frozen=True)
class HashType(_Algorithm):
    """Hash algorithm, e.g. "sha256"."""

    _SUPPORTED: ClassVar[FrozenSet[str]] = frozenset({"sha256", "sha512"})

    SHA256: ClassVar["HashType"]
    SHA512: ClassVar["HashType"]

    @staticmethod
    def preferences() -> Tuple["HashType", ...]:
        """Return the hash types in order of preference, strongest first."""
        return HASH_PREFERENCES


KeyType.ED25519 = KeyType("ed25519")
KeyType.RSA = KeyType("rsa")
SignatureScheme.ED25519 = SignatureScheme("ed25519")
SignatureScheme.RSASSA_PSS_SHA256 = SignatureScheme("rsassa-pss-sha256")
SignatureScheme.RSASSA_PSS_SHA512 = SignatureScheme("rsassa-pss-sha512")
HashType.SHA256 = HashType("sha256")
HashType.SHA512 = HashType("sha512")

HASH_PREFERENCES: Tuple[HashType, ...] = (HashType.SHA512, HashType.SHA256)

_SCHEME_KEY_TYPES: Dict[SignatureScheme, Tuple[KeyType, ...]] = {
    SignatureScheme.ED25519: (KeyType.ED25519,),
    SignatureScheme.RSASSA_PSS_SHA256: (KeyType.RSA,),
    SignatureScheme.RSASSA_PSS_SHA512: (KeyType.RSA,),
}


@dataclass(frozen=True)
class HashValue:
    """Decoded digest bytes."""

    value: bytes

    def __str__(self) -> str:
        return self.value.hex()

    @classmethod
    def from_str(cls, value: Any) -> "HashValue":
        return cls(decode_hex(value, "hashes"))


@dataclass(frozen=True)
class SignatureValue:
    """Decoded signature bytes."""

    value: bytes

    @classmethod
    def from_str(cls, value: Any) -> "SignatureValue":
        return cls(decode_hex(value, "sig"))


@dataclass(frozen=True)
class KeyId:
    """The hex encoded id of a public key."""

    value: str

    UNSUPPORTED: ClassVar["KeyId"]

    def __str__(self) -> str:
        return self.value

    @classmethod
    def from_str(cls, value: Any, field: str = "keyid") -> "KeyId":
        """Raises InvalidFieldValueError if ``value`` is not a non-empty
        string."""
        if not isinstance(value, str) or not value:
            raise InvalidFieldValueError(field, "key id not a non-empty string")
        return cls(value)


# Derived id of keys whose type is not supported. No parsed KeyId is empty,
# so this never equals a real key id.
KeyId.UNSUPPORTED = KeyId("")


class KeyValue:
    """The public key material.

    *All parameters named below are not just constructor arguments but also
    instance attributes.*

    Args:
        value: Decoded key bytes: raw Ed25519 public key or DER RSA key.
        original: The key exactly as it appeared in the document. Key ids are
            calculated from this string, never from ``value``.
        typ: Key type inferred from the encoding of ``original``.
    """

    def __init__(self, value: bytes, original: str, typ: KeyType):
        self.value = value
        self.original = original
        self.typ = typ

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, KeyValue):
            return False

        return (
            self.value == other.value
            and self.original == other.original
            and self.typ == other.typ
        )

    def __repr__(self) -> str:
        return f"KeyValue(typ={self.typ.name!r}, original={self.original!r})"

    @classmethod
    def from_value(cls, value: Any) -> "KeyValue":
        """Create ``KeyValue`` from a key value of a metadata document.

        A PEM string is an RSA key, any other string is a hex encoded Ed25519
        key, and an object carries one of those in its "public" field.

        Raises:
            MissingFieldError, InvalidFieldValueError: Invalid key value.
        """
        while isinstance(value, dict):
            if "public" not in value:
                raise MissingFieldError("public")
            value = value["public"]

        if not isinstance(value, str):
            raise InvalidFieldValueError("keyval", "not a string or object")

        if value.startswith("-----"):
            return cls(decode_pem(value), value, KeyType.RSA)
        return cls(decode_hex(value, "keyval"), value, KeyType.ED25519)

    def key_id(self) -> KeyId:
        """Calculate the ``KeyId`` of the public key.

        The id is the hex encoded SHA-256 digest of the canonical JSON
        string of ``original``.

        Raises:
            InvalidFieldValueError: ``original`` cannot be canonicalized.
        """
        if not self.typ.is_supported:
            return KeyId.UNSUPPORTED

        # Use local scope import to avoid circular import errors
        from tufcore.api.serialization import SerializationError
        from tufcore.api.serialization.json import canonicalize

        try:
            canonical = canonicalize(self.original)
        except SerializationError as e:
            raise InvalidFieldValueError("keyval") from e

        return KeyId(_crypto.digest("sha256", canonical).hex())


class Key:
    """A public key.

    *All parameters named below are not just constructor arguments but also
    instance attributes.*

    Args:
        typ: Declared key type. This decides how signatures are verified.
        value: Key material.
    """

    def __init__(self, typ: KeyType, value: KeyValue):
        self.typ = typ
        self.value = value

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Key):
            return False

        return self.typ == other.typ and self.value == other.value

    def __repr__(self) -> str:
        return f"Key(typ={self.typ.name!r}, value={self.value!r})"

    @classmethod
    def from_dict(cls, key_dict: Any) -> "Key":
        """Create ``Key`` object from its json/dict representation.

        Raises:
            MissingFieldError, InvalidFieldValueError: Invalid arguments.
        """
        if not isinstance(key_dict, dict):
            raise InvalidFieldValueError("keys", "key not an object")
        if "keytype" not in key_dict:
            raise MissingFieldError("keytype")
        if "keyval" not in key_dict:
            raise MissingFieldError("keyval")

        typ = KeyType.from_str(key_dict["keytype"], "keytype")
        value = KeyValue.from_value(key_dict["keyval"])
        return cls(typ, value)

    def key_id(self) -> KeyId:
        """Calculate the ``KeyId`` of this key, see ``KeyValue.key_id``."""
        if not self.typ.is_supported:
            return KeyId.UNSUPPORTED

        return self.value.key_id()

    def verify(
        self, scheme: SignatureScheme, msg: bytes, sig: "SignatureValue"
    ) -> None:
        """Verify a signature over ``msg`` made with this key.

        The key type must support the scheme: no cryptographic check is
        attempted otherwise.

        Raises:
            UnsupportedKeyTypeError: The key type is not supported.
            UnsupportedSignatureSchemeError: The scheme is not supported.
            SignatureSchemeKeyTypeMismatchError: The key type cannot produce
                signatures of ``scheme``.
            BadSignatureError: The signature is not valid.
        """
        if not self.typ.is_supported:
            raise UnsupportedKeyTypeError(self.typ.name)
        if not scheme.is_supported:
            raise UnsupportedSignatureSchemeError(scheme.name)
        if not self.typ.supports(scheme):
            raise SignatureSchemeKeyTypeMismatchError(
                f"Signature scheme mismatch: key type {self.typ}, "
                f"scheme {scheme}"
            )

        scheme.verify(self.value, msg, sig)


class Signature:
    """A signature over the canonical payload of a metadata document.

    *All parameters named below are not just constructor arguments but also
    instance attributes.*

    Args:
        key_id: Id of the key that made the signature.
        method: Signature scheme.
        sig: Decoded signature bytes.
    """

    def __init__(
        self, key_id: KeyId, method: SignatureScheme, sig: SignatureValue
    ):
        self.key_id = key_id
        self.method = method
        self.sig = sig

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Signature):
            return False

        return (
            self.key_id == other.key_id
            and self.method == other.method
            and self.sig == other.sig
        )

    def __repr__(self) -> str:
        return (
            f"Signature(key_id={self.key_id.value!r}, "
            f"method={self.method.name!r})"
        )

    @classmethod
    def from_dict(cls, signature_dict: Any) -> "Signature":
        """Create ``Signature`` object from its json/dict representation.

        Raises:
            MissingFieldError, InvalidFieldValueError: Invalid arguments.
        """
        if not isinstance(signature_dict, dict):
            raise InvalidFieldValueError("signatures", "not an object")

        for field in ("keyid", "method", "sig"):
            if field not in signature_dict:
                raise MissingFieldError(field)

        return cls(
            KeyId.from_str(signature_dict["keyid"]),
            SignatureScheme.from_str(signature_dict["method"], "method"),
            SignatureValue.from_str(signature_dict["sig"]),
        )
