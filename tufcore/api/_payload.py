# Copyright the TUF contributors
# SPDX-License-Identifier: MIT OR Apache-2.0


"""Helper classes for low-level Metadata API."""

import abc
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import (
    TYPE_CHECKING,
    Any,
    ClassVar,
    Dict,
    Iterator,
    List,
    Optional,
    Tuple,
    TypeVar,
)

import iso8601

from tufcore.api.exceptions import (
    BadSignatureError,
    InvalidFieldValueError,
    InvalidThresholdError,
    MissingFieldError,
    SignatureVerificationError,
    UnknownRoleError,
    UnsignedMetadataError,
    UnsupportedFeatureError,
)
from tufcore.api.keys import HashType, HashValue, Key, KeyId, Signature

if TYPE_CHECKING:
    from tufcore.api.metadata import SignedMetadata

_ROOT = "root"
_SNAPSHOT = "snapshot"
_TARGETS = "targets"
_TIMESTAMP = "timestamp"

TOP_LEVEL_ROLE_NAMES = {_ROOT, _TIMESTAMP, _SNAPSHOT, _TARGETS}

logger = logging.getLogger(__name__)

# T is a Generic type constraint for container payloads
T = TypeVar(
    "T",
    "RootMetadata",
    "TimestampMetadata",
    "SnapshotMetadata",
    "TargetsMetadata",
)


def _pop_required(obj: Dict[str, Any], field: str) -> Any:
    if field not in obj:
        raise MissingFieldError(field)
    return obj.pop(field)


def _ensure_object(value: Any, field: str) -> Dict[str, Any]:
    if not isinstance(value, dict):
        raise InvalidFieldValueError(field, "not an object")
    return value


def _validate_int(value: Any, field: str, minimum: int) -> None:
    # bool is a subclass of int but never a valid count
    if not isinstance(value, int) or isinstance(value, bool):
        raise InvalidFieldValueError(field, f"not an integer: {value!r}")
    if value < minimum:
        raise InvalidFieldValueError(field, f"must be >= {minimum}")


def _parse_expires(value: Any) -> datetime:
    if not isinstance(value, str):
        raise InvalidFieldValueError("expires", "not a string")
    try:
        expires = iso8601.parse_date(value)
    except iso8601.ParseError as e:
        raise InvalidFieldValueError("expires", str(e)) from e

    return expires.astimezone(timezone.utc)


def _parse_keys(value: Any) -> Dict[KeyId, Key]:
    keys = {}
    for key_id_str, key_dict in _ensure_object(value, "keys").items():
        key_id = KeyId.from_str(key_id_str, "keys")
        key = Key.from_dict(key_dict)
        # Keys of unsupported types have no derivable id to compare with
        derived = key.key_id()
        if derived not in (key_id, KeyId.UNSUPPORTED):
            raise InvalidFieldValueError(
                "keys", f"Key listed as {key_id} has key id {derived}"
            )
        keys[key_id] = key

    return keys


def _parse_key_ids(value: Any) -> List[KeyId]:
    if not isinstance(value, list):
        raise InvalidFieldValueError("keyids", "not an array")
    return [KeyId.from_str(key_id, "keyids") for key_id in value]


def _parse_hashes(value: Any) -> Dict[HashType, HashValue]:
    hashes = _ensure_object(value, "hashes")
    if not hashes:
        raise InvalidFieldValueError("hashes", "no hashes")
    return {
        HashType.from_str(name, "hashes"): HashValue.from_str(digest)
        for name, digest in hashes.items()
    }


@dataclass(frozen=True)
class Role:
    """Name of a metadata role.

    The four top-level roles are class constants. Any other role is a
    targets delegation created with ``Role.delegation()``: a delegation
    named "targets" is not the top-level targets role.

    Attributes:
        name: Role name, lowercase for the top-level roles.
        delegated: ``True`` for targets delegations.
    """

    name: str
    delegated: bool = False

    ROOT: ClassVar["Role"]
    TARGETS: ClassVar["Role"]
    TIMESTAMP: ClassVar["Role"]
    SNAPSHOT: ClassVar["Role"]

    def __str__(self) -> str:
        return self.name

    @classmethod
    def delegation(cls, name: str) -> "Role":
        """Return the role of the targets delegation ``name``."""
        return cls(name, delegated=True)

    @classmethod
    def from_str(cls, value: Any) -> "Role":
        """Parse the ``_type`` tag of a metadata document.

        Both the capitalized ("Root") and the lowercase ("root") spelling
        of the top-level role names are accepted.

        Raises:
            UnknownRoleError: ``value`` is not a top-level role name.
        """
        if not isinstance(value, str) or value not in _ROLE_TAGS:
            raise UnknownRoleError(str(value))
        return _ROLE_TAGS[value]


Role.ROOT = Role(_ROOT)
Role.TARGETS = Role(_TARGETS)
Role.TIMESTAMP = Role(_TIMESTAMP)
Role.SNAPSHOT = Role(_SNAPSHOT)

_ROLE_TAGS: Dict[str, Role] = {
    tag: role
    for role in (Role.ROOT, Role.TARGETS, Role.TIMESTAMP, Role.SNAPSHOT)
    for tag in (role.name, role.name.capitalize())
}


class Signed(metaclass=abc.ABCMeta):
    """A base class for the signed part of metadata.

    Objects with base class Signed are the typed view of the ``signed``
    payload of a ``SignedMetadata`` envelope. This class provides attributes
    and methods that are common for all metadata types (roles).

    *All parameters named below are not just constructor arguments but also
    instance attributes.*

    Args:
        version: Metadata version number, a positive integer.
        expires: Metadata expiry date. Converted to UTC, a naive datetime is
            taken to be in UTC.
        unrecognized_fields: Dictionary of all attributes that are not managed
            by the Metadata API

    Raises:
        InvalidFieldValueError: Invalid arguments.
    """

    # Role of documents of this type, see also ``matches()``
    ROLE: ClassVar[Role]

    def __init__(
        self,
        version: int,
        expires: datetime,
        unrecognized_fields: Optional[Dict[str, Any]] = None,
    ):
        _validate_int(version, "version", 1)
        if expires.tzinfo is None:
            expires = expires.replace(tzinfo=timezone.utc)

        self.version = version
        self.expires = expires.astimezone(timezone.utc)

        if unrecognized_fields is None:
            unrecognized_fields = {}

        self.unrecognized_fields = unrecognized_fields

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Signed):
            return False

        return (
            self.ROLE == other.ROLE
            and self.version == other.version
            and self.expires == other.expires
            and self.unrecognized_fields == other.unrecognized_fields
        )

    @classmethod
    def matches(cls, role: Role) -> bool:
        """Return ``True`` if documents of ``role`` use this document type."""
        return role == cls.ROLE

    @classmethod
    @abc.abstractmethod
    def from_dict(cls, signed_dict: Dict[str, Any]) -> "Signed":
        """Deserialization helper, creates object from json/dict
        representation.
        """
        raise NotImplementedError

    @classmethod
    def _common_fields_from_dict(
        cls, signed_dict: Dict[str, Any]
    ) -> Tuple[int, datetime]:
        """Return common fields of ``Signed`` instances from the passed dict
        representation, and returns an ordered list to be passed as leading
        positional arguments to a subclass constructor.

        ``_type`` is required in root metadata. Other documents may leave it
        out, but if present it must name their role.
        """
        if cls.ROLE == Role.ROOT or "_type" in signed_dict:
            role = Role.from_str(_pop_required(signed_dict, "_type"))
            if not cls.matches(role):
                raise InvalidFieldValueError(
                    "_type", f"expected {cls.ROLE}, got {role}"
                )

        version = _pop_required(signed_dict, "version")
        _validate_int(version, "version", 1)
        expires = _parse_expires(_pop_required(signed_dict, "expires"))

        return version, expires

    def is_expired(self, reference_time: Optional[datetime] = None) -> bool:
        """Check metadata expiration against a reference time.

        Args:
            reference_time: Time to check expiration date against. A naive
                datetime is taken to be in UTC. Default is current UTC date
                and time.

        Returns:
            ``True`` if expiration time is less than the reference time.
        """
        if reference_time is None:
            reference_time = datetime.now(timezone.utc)
        elif reference_time.tzinfo is None:
            reference_time = reference_time.replace(tzinfo=timezone.utc)

        return reference_time >= self.expires


class RoleDefinition:
    """Container that defines which keys are required to sign roles metadata.

    RoleDefinition defines how many keys are required to successfully sign
    the roles metadata, and which keys are accepted.

    *All parameters named below are not just constructor arguments but also
    instance attributes.*

    Args:
        key_ids: Roles signing key identifiers.
        threshold: Number of keys required to sign this role's metadata.
        unrecognized_fields: Dictionary of all attributes that are not managed
            by the Metadata API

    Raises:
        InvalidFieldValueError: Invalid arguments.
        InvalidThresholdError: ``threshold`` is lower than 1.
    """

    def __init__(
        self,
        key_ids: List[KeyId],
        threshold: int,
        unrecognized_fields: Optional[Dict[str, Any]] = None,
    ):
        if len(set(key_ids)) != len(key_ids):
            raise InvalidFieldValueError(
                "keyids", f"Nonunique keyids: {[str(k) for k in key_ids]}"
            )
        if not isinstance(threshold, int) or isinstance(threshold, bool):
            raise InvalidFieldValueError("threshold", "not an integer")
        if threshold < 1:
            raise InvalidThresholdError(threshold)

        self.key_ids = key_ids
        self.threshold = threshold
        if unrecognized_fields is None:
            unrecognized_fields = {}

        self.unrecognized_fields = unrecognized_fields

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, RoleDefinition):
            return False

        return (
            self.key_ids == other.key_ids
            and self.threshold == other.threshold
            and self.unrecognized_fields == other.unrecognized_fields
        )

    @classmethod
    def from_dict(cls, role_dict: Any) -> "RoleDefinition":
        """Create ``RoleDefinition`` object from its json/dict representation.

        Raises:
            MissingFieldError, InvalidFieldValueError, InvalidThresholdError:
                Invalid arguments.
        """
        role_dict = _ensure_object(role_dict, "roles")
        key_ids = _parse_key_ids(_pop_required(role_dict, "keyids"))
        threshold = _pop_required(role_dict, "threshold")
        # All fields left in the role_dict are unrecognized.
        return cls(key_ids, threshold, role_dict)


@dataclass
class VerificationResult:
    """Signature verification result for delegated role metadata.

    Attributes:
        threshold: Number of required signatures.
        signed: dict of keyid to Key, containing keys that have signed.
        unsigned: dict of keyid to Key, containing keys that have not signed.
    """

    threshold: int
    signed: Dict[KeyId, Key]
    unsigned: Dict[KeyId, Key]

    def __bool__(self) -> bool:
        return self.verified

    @property
    def verified(self) -> bool:
        """True if threshold of signatures is met."""
        return len(self.signed) >= self.threshold

    @property
    def missing(self) -> int:
        """Number of additional signatures required to reach threshold."""
        return max(0, self.threshold - len(self.signed))


class _DelegatorMixin(metaclass=abc.ABCMeta):
    """Class that implements verify_delegate() for RootMetadata and
    TargetsMetadata"""

    @abc.abstractmethod
    def get_role_definition(self, role: Role) -> RoleDefinition:
        """Return the role definition for the given delegated role.

        Raises UnknownRoleError if role is not actually delegated.
        """
        raise NotImplementedError

    @abc.abstractmethod
    def get_key(self, key_id: KeyId) -> Key:
        """Return the key object for the given key_id.

        Raises ValueError if key is not found.
        """
        raise NotImplementedError

    def get_verification_result(
        self,
        role: Role,
        payload: bytes,
        signatures: List[Signature],
    ) -> VerificationResult:
        """Return signature threshold verification result for delegated role.

        A key counts once, no matter how many of its signatures are valid.
        Signatures by keys outside the role definition are ignored, and a
        signature that cannot be verified never stops the others from being
        checked.

        NOTE: Unlike `verify_delegate()` this method does not raise, if the
        role metadata is not fully verified.

        Args:
            role: Delegated role to verify
            payload: Signed payload bytes for the delegated role
            signatures: Signatures over payload bytes

        Raises:
            UnknownRoleError: no delegation was found for ``role``.
        """
        role_definition = self.get_role_definition(role)

        signatures_by_key_id: Dict[KeyId, List[Signature]] = {}
        for sig in signatures:
            signatures_by_key_id.setdefault(sig.key_id, []).append(sig)

        signed = {}
        unsigned = {}
        # Key material of the keys in signed, one key counts once
        counted = set()

        for key_id in role_definition.key_ids:
            try:
                key = self.get_key(key_id)
            except ValueError:
                logger.info("No key for keyid %s", key_id)
                continue

            if key.value.value in counted:
                logger.info("Key %s was already counted for %s", key_id, role)
                continue

            if key_id not in signatures_by_key_id:
                unsigned[key_id] = key
                logger.info("No signature for keyid %s", key_id)
                continue

            for sig in signatures_by_key_id[key_id]:
                try:
                    key.verify(sig.method, payload, sig.sig)
                except BadSignatureError:
                    logger.info("Key %s failed to verify %s", key_id, role)
                except SignatureVerificationError as e:
                    logger.warning(
                        "Ignoring signature of key %s for %s: %s",
                        key_id,
                        role,
                        e,
                    )
                else:
                    signed[key_id] = key
                    counted.add(key.value.value)
                    break
            else:
                unsigned[key_id] = key

        return VerificationResult(role_definition.threshold, signed, unsigned)

    def verify_delegate(
        self, role: Role, metadata: "SignedMetadata[Any]"
    ) -> None:
        """Verify signature threshold for delegated role.

        Verify that there are enough valid signatures over the canonical
        ``signed`` payload of ``metadata`` to meet the threshold of keys for
        ``role``, as defined by the delegator (``self``).

        Args:
            role: Delegated role to verify
            metadata: Envelope holding the delegated role metadata

        Raises:
            UnsignedMetadataError: ``role`` was not signed with required
                threshold of keys.
            UnknownRoleError: no delegation was found for ``role``.
            ValueError: ``metadata`` is not of the document type of ``role``.
        """
        if not metadata.matches(role):
            raise ValueError(
                f"{metadata.signed_type.__name__} is not the document type "
                f"of role {role}"
            )

        result = self.get_verification_result(
            role, metadata.signed_bytes, metadata.signatures
        )
        if not result:
            raise UnsignedMetadataError(
                f"{role} was signed by {len(result.signed)}/"
                f"{result.threshold} keys"
            )


class RootMetadata(Signed, _DelegatorMixin):
    """A container for the signed part of root metadata.

    Parameters listed below are also instance attributes.

    Args:
        version: Metadata version number.
        expires: Metadata expiry date.
        consistent_snapshot: ``True`` if repository supports consistent
            snapshots.
        keys: Dictionary of keyids to Keys. Defines the keys used in the
            role definitions.
        root: Keys and threshold of the root role.
        targets: Keys and threshold of the targets role.
        timestamp: Keys and threshold of the timestamp role.
        snapshot: Keys and threshold of the snapshot role.
        unrecognized_fields: Dictionary of all attributes that are not managed
            by the Metadata API

    Raises:
        InvalidFieldValueError: Invalid arguments.
    """

    ROLE = Role.ROOT

    def __init__(
        self,
        version: int,
        expires: datetime,
        consistent_snapshot: bool,
        keys: Dict[KeyId, Key],
        root: RoleDefinition,
        targets: RoleDefinition,
        timestamp: RoleDefinition,
        snapshot: RoleDefinition,
        unrecognized_fields: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(version, expires, unrecognized_fields)
        self.consistent_snapshot = consistent_snapshot
        self.keys = keys
        self.root = root
        self.targets = targets
        self.timestamp = timestamp
        self.snapshot = snapshot

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, RootMetadata):
            return False

        return (
            super().__eq__(other)
            and self.consistent_snapshot == other.consistent_snapshot
            and self.keys == other.keys
            and self.roles == other.roles
        )

    @property
    def roles(self) -> Dict[Role, RoleDefinition]:
        """Role definitions of the four top-level roles."""
        return {
            Role.ROOT: self.root,
            Role.TARGETS: self.targets,
            Role.TIMESTAMP: self.timestamp,
            Role.SNAPSHOT: self.snapshot,
        }

    @classmethod
    def from_dict(cls, signed_dict: Dict[str, Any]) -> "RootMetadata":
        """Create ``RootMetadata`` object from its json/dict representation.

        Raises:
            MalformedDocumentError, UnknownRoleError: Invalid arguments.
        """
        version, expires = cls._common_fields_from_dict(signed_dict)
        consistent_snapshot = _pop_required(signed_dict, "consistent_snapshot")
        if not isinstance(consistent_snapshot, bool):
            raise InvalidFieldValueError(
                "consistent_snapshot", "not a boolean"
            )

        keys = _parse_keys(_pop_required(signed_dict, "keys"))
        roles = _ensure_object(_pop_required(signed_dict, "roles"), "roles")
        role_definitions = {}
        for name in (_ROOT, _TARGETS, _TIMESTAMP, _SNAPSHOT):
            role_definitions[name] = RoleDefinition.from_dict(
                _pop_required(roles, name)
            )
        if roles:
            raise UnknownRoleError(next(iter(roles)))

        # All fields left in the signed_dict are unrecognized.
        return cls(
            version,
            expires,
            consistent_snapshot,
            keys,
            role_definitions[_ROOT],
            role_definitions[_TARGETS],
            role_definitions[_TIMESTAMP],
            role_definitions[_SNAPSHOT],
            signed_dict,
        )

    def check_key_references(self) -> None:
        """Check that every key id used by a role is in ``keys``.

        Raises:
            InvalidFieldValueError: A role definition refers to a key that
                is not in ``keys``.
        """
        for role, role_definition in self.roles.items():
            for key_id in role_definition.key_ids:
                if key_id not in self.keys:
                    raise InvalidFieldValueError(
                        "roles", f"{role} refers to unknown key {key_id}"
                    )

    def get_role_definition(self, role: Role) -> RoleDefinition:
        """Return the role definition for the given top-level role."""
        roles = self.roles
        if role not in roles:
            raise UnknownRoleError(str(role))

        return roles[role]

    def get_key(self, key_id: KeyId) -> Key:
        if key_id not in self.keys:
            raise ValueError(f"Key {key_id} not found")

        return self.keys[key_id]


class MetaFile:
    """A container with information about a particular metadata file.

    *All parameters named below are not just constructor arguments but also
    instance attributes.*

    Args:
        version: Version of the metadata file.
        length: Length of the metadata file in bytes.
        hashes: Dictionary of hash algorithm names to hashes of the metadata
            file content.
        unrecognized_fields: Dictionary of all attributes that are not managed
            by the Metadata API

    Raises:
        InvalidFieldValueError: Invalid arguments.
    """

    def __init__(
        self,
        version: int,
        length: Optional[int] = None,
        hashes: Optional[Dict[HashType, HashValue]] = None,
        unrecognized_fields: Optional[Dict[str, Any]] = None,
    ):
        _validate_int(version, "version", 1)
        if length is not None:
            _validate_int(length, "length", 0)

        self.version = version
        self.length = length
        self.hashes = hashes
        if unrecognized_fields is None:
            unrecognized_fields = {}

        self.unrecognized_fields = unrecognized_fields

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, MetaFile):
            return False

        return (
            self.version == other.version
            and self.length == other.length
            and self.hashes == other.hashes
            and self.unrecognized_fields == other.unrecognized_fields
        )

    @classmethod
    def from_dict(cls, meta_dict: Any) -> "MetaFile":
        """Create ``MetaFile`` object from its json/dict representation.

        ``version``, ``length`` and ``hashes`` are all required.

        Raises:
            MissingFieldError, InvalidFieldValueError: Invalid arguments.
        """
        meta_dict = _ensure_object(meta_dict, "meta")
        version = _pop_required(meta_dict, "version")
        length = _pop_required(meta_dict, "length")
        hashes = _parse_hashes(_pop_required(meta_dict, "hashes"))
        # All fields left in the meta_dict are unrecognized.
        return cls(version, length, hashes, meta_dict)


class SnapshotMetaFile(MetaFile):
    """A ``MetaFile`` listed in snapshot metadata, where only ``version`` is
    required.
    """

    @classmethod
    def from_dict(cls, meta_dict: Any) -> "SnapshotMetaFile":
        """Create ``SnapshotMetaFile`` object from its json/dict
        representation.

        Raises:
            MissingFieldError, InvalidFieldValueError: Invalid arguments.
        """
        meta_dict = _ensure_object(meta_dict, "meta")
        version = _pop_required(meta_dict, "version")
        length = meta_dict.pop("length", None)
        hashes = meta_dict.pop("hashes", None)
        if hashes is not None:
            hashes = _parse_hashes(hashes)
        # All fields left in the meta_dict are unrecognized.
        return cls(version, length, hashes, meta_dict)


class TimestampMetadata(Signed):
    """A container for the signed part of timestamp metadata.

    Timestamp metadata contains information about the snapshot metadata.

    *All parameters named below are not just constructor arguments but also
    instance attributes.*

    Args:
        version: Metadata version number.
        expires: Metadata expiry date.
        meta: Dictionary of metadata filenames to ``MetaFile`` objects.
        unrecognized_fields: Dictionary of all attributes that are not managed
            by the Metadata API

    Raises:
        InvalidFieldValueError: Invalid arguments.
    """

    ROLE = Role.TIMESTAMP

    def __init__(
        self,
        version: int,
        expires: datetime,
        meta: Dict[str, MetaFile],
        unrecognized_fields: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(version, expires, unrecognized_fields)
        self.meta = meta

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TimestampMetadata):
            return False

        return super().__eq__(other) and self.meta == other.meta

    @property
    def snapshot_meta(self) -> Optional[MetaFile]:
        """Meta information of "snapshot.json", if listed."""
        return self.meta.get("snapshot.json")

    @classmethod
    def from_dict(cls, signed_dict: Dict[str, Any]) -> "TimestampMetadata":
        """Create ``TimestampMetadata`` object from its json/dict
        representation.

        Raises:
            MalformedDocumentError, UnknownRoleError: Invalid arguments.
        """
        version, expires = cls._common_fields_from_dict(signed_dict)
        meta_dict = _ensure_object(_pop_required(signed_dict, "meta"), "meta")
        meta = {
            name: MetaFile.from_dict(meta_info)
            for name, meta_info in meta_dict.items()
        }
        # All fields left in the signed_dict are unrecognized.
        return cls(version, expires, meta, signed_dict)


class SnapshotMetadata(Signed):
    """A container for the signed part of snapshot metadata.

    Snapshot metadata lists the version of all targets metadata files.

    *All parameters named below are not just constructor arguments but also
    instance attributes.*

    Args:
        version: Metadata version number.
        expires: Metadata expiry date.
        meta: Dictionary of targets filenames to ``SnapshotMetaFile``
            objects.
        unrecognized_fields: Dictionary of all attributes that are not managed
            by the Metadata API

    Raises:
        InvalidFieldValueError: Invalid arguments.
    """

    ROLE = Role.SNAPSHOT

    def __init__(
        self,
        version: int,
        expires: datetime,
        meta: Dict[str, SnapshotMetaFile],
        unrecognized_fields: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(version, expires, unrecognized_fields)
        self.meta = meta

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SnapshotMetadata):
            return False

        return super().__eq__(other) and self.meta == other.meta

    @classmethod
    def from_dict(cls, signed_dict: Dict[str, Any]) -> "SnapshotMetadata":
        """Create ``SnapshotMetadata`` object from its json/dict
        representation.

        Raises:
            MalformedDocumentError, UnknownRoleError: Invalid arguments.
        """
        version, expires = cls._common_fields_from_dict(signed_dict)
        meta_dict = _ensure_object(_pop_required(signed_dict, "meta"), "meta")
        meta = {
            name: SnapshotMetaFile.from_dict(meta_info)
            for name, meta_info in meta_dict.items()
        }
        # All fields left in the signed_dict are unrecognized.
        return cls(version, expires, meta, signed_dict)


class DelegatedRole(RoleDefinition):
    """A container with information about a delegated role.

    Targets are delegated by ``paths``: a pattern matches a target path that
    is equal to it, and a pattern ending in "/" also matches every target
    path it is a prefix of. There is no globbing. Delegation by
    ``path_hash_prefixes`` is not supported.

    *All parameters named below are not just constructor arguments but also
    instance attributes.*

    Args:
        name: Delegated role name.
        key_ids: Delegated role signing key identifiers.
        threshold: Number of keys required to sign this role's metadata.
        terminating: ``True`` if this delegation terminates a target lookup.
        paths: Path patterns. See note above.
        unrecognized_fields: Dictionary of all attributes that are not managed
            by the Metadata API.

    Raises:
        InvalidFieldValueError, InvalidThresholdError: Invalid arguments.
    """

    def __init__(
        self,
        name: str,
        key_ids: List[KeyId],
        threshold: int,
        terminating: bool,
        paths: List[str],
        unrecognized_fields: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(key_ids, threshold, unrecognized_fields)
        if not isinstance(name, str) or not name:
            raise InvalidFieldValueError("name", "not a non-empty string")
        if not isinstance(terminating, bool):
            raise InvalidFieldValueError("terminating", "not a boolean")
        if not isinstance(paths, list) or any(
            not isinstance(p, str) for p in paths
        ):
            raise InvalidFieldValueError("paths", "not an array of strings")

        self.name = name
        self.terminating = terminating
        self.paths = paths

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, DelegatedRole):
            return False

        return (
            super().__eq__(other)
            and self.name == other.name
            and self.terminating == other.terminating
            and self.paths == other.paths
        )

    @property
    def role(self) -> Role:
        return Role.delegation(self.name)

    @classmethod
    def from_dict(cls, role_dict: Any) -> "DelegatedRole":
        """Create ``DelegatedRole`` object from its json/dict representation.

        Raises:
            MissingFieldError, InvalidFieldValueError, InvalidThresholdError:
                Invalid arguments.
            UnsupportedFeatureError: The role delegates by
                ``path_hash_prefixes``.
        """
        role_dict = _ensure_object(role_dict, "roles")
        if "path_hash_prefixes" in role_dict:
            if "paths" in role_dict:
                raise InvalidFieldValueError(
                    "paths",
                    "'paths' and 'path_hash_prefixes' are mutually exclusive",
                )
            raise UnsupportedFeatureError("path_hash_prefixes")

        name = _pop_required(role_dict, "name")
        key_ids = _parse_key_ids(_pop_required(role_dict, "keyids"))
        threshold = _pop_required(role_dict, "threshold")
        terminating = _pop_required(role_dict, "terminating")
        paths = _pop_required(role_dict, "paths")
        # All fields left in the role_dict are unrecognized.
        return cls(name, key_ids, threshold, terminating, paths, role_dict)

    def could_have_target(self, target_path: str) -> bool:
        """Determine whether the given ``target_path`` is in one of the
        paths that ``DelegatedRole`` is trusted to provide.

        Args:
            target_path: URL path to a target file, relative to a base
                targets URL.
        """
        for pattern in self.paths:
            if pattern == target_path:
                return True
            if pattern.endswith("/") and target_path.startswith(pattern):
                return True

        return False


class Delegations:
    """A container object storing information about all delegations.

    *All parameters named below are not just constructor arguments but also
    instance attributes.*

    Args:
        keys: Dictionary of keyids to Keys. Defines the keys used in ``roles``.
        roles: List of DelegatedRoles. It defines which keys are required to
            sign the metadata for a specific role. The roles order also
            defines the order that role delegations are considered during
            target searches.
        unrecognized_fields: Dictionary of all attributes that are not managed
            by the Metadata API

    Raises:
        InvalidFieldValueError: Invalid arguments.
    """

    def __init__(
        self,
        keys: Dict[KeyId, Key],
        roles: List[DelegatedRole],
        unrecognized_fields: Optional[Dict[str, Any]] = None,
    ):
        names = set()
        for role in roles:
            if role.name in TOP_LEVEL_ROLE_NAMES:
                raise InvalidFieldValueError(
                    "roles",
                    f"Delegated roles cannot use top-level role name "
                    f"{role.name}",
                )
            if role.name in names:
                raise InvalidFieldValueError(
                    "roles", f"Duplicate role {role.name}"
                )
            names.add(role.name)

        self.keys = keys
        self.roles = roles
        if unrecognized_fields is None:
            unrecognized_fields = {}

        self.unrecognized_fields = unrecognized_fields

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Delegations):
            return False

        return (
            self.keys == other.keys
            # Order of the delegated roles matters
            and self.roles == other.roles
            and self.unrecognized_fields == other.unrecognized_fields
        )

    @classmethod
    def from_dict(cls, delegations_dict: Any) -> "Delegations":
        """Create ``Delegations`` object from its json/dict representation.

        Raises:
            MalformedDocumentError: Invalid arguments.
        """
        delegations_dict = _ensure_object(delegations_dict, "delegations")
        keys = _parse_keys(_pop_required(delegations_dict, "keys"))
        roles = _pop_required(delegations_dict, "roles")
        if not isinstance(roles, list):
            raise InvalidFieldValueError("roles", "not an array")

        roles_res = [DelegatedRole.from_dict(role_dict) for role_dict in roles]
        # All fields left in the delegations_dict are unrecognized.
        return cls(keys, roles_res, delegations_dict)

    def get_role(self, name: str) -> DelegatedRole:
        """Return the delegated role ``name``.

        Raises:
            UnknownRoleError: There is no such delegated role.
        """
        for role in self.roles:
            if role.name == name:
                return role

        raise UnknownRoleError(name)

    def get_roles_for_target(
        self, target_path: str
    ) -> Iterator[Tuple[str, bool]]:
        """Given ``target_path`` get names and terminating status of all
        delegated roles who are responsible for it, in priority order.

        Args:
            target_path: URL path to a target file, relative to a base
                targets URL.
        """
        for role in self.roles:
            if role.could_have_target(target_path):
                yield role.name, role.terminating

    def check_key_references(self) -> None:
        """Check that every key id used by a delegated role is in ``keys``.

        Raises:
            InvalidFieldValueError: A delegated role refers to a key that is
                not in ``keys``.
        """
        for role in self.roles:
            for key_id in role.key_ids:
                if key_id not in self.keys:
                    raise InvalidFieldValueError(
                        "delegations",
                        f"{role.name} refers to unknown key {key_id}",
                    )


class TargetInfo:
    """A container with information about a particular target file.

    *All parameters named below are not just constructor arguments but also
    instance attributes.*

    Args:
        length: Length in bytes.
        hashes: Dictionary of hash algorithm names to hashes.
        custom: Opaque application specific data, if any.
        unrecognized_fields: Dictionary of all attributes that are not managed
            by the Metadata API

    Raises:
        InvalidFieldValueError: Invalid arguments.
    """

    def __init__(
        self,
        length: int,
        hashes: Dict[HashType, HashValue],
        custom: Optional[Dict[str, Any]] = None,
        unrecognized_fields: Optional[Dict[str, Any]] = None,
    ):
        _validate_int(length, "length", 0)
        if custom is not None:
            _ensure_object(custom, "custom")

        self.length = length
        self.hashes = hashes
        self.custom = custom
        if unrecognized_fields is None:
            unrecognized_fields = {}

        self.unrecognized_fields = unrecognized_fields

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TargetInfo):
            return False

        return (
            self.length == other.length
            and self.hashes == other.hashes
            and self.custom == other.custom
            and self.unrecognized_fields == other.unrecognized_fields
        )

    @classmethod
    def from_dict(cls, target_dict: Any) -> "TargetInfo":
        """Create ``TargetInfo`` object from its json/dict representation.

        Raises:
            MissingFieldError, InvalidFieldValueError: Invalid arguments.
        """
        target_dict = _ensure_object(target_dict, "targets")
        length = _pop_required(target_dict, "length")
        hashes = _parse_hashes(_pop_required(target_dict, "hashes"))
        custom = target_dict.pop("custom", None)
        # All fields left in the target_dict are unrecognized.
        return cls(length, hashes, custom, target_dict)


class TargetsMetadata(Signed, _DelegatorMixin):
    """A container for the signed part of targets metadata.

    Targets contains verifying information about target files and also
    delegates responsibility to other targets roles. Delegated targets
    metadata uses the same document type.

    *All parameters named below are not just constructor arguments but also
    instance attributes.*

    Args:
        version: Metadata version number.
        expires: Metadata expiry date.
        targets: Dictionary of target paths to ``TargetInfo`` objects.
        delegations: Defines how this Targets delegates responsibility to
            other Targets Metadata files, or None if there are none.
        unrecognized_fields: Dictionary of all attributes that are not managed
            by the Metadata API

    Raises:
        InvalidFieldValueError: Invalid arguments.
    """

    ROLE = Role.TARGETS

    def __init__(
        self,
        version: int,
        expires: datetime,
        targets: Dict[str, TargetInfo],
        delegations: Optional[Delegations] = None,
        unrecognized_fields: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(version, expires, unrecognized_fields)
        self.targets = targets
        self.delegations = delegations

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TargetsMetadata):
            return False

        return (
            super().__eq__(other)
            and self.targets == other.targets
            and self.delegations == other.delegations
        )

    @classmethod
    def matches(cls, role: Role) -> bool:
        return role == Role.TARGETS or role.delegated

    @classmethod
    def from_dict(cls, signed_dict: Dict[str, Any]) -> "TargetsMetadata":
        """Create ``TargetsMetadata`` object from its json/dict
        representation.

        Raises:
            MalformedDocumentError, UnknownRoleError: Invalid arguments.
        """
        version, expires = cls._common_fields_from_dict(signed_dict)
        targets_dict = _ensure_object(
            _pop_required(signed_dict, "targets"), "targets"
        )
        targets = {
            path: TargetInfo.from_dict(target_info)
            for path, target_info in targets_dict.items()
        }
        delegations = None
        if "delegations" in signed_dict:
            delegations = Delegations.from_dict(signed_dict.pop("delegations"))
        # All fields left in the signed_dict are unrecognized.
        return cls(version, expires, targets, delegations, signed_dict)

    def check_key_references(self) -> None:
        """See ``Delegations.check_key_references``."""
        if self.delegations is not None:
            self.delegations.check_key_references()

    def get_role_definition(self, role: Role) -> RoleDefinition:
        """Return the role definition for the given delegated role."""
        if self.delegations is None or not role.delegated:
            raise UnknownRoleError(str(role))

        return self.delegations.get_role(role.name)

    def get_key(self, key_id: KeyId) -> Key:
        if self.delegations is None or key_id not in self.delegations.keys:
            raise ValueError(f"Key {key_id} not found")

        return self.delegations.keys[key_id]
