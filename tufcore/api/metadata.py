# Copyright New York University and the TUF contributors
# SPDX-License-Identifier: MIT OR Apache-2.0

"""The low-level Metadata API.

The low-level Metadata API in ``tufcore.api.metadata`` module contains:

* Safe deserialization of metadata from raw bytes.
* Typed access to signed metadata content.
* Verifying signature thresholds of delegated metadata.

Metadata API implements functionality at the metadata document level, it
does not fetch, store or order metadata downloads on its own (but can be
used to implement a client that does).

A ``SignedMetadata`` object represents a single metadata document. It keeps
the ``signed`` payload exactly as it was parsed: the bytes that signatures
are verified against are always the canonical form of that raw payload, never
of the typed view. The typed view is one of the four signed classes
(``RootMetadata``, ``TimestampMetadata``, ``SnapshotMetadata`` and
``TargetsMetadata``) and is returned by ``get_signed()``::

    envelope = SignedMetadata.from_bytes(data, RootMetadata)
    trusted_root.verify_delegate(Role.ROOT, envelope)
    root = envelope.get_signed()
    if root.is_expired():
        ...

Currently Metadata API supports JSON as the wireline format.
"""

import copy
import logging
from typing import Any, Dict, Generic, List, Optional, Type

# Expose payload classes via ``tufcore.api.metadata`` to maintain the API,
# even if they are unused in the local scope.
from tufcore.api._payload import (  # noqa: F401
    TOP_LEVEL_ROLE_NAMES,
    DelegatedRole,
    Delegations,
    MetaFile,
    Role,
    RoleDefinition,
    RootMetadata,
    Signed,
    SnapshotMetadata,
    SnapshotMetaFile,
    T,
    TargetInfo,
    TargetsMetadata,
    TimestampMetadata,
    VerificationResult,
)
from tufcore.api.config import ParserConfig
from tufcore.api.exceptions import (
    InvalidFieldValueError,
    MalformedDocumentError,
    MissingFieldError,
)
from tufcore.api.keys import Signature
from tufcore.api.serialization import (
    DeserializationError,
    MetadataDeserializer,
    SignedSerializer,
)

logger = logging.getLogger(__name__)


class SignedMetadata(Generic[T]):
    """A container for signed metadata.

    ``SignedMetadata[T]`` is a generic container type where T can be any one
    type of [``RootMetadata``, ``TimestampMetadata``, ``SnapshotMetadata``,
    ``TargetsMetadata``]. Unlike a pure annotation, ``signed_type`` is known at
    runtime: it decides how ``signed`` is parsed, and which roles the
    envelope can be verified as.

    *All parameters named below are not just constructor arguments but also
    instance attributes.*

    Args:
        signed_type: Document type of the ``signed`` payload.
        signed: The raw ``signed`` payload as parsed from the wireline
            format. It is never modified.
        signatures: Ordered list of ``Signature`` objects, each signing the
            canonical serialized representation of ``signed``. Default is
            an empty list.
        unrecognized_fields: Dictionary of all attributes that are not managed
            by the Metadata API. These fields are NOT signed.
    """

    def __init__(
        self,
        signed_type: Type[T],
        signed: Dict[str, Any],
        signatures: Optional[List[Signature]] = None,
        unrecognized_fields: Optional[Dict[str, Any]] = None,
    ):
        self.signed_type = signed_type
        self.signed = signed
        self.signatures = signatures if signatures is not None else []
        if unrecognized_fields is None:
            unrecognized_fields = {}

        self.unrecognized_fields = unrecognized_fields

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SignedMetadata):
            return False

        return (
            self.signed_type == other.signed_type
            # Order of the signatures matters
            and self.signatures == other.signatures
            and self.signed == other.signed
            and self.unrecognized_fields == other.unrecognized_fields
        )

    @property
    def signed_bytes(self) -> bytes:
        """Default canonical json byte representation of ``self.signed``."""
        return self.serialize_signed()

    def serialize_signed(
        self, serializer: Optional[SignedSerializer] = None
    ) -> bytes:
        """Return the signed payload bytes that signatures are made over.

        Args:
            serializer: ``SignedSerializer`` implementation to use. Default
                is ``CanonicalJSONSerializer``.

        Raises:
            tufcore.api.serialization.SerializationError: The payload cannot
                be serialized.
        """
        if serializer is None:
            # Use local scope import to avoid circular import errors
            from tufcore.api.serialization.json import CanonicalJSONSerializer

            serializer = CanonicalJSONSerializer()

        return serializer.serialize(self)

    def matches(self, role: Role) -> bool:
        """Return ``True`` if this envelope holds a document type for
        ``role``.
        """
        return self.signed_type.matches(role)

    @classmethod
    def from_dict(
        cls, metadata: Any, signed_type: Type[T]
    ) -> "SignedMetadata[T]":
        """Create ``SignedMetadata`` object from its json/dict
        representation.

        Only the envelope is parsed here, the payload is parsed by
        ``get_signed()``.

        Args:
            metadata: Metadata in dict representation.
            signed_type: Document type of the ``signed`` payload.

        Raises:
            MalformedDocumentError: ``metadata`` is not an object or
                ``signed`` or ``signatures`` are missing or invalid.

        Side Effect:
            Destroys the metadata dict passed by reference.

        Returns:
            ``SignedMetadata`` object.
        """
        if not isinstance(metadata, dict):
            raise MalformedDocumentError("Metadata is not an object")

        for field in ("signatures", "signed"):
            if field not in metadata:
                raise MissingFieldError(field)

        signed = metadata.pop("signed")
        if not isinstance(signed, dict):
            raise InvalidFieldValueError("signed", "not an object")

        signatures_list = metadata.pop("signatures")
        if not isinstance(signatures_list, list):
            raise InvalidFieldValueError("signatures", "not an array")

        signatures = [
            Signature.from_dict(sig_dict) for sig_dict in signatures_list
        ]

        return cls(
            signed_type,
            signed,
            signatures,
            # All fields left in the metadata dict are unrecognized.
            unrecognized_fields=metadata,
        )

    @classmethod
    def from_bytes(
        cls,
        data: bytes,
        signed_type: Type[T],
        deserializer: Optional[MetadataDeserializer] = None,
        config: Optional[ParserConfig] = None,
    ) -> "SignedMetadata[T]":
        """Load metadata from raw data.

        Args:
            data: Metadata content.
            signed_type: Document type of the ``signed`` payload.
            deserializer: ``MetadataDeserializer`` implementation to use.
                Default is ``JSONDeserializer``.
            config: Parser configuration, for the maximum document length.
                Default is ``ParserConfig()``.

        Raises:
            tufcore.api.serialization.DeserializationError: The data is too
                long or cannot be deserialized.
            MalformedDocumentError: The data is not a valid envelope.

        Returns:
            ``SignedMetadata`` object.
        """
        if config is None:
            config = ParserConfig()

        max_length = config.max_length(signed_type.ROLE)
        if len(data) > max_length:
            raise DeserializationError(
                f"{signed_type.ROLE} metadata is {len(data)} bytes, longer "
                f"than the maximum {max_length}"
            )

        if deserializer is None:
            # Use local scope import to avoid circular import errors
            from tufcore.api.serialization.json import JSONDeserializer

            deserializer = JSONDeserializer()

        return deserializer.deserialize(data, signed_type)

    def get_signed(self, config: Optional[ParserConfig] = None) -> T:
        """Parse the ``signed`` payload into its typed document.

        ``signed`` itself is left untouched: parsing works on a copy.

        Args:
            config: Parser configuration. Default is ``ParserConfig()``.

        Raises:
            MalformedDocumentError: The payload is not a valid document.
            tufcore.api.exceptions.UnknownRoleError: The ``_type`` of the
                payload or a role name is not recognized.

        Returns:
            The typed ``signed_type`` document.
        """
        if config is None:
            config = ParserConfig()

        try:
            signed_dict = copy.deepcopy(self.signed)
        except RecursionError as e:
            raise MalformedDocumentError("signed is nested too deeply") from e

        signed = self.signed_type.from_dict(signed_dict)
        if config.check_key_references and isinstance(
            signed, (RootMetadata, TargetsMetadata)
        ):
            signed.check_key_references()

        logger.debug(
            "Parsed %s metadata version %d", signed.ROLE, signed.version
        )
        return signed
