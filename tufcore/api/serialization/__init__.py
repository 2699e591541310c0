# Copyright New York University and the TUF contributors
# SPDX-License-Identifier: MIT OR Apache-2.0

"""``tufcore.api.serialization`` module provides abstract base classes and
concrete implementations to deserialize metadata and to canonicalize signed
payloads.

Any custom de/serialization implementations should inherit from the abstract
base classes defined in this module.

- Metadata deserializers are used to convert from wireline formats.
- Signed serializers are used to canonicalize data for cryptographic
  signature verification.
"""

import abc
from typing import TYPE_CHECKING, Type

from tufcore.api.exceptions import MalformedDocumentError, RepositoryError

if TYPE_CHECKING:
    from tufcore.api.metadata import SignedMetadata, T


class SerializationError(RepositoryError):
    """Error during serialization."""


class DeserializationError(MalformedDocumentError):
    """Error during deserialization."""


class MetadataDeserializer(metaclass=abc.ABCMeta):
    """Abstract base class for deserialization of SignedMetadata objects."""

    @abc.abstractmethod
    def deserialize(
        self, raw_data: bytes, signed_type: "Type[T]"
    ) -> "SignedMetadata[T]":
        """Deserialize bytes to SignedMetadata object."""
        raise NotImplementedError


class SignedSerializer(metaclass=abc.ABCMeta):
    """Abstract base class for serialization of signed payloads."""

    @abc.abstractmethod
    def serialize(self, metadata_obj: "SignedMetadata") -> bytes:
        """Serialize the signed payload of a SignedMetadata object to bytes."""
        raise NotImplementedError
