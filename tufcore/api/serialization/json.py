# Copyright New York University and the TUF contributors
# SPDX-License-Identifier: MIT OR Apache-2.0

"""``tufcore.api.serialization.json`` module provides a concrete
implementation to deserialize role metadata from the JSON wireline format,
and to serialize the 'signed' part of role metadata to the OLPC Canonical
JSON format for signature verification and key id calculation.
"""

import json
from typing import Any, Type

from securesystemslib.formats import encode_canonical

# ... to allow deserializing SignedMetadata objects here, while also
# creating default de/serializers there (see metadata local scope imports).
from tufcore.api.metadata import SignedMetadata, T
from tufcore.api.serialization import (
    DeserializationError,
    MetadataDeserializer,
    SerializationError,
    SignedSerializer,
)


def canonicalize(value: Any) -> bytes:
    """Return the utf-8 encoded OLPC Canonical JSON representation of value.

    Object keys are sorted, there is no insignificant whitespace and only
    integer numbers are allowed. The output is the exact input of hashing
    and signing, so it must never change for the same logical value.

    Raises:
        SerializationError: value cannot be canonicalized (e.g. it contains
            a float or an object of unknown type).
    """
    try:
        return encode_canonical(value).encode("utf-8")

    except Exception as e:
        raise SerializationError(f"Failed to canonicalize: {e}") from e


class JSONDeserializer(MetadataDeserializer):
    """Provides JSON to SignedMetadata deserialize method."""

    def deserialize(
        self, raw_data: bytes, signed_type: Type[T]
    ) -> SignedMetadata[T]:
        """Deserialize utf-8 encoded JSON bytes into SignedMetadata object.

        Raises:
            DeserializationError: raw_data is not utf-8 encoded JSON, or is
                nested too deeply to decode.
            tufcore.api.exceptions.MalformedDocumentError: The JSON value is
                not a valid metadata envelope.
        """
        try:
            json_dict = json.loads(raw_data.decode("utf-8"))

        except Exception as e:
            raise DeserializationError("Failed to deserialize JSON") from e

        return SignedMetadata.from_dict(json_dict, signed_type)


class CanonicalJSONSerializer(SignedSerializer):
    """Provides SignedMetadata to OLPC Canonical JSON serialize method.

    Only the raw ``signed`` payload is serialized: the typed document is never
    converted back, as that could change what the signatures cover.
    """

    def serialize(self, metadata_obj: SignedMetadata) -> bytes:
        """Serialize the signed payload into utf-8 encoded OLPC Canonical
        JSON bytes.
        """
        return canonicalize(metadata_obj.signed)
