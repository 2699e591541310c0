# Copyright New York University and the TUF contributors
# SPDX-License-Identifier: MIT OR Apache-2.0

"""Public API for ``tufcore.api``."""

from .metadata import (
    TOP_LEVEL_ROLE_NAMES,
    DelegatedRole,
    Delegations,
    MetaFile,
    Role,
    RoleDefinition,
    RootMetadata,
    Signed,
    SignedMetadata,
    SnapshotMetadata,
    SnapshotMetaFile,
    TargetInfo,
    TargetsMetadata,
    TimestampMetadata,
    VerificationResult,
)

from .config import ParserConfig

from .exceptions import (
    BadSignatureError,
    InvalidFieldValueError,
    InvalidThresholdError,
    MalformedDocumentError,
    MissingFieldError,
    RepositoryError,
    SignatureSchemeKeyTypeMismatchError,
    SignatureVerificationError,
    UnknownRoleError,
    UnsignedMetadataError,
    UnsupportedFeatureError,
    UnsupportedKeyTypeError,
    UnsupportedSignatureSchemeError,
)

from .keys import (
    HASH_PREFERENCES,
    HashType,
    HashValue,
    Key,
    KeyId,
    KeyType,
    KeyValue,
    Signature,
    SignatureScheme,
    SignatureValue,
)

__all__ = [
    "HASH_PREFERENCES",
    "TOP_LEVEL_ROLE_NAMES",
    BadSignatureError.__name__,
    DelegatedRole.__name__,
    Delegations.__name__,
    HashType.__name__,
    HashValue.__name__,
    InvalidFieldValueError.__name__,
    InvalidThresholdError.__name__,
    Key.__name__,
    KeyId.__name__,
    KeyType.__name__,
    KeyValue.__name__,
    MalformedDocumentError.__name__,
    MetaFile.__name__,
    MissingFieldError.__name__,
    ParserConfig.__name__,
    RepositoryError.__name__,
    Role.__name__,
    RoleDefinition.__name__,
    RootMetadata.__name__,
    Signature.__name__,
    SignatureScheme.__name__,
    SignatureSchemeKeyTypeMismatchError.__name__,
    SignatureValue.__name__,
    SignatureVerificationError.__name__,
    Signed.__name__,
    SignedMetadata.__name__,
    SnapshotMetaFile.__name__,
    SnapshotMetadata.__name__,
    TargetInfo.__name__,
    TargetsMetadata.__name__,
    TimestampMetadata.__name__,
    UnknownRoleError.__name__,
    UnsignedMetadataError.__name__,
    UnsupportedFeatureError.__name__,
    UnsupportedKeyTypeError.__name__,
    UnsupportedSignatureSchemeError.__name__,
    VerificationResult.__name__,
]
