# Copyright New York University and the TUF contributors
# SPDX-License-Identifier: MIT OR Apache-2.0

"""
Define the exceptions raised while parsing and verifying metadata.
The names chosen for Exception classes should end in 'Error' except where
there is a good reason not to, and provide that reason in those cases.
"""

from typing import Optional


class RepositoryError(Exception):
    """An error with a repository's metadata.

    It covers all exceptions that come from the repository side when
    looking from the perspective of users of the metadata API.
    """


#### Parse errors ####


class MalformedDocumentError(RepositoryError):
    """A metadata document, or a part of it, does not have the expected
    structure (e.g. it is not an object where one was required).
    """


class MissingFieldError(MalformedDocumentError):
    """A required field is missing.

    Args:
        field: Name of the missing field.
    """

    def __init__(self, field: str):
        super().__init__(f"Field '{field}' missing")
        self.field = field


class InvalidFieldValueError(MalformedDocumentError):
    """A field is present but its value is not valid.

    The underlying cause, if any, is chained as ``__cause__``.

    Args:
        field: Name of the invalid field.
        message: Description of the problem.
    """

    def __init__(self, field: str, message: Optional[str] = None):
        detail = f": {message}" if message else ""
        super().__init__(f"Field '{field}' is not valid{detail}")
        self.field = field


class InvalidThresholdError(MalformedDocumentError):
    """A role threshold is lower than 1."""

    def __init__(self, threshold: int):
        super().__init__(f"threshold must be >= 1, got {threshold}")
        self.threshold = threshold


class UnsupportedFeatureError(MalformedDocumentError):
    """The document uses a feature this implementation refuses to handle,
    such as hash prefix based delegation paths.
    """

    def __init__(self, feature: str):
        super().__init__(f"'{feature}' is not supported")
        self.feature = feature


class UnknownRoleError(RepositoryError):
    """A role name could not be recognized."""

    def __init__(self, role: str):
        super().__init__(f"Unknown role '{role}'")
        self.role = role


#### Verification errors ####


class SignatureVerificationError(RepositoryError):
    """A single signature could not be accepted.

    Threshold counting treats any subclass as "this signature does not
    count" and moves on to the next one.
    """


class UnsupportedKeyTypeError(SignatureVerificationError):
    """The key type is not one that signatures can be verified with."""

    def __init__(self, key_type: str):
        super().__init__(f"Unsupported key type '{key_type}'")
        self.key_type = key_type


class UnsupportedSignatureSchemeError(SignatureVerificationError):
    """The signature scheme is not one that is trusted."""

    def __init__(self, scheme: str):
        super().__init__(f"Unsupported signature scheme '{scheme}'")
        self.scheme = scheme


class SignatureSchemeKeyTypeMismatchError(SignatureVerificationError):
    """The signature scheme cannot be used with the key type."""


class BadSignatureError(SignatureVerificationError):
    """The signature did not validate against the key and message."""


class UnsignedMetadataError(RepositoryError):
    """An error about metadata object with insufficient threshold of
    signatures.
    """
