# Copyright 2021, New York University and the TUF contributors
# SPDX-License-Identifier: MIT OR Apache-2.0

"""Configuration options for metadata parsing."""

from dataclasses import dataclass

from tufcore.api._payload import Role


@dataclass
class ParserConfig:
    """Used to store ``SignedMetadata`` parsing configuration.

    Args:
        root_max_length: Maximum length of a root metadata document.
        timestamp_max_length: Maximum length of a timestamp metadata document.
        snapshot_max_length: Maximum length of a snapshot metadata document.
        targets_max_length: Maximum length of a targets metadata document,
            top-level or delegated.
        check_key_references: Reject documents whose role definitions refer
            to key ids that are not in the document's key pool. When
            ``False`` such roles are only found out at verification time,
            as a threshold that can never be reached.
    """

    root_max_length: int = 512000  # bytes
    timestamp_max_length: int = 16384  # bytes
    snapshot_max_length: int = 2000000  # bytes
    targets_max_length: int = 5000000  # bytes
    check_key_references: bool = True

    def max_length(self, role: Role) -> int:
        """Return the maximum accepted document length for ``role``."""
        if role == Role.ROOT:
            return self.root_max_length
        if role == Role.TIMESTAMP:
            return self.timestamp_max_length
        if role == Role.SNAPSHOT:
            return self.snapshot_max_length
        return self.targets_max_length
