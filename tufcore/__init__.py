# Copyright New York University and the TUF contributors
# SPDX-License-Identifier: MIT OR Apache-2.0

"""tufcore
"""

import tufcore.api

# If updating version, also update it in setup.py
__version__ = "0.1.0"
__all__ = [
    tufcore.api.__name__,
]
