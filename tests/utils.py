# Copyright 2020, TUF contributors
# SPDX-License-Identifier: MIT OR Apache-2.0

"""
<Program Name>
  utils.py

<Started>
  August 3, 2020.

<Author>
  Jussi Kukkonen

<Copyright>
  See LICENSE-MIT OR LICENSE for licensing information.

<Purpose>
  Provide common utilities for tufcore tests: data driven sub tests, test
  logging, and key material and signed documents generated at test time.
"""

import argparse
import json
import logging
import unittest
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Dict, Iterable, List, Optional, Union

from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric import padding, rsa
from cryptography.hazmat.primitives.asymmetric.ed25519 import (
    Ed25519PrivateKey,
)
from cryptography.hazmat.primitives.serialization import (
    Encoding,
    PublicFormat,
)

from tufcore.api.keys import Key
from tufcore.api.serialization.json import canonicalize

logger = logging.getLogger(__name__)

# DataSet is only here so type hints can be used.
DataSet = Dict[str, Any]

PrivateKey = Union[Ed25519PrivateKey, rsa.RSAPrivateKey]

_PSS_HASHES = {
    "rsassa-pss-sha256": hashes.SHA256,
    "rsassa-pss-sha512": hashes.SHA512,
}


# Test runner decorator: Runs the test as a set of N SubTests,
# (where N is number of items in dataset), feeding the actual test
# function one test case at a time
def run_sub_tests_with_dataset(
    dataset: DataSet,
) -> Callable[[Callable], Callable]:
    """Decorator starting a unittest.TestCase.subtest() for each of the
    cases in dataset"""

    def real_decorator(
        function: Callable[[unittest.TestCase, Any], None],
    ) -> Callable[[unittest.TestCase], None]:
        def wrapper(test_cls: unittest.TestCase) -> None:
            for case, data in dataset.items():
                with test_cls.subTest(case=case):
                    # Save case name for future reference
                    test_cls.case_name = case.replace(" ", "_")
                    function(test_cls, data)

        return wrapper

    return real_decorator


def configure_test_logging(argv: List[str]) -> None:
    """Configure logger level for a certain test file"""
    # parse arguments but only handle '-v': argv may contain
    # other things meant for unittest argument parser
    parser = argparse.ArgumentParser(add_help=False)
    parser.add_argument("-v", "--verbose", action="count", default=0)
    args, _ = parser.parse_known_args(argv)

    if args.verbose <= 1:
        # 0 and 1 both mean ERROR: this way '-v' makes unittest print test
        # names without increasing log level
        loglevel = logging.ERROR
    elif args.verbose == 2:
        loglevel = logging.WARNING
    elif args.verbose == 3:
        loglevel = logging.INFO
    else:
        loglevel = logging.DEBUG

    logging.basicConfig(level=loglevel)


def expires_in(days: int) -> str:
    """Return a metadata "expires" string ``days`` from now"""
    expires = datetime.now(timezone.utc) + timedelta(days=days)
    return expires.strftime("%Y-%m-%dT%H:%M:%SZ")


class KeySigner:
    """A private key, its public key dict and its key id"""

    def __init__(self, private_key: PrivateKey, method: str):
        self.private_key = private_key
        self.method = method

        public_key = private_key.public_key()
        if isinstance(private_key, Ed25519PrivateKey):
            keytype = "ed25519"
            public = public_key.public_bytes(
                Encoding.Raw, PublicFormat.Raw
            ).hex()
        else:
            keytype = "rsa"
            public = public_key.public_bytes(
                Encoding.PEM, PublicFormat.SubjectPublicKeyInfo
            ).decode("utf-8")

        self.key_dict = {
            "keytype": keytype,
            "scheme": method,
            "keyval": {"public": public},
        }
        self.keyid = Key.from_dict(self.key_dict).key_id().value

    @classmethod
    def ed25519(cls) -> "KeySigner":
        return cls(Ed25519PrivateKey.generate(), "ed25519")

    @classmethod
    def rsa(
        cls, method: str = "rsassa-pss-sha256", key_size: int = 2048
    ) -> "KeySigner":
        private_key = rsa.generate_private_key(
            public_exponent=65537, key_size=key_size
        )
        return cls(private_key, method)

    def sign(self, payload: bytes) -> bytes:
        if isinstance(self.private_key, Ed25519PrivateKey):
            return self.private_key.sign(payload)

        hash_obj = _PSS_HASHES[self.method]()
        pss = padding.PSS(
            mgf=padding.MGF1(hash_obj), salt_length=hash_obj.digest_size
        )
        return self.private_key.sign(payload, pss, hash_obj)

    def signature_dict(self, payload: bytes) -> Dict[str, str]:
        return {
            "keyid": self.keyid,
            "method": self.method,
            "sig": self.sign(payload).hex(),
        }


def role_dict(
    signers: Iterable[KeySigner], threshold: int = 1
) -> Dict[str, Any]:
    return {"keyids": [s.keyid for s in signers], "threshold": threshold}


def keys_dict(signers: Iterable[KeySigner]) -> Dict[str, Any]:
    return {s.keyid: s.key_dict for s in signers}


def root_dict(
    signers: Dict[str, List[KeySigner]],
    version: int = 1,
    expires: str = "2030-01-01T00:00:00Z",
    thresholds: Optional[Dict[str, int]] = None,
) -> Dict[str, Any]:
    """Return a root "signed" dict with role keys from ``signers``, a
    dict of role names to signer lists"""
    thresholds = thresholds or {}
    all_signers = [s for role_signers in signers.values() for s in role_signers]
    return {
        "_type": "root",
        "version": version,
        "expires": expires,
        "consistent_snapshot": False,
        "keys": keys_dict(all_signers),
        "roles": {
            name: role_dict(role_signers, thresholds.get(name, 1))
            for name, role_signers in signers.items()
        },
    }


def sign_metadata(
    signed: Dict[str, Any], signers: Iterable[KeySigner]
) -> bytes:
    """Return the JSON bytes of an envelope of ``signed``, signed by every
    signer in ``signers``"""
    payload = canonicalize(signed)
    signatures = [signer.signature_dict(payload) for signer in signers]
    return json.dumps({"signed": signed, "signatures": signatures}).encode()
