"""
Tests: Content hashing used for analysis cache keys.

Run with:
    pytest aml_coverage/tests/test_hashing.py -v
"""

from aml_coverage.utils.hashing import content_signature, sha256_hash


class TestHashing:
    def test_signature_ignores_key_order(self):
        assert content_signature({"a": 1, "b": [1, 2]}) == content_signature({"b": [1, 2], "a": 1})

    def test_signature_changes_with_content(self):
        assert content_signature({"a": 1}) != content_signature({"a": 2})

    def test_signature_keeps_list_order(self):
        assert content_signature({"a": [1, 2]}) != content_signature({"a": [2, 1]})

    def test_sha256(self):
        assert sha256_hash("abc") == "ba7816bf8f01cfea414140de5dae2223b00361a396177a9cb410ff61f20015ad"
