"""Tests for Signer."""

import hashlib

from croppy.signing import Signer


class TestSigner:
    def test_disabled(self):
        signer = Signer()
        assert not signer.enabled
        assert signer.sign("images/cat-10x10.jpg") is None
        assert signer.verify("images/cat-10x10.jpg", None)
        assert signer.verify("images/cat-10x10.jpg", "anything")

    def test_empty_key_disables(self):
        assert not Signer("").enabled

    def test_token_is_md5_of_key_and_basename(self):
        signer = Signer("secret")
        expected = hashlib.md5(b"secretcat-10x10.jpg").hexdigest()
        assert signer.sign("images/cat-10x10.jpg") == expected

    def test_directory_does_not_affect_token(self):
        signer = Signer("secret")
        assert signer.sign("/a/cat-10x10.jpg") == signer.sign("b/c/cat-10x10.jpg")

    def test_query_string_not_signed(self):
        signer = Signer("secret")
        assert signer.sign("/a/cat-10x10.jpg?x=1") == signer.sign("cat-10x10.jpg")

    def test_verify(self):
        signer = Signer("secret")
        token = signer.sign("cat-10x10.jpg")
        assert signer.verify("/images/cat-10x10.jpg", token)
        assert not signer.verify("/images/cat-10x10.jpg", "deadbeef")
        assert not signer.verify("/images/cat-10x10.jpg", None)
        assert not signer.verify("/images/cat-20x20.jpg", token)

    def test_different_keys(self):
        assert Signer("a").sign("x.jpg") != Signer("b").sign("x.jpg")
