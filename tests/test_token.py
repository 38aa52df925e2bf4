"""
Tests for the token wire format.
"""

import pytest

from simpleauth.algorithms import HashAlg
from simpleauth.exceptions import MalformedToken, UnknownAlgorithm
from simpleauth.token import Token, format_token, parse_token


class TestFormatToken:
    """Tests for format_token()."""

    def test_layout(self):
        """Should comma-join the fields with an uppercase hex hash."""
        token = format_token(HashAlg.SHA256, 1503754961, "a=1", b"\xab\xcd\x01")

        assert token == "SHA256,1503754961,a=1,ABCD01"

    def test_empty_payload_leaves_empty_field(self):
        """Should leave the data field empty for an empty payload."""
        token = format_token("SHA512", 7, "", b"\x00")

        assert token == "SHA512,7,,00"

    def test_token_to_string(self):
        """Should render the same string through to_string() and str()."""
        token = Token(HashAlg.SHA256, 42, "k=v", b"\x10")

        assert token.to_string() == "SHA256,42,k=v,10"
        assert str(token) == token.to_string()


class TestParseToken:
    """Tests for parse_token()."""

    def test_reference_token(self, token_b):
        """Should split the reference token into its four fields."""
        token = parse_token(token_b)

        assert token.alg is HashAlg.SHA256
        assert token.timestamp == 1503754961
        assert token.data == "user=lazaro&msg=wake+up%21+and+give+me+500%E2%82%AC"
        assert token.signature.hex().upper() == token_b.rsplit(",", 1)[1]

    def test_round_trip_through_string(self, token_b):
        """Should render a parsed token back to the same string."""
        token = parse_token(token_b)

        assert Token.parse(token.to_string()) == token
        assert token.to_string() == token_b

    def test_lowercase_hex_accepted(self):
        """Should accept a lowercase hex hash."""
        token = parse_token("SHA256,1,,abcdef")

        assert token.signature == b"\xab\xcd\xef"

    def test_negative_timestamp(self):
        """Should accept a negative timestamp."""
        assert parse_token("SHA256,-5,,00").timestamp == -5

    @pytest.mark.parametrize("raw", [
        "",
        "SHA256",
        "SHA256,1503754961,40165BDD",
        "SHA256,1503754961,,AB,CD",
        "SHA256,1503754961,a,b,AB",
    ])
    def test_wrong_field_count(self, raw):
        """Should reject anything other than four fields."""
        with pytest.raises(MalformedToken):
            parse_token(raw)

    @pytest.mark.parametrize("ts", ["", "abc", "1.5", " 1", "1_000", "0x10", "9223372036854775808"])
    def test_bad_timestamp(self, ts):
        """Should reject timestamps that are not plain signed 64-bit decimals."""
        with pytest.raises(MalformedToken):
            parse_token(f"SHA256,{ts},,00")

    @pytest.mark.parametrize("hash_hex", ["0", "ZZ", "AB CD", "0xAB"])
    def test_bad_hash(self, hash_hex):
        """Should reject odd-length or non-hex hashes."""
        with pytest.raises(MalformedToken):
            parse_token(f"SHA256,1,,{hash_hex}")

    def test_unknown_algorithm(self):
        """Should report unregistered names as UnknownAlgorithm."""
        with pytest.raises(UnknownAlgorithm):
            parse_token("MD5,1,,00")

    @pytest.mark.parametrize("raw", [None, 123, b"SHA256,1,,00"])
    def test_non_string(self, raw):
        """Should reject values that are not str."""
        with pytest.raises(MalformedToken):
            parse_token(raw)
