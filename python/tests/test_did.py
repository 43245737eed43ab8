"""
Unit tests for DID URI parsing and rendering.
"""

import pytest

from did_doc import (
    DIDErrorKind,
    InvalidDIDUriError,
    UnsupportedDIDMethodError,
    Uri,
    parse_did_method,
    parse_did_reference,
    parse_did_uri,
    render_did_uri,
)


class TestEmptyUri:
    """The empty identifier."""

    def test_default_is_empty(self):
        """Uri() is empty and equal to the empty string."""
        uri = Uri()
        assert uri.is_empty()
        assert uri == ""
        assert str(uri) == ""
        assert uri.did == ""

    def test_empty_string_parses_to_empty(self):
        """Zero-length input is 'no identifier', not a failure."""
        assert parse_did_uri("") == Uri()
        assert parse_did_uri(b"") == Uri()

    def test_empty_uris_compare_equal(self):
        """Independently built empty identifiers are equal and hash alike."""
        assert Uri() == Uri.parse("")
        assert len({Uri(), Uri.parse("")}) == 1


class TestParseValid:
    """parse_did_uri() on well-formed input."""

    def test_method_and_id(self):
        """Plain DID yields method and id with no optional parts."""
        did = parse_did_uri("did:git:akjsdhgaksdjhgasdkgh")
        assert did.method == "git"
        assert did.id == "akjsdhgaksdjhgasdkgh"
        assert did.path is None
        assert did.params is None
        assert did.query is None
        assert did.fragment is None

    def test_empty_id(self):
        """The method-specific id may be empty."""
        did = parse_did_uri("did:git:")
        assert did.method == "git"
        assert did.id == ""

    def test_params(self):
        """Parameters collapse into a mapping."""
        did = parse_did_uri("did:sov:123456ygbvgfred;pool=mainnet;key=gdsadsfgdsfah")
        assert did.params == {"pool": "mainnet", "key": "gdsadsfgdsfah"}

    def test_colon_delimited_id(self):
        """Colons inside the method-specific id are part of the id."""
        did = parse_did_uri("did:sov:builder:aksjdhgaksjdhgaskdgjh")
        assert did.method == "sov"
        assert did.id == "builder:aksjdhgaksjdhgaskdgjh"
        assert parse_did_uri("did:sov:test:aksjdhgaksjdhgaskdgjh").id.startswith("test:")

    def test_path(self):
        """Path segments are split on '/'."""
        did = parse_did_uri("did:sov:wjb4bjwb1235kbg1235/spec/tree/d7879f5e/text")
        assert did.method == "sov"
        assert did.id == "wjb4bjwb1235kbg1235"
        assert did.path == ("spec", "tree", "d7879f5e", "text")

    def test_all_components(self):
        """Params, query and fragment together."""
        s = "did:git:12345678jhasdg;file=Users_janedoe_.git?key=ham&value=meat#1-2-3"
        did = parse_did_uri(s)
        assert did.params == {"file": "Users_janedoe_.git"}
        assert did.query == {"key": "ham", "value": "meat"}
        assert did.fragment == "1-2-3"
        assert str(did) == s

    def test_fragment(self):
        """A fragment runs to the end of input."""
        did = parse_did_uri("did:example:123456789abcdefghi#keys-1")
        assert did.id == "123456789abcdefghi"
        assert did.fragment == "keys-1"

    def test_param_without_value(self):
        """A parameter may omit '=value'."""
        did = parse_did_uri("did:a:b;flag;pool=main")
        assert did.params == {"flag": "", "pool": "main"}
        assert str(did) == "did:a:b;flag;pool=main"

    def test_duplicate_param_last_wins(self):
        """A repeated parameter key keeps the later value."""
        assert parse_did_uri("did:a:b;k=1;k=2").params == {"k": "2"}

    def test_duplicate_query_last_wins(self):
        """A repeated query key keeps the later value."""
        assert parse_did_uri("did:a:b?k=1&k=2").query == {"k": "2"}

    def test_bytes_input(self):
        """UTF-8 bytes are accepted."""
        assert parse_did_uri(b"did:a:b#c") == "did:a:b#c"

    def test_classmethod_alias(self):
        """Uri.parse() is parse_did_uri()."""
        assert Uri.parse("did:a:b") == parse_did_uri("did:a:b")


class TestParseInvalid:
    """parse_did_uri() rejects malformed input with a single error kind."""

    @pytest.mark.parametrize("value", ["did:", "https://example.org", "did:git", "did:sov"])
    def test_invalid_uri_kind(self, value):
        """Reference invalid inputs fail with INVALID_URI."""
        with pytest.raises(InvalidDIDUriError) as excinfo:
            parse_did_uri(value)
        assert excinfo.value.kind == DIDErrorKind.INVALID_URI
        assert excinfo.value.value == value

    @pytest.mark.parametrize(
        "value",
        [
            "did:Git:abc",          # uppercase method
            "did::abc",             # empty method
            "did:a:b;",             # dangling ';'
            "did:a:b;k=",           # '=' without value
            "did:a:b/",             # empty path segment
            "did:a:b?",             # empty query
            "did:a:b?k",            # query item without '='
            "did:a:b#",             # empty fragment
            "did:a:b#x:y",          # ':' not allowed in fragment
            "did:a:b?x=y;p=q",      # params after query
            "did:a:b c",            # stray character
            "DID:a:b",
        ],
    )
    def test_leftover_input(self, value):
        """Anything the grammar does not consume is an error."""
        with pytest.raises(InvalidDIDUriError):
            parse_did_uri(value)

    def test_undecodable_bytes(self):
        """Bytes that are not UTF-8 fail with INVALID_URI."""
        with pytest.raises(InvalidDIDUriError) as excinfo:
            parse_did_uri(b"did:a:\xff")
        assert excinfo.value.kind == DIDErrorKind.INVALID_URI


class TestRender:
    """render_did_uri() and str()."""

    @pytest.mark.parametrize(
        "value",
        [
            "did:example:123456789abcdefghi",
            "did:example:123456789abcdefghi#keys-1",
            "did:sov:wjb4bjwb1235kbg1235/spec/tree/d7879f5e/text",
            "did:web:example.com:user:alice",
            "did:git:",
        ],
    )
    def test_scalar_round_trip(self, value):
        """Identifiers without maps render back byte-identically."""
        assert render_did_uri(parse_did_uri(value)) == value

    def test_params_sorted(self):
        """Params and query render sorted by key."""
        did = parse_did_uri("did:a:b;z=1;a=2?y=1&b=2")
        assert str(did) == "did:a:b;a=2;z=1?b=2&y=1"

    def test_canonical_round_trip(self):
        """Re-parsing a rendered identifier yields an equal value."""
        did = parse_did_uri("did:a:b/p/q;z=1;a=2?y=1&b=2#frag")
        assert parse_did_uri(str(did)) == did

    def test_built_uri(self):
        """A directly assembled Uri renders every component."""
        uri = Uri(
            method="example",
            id="123",
            path=["a", "b"],
            params={"service": "agent"},
            query={"versionId": "1"},
            fragment="key-1",
        )
        assert str(uri) == "did:example:123/a/b;service=agent?versionId=1#key-1"

    def test_empty_collections_normalised(self):
        """Empty path, maps and fragment are treated as absent."""
        uri = Uri(method="a", id="b", path=[], params={}, query={}, fragment="")
        assert uri == Uri(method="a", id="b")
        assert str(uri) == "did:a:b"

    @pytest.mark.parametrize(
        "fields",
        [
            {"id": "abc"},                                          # id without method
            {"method": "Git", "id": "b"},                           # uppercase method
            {"method": "a", "id": "b c"},                           # space in id
            {"method": "a", "id": "b", "path": ["x", ""]},          # empty path segment
            {"method": "a", "id": "b", "path": ["x;y"]},            # ';' in path segment
            {"method": "a", "id": "b", "params": {"": "v"}},        # empty param key
            {"method": "a", "id": "b", "params": {"k": "v?"}},      # '?' in param value
            {"method": "a", "id": "b", "query": {"k": ""}},         # empty query value
            {"method": "a", "id": "b", "query": {"k=x": "v"}},      # '=' in query key
            {"method": "a", "id": "b", "fragment": "x:y"},          # ':' in fragment
        ],
    )
    def test_unrenderable_components_rejected(self, fields):
        """A Uri that would not render to parseable text cannot be built."""
        with pytest.raises(ValueError):
            Uri(**fields)

    def test_built_uri_parses_back(self):
        """Rendering a directly assembled Uri and parsing it gives the same value."""
        uri = Uri(method="a", id="b:c", path=["p"], params={"flag": ""}, query={"k": "v"})
        assert parse_did_uri(str(uri)) == uri


class TestUriValue:
    """Equality, hashing and helpers."""

    def test_map_order_does_not_affect_equality(self):
        """Field-wise equality ignores map insertion order."""
        a = Uri(method="a", id="b", params={"x": "1", "y": "2"})
        b = Uri(method="a", id="b", params={"y": "2", "x": "1"})
        assert a == b
        assert hash(a) == hash(b)

    def test_compare_with_string(self):
        """A Uri equals its canonical rendering."""
        assert parse_did_uri("did:a:b#c") == "did:a:b#c"
        assert parse_did_uri("did:a:b#c") != "did:a:b#d"

    def test_frozen(self):
        """Uri is immutable."""
        uri = parse_did_uri("did:a:b")
        with pytest.raises(AttributeError):
            uri.method = "c"

    def test_components_are_read_only(self):
        """Path, params and query cannot be changed in place."""
        uri = parse_did_uri("did:a:b/p;k=v?q=1")
        assert isinstance(uri.path, tuple)
        with pytest.raises(TypeError):
            uri.params["z"] = "1"
        with pytest.raises(TypeError):
            uri.query["z"] = "1"

    def test_stays_findable_in_set(self):
        """A Uri keeps its hash, so set membership holds."""
        uri = parse_did_uri("did:a:b;k=v")
        seen = {uri}
        with pytest.raises(TypeError):
            uri.params["z"] = "1"
        assert uri in seen
        assert str(uri) == "did:a:b;k=v"

    def test_caller_mapping_is_copied(self):
        """Changing the mapping passed in does not change the Uri."""
        params = {"k": "v"}
        uri = Uri(method="a", id="b", params=params)
        params["z"] = "1"
        assert str(uri) == "did:a:b;k=v"

    def test_did_property(self):
        """did drops path, params, query and fragment."""
        assert parse_did_uri("did:a:b/c;x=y?q=1#f").did == "did:a:b"


class TestParseDidMethod:
    """parse_did_method()."""

    def test_returns_method(self):
        """Returns the method of a valid DID."""
        assert parse_did_method("did:web:example.com") == "web"

    def test_supported_method(self):
        """A method in the supported set is returned."""
        assert parse_did_method("did:key:z6Mk", supported=["key", "web"]) == "key"

    def test_unsupported_method(self):
        """A method outside the supported set raises UNKNOWN_METHOD."""
        with pytest.raises(UnsupportedDIDMethodError) as excinfo:
            parse_did_method("did:sov:abc", supported=["key", "web"])
        assert excinfo.value.kind == DIDErrorKind.UNKNOWN_METHOD

    def test_invalid_did(self):
        """Malformed or empty input raises INVALID_URI."""
        with pytest.raises(InvalidDIDUriError):
            parse_did_method("https://example.org")
        with pytest.raises(InvalidDIDUriError):
            parse_did_method("")

    def test_relative_reference_has_no_method(self):
        """A relative DID URL has no method to return."""
        with pytest.raises(InvalidDIDUriError):
            parse_did_method(Uri(fragment="keys-1"))


class TestParseReference:
    """parse_did_reference() on DID URIs and relative DID URLs."""

    def test_fragment_only(self):
        """'#keys-1' is a relative reference holding only a fragment."""
        uri = parse_did_reference("#keys-1")
        assert uri.fragment == "keys-1"
        assert uri.method == ""
        assert uri.is_relative()
        assert not uri.is_empty()
        assert uri.did == ""
        assert str(uri) == "#keys-1"

    def test_all_relative_components(self):
        """Path, params, query and fragment may all appear without a DID."""
        uri = parse_did_reference("/a/b;k=v?x=y#f")
        assert uri.path == ("a", "b")
        assert uri.params == {"k": "v"}
        assert uri.query == {"x": "y"}
        assert str(uri) == "/a/b;k=v?x=y#f"

    def test_full_did_uri(self):
        """A full DID URI parses exactly as parse_did_uri() does."""
        assert parse_did_reference("did:a:b#c") == parse_did_uri("did:a:b#c")
        assert not parse_did_reference("did:a:b#c").is_relative()
        assert parse_did_reference("") == Uri()

    @pytest.mark.parametrize("value", ["not a did", "keys-1", "#", "#a#b", "did:Git:x", "?k"])
    def test_invalid(self, value):
        """Anything that is neither a DID URI nor a relative DID URL fails."""
        with pytest.raises(InvalidDIDUriError):
            parse_did_reference(value)

    def test_strict_parser_rejects_relative(self):
        """parse_did_uri() still requires the 'did:' prefix."""
        with pytest.raises(InvalidDIDUriError):
            parse_did_uri("#keys-1")

    def test_built_relative_reference(self):
        """A relative Uri built field by field renders without a prefix."""
        uri = Uri(fragment="keys-1")
        assert uri == "#keys-1"
        assert parse_did_reference(str(uri)) == uri
