"""Tests for missive.http.headers — canonical, case-insensitive HeaderCollection."""

import pytest

from missive._internal.multimap import MultiValueMapping
from missive.http.headers import HeaderCollection, canonicalize


class TestCanonicalize:
    def test_title_cases_words(self) -> None:
        assert canonicalize("content type") == "Content-Type"
        assert canonicalize("content-type") == "Content-Type"
        assert canonicalize("CONTENT_TYPE") == "Content-Type"

    def test_lowercases_word_tails(self) -> None:
        assert canonicalize("X-REQUEST-ID") == "X-Request-Id"

    @pytest.mark.parametrize(
        "name",
        ["content-type", "Content-Type", "CONTENT_TYPE", "content type", "cOnTeNt_tYpE"],
    )
    def test_variants_converge(self, name: str) -> None:
        assert canonicalize(name) == "Content-Type"

    def test_etag(self) -> None:
        assert canonicalize("etag") == "ETag"
        assert canonicalize("ETAG") == "ETag"

    def test_www_authenticate(self) -> None:
        assert canonicalize("www-authenticate") == "WWW-Authenticate"
        assert canonicalize("WWW_AUTHENTICATE") == "WWW-Authenticate"

    def test_no_other_special_cases(self) -> None:
        assert canonicalize("x-etag") == "X-Etag"
        assert canonicalize("proxy-authenticate") == "Proxy-Authenticate"

    def test_idempotent(self) -> None:
        for name in ("content type", "etag", "www_authenticate", "x-b3-traceid"):
            once = canonicalize(name)
            assert canonicalize(once) == once

    def test_empty_string(self) -> None:
        assert canonicalize("") == ""

    def test_separator_only(self) -> None:
        assert canonicalize("-") == "-"
        assert canonicalize("_ -") == "---"

    def test_digits_untouched(self) -> None:
        assert canonicalize("x-b3-traceid") == "X-B3-Traceid"


class TestGetSetHasRemove:
    def test_set_wraps_scalar_in_list(self) -> None:
        h = HeaderCollection()
        h.set("Content-Type", "text/html")
        assert h.get("content-type") == ["text/html"]

    def test_set_replaces(self) -> None:
        h = HeaderCollection()
        h.set("Accept", "text/html")
        h.set("accept", "application/json")
        assert h.get("Accept") == ["application/json"]

    def test_set_list_value(self) -> None:
        h = HeaderCollection()
        h.set("Vary", ["Accept", "Cookie"])
        assert h.get("vary") == ["Accept", "Cookie"]

    def test_set_none_is_empty_list(self) -> None:
        h = HeaderCollection()
        h.set("X-Empty", None)
        assert h.has("x-empty")
        assert h.get("x-empty") == []

    def test_append(self) -> None:
        h = HeaderCollection()
        h.set("Set-Cookie", "a=1")
        h.set("set-cookie", "b=2", append=True)
        assert h.get("Set-Cookie") == ["a=1", "b=2"]

    def test_append_to_missing_creates_entry(self) -> None:
        h = HeaderCollection()
        h.set("X-New", "1", append=True)
        assert h.get("X-New") == ["1"]

    def test_append_merges_separator_variants(self) -> None:
        h = HeaderCollection()
        h.set("X-Custom", "a")
        h.set("x custom", "b", append=True)
        assert h.get("X-Custom") == ["a", "b"]
        assert list(h) == ["X-Custom"]

    def test_get_default(self) -> None:
        h = HeaderCollection()
        assert h.get("X-Missing") is None
        assert h.get("X-Missing", []) == []

    def test_has(self) -> None:
        h = HeaderCollection({"ETag": '"abc"'})
        assert h.has("etag")
        assert h.has("ETAG")
        assert not h.has("X-Missing")

    def test_remove(self) -> None:
        h = HeaderCollection({"Accept": "*/*"})
        h.remove("ACCEPT")
        assert not h.has("accept")

    def test_remove_missing_is_noop(self) -> None:
        h = HeaderCollection()
        h.remove("X-Missing")
        h.remove("X-Missing")
        assert not h.has("X-Missing")

    def test_add(self) -> None:
        h = HeaderCollection()
        h.add("Via", "1.1 a")
        h.add("via", "1.1 b")
        assert h.get("Via") == ["1.1 a", "1.1 b"]

    def test_key(self) -> None:
        assert HeaderCollection().key("www authenticate") == "WWW-Authenticate"

    def test_stored_keys_are_canonical(self) -> None:
        h = HeaderCollection()
        for name in ("content_type", "ETAG", "x request id", "www-authenticate"):
            h.set(name, "v")
        assert all(key == canonicalize(key) for key in h)
        assert list(h) == ["Content-Type", "ETag", "X-Request-Id", "WWW-Authenticate"]


class TestConstruction:
    def test_from_mapping(self) -> None:
        h = HeaderCollection({"content-type": "text/html", "vary": ["Accept", "Cookie"]})
        assert h.get("Content-Type") == ["text/html"]
        assert h.get("Vary") == ["Accept", "Cookie"]

    def test_from_pairs_appends(self) -> None:
        h = HeaderCollection([("Set-Cookie", "a=1"), ("set-cookie", "b=2")])
        assert h.get("Set-Cookie") == ["a=1", "b=2"]

    def test_from_raw(self) -> None:
        raw = ((b"content-type", b"text/html"), (b"set-cookie", b"a=1"), (b"set-cookie", b"b=2"))
        h = HeaderCollection.from_raw(raw)
        assert h.get("Content-Type") == ["text/html"]
        assert h.get("Set-Cookie") == ["a=1", "b=2"]

    def test_raw(self) -> None:
        h = HeaderCollection([("Set-Cookie", "a=1"), ("Set-Cookie", "b=2"), ("ETag", "x")])
        assert h.raw() == (
            (b"set-cookie", b"a=1"),
            (b"set-cookie", b"b=2"),
            (b"etag", b"x"),
        )

    def test_raw_roundtrip_preserves_values(self) -> None:
        raw = ((b"accept", b"*/*"), (b"via", b"a"), (b"via", b"b"))
        assert HeaderCollection.from_raw(raw).raw() == raw

    def test_empty(self) -> None:
        h = HeaderCollection()
        assert len(h) == 0
        assert list(h) == []


class TestAccessors:
    def test_get_list_copies(self) -> None:
        h = HeaderCollection({"Accept": "*/*"})
        values = h.get_list("accept")
        values.append("text/html")
        assert h.get("Accept") == ["*/*"]

    def test_get_returns_copy(self) -> None:
        h = HeaderCollection({"X-A": "1"})
        h.get("x-a").append("extra")
        h["X-A"].append("extra")
        assert h.get("X-A") == ["1"]
        assert h.all() == {"X-A": ["1"]}

    def test_get_list_missing(self) -> None:
        assert HeaderCollection().get_list("X-Missing") == []

    def test_get_first(self) -> None:
        h = HeaderCollection([("Via", "a"), ("Via", "b")])
        assert h.get_first("via") == "a"
        assert h.get_first("X-Missing") is None
        assert h.get_first("X-Missing", "fallback") == "fallback"

    def test_get_line(self) -> None:
        h = HeaderCollection({"Cache-Control": ["no-cache", "no-store"]})
        assert h.get_line("cache-control") == "no-cache, no-store"
        assert h.get_line("X-Missing") == ""

    def test_all_is_copy(self) -> None:
        h = HeaderCollection({"Accept": "*/*"})
        snapshot = h.all()
        snapshot["Accept"].append("text/html")
        assert snapshot == {"Accept": ["*/*", "text/html"]}
        assert h.get("Accept") == ["*/*"]

    def test_flush(self) -> None:
        h = HeaderCollection({"A": "1", "B": "2"})
        h.flush()
        assert len(h) == 0

    def test_copy_is_independent(self) -> None:
        h = HeaderCollection({"Accept": "*/*"})
        clone = h.copy()
        clone.add("Accept", "text/html")
        assert h.get("Accept") == ["*/*"]
        assert clone.get("Accept") == ["*/*", "text/html"]


class TestMappingProtocol:
    def test_getitem(self) -> None:
        h = HeaderCollection({"Content-Type": "text/html"})
        assert h["content_type"] == ["text/html"]

    def test_missing_key_raises(self) -> None:
        h = HeaderCollection()
        with pytest.raises(KeyError):
            h["X-Missing"]

    def test_setitem_replaces(self) -> None:
        h = HeaderCollection()
        h["x-token"] = "a"
        h["X-Token"] = "b"
        assert h.get("X-Token") == ["b"]

    def test_delitem(self) -> None:
        h = HeaderCollection({"Accept": "*/*"})
        del h["accept"]
        assert "Accept" not in h

    def test_delitem_missing_raises(self) -> None:
        h = HeaderCollection()
        with pytest.raises(KeyError):
            del h["X-Missing"]

    def test_contains(self) -> None:
        h = HeaderCollection({"Accept": "*/*"})
        assert "accept" in h
        assert "ACCEPT" in h
        assert "x-missing" not in h

    def test_contains_rejects_non_str(self) -> None:
        h = HeaderCollection({"Accept": "*/*"})
        assert 42 not in h  # type: ignore[operator]

    def test_len_counts_names(self) -> None:
        h = HeaderCollection([("Set-Cookie", "a=1"), ("Set-Cookie", "b=2"), ("Accept", "*/*")])
        assert len(h) == 2

    def test_equality(self) -> None:
        assert HeaderCollection({"accept": "*/*"}) == HeaderCollection({"ACCEPT": "*/*"})
        assert HeaderCollection({"accept": "*/*"}) != HeaderCollection({"accept": "text/html"})

    def test_satisfies_multivalue_mapping(self) -> None:
        assert isinstance(HeaderCollection(), MultiValueMapping)

    def test_repr(self) -> None:
        h = HeaderCollection({"Accept": "*/*"})
        assert "Accept" in repr(h)
