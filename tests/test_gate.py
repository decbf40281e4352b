import pytest

from provider.domain.gate import Decision, decide
from provider.domain.paths import (
    EXEMPT_PATHS,
    SubtreeMatcher,
    SuffixMatcher,
    extension,
    is_exempt,
)
from provider.domain.tokens import ONE_HOUR_MS, encode_timestamp

from conftest import T0

VALID = "Bearer " + encode_timestamp(T0)


@pytest.mark.parametrize(
    "path",
    ["/console", "/console/", "/console/tables/products", "/health", "/favicon.ico", "/img/Logo.ICO"],
)
def test_exempt_paths_are_admitted_without_credential(path):
    assert decide(path, None, T0) is Decision.exempt
    assert decide(path, "garbage", T0).admitted


def test_exempt_path_ignores_expired_credential():
    assert decide("/console", VALID, T0 + 10 * ONE_HOUR_MS) is Decision.exempt


@pytest.mark.parametrize("path", ["/products", "/product/10", "/consoles", "/favicon.icon", "/"])
def test_protected_paths_without_credential_are_rejected(path):
    decision = decide(path, None, T0)
    assert decision is Decision.reject
    assert not decision.admitted


def test_protected_path_with_fresh_credential_is_admitted():
    decision = decide("/products", VALID, T0 + ONE_HOUR_MS)
    assert decision is Decision.admit
    assert decision.admitted


def test_protected_path_with_stale_credential_is_rejected():
    assert decide("/products", VALID, T0 + ONE_HOUR_MS + 1) is Decision.reject


def test_empty_exempt_set_checks_every_path():
    assert decide("/health", None, T0, exempt=()) is Decision.reject


def test_window_override():
    assert decide("/products", VALID, T0 + 10, window_ms=5) is Decision.reject


def test_subtree_matcher_requires_segment_boundary():
    m = SubtreeMatcher("/console/")
    assert m.matches("/console")
    assert m.matches("/console/x")
    assert not m.matches("/consolex")


def test_suffix_matcher_is_case_insensitive():
    m = SuffixMatcher(".ico")
    assert m.matches("/a/b/c.ICO")
    assert not m.matches("/a/ico")
    assert not m.matches("/a.ico.png")


@pytest.mark.parametrize(
    "path,ext",
    [("/favicon.ico", "ico"), ("/a/B.PNG", "png"), ("/a.b/c", ""), ("/", ""), ("/x.tar.gz/", "gz")],
)
def test_extension(path, ext):
    assert extension(path) == ext


def test_default_exempt_set_order():
    assert EXEMPT_PATHS[0] == SubtreeMatcher("/console")
    assert is_exempt("/health/live")
    assert not is_exempt("/healthz")
