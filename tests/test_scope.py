import pytest

from site_crawler.crawler.scope import Classification, classify, is_fetchable
from site_crawler.crawler.url import normalize

SEED_HOST = "example.com"


def url_of_length(length: int):
    prefix = "http://example.com/"
    return normalize(prefix + "a" * (length - len(prefix)))


def test_internal_and_external(basic_config):
    assert classify(normalize("http://example.com/a"), SEED_HOST, basic_config) is Classification.INTERNAL
    assert classify(normalize("https://EXAMPLE.com:8443/a"), SEED_HOST, basic_config) is Classification.INTERNAL
    assert classify(normalize("http://other.com/a"), SEED_HOST, basic_config) is Classification.EXTERNAL
    assert classify(normalize("http://sub.example.com/"), SEED_HOST, basic_config) is Classification.EXTERNAL


def test_length_boundary(make_config):
    config = make_config(max_url_length=40)
    exact = url_of_length(40)
    shorter = url_of_length(39)
    assert len(str(exact)) == 40
    assert classify(exact, SEED_HOST, config) is Classification.EXCLUDED
    assert classify(shorter, SEED_HOST, config) is Classification.INTERNAL


def test_length_checked_before_host(make_config):
    config = make_config(max_url_length=20)
    assert classify(normalize("http://other.com/abcdef"), SEED_HOST, config) is Classification.EXCLUDED


@pytest.mark.parametrize(
    "path,expected",
    [
        ("/img/logo.png", Classification.EXCLUDED),
        ("/images", Classification.EXCLUDED),
        ("/blog/post", Classification.EXCLUDED),
        ("/IMG/logo.png", Classification.INTERNAL),
        ("/about/img", Classification.INTERNAL),
    ],
)
def test_exclude_prefixes(make_config, path, expected):
    config = make_config(exclude="/img,/blog")
    assert classify(normalize("http://example.com" + path), SEED_HOST, config) is expected


def test_exclude_applies_to_external_hosts(make_config):
    config = make_config(exclude=["/img"], crawl_external=True)
    assert classify(normalize("http://other.com/img/x"), SEED_HOST, config) is Classification.EXCLUDED


def test_classification_is_deterministic(make_config):
    config = make_config(exclude="/x", max_url_length=100)
    url = normalize("http://other.com/y?z=1")
    results = {classify(url, SEED_HOST, config) for _ in range(10)}
    assert results == {Classification.EXTERNAL}


def test_is_fetchable(make_config):
    closed = make_config()
    open_ = make_config(crawl_external=True)
    assert is_fetchable(Classification.INTERNAL, closed)
    assert not is_fetchable(Classification.EXTERNAL, closed)
    assert is_fetchable(Classification.EXTERNAL, open_)
    assert not is_fetchable(Classification.EXCLUDED, open_)
