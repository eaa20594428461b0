from pull_review_core.utils.url import extract_urls, parse_github_url


def test_extracts_urls_in_order():
    urls = extract_urls("go to http://example.com, then go to https://foobar.xyz?abc=123.")
    assert urls == ["http://example.com", "https://foobar.xyz?abc=123"]


def test_extract_keeps_duplicates():
    assert extract_urls("https://a.io/x https://a.io/x") == ["https://a.io/x", "https://a.io/x"]


def test_extract_strips_wrapping_punctuation():
    assert extract_urls("(see https://github.com/o/r/pull/3)") == ["https://github.com/o/r/pull/3"]


def test_extract_handles_empty_text():
    assert extract_urls("") == []
    assert extract_urls(None) == []


def test_parse_pull_request_url():
    parsed = parse_github_url("https://github.com/OWNER/REPO/pull/12")
    assert parsed.owner == "OWNER"
    assert parsed.repo == "REPO"
    assert parsed.resource_type == "pull"
    assert parsed.number == 12
    assert parsed.href == "https://github.com/OWNER/REPO/pull/12"


def test_parse_issue_url():
    parsed = parse_github_url("https://github.com/OWNER/REPO/issues/7")
    assert parsed.resource_type == "issues"
    assert parsed.number == 7


def test_parse_short_path_leaves_fields_empty():
    parsed = parse_github_url("https://github.com/abc/pull/1")
    assert parsed.owner == "abc"
    assert parsed.repo == "pull"
    assert parsed.resource_type == "1"
    assert parsed.number is None


def test_parse_non_github_host():
    assert parse_github_url("https://example.com/OWNER/REPO/pull/1") is None
    assert parse_github_url("https://gist.github.com/abc") is None


def test_parse_with_fragment_and_query():
    parsed = parse_github_url("https://github.com/o/r/pull/5/files?w=1#diff")
    assert parsed.number == 5


