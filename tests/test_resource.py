import pytest

from niitools.resource import GitHubIssue, UrlResource, find_resource


def test_github_issue_is_recognised():
    resource = find_resource("https://github.com/octo/project/issues/42")
    assert resource == GitHubIssue("octo", "project", 42)


def test_github_issue_url_round_trip():
    text = "https://github.com/octo/project/issues/42"
    resource = find_resource(text)
    assert resource.url == text


def test_other_host_is_plain_url():
    text = "https://example.com/a/b/issues/3"
    assert find_resource(text) == UrlResource(text)


@pytest.mark.parametrize(
    "text",
    [
        "https://github.com/octo/project",
        "https://github.com/octo/project/pulls/3",
        "https://github.com/octo/project/issues/abc",
        "https://github.com/octo/project/issues/3/comments",
        "https://github.com/octo/project/issues/99999999999",
    ],
)
def test_github_non_issue_links_are_plain_urls(text):
    assert find_resource(text) == UrlResource(text)


@pytest.mark.parametrize(
    "text",
    ["word", "(https://example.com)", "mailto:someone@example.com", "", "http://example.com:port/"],
)
def test_non_urls_are_ignored(text):
    assert find_resource(text) is None