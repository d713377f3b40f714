from datetime import datetime
from datetime import timezone
from types import SimpleNamespace

import pytest
import requests

from standlib import activity
from standlib import activity_collector
from standlib import github_client
from standlib.errors import ActivityCollectionError
from standlib.errors import CommitSearchError
from standlib.errors import GitHubApiError


START = datetime(2026, 2, 21, 9, 0, tzinfo=timezone.utc)
END = datetime(2026, 2, 22, 9, 0, tzinfo=timezone.utc)

COMMIT_ITEM = {
	"sha": "abc123",
	"html_url": "https://github.com/test/repo/commit/abc123",
	"repository": {"full_name": "test/repo"},
	"commit": {
		"message": "Fix login\n\nHandle expired sessions",
		"author": {"date": "2026-02-21T15:00:00Z"},
	},
}
PR_ITEM = {
	"number": 12,
	"title": "Add feature",
	"body": "Adds the feature",
	"html_url": "https://github.com/test/repo/pull/12",
	"repository_url": "https://api.github.com/repos/test/repo",
	"created_at": "2026-02-21T16:00:00Z",
}
ISSUE_ITEM = {
	"number": 13,
	"title": "Crash on start",
	"body": None,
	"html_url": "https://github.com/test/repo/issues/13",
	"repository_url": "https://api.github.com/repos/test/repo",
	"created_at": "2026-02-21T17:00:00Z",
}
REVIEW_ITEM = {
	"number": 14,
	"title": "Refactor parser",
	"html_url": "https://github.com/other/lib/pull/14",
	"repository_url": "https://api.github.com/repos/other/lib",
	"created_at": "2026-02-20T08:00:00Z",
}


#============================================
class FakeClient:
	"""
	Stand-in for GitHubClient that serves canned search items.
	"""

	def __init__(self, fail_on: str = ""):
		self.fail_on = fail_on
		self.queries: list[tuple[str, str]] = []

	def search_commits(self, query: str) -> list[dict]:
		self.queries.append(("commits", query))
		if self.fail_on == "commit":
			raise GitHubApiError("GET /search/commits failed (status 422): Validation Failed", status=422)
		return [COMMIT_ITEM]

	def search_issues(self, query: str) -> list[dict]:
		self.queries.append(("issues", query))
		if query.startswith("reviewed-by:"):
			kind = "review"
		elif query.endswith("type:issue"):
			kind = "issue"
		else:
			kind = "pull_request"
		if self.fail_on == kind:
			raise GitHubApiError("GET /search/issues failed (status 500): boom", status=500)
		return {"pull_request": [PR_ITEM], "issue": [ISSUE_ITEM], "review": [REVIEW_ITEM]}[kind]


#============================================
def test_build_search_query_with_repo() -> None:
	"""
	Clauses should be joined with spaces in user, date, repo, type order.
	"""
	query = activity_collector.build_search_query(
		"author:alice", "created", START, END, "test/repo", "type:pr",
	)
	assert query == "author:alice created:2026-02-21..2026-02-22 repo:test/repo type:pr"


#============================================
def test_build_search_query_passes_inverted_range() -> None:
	"""
	Inverted date windows should be passed through verbatim.
	"""
	query = activity_collector.build_search_query("author:alice", "committer-date", END, START)
	assert query == "author:alice committer-date:2026-02-22..2026-02-21"


#============================================
def test_collect_orders_kinds_and_maps_items() -> None:
	"""
	Activities should be commits, PRs, issues, reviews with per-kind titles.
	"""
	client = FakeClient()
	collector = activity_collector.ActivityCollector(client)
	activities = collector.collect("alice", "", START, END)
	assert [item.kind for item in activities] == ["commit", "pull_request", "issue", "review"]
	commit, pull_request, issue, review = activities
	assert commit.title == "Fix login"
	assert commit.description == "Fix login\n\nHandle expired sessions"
	assert commit.repository == "test/repo"
	assert commit.created_at == datetime(2026, 2, 21, 15, 0, tzinfo=timezone.utc)
	assert pull_request.title == "PR #12: Add feature"
	assert pull_request.repository == "test/repo"
	assert issue.title == "Issue #13: Crash on start"
	assert issue.description == ""
	assert review.title == "Reviewed PR #14: Refactor parser"
	assert review.description == "Reviewed pull request: Refactor parser"
	assert review.repository == "other/lib"


#============================================
def test_collect_builds_expected_queries() -> None:
	"""
	Each sub-query should carry its user clause, date field and type filter.
	"""
	client = FakeClient()
	collector = activity_collector.ActivityCollector(client)
	collector.collect("alice", "test/repo", START, END)
	assert client.queries == [
		("commits", "author:alice committer-date:2026-02-21..2026-02-22 repo:test/repo"),
		("issues", "author:alice created:2026-02-21..2026-02-22 repo:test/repo type:pr"),
		("issues", "author:alice created:2026-02-21..2026-02-22 repo:test/repo type:issue"),
		("issues", "reviewed-by:alice created:2026-02-21..2026-02-22 repo:test/repo type:pr"),
	]


#============================================
def test_commit_failure_is_skipped() -> None:
	"""
	A failed commit search should yield zero commits and keep other kinds.
	"""
	messages = []
	collector = activity_collector.ActivityCollector(FakeClient(fail_on="commit"), log_fn=messages.append)
	activities = collector.collect("alice", "", START, END)
	assert [item.kind for item in activities] == ["pull_request", "issue", "review"]
	assert any("Skipping commits" in message for message in messages)


#============================================
def test_commit_failure_propagates_when_strict() -> None:
	"""
	Strict collectors should surface the commit search failure.
	"""
	collector = activity_collector.ActivityCollector(FakeClient(fail_on="commit"), skip_failed_commits=False)
	with pytest.raises(ActivityCollectionError, match="failed to get commits"):
		collector.collect("alice", "", START, END)


#============================================
def test_get_commits_raises_commit_search_error() -> None:
	"""
	The commit helper should report failure with its own error type.
	"""
	collector = activity_collector.ActivityCollector(FakeClient(fail_on="commit"))
	with pytest.raises(CommitSearchError) as excinfo:
		collector.get_commits("alice", "", START, END)
	assert excinfo.value.status == 422


#============================================
@pytest.mark.parametrize(
	"fail_on, label",
	[
		("pull_request", "failed to get pull requests"),
		("issue", "failed to get issues"),
		("review", "failed to get reviews"),
	],
)
def test_required_search_failure_aborts(fail_on: str, label: str) -> None:
	"""
	PR, issue and review failures should abort collection with context.
	"""
	collector = activity_collector.ActivityCollector(FakeClient(fail_on=fail_on))
	with pytest.raises(ActivityCollectionError, match=label):
		collector.collect("alice", "", START, END)


#============================================
def test_empty_results_are_not_errors() -> None:
	"""
	Searches returning no items should produce an empty list.
	"""
	client = FakeClient()
	client.search_commits = lambda query: []
	client.search_issues = lambda query: []
	collector = activity_collector.ActivityCollector(client)
	assert collector.collect("alice", "", START, END) == []


#============================================
def test_repository_name_without_repository_fields() -> None:
	"""
	Items missing repository data should map to an empty repository.
	"""
	assert activity_collector.repository_name({}) == ""
	mapped = activity_collector.pull_request_to_activity({"number": 1, "title": "T"})
	assert mapped.repository == ""
	assert mapped.kind == activity.KIND_PULL_REQUEST
	assert mapped.created_at is None


#============================================
def make_requester_client(commit_response) -> github_client.GitHubClient:
	"""
	Build a GitHubClient whose requester fails or answers the commit search.
	"""
	def request_json(verb, url, parameters=None):
		if url == "/search/commits":
			if isinstance(commit_response, Exception):
				raise commit_response
			return {}, commit_response
		if parameters["q"].startswith("reviewed-by:"):
			return {}, {"items": [REVIEW_ITEM]}
		if parameters["q"].endswith("type:issue"):
			return {}, {"items": [ISSUE_ITEM]}
		return {}, {"items": [PR_ITEM]}

	client = github_client.GitHubClient.__new__(github_client.GitHubClient)
	client.log_fn = None
	client._api_call_count = 0
	client._api_calls_by_context = {}
	client.client = SimpleNamespace(requester=SimpleNamespace(requestJsonAndCheck=request_json))
	return client


#============================================
def test_commit_transport_error_is_skipped() -> None:
	"""
	A connection error on the commit search should yield zero commits.
	"""
	client = make_requester_client(requests.ConnectionError("connection refused"))
	collector = activity_collector.ActivityCollector(client)
	activities = collector.collect("alice", "", START, END)
	assert [item.kind for item in activities] == ["pull_request", "issue", "review"]


#============================================
def test_commit_malformed_date_is_skipped() -> None:
	"""
	A commit item with an unparseable date should yield zero commits.
	"""
	bad_commit = {
		"repository": {"full_name": "test/repo"},
		"commit": {"message": "Fix", "author": {"date": "not-a-date"}},
	}
	client = make_requester_client({"items": [bad_commit]})
	collector = activity_collector.ActivityCollector(client)
	activities = collector.collect("alice", "", START, END)
	assert [item.kind for item in activities] == ["pull_request", "issue", "review"]
	with pytest.raises(CommitSearchError, match="malformed item"):
		collector.get_commits("alice", "", START, END)


#============================================
def test_malformed_pull_request_aborts_with_context() -> None:
	"""
	An unparseable pull request date should abort with search context.
	"""
	client = FakeClient()
	bad_item = dict(PR_ITEM, created_at="yesterday")
	client.search_issues = lambda query: [bad_item]
	collector = activity_collector.ActivityCollector(client)
	with pytest.raises(ActivityCollectionError, match="failed to get pull requests: .*malformed item"):
		collector.collect("alice", "", START, END)
