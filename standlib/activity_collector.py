"""
Collect a user's commits, pull requests, issues and reviews from GitHub search.

Each kind comes from its own search query. Results are normalized into
Activity records and concatenated in a fixed kind order. The commit search
is known to be restricted for many accounts, so its failure is reported but
does not abort collection unless the collector is built strict.
"""

from datetime import datetime

from standlib import activity
from standlib import github_client
from standlib.errors import ActivityCollectionError
from standlib.errors import CommitSearchError
from standlib.errors import GitHubApiError


DATE_FORMAT = "%Y-%m-%d"


#============================================
def build_search_query(
	user_clause: str,
	date_field: str,
	start: datetime,
	end: datetime,
	repo: str = "",
	type_clause: str = "",
) -> str:
	"""
	Join search clauses with single spaces.

	Args:
		user_clause: 'author:<user>' or 'reviewed-by:<user>'.
		date_field: search qualifier holding the date range.
		start: window start; only the calendar day is used.
		end: window end; only the calendar day is used.
		repo: optional owner/name filter.
		type_clause: optional 'type:pr' or 'type:issue' discriminator.

	Returns:
		Search expression passed as the q parameter.
	"""
	clauses = [
		user_clause,
		f"{date_field}:{start.strftime(DATE_FORMAT)}..{end.strftime(DATE_FORMAT)}",
	]
	if repo:
		clauses.append(f"repo:{repo}")
	if type_clause:
		clauses.append(type_clause)
	return " ".join(clauses)


#============================================
def repository_name(item: dict) -> str:
	"""
	Read owner/name for one search item.
	"""
	repository = item.get("repository")
	if isinstance(repository, dict) and repository.get("full_name"):
		return str(repository["full_name"])
	# issue search items only carry the API url of their repository
	repository_url = str(item.get("repository_url") or "")
	marker = "/repos/"
	if marker in repository_url:
		return repository_url.split(marker, 1)[1].strip("/")
	return ""


#============================================
def commit_to_activity(item: dict) -> activity.Activity:
	commit = item.get("commit") or {}
	message = commit.get("message") or ""
	author = commit.get("author") or {}
	return activity.Activity(
		kind=activity.KIND_COMMIT,
		repository=repository_name(item),
		title=message.split("\n")[0],
		description=message,
		url=item.get("html_url") or "",
		created_at=activity.parse_iso(author.get("date") or ""),
	)


#============================================
def pull_request_to_activity(item: dict) -> activity.Activity:
	return activity.Activity(
		kind=activity.KIND_PULL_REQUEST,
		repository=repository_name(item),
		title=f"PR #{item.get('number')}: {item.get('title') or ''}",
		description=item.get("body") or "",
		url=item.get("html_url") or "",
		created_at=activity.parse_iso(item.get("created_at") or ""),
	)


#============================================
def issue_to_activity(item: dict) -> activity.Activity:
	return activity.Activity(
		kind=activity.KIND_ISSUE,
		repository=repository_name(item),
		title=f"Issue #{item.get('number')}: {item.get('title') or ''}",
		description=item.get("body") or "",
		url=item.get("html_url") or "",
		created_at=activity.parse_iso(item.get("created_at") or ""),
	)


#============================================
def review_to_activity(item: dict) -> activity.Activity:
	title = item.get("title") or ""
	return activity.Activity(
		kind=activity.KIND_REVIEW,
		repository=repository_name(item),
		title=f"Reviewed PR #{item.get('number')}: {title}",
		description=f"Reviewed pull request: {title}",
		url=item.get("html_url") or "",
		created_at=activity.parse_iso(item.get("created_at") or ""),
	)


#============================================
class ActivityCollector:
	"""
	Run the four activity searches for one user and date window.
	"""

	def __init__(
		self,
		client: github_client.GitHubClient,
		log_fn=None,
		skip_failed_commits: bool = True,
	):
		self.client = client
		self.log_fn = log_fn
		self.skip_failed_commits = skip_failed_commits

	#============================================
	def log(self, message: str) -> None:
		if self.log_fn is not None:
			self.log_fn(message)

	#============================================
	def collect(
		self,
		user: str,
		repo: str,
		start: datetime,
		end: datetime,
	) -> list[activity.Activity]:
		"""
		Gather commits, pull requests, issues and reviews, in that order.

		Raises ActivityCollectionError when a pull request, issue or review
		search fails; nothing collected so far is returned in that case.
		"""
		activities: list[activity.Activity] = []

		self.log("Searching for commits...")
		try:
			commits = self.get_commits(user, repo, start, end)
		except CommitSearchError as error:
			if not self.skip_failed_commits:
				raise ActivityCollectionError(f"failed to get commits: {error}") from error
			self.log("Skipping commits (search may be restricted)")
			commits = []
		else:
			self.log(f"Found {len(commits)} commits")
		activities.extend(commits)

		steps = (
			("pull requests", self.get_pull_requests),
			("issues", self.get_issues),
			("reviews", self.get_reviews),
		)
		for label, fetch_fn in steps:
			self.log(f"Searching for {label}...")
			try:
				found = fetch_fn(user, repo, start, end)
			except GitHubApiError as error:
				self.log(f"Search for {label} failed")
				raise ActivityCollectionError(f"failed to get {label}: {error}") from error
			self.log(f"Found {len(found)} {label}")
			activities.extend(found)
		return activities

	#============================================
	def run_search(self, search_fn, query: str, to_activity, context: str) -> list[activity.Activity]:
		"""
		Run one search and map its items; malformed items raise GitHubApiError.
		"""
		items = search_fn(query)
		try:
			return [to_activity(item) for item in items]
		except (AttributeError, TypeError, ValueError) as error:
			raise GitHubApiError(f"{context} returned a malformed item: {error}") from error

	#============================================
	def get_commits(self, user: str, repo: str, start: datetime, end: datetime) -> list[activity.Activity]:
		"""
		Search commits authored by user; raises CommitSearchError on failure.
		"""
		query = build_search_query(f"author:{user}", "committer-date", start, end, repo)
		try:
			return self.run_search(self.client.search_commits, query, commit_to_activity, "GET /search/commits")
		except GitHubApiError as error:
			raise CommitSearchError(
				f"commits search failed (this is common due to GitHub API restrictions): {error}",
				status=error.status,
			) from error

	#============================================
	def get_pull_requests(self, user: str, repo: str, start: datetime, end: datetime) -> list[activity.Activity]:
		query = build_search_query(f"author:{user}", "created", start, end, repo, "type:pr")
		return self.run_search(self.client.search_issues, query, pull_request_to_activity, "GET /search/issues")

	#============================================
	def get_issues(self, user: str, repo: str, start: datetime, end: datetime) -> list[activity.Activity]:
		query = build_search_query(f"author:{user}", "created", start, end, repo, "type:issue")
		return self.run_search(self.client.search_issues, query, issue_to_activity, "GET /search/issues")

	#============================================
	def get_reviews(self, user: str, repo: str, start: datetime, end: datetime) -> list[activity.Activity]:
		query = build_search_query(f"reviewed-by:{user}", "created", start, end, repo, "type:pr")
		return self.run_search(self.client.search_issues, query, review_to_activity, "GET /search/issues")
