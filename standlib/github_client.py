import requests
from github import Auth
from github import Github
from github.GithubException import GithubException

from standlib.errors import GitHubApiError


#============================================
class GitHubClient:
	"""
	Thin PyGithub wrapper for identity lookup and one-page searches.
	"""

	def __init__(self, token: str = "", log_fn=None):
		self.log_fn = log_fn
		self._api_call_count = 0
		self._api_calls_by_context: dict[str, int] = {}
		self.client = self._build_github_client(token)

	#============================================
	def _build_github_client(self, token: str) -> Github:
		"""
		Create Github client with retry disabled.
		"""
		if token:
			return Github(auth=Auth.Token(token), retry=None)
		return Github(retry=None)

	#============================================
	def log(self, message: str) -> None:
		"""
		Emit one log line when logger is configured.
		"""
		if self.log_fn is not None:
			self.log_fn(message)

	#============================================
	def record_api_call(self, context: str) -> None:
		"""
		Track one outbound GitHub API call.
		"""
		self._api_call_count += 1
		if context not in self._api_calls_by_context:
			self._api_calls_by_context[context] = 0
		self._api_calls_by_context[context] += 1

	#============================================
	def api_usage_snapshot(self) -> dict:
		"""
		Return API call counters for reporting.
		"""
		return {
			"api_call_count": self._api_call_count,
			"api_calls_by_context": dict(self._api_calls_by_context),
		}

	#============================================
	def call_api(self, context: str, call_fn):
		"""
		Run one API call, translating PyGithub and transport errors.
		"""
		self.record_api_call(context)
		try:
			return call_fn()
		except GithubException as error:
			self.raise_from_github_error(error, context)
		except requests.RequestException as error:
			raise GitHubApiError(f"{context} failed: {error}") from error

	#============================================
	def raise_from_github_error(self, error: GithubException, context: str) -> None:
		"""
		Raise a GitHubApiError carrying the status and upstream message.
		"""
		status = getattr(error, "status", None)
		data = getattr(error, "data", None)
		detail = ""
		if isinstance(data, dict):
			detail = str(data.get("message", "")).strip()
		if not detail:
			detail = str(error)
		raise GitHubApiError(
			f"{context} failed (status {status}): {detail}",
			status=status,
		) from error

	#============================================
	def get_authenticated_login(self) -> str:
		"""
		Return the login of the user owning the configured token.
		"""
		login = self.call_api("GET /user", lambda: self.client.get_user().login)
		if not login:
			raise GitHubApiError("GET /user returned no login")
		return login

	#============================================
	def search(self, endpoint: str, query: str, sort: str, order: str = "desc") -> list[dict]:
		"""
		Run one search request and return the raw items of the first page.
		"""
		parameters = {"q": query, "sort": sort, "order": order}
		context = f"GET /search/{endpoint}"
		_, data = self.call_api(
			context,
			lambda: self.client.requester.requestJsonAndCheck(
				"GET",
				f"/search/{endpoint}",
				parameters=parameters,
			),
		)
		if not isinstance(data, dict):
			raise GitHubApiError(f"{context} returned an unexpected payload")
		items = data.get("items") or []
		if not isinstance(items, list):
			raise GitHubApiError(f"{context} returned a non-list items field")
		return [item for item in items if isinstance(item, dict)]

	#============================================
	def search_commits(self, query: str) -> list[dict]:
		return self.search("commits", query, "committer-date")

	#============================================
	def search_issues(self, query: str) -> list[dict]:
		return self.search("issues", query, "created")
