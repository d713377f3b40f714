"""
GitHub Models chat completion transport.
"""

# Standard Library
import urllib.parse

# PIP3 modules
import requests

# local repo modules
from standlib.errors import CompletionError
from standlib.errors import MissingTokenError
from standlib.standup_settings import DEFAULT_MODELS_ENDPOINT
from standlib.standup_settings import DEFAULT_TIMEOUT_SECONDS


class ModelsClient:
	name = "GitHubModels"

	def __init__(
		self,
		token: str,
		endpoint: str = DEFAULT_MODELS_ENDPOINT,
		timeout_seconds: int = DEFAULT_TIMEOUT_SECONDS,
		session: requests.Session | None = None,
	) -> None:
		if not token:
			raise MissingTokenError("GITHUB_TOKEN environment variable is not set")
		self.token = token
		self.endpoint = endpoint
		self.timeout_seconds = int(timeout_seconds)
		self.session = session or requests.Session()

	def _validated_endpoint(self) -> str:
		"""
		Validate the chat completions endpoint URL.
		"""
		parsed = urllib.parse.urlparse(self.endpoint)
		if parsed.scheme not in {"http", "https"}:
			raise CompletionError("Models endpoint must use http or https.")
		if not parsed.netloc:
			raise CompletionError("Models endpoint must include a host.")
		return self.endpoint

	def complete(self, payload: dict) -> dict:
		"""
		POST one chat completion request and return the decoded body.
		"""
		headers = {
			"Content-Type": "application/json",
			"Authorization": f"Bearer {self.token}",
		}
		try:
			response = self.session.post(
				self._validated_endpoint(),
				json=payload,
				headers=headers,
				timeout=self.timeout_seconds,
			)
		except requests.RequestException as exc:
			raise CompletionError(f"failed to make request: {exc}") from exc
		if not (200 <= response.status_code < 300):
			raise CompletionError(
				f"API request failed with status {response.status_code}: {response.text}"
			)
		try:
			body = response.json()
		except ValueError as exc:
			raise CompletionError(f"failed to unmarshal response: {exc}") from exc
		if not isinstance(body, dict):
			raise CompletionError("failed to unmarshal response: expected a JSON object")
		return body
