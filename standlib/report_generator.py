from standlib import activity
from standlib import digest_formatter
from standlib import prompt_loader
from standlib.errors import CompletionError
from standlib.errors import EmptyCompletionError
from standlib.errors import MissingTokenError
from standlib.models_client import ModelsClient
from standlib.standup_settings import DEFAULT_MODELS_ENDPOINT
from standlib.standup_settings import DEFAULT_TIMEOUT_SECONDS


SYSTEM_PROMPT_NAME = "standup_system.txt"
USER_PROMPT_PREFIX = "Based on the following GitHub activity, generate a standup report:\n\n"
TEMPERATURE = 0.7
TOP_P = 1.0


#============================================
def build_messages(digest: str) -> list[dict[str, str]]:
	"""
	Build the system/user message pair for one digest.
	"""
	return [
		{"role": "system", "content": prompt_loader.load_prompt(SYSTEM_PROMPT_NAME)},
		{"role": "user", "content": USER_PROMPT_PREFIX + digest},
	]


#============================================
def build_request_payload(digest: str, model_id: str) -> dict:
	"""
	Build the chat completion request body.
	"""
	return {
		"messages": build_messages(digest),
		"model": model_id,
		"temperature": TEMPERATURE,
		"top_p": TOP_P,
		"stream": False,
	}


#============================================
def extract_first_choice(body: dict) -> str:
	"""
	Return the stripped content of the first completion choice.
	"""
	choices = body.get("choices")
	if not choices:
		raise EmptyCompletionError("no response generated from the model")
	if not isinstance(choices, list) or not isinstance(choices[0], dict):
		raise CompletionError("failed to unmarshal response: malformed choices")
	message = choices[0].get("message") or {}
	if not isinstance(message, dict):
		raise CompletionError("failed to unmarshal response: malformed choice message")
	content = message.get("content") or ""
	return str(content).strip()


#============================================
class ReportGenerator:
	"""
	Turn collected activities into a standup report through GitHub Models.
	"""

	def __init__(
		self,
		token: str,
		endpoint: str = DEFAULT_MODELS_ENDPOINT,
		timeout_seconds: int = DEFAULT_TIMEOUT_SECONDS,
		completion_client=None,
		log_fn=None,
	):
		if not token:
			raise MissingTokenError("GITHUB_TOKEN environment variable is not set")
		self.log_fn = log_fn
		if completion_client is None:
			completion_client = ModelsClient(token, endpoint=endpoint, timeout_seconds=timeout_seconds)
		self.completion_client = completion_client

	#============================================
	def log(self, message: str) -> None:
		if self.log_fn is not None:
			self.log_fn(message)

	#============================================
	def generate(self, activities: list[activity.Activity], model_id: str) -> str:
		"""
		Format activities, request a completion and return the report text.
		"""
		self.log("Formatting activity data for the model")
		digest = digest_formatter.format_activities(activities)
		payload = build_request_payload(digest, model_id)
		self.log(f"Calling GitHub Models API ({model_id})")
		body = self.completion_client.complete(payload)
		return extract_first_choice(body)
