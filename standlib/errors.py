"""
Exception types raised by standlib.
"""


#============================================
class StandupError(RuntimeError):
	"""
	Base class for every failure that aborts or degrades a standup run.
	"""


#============================================
class SettingsError(StandupError):
	"""
	Raised when settings.yaml is malformed or holds an invalid value.
	"""


#============================================
class GitHubApiError(StandupError):
	"""
	Raised when a GitHub REST call fails.
	"""

	def __init__(self, message: str, status: int | None = None):
		super().__init__(message)
		self.status = status


#============================================
class CommitSearchError(GitHubApiError):
	"""
	Raised when the commit search fails; callers may treat it as zero commits.
	"""


#============================================
class ActivityCollectionError(StandupError):
	"""
	Raised when a required activity search fails.
	"""


#============================================
class MissingTokenError(StandupError):
	"""
	Raised when no GitHub token is available for the models endpoint.
	"""


#============================================
class CompletionError(StandupError):
	"""
	Raised when the chat completion call fails or its body cannot be decoded.
	"""


#============================================
class EmptyCompletionError(CompletionError):
	"""
	Raised when the completion succeeded but returned no choices.
	"""
