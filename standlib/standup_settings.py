import os

import yaml

from standlib.errors import SettingsError


DEFAULT_SETTINGS_PATH = "settings.yaml"
DEFAULT_DAYS = 1
DEFAULT_MODEL = "openai/gpt-4o"
DEFAULT_MODELS_ENDPOINT = "https://models.github.ai/inference/chat/completions"
DEFAULT_TIMEOUT_SECONDS = 30
TOKEN_ENV_NAMES = ("GITHUB_TOKEN", "GH_TOKEN")


#============================================
def resolve_settings_path(path_text: str) -> str:
	"""
	Resolve settings path against the current directory.
	"""
	return os.path.abspath(os.path.expanduser(path_text))


#============================================
def load_settings(path_text: str) -> tuple[dict, str]:
	"""
	Load YAML settings dict and return it with resolved path.
	"""
	resolved_path = resolve_settings_path(path_text)
	if not os.path.isfile(resolved_path):
		return {}, resolved_path
	with open(resolved_path, "r", encoding="utf-8") as handle:
		try:
			data = yaml.safe_load(handle.read())
		except yaml.YAMLError as error:
			raise SettingsError(f"Settings file is not valid YAML: {resolved_path}: {error}") from error
	if data is None:
		return {}, resolved_path
	if not isinstance(data, dict):
		raise SettingsError(f"Settings file must contain a mapping: {resolved_path}")
	return data, resolved_path


#============================================
def get_nested_value(settings: dict, keys: list[str], default_value):
	"""
	Read nested mapping value by key path.
	"""
	current = settings
	for key in keys:
		if not isinstance(current, dict):
			return default_value
		if key not in current:
			return default_value
		current = current[key]
	return current


#============================================
def get_setting_str(settings: dict, keys: list[str], default_value: str) -> str:
	"""
	Read a string setting from nested path with fallback.
	"""
	value = get_nested_value(settings, keys, default_value)
	if value is None:
		return default_value
	return str(value).strip()


#============================================
def get_setting_int(settings: dict, keys: list[str], default_value: int) -> int:
	"""
	Read an integer setting from nested path with fallback.
	"""
	value = get_nested_value(settings, keys, default_value)
	if value is None:
		return default_value
	if isinstance(value, bool):
		raise SettingsError(f"Invalid integer for setting path {'.'.join(keys)}: {value}")
	try:
		return int(value)
	except (TypeError, ValueError) as error:
		raise SettingsError(f"Invalid integer for setting path {'.'.join(keys)}: {value}") from error


#============================================
def get_github_username(settings: dict) -> str:
	"""
	Read the configured GitHub username, empty when unset.
	"""
	return get_setting_str(settings, ["github", "username"], "")


#============================================
def get_window_days(settings: dict) -> int:
	return get_setting_int(settings, ["standup", "days"], DEFAULT_DAYS)


#============================================
def get_model(settings: dict) -> str:
	return get_setting_str(settings, ["llm", "model"], "") or DEFAULT_MODEL


#============================================
def get_models_endpoint(settings: dict) -> str:
	return get_setting_str(settings, ["llm", "endpoint"], "") or DEFAULT_MODELS_ENDPOINT


#============================================
def get_timeout_seconds(settings: dict) -> int:
	value = get_setting_int(settings, ["llm", "timeout_seconds"], DEFAULT_TIMEOUT_SECONDS)
	if value < 1:
		raise SettingsError(f"llm.timeout_seconds must be >= 1, got {value}")
	return value


#============================================
def resolve_github_token(settings: dict, environ=None) -> str:
	"""
	Resolve a GitHub token from the environment, then settings.yaml.

	Returns an empty string when no token is configured anywhere.
	"""
	env = os.environ if environ is None else environ
	for name in TOKEN_ENV_NAMES:
		value = (env.get(name, "") or "").strip()
		if value:
			return value
	return get_setting_str(settings, ["github", "token"], "")
