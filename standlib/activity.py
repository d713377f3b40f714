from dataclasses import dataclass
from datetime import datetime
from datetime import timezone


KIND_COMMIT = "commit"
KIND_PULL_REQUEST = "pull_request"
KIND_ISSUE = "issue"
KIND_REVIEW = "review"
ACTIVITY_KINDS = (KIND_COMMIT, KIND_PULL_REQUEST, KIND_ISSUE, KIND_REVIEW)


#============================================
@dataclass(frozen=True)
class Activity:
	"""
	One unit of developer work reported by the GitHub search API.
	"""

	kind: str
	repository: str
	title: str
	description: str
	url: str
	created_at: datetime | None = None

	def __post_init__(self):
		if self.kind not in ACTIVITY_KINDS:
			raise ValueError(f"Unknown activity kind: {self.kind!r}")


#============================================
def parse_iso(ts: str) -> datetime | None:
	"""
	Parse an ISO timestamp string into a timezone-aware datetime.
	"""
	if not ts:
		return None
	parsed = datetime.fromisoformat(ts.replace("Z", "+00:00"))
	if parsed.tzinfo is None:
		parsed = parsed.replace(tzinfo=timezone.utc)
	return parsed


#============================================
def count_by_kind(activities: list[Activity]) -> dict[str, int]:
	"""
	Count activities per kind, with every kind present as a key.
	"""
	counts = {kind: 0 for kind in ACTIVITY_KINDS}
	for activity in activities:
		counts[activity.kind] += 1
	return counts
