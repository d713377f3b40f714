from standlib import activity


NO_ACTIVITY_TEXT = "No GitHub activity found for the specified period."
MAX_DESCRIPTION_CHARS = 200
ACTIVITY_SECTIONS = (
	(activity.KIND_COMMIT, "COMMITS:"),
	(activity.KIND_PULL_REQUEST, "PULL REQUESTS:"),
	(activity.KIND_ISSUE, "ISSUES:"),
	(activity.KIND_REVIEW, "CODE REVIEWS:"),
)


#============================================
def commit_body_line(commit: activity.Activity) -> str:
	"""
	Return the leading line of a commit message body, or empty string.

	Blank separator lines between subject and body are skipped. Only this
	one line is ever surfaced.
	"""
	if commit.description == commit.title:
		return ""
	lines = commit.description.split("\n")
	for line in lines[1:]:
		if line.strip():
			return line.strip()
	return ""


#============================================
def format_commit(commit: activity.Activity) -> list[str]:
	lines = [f"- [{commit.repository}] {commit.title}"]
	body_line = commit_body_line(commit)
	if body_line:
		lines.append(f"  Description: {body_line}")
	return lines


#============================================
def format_issue_like(item: activity.Activity) -> list[str]:
	"""
	Format a pull request or issue; long descriptions are dropped, not cut.
	"""
	lines = [f"- [{item.repository}] {item.title}"]
	if item.description and len(item.description) < MAX_DESCRIPTION_CHARS:
		lines.append(f"  Description: {item.description.strip()}")
	return lines


#============================================
def format_review(review: activity.Activity) -> list[str]:
	return [f"- [{review.repository}] {review.title}"]


FORMATTERS = {
	activity.KIND_COMMIT: format_commit,
	activity.KIND_PULL_REQUEST: format_issue_like,
	activity.KIND_ISSUE: format_issue_like,
	activity.KIND_REVIEW: format_review,
}


#============================================
def group_by_kind(activities: list[activity.Activity]) -> dict[str, list[activity.Activity]]:
	"""
	Partition activities by kind, keeping relative order inside each kind.
	"""
	groups = {kind: [] for kind in activity.ACTIVITY_KINDS}
	for item in activities:
		groups[item.kind].append(item)
	return groups


#============================================
def format_activities(activities: list[activity.Activity]) -> str:
	"""
	Render activities as the plain-text digest sent to the model.

	Args:
		activities: collected activities in any order.

	Returns:
		Digest text with COMMITS, PULL REQUESTS, ISSUES and CODE REVIEWS
		sections in that order, each followed by one blank line. Empty
		sections are left out.
	"""
	if not activities:
		return NO_ACTIVITY_TEXT
	groups = group_by_kind(activities)
	lines = []
	for kind, header in ACTIVITY_SECTIONS:
		items = groups[kind]
		if not items:
			continue
		lines.append(header)
		for item in items:
			lines.extend(FORMATTERS[kind](item))
		lines.append("")
	return "\n".join(lines) + "\n"
