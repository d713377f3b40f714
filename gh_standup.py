#!/usr/bin/env python3
import argparse
import os
import sys
from datetime import datetime
from datetime import timedelta
from datetime import timezone

import rich.console

from standlib import activity
from standlib import activity_collector
from standlib import digest_formatter
from standlib import github_client
from standlib import report_generator
from standlib import standup_settings
from standlib.errors import StandupError


RULE = "=" * 50
RICH_CONSOLE = rich.console.Console()


#============================================
def log_step(message: str) -> None:
	"""
	Print one timestamped progress line.
	"""
	now_text = datetime.now().strftime("%H:%M:%S")
	line = f"[gh_standup {now_text}] {message}"
	lower = message.lower()
	style = "cyan"
	if ("failed" in lower) or ("error" in lower):
		style = "bold red"
	elif "skipping" in lower:
		style = "yellow"
	elif ("found " in lower) or ("wrote " in lower):
		style = "green"
	RICH_CONSOLE.print(line, style=style, markup=False, highlight=False)


#============================================
def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
	"""
	Parse command-line arguments.
	"""
	parser = argparse.ArgumentParser(
		prog="gh-standup",
		description="Generate an AI standup report from recent GitHub activity.",
	)
	parser.add_argument(
		"-d", "--days",
		type=int,
		default=None,
		help="Number of days to look back for activity (default: settings.yaml, then 1).",
	)
	parser.add_argument(
		"-m", "--model",
		default="",
		help="GitHub Models model to use (default: settings.yaml, then openai/gpt-4o).",
	)
	parser.add_argument(
		"-r", "--repo",
		default="",
		help="Repository to generate standup for (owner/repo).",
	)
	parser.add_argument(
		"-u", "--user",
		default="",
		help="User to generate standup for (defaults to authenticated user).",
	)
	parser.add_argument(
		"--settings",
		default=standup_settings.DEFAULT_SETTINGS_PATH,
		help="YAML settings path for defaults.",
	)
	parser.add_argument(
		"-o", "--output",
		default="",
		help="Optional path to also write the report text to.",
	)
	parser.add_argument(
		"--dry-run",
		action="store_true",
		help="Print the activity digest and skip the model call.",
	)
	args = parser.parse_args(argv)
	return args


#============================================
def compute_window(days: int, now: datetime | None = None) -> tuple[datetime, datetime]:
	"""
	Return the [now - days, now] window; zero or negative days pass through.
	"""
	end = now or datetime.now(timezone.utc)
	start = end - timedelta(days=days)
	return start, end


#============================================
def resolve_user(user_arg: str, settings: dict, client: github_client.GitHubClient) -> str:
	"""
	Resolve target user from flag, settings, then the authenticated identity.
	"""
	user = (user_arg or "").strip() or standup_settings.get_github_username(settings)
	if user:
		return user
	log_step("Getting authenticated GitHub user")
	try:
		user = client.get_authenticated_login()
	except StandupError as error:
		raise StandupError(f"failed to get current user: {error}") from error
	log_step(f"Found user: {user}")
	return user


#============================================
def format_count_summary(activities: list[activity.Activity]) -> str:
	counts = activity.count_by_kind(activities)
	return (
		f"   {counts[activity.KIND_COMMIT]} commits, "
		+ f"{counts[activity.KIND_PULL_REQUEST]} pull requests, "
		+ f"{counts[activity.KIND_ISSUE]} issues, "
		+ f"{counts[activity.KIND_REVIEW]} reviews"
	)


#============================================
def write_report(output_path: str, report: str) -> str:
	"""
	Write the report text to a file, creating parent folders.
	"""
	output_dir = os.path.dirname(os.path.abspath(output_path))
	os.makedirs(output_dir, exist_ok=True)
	with open(output_path, "w", encoding="utf-8") as handle:
		handle.write(report)
		handle.write("\n")
	return os.path.abspath(output_path)


#============================================
def run_standup(args: argparse.Namespace) -> None:
	"""
	Collect activity, generate the report and print it.
	"""
	settings, settings_path = standup_settings.load_settings(args.settings)
	if settings:
		log_step(f"Using settings file: {settings_path}")
	days = args.days if args.days is not None else standup_settings.get_window_days(settings)
	model = args.model.strip() or standup_settings.get_model(settings)
	token = standup_settings.resolve_github_token(settings)

	client = github_client.GitHubClient(token, log_fn=log_step)
	user = resolve_user(args.user, settings, client)

	start, end = compute_window(days)
	log_step(
		f"Analyzing GitHub activity for {user} "
		+ f"({start.strftime('%Y-%m-%d')} to {end.strftime('%Y-%m-%d')})"
	)
	collector = activity_collector.ActivityCollector(client, log_fn=log_step)
	try:
		activities = collector.collect(user, args.repo.strip(), start, end)
	except StandupError as error:
		raise StandupError(f"failed to collect GitHub activity: {error}") from error
	usage = client.api_usage_snapshot()
	log_step(f"GitHub API usage: calls={usage.get('api_call_count', 0)}")

	if not activities:
		print(digest_formatter.NO_ACTIVITY_TEXT)
		return

	print(f"Found {len(activities)} activities")
	print(format_count_summary(activities))

	if args.dry_run:
		print("\n" + RULE)
		print("ACTIVITY DIGEST")
		print(RULE)
		print(digest_formatter.format_activities(activities))
		return

	log_step(f"Generating standup report using {model}")
	try:
		generator = report_generator.ReportGenerator(
			token,
			endpoint=standup_settings.get_models_endpoint(settings),
			timeout_seconds=standup_settings.get_timeout_seconds(settings),
			log_fn=log_step,
		)
		report = generator.generate(activities, model)
	except StandupError as error:
		raise StandupError(f"failed to generate standup report: {error}") from error
	log_step("Report generated successfully")

	print("\n" + RULE)
	print("STANDUP REPORT")
	print(RULE)
	print(report)

	if args.output:
		written = write_report(args.output, report)
		log_step(f"Wrote {written}")


#============================================
def main(argv: list[str] | None = None) -> None:
	"""
	Command-line entry point; exits 1 on any fatal error.
	"""
	args = parse_args(argv)
	try:
		run_standup(args)
	except StandupError as error:
		print(f"Error: {error}", file=sys.stderr)
		sys.exit(1)


if __name__ == "__main__":
	main()
