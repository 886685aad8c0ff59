# git_utils.py
import logging
import re
import subprocess
from datetime import datetime
from typing import List, Optional

from context import RunContext
from models import CommitRecord, RepoInfo

logger = logging.getLogger(__name__)


def run_git_command(
    args: List[str],
    repo_path: str,
    context: str = "Run git command",
    timeout: int = 30,
    log_errors: bool = True,
) -> Optional[str]:
    """
    Run a git command inside repo_path.
    Returns stdout, or None when git fails or times out.
    """
    cmd = ["git", *args]
    try:
        logger.debug(f"Running in {repo_path}: {' '.join(cmd)}")
        result = subprocess.run(
            cmd,
            capture_output=True,
            text=True,
            encoding="utf-8",
            errors="replace",
            timeout=timeout,
            cwd=repo_path,
        )
        if result.returncode != 0:
            if log_errors:
                logger.error(f"{context} failed: {result.stderr.strip()}")
            else:
                logger.debug(f"{context} failed: {result.stderr.strip()}")
            return None
        logger.debug(f"{context} succeeded, {len(result.stdout.splitlines())} lines")
        return result.stdout
    except subprocess.TimeoutExpired:
        logger.error(f"{context} timed out after {timeout}s")
        return None
    except OSError as e:
        logger.error(f"{context} failed: {e}")
        return None


def is_git_repository(repo_path: str) -> bool:
    output = run_git_command(
        ["rev-parse", "--is-inside-work-tree"],
        repo_path,
        "Check git repository",
        log_errors=False,
    )
    return output is not None and output.strip() == "true"


# --- Commit log parsing ---


def parse_commit_line(line: str, separator: str = "\x1f") -> Optional[CommitRecord]:
    """
    Parse one `hash, date, subject, author name, author email` record.

    Lines with the wrong shape are skipped; a timestamp that does not parse
    is a broken history source and raises ValueError.
    """
    parts = line.split(separator)
    if len(parts) != 5 or not parts[0].strip():
        logger.warning(f"Unexpected commit format, skipping: {line!r}")
        return None

    commit_hash, raw_date, message, author_name, author_email = parts
    try:
        timestamp = datetime.fromisoformat(raw_date.strip())
    except ValueError as e:
        raise ValueError(f"Malformed commit timestamp {raw_date!r} in {line!r}") from e
    if timestamp.tzinfo is None:
        raise ValueError(f"Commit timestamp {raw_date!r} carries no UTC offset")

    return CommitRecord(
        hash=commit_hash.strip(),
        timestamp=timestamp,
        message=message,
        author_name=author_name,
        author_email=author_email,
    )


def parse_commit_log(log_output: Optional[str], separator: str = "\x1f") -> List[CommitRecord]:
    commits: List[CommitRecord] = []
    if not log_output or not log_output.strip():
        return commits
    for line in log_output.split("\n"):
        if not line.strip():
            continue
        commit = parse_commit_line(line, separator)
        if commit:
            commits.append(commit)
    logger.debug(f"Parsed {len(commits)} commits")
    return commits


def _log_commits(context: RunContext, extra_args: List[str], label: str) -> Optional[str]:
    config = context.global_config
    return run_git_command(
        ["log", config.GIT_LOG_PRETTY, *extra_args],
        context.repo_path,
        label,
        timeout=config.GIT_COMMAND_TIMEOUT,
    )


def has_commits(context: RunContext) -> bool:
    """False for a freshly initialised repository whose HEAD is still unborn."""
    return validate_reference(context, "HEAD")


def get_commit_history(context: RunContext, days: int) -> List[CommitRecord]:
    """
    Commits from the trailing `days` days, newest first.

    A repository without commits yields an empty list; any other git
    failure raises RuntimeError.
    """
    if not has_commits(context):
        logger.debug("Repository has no commits yet")
        return []

    output = _log_commits(context, [f"--after={days} days ago"], "Read commit history")
    if output is None:
        raise RuntimeError(f"Could not read the commit history of {context.repo_path}")
    return parse_commit_log(output, context.global_config.GIT_FIELD_SEPARATOR)


def get_recent_commits(context: RunContext, count: int) -> List[CommitRecord]:
    output = _log_commits(context, [f"--max-count={count}"], "Read recent commits")
    return parse_commit_log(output, context.global_config.GIT_FIELD_SEPARATOR)


def validate_reference(context: RunContext, ref: str) -> bool:
    output = run_git_command(
        ["rev-parse", "--verify", "--quiet", ref],
        context.repo_path,
        f"Resolve {ref}",
        log_errors=False,
    )
    return output is not None


def get_commits_between(
    context: RunContext, from_ref: str, to_ref: str, fallback_count: int = 10
) -> List[CommitRecord]:
    """
    Commits reachable from to_ref but not from from_ref, newest first.

    Unresolvable references degrade to recent commits instead of failing.
    """
    valid_from = validate_reference(context, from_ref)
    valid_to = validate_reference(context, to_ref)

    if not valid_to:
        logger.warning("⚠️ Invalid references. Using the most recent commit.")
        return get_recent_commits(context, 1)
    if not valid_from:
        logger.warning(
            f"⚠️ Reference '{from_ref}' not found. Using the {fallback_count} most recent commits instead."
        )
        return get_recent_commits(context, fallback_count)

    output = _log_commits(context, [f"{from_ref}..{to_ref}"], f"Read {from_ref}..{to_ref}")
    if output is None:
        fallback = context.global_config.ERROR_FALLBACK_COUNT
        logger.warning(f"⚠️ Could not read the range. Using the {fallback} most recent commits.")
        return get_recent_commits(context, fallback)
    return parse_commit_log(output, context.global_config.GIT_FIELD_SEPARATOR)


# --- Repository metadata ---


def parse_repo_name(remote_url: str) -> Optional[str]:
    """`https://host/owner/name.git` or `git@host:owner/name.git` -> `name`."""
    match = re.search(r"[/:]([^/:]+?)(\.git)?/?$", remote_url.strip())
    if match and match.group(1):
        return match.group(1)
    return None


def get_repo_info(context: RunContext) -> RepoInfo:
    remote = run_git_command(
        ["remote", "get-url", "origin"],
        context.repo_path,
        "Read origin URL",
        log_errors=False,
    )
    name = parse_repo_name(remote) if remote else None
    if not name:
        name = _directory_name(context.repo_path)

    branches = run_git_command(
        ["branch", "--format=%(refname:short)"], context.repo_path, "List branches"
    )
    if branches is None:
        raise RuntimeError(f"Could not list the branches of {context.repo_path}")
    branch_count = len([b for b in branches.split("\n") if b.strip()])
    return RepoInfo(name=name, branch_count=branch_count, path=context.repo_path)


def _directory_name(repo_path: str) -> str:
    return re.split(r"[\\/]", repo_path.rstrip("/\\"))[-1] or "local-repo"


# --- Branches and diffs ---


def get_current_branch(context: RunContext) -> str:
    output = run_git_command(
        ["rev-parse", "--abbrev-ref", "HEAD"], context.repo_path, "Read current branch"
    )
    return output.strip() if output else "HEAD"


def get_staged_diff(context: RunContext) -> str:
    output = run_git_command(
        ["diff", "--staged", "--no-color"], context.repo_path, "Read staged diff"
    )
    return output or ""


def get_branch_diff(context: RunContext, base: str, current: str) -> str:
    output = run_git_command(
        ["diff", "--no-color", f"{base}...{current}"],
        context.repo_path,
        f"Diff {base}...{current}",
    )
    return output or ""


def get_modified_files(context: RunContext, base: str, current: str) -> List[str]:
    output = run_git_command(
        ["diff", "--name-only", f"{base}...{current}"],
        context.repo_path,
        "List modified files",
    )
    return [line.strip() for line in (output or "").split("\n") if line.strip()]
