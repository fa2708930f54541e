# =============================================================================
# adapter_core/github.py  —  GitHub REST API Adapter
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   Search, issues, repositories and pull requests against api.github.com,
#   authenticated with a personal access token.
#
# OUTPUT SHAPES:
#   - Most functions return a trimmed dict (the "summary" helpers below keep
#     the fields a caller reasons about and drop the hundreds of *_url
#     fields GitHub includes).
#   - get_repository, get_file_contents and get_repository_tree return
#     compact text/markdown instead, since their raw JSON is mostly noise.
#
# MULTI-STEP OPERATIONS:
#   Some tools need several sequential calls, each depending on the one
#   before (e.g. push_files: ref → commit → tree → new commit → move ref).
#   A failure at any step fails the whole tool; nothing is rolled back.
# =============================================================================

import base64
from datetime import datetime
from typing import Any, Callable

import httpx

from adapter_core.config import AdapterConfig
from adapter_core.errors import UpstreamError
from adapter_core.models import Failure
from adapter_core.upstream import UpstreamClient

GITHUB_API_BASE = "https://api.github.com"


def create_client(config: AdapterConfig, transport: httpx.AsyncBaseTransport | None = None) -> UpstreamClient:
    return UpstreamClient(
        GITHUB_API_BASE,
        label="GitHub API",
        headers={
            "Authorization": f"Bearer {config.credential}",
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": "2022-11-28",
        },
        timeout=config.timeout,
        transport=transport,
    )


def _repo_path(owner: str, repo: str) -> str:
    return f"/repos/{owner}/{repo}"


def _page(per_page: int, page: int) -> dict[str, int]:
    return {"per_page": per_page, "page": page}


# =============================================================================
# Summaries
# =============================================================================
def _login(user: dict | None) -> str | None:
    return user.get("login") if user else None


def summarize_issue(issue: dict[str, Any]) -> dict[str, Any]:
    return {
        "number": issue.get("number"),
        "title": issue.get("title"),
        "state": issue.get("state"),
        "user": _login(issue.get("user")),
        "labels": [label["name"] if isinstance(label, dict) else label for label in issue.get("labels", [])],
        "assignees": [_login(a) for a in issue.get("assignees") or []],
        "comments": issue.get("comments"),
        "is_pull_request": "pull_request" in issue,
        "created_at": issue.get("created_at"),
        "updated_at": issue.get("updated_at"),
        "html_url": issue.get("html_url"),
        "body": issue.get("body"),
    }


def summarize_comment(comment: dict[str, Any]) -> dict[str, Any]:
    return {
        "id": comment.get("id"),
        "user": _login(comment.get("user")),
        "created_at": comment.get("created_at"),
        "body": comment.get("body"),
        "html_url": comment.get("html_url"),
    }


def summarize_repository(repo: dict[str, Any]) -> dict[str, Any]:
    return {
        "full_name": repo.get("full_name"),
        "description": repo.get("description"),
        "private": repo.get("private"),
        "language": repo.get("language"),
        "stargazers_count": repo.get("stargazers_count"),
        "forks_count": repo.get("forks_count"),
        "default_branch": repo.get("default_branch"),
        "html_url": repo.get("html_url"),
        "updated_at": repo.get("updated_at"),
    }


def summarize_user(user: dict[str, Any]) -> dict[str, Any]:
    return {"login": user.get("login"), "type": user.get("type"), "html_url": user.get("html_url")}


def summarize_code_hit(hit: dict[str, Any]) -> dict[str, Any]:
    return {
        "name": hit.get("name"),
        "path": hit.get("path"),
        "repository": (hit.get("repository") or {}).get("full_name"),
        "html_url": hit.get("html_url"),
    }


def summarize_commit(commit: dict[str, Any]) -> dict[str, Any]:
    detail = commit.get("commit") or {}
    author = detail.get("author") or {}
    summary = {
        "sha": commit.get("sha"),
        "message": detail.get("message"),
        "author": author.get("name"),
        "date": author.get("date"),
        "html_url": commit.get("html_url"),
    }
    if "files" in commit:
        summary["stats"] = commit.get("stats")
        summary["files"] = [
            {"filename": f.get("filename"), "status": f.get("status"), "changes": f.get("changes")}
            for f in commit["files"]
        ]
    return summary


def summarize_pull(pull: dict[str, Any]) -> dict[str, Any]:
    return {
        "number": pull.get("number"),
        "title": pull.get("title"),
        "state": pull.get("state"),
        "draft": pull.get("draft"),
        "merged": pull.get("merged"),
        "user": _login(pull.get("user")),
        "head": (pull.get("head") or {}).get("ref"),
        "base": (pull.get("base") or {}).get("ref"),
        "created_at": pull.get("created_at"),
        "updated_at": pull.get("updated_at"),
        "html_url": pull.get("html_url"),
        "body": pull.get("body"),
    }


def _search_result(data: dict[str, Any], summarize: Callable[[dict[str, Any]], dict[str, Any]]) -> dict[str, Any]:
    return {
        "total_count": data.get("total_count", 0),
        "incomplete_results": data.get("incomplete_results", False),
        "items": [summarize(item) for item in data.get("items", [])],
    }


# =============================================================================
# Search
# =============================================================================
async def search_repositories(client: UpstreamClient, query: str, per_page: int = 30, page: int = 1) -> dict:
    data = await client.get("/search/repositories", params={"q": query, **_page(per_page, page)})
    return _search_result(data, summarize_repository)


async def search_code(
    client: UpstreamClient,
    q: str,
    sort: str | None = None,
    order: str | None = None,
    per_page: int = 30,
    page: int = 1,
) -> dict:
    params = {"q": q, "sort": sort, "order": order, **_page(per_page, page)}
    return _search_result(await client.get("/search/code", params=params), summarize_code_hit)


async def search_issues(
    client: UpstreamClient,
    q: str,
    sort: str | None = None,
    order: str | None = None,
    per_page: int = 30,
    page: int = 1,
) -> dict:
    params = {"q": q, "sort": sort, "order": order, **_page(per_page, page)}
    return _search_result(await client.get("/search/issues", params=params), summarize_issue)


async def search_users(
    client: UpstreamClient,
    q: str,
    sort: str | None = None,
    order: str | None = None,
    per_page: int = 30,
    page: int = 1,
) -> dict:
    params = {"q": q, "sort": sort, "order": order, **_page(per_page, page)}
    return _search_result(await client.get("/search/users", params=params), summarize_user)


# =============================================================================
# Issues
# =============================================================================
async def get_issue(client: UpstreamClient, owner: str, repo: str, issue_number: int) -> dict:
    return summarize_issue(await client.get(f"{_repo_path(owner, repo)}/issues/{issue_number}"))


async def add_issue_comment(client: UpstreamClient, owner: str, repo: str, issue_number: int, body: str) -> dict:
    data = await client.post(f"{_repo_path(owner, repo)}/issues/{issue_number}/comments", json={"body": body})
    return summarize_comment(data)


async def create_issue(
    client: UpstreamClient,
    owner: str,
    repo: str,
    title: str,
    body: str | None = None,
    assignees: list[str] | None = None,
    labels: list[str] | None = None,
    milestone: int | None = None,
) -> dict:
    payload = {"title": title, "body": body, "assignees": assignees, "labels": labels, "milestone": milestone}
    return summarize_issue(await client.post(f"{_repo_path(owner, repo)}/issues", json=payload))


async def list_issues(
    client: UpstreamClient,
    owner: str,
    repo: str,
    state: str | None = None,
    labels: list[str] | None = None,
    sort: str | None = None,
    direction: str | None = None,
    since: str | None = None,
    per_page: int = 30,
    page: int = 1,
) -> list[dict]:
    params = {
        "state": state,
        "labels": ",".join(labels) if labels else None,
        "sort": sort,
        "direction": direction,
        "since": since,
        **_page(per_page, page),
    }
    data = await client.get(f"{_repo_path(owner, repo)}/issues", params=params)
    return [summarize_issue(issue) for issue in data]


async def update_issue(
    client: UpstreamClient,
    owner: str,
    repo: str,
    issue_number: int,
    title: str | None = None,
    body: str | None = None,
    state: str | None = None,
    labels: list[str] | None = None,
    assignees: list[str] | None = None,
    milestone: int | None = None,
) -> dict:
    payload = {
        "title": title,
        "body": body,
        "state": state,
        "labels": labels,
        "assignees": assignees,
        "milestone": milestone,
    }
    return summarize_issue(await client.patch(f"{_repo_path(owner, repo)}/issues/{issue_number}", json=payload))


async def get_issue_comments(
    client: UpstreamClient, owner: str, repo: str, issue_number: int, page: int = 1, per_page: int = 30
) -> list[dict]:
    data = await client.get(
        f"{_repo_path(owner, repo)}/issues/{issue_number}/comments", params=_page(per_page, page)
    )
    return [summarize_comment(comment) for comment in data]


# =============================================================================
# Repositories
# =============================================================================
def _format_date(timestamp: str | None) -> str:
    if not timestamp:
        return "Unknown"
    moment = datetime.fromisoformat(timestamp)
    return f"{moment:%b} {moment.day}, {moment.year}"


async def get_repository(client: UpstreamClient, owner: str, repo: str) -> str:
    data = await client.get(_repo_path(owner, repo))
    return format_repository(data)


def format_repository(data: dict[str, Any]) -> str:
    lines = [f"# {data['full_name']}", ""]
    if data.get("description"):
        lines += [f"> {data['description']}", ""]

    lines += [
        "## Stats",
        f"- **Stars:** {data.get('stargazers_count', 0):,}",
        f"- **Forks:** {data.get('forks_count', 0):,}",
        f"- **Open Issues:** {data.get('open_issues_count', 0):,}",
        f"- **Watchers:** {data.get('watchers_count', 0):,}",
        f"- **Size:** {data.get('size', 0) / 1024:.2f} MB",
        "",
        "## Details",
        f"- **Primary Language:** {data.get('language') or 'None'}",
        f"- **Default Branch:** `{data.get('default_branch')}`",
        f"- **License:** {(data.get('license') or {}).get('name') or 'No license'}",
        f"- **Visibility:** {data.get('visibility')}",
    ]
    if data.get("topics"):
        lines.append("- **Topics:** " + ", ".join(f"`{topic}`" for topic in data["topics"]))

    flags = [label for key, label in _STATUS_FLAGS if data.get(key)]
    if flags:
        lines.append(f"- **Status:** {', '.join(flags)}")
    lines.append("")

    lines += [
        "## Links",
        f"- **Repository:** {data.get('html_url')}",
        f"- **Clone:** `{data.get('clone_url')}`",
        f"- **SSH:** `{data.get('ssh_url')}`",
    ]
    if data.get("homepage"):
        lines.append(f"- **Homepage:** {data['homepage']}")
    lines.append("")

    features = [label for key, label in _FEATURES if data.get(key)]
    if features:
        lines += ["## Features", f"Enabled: {', '.join(features)}", ""]

    owner = data.get("owner") or {}
    lines += [
        "## Owner",
        f"- **Name:** [{owner.get('login')}](https://github.com/{owner.get('login')})",
        f"- **Type:** {owner.get('type')}",
        "",
        "## Timeline",
        f"- **Created:** {_format_date(data.get('created_at'))}",
        f"- **Last Updated:** {_format_date(data.get('updated_at'))}",
        f"- **Last Push:** {_format_date(data.get('pushed_at'))}",
    ]
    return "\n".join(lines) + "\n"


_STATUS_FLAGS = (("private", "Private"), ("fork", "Fork"), ("archived", "Archived"), ("disabled", "Disabled"))

_FEATURES = (
    ("has_issues", "Issues"),
    ("has_projects", "Projects"),
    ("has_wiki", "Wiki"),
    ("has_pages", "Pages"),
    ("has_downloads", "Downloads"),
    ("has_discussions", "Discussions"),
)


async def get_commit(client: UpstreamClient, owner: str, repo: str, sha: str) -> dict:
    return summarize_commit(await client.get(f"{_repo_path(owner, repo)}/commits/{sha}"))


async def list_commits(
    client: UpstreamClient, owner: str, repo: str, sha: str | None = None, per_page: int = 30, page: int = 1
) -> list[dict]:
    data = await client.get(f"{_repo_path(owner, repo)}/commits", params={"sha": sha, **_page(per_page, page)})
    return [summarize_commit(commit) for commit in data]


async def list_branches(client: UpstreamClient, owner: str, repo: str, per_page: int = 30, page: int = 1) -> list[dict]:
    data = await client.get(f"{_repo_path(owner, repo)}/branches", params=_page(per_page, page))
    return [
        {"name": b.get("name"), "sha": (b.get("commit") or {}).get("sha"), "protected": b.get("protected")}
        for b in data
    ]


async def create_or_update_file(
    client: UpstreamClient,
    owner: str,
    repo: str,
    path: str,
    content: str,
    message: str,
    branch: str,
    sha: str | None = None,
) -> dict:
    payload = {
        "message": message,
        "content": base64.b64encode(content.encode("utf-8")).decode("ascii"),
        "branch": branch,
        "sha": sha,
    }
    data = await client.put(f"{_repo_path(owner, repo)}/contents/{path}", json=payload)
    file_info = data.get("content") or {}
    commit = data.get("commit") or {}
    return {
        "path": file_info.get("path"),
        "sha": file_info.get("sha"),
        "commit": {"sha": commit.get("sha"), "message": commit.get("message"), "html_url": commit.get("html_url")},
    }


async def create_repository(
    client: UpstreamClient,
    name: str,
    description: str | None = None,
    private: bool | None = None,
    autoInit: bool | None = None,
) -> dict:
    payload = {"name": name, "description": description, "private": private, "auto_init": autoInit}
    return summarize_repository(await client.post("/user/repos", json=payload))


async def get_file_contents(
    client: UpstreamClient, owner: str, repo: str, path: str, branch: str | None = None
) -> str | Failure:
    data = await client.get(f"{_repo_path(owner, repo)}/contents/{path}", params={"ref": branch})

    if isinstance(data, list):
        return Failure("Path points to a directory, not a file. Use get_repository_tree to list directory contents.")
    if data.get("type") != "file":
        return Failure(f"Path points to a {data.get('type')}, not a file.")

    content = base64.b64decode(data.get("content", "")).decode("utf-8", errors="replace")
    extension = path.rsplit(".", 1)[-1] if "." in path else ""
    return f"{data['path']} ({data.get('size', 0)}B)\n\n```{extension}\n{content}\n```"


async def get_repository_tree(
    client: UpstreamClient,
    owner: str,
    repo: str,
    path: str | None = None,
    branch: str | None = None,
    recursive: bool = False,
) -> str | Failure:
    if path:
        return await _directory_listing(client, owner, repo, path, branch)

    target = branch or await _default_branch(client, owner, repo)
    ref = await client.get(f"{_repo_path(owner, repo)}/git/ref/heads/{target}")
    commit = await client.get(f"{_repo_path(owner, repo)}/git/commits/{ref['object']['sha']}")
    tree = await client.get(
        f"{_repo_path(owner, repo)}/git/trees/{commit['tree']['sha']}",
        params={"recursive": "true" if recursive else None},
    )

    lines = [f"{owner}/{repo} @ {target}"]
    if tree.get("truncated"):
        lines.append("(truncated)")
    for item in sorted(tree.get("tree", []), key=lambda i: i["path"]):
        depth = item["path"].count("/")
        name = item["path"].rsplit("/", 1)[-1]
        kind = "file" if item["type"] == "blob" else item["type"]
        if kind == "file":
            lines.append(f"{'  ' * depth}{name} ({item.get('size', 0)}B)")
        else:
            lines.append(f"{'  ' * depth}{name} ({kind})")
    return "\n".join(lines) + "\n"


async def _directory_listing(
    client: UpstreamClient, owner: str, repo: str, path: str, branch: str | None
) -> str | Failure:
    data = await client.get(f"{_repo_path(owner, repo)}/contents/{path}", params={"ref": branch})
    if not isinstance(data, list):
        return Failure("Path does not point to a directory")

    # Directories first, then files, each alphabetical.
    entries = sorted(data, key=lambda item: (item["type"] != "dir", item["name"]))
    lines = [f"{path}/"]
    for item in entries:
        if item["type"] == "dir":
            lines.append(f"  {item['name']}/")
        else:
            lines.append(f"  {item['name']} ({item.get('size') or 0}B)")
    return "\n".join(lines) + "\n"


async def _default_branch(client: UpstreamClient, owner: str, repo: str) -> str:
    data = await client.get(_repo_path(owner, repo))
    return data["default_branch"]


async def fork_repository(client: UpstreamClient, owner: str, repo: str, organization: str | None = None) -> dict:
    data = await client.post(f"{_repo_path(owner, repo)}/forks", json={"organization": organization})
    return summarize_repository(data)


async def create_branch(
    client: UpstreamClient, owner: str, repo: str, branch: str, from_branch: str | None = None
) -> dict:
    source = from_branch or await _default_branch(client, owner, repo)
    ref = await client.get(f"{_repo_path(owner, repo)}/git/ref/heads/{source}")
    created = await client.post(
        f"{_repo_path(owner, repo)}/git/refs",
        json={"ref": f"refs/heads/{branch}", "sha": ref["object"]["sha"]},
    )
    return {"ref": created.get("ref"), "sha": (created.get("object") or {}).get("sha"), "from": source}


async def list_tags(client: UpstreamClient, owner: str, repo: str, per_page: int = 30, page: int = 1) -> list[dict]:
    data = await client.get(f"{_repo_path(owner, repo)}/tags", params=_page(per_page, page))
    return [{"name": t.get("name"), "sha": (t.get("commit") or {}).get("sha")} for t in data]


async def get_tag(client: UpstreamClient, owner: str, repo: str, tag: str) -> dict:
    ref = await client.get(f"{_repo_path(owner, repo)}/git/ref/tags/{tag}")
    if ref["object"].get("type") != "tag":
        # Lightweight tag: the ref points straight at a commit.
        return {"tag": tag, "sha": ref["object"]["sha"], "object": ref["object"], "annotated": False}
    data = await client.get(f"{_repo_path(owner, repo)}/git/tags/{ref['object']['sha']}")
    return {
        "tag": data.get("tag"),
        "sha": data.get("sha"),
        "message": data.get("message"),
        "tagger": data.get("tagger"),
        "object": data.get("object"),
        "annotated": True,
    }


async def push_files(
    client: UpstreamClient, owner: str, repo: str, branch: str, files: list[dict[str, str]], message: str
) -> dict:
    base = _repo_path(owner, repo)
    ref = await client.get(f"{base}/git/ref/heads/{branch}")
    base_sha = ref["object"]["sha"]
    base_commit = await client.get(f"{base}/git/commits/{base_sha}")

    tree = await client.post(
        f"{base}/git/trees",
        json={
            "base_tree": base_commit["tree"]["sha"],
            "tree": [
                {"path": f["path"], "mode": "100644", "type": "blob", "content": f["content"]} for f in files
            ],
        },
    )
    commit = await client.post(
        f"{base}/git/commits",
        json={"message": message, "tree": tree["sha"], "parents": [base_sha]},
    )
    updated = await client.patch(f"{base}/git/refs/heads/{branch}", json={"sha": commit["sha"], "force": False})
    return {"ref": updated.get("ref"), "sha": (updated.get("object") or {}).get("sha"), "files": len(files)}


# =============================================================================
# Pull requests
# =============================================================================
async def get_pull_request(client: UpstreamClient, owner: str, repo: str, pullNumber: int) -> dict:
    return summarize_pull(await client.get(f"{_repo_path(owner, repo)}/pulls/{pullNumber}"))


async def update_pull_request(
    client: UpstreamClient,
    owner: str,
    repo: str,
    pullNumber: int,
    title: str | None = None,
    body: str | None = None,
    state: str | None = None,
    base: str | None = None,
    maintainer_can_modify: bool | None = None,
) -> dict:
    payload = {
        "title": title,
        "body": body,
        "state": state,
        "base": base,
        "maintainer_can_modify": maintainer_can_modify,
    }
    return summarize_pull(await client.patch(f"{_repo_path(owner, repo)}/pulls/{pullNumber}", json=payload))


async def list_pull_requests(
    client: UpstreamClient,
    owner: str,
    repo: str,
    state: str | None = None,
    head: str | None = None,
    base: str | None = None,
    sort: str | None = None,
    direction: str | None = None,
    per_page: int = 30,
    page: int = 1,
) -> list[dict]:
    params = {"state": state, "head": head, "base": base, "sort": sort, "direction": direction}
    data = await client.get(f"{_repo_path(owner, repo)}/pulls", params={**params, **_page(per_page, page)})
    return [summarize_pull(pull) for pull in data]


async def merge_pull_request(
    client: UpstreamClient,
    owner: str,
    repo: str,
    pullNumber: int,
    commit_title: str | None = None,
    commit_message: str | None = None,
    merge_method: str | None = None,
) -> dict:
    payload = {"commit_title": commit_title, "commit_message": commit_message, "merge_method": merge_method}
    return await client.put(f"{_repo_path(owner, repo)}/pulls/{pullNumber}/merge", json=payload)


async def get_pull_request_files(
    client: UpstreamClient, owner: str, repo: str, pullNumber: int, per_page: int = 30, page: int = 1
) -> list[dict]:
    data = await client.get(f"{_repo_path(owner, repo)}/pulls/{pullNumber}/files", params=_page(per_page, page))
    return [
        {
            "filename": f.get("filename"),
            "status": f.get("status"),
            "additions": f.get("additions"),
            "deletions": f.get("deletions"),
            "changes": f.get("changes"),
        }
        for f in data
    ]


async def get_pull_request_status(client: UpstreamClient, owner: str, repo: str, pullNumber: int) -> dict:
    pull = await client.get(f"{_repo_path(owner, repo)}/pulls/{pullNumber}")
    sha = pull["head"]["sha"]
    status = await client.get(f"{_repo_path(owner, repo)}/commits/{sha}/status")
    return {
        "sha": sha,
        "state": status.get("state"),
        "total_count": status.get("total_count"),
        "statuses": [
            {"context": s.get("context"), "state": s.get("state"), "description": s.get("description")}
            for s in status.get("statuses", [])
        ],
    }


async def update_pull_request_branch(
    client: UpstreamClient, owner: str, repo: str, pullNumber: int, expectedHeadSha: str | None = None
) -> dict:
    return await client.put(
        f"{_repo_path(owner, repo)}/pulls/{pullNumber}/update-branch",
        json={"expected_head_sha": expectedHeadSha},
    )


async def get_pull_request_comments(client: UpstreamClient, owner: str, repo: str, pullNumber: int) -> list[dict]:
    data = await client.get(f"{_repo_path(owner, repo)}/pulls/{pullNumber}/comments")
    comments = []
    for comment in data:
        summary = summarize_comment(comment)
        summary["path"] = comment.get("path")
        summary["line"] = comment.get("line")
        comments.append(summary)
    return comments


async def create_pull_request(
    client: UpstreamClient,
    owner: str,
    repo: str,
    title: str,
    head: str,
    base: str,
    body: str | None = None,
    draft: bool | None = None,
    maintainer_can_modify: bool | None = None,
) -> dict:
    payload = {
        "title": title,
        "head": head,
        "base": base,
        "body": body,
        "draft": draft,
        "maintainer_can_modify": maintainer_can_modify,
    }
    data = await client.post(f"{_repo_path(owner, repo)}/pulls", json=payload)
    if not isinstance(data, dict):
        raise UpstreamError("GitHub API returned an unexpected response for the new pull request")
    return summarize_pull(data)
