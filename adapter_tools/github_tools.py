# =============================================================================
# adapter_tools/github_tools.py  —  GitHub Server Tool Declarations
# =============================================================================
#
# TOOL GROUPS:
#   search_*        → GitHub search API (read-only)
#   *_issue*        → issues and issue comments
#   repositories    → metadata, commits, branches, files, trees, tags
#   *_pull_request* → pull requests
#
# Tools that write (create_*, update_*, push_files, merge_*) are NOT
# idempotent: calling them twice creates two comments, two commits, etc.
#
# Parameter names follow GitHub's own (issue_number, per_page) except
# where established callers already use camelCase (pullNumber, autoInit,
# expectedHeadSha).
# =============================================================================

from adapter_core import github
from adapter_core import schema as s
from adapter_core.registry import ToolRegistry
from adapter_core.upstream import UpstreamClient

OWNER = s.String("Repository owner (username or organization)")
REPO = s.String("Repository name")
ISSUE_NUMBER = s.Number("Issue number", integer=True)
PULL_NUMBER = s.Number("Pull request number", integer=True)
PER_PAGE = s.Optional(s.Number("Results per page (default 30, max 100)", integer=True), default=30)
PAGE = s.Optional(s.Number("Page number (default 1)", integer=True), default=1)
ORDER = s.Optional(s.Enum(("asc", "desc"), "Sort order"))
DIRECTION = s.Optional(s.Enum(("asc", "desc"), "Sort direction"))
STRINGS = s.Array(s.String())

ISSUE_SEARCH_SORTS = (
    "comments",
    "reactions",
    "reactions-+1",
    "reactions--1",
    "reactions-smile",
    "reactions-thinking_face",
    "reactions-heart",
    "reactions-tada",
    "interactions",
    "created",
    "updated",
)


def _repo_fields(**fields) -> s.Object:
    return s.Object({"owner": OWNER, "repo": REPO, **fields})


def register_github_tools(registry: ToolRegistry, client: UpstreamClient) -> ToolRegistry:
    _register_search(registry, client)
    _register_issues(registry, client)
    _register_repositories(registry, client)
    _register_pull_requests(registry, client)
    return registry


# =============================================================================
# Search
# =============================================================================
def _register_search(registry: ToolRegistry, client: UpstreamClient) -> None:
    @registry.tool(
        "search_repositories",
        "Search for GitHub repositories",
        s.Object({"query": s.String("Search query (see GitHub search syntax)"), "per_page": PER_PAGE, "page": PAGE}),
    )
    async def search_repositories(query, per_page, page):
        return await github.search_repositories(client, query, per_page, page)

    @registry.tool(
        "search_code",
        "Search for code across GitHub repositories",
        s.Object(
            {
                "q": s.String("Search query using GitHub code search syntax"),
                "sort": s.Optional(s.Enum(("indexed",), "Sort field ('indexed' only)")),
                "order": ORDER,
                "per_page": PER_PAGE,
                "page": PAGE,
            }
        ),
    )
    async def search_code(q, sort, order, per_page, page):
        return await github.search_code(client, q, sort, order, per_page, page)

    @registry.tool(
        "search_issues",
        "Search for issues and pull requests across GitHub repositories",
        s.Object(
            {
                "q": s.String("Search query using GitHub issues search syntax"),
                "sort": s.Optional(s.Enum(ISSUE_SEARCH_SORTS, "Sort field, defaults to best match")),
                "order": ORDER,
                "per_page": PER_PAGE,
                "page": PAGE,
            }
        ),
    )
    async def search_issues(q, sort, order, per_page, page):
        return await github.search_issues(client, q, sort, order, per_page, page)

    @registry.tool(
        "search_users",
        "Search for users on GitHub",
        s.Object(
            {
                "q": s.String("Search query using GitHub users search syntax"),
                "sort": s.Optional(s.Enum(("followers", "repositories", "joined"), "Sort field by category")),
                "order": ORDER,
                "per_page": PER_PAGE,
                "page": PAGE,
            }
        ),
    )
    async def search_users(q, sort, order, per_page, page):
        return await github.search_users(client, q, sort, order, per_page, page)


# =============================================================================
# Issues
# =============================================================================
def _register_issues(registry: ToolRegistry, client: UpstreamClient) -> None:
    @registry.tool(
        "get_issue",
        "Get details of a specific issue in a GitHub repository",
        _repo_fields(issue_number=ISSUE_NUMBER),
    )
    async def get_issue(owner, repo, issue_number):
        return await github.get_issue(client, owner, repo, issue_number)

    @registry.tool(
        "add_issue_comment",
        "Add a comment to an existing issue",
        _repo_fields(issue_number=ISSUE_NUMBER, body=s.String("Comment text")),
    )
    async def add_issue_comment(owner, repo, issue_number, body):
        return await github.add_issue_comment(client, owner, repo, issue_number, body)

    @registry.tool(
        "create_issue",
        "Create a new issue in a GitHub repository",
        _repo_fields(
            title=s.String("Issue title"),
            body=s.Optional(s.String("Issue body content")),
            assignees=s.Optional(s.Array(s.String(), "Usernames to assign to this issue")),
            labels=s.Optional(s.Array(s.String(), "Labels to apply to this issue")),
            milestone=s.Optional(s.Number("Milestone number", integer=True)),
        ),
    )
    async def create_issue(owner, repo, title, body, assignees, labels, milestone):
        return await github.create_issue(client, owner, repo, title, body, assignees, labels, milestone)

    @registry.tool(
        "list_issues",
        "List issues in a GitHub repository, with filtering options",
        _repo_fields(
            state=s.Optional(s.Enum(("open", "closed", "all"), "Filter by state")),
            labels=s.Optional(s.Array(s.String(), "Filter by labels")),
            sort=s.Optional(s.Enum(("created", "updated", "comments"), "Sort by")),
            direction=DIRECTION,
            since=s.Optional(s.String("Only issues updated after this ISO 8601 timestamp")),
            per_page=PER_PAGE,
            page=PAGE,
        ),
    )
    async def list_issues(owner, repo, state, labels, sort, direction, since, per_page, page):
        return await github.list_issues(client, owner, repo, state, labels, sort, direction, since, per_page, page)

    @registry.tool(
        "update_issue",
        "Update an existing issue in a GitHub repository",
        _repo_fields(
            issue_number=ISSUE_NUMBER,
            title=s.Optional(s.String("New title")),
            body=s.Optional(s.String("New description")),
            state=s.Optional(s.Enum(("open", "closed"), "New state")),
            labels=s.Optional(s.Array(s.String(), "New labels")),
            assignees=s.Optional(s.Array(s.String(), "New assignees")),
            milestone=s.Optional(s.Number("New milestone number", integer=True)),
        ),
    )
    async def update_issue(owner, repo, issue_number, title, body, state, labels, assignees, milestone):
        return await github.update_issue(
            client, owner, repo, issue_number, title, body, state, labels, assignees, milestone
        )

    @registry.tool(
        "get_issue_comments",
        "Get comments for a GitHub issue",
        _repo_fields(issue_number=ISSUE_NUMBER, page=PAGE, per_page=PER_PAGE),
    )
    async def get_issue_comments(owner, repo, issue_number, page, per_page):
        return await github.get_issue_comments(client, owner, repo, issue_number, page, per_page)


# =============================================================================
# Repositories
# =============================================================================
def _register_repositories(registry: ToolRegistry, client: UpstreamClient) -> None:
    @registry.tool(
        "get_repository",
        "Get a readable summary of a GitHub repository: stats, details, links, features and timeline",
        _repo_fields(),
    )
    async def get_repository(owner, repo):
        return await github.get_repository(client, owner, repo)

    @registry.tool(
        "get_commit",
        "Get details for a commit from a GitHub repository",
        _repo_fields(sha=s.String("Commit SHA, branch name, or tag name")),
    )
    async def get_commit(owner, repo, sha):
        return await github.get_commit(client, owner, repo, sha)

    @registry.tool(
        "list_commits",
        "Get a list of commits of a branch in a GitHub repository",
        _repo_fields(sha=s.Optional(s.String("Branch name or commit SHA")), per_page=PER_PAGE, page=PAGE),
    )
    async def list_commits(owner, repo, sha, per_page, page):
        return await github.list_commits(client, owner, repo, sha, per_page, page)

    @registry.tool(
        "list_branches",
        "List branches in a GitHub repository",
        _repo_fields(per_page=PER_PAGE, page=PAGE),
    )
    async def list_branches(owner, repo, per_page, page):
        return await github.list_branches(client, owner, repo, per_page, page)

    @registry.tool(
        "create_or_update_file",
        "Create or update a single file in a GitHub repository",
        _repo_fields(
            path=s.String("Path where to create/update the file"),
            content=s.String("Content of the file"),
            message=s.String("Commit message"),
            branch=s.String("Branch to create/update the file in"),
            sha=s.Optional(s.String("SHA of the file being replaced (required for updates)")),
        ),
    )
    async def create_or_update_file(owner, repo, path, content, message, branch, sha):
        return await github.create_or_update_file(client, owner, repo, path, content, message, branch, sha)

    @registry.tool(
        "create_repository",
        "Create a new GitHub repository in your account",
        s.Object(
            {
                "name": s.String("Repository name"),
                "description": s.Optional(s.String("Repository description")),
                "private": s.Optional(s.Boolean("Whether repo should be private")),
                "autoInit": s.Optional(s.Boolean("Initialize with README")),
            }
        ),
    )
    async def create_repository(name, description, private, autoInit):
        return await github.create_repository(client, name, description, private, autoInit)

    @registry.tool(
        "get_file_contents",
        "Get the contents of a file from a GitHub repository",
        _repo_fields(
            path=s.String("Path to file"),
            branch=s.Optional(s.String("Branch to get contents from (defaults to default branch)")),
        ),
    )
    async def get_file_contents(owner, repo, path, branch):
        return await github.get_file_contents(client, owner, repo, path, branch)

    @registry.tool(
        "get_repository_tree",
        "Get the file structure (tree) of a GitHub repository or a specific directory",
        _repo_fields(
            path=s.Optional(s.String("Path to a specific directory (defaults to root)")),
            branch=s.Optional(s.String("Branch to get tree from (defaults to default branch)")),
            recursive=s.Optional(s.Boolean("Include all subdirectories"), default=False),
        ),
    )
    async def get_repository_tree(owner, repo, path, branch, recursive):
        return await github.get_repository_tree(client, owner, repo, path, branch, recursive)

    @registry.tool(
        "fork_repository",
        "Fork a GitHub repository to your account or a specified organization",
        _repo_fields(organization=s.Optional(s.String("Organization to fork to"))),
    )
    async def fork_repository(owner, repo, organization):
        return await github.fork_repository(client, owner, repo, organization)

    @registry.tool(
        "create_branch",
        "Create a new branch in a GitHub repository",
        _repo_fields(
            branch=s.String("Name for new branch"),
            from_branch=s.Optional(s.String("Source branch (defaults to repo default)")),
        ),
    )
    async def create_branch(owner, repo, branch, from_branch):
        return await github.create_branch(client, owner, repo, branch, from_branch)

    @registry.tool(
        "list_tags",
        "List git tags in a GitHub repository",
        _repo_fields(per_page=PER_PAGE, page=PAGE),
    )
    async def list_tags(owner, repo, per_page, page):
        return await github.list_tags(client, owner, repo, per_page, page)

    @registry.tool(
        "get_tag",
        "Get details about a specific git tag in a GitHub repository",
        _repo_fields(tag=s.String("Tag name")),
    )
    async def get_tag(owner, repo, tag):
        return await github.get_tag(client, owner, repo, tag)

    @registry.tool(
        "push_files",
        "Push multiple files to a GitHub repository in a single commit",
        _repo_fields(
            branch=s.String("Branch to push to"),
            files=s.Array(
                s.Object({"path": s.String(), "content": s.String()}),
                "Files to push, each with path and content",
            ),
            message=s.String("Commit message"),
        ),
    )
    async def push_files(owner, repo, branch, files, message):
        return await github.push_files(client, owner, repo, branch, files, message)


# =============================================================================
# Pull requests
# =============================================================================
def _register_pull_requests(registry: ToolRegistry, client: UpstreamClient) -> None:
    @registry.tool(
        "get_pull_request",
        "Get details of a specific pull request",
        _repo_fields(pullNumber=PULL_NUMBER),
    )
    async def get_pull_request(owner, repo, pullNumber):
        return await github.get_pull_request(client, owner, repo, pullNumber)

    @registry.tool(
        "update_pull_request",
        "Update an existing pull request in a GitHub repository",
        _repo_fields(
            pullNumber=PULL_NUMBER,
            title=s.Optional(s.String("New title")),
            body=s.Optional(s.String("New description")),
            state=s.Optional(s.Enum(("open", "closed"), "New state")),
            base=s.Optional(s.String("New base branch name")),
            maintainer_can_modify=s.Optional(s.Boolean("Allow maintainer edits")),
        ),
    )
    async def update_pull_request(owner, repo, pullNumber, title, body, state, base, maintainer_can_modify):
        return await github.update_pull_request(
            client, owner, repo, pullNumber, title, body, state, base, maintainer_can_modify
        )

    @registry.tool(
        "list_pull_requests",
        "List and filter repository pull requests",
        _repo_fields(
            state=s.Optional(s.Enum(("open", "closed", "all"), "Filter by state")),
            head=s.Optional(s.String("Filter by head user/org and branch")),
            base=s.Optional(s.String("Filter by base branch")),
            sort=s.Optional(s.Enum(("created", "updated", "popularity", "long-running"), "Sort by")),
            direction=DIRECTION,
            per_page=PER_PAGE,
            page=PAGE,
        ),
    )
    async def list_pull_requests(owner, repo, state, head, base, sort, direction, per_page, page):
        return await github.list_pull_requests(
            client, owner, repo, state, head, base, sort, direction, per_page, page
        )

    @registry.tool(
        "merge_pull_request",
        "Merge a pull request",
        _repo_fields(
            pullNumber=PULL_NUMBER,
            commit_title=s.Optional(s.String("Title for merge commit")),
            commit_message=s.Optional(s.String("Extra detail for merge commit")),
            merge_method=s.Optional(s.Enum(("merge", "squash", "rebase"), "Merge method")),
        ),
    )
    async def merge_pull_request(owner, repo, pullNumber, commit_title, commit_message, merge_method):
        return await github.merge_pull_request(
            client, owner, repo, pullNumber, commit_title, commit_message, merge_method
        )

    @registry.tool(
        "get_pull_request_files",
        "Get the list of files changed in a pull request",
        _repo_fields(pullNumber=PULL_NUMBER, per_page=PER_PAGE, page=PAGE),
    )
    async def get_pull_request_files(owner, repo, pullNumber, per_page, page):
        return await github.get_pull_request_files(client, owner, repo, pullNumber, per_page, page)

    @registry.tool(
        "get_pull_request_status",
        "Get the combined commit status of the head commit of a pull request",
        _repo_fields(pullNumber=PULL_NUMBER),
    )
    async def get_pull_request_status(owner, repo, pullNumber):
        return await github.get_pull_request_status(client, owner, repo, pullNumber)

    @registry.tool(
        "update_pull_request_branch",
        "Update the branch of a pull request with the latest changes from the base branch",
        _repo_fields(
            pullNumber=PULL_NUMBER,
            expectedHeadSha=s.Optional(s.String("The expected SHA of the pull request's HEAD ref")),
        ),
    )
    async def update_pull_request_branch(owner, repo, pullNumber, expectedHeadSha):
        return await github.update_pull_request_branch(client, owner, repo, pullNumber, expectedHeadSha)

    @registry.tool(
        "get_pull_request_comments",
        "Get the review comments on a pull request",
        _repo_fields(pullNumber=PULL_NUMBER),
    )
    async def get_pull_request_comments(owner, repo, pullNumber):
        return await github.get_pull_request_comments(client, owner, repo, pullNumber)

    @registry.tool(
        "create_pull_request",
        "Create a new pull request in a GitHub repository",
        _repo_fields(
            title=s.String("PR title"),
            head=s.String("Branch containing changes"),
            base=s.String("Branch to merge into"),
            body=s.Optional(s.String("PR description")),
            draft=s.Optional(s.Boolean("Create as draft PR")),
            maintainer_can_modify=s.Optional(s.Boolean("Allow maintainer edits")),
        ),
    )
    async def create_pull_request(owner, repo, title, head, base, body, draft, maintainer_can_modify):
        return await github.create_pull_request(
            client, owner, repo, title, head, base, body, draft, maintainer_can_modify
        )
