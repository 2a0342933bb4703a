"""Repository operations behind one interface, with two backends.

GitCliManager drives the git binary through ProcessRunner; GitLibManager
drives GitPython. Pick one with create_git_manager() and use it for the
lifetime of the caller.
"""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import List, Optional, Union

import git
import structlog

from gitmine.context import GitContext
from gitmine.errors import (
    AuthenticationError,
    InitError,
    NotARepositoryError,
    NotFoundError,
    ProcessError,
    RemoteError,
    RepositoryIOError,
    classify_process_failure,
)
from gitmine.extraction.decoder import decode_log_output
from gitmine.extraction.diffstat import (
    NUMSTAT_ARGS,
    DiffStatCollector,
    decode_numstat,
    numstat_revisions,
)
from gitmine.extraction.iterator import CommitIterator
from gitmine.extraction.range import build_log_args, build_show_args, resolve_range
from gitmine.models import Commit, FileStats, IteratorRequest, Repository, Settings
from gitmine.process import ProcessRunner

logger = structlog.get_logger(__name__)

REMOTE_NAME = "origin"

# stderr fragments git prints when a revision cannot be resolved
UNKNOWN_REVISION_ERRORS = ("unknown revision", "bad object", "ambiguous argument", "bad revision")

PathLike = Union[str, Path]


def _is_unknown_revision(error: ProcessError) -> bool:
    if isinstance(error, AuthenticationError):
        return False
    return any(fragment in error.stderr for fragment in UNKNOWN_REVISION_ERRORS)


def _is_bare_layout(path: Path) -> bool:
    return (path / "HEAD").is_file() and (path / "objects").is_dir()


class GitManager(ABC):
    """Commit history and diff-stat operations on a git checkout."""

    def open_existing(self, checkout_path: PathLike) -> Repository:
        """Open a checkout that already contains git metadata.

        The path is made absolute and checked for ``.git`` (or a bare
        repository layout). A missing entry means the path is not a
        repository; any other stat failure is logged and tolerated.

        Args:
            checkout_path: Path to the checkout

        Returns:
            Repository handle

        Raises:
            NotARepositoryError: If no git metadata exists at the path
        """
        root = Path(checkout_path).resolve()
        try:
            (root / ".git").stat()
        except (FileNotFoundError, NotADirectoryError):
            if _is_bare_layout(root):
                return Repository(root_dir=root)
            raise NotARepositoryError(f"Not a git repository: {root}") from None
        except OSError as e:
            logger.warning("git_metadata_stat_failed", path=str(root), error=str(e))
        return Repository(root_dir=root)

    def init(
        self,
        context: GitContext,
        root_dir: PathLike,
        remote_url: str,
        is_bare: bool = False,
    ) -> None:
        """Create a repository with ``origin`` pointing to remote_url.

        The directory and its parents are created when missing. A failure to
        add the remote leaves the initialized repository in place.

        Raises:
            RepositoryIOError: If the directory cannot be created
            InitError: If git metadata cannot be initialized
            RemoteError: If the remote cannot be registered
        """
        root = Path(root_dir)
        try:
            root.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise RepositoryIOError(f"Could not create {root}: {e}") from e

        self._init_metadata(context, root, is_bare)
        self._create_remote(context, root, remote_url)

    def commit_for_hash(self, context: GitContext, checkout_path: PathLike, commit_hash: str) -> Commit:
        return self.commit_by_tag_or_hash(context, checkout_path, commit_hash)

    def commit_for_tag(self, context: GitContext, checkout_path: PathLike, tag: str) -> Commit:
        return self.commit_by_tag_or_hash(context, checkout_path, tag)

    @abstractmethod
    def _init_metadata(self, context: GitContext, root: Path, is_bare: bool) -> None:
        """Initialize git metadata in root, raising InitError."""

    @abstractmethod
    def _create_remote(self, context: GitContext, root: Path, remote_url: str) -> None:
        """Register the origin remote, raising RemoteError."""

    @abstractmethod
    def commits_for_range(
        self, context: GitContext, repository: Repository, request: IteratorRequest
    ) -> CommitIterator:
        """Fetch the commits selected by request and iterate over them."""

    @abstractmethod
    def commit_by_tag_or_hash(self, context: GitContext, checkout_path: PathLike, ref: str) -> Commit:
        """Resolve one commit by hash or tag, raising NotFoundError."""

    @abstractmethod
    def stats_for_commit(self, context: GitContext, commit: Commit) -> FileStats:
        """File statistics of the changes made by commit."""


class GitCliManager(GitManager):
    """GitManager running the git command line tool."""

    def __init__(self, settings: Optional[Settings] = None, runner: Optional[ProcessRunner] = None) -> None:
        """Initialize the manager.

        Args:
            settings: Application settings (loaded from the environment if None)
            runner: Process runner; built from settings if None
        """
        self.settings = settings or Settings()
        self.runner = runner or ProcessRunner(
            ask_pass_script=self.settings.ask_pass_script,
            poll_interval=self.settings.poll_interval,
        )
        self.diff_stats = DiffStatCollector(self.runner, git_binary=self.settings.git_binary)

    def _git(self, context: GitContext, args: List[str]) -> str:
        return self.runner.run(context, self.settings.git_binary, args).stdout

    def _init_metadata(self, context: GitContext, root: Path, is_bare: bool) -> None:
        args = ["-C", str(root), "init"] + (["--bare"] if is_bare else [])
        try:
            self._git(context, args)
        except ProcessError as e:
            raise InitError(f"git init failed in {root}: {e}") from e

    def _create_remote(self, context: GitContext, root: Path, remote_url: str) -> None:
        try:
            self._git(context, ["-C", str(root), "remote", "add", REMOTE_NAME, remote_url])
        except ProcessError as e:
            raise RemoteError(f"Could not add remote {REMOTE_NAME} in {root}: {e}") from e

    def commits_for_range(
        self, context: GitContext, repository: Repository, request: IteratorRequest
    ) -> CommitIterator:
        root_dir = str(repository.root_dir)
        args = build_log_args(
            root_dir,
            request.branch_ref,
            request.commit_count,
            request.from_commit_hash,
            request.to_commit_hash,
        )
        try:
            commits = decode_log_output(self._git(context, args), root_dir)
        except Exception as e:
            logger.error("commit_fetch_failed", path=root_dir, error=str(e))
            raise
        logger.debug("commits_fetched", path=root_dir, count=len(commits))
        return CommitIterator(commits)

    def commit_by_tag_or_hash(self, context: GitContext, checkout_path: PathLike, ref: str) -> Commit:
        root_dir = str(checkout_path)
        try:
            output = self._git(context, build_show_args(root_dir, ref))
        except ProcessError as e:
            if _is_unknown_revision(e):
                raise NotFoundError(f"Commit not found: {ref}") from e
            raise
        commits = decode_log_output(output, root_dir)
        if not commits:
            raise NotFoundError(f"Commit not found: {ref}")
        return commits[0]

    def stats_for_commit(self, context: GitContext, commit: Commit) -> FileStats:
        try:
            return self.diff_stats.diff_stat(context, commit.hash, "", commit.checkout_path)
        except Exception as e:
            logger.error(
                "commit_stats_failed",
                commit=commit.hash,
                checkout_path=commit.checkout_path,
                error=str(e),
            )
            raise


class GitLibManager(GitManager):
    """GitManager backed by GitPython."""

    def __init__(self, settings: Optional[Settings] = None) -> None:
        self.settings = settings or Settings()

    @staticmethod
    def _wrap(error: git.exc.GitCommandError) -> ProcessError:
        command = error.command if isinstance(error.command, list) else [str(error.command)]
        status = error.status if isinstance(error.status, int) else None
        return classify_process_failure([str(part) for part in command], status, str(error.stderr))

    def _open(self, checkout_path: PathLike) -> git.Repo:
        try:
            return git.Repo(checkout_path)
        except (git.exc.InvalidGitRepositoryError, git.exc.NoSuchPathError) as e:
            raise NotARepositoryError(f"Not a git repository: {checkout_path}") from e

    def _to_commit(self, commit: git.Commit, checkout_path: str) -> Commit:
        message = commit.message if isinstance(commit.message, str) else commit.message.decode("utf-8", "replace")
        paragraphs = message.split("\n\n", 1)
        subject = " ".join(line.strip() for line in paragraphs[0].splitlines())
        body = paragraphs[1].lstrip("\n") if len(paragraphs) > 1 else ""
        return Commit(
            hash=commit.hexsha,
            author=f"{commit.committer.name} <{commit.committer.email}>",
            # UTC is always +00:00 here; newer git prints Z for it under iso-strict
            date=commit.committed_datetime.isoformat(),
            message=f"{subject}\n{body}",
            checkout_path=checkout_path,
        )

    def _init_metadata(self, context: GitContext, root: Path, is_bare: bool) -> None:
        context.raise_if_cancelled()
        try:
            git.Repo.init(root, bare=is_bare)
        except git.exc.GitCommandError as e:
            raise InitError(f"git init failed in {root}: {e}") from e

    def _create_remote(self, context: GitContext, root: Path, remote_url: str) -> None:
        context.raise_if_cancelled()
        try:
            git.Repo(root).create_remote(REMOTE_NAME, remote_url)
        except git.exc.GitCommandError as e:
            raise RemoteError(f"Could not add remote {REMOTE_NAME} in {root}: {e}") from e

    def commits_for_range(
        self, context: GitContext, repository: Repository, request: IteratorRequest
    ) -> CommitIterator:
        root_dir = str(repository.root_dir)
        repo = self._open(root_dir)
        rev = resolve_range(request.branch_ref, request.from_commit_hash, request.to_commit_hash)
        commits = []
        context.raise_if_cancelled()
        try:
            for commit in repo.iter_commits(rev, max_count=request.commit_count):
                context.raise_if_cancelled()
                commits.append(self._to_commit(commit, root_dir))
        except git.exc.GitCommandError as e:
            logger.error("commit_fetch_failed", path=root_dir, error=str(e))
            raise self._wrap(e) from e
        logger.debug("commits_fetched", path=root_dir, count=len(commits))
        return CommitIterator(commits)

    def commit_by_tag_or_hash(self, context: GitContext, checkout_path: PathLike, ref: str) -> Commit:
        context.raise_if_cancelled()
        repo = self._open(checkout_path)
        try:
            commit = repo.commit(ref)
        except (git.exc.BadName, ValueError) as e:
            raise NotFoundError(f"Commit not found: {ref}") from e
        return self._to_commit(commit, str(checkout_path))

    def stats_for_commit(self, context: GitContext, commit: Commit) -> FileStats:
        context.raise_if_cancelled()
        repo = self._open(commit.checkout_path)
        try:
            output = repo.git.diff(*NUMSTAT_ARGS, *numstat_revisions(commit.hash, ""))
        except git.exc.GitCommandError as e:
            logger.error(
                "commit_stats_failed",
                commit=commit.hash,
                checkout_path=commit.checkout_path,
                error=str(e),
            )
            raise self._wrap(e) from e
        return decode_numstat(output)


def create_git_manager(settings: Optional[Settings] = None) -> GitManager:
    """Build the GitManager selected by settings.backend."""
    settings = settings or Settings()
    if settings.backend == "library":
        return GitLibManager(settings)
    return GitCliManager(settings)
