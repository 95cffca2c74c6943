from datetime import datetime, timezone

import pytest

import providers.github_provider as github_provider_mod
from clients.github import CodeSearchHit, GitHubDirEntry, GitHubFile
from core.errors import (
    InvalidArgumentError,
    NotFoundError,
    SizeExceededError,
    UpstreamServiceError,
)
from core.limits import DEFAULT_MAX_LINES, UNKNOWN_LINE
from core.models import ReadOptions
from providers.github.cache import GitHubCache
from providers.github.throttler import GitHubSearchThrottler
from providers.github_provider import GitHubProvider
from providers.local_provider import LocalFileSystemProvider


COMMIT_DATE = datetime(2024, 3, 1, 12, 0, tzinfo=timezone.utc)


class FakeGitHubClient:
    def __init__(self, files=None, dirs=None, hits=None, search_error=None, commit_error=None):
        self.files = files or {}        # full path -> text or bytes
        self.dirs = dirs or {}          # full path -> [GitHubDirEntry]
        self.hits = hits or []
        self.search_error = search_error
        self.commit_error = commit_error
        self.calls = []

    async def get_content(self, *, owner, repo, path):
        self.calls.append(("content", owner, repo, path))
        if path in self.dirs:
            return list(self.dirs[path])
        if path in self.files:
            value = self.files[path]
            body = value if isinstance(value, bytes) else value.encode("utf-8")
            return GitHubFile(name=path.rsplit("/", 1)[-1], path=path, size=len(body), content=body)
        raise NotFoundError(f"Not found on GitHub: {path}")

    async def get_raw_content(self, *, owner, repo, path):
        self.calls.append(("raw", owner, repo, path))
        if path in self.files:
            value = self.files[path]
            return value if isinstance(value, bytes) else value.encode("utf-8")
        if path in self.dirs:
            raise NotFoundError(f"Not a file: {path}")
        raise NotFoundError(f"Not found on GitHub: {path}")

    async def search_code(self, *, query, owner, repo, path=None, extension=None):
        self.calls.append(("search", query, owner, repo, path, extension))
        if self.search_error:
            raise self.search_error
        return list(self.hits)

    async def get_latest_commit_date(self, *, owner, repo, path):
        self.calls.append(("commit", owner, repo, path))
        if self.commit_error:
            raise self.commit_error
        return COMMIT_DATE

    def count(self, kind):
        return sum(1 for c in self.calls if c[0] == kind)


class NoWaitThrottler(GitHubSearchThrottler):
    def __init__(self):
        super().__init__()
        self.admitted = 0

    async def admit(self):
        self.admitted += 1


def _provider(client, *, base_path="", clock=None):
    return GitHubProvider(
        client=client,
        owner="acme",
        repo="notes",
        base_path=base_path,
        cache=GitHubCache(clock=clock),
        throttler=NoWaitThrottler(),
    )


def _numbered(count):
    return "\n".join(f"line {i}" for i in range(1, count + 1))


@pytest.mark.asyncio
async def test_list_maps_entries_and_strips_base_path():
    client = FakeGitHubClient(dirs={
        "docs": [
            GitHubDirEntry(name="guide.md", path="docs/guide.md", type="file"),
            GitHubDirEntry(name="api", path="docs/api", type="dir"),
        ],
    })
    src = _provider(client, base_path="/docs/")

    out = await src.list()

    assert [(e.name, e.type, e.path) for e in out] == [
        ("guide.md", "file", "guide.md"),
        ("api", "directory", "api"),
    ]
    assert client.calls == [("content", "acme", "notes", "docs")]


@pytest.mark.asyncio
async def test_list_on_a_file_returns_empty():
    client = FakeGitHubClient(files={"README.md": "hello"})
    assert await _provider(client).list("README.md") == []


@pytest.mark.asyncio
async def test_list_propagates_errors():
    with pytest.raises(NotFoundError):
        await _provider(FakeGitHubClient()).list("missing")


@pytest.mark.asyncio
async def test_read_default_pagination_makes_one_call():
    client = FakeGitHubClient(files={"file.md": "line1\nline2\nline3"})
    src = _provider(client)

    out = await src.read("file.md")

    assert out.content == "line1\nline2\nline3"
    assert out.metadata.start_line == 1
    assert out.metadata.end_line == DEFAULT_MAX_LINES
    assert out.metadata.is_partial is True
    assert out.metadata.total_lines == 3
    assert out.metadata.file_size == len("line1\nline2\nline3")
    assert client.count("raw") == 1


@pytest.mark.asyncio
async def test_read_slices_requested_range_under_base_path():
    client = FakeGitHubClient(files={"docs/big.md": _numbered(200)})
    src = _provider(client, base_path="docs")

    out = await src.read("big.md", ReadOptions(start_line=10, max_lines=50))

    assert out.metadata.start_line == 10
    assert out.metadata.end_line == 59
    assert out.content.split("\n")[0] == "line 10"
    assert out.content.split("\n")[-1] == "line 59"


@pytest.mark.asyncio
async def test_read_served_from_cache_within_ttl(clock):
    client = FakeGitHubClient(files={"a.md": "cached"})
    src = _provider(client, clock=clock)

    await src.read("a.md")
    await src.read("a.md", ReadOptions(start_line=1))
    assert client.count("raw") == 1

    clock.advance(180)
    await src.read("a.md")
    assert client.count("raw") == 2


@pytest.mark.asyncio
async def test_read_rejects_files_over_github_limit(monkeypatch):
    monkeypatch.setattr(github_provider_mod, "MAX_GITHUB_FILE_SIZE", 1024)
    client = FakeGitHubClient(files={"huge.md": b"h" * 2048})
    src = _provider(client)

    with pytest.raises(SizeExceededError, match="exceeds GitHub API limit"):
        await src.read("huge.md")
    assert client.count("raw") == 1

    # Oversized bodies are never cached
    with pytest.raises(SizeExceededError):
        await src.read("huge.md")
    assert client.count("raw") == 2


@pytest.mark.asyncio
async def test_large_file_read_is_a_single_request():
    body = ("z" * 1023 + "\n") * 2048  # 2MB, above the inline limit of the contents API
    client = FakeGitHubClient(files={"big.md": body})

    out = await _provider(client).read("big.md", ReadOptions(max_lines=2))

    assert out.content == "z" * 1023 + "\n" + "z" * 1023
    assert out.metadata.total_lines is None
    assert [c[0] for c in client.calls] == ["raw"]


@pytest.mark.asyncio
async def test_end_line_only_read_matches_local_provider(tmp_path):
    body = _numbered(600)
    (tmp_path / "a.md").write_text(body, encoding="utf-8")
    local = LocalFileSystemProvider([tmp_path])
    remote = _provider(FakeGitHubClient(files={"a.md": body}))

    for src in (local, remote):
        with pytest.raises(InvalidArgumentError, match="300"):
            await src.read("a.md", ReadOptions(end_line=500))

    local_out = await local.read("a.md", ReadOptions(end_line=300))
    remote_out = await remote.read("a.md", ReadOptions(end_line=300))
    assert local_out.content == remote_out.content
    assert local_out.metadata == remote_out.metadata
    assert remote_out.content.split("\n")[-1] == "line 300"


@pytest.mark.asyncio
async def test_exact_fit_response_size_matches_local_provider(tmp_path):
    body = ("y" * 511 + "\n") * 4
    (tmp_path / "a.md").write_text(body, encoding="utf-8")
    local = LocalFileSystemProvider([tmp_path])
    remote = _provider(FakeGitHubClient(files={"a.md": body}))

    # Two 511-byte lines joined by one separator are exactly 1023 bytes
    for src in (local, remote):
        out = await src.read("a.md", ReadOptions(max_lines=2, max_response_size=1024))
        assert len(out.content.encode("utf-8")) == 1023

    small = "s" * 512 + "\n" + "s" * 511 + "\n"
    (tmp_path / "b.md").write_text(small, encoding="utf-8")
    remote = _provider(FakeGitHubClient(files={"b.md": small}))
    for src in (local, remote):
        out = await src.read("b.md", ReadOptions(max_lines=2, max_response_size=1024))
        assert len(out.content.encode("utf-8")) == 1024


@pytest.mark.asyncio
async def test_read_enforces_response_size_on_the_slice():
    client = FakeGitHubClient(files={"wide.md": "x" * (5 * 1024 * 1024)})
    src = _provider(client)

    with pytest.raises(SizeExceededError, match="exceeds MCP transport limit"):
        await src.read("wide.md")

    client.files["small.md"] = ("y" * 600 + "\n") * 400
    with pytest.raises(SizeExceededError):
        await src.read("small.md", ReadOptions(max_lines=5, max_response_size=1024))
    ok = await src.read("small.md", ReadOptions(max_lines=1, max_response_size=1024))
    assert ok.content == "y" * 600


@pytest.mark.asyncio
async def test_read_validates_before_fetching():
    client = FakeGitHubClient(files={"a.md": "a"})

    with pytest.raises(InvalidArgumentError):
        await _provider(client).read("a.md", ReadOptions(end_line=5, max_lines=5))
    assert client.calls == []


@pytest.mark.asyncio
async def test_read_directory_is_not_found():
    client = FakeGitHubClient(dirs={"docs": []})
    with pytest.raises(NotFoundError):
        await _provider(client).read("docs")


@pytest.mark.asyncio
async def test_search_computes_line_numbers_from_content():
    client = FakeGitHubClient(
        files={"docs/guide.md": "intro\nThe Needle here\nend"},
        hits=[CodeSearchHit(path="docs/guide.md", fragments=("The Needle here",))],
    )
    src = _provider(client, base_path="docs")

    out = await src.search("needle")

    assert len(out) == 1
    assert out[0].path == "guide.md"
    assert out[0].matches[0].line == 2
    assert out[0].matches[0].content == "intro\nThe Needle here\nend"
    assert ("search", "needle", "acme", "notes", "docs", ".md") in client.calls
    assert src._throttler.admitted == 1


@pytest.mark.asyncio
async def test_search_falls_back_to_fragments_when_fetch_fails():
    client = FakeGitHubClient(hits=[
        CodeSearchHit(path="gone.md", fragments=("frag one", "frag two")),
        CodeSearchHit(path="bare.md", fragments=()),
    ])

    out = await _provider(client).search("frag")

    assert [(m.line, m.content) for m in out[0].matches] == [
        (UNKNOWN_LINE, "frag one"),
        (UNKNOWN_LINE, "frag two"),
    ]
    assert out[1].matches[0].line == UNKNOWN_LINE
    assert "bare.md" in out[1].matches[0].content


@pytest.mark.asyncio
async def test_search_failure_returns_empty():
    client = FakeGitHubClient(search_error=UpstreamServiceError("rate limited"))
    assert await _provider(client).search("anything") == []


@pytest.mark.asyncio
async def test_search_reuses_cached_content(clock):
    client = FakeGitHubClient(
        files={"a.md": "needle"},
        hits=[CodeSearchHit(path="a.md", fragments=())],
    )
    src = _provider(client, clock=clock)

    await src.read("a.md")
    await src.search("needle")

    assert client.count("raw") == 1


@pytest.mark.asyncio
async def test_get_file_info_uses_cache_for_content_and_commit(clock):
    client = FakeGitHubClient(files={"docs/a.md": "one\ntwo\n"})
    src = _provider(client, base_path="docs", clock=clock)

    first = await src.get_file_info("a.md")
    second = await src.get_file_info("a.md")

    assert first == second
    assert first.path == "a.md"
    assert first.size == len("one\ntwo\n")
    assert first.line_count == 2
    assert first.file_type == ".md"
    assert first.last_modified == COMMIT_DATE
    assert client.count("raw") == 1
    assert client.count("commit") == 1

    clock.advance(181)
    await src.get_file_info("a.md")
    assert client.count("raw") == 2
    assert client.count("commit") == 2


@pytest.mark.asyncio
async def test_get_file_info_commit_failure_falls_back_to_now():
    client = FakeGitHubClient(
        files={"a.md": "x"},
        commit_error=UpstreamServiceError("boom"),
    )
    before = datetime.now(timezone.utc)

    info = await _provider(client).get_file_info("a.md")

    assert info.last_modified >= before


@pytest.mark.asyncio
async def test_get_file_info_omits_line_count_for_large_files():
    big_text = "z" * (1024 * 1024)
    client = FakeGitHubClient(files={"big.md": big_text})

    info = await _provider(client).get_file_info("big.md")

    assert info.size == 1024 * 1024
    assert info.line_count is None
