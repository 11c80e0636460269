import base64
import hashlib
import io
import logging
import zipfile

import httpx
import pytest

from updatecenter.modules.repository import (
    ArtifactCoordinates,
    ErrorKind,
    MavenArtifact,
    MavenCentralRepository,
    RepositoryError,
)
from updatecenter.modules.repository.cache import ContentCache, FileSystemCacheStore

MANIFEST = b"Manifest-Version: 1.0\nShort-Name: y\nPlugin-Version: 1.0\n"

PLUGIN = ArtifactCoordinates("org.x", "y", "1.0", "hpi")
WAR = ArtifactCoordinates("org.x", "app", "2.0", "war")


def make_archive(entries) -> bytes:
    buf = io.BytesIO()
    with zipfile.ZipFile(buf, "w", zipfile.ZIP_DEFLATED) as zf:
        for name, data in entries.items():
            zf.writestr(name, data)
    return buf.getvalue()


ARCHIVE = make_archive({"index.jelly": b"<div/>", "META-INF/MANIFEST.MF": MANIFEST})

SEARCH_RESPONSE = {
    "response": {
        "numFound": 4,
        "docs": [
            {"id": "org.x:y", "g": "org.x", "a": "y", "latestVersion": "1.0", "p": "hpi",
             "timestamp": 1700000000000, "ec": [".hpi", ".pom"]},
            {"id": "org.x:app", "g": "org.x", "a": "app", "latestVersion": "2.0", "p": "war",
             "timestamp": 1600000000000, "ec": [".war", ".pom"]},
            {"id": "org.other:app", "g": "org.other", "a": "app", "latestVersion": "3.0", "p": "war",
             "timestamp": 1600000000000, "ec": [".war"]},
            {"id": "org.x:lib", "g": "org.x", "a": "lib", "latestVersion": "0.1", "p": "jar",
             "timestamp": 1500000000000, "ec": [".jar"]},
        ],
    }
}


class FakeCentral:
    def __init__(self, search=None, content=None):
        self.search = search or SEARCH_RESPONSE
        self.content = content if content is not None else {PLUGIN.uri: ARCHIVE}
        self.search_calls = []
        self.download_calls = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        if request.url.path == "/solrsearch/select":
            self.search_calls.append(request)
            return httpx.Response(200, json=self.search)
        if request.url.path == "/remotecontent":
            filepath = request.url.params["filepath"]
            self.download_calls.append(filepath)
            if filepath in self.content:
                return httpx.Response(200, content=self.content[filepath])
            return httpx.Response(404)
        return httpx.Response(400)


def build_repository(tmp_path, server):
    client = httpx.Client(transport=httpx.MockTransport(server))
    cache = ContentCache(FileSystemCacheStore(tmp_path / "cache"))
    return MavenCentralRepository(
        cache,
        client=client,
        group_filter="org.x",
        search_url="https://search.example.org",
        local_repository=tmp_path / "m2",
    )


def test_search_query_and_listing(tmp_path):
    server = FakeCentral()
    repo = build_repository(tmp_path, server)

    assert repo.list_all_plugins() == {PLUGIN}
    assert repo.list_all_packages() == {WAR, ArtifactCoordinates("org.other", "app", "3.0", "war")}
    assert repo.list_all_packages("org.x") == {WAR}

    assert len(server.search_calls) == 1
    assert server.search_calls[0].url.params["q"] == "g:org.x"


def test_repository_base_url(tmp_path):
    repo = build_repository(tmp_path, FakeCentral())

    assert repo.repository_base_url == "https://repo1.maven.org/maven2"


def test_metadata_without_cached_content(tmp_path):
    server = FakeCentral()
    repo = build_repository(tmp_path, server)

    metadata = repo.get_metadata(MavenArtifact(PLUGIN))

    assert metadata.timestamp == 1700000000000
    assert metadata.size == 0
    assert metadata.sha1 is None and metadata.sha256 is None
    assert server.download_calls == []


def test_metadata_with_cached_content(tmp_path):
    repo = build_repository(tmp_path, FakeCentral())
    repo.resolve(PLUGIN)

    metadata = repo.get_metadata(MavenArtifact(PLUGIN))

    assert metadata.size == len(ARCHIVE)
    assert metadata.sha1 == base64.b64encode(hashlib.sha1(ARCHIVE).digest()).decode()
    assert metadata.sha256 == base64.b64encode(hashlib.sha256(ARCHIVE).digest()).decode()


def test_metadata_unknown_artifact(tmp_path):
    repo = build_repository(tmp_path, FakeCentral())

    with pytest.raises(RepositoryError) as excinfo:
        repo.get_metadata(MavenArtifact(ArtifactCoordinates("org.x", "unknown", "1.0", "hpi")))

    assert excinfo.value.kind is ErrorKind.NOT_FOUND


def test_resolve_twice_fetches_once(tmp_path):
    server = FakeCentral()
    repo = build_repository(tmp_path, server)

    first = repo.resolve(PLUGIN)
    second = repo.resolve(PLUGIN)

    assert first == second
    assert first.read_bytes() == ARCHIVE
    assert server.download_calls == [PLUGIN.uri]


def test_resolve_prefers_local_mirror(tmp_path):
    server = FakeCentral()
    repo = build_repository(tmp_path, server)
    local = tmp_path / "m2" / "org" / "x" / "y" / "1.0" / "y-1.0.hpi"
    local.parent.mkdir(parents=True)
    local.write_bytes(b"local copy")

    assert repo.resolve(PLUGIN) == local
    assert server.download_calls == []


def test_resolve_missing_artifact_is_negative_cached(tmp_path):
    server = FakeCentral()
    repo = build_repository(tmp_path, server)

    for _ in range(3):
        with pytest.raises(RepositoryError) as excinfo:
            repo.resolve(WAR)
        assert excinfo.value.kind is ErrorKind.NETWORK_FAILURE

    assert server.download_calls == [WAR.uri]


def test_archive_entry_matches_member_bytes(tmp_path):
    repo = build_repository(tmp_path, FakeCentral())

    stream = repo.get_archive_entry(MavenArtifact(PLUGIN), "index.jelly")
    with stream:
        assert stream.read() == b"<div/>"

    assert repo.get_archive_entry(MavenArtifact(PLUGIN), "missing.txt") is None


def test_manifest(tmp_path):
    server = FakeCentral()
    repo = build_repository(tmp_path, server)

    manifest = repo.get_manifest(MavenArtifact(PLUGIN))

    assert manifest.get("Short-Name") == "y"
    assert manifest.get("Plugin-Version") == "1.0"
    assert server.download_calls == [PLUGIN.uri]


def test_manifest_missing(tmp_path):
    archive = make_archive({"index.jelly": b"<div/>"})
    repo = build_repository(tmp_path, FakeCentral(content={PLUGIN.uri: archive}))

    with pytest.raises(RepositoryError) as excinfo:
        repo.get_manifest(MavenArtifact(PLUGIN))

    assert excinfo.value.kind is ErrorKind.NOT_FOUND


def test_fetch_archive_member_downloads_single_entry(tmp_path):
    server = FakeCentral()
    repo = build_repository(tmp_path, server)

    entry = repo.fetch_archive_member(MavenArtifact(PLUGIN), "META-INF/MANIFEST.MF")

    assert entry.path.read_bytes() == MANIFEST
    # the whole archive is still not cached under its own key
    assert not repo.cache.lookup(repo._download_url(MavenArtifact(PLUGIN))).present


def test_truncated_search_is_logged(tmp_path, caplog):
    search = {"response": {"numFound": 500, "docs": SEARCH_RESPONSE["response"]["docs"][:1]}}
    repo = build_repository(tmp_path, FakeCentral(search=search))

    with caplog.at_level(logging.WARNING):
        assert len(repo.list_all_plugins()) == 1

    assert "truncated" in caplog.text


def test_malformed_search_response(tmp_path):
    repo = build_repository(tmp_path, FakeCentral(search={"unexpected": []}))

    with pytest.raises(RepositoryError) as excinfo:
        repo.list_all_plugins()

    assert excinfo.value.kind is ErrorKind.DECODE_FAILURE


def test_search_http_error(tmp_path):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(503)

    client = httpx.Client(transport=httpx.MockTransport(handler))
    repo = MavenCentralRepository(
        ContentCache(FileSystemCacheStore(tmp_path)),
        client=client,
        group_filter="org.x",
    )

    with pytest.raises(RepositoryError) as excinfo:
        repo.list_all_packages()

    assert excinfo.value.kind is ErrorKind.NETWORK_FAILURE
