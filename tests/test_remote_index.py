import threading
import time

import pytest

from updatecenter.modules.repository.domain import ArtifactCoordinates, ErrorKind, IndexDocument, RepositoryError
from updatecenter.modules.repository.index import IndexState, RemoteIndex


def doc(artifact_id: str, *extensions: str, packaging: str = "hpi") -> IndexDocument:
    return IndexDocument(
        id=f"org.x:{artifact_id}",
        group_id="org.x",
        artifact_id=artifact_id,
        latest_version="1.0",
        packaging=packaging,
        timestamp=1700000000000,
        extensions=frozenset(extensions),
    )


def test_documents_are_partitioned_by_extension():
    index = RemoteIndex()
    index.build(lambda: [doc("plugin", ".hpi"), doc("app", ".war", packaging="war"), doc("lib", ".jar", packaging="jar")])

    assert index.plugins == {ArtifactCoordinates("org.x", "plugin", "1.0", "hpi")}
    assert index.packages == {ArtifactCoordinates("org.x", "app", "1.0", "war")}
    assert index.get("org.x", "lib") is not None
    assert index.get("org.x", "missing") is None


def test_single_document_scenario():
    index = RemoteIndex()
    index.build(
        lambda: [
            IndexDocument.from_search_doc(
                {"g": "org.x", "a": "y", "latestVersion": "1.0", "p": "hpi", "ec": [".hpi"]}
            )
        ]
    )

    assert list(index.plugins) == [ArtifactCoordinates("org.x", "y", "1.0", "hpi")]
    assert index.packages == frozenset()


def test_build_twice_is_rejected():
    index = RemoteIndex()
    index.build(lambda: [])

    with pytest.raises(RepositoryError) as excinfo:
        index.build(lambda: [])

    assert excinfo.value.kind is ErrorKind.ILLEGAL_STATE
    assert index.state is IndexState.READY


def test_reads_before_build_are_rejected():
    index = RemoteIndex()

    with pytest.raises(RepositoryError) as excinfo:
        index.plugins

    assert excinfo.value.kind is ErrorKind.ILLEGAL_STATE


def test_ensure_built_loads_once():
    index = RemoteIndex()
    calls = []

    def loader():
        calls.append(1)
        return [doc("plugin", ".hpi")]

    index.ensure_built(loader)
    index.ensure_built(loader)

    assert len(calls) == 1
    assert index.ready


def test_concurrent_first_callers_share_one_build():
    index = RemoteIndex()
    calls = []

    def slow_loader():
        calls.append(threading.current_thread().name)
        time.sleep(0.05)
        return [doc("plugin", ".hpi")]

    threads = [threading.Thread(target=index.ensure_built, args=(slow_loader,)) for _ in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert len(calls) == 1
    assert len(index.plugins) == 1


def test_failed_build_can_be_retried():
    index = RemoteIndex()

    def failing():
        raise RepositoryError.network_failure("search down")

    with pytest.raises(RepositoryError):
        index.ensure_built(failing)
    assert index.state is IndexState.UNINITIALIZED

    index.ensure_built(lambda: [doc("plugin", ".hpi")])
    assert index.ready


def test_malformed_search_document():
    with pytest.raises(RepositoryError) as excinfo:
        IndexDocument.from_search_doc({"g": "org.x"})
    assert excinfo.value.kind is ErrorKind.DECODE_FAILURE
