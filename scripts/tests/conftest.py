"""Shared test fixtures for the pomcli test suite."""

import copy
import textwrap
import threading
import time
from pathlib import Path

import pytest

from pomcli.coordinates import QuerySpec
from pomcli.pom_models import Dependency, PomModel
from pomcli.pom_store import PomStore
from pomcli.search import SearchDocument


class FakeSearch:
    """In-memory stand-in for SolrSearch.

    Args:
        versions: Maps ``"groupId:artifactId"`` to the latest version.
        delays: Maps ``"groupId:artifactId"`` to seconds to sleep before answering.
    """

    def __init__(self, versions=None, delays=None):
        self.versions = versions or {}
        self.delays = delays or {}
        self.requests = []
        self.completed = []
        self._lock = threading.Lock()

    def search(self, request):
        with self._lock:
            self.requests.append(request)
        for key, version in self.versions.items():
            group_id, artifact_id = key.split(":")
            if str(QuerySpec(group_id, artifact_id)) == request.q:
                time.sleep(self.delays.get(key, 0))
                with self._lock:
                    self.completed.append(key)
                return [SearchDocument(group_id, artifact_id, version)]
        for key, delay in self.delays.items():
            group_id, artifact_id = key.split(":")
            if str(QuerySpec(group_id, artifact_id)) == request.q:
                time.sleep(delay)
        return []

    def close(self):
        pass

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()


class MemoryPomStore(PomStore):
    """PomStore keeping models in a dict keyed by absolute path."""

    def __init__(self, poms=None):
        self.poms = {Path(p).absolute(): m for p, m in (poms or {}).items()}
        self.saved = []

    def exists(self, path):
        return Path(path).absolute() in self.poms

    def load(self, path):
        key = Path(path).absolute()
        if key not in self.poms:
            raise FileNotFoundError(str(path))
        return copy.deepcopy(self.poms[key])

    def save(self, model, path):
        self.poms[Path(path).absolute()] = model
        self.saved.append(Path(path).absolute())


@pytest.fixture
def tmp_pom(tmp_path):
    """Factory fixture that writes a pom.xml to a temp directory and returns the path."""
    def _write(content: str, directory: Path = None) -> Path:
        target = directory or tmp_path
        target.mkdir(parents=True, exist_ok=True)
        pom = target / "pom.xml"
        pom.write_text(textwrap.dedent(content), encoding="utf-8")
        return pom
    return _write


@pytest.fixture
def fake_search():
    """A FakeSearch that knows a handful of artifacts."""
    return FakeSearch({
        "com.example:newlib": "2.0",
        "org.slf4j:slf4j-api": "2.0.16",
        "some.group:lib": "3.1.0",
    })


@pytest.fixture
def simple_pom_model():
    """A minimal jar-packaged PomModel with one dependency."""
    return PomModel(
        group_id="com.example",
        artifact_id="demo",
        version="1.0.0",
        dependencies=[
            Dependency(group_id="org.slf4j", artifact_id="slf4j-api", version="2.0.9"),
        ],
    )


@pytest.fixture
def parent_pom_model():
    """A pom-packaged parent managing ``org.junit.jupiter:junit-jupiter``."""
    return PomModel(
        group_id="com.example",
        artifact_id="parent",
        version="1.0.0",
        packaging="pom",
        dep_management=[
            Dependency(group_id="org.junit.jupiter", artifact_id="junit-jupiter", version="5.11.0"),
            Dependency(group_id="com.example", artifact_id="shared", version="1.0.0", classifier="tests"),
        ],
    )
