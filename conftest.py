import pytest

from book import Book, BookBuilder
from config import Settings
from library import LibraryManager
from notifications import RecordingNotifier
from utils.ui_helpers import OUTPUT_MODE_ENV


def make_settings(**overrides) -> Settings:
    values = dict(allow_duplicate_identifiers=False, exclusive_loans=False, isolate_observer_failures=True)
    values.update(overrides)
    return Settings(**values)


@pytest.fixture(autouse=True)
def _clean_state(monkeypatch):
    # Her test paylaşılan yönetici ve çıktı modu olmadan başlar
    monkeypatch.delenv(OUTPUT_MODE_ENV, raising=False)
    LibraryManager.reset_instance()
    yield
    LibraryManager.reset_instance()


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def manager(notifier):
    return LibraryManager(notifier, make_settings())


@pytest.fixture
def gatsby() -> Book:
    return (
        BookBuilder()
        .with_title("El Gran Gatsby")
        .with_author("F. Scott Fitzgerald")
        .with_identifier("123456789")
        .build()
    )


@pytest.fixture
def settings_factory():
    return make_settings
