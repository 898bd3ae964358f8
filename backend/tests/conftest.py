import sys
import pytest
from pathlib import Path

# Add backend/ (1 level up from tests/) to sys.path so tests can import 'meeting_translator'
root = Path(__file__).resolve().parents[1]
if str(root) not in sys.path:
    sys.path.insert(0, str(root))

from meeting_translator.services.connection import ConnectionManager
from meeting_translator.services.glossary import GlossaryStore

from tests.helpers import FakeTranslationEngine


@pytest.fixture
def glossary_store():
    return GlossaryStore()


@pytest.fixture
def translation_engine():
    return FakeTranslationEngine()


@pytest.fixture
def connections():
    return ConnectionManager()
