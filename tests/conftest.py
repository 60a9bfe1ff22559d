import pytest

from conversation_context import ConversationContext
from exception_logger import exception_logger
from response_manager import ResponseManager


@pytest.fixture(autouse=True)
def quiet_logger():
    exception_logger.set_log_file(None)
    exception_logger.clear()
    yield
    exception_logger.clear()


@pytest.fixture
def knowledge_base():
    return {
        "profile": {
            "name": "Nati",
            "headline": "Full-stack developer",
            "skills": ["React", "Python"],
        },
        "projects": [
            {
                "name": "MedHub Ethiopia",
                "description": "A platform connecting patients with pharmacies.",
                "technologies": ["MongoDB", "Express", "React", "Node.js"],
                "problems_solved": ["Medicine availability lookup"],
                "source_code_link": "https://example.com/medhub",
                "performance": "Cached inventories in Redis.",
            },
            {
                "name": "Campus Connect",
                "description": "Student portal for course registration.",
                "technologies": ["Django", "PostgreSQL"],
            },
            {
                "name": "Pixel Weather",
                "description": "Forecast app with offline support.",
                "technologies": ["React", "Service Workers"],
            },
        ],
        "experiences": [
            {
                "title": "Frontend Developer",
                "company_name": "Addis Software",
                "description": "Built React dashboards.",
                "skills_gained": ["Design systems"],
            }
        ],
    }


@pytest.fixture
def synonyms():
    return {
        "databases": ["db", "database", "sql"],
        "frontend": ["ui", "client side"],
    }


@pytest.fixture
def engine(knowledge_base, synonyms):
    return ResponseManager(knowledge_base=knowledge_base, synonyms=synonyms)


@pytest.fixture
def context():
    return ConversationContext()
