"""
tests/test_intent.py
pytest tests for the research keyword router.
Run: pytest tests/ -v
"""

import pytest
from app.services.intent_router import needs_literature_search


@pytest.mark.parametrize("text,expected", [
    # Research / medical questions
    ("latest treatment for diabetes", True),
    ("Is there any new research on long covid?", True),
    ("What does the STUDY say about coffee?", True),
    ("Which medicine helps with migraines", True),
    ("Tell me about Crohn's disease", True),
    ("what is Down syndrome", True),
    ("Any update on Alzheimer's drugs?", True),
    ("TREATMENT options for asthma", True),

    # Everyday questions go straight to the LLM
    ("What is diabetes?", False),
    ("Tell me a joke", False),
    ("What's the weather like in Taipei?", False),
    ("How are you?", False),
    ("最新的糖尿病治療", False),
])
def test_research_keyword_routing(text: str, expected: bool):
    assert needs_literature_search(text) is expected, (
        f"'{text}' → expected={expected}"
    )
