"""Root conftest.py for test configuration.

Ensures local src/ directory takes priority over any installed packages,
and provides a small standards corpus shared by engine, MCP, and CLI tests.
"""

import json
import sys
from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest

# Insert local src directory at the beginning of sys.path
# This ensures that the local ngss_mcp package is used, not any installed one
_src_dir = Path(__file__).parent.parent / "src"
if str(_src_dir) not in sys.path:
    sys.path.insert(0, str(_src_dir))

# Force reimport of ngss_mcp modules if already imported
for module_name in list(sys.modules.keys()):
    if module_name.startswith("ngss_mcp"):
        del sys.modules[module_name]

from ngss_mcp.engine.corpus import parse_corpus  # noqa: E402
from ngss_mcp.engine.models import Corpus  # noqa: E402
from ngss_mcp.engine.ops import StandardsEngine  # noqa: E402

StandardFactory = Callable[..., dict[str, Any]]

MODELS = ("SEP-2", "Developing and Using Models")
EXPLANATIONS = ("SEP-6", "Constructing Explanations and Designing Solutions")
ENERGY_AND_MATTER = ("CCC-5", "Energy and Matter")


def _tag(pair: tuple[str, str]) -> dict[str, str]:
    code, name = pair
    return {"code": code, "name": name, "description": f"{name} description"}


def standard_payload(
    code: str,
    domain: str = "Physical Science",
    *,
    topic: str = "Energy",
    pe: str = "Describe a phenomenon.",
    sep: tuple[str, str] = MODELS,
    dci: tuple[str, str] = ("PS3.A", "Definitions of Energy"),
    ccc: tuple[str, str] = ENERGY_AND_MATTER,
    questions: list[str] | None = None,
    keywords: list[str] | None = None,
) -> dict[str, Any]:
    """JSON form of one standard, as it appears in the corpus file."""
    return {
        "code": code,
        "grade_level": "MS",
        "domain": domain,
        "topic": topic,
        "performance_expectation": pe,
        "sep": _tag(sep),
        "dci": _tag(dci),
        "ccc": _tag(ccc),
        "driving_questions": questions or [],
        "keywords": keywords or [],
        "lesson_scope": {"key_concepts": [f"{topic} basics"]},
    }


def _sample_standards() -> list[dict[str, Any]]:
    return [
        standard_payload(
            "MS-PS3-1",
            topic="Energy",
            pe="Construct and interpret graphical displays of data to describe the relationships "
            "of kinetic energy to the mass of an object and to the speed of an object.",
            sep=("SEP-4", "Analyzing and Interpreting Data"),
            dci=("PS3.A", "Definitions of Energy"),
            ccc=("CCC-3", "Scale, Proportion, and Quantity"),
            questions=[
                "What do we know about energy?",
                "How does speed change an object's kinetic energy?",
            ],
            keywords=["kinetic energy", "mass", "speed"],
        ),
        standard_payload(
            "MS-PS3-3",
            topic="Energy",
            pe="Apply scientific principles to design, construct, and test a device that either "
            "minimizes or maximizes thermal energy transfer.",
            sep=EXPLANATIONS,
            dci=("PS3.B", "Conservation of Energy and Energy Transfer"),
            ccc=ENERGY_AND_MATTER,
            questions=["How can we keep a drink cold without a refrigerator?"],
            keywords=["thermal energy", "heat transfer", "insulation"],
        ),
        standard_payload(
            "MS-LS2-3",
            "Life Science",
            topic="Matter and Energy in Organisms and Ecosystems",
            pe="Develop a model to describe the cycling of matter and flow of energy among living "
            "and nonliving parts of an ecosystem.",
            sep=MODELS,
            dci=("LS2.B", "Cycle of Matter and Energy Transfer in Ecosystems"),
            ccc=ENERGY_AND_MATTER,
            questions=["Where does the matter in a food web go?"],
            keywords=["food web", "decomposers", "ecosystem"],
        ),
        standard_payload(
            "MS-LS1-6",
            "Life Science",
            topic="From Molecules to Organisms",
            pe="Construct a scientific explanation based on evidence for the role of "
            "photosynthesis in the cycling of matter and flow of energy into and out of organisms.",
            sep=EXPLANATIONS,
            dci=("LS1.C", "Organization for Matter and Energy Flow in Organisms"),
            ccc=ENERGY_AND_MATTER,
            questions=["How do plants make their own food?"],
            keywords=["photosynthesis", "plants", "glucose"],
        ),
        standard_payload(
            "MS-ESS3-3",
            "Earth and Space Science",
            topic="Human Impacts",
            pe="Apply scientific principles to design a method for monitoring and minimizing a "
            "human impact on the environment.",
            sep=EXPLANATIONS,
            dci=("ESS3.C", "Human Impacts on Earth Systems"),
            ccc=("CCC-2", "Cause and Effect"),
            questions=["How do humans change the environment around them?"],
            keywords=["pollution", "conservation", "human impact"],
        ),
        standard_payload(
            "MS-ESS1-1",
            "Earth and Space Science",
            topic="Space Systems",
            pe="Develop and use a model of the Earth-sun-moon system to describe the cyclic "
            "patterns of lunar phases, eclipses of the sun and moon, and seasons.",
            sep=MODELS,
            dci=("ESS1.A", "The Universe and Its Stars"),
            ccc=("CCC-1", "Patterns"),
            questions=["Why does the moon change shape?"],
            keywords=["moon phases", "eclipses", "seasons"],
        ),
    ]


class FakeClock:
    """Manually advanced wall clock for TTL tests."""

    def __init__(self, start: float = 1_000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def make_standard() -> StandardFactory:
    """Factory for corpus-file standard payloads."""
    return standard_payload


@pytest.fixture
def corpus_payload() -> dict[str, Any]:
    """Six-standard corpus document, two standards per domain."""
    return {
        "generated_at": "2025-01-15T00:00:00Z",
        "source": "test fixture",
        "standards": _sample_standards(),
    }


@pytest.fixture
def corpus(corpus_payload: dict[str, Any]) -> Corpus:
    return parse_corpus(corpus_payload)


@pytest.fixture
def corpus_file(tmp_path: Path, corpus_payload: dict[str, Any]) -> Path:
    """The fixture corpus written to disk."""
    path = tmp_path / "standards.json"
    path.write_text(json.dumps(corpus_payload), encoding="utf-8")
    return path


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def engine(corpus: Corpus, fake_clock: FakeClock) -> StandardsEngine:
    return StandardsEngine(corpus, clock=fake_clock)
