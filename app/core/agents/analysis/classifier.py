"""
Topic classification for test questions.

Every question is mapped to one topic label. The rule engine walks an ordered
list of (predicate, label) rules per subject family and stops at the first
match, so rule order is precedence. The semantic classifier asks an LLM to map
a whole section at once and falls back to the rule engine whenever the call
fails or its answer can't be trusted.
"""
import json
import logging
import re
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from langchain_core.messages import HumanMessage, SystemMessage

from app.core.agents.analysis.prompts import (
    CLASSIFICATION_SYSTEM_PROMPT,
    CLASSIFICATION_USER_PROMPT_TEMPLATE,
)
from app.core.agents.analysis.schemas import QuestionData
from app.core.agents.analysis.taxonomy import (
    CHEMISTRY,
    MATHEMATICS,
    PHYSICS,
    Taxonomy,
    default_topic,
    load_taxonomy,
    subject_family,
)
from app.core.config import settings
from app.core.exceptions import ClassificationDegraded
from app.core.llm_config import LLMFactory

logger = logging.getLogger(__name__)

Predicate = Callable[[str], bool]


# ============= Predicate builders =============

def contains(*keywords: str) -> Predicate:
    """Any keyword appears as a substring."""
    return lambda text: any(keyword in text for keyword in keywords)


def words(*terms: str) -> Predicate:
    """Any term appears as a whole word."""
    pattern = re.compile(r"\b(?:" + "|".join(re.escape(t) for t in terms) + r")\b")
    return lambda text: bool(pattern.search(text))


def matches(*patterns: str) -> Predicate:
    """Any regular expression matches."""
    compiled = [re.compile(p) for p in patterns]
    return lambda text: any(p.search(text) for p in compiled)


def any_of(*predicates: Predicate) -> Predicate:
    return lambda text: any(p(text) for p in predicates)


def all_of(*predicates: Predicate) -> Predicate:
    return lambda text: all(p(text) for p in predicates)


def none_of(*predicates: Predicate) -> Predicate:
    return lambda text: not any(p(text) for p in predicates)


@dataclass(frozen=True)
class TopicRule:
    label: str
    predicate: Predicate

    def applies_to(self, text: str) -> bool:
        return self.predicate(text)


# ============= Rule tables =============

_OPERATOR = r"[+\-×*÷/]"

_advanced_algebra_terms = contains("quadratic", "polynomial", "exponential", "logarithm")
_has_variable = matches(r"(?<![a-z])[xy]+(?![a-z])")
# sinθ, sin²x and tan2x count; "using" and "cost" do not
_trig_function = matches(r"(?<![a-z])(?:sin|cos|tan)(?![a-z])")
_asks_to_solve = contains("solve", "=", "find")
_calculus_terms = contains("derivative", "integral")

MATH_RULES: Tuple[TopicRule, ...] = (
    TopicRule("Basic Arithmetic", matches(
        rf"^\s*\d+\s*{_OPERATOR}\s*\d+",
        rf"what is \d+ {_OPERATOR} \d+",
        rf"calculate \d+ {_OPERATOR} \d+",
        r"add \d+ and \d+",
        r"subtract \d+ from \d+",
        r"multiply \d+ by \d+",
        r"divide \d+ by \d+",
    )),
    TopicRule("Fractions", any_of(
        contains("fraction", "½", "¼", "¾", "numerator", "denominator", "mixed number"),
        matches(r"\d+/\d+"),
    )),
    TopicRule("Decimals", any_of(
        contains("decimal"),
        matches(r"\d+\.\d+"),
        all_of(contains("point"), contains("number")),
    )),
    TopicRule("Percentages", contains("%", "percent")),
    TopicRule("Geometry", contains(
        "area", "perimeter", "triangle", "circle", "rectangle", "square", "polygon",
        "diameter", "radius", "circumference", "volume",
    )),
    TopicRule("Trigonometry", any_of(
        _trig_function,
        contains("sine", "cosine", "tangent", "angle", "degree"),
    )),
    TopicRule("Calculus", contains(
        "derivative", "integral", "limit", "dx", "differentiate", "integrate",
        "slope of tangent", "rate of change",
    )),
    TopicRule("Statistics", any_of(
        words("mean", "median", "mode"),
        contains("probability", "average", "standard deviation", "variance", "random"),
    )),
    TopicRule("Advanced Algebra", all_of(
        _has_variable, _asks_to_solve, none_of(_calculus_terms), _advanced_algebra_terms,
    )),
    TopicRule("Basic Algebra", all_of(_has_variable, _asks_to_solve, none_of(_calculus_terms))),
    TopicRule("Advanced Algebra", any_of(
        _advanced_algebra_terms, contains("matrix", "system of equations"),
    )),
)

PHYSICS_RULES: Tuple[TopicRule, ...] = (
    TopicRule("Mechanics", contains(
        "force", "motion", "velocity", "acceleration", "newton", "momentum", "energy", "work",
    )),
    TopicRule("Thermodynamics", contains(
        "heat", "temperature", "thermal", "entropy", "gas law", "pressure",
    )),
    TopicRule("Electromagnetism", contains(
        "electric", "magnetic", "current", "voltage", "resistance", "capacitor", "inductor",
    )),
    TopicRule("Optics", contains("light", "mirror", "lens", "reflection", "refraction", "wave")),
    TopicRule("Modern Physics", contains("quantum", "relativity", "photon", "electron", "nuclear")),
    TopicRule("Trigonometry", _trig_function),
)

CHEMISTRY_RULES: Tuple[TopicRule, ...] = (
    TopicRule("Organic Chemistry", contains(
        "organic", "carbon", "hydrocarbon", "benzene", "alkane", "alkene",
    )),
    TopicRule("Inorganic Chemistry", any_of(
        contains("acid", "salt", "metal", "compound"),
        words("base", "bases", "ion", "ions", "ionic"),
        matches(r"\bioniz"),
    )),
    TopicRule("Physical Chemistry", contains(
        "reaction rate", "equilibrium", "thermodynamics", "kinetics", "enthalpy", "entropy",
    )),
    TopicRule("Analytical Chemistry", contains(
        "analysis", "titration", "spectroscopy", "chromatography",
    )),
)

DEFAULT_RULES: Dict[str, Tuple[TopicRule, ...]] = {
    MATHEMATICS: MATH_RULES,
    PHYSICS: PHYSICS_RULES,
    CHEMISTRY: CHEMISTRY_RULES,
}


# ============= Classifiers =============

class BatchClassifier(ABC):
    """Assigns one topic label per question."""

    @abstractmethod
    def classify_many(self, questions: Sequence[QuestionData], subject: str) -> Dict[int, str]:
        """Classify a batch; keys are positions in ``questions``."""

    def classify(self, question: QuestionData, subject: str) -> str:
        return self.classify_many([question], subject)[0]


class RuleBasedClassifier(BatchClassifier):
    """
    Keyword/regex classifier. Pure: the same (question, subject) pair always
    gets the same label.
    """

    def __init__(self, rules: Optional[Dict[str, Tuple[TopicRule, ...]]] = None):
        self.rules = DEFAULT_RULES if rules is None else rules

    def classify(self, question: QuestionData, subject: str) -> str:
        text = (question.question_text or "").lower()
        family = subject_family(subject)
        if family is None:
            return f"General {subject}"
        for rule in self.rules.get(family, ()):
            if rule.applies_to(text):
                return rule.label
        return default_topic(subject)

    def classify_many(self, questions: Sequence[QuestionData], subject: str) -> Dict[int, str]:
        return {index: self.classify(question, subject) for index, question in enumerate(questions)}


class SemanticClassifier(BatchClassifier):
    """
    Delegates a section's questions to an LLM in one round-trip.

    Never raises: oversize prompts, client errors, timeouts and malformed
    replies all degrade to the wrapped rule classifier. Questions the reply
    skips, or maps outside the subject catalog, are classified by rules too.
    """

    def __init__(
        self,
        fallback: RuleBasedClassifier,
        llm=None,
        taxonomy: Optional[Taxonomy] = None,
        max_prompt_chars: Optional[int] = None,
    ):
        self.fallback = fallback
        self.taxonomy = taxonomy or load_taxonomy()
        self.max_prompt_chars = max_prompt_chars or settings.SEMANTIC_CLASSIFIER_MAX_PROMPT_CHARS
        self.llm = llm

    def classify_many(self, questions: Sequence[QuestionData], subject: str) -> Dict[int, str]:
        if not questions:
            return {}

        rule_labels = self.fallback.classify_many(questions, subject)
        catalog = self.taxonomy.catalog_for(subject)

        try:
            suggested = self._request_labels(questions, subject, catalog)
        except Exception as e:
            logger.warning(
                f"Semantic classification degraded for {subject} "
                f"({len(questions)} questions), using rules: {e}"
            )
            return rule_labels

        labels = {}
        for index in range(len(questions)):
            label = suggested.get(index)
            labels[index] = label if label in catalog else rule_labels[index]
        return labels

    def _request_labels(
        self,
        questions: Sequence[QuestionData],
        subject: str,
        catalog: List[str],
    ) -> Dict[int, str]:
        """Call the LLM and parse an index -> topic mapping."""
        if self.llm is None:
            raise ClassificationDegraded("no LLM client configured")

        question_lines = "\n".join(
            f"{i}: {q.question_text}" for i, q in enumerate(questions)
        )
        user_prompt = CLASSIFICATION_USER_PROMPT_TEMPLATE.format(
            subject=subject,
            topics=", ".join(catalog),
            questions=question_lines,
        )
        if len(CLASSIFICATION_SYSTEM_PROMPT) + len(user_prompt) > self.max_prompt_chars:
            raise ClassificationDegraded(
                f"prompt of {len(user_prompt)} chars exceeds budget of {self.max_prompt_chars}"
            )

        messages = [
            SystemMessage(content=CLASSIFICATION_SYSTEM_PROMPT),
            HumanMessage(content=user_prompt),
        ]
        response = self.llm.invoke(messages)
        return parse_topic_mapping(str(response.content), len(questions))


def parse_topic_mapping(response_text: str, question_count: int) -> Dict[int, str]:
    """
    Extract ``{"0": "Topic", ...}`` from an LLM reply.

    Raises ClassificationDegraded when the reply holds no JSON object or a
    value is not a non-empty string. Keys that aren't indices of the batch are
    dropped.
    """
    match = re.search(r"\{[\s\S]*\}", response_text or "")
    if not match:
        raise ClassificationDegraded("no JSON object in response")
    try:
        payload = json.loads(match.group(0))
    except json.JSONDecodeError as e:
        raise ClassificationDegraded(f"invalid JSON: {e}") from e
    if not isinstance(payload, dict):
        raise ClassificationDegraded("response is not a JSON object")

    mapping: Dict[int, str] = {}
    for key, value in payload.items():
        if not isinstance(value, str) or not value.strip():
            raise ClassificationDegraded(f"invalid topic for key {key!r}")
        try:
            index = int(key)
        except (TypeError, ValueError):
            continue
        if 0 <= index < question_count:
            mapping[index] = value.strip()
    return mapping


def build_classifier(taxonomy: Optional[Taxonomy] = None) -> BatchClassifier:
    """Classifier configured from settings: semantic when enabled, rules otherwise."""
    rules = RuleBasedClassifier()
    if not settings.SEMANTIC_CLASSIFIER_ENABLED:
        return rules

    try:
        llm = LLMFactory.create_llm(
            model=settings.SEMANTIC_CLASSIFIER_MODEL,
            temperature=0.1,
            json_mode=True,
            tracing_project="topic-classification",
            timeout=settings.SEMANTIC_CLASSIFIER_TIMEOUT,
            max_retries=0,
            max_tokens=800,
        )
    except Exception as e:
        logger.warning(f"Semantic classifier unavailable, using rules: {e}")
        return rules

    return SemanticClassifier(fallback=rules, llm=llm, taxonomy=taxonomy)
