"""
Static topic data for the analysis engine.

Topic catalogs, the JEE Main 2025 syllabus, per-topic advice templates and the
concept-dependency table. Everything here is read-only; `load_taxonomy()`
builds one shared instance that the engine components receive explicitly.
"""
from dataclasses import dataclass, field
from functools import lru_cache
from typing import Dict, List, Mapping, Optional, Tuple


MATHEMATICS = "mathematics"
PHYSICS = "physics"
CHEMISTRY = "chemistry"


def subject_family(subject: str) -> Optional[str]:
    """Map a free-form subject label (``Math``, ``Mathematics``...) to a rule family."""
    name = (subject or "").lower()
    if "math" in name:
        return MATHEMATICS
    if "physics" in name:
        return PHYSICS
    if "chemistry" in name:
        return CHEMISTRY
    return None


def default_topic(subject: str) -> str:
    """Label used when no rule matches."""
    if subject_family(subject) == MATHEMATICS:
        return "General Mathematics"
    return f"General {subject}"


@dataclass(frozen=True)
class SyllabusUnit:
    name: str
    topics: Tuple[str, ...]


@dataclass(frozen=True)
class TopicTemplate:
    """
    Advice for one topic.

    ``description`` is formatted with ``topic`` and ``accuracy`` (already
    rendered with one decimal). Action items and plan entries may reference
    ``{topic}``.
    """
    description: str
    action_items: Tuple[str, ...]
    immediate: str
    short_term: str
    long_term: str

    def render_description(self, topic: str, accuracy: float) -> str:
        return self.description.format(topic=topic, accuracy=f"{accuracy:.1f}")

    def render_action_items(self, topic: str) -> List[str]:
        return [item.format(topic=topic) for item in self.action_items]

    def render_plan(self, topic: str) -> Tuple[str, str, str]:
        return (
            self.immediate.format(topic=topic),
            self.short_term.format(topic=topic),
            self.long_term.format(topic=topic),
        )


@dataclass(frozen=True)
class ConceptLink:
    """A known prerequisite relationship between two topics.

    ``mastered`` may be None, in which case only the struggling topic has to match.
    """
    mastered: Optional[str]
    struggling: str
    statement: str


# Canonical labels produced by the rule engine, per subject family
TOPIC_CATALOGS: Dict[str, Tuple[str, ...]] = {
    MATHEMATICS: (
        "Basic Arithmetic",
        "Fractions",
        "Decimals",
        "Percentages",
        "Geometry",
        "Trigonometry",
        "Calculus",
        "Statistics",
        "Basic Algebra",
        "Advanced Algebra",
        "General Mathematics",
    ),
    PHYSICS: (
        "Mechanics",
        "Thermodynamics",
        "Electromagnetism",
        "Optics",
        "Modern Physics",
        "Trigonometry",
        "General Physics",
    ),
    CHEMISTRY: (
        "Organic Chemistry",
        "Inorganic Chemistry",
        "Physical Chemistry",
        "Analytical Chemistry",
        "General Chemistry",
    ),
}


JEE_MAIN_2025_SYLLABUS: Dict[str, Tuple[SyllabusUnit, ...]] = {
    MATHEMATICS: (
        SyllabusUnit("SETS, RELATIONS AND FUNCTIONS", (
            "Sets and Representation",
            "Union and Intersection",
            "Complement of Sets",
            "Power Set",
            "Relations and Types",
            "Equivalence Relations",
            "Functions - One-One, Into, Onto",
            "Composition of Functions",
        )),
        SyllabusUnit("COMPLEX NUMBERS AND QUADRATIC EQUATIONS", (
            "Complex Numbers as Ordered Pairs",
            "Argand Diagram",
            "Modulus and Argument",
            "Quadratic Equations in Real System",
            "Quadratic Equations in Complex System",
            "Relations Between Roots and Coefficients",
            "Nature of Roots",
        )),
        SyllabusUnit("LIMIT, CONTINUITY AND DIFFERENTIABILITY", (
            "Real-Valued Functions",
            "Polynomial Functions",
            "Trigonometric Functions",
            "Logarithmic Functions",
            "Exponential Functions",
            "Limits and Continuity",
            "Differentiation Rules",
            "Chain Rule",
            "Applications of Derivatives",
            "Maxima and Minima",
        )),
        SyllabusUnit("INTEGRAL CALCULUS", (
            "Integration as Anti-Derivative",
            "Fundamental Integrals",
            "Integration by Substitution",
            "Integration by Parts",
            "Integration by Partial Fractions",
            "Definite Integrals",
            "Area Under Curves",
        )),
    ),
    PHYSICS: (
        SyllabusUnit("KINEMATICS", (
            "Frame of Reference",
            "Motion in Straight Line",
            "Speed and Velocity",
            "Uniform and Non-Uniform Motion",
            "Uniformly Accelerated Motion",
            "Velocity-Time Graphs",
            "Position-Time Graphs",
            "Relative Velocity",
            "Projectile Motion",
            "Uniform Circular Motion",
        )),
        SyllabusUnit("LAWS OF MOTION", (
            "Force and Inertia",
            "Newton's First Law",
            "Newton's Second Law",
            "Newton's Third Law",
            "Conservation of Linear Momentum",
            "Static and Kinetic Friction",
            "Centripetal Force",
            "Banking of Roads",
        )),
        SyllabusUnit("PROPERTIES OF SOLIDS AND LIQUIDS", (
            "Elastic Behaviour",
            "Stress-Strain Relationship",
            "Hooke's Law",
            "Young's Modulus",
            "Fluid Pressure",
            "Pascal's Law",
            "Viscosity and Stoke's Law",
            "Surface Tension",
            "Heat and Temperature",
            "Thermal Expansion",
            "Heat Transfer Methods",
        )),
    ),
    CHEMISTRY: (
        SyllabusUnit("SOME BASIC CONCEPTS IN CHEMISTRY", (
            "Matter and Its Nature",
            "Dalton's Atomic Theory",
            "Atom, Molecule, Element, Compound",
            "Laws of Chemical Combination",
            "Atomic and Molecular Masses",
            "Mole Concept",
            "Percentage Composition",
            "Empirical and Molecular Formulae",
            "Chemical Equations and Stoichiometry",
        )),
        SyllabusUnit("ATOMIC STRUCTURE", (
            "Electromagnetic Radiation",
            "Photoelectric Effect",
            "Hydrogen Spectrum",
            "Bohr Model",
            "Quantum Mechanical Model",
            "Atomic Orbitals",
            "Quantum Numbers",
            "Electronic Configuration",
            "Aufbau Principle",
            "Pauli's Exclusion Principle",
            "Hund's Rule",
        )),
        SyllabusUnit("CHEMICAL BONDING AND MOLECULAR STRUCTURE", (
            "Ionic Bonding",
            "Covalent Bonding",
            "Lattice Enthalpy",
            "Electronegativity",
            "VSEPR Theory",
            "Hybridization",
            "Molecular Orbital Theory",
            "Bond Order and Bond Length",
            "Hydrogen Bonding",
        )),
    ),
}


TOPIC_TEMPLATES: Dict[str, TopicTemplate] = {
    "Basic Arithmetic": TopicTemplate(
        description=(
            "Your accuracy in Basic Arithmetic is {accuracy}%. This is fundamental for all "
            "math topics, so it's important to strengthen these skills."
        ),
        action_items=(
            "Practice basic addition, subtraction, multiplication, and division daily",
            "Use flashcards for multiplication tables (1-12)",
            "Solve simple word problems involving basic operations",
            "Check your work by doing reverse operations (e.g., if 5+3=8, then 8-3=5)",
            "Practice mental math for small numbers",
        ),
        immediate="Practice 20 basic arithmetic problems (addition, subtraction, multiplication, division)",
        short_term="Complete daily arithmetic worksheets for 2 weeks",
        long_term="Master all basic arithmetic operations and achieve 90%+ accuracy",
    ),
    "Fractions": TopicTemplate(
        description=(
            "Your accuracy in Fractions is {accuracy}%. Fractions are essential for many "
            "advanced math concepts."
        ),
        action_items=(
            "Review fraction basics: numerator and denominator concepts",
            "Practice adding and subtracting fractions with different denominators",
            "Learn to convert between fractions, decimals, and percentages",
            "Solve fraction word problems step by step",
            "Practice simplifying fractions to lowest terms",
        ),
        immediate="Review fraction basics and practice 15 fraction problems",
        short_term="Practice fraction operations daily, focusing on different denominators",
        long_term="Master fraction-decimal-percentage conversions and word problems",
    ),
    "Decimals": TopicTemplate(
        description=(
            "Your accuracy in Decimals is {accuracy}%. Decimal operations are crucial for "
            "real-world math applications."
        ),
        action_items=(
            "Practice decimal addition and subtraction with proper alignment",
            "Master decimal multiplication and division",
            "Learn to convert between decimals and fractions",
            "Practice rounding decimals to different place values",
            "Solve real-world problems involving money and measurements",
        ),
        immediate="Practice 10 decimal addition and subtraction problems",
        short_term="Work on decimal multiplication and division daily",
        long_term="Achieve fluency in all decimal operations and real-world applications",
    ),
    "Percentages": TopicTemplate(
        description=(
            "Your accuracy in Percentages is {accuracy}%. Percentage skills are important "
            "for many practical applications."
        ),
        action_items=(
            "Learn the relationship between percentages, fractions, and decimals",
            "Practice calculating percentages of numbers",
            "Work on percentage increase and decrease problems",
            "Solve real-world percentage problems (discounts, tips, taxes)",
            "Master the three types of percentage problems",
        ),
        immediate="Learn percentage-fraction-decimal relationships and practice 10 problems",
        short_term="Practice percentage calculations in real-world contexts daily",
        long_term="Master all types of percentage problems and applications",
    ),
    "Geometry": TopicTemplate(
        description=(
            "Your accuracy in Geometry is {accuracy}%. Geometry involves spatial reasoning "
            "and formula application."
        ),
        action_items=(
            "Memorize key formulas for area and perimeter of basic shapes",
            "Practice identifying and classifying different geometric shapes",
            "Work on word problems involving area and perimeter",
            "Learn to visualize geometric problems",
            "Practice using the Pythagorean theorem",
        ),
        immediate="Memorize area and perimeter formulas for basic shapes",
        short_term="Practice geometry problems daily, focusing on word problems",
        long_term="Develop strong spatial reasoning and formula application skills",
    ),
    "Basic Algebra": TopicTemplate(
        description=(
            "Your accuracy in Basic Algebra is {accuracy}%. Algebra is the foundation for "
            "advanced mathematics."
        ),
        action_items=(
            "Practice solving simple linear equations",
            "Learn to isolate variables using inverse operations",
            "Work on substitution problems",
            "Practice translating word problems into algebraic expressions",
            "Master the order of operations with variables",
        ),
        immediate="Practice solving 10 simple linear equations",
        short_term="Work on algebraic expressions and equation solving daily",
        long_term="Build strong foundation for advanced algebra topics",
    ),
    "Calculus": TopicTemplate(
        description=(
            "Your accuracy in Calculus is {accuracy}%. This advanced topic requires strong "
            "algebra and trigonometry foundations."
        ),
        action_items=(
            "Review fundamental calculus concepts and theorems",
            "Practice derivative rules and applications",
            "Work on integration techniques step by step",
            "Study limit problems and continuity",
            "Apply calculus to real-world rate and optimization problems",
        ),
        immediate="Work through 10 derivative and integral problems, checking each step",
        short_term="Practice one calculus problem set daily, alternating derivatives and integrals",
        long_term="Apply calculus confidently to rate-of-change and optimization problems",
    ),
}


GENERIC_TEMPLATE = TopicTemplate(
    description="Your accuracy in {topic} is {accuracy}%, which needs improvement.",
    action_items=(
        "Review {topic} fundamentals and key concepts",
        "Practice {topic} problems daily",
        "Seek additional resources for {topic}",
        "Ask for help from teachers or tutors",
        "Form study groups to discuss difficult concepts",
    ),
    immediate="Review {topic} fundamentals and practice key problems",
    short_term="Dedicate 30 minutes daily to {topic} practice",
    long_term="Achieve mastery in {topic} concepts and applications",
)


# Checked in order; every matching link contributes its statement
CONCEPT_LINKS: Tuple[ConceptLink, ...] = (
    ConceptLink(
        "Basic Arithmetic", "Fractions",
        "Strong arithmetic skills provide a foundation for fraction operations",
    ),
    ConceptLink(
        "Fractions", "Decimals",
        "Fraction mastery will help with decimal conversions and operations",
    ),
    ConceptLink(
        "Basic Algebra", "Geometry",
        "Algebraic skills can be applied to solve geometric problems",
    ),
    ConceptLink(
        "Basic Algebra", "Calculus",
        "Algebra skills directly impact Calculus performance",
    ),
    ConceptLink(
        "Mechanics", "Thermodynamics",
        "Strong performance in Mechanics suggests a good foundation for Thermodynamics",
    ),
    ConceptLink(
        "Inorganic Chemistry", "Organic Chemistry",
        "Organic Chemistry concepts build upon Inorganic Chemistry basics",
    ),
    ConceptLink(
        None, "Basic Arithmetic",
        "Strengthening basic arithmetic is crucial for success in all other math topics",
    ),
)


FALLBACK_CONNECTIONS: Tuple[str, ...] = (
    "Mathematical concepts build upon each other - mastering fundamentals leads to success "
    "in advanced topics",
    "Strong performance in basic skills provides confidence for tackling complex problems",
)


@dataclass(frozen=True)
class Taxonomy:
    """Read-only bundle of the topic data above."""
    catalogs: Mapping[str, Tuple[str, ...]] = field(default_factory=lambda: TOPIC_CATALOGS)
    syllabus: Mapping[str, Tuple[SyllabusUnit, ...]] = field(default_factory=lambda: JEE_MAIN_2025_SYLLABUS)
    templates: Mapping[str, TopicTemplate] = field(default_factory=lambda: TOPIC_TEMPLATES)
    generic_template: TopicTemplate = GENERIC_TEMPLATE
    concept_links: Tuple[ConceptLink, ...] = CONCEPT_LINKS
    fallback_connections: Tuple[str, ...] = FALLBACK_CONNECTIONS

    def syllabus_topics(self, subject: str) -> List[str]:
        family = subject_family(subject)
        units = self.syllabus.get(family, ()) if family else ()
        return [topic for unit in units for topic in unit.topics]

    def catalog_for(self, subject: str) -> List[str]:
        """Ordered labels a classifier may assign for ``subject``."""
        family = subject_family(subject)
        labels = list(self.catalogs.get(family, ())) if family else [default_topic(subject)]
        for topic in self.syllabus_topics(subject):
            if topic not in labels:
                labels.append(topic)
        return labels

    def template_for(self, topic: str) -> TopicTemplate:
        return self.templates.get(topic, self.generic_template)

    def has_template(self, topic: str) -> bool:
        return topic in self.templates

    def unit_for_topic(self, topic: str, subject: str) -> Optional[str]:
        family = subject_family(subject)
        for unit in self.syllabus.get(family, ()) if family else ():
            if topic in unit.topics:
                return unit.name
        return None


@lru_cache(maxsize=1)
def load_taxonomy() -> Taxonomy:
    """Shared taxonomy instance, built on first use."""
    return Taxonomy()
