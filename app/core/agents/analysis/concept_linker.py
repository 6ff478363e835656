"""
Concept insights: what is mastered, what is not, and how they depend on each other.
"""
from typing import Optional, Sequence

from app.core.agents.analysis.schemas import ConceptualInsights, TopicAnalysis
from app.core.agents.analysis.taxonomy import Taxonomy, load_taxonomy

# Mastery asks for more than the 80% that earns a strength recommendation
MASTERED_ACCURACY = 85
STRUGGLING_ACCURACY = 60


class ConceptLinker:

    def __init__(self, taxonomy: Optional[Taxonomy] = None):
        self.taxonomy = taxonomy or load_taxonomy()

    def link(self, topics: Sequence[TopicAnalysis]) -> ConceptualInsights:
        mastered = [t.topic for t in topics if t.accuracy >= MASTERED_ACCURACY]
        struggling = [t.topic for t in topics if t.accuracy < STRUGGLING_ACCURACY]

        connections = []
        for link in self.taxonomy.concept_links:
            if link.struggling not in struggling:
                continue
            if link.mastered is not None and link.mastered not in mastered:
                continue
            connections.append(link.statement)

        if not connections:
            connections = list(self.taxonomy.fallback_connections)

        return ConceptualInsights(
            mastered_concepts=mastered,
            struggling_concepts=struggling,
            concept_connections=connections,
        )
