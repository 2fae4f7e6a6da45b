"""Research paper catalog that confidence scores are keyed by."""

from typing import List, Optional

from coach_sim.mock_data import RESEARCH_PAPERS
from coach_sim.models import ResearchPaper


def get_papers(goal: Optional[str] = None) -> List[ResearchPaper]:
    if goal is None:
        return list(RESEARCH_PAPERS)
    return [paper for paper in RESEARCH_PAPERS if paper.goal == goal]


def get_paper(paper_id) -> Optional[ResearchPaper]:
    for paper in RESEARCH_PAPERS:
        if paper.id == str(paper_id):
            return paper
    return None


def paper_ids() -> List[str]:
    return [paper.id for paper in RESEARCH_PAPERS]
