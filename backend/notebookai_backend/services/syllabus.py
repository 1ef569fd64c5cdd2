from __future__ import annotations

import logging
import re

from ..config import AppConfig
from ..errors import NotFoundError
from ..models.syllabus import GeneratedFeature, Syllabus, SyllabusOptions
from .llm import LLMBackend
from .notebook_store import NotebookStore

logger = logging.getLogger(__name__)

SYLLABUS_SECTIONS: tuple[tuple[str, str], ...] = (
    (
        "Course Description",
        "Generate a comprehensive course description based on the provided content summaries.",
    ),
    (
        "Learning Objectives",
        "Create a list of specific and measurable learning objectives for the course.",
    ),
    (
        "Course Structure",
        "Outline the overall structure of the course, including major topics and their sequence.",
    ),
    (
        "Assessment Methods",
        "Describe the assessment methods for the course, incorporating the selected activities and "
        "Universal Design for Learning principles.",
    ),
    (
        "Weekly Schedule",
        "Create a detailed 14-week schedule with at least 5 different class activities for each week, "
        "based on Universal Design of Learning principles.",
    ),
    (
        "Required Readings and Materials",
        "Compile a list of required readings and materials for the course, based on the content summaries provided.",
    ),
)

_HEADING_MARK = re.compile(r"^#+\s*")


def syllabus_title(content: str) -> str:
    """First line of a syllabus with Markdown heading and bold markers removed."""
    first_line = content.split("\n", 1)[0]
    return _HEADING_MARK.sub("", first_line).replace("**", "")


class SyllabusService:
    def __init__(self, backend: LLMBackend, settings: AppConfig, store: NotebookStore) -> None:
        self._backend = backend
        self._settings = settings
        self._store = store

    async def generate_syllabus(self, notebook_id: str, options: SyllabusOptions) -> Syllabus:
        notebook = self._store.get_notebook(notebook_id)
        summaries = "\n\n".join(source.summary for source in notebook.sources)

        content = await self._generate_content(summaries, options)
        syllabus = self._store.add_syllabus(notebook_id, content)
        self._store.add_generated_feature(
            notebook_id,
            name="Syllabus",
            description="Create a comprehensive course syllabus",
            feature_type="syllabus",
            reference_id=syllabus.id,
        )
        self._store.add_syllabus_children(syllabus.id, options.all_activities(), options.all_pedagogies())
        logger.info(f"Generated syllabus {syllabus.id} for notebook {notebook_id}")
        return self._store.get_syllabus(syllabus.id)

    def list_syllabi(self, notebook_id: str) -> list[Syllabus]:
        return self._store.list_syllabi(notebook_id)

    def get_syllabus(self, syllabus_id: str) -> Syllabus:
        return self._store.get_syllabus(syllabus_id)

    def list_generated_features(self, notebook_id: str) -> list[GeneratedFeature]:
        features = self._store.list_generated_features(notebook_id)
        for feature in features:
            if feature.type != "syllabus" or not feature.reference_id:
                continue
            try:
                syllabus = self._store.get_syllabus(feature.reference_id)
            except NotFoundError:
                logger.warning(f"Feature {feature.id} references missing syllabus {feature.reference_id}")
                continue
            feature.syllabus = syllabus
            feature.description = syllabus_title(syllabus.content)
        return features

    async def _generate_content(self, summaries: str, options: SyllabusOptions) -> str:
        activities = ", ".join(options.all_activities())
        pedagogies = ", ".join(options.all_pedagogies())
        sections: list[str] = []
        for title, instruction in SYLLABUS_SECTIONS:
            prompt = (
                f"{instruction}\n\n"
                f"Content summaries:\n{summaries}\n\n"
                f"Activities: {activities}\n"
                f"Pedagogical approaches: {pedagogies}\n\n"
                "Ensure that the content reflects the chosen pedagogical approaches and incorporates the selected "
                "activities appropriately. Use Markdown formatting for better readability."
            )
            text = await self._backend.generate(prompt, self._settings.llm_max_tokens)
            sections.append(f"## {title}\n\n{text.strip()}")
        return "\n\n".join(sections).strip()
