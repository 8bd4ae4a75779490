from studyplan.section import Section, SectionBlueprint
from studyplan.titles import (
    derive_section_title,
    is_generic_title,
    resolve_task_title,
)

import pytest


class TestIsGenericTitle:
    @pytest.mark.parametrize(
        "title",
        [
            "",
            "   ",
            None,
            "Page 3",
            "Pages 1-10",
            "pages 1 to 10",
            "Slides 5-8",
            "Chapter 2",
            "Part 2",
            "Section 4",
            "Untitled",
            "Unknown section",
        ],
    )
    def test_generic(self, title):
        assert is_generic_title(title)

    @pytest.mark.parametrize(
        "title",
        [
            "Cardiac Output",
            "Chapter 2: Cardiac Output",
            "Renal physiology (pages 4-9)",
            "Partial pressures",
        ],
    )
    def test_not_generic(self, title):
        assert not is_generic_title(title)


class TestDeriveSectionTitle:
    def test_raw_title_is_used(self):
        section = Section(id="s1", title="  Cardiac Output  ", topic_tags=("Heart",))

        assert derive_section_title(section, 0) == "Cardiac Output"

    def test_generic_title_uses_tags(self):
        section = Section(
            id="s1", title="Pages 1-10", topic_tags=("Cardiology", "Arrhythmias", "ECG")
        )

        assert derive_section_title(section, 0) == "Cardiology – Arrhythmias"

    def test_blueprint_sources_in_priority_order(self):
        section = Section(
            id="s1",
            title="Untitled",
            blueprint=SectionBlueprint(
                terms_to_define=("Preload",),
                learning_objectives=("Explain the Frank-Starling law",),
                high_yield_points=("Afterload rises with aortic stenosis",),
            ),
        )

        assert derive_section_title(section, 0) == "Preload – the Frank-Starling law"

    def test_candidates_are_deduplicated(self):
        section = Section(
            id="s1",
            title="Slides 5-8",
            topic_tags=("Page 2", "Glycolysis"),
            blueprint=SectionBlueprint(
                key_concepts=("glycolysis", "Understand the Krebs cycle"),
            ),
        )

        assert derive_section_title(section, 0) == "Glycolysis – the Krebs cycle"

    def test_fallback_is_position(self):
        section = Section(id="s1", title="Chapter 3")

        assert derive_section_title(section, 4) == "Section 5"

    def test_title_is_truncated(self):
        section = Section(id="s1", title="A" * 300)

        assert len(derive_section_title(section, 0)) == 200


class TestResolveTaskTitle:
    def test_generic_body_is_rederived(self):
        section = Section(id="s1", title="Pages 1-10", topic_tags=("Cardiology",))

        assert resolve_task_title("Review: Pages 1-10", section) == "Review: Cardiology"

    def test_specific_title_is_kept(self):
        section = Section(id="s1", title="Pages 1-10", topic_tags=("Cardiology",))

        assert resolve_task_title("Study: Heart failure", section) == "Study: Heart failure"

    def test_nothing_better(self):
        section = Section(id="s1", title="Pages 1-10")

        assert resolve_task_title("Study: Pages 1-10", section) == "Study: Pages 1-10"
        assert resolve_task_title("Study: Pages 1-10", None) == "Study: Pages 1-10"
