from studyplan.memory_card import MemoryCard
from studyplan.state import State

from datetime import datetime, timezone
import json


class TestMemoryCard:
    def test_blank(self):
        card = MemoryCard.blank(section_id="s1", course_id="c1")

        assert card.state == State.New
        assert card.stability == 0
        assert card.difficulty == 0
        assert card.reps == 0
        assert card.lapses == 0
        assert card.interval == 0
        assert card.last_review is None
        assert card.next_review is None
        assert card.is_new

    def test_is_new(self):
        card = MemoryCard(
            section_id="s1", course_id="c1", state=State.Review, stability=3.0, reps=1
        )
        assert not card.is_new

        # a card that was never reviewed is treated as new whatever its state says
        card = MemoryCard(
            section_id="s1", course_id="c1", state=State.Review, stability=3.0, reps=0
        )
        assert card.is_new

    def test_serialize(self):
        card = MemoryCard(
            section_id="s1",
            course_id="c1",
            state=State.Relearning,
            stability=1.75,
            difficulty=6.2,
            reps=4,
            lapses=1,
            interval=2,
            last_review=datetime(2024, 1, 1, 9, 0, 0, tzinfo=timezone.utc),
            next_review=datetime(2024, 1, 3, 9, 0, 0, tzinfo=timezone.utc),
        )

        card_dict = card.to_dict()

        # MemoryCard objects are json-serializable
        json.dumps(card_dict)
        assert card_dict["state"] == "Relearning"
        assert card_dict["last_review"] == "2024-01-01T09:00:00+00:00"

        assert MemoryCard.from_dict(card_dict) == card
        assert MemoryCard.from_json(card.to_json()) == card

    def test_from_dict_defaults(self):
        card = MemoryCard.from_dict({"section_id": "s1", "course_id": "c1"})

        assert card == MemoryCard.blank(section_id="s1", course_id="c1")

    def test_from_dict_integer_state(self):
        card = MemoryCard.from_dict(
            {"section_id": "s1", "course_id": "c1", "state": 2, "stability": 5}
        )

        assert card.state == State.Review
        assert card.stability == 5.0
