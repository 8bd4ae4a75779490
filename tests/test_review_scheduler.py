from studyplan.grade import Grade
from studyplan.grading import Attempt
from studyplan.memory_card import MemoryCard
from studyplan.memory_model import MemoryModel
from studyplan.review_log import ReviewLog
from studyplan.review_scheduler import (
    AttemptRepository,
    MemoryCardRepository,
    ReviewScheduler,
    TaskRepository,
)
from studyplan.state import State
from studyplan.task import PlacedTask, TaskStatus, TaskType

from dataclasses import replace
from datetime import date, datetime, timedelta, timezone
from loguru import logger
import json
import pytest

NOW = datetime(2024, 2, 1, 18, 0, 0, tzinfo=timezone.utc)


class InMemoryCards:
    def __init__(self, cards=()):
        self.cards = {card.section_id: card for card in cards}

    def get(self, section_id):
        return self.cards.get(section_id)

    def save(self, card):
        self.cards[card.section_id] = card


class InMemoryAttempts:
    def __init__(self, attempts=None):
        self.attempts = attempts or {}
        self.queries = []

    def attempts_for_section(self, section_id, since):
        self.queries.append((section_id, since))
        return [a for a in self.attempts.get(section_id, []) if a.created_at >= since]


class InMemoryTasks:
    def __init__(self):
        self.added = []

    def add(self, task):
        self.added.append(task)


class FailingCards(InMemoryCards):
    def save(self, card):
        raise RuntimeError("storage unavailable")


def review_task(status=TaskStatus.TODO, section_ids=("s1",)):
    return PlacedTask(
        course_id="c1",
        type=TaskType.REVIEW,
        title="Review: Cardiac Output",
        section_ids=section_ids,
        topic_tags=("cardiology",),
        est_minutes=15,
        difficulty=4,
        source_order=2,
        review_offset_days=3,
        status=status,
        due_date=date(2024, 2, 1),
    )


@pytest.fixture
def captured_logs():
    messages = []
    handler_id = logger.add(messages.append, format="{level} {message}")
    yield messages
    logger.remove(handler_id)


class TestReviewScheduler:
    def test_in_memory_stores_satisfy_the_protocols(self):
        assert isinstance(InMemoryCards(), MemoryCardRepository)
        assert isinstance(InMemoryAttempts(), AttemptRepository)
        assert isinstance(InMemoryTasks(), TaskRepository)

    def test_first_review_creates_card_and_next_task(self):
        cards = InMemoryCards()
        tasks = InMemoryTasks()
        scheduler = ReviewScheduler(cards, InMemoryAttempts(), tasks)

        review_log = scheduler.review_section(review_task(TaskStatus.DONE), now=NOW)

        # never quizzed, so graded Good
        assert review_log.grade == Grade.Good
        assert review_log.stats.count == 0
        assert review_log.previous_stability == 0

        card = cards.get("s1")
        assert card.state == State.Review
        assert card.reps == 1
        assert card.last_review == NOW
        assert card.course_id == "c1"

        assert tasks.added == [review_log.next_task]
        next_task = tasks.added[0]
        assert next_task.type == TaskType.REVIEW
        assert next_task.status == TaskStatus.TODO
        assert next_task.fsrs_generated
        assert next_task.section_ids == ("s1",)
        assert next_task.title == "Review: Cardiac Output"
        assert next_task.topic_tags == ("cardiology",)
        assert next_task.due_date == card.next_review.date()
        assert next_task.due_date == date(2024, 2, 1) + timedelta(days=card.interval)
        assert 10 <= next_task.est_minutes <= 30

    def test_poor_performance_is_a_lapse(self):
        card = MemoryCard(
            section_id="s1",
            course_id="c1",
            state=State.Review,
            stability=10.0,
            difficulty=5.0,
            reps=3,
            interval=10,
            last_review=NOW - timedelta(days=10),
            next_review=NOW,
        )
        attempts = {
            "s1": [
                Attempt(i == 0, 40, 2, NOW - timedelta(days=i + 1)) for i in range(5)
            ]
        }
        cards = InMemoryCards([card])
        tasks = InMemoryTasks()
        scheduler = ReviewScheduler(cards, InMemoryAttempts(attempts), tasks)

        review_log = scheduler.review_section(review_task(TaskStatus.DONE), now=NOW)

        assert review_log.grade == Grade.Again
        assert review_log.stats.accuracy == pytest.approx(0.2)
        assert review_log.stability < review_log.previous_stability == 10.0
        assert cards.get("s1").state == State.Relearning
        assert cards.get("s1").lapses == 1

    def test_elapsed_days_are_fractional(self):
        card = MemoryCard(
            section_id="s1",
            course_id="c1",
            state=State.Review,
            stability=4.0,
            difficulty=5.0,
            reps=1,
            interval=4,
            last_review=NOW - timedelta(hours=36),
            next_review=NOW,
        )
        cards = InMemoryCards([card])
        memory_model = MemoryModel()
        scheduler = ReviewScheduler(cards, InMemoryAttempts(), InMemoryTasks())

        scheduler.review_section(review_task(TaskStatus.DONE), now=NOW)

        expected = memory_model.review_card(
            card, Grade.Good, elapsed_days=1.5, review_datetime=NOW
        )
        assert cards.get("s1") == expected

    def test_attempts_are_looked_up_over_the_window(self):
        attempts = InMemoryAttempts()
        scheduler = ReviewScheduler(
            InMemoryCards(), attempts, InMemoryTasks(), lookback_days=14
        )

        scheduler.review_section(review_task(TaskStatus.DONE), now=NOW)

        assert attempts.queries == [("s1", NOW - timedelta(days=14))]

    def test_review_minutes_follow_difficulty(self):
        tasks = InMemoryTasks()
        scheduler = ReviewScheduler(InMemoryCards(), InMemoryAttempts(), tasks)

        scheduler.review_section(review_task(TaskStatus.DONE), now=NOW)

        difficulty = scheduler.cards.get("s1").difficulty
        assert tasks.added[0].est_minutes == max(
            10, min(30, int(10 + difficulty / 10 * 20 + 0.5))
        )

    def test_failure_is_logged_not_raised(self, captured_logs):
        tasks = InMemoryTasks()
        scheduler = ReviewScheduler(FailingCards(), InMemoryAttempts(), tasks)

        assert scheduler.review_section(review_task(TaskStatus.DONE), now=NOW) is None
        assert tasks.added == []
        assert any(
            message.startswith("WARNING") and "storage unavailable" in message
            for message in captured_logs
        )

    def test_naive_datetime_is_a_logged_failure(self, captured_logs):
        scheduler = ReviewScheduler(InMemoryCards(), InMemoryAttempts(), InMemoryTasks())

        assert (
            scheduler.review_section(
                review_task(TaskStatus.DONE), now=datetime(2024, 2, 1, 18, 0, 0)
            )
            is None
        )
        assert any(message.startswith("WARNING") for message in captured_logs)

    def test_success_is_logged(self, captured_logs):
        scheduler = ReviewScheduler(InMemoryCards(), InMemoryAttempts(), InMemoryTasks())

        scheduler.review_section(review_task(TaskStatus.DONE), now=NOW)

        assert any(
            message.startswith("INFO") and "s1" in message for message in captured_logs
        )

    def test_task_without_section(self, captured_logs):
        tasks = InMemoryTasks()
        scheduler = ReviewScheduler(InMemoryCards(), InMemoryAttempts(), tasks)

        assert (
            scheduler.review_section(review_task(TaskStatus.DONE, section_ids=()), now=NOW)
            is None
        )
        assert tasks.added == []


class TestOnTaskUpdated:
    def test_review_marked_done_triggers(self):
        tasks = InMemoryTasks()
        scheduler = ReviewScheduler(InMemoryCards(), InMemoryAttempts(), tasks)

        review_log = scheduler.on_task_updated(
            review_task(TaskStatus.TODO), review_task(TaskStatus.DONE), now=NOW
        )

        assert isinstance(review_log, ReviewLog)
        assert len(tasks.added) == 1

    @pytest.mark.parametrize(
        "before, after",
        [
            (review_task(TaskStatus.DONE), review_task(TaskStatus.DONE)),
            (review_task(TaskStatus.TODO), review_task(TaskStatus.TODO)),
            (review_task(TaskStatus.DONE), review_task(TaskStatus.TODO)),
            (
                replace(review_task(TaskStatus.TODO), type=TaskType.STUDY),
                replace(review_task(TaskStatus.DONE), type=TaskType.STUDY),
            ),
        ],
    )
    def test_other_updates_are_ignored(self, before, after):
        tasks = InMemoryTasks()
        cards = InMemoryCards()
        scheduler = ReviewScheduler(cards, InMemoryAttempts(), tasks)

        assert scheduler.on_task_updated(before, after, now=NOW) is None
        assert tasks.added == []
        assert cards.cards == {}


class TestReviewLog:
    def test_serialize(self):
        scheduler = ReviewScheduler(InMemoryCards(), InMemoryAttempts(), InMemoryTasks())
        review_log = scheduler.review_section(review_task(TaskStatus.DONE), now=NOW)

        review_log_dict = review_log.to_dict()

        json.dumps(review_log_dict)
        assert review_log_dict["grade"] == 3
        assert review_log_dict["next_task"]["fsrs_generated"]
        assert ReviewLog.from_dict(review_log_dict) == review_log
        assert ReviewLog.from_json(review_log.to_json()) == review_log
