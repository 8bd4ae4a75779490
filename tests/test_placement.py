from studyplan.calendar import DaySlot, build_day_capacities
from studyplan.placement import place_tasks, split_work_unit
from studyplan.section import Section
from studyplan.task import TaskType, WorkUnit
from studyplan.work_units import build_work_units

from collections import defaultdict
from copy import deepcopy
from datetime import date, timedelta

TODAY = date(2024, 1, 1)


def make_days(*capacities):
    return [
        DaySlot(date=TODAY + timedelta(days=i), usable_capacity=c, remaining=c)
        for i, c in enumerate(capacities)
    ]


def make_unit(
    section_id,
    minutes,
    task_type=TaskType.STUDY,
    difficulty=3,
    source_order=0,
    review_offset_days=None,
):
    return WorkUnit(
        course_id="c1",
        type=task_type,
        title=f"{task_type.value.title()}: {section_id}",
        section_ids=(section_id,),
        est_minutes=minutes,
        difficulty=difficulty,
        source_order=source_order,
        review_offset_days=review_offset_days,
    )


def minutes_per_day(placed):
    totals = defaultdict(int)
    for task in placed:
        totals[task.due_date] += task.est_minutes
    return totals


def day_index(task):
    return (task.due_date - TODAY).days


class TestPlaceTasks:
    def test_course_scenario(self):
        sections = [
            Section(id="s1", title="Cardiac Output", est_minutes=30, difficulty=2),
            Section(id="s2", title="Heart Failure", est_minutes=60, difficulty=5),
            Section(id="s3", title="Arrhythmias", est_minutes=20, difficulty=3),
        ]
        units = build_work_units(sections, "c1", revision_policy="standard")
        days = build_day_capacities(
            TODAY,
            TODAY + timedelta(days=9),
            {"default_minutes_per_day": 60, "catch_up_buffer_percent": 0},
        )

        result = place_tasks(units, days)

        assert result.skipped == []
        assert len(result.placed) == 12
        assert all(total <= 60 for total in minutes_per_day(result.placed).values())

        study = {
            task.section_id: day_index(task)
            for task in result.placed
            if task.type == TaskType.STUDY
        }
        assert study == {"s1": 0, "s2": 1, "s3": 0}

        for task in result.placed:
            if task.type == TaskType.REVIEW:
                assert day_index(task) >= study[task.section_id] + 1

    def test_caller_slots_are_not_mutated(self):
        days = make_days(60, 60, 60)
        snapshot = deepcopy(days)

        result = place_tasks([make_unit("s1", 45), make_unit("s2", 30)], days)

        assert days == snapshot
        assert [day.remaining for day in result.days] == [15, 30, 60]

    def test_remaining_never_exceeds_usable_capacity(self):
        units = [make_unit(f"s{i}", 25 + 10 * i, source_order=i) for i in range(8)]

        result = place_tasks(units, make_days(90, 60, 120, 45, 90))

        for day in result.days:
            assert 0 <= day.remaining <= day.usable_capacity

    def test_section_order_then_difficulty(self):
        units = [
            make_unit("late", 20, source_order=2, difficulty=5),
            make_unit("easy", 20, source_order=1, difficulty=1),
            make_unit("hard", 20, source_order=1, difficulty=4),
        ]

        result = place_tasks(units, make_days(120))

        assert [task.section_id for task in result.placed] == ["hard", "easy", "late"]
        assert [task.order_index for task in result.placed] == [0, 1, 2]

    def test_oversized_unit_is_split(self):
        result = place_tasks(
            [
                make_unit("s1", 150),
                make_unit("s1", 10, TaskType.REVIEW, review_offset_days=1),
            ],
            make_days(60, 60, 60, 60),
        )

        study = [task for task in result.placed if task.type == TaskType.STUDY]
        assert [task.title for task in study] == [
            "Study: s1 (Part 1)",
            "Study: s1 (Part 2)",
            "Study: s1 (Part 3)",
        ]
        assert [task.est_minutes for task in study] == [60, 60, 30]
        assert [day_index(task) for task in study] == [0, 1, 2]

        # anchored to the day of the last part
        review = [task for task in result.placed if task.type == TaskType.REVIEW]
        assert day_index(review[0]) == 3

    def test_forced_placement_overfills_a_day(self):
        units = [
            make_unit("s1", 25, source_order=0),
            make_unit("s2", 50, source_order=1),
            make_unit("s3", 40, source_order=2),
        ]

        result = place_tasks(units, make_days(60, 60))

        assert result.skipped == []
        placed = {task.section_id: day_index(task) for task in result.placed}
        assert placed == {"s1": 0, "s2": 1, "s3": 0}
        # the only case where placed minutes exceed a day's usable capacity
        assert minutes_per_day(result.placed)[TODAY] == 65
        assert result.days[0].remaining == 0

    def test_drop_instead_of_force(self):
        units = [
            make_unit("s1", 25, source_order=0),
            make_unit("s2", 50, source_order=1),
            make_unit("s3", 40, source_order=2),
        ]

        result = place_tasks(units, make_days(60, 60), force_overflow=False)

        assert [unit.section_id for unit in result.skipped] == ["s3"]
        assert all(total <= 60 for total in minutes_per_day(result.placed).values())
        assert result.days[0].remaining == 35

    def test_unit_is_dropped_when_no_capacity_is_left(self):
        result = place_tasks(
            [make_unit("s1", 60, source_order=0), make_unit("s2", 30, source_order=1)],
            make_days(60),
        )

        assert [task.section_id for task in result.placed] == ["s1"]
        assert [unit.section_id for unit in result.skipped] == ["s2"]

    def test_review_without_study_is_dropped(self):
        result = place_tasks(
            [
                make_unit("s1", 30),
                make_unit("s2", 10, TaskType.REVIEW, review_offset_days=1),
            ],
            make_days(60, 60),
        )

        assert [task.section_id for task in result.placed] == ["s1"]
        assert [unit.type for unit in result.skipped] == [TaskType.REVIEW]

    def test_review_falls_back_to_last_day(self):
        result = place_tasks(
            [
                make_unit("s1", 60, source_order=0),
                make_unit("s2", 60, source_order=1),
                make_unit("s1", 10, TaskType.REVIEW, review_offset_days=1),
            ],
            make_days(60, 60),
        )

        review = [task for task in result.placed if task.type == TaskType.REVIEW]
        assert day_index(review[0]) == 1
        assert review[0].order_index == 1
        assert result.days[1].remaining == 0

    def test_review_offset_is_clamped_to_last_day(self):
        result = place_tasks(
            [
                make_unit("s1", 30),
                make_unit("s1", 25, TaskType.REVIEW, review_offset_days=7),
            ],
            make_days(60, 60, 60),
        )

        review = [task for task in result.placed if task.type == TaskType.REVIEW]
        assert day_index(review[0]) == 2

    def test_review_moves_forward_to_a_day_with_room(self):
        result = place_tasks(
            [
                make_unit("s1", 30, source_order=0),
                make_unit("s2", 60, source_order=1),
                make_unit("s1", 10, TaskType.REVIEW, review_offset_days=1),
            ],
            make_days(60, 60, 60),
        )

        review = [task for task in result.placed if task.type == TaskType.REVIEW]
        assert day_index(review[0]) == 2

    def test_no_days(self):
        result = place_tasks([make_unit("s1", 30)], [])

        assert result.placed == []
        assert len(result.skipped) == 1


class TestSplitWorkUnit:
    def test_short_unit_is_not_split(self):
        unit = make_unit("s1", 45)

        assert split_work_unit(unit, 60) == [unit]
        assert split_work_unit(unit, 45) == [unit]

    def test_split(self):
        chunks = split_work_unit(make_unit("s1", 130), 60)

        assert [chunk.est_minutes for chunk in chunks] == [60, 60, 10]
        assert sum(chunk.est_minutes for chunk in chunks) == 130
        assert all(chunk.section_id == "s1" for chunk in chunks)
