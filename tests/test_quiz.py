import pytest

from funnel import ai
from funnel.quiz import QuizRun, QuizError, QUESTIONS


def answer_all(run):
    for question in QUESTIONS:
        run.record(question.options[0])


def test_questions_are_fixed_and_ordered():
    assert [q.id for q in QUESTIONS] == list(range(1, 9))
    assert all(len(q.options) == 4 for q in QUESTIONS)


def test_answers_are_recorded_in_order():
    run = QuizRun({})
    run.start()
    answer_all(run)

    assert run.is_complete
    assert run.current_question is None
    formatted = run.formatted_answers()
    assert [a['question'] for a in formatted] == [q.text for q in QUESTIONS]
    assert formatted[0]['answer'] == QUESTIONS[0].options[0]


def test_answer_must_be_an_option():
    run = QuizRun({})
    run.start()
    with pytest.raises(QuizError):
        run.record('Not on the list')
    assert run.current_index == 0


def test_no_answers_after_completion():
    run = QuizRun({})
    answer_all(run)
    with pytest.raises(QuizError):
        run.record(QUESTIONS[-1].options[0])


def test_start_clears_previous_run():
    session = {}
    run = QuizRun(session)
    answer_all(run)
    run.store_outcome(ai.AnalysisOutcome(result=ai.DEFAULT_ANALYSIS), now=100.0)

    run.start()
    assert run.answers == []
    assert run.result is None
    assert run.analysis_status is None


def test_result_survives_the_session(settings):
    session = {}
    run = QuizRun(session)
    run.store_outcome(ai.AnalysisOutcome(result=ai.DEFAULT_ANALYSIS, status=ai.STATUS_FALLBACK), now=10.0)

    again = QuizRun(session)
    assert again.result == ai.DEFAULT_ANALYSIS
    assert again.analysis_status == ai.STATUS_FALLBACK


def test_reveal_waits_for_minimum_display(settings):
    settings.ANALYSIS_MIN_DISPLAY_SECONDS = 2.5
    run = QuizRun({})
    run.store_outcome(ai.AnalysisOutcome(result=ai.DEFAULT_ANALYSIS), now=100.0)

    assert run.seconds_until_reveal(now=100.0) == pytest.approx(2.5)
    assert run.seconds_until_reveal(now=101.0) == pytest.approx(1.5)
    assert run.seconds_until_reveal(now=103.0) == 0.0
