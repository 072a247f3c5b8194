"""Tests for the pure quiz session transitions."""
import pytest

from quizapp.exceptions import AlreadyAnswered, InvalidTransition, SubmissionPending
from quizapp.session import (
    AnswerFailed,
    AnswerReceived,
    ErrorDismissed,
    FeedbackAcknowledged,
    Navigated,
    OptionSelected,
    Phase,
    ResetRequested,
    SummaryRequested,
    apply,
    new_session,
)


def answer(session, option, correct_answer):
    """Select an option, receive the oracle's answer and acknowledge the feedback."""
    session = apply(session, OptionSelected(option=option))
    question_id = session.pending.question_id
    session = apply(session, AnswerReceived(question_id=question_id, correct_answer=correct_answer))
    return apply(session, FeedbackAcknowledged())


class TestNewSession:

    def test_initial_state(self, session, questions):
        assert session.phase is Phase.ANSWERING
        assert session.current_index == 0
        assert session.records == {}
        assert session.summary_visible is False
        assert session.pending is None
        assert session.total == len(questions)
        assert session.score == 0

    def test_empty_quiz_rejected(self):
        with pytest.raises(ValueError):
            new_session([])


class TestSelectingOptions:

    def test_select_moves_to_loading(self, session):
        loading = apply(session, OptionSelected(option="Warszawa"))

        assert loading.phase is Phase.LOADING
        assert loading.loading is True
        assert loading.pending.question_id == 1
        assert loading.pending.selected_option == "Warszawa"
        assert session.phase is Phase.ANSWERING

    def test_second_submission_while_loading_rejected(self, session):
        loading = apply(session, OptionSelected(option="Warszawa"))

        with pytest.raises(SubmissionPending):
            apply(loading, OptionSelected(option="Kraków"))

    def test_unknown_option_rejected(self, session):
        with pytest.raises(InvalidTransition):
            apply(session, OptionSelected(option="Poznań"))

    def test_matching_answer_is_correct(self, session):
        session = apply(session, OptionSelected(option="Warszawa"))
        session = apply(session, AnswerReceived(question_id=1, correct_answer="Warszawa"))

        assert session.phase is Phase.FEEDBACK
        assert session.records[1].is_correct is True
        assert session.feedback.correct_answer == "Warszawa"

    def test_other_answer_is_incorrect(self, session):
        session = apply(session, Navigated(index=1))
        session = apply(session, OptionSelected(option="2003"))
        session = apply(session, AnswerReceived(question_id=2, correct_answer="2004"))

        record = session.records[2]
        assert record.selected_option == "2003"
        assert record.is_correct is False
        assert session.feedback.correct_answer == "2004"

    def test_already_answered_question_rejects_selection(self, session):
        session = answer(session, "Warszawa", "Warszawa")
        session = apply(session, Navigated(index=0))

        with pytest.raises(AlreadyAnswered):
            apply(session, OptionSelected(option="Kraków"))
        assert session.records[1].selected_option == "Warszawa"


class TestLookupOutcomes:

    def test_failure_returns_to_answering_without_record(self, session):
        session = apply(session, OptionSelected(option="Warszawa"))
        session = apply(session, AnswerFailed(question_id=1, message="Problemy z połączeniem z serwerem"))

        assert session.phase is Phase.ANSWERING
        assert session.current_index == 0
        assert session.records == {}
        assert session.error == "Problemy z połączeniem z serwerem"

    def test_retry_after_failure(self, session):
        session = apply(session, OptionSelected(option="Warszawa"))
        session = apply(session, AnswerFailed(question_id=1, message="Błąd"))
        session = apply(session, OptionSelected(option="Warszawa"))

        assert session.error is None
        assert session.phase is Phase.LOADING

    def test_error_dismissed(self, session):
        session = apply(session, OptionSelected(option="Warszawa"))
        session = apply(session, AnswerFailed(question_id=1, message="Błąd"))

        assert apply(session, ErrorDismissed()).error is None

    def test_stale_response_rejected(self, session):
        session = apply(session, OptionSelected(option="Warszawa"))

        with pytest.raises(InvalidTransition):
            apply(session, AnswerReceived(question_id=2, correct_answer="2004"))

    def test_response_without_pending_rejected(self, session):
        with pytest.raises(InvalidTransition):
            apply(session, AnswerReceived(question_id=1, correct_answer="Warszawa"))
        with pytest.raises(InvalidTransition):
            apply(session, AnswerFailed(question_id=1, message="Błąd"))


class TestAcknowledgeAndNavigation:

    def test_acknowledge_advances(self, session):
        session = answer(session, "Warszawa", "Warszawa")

        assert session.phase is Phase.ANSWERING
        assert session.current_index == 1
        assert session.feedback is None

    def test_acknowledge_on_last_question_shows_summary(self, session):
        session = apply(session, Navigated(index=2))
        session = answer(session, "Wisła", "Wisła")

        assert session.phase is Phase.SUMMARY
        assert session.summary_visible is True
        assert session.current_index == 2

    def test_acknowledge_without_feedback_rejected(self, session):
        with pytest.raises(InvalidTransition):
            apply(session, FeedbackAcknowledged())

    def test_free_navigation(self, session):
        session = apply(session, Navigated(index=2))
        session = apply(session, Navigated(index=0))

        assert session.current_index == 0

    @pytest.mark.parametrize("index", [-1, 3, 10])
    def test_navigation_out_of_range(self, session, index):
        with pytest.raises(InvalidTransition):
            apply(session, Navigated(index=index))

    def test_navigation_while_loading_rejected(self, session):
        session = apply(session, OptionSelected(option="Warszawa"))

        with pytest.raises(SubmissionPending):
            apply(session, Navigated(index=1))

    def test_navigation_during_feedback_rejected(self, session):
        session = apply(session, OptionSelected(option="Warszawa"))
        session = apply(session, AnswerReceived(question_id=1, correct_answer="Warszawa"))

        with pytest.raises(InvalidTransition):
            apply(session, Navigated(index=2))

    def test_record_survives_navigation_in_any_order(self, session):
        session = answer(session, "Kraków", "Warszawa")
        first = session.records[1]
        for index in (2, 0, 1, 0):
            session = apply(session, Navigated(index=index))
            assert session.record_for(1) == first


class TestSummaryAndReset:

    def test_score_counts_correct_records(self, session):
        session = answer(session, "Warszawa", "Warszawa")
        session = answer(session, "2003", "2004")
        session = answer(session, "Wisła", "Wisła")

        assert session.phase is Phase.SUMMARY
        assert session.score == 2
        assert session.answered_count == 3
        assert 0 <= session.score <= session.total

    def test_summary_requested_with_unanswered_questions(self, session):
        session = answer(session, "Warszawa", "Warszawa")
        session = apply(session, SummaryRequested())

        assert session.phase is Phase.SUMMARY
        assert session.score == 1
        assert session.total == 3

    def test_summary_blocks_answering(self, session):
        session = apply(session, SummaryRequested())

        with pytest.raises(InvalidTransition):
            apply(session, OptionSelected(option="Warszawa"))

    def test_reset_restores_initial_state(self, session):
        fresh = session
        session = answer(session, "Warszawa", "Warszawa")
        session = answer(session, "2004", "2004")
        session = answer(session, "Odra", "Wisła")

        reset = apply(session, ResetRequested())

        assert reset == fresh
        assert reset.records == {}
        assert reset.current_index == 0
        assert reset.summary_visible is False

    def test_reset_while_loading_rejected(self, session):
        session = apply(session, OptionSelected(option="Warszawa"))

        with pytest.raises(SubmissionPending):
            apply(session, ResetRequested())

    def test_unknown_event(self, session):
        with pytest.raises(TypeError):
            apply(session, object())
