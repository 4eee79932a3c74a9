import time
from collections import namedtuple
from dataclasses import asdict

from django.conf import settings

from .ai import AnalysisResult

Question = namedtuple("Question", ["id", "text", "options"])

QUESTIONS = (
    Question(1, "What is your total estimated debt load?",
             ("Under $10k", "$10k - $50k", "$50k - $100k", "Over $100k (I'm drowning)")),
    Question(2, "Which debt type is your absolute worst nightmare right now?",
             ("Mortgage / Foreclosure threats", "Car Repossession / Auto Loans",
              "Credit Cards & Personal Loans", "Court Fines / Traffic Tickets / Admin")),
    Question(3, "Have any of these accounts been sold to 3rd party junk debt buyers?",
             ("No, still with original creditor", "Yes, getting calls daily",
              "Yes, they are threatening legal action", "I'm not sure")),
    Question(4, "Are there any 'Governmental' or 'Administrative' issues attached?",
             ("No", "Yes, Taxes/IRS", "Yes, Child Support/Alimony", "Yes, Court Fines/Tickets")),
    Question(5, "Are you currently facing wage garnishment or bank levies?",
             ("No", "Yes, it's active", "They are threatening it", "I'm self-employed / 1099")),
    Question(6, "What is your current credit score range?",
             ("Below 500", "500 - 599", "600 - 679", "680+ but high utilization")),
    Question(7, "How many inquiries do you have on your report?",
             ("0-2", "3-5", "6-10", "10+ (Too many to count)")),
    Question(8, "What is your primary objective?",
             ("Buy a Home / Investment Property", "Start a Business / Get Funding",
              "Stop the Harassment / Peace of Mind", "Total Financial Reset / Clean Slate")),
)

QUESTIONS_BY_ID = {q.id: q for q in QUESTIONS}

ANSWERS_KEY = "quiz_answers"
ANALYSIS_KEY = "quiz_analysis"
ANALYSIS_STATUS_KEY = "quiz_analysis_status"
STARTED_AT_KEY = "quiz_analysis_started_at"


class QuizError(ValueError):
    pass


class QuizRun:
    """One pass through the quiz, kept in the visitor's Django session."""

    def __init__(self, session):
        self.session = session

    @property
    def answers(self):
        return list(self.session.get(ANSWERS_KEY, []))

    @property
    def current_index(self):
        return len(self.answers)

    @property
    def is_complete(self):
        return self.current_index >= len(QUESTIONS)

    @property
    def current_question(self):
        if self.is_complete:
            return None
        return QUESTIONS[self.current_index]

    def start(self):
        self.session[ANSWERS_KEY] = []
        for key in (ANALYSIS_KEY, ANALYSIS_STATUS_KEY, STARTED_AT_KEY):
            self.session.pop(key, None)

    def record(self, answer):
        question = self.current_question
        if question is None:
            raise QuizError("The quiz is already complete")
        if answer not in question.options:
            raise QuizError(f"{answer!r} is not an option for question {question.id}")

        answers = self.answers
        answers.append({"question_id": question.id, "answer": answer})
        self.session[ANSWERS_KEY] = answers
        return question

    def formatted_answers(self):
        return [
            {"question": QUESTIONS_BY_ID[a["question_id"]].text, "answer": a["answer"]}
            for a in self.answers
        ]

    def store_outcome(self, outcome, now=None):
        self.session[ANALYSIS_KEY] = asdict(outcome.result)
        self.session[ANALYSIS_STATUS_KEY] = outcome.status
        self.session[STARTED_AT_KEY] = now if now is not None else time.time()

    @property
    def result(self):
        data = self.session.get(ANALYSIS_KEY)
        if not data:
            return None
        return AnalysisResult(**data)

    @property
    def analysis_status(self):
        return self.session.get(ANALYSIS_STATUS_KEY)

    def seconds_until_reveal(self, now=None):
        """How much longer the analyzing screen has to stay up."""
        started = self.session.get(STARTED_AT_KEY)
        if started is None:
            return 0.0
        now = now if now is not None else time.time()
        remaining = settings.ANALYSIS_MIN_DISPLAY_SECONDS - (now - started)
        return max(0.0, remaining)
