"""
Quiz scoring.
"""

from typing import List, Optional

from astralchronos.models.schemas import (
    PublicQuestion,
    QuestionResult,
    QuizCard,
    QuizDetail,
    QuizResult,
)

PASS_PERCENTAGE = 70


def score_percentage(correct: int, total: int) -> int:
    """Rounded percentage of correct answers, 0 for an empty quiz."""
    if total <= 0:
        return 0
    return round(correct / total * 100)


def score_quiz(quiz: QuizCard, answers: List[Optional[int]]) -> QuizResult:
    """
    Score answers against a quiz's answer key.

    Answers are matched by position. A missing answer counts as wrong and
    extra answers are ignored.
    """
    results = []
    for index, question in enumerate(quiz.items):
        given = answers[index] if index < len(answers) else None
        results.append(QuestionResult(
            index=index,
            correct=given == question.answer,
            given=given,
            expected=question.answer,
        ))

    correct = sum(1 for result in results if result.correct)
    total = len(results)
    percentage = score_percentage(correct, total)

    return QuizResult(
        quiz_id=quiz.id,
        correct=correct,
        total=total,
        percentage=percentage,
        passed=percentage >= PASS_PERCENTAGE,
        results=results,
    )


def public_quiz(quiz: QuizCard) -> QuizDetail:
    """A quiz with its questions, answer key withheld."""
    return QuizDetail(
        id=quiz.id,
        title=quiz.title,
        emoji=quiz.emoji,
        description=quiz.description,
        duration=quiz.duration,
        image=quiz.image,
        questions=[
            PublicQuestion(index=index, question=item.question, options=item.options)
            for index, item in enumerate(quiz.items)
        ],
    )
