"""
Quiz and learning module endpoints.
"""
from fastapi import APIRouter, Depends, HTTPException, status

from astralchronos.api.dependencies import get_content
from astralchronos.content.repository import ContentRepository
from astralchronos.models.schemas import LearningCard, QuizData, QuizDetail, QuizResult, QuizSubmission
from astralchronos.services.quiz import public_quiz, score_quiz

router = APIRouter(prefix="/api", tags=["quiz"])


def _quiz_or_404(content: ContentRepository, quiz_id: str):
    quiz = content.get_quiz(quiz_id)
    if quiz is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Quiz not found: {quiz_id}")
    return quiz


@router.get(
    "/quiz-data",
    response_model=QuizData,
    summary="Quizzes and learning cards",
    description="Quiz cards without their answer keys and the learning module cards."
)
async def get_quiz_data(content: ContentRepository = Depends(get_content)):
    return content.get_quiz_data()


@router.get("/quiz/{quiz_id}", response_model=QuizDetail, summary="Quiz questions")
async def get_quiz(quiz_id: str, content: ContentRepository = Depends(get_content)):
    return public_quiz(_quiz_or_404(content, quiz_id))


@router.post("/quiz/{quiz_id}/score", response_model=QuizResult, summary="Score quiz answers")
async def submit_quiz(
    quiz_id: str,
    submission: QuizSubmission,
    content: ContentRepository = Depends(get_content),
):
    return score_quiz(_quiz_or_404(content, quiz_id), submission.answers)


@router.get("/learning/{topic}", response_model=LearningCard, summary="Learning module")
async def get_learning_card(topic: str, content: ContentRepository = Depends(get_content)):
    card = content.get_learning_card(topic)
    if card is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Learning module not found: {topic}")
    return card
