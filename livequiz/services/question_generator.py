"""Multiple-choice question generation backed by the Gemini API.

The remote model is a black box. Anything it returns is parsed leniently and
validated; when the call fails or the output is unusable, deterministic
placeholder questions are produced instead so quiz creation never fails.
"""
import json
import logging
import re

import requests
from flask import current_app

logger = logging.getLogger(__name__)

GEMINI_URL = "https://generativelanguage.googleapis.com/v1beta/models/{model}:generateContent"

POINTS_BY_DIFFICULTY = {"easy": 100, "medium": 200, "hard": 300}
TIME_LIMIT_BY_DIFFICULTY = {"easy": 30, "medium": 45, "hard": 60}


class GenerationError(Exception):
    pass


def build_prompt(category, difficulty, count):
    points = POINTS_BY_DIFFICULTY.get(difficulty, 100)
    time_limit = TIME_LIMIT_BY_DIFFICULTY.get(difficulty, 30)
    return f"""Generate {count} multiple choice quiz questions about {category} with {difficulty} difficulty level.

For each question, provide:
1. The question text
2. Four answer options
3. The correct answer index (0, 1, 2, or 3)
4. Points value (easy: 100, medium: 200, hard: 300)
5. Time limit in seconds (easy: 30, medium: 45, hard: 60)

Return ONLY a valid JSON array with this exact structure, no markdown, no extra text:
[
  {{
    "question": "Question text here?",
    "options": ["Option 1", "Option 2", "Option 3", "Option 4"],
    "correctAnswer": 0,
    "points": {points},
    "timeLimit": {time_limit}
  }}
]

Important:
- correctAnswer must be an integer (0, 1, 2, or 3) representing the index of the correct option
- Return ONLY the JSON array, no markdown formatting, no code blocks
- Make sure questions are accurate and well-written"""


def parse_questions(text):
    """Extract a JSON array from raw model output."""
    try:
        return json.loads(text)
    except (TypeError, ValueError):
        pass

    fenced = re.search(r"```(?:json)?\s*(\[.*?\])\s*```", text or "", re.DOTALL)
    if fenced:
        try:
            return json.loads(fenced.group(1))
        except ValueError:
            pass

    bare = re.search(r"\[.*\]", text or "", re.DOTALL)
    if bare:
        try:
            return json.loads(bare.group(0))
        except ValueError:
            pass

    raise GenerationError("Failed to parse AI response")


def _as_int(value):
    if isinstance(value, bool):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def normalize_question(raw, difficulty):
    if not isinstance(raw, dict):
        return raw
    correct = raw.get("correctAnswer", raw.get("correct_answer", raw.get("correctAnswerIndex")))
    return {
        "question": raw.get("question"),
        "options": raw.get("options"),
        "correctAnswer": _as_int(correct),
        "points": _as_int(raw.get("points")) or POINTS_BY_DIFFICULTY.get(difficulty, 100),
        "timeLimit": _as_int(raw.get("timeLimit")) or TIME_LIMIT_BY_DIFFICULTY.get(difficulty, 30),
    }


def is_valid_question(q):
    if not isinstance(q, dict):
        return False
    text = q.get("question")
    options = q.get("options")
    correct = q.get("correctAnswer")
    points = q.get("points")
    time_limit = q.get("timeLimit")
    return (
        isinstance(text, str) and bool(text.strip())
        and isinstance(options, list)
        and 2 <= len(options) <= 4
        and all(isinstance(opt, str) and opt for opt in options)
        and isinstance(correct, int) and not isinstance(correct, bool)
        and 0 <= correct < len(options)
        and isinstance(points, int) and points > 0
        and isinstance(time_limit, int) and time_limit > 0
    )


def validate_questions(questions):
    if not isinstance(questions, list) or not questions:
        return False
    for index, q in enumerate(questions):
        if not is_valid_question(q):
            logger.warning("Generated question %s failed validation: %r", index + 1, q)
            return False
    return True


def fallback_questions(category, difficulty, count, start=0):
    return [
        {
            "question": f"Sample {category} question {i + 1} ({difficulty} level)?",
            "options": ["Option A", "Option B", "Option C", "Option D"],
            "correctAnswer": 0,
            "points": POINTS_BY_DIFFICULTY.get(difficulty, 100),
            "timeLimit": TIME_LIMIT_BY_DIFFICULTY.get(difficulty, 30),
        }
        for i in range(start, count)
    ]


def request_questions(category, difficulty, count):
    cfg = current_app.config
    api_key = cfg.get("GEMINI_API_KEY")
    if not api_key:
        raise GenerationError("GEMINI_API_KEY is not configured")

    url = GEMINI_URL.format(model=cfg.get("GEMINI_MODEL", "gemini-2.5-flash"))
    body = {
        "contents": [{"parts": [{"text": build_prompt(category, difficulty, count)}]}],
        "generationConfig": {"temperature": 0.7, "maxOutputTokens": 2000},
    }
    response = requests.post(
        url,
        params={"key": api_key},
        json=body,
        timeout=cfg.get("GEMINI_TIMEOUT", 30),
    )
    response.raise_for_status()
    try:
        text = response.json()["candidates"][0]["content"]["parts"][0]["text"]
    except (KeyError, IndexError, TypeError, ValueError) as e:
        raise GenerationError(f"Unexpected Gemini response shape: {e}")
    return parse_questions(text)


def generate_questions(category, difficulty, count):
    """Return exactly ``count`` valid questions for the category/difficulty."""
    try:
        raw = request_questions(category, difficulty, count)
        if not isinstance(raw, list):
            raise GenerationError("AI response is not a list")
        questions = [normalize_question(q, difficulty) for q in raw]
        if not validate_questions(questions):
            raise GenerationError("AI generated invalid questions")
    except (requests.RequestException, GenerationError) as e:
        logger.warning("Question generation failed (%s); using placeholder questions", e)
        return fallback_questions(category, difficulty, count)

    questions = questions[:count]
    if len(questions) < count:
        logger.info("AI returned %s of %s questions; padding with placeholders", len(questions), count)
        questions.extend(fallback_questions(category, difficulty, count, start=len(questions)))
    logger.info("Generated %s %s/%s questions", len(questions), category, difficulty)
    return questions
