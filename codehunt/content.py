"""Fixed question, code and riddle datasets for phases 2-5.

Answer keys never leave this module except through ``full_items`` (used by
the phase 3 review payload) and the scoring helpers.
"""

from dataclasses import dataclass, field
from typing import Any

from codehunt.exceptions import NotFoundError, ValidationError

MCQ = "mcq"
TEXT = "text"


@dataclass(frozen=True)
class ContentItem:
    """One question/riddle definition with its private correctness key."""

    id: int
    kind: str = MCQ
    question: str | None = None
    code: str | None = None
    riddle: str | None = None
    options: tuple[str, ...] | None = None
    correct_answer: int | None = None
    accepted_answers: tuple[str, ...] = field(default_factory=tuple)

    def public_view(self, include_kind: bool = False) -> dict[str, Any]:
        data: dict[str, Any] = {"id": self.id}
        if include_kind:
            data["type"] = self.kind
        for key in ("code", "question", "riddle"):
            value = getattr(self, key)
            if value is not None:
                data[key] = value
        if self.options is not None:
            data["options"] = list(self.options)
        return data

    def full_view(self) -> dict[str, Any]:
        data = self.public_view()
        if self.correct_answer is not None:
            data["correctAnswer"] = self.correct_answer
        if self.accepted_answers:
            data["acceptedAnswers"] = list(self.accepted_answers)
        return data

    def is_correct(self, answer: Any) -> bool:
        if self.kind == MCQ:
            # JSON numbers only: 2 and 2.0 match index 2, "2" and True do not
            return (
                isinstance(answer, (int, float))
                and not isinstance(answer, bool)
                and answer == self.correct_answer
            )
        if isinstance(answer, bool) or not isinstance(answer, (str, int)):
            return False
        submitted = normalize_text(str(answer))
        return any(normalize_text(a) == submitted for a in self.accepted_answers)


def normalize_text(value: str) -> str:
    return value.strip().casefold()


PHASE2_QUESTIONS: tuple[ContentItem, ...] = (
    ContentItem(
        id=1,
        question="Intelligent tutoring systems mainly provide:",
        options=("Fixed lessons", "Only video lectures", "Personalized instruction", "Manual grading"),
        correct_answer=2,
    ),
    ContentItem(
        id=2,
        question="AI grading tools help teachers by:",
        options=("Automating assessment", "Removing exams", "Increasing workload", "Preventing feedback"),
        correct_answer=0,
    ),
    ContentItem(
        id=3,
        question="Which technology enables real-time lecture transcription?",
        options=("Computer Vision", "Blockchain", "Speech Recognition", "Data Mining"),
        correct_answer=2,
    ),
    ContentItem(
        id=4,
        question="Adaptive learning platforms adjust based on:",
        options=("Teacher salary", "School building size", "Internet speed", "Student performance"),
        correct_answer=3,
    ),
    ContentItem(
        id=5,
        question="AI can identify struggling students through:",
        options=("Random selection", "Learning analytics", "Manual counting", "Attendance guessing"),
        correct_answer=1,
    ),
    ContentItem(
        id=6,
        question="Chatbots in education are useful for:",
        options=(
            "Cancelling homework",
            "Closing libraries",
            "Answering student queries 24/7",
            "Replacing textbooks completely",
        ),
        correct_answer=2,
    ),
    ContentItem(
        id=7,
        question="Which is a risk of AI in education?",
        options=("Faster feedback", "Personalized study", "Better accessibility", "Algorithmic bias"),
        correct_answer=3,
    ),
    ContentItem(
        id=8,
        question="AI translation tools help students by:",
        options=("Removing teachers", "Limiting resources", "Blocking communication", "Breaking language barriers"),
        correct_answer=3,
    ),
    ContentItem(
        id=9,
        question="Automated scheduling systems optimize:",
        options=("Playground size", "Classroom paint", "Uniform design", "Timetable creation"),
        correct_answer=3,
    ),
    ContentItem(
        id=10,
        question="Gamified AI learning platforms improve:",
        options=("Student boredom", "Network latency", "Engagement and motivation", "Paper usage"),
        correct_answer=2,
    ),
)

_OUTPUT_QUESTION = "What will be the output of this code?"

PHASE3_QUESTIONS: tuple[ContentItem, ...] = (
    ContentItem(
        id=1,
        code=(
            "#include <stdio.h>\n"
            "int main() {\n"
            "    int x = 5, y = 2;\n"
            "    int result = x++ * --y;\n"
            '    printf("%d %d %d", result, x, y);\n'
            "    return 0;\n"
            "}"
        ),
        question=_OUTPUT_QUESTION,
        options=("5 6 1", "10 6 1", "5 5 2", "10 5 1"),
        correct_answer=0,
    ),
    ContentItem(
        id=2,
        code=(
            "#include <stdio.h>\n"
            "int main() {\n"
            "    int i = 0, count = 0;\n"
            "    while (i < 10) {\n"
            "        i += 3;\n"
            "        if (i == 9)\n"
            "            break;\n"
            "        count++;\n"
            "    }\n"
            '    printf("%d %d", count, i);\n'
            "    return 0;\n"
            "}"
        ),
        question=_OUTPUT_QUESTION,
        options=("3 9", "2 9", "3 12", "2 6"),
        correct_answer=1,
    ),
    ContentItem(
        id=3,
        code=(
            "#include <stdio.h>\n"
            "int main() {\n"
            "    int a = 12, b = 5;\n"
            '    printf("%d %d %d", a & b, a | b, a ^ b);\n'
            "    return 0;\n"
            "}"
        ),
        question=_OUTPUT_QUESTION,
        options=("4 13 9", "5 12 7", "4 12 9", "0 17 8"),
        correct_answer=0,
    ),
    ContentItem(
        id=4,
        code=(
            "#include <stdio.h>\n"
            "int main() {\n"
            "    int arr[2][3] = {{1, 2, 3}, {4, 5, 6}};\n"
            '    printf("%d ", arr[0][2] + arr[1][0]);\n'
            '    printf("%d", arr[1][2] - arr[0][1]);\n'
            "    return 0;\n"
            "}"
        ),
        question=_OUTPUT_QUESTION,
        options=("7 4", "5 3", "8 4", "6 5"),
        correct_answer=0,
    ),
    ContentItem(
        id=5,
        code=(
            "#include <stdio.h>\n"
            "int main() {\n"
            "    int a = 3, b = 7, c = 5;\n"
            "    int max = (a > b) ? a : (b > c) ? b : c;\n"
            "    int min = (a < b) ? (a < c) ? a : c : (b < c) ? b : c;\n"
            '    printf("%d %d", max, min);\n'
            "    return 0;\n"
            "}"
        ),
        question=_OUTPUT_QUESTION,
        options=("3 7", "5 3", "7 3", "7 5"),
        correct_answer=2,
    ),
)

PHASE4_CANONICAL_ANSWER = "positive sum: 22, count: 4"
PHASE4_NUMERIC_ALIAS = "22"

PHASE4_ITEMS: tuple[ContentItem, ...] = (
    ContentItem(
        id=1,
        kind=TEXT,
        code=(
            "#include <stdio.h>\n"
            "\n"
            "int main() {\n"
            "    int arr[6] = {4, -2, 7, -1, 8, 3};\n"
            "    int i, sum = 0, count = 0;\n"
            "\n"
            "    for (i = 0; i <= 6; i++) {\n"
            "        if (arr[i] > 0) {\n"
            "            sum += arr[i]\n"
            "            count++;\n"
            "        }\n"
            "    }\n"
            "\n"
            '    prinf("Positive sum: %d, Count: %d", sum, count);\n'
            "    return 0;\n"
            "}"
        ),
        question="Fix the bugs and enter the exact output of the corrected program.",
        accepted_answers=(PHASE4_CANONICAL_ANSWER, PHASE4_NUMERIC_ALIAS),
    ),
)

PHASE5_RIDDLES: tuple[ContentItem, ...] = (
    ContentItem(
        id=1,
        riddle=(
            "Study the maze below and find the ONLY path from S (Start) to E (Exit). "
            "Walls (#) block movement. You can only move Right (→) or Down (↓).\n\n"
            "    C0  C1  C2  C3  C4  C5\n"
            "R0: [S] [.] [#] [.] [.] [.]\n"
            "R1: [#] [.] [.] [#] [.] [#]\n"
            "R2: [.] [#] [.] [.] [.] [.]\n"
            "R3: [.] [.] [#] [#] [#] [.]\n"
            "R4: [#] [.] [.] [.] [#] [.]\n"
            "R5: [.] [#] [.] [.] [.] [E]\n\n"
            "Which sequence of moves leads from S to E?"
        ),
        options=(
            "→ ↓ → → ↓ → → ↓ ↓ ↓",
            "→ ↓ ↓ → → → ↓ → ↓ ↓",
            "→ ↓ → ↓ → → → ↓ ↓ ↓",
            "↓ → → ↓ → → → ↓ ↓ ↓",
        ),
        correct_answer=2,
    ),
    ContentItem(
        id=2,
        riddle=(
            "LOGICAL DEDUCTION: Each AI Learning Tool is assigned exactly one Educational Function.\n\n"
            "AI Learning Tools (Numbered):\n"
            "  1. LearnMate\n"
            "  2. QuizGen\n"
            "  3. SmartTutor\n"
            "  4. SkillTrack\n\n"
            "Educational Functions (Labeled):\n"
            "  A. Personalized Learning\n"
            "  B. Assessment & Quizzes\n"
            "  C. Progress Tracking\n"
            "  D. Doubt Resolution\n\n"
            "Clues:\n"
            "  • QuizGen (2) is assigned to Assessment & Quizzes (B)\n"
            "  • LearnMate (1) is assigned to Personalized Learning (A)\n"
            "  • SkillTrack (4) is NOT assigned to A or B\n"
            "  • SmartTutor (3) is assigned to Doubt Resolution (D)\n\n"
            "What is the correct mapping?"
        ),
        options=(
            "LearnMate→A, QuizGen→B, SmartTutor→C, SkillTrack→D",
            "LearnMate→B, QuizGen→A, SmartTutor→D, SkillTrack→C",
            "LearnMate→A, QuizGen→B, SmartTutor→D, SkillTrack→C",
            "LearnMate→D, QuizGen→B, SmartTutor→A, SkillTrack→C",
        ),
        correct_answer=2,
    ),
    ContentItem(
        id=3,
        kind=TEXT,
        riddle=(
            "PATTERN RECOGNITION\n\n"
            "Step 1 — Given Values:\n"
            "  A = 6,  B = 1,  C = 2,  D = 3\n\n"
            "Step 2 — Solve these expressions in order:\n"
            "  1) (2 × B)\n"
            "  2) (2 × A)\n"
            "  3) (2 × C)\n"
            "  4) (7 × B)\n"
            "  5) (2)\n\n"
            "Step 3 — Convert the obtained numbers using A1–Z26\n"
            "  (A=1, B=2, C=3 ... Z=26)\n"
            "  If a number is already a single digit, keep it as-is.\n\n"
            "What is the decoded keyword?"
        ),
        accepted_answers=("BLDG 2", "BLDG2"),
    ),
)

_CATALOG: dict[int, tuple[ContentItem, ...]] = {
    2: PHASE2_QUESTIONS,
    3: PHASE3_QUESTIONS,
    4: PHASE4_ITEMS,
    5: PHASE5_RIDDLES,
}


def _items(phase: int) -> tuple[ContentItem, ...]:
    try:
        return _CATALOG[phase]
    except KeyError:
        raise NotFoundError(f"Phase {phase} has no content") from None


def get_public_questions(phase: int) -> list[dict[str, Any]]:
    """Ordered items for ``phase`` with correctness keys stripped."""
    return [item.public_view(include_kind=phase == 5) for item in _items(phase)]


def full_items(phase: int) -> list[dict[str, Any]]:
    """Ordered items for ``phase`` including correctness keys."""
    return [item.full_view() for item in _items(phase)]


def items(phase: int) -> tuple[ContentItem, ...]:
    return _items(phase)


def get_item(phase: int, item_id: int) -> ContentItem:
    for item in _items(phase):
        if item.id == item_id:
            return item
    raise NotFoundError(f"Phase {phase} has no item {item_id}")


def item_at(phase: int, index: int) -> ContentItem:
    phase_items = _items(phase)
    if index < 0 or index >= len(phase_items):
        raise ValidationError("Invalid question index")
    return phase_items[index]


def check_single_answer(phase: int, item_id: int, submitted_answer: Any) -> bool:
    """Per-item feedback: strict index equality for MCQ, normalised match for text."""
    return get_item(phase, item_id).is_correct(submitted_answer)
