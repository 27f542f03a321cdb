from __future__ import annotations


class QuizError(Exception):
    """Base for every error raised by the quiz core. `code` is a stable machine-readable tag."""
    code = "quiz_error"

    def __init__(self, message: str | None = None):
        super().__init__(message or self.code)
        self.message = message or self.code


# ---------- validation: bad or missing input, never retried ----------

class ValidationError(QuizError):
    code = "invalid_input"

class InvalidCategory(ValidationError):
    code = "invalid_category"

class EmptyAnswerSet(ValidationError):
    code = "empty_answer_set"

class UnsupportedImage(ValidationError):
    code = "unsupported_image"


class NotFound(QuizError):
    code = "not_found"


# ---------- conflicts with current state ----------

class Conflict(QuizError):
    code = "conflict"

class DuplicateRegistration(Conflict):
    code = "duplicate_registration"

class NoActiveChallenge(Conflict):
    code = "no_active_challenge"

class ParticipantNotApproved(Conflict):
    code = "participant_not_approved"


class StorageError(QuizError):
    code = "storage_error"
