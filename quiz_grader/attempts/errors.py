class AttemptError(Exception):
    """Base class for request-level failures around quiz attempts."""

    status_code = 400


class QuizNotFoundError(AttemptError):
    status_code = 404

    def __init__(self, quiz_id: str):
        self.quiz_id = quiz_id
        super().__init__(f"Quiz not found: {quiz_id}")


class QuizNotPublishedError(AttemptError):
    status_code = 403

    def __init__(self, quiz_id: str):
        self.quiz_id = quiz_id
        super().__init__(f"Quiz is not published: {quiz_id}")


class MaxAttemptsExceededError(AttemptError):
    status_code = 403

    def __init__(self, quiz_id: str, max_attempts: int):
        self.quiz_id = quiz_id
        self.max_attempts = max_attempts
        super().__init__(f"Maximum attempts reached ({max_attempts}) for quiz {quiz_id}")


class AttemptNotFoundError(AttemptError):
    status_code = 404

    def __init__(self, attempt_id: str):
        self.attempt_id = attempt_id
        super().__init__(f"Attempt not found: {attempt_id}")
