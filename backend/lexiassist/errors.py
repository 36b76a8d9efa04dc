"""error kinds raised by services and routers.
each maps onto the {message, error, code} JSON body in main._register_error_handlers"""


class AppError(Exception):
    status_code = 500
    code = "server_error"

    def __init__(self, message: str, error: str | None = None):
        super().__init__(message)
        self.message = message
        self.error = error
        # set by a router to name the operation that failed
        self.context: str | None = None

    def to_body(self) -> dict:
        if self.context:
            return {"message": self.context, "error": self.message, "code": self.code}
        return {"message": self.message, "error": self.error, "code": self.code}


class NotFoundError(AppError):
    """record is absent or owned by another lawyer; the two are never distinguished"""

    status_code = 404
    code = "not_found"

    def __init__(self, resource: str):
        super().__init__(f"{resource} not found")


class AIError(AppError):
    """base for failures talking to the AI-completion service"""


class AIConfigurationError(AIError):
    status_code = 500
    code = "ai_configuration"

    def __init__(self):
        super().__init__("Server configuration error: Missing API key.")


class AIRequestError(AIError):
    status_code = 502
    code = "ai_request_failed"


class AITimeoutError(AIError):
    status_code = 504
    code = "ai_timeout"


class AIResponseFormatError(AIError):
    """the model answered, but not in the shape that was asked for"""

    status_code = 502
    code = "ai_response_format"

    def __init__(self, reason: str = ""):
        super().__init__("AI assistant returned an invalid format. Please try again.")
        self.reason = reason
