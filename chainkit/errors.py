"""Exception hierarchy for chainkit.

Remote-service failures derive from :class:`APIError`; OpenAI HTTP errors are
mapped from status code + response body by :func:`openai_error_from_status`
so callers can catch e.g. ``RateLimitExceededError`` specifically.
"""

from __future__ import annotations


class ChainkitError(Exception):
    """Base class for every error raised by chainkit."""


class APIError(ChainkitError):
    """A call to a remote service (OpenAI, AWS) failed."""


# ── OpenAI ──────────────────────────────────────────────────────────


class OpenAIError(APIError):
    """An OpenAI API call failed with an HTTP status."""

    summary = "OpenAI API error"

    def __init__(self, status_code: int | None, detail: str):
        self.status_code = status_code
        self.detail = detail
        super().__init__(f"Error code {status_code}: {self.summary} - {detail}")


class InvalidAuthenticationError(OpenAIError):
    summary = "Invalid Authentication"


class IncorrectApiKeyError(OpenAIError):
    summary = "Incorrect API key provided"


class NoOrganizationMembershipError(OpenAIError):
    summary = "You must be a member of an organization to use the API"


class RateLimitExceededError(OpenAIError):
    summary = "Rate limit reached for requests"


class QuotaExceededError(OpenAIError):
    summary = "You exceeded your current quota, please check your plan and billing details"


class OpenAIServerError(OpenAIError):
    summary = "The server had an error while processing your request"


class EngineOverloadedError(OpenAIError):
    summary = "The engine is currently overloaded, please try again later"


class UnknownOpenAIError(OpenAIError):
    summary = "Unknown error"


class GenericOpenAIError(OpenAIError):
    """Failure with no usable HTTP status (transport error, empty payload…)."""

    def __init__(self, detail: str):
        self.status_code = None
        self.detail = detail
        Exception.__init__(self, f"An unknown error occurred with the OpenAI API: {detail}")


def openai_error_from_status(code: int, detail: str) -> OpenAIError:
    """Map an HTTP status and response body to the matching ``OpenAIError``."""
    if code == 401:
        if "Incorrect API key" in detail:
            return IncorrectApiKeyError(code, detail)
        if "You must be a member of an organization" in detail:
            return NoOrganizationMembershipError(code, detail)
        return InvalidAuthenticationError(code, detail)
    if code == 429:
        if "exceeded your current quota" in detail:
            return QuotaExceededError(code, detail)
        return RateLimitExceededError(code, detail)
    if code == 500:
        return OpenAIServerError(code, detail)
    if code == 503:
        return EngineOverloadedError(code, detail)
    return UnknownOpenAIError(code, detail)


# ── AWS ─────────────────────────────────────────────────────────────


class AWSError(APIError):
    """An AWS call failed."""

    summary = ""

    def __init__(self, msg: str):
        self.msg = msg
        prefix = f"Error: {self.summary} - " if self.summary else "Error: "
        super().__init__(f"{prefix}{msg}")


class AWSInvalidAuthenticationError(AWSError):
    summary = "Invalid Authentication"


class AWSServerError(AWSError):
    summary = "Server Error"


class AWSGenericError(AWSError):
    pass


class MalformedUriError(AWSError):
    summary = "Malformed URI"


# ── Prompts ─────────────────────────────────────────────────────────


class PromptError(ChainkitError):
    """A prompt template could not be rendered."""


class PromptRenderError(PromptError):
    def __init__(self, msg: str):
        super().__init__(f"Render Error: {msg}")


class DataNotProvidedError(PromptError):
    def __init__(self, msg: str):
        super().__init__(f"Data Not Provided: {msg}")


# ── Agents ──────────────────────────────────────────────────────────


class AgentError(ChainkitError):
    """The agent loop could not complete."""


class OutputParserError(AgentError):
    """The LLM output could not be parsed into an action or a final answer."""

    def __init__(self, msg: str, llm_output: str = ""):
        self.llm_output = llm_output
        super().__init__(msg)


class ToolNotFoundError(AgentError):
    def __init__(self, tool_name: str):
        self.tool_name = tool_name
        super().__init__(f"Tool not found: {tool_name}")


class MaxIterationsError(AgentError):
    def __init__(self, max_iterations: int):
        self.max_iterations = max_iterations
        super().__init__(f"Max iterations reached ({max_iterations})")


class AgentBuildError(AgentError):
    """A required component was not provided to an agent builder."""
