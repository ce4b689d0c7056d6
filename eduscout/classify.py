"""
Classify module for the EduScout pipeline.

Asks an OpenAI chat model to rate a project's educational potential and
turns the JSON answer into an AnalysisResult.

The model output is untrusted: it is parsed into plain Python data first
and every field is checked before a result is built. Anything that goes
wrong after the credential check (API errors, malformed JSON, invalid
fields) produces a degraded result instead of an exception.
"""

import json
from typing import Any, List, Optional

from openai import OpenAI

from eduscout.models import AnalysisResult, Category
from eduscout.utils import get_env_var, get_logger, truncate


# Module logger
logger = get_logger("classify")

DEFAULT_MODEL = "gpt-4-turbo-preview"
API_KEY_ENV_VAR = "OPENAI_API_KEY"
MODEL_ENV_VAR = "OPENAI_MODEL"

MISSING_KEY_MESSAGE = (
    f"OpenAI API key is not configured. "
    f"Set the {API_KEY_ENV_VAR} environment variable."
)

REQUIRED_FIELDS = ("suitabilityScore", "category", "educationalPlan", "recommendations")

PROMPT_TEMPLATE = """
Analyze this EU project for educational potential:
Name: {name}
Description: {description}

Please evaluate:
1. Suitability for educational use (score 0-100)
2. Target audience (school/adult/both, or unsuitable if it has no educational use)
3. Create a detailed educational implementation plan
4. Provide specific recommendations for implementation

Respond with a single JSON object with exactly these fields:
{{
  "suitabilityScore": integer from 0 to 100,
  "category": "school" | "adult" | "both" | "unsuitable",
  "educationalPlan": "detailed plan...",
  "recommendations": ["rec1", "rec2", ...]
}}
"""


class ConfigurationError(Exception):
    """Raised when the classifier has no API credential."""


class AnalysisValidationError(ValueError):
    """Raised when a model response does not match the expected shape."""


def build_prompt(name: str, description: str) -> str:
    """Fill the analysis prompt with a project's name and description."""
    return PROMPT_TEMPLATE.format(name=name, description=description)


def _coerce_score(value: Any) -> int:
    # bool is an int subclass, reject it explicitly
    if isinstance(value, bool):
        raise AnalysisValidationError(f"suitabilityScore must be a number, got {value!r}")
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    if not isinstance(value, int):
        raise AnalysisValidationError(f"suitabilityScore must be an integer, got {value!r}")
    if not 0 <= value <= 100:
        raise AnalysisValidationError(f"suitabilityScore out of range: {value}")
    return value


def _coerce_category(value: Any) -> Category:
    if not isinstance(value, str):
        raise AnalysisValidationError(f"category must be a string, got {value!r}")
    try:
        return Category(value.strip().lower())
    except ValueError:
        raise AnalysisValidationError(f"Unknown category: {value!r}") from None


def _coerce_recommendations(value: Any) -> List[str]:
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        raise AnalysisValidationError("recommendations must be a list of strings")
    return list(value)


def validate_analysis(data: Any) -> AnalysisResult:
    """
    Validate parsed model output and build an AnalysisResult.

    Args:
        data: Result of ``json.loads`` on the model's answer.

    Returns:
        AnalysisResult carrying the response's values unchanged.

    Raises:
        AnalysisValidationError: If a field is missing or has the wrong
            type, the score is outside 0-100, or the category is unknown.
    """
    if not isinstance(data, dict):
        raise AnalysisValidationError(f"Expected a JSON object, got {type(data).__name__}")

    missing = [name for name in REQUIRED_FIELDS if name not in data]
    if missing:
        raise AnalysisValidationError(f"Missing field(s): {', '.join(missing)}")

    plan = data["educationalPlan"]
    if not isinstance(plan, str):
        raise AnalysisValidationError("educationalPlan must be a string")

    return AnalysisResult(
        suitability_score=_coerce_score(data["suitabilityScore"]),
        category=_coerce_category(data["category"]),
        educational_plan=plan,
        recommendations=_coerce_recommendations(data["recommendations"]),
    )


def create_openai_client(api_key: Optional[str]) -> Optional[OpenAI]:
    """Build an OpenAI client, or return None when no key is given."""
    if not api_key:
        return None
    return OpenAI(api_key=api_key)


class SuitabilityClassifier:
    """Rates projects for educational use with an OpenAI chat model."""

    def __init__(self, client: Optional[OpenAI], model: str = DEFAULT_MODEL) -> None:
        self.client = client
        self.model = model

    @classmethod
    def from_env(cls) -> "SuitabilityClassifier":
        """Build a classifier from OPENAI_API_KEY and OPENAI_MODEL."""
        api_key = get_env_var(API_KEY_ENV_VAR, required=False)
        model = get_env_var(MODEL_ENV_VAR, required=False, default=DEFAULT_MODEL)

        if api_key is None:
            logger.warning(MISSING_KEY_MESSAGE)

        return cls(create_openai_client(api_key), model=model or DEFAULT_MODEL)

    @property
    def is_configured(self) -> bool:
        return self.client is not None

    def ensure_configured(self) -> None:
        """
        Raises:
            ConfigurationError: If no OpenAI client was supplied.
        """
        if self.client is None:
            raise ConfigurationError(MISSING_KEY_MESSAGE)

    def _complete(self, prompt: str) -> str:
        completion = self.client.chat.completions.create(
            model=self.model,
            messages=[{"role": "user", "content": prompt}],
            response_format={"type": "json_object"},
        )
        return completion.choices[0].message.content or "{}"

    def classify(self, name: str, description: str) -> AnalysisResult:
        """
        Classify a project's educational suitability.

        Args:
            name: Project name.
            description: Project description.

        Returns:
            AnalysisResult with the model's verdict, or a degraded result
            (score 0, category unsuitable, error text as plan) on failure.

        Raises:
            ConfigurationError: If no OpenAI client is configured.
        """
        self.ensure_configured()

        logger.info(f"Classifying project '{truncate(name)}' with {self.model}")
        prompt = build_prompt(name, description)

        try:
            text = self._complete(prompt)
        except Exception as e:
            logger.error(f"Completion request failed for '{truncate(name)}': {e}")
            return AnalysisResult.degraded(str(e))

        try:
            result = validate_analysis(json.loads(text))
        except (json.JSONDecodeError, RecursionError) as e:
            logger.error(f"Malformed JSON for '{truncate(name)}': {e}. Raw: {truncate(text, 120)}")
            return AnalysisResult.degraded(f"Invalid JSON in analysis response: {e}")
        except AnalysisValidationError as e:
            logger.error(f"Invalid analysis for '{truncate(name)}': {e}")
            return AnalysisResult.degraded(f"Invalid analysis response: {e}")

        logger.info(
            f"Classified '{truncate(name)}': "
            f"{result.category.value} ({result.suitability_score}/100)"
        )
        return result
