# brava/flows/base.py
"""
Prompt-template flows: validate input, render the prompt, ask the model for
JSON, validate the answer.

A flow is declared once with its schemas and a Jinja2 template and then called
like a function. One corrective retry is made when the model's JSON does not
parse or does not match the output schema.
"""
import json
import logging
import re
from typing import Any, Generic, Type, TypeVar

from jinja2 import Environment, StrictUndefined
from pydantic import BaseModel, ValidationError

from brava.brand.context import BRAND_CONTEXT
from brava.llm.provider import ProviderError, call_llm_text

logger = logging.getLogger(__name__)

I = TypeVar("I", bound=BaseModel)
O = TypeVar("O", bound=BaseModel)

_env = Environment(undefined=StrictUndefined, trim_blocks=True, lstrip_blocks=True, autoescape=False)


class FlowError(RuntimeError):
    pass


class FlowInputError(ValueError):
    pass


def _bc():
    return (BRAND_CONTEXT or "").strip()


def _strip_fences(text: str) -> str:
    s = (text or "").strip()
    s = re.sub(r"^```[a-zA-Z]*\s*", "", s)
    s = re.sub(r"\s*```$", "", s)
    return s.strip()


def _try_parse_json(text: str):
    try:
        return json.loads(_strip_fences(text))
    except (TypeError, ValueError):
        return None


def _output_shape(model: Type[BaseModel]) -> str:
    return json.dumps(model.model_json_schema(), indent=2)


class Flow(Generic[I, O]):
    def __init__(self, name: str, input_schema: Type[I], output_schema: Type[O], prompt: str, model: str | None = None):
        self.name = name
        self.input_schema = input_schema
        self.output_schema = output_schema
        self.template = _env.from_string(prompt)
        self.model = model

    def validate_input(self, data: Any) -> I:
        if isinstance(data, self.input_schema):
            return data
        try:
            return self.input_schema.model_validate(data)
        except ValidationError as e:
            raise FlowInputError(f"{self.name}: invalid input: {e}") from e

    def render(self, data: I) -> str:
        return self.template.render(**self.prepare(data))

    def prepare(self, data: I) -> dict:
        """Template variables; flows override this to add defaults or derived values."""
        return data.model_dump()

    def system_prompt(self, data: I) -> str:
        return (
            f"{_bc()}\n\n{self.render(data)}\n\n"
            "Return ONLY valid JSON (no extra text) matching this JSON schema:\n"
            f"{_output_shape(self.output_schema)}\n"
        )

    def _parse(self, text: str) -> O | None:
        parsed = _try_parse_json(text)
        if not isinstance(parsed, dict):
            return None
        try:
            return self.output_schema.model_validate(parsed)
        except ValidationError as e:
            logger.warning("%s: output failed validation: %s", self.name, e)
            return None

    def __call__(self, data: Any) -> O:
        payload = self.validate_input(data)
        prompt = self.system_prompt(payload)

        try:
            # Step 1: ask for JSON
            answer = call_llm_text(prompt, "Return only the JSON object. No extra text.", model=self.model, json_mode=True)
            result = self._parse(answer)

            # Step 2: one corrective pass
            if result is None:
                logger.info("%s: invalid JSON from model, asking for a fix", self.name)
                fix_prompt = (
                    "You returned invalid or incomplete JSON. "
                    "Fix it and return ONLY valid JSON with exactly the keys in the schema above."
                )
                fixed = call_llm_text(
                    prompt + "\n\n" + fix_prompt,
                    "Return only the corrected JSON. No extra text.",
                    model=self.model,
                    json_mode=True,
                )
                result = self._parse(fixed)
        except ProviderError as e:
            raise FlowError(f"{self.name}: model unavailable: {e}") from e

        if result is None:
            raise FlowError(f"{self.name}: model output did not match schema")
        return self.finalize(payload, result)

    def finalize(self, data: I, result: O) -> O:
        return result


def safe_run(flow: Flow, data: Any):
    """
    Run a flow without raising; returns (output, unavailable_flag).
    FlowInputError still raises so callers can answer 400.
    """
    payload = flow.validate_input(data)
    try:
        return flow(payload), False
    except FlowError as e:
        logger.error("Flow %s failed: %s", flow.name, e)
        return None, True
