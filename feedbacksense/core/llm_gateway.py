"""Gateway between analysis workflows and litellm chat completions.

Each workflow (``classify_feedback``, ``synthesize_report``) resolves its own
model, temperature and provider credentials from configuration. Calls are
made through a tenacity ``Retrying`` loop whose attempt count comes from the
workflow's ``max_attempts`` (one attempt unless configured otherwise).

Updates:
    v0.1.0 - 2026-10-18 - Per-workflow attempt limits and JSON response formats.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from os import environ
from time import perf_counter
from typing import Any, Dict, List, Mapping, Sequence

import litellm
from litellm import completion
from tenacity import Retrying, stop_after_attempt, wait_exponential
from tenacity.wait import wait_base

from ..services.config_service import ConfigService, WorkflowModelConfig

litellm.drop_params = True

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class CompletionRequest:
    """Fully resolved keyword arguments for one ``completion`` call."""

    workflow: str
    messages: List[Dict[str, str]]
    params: Dict[str, Any] = field(default_factory=dict)

    @property
    def model(self) -> str | None:
        return self.params.get("model")


def _response_mapping(raw_response: Any) -> Mapping[str, Any] | None:
    if isinstance(raw_response, Mapping):
        return raw_response
    # litellm returns pydantic-style ModelResponse objects.
    for dumper in ("model_dump", "dict"):
        method = getattr(raw_response, dumper, None)
        if callable(method):
            dumped = method()
            if isinstance(dumped, Mapping):
                return dumped
    return None


class LLMGateway:
    """Dispatches prompts to the model configured for each workflow."""

    DEFAULT_TIMEOUT_SECONDS = 30

    class LLMInvocationError(RuntimeError):
        """Raised when a completion cannot be obtained or read."""

    def __init__(
        self,
        config_service: ConfigService,
        *,
        wait: wait_base | None = None,
    ) -> None:
        """
        Args:
            config_service (ConfigService): Source of workflow and provider settings.
            wait (wait_base | None): Pause between attempts for workflows that
                allow more than one. Defaults to exponential back-off.
        """

        self._config_service = config_service
        self._wait = wait if wait is not None else wait_exponential(multiplier=1, min=2, max=10)

    def invoke(
        self,
        workflow: str,
        prompt: str,
        *,
        system_prompt: str | None = None,
        **overrides: Any,
    ) -> str:
        """Send ``prompt`` through ``workflow`` and return the reply text.

        Args:
            workflow (str): Workflow name declared in ``models.yaml``.
            prompt (str): User message content.
            system_prompt (str | None): Optional system message.
            **overrides: Extra ``completion`` arguments, e.g. ``response_format``.

        Returns:
            str: Text of the first choice; empty when the model sent no content.

        Raises:
            RuntimeError: If the provider's API key environment variable is unset.
            LLMGateway.LLMInvocationError: If the call fails on every permitted
                attempt or the reply has no readable message.
        """

        config = self._config_service.get_workflow_model_config(workflow)
        request = self._prepare(config, prompt, system_prompt, overrides)

        started = perf_counter()
        try:
            raw_response = self._call_with_policy(config, request)
        except Exception as exc:
            logger.error(
                "LLM invocation failed",
                extra={"workflow": workflow, "model": request.model, "error": str(exc)},
            )
            raise self.LLMInvocationError(
                f"LLM invocation failed for workflow '{workflow}': {exc}"
            ) from exc

        logger.debug(
            "LLM invocation finished",
            extra={
                "workflow": workflow,
                "model": request.model,
                "duration_ms": round((perf_counter() - started) * 1000, 2),
            },
        )
        return self._reply_text(raw_response)

    def _prepare(
        self,
        config: WorkflowModelConfig,
        prompt: str,
        system_prompt: str | None,
        overrides: Mapping[str, Any],
    ) -> CompletionRequest:
        messages = [{"role": "user", "content": prompt}]
        if system_prompt:
            messages.insert(0, {"role": "system", "content": system_prompt})

        params: Dict[str, Any] = {
            "model": config.model,
            "timeout": self.DEFAULT_TIMEOUT_SECONDS,
        }
        for key in ("temperature", "max_tokens"):
            value = getattr(config, key)
            if value is not None:
                params[key] = value
        if config.provider:
            params.update(self._provider_params(config.provider))
        params.update(overrides)
        return CompletionRequest(workflow=config.workflow, messages=messages, params=params)

    def _provider_params(self, provider_name: str) -> Dict[str, Any]:
        """Translate a ``providers.yaml`` entry into ``completion`` arguments.

        Raises:
            RuntimeError: If ``api_key_env`` names an unset environment variable.
        """

        settings = dict(self._config_service.providers.get(provider_name, {}))
        key_variable = settings.pop("api_key_env", None)
        routed_as = settings.pop("litellm_provider", None) or provider_name

        params = {key: value for key, value in settings.items() if value not in ("", None)}
        params["custom_llm_provider"] = routed_as
        if key_variable:
            api_key = environ.get(key_variable)
            if not api_key:
                message = (
                    f"Environment variable '{key_variable}' required for provider "
                    f"'{provider_name}'."
                )
                logger.error(message, extra={"provider": provider_name})
                raise RuntimeError(message)
            params["api_key"] = api_key
        return params

    def _call_with_policy(self, config: WorkflowModelConfig, request: CompletionRequest) -> Any:
        retrying = Retrying(
            stop=stop_after_attempt(config.max_attempts),
            wait=self._wait,
            reraise=True,
        )
        for attempt in retrying:
            with attempt:
                logger.debug(
                    "Calling model",
                    extra={
                        "workflow": request.workflow,
                        "model": request.model,
                        "attempt": attempt.retry_state.attempt_number,
                        "max_attempts": config.max_attempts,
                    },
                )
                return completion(messages=request.messages, **request.params)
        raise self.LLMInvocationError(f"No attempt was made for workflow '{request.workflow}'.")

    def _reply_text(self, raw_response: Any) -> str:
        response = _response_mapping(raw_response)
        if response is None:
            raise self.LLMInvocationError(
                f"Unexpected LLM response type: {type(raw_response).__name__}"
            )

        choices = response.get("choices")
        if not isinstance(choices, Sequence) or isinstance(choices, str) or not choices:
            raise self.LLMInvocationError("LLM response did not include any choices.")
        message = choices[0].get("message") if isinstance(choices[0], Mapping) else None
        if not isinstance(message, Mapping):
            raise self.LLMInvocationError("LLM response missing message object.")

        content = message.get("content")
        if content is None:
            return ""
        if not isinstance(content, str):
            raise self.LLMInvocationError("LLM response content is not textual.")
        return content


__all__ = ["CompletionRequest", "LLMGateway"]
