"""The model/tool orchestration loop.

A run alternates between asking the model for a completion and dispatching
the tool calls it requests, until the model answers without tools or the
iteration cap is reached:

    AWAITING_MODEL -> DISPATCHING_TOOLS -> (AWAITING_MODEL | DONE)

Tool failures are fed back to the model as tool results. Only a failure of
the model itself ends the run early. The loop never persists anything.
"""

import logging
from typing import AsyncIterator

from quill_server.orchestration.prompts import build_system_prompt
from quill_server.orchestration.tracker import SideEffectTracker
from quill_server.orchestration.types import (
    Completion,
    ConversationTurn,
    DoneEvent,
    LoopState,
    ModelCompletion,
    OrchestrationEvent,
    RunResult,
    ToolCallEvent,
    ToolResultEvent,
)
from quill_server.tools.catalog import get_catalog
from quill_server.tools.dispatcher import ToolDispatcher
from quill_server.tools.types import (
    RunContext,
    ToolCallRequest,
    ToolDescriptor,
    ToolFailure,
    ToolResult,
)

logger = logging.getLogger(__name__)

DEFAULT_MAX_ITERATIONS = 3
FALLBACK_RESPONSE = "I'm sorry, I couldn't generate a response."
MODEL_ERROR_RESPONSE = (
    '<p class="error">Sorry, something went wrong while generating a response. '
    "Please try again.</p>"
)


class Orchestrator:
    """Drives model and tool exchanges for one question at a time.

    The orchestrator itself is stateless between runs; every run owns its
    own history buffer and side-effect tracker, so one instance can serve
    concurrent runs.

    Attributes:
        model: The model completion backend
        dispatcher: Executes tool calls
        max_iterations: Maximum number of tool dispatch rounds per run
        tools: The catalog advertised to the model
    """

    def __init__(
        self,
        model: ModelCompletion,
        dispatcher: ToolDispatcher,
        max_iterations: int = DEFAULT_MAX_ITERATIONS,
        tools: tuple[ToolDescriptor, ...] | None = None,
    ) -> None:
        if max_iterations < 1:
            raise ValueError("max_iterations must be at least 1")
        self.model = model
        self.dispatcher = dispatcher
        self.max_iterations = max_iterations
        self.tools = tools if tools is not None else get_catalog()

    async def run(
        self,
        question: str,
        history: list[ConversationTurn],
        context: RunContext,
    ) -> RunResult:
        """Answer a question and return the final result.

        Args:
            question: The new user question
            history: Prior turns supplied by the caller (not modified)
            context: Per-run context

        Returns:
            RunResult with the response text and side-effect flags
        """
        result: RunResult | None = None
        async for event in self.stream(question, history, context):
            if isinstance(event, DoneEvent):
                result = event.result
        if result is None:
            raise RuntimeError("Run ended without a result")
        return result

    async def stream(
        self,
        question: str,
        history: list[ConversationTurn],
        context: RunContext,
    ) -> AsyncIterator[OrchestrationEvent]:
        """Answer a question, yielding an event for every tool call and result.

        The last event is always a DoneEvent.
        """
        turns = self._prepare_history(question, history, context)
        tracker = SideEffectTracker()
        executed: list[dict] = []
        iterations = 0
        last_text: str | None = None
        completion = Completion()
        state = LoopState.AWAITING_MODEL

        logger.info(f"Starting run for {context.actor_id} with {len(turns)} turns")

        while state is not LoopState.DONE:
            if state is LoopState.AWAITING_MODEL:
                try:
                    completion = await self.model.complete(turns, self.tools)
                except Exception as e:
                    logger.error(f"Model completion failed, aborting run: {e}")
                    yield DoneEvent(
                        RunResult(
                            response=MODEL_ERROR_RESPONSE,
                            iterations=iterations,
                            tool_calls_executed=executed,
                        )
                    )
                    return

                if completion.content:
                    last_text = completion.content

                if not completion.tool_calls:
                    state = LoopState.DONE
                elif iterations >= self.max_iterations:
                    logger.warning(
                        f"Iteration cap of {self.max_iterations} reached, dropping "
                        f"{len(completion.tool_calls)} pending tool calls"
                    )
                    state = LoopState.DONE
                else:
                    turns.append(
                        ConversationTurn(
                            role="assistant",
                            content=completion.content,
                            tool_calls=list(completion.tool_calls),
                        )
                    )
                    state = LoopState.DISPATCHING_TOOLS

            elif state is LoopState.DISPATCHING_TOOLS:
                iteration = iterations + 1
                logger.info(
                    f"Tool iteration {iteration}: {len(completion.tool_calls)} calls"
                )
                # Strictly sequential: later calls may depend on earlier mutations
                for call in completion.tool_calls:
                    yield ToolCallEvent(call=call, iteration=iteration)
                    result = await self._dispatch(call, context)
                    tracker.record(call.name, result)
                    turns.append(
                        ConversationTurn(
                            role="tool",
                            content=result.to_content(),
                            tool_call_id=call.id,
                            tool_name=call.name,
                        )
                    )
                    executed.append(
                        {
                            "id": call.id,
                            "name": call.name,
                            "ok": result.ok,
                            "iteration": iteration,
                        }
                    )
                    yield ToolResultEvent(call=call, result=result, iteration=iteration)

                iterations = iteration
                state = LoopState.AWAITING_MODEL

        if completion.tool_calls:
            response = completion.content or last_text or FALLBACK_RESPONSE
        else:
            response = completion.content or FALLBACK_RESPONSE

        logger.info(
            f"Run finished after {iterations} tool iterations "
            f"(note_created={tracker.note_created}, note_updated={tracker.note_updated})"
        )
        yield DoneEvent(
            RunResult(
                response=response,
                note_created=tracker.note_created,
                note_updated=tracker.note_updated,
                iterations=iterations,
                tool_calls_executed=executed,
            )
        )

    async def _dispatch(self, call: ToolCallRequest, context: RunContext) -> ToolResult:
        try:
            return await self.dispatcher.dispatch(call, context)
        except Exception as e:
            logger.exception(f"Dispatcher raised for tool {call.name}")
            return ToolFailure(tool_call_id=call.id, message=f"{call.name} failed: {e}")

    def _prepare_history(
        self,
        question: str,
        history: list[ConversationTurn],
        context: RunContext,
    ) -> list[ConversationTurn]:
        # The server prompt carries the notes; caller system turns never replace it
        turns = [ConversationTurn(role="system", content=build_system_prompt(context))]
        turns.extend(turn for turn in history if turn.role != "system")
        turns.append(ConversationTurn(role="user", content=question))
        return turns
