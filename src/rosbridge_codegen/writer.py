"""Top-level generation of bindings for message, service and action schemas."""

import logging
from collections.abc import Iterable
from pathlib import Path

from rosbridge_codegen.config import GeneratorConfig
from rosbridge_codegen.emitter import ClassEmitter, GenerationSession
from rosbridge_codegen.models import Action, Message, Schema, Service
from rosbridge_codegen.resolver import TypeResolver
from rosbridge_codegen.wrappers import (
    ACTION_FEEDBACK_CLASS,
    ACTION_GOAL_CLASS,
    ACTION_RESULT_CLASS,
    MESSAGE_CLASS,
    SERVICE_REQUEST_CLASS,
    SERVICE_RESPONSE_CLASS,
    WrapperEmitter,
)

logger = logging.getLogger(__name__)

REQUEST_SUFFIX = "Request"
RESPONSE_SUFFIX = "Response"
GOAL_SUFFIX = "Goal"
RESULT_SUFFIX = "Result"
FEEDBACK_SUFFIX = "Feedback"


class Writer:
    """Writes the bindings of schemas below ``output_root``.

    One writer is one generation session: a class is written at most once,
    however many schemas reference it.
    """

    def __init__(self, output_root: Path, config: GeneratorConfig | None = None) -> None:
        self.config = config or GeneratorConfig()
        self.resolver = TypeResolver(self.config.package_prefix)
        self.session = GenerationSession(Path(output_root))
        if self.config.skip_existing:
            self.session.seed_from_output()
        self.classes = ClassEmitter(self.resolver, self.session)
        self.wrappers = WrapperEmitter(self.resolver, self.session)

    def write_ros_type(self, schema: Schema) -> None:
        """Write the payload classes and the wrapper class of one schema."""
        match schema:
            case Message():
                self._write_message(schema)
            case Service():
                self._write_service(schema)
            case Action():
                self._write_action(schema)
            case _:
                raise TypeError(f"Unsupported schema type: {type(schema).__name__}")

    def write_all(self, schemas: Iterable[Schema]) -> list[Path]:
        """Write every schema and return the paths written in this call."""
        start = len(self.session.written)
        for schema in schemas:
            self.write_ros_type(schema)
        return self.session.written[start:]

    def _write_message(self, message: Message) -> None:
        logger.info("Generating topic %s", message.name)
        message_class = self.classes.emit_payload_class(
            message.name, message.fields, MESSAGE_CLASS
        )
        self.wrappers.emit_topic(message, message_class)

    def _write_service(self, service: Service) -> None:
        logger.info("Generating service %s", service.name)
        request_class = self.classes.emit_payload_class(
            service.name.with_suffix(REQUEST_SUFFIX), service.request, SERVICE_REQUEST_CLASS
        )
        response_class = self.classes.emit_payload_class(
            service.name.with_suffix(RESPONSE_SUFFIX), service.response, SERVICE_RESPONSE_CLASS
        )
        self.wrappers.emit_service(service, request_class, response_class)

    def _write_action(self, action: Action) -> None:
        logger.info("Generating action %s", action.name)
        goal_class = self.classes.emit_payload_class(
            action.name.with_suffix(GOAL_SUFFIX), action.goal, ACTION_GOAL_CLASS
        )
        result_class = self.classes.emit_payload_class(
            action.name.with_suffix(RESULT_SUFFIX), action.result, ACTION_RESULT_CLASS
        )
        feedback_class = self.classes.emit_payload_class(
            action.name.with_suffix(FEEDBACK_SUFFIX), action.feedback, ACTION_FEEDBACK_CLASS
        )
        self.wrappers.emit_action(action, goal_class, feedback_class, result_class)
