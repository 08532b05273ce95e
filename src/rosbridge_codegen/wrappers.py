"""Emission of the Topic, Service and Action wrapper classes.

Wrappers subclass the generic transport classes of the ``rosbridge_client``
runtime. Each operation takes the payload's variable fields as parameters,
builds the payload instance and forwards it to the runtime.
"""

import logging
from collections.abc import Sequence

from rosbridge_codegen.code_writer import ModuleBuilder, python_name, unique_name
from rosbridge_codegen.emitter import GenerationSession, module_docstring
from rosbridge_codegen.models import Action, Field, Message, Service, variable_fields
from rosbridge_codegen.resolver import RUNTIME_PACKAGE, ClassName, TypeResolver

logger = logging.getLogger(__name__)

TOPIC_SUFFIX = "Topic"
MAX_LINE_LENGTH = 99


def _runtime(module: str, name: str) -> ClassName:
    package = f"{RUNTIME_PACKAGE}.{module}" if module else RUNTIME_PACKAGE
    return ClassName(package, name, generated=False)


ROS_CLASS = _runtime("", "Ros")
GENERIC_TOPIC_CLASS = _runtime("topic", "GenericTopic")
GENERIC_SERVICE_CLASS = _runtime("service", "GenericService")
GENERIC_ACTION_CLASS = _runtime("action", "GenericAction")
ACTION_TYPE_CLASS = _runtime("action", "ActionType")
ASYNC_GENERATOR = ClassName("collections.abc", "AsyncGenerator", generated=False)

# Capabilities the payload classes derive from
MESSAGE_CLASS = _runtime("topic", "Message")
SERVICE_REQUEST_CLASS = _runtime("service", "ServiceRequest")
SERVICE_RESPONSE_CLASS = _runtime("service", "ServiceResponse")
ACTION_GOAL_CLASS = _runtime("action", "ActionGoal")
ACTION_FEEDBACK_CLASS = _runtime("action", "ActionFeedback")
ACTION_RESULT_CLASS = _runtime("action", "ActionResult")


def _signature(name: str, params: Sequence[str], returns: str, *, is_async: bool) -> str:
    prefix = "async def" if is_async else "def"
    line = f"{prefix} {name}({', '.join(['self', *params])}) -> {returns}:"
    if len(line) + 4 <= MAX_LINE_LENGTH:
        return line
    body = "".join(f"    {param},\n" for param in ["self", *params])
    return f"{prefix} {name}(\n{body}) -> {returns}:"


def _call(target: str, args: Sequence[str], indent: int) -> str:
    line = f"{target}({', '.join(args)})"
    if len(line) + indent <= MAX_LINE_LENGTH:
        return line
    body = "".join(f"    {arg},\n" for arg in args)
    return f"{target}(\n{body})"


def _forward(keyword: str, method: str, args: Sequence[str]) -> str:
    """Render the statement delegating a wrapper operation to the runtime base class."""
    return f"{keyword} " + _call(f"super().{method}", args, indent=8 + len(keyword) + 1)


class WrapperEmitter:
    """Writes the wrapper class of a schema once its payload classes exist."""

    def __init__(self, resolver: TypeResolver, session: GenerationSession) -> None:
        self.resolver = resolver
        self.session = session

    def _params(
        self,
        builder: ModuleBuilder,
        fields: Sequence[Field],
        namespace: tuple[str, ...] | None,
    ) -> tuple[list[str], str, set[str]]:
        """Return parameter declarations, constructor arguments and the names in use."""
        params = []
        args = []
        taken = set()
        for field in variable_fields(tuple(fields)):
            name = python_name(field.name)
            params.append(f"{name}: {builder.ref(self.resolver.resolve(field, namespace))}")
            args.append(f"{name}={name}")
            taken.add(name)
        return params, ", ".join(args), taken

    def _begin(
        self,
        builder: ModuleBuilder,
        wrapper: ClassName,
        base: str,
        type_string: str,
        payloads: Sequence[ClassName],
    ) -> None:
        """Append the class statement and the constructor."""
        code = builder.code
        name = builder.define(wrapper)
        code.append(f"class {name}({base}):")
        with code:
            init = _signature(
                "__init__",
                ["ros: " + builder.ref(ROS_CLASS), "name: str"],
                "None",
                is_async=False,
            )
            with code.indent(init):
                args = ["ros", "name", f'"{type_string}"', *(builder.ref(p) for p in payloads)]
                code.append(_call("super().__init__", args, indent=8))

    def _write(self, wrapper: ClassName, builder: ModuleBuilder) -> ClassName:
        self.session.write(wrapper, builder.render())
        return wrapper

    def emit_topic(self, message: Message, message_class: ClassName) -> ClassName | None:
        wrapper = ClassName(message_class.package, message.name.with_suffix(TOPIC_SUFFIX).name)
        if not self.session.claim(wrapper):
            return None
        builder = ModuleBuilder(wrapper.module, module_docstring(message.name))
        payload = builder.ref(message_class)
        self._begin(
            builder,
            wrapper,
            f"{builder.ref(GENERIC_TOPIC_CLASS)}[{payload}]",
            str(message.name),
            [message_class],
        )

        code = builder.code
        with code:
            params, args, _ = self._params(builder, message.fields, message.name.namespace)
            code.blank_line()
            with code.indent(_signature("publish", params, "None", is_async=True)):
                code.append(_forward("await", "publish", [f"{payload}({args})"]))
        return self._write(wrapper, builder)

    def emit_service(
        self, service: Service, request_class: ClassName, response_class: ClassName
    ) -> ClassName | None:
        wrapper = ClassName(self.resolver.package_for(service.name.namespace), service.name.name)
        if not self.session.claim(wrapper):
            return None
        builder = ModuleBuilder(wrapper.module, module_docstring(service.name))
        request = builder.ref(request_class)
        response = builder.ref(response_class)
        self._begin(
            builder,
            wrapper,
            f"{builder.ref(GENERIC_SERVICE_CLASS)}[{request}, {response}]",
            str(service.name),
            [request_class, response_class],
        )

        code = builder.code
        namespace = service.name.namespace
        with code:
            params, args, _ = self._params(builder, service.request, namespace)
            code.blank_line()
            returns = f"tuple[{response} | None, bool]"
            with code.indent(_signature("call", params, returns, is_async=True)):
                code.append(_forward("return await", "call", [f"{request}({args})"]))

            params, args, taken = self._params(builder, service.response, namespace)
            service_result = unique_name("service_result", taken)
            service_id = unique_name("service_id", taken | {service_result})
            params += [f"{service_result}: bool", f"{service_id}: str | None = None"]
            code.blank_line()
            with code.indent(_signature("send_response", params, "None", is_async=True)):
                forwarded = [f"{response}({args})", service_result, service_id]
                code.append(_forward("await", "send_response", forwarded))
        return self._write(wrapper, builder)

    def emit_action(
        self,
        action: Action,
        goal_class: ClassName,
        feedback_class: ClassName,
        result_class: ClassName,
    ) -> ClassName | None:
        wrapper = ClassName(self.resolver.package_for(action.name.namespace), action.name.name)
        if not self.session.claim(wrapper):
            return None
        builder = ModuleBuilder(wrapper.module, module_docstring(action.name))
        goal = builder.ref(goal_class)
        feedback = builder.ref(feedback_class)
        result = builder.ref(result_class)
        self._begin(
            builder,
            wrapper,
            f"{builder.ref(GENERIC_ACTION_CLASS)}[{goal}, {feedback}, {result}]",
            str(action.name),
            [goal_class, feedback_class, result_class],
        )

        code = builder.code
        namespace = action.name.namespace
        with code:
            params, args, taken = self._params(builder, action.goal, namespace)
            wants_feedback = unique_name("feedback", taken)
            params.append(f"{wants_feedback}: bool")
            returns = f"{builder.ref(ASYNC_GENERATOR)}[{builder.ref(ACTION_TYPE_CLASS)}, None]"
            code.blank_line()
            with code.indent(_signature("send_goal", params, returns, is_async=True)):
                forwarded = [f"{goal}({args})", wants_feedback]
                code.append(_forward("return await", "send_goal", forwarded))

            params, args, taken = self._params(builder, action.feedback, namespace)
            goal_id = unique_name("id", taken)
            params.append(f"{goal_id}: str")
            code.blank_line()
            with code.indent(_signature("send_feedback", params, "None", is_async=True)):
                code.append(_forward("await", "send_feedback", [f"{feedback}({args})", goal_id]))

            params, args, taken = self._params(builder, action.result, namespace)
            goal_id = unique_name("id", taken)
            is_result = unique_name("is_result", taken | {goal_id})
            params += [f"{goal_id}: str", f"{is_result}: bool = True"]
            code.blank_line()
            with code.indent(_signature("send_result", params, "None", is_async=True)):
                forwarded = [f"{result}({args})", goal_id, is_result]
                code.append(_forward("await", "send_result", forwarded))
        return self._write(wrapper, builder)
