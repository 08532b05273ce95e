"""Pytest configuration and shared fixtures."""

import importlib
import sys
import textwrap
from collections.abc import Callable, Iterator
from pathlib import Path
from types import ModuleType

import pytest

from rosbridge_codegen import Field, Message, Service, TypeName

# Minimal stand-in for the rosbridge_client transport library. Every operation
# records its arguments on the Ros handle.
FAKE_RUNTIME = {
    "__init__.py": """
        class Ros:
            def __init__(self):
                self.sent = []
                self.responses = []
                self.events = []
    """,
    "topic.py": """
        from typing import Generic, TypeVar

        T = TypeVar("T")


        class Message:
            pass


        class GenericTopic(Generic[T]):
            def __init__(self, ros, name, type_name, message_type):
                self.ros = ros
                self.name = name
                self.type_name = type_name
                self.message_type = message_type

            async def publish(self, message):
                self.ros.sent.append(("publish", self.name, message))
    """,
    "service.py": """
        from typing import Generic, TypeVar

        Req = TypeVar("Req")
        Resp = TypeVar("Resp")


        class ServiceRequest:
            pass


        class ServiceResponse:
            pass


        class GenericService(Generic[Req, Resp]):
            def __init__(self, ros, name, type_name, request_type, response_type):
                self.ros = ros
                self.name = name
                self.type_name = type_name
                self.request_type = request_type
                self.response_type = response_type

            async def call(self, request):
                self.ros.sent.append(("call", self.name, request))
                if not self.ros.responses:
                    return None, False
                return self.ros.responses.pop(0), True

            async def send_response(self, response, service_result, service_id):
                self.ros.sent.append(
                    ("send_response", self.name, response, service_result, service_id)
                )
    """,
    "action.py": """
        from typing import Generic, TypeVar

        G = TypeVar("G")
        F = TypeVar("F")
        R = TypeVar("R")


        class ActionGoal:
            pass


        class ActionFeedback:
            pass


        class ActionResult:
            pass


        class ActionType:
            def __init__(self, status):
                self.status = status


        class GenericAction(Generic[G, F, R]):
            def __init__(self, ros, name, type_name, goal_type, feedback_type, result_type):
                self.ros = ros
                self.name = name
                self.type_name = type_name
                self.goal_type = goal_type
                self.feedback_type = feedback_type
                self.result_type = result_type

            async def send_goal(self, goal, feedback):
                self.ros.sent.append(("send_goal", self.name, goal, feedback))
                events = list(self.ros.events)

                async def stream():
                    for event in events:
                        yield event

                return stream()

            async def send_feedback(self, feedback, id):
                self.ros.sent.append(("send_feedback", self.name, feedback, id))

            async def send_result(self, result, id, is_result):
                self.ros.sent.append(("send_result", self.name, result, id, is_result))
    """,
}


def _purge_modules(*roots: str) -> None:
    for name in list(sys.modules):
        if name.split(".")[0] in roots:
            del sys.modules[name]


@pytest.fixture
def output_dir(tmp_path: Path) -> Path:
    """Empty directory the generated modules are written to."""
    path = tmp_path / "generated"
    path.mkdir()
    return path


@pytest.fixture
def import_generated(
    tmp_path: Path, output_dir: Path, monkeypatch: pytest.MonkeyPatch
) -> Iterator[Callable[[str], ModuleType]]:
    """Import generated modules against a fake ``rosbridge_client`` runtime."""
    runtime_root = tmp_path / "runtime"
    package = runtime_root / "rosbridge_client"
    package.mkdir(parents=True)
    for filename, source in FAKE_RUNTIME.items():
        (package / filename).write_text(textwrap.dedent(source).lstrip(), encoding="utf-8")

    monkeypatch.syspath_prepend(str(runtime_root))
    monkeypatch.syspath_prepend(str(output_dir))
    roots = {"rosbridge_client"}

    def _import(module: str) -> ModuleType:
        roots.add(module.split(".")[0])
        importlib.invalidate_caches()
        return importlib.import_module(module)

    _purge_modules(*roots)
    yield _import
    _purge_modules(*roots)


@pytest.fixture
def add_two_ints() -> Service:
    """The classic example service: two int64 in, their int64 sum out."""
    return Service(
        name=TypeName("AddTwoInts", ("example_interfaces", "srv")),
        request=(
            Field(TypeName("int64"), "a"),
            Field(TypeName("int64"), "b"),
        ),
        response=(Field(TypeName("int64"), "sum"),),
    )


@pytest.fixture
def chatter() -> Message:
    """A message with a constant, a scalar and an unbounded array."""
    return Message(
        name=TypeName("Chatter", ("demo", "msg")),
        fields=(
            Field(TypeName("int32"), "DEBUG", value="0"),
            Field(TypeName("string"), "data"),
            Field(TypeName("uint8"), "levels", array_length=0),
        ),
    )
