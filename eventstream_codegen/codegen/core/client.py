"""
Client stub composition.

Derives, per operation, the async/sync method pairs of a generated
client, the streaming handler bindings and the fault unwrapping rule.
The result is a plain data model consumed by the client templates.
"""

from dataclasses import dataclass, field
from string import Template
from typing import Dict, List, Optional, Tuple

from ...logging_config import get_logger
from .naming import NameSanitizer, convert_case, upper_first
from .ordering import REQUEST_SUFFIX, RESPONSE_SUFFIX
from .profile import BackendProfile
from .shapes import Operation, Service, ShapeGraph
from .types import TypeMapper

logger = get_logger(__name__)

PLAIN = "plain"
HANDLER = "handler"
CALLBACKS = "callbacks"


@dataclass(frozen=True)
class ClientMethod:
    """One generated client method signature."""

    name: str
    blocking: bool
    style: str
    return_type: str
    parameters: Tuple[Tuple[str, str], ...]

    @property
    def parameter_names(self) -> List[str]:
        return [name for name, _ in self.parameters]


@dataclass(frozen=True)
class StreamBinding:
    """Event-stream side of a streaming operation."""

    handler_type: str
    event_type: Optional[str] = None
    event_member: Optional[str] = None
    input_event_type: Optional[str] = None
    input_event_member: Optional[str] = None


@dataclass(frozen=True)
class OperationStubs:
    """Everything a client template needs for one operation."""

    name: str
    model_name: str
    request_type: str
    response_type: str
    methods: Tuple[ClientMethod, ...]
    stream: Optional[StreamBinding] = None
    documentation: Optional[str] = None

    @property
    def is_streaming(self) -> bool:
        return self.stream is not None

    def method(self, style: str, blocking: bool) -> Optional[ClientMethod]:
        for method in self.methods:
            if method.style == style and method.blocking == blocking:
                return method
        return None


@dataclass(frozen=True)
class FaultRule:
    """
    How a synchronous call unwraps a failed asynchronous result.

    Instances of base_fault, the parent of every modeled error, are
    re-raised unchanged; anything else is wrapped in runtime_fault with
    the original as its cause.
    """

    base_fault: str
    runtime_fault: str


@dataclass(frozen=True)
class StreamDecorator:
    """
    Executor marshalling for stream handlers.

    Calls named in redispatched are submitted to the executor; calls in
    direct run on the caller's thread so their return value survives.
    """

    redispatched: Tuple[str, ...]
    direct: Tuple[str, ...]


@dataclass
class ClientModel:
    service_name: str
    client_class: str
    operations: List[OperationStubs] = field(default_factory=list)
    faults: Optional[FaultRule] = None
    decorator: Optional[StreamDecorator] = None
    supports_blocking: bool = True

    @property
    def has_streaming(self) -> bool:
        return any(op.is_streaming for op in self.operations)

    def get_operation(self, name: str) -> OperationStubs:
        for op in self.operations:
            if op.name == name:
                return op
        raise KeyError(name)


class ClientStubComposer:
    """Builds the ClientModel for one service on one backend."""

    def __init__(
        self,
        graph: ShapeGraph,
        service: Service,
        type_mapper: TypeMapper,
        profile: BackendProfile,
    ):
        self.graph = graph
        self.service = service
        self.types = type_mapper
        self.profile = profile
        self.spelling = profile.client
        self.sanitizer = NameSanitizer(profile.reserved_words)

    def compose(self) -> ClientModel:
        """Compose methods for every operation of the service, in id order."""
        spelling = self.spelling
        operations = self.graph.operations_of(self.service)
        stubs = [self._operation_stubs(op) for op in operations]

        event, error, closed = spelling.callback_names
        model = ClientModel(
            service_name=self.service.name,
            client_class=f"{upper_first(self.service.name)}Client",
            operations=stubs,
            faults=FaultRule(spelling.application_fault, spelling.runtime_fault),
            decorator=StreamDecorator((event, closed), (error,)),
            supports_blocking=spelling.supports_blocking,
        )
        logger.debug(
            "Composed %d client operations (%d streaming) for %s",
            len(stubs),
            sum(1 for s in stubs if s.is_streaming),
            self.service.id,
        )
        return model

    def _operation_stubs(self, operation: Operation) -> OperationStubs:
        spelling = self.spelling
        request_type = self._io_type(operation.input, operation.name + REQUEST_SUFFIX)
        response_type = self._io_type(operation.output, operation.name + RESPONSE_SUFFIX)

        stream = None
        if operation.is_streaming:
            stream = StreamBinding(
                handler_type=Template(spelling.handler_type).safe_substitute(
                    operation=upper_first(operation.name)
                ),
                **self._events(operation),
            )

        base = self.sanitizer.sanitize_name(operation.name, spelling.method_case)
        request_param = (self._param("request"), request_type)
        methods: List[ClientMethod] = []

        if stream is None:
            styles = [PLAIN]
        else:
            styles = [HANDLER, CALLBACKS]

        for style in styles:
            name = base + (spelling.callbacks_suffix if style == CALLBACKS else "")
            params = (request_param,) + self._stream_params(style, stream)
            methods.append(
                ClientMethod(
                    name=name + spelling.async_suffix,
                    blocking=False,
                    style=style,
                    return_type=self._async_return(response_type, stream),
                    parameters=params,
                )
            )
            if spelling.supports_blocking:
                methods.append(
                    ClientMethod(
                        name=name,
                        blocking=True,
                        style=style,
                        return_type=response_type,
                        parameters=params,
                    )
                )

        return OperationStubs(
            name=operation.name,
            model_name=str(operation.id),
            request_type=request_type,
            response_type=response_type,
            methods=tuple(methods),
            stream=stream,
            documentation=operation.documentation,
        )

    def _io_type(self, shape_id, placeholder: str) -> str:
        if shape_id is None:
            return upper_first(placeholder)
        return self.types.type_name(shape_id)

    def _events(self, operation: Operation) -> Dict[str, Optional[str]]:
        events: Dict[str, Optional[str]] = {}
        if operation.output_event_stream is not None:
            info = operation.output_event_stream
            events["event_type"] = self.types.type_name(info.event_stream_target)
            events["event_member"] = info.member_name
        if operation.input_event_stream is not None:
            info = operation.input_event_stream
            events["input_event_type"] = self.types.type_name(info.event_stream_target)
            events["input_event_member"] = info.member_name
        return events

    def _param(self, name: str) -> str:
        return convert_case(name, self.profile.local_case)

    def _stream_params(self, style: str, stream: Optional[StreamBinding]) -> Tuple[Tuple[str, str], ...]:
        if stream is None:
            return ()
        if style == HANDLER:
            return ((self._param("stream_handler"), stream.handler_type),)
        return tuple((self._param(name), "callback") for name in self.spelling.callback_names)

    def _async_return(self, response_type: str, stream: Optional[StreamBinding]) -> str:
        pattern = self.spelling.future_type if stream is None else self.spelling.streaming_result_type
        return Template(pattern).safe_substitute(
            type=response_type,
            event=(stream.event_type if stream else None) or response_type,
        )
