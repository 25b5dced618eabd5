"""Schema Node Contract and Evaluator

Every validator is a Schema node. Leaves (primitives and composites)
implement `_check`; wrapper combinators are not subclasses but tagged
variants of one node type (NodeKind), all walked by the single recursive
`evaluate` function below. Keeping wrappers in one place keeps path
prefixing and aggregation handling in one place too.

Lifecycle:
- Builder phase: primitives and arrays accept fluent constraint calls that
  configure the node in place (`s.string().min(3).email()`).
- Sealed use: once validation starts, nodes are read-only; per-call state
  lives in a fresh ParseContext. Combinators (optional, refine, pipe, ...)
  always return new nodes wrapping `self`.

Usage:
    name = s.string().min(1).trim()
    result = name.optional().safe_parse(payload.get("name", UNDEFINED))
    if not result.success:
        print(result.error.flatten())
"""
from __future__ import annotations

import asyncio
import copy
import inspect
from dataclasses import dataclass, field
from enum import Enum
from functools import wraps
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, Awaitable, Callable, ClassVar, Generic, Sequence, TypeVar

from schemata.config import get_settings
from schemata.errors import Err, Ok, Path, PathSegment, SafeParseResult, ValidationError, ValidationIssue, builders
from schemata.logging import get_logger

from .kinds import UNDEFINED, kind_of

if TYPE_CHECKING:
    from .composites import ArraySchema, IntersectionSchema, UnionSchema

T = TypeVar("T")
U = TypeVar("U")

log = get_logger("schemata.validation")


class NodeKind(str, Enum):
    """Closed set of node variants."""
    LEAF = "leaf"
    OPTIONAL = "optional"
    NULLABLE = "nullable"
    NON_NULLABLE = "non_nullable"
    DEFAULT = "default"
    REFINE = "refinement"
    ASYNC_REFINE = "async_refinement"
    TRANSFORM = "transform"
    PIPE = "pipe"
    CATCH = "catch"
    DESCRIBE = "describe"
    READONLY = "readonly"


# Wrappers through which the child's builder methods stay reachable
_FORWARDING_KINDS = frozenset({
    NodeKind.OPTIONAL, NodeKind.NULLABLE, NodeKind.NON_NULLABLE,
    NodeKind.DEFAULT, NodeKind.REFINE, NodeKind.DESCRIBE, NodeKind.READONLY,
})


@dataclass(frozen=True, slots=True)
class DeferredRefinement:
    """An async predicate recorded during the synchronous pass."""
    predicate: Callable[[Any], bool | Awaitable[bool]]
    value: Any
    path: Path
    message: str

    async def resolve(self) -> ValidationIssue | None:
        try:
            outcome = self.predicate(self.value)
            if inspect.isawaitable(outcome):
                outcome = await outcome
        except Exception as exc:
            return builders.unknown_error(exc, self.path)
        return None if outcome else builders.custom(self.message, self.path)


@dataclass(slots=True)
class ParseContext:
    """Per-call evaluation state.

    `path` tracks the current location so deferred refinements can record
    absolute paths; issues themselves are still prefixed on the way up.
    """
    allow_async: bool = False
    path: list[PathSegment] = field(default_factory=list)
    deferred: list[DeferredRefinement] = field(default_factory=list)

    def evaluate(self, node: Schema, value: Any) -> Any:
        return evaluate(node, value, self)

    def evaluate_at(self, segment: PathSegment, node: Schema, value: Any) -> Any:
        """Evaluate a child located at `segment` below the current path."""
        self.path.append(segment)
        try:
            return evaluate(node, value, self)
        finally:
            self.path.pop()

    def checkpoint(self) -> int: return len(self.deferred)

    def rollback(self, checkpoint: int) -> None:
        """Discard refinements recorded by a branch that did not survive."""
        del self.deferred[checkpoint:]


def _fresh(value: Any) -> Any:
    """Give each call its own copy of a mutable default or fallback."""
    return copy.deepcopy(value) if isinstance(value, (list, dict, set)) else value


def _freeze(value: Any) -> Any:
    if isinstance(value, dict): return MappingProxyType(value)
    if isinstance(value, list): return tuple(value)
    if isinstance(value, set): return frozenset(value)
    return value


def evaluate(node: Schema, value: Any, ctx: ParseContext) -> Any:
    """Validate `value` against `node`. Raises ValidationError."""
    inner, params = node._inner, node._params

    match node.kind:
        case NodeKind.LEAF:
            return node._check(value, ctx)

        case NodeKind.OPTIONAL:
            return UNDEFINED if value is UNDEFINED else evaluate(inner, value, ctx)

        case NodeKind.NULLABLE:
            return None if value is None else evaluate(inner, value, ctx)

        case NodeKind.NON_NULLABLE:
            if value is None or value is UNDEFINED:
                raise ValidationError([builders.invalid_type("non-null value", kind_of(value),
                    "Value cannot be null or undefined")])
            return evaluate(inner, value, ctx)

        case NodeKind.DEFAULT:
            if value is UNDEFINED:
                return params["factory"]() if params["factory"] is not None else _fresh(params["value"])
            return evaluate(inner, value, ctx)

        case NodeKind.REFINE:
            output = evaluate(inner, value, ctx)
            try:
                passed = params["predicate"](output)
            except Exception as exc:
                raise ValidationError([builders.unknown_error(exc, params["path"])]) from exc
            if not passed:
                raise ValidationError([builders.custom(params["message"], params["path"])])
            return output

        case NodeKind.ASYNC_REFINE:
            output = evaluate(inner, value, ctx)
            if not ctx.allow_async:
                raise ValidationError([builders.async_required()])
            ctx.deferred.append(DeferredRefinement(
                params["predicate"], output, (*ctx.path, *params["path"]), params["message"]))
            return output

        case NodeKind.TRANSFORM:
            return params["fn"](evaluate(inner, value, ctx))

        case NodeKind.PIPE:
            return evaluate(params["next"], evaluate(inner, value, ctx), ctx)

        case NodeKind.CATCH:
            checkpoint = ctx.checkpoint()
            try:
                return evaluate(inner, value, ctx)
            except ValidationError as exc:
                ctx.rollback(checkpoint)
                return params["factory"](exc) if params["factory"] is not None else _fresh(params["value"])

        case NodeKind.DESCRIBE:
            return evaluate(inner, value, ctx)

        case NodeKind.READONLY:
            return _freeze(evaluate(inner, value, ctx))

    raise AssertionError(f"Unhandled node kind: {node.kind!r}")


class Schema(Generic[T]):
    """A composable unit describing how to check and optionally transform one value.

    Subclasses are leaves: they set `type_name`, implement `_check` and
    `_definition`. Wrapper nodes are plain Schema instances whose `kind`
    is not LEAF.
    """

    type_name: ClassVar[str] = "schema"

    def __init__(self, kind: NodeKind = NodeKind.LEAF, inner: Schema | None = None, **params: Any):
        self.kind = kind
        self._inner = inner
        self._params = params

    # ------------------------------------------------------------------
    # Leaf hooks
    # ------------------------------------------------------------------

    def _check(self, value: Any, ctx: ParseContext) -> T:
        raise NotImplementedError(f"{type(self).__name__} does not implement _check")

    def _definition(self) -> dict[str, Any]:
        return {"type": self.type_name}

    def _accepts_undefined(self) -> bool:
        """Whether a missing object field may be handed to this node."""
        match self.kind:
            case NodeKind.OPTIONAL | NodeKind.DEFAULT | NodeKind.CATCH:
                return True
            case NodeKind.LEAF | NodeKind.NON_NULLABLE:
                return False
            case _:
                return self._inner._accepts_undefined()

    # ------------------------------------------------------------------
    # Validation entry points
    # ------------------------------------------------------------------

    def parse(self, value: Any) -> T:
        """Return the validated (possibly transformed) value or raise ValidationError."""
        return evaluate(self, value, ParseContext())

    def safe_parse(self, value: Any) -> SafeParseResult[T]:
        """Never raises: returns Ok(data) or Err(error)."""
        try:
            return Ok(self.parse(value))
        except ValidationError as exc:
            return self._failed(exc)
        except Exception as exc:
            return self._failed(self._normalize(exc))

    async def parse_async(self, value: Any) -> T:
        """Validate, then resolve every async refinement recorded on the way.

        Synchronous issues and failed refinements are reported together.
        """
        ctx = ParseContext(allow_async=True)
        issues: list[ValidationIssue] = []
        output: Any = UNDEFINED
        try:
            output = evaluate(self, value, ctx)
        except ValidationError as exc:
            issues.extend(exc.issues)

        if ctx.deferred:
            resolved = await asyncio.gather(*(refinement.resolve() for refinement in ctx.deferred))
            failed = [found for found in resolved if found is not None]
            log.debug("async_refinements_resolved", schema=self.schema_type, count=len(resolved), failed=len(failed))
            issues.extend(failed)

        if issues:
            raise ValidationError(issues)
        return output

    async def safe_parse_async(self, value: Any) -> SafeParseResult[T]:
        try:
            return Ok(await self.parse_async(value))
        except ValidationError as exc:
            return self._failed(exc)
        except Exception as exc:
            return self._failed(self._normalize(exc))

    def _normalize(self, exc: Exception) -> ValidationError:
        log.warning("validation_exception_normalized", schema=self.schema_type,
            exc_type=type(exc).__name__, error=str(exc))
        error = ValidationError([builders.unknown_error(exc)])
        error.__cause__ = exc
        return error

    def _failed(self, error: ValidationError) -> Err:
        if get_settings().log_failures:
            log.debug("validation_failed", schema=self.schema_type, error=error)
        return Err(error)

    def is_optional(self) -> bool: return self._admits(UNDEFINED)

    def is_nullable(self) -> bool: return self._admits(None)

    def _admits(self, value: Any) -> bool:
        try:
            evaluate(self, value, ParseContext())
        except Exception:
            # Includes transforms that cannot handle the value; nothing is logged.
            return False
        return True

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------

    @property
    def schema_type(self) -> str:
        return self.type_name if self.kind is NodeKind.LEAF else self.kind.value

    def get_schema(self) -> dict[str, Any]:
        """Serializable definition tree (type tag + parameters)."""
        if self.kind is NodeKind.LEAF:
            return self._definition()

        inner = self._inner.get_schema()
        params = self._params
        match self.kind:
            case NodeKind.DESCRIBE:
                return {**inner, "description": params["description"]}
            case NodeKind.PIPE:
                return {"type": "pipe", "schemas": [inner, params["next"].get_schema()]}
            case NodeKind.DEFAULT:
                extra = {"default_factory": True} if params["factory"] is not None else {"default": params["value"]}
            case NodeKind.CATCH:
                extra = {"catch_factory": True} if params["factory"] is not None else {"fallback": params["value"]}
            case NodeKind.REFINE | NodeKind.ASYNC_REFINE:
                extra = {"message": params["message"]}
            case _:
                extra = {}
        return {"type": self.kind.value, "inner": inner, **extra}

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.schema_type}>"

    # ------------------------------------------------------------------
    # Combinators (each returns a new node wrapping self)
    # ------------------------------------------------------------------

    def optional(self) -> Schema[T | None]:
        return Schema(NodeKind.OPTIONAL, self)

    def nullable(self) -> Schema[T | None]:
        return Schema(NodeKind.NULLABLE, self)

    def nullish(self) -> Schema[T | None]:
        return self.nullable().optional()

    def non_nullable(self) -> Schema[T]:
        return Schema(NodeKind.NON_NULLABLE, self)

    def default(self, value: Any = UNDEFINED, *, factory: Callable[[], T] | None = None) -> Schema[T]:
        """Substitute `value` (or `factory()`) when the input is UNDEFINED."""
        if value is UNDEFINED and factory is None:
            raise ValueError("default() requires a value or a factory")
        return Schema(NodeKind.DEFAULT, self, value=value, factory=factory)

    def refine(
        self,
        predicate: Callable[[T], bool],
        message: str = "Invalid input",
        *,
        path: Sequence[PathSegment] = (),
    ) -> Schema[T]:
        """Add a post-validation predicate; failure is one `custom` issue at `path`."""
        return Schema(NodeKind.REFINE, self, predicate=predicate, message=message, path=tuple(path))

    def refine_async(
        self,
        predicate: Callable[[T], bool | Awaitable[bool]],
        message: str = "Invalid input",
        *,
        path: Sequence[PathSegment] = (),
    ) -> Schema[T]:
        """Attach a predicate resolved by parse_async(); sync parse() rejects it."""
        return Schema(NodeKind.ASYNC_REFINE, self, predicate=predicate, message=message, path=tuple(path))

    def transform(self, fn: Callable[[T], U]) -> Schema[U]:
        """Apply `fn` to the validated value. `fn` must not fail; use refine() first."""
        return Schema(NodeKind.TRANSFORM, self, fn=fn)

    def pipe(self, next_schema: Schema[U]) -> Schema[U]:
        """Validate with self, then feed the output to `next_schema`."""
        return Schema(NodeKind.PIPE, self, next=next_schema)

    def catch(self, value: Any = UNDEFINED, *, factory: Callable[[ValidationError], T] | None = None) -> Schema[T]:
        """On failure, succeed with `value` (or `factory(error)`)."""
        if value is UNDEFINED and factory is None:
            raise ValueError("catch() requires a value or a factory")
        return Schema(NodeKind.CATCH, self, value=value, factory=factory)

    def describe(self, description: str) -> Schema[T]:
        return Schema(NodeKind.DESCRIBE, self, description=description)

    def readonly(self) -> Schema[T]:
        """Freeze the output: dicts become read-only mappings, lists tuples, sets frozensets."""
        return Schema(NodeKind.READONLY, self)

    def brand(self, name: str | None = None) -> Schema[T]:
        """Nominal tagging for type checkers; no runtime effect."""
        return self

    def array(self) -> ArraySchema[T]:
        from .composites import ArraySchema
        return ArraySchema(self)

    def __or__(self, other: Schema) -> UnionSchema:
        from .composites import UnionSchema
        return UnionSchema([self, other])

    def __and__(self, other: Schema) -> IntersectionSchema:
        from .composites import IntersectionSchema
        return IntersectionSchema(self, other)

    # ------------------------------------------------------------------
    # Builder forwarding through wrappers
    # ------------------------------------------------------------------

    def __getattr__(self, name: str) -> Any:
        state = self.__dict__
        if name.startswith("_") or state.get("kind") not in _FORWARDING_KINDS:
            raise AttributeError(f"{type(self).__name__!r} object has no attribute {name!r}")

        target = getattr(state["_inner"], name)
        if not callable(target):
            return target

        @wraps(target)
        def forward(*args: Any, **kwargs: Any) -> Any:
            result = target(*args, **kwargs)
            if result is state["_inner"]:
                return self
            if isinstance(result, Schema):
                return Schema(state["kind"], result, **state["_params"])
            return result

        return forward
