"""
Compilation Pipeline
Simplified element requests -> canonical property trees -> document tree.

Per property: resolve the path, validate and normalize the value, convert
it to wire form and place it under the breakpoint/state key.
"""

from dataclasses import dataclass, field
from typing import Any, Iterable, Mapping

from returns.pipeline import is_successful
from returns.result import Failure, Result, Success

from ..codec.parse import ValueCodec
from ..codec.wire import to_wire
from ..core.config import Settings, get_settings
from ..core.errors import CompilationError, Diagnostic, ErrorKind, TreeError
from ..core.id import ROOT_ID, new_element_id
from ..core.json import JSONParseError, extract_json, validate_json_depth, validate_json_size
from ..core.logging_config import LogContext, get_logger
from ..core.validate import CompileRequest, validate_request
from ..paths.breakpoints import Breakpoint, State, breakpoint_id, breakpoint_key
from ..paths.elements import LAYOUT_TYPES, SPACING_PATHS
from ..paths.resolver import PathResolver, PathSpec, default_resolver
from ..paths.schemas import (
    CONTAINER_TYPES,
    ELEMENT_SCHEMAS,
    ELEMENT_TYPE_MAP,
    canonical_type,
    validate_definition,
)
from ..paths.syntax import parse_path
from ..store.base import ContentStore
from ..tree.builder import DocumentBuilder, Position
from ..tree.placement import place_at, place_value
from ..tree.validate import validate_tree
from .composites import WireResult, composite_wire, wrapped_item_wire
from .layout import (
    LAYOUT_KEYS,
    SPACING_KEYS,
    background_image_layer,
    build_layout_v2,
    spacing_properties,
    spacing_sides,
    validate_layout,
)

logger = get_logger(__name__)

_LAYOUT_PATH = parse_path("design.layout_v2")
_LAYERS_PATH = parse_path("design.background.layers")
_SIMPLIFIED_TYPES = {canonical: simple for simple, canonical in ELEMENT_TYPE_MAP.items()}


@dataclass(frozen=True)
class CompiledElement:
    """One compiled element, ready to attach to a tree."""

    id: str
    element_type: str
    canonical_type: str
    properties: dict[str, Any]
    warnings: tuple[Diagnostic, ...] = ()

    def to_node(self, container: bool = False) -> dict[str, Any]:
        data: dict[str, Any] = {"type": self.canonical_type}
        if self.properties:
            data["properties"] = self.properties
        node: dict[str, Any] = {"id": self.id, "data": data}
        if container:
            node["children"] = []
        return node


@dataclass(frozen=True)
class CompiledDocument:
    tree: dict[str, Any]
    element_ids: tuple[str, ...] = ()
    warnings: tuple[Diagnostic, ...] = ()


@dataclass
class _Element:
    """Mutable state of one element while it compiles."""

    table_type: str
    required: frozenset[str]
    properties: dict[str, Any] = field(default_factory=dict)
    warnings: list[Diagnostic] = field(default_factory=list)


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _invalid_request(message: str, **context: Any) -> CompilationError:
    return CompilationError(
        message,
        [Diagnostic(ErrorKind.INVALID_REQUEST, "invalid_request", message, context)],
    )


def _tree_failure(error: TreeError) -> CompilationError:
    context = {"element_id": error.element_id} if error.element_id else {}
    return CompilationError(
        error.message,
        [Diagnostic(error.kind, "tree_operation_failed", error.message, context)],
    )


def table_type(element_type: str) -> str:
    """Simplified type whose tables apply (unknown types compile as Div)."""
    simple = _SIMPLIFIED_TYPES.get(element_type, element_type)
    return simple if simple in ELEMENT_TYPE_MAP else "Div"


class StyleCompiler:
    """
    Compiles simplified element requests.

    Invalid optional properties are dropped with a warning; an invalid or
    missing required property fails the element. Unknown properties are
    warnings unless ``strict_unknown_properties`` is set.
    """

    def __init__(
        self,
        resolver: PathResolver | None = None,
        codec: ValueCodec | None = None,
        settings: Settings | None = None,
    ) -> None:
        self.settings = settings or get_settings()
        self.resolver = resolver or default_resolver()
        self.codec = codec or ValueCodec(self.settings.default_length_unit)
        self.base_breakpoint = breakpoint_id(self.settings.default_breakpoint) or Breakpoint.BASE.value

    # ========================================================================
    # Elements
    # ========================================================================

    def compile_element(self, request: Mapping[str, Any] | CompileRequest) -> Result[CompiledElement, CompilationError]:
        """
        Compile one simplified element (children are not compiled).

        Returns:
            Success(CompiledElement) or Failure(CompilationError)
        """
        if isinstance(request, CompileRequest):
            validated = request
        else:
            checked = validate_request(request)
            if not is_successful(checked):
                problem = checked.failure()
                return Failure(_invalid_request(problem.message, field=problem.field))
            validated = checked.unwrap()

        with LogContext(element_type=validated.type):
            try:
                compiled = self._compile(validated)
            except CompilationError as e:
                logger.warning("element_failed", reason=str(e), diagnostics=e.diagnostics)
                return Failure(e)
        logger.debug(
            "element_compiled",
            element_type=compiled.element_type,
            element_id=compiled.id,
            warnings=len(compiled.warnings),
        )
        return Success(compiled)

    def _compile(self, request: CompileRequest) -> CompiledElement:
        simple = table_type(request.type)
        base = request.properties()

        missing = [
            d for d in validate_definition({**base, "type": simple})
            if d.kind is ErrorKind.MISSING_REQUIRED_PROPERTY
        ]
        if missing:
            raise CompilationError(missing[0].message, missing, element_type=request.type)

        element = _Element(table_type=simple, required=self._required_names(simple))
        overrides = self._responsive_blocks(request.responsive, element)

        blocks = [(self.base_breakpoint, base), *overrides]
        self._compile_reserved(blocks, element)

        for name, raw in base.items():
            if self._is_reserved(name, simple):
                continue
            self._compile_property(name, raw, element, breakpoint_key(self.base_breakpoint))

        for breakpoint, block in overrides:
            for name, raw in block.items():
                if self._is_reserved(name, simple):
                    continue
                self._compile_override(name, raw, element, breakpoint)

        for name, raw in request.hover.items():
            self._compile_hover(name, raw, element)

        return CompiledElement(
            id=request.id or new_element_id(self.settings.id_prefix),
            element_type=request.type,
            canonical_type=canonical_type(request.type),
            properties=element.properties,
            warnings=tuple(element.warnings),
        )

    @staticmethod
    def _required_names(simple: str) -> frozenset[str]:
        schema = ELEMENT_SCHEMAS.get(simple)
        if schema is None:
            return frozenset()
        names: set[str] = set()
        for name in schema.required():
            names.add(name)
            names.update(schema.properties[name].aliases)
        return frozenset(names)

    def _responsive_blocks(
        self, responsive: Mapping[str, Mapping[str, Any]], element: _Element
    ) -> list[tuple[str, Mapping[str, Any]]]:
        blocks: list[tuple[str, Mapping[str, Any]]] = []
        for name, block in responsive.items():
            resolved = breakpoint_id(
                name,
                default=self.base_breakpoint,
                strict=not self.settings.fallback_unknown_breakpoints,
            )
            if resolved is None:
                element.warnings.append(
                    Diagnostic(
                        ErrorKind.INVALID_REQUEST,
                        "unknown_breakpoint",
                        f"Unknown breakpoint '{name}'",
                        {"breakpoint": name},
                    )
                )
                continue
            blocks.append((resolved, block))
        return blocks

    # ========================================================================
    # Properties
    # ========================================================================

    def _compile_property(self, name: str, raw: Any, element: _Element, key: str) -> None:
        spec = self.resolver.resolve(name, element.table_type)
        if spec is None:
            self._unknown(name, element)
            return
        if spec.fixed_breakpoint:
            key = spec.fixed_breakpoint
        self._place(spec, raw, element, key)

    def _compile_override(self, name: str, raw: Any, element: _Element, breakpoint: str) -> None:
        spec = self.resolver.resolve(name, element.table_type)
        if spec is None:
            self._unknown(name, element)
            return
        if not spec.responsive or spec.fixed_breakpoint:
            element.warnings.append(
                Diagnostic(
                    ErrorKind.INVALID_REQUEST,
                    "non_responsive_override",
                    f"'{name}' has no per-breakpoint values; override ignored",
                    {"property": name, "breakpoint": breakpoint},
                )
            )
            return
        self._place(spec, raw, element, breakpoint_key(breakpoint))

    def _compile_hover(self, name: str, raw: Any, element: _Element) -> None:
        """Hover values go to the ``<name>Hover`` path, or the ``_hover`` key of a responsive path."""
        alias = self.resolver.hover_alias(name, element.table_type)
        if alias is not None:
            self._place(alias, raw, element, breakpoint_key(self.base_breakpoint))
            return
        spec = self.resolver.resolve(name, element.table_type)
        if spec is None:
            self._unknown(name, element)
            return
        if not spec.responsive:
            element.warnings.append(
                Diagnostic(
                    ErrorKind.INVALID_REQUEST,
                    "hover_not_supported",
                    f"'{name}' has no hover state; value ignored",
                    {"property": name},
                )
            )
            return
        self._place(spec, raw, element, breakpoint_key(self.base_breakpoint, State.HOVER))

    def _unknown(self, name: str, element: _Element) -> None:
        diagnostic = Diagnostic(
            ErrorKind.UNKNOWN_PROPERTY,
            "unknown_property",
            f"Unknown property '{name}' for {element.table_type}",
            {"property": name, "element_type": element.table_type},
        )
        if self.settings.strict_unknown_properties:
            raise CompilationError(diagnostic.message, [diagnostic], element_type=element.table_type)
        logger.info("unknown_property", name=name)
        element.warnings.append(diagnostic)

    def wire_value(self, spec: PathSpec, raw: Any) -> WireResult:
        """Validated wire value of ``raw`` for a resolved property."""
        if spec.composite:
            return composite_wire(spec, raw, self.codec)
        if spec.wrap_function:
            return wrapped_item_wire(spec, raw, self.codec)
        parsed = self.codec.parse(raw, spec.family, spec.rules())
        if not is_successful(parsed):
            return Failure(parsed.failure())
        return Success(to_wire(parsed.unwrap(), spec.family))

    def _place(self, spec: PathSpec, raw: Any, element: _Element, key: str) -> None:
        if _is_blank(raw):
            return
        wired = self.wire_value(spec, raw)
        if not is_successful(wired):
            self._reject(spec.name, wired.failure(), element)
            return
        value = wired.unwrap()
        if _is_blank(value):
            # empty means "no value": nothing is written
            return

        conflict = place_value(element.properties, spec, value, key)
        if conflict is not None:
            self._reject(spec.name, (conflict,), element)
            return
        for path, implied in spec.implies:
            place_at(element.properties, path, implied)

    def _reject(self, name: str, diagnostics: tuple[Diagnostic, ...], element: _Element) -> None:
        found = [
            Diagnostic(d.kind, d.code, d.message, {"property": name, **d.context}) for d in diagnostics
        ]
        if name in element.required:
            raise CompilationError(
                f"Required property '{name}' is invalid", found, element_type=element.table_type
            )
        logger.warning("property_dropped", name=name, code=found[0].code if found else None)
        element.warnings.extend(found)

    # ========================================================================
    # Layout, spacing and background shorthands
    # ========================================================================

    def _is_reserved(self, name: str, simple: str) -> bool:
        if simple in LAYOUT_TYPES and (name in LAYOUT_KEYS or name == "backgroundImage"):
            return True
        return name in SPACING_KEYS and name in SPACING_PATHS.get(simple, {})

    def _compile_reserved(self, blocks: list[tuple[str, Mapping[str, Any]]], element: _Element) -> None:
        simple = element.table_type
        unit = self.settings.default_length_unit

        if simple in LAYOUT_TYPES:
            layout = _collect(blocks, LAYOUT_KEYS)
            if layout:
                accepted, dropped = validate_layout(layout)
                element.warnings.extend(dropped)
                if accepted:
                    place_at(
                        element.properties,
                        _LAYOUT_PATH,
                        build_layout_v2(accepted, self.settings.gap_maps_both_axes, unit),
                    )
            image = blocks[0][1].get("backgroundImage")
            if image:
                place_at(element.properties, _LAYERS_PATH, [background_image_layer(str(image))])

        for kind, prefix in SPACING_PATHS.get(simple, {}).items():
            values = _collect(blocks, (kind,)).get(kind)
            if not values:
                continue
            try:
                sides, dropped = spacing_sides(values, unit)
            except ValueError as e:
                element.warnings.append(
                    Diagnostic(ErrorKind.INVALID_VALUE_FORMAT, "invalid_spacing", str(e), {"property": kind})
                )
                continue
            element.warnings.extend(dropped)
            for path, responsive in spacing_properties(prefix, kind, sides):
                place_at(element.properties, parse_path(path), responsive)

    # ========================================================================
    # Trees
    # ========================================================================

    def compile_tree(
        self,
        requests: Mapping[str, Any] | Iterable[Mapping[str, Any]],
        builder: DocumentBuilder | None = None,
    ) -> Result[CompiledDocument, CompilationError]:
        """
        Compile requests (and their children) into a document tree.

        Container types open a scope for their children. Nodes already in
        wire form (``{"id", "data", ...}``) are inserted as they are.
        """
        builder = builder or DocumentBuilder(self.settings.id_prefix)
        if builder.root_id is None:
            builder.create_document()

        items = [requests] if isinstance(requests, Mapping) else list(requests)
        element_ids: list[str] = []
        warnings: list[Diagnostic] = []
        try:
            for item in items:
                self._add(item, builder, element_ids, warnings)
        except CompilationError as e:
            return Failure(e)

        logger.info("tree_compiled", elements=len(element_ids), warnings=len(warnings))
        return Success(CompiledDocument(builder.build(), tuple(element_ids), tuple(warnings)))

    def _add(
        self,
        request: Any,
        builder: DocumentBuilder,
        element_ids: list[str],
        warnings: list[Diagnostic],
    ) -> None:
        if not isinstance(request, Mapping):
            raise _invalid_request("Element request must be an object")

        if "data" in request and "id" in request:
            inserted = builder.insert(builder.current_parent_id, request)
            if not is_successful(inserted):
                raise _tree_failure(inserted.failure())
            element_ids.append(inserted.unwrap())
            return

        compiled = self.compile_element(request)
        if not is_successful(compiled):
            raise compiled.failure()
        element = compiled.unwrap()
        if builder.get_element(element.id) is not None:
            raise _tree_failure(
                TreeError(ErrorKind.DUPLICATE_ELEMENT_ID, f"Element id '{element.id}' already exists", element.id)
            )

        children = request.get("children") or []
        element_ids.append(element.id)
        warnings.extend(element.warnings)
        if table_type(element.element_type) in CONTAINER_TYPES or children:
            builder.open_container(element.canonical_type, element.properties or None, element_id=element.id)
            for child in children:
                self._add(child, builder, element_ids, warnings)
            builder.close()
        else:
            builder.add_leaf(element.canonical_type, element.properties or None, element_id=element.id)

    def compile_json(self, text: str) -> Result[CompiledDocument, CompilationError]:
        """Decode (with repair) a JSON request or list of requests and compile it."""
        try:
            validate_json_size(text, self.settings.max_request_size, "Request")
            data = extract_json(text)
            validate_json_depth(data, self.settings.max_json_depth)
        except JSONParseError as e:
            logger.warning("request_json_rejected", error=str(e))
            return Failure(_invalid_request(str(e)))
        return self.compile_tree(data)

    def compile_into(
        self,
        store: ContentStore,
        document_id: str,
        requests: Mapping[str, Any] | Iterable[Mapping[str, Any]],
        parent_id: str = ROOT_ID,
        position: Position = "last",
    ) -> Result[CompiledDocument, CompilationError]:
        """
        Compile requests into a stored document at ``parent_id``/``position``.

        A document with no stored tree starts empty. The updated tree is
        saved before returning.
        """
        with LogContext(document_id=document_id):
            builder = DocumentBuilder(self.settings.id_prefix)
            existing = store.load(document_id)
            if existing is None:
                builder.create_document()
            else:
                imported = builder.import_tree(existing)
                if not is_successful(imported):
                    return Failure(_tree_failure(imported.failure()))

            scratch = DocumentBuilder(self.settings.id_prefix)
            compiled = self.compile_tree(requests, scratch)
            if not is_successful(compiled):
                return compiled
            document = compiled.unwrap()

            for offset, node in enumerate(document.tree["root"].get("children", [])):
                inserted = builder.insert(parent_id, node, _shift(position, offset))
                if not is_successful(inserted):
                    return Failure(_tree_failure(inserted.failure()))

            tree = builder.build()
            report = validate_tree(tree)
            if not report.is_valid:
                logger.error("document_tree_invalid", errors=[d.code for d in report.errors])
                return Failure(CompilationError(report.errors[0].message, report.errors))
            saved = store.save(document_id, tree)
            if not is_successful(saved):
                error = saved.failure()
                logger.error("document_save_failed", error=error.message)
                return Failure(_invalid_request(f"Could not save document: {error.message}"))

            logger.info("document_updated", elements=builder.element_count())
            return Success(CompiledDocument(tree, document.element_ids, document.warnings))


def _collect(blocks: list[tuple[str, Mapping[str, Any]]], keys: Iterable[str]) -> dict[str, dict[str, Any]]:
    """``{key: {breakpoint_key: raw}}`` across the base and override blocks."""
    collected: dict[str, dict[str, Any]] = {}
    for breakpoint, block in blocks:
        for key in keys:
            if not _is_blank(block.get(key)):
                collected.setdefault(key, {})[breakpoint_key(breakpoint)] = block[key]
    return collected


def _shift(position: Position, offset: int) -> Position:
    """Position of the ``offset``-th node of a batch inserted at ``position``."""
    if position == "last":
        return "last"
    if position == "first":
        return offset
    if isinstance(position, int):
        return position + offset
    return position
