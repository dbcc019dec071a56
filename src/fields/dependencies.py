"""Dependency-ordered computation of derived fields.

Each CalculationRecord owns one computed field and lists the fields its
formula reads. Records form a graph that must be acyclic; the calculator
orders computed fields topologically (Kahn's algorithm) and evaluates them
leaf-first.

Failures are per field:
- every member of a dependency cycle gets a CalculationError;
- a field whose dependency is missing, invalid or itself failed gets a
  CalculationError instead of a made-up value;
- everything else still computes.

Recomputation is incremental: after a leaf edit only the fields that
transitively depend on it are evaluated again.

All functions are pure. Inputs are never mutated; callers receive new
field and record objects and may drop a stale run at any time.

Example:
    >>> run = compute_all(fields, records)
    >>> run.fields["total_income"].value
    Decimal('64600')
    >>> edited = {**run.fields, "wages": run.fields["wages"].model_copy(update={"value": 70000})}
    >>> recompute(edited, run.records, "wages").recomputed
    ['total_income', 'taxable_income']
"""

from __future__ import annotations

from collections import deque
from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass, field
from decimal import Decimal

from src.core.errors import CalculationError, IssueKind
from src.core.logging import get_logger
from src.fields.formulas import evaluate_formula, parse_formula
from src.fields.models import CalculationRecord, Field, FieldType
from src.fields.parsing import parse_decimal

logger = get_logger(__name__)


@dataclass
class DependencyGraph:
    """Edges between computed fields and the fields they read.

    Attributes:
        records: Record per computed field id, in declaration order.
        dependents: Field id -> computed field ids that read it directly.
        duplicates: Computed field ids defined by more than one record.
    """

    records: dict[str, CalculationRecord]
    dependents: dict[str, list[str]] = field(default_factory=dict)
    duplicates: set[str] = field(default_factory=set)

    @classmethod
    def build(cls, records: Iterable[CalculationRecord]) -> DependencyGraph:
        by_id: dict[str, CalculationRecord] = {}
        duplicates: set[str] = set()
        for record in records:
            if record.field_id in by_id:
                duplicates.add(record.field_id)
            by_id[record.field_id] = record

        dependents: dict[str, list[str]] = {}
        for field_id, record in by_id.items():
            for dependency in dict.fromkeys(record.dependencies):
                dependents.setdefault(dependency, []).append(field_id)
        return cls(records=by_id, dependents=dependents, duplicates=duplicates)

    def computed_dependencies(self, field_id: str) -> list[str]:
        """Dependencies of ``field_id`` that are themselves computed."""
        return [
            dependency
            for dependency in dict.fromkeys(self.records[field_id].dependencies)
            if dependency in self.records
        ]

    def downstream(self, field_id: str) -> set[str]:
        """Computed fields that depend on ``field_id``, directly or transitively."""
        seen: set[str] = set()
        queue = deque(self.dependents.get(field_id, []))
        while queue:
            current = queue.popleft()
            if current in seen:
                continue
            seen.add(current)
            queue.extend(self.dependents.get(current, []))
        return seen


def find_cycles(graph: DependencyGraph) -> list[list[str]]:
    """Strongly connected components that form cycles (Tarjan).

    The walk keeps its own stack of ``(node, pending successors)`` frames,
    so chain length is not bounded by the interpreter's recursion limit.

    Returns:
        One list of field ids per cycle, including single-field self-loops.
    """
    index_of: dict[str, int] = {}
    lowlink: dict[str, int] = {}
    on_stack: set[str] = set()
    stack: list[str] = []
    cycles: list[list[str]] = []
    counter = 0

    def enter(node: str) -> Iterator[str]:
        nonlocal counter
        index_of[node] = lowlink[node] = counter
        counter += 1
        stack.append(node)
        on_stack.add(node)
        return iter(graph.computed_dependencies(node))

    def close(node: str) -> None:
        component: list[str] = []
        while True:
            member = stack.pop()
            on_stack.discard(member)
            component.append(member)
            if member == node:
                break
        is_self_loop = node in graph.records[node].dependencies
        if len(component) > 1 or is_self_loop:
            cycles.append(list(reversed(component)))

    for root in graph.records:
        if root in index_of:
            continue
        frames: list[tuple[str, Iterator[str]]] = [(root, enter(root))]
        while frames:
            node, successors = frames[-1]
            for successor in successors:
                if successor not in index_of:
                    frames.append((successor, enter(successor)))
                    break
                if successor in on_stack:
                    lowlink[node] = min(lowlink[node], index_of[successor])
            else:
                frames.pop()
                if frames:
                    parent = frames[-1][0]
                    lowlink[parent] = min(lowlink[parent], lowlink[node])
                if lowlink[node] == index_of[node]:
                    close(node)
    return cycles


def topological_order(graph: DependencyGraph, excluded: set[str] | None = None) -> list[str]:
    """Order computed fields so every field follows its computed dependencies.

    Kahn's algorithm. Fields in ``excluded`` (cycle members) are left out and
    treated as already resolved, which leaves the rest of the graph acyclic.
    Ties keep declaration order, so the order is deterministic.

    Raises:
        CalculationError: If a cycle remains among the non-excluded fields.
    """
    excluded = excluded or set()
    nodes = [node for node in graph.records if node not in excluded]
    position = {node: index for index, node in enumerate(nodes)}
    in_degree = {
        node: sum(1 for dep in graph.computed_dependencies(node) if dep not in excluded)
        for node in nodes
    }

    queue = deque(node for node in nodes if in_degree[node] == 0)
    order: list[str] = []
    while queue:
        node = queue.popleft()
        order.append(node)
        ready: list[str] = []
        for dependent in dict.fromkeys(graph.dependents.get(node, [])):
            if dependent in excluded:
                continue
            in_degree[dependent] -= 1
            if in_degree[dependent] == 0:
                ready.append(dependent)
        queue.extend(sorted(ready, key=position.__getitem__))

    if len(order) != len(nodes):
        stuck = [node for node in nodes if node not in set(order)]
        raise CalculationError(f"Circular dependency among: {', '.join(stuck)}")
    return order


@dataclass
class CalculationRun:
    """Outcome of computing derived fields.

    Attributes:
        fields: Full field set after computation (new objects).
        records: Calculation records with ``result``/``error`` filled in.
        recomputed: Computed field ids evaluated in this run, in order.
        errors: Field id -> error message for computed fields that failed.
    """

    fields: dict[str, Field]
    records: list[CalculationRecord]
    recomputed: list[str] = field(default_factory=list)
    errors: dict[str, str] = field(default_factory=dict)


def _dependency_value(dependency: str, fields: Mapping[str, Field]) -> Decimal:
    if dependency not in fields:
        raise CalculationError(f"Dependency '{dependency}' is missing")
    source = fields[dependency]
    if source.has_error:
        raise CalculationError(f"Dependency '{dependency}' has an error")
    if source.is_empty:
        if source.is_calculated or source.is_required:
            raise CalculationError(f"Dependency '{dependency}' has no value")
        return Decimal("0")
    number = parse_decimal(source.value)
    if number is None:
        raise CalculationError(f"Dependency '{dependency}' is not numeric")
    return number


def _evaluate_record(record: CalculationRecord, fields: Mapping[str, Field]) -> Decimal:
    formula = parse_formula(record.formula)
    undeclared = sorted(formula.names - set(record.dependencies))
    if undeclared:
        raise CalculationError(
            f"Formula references undeclared dependencies: {', '.join(undeclared)}"
        )
    values = {dependency: _dependency_value(dependency, fields) for dependency in record.dependencies}
    return evaluate_formula(record.formula, values)


def _computed_field(field_id: str, fields: Mapping[str, Field]) -> Field:
    existing = fields.get(field_id)
    if existing is not None:
        return existing
    return Field(
        id=field_id,
        label=field_id.replace("_", " ").title(),
        type=FieldType.NUMBER,
        is_calculated=True,
        data_source="calculated",
    )


def _run(
    fields: Mapping[str, Field],
    records: Iterable[CalculationRecord],
    targets: set[str] | None,
) -> CalculationRun:
    record_list = list(records)
    graph = DependencyGraph.build(record_list)
    cycles = find_cycles(graph)
    cycle_members = {member for cycle in cycles for member in cycle}
    if cycles:
        logger.warning("dependency_cycle_detected", cycles=cycles)

    output: dict[str, Field] = dict(fields)
    results: dict[str, CalculationRecord] = {}
    recomputed: list[str] = []
    errors: dict[str, str] = {}

    def fail(field_id: str, message: str) -> None:
        target = _computed_field(field_id, output).model_copy(
            update={"value": None, "is_calculated": True}
        )
        output[field_id] = target.with_error(IssueKind.CALCULATION, message)
        results[field_id] = graph.records[field_id].model_copy(
            update={"result": None, "error": message}
        )
        errors[field_id] = message
        recomputed.append(field_id)

    for cycle in cycles:
        path = " -> ".join([*cycle, cycle[0]])
        for member in cycle:
            if targets is None or member in targets:
                fail(member, f"Circular dependency: {path}")

    for field_id in topological_order(graph, excluded=cycle_members):
        if targets is not None and field_id not in targets:
            continue
        record = graph.records[field_id]
        if field_id in graph.duplicates:
            fail(field_id, f"Field '{field_id}' is defined by more than one formula")
            continue
        try:
            result = _evaluate_record(record, output)
        except CalculationError as exc:
            fail(field_id, exc.message)
            continue

        computed = _computed_field(field_id, output).cleared()
        output[field_id] = computed.model_copy(
            update={"value": result, "is_calculated": True, "data_source": "calculated"}
        )
        results[field_id] = record.model_copy(update={"result": result, "error": None})
        recomputed.append(field_id)

    updated_records = [results.get(record.field_id, record) for record in record_list]

    logger.debug(
        "derived_fields_computed",
        recomputed=len(recomputed),
        failed=len(errors),
        incremental=targets is not None,
    )
    return CalculationRun(
        fields=output,
        records=updated_records,
        recomputed=recomputed,
        errors=errors,
    )


def compute_all(
    fields: Mapping[str, Field],
    records: Iterable[CalculationRecord],
) -> CalculationRun:
    """Compute every derived field in dependency order.

    Args:
        fields: Field id -> field, leaf values already validated.
        records: One calculation record per computed field.

    Returns:
        CalculationRun with every computed field evaluated or marked failed.
    """
    return _run(fields, records, targets=None)


def recompute(
    fields: Mapping[str, Field],
    records: Iterable[CalculationRecord],
    changed_field_id: str,
) -> CalculationRun:
    """Recompute only what depends on a changed field.

    Args:
        fields: Field set that already holds the new value.
        records: Calculation records from the previous run.
        changed_field_id: The edited field.

    Returns:
        CalculationRun where fields outside the changed field's transitive
        dependents are passed through untouched.
    """
    record_list = list(records)
    graph = DependencyGraph.build(record_list)
    targets = graph.downstream(changed_field_id)
    if changed_field_id in graph.records:
        targets.add(changed_field_id)
    return _run(fields, record_list, targets=targets)
