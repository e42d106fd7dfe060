"""RDF (N-Quad) rendering of graph nodes and edges for a Dgraph database."""

from __future__ import annotations

import logging
from typing import Any

from aircontrib.graph.datatype import DataType
from aircontrib.graph.helper import cast_string, format_value, replace_character
from aircontrib.graph.model import Attribute, Edge, GraphImpl, Node, attribute_text

logger = logging.getLogger(__name__)

GRAPH_MODEL_ID = "graph_builder_model_id"
DATE_TIME_SAMPLE = "2006-01-02"

_TARGET_REGEX = "[^A-Za-z0-9]"
_REPLACEMENT = "_"

_DGRAPH_TYPES = {
    "String": "string",
    "Integer": "int",
    "Long": "int",
    "Boolean": "bool",
    "Double": "float",
    "Date": "dateTime",
}


def _node_quad(subject: str, predicate: str, value: Any) -> str:
    return f'{subject} <{predicate}> "{value}" . \n'


def _edge_quad(subject: str, relation: str, target: str, facets: str) -> str:
    return f"{subject} <{relation}> {target} {facets} . \n"


def _clean(text: str) -> str:
    return replace_character(text, _TARGET_REGEX, _REPLACEMENT, True)


def readable_external_id(node_type: str, key: list[Any]) -> str:
    """The node type followed by each key element, joined with underscores."""
    return "".join([node_type, *(f"_{cast_string(element)}" for element in key)])


def canonical_attribute_name(
    entity_type: str,
    attribute_name: str,
    target_regex: str,
    replacement: str,
    add_prefix: bool,
    do_replacement: bool,
) -> str:
    """Attribute name, optionally prefixed with the entity type, with characters replaced."""
    name = f"{entity_type}_{attribute_name}" if add_prefix else attribute_name
    return replace_character(name, target_regex, replacement, do_replacement)


def trim_white_space(data: str) -> str:
    """Remove every space character."""
    return data.replace(" ", "")


def dgraph_type(data_type: str) -> str:
    """The Dgraph schema type for a model data type name; ``string`` when unknown."""
    return _DGRAPH_TYPES.get(data_type, "string")


def _format_attribute(attribute: Attribute, date_time_sample: str) -> str | None:
    try:
        return format_value(attribute.value, str(attribute.data_type), date_time_sample)
    except (TypeError, ValueError) as error:
        logger.debug("(to_rdf) Formatting error : %s, value : %r", error, attribute.value)
        return None


def _key_text(key: list[Any]) -> str:
    return "[" + " ".join(cast_string(element) for element in key) + "]"


class DNode:
    """A node as stored in Dgraph, with its database uid once known."""

    def __init__(
        self,
        node: Node,
        explicit_type: bool = False,
        type_name: str = "",
        add_prefix_to_attr: bool = False,
    ) -> None:
        self.node = node
        self.explicit_type = explicit_type
        self.type_name = type_name or "type"
        self.add_prefix_to_attr = add_prefix_to_attr
        self.uid = ""

    def update(self, node: Node) -> bool:
        """Copy new attribute values from ``node``; return whether anything changed."""
        if node.node_id != self.node.node_id:
            raise ValueError(
                f"Update fail : old id = {self.node.node_id}, new id = {node.node_id}"
            )
        changed = False
        for name, attribute in node.attributes.items():
            new_value = attribute.value
            old = self.node.attributes.get(name)
            if old is None:
                self.node.attributes[name] = attribute
                changed = True
            elif new_value is not None and new_value != old.value:
                old.set_value(new_value)
                changed = True
        return changed

    @property
    def type(self) -> str:
        """The type-name attribute's text when it is a string, else the node type."""
        attribute = self.node.attributes.get(self.type_name)
        if attribute is not None and attribute.data_type is DataType.STRING:
            return attribute_text(attribute)
        return self.node.type

    @property
    def attributes(self) -> dict[str, Attribute]:
        return self.node.attributes

    @property
    def id(self) -> str:
        return str(self.node.node_id)

    @property
    def primary_key(self) -> str:
        return self.node.key_hash

    @property
    def formatted_uid(self) -> str:
        return f"<{self.uid}>"

    @property
    def exists(self) -> bool:
        return self.uid != ""

    def canonical_attribute_name(self, attribute_name: str) -> str:
        return canonical_attribute_name(
            self.node.type, attribute_name, _TARGET_REGEX, _REPLACEMENT,
            self.add_prefix_to_attr, True,
        )

    def attribute(self, name: str) -> Attribute | None:
        return self.node.attributes.get(name)

    def attribute_text(self, name: str) -> str:
        return attribute_text(self.attribute(name))

    def eid(self, readable: bool) -> str:
        """Blank-node id: readable from type and key, or from the node id."""
        if readable:
            return "_:" + _clean(readable_external_id(self.type, self.node.key))
        return "_:" + _clean(str(self.node.node_id))

    def to_rdf(self, graph: GraphImpl, date_time_sample: str, readable: bool) -> list[str]:
        """N-Quads that insert or update this node."""
        key_names = graph.key_names_for_node(self.type)
        quads: list[str] = []
        if self.exists:
            subject = self.formatted_uid
        else:
            subject = self.eid(readable)
            quads.append(_node_quad(subject, GRAPH_MODEL_ID, _clean(graph.model_id)))
            if self.explicit_type:
                quads.append(_node_quad(subject, self.type_name, _clean(self.type)))
            else:
                quads.append(_node_quad(subject, _clean(self.type), ""))

        for name, attribute in self.node.attributes.items():
            if name in key_names:
                if self.exists:
                    continue
                name = self.canonical_attribute_name(name)
            if name == self.type_name or attribute.value is None:
                continue
            text = _format_attribute(attribute, date_time_sample)
            if text is None:
                continue
            quads.append(_node_quad(subject, name, text.replace("\\", " ")))
        return quads

    def __str__(self) -> str:
        return f"Node({self.type})_{_key_text(self.node.key)}"


class DEdge:
    """An edge as stored in Dgraph, between two :class:`DNode` ends."""

    def __init__(
        self,
        edge: Edge,
        explicit_type: bool,
        type_name: str,
        add_prefix_to_attr: bool,
        from_node: DNode,
        to_node: DNode,
    ) -> None:
        self.edge = edge
        self.explicit_type = explicit_type
        self.type_name = type_name or "relation"
        self.add_prefix_to_attr = add_prefix_to_attr
        self.from_node = from_node
        self.to_node = to_node

    def update(self, edge: Edge) -> bool:
        """Copy new attribute values from ``edge``; return whether anything changed."""
        if edge.edge_id != self.edge.edge_id:
            raise ValueError(
                f"Update fail : old id = {self.edge.edge_id}, new id = {edge.edge_id}"
            )
        changed = False
        for name, attribute in edge.attributes.items():
            new_value = attribute.value
            if new_value is None:
                continue
            old = self.edge.attributes.get(name)
            if old is None:
                self.edge.attributes[name] = attribute
                changed = True
            elif new_value != old.value:
                old.set_value(new_value)
                changed = True
        return changed

    @property
    def type(self) -> str:
        """The type-name attribute's text when it is a string, else the edge type."""
        attribute = self.edge.attributes.get(self.type_name)
        if attribute is not None and attribute.data_type is DataType.STRING:
            return attribute_text(attribute)
        return self.edge.type

    @property
    def attributes(self) -> dict[str, Attribute]:
        return self.edge.attributes

    @property
    def id(self) -> str:
        return str(self.edge.edge_id)

    @property
    def exists(self) -> bool:
        return self.from_node.exists and self.to_node.exists

    def canonical_attribute_name(self, attribute_name: str) -> str:
        return canonical_attribute_name(
            self.edge.type, attribute_name, _TARGET_REGEX, _REPLACEMENT,
            self.add_prefix_to_attr, True,
        )

    def attribute(self, name: str) -> Attribute | None:
        return self.edge.attributes.get(name)

    def attribute_text(self, name: str) -> str:
        return attribute_text(self.attribute(name))

    def to_rdf(self, graph: GraphImpl, date_time_sample: str, readable: bool) -> list[str]:
        """The N-Quad that links the two ends, with attributes as facets."""
        source = (
            self.from_node.formatted_uid if self.from_node.exists
            else self.from_node.eid(readable)
        )
        target = (
            self.to_node.formatted_uid if self.to_node.exists
            else self.to_node.eid(readable)
        )
        relation = _clean(self.type)

        facets: list[str] = []
        for name, attribute in self.edge.attributes.items():
            if name == self.type_name or attribute.value is None:
                continue
            text = _format_attribute(attribute, date_time_sample)
            if text is None:
                continue
            facets.append(f'{self.canonical_attribute_name(name)}="{text}"')

        facet_text = f"({', '.join(facets)})" if facets else ""
        return [_edge_quad(source, relation, target, facet_text)]

    def __str__(self) -> str:
        return f"Edge({self.type}):from({self.from_node}):to({self.to_node})"