"""Map interface counters to RDF statements and render them as N-Triples.

One subject per interface, ``http://example.net/interfaces/<name>``:

    <.../Ethernet8> rdf:type oc:Interface .
    <.../Ethernet8> oc:inOctets "25833637"^^xsd:integer .
    <.../Ethernet8> oc:inBroadcastPkts "2367884"^^xsd:integer .

Only counters that were reported get a statement.
"""
from __future__ import annotations

from string import Formatter
from typing import Dict, Iterable, List, NamedTuple, Optional, Union

from pydantic import BaseModel, ConfigDict
from rdflib import Literal, Namespace, URIRef
from rdflib.namespace import RDF, XSD

from counters import CounterRecord
from errors import EmitError

BASE_URI_FORMAT = "http://example.net/interfaces/{name}"

OC = Namespace("http://openconfig.net/rdf/")
OC_INTERFACE = OC.Interface


def _camel(field: str) -> str:
    head, *rest = field.split("_")
    return head + "".join(p.capitalize() for p in rest)


DEFAULT_PREDICATES: Dict[str, URIRef] = {
    "in_octets": OC.inOctets,
    "in_broadcast_pkts": OC.inBroadcastPkts,
}

ALL_COUNTER_PREDICATES: Dict[str, URIRef] = {
    field: OC[_camel(field)] for field in CounterRecord.model_fields
}


class Triple(NamedTuple):
    subject: URIRef
    predicate: URIRef
    object: Union[URIRef, Literal]


class InterfaceEntity(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    counters: Optional[CounterRecord] = None


def check_base_uri(template: str) -> str:
    """Raise ValueError unless ``template`` formats with ``name`` as its only field."""
    try:
        fields = [(f, spec, conv) for _, f, spec, conv in Formatter().parse(template) if f is not None]
    except ValueError as e:
        raise ValueError(f"base_uri {template!r} is not a valid format template: {e}") from e
    if not fields or any(f != "name" or spec or conv for f, spec, conv in fields):
        raise ValueError(f"base_uri {template!r} must use {{name}} as its only placeholder")
    return template


def interface_uri(name: str, base_uri: str = BASE_URI_FORMAT) -> URIRef:
    # no escaping: names come straight from the device path
    try:
        return URIRef(base_uri.format(name=name))
    except (KeyError, IndexError, ValueError) as e:
        raise EmitError(f"cannot build subject from base_uri {base_uri!r}: {e!r}") from e


def to_triples(
    iface: InterfaceEntity,
    predicates: Optional[Dict[str, URIRef]] = None,
    base_uri: str = BASE_URI_FORMAT,
) -> List[Triple]:
    if not iface.name:
        raise EmitError("interface name is empty")
    if predicates is None:
        predicates = DEFAULT_PREDICATES

    subject = interface_uri(iface.name, base_uri)
    triples = [Triple(subject, RDF.type, OC_INTERFACE)]

    if iface.counters is not None:
        for field, predicate in predicates.items():
            value = getattr(iface.counters, field)
            if value is None:
                continue
            triples.append(Triple(subject, predicate, Literal(str(value), datatype=XSD.integer)))
    return triples


def format_triple(triple: Triple) -> str:
    s, p, o = triple
    # IRIs are written verbatim; URIRef.n3() refuses the ones rdflib considers invalid
    obj = o.n3() if isinstance(o, Literal) else f"<{o}>"
    return f"<{s}> <{p}> {obj} ."


def serialize(triples: Iterable[Triple]) -> str:
    return "".join(format_triple(t) + "\n" for t in triples)
