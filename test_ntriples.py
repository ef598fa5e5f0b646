import pytest
from rdflib import URIRef
from rdflib.namespace import RDF

from counters import CounterRecord
from errors import EmitError
from ntriples import (ALL_COUNTER_PREDICATES, DEFAULT_PREDICATES, InterfaceEntity, Triple, check_base_uri,
                      format_triple, interface_uri, serialize, to_triples)

XSD_INT = "^^<http://www.w3.org/2001/XMLSchema#integer>"


def test_vocabulary_is_fixed():
    assert str(RDF.type) == "http://www.w3.org/1999/02/22-rdf-syntax-ns#type"
    assert str(DEFAULT_PREDICATES["in_octets"]) == "http://openconfig.net/rdf/inOctets"
    assert str(DEFAULT_PREDICATES["in_broadcast_pkts"]) == "http://openconfig.net/rdf/inBroadcastPkts"
    assert str(interface_uri("Ethernet8")) == "http://example.net/interfaces/Ethernet8"


def test_type_triple_only_without_counters():
    triples = to_triples(InterfaceEntity(name="Ethernet1"))
    assert [format_triple(t) for t in triples] == [
        "<http://example.net/interfaces/Ethernet1> "
        "<http://www.w3.org/1999/02/22-rdf-syntax-ns#type> "
        "<http://openconfig.net/rdf/Interface> .",
    ]


def test_only_in_octets():
    rec = CounterRecord.model_validate({"in-octets": "5"})
    triples = to_triples(InterfaceEntity(name="Ethernet1", counters=rec))
    assert len(triples) == 2
    assert format_triple(triples[1]) == (
        "<http://example.net/interfaces/Ethernet1> <http://openconfig.net/rdf/inOctets> "
        f'"5"{XSD_INT} .'
    )


def test_unemitted_counters_only_give_type_triple():
    rec = CounterRecord.model_validate({"out-octets": "5", "in-errors": "1"})
    assert len(to_triples(InterfaceEntity(name="Ethernet1", counters=rec))) == 1


def test_emission_order_is_octets_then_broadcast():
    rec = CounterRecord.model_validate({"in-broadcast-pkts": "2", "in-octets": "1"})
    preds = [t.predicate for t in to_triples(InterfaceEntity(name="e", counters=rec))]
    assert preds == [RDF.type, DEFAULT_PREDICATES["in_octets"], DEFAULT_PREDICATES["in_broadcast_pkts"]]


def test_zero_is_emitted():
    rec = CounterRecord.model_validate({"in-octets": 0})
    assert format_triple(to_triples(InterfaceEntity(name="e", counters=rec))[1]).endswith(f'"0"{XSD_INT} .')


def test_all_counters():
    rec = CounterRecord.model_validate({"in-octets": "1", "out-octets": "2", "carrier-transitions": "3"})
    triples = to_triples(InterfaceEntity(name="e", counters=rec), ALL_COUNTER_PREDICATES)
    assert [str(t.predicate) for t in triples[1:]] == [
        "http://openconfig.net/rdf/inOctets",
        "http://openconfig.net/rdf/outOctets",
        "http://openconfig.net/rdf/carrierTransitions",
    ]
    assert str(ALL_COUNTER_PREDICATES["in_fcs_errors"]) == "http://openconfig.net/rdf/inFcsErrors"
    assert len(ALL_COUNTER_PREDICATES) == len(CounterRecord.model_fields)


def test_custom_base_uri():
    triples = to_triples(InterfaceEntity(name="et-0/0/1"), base_uri="urn:dev:r1:{name}")
    assert triples[0].subject == URIRef("urn:dev:r1:et-0/0/1")


def test_empty_name_is_rejected():
    with pytest.raises(EmitError):
        to_triples(InterfaceEntity(name=""))


def test_names_are_written_verbatim():
    rec = CounterRecord.model_validate({"in-octets": "3"})
    triples = to_triples(InterfaceEntity(name="Ethernet 8", counters=rec))
    assert [format_triple(t) for t in triples] == [
        "<http://example.net/interfaces/Ethernet 8> "
        "<http://www.w3.org/1999/02/22-rdf-syntax-ns#type> "
        "<http://openconfig.net/rdf/Interface> .",
        "<http://example.net/interfaces/Ethernet 8> <http://openconfig.net/rdf/inOctets> "
        f'"3"{XSD_INT} .',
    ]


@pytest.mark.parametrize("template", ["http://x/{site}/{name}", "http://x/{0}/{name}", "http://x/{name"])
def test_unusable_template_is_an_emit_error(template):
    with pytest.raises(EmitError):
        to_triples(InterfaceEntity(name="e"), base_uri=template)


@pytest.mark.parametrize("template", [
    "http://x/{name}",
    "urn:{name}:{name}",
])
def test_check_base_uri_accepts(template):
    assert check_base_uri(template) == template


@pytest.mark.parametrize("template", [
    "http://x/",
    "http://x/{{name}}",
    "http://x/{site}/{name}",
    "http://x/{}/{name}",
    "http://x/{name!r}",
    "http://x/{name:>10}",
    "http://x/{name",
    "http://x/name}",
])
def test_check_base_uri_rejects(template):
    with pytest.raises(ValueError):
        check_base_uri(template)


def test_serialize_lines():
    triples = to_triples(InterfaceEntity(name="e"))
    text = serialize(triples + triples)
    assert text.endswith(" .\n")
    assert len(text.splitlines()) == 2
    assert serialize([]) == ""


def test_triple_is_a_tuple():
    t = to_triples(InterfaceEntity(name="e"))[0]
    assert isinstance(t, Triple)
    s, p, o = t
    assert p == RDF.type
