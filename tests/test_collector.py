from __future__ import annotations

from psetview.collector import (
    NOT_FOUND_MESSAGE,
    ExtendedDataCollector,
    collect,
    section_names,
    summarize_attachments,
)
from psetview.config import LEGACY_XDATA_APPLICATIONS, PROPERTY_SET_NAMES, XDATA_APPLICATIONS, ScanConfig
from psetview.decode import ERROR_MARKER
from psetview.report import BLANK, DIAGNOSTIC, HEADER
from psetview.values import TaggedValue, nested
from tests._fakes import (
    FakeDictionary,
    FakeEntity,
    FakeObject,
    FakePropertySet,
    FakePropertySets,
)


LIST_SET, SINGLE_SET = PROPERTY_SET_NAMES


def test_fixed_configuration_constants() -> None:
    assert PROPERTY_SET_NAMES == ("施工情報(一覧表)", "施工情報(個別)")
    assert len(XDATA_APPLICATIONS) == 6
    assert XDATA_APPLICATIONS[:4] == LEGACY_XDATA_APPLICATIONS
    assert "CIVIL" in LEGACY_XDATA_APPLICATIONS


def test_xdata_civil_real_value_end_to_end() -> None:
    entity = FakeEntity(xdata={"CIVIL": [TaggedValue(1040, 3.14159265)]})

    result = collect(entity)

    assert result.found
    lines = result.lines()
    assert lines == ["XData (CIVIL):", "  ExtendedDataReal: 3.141593", ""]
    assert lines[1].endswith("3.141593")


def test_entity_without_attachments_reports_diagnostic_only() -> None:
    entity = FakeEntity("CIRCLE")

    result = collect(entity)

    assert not result.found
    assert all(line.kind == DIAGNOSTIC for line in result.document)
    assert section_names(result) == []
    assert result.lines() == [
        NOT_FOUND_MESSAGE,
        "  Entity type: CIRCLE",
        "  Extension dictionary: absent",
        "  XData applications with data: none",
    ]


def test_diagnostic_lists_dictionary_presence_and_applications() -> None:
    dictionary = FakeDictionary([("OTHER", FakeObject([TaggedValue(1, "x")]))])
    entity = FakeEntity("LWPOLYLINE", dictionary=dictionary, xdata={"AEC": []})

    result = collect(entity)

    assert not result.found
    assert "  Extension dictionary: present" in result.lines()
    assert "  XData applications with data: none" in result.lines()


def test_dictionary_allowlist_filters_entries() -> None:
    dictionary = FakeDictionary(
        [
            ("ACAD_XREC_ROUNDTRIP", FakeObject([TaggedValue(1, "ignored")])),
            (SINGLE_SET, FakeObject([TaggedValue(1, "盛土工"), TaggedValue(40, 12.5), TaggedValue(70, 3)])),
            ("施工情報", FakeObject([TaggedValue(1, "ignored too")])),
        ]
    )
    entity = FakeEntity(dictionary=dictionary)

    result = collect(entity)

    assert result.found
    assert result.lines() == [
        f"Extension dictionary entry: {SINGLE_SET}",
        "  Text: 盛土工",
        "  Real: 12.500000",
        "  Int16: 3",
        "",
    ]
    assert all("ignored" not in line for line in result.lines())


def test_matching_non_record_entry_emits_header_only() -> None:
    dictionary = FakeDictionary([(LIST_SET, FakeObject(None))])

    result = collect(FakeEntity(dictionary=dictionary))

    assert [line.kind for line in result.document[:2]] == [HEADER, BLANK]
    assert result.document[0].text == f"Extension dictionary entry: {LIST_SET}"
    assert not result.found


def test_unmapped_codes_use_generated_label() -> None:
    dictionary = FakeDictionary([(LIST_SET, FakeObject([TaggedValue(1234, "v")]))])

    result = collect(FakeEntity(dictionary=dictionary))

    assert "  Property1234: v" in result.lines()


def test_field_failure_is_isolated_within_entry_and_passes() -> None:
    dictionary = FakeDictionary(
        [
            (
                LIST_SET,
                FakeObject(
                    [
                        TaggedValue(1, "擁壁"),
                        TaggedValue(40, "not-a-number"),
                        TaggedValue(90, 42),
                    ]
                ),
            )
        ]
    )
    entity = FakeEntity(dictionary=dictionary, xdata={"CIVIL": [TaggedValue(1000, "No.3")]})

    result = collect(entity)
    lines = result.lines()

    assert lines[0] == f"Extension dictionary entry: {LIST_SET}"
    assert lines[1] == "  Text: 擁壁"
    assert lines[2].startswith(f"  Real: {ERROR_MARKER} ValueError")
    assert lines[3] == "  Int32: 42"
    assert lines[4] == ""
    assert lines[5:] == ["XData (CIVIL):", "  ExtendedDataAsciiString: No.3", ""]


def test_pass_failure_becomes_one_line_and_later_passes_run() -> None:
    entity = FakeEntity(
        dictionary_error=RuntimeError("dictionary is locked"),
        xdata={"AECC": [TaggedValue(1070, 9)]},
    )

    result = collect(entity)
    lines = result.lines()

    assert lines[0] == "[extension dictionary failed] RuntimeError: dictionary is locked"
    assert lines[1:] == ["XData (AECC):", "  ExtendedDataInteger16: 9", ""]
    assert result.found


def test_failing_record_keeps_lines_produced_before_it() -> None:
    dictionary = FakeDictionary(
        [
            (LIST_SET, FakeObject([TaggedValue(1, "first")])),
            (SINGLE_SET, FakeObject(error=OSError("object erased"))),
        ]
    )

    result = collect(FakeEntity(dictionary=dictionary))

    assert result.lines() == [
        f"Extension dictionary entry: {LIST_SET}",
        "  Text: first",
        "",
        "[extension dictionary failed] OSError: object erased",
    ]


def test_xdata_failure_yields_diagnostic_and_unavailable_probe() -> None:
    entity = FakeEntity(xdata_error=ValueError("bad buffer"))

    result = collect(entity)
    lines = result.lines()

    assert lines[0] == "[xdata failed] ValueError: bad buffer"
    assert NOT_FOUND_MESSAGE in lines
    assert lines[-1].startswith("  XData applications with data: unavailable (ValueError")


def test_property_sets_pass_runs_first() -> None:
    sets = FakePropertySets(
        [
            FakePropertySet("Other", ["X"], ["skip"]),
            FakePropertySet(LIST_SET, ["工種", "延長", "施工日"], ["擁壁工", 12.0, None]),
        ]
    )
    entity = FakeEntity(xdata={"CIVIL": [TaggedValue(1000, "A")]})

    result = collect(entity, property_sets=sets)

    assert result.lines() == [
        f"Property set: {LIST_SET}",
        "  工種: 擁壁工",
        "  延長: 12.000000",
        "  施工日: null",
        "",
        "XData (CIVIL):",
        "  ExtendedDataAsciiString: A",
        "",
    ]


def test_property_set_failure_is_contained() -> None:
    sets = FakePropertySets([], error=RuntimeError("schema missing"))
    entity = FakeEntity(xdata={"CIVIL": [TaggedValue(1000, "A")]})

    result = collect(entity, property_sets=sets)

    assert result.lines()[0] == "[property sets failed] RuntimeError: schema missing"
    assert result.found


def test_property_set_definitions_without_values_render_null() -> None:
    sets = FakePropertySets([FakePropertySet(SINGLE_SET, ["A", "B"], ["x"])])

    result = collect(FakeEntity(), property_sets=sets)

    assert result.lines() == [f"Property set: {SINGLE_SET}", "  A: x", "  B: null", ""]
    assert result.found


def test_pass_order_and_source_order_are_preserved() -> None:
    dictionary = FakeDictionary(
        [
            (SINGLE_SET, FakeObject([TaggedValue(1, "b")])),
            (LIST_SET, FakeObject([TaggedValue(1, "a")])),
        ]
    )
    entity = FakeEntity(
        dictionary=dictionary,
        xdata={
            "CONSTRUCTION": [TaggedValue(1000, "z")],
            "CIVIL": [TaggedValue(1000, "y")],
        },
    )

    result = collect(entity)

    assert section_names(result) == [
        f"Extension dictionary entry: {SINGLE_SET}",
        f"Extension dictionary entry: {LIST_SET}",
        "XData (CIVIL):",
        "XData (CONSTRUCTION):",
    ]
    assert entity.xdata_queries == list(XDATA_APPLICATIONS)


def test_nested_xdata_buffer_renders_on_one_line() -> None:
    entity = FakeEntity(
        xdata={"C3D": [nested(TaggedValue(1000, "No.1"), TaggedValue(1040, 20.0))]},
    )

    result = collect(entity)

    assert result.lines()[1] == "  XDataStart: No.1, 20.000000"


def test_collector_uses_configured_applications_and_encoding() -> None:
    config = ScanConfig(xdata_applications=("SURVEY",), legacy_encoding="cp932")
    entity = FakeEntity(xdata={"SURVEY": [TaggedValue(1000, "測点".encode("cp932"))], "CIVIL": [TaggedValue(1, "x")]})

    result = ExtendedDataCollector(config).collect(entity)

    assert result.lines() == ["XData (SURVEY):", "  ExtendedDataAsciiString: 測点", ""]


def test_summarize_attachments() -> None:
    dictionary = FakeDictionary(
        [
            (LIST_SET, FakeObject([])),
            ("OTHER", FakeObject([])),
        ]
    )
    entity = FakeEntity("INSERT", dictionary=dictionary, xdata={"ACAD": [TaggedValue(1000, "a")]})

    summary = summarize_attachments(entity, "2F")

    assert summary.handle == "2F"
    assert summary.type_name == "INSERT"
    assert summary.dictionary_keys == (LIST_SET,)
    assert summary.applications == ("ACAD",)
    assert summary.has_data
    assert not summarize_attachments(FakeEntity(), "30").has_data
