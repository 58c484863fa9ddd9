import json
from datetime import date

import pytest

from permit_portal.core.exceptions import MalformedPayloadError, RawBinaryValueError
from permit_portal.forms import FileReference, decode_payload, encode_payload, serialize_value_tree


def test_file_reference_becomes_metadata():
    ref = FileReference(name="drawings.pdf", size=1048576, media_type="application/pdf")

    assert serialize_value_tree(ref) == {"name": "drawings.pdf", "size": 1048576, "mediaType": "application/pdf"}


def test_nested_references_are_replaced_in_place():
    values = {
        "firstName": "Amina",
        "docResidential": {
            "certificateOfOccupancy": FileReference(name="cofo.jpg", size=5120, media_type="image/jpeg"),
            "structuralDrawings": [
                FileReference(name="sheet-1.pdf", size=100),
                FileReference(name="sheet-2.pdf", size=200),
            ],
        },
        "outdoorActivity": {"kiosk": True},
    }

    result = serialize_value_tree(values)

    assert result["firstName"] == "Amina"
    assert result["outdoorActivity"] == {"kiosk": True}
    assert result["docResidential"]["certificateOfOccupancy"] == {
        "name": "cofo.jpg", "size": 5120, "mediaType": "image/jpeg",
    }
    assert [item["name"] for item in result["docResidential"]["structuralDrawings"]] == ["sheet-1.pdf", "sheet-2.pdf"]
    assert result["docResidential"]["structuralDrawings"][0]["mediaType"] == "application/octet-stream"


def test_serializing_twice_changes_nothing():
    values = {"docCO": FileReference(name="cofo.pdf", size=42), "dateOfBirth": date(1990, 5, 14)}

    once = serialize_value_tree(values)

    assert serialize_value_tree(once) == once
    assert once["dateOfBirth"] == "1990-05-14"


def test_raw_bytes_are_refused_with_their_path():
    with pytest.raises(RawBinaryValueError) as excinfo:
        serialize_value_tree({"docs": {"scan": b"\x89PNG"}})

    assert excinfo.value.path == "docs.scan"


def test_encoded_payload_decodes_to_the_same_tree():
    values = {"declaration": True, "docCO": FileReference(name="cofo.pdf", size=42, media_type="application/pdf")}

    raw = encode_payload(values)

    assert json.loads(raw)["docCO"]["size"] == 42
    assert decode_payload(raw) == serialize_value_tree(values)


@pytest.mark.parametrize("raw", ["{not json", "", None])
def test_decode_rejects_unparseable_text(raw):
    with pytest.raises(MalformedPayloadError):
        decode_payload(raw)


def test_decode_rejects_non_object_json():
    with pytest.raises(MalformedPayloadError):
        decode_payload("[1, 2, 3]")


def test_file_reference_from_path(tmp_path):
    scan = tmp_path / "site-plan.pdf"
    scan.write_bytes(b"%PDF-1.4 test")

    ref = FileReference.from_path(str(scan))

    assert ref.name == "site-plan.pdf"
    assert ref.size == len(b"%PDF-1.4 test")
    assert ref.media_type == "application/pdf"


def test_set_of_file_references_serializes_in_stable_order():
    values = {"docs": {FileReference(name="b.pdf", size=2), FileReference(name="a.pdf", size=1)}}

    result = serialize_value_tree(values)

    assert [item["name"] for item in result["docs"]] == ["a.pdf", "b.pdf"]
    assert json.loads(encode_payload(values)) == result


def test_set_of_mixed_values_serializes():
    result = serialize_value_tree({"tags": {"kiosk", 3, date(2024, 3, 1)}})

    assert sorted(map(str, result["tags"])) == ["2024-03-01", "3", "kiosk"]
