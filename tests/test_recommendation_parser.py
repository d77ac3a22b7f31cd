import pytest

from sizewise.errors import InvalidAIResponseFormat
from sizewise.schemas.recommend import BareAlternative, DescribedAlternative
from sizewise.services.recommendation_parser import RecommendationParser


FULL_RESPONSE = (
    "BEST SIZE: M\n"
    "CONFIDENCE: high\n"
    "REASONING: chest matches\n"
    "FIT TYPE: regular\n"
    "KEY MEASUREMENTS:\n"
    "- chest: 94cm matches\n"
    "POTENTIAL ISSUES:\n"
    "- sleeves may be short\n"
    "ALTERNATIVE SIZES:\n"
    "- L: if loose fit preferred"
)


def test_parse_full_response():
    record = RecommendationParser().parse(FULL_RESPONSE)
    assert record.size == "M"
    assert record.confidence == "high"
    assert record.reasoning == "chest matches"
    assert record.fit_type == "regular"
    assert record.key_measurements == ["chest: 94cm matches"]
    assert record.potential_issues == ["sleeves may be short"]
    assert record.alternative_sizes == [DescribedAlternative(size="L", description="if loose fit preferred")]


def test_record_serializes_with_camel_case():
    data = RecommendationParser().parse(FULL_RESPONSE).model_dump(by_alias=True)
    assert data["fitType"] == "regular"
    assert data["keyMeasurements"] == ["chest: 94cm matches"]
    assert data["alternativeSizes"] == [{"kind": "described", "size": "L", "description": "if loose fit preferred"}]


def test_missing_best_size_is_rejected():
    text = FULL_RESPONSE.replace("BEST SIZE: M\n", "")
    with pytest.raises(InvalidAIResponseFormat):
        RecommendationParser().parse(text)


def test_missing_confidence_is_rejected():
    with pytest.raises(InvalidAIResponseFormat):
        RecommendationParser().parse("BEST SIZE: M\nREASONING: fine")


@pytest.mark.parametrize("bad", [None, "", "   ", 42, ["BEST SIZE: M"]])
def test_non_string_or_empty_is_rejected(bad):
    with pytest.raises(InvalidAIResponseFormat):
        RecommendationParser().parse(bad)


def test_sections_in_any_order_with_preamble_and_analysis():
    text = """Here is my analysis.

MEASUREMENTS ANALYSIS:
Your chest is 94cm, size M chest is 96cm.

ALTERNATIVE SIZES:
* S
• XL: only for layering

CONFIDENCE: Medium
BEST SIZE: M
REASONING: Chest has 2cm ease.
Waist is within range.
FIT TYPE: Loose
"""
    record = RecommendationParser().parse(text)
    assert record.size == "M"
    assert record.confidence == "medium"
    assert record.fit_type == "loose"
    assert record.reasoning == "Chest has 2cm ease.\nWaist is within range."
    assert record.alternative_sizes == [
        BareAlternative(size="S"),
        DescribedAlternative(size="XL", description="only for layering"),
    ]


def test_label_like_text_inside_body_does_not_split():
    text = (
        "BEST SIZE: M\n"
        "CONFIDENCE: low\n"
        "REASONING: Compared against the chart.\n"
        "NOTE: chart may be a body chart\n"
        "KEY MEASUREMENTS:\n"
        "- CHEST: 94cm vs 96cm\n"
        "XL: not a section\n"
    )
    record = RecommendationParser().parse(text)
    assert record.reasoning == "Compared against the chart.\nNOTE: chart may be a body chart"
    assert record.key_measurements == ["CHEST: 94cm vs 96cm"]


def test_labels_are_case_sensitive():
    with pytest.raises(InvalidAIResponseFormat):
        RecommendationParser().parse("best size: M\nconfidence: high")


def test_confidence_and_fit_type_resolve_to_vocabulary():
    record = RecommendationParser().parse("BEST SIZE: L\nCONFIDENCE: [HIGH]\nFIT TYPE: slim")
    assert record.confidence == "high"
    assert record.fit_type == ""


def test_unrecognized_confidence_is_rejected():
    with pytest.raises(InvalidAIResponseFormat):
        RecommendationParser().parse("BEST SIZE: L\nCONFIDENCE: certain")


def test_non_bullet_lines_ignored_in_lists():
    record = RecommendationParser().parse(
        "BEST SIZE: S\nCONFIDENCE: high\nPOTENTIAL ISSUES:\nNone really\n-   \n- short torso"
    )
    assert record.potential_issues == ["short torso"]
