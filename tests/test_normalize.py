from techmap.features.associations.normalize import expand_technique, is_technique_id
from techmap.features.associations.schemas import TechniqueEntry, TechniqueRef


def test_shorthand_id_expands_to_id() -> None:
    assert expand_technique("G90") == TechniqueRef(id="G90")
    assert expand_technique("ARIA10") == TechniqueRef(id="ARIA10")


def test_shorthand_text_expands_to_title() -> None:
    ref = expand_technique("Providing a descriptive label")
    assert ref.id is None
    assert ref.title == "Providing a descriptive label"


def test_near_miss_ids_are_titles() -> None:
    for text in ("g90", "G90a", "90", "G", "G 90", "G90\n", ""):
        assert not is_technique_id(text), text
        assert expand_technique(text).id is None


def test_expanded_entries_pass_through_unchanged() -> None:
    entry = TechniqueEntry.model_validate({"id": "G87", "using": ["SM11"]})
    assert expand_technique(entry) is entry
