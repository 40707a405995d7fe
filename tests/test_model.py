from __future__ import annotations

import pytest

from lootgen import Attribute, InvalidConfig, LootConfig
from lootgen.loader import apply_document, parse_document


def test_has_quality_tracks_set_names_regardless_of_weight():
    cfg = LootConfig()
    assert not cfg.has_quality("common")
    cfg.set_quality("common", 100)
    cfg.set_quality("junk", 0)
    assert cfg.has_quality("common")
    assert cfg.has_quality("junk")
    assert not cfg.has_quality("rare")
    assert not cfg.has_quality("")

    cfg.set_quality("common", 5)
    assert cfg.has_quality("common")
    assert cfg.quality_weights()["common"] == 5


def test_quality_weights_view_is_read_only():
    cfg = LootConfig()
    cfg.set_quality("common", 1)
    with pytest.raises(TypeError):
        cfg.quality_weights()["rare"] = 3  # type: ignore[index]


@pytest.mark.parametrize(
    "call",
    [
        lambda c: c.set_quality("", 1),
        lambda c: c.set_quality("   ", 1),
        lambda c: c.set_quality("common", -1),
        lambda c: c.set_quality("common", 1.5),
        lambda c: c.set_quality("common", True),
        lambda c: c.set_item_type("", 1),
        lambda c: c.set_item_type("weapon", -3),
        lambda c: c.set_item_subtype("weapon", "", 1),
        lambda c: c.set_item_subtype("weapon", "sword", -1),
        lambda c: c.set_attribute("weapon", None, Attribute("dmg", 1.0, 5.0, 2.0)),
        lambda c: c.set_attribute("weapon", None, Attribute("", 1.0, 0.0, 2.0)),
        lambda c: c.set_attribute("weapon", None, Attribute("dmg", 1.0, 0.0, 2.0, chance=1.5)),
        lambda c: c.set_attribute("weapon", None, Attribute("dmg", float("nan"), 0.0, 2.0)),
        lambda c: c.set_quality(" common ", 1),
        lambda c: c.set_item_type("weapon ", 1),
        lambda c: c.set_item_names("weapon", "sword", ["ok", ""]),
        lambda c: c.set_item_names("weapon", "sword", "longsword"),
        lambda c: c.set_prefix_attribute("weapon", "sword", "", Attribute("dmg", 1.0, 0.0, 2.0)),
        lambda c: c.set_suffix_attribute("weapon", "sword", "of Doom", Attribute("dmg", 1.0, 3.0, 2.0)),
    ],
)
def test_setters_reject_invalid_values(weapon_config, call):
    before = weapon_config.to_document()
    with pytest.raises(InvalidConfig):
        call(weapon_config)
    assert weapon_config.to_document() == before


def test_set_item_type_upserts_weight_and_keeps_subtypes():
    cfg = LootConfig()
    cfg.set_item_type("weapon", 2)
    cfg.set_item_subtype("weapon", "sword", 3)
    cfg.set_item_type("weapon", 7)
    assert cfg.type_weights() == {"weapon": 7}
    assert dict(cfg.subtype_weights("weapon")) == {"sword": 3}


def test_subtype_on_unknown_type_registers_unweighted_type():
    cfg = LootConfig()
    cfg.set_item_subtype("armor", "helm", 4)
    assert cfg.has_item_type("armor")
    assert cfg.type_weights() == {"armor": 0}
    assert cfg.has_item_subtype("armor", "helm")
    assert not cfg.has_item_subtype("weapon", "helm")


def test_subtypes_are_scoped_to_their_type():
    cfg = LootConfig()
    cfg.set_item_subtype("weapon", "light", 1)
    cfg.set_item_subtype("armor", "light", 9)
    assert cfg.subtype_weights("weapon")["light"] == 1
    assert cfg.subtype_weights("armor")["light"] == 9


def test_subtype_attributes_override_type_attributes():
    cfg = LootConfig()
    cfg.set_item_subtype("weapon", "sword", 1)
    cfg.set_item_subtype("weapon", "axe", 1)
    cfg.set_attribute("weapon", None, Attribute("damage", 5.0, 0.0, 100.0, required=True))
    cfg.set_attribute("weapon", "", Attribute("weight", 3.0, 0.0, 10.0, required=True))
    cfg.set_attribute("weapon", "sword", Attribute("damage", 9.0, 0.0, 100.0, required=True))

    merged = cfg.attributes_for("weapon", "sword")
    assert list(merged) == ["damage", "weight"]
    assert merged["damage"].initial_value == 9.0
    assert cfg.attributes_for("weapon", "axe")["damage"].initial_value == 5.0
    assert cfg.has_attribute("weapon", "sword", "damage")
    assert not cfg.has_attribute("weapon", "sword", "weight")


def test_set_attribute_overwrites_same_name():
    cfg = LootConfig()
    cfg.set_item_subtype("weapon", "sword", 1)
    cfg.set_attribute("weapon", "sword", Attribute("damage", 5.0, 0.0, 100.0))
    cfg.set_attribute("weapon", "sword", Attribute("damage", 8.0, 0.0, 100.0))
    assert cfg.attributes_for("weapon", "sword")["damage"].initial_value == 8.0


def test_item_names_replace_previous_pool():
    cfg = LootConfig()
    cfg.set_item_subtype("weapon", "sword", 1)
    cfg.set_item_names("weapon", "sword", ["a", "b"])
    cfg.set_item_names("weapon", "sword", ["c"])
    assert cfg.item_names("weapon", "sword") == ["c"]
    assert cfg.item_names("weapon", "axe") == []


def test_affix_attributes_accumulate_under_one_affix():
    cfg = LootConfig()
    cfg.set_item_subtype("weapon", "sword", 1)
    cfg.set_item_subtype("weapon", "axe", 1)
    cfg.set_prefix_attribute("weapon", "sword", "Flaming", Attribute("fire", 2.0, 0.0, 10.0, required=True))
    cfg.set_prefix_attribute("weapon", "sword", "Flaming", Attribute("light", 1.0, 0.0, 10.0, required=True))
    cfg.set_prefix_attribute("weapon", None, "Rusty", Attribute("damage", -1.0, -5.0, 0.0, required=True))

    prefixes = cfg.prefixes_for("weapon", "sword")
    assert set(prefixes) == {"Rusty", "Flaming"}
    assert list(prefixes["Flaming"].attributes) == ["fire", "light"]
    assert set(cfg.prefixes_for("weapon", "axe")) == {"Rusty"}
    assert cfg.suffixes_for("weapon", "sword") == {}


def test_metadata_precedence(weapon_config):
    weapon_config.set_item_type_metadata("weapon", "slot", "hand")
    weapon_config.set_item_type_metadata("weapon", "value", 1)
    weapon_config.set_subtype_metadata("weapon", "sword", "value", 10)
    weapon_config.set_item_name_metadata("weapon", "sword", "longsword", "value", 25)

    assert weapon_config.metadata_for("weapon", "sword", "longsword") == {"slot": "hand", "value": 25}
    assert weapon_config.metadata_for("weapon", "sword", "shortsword") == {"slot": "hand", "value": 10}
    assert weapon_config.metadata_for("weapon", "axe", "hatchet") == {"slot": "hand", "value": 1}


def test_type_metadata_requires_known_type():
    with pytest.raises(InvalidConfig):
        LootConfig().set_item_type_metadata("ghost", "k", 1)


def test_copy_is_independent(weapon_config):
    clone = weapon_config.copy()
    clone.set_quality("epic", 9)
    clone.set_item_subtype("weapon", "mace", 2)
    assert not weapon_config.has_quality("epic")
    assert not weapon_config.has_item_subtype("weapon", "mace")


def test_replace_with_swaps_everything(weapon_config):
    cfg = LootConfig()
    cfg.set_quality("junk", 1)
    cfg.replace_with(weapon_config)
    assert not cfg.has_quality("junk")
    assert cfg.to_document() == weapon_config.to_document()


def test_document_snapshot_reloads_identically(weapon_config):
    weapon_config.set_item_type_metadata("weapon", "slot", "hand")
    weapon_config.set_subtype_metadata("weapon", "sword", "value", 10)
    weapon_config.set_item_name_metadata("weapon", "sword", "longsword", "value", 25)
    weapon_config.set_prefix_attribute("weapon", None, "Rusty", Attribute("damage", -1.0, -5.0, 0.0, required=True))
    doc = weapon_config.to_document()

    fresh = LootConfig()
    apply_document(fresh, parse_document(doc))
    assert fresh.to_document() == doc


def test_quality_names_are_exact_keys():
    cfg = LootConfig()
    cfg.set_quality("common", 100)
    assert cfg.has_quality("common")
    assert not cfg.has_quality(" common ")
    assert not cfg.has_quality("Common")
    with pytest.raises(InvalidConfig):
        cfg.set_quality(" common ", 1)
    assert cfg.quality_weights() == {"common": 100}


@pytest.mark.parametrize(
    "call",
    [
        lambda c: c.set_attribute("armor", None, Attribute("defense", 1.0, 0.0, 5.0)),
        lambda c: c.set_attribute("weapon", "dagger", Attribute("damage", 1.0, 0.0, 5.0)),
        lambda c: c.set_attribute(None, "dagger", Attribute("damage", 1.0, 0.0, 5.0)),
        lambda c: c.set_prefix_attribute("armor", None, "Iron", Attribute("defense", 1.0, 0.0, 5.0)),
        lambda c: c.set_suffix_attribute("weapon", "dagger", "of Ice", Attribute("cold", 1.0, 0.0, 5.0)),
        lambda c: c.set_suffix_attribute("", "helm", "of Ice", Attribute("cold", 1.0, 0.0, 5.0)),
        lambda c: c.set_item_names("armor", "helm", ["Cap"]),
        lambda c: c.set_item_names("weapon", "dagger", ["Dirk"]),
        lambda c: c.set_subtype_metadata("weapon", "dagger", "value", 3),
        lambda c: c.set_item_name_metadata("armor", "helm", "Cap", "value", 3),
    ],
)
def test_scoped_setters_reject_undeclared_types_and_subtypes(weapon_config, call):
    before = weapon_config.to_document()
    with pytest.raises(InvalidConfig):
        call(weapon_config)
    assert weapon_config.to_document() == before


def test_rejected_undeclared_scope_keeps_document_reloadable():
    cfg = LootConfig()
    cfg.set_item_subtype("weapon", "sword", 1)
    with pytest.raises(InvalidConfig):
        cfg.set_attribute("armor", None, Attribute("defense", 1.0, 0.0, 5.0))

    fresh = LootConfig()
    apply_document(fresh, parse_document(cfg.to_document()))
    assert fresh.to_document() == cfg.to_document()


def _shared_subtype_config() -> LootConfig:
    cfg = LootConfig()
    cfg.set_item_subtype("weapon", "sword", 1)
    cfg.set_item_subtype("weapon", "light", 1)
    cfg.set_item_subtype("armor", "light", 1)
    return cfg


def test_attribute_scopes_merge_from_global_to_exact():
    cfg = _shared_subtype_config()
    cfg.set_attribute(None, None, Attribute("value", 1.0, 0.0, 100.0, required=True))
    cfg.set_attribute("", "", Attribute("weight", 2.0, 0.0, 100.0, required=True))
    cfg.set_attribute("weapon", None, Attribute("value", 2.0, 0.0, 100.0, required=True))
    cfg.set_attribute(None, "light", Attribute("value", 3.0, 0.0, 100.0, required=True))
    cfg.set_attribute("weapon", "light", Attribute("value", 4.0, 0.0, 100.0, required=True))

    assert list(cfg.attributes_for("armor", "light")) == ["value", "weight"]
    assert cfg.attributes_for("weapon", "light")["value"].initial_value == 4.0
    assert cfg.attributes_for("armor", "light")["value"].initial_value == 3.0
    assert cfg.attributes_for("weapon", "sword")["value"].initial_value == 2.0
    assert cfg.attributes_for("armor", "light")["weight"].initial_value == 2.0
    assert cfg.has_attribute(None, "light", "value")
    assert cfg.has_attribute("", None, "weight")


def test_affix_scopes_merge_from_global_to_exact():
    cfg = _shared_subtype_config()
    cfg.set_prefix_attribute(None, None, "Old", Attribute("value", -1.0, -5.0, 0.0, required=True))
    cfg.set_prefix_attribute(None, "light", "Old", Attribute("weight", -1.0, -5.0, 0.0, required=True))
    cfg.set_suffix_attribute(None, "light", "of Air", Attribute("speed", 1.0, 0.0, 5.0, required=True))

    assert set(cfg.prefixes_for("weapon", "sword")) == {"Old"}
    assert list(cfg.prefixes_for("weapon", "sword")["Old"].attributes) == ["value"]
    assert list(cfg.prefixes_for("armor", "light")["Old"].attributes) == ["weight"]
    assert set(cfg.suffixes_for("armor", "light")) == {"of Air"}
    assert set(cfg.suffixes_for("weapon", "light")) == {"of Air"}
    assert cfg.suffixes_for("weapon", "sword") == {}


def test_wildcard_scopes_survive_document_reload():
    cfg = _shared_subtype_config()
    cfg.set_attribute(None, None, Attribute("value", 1.0, 0.0, 100.0, required=True))
    cfg.set_attribute(None, "light", Attribute("value", 3.0, 0.0, 100.0, required=True))
    cfg.set_prefix_attribute(None, None, "Old", Attribute("value", -1.0, -5.0, 0.0, required=True))
    cfg.set_suffix_attribute(None, "light", "of Air", Attribute("speed", 1.0, 0.0, 5.0, required=True))
    doc = cfg.to_document()

    fresh = LootConfig()
    apply_document(fresh, parse_document(doc))
    assert fresh.to_document() == doc
    assert fresh.attributes_for("armor", "light")["value"].initial_value == 3.0
    assert set(fresh.suffixes_for("weapon", "light")) == {"of Air"}
