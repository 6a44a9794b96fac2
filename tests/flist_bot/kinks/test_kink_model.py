import pytest

from flist_bot.kinks import Profile, Tier, decode_entities


@pytest.mark.parametrize(
    "text, expected",
    [
        ("Salt &amp; Pepper", "Salt & Pepper"),
        ("&lt;b&gt;", "<b>"),
        ("&quot;hi&quot; &apos;there&apos;", "\"hi\" 'there'"),
        ("&cent; &pound; &yen; &euro;", "¢ £ ¥ €"),
        ("&copy; &reg;", "© ®"),
        ("&#39;quoted&#39; &#x41;", "'quoted' A"),
        ("plain", "plain"),
        ("", ""),
    ],
)
def test_decode_entities(text, expected):
    assert decode_entities(text) == expected


@pytest.mark.parametrize(
    "label, tier",
    [
        ("fave", Tier.FAVORITE),
        ("Favorite", Tier.FAVORITE),
        ("favourite", Tier.FAVORITE),
        ("YES", Tier.YES),
        (" maybe ", Tier.MAYBE),
        ("no", Tier.NO),
        ("undecided", None),
        (None, None),
    ],
)
def test_tier_parse(label, tier):
    assert Tier.parse(label) is tier


def test_tier_threshold_includes_more_preferred_tiers():
    assert Tier.YES.includes(Tier.FAVORITE)
    assert Tier.YES.includes(Tier.YES)
    assert not Tier.YES.includes(Tier.MAYBE)
    assert Tier.NO.includes(Tier.NO)
    assert not Tier.FAVORITE.includes(Tier.YES)
    assert Tier.FAVORITE.label == "fave"


def test_profile_from_raw_normalizes_ids_and_tolerates_empty_kinks():
    profile = Profile.from_raw("someone", {"name": "Someone", "kinks": {42: "fave", "43": "maybe"}})
    assert profile.identifier == "Someone"
    assert profile.tier_by_item_id == {"42": "fave", "43": "maybe"}
    assert profile.tier_of("42") is Tier.FAVORITE
    assert profile.tier_of("99") is None

    # the API sends an empty list rather than an empty object
    empty = Profile.from_raw("nobody", {"kinks": []})
    assert empty.identifier == "nobody"
    assert empty.tier_by_item_id == {}
