import locales
from locales import t


def test_only_english_strings_are_registered():
    assert list(locales._STRINGS) == ["en"]
    assert not hasattr(locales, "add_language")


def test_unknown_language_and_key_fall_back():
    assert t("login_required", lang="de", action="like posts") == "Please login to like posts"
    assert t("no_such_key") == "no_such_key"
