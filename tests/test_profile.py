import pytest

from sshdeck.profile import Profile, ProfileDraft, ProfileField


def test_empty_name_is_rejected():
    with pytest.raises(ValueError):
        Profile(name="")
    with pytest.raises(ValueError):
        Profile(name="   ")


def test_field_order_and_wrapping():
    fields = list(ProfileField)

    assert fields[0] is ProfileField.NAME
    assert fields[-1] is ProfileField.PASSWORD
    assert ProfileField.PASSWORD.next() is ProfileField.NAME
    assert ProfileField.NAME.previous() is ProfileField.PASSWORD
    assert ProfileField.HOSTNAME.next() is ProfileField.USER


def test_profile_access_by_field():
    profile = Profile(name="web", port="22")

    assert profile.get(ProfileField.PORT) == "22"
    assert profile.with_value(ProfileField.USER, "root").user == "root"
    assert profile.user is None


def test_label_includes_hostname():
    assert Profile(name="web").label == "web"
    assert Profile(name="web", hostname="10.0.0.1").label == "web (10.0.0.1)"


def test_draft_edits_do_not_touch_source_profile():
    profile = Profile(name="web", user="deploy")
    draft = ProfileDraft.from_profile(profile)

    draft.append_char(ProfileField.USER, "s")
    draft.append_char(ProfileField.PORT, "2")
    draft.pop_char(ProfileField.HOSTNAME)

    assert profile == Profile(name="web", user="deploy")
    assert draft.get(ProfileField.USER) == "deploys"
    assert draft.get(ProfileField.HOSTNAME) == ""
    result = draft.to_profile()
    assert result.port == "2"
    assert result.hostname is None


def test_draft_with_empty_name_cannot_become_profile():
    draft = ProfileDraft.from_profile(Profile(name="a"))
    draft.pop_char(ProfileField.NAME)

    with pytest.raises(ValueError):
        draft.to_profile()
