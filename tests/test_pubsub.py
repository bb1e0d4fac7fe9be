import pytest

from miniredis.pubsub import (
    PubsubMessage,
    PubsubPmessage,
    Subscriber,
    active_channels,
    count_psubs,
    count_subs,
)


def test_subscribe_counts():
    sub = Subscriber()
    assert sub.subscribe("news") == 1
    assert sub.subscribe("sport") == 2
    assert sub.subscribe("news") == 2
    assert sub.psubscribe("n*") == 3
    assert sub.count() == 3
    assert sub.unsubscribe("news") == 2
    assert sub.unsubscribe("nosuch") == 2
    assert sub.punsubscribe("n*") == 1
    assert sub.count() == 1


def test_channels_and_patterns_sorted():
    sub = Subscriber()
    for name in ["sport", "news", "gossip"]:
        sub.subscribe(name)
    for pat in ["z*", "a?"]:
        sub.psubscribe(pat)
    assert sub.channels() == ["gossip", "news", "sport"]
    assert sub.patterns() == ["a?", "z*"]


def test_publish_to_channel():
    sub = Subscriber()
    sub.subscribe("news")
    assert sub.publish("news", "revolution!") == 1
    assert sub.publish("gossip", "man bites dog") == 0
    sub.close()
    assert list(sub.messages()) == [PubsubMessage("news", "revolution!")]
    assert list(sub.pmessages()) == []


def test_publish_to_pattern():
    sub = Subscriber()
    sub.psubscribe("news*")
    assert sub.publish("news", "fire!") == 1
    sub.close()
    assert list(sub.pmessages()) == [PubsubPmessage("news*", "news", "fire!")]


def test_publish_channel_and_pattern():
    sub = Subscriber()
    sub.subscribe("foo")
    sub.psubscribe("f?o")
    sub.psubscribe("f*")
    assert sub.publish("foo", "hi") == 2
    sub.close()
    assert len(list(sub.pmessages())) == 1
    assert list(sub.messages()) == [PubsubMessage("foo", "hi")]


def test_invalid_pattern_never_matches():
    sub = Subscriber()
    assert sub.psubscribe("[") == 1
    assert sub.publish("[", "hi") == 0


def test_publish_after_close_raises():
    sub = Subscriber()
    sub.subscribe("news")
    sub.close()
    with pytest.raises(RuntimeError):
        sub.publish("news", "late")


def test_close_twice_is_harmless():
    sub = Subscriber()
    sub.close()
    sub.close()
    assert list(sub.messages()) == []
    assert list(sub.messages()) == []


def test_active_channels():
    one, two = Subscriber(), Subscriber()
    one.subscribe("news")
    one.subscribe("sport")
    two.subscribe("news")
    two.subscribe("foo")
    assert active_channels([one, two], "") == ["foo", "news", "sport"]
    assert active_channels([one, two], "n*") == ["news"]
    assert active_channels([one, two], "f?o") == ["foo"]
    assert active_channels([], "") == []


def test_active_channels_invalid_pattern_does_not_filter():
    sub = Subscriber()
    sub.subscribe("news")
    assert active_channels([sub], "[") == ["news"]


def test_count_subs_and_psubs():
    one, two = Subscriber(), Subscriber()
    one.subscribe("news")
    one.subscribe("news")
    two.subscribe("news")
    two.subscribe("sport")
    one.psubscribe("a*")
    two.psubscribe("b*")
    two.psubscribe("c*")
    assert count_subs([one, two], "news") == 2
    assert count_subs([one, two], "sport") == 1
    assert count_subs([one, two], "nosuch") == 0
    assert count_psubs([one, two]) == 3
    assert count_psubs([]) == 0