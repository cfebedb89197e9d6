from mentionkit.core.boundary import BoundaryClassifier, QueryBounds
from mentionkit.core.config import DEFAULT_PUNCTUATION


def make_classifier(**kwargs) -> BoundaryClassifier:
    kwargs.setdefault("punctuation", DEFAULT_PUNCTUATION)
    return BoundaryClassifier(["@", "#"], **kwargs)


def test_trigger_start_at_beginning_of_text() -> None:
    assert make_classifier().is_valid_trigger_start("@jo", 0)


def test_trigger_start_after_whitespace_or_punctuation() -> None:
    classifier = make_classifier()
    assert classifier.is_valid_trigger_start("hi @jo", 3)
    assert classifier.is_valid_trigger_start("(@jo", 1)


def test_trigger_start_rejected_inside_word() -> None:
    assert not make_classifier().is_valid_trigger_start("mail@jo", 4)


def test_trigger_start_rejected_after_trigger_char() -> None:
    assert not make_classifier().is_valid_trigger_start("#@jo", 1)
    assert not make_classifier().is_valid_trigger_start("@@jo", 1)


def test_multi_char_trigger_may_follow_its_own_punctuation() -> None:
    classifier = BoundaryClassifier(["rel:", "@"], DEFAULT_PUNCTUATION)
    assert classifier.is_valid_trigger_start("x:rel:foo", 2)
    assert classifier.is_valid_trigger_start("see:@jo", 4)
    assert not classifier.is_valid_trigger_start("rel:@jo", 4)


def test_empty_query_is_none() -> None:
    assert make_classifier().extract_query("") == QueryBounds(query=None)


def test_query_with_single_spaces_allowed() -> None:
    assert make_classifier().extract_query("John Do") == QueryBounds(query="John Do")


def test_query_rejects_leading_and_double_space() -> None:
    classifier = make_classifier()
    assert classifier.extract_query(" John") is None
    assert classifier.extract_query("John  Doe") is None


def test_query_without_spaces_when_disallowed() -> None:
    classifier = make_classifier(allow_spaces=False)
    assert classifier.extract_query("John") == QueryBounds(query="John")
    assert classifier.extract_query("John Doe") is None


def test_punctuation_and_newline_terminate_query() -> None:
    classifier = make_classifier()
    assert classifier.extract_query("jo.") is None
    assert classifier.extract_query("jo\nx") is None


def test_query_containing_trigger_rejected() -> None:
    assert make_classifier().extract_query("jo@x") is None


def test_query_over_length_limit_rejected() -> None:
    classifier = make_classifier(length_limit=5)
    assert classifier.extract_query("abcde") == QueryBounds(query="abcde")
    assert classifier.extract_query("abcdef") is None


def test_enclosed_query_grows_until_closed() -> None:
    classifier = make_classifier(punctuation=DEFAULT_PUNCTUATION.replace('"', ""), enclosure=('"', '"'))

    assert classifier.extract_query('"') == QueryBounds(query="", enclosed=True)
    assert classifier.extract_query('"John  Do') == QueryBounds(query="John  Do", enclosed=True)
    assert classifier.extract_query('"John Doe"') == QueryBounds(
        query="John Doe", enclosed=True, closed=True
    )
    assert classifier.extract_query('"John Doe" and') is None


def test_enclosure_ignored_without_spaces() -> None:
    classifier = make_classifier(allow_spaces=False, enclosure=("[", "]"))
    assert classifier.enclosure is None
    assert classifier.extract_query("[John") is None


def test_unenclosed_query_rejects_closing_character() -> None:
    classifier = make_classifier(punctuation=DEFAULT_PUNCTUATION.replace('"', ""), enclosure=('"', '"'))
    assert classifier.extract_query('Bob"') is None
    assert classifier.extract_query("Bob") == QueryBounds(query="Bob")
