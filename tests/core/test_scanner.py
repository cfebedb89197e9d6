from mentionkit.core.config import MentionsConfig
from mentionkit.core.scanner import TriggerScanner
from mentionkit.domain.types import TriggerMatch


def make_scanner(triggers=("@", "#"), **options) -> TriggerScanner:
    config = MentionsConfig(triggers=list(triggers), **options)
    return TriggerScanner.from_config(config, list(triggers))


def test_scan_finds_trigger_and_query() -> None:
    match = make_scanner().scan("ping @jo")

    assert match == TriggerMatch(trigger="@", query="jo", span=3)


def test_scan_bare_trigger_has_none_query() -> None:
    match = make_scanner().scan("ping @")

    assert match is not None
    assert match.query is None
    assert match.span == 1


def test_scan_without_trigger_returns_none() -> None:
    scanner = make_scanner()
    assert scanner.scan("") is None
    assert scanner.scan("plain text") is None
    assert scanner.scan("me@example") is None


def test_scan_stops_at_newline() -> None:
    assert make_scanner().scan("@jo\nnext") is None


def test_scan_prefers_longest_trigger() -> None:
    scanner = make_scanner(triggers=("@", "@@"))
    match = scanner.scan("hi @@team")

    assert match is not None
    assert match.trigger == "@@"
    assert match.query == "team"


def test_scan_picks_nearest_trigger_before_caret() -> None:
    match = make_scanner().scan("@alice and #bu")

    assert match is not None
    assert match.key == ("#", "bu")


def test_scan_with_spaces_in_query() -> None:
    match = make_scanner().scan("hello @John Do")

    assert match is not None
    assert match.query == "John Do"


def test_scan_enclosed_query() -> None:
    scanner = make_scanner(mention_enclosure='"')

    match = scanner.scan('see @"John Doe"')

    assert match is not None
    assert match.query == "John Doe"
    assert match.enclosed and match.closed
    assert match.span == len('@"John Doe"')


def test_scan_keeps_open_enclosure_over_inner_trigger() -> None:
    scanner = make_scanner(mention_enclosure='"')

    match = scanner.scan('@"Ann @Bob')

    assert match == TriggerMatch(trigger="@", query="Ann @Bob", span=len('@"Ann @Bob'), enclosed=True)

    match = scanner.scan('@"Ann @Bob"')

    assert match is not None
    assert match.query == "Ann @Bob"
    assert match.closed
    assert match.span == len('@"Ann @Bob"')


def test_scan_after_closed_enclosure_finds_next_trigger() -> None:
    match = make_scanner(mention_enclosure='"').scan('@"Ann" @Bob')

    assert match == TriggerMatch(trigger="@", query="Bob", span=4)


def test_scan_is_idempotent() -> None:
    scanner = make_scanner()
    first, changed = scanner.update("ping @jo")
    second, changed_again = scanner.update("ping @jo")

    assert changed is True
    assert changed_again is False
    assert first == second


def test_update_reports_trigger_loss() -> None:
    scanner = make_scanner()
    scanner.update("@jo")

    match, changed = scanner.update("@jo.")

    assert match is None
    assert changed is True
    assert scanner.last is None


def test_reset_forces_change() -> None:
    scanner = make_scanner()
    scanner.update("@jo")
    scanner.reset()

    _, changed = scanner.update("@jo")

    assert changed is True
