import pytest

from citesmith.exceptions import (
    CiteSmithError,
    CollectionNotFoundError,
    DuplicateKeyError,
    MalformedEntryError,
    MissingArgumentError,
    UnsupportedStyleError,
    exception_messages,
)


@pytest.mark.parametrize(
    ("error", "builtin"),
    [
        (CollectionNotFoundError, LookupError),
        (UnsupportedStyleError, ValueError),
        (MissingArgumentError, TypeError),
        (DuplicateKeyError, MalformedEntryError),
    ],
)
def test_errors_share_a_common_base(error: type[Exception], builtin: type[Exception]) -> None:
    assert issubclass(error, CiteSmithError)
    assert issubclass(error, builtin)


def test_exception_messages_follow_the_cause_chain() -> None:
    try:
        try:
            raise KeyError("refs")
        except KeyError as exc:
            raise CollectionNotFoundError("Unknown bibliography collection 'refs'.") from exc
    except CollectionNotFoundError as error:
        messages = exception_messages(error)

    assert messages == ["Unknown bibliography collection 'refs'.", "'refs'"]
