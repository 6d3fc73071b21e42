from __future__ import annotations

from phpactor_complete.rpc.types import Suggestion
from phpactor_complete.services.candidates import Candidate, build_candidates


def test_build_maps_fields_in_order():
    suggestions = [
        Suggestion(name="getName", short_description="pub getName(): string", kind="method"),
        Suggestion(name="$name", short_description="string", kind="property"),
    ]

    result = build_candidates(suggestions)

    assert result == [
        Candidate(display_text="getName", annotation="pub getName(): string", kind="method"),
        Candidate(display_text="$name", annotation="string", kind="property"),
    ]


def test_class_import_is_kept_only_for_classes():
    suggestions = [
        Suggestion(name="Request", short_description="", kind="class", class_import="App\\Http\\Request"),
        Suggestion(name="request", short_description="", kind="function", class_import="App\\Http\\Request"),
    ]

    klass, func = build_candidates(suggestions)

    assert klass.class_import == "App\\Http\\Request"
    assert func.class_import is None


def test_class_without_import_has_no_target():
    (klass,) = build_candidates([Suggestion(name="Local", short_description="", kind="class")])

    assert klass.class_import is None


def test_empty_fields_map_to_empty_strings():
    (candidate,) = build_candidates([Suggestion(name="", short_description="", kind="")])

    assert candidate == Candidate(display_text="", annotation="", kind="")


def test_callable_kinds():
    method, function, prop = build_candidates(
        [
            Suggestion(name="a", short_description="", kind="method"),
            Suggestion(name="b", short_description="", kind="function"),
            Suggestion(name="c", short_description="", kind="property"),
        ]
    )

    assert method.is_callable
    assert function.is_callable
    assert not prop.is_callable


def test_empty_input():
    assert build_candidates([]) == []
