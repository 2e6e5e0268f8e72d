from openlibrary_search.core.expand import generate_candidate_pairs
from openlibrary_search.core.models import CandidatePair


def _pairs(s: str):
    return [(p.title, p.author) for p in generate_candidate_pairs(s)]


def test_empty_string_has_no_pairs() -> None:
    assert generate_candidate_pairs("") == []


def test_single_word() -> None:
    assert _pairs("Swift") == [("Swift", ""), ("", "Swift")]


def test_two_words() -> None:
    assert _pairs("Swift Programming") == [
        ("Swift Programming", ""),
        ("Swift", "Programming"),
        ("", "Swift Programming"),
    ]


def test_title_then_author_name() -> None:
    assert _pairs("The Da Vinci Code Dan Brown") == [
        ("The Da Vinci Code Dan Brown", ""),
        ("The Da Vinci Code Dan", "Brown"),
        ("The Da Vinci Code", "Dan Brown"),
    ]


def test_pair_count_depends_only_on_word_count() -> None:
    assert len(generate_candidate_pairs("x")) == 2
    assert len(generate_candidate_pairs("Zzz")) == 2
    assert len(generate_candidate_pairs("a b")) == 3
    assert len(generate_candidate_pairs("one two three four five six")) == 3


def test_whitespace_only_is_not_trimmed() -> None:
    assert _pairs(" ") == [(" ", ""), ("", ""), ("", " ")]


def test_double_space_keeps_empty_word() -> None:
    assert _pairs("Emma  Austen") == [
        ("Emma  Austen", ""),
        ("Emma ", "Austen"),
        ("Emma", " Austen"),
    ]


def test_deterministic() -> None:
    assert generate_candidate_pairs("Dune Frank Herbert") == generate_candidate_pairs("Dune Frank Herbert")
    assert generate_candidate_pairs("Dune")[0] == CandidatePair(title="Dune", author="")
