"""Tests for noweb reference expansion."""

from __future__ import annotations

import pytest

from orgtangle.errors import ReferenceCycleError, UnknownReferenceError
from orgtangle.expander import ReferenceExpander, find_references
from tests._fixtures.blocks import make_block

NOWEB = {"noweb": "yes"}


def test_reference_is_replaced_with_the_referenced_body() -> None:
    a = make_block("A", "x = 1\ny = 2")
    b = make_block("B", "before\n<<A>>\nafter", params=NOWEB)

    expanded = ReferenceExpander([a, b]).expand(b)

    assert expanded == "before\nx = 1\ny = 2\nafter"
    assert "<<A>>" not in expanded


def test_references_stay_verbatim_without_noweb() -> None:
    a = make_block("A", "x = 1")
    b = make_block("B", "<<A>>", params={"noweb": "no"})

    assert ReferenceExpander([a, b]).expand(b) == "<<A>>"


def test_prefix_text_is_repeated_on_every_inserted_line() -> None:
    a = make_block("A", "x = 1\ny = 2")
    b = make_block("B", "def f():\n    <<A>>", params=NOWEB)

    assert ReferenceExpander([a, b]).expand(b) == "def f():\n    x = 1\n    y = 2"


def test_repeated_prefix_holds_earlier_expansions_not_raw_tokens() -> None:
    a = make_block("a", "A")
    b = make_block("b", "B1\nB2")
    line = make_block("line", "<<a>> <<b>>", params=NOWEB)

    expanded = ReferenceExpander([a, b, line]).expand(line)

    assert expanded == "A B1\nA B2"
    assert find_references(expanded) == []


def test_expansion_is_recursive_and_crosses_languages() -> None:
    leaf = make_block("leaf", "echo leaf", language="sh")
    middle = make_block("middle", "# <<leaf>>", language="sh", params=NOWEB)
    top = make_block("top", "<<middle>>\nprint('done')", params=NOWEB)

    expanded = ReferenceExpander([leaf, middle, top]).expand(top)

    assert expanded == "# echo leaf\nprint('done')"


def test_self_reference_reports_a_cycle() -> None:
    block = make_block("self", "<<self>>", params=NOWEB)

    with pytest.raises(ReferenceCycleError) as excinfo:
        ReferenceExpander([block]).expand(block)

    assert excinfo.value.chain == ["self", "self"]
    assert excinfo.value.block == "self"


def test_mutual_reference_reports_a_cycle() -> None:
    a = make_block("A", "<<B>>", params=NOWEB)
    b = make_block("B", "<<A>>", params=NOWEB)

    with pytest.raises(ReferenceCycleError) as excinfo:
        ReferenceExpander([a, b]).expand(a)

    assert excinfo.value.chain == ["A", "B", "A"]
    assert "A -> B -> A" in str(excinfo.value)


def test_unknown_reference_raises() -> None:
    block = make_block("main", "<<missing>>", params=NOWEB)

    with pytest.raises(UnknownReferenceError) as excinfo:
        ReferenceExpander([block]).expand(block)

    assert excinfo.value.reference == "missing"
    assert excinfo.value.block == "main"


def test_noweb_ref_blocks_are_concatenated_in_document_order() -> None:
    first = make_block("block-1", "import os", params={"noweb-ref": "imports"})
    second = make_block("block-2", "import sys", params={"noweb-ref": "imports"})
    main = make_block("main", "<<imports>>\nmain()", params=NOWEB)

    expander = ReferenceExpander([first, second, main])

    assert "imports" in expander
    assert expander.expand(main) == "import os\nimport sys\nmain()"


def test_find_references_lists_names_in_order() -> None:
    assert find_references("<<a>> and <<b-c>>\n<< not >> <<d>>") == ["a", "b-c", "d"]
